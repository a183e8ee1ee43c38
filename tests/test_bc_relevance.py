'''
Unit tests for the effects table and the breast cancer-relevant list.
'''

import numpy as np
import pandas as pd
import pytest

from raw_processing import chemids
import bc_relevance

EFFECTS_SETTINGS = {
    'radiation_pattern': 'radiation',
    'mc_order': ['MC', 'MC_equivocal', 'Bioassay', '-'],
    'bc_relevance': {
        'mc_values': ['MC'],
        'hormone_pattern': 'E2|P4',
        'er_activities': ['agonist', 'weak_agonist', 'mixed_weak']
    },
    'mammary_tumor_evidence': {
        'MC': 'MC',
        'MC_equivocal': 'MC_equivocal',
        'Bioassay': 'Bioassay_noMC'
    }
}

#region: effects fixture
@pytest.fixture
def effects():
    mcs = pd.DataFrame({
        'CASRN': ['50-00-0', '75-07-0', 'NOCAS_01'],
        'DTXSID': ['DTXSID7020637', 'DTXSID5039224', np.nan],
        'chem_name': ['Formaldehyde', 'Acetaldehyde', 'X-radiation'],
        'MC': ['MC', 'MC_equivocal', 'MC'],
        'MC_references': ['IARC', 'NTP_equivocal', 'IARC']
    })
    hormones = pd.DataFrame({
        'CASRN': ['80-05-7'],
        'H295R_chem': ['BPA'],
        'E2_onedose_up': ['positive'],
        'P4_onedose_up': ['negative'],
        'E2_CR_up': ['high'],
        'P4_CR_up': ['ns effect'],
        'HormoneSummary': ['E2']
    })
    er = pd.DataFrame({
        'CASRN': ['80-05-7', '57-63-6', '64-17-5'],
        'Name': ['Bisphenol A', 'Ethinylestradiol', 'Ethanol'],
        'ERactivity': ['weak_agonist', 'agonist', 'inactive'],
        'ER_agonist_strength': ['low_agonist', 'high_agonist', np.nan]
    })
    gentox = pd.DataFrame({
        'CASRN': ['50-00-0', '80-05-7', '999-00-0'],
        'DTXSID': ['DTXSID7020637', 'DTXSID7020182', np.nan],
        'preferred_name': ['Formaldehyde', 'Bisphenol A', 'Unrelated'],
        'Genotoxicity': ['positive', 'negative', 'positive']
    })
    bioassays = pd.DataFrame({
        'CASRN': ['75-07-0', '64-17-5'],
        'ref': ['NTP', 'ToxValDB'],
        'Bioassay': ['Bioassay', 'Bioassay']
    })
    glossary = chemids.glossary_from_table([
        ('50-00-0', 'DTXSID7020637', 'Formaldehyde'),
        ('75-07-0', 'DTXSID5039224', 'Acetaldehyde'),
        ('80-05-7', 'DTXSID7020182', 'Bisphenol A'),
        ('57-63-6', 'DTXSID5020576', '17alpha-Ethinylestradiol'),
        ('64-17-5', 'DTXSID9020584', 'Ethanol')
    ])
    return bc_relevance.effects_table(
        mcs, hormones, er, gentox, bioassays, glossary, EFFECTS_SETTINGS
        )
#endregion

#region: test_effects_table_rows_and_order
def test_effects_table_rows_and_order(effects):
    assert list(effects['CASRN']) == [
        '50-00-0', 'NOCAS_01', '75-07-0', '64-17-5', '57-63-6', '80-05-7'
    ]
    assert list(effects['MC']) == [
        'MC', 'MC', 'MC_equivocal', 'Bioassay', '-', '-'
    ]
#endregion

#region: test_effects_table_values
def test_effects_table_values(effects):
    effects = effects.set_index('CASRN')

    assert effects.loc['64-17-5', 'MC_references'] == 'ToxValDB'
    assert effects.loc['75-07-0', 'MC_references'] == 'NTP_equivocal'
    assert effects.loc['NOCAS_01', 'Genotoxicity'] == 'positive'
    assert effects.loc['50-00-0', 'Genotoxicity'] == 'positive'
    assert effects.loc['57-63-6', 'Genotoxicity'] == '-'
    assert effects.loc['57-63-6', 'preferred_name'] == '17alpha-Ethinylestradiol'
    assert effects.loc['NOCAS_01', 'DTXSID'] == '-'

    assert effects.loc['80-05-7', 'EDC'] == 'EDC+'
    assert effects.loc['57-63-6', 'EDC'] == 'EDC+'
    assert effects.loc['64-17-5', 'EDC'] == 'EDC-'
    assert effects.loc['50-00-0', 'EDC'] == '-'

    assert effects.loc['80-05-7', 'topEDCscore'] == 'high'
    assert effects.loc['57-63-6', 'topEDCscore'] == 'high'
    assert effects.loc['64-17-5', 'topEDCscore'] == 'none'
    assert effects.loc['50-00-0', 'topEDCscore'] == '-'
#endregion

#region: test_bc_relevant_list
def test_bc_relevant_list(effects, tmp_path):
    settings = dict(EFFECTS_SETTINGS, bcrel_file='BCRelList.csv')

    bcrel = bc_relevance.bc_relevant_list(
        effects, settings, write_dir=str(tmp_path)
        )

    assert list(bcrel['CASRN']) == ['50-00-0', 'NOCAS_01', '57-63-6', '80-05-7']
    assert list(bcrel.columns) == bc_relevance.BCREL_COLS
    assert (tmp_path / 'BCRelList.csv').exists()
#endregion

#region: test_mc_and_bioassay_effects
def test_mc_and_bioassay_effects(effects):
    mc_effects = bc_relevance.mc_and_bioassay_effects(effects, EFFECTS_SETTINGS)

    evidence = mc_effects.set_index('CASRN')['MammaryTumorEvidence']
    assert evidence.to_dict() == {
        '50-00-0': 'MC',
        'NOCAS_01': 'MC',
        '75-07-0': 'MC_equivocal',
        '64-17-5': 'Bioassay_noMC'
    }
    assert 'MammaryTumorRefs' in mc_effects
    assert 'MC' not in mc_effects
#endregion

#region: test_hormone_synthesis_summary
def test_hormone_synthesis_summary():
    onedose = pd.DataFrame({
        'CASRN': ['1-1-1', '2-2-2', '4-4-4'],
        'E2P4_onedose_chem': ['One', 'Two', 'Four'],
        'E2_onedose_up': ['positive', 'positive', '_NA'],
        'P4_onedose_up': ['positive', 'negative', 'positive']
    })
    conc_response = pd.DataFrame({
        'CASRN': ['1-1-1', '3-3-3', '4-4-4'],
        'E2P4_CR_chem': ['One', 'Three', 'Four'],
        'E2_CR_up': ['high', 'ns effect', np.nan],
        'P4_CR_up': ['low', 'borderline', 'high']
    })

    hormones = bc_relevance.hormone_synthesis_summary(
        onedose, conc_response
        ).set_index('CASRN')

    assert hormones['HormoneSummary'].to_dict() == {
        '1-1-1': 'E2, P4',
        '2-2-2': '*E2',
        '3-3-3': '*P4',
        '4-4-4': '_NA'
    }
    assert hormones.loc['3-3-3', 'H295R_chem'] == 'Three'
#endregion

#region: test_edc_classification
@pytest.mark.parametrize('hormone_summary, er_activity, expected', [
    ('E2, P4', '-', 'EDC+'),
    ('negative', 'inactive', 'EDC-'),
    ('-', '-', '-'),
    ('_NA', '-', '-'),
    ('*E2', 'weak_agonist', 'EDC~'),
    ('negative', 'agonist', 'EDC+'),
    ('-', 'antagonist', 'EDC-'),
])
def test_edc_classification(hormone_summary, er_activity, expected):
    edc = bc_relevance.edc_classification(
        pd.Series([hormone_summary]),
        pd.Series([er_activity])
        )
    assert edc.iloc[0] == expected
#endregion

#region: test_top_edc_score
def test_top_edc_score():
    effects = pd.DataFrame({
        'E2_CR_up': ['high', '-', '-', 'borderline', 'ns effect', '-'],
        'P4_CR_up': ['-', 'medium', '-', '-', '-', '-'],
        'ER_agonist_strength': ['-', '-', 'low_agonist', '-', '-', '-'],
        'EDC': ['EDC+', 'EDC+', 'EDC~', 'EDC~', 'EDC-', '-'],
        'ERactivity': ['-', '-', 'weak_agonist', '-', '-', '-']
    })

    scores = bc_relevance.top_edc_score(effects)

    assert list(scores) == ['high', 'medium', 'low', 'borderline', 'none', '-']
#endregion

#region: test_combine_bioassays
def test_combine_bioassays():
    tables = [
        pd.DataFrame({'CASRN': ['50-00-0', '71-43-2'], 'ICE': ['NTP', 'NTP']}),
        pd.DataFrame({'CASRN': ['71-43-2'], 'ToxVal': ['ToxValDB']})
    ]

    bioassays = bc_relevance.combine_bioassays(
        tables, ['ICE', 'ToxVal']
        ).set_index('CASRN')

    assert bioassays.loc['71-43-2', 'ref'] == 'NTP, ToxValDB'
    assert bioassays.loc['50-00-0', 'ref'] == 'NTP'
    assert (bioassays['Bioassay'] == 'Bioassay').all()
#endregion

#region: test_sort_by_mc
def test_sort_by_mc():
    data = pd.DataFrame({
        'CASRN': ['3', '1', '2', '4'],
        'MC': ['-', 'MC_equivocal', 'MC', 'unknown']
    })

    ranked = bc_relevance.sort_by_mc(data, ['MC', 'MC_equivocal', '-'])

    assert list(ranked['CASRN']) == ['2', '1', '3', '4']
#endregion
