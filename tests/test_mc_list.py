'''
Unit tests for compiling the mammary carcinogen list.
'''

import pandas as pd

from raw_processing import chemids
import mc_list

#region: mc_settings
MC_SETTINGS = {
    'sources': {
        'iarc': {'name_col': 'Chemname', 'result_col': 'IARC_result'},
        'ntp': {'name_col': 'chemname', 'result_col': 'NTP_result'}
    },
    'positive_references': ['IARC', 'NTP'],
    'manual_names': {'999-99-9': 'Manually named chemical'}
}

GLOSSARY = chemids.glossary_from_table([
    ('50-00-0', 'DTXSID7020637', 'Formaldehyde'),
    ('75-07-0', 'DTXSID5039224', 'Acetaldehyde')
])
#endregion

#region: test_combine_mc_sources
def test_combine_mc_sources():
    source_data_for = {
        'iarc': pd.DataFrame({
            'CASRN': ['50-00-0', '999-99-9'],
            'Chemname': ['formaldehyde', 'raw name'],
            'IARC_result': ['IARC', 'IARC']
        }),
        'ntp': pd.DataFrame({
            'CASRN': ['50-00-0', '75-07-0'],
            'chemname': ['Formalin', 'Acetaldehyde'],
            'NTP_result': ['NTP', 'NTP_equivocal']
        })
    }

    mcs = mc_list.combine_mc_sources(
        source_data_for, MC_SETTINGS, GLOSSARY
        ).set_index('CASRN')

    assert list(mcs.index) == ['50-00-0', '75-07-0', '999-99-9']
    assert mcs.loc['50-00-0', 'MC_references'] == 'IARC, NTP'
    assert mcs.loc['50-00-0', 'MC'] == 'MC'
    assert mcs.loc['50-00-0', 'chem_name'] == 'Formaldehyde'
    assert mcs.loc['50-00-0', 'DTXSID'] == 'DTXSID7020637'
    assert mcs.loc['75-07-0', 'MC'] == 'MC_equivocal'
    assert mcs.loc['999-99-9', 'chem_name'] == 'Manually named chemical'
    assert pd.isna(mcs.loc['999-99-9', 'DTXSID'])
#endregion

#region: test_combine_mc_sources_columns
def test_combine_mc_sources_columns():
    source_data_for = {
        'iarc': pd.DataFrame({
            'CASRN': ['50-00-0'], 'Chemname': ['x'], 'IARC_result': ['IARC']
        }),
        'ntp': pd.DataFrame({
            'CASRN': ['75-07-0'], 'chemname': ['y'], 'NTP_result': ['NTP']
        })
    }

    mcs = mc_list.combine_mc_sources(source_data_for, MC_SETTINGS, GLOSSARY)

    assert list(mcs.columns) == mc_list.OUTPUT_COLS
#endregion

#region: test_classify_mc
def test_classify_mc():
    references = pd.Series([
        'IARC, NTP_equivocal', 'NTP_equivocal', 'CCRIS, LCDB', 'NTP'
    ])

    labels = mc_list.classify_mc(references, ['IARC', 'NTP', 'CCRIS'])

    assert list(labels) == ['MC', 'MC_equivocal', 'MC', 'MC']
#endregion

#region: test_mc_counts_by_reference
def test_mc_counts_by_reference():
    mcs = pd.DataFrame({
        'MC_references': ['IARC, NTP', 'NTP', 'NTP, LCDB']
    })

    counts = mc_list.mc_counts_by_reference(mcs)

    assert counts['NTP'] == 3
    assert counts['IARC'] == 1
    assert counts['LCDB'] == 1
    assert counts.index[0] == 'NTP'
#endregion
