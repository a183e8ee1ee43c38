'''
Unit tests for loading and caching the intermediate tables.
'''

from types import SimpleNamespace

import pandas as pd
import pytest

import data_management

#region: test_load_glossary
def test_load_glossary(tmp_path):
    chemids_file = tmp_path / 'DSSTox_Identifiers.csv'
    chemids_file.write_text(
        'dtxsid,casrn,preferredName\n'
        'DTXSID7020637, 50-00-0,Formaldehyde\n'
        'DTXSID4021806,120-80-9,Catechol?\n'
        )
    chemids_settings = {
        'file_key': 'chemids_file',
        'rename': {
            'casrn': 'CASRN',
            'dtxsid': 'DTXSID',
            'preferredName': 'preferred_name'
        },
        'name_fixes': {'120-80-9': '1,2-Benzenediol'},
        'additions': [['NOCAS_01', 'DTXSID00000001', 'Manual addition']]
    }

    glossary = data_management.load_glossary(
        chemids_settings, {'chemids_file': str(chemids_file)}
        )

    assert list(glossary.columns) == ['CASRN', 'DTXSID', 'preferred_name']
    assert list(glossary['CASRN']) == ['50-00-0', '120-80-9', 'NOCAS_01']
    assert glossary.loc[1, 'preferred_name'] == '1,2-Benzenediol'
#endregion

#region: test_read_table_keeps_placeholders
def test_read_table_keeps_placeholders(tmp_path):
    pd.DataFrame({
        'CASRN': ['50-00-0', '80-05-7'],
        'Genotoxicity': ['-', 'negative'],
        'ref': ['NA', None]
    }).to_csv(tmp_path / 'table.csv', index=False)

    table = data_management.read_table(str(tmp_path), 'table.csv')

    assert list(table['Genotoxicity']) == ['-', 'negative']
    assert table.loc[0, 'ref'] == 'NA'
    assert pd.isna(table.loc[1, 'ref'])
#endregion

#region: config fixture
@pytest.fixture
def config(tmp_path):
    output_dir = tmp_path / 'outputs'
    output_dir.mkdir()
    return SimpleNamespace(
        path={'output_dir': str(output_dir), 'log_dir': str(tmp_path / 'logs')},
        mc={'output_file': 'MCList_refs.csv'},
        exposure={
            'p65_group_listed_patterns': ['Ionizing'],
            'output_files': {
                'effects_sources': 'BCRelList_sources.csv',
                'edc_gentox': 'EDC_gentox.csv',
                'bcrel_fda_drugs': 'BCrel_FDAdrugs.csv',
                'mc_not_p65': 'MC_notP65.csv'
            }
        }
    )
#endregion

#region: test_existing_table_is_reused
def test_existing_table_is_reused(config):
    mcs = pd.DataFrame({
        'CASRN': ['50-00-0'],
        'DTXSID': ['DTXSID7020637'],
        'chem_name': ['Formaldehyde'],
        'MC': ['MC'],
        'MC_references': ['IARC']
    })
    mcs.to_csv(
        f"{config.path['output_dir']}/MCList_refs.csv", index=False
        )

    # No raw data or glossary is needed when the table exists
    loaded = data_management.get_mc_list(config, glossary=None)

    pd.testing.assert_frame_equal(loaded, mcs)
#endregion

#region: test_load_or_build_overwrite
def test_load_or_build_overwrite(tmp_path):
    pd.DataFrame({'CASRN': ['old']}).to_csv(tmp_path / 'x.csv', index=False)
    built = pd.DataFrame({'CASRN': ['new']})

    reused = data_management._load_or_build(
        str(tmp_path), 'x.csv', lambda: built
        )
    rebuilt = data_management._load_or_build(
        str(tmp_path), 'x.csv', lambda: built, overwrite=True
        )

    assert list(reused['CASRN']) == ['old']
    assert rebuilt is built
#endregion

#region: test_get_highlights_from_existing_table
def test_get_highlights_from_existing_table(config):
    pd.DataFrame({
        'CASRN': ['80-05-7', '79-06-1'],
        'DTXSID': ['DTXSID7020182', 'DTXSID5020027'],
        'preferred_name': ['Bisphenol A', 'Acrylamide'],
        'MC': ['-', 'MC'],
        'HormoneSummary': ['E2', '-'],
        'ERactivity': ['weak_agonist', '-'],
        'EDC': ['EDC+', '-'],
        'Genotoxicity': ['positive', 'positive'],
        'Pharma': ['FDA_OTC', '-'],
        'Prop65': ['Dev_F', '-']
    }).to_csv(
        f"{config.path['output_dir']}/BCRelList_sources.csv", index=False
        )

    table_for = data_management.get_highlights(config, glossary=None)

    assert list(table_for['edc_gentox']['CASRN']) == ['80-05-7']
    assert list(table_for['bcrel_fda_drugs']['CASRN']) == ['80-05-7']
    assert list(table_for['mc_not_p65']['CASRN']) == ['79-06-1']
#endregion
