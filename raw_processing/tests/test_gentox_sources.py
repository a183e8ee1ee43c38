'''
Unit tests for the cleaners of genotoxicity sources.
'''

import numpy as np
import pandas as pd
import pytest

from raw_processing import chemids
from raw_processing import gentox_sources

#region: test_ccris_gentox_cleaner
def test_ccris_gentox_cleaner():
    source_settings = {
        'test_col': 'test',
        'raw_result_col': 'raw_result',
        'recognized_results': ['positive', 'negative', 'inconclusive', 'equivocal'],
        'name_col': 'chemname',
        'result_col': 'cgentox',
        'cleaning_steps': [
            'remove_missing_tests',
            'normalize_results',
            'summarize_results'
        ]
    }
    cleaner = gentox_sources.CcrisGentoxCleaner(source_settings, {})
    raw_data = pd.DataFrame({
        'CASRN': ['50-00-0', '50-00-0', '71-43-2', '71-43-2', '62-75-9'],
        'chemname': ['FORMALDEHYDE'] * 2 + ['BENZENE'] * 2 + ['NDMA'],
        'test': ['Ames', 'MN', 'Ames', 'CA', np.nan],
        'raw_result': [
            'Positive (with S9)', 'negative', 'Negative', 'Equivocal', 'Positive'
        ]
    })

    cleaned = cleaner.clean_raw_data(raw_data).set_index('CASRN')

    assert list(cleaned.index) == ['50-00-0', '71-43-2']
    assert cleaned.loc['50-00-0', 'cgentox'] == 'positive'
    assert cleaned.loc['71-43-2', 'cgentox'] == 'negative,equivocal'
    assert cleaned.loc['71-43-2', 'chemname'] == 'BENZENE'
#endregion

#region: test_ecvam_positive_classify_results
def test_ecvam_positive_classify_results():
    cleaner = gentox_sources.EcvamPositiveCleaner(
        {
            'positive_count_cols': ['invitropos', 'invivopos'],
            'negative_count_cols': ['invitroneg', 'invivoneg'],
            'result_col': 'ECVAMpos'
        },
        {}
    )
    data = pd.DataFrame({
        'invitropos': [1, 0, 0],
        'invivopos': [0, 0, 0],
        'invitroneg': [3, 2, 0],
        'invivoneg': [0, np.nan, np.nan]
    })

    classified = cleaner.classify_results(data)

    assert list(classified['ECVAMpos']) == ['pos', 'neg', 'neither']
#endregion

#region: test_ecvam_negative_classify_results
def test_ecvam_negative_classify_results():
    cleaner = gentox_sources.EcvamNegativeCleaner(
        {'overall_cols': ['AMES Overall', 'TGR Overall'], 'result_col': 'ECVAMneg'},
        {}
    )
    data = pd.DataFrame({
        'AMES Overall': ['-', '-', np.nan],
        'TGR Overall': ['+', np.nan, 'E']
    })

    classified = cleaner.classify_results(data)

    assert list(classified['ECVAMneg']) == ['pos', 'neg', 'check']
#endregion

#region: test_ntp_gentox_classify_results
def test_ntp_gentox_classify_results():
    cleaner = gentox_sources.NtpGentoxCleaner(
        {
            'ames_col': 'Bacterial Mutagenicity Conclusion',
            'first_in_vivo_col': 'Male Rat Micronucleus Conclusion',
            'last_in_vivo_col': 'Female Mouse Comet Assay Conclusion',
            'result_col': 'ntpgentox'
        },
        {}
    )
    data = pd.DataFrame({
        'CASRN': ['50-00-0', '71-43-2', '62-75-9'],
        'Bacterial Mutagenicity Conclusion': ['Negative', 'Negative', np.nan],
        'Other Conclusion': ['Positive', np.nan, np.nan],
        'Male Rat Micronucleus Conclusion': [np.nan, 'Negative', np.nan],
        'Female Mouse Comet Assay Conclusion': ['Positive', np.nan, 'Equivocal']
    })

    classified = cleaner.classify_results(data)

    assert list(classified['ntpgentox']) == ['positive', 'negative', '-']
#endregion

#region: test_echemportal_cleaner
def test_echemportal_cleaner():
    source_settings = {
        'number_type_col': 'Number Type',
        'raw_result_col': 'raw_result',
        'result_col': 'echemgentox',
        'result_priority': ['positive', 'negative'],
        'cleaning_steps': [
            'remove_non_cas_numbers',
            'classify_results',
            'remove_uninformative_results',
            'collapse_results'
        ]
    }
    cleaner = gentox_sources.EchemportalCleaner(source_settings, {})
    raw_data = pd.DataFrame({
        'CASRN': ['50-00-0', '50-00-0', '71-43-2', '62-75-9', 'iupac name'],
        'Number Type': ['CAS Number'] * 4 + ['IUPAC Name'],
        'raw_result': [
            'negative', 'significant increase', 'ambiguous', 'negative', 'positive'
        ]
    })

    cleaned = cleaner.clean_raw_data(raw_data)

    assert list(cleaned['CASRN']) == ['50-00-0', '62-75-9']
    assert list(cleaned['echemgentox']) == ['positive', 'negative']
    assert cleaner.change_log['remove_non_cas_numbers'] == -1
    assert cleaner.change_log['remove_uninformative_results'] == -1
#endregion

#region: test_parse_tagged_records
def test_parse_tagged_records():
    records = pd.DataFrame({
        'key': [
            'NLM_TOXNET_GENETOX_1', 'asta', 'resa', 'resa', 'asta', 'resa',
            'END', 'NLM_TOXNET_GENETOX_2', 'asta', 'END'
        ],
        'value': [
            np.nan, 'Ames', 'Positive', 'Negative', 'Sperm morphology',
            'Negative', np.nan, np.nan, 'Micronucleus', np.nan
        ]
    })

    parsed = gentox_sources.parse_tagged_records(records, 'NLM_TOXNET_GENETOX')

    # Only the last assay and result of each record are kept
    assert list(parsed['SOURCE_NAME_SID']) == [
        'NLM_TOXNET_GENETOX_1', 'NLM_TOXNET_GENETOX_2'
    ]
    assert list(parsed['assay']) == ['Sperm morphology', 'Micronucleus']
    assert parsed.loc[0, 'result'] == 'Negative'
    assert pd.isna(parsed.loc[1, 'result'])
#endregion

#region: test_parse_tagged_records_without_lines
def test_parse_tagged_records_without_lines():
    records = pd.DataFrame({
        'key': ['NLM_TOXNET_GENETOX_1', 'END', 'NLM_TOXNET_GENETOX_2', 'resa'],
        'value': [np.nan, np.nan, np.nan, 'Positive']
    })

    parsed = gentox_sources.parse_tagged_records(records, 'NLM_TOXNET_GENETOX')

    assert len(parsed) == 2
    assert parsed.loc[0, ['assay', 'result']].isna().all()
    assert pd.isna(parsed.loc[1, 'assay'])
    assert parsed.loc[1, 'result'] == 'Positive'
#endregion

#region: test_genetox_cleaner
def test_genetox_cleaner(tmp_path):
    results_file = tmp_path / 'NLM_TOXNET_GENTOX_results.txt'
    results_file.write_text(
        'NLM_TOXNET_GENETOX_1\t\n'
        'asta\tSalmonella\n'
        'resa\tPositive\n'
        'asta\tSperm morphology\n'
        'resa\tNegative\n'
        'END\t\n'
        'NLM_TOXNET_GENETOX_2\t\n'
        'asta\tSalmonella\n'
        'resa\tNegative\n'
        'END\t\n'
        'NLM_TOXNET_GENETOX_3\t\n'
        'asta\tSalmonella\n'
        'resa\tPositive\n'
        'END\t\n'
        'NLM_TOXNET_GENETOX_4\t\n'
        'asta\tSalmonella\n'
        'resa\tPositive\n'
        'asta\tMicronucleus\n'
        'resa\tNegative\n'
        'END\t\n'
        )
    ids_file = tmp_path / 'NLM_TOXNET_GENETOX_Substance.csv'
    ids_file.write_text(
        'SOURCE_NAME_SID,CASRN\n'
        'NLM_TOXNET_GENETOX_1,50-00-0\n'
        'NLM_TOXNET_GENETOX_2,71-43-2\n'
        'NLM_TOXNET_GENETOX_3,NOCAS\n'
        'NLM_TOXNET_GENETOX_4,80-05-7\n'
        )
    source_settings = {
        'name': 'GENE-TOX',
        'results_file_key': 'genetox_results_file',
        'ids_file_key': 'genetox_ids_file',
        'record_prefix': 'NLM_TOXNET_GENETOX',
        'id_col': 'SOURCE_NAME_SID',
        'missing_casrn_values': ['NOCAS'],
        'excluded_assays': ['Sperm morphology'],
        'considered_results': ['Positive', 'Negative'],
        'name_col': 'preferred_name',
        'result_col': 'tngentox',
        'cleaning_steps': [
            'strip_casrns',
            'remove_missing_casrns',
            'remove_excluded_assays',
            'attach_identifiers',
            'summarize_results'
        ]
    }
    path_settings = {
        'genetox_results_file': str(results_file),
        'genetox_ids_file': str(ids_file)
    }
    glossary = chemids.glossary_from_table([
        ('71-43-2', 'DTXSID3039242', 'Benzene')
    ])
    cleaner = gentox_sources.GeneToxCleaner(
        source_settings, path_settings, glossary=glossary
        )

    genetox = cleaner.prepare_clean_source_data().set_index('CASRN')

    # A record ending with an excluded assay is dropped whole, and earlier
    # results of a record are superseded by its last one.
    assert list(genetox.index) == ['71-43-2', '80-05-7']
    assert genetox.loc['71-43-2', 'tngentox'] == 'negative'
    assert genetox.loc['80-05-7', 'tngentox'] == 'negative'
    assert genetox.loc['71-43-2', 'preferred_name'] == 'Benzene'
    assert cleaner.change_log['remove_excluded_assays'] == -1
#endregion

#region: test_ecvam_overall
def test_ecvam_overall():
    ecvam_positive = pd.DataFrame({
        'CASRN': ['50-00-0', '71-43-2', '71-43-2'],
        'Chemical': ['Formaldehyde', 'Benzene', 'Benzene'],
        'ECVAMpos': ['pos', 'neither', 'neg']
    })
    ecvam_negative = pd.DataFrame({
        'CASRN': ['71-43-2', '62-75-9', '80-05-7'],
        'Chemical': ['Benzene', 'NDMA', 'BPA'],
        'ECVAMneg': ['pos', 'neg', 'check']
    })

    ecvam = gentox_sources.ecvam_overall(ecvam_positive, ecvam_negative)
    ecvam = ecvam.set_index('CASRN')

    assert ecvam.loc['50-00-0', 'ECVAMgentox'] == 'positive'
    assert ecvam.loc['71-43-2', 'ECVAMgentox'] == 'positive'
    assert ecvam.loc['62-75-9', 'ECVAMgentox'] == 'negative'
    assert ecvam.loc['62-75-9', 'Chemical'] == 'NDMA'
    assert ecvam.loc['80-05-7', 'ECVAMgentox'] == '-'
    assert len(ecvam) == 4
#endregion

#region: test_call_positive_negative
def test_call_positive_negative():
    results = pd.Series(['negative;positive', 'negative', '', np.nan])

    calls = gentox_sources.call_positive_negative(results, 'positive', 'negative')

    assert list(calls) == ['positive', 'negative', '-', '-']
#endregion
