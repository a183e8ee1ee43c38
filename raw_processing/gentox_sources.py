'''
This module defines cleaners for the genotoxicity sources: CCRIS, the EURL
ECVAM Ames-positive and Ames-negative databases, NTP CEBS genetic toxicity
findings, eChemPortal in vivo genetic toxicity, and the NLM TOXNET GENE-TOX
databank.

Each cleaner returns one record per CASRN with a chemical name and a
per-source genotoxicity call. The calls are combined in `gentox`.
'''

import csv
import numpy as np
import pandas as pd

from .source_cleaning import SourceCleaner, first_result_per_chemical
from utilities import case_when, columns_between, full_join, str_detect, unite

CASRN_COL = 'CASRN'

#region: CcrisGentoxCleaner
class CcrisGentoxCleaner(SourceCleaner):
    '''
    Cleaner for mutagenicity studies in the NCI Chemical Carcinogenesis
    Research Information System archive.
    '''
    #region: remove_missing_tests
    def remove_missing_tests(self, source_data):
        '''Remove records without a mutagenicity test system.'''
        tests = source_data[self.source_settings['test_col']]
        return source_data.loc[tests.notna() & (tests != 'NA')]
    #endregion

    #region: normalize_results
    def normalize_results(self, source_data):
        '''
        Reduce the free-text results to a recognized result by substring.

        The first recognized result in 'recognized_results' wins. Other
        results are kept in lower case.
        '''
        source_data = source_data.copy()
        raw_col = self.source_settings['raw_result_col']
        results = source_data[raw_col].str.lower()
        source_data[raw_col] = case_when(
            source_data,
            [
                (str_detect(results, recognized, regex=False), recognized)
                for recognized in self.source_settings['recognized_results']
            ],
            default=results
        )
        return source_data
    #endregion

    #region: summarize_results
    def summarize_results(self, source_data):
        '''
        Summarize all studies of a chemical.

        'positive' if any study is positive, otherwise the recognized results
        joined by ','.
        '''
        raw_col = self.source_settings['raw_result_col']
        name_col = self.source_settings['name_col']
        recognized = self.source_settings['recognized_results']

        def summarize(results):
            results = set(results)
            found = [result for result in recognized if result in results]
            if 'positive' in found:
                return 'positive'
            return ','.join(found) if found else np.nan

        return (
            source_data
            .groupby(CASRN_COL, sort=False)
            .agg(**{
                name_col: (name_col, 'first'),
                self.source_settings['result_col']: (raw_col, summarize)
                })
            .reset_index()
        )
    #endregion
#endregion

#region: EcvamPositiveCleaner
class EcvamPositiveCleaner(SourceCleaner):
    '''
    Cleaner for the EURL ECVAM database of Ames-positive chemicals
    (Corvi 2018).
    '''
    #region: classify_results
    def classify_results(self, source_data):
        '''
        'pos' if any in vitro or in vivo positive study, 'neg' if any negative
        study, otherwise 'neither'.
        '''
        source_data = source_data.copy()
        positive_cols = self.source_settings['positive_count_cols']
        negative_cols = self.source_settings['negative_count_cols']
        source_data[self.source_settings['result_col']] = case_when(
            source_data,
            [
                ((source_data[positive_cols] > 0).any(axis=1), 'pos'),
                ((source_data[negative_cols] > 0).any(axis=1), 'neg')
            ],
            default='neither'
        )
        return source_data
    #endregion
#endregion

#region: EcvamNegativeCleaner
class EcvamNegativeCleaner(SourceCleaner):
    '''
    Cleaner for the EURL ECVAM database of Ames-negative chemicals
    (Madia 2020).
    '''
    #region: classify_results
    def classify_results(self, source_data):
        '''
        Unite the overall calls of all assays. 'pos' if any is '+', 'neg' if
        any is '-', otherwise 'check'.
        '''
        source_data = source_data.copy()
        overall = unite(
            source_data,
            self.source_settings['overall_cols'],
            sep=';'
            )
        source_data[self.source_settings['result_col']] = case_when(
            source_data,
            [
                (str_detect(overall, '+', regex=False), 'pos'),
                (str_detect(overall, '-', regex=False), 'neg')
            ],
            default='check'
        )
        return source_data
    #endregion
#endregion

#region: NtpGentoxCleaner
class NtpGentoxCleaner(SourceCleaner):
    '''
    Cleaner for NTP genetic toxicity findings from the CEBS database.
    '''
    #region: classify_results
    def classify_results(self, source_data):
        '''
        Unite the bacterial mutagenicity conclusion with the block of in vivo
        conclusions, then call 'positive', 'negative', or '-'.
        '''
        source_data = source_data.copy()
        conclusion_cols = (
            [self.source_settings['ames_col']]
            + columns_between(
                source_data,
                self.source_settings['first_in_vivo_col'],
                self.source_settings['last_in_vivo_col']
                )
        )
        conclusions = unite(source_data, conclusion_cols, sep=';')
        source_data[self.source_settings['result_col']] = call_positive_negative(
            conclusions, 'ositive', 'egative'
            )
        return source_data
    #endregion
#endregion

#region: EchemportalCleaner
class EchemportalCleaner(SourceCleaner):
    '''
    Cleaner for in vivo genetic toxicity records from eChemPortal.
    '''
    #region: remove_non_cas_numbers
    def remove_non_cas_numbers(self, source_data):
        '''Remove substances identified only by an IUPAC name.'''
        number_type = source_data[self.source_settings['number_type_col']]
        return source_data.loc[number_type == 'CAS Number']
    #endregion

    #region: classify_results
    def classify_results(self, source_data):
        '''
        Equivocal or ambiguous results are uninformative ('-'). Otherwise
        'positive' for positive results or significant increases, and
        'negative' for negative results.
        '''
        source_data = source_data.copy()
        results = source_data[self.source_settings['raw_result_col']]
        source_data[self.source_settings['result_col']] = case_when(
            source_data,
            [
                (str_detect(results, 'quivocal|mbiguous'), '-'),
                (str_detect(results, 'ositive|ignificant increase'), 'positive'),
                (str_detect(results, 'egative', regex=False), 'negative')
            ],
            default='-'
        )
        return source_data
    #endregion

    #region: remove_uninformative_results
    def remove_uninformative_results(self, source_data):
        '''Remove results that were called neither positive nor negative.'''
        return source_data.loc[source_data[self.source_settings['result_col']] != '-']
    #endregion
#endregion

#region: GeneToxCleaner
class GeneToxCleaner(SourceCleaner):
    '''
    Cleaner for the NLM TOXNET Genetic Toxicology Data Bank (GENE-TOX).

    The results file is a tagged-record text file. Each record starts with a
    substance ID (e.g. 'NLM_TOXNET_GENETOX_1') followed by key-value lines,
    where 'asta' is an assay type and 'resa' is the result of the preceding
    assay. A separate key maps substance IDs to CASRNs.
    '''
    #region: load_raw_data
    def load_raw_data(self):
        '''
        Parses the tagged records and joins the substance key.
        '''
        settings = self.source_settings

        records = pd.read_csv(
            self.path_settings[settings['results_file_key']],
            sep='\t',
            header=None,
            names=['key', 'value'],
            quoting=csv.QUOTE_NONE,
            dtype=str
            )
        results = parse_tagged_records(
            records,
            settings['record_prefix'],
            id_col=settings['id_col']
            )

        substance_ids = self._load_file(
            settings['ids_file_key'],
            settings.get('read_kwargs', {}),
            settings.get('rename')
            )
        return results.merge(substance_ids, on=settings['id_col'], how='left')
    #endregion

    #region: remove_excluded_assays
    def remove_excluded_assays(self, source_data):
        '''
        Remove records without an assay and assays that are not genotoxicity
        tests.
        '''
        assays = source_data['assay']
        excluded = self.source_settings['excluded_assays']
        return source_data.loc[assays.notna() & ~assays.isin(excluded)]
    #endregion

    #region: summarize_results
    def summarize_results(self, source_data):
        '''
        'positive' if any considered result contains 'Positive', 'negative' if
        any contains 'Negative', otherwise '-'.
        '''
        name_col = self.source_settings['name_col']
        considered = self.source_settings['considered_results']

        def summarize(results):
            results = [result for result in results if result in considered]
            if any('Positive' in result for result in results):
                return 'positive'
            if any('Negative' in result for result in results):
                return 'negative'
            return '-'

        aggregations = {self.source_settings['result_col']: ('result', summarize)}
        if name_col in source_data:
            aggregations[name_col] = (name_col, 'first')

        return (
            source_data
            .groupby(CASRN_COL, sort=False)
            .agg(**aggregations)
            .reset_index()
        )
    #endregion
#endregion

#region: parse_tagged_records
def parse_tagged_records(records, record_prefix, id_col='SOURCE_NAME_SID'):
    '''
    Convert GENE-TOX tagged records into one row per record.

    Parameters
    ----------
    records : pandas.DataFrame
        Two columns, 'key' and 'value', in file order.
    record_prefix : str
        Substring marking the first line of each record.
    id_col : str, optional
        Name of the output column with the substance ID.

    Returns
    -------
    pandas.DataFrame
        Columns `id_col`, 'assay', and 'result'. Each record keeps only its
        last 'asta' and its last 'resa' line; either is missing where the
        record has none.
    '''
    rows = []
    substance_id, assay, result = None, np.nan, np.nan

    def close_record():
        if substance_id is not None:
            rows.append((substance_id, assay, result))

    for key, value in records[['key', 'value']].itertuples(index=False):
        if pd.isna(key) or key == 'END':
            continue
        if record_prefix in key:
            close_record()
            substance_id, assay, result = key, np.nan, np.nan
        elif substance_id is None:
            continue
        elif key == 'asta':
            assay = value
        elif key == 'resa':
            result = value
    close_record()

    return pd.DataFrame(rows, columns=[id_col, 'assay', 'result'])
#endregion

#region: call_positive_negative
def call_positive_negative(results, positive_pattern, negative_pattern):
    '''
    Call 'positive' where the result matches `positive_pattern`, 'negative'
    where it matches `negative_pattern`, and '-' otherwise.
    '''
    frame = results.to_frame()
    return case_when(
        frame,
        [
            (str_detect(results, positive_pattern), 'positive'),
            (str_detect(results, negative_pattern), 'negative')
        ],
        default='-'
    )
#endregion

#region: ecvam_overall
def ecvam_overall(ecvam_positive, ecvam_negative, result_col='ECVAMgentox'):
    '''
    Combine the Ames-positive and Ames-negative databases.

    Parameters
    ----------
    ecvam_positive : pandas.DataFrame
        Must contain 'CASRN', 'Chemical', and 'ECVAMpos'.
    ecvam_negative : pandas.DataFrame
        Must contain 'CASRN', 'Chemical', and 'ECVAMneg'.

    Returns
    -------
    pandas.DataFrame
        Columns 'CASRN', 'Chemical', and `result_col`. 'positive' if either
        database is positive, 'negative' if either is negative, else '-'.
    '''
    ecvam = full_join(
        [
            ecvam_positive[[CASRN_COL, 'Chemical', 'ECVAMpos']],
            ecvam_negative[[CASRN_COL, 'Chemical', 'ECVAMneg']]
                .rename(columns={'Chemical': 'Chemical_neg'})
        ],
        on=CASRN_COL
    )
    ecvam['Chemical'] = ecvam['Chemical'].where(
        ecvam['Chemical'].notna(), ecvam['Chemical_neg']
    )
    ecvam[result_col] = case_when(
        ecvam,
        [
            ((ecvam['ECVAMpos'] == 'pos') | (ecvam['ECVAMneg'] == 'pos'),
             'positive'),
            ((ecvam['ECVAMpos'] == 'neg') | (ecvam['ECVAMneg'] == 'neg'),
             'negative')
        ],
        default='-'
    )
    # Collapse duplicate CASRNs; positive evidence wins
    ecvam = first_result_per_chemical(
        ecvam[[CASRN_COL, 'Chemical', result_col]],
        result_col,
        ['positive', 'negative', '-']
    )
    return ecvam
#endregion

# Cleaner class for each source key in the configuration
CLEANER_FOR_SOURCE = {
    'ccris': CcrisGentoxCleaner,
    'ecvam_positive': EcvamPositiveCleaner,
    'ecvam_negative': EcvamNegativeCleaner,
    'ntp': NtpGentoxCleaner,
    'echemportal': EchemportalCleaner,
    'genetox': GeneToxCleaner
}
