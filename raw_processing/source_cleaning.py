'''
This module defines the `SourceCleaner` base class, which provides a
framework for loading a raw source extract and running a configured sequence
of cleaning steps on it.

Each cleaning step is a method that takes and returns a DataFrame. The change
in the number of rows after every step is recorded in a change log, which can
be written to a JSON file for provenance.
'''

import pandas as pd
import json
import os

from . import source_loading
from . import chemids

CASRN_COL = chemids.CASRN_COL

#region: SourceCleaner.__init__
class SourceCleaner:
    '''
    A base class for cleaning chemical source datasets.

    This class defines common cleaning operations keyed by CASRN and provides
    a framework for running a sequence of cleaning steps dynamically.

    Parameters
    ----------
    source_settings : dict
        Config settings for the source. Recognized keys include 'name',
        'file_key', 'read_kwargs', 'rename', 'initial_dtypes',
        'cleaning_steps', 'casrn_fixes', 'casrn_remap', 'casrn_separator',
        'missing_casrn_values', 'excluded_casrns', 'name_col',
        'result_col', 'result_value', 'result_priority', and 'output_cols'.
    path_settings : dict
        Config settings for file paths.
    glossary : pandas.DataFrame, optional
        Identifier glossary (CASRN, DTXSID, preferred_name).
    '''
    def __init__(self, source_settings, path_settings, glossary=None):
        self.source_settings = source_settings
        self.path_settings = path_settings
        self.glossary = glossary
#endregion

    #region: name
    @property
    def name(self):
        return self.source_settings.get('name', type(self).__name__)
    #endregion

    #region: prepare_clean_source_data
    def prepare_clean_source_data(self, log_dir=None):
        '''
        Provides the main interface.

        Encapsulates raw data loading and cleaning.
        '''
        print(f'Cleaning {self.name} data...')

        raw_data = self.load_raw_data()

        source_data = self.clean_raw_data(
            raw_data,
            log_file=self.log_file_for(log_dir)
            )

        return source_data
    #endregion

    #region: load_raw_data
    def load_raw_data(self):
        '''
        Loads the raw extract using the current config.
        '''
        return self._load_file(
            self.source_settings['file_key'],
            self.source_settings.get('read_kwargs', {}),
            self.source_settings.get('rename')
        )
    #endregion

    #region: _load_file
    def _load_file(self, file_key, read_kwargs, rename=None):
        '''Read one raw file and apply minimal column cleaning.'''
        raw_data = source_loading.read_raw_table(
            self.path_settings[file_key],
            **dict(read_kwargs)
            )
        raw_data = source_loading.clean_columns(raw_data, rename)
        return source_loading.set_initial_dtypes(
            raw_data,
            self.source_settings.get('initial_dtypes', {})
            )
    #endregion

    #region: clean_raw_data
    def clean_raw_data(self, raw_data, log_file=None):
        '''
        Clean the raw data using a sequence of cleaning steps.

        Parameters
        ----------
        raw_data : pandas.DataFrame
            The raw data to be cleaned.
        log_file : str or None, optional
            Path to a JSON file where the change in row count per step will be
            saved. If None, no log file is created.

        Returns
        -------
        pandas.DataFrame
            The cleaned data.
        '''
        source_data = raw_data.copy()
        change_log = {}  # initialize

        for step_name in self.source_settings['cleaning_steps']:
            N_before = len(source_data)
            # Dynamically get the cleaning method from the step name
            source_data = getattr(self, step_name)(source_data)
            N_after = len(source_data)
            change_log[step_name] = N_after - N_before

        self.change_log = change_log

        if log_file is not None:
            with open(log_file, 'w') as file:
                json.dump(change_log, file, indent=4)

        return source_data.reset_index(drop=True)
    #endregion

    #region: log_file_for
    def log_file_for(self, log_dir):
        '''Path of the change log for this source, or None.'''
        if log_dir is None:
            return None
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)
        return os.path.join(log_dir, f'{self.name}.json')
    #endregion

    #region: strip_casrns
    def strip_casrns(self, source_data):
        '''Remove surrounding whitespace from the CASRNs.'''
        source_data = source_data.copy()
        source_data[CASRN_COL] = (
            source_loading.to_string(source_data[CASRN_COL]).str.strip()
        )
        return source_data
    #endregion

    #region: fix_casrns
    def fix_casrns(self, source_data):
        '''
        Correct CASRNs that are missing or wrong in the raw data.

        Two kinds of corrections are supported:
            - 'casrn_fixes': list of {'column', 'value', 'casrn'}. Rows where
              `column` equals `value` receive `casrn`.
            - 'casrn_remap': dict of old CASRN to new CASRN.
        '''
        source_data = source_data.copy()

        for fix in self.source_settings.get('casrn_fixes', []):
            where_fix = source_data[fix['column']] == fix['value']
            source_data.loc[where_fix, CASRN_COL] = fix['casrn']

        casrn_remap = self.source_settings.get('casrn_remap', {})
        if casrn_remap:
            source_data[CASRN_COL] = source_data[CASRN_COL].replace(casrn_remap)

        return source_data
    #endregion

    #region: remove_missing_casrns
    def remove_missing_casrns(self, source_data):
        '''
        Remove records without a usable CASRN, including placeholder values.
        '''
        missing_values = self.source_settings.get('missing_casrn_values', [])
        casrns = source_data[CASRN_COL]
        where_missing = (
            casrns.isna()
            | (casrns.astype(str).str.strip() == '')
            | casrns.isin(missing_values)
        )
        return source_data.loc[~where_missing]
    #endregion

    #region: remove_excluded_casrns
    def remove_excluded_casrns(self, source_data):
        '''Remove chemicals excluded after manual review of the source.'''
        excluded = self.source_settings.get('excluded_casrns', [])
        return source_data.loc[~source_data[CASRN_COL].isin(excluded)]
    #endregion

    #region: attach_identifiers
    def attach_identifiers(self, source_data):
        '''
        Insert DTXSIDs and preferred names from the identifier glossary.
        '''
        if self.glossary is None:
            return source_data
        return chemids.attach_identifiers(
            source_data,
            self.glossary,
            name_col=self.source_settings.get('name_col')
            )
    #endregion

    #region: tag_source
    def tag_source(self, source_data):
        '''Label every record with the source's provenance tag.'''
        source_data = source_data.copy()
        result_col = self.source_settings['result_col']
        source_data[result_col] = self.source_settings['result_value']
        return source_data
    #endregion

    #region: truncate_casrns
    def truncate_casrns(self, source_data):
        '''
        Cut CASRNs at the first occurrence of 'casrn_separator'.

        Some sources append a parenthetical or a salt CASRN to the parent.
        '''
        source_data = source_data.copy()
        separator = self.source_settings['casrn_separator']
        source_data[CASRN_COL] = (
            source_loading.to_string(source_data[CASRN_COL])
            .str.split(separator, regex=False)
            .str[0]
            .str.strip()
        )
        return source_data
    #endregion

    #region: explode_casrns
    def explode_casrns(self, source_data):
        '''
        Split records listing several CASRNs into one record per CASRN.
        '''
        return source_loading.explode_delimited(
            source_data,
            CASRN_COL,
            self.source_settings['casrn_list_separator']
            )
    #endregion

    #region: collapse_results
    def collapse_results(self, source_data):
        '''
        Keep one record per chemical based on 'result_priority'.
        '''
        return first_result_per_chemical(
            source_data,
            self.source_settings['result_col'],
            self.source_settings['result_priority']
        )
    #endregion

    #region: remove_duplicates
    def remove_duplicates(self, source_data):
        '''Remove exact duplicates, retaining the first occurrence.'''
        return source_data.drop_duplicates()
    #endregion

    #region: select_output_columns
    def select_output_columns(self, source_data):
        '''Retain the configured output columns, in order.'''
        output_cols = [
            col for col in self.source_settings['output_cols']
            if col in source_data
        ]
        return source_data[output_cols].drop_duplicates()
    #endregion

#region: load_json
def load_json(file):
    '''This can be used to load the change log from a JSON file.'''
    with open(file, 'r') as file:
        json_dict = json.load(file)
    return json_dict
#endregion


#region: first_result_per_chemical
def first_result_per_chemical(source_data, result_col, priority, by=CASRN_COL):
    '''
    Collapse multiple records per chemical to a single result.

    The result that appears first in `priority` wins. Results not listed in
    `priority` rank last.
    '''
    rank = {result: i for i, result in enumerate(priority)}
    ranked = source_data.assign(
        _rank=source_data[result_col].map(rank).fillna(len(priority))
    )
    return (
        ranked
        .sort_values([by, '_rank'], kind='stable')
        .drop_duplicates(subset=by, keep='first')
        .drop(columns='_rank')
        .reset_index(drop=True)
    )
#endregion
