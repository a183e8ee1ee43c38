'''
This module defines cleaners for the chemical use and exposure sources:
CPDat product categories, EPA high production volume (HPV) chemicals,
ExpoCast exposure predictions, Drugs@FDA, substances added to food (EAFUS),
EPA pesticide active ingredients, water disinfection byproducts, and the
California Proposition 65 list.
'''

import numpy as np
import pandas as pd

from .source_cleaning import SourceCleaner
from . import source_loading
from . import chemids
from utilities import bin_values, case_when, flag_categories, str_detect, unite

CASRN_COL = chemids.CASRN_COL

#region: CpdatCleaner
class CpdatCleaner(SourceCleaner):
    '''
    Cleaner for CPDat exposure categories.

    The many exposure identifiers in CPDat were condensed to the categories
    pesticides, diet, consumer products, industrial use, pharmaceuticals, and
    environmental media.
    '''
    #region: flag_categories
    def flag_categories(self, source_data):
        '''
        One column per category, holding 'CPDat' where the chemical belongs
        to it. Unmapped categories such as 'No data' are ignored.
        '''
        category_col = self.source_settings['category_col']
        categories = source_loading.explode_delimited(
            source_data,
            category_col,
            self.source_settings['category_separator']
            )
        return flag_categories(
            categories,
            category_col,
            self.source_settings['column_for_category'],
            self.source_settings['result_value']
            )
    #endregion
#endregion

#region: ExpoCastCleaner
class ExpoCastCleaner(SourceCleaner):
    '''
    Cleaner for ExpoCast exposure predictions (Ring 2019).

    Predicted exposure pathways become one column per pathway, and the upper
    95th percentile of predicted intake (mg/kg/day) is binned.
    '''
    #region: flag_pathways
    def flag_pathways(self, source_data):
        '''
        One column per exposure pathway, holding 'ExpoCast' where the
        pathway was predicted. 'Unknown' pathways are ignored.
        '''
        settings = self.source_settings
        pathway_col = settings['pathway_col']

        source_data = source_data.copy()
        where_all = str_detect(
            source_data[pathway_col],
            settings['all_pathways_label'],
            regex=False
            )
        source_data.loc[where_all, pathway_col] = settings['all_pathways']

        pathways = source_loading.explode_delimited(
            source_data[[CASRN_COL, pathway_col]],
            pathway_col,
            ','
            )
        pathways[pathway_col] = case_when(
            pathways,
            [
                (str_detect(pathways[pathway_col], abbreviation, regex=False),
                 new_col)
                for abbreviation, new_col
                in settings['column_for_pathway'].items()
            ]
        )
        flags = flag_categories(
            pathways,
            pathway_col,
            {col: col for col in settings['column_for_pathway'].values()},
            settings['result_value']
            )

        identity_cols = [
            col for col in source_data if col != pathway_col
        ]
        return (
            source_data[identity_cols]
            .drop_duplicates(subset=CASRN_COL)
            .merge(flags, on=CASRN_COL, how='left')
        )
    #endregion

    #region: bin_intake
    def bin_intake(self, source_data):
        '''Replace the U95 intake with its configured exposure bin label.'''
        source_data = source_data.copy()
        source_data['U95intake'] = bin_values(
            source_data['U95intake'],
            self.source_settings['intake_bins']
            )
        return source_data
    #endregion
#endregion

#region: FdaDrugsCleaner
class FdaDrugsCleaner(SourceCleaner):
    '''
    Cleaner for the Drugs@FDA product list with marketing status.

    Drug and active ingredient names are matched to the lower-case
    identifier glossary, so the cleaner must be given the lower-case
    glossary.
    '''
    #region: load_raw_data
    def load_raw_data(self):
        '''
        Loads the product list and joins the marketing status of each
        product.
        '''
        settings = self.source_settings
        read_kwargs = settings.get('read_kwargs', {})

        products = self._load_file(settings['products_file_key'], read_kwargs)
        products = products[settings['product_cols']].drop_duplicates()
        status = self._load_file(settings['status_file_key'], read_kwargs)
        status_key = self._load_file(settings['status_key_file_key'], read_kwargs)

        status = status.merge(status_key, on='MarketingStatusID', how='left')
        return products.merge(
            status,
            on=settings['product_key_cols'],
            how='left'
            )
    #endregion

    #region: explode_drug_names
    def explode_drug_names(self, source_data):
        '''
        One record per drug or ingredient name, in lower case.
        '''
        source_data = source_data.copy()
        source_data['Drug'] = unite(
            source_data,
            self.source_settings['drug_name_cols'],
            sep='; '
            )
        source_data = source_loading.explode_delimited(source_data, 'Drug', ';')
        source_data[chemids.NAME_COL] = source_data['Drug'].str.lower()
        return source_data
    #endregion

    #region: fix_drug_names
    def fix_drug_names(self, source_data):
        '''
        Correct drug names so that they match the glossary.

        Each fix has a 'pattern', a corrected 'name', and 'exact' (whether
        the whole name must equal the pattern). The first matching fix wins.
        '''
        source_data = source_data.copy()
        names = source_data[chemids.NAME_COL]
        cases = []
        for fix in self.source_settings['drug_name_fixes']:
            if fix.get('exact', False):
                where_fix = names == fix['pattern']
            else:
                where_fix = str_detect(names, fix['pattern'], regex=False)
            cases.append((where_fix, fix['name']))
        source_data[chemids.NAME_COL] = case_when(
            source_data, cases, default=names
            )
        return source_data
    #endregion

    #region: match_glossary
    def match_glossary(self, source_data):
        '''Keep drugs whose name matches a glossary name; add identifiers.'''
        glossary = self.glossary.drop_duplicates(subset=chemids.NAME_COL)
        return source_data.merge(glossary, on=chemids.NAME_COL, how='inner')
    #endregion

    #region: classify_marketing_status
    def classify_marketing_status(self, source_data):
        '''
        Summarize the marketing status of all products of a chemical as
        'FDA_Rx_OTC', 'FDA_Rx', 'FDA_OTC', 'FDA_tentative_approval', or
        'FDA_discontinued'.
        '''
        status_col = self.source_settings['status_col']

        def summarize(statuses):
            statuses = set(statuses.dropna())
            if {'Prescription', 'Over-the-counter'} <= statuses:
                return 'FDA_Rx_OTC'
            if 'Prescription' in statuses:
                return 'FDA_Rx'
            if 'Over-the-counter' in statuses:
                return 'FDA_OTC'
            if 'None (Tentative Approval)' in statuses:
                return 'FDA_tentative_approval'
            if 'Discontinued' in statuses:
                return 'FDA_discontinued'
            return np.nan

        return (
            source_data
            .groupby(CASRN_COL, sort=False)
            .agg(**{
                chemids.DTXSID_COL: (chemids.DTXSID_COL, 'first'),
                chemids.NAME_COL: (chemids.NAME_COL, 'first'),
                'FDADrug': (status_col, summarize)
                })
            .reset_index()
        )
    #endregion
#endregion

#region: Prop65Cleaner
class Prop65Cleaner(SourceCleaner):
    '''
    Cleaner for the California Proposition 65 list.
    '''
    #region: remove_delisted
    def remove_delisted(self, source_data):
        '''Remove delisted chemicals and chemicals pending removal.'''
        chemicals = source_data[self.source_settings['name_col']]
        where_delisted = (
            str_detect(chemicals, 'Delisted', regex=False)
            | str_detect(chemicals, 'removal', regex=False)
        )
        return source_data.loc[~where_delisted]
    #endregion

    #region: fix_casrns_by_name
    def fix_casrns_by_name(self, source_data):
        '''
        Assign CASRNs to chemicals listed without one, matching a literal
        substring of the chemical name.
        '''
        source_data = source_data.copy()
        chemicals = source_data[self.source_settings['name_col']]
        source_data[CASRN_COL] = case_when(
            source_data,
            [
                (str_detect(chemicals, fix['name'], regex=False), fix['casrn'])
                for fix in self.source_settings['casrn_fixes_by_name']
            ],
            default=source_data[CASRN_COL]
        )
        return source_data
    #endregion

    #region: remove_unlisted_casrns
    def remove_unlisted_casrns(self, source_data):
        '''Remove chemicals listed without a CASRN ('--').'''
        where_unlisted = str_detect(source_data[CASRN_COL], '--', regex=False)
        return source_data.loc[~where_unlisted]
    #endregion

    #region: classify_toxicity
    def classify_toxicity(self, source_data):
        '''
        Label cancer and developmental toxicity listings.

        Developmental labels are 'Dev_F_M', 'Dev_F', 'Dev_M', or 'Dev'.
        Chemicals listed more than once may receive a configured override.
        '''
        source_data = source_data.copy()
        tox_type = source_data['ToxType']
        override = source_data[CASRN_COL].map(
            self.source_settings['dev_label_overrides']
            )

        source_data['P65_Cancer'] = case_when(
            source_data,
            [(str_detect(tox_type, 'cancer', regex=False), 'Cancer')]
        )
        source_data['P65_Dev'] = case_when(
            source_data,
            [
                (str_detect(tox_type, 'female, male', regex=False), 'Dev_F_M'),
                (override == 'Dev_F_M', 'Dev_F_M'),
                (str_detect(tox_type, 'female', regex=False), 'Dev_F'),
                (override == 'Dev_F', 'Dev_F'),
                (str_detect(tox_type, 'male', regex=False), 'Dev_M'),
                (str_detect(tox_type, 'developmental', regex=False), 'Dev')
            ]
        )
        return source_data
    #endregion

    #region: summarize_listings
    def summarize_listings(self, source_data):
        '''
        One row per CASRN with all of its listings joined by ', ', cancer
        first.
        '''
        def join_labels(labels):
            return ', '.join(dict.fromkeys(labels.dropna()))

        listings = (
            source_data
            .groupby(CASRN_COL, sort=False)
            .agg(
                P65_Cancer=('P65_Cancer', join_labels),
                P65_Dev=('P65_Dev', join_labels)
                )
            .reset_index()
        )
        listings['Prop65'] = unite(listings, ['P65_Cancer', 'P65_Dev'], sep=', ')
        return listings.loc[listings['Prop65'] != '', [CASRN_COL, 'Prop65']]
    #endregion
#endregion

#region: water_dbps_from_names
def water_dbps_from_names(names, glossary, result_value='waterDBP'):
    '''
    Resolve water disinfection byproduct names through the glossary.

    Names without a glossary match are dropped.

    Returns
    -------
    pandas.DataFrame
        Columns 'CASRN' and 'waterDBP'.
    '''
    casrn_for_name = chemids.mapping_from_glossary(
        glossary, chemids.NAME_COL, CASRN_COL
        )
    dbps = pd.DataFrame({chemids.NAME_COL: list(names)})
    dbps[CASRN_COL] = dbps[chemids.NAME_COL].map(casrn_for_name)
    dbps['waterDBP'] = result_value
    return dbps.dropna(subset=CASRN_COL)[[CASRN_COL, 'waterDBP']]
#endregion

# Cleaner class for each source key in the configuration
CLEANER_FOR_SOURCE = {
    'cpdat': CpdatCleaner,
    'hpv': SourceCleaner,
    'expocast': ExpoCastCleaner,
    'fda_drugs': FdaDrugsCleaner,
    'eafus': SourceCleaner,
    'epa_conventional': SourceCleaner,
    'epa_antimicrobial': SourceCleaner,
    'epa_biopesticide': SourceCleaner,
    'prop65': Prop65Cleaner
}
