'''
This module defines cleaners for the sources of biological effects relevant
to breast cancer: rodent cancer bioassays, steroidogenesis (estradiol and
progesterone synthesis in H295R cells), and estrogen receptor (ER) activity.

Sources
-------
Bioassays
    ICE list of NTP cancer bioassay chemicals, ToxValDB cancer records, and
    ToxRefDB rodent cancer studies where the mammary gland was assessed.
Steroidogenesis
    Karmaus 2016 single high dose hit calls and the Haggard 2018
    concentration-response results as classified by Cardona 2021.
ER activity
    Judson 2015 ER pathway model.
'''

from .source_cleaning import SourceCleaner
from utilities import case_when, str_detect

CASRN_COL = 'CASRN'

#region: ToxValCleaner
class ToxValCleaner(SourceCleaner):
    '''
    Cleaner for ToxValDB cancer records.
    '''
    #region: filter_rodents
    def filter_rodents(self, source_data):
        '''Keep records from rat or mouse studies.'''
        where_rodent = (
            str_detect(source_data['common_name'], 'Rat|Mouse')
            | str_detect(source_data['species_original'], 'rat|mice')
        )
        return source_data.loc[where_rodent]
    #endregion

    #region: filter_risk_classes
    def filter_risk_classes(self, source_data):
        '''Keep carcinogenicity and chronic studies.'''
        risk_classes = self.source_settings['risk_assessment_classes']
        where_class = source_data['risk_assessment_class'].isin(risk_classes)
        return source_data.loc[where_class]
    #endregion
#endregion

#region: H295ROneDoseCleaner
class H295ROneDoseCleaner(SourceCleaner):
    '''
    Cleaner for the single high dose H295R hit calls (Karmaus 2016).

    Returns one row per chemical with the estradiol and progesterone
    "up" results.
    '''
    #region: filter_endpoints
    def filter_endpoints(self, source_data):
        '''Keep the estradiol and progesterone "up" endpoints.'''
        endpoints = source_data[self.source_settings['endpoint_col']]
        pattern = '|'.join(self.source_settings['endpoint_for_column'])
        return source_data.loc[str_detect(endpoints, pattern)]
    #endregion

    #region: pivot_endpoints
    def pivot_endpoints(self, source_data):
        '''
        Spread the endpoints into one column each.

        Chemicals tested more than once keep every distinct hit call, joined
        by ','.
        '''
        endpoint_col = self.source_settings['endpoint_col']
        hit_col = self.source_settings['hit_col']
        name_col = self.source_settings['name_col']
        endpoint_for_column = self.source_settings['endpoint_for_column']

        def join_unique(hit_calls):
            return ','.join(sorted(set(hit_calls.dropna().astype(str))))

        # The configured endpoint names are suffixes, e.g. '_ESTRADIOL_up'
        source_data = source_data.copy()
        source_data[endpoint_col] = case_when(
            source_data,
            [
                (source_data[endpoint_col].str.endswith(suffix), new_col)
                for suffix, new_col in endpoint_for_column.items()
            ]
        )

        hit_calls = (
            source_data
            .groupby([CASRN_COL, name_col, endpoint_col])[hit_col]
            .agg(join_unique)
            .unstack(endpoint_col)
            .reindex(columns=list(endpoint_for_column.values()))
            .reset_index()
        )
        hit_calls.columns.name = None
        return hit_calls
    #endregion

    #region: classify_results
    def classify_results(self, source_data):
        '''
        Recode the hit calls.

        Hormones and synthesis substrates are marked '_NA', because an
        increase reflects metabolism of the substrate rather than de novo
        synthesis. E2: '1' is positive, '0' is negative, and conflicting
        repeats are missing. P4: '1' is positive and any '0' is negative.
        Untested endpoints are 'no data'.
        '''
        source_data = source_data.copy()
        where_substrate = str_detect(
            source_data[self.source_settings['name_col']],
            self.source_settings['substrate_pattern']
            )
        e2_col, p4_col = self.source_settings['endpoint_for_column'].values()

        e2 = source_data[e2_col]
        source_data[e2_col] = case_when(
            source_data,
            [
                (where_substrate, '_NA'),
                (e2 == '1', 'positive'),
                (e2 == '0', 'negative'),
                (e2.isna() | (e2 == ''), 'no data')
            ]
        )

        p4 = source_data[p4_col]
        source_data[p4_col] = case_when(
            source_data,
            [
                (where_substrate, '_NA'),
                (p4 == '1', 'positive'),
                (str_detect(p4, '0', regex=False), 'negative'),
                (p4.isna() | (p4 == ''), 'no data')
            ]
        )
        return source_data
    #endregion
#endregion

#region: H295RConcResponseCleaner
class H295RConcResponseCleaner(SourceCleaner):
    '''
    Cleaner for the concentration-response H295R results (Haggard 2018), as
    classified by strength of E2/P4 induction in Cardona 2021.
    '''
    #region: flag_substrates
    def flag_substrates(self, source_data):
        '''Mark hormones and synthesis substrates as '_NA'.'''
        source_data = source_data.copy()
        where_substrate = str_detect(
            source_data[self.source_settings['name_col']],
            self.source_settings['substrate_pattern']
            )
        for col in self.source_settings['result_cols']:
            source_data.loc[where_substrate, col] = '_NA'
        return source_data
    #endregion
#endregion

#region: ErModelCleaner
class ErModelCleaner(SourceCleaner):
    '''
    Cleaner for the ER pathway model scores (Judson 2015).

    Agonist and antagonist area-under-the-curve (AUC) scores are classified
    into activity categories.
    '''
    #region: classify_activity
    def classify_activity(self, source_data):
        '''
        Classify ER activity from the AUC scores.

        With the default thresholds, an AUC of at least 0.1 is active and at
        least 0.01 is weak. Agonism takes priority over antagonism.
        '''
        source_data = source_data.copy()
        agonist = source_data[self.source_settings['agonist_col']]
        antagonist = source_data[self.source_settings['antagonist_col']]
        active = self.source_settings['active_threshold']
        weak = self.source_settings['weak_threshold']

        source_data['ERactivity'] = case_when(
            source_data,
            [
                (agonist >= active, 'agonist'),
                (antagonist >= active, 'antagonist'),
                ((agonist >= weak) & (antagonist >= weak), 'mixed_weak'),
                (agonist >= weak, 'weak_agonist'),
                (antagonist >= weak, 'weak_antagonist')
            ],
            default='inactive'
        )
        return source_data
    #endregion

    #region: classify_agonist_strength
    def classify_agonist_strength(self, source_data):
        '''
        Assign a strength tier to ER agonists from the agonist AUC.

        Bins are (lower bound, label) pairs in descending order. Mixed weak
        chemicals are 'borderline_mixed'. Other chemicals have no tier.
        '''
        source_data = source_data.copy()
        agonist = source_data[self.source_settings['agonist_col']]
        where_agonist = source_data['ERactivity'].isin(['agonist', 'weak_agonist'])

        cases = [
            (source_data['ERactivity'] == 'mixed_weak', 'borderline_mixed')
        ]
        cases += [
            (where_agonist & (agonist >= lower_bound), label)
            for lower_bound, label in self.source_settings['agonist_strength_bins']
        ]
        source_data['ER_agonist_strength'] = case_when(source_data, cases)
        return source_data
    #endregion
#endregion

# Cleaner class for each source key in the configuration
CLEANER_FOR_SOURCE = {
    'ice': SourceCleaner,
    'toxval': ToxValCleaner,
    'toxref': SourceCleaner,
    'h295r_onedose': H295ROneDoseCleaner,
    'h295r_cr': H295RConcResponseCleaner,
    'er_model': ErModelCleaner
}
