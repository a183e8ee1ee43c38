'''
This module defines cleaners for the sources of mammary tumor evidence from
in vivo studies.

Every cleaner returns one record per chemical with the CASRN, a chemical
name, an optional DTXSID, and a provenance tag in the source's result column
(e.g. 'IARC', 'NTP_equivocal'). Tags without a suffix denote positive
evidence.

Sources
-------
IARC monographs, the 14th Report on Carcinogens (ROC14), NTP technical
reports (CEBS), EPA IRIS, EPA Office of Pesticide Programs (OPP), the
Chemical Carcinogenesis Research Information System (CCRIS), and the Lhasa
Carcinogenicity Database (LCDB).
'''

import pandas as pd

from .source_cleaning import SourceCleaner
from utilities import case_when, str_detect

#region: Roc14Cleaner
class Roc14Cleaner(SourceCleaner):
    '''
    Cleaner for chemicals with mammary tumors in the 14th Report on
    Carcinogens.
    '''
    #region: remove_missing_dtxsids
    def remove_missing_dtxsids(self, source_data):
        '''
        Remove records without a DTXSID.

        These are groups (e.g., steroidal estrogens) or duplicates of a salt
        listed separately.
        '''
        return source_data.dropna(subset='DTXSID')
    #endregion
#endregion

#region: NtpCleaner
class NtpCleaner(SourceCleaner):
    '''
    Cleaner for NTP technical reports downloaded from the Chemical Effects in
    Biological Systems (CEBS) database.

    Two files are combined: chemicals with positive, clear, or some evidence
    of mammary tumors, and chemicals where NTP concluded equivocal or
    dismissed evidence but the underlying data warrant inclusion.
    '''
    #region: load_raw_data
    def load_raw_data(self):
        '''
        Loads and stacks both CEBS extracts, marking the positive one.
        '''
        read_kwargs = self.source_settings.get('read_kwargs', {})
        rename = self.source_settings.get('rename')

        positive = self._load_file(
            self.source_settings['positive_file_key'], read_kwargs, rename
            )
        positive['is_positive'] = True

        equivocal = self._load_file(
            self.source_settings['equivocal_file_key'], read_kwargs, rename
            )
        equivocal['is_positive'] = False

        return pd.concat([positive, equivocal], ignore_index=True)
    #endregion

    #region: classify_evidence
    def classify_evidence(self, source_data):
        '''
        Tag each record as 'NTP', 'NTP_equivocal', or 'NTP_dismissed'.
        '''
        source_data = source_data.copy()
        result_col = self.source_settings['result_col']
        evidence_col = self.source_settings['evidence_col']

        source_data[result_col] = case_when(
            source_data,
            [
                (source_data['is_positive'], 'NTP'),
                (str_detect(source_data[evidence_col], 'quivocal', regex=False),
                 'NTP_equivocal')
            ],
            default='NTP_dismissed'
        )
        return source_data
    #endregion
#endregion

#region: EpaOppCleaner
class EpaOppCleaner(SourceCleaner):
    '''
    Cleaner for pesticides flagged for mammary tumors in EPA Reregistration
    Eligibility Decisions and human health risk assessments, as reported in
    Cardona and Rudel (2020).
    '''
    #region: classify_results
    def classify_results(self, source_data):
        '''
        'positive' becomes 'EPA_OPP'; anything else is kept as a suffix,
        e.g. 'EPA_OPP_equivocal'.
        '''
        source_data = source_data.copy()
        raw_results = source_data[self.source_settings['raw_result_col']]
        source_data[self.source_settings['result_col']] = (
            raw_results
            .where(raw_results == 'positive', 'EPA_OPP_' + raw_results.astype(str))
            .replace({'positive': 'EPA_OPP'})
        )
        return source_data
    #endregion
#endregion

#region: CcrisMammaryCleaner
class CcrisMammaryCleaner(SourceCleaner):
    '''
    Cleaner for carcinogenicity studies with mammary tumor sites in the NCI
    Chemical Carcinogenesis Research Information System archive.
    '''
    #region: filter_mammary_sites
    def filter_mammary_sites(self, source_data):
        '''Keep studies whose tumor site mentions the mammary gland.'''
        tumor_sites = source_data[self.source_settings['tumor_site_col']]
        where_mammary = str_detect(tumor_sites, 'mammary', case=False)
        return source_data.loc[where_mammary]
    #endregion

    #region: classify_results
    def classify_results(self, source_data):
        '''Distinguish between positive and equivocal evidence.'''
        source_data = source_data.copy()
        result_col = self.source_settings['result_col']
        where_equivocal = str_detect(
            source_data[self.source_settings['raw_result_col']],
            'EQUIVOCAL',
            regex=False
            )
        source_data[result_col] = 'CCRIS'
        source_data.loc[where_equivocal, result_col] = 'CCRIS_equivocal'
        return source_data
    #endregion
#endregion

#region: LcdbCleaner
class LcdbCleaner(SourceCleaner):
    '''
    Cleaner for mammary carcinogens in the Lhasa Carcinogenicity Database.
    '''
    #region: classify_results
    def classify_results(self, source_data):
        '''
        'Positive' becomes 'LCDB', 'Equivocal' becomes 'LCDB_equivocal', and
        anything else is flagged for manual review with 'check'.
        '''
        source_data = source_data.copy()
        raw_results = source_data[self.source_settings['raw_result_col']]
        source_data[self.source_settings['result_col']] = case_when(
            source_data,
            [
                (raw_results == 'Positive', 'LCDB'),
                (raw_results == 'Equivocal', 'LCDB_equivocal')
            ],
            default='check'
        )
        return source_data
    #endregion
#endregion

# Cleaner class for each source key in the configuration
CLEANER_FOR_SOURCE = {
    'iarc': SourceCleaner,
    'roc14': Roc14Cleaner,
    'ntp': NtpCleaner,
    'epa_iris': SourceCleaner,
    'epa_opp': EpaOppCleaner,
    'ccris': CcrisMammaryCleaner,
    'lcdb': LcdbCleaner
}
