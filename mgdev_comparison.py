'''
This module compares the breast cancer-relevant chemicals to the chemicals
that alter mammary gland development (MGDev), as published in Rudel et al.
(2011).
'''

from raw_processing import chemids
from raw_processing import source_loading
from bc_relevance import edc_classification, top_edc_score, HORMONE_COLS
from utilities import coalesce, fill_missing, MISSING
import results_management

CASRN_COL = chemids.CASRN_COL
DTXSID_COL = chemids.DTXSID_COL
NAME_COL = chemids.NAME_COL

EFFECT_COLS = HORMONE_COLS + ['ERactivity', 'EDC', 'topEDCscore', 'Genotoxicity']

COMPARISON_COLS = (
    [CASRN_COL, DTXSID_COL, NAME_COL, 'MammaryTumorEvidence',
     'MammaryTumorRefs', 'BCrelevant', 'MGDev']
    + EFFECT_COLS
)

#region: mgdev_list_from_raw
def mgdev_list_from_raw(mgdev_settings, path_settings, glossary):
    '''
    Load the MGDev list and attach identifiers.

    The list reports only CASRN, so chemicals absent from the glossary are
    dropped.
    '''
    mgdev = source_loading.read_raw_table(
        path_settings[mgdev_settings['file_key']],
        **mgdev_settings.get('read_kwargs', {})
        )
    mgdev = source_loading.clean_columns(mgdev, mgdev_settings.get('rename'))
    mgdev[CASRN_COL] = source_loading.to_string(mgdev[CASRN_COL]).str.strip()
    return (
        mgdev[[CASRN_COL]]
        .merge(glossary, on=CASRN_COL, how='inner')
        .drop_duplicates(subset=CASRN_COL)
        .reset_index(drop=True)
    )
#endregion

#region: mgdev_comparison
def mgdev_comparison(
        mgdev_list,
        hormones,
        er,
        gentox,
        bioassays,
        bcrel,
        write_file_name=None,
        write_dir=None
        ):
    '''
    Compile the effects of MGDev chemicals and flag those that are also
    breast cancer-relevant.

    Parameters
    ----------
    mgdev_list : pandas.DataFrame
        Output of `mgdev_list_from_raw`.
    hormones : pandas.DataFrame
        Hormone synthesis summary.
    er : pandas.DataFrame
        ER model classification, including 'ERactivity' and
        'ER_agonist_strength'.
    gentox : pandas.DataFrame
        Genotoxicity summary.
    bioassays : pandas.DataFrame
        Chemicals tested in rodent cancer bioassays.
    bcrel : pandas.DataFrame
        The breast cancer-relevant list.

    Returns
    -------
    pandas.DataFrame
        One row per MGDev chemical. Missing values are '-'.
    '''
    comparison = (
        mgdev_list
        .merge(hormones[[CASRN_COL] + HORMONE_COLS], on=CASRN_COL, how='left')
        .merge(
            er[[CASRN_COL, 'ERactivity', 'ER_agonist_strength']],
            on=CASRN_COL,
            how='left'
            )
        .merge(gentox[[CASRN_COL, 'Genotoxicity']], on=CASRN_COL, how='left')
    )
    comparison = fill_missing(
        comparison,
        HORMONE_COLS + ['ERactivity', 'ER_agonist_strength', 'Genotoxicity']
        )

    comparison['EDC'] = edc_classification(
        comparison['HormoneSummary'],
        comparison['ERactivity']
        )
    comparison['topEDCscore'] = top_edc_score(comparison)

    comparison = comparison.merge(bioassays, on=CASRN_COL, how='left')
    comparison['MGDev'] = 'MGDev'

    bcrel = (
        bcrel[[CASRN_COL, 'MC', 'MC_references']]
        .rename(columns={
            'MC': 'MammaryTumorEvidence',
            'MC_references': 'MammaryTumorRefs'
            })
        .assign(BCrelevant='BCrelevant')
    )
    comparison = comparison.merge(bcrel, on=CASRN_COL, how='left')
    comparison['MammaryTumorEvidence'] = coalesce(
        comparison,
        ['MammaryTumorEvidence', 'Bioassay']
        )
    comparison['MammaryTumorRefs'] = coalesce(
        comparison,
        ['MammaryTumorRefs', 'ref']
        )

    comparison = fill_missing(
        comparison,
        ['MammaryTumorEvidence', 'MammaryTumorRefs', 'BCrelevant']
        )
    comparison = (
        comparison[COMPARISON_COLS]
        .drop_duplicates()
        .reset_index(drop=True)
    )

    if write_dir and write_file_name:
        results_management.write_table(comparison, write_dir, write_file_name)

    return comparison
#endregion
