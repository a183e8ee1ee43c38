'''
This module compiles hormone synthesis, ER agonism, and genotoxicity results
for mammary carcinogens (MCs) and other breast cancer-relevant chemicals.

A chemical is breast cancer-relevant if it is an MC, increases estradiol (E2)
or progesterone (P4) synthesis, or is an ER agonist. Relevant chemicals are
further classified by the strength of their endocrine activity (EDC).
'''

import pandas as pd

from raw_processing import chemids
from raw_processing import effects_sources
from utilities import (
    case_when, coalesce, fill_missing, full_join, str_detect, unite, MISSING
)
import results_management

CASRN_COL = chemids.CASRN_COL
DTXSID_COL = chemids.DTXSID_COL
NAME_COL = chemids.NAME_COL

HORMONE_COLS = [
    'E2_onedose_up', 'P4_onedose_up', 'E2_CR_up', 'P4_CR_up', 'HormoneSummary'
]

BCREL_COLS = (
    [CASRN_COL, DTXSID_COL, NAME_COL, 'MC', 'MC_references']
    + HORMONE_COLS
    + ['ERactivity', 'EDC', 'topEDCscore', 'Genotoxicity']
)

#region: clean_effects_sources
def clean_effects_sources(
        effects_settings,
        path_settings,
        sources,
        glossary=None,
        log_dir=None
        ):
    '''
    Clean the given effects sources.

    Parameters
    ----------
    effects_settings : dict
        Config settings for the effects sources.
    path_settings : dict
        Config settings for file paths.
    sources : list of str
        Keys of the sources to clean.

    Returns
    -------
    dict of str to pandas.DataFrame
    '''
    source_data_for = {}
    for source in sources:
        if source not in effects_sources.CLEANER_FOR_SOURCE:
            raise ValueError(f'Unrecognized effects source: {source}')
        cleaner = effects_sources.CLEANER_FOR_SOURCE[source](
            effects_settings['sources'][source],
            path_settings,
            glossary=glossary
            )
        source_data_for[source] = cleaner.prepare_clean_source_data(log_dir)
    return source_data_for
#endregion

#region: bioassays_from_raw
def bioassays_from_raw(
        effects_settings,
        path_settings,
        log_dir=None,
        write_dir=None
        ):
    '''
    Prepare the list of chemicals tested in rodent cancer bioassays.

    Returns
    -------
    pandas.DataFrame
        Columns 'CASRN', 'ref', and 'Bioassay'.
    '''
    bioassay_sources = effects_settings['bioassay_sources']
    source_data_for = clean_effects_sources(
        effects_settings,
        path_settings,
        bioassay_sources,
        log_dir=log_dir
        )

    result_cols = [
        effects_settings['sources'][source]['result_col']
        for source in bioassay_sources
    ]
    bioassays = combine_bioassays(list(source_data_for.values()), result_cols)

    if write_dir:
        results_management.write_table(
            bioassays,
            write_dir,
            effects_settings['bioassays_file']
            )

    return bioassays
#endregion

#region: combine_bioassays
def combine_bioassays(tables, result_cols):
    '''
    Outer join the bioassay lists and unite their references.
    '''
    bioassays = full_join(tables, on=CASRN_COL)
    bioassays['ref'] = unite(bioassays, result_cols, sep=', ')
    bioassays['Bioassay'] = 'Bioassay'
    return (
        bioassays[[CASRN_COL, 'ref', 'Bioassay']]
        .drop_duplicates()
        .reset_index(drop=True)
    )
#endregion

#region: hormone_synthesis_from_raw
def hormone_synthesis_from_raw(
        effects_settings,
        path_settings,
        log_dir=None,
        write_dir=None
        ):
    '''
    Prepare the H295R hormone synthesis summary from the single dose and
    concentration-response screens.
    '''
    source_data_for = clean_effects_sources(
        effects_settings,
        path_settings,
        ['h295r_onedose', 'h295r_cr'],
        log_dir=log_dir
        )

    hormones = hormone_synthesis_summary(
        source_data_for['h295r_onedose'],
        source_data_for['h295r_cr']
        )

    if write_dir:
        results_management.write_table(
            hormones,
            write_dir,
            effects_settings['hormones_file']
            )

    return hormones
#endregion

#region: hormone_synthesis_summary
def hormone_synthesis_summary(onedose, conc_response):
    '''
    Merge the single dose and concentration-response H295R results and
    summarize E2 and P4 synthesis.

    Parameters
    ----------
    onedose : pandas.DataFrame
        Columns 'CASRN', 'E2P4_onedose_chem', 'E2_onedose_up',
        'P4_onedose_up'.
    conc_response : pandas.DataFrame
        Columns 'CASRN', 'E2P4_CR_chem', 'E2_CR_up', 'P4_CR_up'.

    Returns
    -------
    pandas.DataFrame
        Columns 'CASRN', 'H295R_chem', the four results, and
        'HormoneSummary'.

    Notes
    -----
    A result is preceded by '*' (e.g., '*E2') where the evidence is weaker:
    positive in the single dose screen but not tested in concentration
    response, or borderline in concentration response.
    '''
    hormones = full_join([onedose, conc_response], on=CASRN_COL)
    hormones['H295R_chem'] = coalesce(
        hormones,
        ['E2P4_onedose_chem', 'E2P4_CR_chem']
        )

    e2_summary = _summarize_hormone(
        hormones['E2_onedose_up'], hormones['E2_CR_up'], 'E2'
        )
    p4_summary = _summarize_hormone(
        hormones['P4_onedose_up'], hormones['P4_CR_up'], 'P4'
        )

    hormones['HormoneSummary'] = case_when(
        hormones,
        [
            ((e2_summary == '_NA') | (p4_summary == '_NA'), '_NA'),
            ((e2_summary == 'E2') & (p4_summary == 'P4'), 'E2, P4'),
            ((e2_summary == '*E2') & (p4_summary == 'P4'), '*E2, P4'),
            ((e2_summary == 'E2') & (p4_summary == '*P4'), 'E2, *P4'),
            ((e2_summary == '*E2') & (p4_summary == '*P4'), '*E2, *P4'),
            (e2_summary == 'negative', p4_summary),
            (p4_summary == 'negative', e2_summary)
        ],
        default='check'
    )

    return (
        hormones[[CASRN_COL, 'H295R_chem'] + HORMONE_COLS]
        .drop_duplicates()
        .reset_index(drop=True)
    )
#endregion

#region: _summarize_hormone
def _summarize_hormone(onedose, conc_response, hormone):
    '''
    Summarize the synthesis of a single hormone ('E2' or 'P4').
    '''
    frame = onedose.to_frame()
    return case_when(
        frame,
        [
            ((onedose == '_NA') | (conc_response == '_NA'), '_NA'),
            ((onedose.isna() | str_detect(onedose, 'negative|no'))
             & ((conc_response == 'ns effect') | conc_response.isna()),
             'negative'),
            ((onedose == 'positive') & (conc_response == 'ns effect'),
             'negative'),
            ((onedose == 'positive') & conc_response.isna(), f'*{hormone}'),
            (conc_response == 'borderline', f'*{hormone}')
        ],
        default=hormone
    )
#endregion

#region: er_activity_from_raw
def er_activity_from_raw(
        effects_settings,
        path_settings,
        log_dir=None,
        write_dir=None
        ):
    '''
    Prepare the ER activity classification from the ER pathway model.
    '''
    er = clean_effects_sources(
        effects_settings,
        path_settings,
        ['er_model'],
        log_dir=log_dir
        )['er_model']

    if write_dir:
        results_management.write_table(
            er,
            write_dir,
            effects_settings['er_file']
            )

    return er
#endregion

#region: effects_table
def effects_table(
        mc_list,
        hormones,
        er,
        gentox,
        bioassays,
        glossary,
        effects_settings
        ):
    '''
    Merge MCs with hormone synthesis, ER activity, genotoxicity, and
    bioassay results, and classify endocrine activity.

    Every chemical that is an MC, was tested for hormone synthesis, or was
    scored by the ER model is included. Genotoxicity is added only for those
    chemicals.

    Parameters
    ----------
    mc_list : pandas.DataFrame
        Output of `mc_list.mc_list_from_raw`.
    hormones : pandas.DataFrame
        Output of `hormone_synthesis_summary`.
    er : pandas.DataFrame
        ER model classification.
    gentox : pandas.DataFrame
        Output of `gentox.gentox_from_raw`.
    bioassays : pandas.DataFrame
        Output of `combine_bioassays`.
    glossary : pandas.DataFrame
    effects_settings : dict

    Returns
    -------
    pandas.DataFrame
        One row per chemical. Missing values are '-'.
    '''
    mc_list = mc_list.rename(columns={DTXSID_COL: 'mc_DTXSID'})
    er = er.rename(columns={'Name': 'ER_chem'})
    gentox = gentox.rename(
        columns={DTXSID_COL: 'gentox_DTXSID', NAME_COL: 'gentox_name'}
        )

    effects = full_join([mc_list, hormones, er], on=CASRN_COL)
    effects = effects.merge(gentox, on=CASRN_COL, how='left')

    # Reconcile identifiers by CASRN, then by preferred name
    effects = chemids.attach_identifiers(effects, glossary)
    name_for_casrn = chemids.mapping_from_glossary(glossary, CASRN_COL, NAME_COL)
    effects['glossary_name'] = effects[CASRN_COL].map(name_for_casrn)
    effects[NAME_COL] = coalesce(
        effects,
        ['glossary_name', 'chem_name', 'H295R_chem', 'ER_chem', 'gentox_name']
        )
    effects[DTXSID_COL] = coalesce(
        effects,
        [DTXSID_COL, 'mc_DTXSID', 'gentox_DTXSID']
        )
    effects = chemids.identifiers_by_name(effects, glossary)

    effects = effects.merge(bioassays, on=CASRN_COL, how='left')
    effects['MC'] = coalesce(effects, ['MC', 'Bioassay'])
    effects['MC_references'] = coalesce(effects, ['MC_references', 'ref'])

    where_radiation = str_detect(
        effects[NAME_COL],
        effects_settings['radiation_pattern'],
        regex=False
        )
    effects.loc[where_radiation, 'Genotoxicity'] = 'positive'

    effects = fill_missing(
        effects,
        [DTXSID_COL, NAME_COL, 'MC', 'MC_references']
        + HORMONE_COLS + ['ERactivity', 'ER_agonist_strength', 'Genotoxicity']
        )

    effects['EDC'] = edc_classification(
        effects['HormoneSummary'],
        effects['ERactivity']
        )
    effects['topEDCscore'] = top_edc_score(effects)

    return sort_by_mc(
        effects.drop_duplicates(subset=BCREL_COLS),
        effects_settings['mc_order']
        )
#endregion

#region: bc_relevant_list
def bc_relevant_list(effects, effects_settings, write_dir=None):
    '''
    Select the breast cancer-relevant chemicals.

    A chemical is relevant if it is an MC, increases E2 or P4 synthesis, or
    is an ER agonist (including weak and mixed activity).

    Returns
    -------
    pandas.DataFrame
    '''
    criteria = effects_settings['bc_relevance']
    where_relevant = (
        effects['MC'].isin(criteria['mc_values'])
        | str_detect(effects['HormoneSummary'], criteria['hormone_pattern'])
        | effects['ERactivity'].isin(criteria['er_activities'])
    )
    bcrel = effects.loc[where_relevant, BCREL_COLS].reset_index(drop=True)

    if write_dir:
        results_management.write_table(
            bcrel,
            write_dir,
            effects_settings['bcrel_file']
            )

    return bcrel
#endregion

#region: mc_and_bioassay_effects
def mc_and_bioassay_effects(effects, effects_settings, write_dir=None):
    '''
    Effects of every MC and of chemicals tested in bioassays without mammary
    tumor evidence.

    Returns
    -------
    pandas.DataFrame
        Columns as in the BC-relevant list, with 'MC' recoded as
        'MammaryTumorEvidence' ('MC', 'MC_equivocal', or 'Bioassay_noMC') and
        'MC_references' renamed to 'MammaryTumorRefs'.
    '''
    evidence_for_mc = effects_settings['mammary_tumor_evidence']
    where_tested = effects['MC'].isin(list(evidence_for_mc))

    mc_effects = effects.loc[where_tested, BCREL_COLS].copy()
    mc_effects['MC'] = mc_effects['MC'].map(evidence_for_mc)
    mc_effects = (
        mc_effects
        .rename(columns={
            'MC': 'MammaryTumorEvidence',
            'MC_references': 'MammaryTumorRefs'
            })
        .reset_index(drop=True)
    )

    if write_dir:
        results_management.write_table(
            mc_effects,
            write_dir,
            effects_settings['mc_effects_file']
            )

    return mc_effects
#endregion

#region: edc_classification
def edc_classification(hormone_summary, er_activity):
    '''
    Classify endocrine activity from hormone synthesis and ER activity.

    Parameters
    ----------
    hormone_summary : pandas.Series
        E.g. 'E2, P4', '*E2', 'negative', '_NA', or '-'.
    er_activity : pandas.Series
        E.g. 'agonist', 'weak_agonist', 'inactive', or '-'.

    Returns
    -------
    pandas.Series
        '-' (no data), 'EDC-' (inactive), 'EDC~' (weak or tentative), or
        'EDC+' (active).
    '''
    frame = hormone_summary.to_frame()
    return case_when(
        frame,
        [
            (str_detect(hormone_summary, '-|NA') & (er_activity == MISSING),
             MISSING),
            (str_detect(hormone_summary, 'negative|-')
             & str_detect(er_activity, 'inactive|-|antag'),
             'EDC-'),
            ((str_detect(hormone_summary, 'negative|-|NA')
              | hormone_summary.isin(['*E2', '*P4', '*E2, *P4']))
             & str_detect(er_activity, 'inactive|-|weak|antag'),
             'EDC~')
        ],
        default='EDC+'
    )
#endregion

#region: top_edc_score
def top_edc_score(effects):
    '''
    Strongest endocrine effect across E2 and P4 synthesis potency and ER
    agonist strength.

    Returns
    -------
    pandas.Series
        'high', 'medium', 'low', or 'borderline'. 'none' for inactive or
        weak EDCs with any concentration-response or ER model data. '-'
        otherwise.
    '''
    e2, p4 = effects['E2_CR_up'], effects['P4_CR_up']
    er_strength = effects['ER_agonist_strength']

    def any_detect(pattern):
        return (
            str_detect(e2, pattern)
            | str_detect(p4, pattern)
            | str_detect(er_strength, pattern)
        )

    return case_when(
        effects,
        [
            (any_detect('high'), 'high'),
            (any_detect('med'), 'medium'),
            (any_detect('low'), 'low'),
            (any_detect('border'), 'borderline'),
            (effects['EDC'].isin(['EDC~', 'EDC-'])
             & ((e2 != MISSING) | (effects['ERactivity'] != MISSING)),
             'none')
        ],
        default=MISSING
    )
#endregion

#region: sort_by_mc
def sort_by_mc(data, mc_order):
    '''
    Sort by CASRN within groups of mammary tumor evidence.

    Evidence absent from `mc_order` sorts last.
    '''
    rank = {mc: i for i, mc in enumerate(mc_order)}
    return (
        data
        .assign(_rank=data['MC'].map(rank).fillna(len(mc_order)))
        .sort_values(['_rank', CASRN_COL], kind='stable')
        .drop(columns='_rank')
        .reset_index(drop=True)
    )
#endregion
