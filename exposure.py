'''
This module identifies chemical use categories and exposure sources for the
breast cancer-relevant chemicals, using CPDat, ExpoCast, Drugs@FDA, FDA
substances added to food, EPA pesticide lists, water disinfection byproducts,
and the Proposition 65 list.

It also writes highlight tables: genotoxic EDCs, FDA-listed drugs, and MCs
that are not listed as carcinogens under Proposition 65.
'''

import pandas as pd

from raw_processing import chemids
from raw_processing import exposure_sources
from utilities import coalesce, fill_missing, full_join, str_detect, unite, MISSING
import results_management

CASRN_COL = chemids.CASRN_COL
DTXSID_COL = chemids.DTXSID_COL
NAME_COL = chemids.NAME_COL

SOURCE_COLS = [
    'Consumer', 'Diet', 'Pharma', 'Pesticide', 'Industrial',
    'Environmental_media', 'HPV', 'U95intake'
]

#region: exposure_sources_from_raw
def exposure_sources_from_raw(
        exposure_settings,
        path_settings,
        glossary,
        log_dir=None,
        write_dir=None
        ):
    '''
    Prepare the exposure sources of each chemical and the Proposition 65
    listings.

    Optionally writes the results and the intermediate tables to disk.

    Parameters
    ----------
    exposure_settings : dict
        Config settings for the exposure sources.
    path_settings : dict
        Config settings for file paths.
    glossary : pandas.DataFrame
        Identifier glossary (CASRN, DTXSID, preferred_name).
    log_dir : str, optional
        Directory for the change log of each source cleaner.
    write_dir : str, optional
        Directory in which the results will be written.

    Returns
    -------
    sources : pandas.DataFrame
        One row per chemical with the columns in `SOURCE_COLS`.
    p65 : pandas.DataFrame
        Columns 'CASRN' and 'Prop65'.
    '''
    source_data_for = clean_exposure_sources(
        exposure_settings,
        path_settings,
        glossary,
        log_dir=log_dir
        )

    cpdat = chemids.attach_identifiers(
        source_data_for['cpdat'], glossary, name_col=NAME_COL
        )
    pesticides = combine_pesticide_lists(
        [source_data_for[source] for source in exposure_settings['pesticide_sources']]
        )
    dbps = exposure_sources.water_dbps_from_names(
        exposure_settings['water_dbps'],
        glossary
        )

    sources = combine_exposure_sources(
        [
            source_data_for['cpdat'],
            source_data_for['expocast'],
            source_data_for['hpv'],
            source_data_for['fda_drugs'],
            source_data_for['eafus'],
            pesticides,
            dbps
        ],
        glossary,
        exposure_settings['naturally_occurring_pattern']
        )
    p65 = source_data_for['prop65']

    if write_dir:
        file_for = exposure_settings['output_files']
        for table, key in [
                (cpdat, 'cpdat'),
                (source_data_for['expocast'], 'expocast'),
                (source_data_for['fda_drugs'], 'fda_drugs'),
                (pesticides, 'pesticides'),
                (sources, 'sources'),
                (p65, 'prop65')
                ]:
            results_management.write_table(table, write_dir, file_for[key])

    return sources, p65
#endregion

#region: clean_exposure_sources
def clean_exposure_sources(
        exposure_settings,
        path_settings,
        glossary,
        log_dir=None
        ):
    '''
    Clean each configured exposure source.

    The Drugs@FDA cleaner matches names against the lower-case glossary.

    Returns
    -------
    dict of str to pandas.DataFrame
    '''
    lowercase_glossary = chemids.lowercase_glossary(glossary)

    source_data_for = {}
    for source, source_settings in exposure_settings['sources'].items():
        if source not in exposure_sources.CLEANER_FOR_SOURCE:
            raise ValueError(f'Unrecognized exposure source: {source}')
        cleaner = exposure_sources.CLEANER_FOR_SOURCE[source](
            source_settings,
            path_settings,
            glossary=lowercase_glossary if source == 'fda_drugs' else glossary
            )
        source_data_for[source] = cleaner.prepare_clean_source_data(log_dir)
    return source_data_for
#endregion

#region: combine_pesticide_lists
def combine_pesticide_lists(pesticide_lists):
    '''
    Combine the EPA conventional, antimicrobial, and biopesticide active
    ingredient lists.

    Each list must contain 'CASRN', 'Chemical Name', and 'Pesticide_EPA'.

    Returns
    -------
    pandas.DataFrame
        One row per CASRN with 'Chemical' and 'Pesticide_EPA'.
    '''
    pesticides = (
        pd.concat(pesticide_lists, ignore_index=True)
        .rename(columns={'Chemical Name': 'Chemical'})
    )
    where_casrn = pesticides[CASRN_COL].notna() & (pesticides[CASRN_COL] != '')
    return (
        pesticides.loc[where_casrn, [CASRN_COL, 'Chemical', 'Pesticide_EPA']]
        .drop_duplicates(subset=CASRN_COL)
        .reset_index(drop=True)
    )
#endregion

#region: combine_exposure_sources
def combine_exposure_sources(tables, glossary, naturally_occurring_pattern):
    '''
    Join the exposure sources and condense them into categories.

    Parameters
    ----------
    tables : list of pandas.DataFrame
        Cleaned sources keyed by CASRN. Identifier and name columns other
        than 'CASRN' are ignored.
    glossary : pandas.DataFrame
    naturally_occurring_pattern : str
        Regular expression of preferred names of naturally occurring dietary
        chemicals.

    Returns
    -------
    pandas.DataFrame
    '''
    ignored_cols = {DTXSID_COL, NAME_COL, 'chemname', 'Chemical'}
    tables = [
        table[[col for col in table if col not in ignored_cols]]
        for table in tables
    ]
    exposure = full_join(tables, on=CASRN_COL)
    exposure = chemids.attach_identifiers(exposure, glossary, name_col=NAME_COL)

    def unite_or_missing(columns):
        united = unite(exposure, columns, sep=', ')
        return united.where(united != '', MISSING)

    exposure['Consumer'] = unite_or_missing(['Consumer_cp', 'Consumer_exp'])

    exposure['Diet'] = unite_or_missing(
        ['FoodSource', 'Diet_cp', 'Diet_exp', 'waterDBP']
        )
    where_natural = str_detect(exposure[NAME_COL], naturally_occurring_pattern)
    exposure.loc[where_natural, 'Diet'] = 'naturally_occurring'

    exposure['Pharma'] = coalesce(exposure, ['FDADrug', 'Pharma_cp'])
    exposure['Pesticide'] = unite_or_missing(
        ['Pesticide_EPA', 'Pesticide_cp', 'Pesticide_exp']
        )
    exposure['Industrial'] = unite_or_missing(['Industrial_cp', 'Industrial_exp'])
    exposure['Environmental_media'] = coalesce(exposure, ['Environment_cp'])
    for col in ('HPV', 'U95intake'):
        if col not in exposure:
            exposure[col] = MISSING

    exposure = fill_missing(exposure, SOURCE_COLS)

    return (
        exposure[[CASRN_COL, DTXSID_COL, NAME_COL] + SOURCE_COLS]
        .drop_duplicates()
        .sort_values(CASRN_COL, kind='stable')
        .reset_index(drop=True)
    )
#endregion

#region: effects_and_sources
def effects_and_sources(bcrel, sources, p65, write_file_name=None, write_dir=None):
    '''
    Add exposure sources and Proposition 65 listings to the breast
    cancer-relevant list.

    Returns
    -------
    pandas.DataFrame
        The BC-relevant columns followed by the exposure sources and
        'Prop65'. Missing values are '-'.
    '''
    sources = sources.drop(columns=[DTXSID_COL, NAME_COL])
    effects_sources = (
        bcrel
        .merge(sources, on=CASRN_COL, how='left')
        .merge(p65, on=CASRN_COL, how='left')
    )
    effects_sources = fill_missing(effects_sources, SOURCE_COLS + ['Prop65'])
    effects_sources = effects_sources.drop_duplicates().reset_index(drop=True)

    if write_dir and write_file_name:
        results_management.write_table(effects_sources, write_dir, write_file_name)

    return effects_sources
#endregion

#region: highlights
def highlights(effects_sources, exposure_settings, write_dir=None):
    '''
    Extract highlight tables from the BC-relevant effects and sources.

    Returns
    -------
    dict of str to pandas.DataFrame
        'edc_gentox': genotoxic chemicals that are also EDC+.
        'bcrel_fda_drugs': chemicals listed in Drugs@FDA.
        'mc_not_p65': MCs not listed as Proposition 65 carcinogens,
        excluding chemicals that are listed as part of a group.
    '''
    where_edc_gentox = (
        (effects_sources['Genotoxicity'] == 'positive')
        & (effects_sources['EDC'] == 'EDC+')
    )
    edc_gentox = effects_sources.loc[where_edc_gentox]

    fda_cols = [
        CASRN_COL, DTXSID_COL, NAME_COL, 'MC', 'HormoneSummary', 'ERactivity',
        'EDC', 'Genotoxicity', 'Pharma'
    ]
    where_fda = str_detect(effects_sources['Pharma'], 'FDA', regex=False)
    fda_drugs = effects_sources.loc[where_fda, fda_cols]

    where_mc_not_p65 = (
        (effects_sources['MC'] == 'MC')
        & ~str_detect(effects_sources['Prop65'], 'Cancer', regex=False)
    )
    for pattern in exposure_settings['p65_group_listed_patterns']:
        where_mc_not_p65 &= ~str_detect(effects_sources[NAME_COL], pattern)
    mc_not_p65 = effects_sources.loc[where_mc_not_p65]

    table_for = {
        'edc_gentox': edc_gentox.reset_index(drop=True),
        'bcrel_fda_drugs': fda_drugs.reset_index(drop=True),
        'mc_not_p65': mc_not_p65.reset_index(drop=True)
    }

    if write_dir:
        file_for = exposure_settings['output_files']
        for key, table in table_for.items():
            results_management.write_table(table, write_dir, file_for[key])

    return table_for
#endregion
