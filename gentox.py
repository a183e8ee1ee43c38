'''
This module integrates genotoxicity results from CCRIS, EURL ECVAM, NTP,
eChemPortal, and GENE-TOX into a single call per chemical.

These were the sources used to construct the 2021 version of EPA's ToxValDB,
excluding COSMOS.
'''

from raw_processing import chemids
from raw_processing import gentox_sources
from utilities import coalesce, full_join, unite
import results_management

CASRN_COL = chemids.CASRN_COL
DTXSID_COL = chemids.DTXSID_COL
NAME_COL = chemids.NAME_COL

OUTPUT_COLS = [CASRN_COL, DTXSID_COL, NAME_COL, 'Genotoxicity']

#region: gentox_from_raw
def gentox_from_raw(
        gentox_settings,
        path_settings,
        glossary,
        log_dir=None,
        write_dir=None
        ):
    '''
    Prepare the genotoxicity calls from the raw sources.

    Optionally writes the calls to disk.

    Parameters
    ----------
    gentox_settings : dict
        Config settings for the genotoxicity sources.
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
    pandas.DataFrame
        One row per chemical with columns 'CASRN', 'DTXSID',
        'preferred_name', and 'Genotoxicity'.
    '''
    source_data_for = {}
    for source, source_settings in gentox_settings['sources'].items():
        if source not in gentox_sources.CLEANER_FOR_SOURCE:
            raise ValueError(f'Unrecognized genotoxicity source: {source}')
        cleaner = gentox_sources.CLEANER_FOR_SOURCE[source](
            source_settings,
            path_settings,
            glossary=glossary
            )
        source_data_for[source] = cleaner.prepare_clean_source_data(log_dir)

    gentox = combine_gentox_sources(source_data_for, gentox_settings, glossary)

    if write_dir:
        results_management.write_table(
            gentox,
            write_dir,
            gentox_settings['output_file']
            )

    return gentox
#endregion

#region: combine_gentox_sources
def combine_gentox_sources(source_data_for, gentox_settings, glossary):
    '''
    Join the per-source calls and derive the overall genotoxicity call.

    The two ECVAM databases are first combined into a single call.

    Parameters
    ----------
    source_data_for : dict of str to pandas.DataFrame
        Cleaned data for each source key.
    gentox_settings : dict
        Must contain 'sources' with 'name_col' and 'result_col' per source.
    glossary : pandas.DataFrame

    Returns
    -------
    pandas.DataFrame
    '''
    source_data_for = dict(source_data_for)
    sources_settings = dict(gentox_settings['sources'])

    ecvam_settings = gentox_settings['ecvam']
    source_data_for['ecvam'] = gentox_sources.ecvam_overall(
        source_data_for.pop('ecvam_positive'),
        source_data_for.pop('ecvam_negative'),
        result_col=ecvam_settings['result_col']
        )
    sources_settings['ecvam'] = ecvam_settings

    tables, name_cols, result_cols = [], [], []
    for source in gentox_settings['combine_order']:
        source_settings = sources_settings[source]
        name_col = f'{source}_name'
        table = source_data_for[source].rename(
            columns={source_settings['name_col']: name_col}
            )
        keep_cols = [CASRN_COL] + [
            col for col in (name_col, source_settings['result_col'])
            if col in table
        ]
        tables.append(table[keep_cols])
        name_cols.append(name_col)
        result_cols.append(source_settings['result_col'])

    gentox = full_join(tables, on=CASRN_COL)

    gentox['Genotoxicity'] = gentox_sources.call_positive_negative(
        unite(gentox, result_cols, sep=';'),
        'positive',
        'negative'
        )

    gentox = chemids.attach_identifiers(gentox, glossary, name_col=NAME_COL)
    gentox[NAME_COL] = coalesce(gentox, [NAME_COL] + name_cols)

    return (
        gentox[OUTPUT_COLS]
        .drop_duplicates()
        .sort_values(CASRN_COL, kind='stable')
        .reset_index(drop=True)
    )
#endregion
