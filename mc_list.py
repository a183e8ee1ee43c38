'''
This module compiles the list of mammary carcinogens (MCs) from references
showing mammary tumor induction by chemicals in vivo.

Each reference source is cleaned separately (see `raw_processing.mc_sources`)
and the results are outer joined on CASRN. Identifiers are then reconciled
against the DSSTox glossary, and the provenance tags of all sources are
combined into a single 'MC_references' column.
'''

import pandas as pd

from raw_processing.mc_sources import CLEANER_FOR_SOURCE
from raw_processing import chemids
from utilities import full_join, coalesce, unite
import results_management

CASRN_COL = chemids.CASRN_COL
DTXSID_COL = chemids.DTXSID_COL
NAME_COL = chemids.NAME_COL

OUTPUT_COLS = [CASRN_COL, DTXSID_COL, 'chem_name', 'MC', 'MC_references']

#region: mc_list_from_raw
def mc_list_from_raw(
        mc_settings,
        path_settings,
        glossary,
        log_dir=None,
        write_dir=None
        ):
    '''
    Prepare the MC list from the raw reference sources.

    Optionally writes the list to disk.

    Parameters
    ----------
    mc_settings : dict
        Config settings for the MC references.
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
        One row per chemical with columns 'CASRN', 'DTXSID', 'chem_name',
        'MC', and 'MC_references'.
    '''
    source_data_for = clean_mc_sources(
        mc_settings,
        path_settings,
        glossary,
        log_dir=log_dir
        )

    mc_list = combine_mc_sources(source_data_for, mc_settings, glossary)

    if write_dir:
        results_management.write_table(
            mc_list,
            write_dir,
            mc_settings['output_file']
            )

    return mc_list
#endregion

#region: clean_mc_sources
def clean_mc_sources(mc_settings, path_settings, glossary, log_dir=None):
    '''
    Clean each configured MC reference source.

    Returns
    -------
    dict of str to pandas.DataFrame
        Cleaned data for each source key, in configuration order.
    '''
    source_data_for = {}
    for source, source_settings in mc_settings['sources'].items():
        if source not in CLEANER_FOR_SOURCE:
            raise ValueError(f'Unrecognized MC source: {source}')
        cleaner = CLEANER_FOR_SOURCE[source](
            source_settings,
            path_settings,
            glossary=glossary
            )
        source_data_for[source] = cleaner.prepare_clean_source_data(log_dir)
    return source_data_for
#endregion

#region: combine_mc_sources
def combine_mc_sources(source_data_for, mc_settings, glossary):
    '''
    Join the cleaned sources and reconcile chemical identifiers.

    Parameters
    ----------
    source_data_for : dict of str to pandas.DataFrame
        Output of `clean_mc_sources`.
    mc_settings : dict
        Must contain 'sources' (with 'name_col' and 'result_col' per source)
        and 'positive_references'. May contain 'manual_dtxsids' and
        'manual_names' for chemicals missing from the glossary.
    glossary : pandas.DataFrame

    Returns
    -------
    pandas.DataFrame
    '''
    tables = []
    dtxsid_cols, name_cols, result_cols = [], [], []

    for source, source_data in source_data_for.items():
        source_settings = mc_settings['sources'][source]
        result_col = source_settings['result_col']

        # Prefix identifiers so that the joined columns don't collide
        dtxsid_col, name_col = f'{source}_DTXSID', f'{source}_name'
        table = source_data.rename(
            columns={
                DTXSID_COL: dtxsid_col,
                source_settings['name_col']: name_col
                }
            )
        keep_cols = [CASRN_COL] + [
            col for col in (dtxsid_col, name_col, result_col) if col in table
        ]
        tables.append(table[keep_cols])

        dtxsid_cols.append(dtxsid_col)
        name_cols.append(name_col)
        result_cols.append(result_col)

    mc_data = full_join(tables, on=CASRN_COL)

    mc_data['glossary_DTXSID'] = _identifier_by_casrn(
        mc_data[CASRN_COL],
        chemids.mapping_from_glossary(glossary, CASRN_COL, DTXSID_COL),
        mc_settings.get('manual_dtxsids', {})
        )
    mc_data['glossary_name'] = _identifier_by_casrn(
        mc_data[CASRN_COL],
        chemids.mapping_from_glossary(glossary, CASRN_COL, NAME_COL),
        mc_settings.get('manual_names', {})
        )

    mc_data[DTXSID_COL] = coalesce(mc_data, ['glossary_DTXSID'] + dtxsid_cols)

    # Recover the canonical CASRN registered for each DTXSID
    mc_data = chemids.identifiers_by_dtxsid(mc_data, glossary)

    mc_data['chem_name'] = coalesce(
        mc_data,
        [NAME_COL, 'glossary_name'] + name_cols
        )
    mc_data['MC_references'] = unite(mc_data, result_cols, sep=', ')
    mc_data['MC'] = classify_mc(
        mc_data['MC_references'],
        mc_settings['positive_references']
        )

    return (
        mc_data[OUTPUT_COLS]
        .drop_duplicates()
        .sort_values(CASRN_COL, kind='stable')
        .reset_index(drop=True)
    )
#endregion

#region: _identifier_by_casrn
def _identifier_by_casrn(casrns, glossary_mapping, manual_mapping):
    '''Map CASRNs to an identifier; manual entries override the glossary.'''
    identifiers = casrns.map(glossary_mapping)
    where_manual = casrns.isin(list(manual_mapping))
    return identifiers.where(~where_manual, casrns.map(manual_mapping))
#endregion

#region: classify_mc
def classify_mc(mc_references, positive_references, sep=', '):
    '''
    Label each chemical by the strength of its mammary tumor evidence.

    Parameters
    ----------
    mc_references : pandas.Series
        Provenance tags joined by `sep`, e.g. 'IARC, NTP_equivocal'.
    positive_references : list of str
        Tags denoting positive evidence.

    Returns
    -------
    pandas.Series
        'MC' if any tag denotes positive evidence, otherwise 'MC_equivocal'.
    '''
    positive_references = set(positive_references)

    def label(references):
        tags = {tag.strip() for tag in str(references).split(sep)}
        return 'MC' if tags & positive_references else 'MC_equivocal'

    return mc_references.apply(label)
#endregion

#region: mc_counts_by_reference
def mc_counts_by_reference(mc_list, sep=', '):
    '''
    Count the chemicals supported by each reference tag.

    Returns
    -------
    pandas.Series
        Number of chemicals per tag, sorted in descending order.
    '''
    tags = (
        mc_list['MC_references']
        .str.split(sep)
        .explode()
        .str.strip()
    )
    return tags[tags != ''].value_counts()
#endregion
