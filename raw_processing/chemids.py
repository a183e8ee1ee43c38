'''
This module provides utility functions specific to the DSSTox identifier
glossary from the CompTox Chemicals Dashboard.

The glossary maps CASRN to DTXSID and preferred chemical name. It is loaded
once and used to reconcile the identifiers reported by every other source.
'''

import pandas as pd

from . import source_loading

CASRN_COL = 'CASRN'
DTXSID_COL = 'DTXSID'
NAME_COL = 'preferred_name'

#region: glossary_from_raw
def glossary_from_raw(chemids_file, rename=None, name_fixes=None):
    '''
    Load and clean the identifier glossary.

    Parameters
    ----------
    chemids_file : str
        Path to the CSV file of DSSTox identifiers mapped to CASRN.
    rename : dict, optional
        Mapping of raw column names to 'CASRN', 'DTXSID', 'preferred_name'.
    name_fixes : dict, optional
        Mapping of CASRN to a corrected preferred name. Some names contain
        characters that do not survive the download.

    Returns
    -------
    pd.DataFrame
    '''
    glossary = source_loading.read_raw_table(chemids_file, dtype=str)
    glossary = source_loading.clean_columns(glossary, rename)
    glossary = glossary[[CASRN_COL, DTXSID_COL, NAME_COL]].copy()
    glossary[CASRN_COL] = glossary[CASRN_COL].str.strip()

    for casrn, name in (name_fixes or {}).items():
        glossary.loc[glossary[CASRN_COL] == casrn, NAME_COL] = name

    return glossary.drop_duplicates().reset_index(drop=True)
#endregion

#region: lowercase_glossary
def lowercase_glossary(glossary):
    '''Lower-case the preferred names for case-insensitive name matching.'''
    glossary = glossary.copy()
    glossary[NAME_COL] = glossary[NAME_COL].str.lower()
    return glossary
#endregion

#region: mapping_from_glossary
def mapping_from_glossary(glossary, key_col, value_col):
    '''
    Generate a mapping between two glossary columns.

    The first entry is retained where a key appears more than once.
    '''
    mapping = (
        glossary
        .dropna(subset=[key_col, value_col])
        .drop_duplicates(subset=key_col)
        .set_index(key_col)[value_col]
        .to_dict()
    )
    return mapping
#endregion

#region: attach_identifiers
def attach_identifiers(data, glossary, name_col=None):
    '''
    Insert DSSTox identifiers by matching on CASRN.

    The glossary takes priority over identifiers reported by the source.

    Parameters
    ----------
    data : pd.DataFrame
        Must contain a 'CASRN' column. May contain 'DTXSID'.
    glossary : pd.DataFrame
    name_col : str, optional
        Column with the source's chemical name. If given, it is replaced by
        the preferred name where one is available.

    Returns
    -------
    pd.DataFrame
    '''
    data = data.copy()

    dtxsid_for_casrn = mapping_from_glossary(glossary, CASRN_COL, DTXSID_COL)
    name_for_casrn = mapping_from_glossary(glossary, CASRN_COL, NAME_COL)

    new_dtxsid = data[CASRN_COL].map(dtxsid_for_casrn)
    if DTXSID_COL in data:
        data[DTXSID_COL] = new_dtxsid.where(
            new_dtxsid.notna(), data[DTXSID_COL]
        )
    else:
        data[DTXSID_COL] = new_dtxsid

    if name_col is not None:
        new_name = data[CASRN_COL].map(name_for_casrn)
        if name_col in data:
            data[name_col] = new_name.where(new_name.notna(), data[name_col])
        else:
            data[name_col] = new_name

    return data
#endregion

#region: identifiers_by_dtxsid
def identifiers_by_dtxsid(data, glossary):
    '''
    Replace CASRNs with the glossary CASRN registered for each DTXSID.

    Returns the data with a canonical 'CASRN' and an added 'preferred_name'
    column (NaN where the DTXSID is not in the glossary).
    '''
    data = data.copy()

    casrn_for_dtxsid = mapping_from_glossary(glossary, DTXSID_COL, CASRN_COL)
    name_for_dtxsid = mapping_from_glossary(glossary, DTXSID_COL, NAME_COL)

    new_casrn = data[DTXSID_COL].map(casrn_for_dtxsid)
    data[CASRN_COL] = new_casrn.where(new_casrn.notna(), data[CASRN_COL])
    data[NAME_COL] = data[DTXSID_COL].map(name_for_dtxsid)

    return data
#endregion

#region: identifiers_by_name
def identifiers_by_name(data, glossary, name_col=NAME_COL):
    '''
    Recover CASRN and DTXSID by matching chemical names to the glossary.

    Identifiers found by name take priority, which consolidates records that
    a source reported under a non-canonical CASRN.
    '''
    data = data.copy()

    casrn_for_name = mapping_from_glossary(glossary, NAME_COL, CASRN_COL)
    dtxsid_for_name = mapping_from_glossary(glossary, NAME_COL, DTXSID_COL)

    new_casrn = data[name_col].map(casrn_for_name)
    new_dtxsid = data[name_col].map(dtxsid_for_name)
    data[CASRN_COL] = new_casrn.where(new_casrn.notna(), data[CASRN_COL])
    if DTXSID_COL in data:
        data[DTXSID_COL] = new_dtxsid.where(
            new_dtxsid.notna(), data[DTXSID_COL]
        )
    else:
        data[DTXSID_COL] = new_dtxsid

    return data
#endregion

#region: glossary_from_table
def glossary_from_table(records):
    '''
    Build a glossary from an in-memory list of (CASRN, DTXSID, name) records.

    Convenient for manual additions and for tests.
    '''
    return pd.DataFrame(records, columns=[CASRN_COL, DTXSID_COL, NAME_COL])
#endregion
