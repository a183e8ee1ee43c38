'''
Table helpers shared across the curation steps.

Joins are keyed by CASRN and chained with `functools.reduce`. The remaining
helpers mirror the small set of relational verbs the workflow needs: take the
first non-missing value across columns, unite several columns into one
delimited string, and recode rows with an ordered list of conditions.
'''

import pandas as pd
import numpy as np
from functools import reduce

MISSING = '-'

#region: full_join
def full_join(tables, on='CASRN'):
    '''
    Outer join a sequence of tables on a shared key.

    Rows with a missing key are dropped beforehand, because pandas matches
    missing keys to each other.
    '''
    tables = [table.dropna(subset=on) for table in tables]
    return reduce(
        lambda left, right: left.merge(right, on=on, how='outer'),
        tables
    )
#endregion

#region: coalesce
def coalesce(data, columns):
    '''
    Return the first non-missing value across `columns` for each row.

    Columns absent from `data` are skipped.
    '''
    columns = [col for col in columns if col in data]
    result = pd.Series(np.nan, index=data.index, dtype='object')
    for col in columns:
        result = result.where(result.notna(), data[col].astype('object'))
    return result
#endregion

#region: unite
def unite(data, columns, sep=', ', empty=''):
    '''
    Join the non-missing values across `columns` into a single string.

    Rows where every value is missing receive `empty`.
    '''
    columns = [col for col in columns if col in data]

    def join_row(row):
        values = [str(v) for v in row if pd.notna(v) and str(v) != '']
        return sep.join(values) if values else empty

    if not columns:
        return pd.Series(empty, index=data.index, dtype='object')
    return data[columns].apply(join_row, axis=1).astype('object')
#endregion

#region: str_detect
def str_detect(series, pattern, regex=True, case=True):
    '''Boolean mask of values containing `pattern`; missing values are False.'''
    return (
        series.astype('object')
        .where(series.notna(), '')
        .astype(str)
        .str.contains(pattern, regex=regex, case=case)
    )
#endregion

#region: case_when
def case_when(data, cases, default=np.nan):
    '''
    Recode rows using the first matching condition.

    Parameters
    ----------
    data : pandas.DataFrame
        Provides the index of the result.
    cases : list of tuple
        Pairs of (condition, value). Conditions are boolean Series or arrays;
        values are scalars or Series aligned to `data`.
    default : object, optional
        Value where no condition matches. May be a Series aligned to `data`.

    Returns
    -------
    pandas.Series
    '''
    n = len(data)
    conditions = [
        np.asarray(pd.Series(cond, index=data.index).fillna(False), dtype=bool)
        for cond, _ in cases
    ]
    choices = [
        np.broadcast_to(np.asarray(value, dtype='object'), (n,))
        for _, value in cases
    ]
    default = np.broadcast_to(np.asarray(default, dtype='object'), (n,))
    if not cases:
        return pd.Series(default, index=data.index, dtype='object')
    result = np.select(conditions, choices, default=default)
    return pd.Series(result, index=data.index, dtype='object')
#endregion

#region: fill_missing
def fill_missing(data, columns=None, value=MISSING):
    '''Replace missing values in `columns` (default all) with a placeholder.'''
    data = data.copy()
    if columns is None:
        columns = list(data.columns)
    columns = [col for col in columns if col in data]
    data[columns] = data[columns].astype('object').where(
        data[columns].notna(), value
    )
    return data
#endregion

#region: columns_between
def columns_between(data, first, last):
    '''List the contiguous block of columns from `first` to `last`.'''
    start = data.columns.get_loc(first)
    stop = data.columns.get_loc(last)
    return list(data.columns[start:stop+1])
#endregion

#region: flag_categories
def flag_categories(
        data,
        category_col,
        column_for_category,
        flag_value,
        by='CASRN'
        ):
    '''
    Convert a long column of categories into one flag column per category.

    Each output column holds `flag_value` where the chemical has the category
    and NaN otherwise. Categories without an output column are ignored.
    '''
    flags = pd.DataFrame({by: data[by].drop_duplicates()}).reset_index(drop=True)
    for category, new_col in column_for_category.items():
        where_category = data[category_col] == category
        chemicals = set(data.loc[where_category, by])
        flags[new_col] = (
            pd.Series(flag_value, index=flags.index, dtype='object')
            .where(flags[by].isin(chemicals))
        )
    return flags
#endregion

#region: bin_values
def bin_values(values, bins, default=np.nan):
    '''
    Label numeric values by the first bin whose lower bound they reach.

    Parameters
    ----------
    values : pandas.Series
        Numeric values. Non-numeric and missing values receive `default`.
    bins : list of (float, str)
        Lower bounds with labels, in descending order of the bound.

    Returns
    -------
    pandas.Series
    '''
    values = pd.to_numeric(values, errors='coerce')
    return case_when(
        values.to_frame(),
        [(values >= lower_bound, label) for lower_bound, label in bins],
        default=default
    )
#endregion
