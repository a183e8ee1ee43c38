'''
Common functions for loading the raw source extracts.

The extracts arrive as CSV, tab- or pipe-delimited text, and Excel
workbooks. Logic for cleaning them can be found in `source_cleaning` and the
source-specific modules.
'''

import os
import chardet
import pandas as pd
from copy import deepcopy

TEXT_EXTENSIONS = ['.csv', '.txt', '.tsv']
EXCEL_EXTENSIONS = ['.xls', '.xlsx']

#region: read_raw_table
def read_raw_table(raw_file, encoding=None, **read_kwargs):
    '''
    Load a raw source extract into a DataFrame.

    Parameters
    ----------
    raw_file : str
        Path to the extract. The extension determines the reader.
    encoding : str, optional
        Encoding of a text extract. Detected with chardet if not given.
    **read_kwargs
        Passed to `pandas.read_csv` or `pandas.read_excel`. For text extracts
        the delimiter is inferred from the first line unless 'sep' is given.

    Returns
    -------
    pandas.DataFrame
    '''
    extension = os.path.splitext(raw_file)[-1].lower()

    if extension in TEXT_EXTENSIONS:
        if encoding is None:
            encoding = detect_encoding(raw_file)
        if 'sep' not in read_kwargs:
            read_kwargs['sep'] = determine_delimiter(raw_file, encoding)
        return pd.read_csv(raw_file, encoding=encoding, **read_kwargs)
    elif extension in EXCEL_EXTENSIONS:
        return pd.read_excel(raw_file, **read_kwargs)
    else:
        raise ValueError(f'Unsupported file extension: {raw_file}')
#endregion

#region: detect_encoding
def detect_encoding(raw_file):
    '''Determine the encoding of a text file dynamically.'''
    with open(raw_file, 'rb') as file:
        raw_data = file.read()
    encoding = chardet.detect(raw_data)['encoding']
    # chardet returns None for empty files
    return encoding or 'utf-8'
#endregion

#region: determine_delimiter
def determine_delimiter(file_path, encoding):
    '''
    Determines the delimiter used in a file.

    Parameters
    ----------
    file_path : str
        The path to the file.
    encoding : str
        The encoding of the file.

    Returns
    -------
    str
        The delimiter used in the file.
    '''
    with open(file_path, 'r', encoding=encoding) as file:
        first_line = file.readline()
        if '\t' in first_line:
            return '\t'
        if '|' in first_line:
            return '|'
        return ','
#endregion

#region: clean_columns
def clean_columns(raw_data, rename_mapper=None):
    '''
    Strip whitespace from the column names and rename them.

    Parameters
    ----------
    raw_data : pd.DataFrame
        The DataFrame to clean.
    rename_mapper : dict, optional
        The dictionary used to rename columns.

    Returns
    -------
    pd.DataFrame
        The cleaned DataFrame.
    '''
    raw_data = raw_data.copy()
    raw_data.columns = [str(col).strip() for col in raw_data.columns]
    if rename_mapper:
        raw_data = raw_data.rename(rename_mapper, axis=1)
    return raw_data
#endregion

#region: set_initial_dtypes
def set_initial_dtypes(raw_data, initial_dtypes):
    '''
    Set consistent data types for each column based on the configuration
    settings.

    Columns absent from the data are skipped.
    '''
    raw_data = raw_data.copy()
    initial_dtypes = deepcopy(initial_dtypes)

    for col, settings in initial_dtypes.items():

        if col not in raw_data:
            continue

        dtype = settings.pop('dtype')

        if dtype == 'string':
            raw_data[col] = to_string(raw_data[col])
        elif dtype == 'numeric':
            raw_data[col] = pd.to_numeric(raw_data[col], **settings)
        elif dtype == 'integer_string':
            raw_data[col] = convert_to_integer_string(raw_data[col])
        else:
            # Infer pandas dtype
            raw_data[col] = raw_data[col].astype(dtype)

    return raw_data
#endregion

#region: to_string
def to_string(series):
    '''
    Convert a pandas Series to strings, while leaving NaNs unchanged.
    '''
    return series.apply(lambda x: x if pd.isna(x) else str(x))
#endregion

#region: convert_to_integer_string
def convert_to_integer_string(series):
    '''
    Convert a pandas Series to integer strings where possible.
    NaNs and non-convertible strings are left unchanged.
    '''
    # Attempt to convert to numeric, coercing errors to NaN
    numeric_series = pd.to_numeric(series, errors='coerce')
    integer_strings = numeric_series.dropna().astype('int').astype('str')

    # Where successfully converted, use the integer string
    series = series.where(numeric_series.isna(), integer_strings)

    return series
#endregion

#region: explode_delimited
def explode_delimited(raw_data, col, sep):
    '''
    Split a delimited column into one row per value.

    Values are stripped of surrounding whitespace and empty values dropped.
    '''
    raw_data = raw_data.copy()
    raw_data[col] = (
        raw_data[col]
        .apply(lambda x: x if pd.isna(x) else str(x).split(sep))
    )
    raw_data = raw_data.explode(col)
    raw_data[col] = to_string(raw_data[col]).str.strip()
    where_value = raw_data[col].notna() & (raw_data[col] != '')
    return raw_data.loc[where_value].reset_index(drop=True)
#endregion
