'''
This module provides functions to persist the curated tables, the
supplemental workbook, and config settings as metadata to the output
directory.
'''

import os
import json
import pandas as pd

#region: write_table
def write_table(data, write_dir, filename):
    '''
    Save a DataFrame to CSV in the output directory.

    Parameters
    ----------
    data : pandas.DataFrame
        Curated table. The index is not written.
    write_dir : str
        Directory for the table. Created if needed.
    filename : str
        Name of the CSV file (e.g., 'MCList_refs.csv').

    Returns
    -------
    str
        Path to the written file.
    '''
    ensure_directory(write_dir)
    table_file = os.path.join(write_dir, filename)
    data.to_csv(table_file, index=False)
    return table_file
#endregion

#region: write_excel_tables
def write_excel_tables(table_for_sheet, excel_file):
    '''
    Write several tables to one workbook, one sheet per table.

    Parameters
    ----------
    table_for_sheet : dict of str to pandas.DataFrame
        Sheet names (at most 31 characters) mapped to tables. Sheets are
        written in insertion order.
    excel_file : str
        Path to the .xlsx workbook.
    '''
    ensure_directory(os.path.dirname(excel_file) or '.')
    with pd.ExcelWriter(excel_file, engine='openpyxl') as writer:
        for sheet_name, table in table_for_sheet.items():
            table.to_excel(writer, sheet_name=sheet_name, index=False)
#endregion

#region: write_metadata
def write_metadata(config):
    '''Write the current configuration settings to JSON.'''
    output_dir = config.path['output_dir']
    ensure_directory(output_dir)
    metadata_file = os.path.join(output_dir, 'metadata.json')
    with open(metadata_file, 'w') as file:
        json.dump(config.__dict__, file, indent=4)
#endregion

#region: ensure_directory
def ensure_directory(path):
    '''
    Ensure that the specified directory exists.

    If the directory does not exist, it is created.
    '''
    if not os.path.exists(path):
        os.makedirs(path)
#endregion
