'''
Main entry point for the breast cancer-relevant chemicals workflow.

Runs one or more steps of the workflow in order. Intermediate tables written
by earlier runs are reused unless --overwrite is given. Persists the config
settings as metadata.

Parameters
-----------
-c, --config_file : str, optional
    Path to the 'main' config file (default: 'config.json').
-e, --encoding : str, optional
    Encoding for the configuration files (default: 'utf-8').
-s, --steps : list of str, optional
    Steps to run, any of 'mc', 'gentox', 'effects', 'exposure', 'mgdev',
    'figures'. Default: all steps.
-o, --overwrite : flag
    Rebuild the tables of the selected steps even if they already exist.

Examples
--------
# 1. Run the full workflow:
$ python run.py

# 2. Rebuild the MC list and regenerate the figures:
$ python run.py -s mc figures -o
'''

import argparse
import os

from config_management import base_cli_parser, UnifiedConfiguration
import data_management
import mc_list
import plot
import results_management

STEPS = ['mc', 'gentox', 'effects', 'exposure', 'mgdev', 'figures']

#region: parse_cli_args
def parse_cli_args():
    '''
    Parse command-line arguments for configuring and executing the workflow.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    '''
    parent = base_cli_parser()
    parser = argparse.ArgumentParser(
        parents=[parent],
        description='Curate breast cancer-relevant chemicals and their '
                    'exposure sources.'
    )
    parser.add_argument(
        '-s',
        '--steps',
        type=str,
        nargs='+',
        choices=STEPS,
        default=STEPS,
        help='Steps of the workflow to run, in order'
    )
    parser.add_argument(
        '-o',
        '--overwrite',
        action='store_true',
        help='Rebuild the tables of the selected steps'
    )
    return parser.parse_args()
#endregion

#region: run_steps
def run_steps(config, steps, overwrite=False):
    '''
    Run the selected steps of the workflow in their canonical order.
    '''
    for step in steps:
        if step not in STEPS:
            raise ValueError(f'Unrecognized step: {step}')

    glossary = data_management.load_glossary(config.chemids, config.path)

    if 'mc' in steps:
        print('Compiling the mammary carcinogen list...')
        data_management.get_mc_list(config, glossary, overwrite=overwrite)

    if 'gentox' in steps:
        print('Compiling genotoxicity results...')
        data_management.get_gentox(config, glossary, overwrite=overwrite)

    if 'effects' in steps:
        print('Compiling effects of breast cancer-relevant chemicals...')
        data_management.get_effects(config, glossary, overwrite=overwrite)

    if 'exposure' in steps:
        print('Compiling exposure sources...')
        data_management.get_exposure_sources(
            config, glossary, overwrite=overwrite
            )
        data_management.get_effects_and_sources(
            config, glossary, overwrite=overwrite
            )
        data_management.get_highlights(config, glossary)

    if 'mgdev' in steps:
        print('Comparing to mammary gland development disruptors...')
        data_management.get_mgdev_comparison(
            config, glossary, overwrite=overwrite
            )

    if 'figures' in steps:
        print('Plotting figures and writing supplemental tables...')
        make_figures(config, glossary)
#endregion

#region: make_figures
def make_figures(config, glossary):
    '''
    Plot the figures and write the supplemental workbook to the figures
    directory.
    '''
    figures_dir = config.path['figures_dir']
    results_management.ensure_directory(figures_dir)
    plot_settings = config.plot
    file_for = plot_settings['files']

    def figure_path(key):
        return os.path.join(figures_dir, file_for[key])

    bcrel = data_management.get_bcrel(config, glossary)
    mc_effects = data_management.get_mc_effects(config, glossary)
    mgdev = data_management.get_mgdev_comparison(config, glossary)
    highlights = data_management.get_highlights(config, glossary)

    plot.edc_score_stacked_bar(
        mc_effects,
        plot_settings,
        write_path=figure_path('edc_score_bar')
        )
    plot.edc_gentox_mosaic(
        mc_effects,
        plot_settings,
        write_path=figure_path('edc_gentox_mosaic')
        )
    plot.dataspace_heatmap(
        bcrel,
        plot_settings['heatmap'],
        write_path=figure_path('heatmap')
        )
    plot.bcrel_mgdev_venn(
        bcrel['CASRN'],
        mgdev['CASRN'],
        title='Breast Cancer-Relevant vs. MGDev Chemicals',
        write_path=figure_path('venn')
        )
    plot.value_counts_hbar(
        mc_list.mc_counts_by_reference(
            data_management.get_mc_list(config, glossary)
            ),
        title='Mammary Carcinogens by Reference',
        xlabel='Number of Chemicals',
        ylabel='Reference',
        write_path=figure_path('mc_counts')
        )

    plot.supplemental_tables(
        bcrel,
        mc_effects,
        highlights['edc_gentox'],
        mgdev,
        figure_path('supplemental')
        )
#endregion

if __name__ == '__main__':

    args = parse_cli_args()

    config = UnifiedConfiguration(
        config_file=args.config_file,
        encoding=args.encoding
        )

    run_steps(config, args.steps, overwrite=args.overwrite)

    results_management.write_metadata(config)
