'''
Data I/O utilities for the intermediate tables of the workflow.

Each accessor reads its table from the output directory if it was written
by an earlier run, or otherwise builds it from the raw extracts and writes
it. Passing `overwrite=True` always rebuilds.
'''

import pandas as pd
import os

from raw_processing import chemids
import mc_list
import gentox
import bc_relevance
import exposure
import mgdev_comparison

#region: load_glossary
def load_glossary(chemids_settings, path_settings):
    '''
    Load the DSSTox identifier glossary, with manual additions.
    '''
    glossary = chemids.glossary_from_raw(
        path_settings[chemids_settings['file_key']],
        rename=chemids_settings.get('rename'),
        name_fixes=chemids_settings.get('name_fixes')
        )
    additions = chemids_settings.get('additions', [])
    if additions:
        glossary = pd.concat(
            [glossary, chemids.glossary_from_table(additions)],
            ignore_index=True
            )
    return glossary
#endregion

#region: read_table
def read_table(output_dir, filename):
    '''
    Read an intermediate table as strings, keeping '-' and empty strings.
    '''
    return pd.read_csv(
        os.path.join(output_dir, filename),
        dtype=str,
        keep_default_na=False,
        na_values=['']
        )
#endregion

#region: _load_or_build
def _load_or_build(output_dir, filename, build, overwrite=False):
    '''
    Read `filename` from `output_dir` if present; otherwise call `build`.

    `build` is expected to write the table itself.
    '''
    if not overwrite and os.path.exists(os.path.join(output_dir, filename)):
        return read_table(output_dir, filename)
    return build()
#endregion

#region: get_mc_list
def get_mc_list(config, glossary, overwrite=False):
    output_dir = config.path['output_dir']
    return _load_or_build(
        output_dir,
        config.mc['output_file'],
        lambda: mc_list.mc_list_from_raw(
            config.mc,
            config.path,
            glossary,
            log_dir=config.path.get('log_dir'),
            write_dir=output_dir
            ),
        overwrite=overwrite
        )
#endregion

#region: get_gentox
def get_gentox(config, glossary, overwrite=False):
    output_dir = config.path['output_dir']
    return _load_or_build(
        output_dir,
        config.gentox['output_file'],
        lambda: gentox.gentox_from_raw(
            config.gentox,
            config.path,
            glossary,
            log_dir=config.path.get('log_dir'),
            write_dir=output_dir
            ),
        overwrite=overwrite
        )
#endregion

#region: get_bioassays
def get_bioassays(config, overwrite=False):
    output_dir = config.path['output_dir']
    return _load_or_build(
        output_dir,
        config.effects['bioassays_file'],
        lambda: bc_relevance.bioassays_from_raw(
            config.effects,
            config.path,
            log_dir=config.path.get('log_dir'),
            write_dir=output_dir
            ),
        overwrite=overwrite
        )
#endregion

#region: get_hormones
def get_hormones(config, overwrite=False):
    output_dir = config.path['output_dir']
    return _load_or_build(
        output_dir,
        config.effects['hormones_file'],
        lambda: bc_relevance.hormone_synthesis_from_raw(
            config.effects,
            config.path,
            log_dir=config.path.get('log_dir'),
            write_dir=output_dir
            ),
        overwrite=overwrite
        )
#endregion

#region: get_er_activity
def get_er_activity(config, overwrite=False):
    output_dir = config.path['output_dir']
    return _load_or_build(
        output_dir,
        config.effects['er_file'],
        lambda: bc_relevance.er_activity_from_raw(
            config.effects,
            config.path,
            log_dir=config.path.get('log_dir'),
            write_dir=output_dir
            ),
        overwrite=overwrite
        )
#endregion

#region: get_effects
def get_effects(config, glossary, overwrite=False):
    '''
    Build the effects table and write the breast cancer-relevant list and
    the effects of MCs and bioassay-tested chemicals.

    The effects table itself is always rebuilt from the intermediates.

    Returns
    -------
    effects : pandas.DataFrame
    bcrel : pandas.DataFrame
    mc_effects : pandas.DataFrame
    '''
    output_dir = config.path['output_dir']

    effects = bc_relevance.effects_table(
        get_mc_list(config, glossary),
        get_hormones(config, overwrite=overwrite),
        get_er_activity(config, overwrite=overwrite),
        get_gentox(config, glossary),
        get_bioassays(config, overwrite=overwrite),
        glossary,
        config.effects
        )
    bcrel = bc_relevance.bc_relevant_list(
        effects,
        config.effects,
        write_dir=output_dir
        )
    mc_effects = bc_relevance.mc_and_bioassay_effects(
        effects,
        config.effects,
        write_dir=output_dir
        )
    return effects, bcrel, mc_effects
#endregion

#region: get_bcrel
def get_bcrel(config, glossary, overwrite=False):
    output_dir = config.path['output_dir']
    return _load_or_build(
        output_dir,
        config.effects['bcrel_file'],
        lambda: get_effects(config, glossary, overwrite=overwrite)[1],
        overwrite=overwrite
        )
#endregion

#region: get_mc_effects
def get_mc_effects(config, glossary, overwrite=False):
    output_dir = config.path['output_dir']
    return _load_or_build(
        output_dir,
        config.effects['mc_effects_file'],
        lambda: get_effects(config, glossary, overwrite=overwrite)[2],
        overwrite=overwrite
        )
#endregion

#region: get_exposure_sources
def get_exposure_sources(config, glossary, overwrite=False):
    '''
    Returns
    -------
    sources : pandas.DataFrame
    p65 : pandas.DataFrame
    '''
    output_dir = config.path['output_dir']
    file_for = config.exposure['output_files']
    if (
        not overwrite
        and os.path.exists(os.path.join(output_dir, file_for['sources']))
        and os.path.exists(os.path.join(output_dir, file_for['prop65']))
        ):
        return (
            read_table(output_dir, file_for['sources']),
            read_table(output_dir, file_for['prop65'])
        )
    return exposure.exposure_sources_from_raw(
        config.exposure,
        config.path,
        glossary,
        log_dir=config.path.get('log_dir'),
        write_dir=output_dir
        )
#endregion

#region: get_effects_and_sources
def get_effects_and_sources(config, glossary, overwrite=False):
    output_dir = config.path['output_dir']
    file_for = config.exposure['output_files']

    def build():
        sources, p65 = get_exposure_sources(config, glossary, overwrite=overwrite)
        return exposure.effects_and_sources(
            get_bcrel(config, glossary),
            sources,
            p65,
            write_file_name=file_for['effects_sources'],
            write_dir=output_dir
            )

    return _load_or_build(
        output_dir,
        file_for['effects_sources'],
        build,
        overwrite=overwrite
        )
#endregion

#region: get_highlights
def get_highlights(config, glossary, overwrite=False):
    '''
    Returns
    -------
    dict of str to pandas.DataFrame
    '''
    return exposure.highlights(
        get_effects_and_sources(config, glossary, overwrite=overwrite),
        config.exposure,
        write_dir=config.path['output_dir']
        )
#endregion

#region: get_mgdev_comparison
def get_mgdev_comparison(config, glossary, overwrite=False):
    output_dir = config.path['output_dir']
    mgdev_settings = config.mgdev

    def build():
        return mgdev_comparison.mgdev_comparison(
            mgdev_comparison.mgdev_list_from_raw(
                mgdev_settings,
                config.path,
                glossary
                ),
            get_hormones(config),
            get_er_activity(config),
            get_gentox(config, glossary),
            get_bioassays(config),
            get_bcrel(config, glossary),
            write_file_name=mgdev_settings['output_file'],
            write_dir=output_dir
            )

    return _load_or_build(
        output_dir,
        mgdev_settings['output_file'],
        build,
        overwrite=overwrite
        )
#endregion
