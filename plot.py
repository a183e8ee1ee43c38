'''
Figures and supplemental tables for the breast cancer-relevant chemicals.

Figures follow the published layout: a stacked bar chart of the top EDC
score of MCs and non-MCs (Figure 2), a mosaic plot of top EDC score by
genotoxicity (Figure 3), and a tiled heatmap of the data available for each
breast cancer-relevant chemical.
'''

import math
import pandas as pd
import numpy as np

import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap
from matplotlib.patches import Patch
from matplotlib_venn import venn2
import seaborn as sns
from statsmodels.graphics.mosaicplot import mosaic

from utilities import case_when, MISSING
import results_management

#region: label_evidence_groups
def label_evidence_groups(mc_effects, evidence_labels):
    '''
    Map mammary tumor evidence to the plotted groups ('MCs', 'Non-MCs').

    Chemicals with evidence absent from `evidence_labels` are dropped.
    '''
    grouped = mc_effects.copy()
    grouped['Group'] = grouped['MammaryTumorEvidence'].map(evidence_labels)
    return grouped.dropna(subset='Group')
#endregion

#region: edc_score_proportions
def edc_score_proportions(mc_effects, plot_settings):
    '''
    Proportion of chemicals at each top EDC score, per evidence group.

    Chemicals without an EDC score ('-') are excluded.

    Returns
    -------
    pandas.DataFrame
        Groups as rows, EDC score levels as columns.
    '''
    grouped = label_evidence_groups(mc_effects, plot_settings['evidence_labels'])
    grouped = grouped.loc[grouped['topEDCscore'] != MISSING]

    counts = (
        pd.crosstab(grouped['Group'], grouped['topEDCscore'])
        .reindex(
            index=plot_settings['group_order'],
            columns=plot_settings['edc_score_levels'],
            fill_value=0
            )
    )
    totals = counts.sum(axis=1).replace(0, np.nan)
    return counts.div(totals, axis=0).fillna(0.)
#endregion

#region: edc_score_stacked_bar
def edc_score_stacked_bar(mc_effects, plot_settings, write_path=None):
    '''
    Stacked proportion bar chart of the top EDC score of MCs and non-MCs.
    '''
    proportions = edc_score_proportions(mc_effects, plot_settings)
    colors = plot_settings['edc_score_colors']
    fig_settings = plot_settings['edc_score_bar']

    fig, ax = plt.subplots(figsize=fig_settings['figsize'])

    bottom = np.zeros(len(proportions))
    for level, color in zip(proportions.columns, colors):
        ax.bar(
            proportions.index,
            proportions[level],
            bottom=bottom,
            color=color,
            edgecolor='black',
            linewidth=0.3,
            label=level
            )
        bottom += proportions[level].to_numpy()

    ax.set_ylabel('Proportion')
    ax.set_ylim(0, 1)
    ax.yaxis.grid(True, color='black', linewidth=0.3)
    ax.set_axisbelow(True)
    for side in ['top', 'right']:
        ax.spines[side].set_visible(False)

    # Highest score on top, as in the stack
    handles, labels = ax.get_legend_handles_labels()
    ax.legend(
        handles[::-1],
        labels[::-1],
        title='Top EDC score',
        fontsize=7,
        title_fontsize=8,
        bbox_to_anchor=(1.02, 1),
        loc='upper left',
        frameon=False
        )

    plt.tight_layout()

    if write_path:
        fig.savefig(write_path, dpi=fig_settings['dpi'])

    return fig, ax
#endregion

#region: edc_gentox_counts
def edc_gentox_counts(mc_effects, plot_settings):
    '''
    Count chemicals by top EDC score and genotoxicity within each group.

    Chemicals missing either result are excluded. Genotoxicity is
    'positive' or otherwise 'negative'.

    Returns
    -------
    dict of str to dict
        For each group, an ordered mapping of (score, genotoxicity) to the
        number of chemicals. Only observed combinations are included.
    '''
    grouped = label_evidence_groups(mc_effects, plot_settings['evidence_labels'])
    where_data = (
        (grouped['topEDCscore'] != MISSING)
        & (grouped['Genotoxicity'] != MISSING)
    )
    grouped = grouped.loc[where_data].copy()
    grouped['Genotoxicity'] = case_when(
        grouped,
        [(grouped['Genotoxicity'] == 'positive', 'positive')],
        default='negative'
    )

    counts_for = {}
    for group in plot_settings['group_order']:
        subset = grouped.loc[grouped['Group'] == group]
        counts = subset.groupby(['topEDCscore', 'Genotoxicity']).size()
        counts_for[group] = {
            (score, genotox): int(counts[(score, genotox)])
            for score in reversed(plot_settings['edc_score_levels'])
            for genotox in ['positive', 'negative']
            if (score, genotox) in counts.index
        }
    return counts_for
#endregion

#region: edc_gentox_mosaic
def edc_gentox_mosaic(mc_effects, plot_settings, write_path=None):
    '''
    Mosaic plots of top EDC score by genotoxicity, faceted by group.
    '''
    counts_for = edc_gentox_counts(mc_effects, plot_settings)
    fig_settings = plot_settings['edc_gentox_mosaic']
    color_for_score = dict(zip(
        plot_settings['edc_score_levels'],
        plot_settings['edc_score_colors']
        ))

    def properties(key):
        return {'color': color_for_score[key[0]], 'edgecolor': 'black'}

    groups = list(counts_for)
    fig, axes = plt.subplots(
        1,
        len(groups),
        figsize=fig_settings['figsize'],
        )
    axes = np.atleast_1d(axes)

    for ax, group in zip(axes, groups):
        counts = counts_for[group]
        if not counts:
            ax.set_axis_off()
            continue
        mosaic(
            counts,
            ax=ax,
            gap=0.02,
            properties=properties,
            labelizer=lambda key: ''
            )
        ax.set_title(group, fontsize=10)
        ax.set_xlabel('Top EDC score', fontsize=10)
    axes[0].set_ylabel('Genotoxicity', fontsize=10)

    plt.tight_layout()

    if write_path:
        fig.savefig(write_path, dpi=fig_settings['dpi'])

    return fig, axes
#endregion

#region: heatmap_results
def heatmap_results(bcrel, heatmap_settings):
    '''
    Recode the results of each breast cancer-relevant chemical for the tiled
    heatmap and order chemicals by data depth.

    Data depth weights MCs highest, then hormone synthesis, ER agonism, and
    genotoxicity, so that MCs and chemicals with more data come first.

    Returns
    -------
    pandas.DataFrame
        Indexed by preferred name, with one column per test in the
        configured row order.
    '''
    excluded = bcrel['preferred_name'].isin(heatmap_settings['excluded_names'])
    bcrel = bcrel.loc[~excluded]

    results = pd.DataFrame(index=bcrel.index)
    results['MC'] = case_when(
        bcrel,
        [
            (bcrel['MC'] == 'MC', 'positive'),
            (bcrel['MC'] == 'Bioassay', 'tested.in.bioassay')
        ],
        default='no data'
    )
    hormone = bcrel['HormoneSummary']
    results['E2/P4_synthesis'] = case_when(
        bcrel,
        [
            (hormone.isin(['negative', '_NA']), 'no effect'),
            (hormone == MISSING, 'no data')
        ],
        default='positive'
    )
    er = bcrel['ERactivity']
    results['ER_Agonism'] = case_when(
        bcrel,
        [
            ((er == 'inactive')
             | er.astype(str).str.contains('antagonist', regex=False),
             'no effect'),
            (er == MISSING, 'no data')
        ],
        default='positive'
    )
    results['Genotoxic'] = case_when(
        bcrel,
        [
            (bcrel['Genotoxicity'] == MISSING, 'no data'),
            (bcrel['Genotoxicity'] == 'negative', 'no effect')
        ],
        default='positive'
    )

    weight_for = heatmap_settings['data_depth']
    depth = (results['MC'] == 'positive') * weight_for['MC']
    for test in ['E2/P4_synthesis', 'ER_Agonism', 'Genotoxic']:
        depth = depth + (results[test] != 'no data') * weight_for[test]
    results['data_depth'] = depth
    results.index = bcrel['preferred_name']

    return (
        results
        .sort_values('data_depth', ascending=False, kind='stable')
        [heatmap_settings['test_order']]
    )
#endregion

#region: dataspace_heatmap
def dataspace_heatmap(bcrel, heatmap_settings, write_path=None):
    '''
    Tiled heatmap of the results available for each breast cancer-relevant
    chemical, split into stacked rows that share one legend.
    '''
    results = heatmap_results(bcrel, heatmap_settings)
    levels = list(heatmap_settings['result_colors'])
    colors = list(heatmap_settings['result_colors'].values())
    code_for_level = {level: i for i, level in enumerate(levels)}
    codes = results.apply(lambda col: col.map(code_for_level)).astype(float)

    chems_per_row = heatmap_settings['chems_per_row']
    n_rows = max(1, math.ceil(len(codes) / chems_per_row))

    fig, axes = plt.subplots(
        n_rows,
        1,
        figsize=(
            heatmap_settings['width'],
            heatmap_settings['row_height'] * n_rows + 0.5
            )
        )
    axes = np.atleast_1d(axes)

    for i, ax in enumerate(axes):
        chunk = codes.iloc[i*chems_per_row:(i+1)*chems_per_row]
        # Pad the last row so that tiles are the same width in every row
        tiles = np.full((len(codes.columns), chems_per_row), np.nan)
        tiles[:, :len(chunk)] = chunk.to_numpy().T
        sns.heatmap(
            tiles,
            cmap=ListedColormap(colors),
            vmin=-0.5,
            vmax=len(levels) - 0.5,
            cbar=False,
            xticklabels=False,
            yticklabels=list(codes.columns),
            ax=ax
            )
        ax.tick_params(axis='y', labelsize=6, length=2, width=0.2)
        ax.tick_params(axis='x', length=0)

    handles = [
        Patch(facecolor=color, label=level)
        for level, color in zip(levels, colors)
    ]
    fig.legend(
        handles=handles,
        title='Result',
        loc='lower center',
        ncol=len(levels),
        fontsize=7,
        frameon=False
        )
    fig.tight_layout(rect=(0, 0.05, 1, 1))

    if write_path:
        fig.savefig(write_path)

    return fig, axes
#endregion

#region: bcrel_mgdev_venn
def bcrel_mgdev_venn(bcrel_casrns, mgdev_casrns, title=None, write_path=None):
    '''
    Venn diagram of the overlap between the breast cancer-relevant list and
    the mammary gland development disruptors.
    '''
    bcrel_casrns, mgdev_casrns = set(bcrel_casrns), set(mgdev_casrns)

    fig = plt.figure()
    venn = venn2([bcrel_casrns, mgdev_casrns], ('BC-relevant', 'MGDev'))

    N_union = len(bcrel_casrns | mgdev_casrns)
    count_for_id = {
        '10': len(bcrel_casrns - mgdev_casrns),
        '11': len(bcrel_casrns & mgdev_casrns),
        '01': len(mgdev_casrns - bcrel_casrns)
    }
    for subset_id, N in count_for_id.items():
        label = venn.get_label_by_id(subset_id)
        # Empty subsets have no label
        if label is not None:
            label.set_text(f'{N:,} ({N/N_union*100:.0f}%)')

    plt.title(title)

    if write_path:
        fig.savefig(write_path)

    return fig
#endregion

#region: value_counts_hbar
def value_counts_hbar(counts, title, xlabel, ylabel, write_path=None):
    '''
    Creates a horizontal bar chart of value counts.

    Parameters
    ----------
    counts : pd.Series
        The return of pd.value_counts(), where the index are the categories
        and the values are the counts.
    '''
    default_figsize = plt.rcParams['figure.figsize']
    fig, ax = plt.subplots(
        figsize=default_figsize[::-1]
    )

    counts_sorted = counts.sort_values()

    ax.barh(counts_sorted.index, counts_sorted.values, color='skyblue')

    ax.set_title(title)
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)

    plt.tight_layout()

    if write_path:
        fig.savefig(write_path)

    return fig, ax
#endregion

#region: supplemental_tables
def supplemental_tables(bcrel, mc_effects, edc_gentox, mgdev, excel_file):
    '''
    Write the supplemental tables to a single workbook.

    Table S2 holds the MCs supported only by equivocal evidence.

    Returns
    -------
    dict of str to pandas.DataFrame
        The table for each sheet name.
    '''
    equivocal_mcs = mc_effects.loc[
        mc_effects['MammaryTumorEvidence'] == 'MC_equivocal'
    ]
    table_for_sheet = {
        'Excel Table S1': bcrel,
        'Excel Table S2': equivocal_mcs.reset_index(drop=True),
        'Excel Table S3': edc_gentox,
        'Excel Table S4': mgdev,
        'Excel Table S5': mc_effects
    }
    results_management.write_excel_tables(table_for_sheet, excel_file)
    return table_for_sheet
#endregion
