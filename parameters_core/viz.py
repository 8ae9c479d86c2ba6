"""
Visualization Utilities Module
==============================

Style setup and loading heatmaps.
"""

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for saving plots

import matplotlib.pyplot as plt
import seaborn as sns

from . import config
from .loadings import filter_loadings, sort_loadings
from .results import FactorSolution


def setup_style() -> None:
    """Configure matplotlib and seaborn style settings."""
    sns.set_theme(style='whitegrid')
    plt.rcParams.update({
        'figure.figsize': (10, 6),
        'font.size': 10,
        'axes.titlesize': 12,
        'axes.labelsize': 11,
    })


def plot_loadings(
    solution: FactorSolution,
    sort: bool = True,
    threshold=None,
    digits: int = None,
    ax: plt.Axes = None
) -> plt.Figure:
    """
    Heatmap of a solution's loadings.

    Filtered (missing) loadings are left blank.

    Parameters:
        solution: Fitted FactorSolution
        sort: Group variables by their strongest factor
        threshold: Optional filter_loadings() threshold
        digits: Annotation decimals. Defaults to config.DEFAULT_DIGITS
        ax: Axes to draw on. A new figure is created when omitted

    Returns:
        The matplotlib Figure
    """
    if digits is None:
        digits = config.DEFAULT_DIGITS

    loadings = solution.loadings
    if sort:
        loadings = sort_loadings(loadings)
    if threshold is not None:
        loadings = filter_loadings(loadings, threshold)

    if ax is None:
        height = max(4, 0.5 * len(loadings) + 2)
        fig, ax = plt.subplots(figsize=(2 + 1.5 * solution.n_factors, height))
    else:
        fig = ax.figure

    sns.heatmap(loadings, annot=True, cmap='RdBu_r', center=0, fmt=f'.{digits}f',
                linewidths=0.5, vmin=-1, vmax=1, ax=ax)

    if solution.rotation == 'none':
        ax.set_title('Loadings (no rotation)')
    else:
        ax.set_title(f'Loadings ({solution.rotation} rotation)')
    return fig


def save_figure(fig: plt.Figure, path, dpi: int = None) -> None:
    """
    Save figure with consistent settings and close it.

    Parameters:
        fig: Matplotlib figure
        path: Output file path
        dpi: Resolution. Defaults to config.DEFAULT_DPI
    """
    if dpi is None:
        dpi = config.DEFAULT_DPI

    fig.savefig(path, dpi=dpi, bbox_inches='tight', facecolor='white')
    plt.close(fig)
    print(f"Saved: {path}")
