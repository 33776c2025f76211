"""
Plotting helpers for the demos.

Trace and density plots go through ArviZ; everything built from pipeline
results (derived quantities, regression bands, Pareto k, model
comparison) is drawn with matplotlib/seaborn. Every function returns the
figure and optionally saves it as '{save_path}_<kind>.png'.
"""

from typing import Dict, List, Optional, Sequence

import arviz as az
import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

from .comparison import ComparisonResult, LooResult
from .draws import DIVERGING, DrawSet
from .summary import SummaryTable

sns.set_style('whitegrid')


def _finish(fig, save_path: Optional[str], kind: str, show: bool):
    fig.tight_layout()
    if save_path:
        fig.savefig(f"{save_path}_{kind}.png", dpi=150, bbox_inches='tight')
    if show:
        plt.show()
    return fig


def to_inference_data(draw_set: DrawSet, var_names: Optional[List[str]] = None):
    """Wrap a DrawSet as arviz.InferenceData for ArviZ plotting."""
    names = var_names or draw_set.parameter_names
    posterior = {name: np.asarray(draw_set[name]) for name in names}
    sample_stats = {}
    if DIVERGING in draw_set.sampler_stats:
        sample_stats[DIVERGING] = np.asarray(draw_set.sampler_stats[DIVERGING], dtype=bool)
    return az.from_dict(posterior=posterior, sample_stats=sample_stats or None)


def plot_draws(draw_set: DrawSet,
               var_names: Optional[List[str]] = None,
               save_path: Optional[str] = None,
               show: bool = False):
    """Trace plot (chains over iterations) and marginal posterior densities."""
    idata = to_inference_data(draw_set, var_names)

    axes = az.plot_trace(idata, compact=True)
    trace_fig = _finish(np.ravel(axes)[0].figure, save_path, 'trace', show)

    axes = az.plot_posterior(idata, hdi_prob=0.9)
    posterior_fig = _finish(np.ravel(axes)[0].figure, save_path, 'posterior', show)
    return trace_fig, posterior_fig


def plot_derived(values: np.ndarray,
                 label: str,
                 reference: Optional[float] = None,
                 save_path: Optional[str] = None,
                 show: bool = False):
    """Histogram of a derived quantity with an optional reference line."""
    fig, ax = plt.subplots(figsize=(7, 4))
    sns.histplot(values, bins=50, stat='density', color='steelblue', ax=ax)
    if reference is not None:
        ax.axvline(reference, color='k', linestyle='--')
        share = float(np.mean(values < reference))
        ax.set_title(f"p({label} < {reference:g}) = {share:.3f}")
    ax.set_xlabel(label)
    return _finish(fig, save_path, 'derived', show)


def plot_regression(x: np.ndarray,
                    y: np.ndarray,
                    draw_set: DrawSet,
                    mean_name: str = 'mu',
                    quantile_levels: Sequence[float] = (0.05, 0.95),
                    save_path: Optional[str] = None,
                    show: bool = False):
    """Observed points with the posterior mean line and a central band."""
    mu = draw_set.merged(mean_name)
    lower, upper = np.quantile(mu, quantile_levels, axis=0, method='linear')

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.scatter(x, y, s=12, color='k', label='data')
    ax.plot(x, mu.mean(axis=0), color='C0', label='posterior mean')
    ax.fill_between(x, lower, upper, color='C0', alpha=0.3,
                    label=f"{quantile_levels[0]:.0%}-{quantile_levels[-1]:.0%}")
    ax.set_xlabel('x')
    ax.set_ylabel('y')
    ax.legend()
    return _finish(fig, save_path, 'regression', show)


def plot_pareto_k(loo: LooResult,
                  save_path: Optional[str] = None,
                  show: bool = False):
    """Pareto k per observation with the reliability threshold."""
    fig, ax = plt.subplots(figsize=(8, 4))
    # inf (too few tail draws) is left off the axis
    k = np.where(np.isfinite(loo.pareto_k), loo.pareto_k, np.nan)
    colors = np.where(loo.pareto_k > loo.k_threshold, 'C3', 'C0')
    ax.scatter(np.arange(loo.n_obs), k, c=colors, s=15)
    ax.axhline(loo.k_threshold, color='C3', linestyle='--', linewidth=1)
    ax.set_xlabel('Observation')
    ax.set_ylabel('Pareto k')
    ax.set_title(f"{loo.name}: {len(loo.unreliable)} unreliable")
    return _finish(fig, save_path, 'pareto_k', show)


def plot_comparison(result: ComparisonResult,
                    save_path: Optional[str] = None,
                    show: bool = False):
    """elpd_loo with its SE per model; difference SE shown in grey."""
    fig, ax = plt.subplots(figsize=(7, 1.2 + 0.6 * len(result.entries)))
    positions = np.arange(len(result.entries))[::-1]
    for pos, entry in zip(positions, result.entries):
        ax.errorbar(entry.elpd_loo, pos, xerr=entry.se, fmt='o', color='k')
        if entry.rank > 0:
            ax.errorbar(result.best.elpd_loo - entry.elpd_diff, pos - 0.2,
                        xerr=entry.dse, fmt='^', color='grey')
    ax.axvline(result.best.elpd_loo, color='grey', linestyle='--', linewidth=1)
    ax.set_yticks(positions)
    ax.set_yticklabels(result.ranking)
    ax.set_xlabel('elpd_loo')
    return _finish(fig, save_path, 'comparison', show)


def plot_group_means(tables: Dict[str, SummaryTable],
                     labels: Dict[str, List[str]],
                     save_path: Optional[str] = None,
                     show: bool = False):
    """Point estimate and outer quantile interval of group means per model.

    Args:
        tables: model name -> SummaryTable
        labels: model name -> component labels to plot (one per group)
    """
    n_groups = max(len(names) for names in labels.values())
    fig, ax = plt.subplots(figsize=(8, 5))
    offset = np.linspace(-0.2, 0.2, len(tables))
    for shift, (model_name, table) in zip(offset, tables.items()):
        rows = [table[label] for label in labels[model_name]]
        if len(rows) == 1:
            # Pooled model: one mean shared by every group
            rows = rows * n_groups
        lo_q, hi_q = table.quantile_levels[0], table.quantile_levels[-1]
        points = np.array([row.point for row in rows])
        lo = np.array([row.quantiles[lo_q] for row in rows])
        hi = np.array([row.quantiles[hi_q] for row in rows])
        positions = np.arange(len(rows)) + shift
        ax.errorbar(positions, points, yerr=[points - lo, hi - points],
                    fmt='o', capsize=3, label=model_name)
    ax.set_xlabel('Group')
    ax.set_ylabel('Mean')
    ax.legend()
    return _finish(fig, save_path, 'group_means', show)
