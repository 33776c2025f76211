"""
bda_demos — Model Comparison (PSIS-LOO)
=======================================
Leave-one-out predictive accuracy from Pareto-smoothed importance
sampling, and ranking of two or more fitted models.

For each observation the raw log importance ratios are -log p(y_i | θ_s).
ArviZ's `psislw` replaces the largest ratios by expected order statistics
of a fitted generalized Pareto distribution and returns the fitted shape
k per observation. Above the configured threshold (0.7 by default) the
LOO estimate for that observation is unreliable.

References:
    Vehtari, Gelman & Gabry (2017), Practical Bayesian model evaluation
    using leave-one-out cross-validation and WAIC.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

import arviz as az
import numpy as np
import pandas as pd
from scipy.special import logsumexp

from .config import ComparisonConfig
from .diagnostics import effective_sample_size
from .draws import PointwisePredictive
from .errors import EmptyDrawSetError, ObservationCountMismatchError


# ═══════════════════════════════════════════════════════════════
# Pareto smoothing
# ═══════════════════════════════════════════════════════════════

def psis_smooth(log_ratios: np.ndarray,
                r_eff: float = 1.0) -> Tuple[np.ndarray, Union[float, np.ndarray]]:
    """Pareto-smooth log importance ratios along the last axis.

    Args:
        log_ratios: [S] or [n_obs, S] raw log importance ratios
        r_eff: Relative MCMC efficiency of the ratios

    Returns:
        (normalised smoothed log weights, Pareto shape k). k is a float for
        one observation, an [n_obs] array otherwise, and inf where the tail
        has too few draws to fit.
    """
    lw, k = az.psislw(np.array(log_ratios, dtype=float), reff=r_eff)
    k = np.asarray(k, dtype=float)
    return np.asarray(lw), (float(k) if k.ndim == 0 else k)


def _relative_efficiency(pointwise: PointwisePredictive) -> float:
    """Mean ESS of exp(log_lik) over the number of draws."""
    log_lik = pointwise.log_lik
    ess = [
        effective_sample_size(np.exp(log_lik[:, :, i] - log_lik[:, :, i].max()))
        for i in range(pointwise.n_obs)
    ]
    return max(float(np.mean(ess)) / pointwise.n_samples, 1e-3)


# ═══════════════════════════════════════════════════════════════
# LOO for a single model
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LooResult:
    """PSIS-LOO estimate for one model."""
    name: str
    elpd_loo: float
    se: float
    p_loo: float
    pointwise: np.ndarray          # [n_obs] elpd contribution per observation
    pareto_k: np.ndarray           # [n_obs]
    k_threshold: float

    @property
    def n_obs(self) -> int:
        return len(self.pointwise)

    @property
    def unreliable(self) -> List[int]:
        """Indices of observations with Pareto k above the threshold."""
        return [int(i) for i in np.flatnonzero(self.pareto_k > self.k_threshold)]

    @property
    def looic(self) -> float:
        return -2.0 * self.elpd_loo


def psis_loo(pointwise: PointwisePredictive,
             config: Optional[ComparisonConfig] = None,
             name: Optional[str] = None) -> LooResult:
    """Leave-one-out expected log predictive density of one model.

    Raises:
        EmptyDrawSetError: no draws or no observations
    """
    config = config or ComparisonConfig()
    log_lik = pointwise.merged()
    n_samples, n_obs = log_lik.shape
    if n_samples == 0 or n_obs == 0:
        raise EmptyDrawSetError(
            f"Model '{pointwise.name}' has {n_samples} draws and {n_obs} observations"
        )

    if config.use_reff and pointwise.has_chains:
        r_eff = _relative_efficiency(pointwise)
    else:
        r_eff = 1.0

    # Smoothing runs along the last axis: [n_obs, S]
    log_weights, k_i = psis_smooth(-log_lik.T, r_eff)
    elpd_i = logsumexp(log_lik.T + log_weights, axis=1)
    lppd_i = logsumexp(log_lik.T, axis=1) - np.log(n_samples)

    return LooResult(
        name=name or pointwise.name,
        elpd_loo=float(np.sum(elpd_i)),
        se=float(np.sqrt(n_obs * np.var(elpd_i))),
        p_loo=float(np.sum(lppd_i - elpd_i)),
        pointwise=elpd_i,
        pareto_k=k_i,
        k_threshold=config.k_threshold,
    )


# ═══════════════════════════════════════════════════════════════
# Comparison of several models
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ComparisonEntry:
    """One ranked row of a model comparison."""
    name: str
    rank: int
    elpd_loo: float
    se: float
    elpd_diff: float       # best elpd_loo minus this model's (>= 0)
    dse: float             # standard error of the pointwise difference
    p_loo: float
    n_unreliable: int


class ComparisonResult:
    """Models ranked by expected log predictive density (best first)."""

    def __init__(self, entries: List[ComparisonEntry], loo_results: Dict[str, LooResult]):
        self.entries = entries
        self.loo_results = loo_results

    @property
    def best(self) -> ComparisonEntry:
        return self.entries[0]

    @property
    def ranking(self) -> List[str]:
        return [entry.name for entry in self.entries]

    def __getitem__(self, name: str) -> ComparisonEntry:
        for entry in self.entries:
            if entry.name == name:
                return entry
        raise KeyError(name)

    def difference(self, first: str, second: str) -> Tuple[float, float]:
        """(elpd_loo[first] - elpd_loo[second], standard error)."""
        diff_i = self.loo_results[first].pointwise - self.loo_results[second].pointwise
        diff = self.loo_results[first].elpd_loo - self.loo_results[second].elpd_loo
        return float(diff), float(np.sqrt(len(diff_i) * np.var(diff_i)))

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame.from_records(
            [{
                'rank': e.rank,
                'elpd_loo': e.elpd_loo,
                'se': e.se,
                'elpd_diff': e.elpd_diff,
                'dse': e.dse,
                'p_loo': e.p_loo,
                'n_unreliable': e.n_unreliable,
            } for e in self.entries],
            index=self.ranking,
        )

    def print_table(self):
        print(f"\n{'Model':<20} {'elpd_loo':>10} {'SE':>8} {'elpd_diff':>10} "
              f"{'dSE':>8} {'p_loo':>8} {'k>thr':>6}")
        print("-" * 76)
        for e in self.entries:
            print(f"{e.name:<20} {e.elpd_loo:>10.2f} {e.se:>8.2f} {e.elpd_diff:>10.2f} "
                  f"{e.dse:>8.2f} {e.p_loo:>8.2f} {e.n_unreliable:>6d}")


def compare(pointwise_sets: Union[Sequence[PointwisePredictive],
                                  Mapping],
            config: Optional[ComparisonConfig] = None,
            verbose: bool = False) -> ComparisonResult:
    """Rank models by PSIS-LOO expected log predictive density.

    Args:
        pointwise_sets: PointwisePredictive objects, or a mapping
            name -> PointwisePredictive (the key overrides the model name)
        config: Pareto k threshold and r_eff setting

    Raises:
        ValueError: fewer than two models or duplicate names
        ObservationCountMismatchError: models disagree on observation count
    """
    config = config or ComparisonConfig()

    if isinstance(pointwise_sets, Mapping):
        models = list(pointwise_sets.items())
    else:
        models = [(p.name, p) for p in pointwise_sets]

    if len(models) < 2:
        raise ValueError(f"Need at least two models to compare, got {len(models)}")
    names = [name for name, _ in models]
    if len(set(names)) != len(names):
        raise ValueError(f"Model names must be unique, got {names}")

    counts = {name: p.n_obs for name, p in models}
    if len(set(counts.values())) > 1:
        raise ObservationCountMismatchError(counts)

    loo_results = {name: psis_loo(p, config, name=name) for name, p in models}
    ranked = sorted(names, key=lambda name: loo_results[name].elpd_loo, reverse=True)
    best = loo_results[ranked[0]]

    entries = []
    for rank, name in enumerate(ranked):
        loo = loo_results[name]
        diff_i = best.pointwise - loo.pointwise
        entries.append(ComparisonEntry(
            name=name,
            rank=rank,
            elpd_loo=loo.elpd_loo,
            se=loo.se,
            elpd_diff=best.elpd_loo - loo.elpd_loo,
            dse=float(np.sqrt(len(diff_i) * np.var(diff_i))),
            p_loo=loo.p_loo,
            n_unreliable=len(loo.unreliable),
        ))

    result = ComparisonResult(entries, loo_results)
    if verbose:
        print("\n[Comparison] PSIS-LOO model comparison:")
        result.print_table()
        for name, loo in loo_results.items():
            if loo.unreliable:
                print(f"  ⚠ {name}: {len(loo.unreliable)} observations with "
                      f"Pareto k > {loo.k_threshold} {loo.unreliable}")
    return result
