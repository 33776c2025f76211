"""
bda_demos — Convergence Diagnostics
===================================
R-hat (potential scale reduction factor) and effective sample size for
every scalar component of a DrawSet, plus aggregation of the sampler's
divergence and tree-depth flags.

Poor values are reported, never raised: the report carries a
`needs_attention` flag and the list of offending components so the
caller decides what to do.

R-hat:
    W0    = mean within-chain variance (1/n normalisation)
    B/n   = variance of the chain means (1/(m-1) normalisation)
    R-hat = sqrt((W0 + B/n) / W0)

    Chains that agree exactly give R-hat = 1.0.

ESS:
    az.ess on the [chains, draws] array, clipped to [0, chains * draws].
"""

import warnings
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

import arviz as az
import numpy as np

from .config import DiagnosticsConfig
from .draws import DIVERGING, MAX_TREEDEPTH, DrawSet
from .errors import EmptyDrawSetError, InsufficientChainsError


# ═══════════════════════════════════════════════════════════════
# Scalar diagnostics on [chains, draws] arrays
# ═══════════════════════════════════════════════════════════════

def psrf(chains: np.ndarray) -> float:
    """Potential scale reduction factor of one scalar component.

    Args:
        chains: [n_chains, n_draws] array

    Returns:
        R-hat (>= 1.0); inf when chains are constant at different values
    """
    chains = np.asarray(chains, dtype=float)
    n_chains, n_draws = chains.shape
    if n_chains < 2:
        raise InsufficientChainsError(n_chains)
    if n_draws == 0:
        raise EmptyDrawSetError()

    within = float(np.mean(np.var(chains, axis=1)))
    between_over_n = float(np.var(np.mean(chains, axis=1), ddof=1))

    if within <= 0.0:
        return 1.0 if between_over_n <= 0.0 else float('inf')
    return float(np.sqrt((within + between_over_n) / within))


def effective_sample_size(chains: np.ndarray, method: str = 'mean') -> float:
    """Effective sample size of one scalar component.

    Args:
        chains: [n_chains, n_draws] array (a single chain is allowed)
        method: ArviZ ESS method ('mean', 'bulk', 'tail', ...)

    Returns:
        ESS in [0, n_chains * n_draws]
    """
    chains = np.atleast_2d(np.asarray(chains, dtype=float))
    n_chains, n_draws = chains.shape
    total = n_chains * n_draws
    if n_draws == 0:
        raise EmptyDrawSetError()
    if n_draws < 4:
        # Too short to estimate any autocorrelation
        return float(total)

    ess = float(az.ess(chains, method=method))
    return float(np.clip(ess, 0.0, total))


# ═══════════════════════════════════════════════════════════════
# Report
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DiagnosticReport:
    """Convergence and efficiency indicators for one DrawSet."""
    n_chains: int
    n_draws: int
    divergences: int
    max_treedepth_hits: int
    rhat: Mapping[str, float]
    ess: Mapping[str, float]
    rhat_threshold: float
    ess_threshold: float
    flagged: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'rhat', MappingProxyType(dict(self.rhat)))
        object.__setattr__(self, 'ess', MappingProxyType(dict(self.ess)))
        object.__setattr__(self, 'flagged', tuple(self.flagged))

    @property
    def needs_attention(self) -> bool:
        return bool(self.flagged) or self.divergences > 0

    @property
    def max_rhat(self) -> float:
        return max(self.rhat.values())

    @property
    def min_ess(self) -> float:
        return min(self.ess.values())

    def to_dict(self) -> Dict:
        return {
            'n_chains': self.n_chains,
            'n_draws': self.n_draws,
            'divergences': self.divergences,
            'max_treedepth_hits': self.max_treedepth_hits,
            'rhat': dict(self.rhat),
            'ess': dict(self.ess),
            'flagged': list(self.flagged),
            'needs_attention': self.needs_attention,
        }

    def print_report(self):
        """Print a per-component convergence table."""
        total = self.n_chains * self.n_draws
        print("\n[Diagnostics] Convergence Diagnostics:")
        print(f"  Chains: {self.n_chains}, draws per chain: {self.n_draws}")
        print(f"  R-hat (target <= {self.rhat_threshold}), "
              f"ESS (target >= {self.ess_threshold:.0f}):")
        for label in self.rhat:
            r = self.rhat[label]
            e = self.ess[label]
            status = "✗ WARNING" if label in self.flagged else "✓"
            print(f"    {label:<20} R-hat {r:>7.4f}   ESS {e:>8.0f} "
                  f"({e / total:.1%}) {status}")
        print(f"  Divergent transitions: {self.divergences}")
        print(f"  Max tree depth reached: {self.max_treedepth_hits}")
        verdict = "NEEDS ATTENTION" if self.needs_attention else "OK"
        print(f"  Overall: {verdict}")


def _count(stats: Dict[str, np.ndarray], key: str) -> int:
    if key not in stats:
        return 0
    return int(np.count_nonzero(stats[key]))


def compute_diagnostics(draw_set: DrawSet,
                        config: Optional[DiagnosticsConfig] = None,
                        verbose: bool = False) -> DiagnosticReport:
    """Compute R-hat, ESS and sampler-flag counts for a DrawSet.

    Raises:
        InsufficientChainsError: fewer than two chains
        EmptyDrawSetError: no draws
    """
    config = config or DiagnosticsConfig()

    if draw_set.n_chains < 2:
        raise InsufficientChainsError(draw_set.n_chains)
    if draw_set.n_draws == 0:
        raise EmptyDrawSetError()

    rhat = {}
    ess = {}
    flagged = []
    for label, chains in draw_set.scalar_components():
        rhat[label] = psrf(chains)
        ess[label] = effective_sample_size(chains)
        if rhat[label] > config.rhat_threshold or ess[label] < config.ess_threshold:
            flagged.append(label)

    stats = draw_set.sampler_stats
    report = DiagnosticReport(
        n_chains=draw_set.n_chains,
        n_draws=draw_set.n_draws,
        divergences=_count(stats, DIVERGING),
        max_treedepth_hits=_count(stats, MAX_TREEDEPTH),
        rhat=rhat,
        ess=ess,
        rhat_threshold=config.rhat_threshold,
        ess_threshold=config.ess_threshold,
        flagged=flagged,
    )

    if verbose:
        report.print_report()
        if report.needs_attention:
            warnings.warn(
                f"Sampling needs attention: {len(flagged)} flagged components, "
                f"{report.divergences} divergences"
            )

    return report
