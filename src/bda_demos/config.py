"""
bda_demos — Configuration
=========================
Dataclass configuration for one analysis run.

Everything that used to be process-wide in notebook code (random seed,
number of worker cores, thresholds) lives here and is passed explicitly
to the sampler and the pipeline entry points.

Usage:
    from bda_demos.config import AnalysisConfig, SamplerConfig

    config = AnalysisConfig(sampler=SamplerConfig(chains=4, draws=1000, seed=2024))
    config.save_json('analysis_config.json')
    same = AnalysisConfig.load_json('analysis_config.json')
"""

import json
from dataclasses import dataclass, field, asdict
from typing import Optional, Tuple


# ═══════════════════════════════════════════════════════════════
# Stage configuration
# ═══════════════════════════════════════════════════════════════

@dataclass
class SamplerConfig:
    """Configuration for the external NUTS sampler."""
    chains: int = 4                # Number of MCMC chains
    draws: int = 1000              # Draws per chain (post-tuning)
    tune: int = 1000               # Tuning / warm-up steps per chain
    target_accept: float = 0.8     # NUTS target acceptance rate
    cores: int = 1                 # Parallel worker processes
    seed: Optional[int] = None     # Random seed for reproducibility
    progressbar: bool = False      # Show engine progress bar
    log_likelihood: bool = True    # Store pointwise log-likelihood

    def __post_init__(self):
        if self.chains < 1:
            raise ValueError(f"chains must be >= 1, got {self.chains}")
        if self.draws < 1:
            raise ValueError(f"draws must be >= 1, got {self.draws}")
        if self.tune < 0:
            raise ValueError(f"tune must be >= 0, got {self.tune}")
        if not 0.0 < self.target_accept < 1.0:
            raise ValueError(
                f"target_accept must be in (0, 1), got {self.target_accept}"
            )
        if self.cores < 1:
            raise ValueError(f"cores must be >= 1, got {self.cores}")


@dataclass
class DiagnosticsConfig:
    """Thresholds for the "needs attention" flag."""
    rhat_threshold: float = 1.1    # Flag any R-hat above this
    ess_threshold: float = 400.0   # Flag any ESS below this

    def __post_init__(self):
        if self.rhat_threshold < 1.0:
            raise ValueError(
                f"rhat_threshold must be >= 1.0, got {self.rhat_threshold}"
            )
        if self.ess_threshold < 0:
            raise ValueError(
                f"ess_threshold must be >= 0, got {self.ess_threshold}"
            )


@dataclass
class SummaryConfig:
    """Quantile levels and point estimate for summary tables."""
    quantile_levels: Tuple[float, ...] = (0.05, 0.5, 0.95)
    point_estimate: str = 'mean'   # 'mean' or 'median'

    def __post_init__(self):
        self.quantile_levels = validate_quantile_levels(self.quantile_levels)
        if self.point_estimate not in ('mean', 'median'):
            raise ValueError(
                f"point_estimate must be 'mean' or 'median', got '{self.point_estimate}'"
            )


@dataclass
class ComparisonConfig:
    """Settings for PSIS-LOO model comparison."""
    k_threshold: float = 0.7       # Pareto k above this is unreliable
    use_reff: bool = True          # Correct tail length for autocorrelation


@dataclass
class AnalysisConfig:
    """All configuration for a single analysis run."""
    sampler: SamplerConfig = field(default_factory=SamplerConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)
    comparison: ComparisonConfig = field(default_factory=ComparisonConfig)
    verbose: bool = True

    def to_dict(self) -> dict:
        config_dict = asdict(self)
        config_dict['summary']['quantile_levels'] = list(self.summary.quantile_levels)
        return config_dict

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'AnalysisConfig':
        return cls(
            sampler=SamplerConfig(**config_dict.get('sampler', {})),
            diagnostics=DiagnosticsConfig(**config_dict.get('diagnostics', {})),
            summary=SummaryConfig(**config_dict.get('summary', {})),
            comparison=ComparisonConfig(**config_dict.get('comparison', {})),
            verbose=config_dict.get('verbose', True),
        )

    def save_json(self, filepath: str):
        """Save configuration to a JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load_json(cls, filepath: str) -> 'AnalysisConfig':
        """Load configuration saved by save_json()."""
        with open(filepath) as f:
            return cls.from_dict(json.load(f))


def validate_quantile_levels(levels) -> Tuple[float, ...]:
    """Check quantile probabilities are strictly increasing in (0, 1)."""
    levels = tuple(float(q) for q in levels)
    if len(levels) == 0:
        raise ValueError("At least one quantile level is required")
    for q in levels:
        if not 0.0 < q < 1.0:
            raise ValueError(f"Quantile levels must lie in (0, 1), got {q}")
    for lo, hi in zip(levels, levels[1:]):
        if not lo < hi:
            raise ValueError(
                f"Quantile levels must be strictly increasing, got {list(levels)}"
            )
    return levels
