"""
bda_demos - Bayesian Data Analysis Demos

Notebook-style Bayesian demos (Bernoulli, Binomial, odds ratios, linear
regression, hierarchical models) over PyMC, plus the posterior pipeline
that turns raw MCMC draws into diagnostics, summary tables, derived
probabilities and PSIS-LOO model comparisons.
"""

__version__ = "0.1.0"

# Configuration and errors
from .config import (
    AnalysisConfig,
    SamplerConfig,
    DiagnosticsConfig,
    SummaryConfig,
    ComparisonConfig,
)
from .errors import (
    BDADemosError,
    SamplingFailedError,
    InsufficientChainsError,
    EmptyDrawSetError,
    ObservationCountMismatchError,
)

# Posterior pipeline
from .draws import DrawSet, PointwisePredictive
from .diagnostics import DiagnosticReport, compute_diagnostics, psrf, effective_sample_size
from .summary import ParameterSummary, SummaryTable, summarize
from .derived import evaluate, probability
from .comparison import ComparisonResult, LooResult, compare, psis_loo

# Sampling engine and demos
from .sampler import run_sampler
from .workflow import BayesianAnalysis, run_all_demos

__all__ = [
    "AnalysisConfig",
    "SamplerConfig",
    "DiagnosticsConfig",
    "SummaryConfig",
    "ComparisonConfig",
    "BDADemosError",
    "SamplingFailedError",
    "InsufficientChainsError",
    "EmptyDrawSetError",
    "ObservationCountMismatchError",
    "DrawSet",
    "PointwisePredictive",
    "DiagnosticReport",
    "compute_diagnostics",
    "psrf",
    "effective_sample_size",
    "ParameterSummary",
    "SummaryTable",
    "summarize",
    "evaluate",
    "probability",
    "ComparisonResult",
    "LooResult",
    "compare",
    "psis_loo",
    "run_sampler",
    "BayesianAnalysis",
    "run_all_demos",
]
