"""
Error kinds raised by the posterior pipeline.

Precondition failures (too few chains, no draws, mismatched observation
counts) are raised before any computation starts. Poor posterior quality
(high R-hat, low ESS, divergences, large Pareto k) is never an error; it
is reported as data in the result objects.
"""


class BDADemosError(Exception):
    """Base class for all package errors."""


class SamplingFailedError(BDADemosError, RuntimeError):
    """The sampling engine failed (e.g. bad initial values)."""

    def __init__(self, message: str, cause: Exception = None):
        super().__init__(message)
        self.cause = cause


class InsufficientChainsError(BDADemosError, ValueError):
    """PSRF needs at least two chains."""

    def __init__(self, n_chains: int, required: int = 2):
        super().__init__(
            f"Need at least {required} chains for R-hat, got {n_chains}"
        )
        self.n_chains = n_chains
        self.required = required


class EmptyDrawSetError(BDADemosError, ValueError):
    """The draw set contains no draws."""

    def __init__(self, message: str = "Draw set contains no draws"):
        super().__init__(message)


class ObservationCountMismatchError(BDADemosError, ValueError):
    """Compared models were fitted to different numbers of observations."""

    def __init__(self, counts: dict):
        details = ", ".join(f"{name}={n}" for name, n in counts.items())
        super().__init__(f"Observation counts differ between models: {details}")
        self.counts = dict(counts)
