"""
bda_demos — Draw Sets
=====================
Chain-preserving container for the output of one sampling run.

A DrawSet holds, for every parameter, a read-only array of shape
[chains, draws, *param_shape]. Merged (chain-concatenated) and permuted
views are derived on demand; the stored form always keeps chain
structure, which R-hat and ESS need.

Usage:
    draws = DrawSet({'theta': np.array([[0.1, 0.2], [0.15, 0.25]])})
    draws.n_chains, draws.n_draws        # (2, 2)
    draws.merged('theta')                # [4] array, chain 0 then chain 1

    # From a PyMC / ArviZ run
    draws = DrawSet.from_inference_data(idata)
"""

from collections import OrderedDict
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

import numpy as np


# Sampler metadata keys aggregated by the diagnostics stage
DIVERGING = 'diverging'
MAX_TREEDEPTH = 'reached_max_treedepth'


def _freeze(array: np.ndarray) -> np.ndarray:
    frozen = np.array(array, dtype=float, copy=True)
    frozen.flags.writeable = False
    return frozen


def component_label(name: str, index: Tuple[int, ...]) -> str:
    """Label for one scalar component of a parameter, e.g. 'beta[1,0]'."""
    if not index:
        return name
    return f"{name}[{','.join(str(i) for i in index)}]"


class DrawSet:
    """Immutable, chain-preserving posterior draws.

    Args:
        parameters: Mapping of parameter name to array [chains, draws, ...]
        sampler_stats: Optional per-iteration sampler metadata, each [chains, draws]
        log_likelihood: Optional pointwise log-likelihood [chains, draws, n_obs]
    """

    def __init__(self,
                 parameters: Mapping[str, np.ndarray],
                 sampler_stats: Optional[Mapping[str, np.ndarray]] = None,
                 log_likelihood: Optional[np.ndarray] = None):
        if len(parameters) == 0:
            raise ValueError("DrawSet needs at least one parameter")

        self._params: 'OrderedDict[str, np.ndarray]' = OrderedDict()
        leading = None
        for name, values in parameters.items():
            values = np.asarray(values)
            if values.ndim < 2:
                raise ValueError(
                    f"Parameter '{name}' must have shape [chains, draws, ...], "
                    f"got {values.shape}"
                )
            if 0 in values.shape[2:]:
                raise ValueError(
                    f"Parameter '{name}' has no components, shape {values.shape}"
                )
            if leading is None:
                leading = values.shape[:2]
            elif values.shape[:2] != leading:
                raise ValueError(
                    f"Parameter '{name}' has {values.shape[:2]} chains x draws, "
                    f"expected {leading}"
                )
            self._params[name] = _freeze(values)

        self._n_chains, self._n_draws = int(leading[0]), int(leading[1])
        if self._n_chains < 1:
            raise ValueError("DrawSet needs at least one chain")

        self._stats: Dict[str, np.ndarray] = {}
        for name, values in (sampler_stats or {}).items():
            values = np.asarray(values)
            if values.shape[:2] != leading:
                raise ValueError(
                    f"Sampler stat '{name}' has shape {values.shape}, expected {leading}"
                )
            frozen = values.copy()
            frozen.flags.writeable = False
            self._stats[name] = frozen

        self._log_lik = None
        if log_likelihood is not None:
            log_likelihood = np.asarray(log_likelihood)
            if log_likelihood.ndim != 3 or log_likelihood.shape[:2] != leading:
                raise ValueError(
                    f"log_likelihood must have shape {leading + ('n_obs',)}, "
                    f"got {log_likelihood.shape}"
                )
            self._log_lik = _freeze(log_likelihood)

    # ── alternative constructors ────────────────────────────────

    @classmethod
    def from_chains(cls, chains: Sequence[Sequence[Mapping[str, object]]],
                    sampler_stats: Optional[Mapping[str, np.ndarray]] = None) -> 'DrawSet':
        """Build from nested chains -> iterations -> {name: value}.

        All chains must have the same number of iterations and every
        iteration the same parameter names and shapes.
        """
        if len(chains) == 0:
            raise ValueError("At least one chain is required")

        n_draws = len(chains[0])
        for c, chain in enumerate(chains):
            if len(chain) != n_draws:
                raise ValueError(
                    f"Chain {c} has {len(chain)} iterations, expected {n_draws}"
                )
        if n_draws == 0:
            raise ValueError("Cannot infer parameter schema from empty chains")

        schema = {name: np.shape(value) for name, value in chains[0][0].items()}
        parameters = {}
        for name, shape in schema.items():
            parameters[name] = np.empty((len(chains), n_draws) + shape)

        for c, chain in enumerate(chains):
            for d, iteration in enumerate(chain):
                if set(iteration) != set(schema):
                    raise ValueError(
                        f"Chain {c} iteration {d} has parameters {sorted(iteration)}, "
                        f"expected {sorted(schema)}"
                    )
                for name, value in iteration.items():
                    if np.shape(value) != schema[name]:
                        raise ValueError(
                            f"Parameter '{name}' changes shape at chain {c} iteration {d}"
                        )
                    parameters[name][c, d] = value

        return cls(parameters, sampler_stats=sampler_stats)

    @classmethod
    def from_inference_data(cls, idata,
                            var_names: Optional[List[str]] = None,
                            observed_names: Optional[List[str]] = None) -> 'DrawSet':
        """Build from an arviz.InferenceData returned by PyMC.

        Args:
            idata: InferenceData with a posterior group
            var_names: Posterior variables to keep (default: all)
            observed_names: Log-likelihood variables to concatenate
                (default: all in the log_likelihood group)
        """
        posterior = idata.posterior
        names = var_names or list(posterior.data_vars)
        parameters = OrderedDict(
            (name, posterior[name].transpose('chain', 'draw', ...).values)
            for name in names
        )

        sampler_stats = {}
        if hasattr(idata, 'sample_stats'):
            for key in (DIVERGING, MAX_TREEDEPTH):
                if key in idata.sample_stats:
                    sampler_stats[key] = idata.sample_stats[key].values

        log_lik = None
        if hasattr(idata, 'log_likelihood'):
            ll_group = idata.log_likelihood
            ll_names = observed_names or list(ll_group.data_vars)
            blocks = []
            for name in ll_names:
                block = ll_group[name].transpose('chain', 'draw', ...).values
                blocks.append(block.reshape(block.shape[0], block.shape[1], -1))
            if blocks:
                log_lik = np.concatenate(blocks, axis=2)

        return cls(parameters, sampler_stats=sampler_stats, log_likelihood=log_lik)

    # ── shape and schema ────────────────────────────────────────

    @property
    def n_chains(self) -> int:
        return self._n_chains

    @property
    def n_draws(self) -> int:
        """Draws per chain."""
        return self._n_draws

    @property
    def total_draws(self) -> int:
        return self._n_chains * self._n_draws

    @property
    def parameter_names(self) -> List[str]:
        return list(self._params)

    @property
    def sampler_stats(self) -> Dict[str, np.ndarray]:
        return dict(self._stats)

    @property
    def log_likelihood(self) -> Optional[np.ndarray]:
        return self._log_lik

    def shape(self, name: str) -> Tuple[int, ...]:
        """Shape of a single draw of a parameter."""
        return self[name].shape[2:]

    def __contains__(self, name: str) -> bool:
        return name in self._params

    def __getitem__(self, name: str) -> np.ndarray:
        if name not in self._params:
            raise KeyError(f"Unknown parameter '{name}'. Available: {self.parameter_names}")
        return self._params[name]

    def __len__(self) -> int:
        return self.total_draws

    def __repr__(self) -> str:
        return (f"DrawSet(chains={self.n_chains}, draws={self.n_draws}, "
                f"parameters={self.parameter_names})")

    # ── views ───────────────────────────────────────────────────

    def merged(self, name: str) -> np.ndarray:
        """Chain-concatenated draws [chains * draws, ...] in stored chain order."""
        values = self[name]
        return values.reshape((self.total_draws,) + values.shape[2:])

    def permuted(self, name: str, seed: Optional[int] = None) -> np.ndarray:
        """Merged draws in a random order (chain structure discarded)."""
        rng = np.random.default_rng(seed)
        merged = self.merged(name)
        return merged[rng.permutation(self.total_draws)]

    def iterations(self) -> Iterator[Dict[str, np.ndarray]]:
        """Yield {name: value} per iteration, chain by chain."""
        for c in range(self._n_chains):
            for d in range(self._n_draws):
                yield {name: values[c, d] for name, values in self._params.items()}

    def scalar_components(self) -> Iterator[Tuple[str, np.ndarray]]:
        """Yield (label, [chains, draws] array) for every scalar component."""
        for name, values in self._params.items():
            for index in np.ndindex(*values.shape[2:]):
                yield component_label(name, index), values[(slice(None), slice(None)) + index]

    def pointwise_predictive(self, name: str = 'model') -> 'PointwisePredictive':
        """Pointwise log-likelihood wrapped for model comparison."""
        if self._log_lik is None:
            raise ValueError(
                "DrawSet has no log-likelihood; sample with log_likelihood=True"
            )
        return PointwisePredictive(name, self._log_lik)


class PointwisePredictive:
    """Per-draw, per-observation log-likelihood of one fitted model.

    Args:
        name: Model name used in comparison tables
        log_lik: [chains, draws, n_obs] or, with chains merged, [draws, n_obs]
    """

    def __init__(self, name: str, log_lik: np.ndarray):
        log_lik = np.asarray(log_lik, dtype=float)
        if log_lik.ndim == 2:
            log_lik = log_lik[np.newaxis]
        if log_lik.ndim != 3:
            raise ValueError(
                f"log_lik must be [chains, draws, n_obs] or [draws, n_obs], "
                f"got shape {log_lik.shape}"
            )
        self.name = name
        self.log_lik = _freeze(log_lik)

    @property
    def n_obs(self) -> int:
        return self.log_lik.shape[2]

    @property
    def n_samples(self) -> int:
        return self.log_lik.shape[0] * self.log_lik.shape[1]

    @property
    def has_chains(self) -> bool:
        return self.log_lik.shape[0] > 1

    def merged(self) -> np.ndarray:
        """[n_samples, n_obs] with chains concatenated."""
        return self.log_lik.reshape(self.n_samples, self.n_obs)

    def __repr__(self) -> str:
        return f"PointwisePredictive('{self.name}', samples={self.n_samples}, n_obs={self.n_obs})"
