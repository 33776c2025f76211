"""
bda_demos — Sampling Engine Adapter
===================================
The one boundary to the external probabilistic-programming engine.

run_sampler() takes a model specification, a data mapping and run
settings, makes one blocking call into PyMC's NUTS sampler and returns a
DrawSet. Chain parallelism, adaptation and constrained-parameter
transforms all happen inside PyMC; any failure there is surfaced as
SamplingFailedError with the original exception chained.

Usage:
    import pymc as pm

    def coin_model(data):
        with pm.Model() as model:
            theta = pm.Beta('theta', alpha=1.0, beta=1.0)
            pm.Bernoulli('y', p=theta, observed=data['y'])
        return model

    draws = run_sampler(coin_model, {'y': [1, 0, 1, 1]}, seed=42,
                        chain_count=4, iteration_count=1000)
"""

from typing import Callable, Mapping, Optional, Union

import arviz as az
import pymc as pm

from .config import SamplerConfig
from .draws import DrawSet
from .errors import SamplingFailedError

ModelSpec = Union[pm.Model, Callable[[Mapping], pm.Model]]


def build_model(model_spec: ModelSpec, data: Mapping) -> pm.Model:
    """Resolve a model specification into a PyMC model.

    Raises:
        TypeError: model_spec is not a model or builder, or the builder
            returned something other than a pymc.Model
        SamplingFailedError: the builder itself raised
    """
    if isinstance(model_spec, pm.Model):
        return model_spec
    if not callable(model_spec):
        raise TypeError(
            f"model_spec must be a pymc.Model or a callable, got {type(model_spec).__name__}"
        )
    try:
        model = model_spec(data)
    except Exception as e:
        raise SamplingFailedError(f"Model construction failed: {e}", cause=e) from e
    if not isinstance(model, pm.Model):
        raise TypeError(
            f"Model builder returned {type(model).__name__}, expected pymc.Model"
        )
    return model


def sample_inference_data(model_spec: ModelSpec,
                          data: Mapping,
                          config: SamplerConfig) -> az.InferenceData:
    """Run NUTS and return the raw InferenceData.

    Raises:
        SamplingFailedError: the engine raised during build or sampling
    """
    model = build_model(model_spec, data)

    idata_kwargs = {'log_likelihood': True} if config.log_likelihood else None

    try:
        with model:
            idata = pm.sample(
                draws=config.draws,
                tune=config.tune,
                chains=config.chains,
                cores=config.cores,
                target_accept=config.target_accept,
                random_seed=config.seed,
                progressbar=config.progressbar,
                return_inferencedata=True,
                idata_kwargs=idata_kwargs,
            )
    except Exception as e:
        raise SamplingFailedError(f"Sampling failed: {e}", cause=e) from e

    return idata


def run_sampler(model_spec: ModelSpec,
                data: Mapping,
                seed: Optional[int],
                chain_count: int,
                iteration_count: int,
                config: Optional[SamplerConfig] = None,
                var_names=None) -> DrawSet:
    """Sample a model and return its posterior draws.

    Args:
        model_spec: pymc.Model, or callable data -> pymc.Model
        data: Named model inputs (scalars, vectors, matrices)
        seed: Random seed for reproducibility
        chain_count: Number of chains
        iteration_count: Draws per chain after tuning
        config: Remaining sampler settings (tune, target_accept, cores, ...);
            seed, chain_count and iteration_count take precedence over it
        var_names: Posterior variables to keep (default: all)

    Returns:
        DrawSet with sampler stats and, if configured, the pointwise
        log-likelihood

    Raises:
        SamplingFailedError: the engine failed
    """
    base = config or SamplerConfig()
    run_config = SamplerConfig(
        chains=chain_count,
        draws=iteration_count,
        tune=base.tune,
        target_accept=base.target_accept,
        cores=base.cores,
        seed=seed,
        progressbar=base.progressbar,
        log_likelihood=base.log_likelihood,
    )
    idata = sample_inference_data(model_spec, data, run_config)
    return DrawSet.from_inference_data(idata, var_names=var_names)
