"""
Tests for the PyMC sampler adapter.

Tests marked slow run real NUTS sampling with tiny settings.
"""

import pytest
import numpy as np
import pymc as pm

from bda_demos import datasets, models
from bda_demos.config import SamplerConfig
from bda_demos.draws import DrawSet
from bda_demos.errors import SamplingFailedError
from bda_demos.sampler import build_model, run_sampler


SMALL = SamplerConfig(chains=2, draws=200, tune=200, cores=1, progressbar=False)


class TestModelResolution:
    """Model specifications are resolved before sampling."""

    def test_builder_called_with_data(self):
        model = build_model(models.bernoulli_model, datasets.bernoulli_data())
        assert isinstance(model, pm.Model)
        assert 'theta' in model.named_vars

    def test_ready_model_passes_through(self):
        model = models.binomial_model(datasets.binomial_data())
        assert build_model(model, {}) is model

    def test_non_callable_rejected(self):
        with pytest.raises(TypeError):
            build_model('bernoulli', {})

    def test_builder_must_return_model(self):
        with pytest.raises(TypeError):
            build_model(lambda data: None, {})

    @pytest.mark.parametrize("name", list(models.MODEL_BUILDERS))
    def test_all_demo_models_build(self, name):
        data = {
            'bernoulli': datasets.bernoulli_data,
            'binomial': datasets.binomial_data,
            'two_group': datasets.two_group_data,
            'linear': lambda: datasets.simulate_linear_data(n=10, seed=0),
            'linear_student_t': lambda: datasets.simulate_linear_data(n=10, seed=0),
            'separate': datasets.factory_data,
            'pooled': datasets.factory_data,
            'hierarchical': datasets.factory_data,
        }[name]()
        model = build_model(models.MODEL_BUILDERS[name], data)
        assert len(model.observed_RVs) >= 1


class TestSamplingFailures:
    """Engine failures surface as SamplingFailedError."""

    def test_builder_error_wrapped(self):
        def broken(data):
            raise KeyError('missing input')

        with pytest.raises(SamplingFailedError) as excinfo:
            run_sampler(broken, {}, seed=1, chain_count=2, iteration_count=10)
        assert isinstance(excinfo.value.cause, KeyError)

    def test_type_error_inside_builder_wrapped(self):
        def bad_builder(data):
            with pm.Model() as model:
                pm.Normal('theta', mu=0.0, sigma=1.0, shape=len(data['n']))
            return model

        with pytest.raises(SamplingFailedError) as excinfo:
            run_sampler(bad_builder, {'n': 10}, seed=1, chain_count=2, iteration_count=10)
        assert isinstance(excinfo.value.cause, TypeError)

    def test_builder_contract_errors_not_wrapped(self):
        with pytest.raises(TypeError):
            run_sampler(lambda data: 'not a model', {}, seed=1,
                        chain_count=2, iteration_count=10)

    @pytest.mark.slow
    def test_impossible_initial_point(self):
        def impossible(data):
            with pm.Model() as model:
                theta = pm.Normal('theta', 0.0, 1.0)
                pm.Potential('never', pm.math.switch(theta > -1e9, -np.inf, 0.0))
            return model

        with pytest.raises(SamplingFailedError):
            run_sampler(impossible, {}, seed=1, chain_count=2, iteration_count=20, config=SMALL)


@pytest.mark.slow
class TestRunSampler:
    """Real sampling with tiny settings."""

    def test_bernoulli_draws(self):
        draws = run_sampler(models.bernoulli_model, datasets.bernoulli_data(),
                            seed=42, chain_count=2, iteration_count=200, config=SMALL)

        assert isinstance(draws, DrawSet)
        assert draws.n_chains == 2
        assert draws.n_draws == 200
        assert 'theta' in draws
        assert np.all((draws.merged('theta') > 0) & (draws.merged('theta') < 1))
        assert draws.log_likelihood.shape == (2, 200, 10)
        assert 'diverging' in draws.sampler_stats

    def test_seed_reproducible(self):
        first = run_sampler(models.binomial_model, datasets.binomial_data(),
                            seed=7, chain_count=2, iteration_count=100, config=SMALL)
        second = run_sampler(models.binomial_model, datasets.binomial_data(),
                             seed=7, chain_count=2, iteration_count=100, config=SMALL)
        np.testing.assert_array_equal(first['theta'], second['theta'])

    def test_without_log_likelihood(self):
        config = SamplerConfig(chains=2, draws=100, tune=100, log_likelihood=False)
        draws = run_sampler(models.binomial_model, datasets.binomial_data(),
                            seed=3, chain_count=2, iteration_count=100, config=config)
        assert draws.log_likelihood is None
