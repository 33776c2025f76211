"""
Smoke tests for plotting helpers (Agg backend, no display)
"""

import pytest
import numpy as np
import matplotlib.pyplot as plt

from bda_demos import plotting
from bda_demos.comparison import compare, psis_loo
from bda_demos.draws import DrawSet, PointwisePredictive
from bda_demos.summary import summarize


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


@pytest.fixture
def loglik_models(rng):
    return [PointwisePredictive('a', rng.normal(-1.0, 0.2, size=(2, 200, 15))),
            PointwisePredictive('b', rng.normal(-1.2, 0.2, size=(2, 200, 15)))]


def test_plot_derived_saves(tmp_path, rng):
    prefix = str(tmp_path / 'odds')
    fig = plotting.plot_derived(rng.lognormal(size=500), 'odds ratio',
                                reference=1.0, save_path=prefix)
    assert fig is not None
    assert (tmp_path / 'odds_derived.png').exists()


def test_plot_regression(rng):
    x = np.linspace(0, 1, 10)
    mu = 1.0 + 2.0 * x + rng.normal(0, 0.1, size=(2, 100, 10))
    draws = DrawSet({'mu': mu})
    fig = plotting.plot_regression(x, 1.0 + 2.0 * x, draws)
    assert len(fig.axes) == 1


def test_plot_pareto_k(loglik_models):
    fig = plotting.plot_pareto_k(psis_loo(loglik_models[0]))
    assert len(fig.axes) == 1


def test_plot_comparison(loglik_models):
    fig = plotting.plot_comparison(compare(loglik_models))
    assert len(fig.axes) == 1


def test_plot_group_means(rng):
    separate = DrawSet({'mu': rng.normal(size=(2, 100, 3))})
    pooled = DrawSet({'mu': rng.normal(size=(2, 100))})
    tables = {'separate': summarize(separate), 'pooled': summarize(pooled)}
    labels = {'separate': ['mu[0]', 'mu[1]', 'mu[2]'], 'pooled': ['mu']}
    fig = plotting.plot_group_means(tables, labels)
    assert len(fig.axes) == 1


def test_to_inference_data(rng):
    diverging = np.zeros((2, 50), dtype=bool)
    draws = DrawSet({'theta': rng.uniform(size=(2, 50))},
                    sampler_stats={'diverging': diverging})
    idata = plotting.to_inference_data(draws)
    assert 'theta' in idata.posterior
    assert 'diverging' in idata.sample_stats


def test_plot_draws(tmp_path, rng):
    draws = DrawSet({'theta': rng.uniform(size=(2, 100))})
    prefix = str(tmp_path / 'theta')
    plotting.plot_draws(draws, save_path=prefix)
    assert (tmp_path / 'theta_trace.png').exists()
    assert (tmp_path / 'theta_posterior.png').exists()
