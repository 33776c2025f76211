"""
bda_demos — Demo Model Builders
===============================
PyMC model definitions used by the notebook demos. Each builder takes the
data mapping produced by bda_demos.datasets and returns a pymc.Model, which
makes it a valid model specification for run_sampler().

Observed variables are always named 'y' so the pointwise log-likelihood of
competing models lines up observation by observation.

Models:
    bernoulli_model            theta ~ Beta(1, 1), y ~ Bernoulli(theta)
    binomial_model             theta ~ Beta(1, 1), y ~ Binomial(N, theta)
    two_group_model            independent Beta-Binomial per group
    linear_model               Gaussian linear regression on centered x
    linear_student_t_model     same with Student-t likelihood (robust)
    separate_groups_model      independent mean and sd per group
    pooled_groups_model        one mean and sd for all groups
    hierarchical_groups_model  group means drawn from a common population
"""

from typing import Dict

import numpy as np
import pymc as pm


def bernoulli_model(data: Dict) -> pm.Model:
    with pm.Model() as model:
        theta = pm.Beta('theta', alpha=1.0, beta=1.0)
        pm.Bernoulli('y', p=theta, observed=np.asarray(data['y']))
    return model


def binomial_model(data: Dict) -> pm.Model:
    with pm.Model() as model:
        theta = pm.Beta('theta', alpha=1.0, beta=1.0)
        pm.Binomial('y', n=data['N'], p=theta, observed=data['y'])
    return model


def two_group_model(data: Dict) -> pm.Model:
    """Two independent binomial groups; the odds ratio is derived afterwards."""
    with pm.Model() as model:
        theta1 = pm.Beta('theta1', alpha=1.0, beta=1.0)
        theta2 = pm.Beta('theta2', alpha=1.0, beta=1.0)
        pm.Binomial('y1', n=data['N1'], p=theta1, observed=data['y1'])
        pm.Binomial('y2', n=data['N2'], p=theta2, observed=data['y2'])
        pm.Deterministic(
            'oddsratio', (theta2 / (1 - theta2)) / (theta1 / (1 - theta1))
        )
    return model


def _linear_mean(data: Dict):
    """Shared priors and linear predictor for the regression models.

    Prior settings can be overridden through the data mapping:
    pmualpha, psalpha, pmubeta, psbeta, pssigma.
    """
    x = np.asarray(data['x'], dtype=float)
    y = np.asarray(data['y'], dtype=float)
    x_mean = float(data.get('x_mean', x.mean()))

    alpha = pm.Normal('alpha',
                      mu=data.get('pmualpha', float(y.mean())),
                      sigma=data.get('psalpha', 100.0))
    beta = pm.Normal('beta',
                     mu=data.get('pmubeta', 0.0),
                     sigma=data.get('psbeta', 10.0))
    sigma = pm.HalfNormal('sigma', sigma=data.get('pssigma', max(float(y.std()), 1.0)))

    mu = pm.Deterministic('mu', alpha + beta * (x - x_mean))
    if 'xpred' in data:
        xpred = np.atleast_1d(np.asarray(data['xpred'], dtype=float))
        pm.Deterministic('mu_pred', alpha + beta * (xpred - x_mean))
    return mu, sigma, y


def linear_model(data: Dict) -> pm.Model:
    with pm.Model() as model:
        mu, sigma, y = _linear_mean(data)
        pm.Normal('y', mu=mu, sigma=sigma, observed=y)
    return model


def linear_student_t_model(data: Dict) -> pm.Model:
    with pm.Model() as model:
        mu, sigma, y = _linear_mean(data)
        nu = pm.Gamma('nu', alpha=2.0, beta=0.1)
        pm.StudentT('y', nu=nu, mu=mu, sigma=sigma, observed=y)
    return model


def _group_inputs(data: Dict):
    y = np.asarray(data['y_flat'], dtype=float)
    group = np.asarray(data['group'], dtype=int)
    return y, group, int(data['J']), float(y.mean())


def separate_groups_model(data: Dict) -> pm.Model:
    y, group, n_groups, y_mean = _group_inputs(data)
    with pm.Model() as model:
        mu = pm.Normal('mu', mu=y_mean, sigma=100.0, shape=n_groups)
        sigma = pm.HalfNormal('sigma', sigma=100.0, shape=n_groups)
        pm.Normal('y', mu=mu[group], sigma=sigma[group], observed=y)
    return model


def pooled_groups_model(data: Dict) -> pm.Model:
    y, _, _, y_mean = _group_inputs(data)
    with pm.Model() as model:
        mu = pm.Normal('mu', mu=y_mean, sigma=100.0)
        sigma = pm.HalfNormal('sigma', sigma=100.0)
        pm.Normal('y', mu=mu, sigma=sigma, observed=y)
    return model


def hierarchical_groups_model(data: Dict) -> pm.Model:
    """Group means share a population prior; common residual sd.

    Non-centered: mu = mu0 + sigma0 * z, which avoids the funnel that
    causes divergences with only a handful of groups.
    """
    y, group, n_groups, y_mean = _group_inputs(data)
    with pm.Model() as model:
        mu0 = pm.Normal('mu0', mu=y_mean, sigma=100.0)
        sigma0 = pm.HalfNormal('sigma0', sigma=100.0)
        z = pm.Normal('z', mu=0.0, sigma=1.0, shape=n_groups)
        mu = pm.Deterministic('mu', mu0 + sigma0 * z)
        sigma = pm.HalfNormal('sigma', sigma=100.0)
        pm.Normal('y', mu=mu[group], sigma=sigma, observed=y)
    return model


MODEL_BUILDERS = {
    'bernoulli': bernoulli_model,
    'binomial': binomial_model,
    'two_group': two_group_model,
    'linear': linear_model,
    'linear_student_t': linear_student_t_model,
    'separate': separate_groups_model,
    'pooled': pooled_groups_model,
    'hierarchical': hierarchical_groups_model,
}
