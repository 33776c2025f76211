"""
bda_demos — Analysis Workflow and Notebook Demos
================================================
Sequential glue over the sampler and the posterior pipeline:

    build model -> run_sampler -> diagnostics -> summary table
                -> derived probabilities -> PSIS-LOO comparison -> plots

All run settings (seed, chains, cores, thresholds) come from one
AnalysisConfig and are scoped to a single BayesianAnalysis; there is no
process-wide state.

Usage:
    from bda_demos import AnalysisConfig, BayesianAnalysis
    from bda_demos.datasets import bernoulli_data
    from bda_demos.models import bernoulli_model

    analysis = BayesianAnalysis(AnalysisConfig())
    analysis.sample(bernoulli_model, bernoulli_data())
    analysis.report()
    p = analysis.probability(lambda it: it['theta'] > 0.5)

Demos (each runs end to end and returns its results):
    demo_bernoulli, demo_binomial, demo_group_comparison,
    demo_linear_regression, demo_hierarchical, run_all_demos
"""

from dataclasses import replace
from typing import Callable, Dict, Mapping, Optional

import numpy as np

from . import datasets, models, plotting
from .comparison import ComparisonResult, compare
from .config import AnalysisConfig
from .derived import evaluate, odds_ratio, probability
from .diagnostics import DiagnosticReport, compute_diagnostics
from .draws import DrawSet, PointwisePredictive
from .sampler import ModelSpec, run_sampler
from .summary import SummaryTable, summarize


# ═══════════════════════════════════════════════════════════════
# Bayesian Analysis — one sampling run and its pipeline
# ═══════════════════════════════════════════════════════════════

class BayesianAnalysis:
    """Sample one model and reduce its draws to decision quantities.

    Attributes populated after sample():
        draws: DrawSet
        diagnostics: DiagnosticReport (None until diagnose())
        summary: SummaryTable (None until summarize())
    """

    def __init__(self, config: Optional[AnalysisConfig] = None, name: str = 'model'):
        self.config = config or AnalysisConfig()
        self.name = name

        self.draws: Optional[DrawSet] = None
        self.diagnostics: Optional[DiagnosticReport] = None
        self.summary: Optional[SummaryTable] = None

    def _log(self, message: str):
        if self.config.verbose:
            print(f"[{self.name}] {message}")

    def _require_draws(self) -> DrawSet:
        if self.draws is None:
            raise ValueError("No draws available. Run sample() first.")
        return self.draws

    def sample(self, model_spec: ModelSpec, data: Mapping, var_names=None) -> DrawSet:
        """Run the sampler with this analysis' configuration."""
        cfg = self.config.sampler
        self._log(f"Sampling: {cfg.chains} chains x {cfg.draws} draws "
                  f"(tune={cfg.tune}, seed={cfg.seed})")
        self.draws = run_sampler(
            model_spec, data,
            seed=cfg.seed,
            chain_count=cfg.chains,
            iteration_count=cfg.draws,
            config=cfg,
            var_names=var_names,
        )
        self.diagnostics = None
        self.summary = None
        self._log(f"Sampling complete: {self.draws}")
        return self.draws

    def use_draws(self, draws: DrawSet) -> 'BayesianAnalysis':
        """Attach draws produced elsewhere (e.g. a saved run)."""
        self.draws = draws
        self.diagnostics = None
        self.summary = None
        return self

    def diagnose(self) -> DiagnosticReport:
        self.diagnostics = compute_diagnostics(
            self._require_draws(), self.config.diagnostics, verbose=self.config.verbose
        )
        return self.diagnostics

    def summarize(self, quantile_levels=None) -> SummaryTable:
        self.summary = summarize(self._require_draws(), quantile_levels, self.config.summary)
        return self.summary

    def evaluate(self, fn: Callable) -> np.ndarray:
        return evaluate(self._require_draws(), fn)

    def probability(self, predicate: Callable) -> float:
        return probability(self._require_draws(), predicate)

    def pointwise_predictive(self, name: Optional[str] = None) -> PointwisePredictive:
        return self._require_draws().pointwise_predictive(name or self.name)

    def report(self, var_names=None) -> SummaryTable:
        """Diagnose (when possible), summarize and print both."""
        draws = self._require_draws()
        if draws.n_chains >= 2:
            self.diagnose()
        else:
            self._log("Single chain: skipping R-hat diagnostics")

        table = self.summarize()
        if self.config.verbose:
            print(f"\n[{self.name}] Posterior summary:")
            if var_names:
                SummaryTable(
                    [row for label, row in table.items()
                     if label.split('[')[0] in var_names],
                    table.quantile_levels, table.point_estimate,
                ).print_table()
            else:
                table.print_table()
        return table


def compare_analyses(analyses: Mapping[str, BayesianAnalysis],
                     config: Optional[AnalysisConfig] = None) -> ComparisonResult:
    """PSIS-LOO comparison of already-sampled analyses."""
    config = config or AnalysisConfig()
    pointwise = {name: a.pointwise_predictive(name) for name, a in analyses.items()}
    return compare(pointwise, config.comparison, verbose=config.verbose)


# ═══════════════════════════════════════════════════════════════
# Notebook demos
# ═══════════════════════════════════════════════════════════════

def _banner(title: str, verbose: bool):
    if verbose:
        print("\n" + "=" * 70)
        print(title)
        print("=" * 70)


def demo_bernoulli(config: Optional[AnalysisConfig] = None) -> Dict:
    """Bernoulli model: posterior of a success probability."""
    config = config or AnalysisConfig()
    _banner("DEMO: BERNOULLI MODEL", config.verbose)

    analysis = BayesianAnalysis(config, name='bernoulli')
    analysis.sample(models.bernoulli_model, datasets.bernoulli_data(), var_names=['theta'])
    table = analysis.report()
    p_above_half = analysis.probability(lambda it: it['theta'] > 0.5)
    if config.verbose:
        print(f"\n  p(theta > 0.5) = {p_above_half:.3f}")
    return {'analysis': analysis, 'summary': table, 'p_theta_gt_half': p_above_half}


def demo_binomial(config: Optional[AnalysisConfig] = None) -> Dict:
    """Binomial model: same question from an aggregated count."""
    config = config or AnalysisConfig()
    _banner("DEMO: BINOMIAL MODEL", config.verbose)

    analysis = BayesianAnalysis(config, name='binomial')
    analysis.sample(models.binomial_model, datasets.binomial_data(), var_names=['theta'])
    table = analysis.report()
    p_above_half = analysis.probability(lambda it: it['theta'] > 0.5)
    if config.verbose:
        print(f"\n  p(theta > 0.5) = {p_above_half:.3f}")
    return {'analysis': analysis, 'summary': table, 'p_theta_gt_half': p_above_half}


def demo_group_comparison(config: Optional[AnalysisConfig] = None,
                          save_path: Optional[str] = None) -> Dict:
    """Two binomial groups compared through the posterior odds ratio."""
    config = config or AnalysisConfig()
    _banner("DEMO: COMPARISON OF TWO GROUPS", config.verbose)

    analysis = BayesianAnalysis(config, name='two_group')
    analysis.sample(models.two_group_model, datasets.two_group_data(),
                    var_names=['theta1', 'theta2'])
    table = analysis.report()

    odds_fn = odds_ratio('theta1', 'theta2')
    odds = analysis.evaluate(odds_fn)
    p_lower_odds = analysis.probability(lambda it: odds_fn(it) < 1.0)
    if config.verbose:
        q = np.quantile(odds, [0.05, 0.5, 0.95], method='linear')
        print(f"\n  Odds ratio median {q[1]:.3f}, 90% interval [{q[0]:.3f}, {q[2]:.3f}]")
        print(f"  p(odds ratio < 1) = {p_lower_odds:.3f}")

    if save_path:
        plotting.plot_derived(odds, 'odds ratio', reference=1.0, save_path=save_path)

    return {'analysis': analysis, 'summary': table, 'odds_ratio': odds,
            'p_oddsratio_lt_1': p_lower_odds}


def demo_linear_regression(config: Optional[AnalysisConfig] = None,
                           data: Optional[Dict] = None,
                           save_path: Optional[str] = None) -> Dict:
    """Gaussian vs Student-t linear regression, compared with PSIS-LOO.

    Args:
        data: Regression data (x, y); defaults to simulated data with a few
            outliers. Kilpisjärvi temperatures can be passed via
            DatasetLoader(...).load_kilpisjarvi().
    """
    config = config or AnalysisConfig()
    data = data or datasets.simulate_linear_data(n=50, n_outliers=3, seed=config.sampler.seed)
    _banner("DEMO: LINEAR REGRESSION (GAUSSIAN vs STUDENT-T)", config.verbose)

    analyses = {}
    for name, builder in (('gaussian', models.linear_model),
                          ('student_t', models.linear_student_t_model)):
        analysis = BayesianAnalysis(config, name=name)
        analysis.sample(builder, data)
        analysis.report(var_names=['alpha', 'beta', 'sigma', 'nu'])
        analyses[name] = analysis

    p_positive_slope = {
        name: a.probability(lambda it: it['beta'] > 0) for name, a in analyses.items()
    }
    if config.verbose:
        for name, p in p_positive_slope.items():
            print(f"  [{name}] p(beta > 0) = {p:.3f}")

    comparison = compare_analyses(analyses, config)

    if save_path:
        x = np.asarray(data['x'], dtype=float)
        plotting.plot_regression(x, np.asarray(data['y']), analyses['gaussian'].draws,
                                 save_path=f"{save_path}_gaussian")
        plotting.plot_regression(x, np.asarray(data['y']), analyses['student_t'].draws,
                                 save_path=f"{save_path}_student_t")
        plotting.plot_comparison(comparison, save_path=save_path)

    return {'analyses': analyses, 'p_beta_gt_0': p_positive_slope,
            'comparison': comparison}


def demo_hierarchical(config: Optional[AnalysisConfig] = None,
                      save_path: Optional[str] = None) -> Dict:
    """Separate, pooled and hierarchical models of the factory machines."""
    config = config or AnalysisConfig()
    data = datasets.factory_data()
    _banner("DEMO: HIERARCHICAL MODEL (FACTORY MACHINES)", config.verbose)

    builders = {
        'separate': models.separate_groups_model,
        'pooled': models.pooled_groups_model,
        'hierarchical': models.hierarchical_groups_model,
    }
    analyses = {}
    tables = {}
    for name, builder in builders.items():
        analysis = BayesianAnalysis(config, name=name)
        analysis.sample(builder, data)
        tables[name] = analysis.report()
        analyses[name] = analysis

    comparison = compare_analyses(analyses, config)

    if save_path:
        n_groups = data['J']
        labels = {
            'separate': [f"mu[{j}]" for j in range(n_groups)],
            'pooled': ['mu'],
            'hierarchical': [f"mu[{j}]" for j in range(n_groups)],
        }
        plotting.plot_group_means(tables, labels, save_path=save_path)
        for name, loo in comparison.loo_results.items():
            plotting.plot_pareto_k(loo, save_path=f"{save_path}_{name}")

    return {'analyses': analyses, 'summaries': tables, 'comparison': comparison}


def run_all_demos(config: Optional[AnalysisConfig] = None,
                  save_path: Optional[str] = None) -> Dict:
    """Run every notebook demo in order."""
    config = config or AnalysisConfig()
    results = {
        'bernoulli': demo_bernoulli(config),
        'binomial': demo_binomial(config),
        'group_comparison': demo_group_comparison(config, save_path=save_path),
        'linear_regression': demo_linear_regression(config, save_path=save_path),
        'hierarchical': demo_hierarchical(config, save_path=save_path),
    }
    if config.verbose:
        print("\n✓ All demos complete!")
    return results


def quick_config(seed: int = 2024, verbose: bool = True) -> AnalysisConfig:
    """Reduced sampler settings for fast interactive runs."""
    config = AnalysisConfig(verbose=verbose)
    config.sampler = replace(config.sampler, chains=2, draws=500, tune=500, seed=seed)
    return config


if __name__ == '__main__':
    run_all_demos(quick_config())
