"""
Unit tests for analysis configuration
"""

import pytest

from bda_demos.config import (
    AnalysisConfig, ComparisonConfig, DiagnosticsConfig, SamplerConfig,
    SummaryConfig, validate_quantile_levels,
)


class TestDefaults:

    def test_default_thresholds(self):
        config = AnalysisConfig()
        assert config.diagnostics.rhat_threshold == 1.1
        assert config.diagnostics.ess_threshold == 400
        assert config.comparison.k_threshold == 0.7
        assert config.summary.quantile_levels == (0.05, 0.5, 0.95)

    def test_configs_not_shared(self):
        first = AnalysisConfig()
        second = AnalysisConfig()
        first.sampler.seed = 1
        assert second.sampler.seed is None


class TestValidation:

    @pytest.mark.parametrize("kwargs", [
        {'chains': 0},
        {'draws': 0},
        {'tune': -1},
        {'target_accept': 1.0},
        {'cores': 0},
    ])
    def test_sampler_config_invalid(self, kwargs):
        with pytest.raises(ValueError):
            SamplerConfig(**kwargs)

    def test_diagnostics_config_invalid(self):
        with pytest.raises(ValueError):
            DiagnosticsConfig(rhat_threshold=0.9)
        with pytest.raises(ValueError):
            DiagnosticsConfig(ess_threshold=-1)

    def test_summary_config_invalid(self):
        with pytest.raises(ValueError):
            SummaryConfig(point_estimate='mode')
        with pytest.raises(ValueError):
            SummaryConfig(quantile_levels=(0.9, 0.1))

    def test_quantile_levels_normalised_to_tuple(self):
        assert validate_quantile_levels([0.25, 0.75]) == (0.25, 0.75)


class TestSerialization:

    def test_json_round_trip(self, tmp_path):
        config = AnalysisConfig(
            sampler=SamplerConfig(chains=2, draws=300, seed=7),
            diagnostics=DiagnosticsConfig(ess_threshold=100),
            summary=SummaryConfig(quantile_levels=(0.1, 0.9), point_estimate='median'),
            comparison=ComparisonConfig(k_threshold=0.5),
            verbose=False,
        )
        path = tmp_path / 'config.json'
        config.save_json(str(path))

        loaded = AnalysisConfig.load_json(str(path))

        assert loaded == config

    def test_partial_dict(self):
        config = AnalysisConfig.from_dict({'sampler': {'chains': 3}})
        assert config.sampler.chains == 3
        assert config.diagnostics == DiagnosticsConfig()
