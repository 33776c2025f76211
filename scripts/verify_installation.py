"""
Manual Verification Script for bda_demos
Run this to verify the pipeline and the sampling engine work together.

Usage: python scripts/verify_installation.py
"""

import numpy as np

print("=" * 70)
print("bda_demos - Manual Verification")
print("=" * 70)
print()

# Test 1: Posterior pipeline on synthetic draws
print("[1/3] Testing posterior pipeline on synthetic draws...")
try:
    from bda_demos import DrawSet, compute_diagnostics, summarize, probability

    rng = np.random.default_rng(0)
    draws = DrawSet({'theta': rng.beta(7, 3, size=(4, 1000))})
    report = compute_diagnostics(draws)
    table = summarize(draws, [0.05, 0.5, 0.95])
    p = probability(draws, lambda it: it['theta'] > 0.5)

    print(f"   ✓ Pipeline working!")
    print(f"   - R-hat(theta): {report.rhat['theta']:.4f}")
    print(f"   - ESS(theta): {report.ess['theta']:.0f}")
    print(f"   - Median(theta): {table['theta'].quantiles[0.5]:.3f}")
    print(f"   - p(theta > 0.5): {p:.3f}")
    print()
except Exception as e:
    print(f"   ✗ FAILED: {str(e)}\n")

# Test 2: PSIS-LOO comparison
print("[2/3] Testing PSIS-LOO comparison...")
try:
    from bda_demos import PointwisePredictive, compare

    rng = np.random.default_rng(1)
    a = PointwisePredictive('a', rng.normal(-1.0, 0.2, size=(2, 500, 20)))
    b = PointwisePredictive('b', rng.normal(-1.3, 0.2, size=(2, 500, 20)))
    result = compare([a, b])

    print(f"   ✓ Comparison working!")
    print(f"   - Ranking: {result.ranking}")
    print(f"   - elpd_diff: {result.entries[1].elpd_diff:.2f} ± {result.entries[1].dse:.2f}")
    print()
except Exception as e:
    print(f"   ✗ FAILED: {str(e)}\n")

# Test 3: Sampling engine
print("[3/3] Testing PyMC sampling engine...")
try:
    from bda_demos import SamplerConfig, run_sampler
    from bda_demos.datasets import bernoulli_data
    from bda_demos.models import bernoulli_model

    config = SamplerConfig(chains=2, draws=200, tune=200)
    draws = run_sampler(bernoulli_model, bernoulli_data(), seed=42,
                        chain_count=2, iteration_count=200, config=config)

    print(f"   ✓ Sampler working!")
    print(f"   - {draws}")
    print()
except Exception as e:
    print(f"   ✗ FAILED: {str(e)}\n")

print("=" * 70)
print("Verification complete")
print("=" * 70)
