"""
bda_demos — Notebook Demos
==========================
Runs the Bayesian data analysis demos in order:
1. Bernoulli model
2. Binomial model
3. Comparison of two groups (odds ratio)
4. Linear regression: Gaussian vs Student-t, compared with PSIS-LOO
5. Separate, pooled and hierarchical models for the factory data

Usage:
    python examples/notebook_demos.py                      # quick settings
    python examples/notebook_demos.py --full               # 4 chains x 1000 draws
    python examples/notebook_demos.py --kilpisjarvi data/kilpisjarvi-summer-temp.csv
"""

import sys
from pathlib import Path

from bda_demos import AnalysisConfig
from bda_demos.datasets import DatasetLoader
from bda_demos.workflow import (
    demo_bernoulli, demo_binomial, demo_group_comparison,
    demo_hierarchical, demo_linear_regression, quick_config,
)


def main(argv):
    config = AnalysisConfig() if '--full' in argv else quick_config(seed=2024)
    config.sampler.seed = config.sampler.seed or 2024

    regression_data = None
    if '--kilpisjarvi' in argv:
        position = argv.index('--kilpisjarvi') + 1
        if position >= len(argv):
            print(__doc__)
            print("✗ --kilpisjarvi needs the path to the CSV file")
            return 2
        path = Path(argv[position])
        regression_data = DatasetLoader(str(path.parent)).load_kilpisjarvi(path.name)
        # Prior scales from the Kilpisjärvi demo: slope within +-0.1 deg/year
        regression_data.update({'psalpha': 100.0, 'psbeta': 0.1 / 3, 'pssigma': 1.0})

    out_dir = Path('demo_output')
    out_dir.mkdir(exist_ok=True)

    demo_bernoulli(config)
    demo_binomial(config)
    demo_group_comparison(config, save_path=str(out_dir / 'groups'))
    demo_linear_regression(config, data=regression_data, save_path=str(out_dir / 'linear'))
    demo_hierarchical(config, save_path=str(out_dir / 'factory'))

    print(f"\n✓ All demos complete! Figures saved to {out_dir}/")
    return 0


if __name__ == '__main__':
    sys.exit(main(sys.argv[1:]))
