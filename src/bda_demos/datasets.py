"""
Demo datasets for bda_demos.

Bundled (small enough to live in code):
- Bernoulli trials: 10 binary outcomes
- Binomial count: 7 successes out of 10
- Two-group trial: 39/674 events (control) vs 22/680 events (treatment)
- Factory: quality measurements, 5 per machine for 6 machines

File-based (loaded with pandas):
- Kilpisjärvi summer temperatures, semicolon separated:
    year;temp.june;temp.july;temp.august;temp.summer
    1952;8.9;13.9;11.1;11.3
    ...

Every loader returns a plain dict of named model inputs, ready to pass to
the model builders in bda_demos.models.
"""
import warnings
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import pandas as pd


BERNOULLI_TRIALS = [1, 1, 1, 0, 1, 1, 1, 0, 1, 0]

BINOMIAL_TRIALS = 10
BINOMIAL_SUCCESSES = 7

TWO_GROUP_TRIALS = (674, 680)
TWO_GROUP_EVENTS = (39, 22)

# Rows: measurements, columns: machines
FACTORY_MEASUREMENTS = [
    [83, 117, 101, 105, 79, 57],
    [92, 109, 93, 119, 97, 92],
    [92, 114, 92, 116, 103, 104],
    [46, 104, 86, 102, 79, 77],
    [67, 87, 67, 116, 92, 100],
]


def bernoulli_data() -> Dict:
    y = np.array(BERNOULLI_TRIALS, dtype=int)
    return {'N': len(y), 'y': y}


def binomial_data() -> Dict:
    return {'N': BINOMIAL_TRIALS, 'y': BINOMIAL_SUCCESSES}


def two_group_data() -> Dict:
    return {
        'N1': TWO_GROUP_TRIALS[0], 'y1': TWO_GROUP_EVENTS[0],
        'N2': TWO_GROUP_TRIALS[1], 'y2': TWO_GROUP_EVENTS[1],
    }


def factory_data() -> Dict:
    """Factory measurements as [N, J] matrix plus long-format index arrays."""
    y = np.array(FACTORY_MEASUREMENTS, dtype=float)
    n_obs, n_groups = y.shape
    return {
        'N': n_obs,
        'J': n_groups,
        'y': y,
        # Long format, column-major so each machine's values are contiguous
        'y_flat': y.T.ravel(),
        'group': np.repeat(np.arange(n_groups), n_obs),
    }


def simulate_linear_data(n: int = 50,
                         alpha: float = 1.0,
                         beta: float = 0.5,
                         sigma: float = 1.0,
                         n_outliers: int = 0,
                         outlier_shift: float = 10.0,
                         seed: Optional[int] = None) -> Dict:
    """Synthetic x -> y regression data, optionally with gross outliers.

    Returns:
        Dict with N, x, y and x_mean
    """
    rng = np.random.default_rng(seed)
    x = np.linspace(0.0, 10.0, n)
    y = alpha + beta * x + rng.normal(0.0, sigma, size=n)
    if n_outliers > 0:
        idx = rng.choice(n, size=n_outliers, replace=False)
        y[idx] += outlier_shift
    return {'N': n, 'x': x, 'y': y, 'x_mean': float(x.mean())}


class DatasetLoader:
    """Load demo data files from a directory."""

    def __init__(self, data_dir: str = 'data'):
        """
        Args:
            data_dir: Directory containing data files
        """
        self.data_dir = Path(data_dir)
        if not self.data_dir.exists():
            warnings.warn(f"Data directory does not exist: {self.data_dir}")

    def _resolve(self, filename: str) -> Path:
        return Path(filename) if Path(filename).is_absolute() else self.data_dir / filename

    def load_csv_columns(self, filename: str,
                         columns: List[str],
                         delimiter: str = ',') -> Dict[str, np.ndarray]:
        """Load selected numeric columns from a delimited text file.

        Raises:
            FileNotFoundError: file does not exist
            ValueError: a requested column is missing
        """
        filepath = self._resolve(filename)
        if not filepath.exists():
            raise FileNotFoundError(f"Data file not found: {filepath}")

        df = pd.read_csv(filepath, sep=delimiter)
        missing = [c for c in columns if c not in df.columns]
        if missing:
            raise ValueError(
                f"Columns {missing} not found in {filename}. Available: {list(df.columns)}"
            )

        data = {c: df[c].to_numpy(dtype=np.float64) for c in columns}
        print(f"[OK] Loaded {filepath.name}: {len(df)} rows, columns {columns}")
        return data

    def load_kilpisjarvi(self, filename: str = 'kilpisjarvi-summer-temp.csv',
                         temperature_col: str = 'temp.summer') -> Dict:
        """Kilpisjärvi summer temperature series as regression data."""
        cols = self.load_csv_columns(filename, ['year', temperature_col], delimiter=';')
        x = cols['year']
        return {
            'N': len(x),
            'x': x,
            'y': cols[temperature_col],
            'x_mean': float(x.mean()),
        }
