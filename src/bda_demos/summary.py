"""
bda_demos — Posterior Summary Tables
====================================
Reduce a DrawSet to per-component point and interval estimates.

Quantiles use linear interpolation between order statistics
(numpy method='linear', Hyndman & Fan type 7), so identical draws always
give identical tables. For the draws [1, 2, 3, 4] the 0.5 quantile is 2.5.
"""

from collections import OrderedDict
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from .config import SummaryConfig, validate_quantile_levels
from .diagnostics import effective_sample_size, psrf
from .draws import DrawSet
from .errors import EmptyDrawSetError


@dataclass(frozen=True)
class ParameterSummary:
    """Summary row for one scalar component."""
    name: str
    point: float                       # mean or median, per config
    sd: float
    quantiles: Mapping[float, float]   # probability -> value
    rhat: Optional[float]              # None with a single chain
    ess: float

    def __post_init__(self):
        object.__setattr__(self, 'quantiles', MappingProxyType(dict(self.quantiles)))

    def interval(self, lower: float, upper: float):
        """(value at lower, value at upper) for two configured levels."""
        return self.quantiles[lower], self.quantiles[upper]


class SummaryTable(Mapping):
    """Read-only mapping of component label -> ParameterSummary."""

    def __init__(self, rows: Iterable[ParameterSummary],
                 quantile_levels, point_estimate: str = 'mean'):
        self._rows = OrderedDict((row.name, row) for row in rows)
        self.quantile_levels = tuple(quantile_levels)
        self.point_estimate = point_estimate

    def __getitem__(self, name: str) -> ParameterSummary:
        return self._rows[name]

    def __iter__(self):
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def to_dataframe(self) -> pd.DataFrame:
        """One row per component; quantile columns named like 'q5%'."""
        records = []
        for row in self._rows.values():
            record = {self.point_estimate: row.point, 'sd': row.sd}
            for q in self.quantile_levels:
                record[f"q{q * 100:g}%"] = row.quantiles[q]
            record['r_hat'] = row.rhat
            record['ess'] = row.ess
            records.append(record)
        return pd.DataFrame.from_records(records, index=list(self._rows))

    def print_table(self):
        """Print the table in the package console style."""
        q_headers = ''.join(f"{f'q{q * 100:g}%':>10}" for q in self.quantile_levels)
        print(f"\n{'Parameter':<20} {self.point_estimate.capitalize():>10} {'SD':>10}"
              f"{q_headers} {'R-hat':>8} {'ESS':>8}")
        print("-" * (62 + 10 * len(self.quantile_levels)))
        for row in self._rows.values():
            q_values = ''.join(f"{row.quantiles[q]:>10.4f}" for q in self.quantile_levels)
            rhat = f"{row.rhat:>8.3f}" if row.rhat is not None else f"{'-':>8}"
            print(f"{row.name:<20} {row.point:>10.4f} {row.sd:>10.4f}"
                  f"{q_values} {rhat} {row.ess:>8.0f}")


def summarize(draw_set: DrawSet,
              quantile_levels=None,
              config: Optional[SummaryConfig] = None) -> SummaryTable:
    """Summarize every scalar component of a DrawSet.

    Args:
        draw_set: Posterior draws
        quantile_levels: Strictly increasing probabilities in (0, 1);
            overrides config.quantile_levels when given
        config: Point estimate and default quantile levels

    Raises:
        EmptyDrawSetError: the draw set has no draws
        ValueError: invalid quantile levels
    """
    config = config or SummaryConfig()
    levels = validate_quantile_levels(
        config.quantile_levels if quantile_levels is None else quantile_levels
    )

    if draw_set.total_draws == 0:
        raise EmptyDrawSetError()

    rows = []
    for label, chains in draw_set.scalar_components():
        flat = np.ravel(chains)
        if config.point_estimate == 'median':
            point = float(np.median(flat))
        else:
            point = float(np.mean(flat))
        values = np.quantile(flat, levels, method='linear')
        rows.append(ParameterSummary(
            name=label,
            point=point,
            sd=float(np.std(flat, ddof=1)) if flat.size > 1 else 0.0,
            quantiles=dict(zip(levels, (float(v) for v in values))),
            rhat=psrf(chains) if draw_set.n_chains >= 2 else None,
            ess=effective_sample_size(chains),
        ))

    return SummaryTable(rows, levels, point_estimate=config.point_estimate)
