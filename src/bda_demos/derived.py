"""
bda_demos — Derived Quantities
==============================
Apply a function to every posterior draw and turn indicator sequences into
posterior probabilities.

Probabilities are exact fractions of the stored draws: no further
sampling, smoothing or density estimation is involved.

Usage:
    odds = evaluate(draws, odds_ratio('theta1', 'theta2'))
    p_better = probability(draws, lambda it: it['theta2'] < it['theta1'])
"""

from typing import Callable, Dict

import numpy as np

from .draws import DrawSet
from .errors import EmptyDrawSetError

Iteration = Dict[str, np.ndarray]


def evaluate(draw_set: DrawSet, fn: Callable[[Iteration], float]) -> np.ndarray:
    """Apply fn to each iteration's parameter mapping.

    Returns:
        [chains * draws] array; chain 0 draws first, then chain 1, ...
    """
    if draw_set.total_draws == 0:
        raise EmptyDrawSetError()
    return np.array([float(fn(iteration)) for iteration in draw_set.iterations()])


def probability(draw_set: DrawSet, predicate: Callable[[Iteration], bool]) -> float:
    """Posterior probability of predicate: matching draws / total draws."""
    if draw_set.total_draws == 0:
        raise EmptyDrawSetError()
    hits = sum(1 for iteration in draw_set.iterations() if predicate(iteration))
    return hits / draw_set.total_draws


def difference(first: str, second: str) -> Callable[[Iteration], float]:
    """fn(iteration) = first - second."""
    return lambda it: float(it[first] - it[second])


def ratio(numerator: str, denominator: str) -> Callable[[Iteration], float]:
    """fn(iteration) = numerator / denominator."""
    return lambda it: float(it[numerator] / it[denominator])


def odds_ratio(control: str, treatment: str) -> Callable[[Iteration], float]:
    """fn(iteration) = odds(treatment) / odds(control) for two probabilities."""
    def _odds_ratio(it: Iteration) -> float:
        p1 = it[control]
        p2 = it[treatment]
        return float((p2 / (1.0 - p2)) / (p1 / (1.0 - p1)))
    return _odds_ratio
