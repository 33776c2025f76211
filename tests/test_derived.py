"""
Unit tests for derived quantities and posterior probabilities
"""

import pytest
import numpy as np

from bda_demos.derived import difference, evaluate, odds_ratio, probability, ratio
from bda_demos.draws import DrawSet
from bda_demos.errors import EmptyDrawSetError


def test_probability_scenario(theta_draws):
    """theta > 0.25 holds for 4 of the 8 draws."""
    assert probability(theta_draws, lambda it: it['theta'] > 0.25) == 0.5


def test_probability_is_exact_fraction(rng):
    draws = DrawSet({'a': rng.normal(size=(3, 37))})
    values = draws.merged('a')
    expected = np.count_nonzero(values > 0.3) / values.size
    p = probability(draws, lambda it: it['a'] > 0.3)
    assert p == expected
    assert 0.0 <= p <= 1.0


def test_probability_bounds():
    draws = DrawSet({'a': np.arange(10.0).reshape(2, 5)})
    assert probability(draws, lambda it: True) == 1.0
    assert probability(draws, lambda it: False) == 0.0


def test_evaluate_preserves_chain_order():
    draws = DrawSet({'x': np.array([[1.0, 2.0], [3.0, 4.0]]),
                     'y': np.array([[10.0, 20.0], [30.0, 40.0]])})
    result = evaluate(draws, lambda it: it['x'] + it['y'])
    np.testing.assert_array_equal(result, [11.0, 22.0, 33.0, 44.0])


def test_evaluate_over_vector_parameter():
    draws = DrawSet({'beta': np.arange(12.0).reshape(2, 2, 3)})
    result = evaluate(draws, lambda it: it['beta'].sum())
    np.testing.assert_array_equal(result, [3.0, 12.0, 21.0, 30.0])


def test_indicator_mean_matches_probability(rng):
    draws = DrawSet({'a': rng.normal(size=(2, 50)), 'b': rng.normal(size=(2, 50))})
    indicator = evaluate(draws, lambda it: float(it['a'] > it['b']))
    assert indicator.mean() == pytest.approx(
        probability(draws, lambda it: it['a'] > it['b'])
    )


def test_helpers():
    draws = DrawSet({'theta1': np.array([[0.5, 0.2]]),
                     'theta2': np.array([[0.5, 0.5]])})
    np.testing.assert_allclose(evaluate(draws, difference('theta2', 'theta1')), [0.0, 0.3])
    np.testing.assert_allclose(evaluate(draws, ratio('theta2', 'theta1')), [1.0, 2.5])
    np.testing.assert_allclose(evaluate(draws, odds_ratio('theta1', 'theta2')), [1.0, 4.0])


def test_empty_raises():
    draws = DrawSet({'x': np.empty((2, 0))})
    with pytest.raises(EmptyDrawSetError):
        evaluate(draws, lambda it: it['x'])
    with pytest.raises(EmptyDrawSetError):
        probability(draws, lambda it: it['x'] > 0)
