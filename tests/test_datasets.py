"""
Unit tests for demo datasets and the CSV loader
"""

import pytest
import numpy as np

from bda_demos import datasets
from bda_demos.datasets import DatasetLoader


class TestBundledData:

    def test_bernoulli(self):
        data = datasets.bernoulli_data()
        assert data['N'] == 10
        assert set(np.unique(data['y'])) <= {0, 1}

    def test_binomial(self):
        data = datasets.binomial_data()
        assert 0 <= data['y'] <= data['N']

    def test_two_group(self):
        data = datasets.two_group_data()
        assert data['y1'] <= data['N1']
        assert data['y2'] <= data['N2']

    def test_factory_layout(self):
        data = datasets.factory_data()
        assert data['y'].shape == (5, 6)
        assert data['J'] == 6
        assert len(data['y_flat']) == 30
        # Machine j's five measurements are contiguous in long format
        np.testing.assert_array_equal(data['y_flat'][:5], data['y'][:, 0])
        np.testing.assert_array_equal(data['group'][:5], [0] * 5)
        np.testing.assert_array_equal(data['y_flat'][data['group'] == 3], data['y'][:, 3])

    def test_simulated_regression_reproducible(self):
        first = datasets.simulate_linear_data(n=20, seed=3)
        second = datasets.simulate_linear_data(n=20, seed=3)
        np.testing.assert_array_equal(first['y'], second['y'])
        assert first['N'] == 20

    def test_simulated_outliers(self):
        clean = datasets.simulate_linear_data(n=30, seed=1)
        dirty = datasets.simulate_linear_data(n=30, n_outliers=3, outlier_shift=20.0, seed=1)
        assert np.count_nonzero(dirty['y'] - clean['y'] > 10) == 3


class TestDatasetLoader:

    def test_load_csv_columns(self, tmp_path):
        (tmp_path / 'data.csv').write_text("a,b,c\n1,2,3\n4,5,6\n")
        loader = DatasetLoader(str(tmp_path))
        data = loader.load_csv_columns('data.csv', ['a', 'c'])
        np.testing.assert_array_equal(data['a'], [1.0, 4.0])
        np.testing.assert_array_equal(data['c'], [3.0, 6.0])

    def test_missing_column(self, tmp_path):
        (tmp_path / 'data.csv').write_text("a,b\n1,2\n")
        with pytest.raises(ValueError):
            DatasetLoader(str(tmp_path)).load_csv_columns('data.csv', ['z'])

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DatasetLoader(str(tmp_path)).load_csv_columns('nope.csv', ['a'])

    def test_missing_directory_warns(self, tmp_path):
        with pytest.warns(UserWarning):
            DatasetLoader(str(tmp_path / 'missing'))

    def test_load_kilpisjarvi(self, tmp_path):
        (tmp_path / 'kilpisjarvi-summer-temp.csv').write_text(
            "year;temp.june;temp.july;temp.august;temp.summer\n"
            "1952;8.9;13.9;11.1;11.3\n"
            "1953;9.5;12.6;10.6;10.9\n"
            "1954;8.0;14.2;10.3;10.8\n"
        )
        data = DatasetLoader(str(tmp_path)).load_kilpisjarvi()
        assert data['N'] == 3
        np.testing.assert_array_equal(data['x'], [1952.0, 1953.0, 1954.0])
        np.testing.assert_allclose(data['y'], [11.3, 10.9, 10.8])
        assert data['x_mean'] == pytest.approx(1953.0)
