import matplotlib

matplotlib.use("Agg")

import pytest

from euclid_tsp import make_nodes, random_nodes


@pytest.fixture
def unit_square():
    return make_nodes([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)])


@pytest.fixture
def small_instance():
    return random_nodes(6, seed=7)
