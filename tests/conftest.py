"""
Pytest configuration: shared fixtures for the engine and the Monte-Carlo
model tests.
"""
import datetime

import numpy as np
import pytest

from pathwise_aad.aad import Tape, use_tape
from pathwise_aad.montecarlo.models import LIBORMarketModel, TimeDiscretization

FORWARDS = [0.030, 0.032, 0.034, 0.035, 0.036, 0.037]
VOLATILITIES = [0.20, 0.21, 0.22, 0.23, 0.24, 0.25]
CORRELATION = 0.5


def make_model(forwards=None, volatilities=None, correlation=CORRELATION, n_paths=2000, seed=7):
    """Semi-annual LIBOR market model up to 3y; same seed -> same Brownian increments."""
    tenor = TimeDiscretization.regular(0.0, 6, 0.5)
    return LIBORMarketModel(
        tenor,
        FORWARDS if forwards is None else forwards,
        VOLATILITIES if volatilities is None else volatilities,
        correlation,
        n_paths=n_paths,
        seed=seed,
    )


@pytest.fixture
def tape():
    """Fresh tape, active for the duration of the test."""
    t = Tape()
    with use_tape(t):
        yield t


@pytest.fixture
def model_factory():
    return make_model


@pytest.fixture(scope="module")
def model():
    return make_model()


@pytest.fixture(scope="session")
def reference_date():
    return datetime.date(2024, 1, 1)


@pytest.fixture(scope="session")
def initial_bonds():
    """P(0, T_i) implied by FORWARDS on the semi-annual grid."""
    bonds = [1.0]
    for f in FORWARDS:
        bonds.append(bonds[-1] / (1.0 + 0.5 * f))
    return np.array(bonds)
