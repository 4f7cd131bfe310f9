# montecarlo/models/libor_market_model.py
"""
LIBOR market model on the differentiable random variables.

Lognormal forward rates L_i covering [T_i, T_{i+1}] on the tenor grid,
simulated under the spot measure (discretely rolled bank account) with a
log-Euler scheme from tenor date to tenor date:

    L_i(T_{k+1}) = L_i(T_k) * exp((mu_i - sigma_i^2 / 2) dt + sigma_i sqrt(dt) dW_i)

    mu_i = sigma_i * sum_{j=k+1}^{i} rho_ij delta_j sigma_j L_j / (1 + delta_j L_j)

Driving noise: one common factor plus one idiosyncratic factor per forward,
    dW_i = sqrt(rho) dZ_0 + sqrt(1 - rho) dZ_i,
so that corr(dW_i, dW_j) = rho for i != j.

The initial forwards, the volatilities and rho are leaf nodes of the model's
tape: Greeks of any product priced on the model are adjoints w.r.t. them.
The Brownian increments enter the graph as constants.
"""
import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ...aad.core.path_vector import PathVector
from ...aad.core.tape import Tape
from ...aad.core.var import DiffVar
from .time_discretization import TimeDiscretization

logger = logging.getLogger(__name__)


class LIBORMarketModel:
    """
    Attributes:
        tenor (TimeDiscretization): Tenor grid, also used as simulation grid
        n_paths (int): Number of Monte-Carlo paths
        tape (Tape): Arena holding the model's leaves and simulated states
        initial_forwards (List[DiffVar]): L_i(0), one leaf per period
        volatilities (List[DiffVar]): sigma_i, one leaf per period
        correlation (DiffVar): rho, leaf
    """

    def __init__(self, tenor: TimeDiscretization, initial_forwards: Sequence[float],
                 volatilities: Sequence[float], correlation: float, n_paths: int,
                 seed: int = 3141, tape: Optional[Tape] = None):
        n = tenor.n_periods
        if len(initial_forwards) != n:
            raise ValueError(f"Expected {n} initial forwards, got {len(initial_forwards)}")
        if len(volatilities) != n:
            raise ValueError(f"Expected {n} volatilities, got {len(volatilities)}")
        if not 0.0 <= correlation <= 1.0:
            raise ValueError(f"correlation must lie in [0, 1], got {correlation}")
        if n_paths < 1:
            raise ValueError(f"n_paths must be positive, got {n_paths}")

        self.tenor = tenor
        self.n_paths = n_paths
        self.seed = seed
        self.tape = Tape() if tape is None else tape

        self.initial_forwards = [self.tape.leaf(0.0, f, name=f"forward[{i}]")
                                 for i, f in enumerate(initial_forwards)]
        self.volatilities = [self.tape.leaf(0.0, s, name=f"volatility[{i}]")
                             for i, s in enumerate(volatilities)]
        self.correlation = self.tape.leaf(0.0, correlation, name="correlation")

        # increments[k, 0] is the common factor, increments[k, 1 + i] the one of L_i
        rng = np.random.default_rng(seed)
        self._increments = rng.standard_normal((n, n + 1, n_paths))

        self._forwards: List[List[DiffVar]] = []
        self._numeraires: List[DiffVar] = []
        self._cache: Dict[Tuple, DiffVar] = {}
        self._simulate()

    # ------------------------------------------------------------------ #
    # Simulation
    # ------------------------------------------------------------------ #
    def _simulate(self):
        tenor = self.tenor
        n = tenor.n_periods
        sqrt_rho = self.correlation.sqrt()
        sqrt_one_minus_rho = (1.0 - self.correlation).sqrt()

        self._forwards.append(list(self.initial_forwards))
        self._numeraires.append(self.tape.constant(1.0))

        for k in range(n):
            t_next = tenor.time(k + 1)
            dt = tenor.period_length(k)
            current = self._forwards[k]
            common = PathVector(t_next, self._increments[k, 0], copy=False)

            evolved = list(current)  # L_0 .. L_k are fixed by T_k
            drift_sum = None
            for i in range(k + 1, n):
                forward, sigma = current[i], self.volatilities[i]
                delta = tenor.period_length(i)
                term = delta * sigma * forward / (1.0 + delta * forward)
                coupling = term if drift_sum is None else self.correlation * drift_sum + term
                drift_sum = term if drift_sum is None else drift_sum + term
                drift = sigma * coupling

                own = PathVector(t_next, self._increments[k, 1 + i], copy=False)
                shock = sqrt_rho * common + sqrt_one_minus_rho * own
                evolved[i] = forward * ((drift - 0.5 * sigma.squared()) * dt + sigma * np.sqrt(dt) * shock).exp()
            self._forwards.append(evolved)

            # N(T_{k+1}) = N(T_k) (1 + delta_k L_k(T_k))
            self._numeraires.append(self._numeraires[k].accrue(current[k], dt))

        logger.debug("simulated %d periods x %d paths, %d nodes on tape", n, self.n_paths, len(self.tape))

    # ------------------------------------------------------------------ #
    # Model interface used by the products
    # ------------------------------------------------------------------ #
    def constant(self, value: float) -> DiffVar:
        return self.tape.constant(value)

    def leaves(self) -> Dict[str, DiffVar]:
        """Model inputs by name."""
        leaves = {x.name: x for x in self.initial_forwards}
        leaves.update({x.name: x for x in self.volatilities})
        leaves[self.correlation.name] = self.correlation
        return leaves

    def get_numeraire(self, time: float) -> DiffVar:
        return self._numeraires[self.tenor.index_of(time)]

    def get_forward_rate(self, time: float, index: int) -> DiffVar:
        """L_index observed at `time` (frozen at its fixing T_index)."""
        k = min(self.tenor.index_of(time), index)
        return self._forwards[k][index]

    def get_libor(self, time: float, start: float, end: float) -> DiffVar:
        """
        Forward rate for [start, end] observed at `time`; for time after
        start the rate fixed at start is returned.
        """
        i_start, i_end = self.tenor.index_of(start), self.tenor.index_of(end)
        if i_end <= i_start:
            raise ValueError(f"Period end {end} must be after start {start}")
        if i_end == i_start + 1:
            return self.get_forward_rate(time, i_start)

        k = min(self.tenor.index_of(time), i_start)
        key = ("libor", k, i_start, i_end)
        if key not in self._cache:
            growth = self.constant(1.0)
            for j in range(i_start, i_end):
                growth = growth.accrue(self._forwards[k][j], self.tenor.period_length(j))
            self._cache[key] = (growth - 1.0) / (end - start)
        return self._cache[key]

    def get_forward_bond(self, time: float, maturity: float) -> DiffVar:
        """P(time, maturity) = prod_{j} 1 / (1 + delta_j L_j(time)) over the periods in between."""
        k, m = self.tenor.index_of(time), self.tenor.index_of(maturity)
        if m < k:
            raise ValueError(f"Bond maturity {maturity} is before observation time {time}")
        key = ("bond", k, m)
        if key not in self._cache:
            bond = self.constant(1.0)
            for j in range(k, m):
                bond = bond.discount(self._forwards[k][j], self.tenor.period_length(j))
            self._cache[key] = bond
        return self._cache[key]

    def __repr__(self):
        return f"LIBORMarketModel({self.tenor!r}, n_paths={self.n_paths}, seed={self.seed})"
