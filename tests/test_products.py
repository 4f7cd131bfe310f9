"""
Tests for the LIBOR market model and the interest rate products built from
descriptors: schedules, indices, factory, swap and swaption values, and
path-wise Greeks checked against bump-and-revalue on the same paths.
"""
import datetime

import numpy as np
import pytest

from pathwise_aad.aad import Tape, differentiate, get_gradient
from pathwise_aad.aad.core import expected_gradient
from pathwise_aad.montecarlo.models import LIBORMarketModel, TimeDiscretization
from pathwise_aad.montecarlo.products import (
    InterestRateMonteCarloProductFactory,
    InterestRateProductDescriptor,
    LIBORIndex,
    Period,
    Schedule,
    Swap,
    SwapDescriptor,
    SwapLeg,
    SwapLegDescriptor,
    SwaptionDescriptor,
    SwaptionPhysical,
    construct_libor_index,
    floating_point_date,
)

from conftest import FORWARDS, VOLATILITIES, CORRELATION, make_model


def par_rate(bonds):
    """Par rate of the semi-annual swap from 1y to 3y."""
    return (bonds[2] - bonds[6]) / (0.5 * bonds[3:7].sum())


def swap_descriptor(fixed_rate, notional=1.0):
    """Receive floating, pay fixed_rate, 1y to 3y semi-annual."""
    schedule = Schedule.regular(1.0, 3.0, 0.5)
    floating = SwapLegDescriptor.constant(schedule, notional, 0.0, forward_curve_name="forward")
    fixed = SwapLegDescriptor.constant(schedule, notional, fixed_rate)
    return SwapDescriptor(leg_receiver=floating, leg_payer=fixed)


@pytest.fixture
def factory(reference_date):
    return InterestRateMonteCarloProductFactory(reference_date)


@pytest.fixture
def par_swap(factory, initial_bonds):
    return factory.product_from_descriptor(swap_descriptor(par_rate(initial_bonds)))


@pytest.fixture
def swaption(factory, reference_date, initial_bonds):
    descriptor = SwaptionDescriptor(
        exercise_date=reference_date + datetime.timedelta(days=365),
        strike_rate=0.0,
        underlying_swap=swap_descriptor(par_rate(initial_bonds)),
    )
    return factory.product_from_descriptor(descriptor)


class TestSchedule:

    def test_regular(self):
        schedule = Schedule.regular(1.0, 3.0, 0.5)
        assert schedule.n_periods == len(schedule) == 4
        assert schedule[0] == Period(1.0, 1.0, 1.5, 1.5)
        assert [p.length for p in schedule] == pytest.approx([0.5] * 4)

    def test_regular_needs_whole_periods(self):
        with pytest.raises(ValueError):
            Schedule.regular(0.0, 1.0, 0.3)

    def test_from_dates(self):
        schedule = Schedule.from_dates([0.0, 0.5, 1.5])
        assert [p.length for p in schedule] == pytest.approx([0.5, 1.0])

    def test_empty_period_rejected(self):
        with pytest.raises(ValueError):
            Period(1.0, 1.0, 1.0, 1.0)

    def test_floating_point_date(self):
        assert floating_point_date(datetime.date(2024, 1, 1), datetime.date(2025, 1, 1)) == pytest.approx(366 / 365)


class TestIndex:

    def test_index_uses_average_offset_and_length(self):
        schedule = Schedule((Period(0.9, 1.0, 1.5, 1.5), Period(1.3, 1.5, 2.0, 2.0)))
        index = construct_libor_index("forward", schedule)
        assert index.name == "forward"
        assert index.fixing_offset == pytest.approx(0.15)
        assert index.period_length == pytest.approx(0.5)

    def test_fixed_leg_has_no_index(self):
        assert construct_libor_index(None, Schedule.regular(0.0, 1.0, 0.5)) is None

    def test_forward_reads_model_rate(self, model):
        index = LIBORIndex("forward", 0.0, 0.5)
        assert index.forward(0.0, 1.0, model) == model.initial_forwards[2]
        # observed after fixing: the rate fixed at 1.0
        assert index.forward(2.0, 1.0, model) == model.get_forward_rate(1.0, 2)


class TestDescriptors:

    def test_leg_needs_one_value_per_period(self):
        schedule = Schedule.regular(1.0, 3.0, 0.5)
        with pytest.raises(ValueError):
            SwapLegDescriptor(schedule, (1.0,), (0.0,) * 4)

    def test_name(self):
        assert swap_descriptor(0.03).name == "SwapDescriptor"

    def test_factory_builds_products(self, factory, swaption):
        descriptor = swap_descriptor(0.03)
        swap = factory.product_from_descriptor(descriptor)
        assert isinstance(swap, Swap)
        assert isinstance(swap.leg_receiver, SwapLeg)
        assert isinstance(swap.leg_receiver.index, LIBORIndex)
        assert swap.leg_payer.index is None
        assert isinstance(swaption, SwaptionPhysical)
        assert swaption.exercise_time == pytest.approx(1.0)

    def test_unsupported_descriptor(self, factory):
        with pytest.raises(ValueError, match="Unsupported product type"):
            factory.product_from_descriptor(InterestRateProductDescriptor())

    def test_swap_descriptor_round_trip(self, factory):
        descriptor = swap_descriptor(0.03)
        assert factory.product_from_descriptor(descriptor).descriptor == descriptor

    def test_swap_without_leg_descriptors(self):
        schedule = Schedule.regular(1.0, 3.0, 0.5)
        leg = SwapLeg(schedule, [1.0] * 4, None, [0.03] * 4)
        with pytest.raises(ValueError):
            Swap(leg, leg).descriptor


class TestModel:

    def test_validation(self):
        tenor = TimeDiscretization.regular(0.0, 6, 0.5)
        with pytest.raises(ValueError):
            LIBORMarketModel(tenor, FORWARDS[:3], VOLATILITIES, CORRELATION, n_paths=10)
        with pytest.raises(ValueError):
            LIBORMarketModel(tenor, FORWARDS, VOLATILITIES, 1.5, n_paths=10)
        with pytest.raises(ValueError):
            LIBORMarketModel(tenor, FORWARDS, VOLATILITIES, CORRELATION, n_paths=0)

    def test_records_on_given_empty_tape(self):
        tenor = TimeDiscretization.regular(0.0, 6, 0.5)
        t = Tape()
        model = LIBORMarketModel(tenor, FORWARDS, VOLATILITIES, CORRELATION, n_paths=10, tape=t)
        assert model.tape is t
        assert model.correlation.tape is t

    def test_leaves(self, model):
        leaves = model.leaves()
        assert len(leaves) == 13
        assert leaves["forward[2]"] is model.initial_forwards[2]
        assert leaves["correlation"] is model.correlation

    def test_numeraire_starts_at_one(self, model):
        assert model.get_numeraire(0.0).value.get(0) == 1.0

    def test_simulated_forwards(self, model):
        forward = model.get_forward_rate(1.0, 4)
        assert forward.time == pytest.approx(1.0)
        assert forward.value.size() == model.n_paths
        assert forward.value.min() > 0.0
        # frozen once fixed
        assert model.get_forward_rate(2.5, 2) == model.get_forward_rate(1.0, 2)

    def test_deflated_bond_is_martingale(self, model_factory, initial_bonds):
        model = model_factory(n_paths=4000)
        deflated = model.get_forward_bond(1.0, 3.0) / model.get_numeraire(1.0)
        assert deflated.value.average() == pytest.approx(initial_bonds[6], rel=5e-3)

    def test_multi_period_libor(self, model):
        libor = model.get_libor(0.0, 1.0, 2.0)
        expected = (1.0 + 0.5 * FORWARDS[2]) * (1.0 + 0.5 * FORWARDS[3]) - 1.0
        assert libor.value.get(0) == pytest.approx(expected)
        assert model.get_libor(0.0, 1.0, 2.0) == libor

    def test_bond_cache(self, model, initial_bonds):
        bond = model.get_forward_bond(0.0, 1.0)
        assert bond.value.get(0) == pytest.approx(initial_bonds[2])
        assert model.get_forward_bond(0.0, 1.0) == bond

    def test_off_grid_and_reversed_queries(self, model):
        with pytest.raises(ValueError):
            model.get_numeraire(0.3)
        with pytest.raises(ValueError):
            model.get_forward_bond(1.0, 0.5)
        with pytest.raises(ValueError):
            model.get_libor(0.0, 1.0, 1.0)


class TestSwap:

    def test_par_swap_is_worth_zero(self, par_swap, model):
        assert par_swap.price(0.0, model).value.get(0) == pytest.approx(0.0, abs=1e-12)

    def test_floater_with_notional_exchange_is_worth_zero(self, model):
        schedule = Schedule.regular(1.0, 3.0, 0.5)
        leg = SwapLeg(schedule, [100.0] * 4, construct_libor_index("forward", schedule), [0.0] * 4,
                      notional_exchanged=True)
        assert leg.price(0.0, model).value.get(0) == pytest.approx(0.0, abs=1e-10)

    def test_value_is_receiver_minus_payer(self, par_swap, model):
        swap = par_swap.price(1.0, model).value.values
        legs = par_swap.leg_receiver.price(1.0, model).value.values - par_swap.leg_payer.price(1.0, model).value.values
        np.testing.assert_allclose(swap, legs)

    def test_leg_after_last_payment_is_zero(self, par_swap, model):
        assert par_swap.leg_payer.price(3.0, model).value.get(0) == 0.0

    def test_delta_matches_bump(self, par_swap, model):
        h = 1e-6
        leaf = model.leaves()["forward[3]"]
        delta = get_gradient(par_swap.price(0.0, model), leaf).get(0)

        def bumped(shift):
            forwards = list(FORWARDS)
            forwards[3] += shift
            m = make_model(forwards=forwards, n_paths=10)
            return par_swap.price(0.0, m).value.get(0)

        assert delta == pytest.approx((bumped(h) - bumped(-h)) / (2.0 * h), rel=1e-6, abs=1e-10)

    def test_no_volatility_sensitivity_at_time_zero(self, par_swap, model):
        vol = model.leaves()["volatility[3]"]
        assert get_gradient(par_swap.price(0.0, model), vol).get(0) == 0.0


class TestSwaption:

    H = 1e-8

    def _bumped_value(self, swaption, **inputs):
        return swaption.expected_value(make_model(**inputs)).value.get(0)

    def test_value_is_positive(self, swaption, model):
        assert swaption.expected_value(model).value.get(0) > 0.0

    def test_value_at_exercise_is_floored_underlying(self, swaption, model):
        at_exercise = swaption.price(1.0, model).value.values
        underlying = swaption.underlying.price(1.0, model).value.values
        np.testing.assert_allclose(at_exercise, np.maximum(underlying, 0.0))

    def test_no_valuation_after_exercise(self, swaption, model):
        with pytest.raises(ValueError):
            swaption.price(1.5, model)

    def test_delta_matches_bump(self, swaption, model_factory):
        model = model_factory()
        leaf = model.leaves()["forward[3]"]
        delta = expected_gradient(get_gradient(swaption.price(0.0, model), leaf))

        up, down = list(FORWARDS), list(FORWARDS)
        up[3] += self.H
        down[3] -= self.H
        bumped = (self._bumped_value(swaption, forwards=up)
                  - self._bumped_value(swaption, forwards=down)) / (2.0 * self.H)
        assert delta == pytest.approx(bumped, rel=1e-4)

    def test_vega_matches_bump(self, swaption, model_factory):
        model = model_factory()
        leaf = model.leaves()["volatility[3]"]
        vega = expected_gradient(get_gradient(swaption.price(0.0, model), leaf))

        up, down = list(VOLATILITIES), list(VOLATILITIES)
        up[3] += self.H
        down[3] -= self.H
        bumped = (self._bumped_value(swaption, volatilities=up)
                  - self._bumped_value(swaption, volatilities=down)) / (2.0 * self.H)
        assert vega > 0.0
        assert vega == pytest.approx(bumped, rel=1e-4)

    def test_correlation_sensitivity_matches_bump(self, swaption, model_factory):
        model = model_factory()
        sensitivity = expected_gradient(get_gradient(swaption.price(0.0, model), model.correlation))
        bumped = (self._bumped_value(swaption, correlation=CORRELATION + self.H)
                  - self._bumped_value(swaption, correlation=CORRELATION - self.H)) / (2.0 * self.H)
        assert sensitivity == pytest.approx(bumped, rel=1e-4)

    def test_all_greeks_in_one_sweep(self, swaption, model_factory):
        model = model_factory()
        leaves = model.leaves()
        price = swaption.price(0.0, model)
        adjoints = differentiate(price, leaves.values())
        greeks = expected_gradient({name: adjoints[x.id] for name, x in leaves.items()})
        assert set(greeks) == set(leaves)
        single = expected_gradient(get_gradient(price, leaves["forward[4]"]))
        assert greeks["forward[4]"] == pytest.approx(single)

    def test_averaged_root_spreads_the_derivative_over_paths(self, swaption, model_factory):
        model = model_factory()
        leaf = model.leaves()["forward[3]"]
        pathwise = expected_gradient(get_gradient(swaption.price(0.0, model), leaf))
        averaged = get_gradient(swaption.expected_value(model), leaf)
        assert averaged.values.sum() == pytest.approx(pathwise)
