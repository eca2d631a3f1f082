"""Tests for buydown pricing."""

import numpy as np
import pytest

from naca_calculator.buydown import (
    buydown_options,
    calculate_interest_rate_buydown,
    calculate_principal_buydown_cost,
    max_principal_buydown,
    minimum_buydown_rate,
    price_interest_rate_buydown,
)


class TestCalculateInterestRateBuydown:
    """Tests for the interest rate buydown cost."""

    def test_30_year_cost(self):
        """Test 0.5% off a 30-year loan is 3 points."""
        cost = calculate_interest_rate_buydown(300000, 6.5, 6.0, 30)
        assert abs(cost - 9000) < 0.01

    def test_20_year_cost(self):
        """Test 20-year loans price like 30-year loans."""
        cost = calculate_interest_rate_buydown(300000, 6.5, 6.0, 20)
        assert abs(cost - 9000) < 0.01

    def test_15_year_cost(self):
        """Test 0.5% off a 15-year loan is 2 points."""
        cost = calculate_interest_rate_buydown(300000, 6.5, 6.0, 15)
        assert abs(cost - 6000) < 0.01

    def test_cap_at_one_and_a_half_points(self):
        """Test a 2% request is charged as 1.5%."""
        cost = calculate_interest_rate_buydown(300000, 6.5, 4.5, 30)
        assert abs(cost - 27000) < 0.01

    def test_no_cost_when_rate_not_lower(self):
        """Test equal or higher desired rate is free."""
        assert calculate_interest_rate_buydown(300000, 6.5, 7.0, 30) == 0
        assert calculate_interest_rate_buydown(300000, 6.5, 6.5, 30) == 0

    @pytest.mark.parametrize("principal", [0, -1000, float("nan"), float("inf")])
    def test_no_cost_for_invalid_principal(self, principal):
        """Test zero, negative and non-finite principal."""
        assert calculate_interest_rate_buydown(principal, 6.5, 6.0, 30) == 0

    def test_non_decreasing_then_flat(self):
        """Test cost grows with the requested reduction until the cap."""
        reductions = np.round(np.arange(0, 3.01, 0.05), 2)
        costs = [calculate_interest_rate_buydown(250000, 7.0, 7.0 - r, 30) for r in reductions]

        capped_cost = 250000 * 1.5 * 0.06
        for prev, cur in zip(costs, costs[1:]):
            assert cur >= prev - 1e-9
        for r, cost in zip(reductions, costs):
            if r >= 1.5:
                assert cost == pytest.approx(capped_cost)


class TestPriceInterestRateBuydown:
    """Tests for the detailed buydown breakdown."""

    def test_uncapped(self):
        """Test reduction and points for a small buydown."""
        priced = price_interest_rate_buydown(300000, 6.5, 6.0, 30)

        assert priced.reduction == pytest.approx(0.5)
        assert priced.effective_rate == pytest.approx(6.0)
        assert priced.points == pytest.approx(3.0)
        assert not priced.cap_reached

    def test_capped_reports_achieved_reduction(self):
        """Test the capped reduction is what gets reported."""
        priced = price_interest_rate_buydown(300000, 6.5, 4.5, 30)

        assert priced.requested_rate == 4.5
        assert priced.reduction == pytest.approx(1.5)
        assert priced.effective_rate == pytest.approx(5.0)
        assert priced.points == pytest.approx(9.0)
        assert priced.cap_reached

    def test_15_year_points(self):
        """Test a point buys 1/4% on 15-year loans."""
        priced = price_interest_rate_buydown(300000, 6.0, 5.5, 15)
        assert priced.points == pytest.approx(2.0)

    def test_no_buydown_keeps_original_rate(self):
        """Test a higher desired rate leaves the rate alone."""
        priced = price_interest_rate_buydown(300000, 6.5, 7.0, 30)

        assert priced.cost == 0
        assert priced.effective_rate == 6.5
        assert priced.reduction == 0


class TestMinimumBuydownRate:
    """Tests for the buydown floor."""

    def test_floor(self):
        """Test the floor is 1.5 below the rate."""
        assert minimum_buydown_rate(6.5) == pytest.approx(5.0)

    def test_never_negative(self):
        """Test very low rates floor at zero."""
        assert minimum_buydown_rate(1.0) == 0.0


class TestPrincipalBuydown:
    """Tests for principal buydown helpers."""

    def test_cost_is_amount(self):
        """Test the cost is the dollars applied."""
        assert calculate_principal_buydown_cost(25000) == 25000

    def test_invalid_amount_costs_nothing(self):
        """Test negative and non-finite amounts."""
        assert calculate_principal_buydown_cost(-5) == 0
        assert calculate_principal_buydown_cost(float("nan")) == 0

    def test_max_is_purchase_price(self):
        """Test the buydown control tops out at the price."""
        assert max_principal_buydown(285000.0) == 285000.0
        assert max_principal_buydown(-1) == 0.0


class TestBuydownOptions:
    """Tests for the buydown option table."""

    def test_rows_cover_rate_range(self):
        """Test eighth-point steps from 6.5 down to 5.0."""
        df = buydown_options(300000, 6.5, 30)

        assert len(df) == 13
        assert df.iloc[0]['rate'] == 6.5
        assert df.iloc[-1]['rate'] == 5.0
        assert df.iloc[0]['cost'] == 0
        assert abs(df.iloc[-1]['cost'] - 27000) < 0.01

    def test_cost_and_savings_increase(self):
        """Test deeper buydowns cost more and save more."""
        df = buydown_options(300000, 6.5, 30)

        assert df['cost'].is_monotonic_increasing
        assert df['monthly_savings'].is_monotonic_increasing
        assert df['principal_interest'].is_monotonic_decreasing

    def test_floor_appended_when_step_misses_it(self):
        """Test the floor rate is always the last row."""
        df = buydown_options(200000, 6.0, 15, step=0.4)

        assert df.iloc[-1]['rate'] == 4.5
        assert df['rate'].tolist() == [6.0, 5.6, 5.2, 4.8, 4.5]

    def test_invalid_step(self):
        """Test non-positive step raises."""
        with pytest.raises(ValueError):
            buydown_options(300000, 6.5, 30, step=0)
