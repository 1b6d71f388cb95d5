"""Tests for grouping and aggregation helpers."""

import pytest

from crossmarket.matching import calculate_aggregate_liquidity, find_best_price, group_by_platform


class TestGroupByPlatform:
    def test_groups_preserve_order(self, polymarket_markets, kalshi_markets):
        mixed = [kalshi_markets[0], polymarket_markets[0], kalshi_markets[1], polymarket_markets[1]]

        groups = group_by_platform(mixed)

        assert list(groups) == ["KALSHI", "POLYMARKET"]
        assert [m.id for m in groups["KALSHI"]] == ["kalshi-fed", "kalshi-btc"]
        assert [m.id for m in groups["POLYMARKET"]] == ["poly-btc", "poly-fed"]

    def test_empty(self):
        assert group_by_platform([]) == {}


class TestFindBestPrice:
    def test_lowest_yes_price(self, make_market):
        markets = [
            make_market(id="a", yes_price=0.6),
            make_market(id="b", yes_price=0.4),
            make_market(id="c", yes_price=0.5),
        ]

        best = find_best_price(markets, "yes")

        assert best.market.id == "b"
        assert best.price == 0.4

    def test_no_side_uses_no_price(self, make_market):
        markets = [
            make_market(id="a", yes_price=0.1, no_price=0.9),
            make_market(id="b", yes_price=0.7, no_price=0.3),
        ]

        assert find_best_price(markets, "no").market.id == "b"

    def test_skips_missing_prices(self, make_market):
        markets = [make_market(id="a", yes_price=None), make_market(id="b", yes_price=0.8)]
        assert find_best_price(markets, "yes").market.id == "b"

    def test_tie_keeps_first(self, make_market):
        markets = [make_market(id="a", yes_price=0.4), make_market(id="b", yes_price=0.4)]
        assert find_best_price(markets, "yes").market.id == "a"

    def test_none_when_unpriced(self, make_market):
        assert find_best_price([make_market(yes_price=None)], "yes") is None
        assert find_best_price([], "no") is None

    def test_rejects_unknown_side(self, make_market):
        with pytest.raises(ValueError):
            find_best_price([make_market()], "maybe")


class TestAggregateLiquidity:
    def test_sums_liquidity(self, kalshi_markets):
        assert calculate_aggregate_liquidity(kalshi_markets) == 5000.0

    def test_missing_liquidity_counts_as_zero(self, make_market):
        markets = [make_market(id="a", liquidity=None), make_market(id="b", liquidity=1500.0)]
        assert calculate_aggregate_liquidity(markets) == 1500.0

    def test_empty_is_zero(self):
        assert calculate_aggregate_liquidity([]) == 0.0
