from calibcheck.calc import CalculationRules, Column, Measure
from calibcheck.pipeline import PRESENT_VALUE_COLUMNS, build_request, extract_trades

from conftest import fake_pricing_rules


class TestBuildRequest:
    def test_present_value_column_only(self, small_group, small_snapshot) -> None:
        trades = extract_trades(small_group, small_snapshot)
        request = build_request(trades, small_group.name, small_group, fake_pricing_rules())

        assert request.columns == (Column.of(Measure.PRESENT_VALUE),)
        assert request.columns == PRESENT_VALUE_COLUMNS
        assert request.trades == trades
        assert isinstance(request.rules, CalculationRules)

    def test_any_trade_maps_to_the_group(self, small_group, small_snapshot) -> None:
        trades = extract_trades(small_group, small_snapshot)
        rules = build_request(trades, small_group.name, small_group, fake_pricing_rules()).rules

        for trade in trades:
            assert rules.market_data_rules.mappings_for(trade).curve_group == small_group.name
        assert rules.market_data_rules.mappings_for(object()).curve_group == small_group.name

    def test_group_name_bound_to_definition(self, small_group, small_snapshot) -> None:
        rules = build_request((), small_group.name, small_group, fake_pricing_rules()).rules

        assert dict(rules.market_data_config.curve_groups) == {small_group.name: small_group}
        assert rules.market_data_config.get_curve_group(small_group.name) is small_group

    def test_standard_pricing_rules_by_default(self, small_group) -> None:
        rules = build_request((), small_group.name, small_group).rules
        names = {t.__name__ for t in rules.pricing_rules.trade_types()}

        assert {"TermDepositTrade", "FraTrade", "FixedOvernightSwapTrade", "FixedIborSwapTrade"} <= names
