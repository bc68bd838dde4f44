import pytest
from protean import current_domain

from storefront.shared.errors import ShippingUnavailableError
from storefront.shipping.rates import SetShippingRate
from storefront.shipping.rule import ShippingFeeRule
from storefront.shipping.table import ShippingRateTable


@pytest.fixture
def table():
    return ShippingRateTable()


class TestLookup:
    def test_lookup_is_case_insensitive(self, table, us_rate):
        assert table.lookup("us").country == "US"
        assert table.lookup("Us").country == "US"

    def test_unknown_country(self, table):
        with pytest.raises(ShippingUnavailableError) as exc_info:
            table.lookup("zz")
        assert str(exc_info.value) == "Shipping to ZZ is not available"

    def test_inactive_rule_is_unavailable_by_default(self, table, set_rate):
        set_rate("DE", 25.0, 4.0, is_active=False)

        with pytest.raises(ShippingUnavailableError):
            table.lookup("DE")
        assert table.lookup("DE", active_only=False).country == "DE"

    def test_fee_for_two_kilograms_to_us(self, table, us_rate):
        rule = table.lookup("us")
        assert table.fee(rule, 2.0) == 35.0

    def test_available_lists_active_rules_by_country(self, table, set_rate):
        set_rate("JP", 20.0, 3.0)
        set_rate("AU", 30.0, 4.5)
        set_rate("CA", 22.0, 4.8, is_active=False)

        assert [rule.country for rule in table.available()] == ["AU", "JP"]


class TestSetShippingRate:
    def test_creates_rule(self):
        country = current_domain.process(SetShippingRate(country="kr", base_fee=18.0, per_kg_rate=3.5), asynchronous=False)

        assert country == "KR"
        rule = current_domain.repository_for(ShippingFeeRule).find_by_country("KR")
        assert rule.base_fee == 18.0
        assert rule.per_kg_rate == 3.5

    def test_existing_rule_is_updated_in_place(self, set_rate):
        set_rate("GB", 28.0, 4.2)
        set_rate("gb", 30.0, 5.0)

        repo = current_domain.repository_for(ShippingFeeRule)
        rules = repo._dao.query.filter(country="GB").all().items
        assert len(rules) == 1
        assert rules[0].base_fee == 30.0
