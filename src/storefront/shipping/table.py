"""ShippingRateTable: read side of the shipping rules."""

from protean.utils.globals import current_domain

from storefront.shared.errors import ShippingUnavailableError
from storefront.shipping.rule import ShippingFeeRule, normalize_country


class ShippingRateTable:
    @property
    def _repository(self):
        return current_domain.repository_for(ShippingFeeRule)

    def lookup(self, country: str, active_only: bool = True) -> ShippingFeeRule:
        """Rule for ``country`` (any case), or ShippingUnavailableError."""
        rule = self._repository.find_by_country(country)
        if rule is None or (active_only and not rule.is_active):
            raise ShippingUnavailableError(f"Shipping to {normalize_country(country) or country} is not available")
        return rule

    def fee(self, rule: ShippingFeeRule, total_weight_kg: float) -> float:
        return rule.fee_for(total_weight_kg)

    def available(self) -> list[ShippingFeeRule]:
        return self._repository.active_rules()
