"""Shipping rate maintenance: command and handler.

Setting a rate for a country that already has one replaces its fees.
"""

from protean import handle
from protean.fields import Boolean, Float, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.shipping.rule import ShippingFeeRule


@storefront.command(part_of="ShippingFeeRule")
class SetShippingRate:
    country: String(required=True, max_length=3)
    base_fee: Float(required=True, min_value=0.0)
    per_kg_rate: Float(required=True, min_value=0.0)
    is_active: Boolean(default=True)


@storefront.command_handler(part_of=ShippingFeeRule)
class ShippingRateHandler:
    @handle(SetShippingRate)
    def set_shipping_rate(self, command):
        repo = current_domain.repository_for(ShippingFeeRule)

        rule = repo.find_by_country(command.country)
        if rule is None:
            rule = ShippingFeeRule.create(
                country=command.country,
                base_fee=command.base_fee,
                per_kg_rate=command.per_kg_rate,
                is_active=command.is_active,
            )
        else:
            rule.change_rates(command.base_fee, command.per_kg_rate, is_active=command.is_active)

        repo.add(rule)
        return rule.country
