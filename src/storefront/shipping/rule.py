"""ShippingFeeRule aggregate: per-country base fee plus a per-kilogram rate."""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Float, String

from storefront.domain import storefront


MAX_COUNTRIES = 500


def normalize_country(country: str) -> str:
    return (country or "").strip().upper()


@storefront.aggregate
class ShippingFeeRule:
    """Shipping price for one destination country.

    The country code is the rule's natural key and is always stored uppercase.
    """

    country: String(required=True, max_length=3, unique=True)
    base_fee: Float(required=True, min_value=0.0)
    per_kg_rate: Float(required=True, min_value=0.0)
    is_active: Boolean(default=True)
    updated_at: DateTime(default=lambda: datetime.now(UTC))

    @classmethod
    def create(cls, country, base_fee, per_kg_rate, is_active=True):
        return cls(
            country=normalize_country(country),
            base_fee=base_fee,
            per_kg_rate=per_kg_rate,
            is_active=is_active,
        )

    def change_rates(self, base_fee, per_kg_rate, is_active=None):
        self.base_fee = base_fee
        self.per_kg_rate = per_kg_rate
        if is_active is not None:
            self.is_active = is_active
        self.updated_at = datetime.now(UTC)

    def fee_for(self, total_weight_kg: float) -> float:
        return self.base_fee + total_weight_kg * self.per_kg_rate


@storefront.repository(part_of=ShippingFeeRule)
class ShippingFeeRuleRepository:
    def find_by_country(self, country: str) -> ShippingFeeRule | None:
        results = self._dao.query.filter(country=normalize_country(country)).all().items
        return results[0] if results else None

    def active_rules(self) -> list[ShippingFeeRule]:
        return self._dao.query.filter(is_active=True).order_by("country").limit(MAX_COUNTRIES).all().items
