"""LocalizedText value object for labels kept in English and Vietnamese."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from storefront.domain import storefront


@storefront.value_object
class LocalizedText:
    """A label with an English and a Vietnamese rendering. At least one is required."""

    en: String(max_length=200)
    vi: String(max_length=200)

    @invariant.post
    def at_least_one_language(self):
        if not (self.en or self.vi):
            raise ValidationError({"text": ["At least one of 'en' or 'vi' is required"]})

    def matches(self, label: str) -> bool:
        """True when the label equals either rendering exactly."""
        return label is not None and label in (self.en, self.vi)

    def display(self) -> str:
        return self.en or self.vi
