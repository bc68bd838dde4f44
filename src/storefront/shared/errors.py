"""Business errors raised by the storefront domain.

Two families, both rooted in protean's exception hierarchy so that anything
that already knows how to present a ``ValidationError`` or an
``ObjectNotFoundError`` keeps working:

- rule violations (``ValidationError``): the request was understood but
  cannot be honoured. Carry a ``{field: [messages]}`` dict. Mapped to 400.
- missing things (``ObjectNotFoundError``): a product, variation, size,
  order or shipping rule does not exist. Carry a single message. Mapped to 404.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class OrderInvalidError(ValidationError):
    """The order request cannot be fulfilled as submitted."""


class InsufficientStockError(ValidationError):
    """A size option holds fewer units than requested."""

    def __init__(self, message: str, available: int):
        super().__init__({"stock": [message]})
        self.available = available


class InvalidStateError(ValidationError):
    """The order is not in a status that allows the requested change."""


class NotFoundError(ObjectNotFoundError):
    def __init__(self, message: str):
        super().__init__({"_entity": [message]})
        self.message = message

    def __str__(self) -> str:
        return self.message


class ProductNotFoundError(NotFoundError):
    pass


class VariantNotFoundError(NotFoundError):
    pass


class SizeNotFoundError(NotFoundError):
    pass


class OrderNotFoundError(NotFoundError):
    pass


class ShippingUnavailableError(NotFoundError):
    pass
