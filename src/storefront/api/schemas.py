"""Pydantic request/response schemas for the Storefront API.

These are external contracts, kept separate from the domain aggregates.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class SizeSchema(BaseModel):
    eu: float = Field(ge=0)
    us: float = Field(ge=0)


class CustomerInfoSchema(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=254)
    address: str = Field(min_length=1, max_length=500)
    phone: str | None = Field(default=None, max_length=20)


class LocalizedTextSchema(BaseModel):
    en: str | None = None
    vi: str | None = None


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class OrderLineSchema(BaseModel):
    product_id: str
    selected_color: str = Field(min_length=1)
    selected_size: SizeSchema
    quantity: int = Field(ge=1)


class CreateOrderRequest(BaseModel):
    products: list[OrderLineSchema] = Field(min_length=1)
    customer_info: CustomerInfoSchema
    shipping_country: str = Field(min_length=2, max_length=3)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "products": [
                        {
                            "product_id": "prod-001",
                            "selected_color": "Red",
                            "selected_size": {"eu": 42, "us": 9},
                            "quantity": 1,
                        }
                    ],
                    "customer_info": {
                        "name": "Jane Doe",
                        "email": "jane@example.com",
                        "address": "12 Main St, Springfield",
                        "phone": "+1 555 0100",
                    },
                    "shipping_country": "US",
                }
            ]
        }
    }


class UpdateStatusRequest(BaseModel):
    status: str


# ---------------------------------------------------------------------------
# Order Response Schemas
# ---------------------------------------------------------------------------
class ProductSummary(BaseModel):
    id: str
    name: LocalizedTextSchema
    image: str | None = None


class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    price: float
    selected_color: str
    selected_size: SizeSchema
    product: ProductSummary | None = None


class OrderResponse(BaseModel):
    id: str
    items: list[OrderItemResponse]
    total: float
    shipping_fee: float
    shipping_country: str
    total_weight: float
    customer_info: CustomerInfoSchema
    status: str
    created_at: datetime
    updated_at: datetime


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    total_pages: int
    current_page: int
    total: int


class UserOrderListResponse(OrderListResponse):
    user_email: str


class OrderStatsResponse(BaseModel):
    total_orders: int
    pending_orders: int
    shipped_orders: int
    completed_orders: int
    total_revenue: float


class UserOrderStatsResponse(BaseModel):
    total_orders: int
    pending_orders: int
    shipped_orders: int
    completed_orders: int
    total_spent: float
    recent_orders: list[OrderResponse]


class DeleteOrderResponse(BaseModel):
    message: str
    order_id: str
    skipped_items: int = 0


# ---------------------------------------------------------------------------
# Shipping Response Schemas
# ---------------------------------------------------------------------------
class ShippingRateResponse(BaseModel):
    country: str
    base_fee: float
    per_kg_rate: float
