"""FastAPI routes for the Storefront domain: orders and shipping rates."""

from fastapi import APIRouter, Depends, Header, Query

from storefront.api.auth import require_admin, require_user
from storefront.api.schemas import (
    CreateOrderRequest,
    CustomerInfoSchema,
    DeleteOrderResponse,
    LocalizedTextSchema,
    OrderItemResponse,
    OrderListResponse,
    OrderResponse,
    OrderStatsResponse,
    ProductSummary,
    ShippingRateResponse,
    SizeSchema,
    UpdateStatusRequest,
    UserOrderListResponse,
    UserOrderStatsResponse,
)
from storefront.identity.port import Principal, UserIdentity
from storefront.order.fulfillment import OrderFulfillmentService, OrderLine
from storefront.order.ledger import OrderPage
from storefront.order.order import Order, parse_status
from storefront.order.stats import customer_stats, stats_summary
from storefront.product.catalog import InventoryCatalog
from storefront.product.product import SizeKey
from storefront.shared.errors import OrderNotFoundError
from storefront.shipping.rule import ShippingFeeRule
from storefront.shipping.table import ShippingRateTable


# ---------------------------------------------------------------------------
# Presentation helpers
# ---------------------------------------------------------------------------
class _OrderPresenter:
    """Builds order responses, looking each referenced product up once."""

    def __init__(self, catalog: InventoryCatalog):
        self._catalog = catalog
        self._products = {}

    def _product(self, product_id):
        if product_id not in self._products:
            self._products[product_id] = self._catalog.find(product_id)
        return self._products[product_id]

    def _item(self, item) -> OrderItemResponse:
        summary = None
        product = self._product(item.product_id)
        if product is not None:
            variation = product.find_variation(item.selected_color)
            summary = ProductSummary(
                id=str(product.id),
                name=LocalizedTextSchema(en=product.name.en, vi=product.name.vi),
                image=variation.image if variation else None,
            )

        size = item.size_key
        return OrderItemResponse(
            product_id=str(item.product_id),
            product_name=item.product_name,
            quantity=item.quantity,
            price=item.price,
            selected_color=item.selected_color,
            selected_size=SizeSchema(eu=size.eu, us=size.us),
            product=summary,
        )

    def order(self, order: Order) -> OrderResponse:
        info = order.customer_info
        return OrderResponse(
            id=str(order.id),
            items=[self._item(item) for item in order.items],
            total=order.total,
            shipping_fee=order.shipping_fee,
            shipping_country=order.shipping_country,
            total_weight=order.total_weight,
            customer_info=CustomerInfoSchema(name=info.name, email=info.email, address=info.address, phone=info.phone),
            status=order.status,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )

    def orders(self, orders) -> list[OrderResponse]:
        return [self.order(o) for o in orders]


def _present(order: Order) -> OrderResponse:
    return _OrderPresenter(InventoryCatalog()).order(order)


def _page_response(page: OrderPage) -> dict:
    return {
        "orders": _OrderPresenter(InventoryCatalog()).orders(page.items),
        "total_pages": page.total_pages,
        "current_page": page.page,
        "total": page.total,
    }


def _rate_response(rule: ShippingFeeRule) -> ShippingRateResponse:
    return ShippingRateResponse(country=rule.country, base_fee=rule.base_fee, per_kg_rate=rule.per_kg_rate)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(
    body: CreateOrderRequest,
    idempotency_key: str | None = Header(default=None),
) -> OrderResponse:
    lines = [
        OrderLine(
            product_id=line.product_id,
            selected_color=line.selected_color,
            selected_size=SizeKey(eu=line.selected_size.eu, us=line.selected_size.us),
            quantity=line.quantity,
        )
        for line in body.products
    ]
    order = OrderFulfillmentService().create_order(
        lines,
        customer_info=body.customer_info.model_dump(),
        shipping_country=body.shipping_country,
        idempotency_key=idempotency_key,
    )
    return _present(order)


@order_router.get("", response_model=OrderListResponse)
async def list_orders(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    status: str | None = None,
    email: str | None = None,
    _admin: Principal = Depends(require_admin),
) -> OrderListResponse:
    status_filter = parse_status(status) if status else None
    result = OrderFulfillmentService().ledger.page(page=page, limit=limit, status=status_filter, email=email)
    return OrderListResponse(**_page_response(result))


@order_router.get("/stats/summary", response_model=OrderStatsResponse)
async def order_stats(_admin: Principal = Depends(require_admin)) -> OrderStatsResponse:
    stats = stats_summary()
    return OrderStatsResponse(
        total_orders=stats.total_orders,
        pending_orders=stats.pending_orders,
        shipped_orders=stats.shipped_orders,
        completed_orders=stats.completed_orders,
        total_revenue=stats.total_revenue,
    )


# ---------------------------------------------------------------------------
# Shopper-scoped order routes
# ---------------------------------------------------------------------------
@order_router.get("/user/my-orders", response_model=UserOrderListResponse)
async def my_orders(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    status: str | None = None,
    user: UserIdentity = Depends(require_user),
) -> UserOrderListResponse:
    status_filter = parse_status(status) if status else None
    result = OrderFulfillmentService().ledger.page(page=page, limit=limit, status=status_filter, email=user.email)
    return UserOrderListResponse(user_email=user.email, **_page_response(result))


@order_router.get("/user/stats/summary", response_model=UserOrderStatsResponse)
async def my_stats(user: UserIdentity = Depends(require_user)) -> UserOrderStatsResponse:
    stats = customer_stats(user.email)
    return UserOrderStatsResponse(
        total_orders=stats.total_orders,
        pending_orders=stats.pending_orders,
        shipped_orders=stats.shipped_orders,
        completed_orders=stats.completed_orders,
        total_spent=stats.total_spent,
        recent_orders=_OrderPresenter(InventoryCatalog()).orders(stats.recent_orders),
    )


@order_router.get("/user/{order_id}", response_model=OrderResponse)
async def my_order(order_id: str, user: UserIdentity = Depends(require_user)) -> OrderResponse:
    not_yours = OrderNotFoundError("Order not found or you do not have permission to view it")
    try:
        order = OrderFulfillmentService().get_order(order_id)
    except OrderNotFoundError:
        raise not_yours from None
    if order.customer_email != user.email:
        raise not_yours
    return _present(order)


# ---------------------------------------------------------------------------
# Admin order routes
# ---------------------------------------------------------------------------
@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, _admin: Principal = Depends(require_admin)) -> OrderResponse:
    return _present(OrderFulfillmentService().get_order(order_id))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    body: UpdateStatusRequest,
    _admin: Principal = Depends(require_admin),
) -> OrderResponse:
    return _present(OrderFulfillmentService().update_status(order_id, body.status))


@order_router.delete("/{order_id}", response_model=DeleteOrderResponse)
async def delete_order(order_id: str, _admin: Principal = Depends(require_admin)) -> DeleteOrderResponse:
    removal = OrderFulfillmentService().delete_order(order_id)
    if removal.fully_restocked:
        message = "Order deleted successfully and stock restored"
    else:
        items = len(removal.order.items)
        message = f"Order deleted successfully; stock restored for {items - removal.skipped_items} of {items} items"
    return DeleteOrderResponse(message=message, order_id=str(removal.order.id), skipped_items=removal.skipped_items)


# ---------------------------------------------------------------------------
# Shipping Router
# ---------------------------------------------------------------------------
shipping_router = APIRouter(prefix="/shipping", tags=["shipping"])


@shipping_router.get("/rates/{country}", response_model=ShippingRateResponse)
async def shipping_rate(country: str) -> ShippingRateResponse:
    return _rate_response(ShippingRateTable().lookup(country))


@shipping_router.get("/countries", response_model=list[ShippingRateResponse])
async def shipping_countries() -> list[ShippingRateResponse]:
    return [_rate_response(rule) for rule in ShippingRateTable().available()]
