import uuid
from decimal import Decimal, ROUND_HALF_UP

import structlog

from shared.errors import OrderNotFound
from shared.observability import logistics_orders_created_total
from .clients import InvoicesClient, NotificationsClient
from .fanout import FanOut, StepResult
from .repository import OrderStore, utc_now
from .schemas import OrderIn, OrderStatus

logger = structlog.get_logger(__name__)

TAX_RATE = Decimal("0.08")
CENT = Decimal("0.01")


def money(value: Decimal) -> str:
    return str(Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


def compute_totals(price: Decimal, shipping_cost: Decimal) -> dict:
    tax = price * TAX_RATE
    total = price + shipping_cost + tax
    return {
        "price": money(price),
        "shippingCost": money(shipping_cost),
        "tax": money(tax),
        "totalCost": money(total),
    }


def order_fields(data: OrderIn) -> dict:
    """Persistable fields of an order payload. Card number and CVV stay behind."""
    p = data.payment
    return {
        "firstName": data.firstName,
        "lastName": data.lastName,
        "email": data.email,
        "phoneNumber": data.phoneNumber,
        "address": data.address,
        "city": data.city,
        "state": data.state,
        "country": data.country,
        "zipCode": data.zipCode,
        "payment": {
            "cardFirstName": p.cardFirstName,
            "cardLastName": p.cardLastName,
            "billingAddress": p.billingAddress or data.address,
            "billingCity": p.billingCity or data.city,
            "billingState": p.billingState or data.state,
            "billingCountry": p.billingCountry or data.country,
            "billingZipCode": p.billingZipCode or data.zipCode,
            "cardNumberLast4": p.cardNumber[-4:],
            "securityProvided": True,
            "expDate": p.expDate,
        },
        "product": data.product,
        **compute_totals(data.price, data.shippingCost),
    }


def invoice_outcome(result: StepResult) -> dict:
    if result.ok:
        return {"generated": True, "message": "Invoice has been generated and sent", "details": result.value}
    return {"generated": False, "message": "Failed to generate invoice, it will be processed later", "error": result.error}


def notification_outcome(result: StepResult) -> dict:
    if result.ok:
        details = result.value.get("details", result.value) if isinstance(result.value, dict) else result.value
        return {"sent": True, "details": details}
    return {"sent": False, "error": result.error}


class OrderService:
    def __init__(self, store: OrderStore, invoices: InvoicesClient, notifications: NotificationsClient):
        self.store = store
        self.invoices = invoices
        self.notifications = notifications

    # --- side effects ---

    async def _push_replica(self, ctx: dict):
        return await self.invoices.push_order(ctx["order"])

    async def _generate_invoice(self, ctx: dict):
        return await self.invoices.generate_invoice(ctx["order_id"])

    async def _notify_customer(self, ctx: dict):
        order = ctx["order"]
        name = f"{order.get('firstName', '')} {order.get('lastName', '')}".strip()
        return await self.notifications.notify(ctx["order_id"], order["email"], order["status"], name or None)

    # --- operations ---

    async def create_order(self, data: OrderIn) -> dict:
        order_id = str(uuid.uuid4())
        now = utc_now()
        order = {
            "orderId": order_id,
            **order_fields(data),
            "status": OrderStatus.RECEIVED.value,
            "createdAt": now,
            "updatedAt": now,
        }

        # The only fatal step: StorageError propagates as a 500
        await self.store.create(order)
        logistics_orders_created_total.inc()
        logger.info("order_created", order_id=order_id, total_cost=order["totalCost"])

        fanout = (
            FanOut()
            .add_step("push_replica", self._push_replica)
            .add_step("generate_invoice", self._generate_invoice)
            .add_step("notify_customer", self._notify_customer)
        )
        results = await fanout.execute({"order_id": order_id, "order": order})

        return {
            "message": "Order created successfully",
            "orderId": order_id,
            "totalCost": order["totalCost"],
            "invoice": invoice_outcome(results["generate_invoice"]),
            "notification": notification_outcome(results["notify_customer"]),
        }

    async def get_order(self, order_id: str) -> dict:
        order = await self.store.get(order_id)
        if not order:
            raise OrderNotFound(order_id)
        return order

    async def list_orders(self) -> list:
        return await self.store.list()

    async def update_order(self, order_id: str, data: OrderIn):
        """Returns (updated order, whether the status changed)."""
        existing = await self.get_order(order_id)

        fields = order_fields(data)
        fields["status"] = data.status.value if data.status else existing.get("status", OrderStatus.RECEIVED.value)

        updated = await self.store.update(order_id, fields)
        if not updated:
            raise OrderNotFound(order_id)
        logger.info("order_updated", order_id=order_id, status=updated["status"])
        return updated, updated["status"] != existing.get("status")

    async def update_status(self, order_id: str, status: OrderStatus) -> dict:
        await self.get_order(order_id)
        updated = await self.store.update(order_id, {"status": status.value})
        if not updated:
            raise OrderNotFound(order_id)
        logger.info("order_status_updated", order_id=order_id, status=status.value)
        return updated

    async def notify_status_change(self, order: dict) -> dict:
        """Runs after the response is sent; the outcome is only logged."""
        fanout = FanOut().add_step("notify_customer", self._notify_customer)
        results = await fanout.execute({"order_id": order["orderId"], "order": order})
        outcome = notification_outcome(results["notify_customer"])
        logger.info("status_notification", order_id=order["orderId"], status=order.get("status"), sent=outcome["sent"])
        return outcome

    async def delete_order(self, order_id: str) -> dict:
        deleted = await self.store.delete(order_id)
        if not deleted:
            raise OrderNotFound(order_id)
        logger.info("order_deleted", order_id=order_id)
        return deleted

    async def filter_by_status(self, status: OrderStatus) -> list:
        return await self.store.filter_by_status(status.value)

    async def filter_by_email(self, email: str) -> list:
        return await self.store.filter_by_email(email)

    async def generate_invoice(self, order_id: str) -> StepResult:
        order = await self.get_order(order_id)
        fanout = (
            FanOut()
            .add_step("push_replica", self._push_replica)
            .add_step("generate_invoice", self._generate_invoice)
        )
        results = await fanout.execute({"order_id": order_id, "order": order})
        return results["generate_invoice"]
