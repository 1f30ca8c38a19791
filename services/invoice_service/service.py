import asyncio
import html
import uuid

import structlog

from services.order_service.repository import OrderStore, utc_now
from shared.errors import OrderNotFound
from shared.mail import Mailer, resolve_recipients
from shared.observability import logistics_invoices_generated_total
from .renderer import InvoiceRenderer, coerce_amount, format_currency
from .schemas import InvoiceResult
from .storage import ArtifactStore, invoice_filename

logger = structlog.get_logger(__name__)


def invoice_email(order: dict, invoice_id: str) -> tuple:
    name = order.get("firstName") or "customer"
    total = format_currency(order.get("totalCost"))
    subject = f"Your invoice {invoice_id} for order {order.get('orderId')}"
    product = str(order.get("product", ""))
    html_body = (
        f"<p>Hi {html.escape(str(name))},</p>"
        f"<p>Thank you for your order of <strong>{html.escape(product)}</strong>.</p>"
        f"<p>Your invoice <strong>{invoice_id}</strong> for {total} is attached.</p>"
    )
    text = (
        f"Hi {name},\n\nThank you for your order of {product}.\n"
        f"Your invoice {invoice_id} for {total} is attached."
    )
    return subject, html_body, text


class InvoiceService:
    def __init__(
        self,
        store: OrderStore,
        renderer: InvoiceRenderer,
        artifacts: ArtifactStore,
        mailer: Mailer,
        sandbox_recipient: str = "",
    ):
        self.store = store
        self.renderer = renderer
        self.artifacts = artifacts
        self.mailer = mailer
        self.sandbox_recipient = sandbox_recipient

    async def receive(self, order: dict) -> dict:
        if self.store.shared:
            # Only the orders service writes the shared table
            logger.info("order_replica_skipped", order_id=order["orderId"], storage=self.store.name)
            return order
        stored = await self.store.create(order)
        logger.info("order_replica_received", order_id=order["orderId"])
        return stored

    async def list_orders(self):
        return await self.store.list()

    async def search_orders(self, name: str):
        """Case-insensitive substring match on the customer's full name."""
        wanted = name.strip().lower()
        return [
            o for o in await self.store.list()
            if wanted in f"{o.get('firstName', '')} {o.get('lastName', '')}".lower()
        ]

    async def generate(self, order_id: str) -> InvoiceResult:
        order = await self.store.get(order_id)
        if not order:
            raise OrderNotFound(order_id)

        invoice_id = f"INV-{uuid.uuid4().hex[:10].upper()}"
        created_at = utc_now()
        pdf = await asyncio.to_thread(self.renderer.render, order, invoice_id, created_at)

        # ArtifactStoreError propagates: without a stored file there is no invoice
        filename = invoice_filename(order_id)
        pdf_url = await self.artifacts.save(filename, pdf)

        email_sent, email_error = False, None
        if order.get("email"):
            subject, html_body, text = invoice_email(order, invoice_id)
            mail = await self.mailer.send(
                resolve_recipients(order["email"], self.sandbox_recipient),
                subject,
                html_body,
                text,
                attachments=[(filename, pdf, "application/pdf")],
            )
            email_sent, email_error = mail.success, mail.error
        else:
            email_error = "Order has no customer email"

        if not email_sent:
            logger.warning("invoice_email_failed", order_id=order_id, error=email_error)
        logistics_invoices_generated_total.labels(email_sent=str(email_sent).lower()).inc()
        logger.info("invoice_generated", order_id=order_id, invoice_id=invoice_id, pdf_url=pdf_url)

        return InvoiceResult(
            success=True,
            invoiceId=invoice_id,
            orderId=order_id,
            amount=str(coerce_amount(order.get("totalCost"))),
            pdfUrl=pdf_url,
            emailSent=email_sent,
            emailError=email_error,
            createdAt=created_at,
        )
