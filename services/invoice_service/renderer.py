"""
PDF invoice rendering.

Amounts coming from a pushed order are untrusted: anything that is not a
finite, non-negative number renders as $0.00 instead of failing the
invoice.
"""
import io
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

import structlog
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

logger = structlog.get_logger(__name__)

CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("999999999.99")
ZERO = Decimal("0")


def coerce_amount(value) -> Decimal:
    try:
        amount = Decimal(str(value).replace("$", "").replace(",", "").strip())
    except (InvalidOperation, ValueError, TypeError):
        logger.warning("malformed_amount", value=repr(value))
        return ZERO

    if not amount.is_finite() or amount < 0:
        logger.warning("malformed_amount", value=repr(value))
        return ZERO
    return min(amount, MAX_AMOUNT).quantize(CENT, rounding=ROUND_HALF_UP)


def format_currency(value) -> str:
    return f"${coerce_amount(value):,.2f}"


def mask_card(last4) -> str:
    digits = str(last4 or "")[-4:]
    return f"**** **** **** {digits if digits.isdigit() and len(digits) == 4 else '****'}"


class InvoiceRenderer:
    page_size = letter
    margin = 54

    def render(self, order: dict, invoice_id: str, issued_at: str) -> bytes:
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=self.page_size)
        pdf.setTitle(f"Invoice {invoice_id}")
        width, height = self.page_size
        left, right = self.margin, width - self.margin
        y = height - self.margin

        # Header
        pdf.setFont("Helvetica-Bold", 22)
        pdf.drawString(left, y, "INVOICE")
        pdf.setFont("Helvetica", 10)
        pdf.drawRightString(right, y, f"Invoice #: {invoice_id}")
        y -= 16
        pdf.drawRightString(right, y, f"Date: {issued_at[:10]}")
        y -= 14
        pdf.drawRightString(right, y, f"Order ID: {order.get('orderId', '')}")
        y -= 30

        # Bill to
        payment = order.get("payment") or {}
        pdf.setFont("Helvetica-Bold", 12)
        pdf.drawString(left, y, "Bill To")
        pdf.setFont("Helvetica", 10)
        lines = [
            f"{order.get('firstName', '')} {order.get('lastName', '')}".strip(),
            payment.get("billingAddress") or order.get("address", ""),
            ", ".join(
                part for part in (
                    payment.get("billingCity") or order.get("city", ""),
                    payment.get("billingState") or order.get("state", ""),
                    payment.get("billingZipCode") or order.get("zipCode", ""),
                ) if part
            ),
            payment.get("billingCountry") or order.get("country", ""),
            order.get("email", ""),
            order.get("phoneNumber", ""),
        ]
        for line in lines:
            if line:
                y -= 14
                pdf.drawString(left, y, str(line))
        y -= 30

        # Order line
        pdf.setFont("Helvetica-Bold", 12)
        pdf.drawString(left, y, "Order Details")
        y -= 6
        pdf.line(left, y, right, y)
        pdf.setFont("Helvetica", 10)
        y -= 16
        pdf.drawString(left, y, f"Product: {order.get('product', '')}")
        pdf.drawRightString(right, y, format_currency(order.get("price")))
        y -= 14
        pdf.drawString(left, y, f"Payment: {mask_card(payment.get('cardNumberLast4'))}")
        y -= 14
        pdf.drawString(left, y, f"Status: {order.get('status', '')}")
        y -= 24

        # Payment summary
        for label, key in (("Subtotal", "price"), ("Shipping", "shippingCost"), ("Tax (8%)", "tax")):
            pdf.drawString(right - 200, y, label)
            pdf.drawRightString(right, y, format_currency(order.get(key)))
            y -= 14
        pdf.line(right - 200, y + 4, right, y + 4)
        y -= 10
        pdf.setFont("Helvetica-Bold", 12)
        pdf.drawString(right - 200, y, "Total")
        pdf.drawRightString(right, y, format_currency(order.get("totalCost")))

        # Footer
        pdf.setFont("Helvetica-Oblique", 9)
        pdf.drawCentredString(width / 2, self.margin, "Thank you for your business.")

        pdf.showPage()
        pdf.save()
        return buffer.getvalue()
