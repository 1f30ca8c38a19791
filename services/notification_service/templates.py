"""Status templates: order status -> subject, headline and body copy."""
import html
import re

STATUS_TEMPLATES: dict[str, dict] = {
    "received": {
        "subject": "We received your order {order_id}",
        "title": "Order Received",
        "message": "Thanks for your order! We have received it and will start processing it shortly.",
        "color": "#2563eb",
    },
    "processing": {
        "subject": "Your order {order_id} is being processed",
        "title": "Order Processing",
        "message": "Good news! Your order is being prepared for shipment.",
        "color": "#7c3aed",
    },
    "shipped": {
        "subject": "Your order {order_id} has shipped",
        "title": "Order Shipped",
        "message": "Your order has been handed to the carrier and is on its way.",
        "color": "#0891b2",
    },
    "in-transit": {
        "subject": "Your order {order_id} is in transit",
        "title": "In Transit",
        "message": "Your package is moving through the carrier network toward you.",
        "color": "#0d9488",
    },
    "delivered": {
        "subject": "Your order {order_id} has been delivered",
        "title": "Order Delivered",
        "message": "Your order has been delivered. We hope you enjoy it!",
        "color": "#16a34a",
    },
    "cancelled": {
        "subject": "Your order {order_id} has been cancelled",
        "title": "Order Cancelled",
        "message": "Your order has been cancelled. If you did not request this, please contact support.",
        "color": "#dc2626",
    },
    "on-hold": {
        "subject": "Your order {order_id} is on hold",
        "title": "Order On Hold",
        "message": "Your order is temporarily on hold. We will let you know as soon as it moves again.",
        "color": "#d97706",
    },
    "returned": {
        "subject": "Your order {order_id} has been returned",
        "title": "Order Returned",
        "message": "We have registered the return of your order. Any refund will follow shortly.",
        "color": "#6b7280",
    },
}

GENERIC_TEMPLATE = {
    "subject": "Update on your order {order_id}",
    "title": "Order Status Update",
    "message": "The status of your order has changed to: {status}.",
    "color": "#374151",
}

KNOWN_STATUSES = frozenset(STATUS_TEMPLATES)


def get_template(status: str) -> dict:
    """Look up the template for a status, falling back to the generic one."""
    return STATUS_TEMPLATES.get(status, GENERIC_TEMPLATE)


def render_subject(template: dict, order_id: str, status: str) -> str:
    return template["subject"].format(order_id=order_id, status=status)


def render_html(template: dict, order_id: str, status: str, customer_name: str = None) -> str:
    greeting = f"Hi {html.escape(customer_name)}," if customer_name else "Hello,"
    message = html.escape(template["message"].format(status=status))
    return f"""<!DOCTYPE html>
<html>
  <body style="margin:0;padding:0;background:#f3f4f6;font-family:Helvetica,Arial,sans-serif;">
    <div style="max-width:560px;margin:24px auto;background:#ffffff;border-radius:8px;overflow:hidden;">
      <div style="background:{template['color']};color:#ffffff;padding:20px 24px;">
        <h1 style="margin:0;font-size:22px;">{html.escape(template['title'])}</h1>
      </div>
      <div style="padding:24px;color:#111827;font-size:15px;line-height:1.5;">
        <p>{greeting}</p>
        <p>{message}</p>
        <p>Order ID: <strong>{html.escape(order_id)}</strong><br>
           Status: <strong>{html.escape(status)}</strong></p>
      </div>
      <div style="padding:16px 24px;background:#f9fafb;color:#6b7280;font-size:12px;">
        Logistics Tracking &middot; This is an automated message, please do not reply.
      </div>
    </div>
  </body>
</html>"""


def html_to_text(markup: str) -> str:
    text = re.sub(r"<[^>]+>", " ", markup)
    text = html.unescape(text)
    return re.sub(r"\s+", " ", text).strip()
