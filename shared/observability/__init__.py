from .setup import setup_observability
from .metrics import (
    logistics_orders_created_total,
    logistics_fanout_calls_total,
    logistics_invoices_generated_total,
    logistics_notifications_sent_total
)
