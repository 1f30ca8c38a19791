from prometheus_client import Counter

# Business Metrics
logistics_orders_created_total = Counter(
    "logistics_orders_created_total",
    "Total orders durably stored"
)

logistics_fanout_calls_total = Counter(
    "logistics_fanout_calls_total",
    "Best-effort downstream calls issued by the orders service",
    ["step", "outcome"] # Labels: step='generate_invoice', outcome='ok' or 'error'
)

logistics_invoices_generated_total = Counter(
    "logistics_invoices_generated_total",
    "Invoices rendered and stored",
    ["email_sent"] # Labels: 'true', 'false'
)

logistics_notifications_sent_total = Counter(
    "logistics_notifications_sent_total",
    "Customer notification attempts",
    ["status", "outcome"] # Labels: order status, 'sent' or 'failed'
)
