from fastapi import FastAPI

from services.order_service.main import order_app
from services.invoice_service.main import invoice_app
from services.notification_service.main import notification_app
from services.verification_service.main import verification_app

# Single-process run of every service. Point INVOICES_SERVICE_URL and
# NOTIFICATIONS_SERVICE_URL at the mounted prefixes, e.g.
# http://localhost:8000/invoices-service
app = FastAPI(title="Logistics Cluster")

@app.get("/health")
async def health_check():
    return {"status": "healthy", "services": ["orders", "invoices", "notifications", "verification"]}

app.mount("/orders-service", order_app)
app.mount("/invoices-service", invoice_app)
app.mount("/notifications-service", notification_app)
app.mount("/verification-service", verification_app)

@app.on_event("startup")
async def startup_event():
    # Mounted apps do not get their own startup events
    for store in (order_app.state.order_service.store, invoice_app.state.invoice_service.store):
        if hasattr(store, "ensure_schema"):
            await store.ensure_schema()
