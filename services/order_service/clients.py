"""
HTTP clients for the services the orders service fans out to.

Non-2xx answers raise DownstreamError; connection problems surface as
httpx.HTTPError. Callers decide how much of that is fatal (usually none).
"""
from typing import Optional

import httpx


class DownstreamError(Exception):
    def __init__(self, service: str, status_code: int, message: str):
        super().__init__(f"{service} responded {status_code}: {message}")
        self.service = service
        self.status_code = status_code
        self.message = message


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    if isinstance(body, dict):
        details = body.get("details")
        if isinstance(details, dict) and details.get("error"):
            return str(details["error"])
        return str(body.get("error") or body.get("detail") or body.get("message") or body)
    return str(body)


class _ServiceClient:
    service = "downstream"

    def __init__(self, base_url: str, timeout: float = 5.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _post(self, path: str, payload: Optional[dict] = None) -> dict:
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport) as client:
            resp = await client.post(path, json=payload)
        if resp.status_code >= 400:
            raise DownstreamError(self.service, resp.status_code, _error_message(resp))
        return resp.json()


class InvoicesClient(_ServiceClient):
    service = "invoices"

    async def push_order(self, order: dict) -> dict:
        """Send a replica so the invoices service can see orders stored here."""
        return await self._post("/orders", order)

    async def generate_invoice(self, order_id: str) -> dict:
        return await self._post(f"/invoices/generate/{order_id}")


class NotificationsClient(_ServiceClient):
    service = "notifications"

    async def notify(self, order_id: str, customer_email: str, status: str, customer_name: Optional[str] = None) -> dict:
        payload = {"orderId": order_id, "customerEmail": customer_email, "status": status}
        if customer_name:
            payload["customerName"] = customer_name
        return await self._post("/notify", payload)
