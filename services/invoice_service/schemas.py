from typing import Optional
from pydantic import BaseModel, ConfigDict


class OrderReplica(BaseModel):
    """Copy of an order pushed by the orders service; every field is kept."""
    model_config = ConfigDict(extra="allow")

    orderId: str


class InvoiceResult(BaseModel):
    success: bool
    invoiceId: str
    orderId: str
    amount: str
    pdfUrl: str
    emailSent: bool
    emailError: Optional[str] = None
    createdAt: str
