import re
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
EXP_DATE_RE = re.compile(r"^(0[1-9]|1[0-2])/\d{2}$")
# Largest amount an invoice can print
MAX_AMOUNT = Decimal("999999999.99")


class OrderStatus(str, Enum):
    RECEIVED = "received"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    IN_TRANSIT = "in-transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    ON_HOLD = "on-hold"
    RETURNED = "returned"


def luhn_valid(digits: str) -> bool:
    total = 0
    for i, ch in enumerate(reversed(digits)):
        d = int(ch)
        if i % 2 == 1:
            d *= 2
            if d > 9:
                d -= 9
        total += d
    return total % 10 == 0


def _required(value, info: ValidationInfo):
    if value is None or not str(value).strip():
        raise ValueError(f"{info.field_name} is required")
    return str(value).strip()


class PaymentIn(BaseModel):
    cardFirstName: str
    cardLastName: str
    billingAddress: Optional[str] = None
    billingCity: Optional[str] = None
    billingState: Optional[str] = None
    billingCountry: Optional[str] = None
    billingZipCode: Optional[str] = None
    # Request-scoped only: never written to the store
    cardNumber: str
    securityNumber: str
    expDate: str

    @model_validator(mode="before")
    @classmethod
    def accept_frontend_aliases(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("expirationDate") and not data.get("expDate"):
            data["expDate"] = data["expirationDate"]

        exp = data.get("expDate")
        if exp is not None and not isinstance(exp, str):
            data["expDate"] = str(exp)
        elif isinstance(exp, str) and ("-" in exp or "T" in exp):
            try:
                parsed = datetime.fromisoformat(exp.replace("Z", "+00:00"))
                data["expDate"] = f"{parsed.month:02d}/{parsed.year % 100:02d}"
            except ValueError:
                pass # left as-is, the format check reports it
        return data

    @field_validator("cardFirstName", "cardLastName", mode="before")
    @classmethod
    def not_blank(cls, v, info: ValidationInfo):
        return _required(v, info)

    @field_validator("cardNumber", mode="before")
    @classmethod
    def valid_card_number(cls, v):
        digits = re.sub(r"[\s-]", "", str(v or ""))
        if not digits.isdigit() or not 12 <= len(digits) <= 19 or not luhn_valid(digits):
            raise ValueError("Valid credit card number is required")
        return digits

    @field_validator("securityNumber", mode="before")
    @classmethod
    def valid_security_number(cls, v):
        code = str(v or "").strip()
        if not code.isdigit() or len(code) not in (3, 4):
            raise ValueError("Valid security code is required")
        return code

    @field_validator("expDate")
    @classmethod
    def valid_exp_date(cls, v):
        if not EXP_DATE_RE.match(v.strip()):
            raise ValueError("Expiration date must be in MM/YY format")
        return v.strip()


class OrderIn(BaseModel):
    firstName: str
    lastName: str
    email: str
    phoneNumber: str
    address: str
    city: str
    state: str
    country: str
    zipCode: str
    payment: PaymentIn
    product: str
    price: Decimal = Field(ge=Decimal("0.01"), le=MAX_AMOUNT)
    shippingCost: Decimal = Field(ge=Decimal("0"), le=MAX_AMOUNT)
    status: Optional[OrderStatus] = None

    @model_validator(mode="before")
    @classmethod
    def accept_frontend_shape(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)

        # customerName -> firstName / lastName
        customer_name = data.get("customerName")
        if customer_name and not data.get("firstName"):
            first, _, rest = str(customer_name).strip().partition(" ")
            data["firstName"] = first
            data.setdefault("lastName", rest.strip())

        # product may arrive as {productName, productPrice}
        product = data.get("product")
        if isinstance(product, dict):
            if product.get("productPrice") is not None and data.get("price") in (None, ""):
                data["price"] = product["productPrice"]
            data["product"] = product.get("productName", "")
        return data

    @field_validator(
        "firstName", "lastName", "phoneNumber", "address", "city",
        "state", "country", "zipCode", "product",
        mode="before",
    )
    @classmethod
    def not_blank(cls, v, info: ValidationInfo):
        return _required(v, info)

    @field_validator("email", mode="before")
    @classmethod
    def valid_email(cls, v):
        email = str(v or "").strip()
        if not EMAIL_RE.match(email):
            raise ValueError("Valid email is required")
        return email


class StatusUpdate(BaseModel):
    status: OrderStatus
