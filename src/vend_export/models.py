"""Vend API records used by the sales export.

Each record is a frozen dataclass built from one JSON object of the Vend
API 2.0 with ``from_api``. Records are read-only and live for a single run.

Nullable numbers stay ``None`` here; the report layer treats them as zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _str(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    return str(value)


def _float(payload: dict[str, Any], key: str) -> float | None:
    """Read a numeric field that may be missing, null, a number or a numeric string."""
    value = payload.get(key)
    if value is None or value == "":
        return None
    return float(value)


@dataclass(frozen=True)
class Register:
    id: str | None
    name: str | None = None
    deleted_at: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> Register:
        return cls(
            id=_str(payload, "id"),
            name=_str(payload, "name"),
            deleted_at=_str(payload, "deleted_at"),
        )


@dataclass(frozen=True)
class User:
    id: str | None
    display_name: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> User:
        return cls(id=_str(payload, "id"), display_name=_str(payload, "display_name"))


@dataclass(frozen=True)
class Customer:
    id: str | None
    code: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    company_name: str | None = None

    @property
    def full_name(self) -> str:
        """First and last name joined by a space, skipping absent or empty parts."""
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> Customer:
        return cls(
            id=_str(payload, "id"),
            code=_str(payload, "customer_code"),
            first_name=_str(payload, "first_name"),
            last_name=_str(payload, "last_name"),
            company_name=_str(payload, "company_name"),
        )


@dataclass(frozen=True)
class Product:
    id: str | None
    name: str | None = None
    variant_name: str | None = None
    sku: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> Product:
        return cls(
            id=_str(payload, "id"),
            name=_str(payload, "name"),
            variant_name=_str(payload, "variant_name"),
            sku=_str(payload, "sku"),
        )


@dataclass(frozen=True)
class Outlet:
    id: str | None
    name: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> Outlet:
        return cls(id=_str(payload, "id"), name=_str(payload, "name"))


@dataclass(frozen=True)
class LineItem:
    """One product entry within a sale.

    ``discount`` is the per-unit discount shown on the line row;
    ``discount_total`` is the line's total discount, summed into the
    sale row.
    """

    product_id: str | None
    id: str | None = None
    quantity: float | None = None
    price: float | None = None
    tax: float | None = None
    discount: float | None = None
    discount_total: float | None = None
    loyalty_value: float | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> LineItem:
        return cls(
            id=_str(payload, "id"),
            product_id=_str(payload, "product_id"),
            quantity=_float(payload, "quantity"),
            price=_float(payload, "price"),
            tax=_float(payload, "tax"),
            discount=_float(payload, "discount"),
            discount_total=_float(payload, "discount_total"),
            loyalty_value=_float(payload, "loyalty_value"),
        )


@dataclass(frozen=True)
class Payment:
    name: str | None
    amount: float | None = None
    id: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> Payment:
        return cls(
            id=_str(payload, "id"),
            name=_str(payload, "name"),
            amount=_float(payload, "amount"),
        )


@dataclass(frozen=True)
class Sale:
    """One point-of-sale transaction with its line items and payments."""

    id: str | None
    sale_date: str | None = None
    invoice_number: str | None = None
    status: str | None = None
    note: str | None = None
    customer_id: str | None = None
    register_id: str | None = None
    user_id: str | None = None
    outlet_id: str | None = None
    total_price: float | None = None
    total_tax: float | None = None
    total_loyalty: float | None = None
    deleted_at: str | None = None
    line_items: tuple[LineItem, ...] = field(default_factory=tuple)
    payments: tuple[Payment, ...] = field(default_factory=tuple)

    @property
    def is_exportable(self) -> bool:
        """Deleted sales and sales still OPEN on the register are left out of reports."""
        return self.deleted_at is None and self.status != "OPEN"

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> Sale:
        return cls(
            id=_str(payload, "id"),
            sale_date=_str(payload, "sale_date"),
            invoice_number=_str(payload, "invoice_number"),
            status=_str(payload, "status"),
            note=_str(payload, "note"),
            customer_id=_str(payload, "customer_id"),
            register_id=_str(payload, "register_id"),
            user_id=_str(payload, "user_id"),
            outlet_id=_str(payload, "outlet_id"),
            total_price=_float(payload, "total_price"),
            total_tax=_float(payload, "total_tax"),
            total_loyalty=_float(payload, "total_loyalty"),
            deleted_at=_str(payload, "deleted_at"),
            line_items=tuple(LineItem.from_api(li) for li in payload.get("line_items") or []),
            payments=tuple(Payment.from_api(p) for p in payload.get("payments") or []),
        )
