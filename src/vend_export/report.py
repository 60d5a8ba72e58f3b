"""Sales history CSV report.

Renders sales into the layout of Vend's own sales history export. Each
exported sale produces, in order:

- one ``Sale`` summary row,
- one ``Sale Line`` row per line item,
- one ``Payment`` row per payment.

Every row has 22 columns: the 20 named in the header plus two trailing
account-code columns that are always blank.
"""

from __future__ import annotations

import csv
import json
import logging
import time
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import IO, Protocol, TypeVar

from vend_export.exceptions import ReportError
from vend_export.models import Customer, LineItem, Payment, Product, Register, Sale, User
from vend_export.utils import format_amount, split_date_time

logger = logging.getLogger(__name__)

HEADER = (
    "Sale Date",
    "Sale Time",
    "Invoice Number",
    "Line Type",
    "Customer Code",
    "Company Name",
    "Customer Name",
    "Sale Note",
    "Quantity",
    "Price",
    "Tax",
    "Discount",
    "Loyalty",
    "Total",
    "Paid",
    "Details",
    "Register",
    "User",
    "Status",
    "Product Sku",
)

# Sku plus AccountCodeSale and AccountCodePurchase.
ROW_WIDTH = len(HEADER) + 2

LINE_TYPE_SALE = "Sale"
LINE_TYPE_SALE_LINE = "Sale Line"
LINE_TYPE_PAYMENT = "Payment"

DELETED_REGISTER = "<Deleted Register>"

Row = tuple[str, ...]


class _HasId(Protocol):
    @property
    def id(self) -> str | None: ...


R = TypeVar("R", bound=_HasId)


def index_by_id(records: Iterable[R]) -> dict[str, R]:
    """Key records by id. The first record wins on duplicate ids."""
    index: dict[str, R] = {}
    for record in records:
        if record.id is not None and record.id not in index:
            index[record.id] = record
    return index


def quote_note(note: str | None) -> str:
    """Wrap a sale note in double quotes, escaping quotes and control characters."""
    if note is None:
        return ""
    return json.dumps(note, ensure_ascii=False)


def register_name(register: Register | None) -> str:
    if register is None:
        return DELETED_REGISTER
    name = register.name or ""
    if register.deleted_at is not None:
        name += " (Deleted)"
    return name


def sale_details(line_items: Sequence[LineItem], products: Mapping[str, Product]) -> str:
    """Items sold, e.g. ``2 X Coffee + 1 X Muffin``.

    Line items whose product cannot be found are left out.
    """
    fragments = []
    for item in line_items:
        product = products.get(item.product_id) if item.product_id else None
        if product is None:
            continue
        fragments.append(f"{format_amount(item.quantity)} X {product.name or ''}")
    return " + ".join(fragments)


_COLUMNS = {
    "date": 0,
    "time": 1,
    "invoice_number": 2,
    "line_type": 3,
    "customer_code": 4,
    "company_name": 5,
    "customer_name": 6,
    "note": 7,
    "quantity": 8,
    "price": 9,
    "tax": 10,
    "discount": 11,
    "loyalty": 12,
    "total": 13,
    "paid": 14,
    "details": 15,
    "register": 16,
    "user": 17,
    "status": 18,
    "sku": 19,
}


def _row(**cells: str) -> Row:
    """Place named cells at their column positions; everything else is blank."""
    row = [""] * ROW_WIDTH
    for name, value in cells.items():
        row[_COLUMNS[name]] = value
    return tuple(row)


def build_sale_row(
    sale: Sale,
    date_str: str,
    time_str: str,
    customer: Customer | None,
    register: Register | None,
    user: User | None,
    products: Mapping[str, Product],
) -> Row:
    """Summary row for one sale."""
    total_quantity = 0.0
    total_discount = 0.0
    for item in sale.line_items:
        total_quantity += item.quantity or 0.0
        total_discount += item.discount_total or 0.0

    price = sale.total_price or 0.0
    tax = sale.total_tax or 0.0

    return _row(
        date=date_str,
        time=time_str,
        invoice_number=sale.invoice_number or "",
        line_type=LINE_TYPE_SALE,
        customer_code=(customer.code or "") if customer else "",
        company_name=(customer.company_name or "") if customer else "",
        customer_name=customer.full_name if customer else "",
        note=quote_note(sale.note),
        quantity=format_amount(total_quantity),
        price=format_amount(price),
        tax=format_amount(tax),
        discount=format_amount(total_discount),
        loyalty=format_amount(sale.total_loyalty),
        total=format_amount(price + tax),
        details=sale_details(sale.line_items, products),
        register=register_name(register),
        user=(user.display_name or "") if user else "",
        status=sale.status or "",
    )


def build_line_item_row(
    item: LineItem, date_str: str, time_str: str, product: Product | None
) -> Row:
    """Row for one product line of a sale."""
    price = item.price or 0.0
    tax = item.tax or 0.0
    quantity = item.quantity or 0.0
    return _row(
        date=date_str,
        time=time_str,
        line_type=LINE_TYPE_SALE_LINE,
        quantity=format_amount(quantity),
        price=format_amount(price),
        tax=format_amount(tax),
        discount=format_amount(item.discount),
        loyalty=format_amount(item.loyalty_value),
        total=format_amount((price + tax) * quantity),
        details=(product.variant_name or "") if product else "",
        sku=(product.sku or "") if product else "",
    )


def build_payment_row(payment: Payment, date_str: str, time_str: str) -> Row:
    """Row for one payment of a sale."""
    return _row(
        date=date_str,
        time=time_str,
        line_type=LINE_TYPE_PAYMENT,
        paid=format_amount(payment.amount),
        details=payment.name or "",
    )


def sale_rows(
    sale: Sale,
    timezone: str | None,
    registers: Mapping[str, Register],
    users: Mapping[str, User],
    customers: Mapping[str, Customer],
    products: Mapping[str, Product],
) -> list[Row]:
    """All rows for one sale: summary, then line items, then payments."""
    date_str, time_str = split_date_time(sale.sale_date, timezone)

    customer = customers.get(sale.customer_id) if sale.customer_id else None
    register = registers.get(sale.register_id) if sale.register_id else None
    user = users.get(sale.user_id) if sale.user_id else None

    rows = [build_sale_row(sale, date_str, time_str, customer, register, user, products)]
    for item in sale.line_items:
        product = products.get(item.product_id) if item.product_id else None
        rows.append(build_line_item_row(item, date_str, time_str, product))
    for payment in sale.payments:
        rows.append(build_payment_row(payment, date_str, time_str))
    return rows


def report_file_name(prefix: str, timestamp: int | None = None) -> str:
    """``{prefix}_sales_history_{unix seconds}.csv``."""
    if timestamp is None:
        timestamp = int(time.time())
    return f"{prefix}_sales_history_{timestamp}.csv"


def create_report(prefix: str, output_dir: str | Path = ".") -> IO[str]:
    """Create the report file and write its header.

    Args:
        prefix: Store domain prefix, used as the file name prefix.
        output_dir: Directory to create the file in.

    Returns:
        The open text handle, positioned after the header. The caller closes it.

    Raises:
        ReportError: If the file cannot be created.

    """
    path = Path(output_dir) / report_file_name(prefix)
    try:
        handle = open(path, "w", newline="", encoding="utf-8")
    except OSError as e:
        raise ReportError(f"Error creating CSV file {path}: {e}") from e

    writer = csv.writer(handle)
    writer.writerow(HEADER)
    handle.flush()
    logger.info("Created report %s", path)
    return handle


def write_report(
    handle: IO[str],
    registers: Iterable[Register],
    users: Iterable[User],
    customers: Iterable[Customer],
    products: Iterable[Product],
    sales: Iterable[Sale],
    prefix: str,
    timezone: str | None,
) -> IO[str]:
    """Write the rows of every exportable sale to ``handle``.

    Deleted sales and sales with status ``OPEN`` are skipped. Sales are
    written in input order.

    Args:
        handle: Writable text handle, usually from ``create_report``.
        registers: Registers to resolve register names from.
        users: Users to resolve user display names from.
        customers: Customers to resolve customer fields from.
        products: Products to resolve names, variant names and SKUs from.
        sales: Sales to export.
        prefix: Store domain prefix.
        timezone: zoneinfo identifier used for sale dates and times; None
            means local time.

    Returns:
        The same handle, flushed and still open.

    """
    register_index = index_by_id(registers)
    user_index = index_by_id(users)
    customer_index = index_by_id(customers)
    product_index = index_by_id(products)

    writer = csv.writer(handle)
    written = 0
    skipped = 0
    for sale in sales:
        if not sale.is_exportable:
            skipped += 1
            continue
        writer.writerows(
            sale_rows(sale, timezone, register_index, user_index, customer_index, product_index)
        )
        written += 1

    handle.flush()
    logger.debug("%s: wrote %d sales, skipped %d deleted or open", prefix, written, skipped)
    return handle
