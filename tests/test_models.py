"""Unit tests for building records from Vend API payloads."""

from vend_export.models import Customer, LineItem, Register, Sale


def test_sale_from_api_full_payload() -> None:
    payload = {
        "id": "sale-1",
        "outlet_id": "outlet-1",
        "register_id": "reg-1",
        "user_id": "user-1",
        "customer_id": "cust-1",
        "invoice_number": 1042,
        "status": "CLOSED",
        "note": "Thanks",
        "sale_date": "2018-03-01T02:04:05Z",
        "total_price": 100,
        "total_tax": "15.00",
        "total_loyalty": None,
        "line_items": [
            {
                "id": "li-1",
                "product_id": "prod-1",
                "quantity": 2,
                "price": 10,
                "tax": 1,
                "discount": 0,
                "discount_total": "0.5",
                "loyalty_value": 0.2,
            }
        ],
        "payments": [{"id": "pay-1", "name": "Cash", "amount": 115}],
    }

    sale = Sale.from_api(payload)

    assert sale.id == "sale-1"
    assert sale.invoice_number == "1042"
    assert sale.total_price == 100.0
    assert sale.total_tax == 15.0
    assert sale.total_loyalty is None
    assert sale.deleted_at is None
    assert sale.is_exportable
    assert sale.line_items == (
        LineItem(
            id="li-1",
            product_id="prod-1",
            quantity=2.0,
            price=10.0,
            tax=1.0,
            discount=0.0,
            discount_total=0.5,
            loyalty_value=0.2,
        ),
    )
    assert sale.payments[0].name == "Cash"
    assert sale.payments[0].amount == 115.0


def test_sale_from_api_missing_collections() -> None:
    sale = Sale.from_api({"id": "s", "line_items": None})
    assert sale.line_items == ()
    assert sale.payments == ()
    assert sale.sale_date is None


def test_sale_exportable_rules() -> None:
    assert not Sale.from_api({"id": "s", "status": "OPEN"}).is_exportable
    assert not Sale.from_api({"id": "s", "deleted_at": "2018-03-02T00:00:00Z"}).is_exportable
    assert Sale.from_api({"id": "s", "status": "ONACCOUNT"}).is_exportable
    assert Sale.from_api({"id": "s"}).is_exportable


def test_empty_numeric_string_is_absent() -> None:
    item = LineItem.from_api({"product_id": "p", "quantity": ""})
    assert item.quantity is None


def test_customer_from_api_and_full_name() -> None:
    customer = Customer.from_api(
        {"id": "c", "customer_code": "C-9", "first_name": "Jane", "company_name": "Acme"}
    )
    assert customer.code == "C-9"
    assert customer.last_name is None
    assert customer.full_name == "Jane"
    assert Customer(id="c", first_name="Jane", last_name="Doe").full_name == "Jane Doe"
    assert Customer(id="c").full_name == ""


def test_register_from_api() -> None:
    register = Register.from_api({"id": "r", "name": "Front", "deleted_at": "2019-01-01T00:00:00Z"})
    assert register.name == "Front"
    assert register.deleted_at == "2019-01-01T00:00:00Z"


def test_customer_full_name_skips_empty_parts() -> None:
    assert Customer(id="c", first_name="", last_name="Doe").full_name == "Doe"
    assert Customer(id="c", first_name="Jane", last_name="").full_name == "Jane"
