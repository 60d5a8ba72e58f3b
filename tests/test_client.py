"""Tests for the Vend API client using a fake HTTP session."""

import pytest
import requests

from vend_export.client import SEARCH_PAGE_SIZE, VendClient, make_session
from vend_export.exceptions import ExtractionError
from tests.test_utils import FakeResponse, FakeSession


def make_client(responses: dict) -> tuple[VendClient, FakeSession]:
    session = FakeSession(responses)
    client = VendClient("mystore", "secret-token", "UTC", session=session)  # type: ignore[arg-type]
    return client, session


def test_client_sets_base_url_and_auth_header() -> None:
    client, session = make_client({})
    assert client.base_url == "https://mystore.vendhq.com/api/2.0"
    assert session.headers["Authorization"] == "Bearer secret-token"
    assert client.timezone == "UTC"


def test_collection_follows_version_cursor() -> None:
    client, session = make_client(
        {
            "registers": [
                FakeResponse({"data": [{"id": "r1", "name": "One"}], "version": {"min": 1, "max": 5}}),
                FakeResponse({"data": [{"id": "r2", "name": "Two", "deleted_at": "x"}], "version": {"min": 6, "max": 9}}),
                FakeResponse({"data": [], "version": None}),
            ]
        }
    )

    registers = client.registers()

    assert [r.id for r in registers] == ["r1", "r2"]
    assert registers[1].deleted_at == "x"
    afters = [params["after"] for resource, params in session.calls]
    assert afters == [0, 5, 9]
    assert all(params["deleted"] == "true" for _, params in session.calls)


def test_collection_stops_without_version() -> None:
    client, session = make_client(
        {"users": [FakeResponse({"data": [{"id": "u1", "display_name": "Sam"}]})]}
    )
    users = client.users()
    assert [u.display_name for u in users] == ["Sam"]
    assert len(session.calls) == 1


def test_customers_and_products() -> None:
    client, _ = make_client(
        {
            "customers": [
                FakeResponse({"data": [{"id": "c1", "first_name": "Jane"}], "version": {"max": 1}}),
            ],
            "products": [
                FakeResponse(
                    {"data": [{"id": "p1", "name": "Coffee", "variant_name": "Coffee / L", "sku": "C-L"}],
                     "version": {"max": 3}}
                ),
            ],
        }
    )
    assert client.customers()[0].first_name == "Jane"
    product = client.products()[0]
    assert (product.name, product.variant_name, product.sku) == ("Coffee", "Coffee / L", "C-L")


def test_http_error_raises_extraction_error() -> None:
    client, _ = make_client({"users": [FakeResponse(status_code=401, text="Unauthorized")]})
    with pytest.raises(ExtractionError, match="HTTP 401"):
        client.users()


def test_invalid_json_raises_extraction_error() -> None:
    client, _ = make_client({"customers": [FakeResponse(None, text="<html>")]})
    with pytest.raises(ExtractionError, match="invalid JSON"):
        client.customers()


def test_network_error_raises_extraction_error() -> None:
    class BrokenSession(FakeSession):
        def get(self, url, params=None, **kwargs):
            raise requests.ConnectionError("connection refused")

    client = VendClient("mystore", "t", session=BrokenSession({}))  # type: ignore[arg-type]
    with pytest.raises(ExtractionError, match="connection refused"):
        client.products()


def test_sales_search_pages_by_offset() -> None:
    full_page = [{"id": f"s{i}"} for i in range(SEARCH_PAGE_SIZE)]
    client, session = make_client(
        {
            "search": [
                FakeResponse({"data": full_page}),
                FakeResponse({"data": [{"id": "last", "status": "CLOSED"}]}),
            ]
        }
    )

    sales = client.sales_search("2018-03-01", "2018-04-01")

    assert len(sales) == SEARCH_PAGE_SIZE + 1
    assert sales[-1].id == "last"
    offsets = [params["offset"] for _, params in session.calls]
    assert offsets == [0, SEARCH_PAGE_SIZE, SEARCH_PAGE_SIZE + 1]
    first = session.calls[0][1]
    assert first["type"] == "sales"
    assert first["date_from"] == "2018-03-01"
    assert first["date_to"] == "2018-04-01"
    assert "outlet_id" not in first


def test_sales_search_resolves_outlet_name() -> None:
    client, session = make_client(
        {
            "outlets": [
                FakeResponse(
                    {"data": [{"id": "o1", "name": "Main Street"}, {"id": "o2", "name": "Airport"}],
                     "version": {"max": 2}}
                ),
            ],
            "search": [FakeResponse({"data": []})],
        }
    )

    assert client.sales_search("2018-03-01", "2018-04-01", "Airport") == []
    search_params = [params for resource, params in session.calls if resource == "search"]
    assert search_params[0]["outlet_id"] == "o2"


def test_sales_search_unknown_outlet() -> None:
    client, _ = make_client(
        {"outlets": [FakeResponse({"data": [{"id": "o1", "name": "Main Street"}], "version": {"max": 1}})]}
    )
    with pytest.raises(ExtractionError, match="Outlet 'Nowhere' not found. Known: Main Street"):
        client.sales_search("2018-03-01", "2018-04-01", "Nowhere")


def test_make_session_mounts_retry_adapter() -> None:
    s = make_session(timeout=5, retries=2)
    adapter = s.get_adapter("https://mystore.vendhq.com")
    assert adapter.max_retries.total == 2
    assert 429 in adapter.max_retries.status_forcelist


def test_sales_search_keeps_going_after_capped_page() -> None:
    """A server that returns fewer records than page_size still gets every page read."""
    client, session = make_client(
        {
            "search": [
                FakeResponse({"data": [{"id": "s1"}, {"id": "s2"}]}),
                FakeResponse({"data": [{"id": "s3"}, {"id": "s4"}]}),
                FakeResponse({"data": [{"id": "s5"}]}),
                FakeResponse({"data": []}),
            ]
        }
    )

    sales = client.sales_search("2018-03-01", "2018-04-01")

    assert [s.id for s in sales] == ["s1", "s2", "s3", "s4", "s5"]
    assert [params["offset"] for _, params in session.calls] == [0, 2, 4, 5]
