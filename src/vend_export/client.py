"""Vend API 2.0 client.

Fetches the reference collections (registers, users, customers, products,
outlets) and searches sales for a date range. Every call is a blocking
request on a shared ``requests.Session``.

Environment (optional):
  VEND_TIMEOUT=60   # seconds
  VEND_RETRIES=3

Collection endpoints are paged by version cursor: each page carries
``version.max`` which becomes the ``after`` parameter of the next request,
until a page comes back empty. The search endpoint is paged by offset, also
until an empty page.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, TypeVar

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from vend_export.exceptions import ExtractionError
from vend_export.models import Customer, Outlet, Product, Register, Sale, User

logger = logging.getLogger(__name__)

T = TypeVar("T")

# --- HTTP resiliency ---
DEFAULT_TIMEOUT = float(os.environ.get("VEND_TIMEOUT", "60"))
DEFAULT_RETRIES = int(os.environ.get("VEND_RETRIES", "3"))

PAGE_SIZE = 1000
SEARCH_PAGE_SIZE = 1000


def make_session(
    timeout: float = DEFAULT_TIMEOUT, retries: int = DEFAULT_RETRIES
) -> requests.Session:
    """Create a requests Session with retry logic and default timeout.

    Configures the session with:
    - Retry adapter for HTTP/HTTPS with exponential backoff
    - Default timeout for all requests
    - Retries on 429, 500, 502, 503, 504 status codes

    Args:
        timeout: Default timeout in seconds for all requests. Defaults to
            DEFAULT_TIMEOUT (60 seconds).
        retries: Number of retry attempts. Defaults to DEFAULT_RETRIES (3).

    Returns:
        Configured requests.Session object.

    """
    s = requests.Session()
    s.headers.update({"Accept": "application/json", "User-Agent": "vend-export"})
    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        status=retries,
        backoff_factor=0.8,  # 0.8, 1.6, 3.2, ...
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset({"GET", "HEAD", "OPTIONS"}),
        respect_retry_after_header=True,
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    # Default timeouts via a wrapper
    orig_request = s.request

    def timed_request(method: str, url: str, **kwargs: Any) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return orig_request(method, url, **kwargs)

    s.request = timed_request  # type: ignore[method-assign,assignment]
    return s


def ensure_ok(resp: requests.Response, msg: str) -> None:
    """Check if HTTP response is successful, raise ExtractionError if not.

    Args:
        resp: HTTP response object to check.
        msg: Error message prefix if response is not successful.

    Raises:
        ExtractionError: If response status code is not in 200-299 range.

    """
    if not (200 <= resp.status_code < 300):
        raise ExtractionError(f"{msg}. HTTP {resp.status_code} - {resp.text[:400]}")


class VendClient:
    """Thin client over the Vend API 2.0 endpoints the export needs.

    Args:
        domain_prefix: Store subdomain, e.g. ``mystore`` for mystore.vendhq.com.
        token: Personal API token.
        timezone: zoneinfo identifier of the store; None means local time.
        session: Optional pre-built session (tests pass a fake here).

    """

    def __init__(
        self,
        domain_prefix: str,
        token: str,
        timezone: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.domain_prefix = domain_prefix
        self.timezone = timezone
        self.base_url = f"https://{domain_prefix}.vendhq.com/api/2.0"
        self.session = session or make_session()
        self.session.headers.update({"Authorization": f"Bearer {token}"})

    def _get(self, resource: str, params: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}/{resource}"
        try:
            resp = self.session.get(url, params=params)
        except requests.RequestException as e:
            raise ExtractionError(f"GET {resource} failed: {e}") from e
        ensure_ok(resp, f"GET {resource} failed")
        try:
            body = resp.json()
        except ValueError as e:
            raise ExtractionError(f"GET {resource} returned invalid JSON: {e}") from e
        if not isinstance(body, dict):
            raise ExtractionError(f"GET {resource} returned unexpected payload type {type(body).__name__}")
        return body

    def _collection(
        self,
        resource: str,
        parse: Callable[[dict[str, Any]], T],
        extra: dict[str, Any] | None = None,
    ) -> list[T]:
        """Page through a version-cursor collection endpoint."""
        records: list[T] = []
        after = 0
        while True:
            params: dict[str, Any] = {"after": after, "page_size": PAGE_SIZE}
            if extra:
                params.update(extra)
            body = self._get(resource, params)
            data = body.get("data") or []
            if not data:
                break
            records.extend(parse(item) for item in data)
            version_max = (body.get("version") or {}).get("max")
            logger.debug("%s: page after=%s -> %d records", resource, after, len(data))
            if version_max is None or version_max == after:
                break
            after = version_max
        logger.info("Fetched %d %s", len(records), resource)
        return records

    def registers(self) -> list[Register]:
        """All registers, deleted ones included."""
        return self._collection("registers", Register.from_api, {"deleted": "true"})

    def users(self) -> list[User]:
        return self._collection("users", User.from_api)

    def customers(self) -> list[Customer]:
        return self._collection("customers", Customer.from_api)

    def products(self) -> list[Product]:
        """All products from the beginning of time, deleted ones included.

        Historical sales can reference products that were removed since.
        """
        return self._collection("products", Product.from_api, {"deleted": "true"})

    def outlets(self) -> list[Outlet]:
        return self._collection("outlets", Outlet.from_api)

    def outlet_id(self, name: str) -> str:
        """Resolve an outlet name to its identifier.

        Raises:
            ExtractionError: If no outlet has that name.

        """
        outlets = self.outlets()
        for outlet in outlets:
            if outlet.name == name and outlet.id:
                return outlet.id
        known = ", ".join(sorted(o.name for o in outlets if o.name))
        raise ExtractionError(f"Outlet '{name}' not found. Known: {known}")

    def sales_search(self, date_from: str, date_to: str, outlet: str | None = None) -> list[Sale]:
        """Search sales between two dates, optionally for a single outlet.

        Args:
            date_from: Start date, YYYY-MM-DD.
            date_to: End date, YYYY-MM-DD.
            outlet: Outlet name. None searches every outlet.

        Returns:
            Sales in the order the API returns them.

        Raises:
            ExtractionError: If a request fails or the outlet is unknown.

        """
        params: dict[str, Any] = {
            "type": "sales",
            "date_from": date_from,
            "date_to": date_to,
            "page_size": SEARCH_PAGE_SIZE,
        }
        if outlet:
            params["outlet_id"] = self.outlet_id(outlet)

        sales: list[Sale] = []
        offset = 0
        while True:
            body = self._get("search", {**params, "offset": offset})
            data = body.get("data") or []
            logger.debug("search: offset=%d -> %d sales", offset, len(data))
            # The server may cap page_size, so only an empty page ends the search.
            if not data:
                break
            sales.extend(Sale.from_api(item) for item in data)
            offset += len(data)
        logger.info("Fetched %d sales from %s to %s", len(sales), date_from, date_to)
        return sales
