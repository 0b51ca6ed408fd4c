"""
Hosted store client.
Talks to the PostgREST endpoint of the hosted database with requests.

Every call is a single request: there is no retry, no transaction spanning
several calls and no cancellation. A failure raises StoreError and leaves
the caller's state untouched.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

from bdl.core.config import STORE_TIMEOUT, get_store_key, get_store_url
from bdl.core.exceptions import StoreError

logger = logging.getLogger(__name__)


class QueryBuilder:
    """
    Builds one request against a table.

    Mirrors the filter/order/insert/update/delete primitives of the hosted
    store's query client:

        >>> client.table("official_journal").select("*").eq("nor_number", nor).single().execute()
    """

    def __init__(self, client: "StoreClient", table: str):
        self.client = client
        self.table = table
        self.method = "GET"
        self.columns = "*"
        self.filters: List[Tuple[str, str]] = []
        self.order_by: List[str] = []
        self.row_limit: Optional[int] = None
        self.payload: Any = None
        self.cardinality: Optional[str] = None  # None, 'single' or 'maybe_single'

    def select(self, columns: str = "*") -> "QueryBuilder":
        self.method = "GET"
        self.columns = columns
        return self

    def eq(self, column: str, value: Any) -> "QueryBuilder":
        self.filters.append((column, f"eq.{_format_value(value)}"))
        return self

    def ilike(self, column: str, pattern: str) -> "QueryBuilder":
        self.filters.append((column, f"ilike.{pattern}"))
        return self

    def in_(self, column: str, values: Sequence[Any]) -> "QueryBuilder":
        joined = ",".join(_format_value(v) for v in values)
        self.filters.append((column, f"in.({joined})"))
        return self

    def not_null(self, column: str) -> "QueryBuilder":
        self.filters.append((column, "not.is.null"))
        return self

    def order(self, column: str, ascending: bool = True) -> "QueryBuilder":
        self.order_by.append(f"{column}.{'asc' if ascending else 'desc'}")
        return self

    def limit(self, count: int) -> "QueryBuilder":
        self.row_limit = count
        return self

    def single(self) -> "QueryBuilder":
        """Expect exactly one row; execute() returns a dict."""
        self.cardinality = "single"
        return self

    def maybe_single(self) -> "QueryBuilder":
        """Expect zero or one row; execute() returns a dict or None."""
        self.cardinality = "maybe_single"
        return self

    def insert(self, values: Any) -> "QueryBuilder":
        self.method = "POST"
        self.payload = values
        return self

    def update(self, values: Dict[str, Any]) -> "QueryBuilder":
        self.method = "PATCH"
        self.payload = values
        return self

    def delete(self) -> "QueryBuilder":
        self.method = "DELETE"
        return self

    def build_params(self) -> List[Tuple[str, str]]:
        """Query string parameters in PostgREST syntax."""
        params: List[Tuple[str, str]] = []
        if self.method == "GET":
            params.append(("select", self.columns))
        params.extend(self.filters)
        if self.order_by:
            params.append(("order", ",".join(self.order_by)))
        if self.row_limit is not None:
            params.append(("limit", str(self.row_limit)))
        return params

    def execute(self) -> Any:
        """
        Send the request.

        Returns:
            List of rows, or a single row (dict / None) when single() or
            maybe_single() was requested.

        Raises:
            StoreError: On HTTP or network failure, or when single() finds
                        no row or several rows
        """
        rows = self.client.request(
            self.method,
            self.table,
            params=self.build_params(),
            payload=self.payload,
        )

        if self.cardinality is None:
            return rows

        if len(rows) > 1:
            raise StoreError(
                f"Expected at most one row, got {len(rows)}",
                table=self.table,
            )
        if not rows:
            if self.cardinality == "single":
                raise StoreError("Expected one row, got none", table=self.table, status_code=406)
            return None
        return rows[0]


class StoreClient:
    """
    Client for the hosted relational store.

    Authenticates with the project API key and, when a user is signed in,
    with that user's access token so row-level security applies.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        access_token: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        """
        Initialize the store client.

        Args:
            base_url: REST base URL (defaults to config)
            api_key: Project API key (defaults to config)
            access_token: Signed-in user's JWT (defaults to the API key)
            timeout: Request timeout in seconds (defaults to config)
        """
        self.base_url = (base_url or get_store_url()).rstrip("/")
        self.api_key = api_key or get_store_key()
        self.timeout = timeout or STORE_TIMEOUT
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": "bdl-site/0.1.0",
            "apikey": self.api_key,
            "Authorization": f"Bearer {access_token or self.api_key}",
            "Accept": "application/json",
        })

    def table(self, name: str) -> QueryBuilder:
        return QueryBuilder(self, name)

    def request(
        self,
        method: str,
        table: str,
        params: Optional[List[Tuple[str, str]]] = None,
        payload: Any = None,
    ) -> List[Dict[str, Any]]:
        """
        Perform one request against a table and return the affected rows.

        Raises:
            StoreError: If the request fails or the body is not JSON
        """
        url = f"{self.base_url}/{table}"
        headers = {}
        if method in ("POST", "PATCH", "DELETE"):
            headers["Prefer"] = "return=representation"

        logger.debug(f"{method} {table} {params or ''}")

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise StoreError(
                f"{method} {table} failed",
                table=table,
                url=url,
                original_error=e,
            ) from e

        if not response.ok:
            raise StoreError(
                f"{method} {table} failed: {_error_message(response)}",
                status_code=response.status_code,
                table=table,
                url=url,
            )

        if not response.content:
            return []

        try:
            data = response.json()
        except ValueError as e:
            raise StoreError(
                f"{method} {table} returned invalid JSON",
                status_code=response.status_code,
                table=table,
                url=url,
                original_error=e,
            ) from e

        if isinstance(data, dict):
            return [data]
        return data if isinstance(data, list) else []

    def close(self):
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _error_message(response: requests.Response) -> str:
    """Extract the store's error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason or ""
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or str(body)
    return str(body)
