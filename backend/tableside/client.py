"""HTTP client for the Tableside API and the polling refresher used by screens.

Staff and admin screens stay fresh by re-fetching their collections every
``poll_interval_seconds``. ``StatePoller`` does the fetching, compares each
collection against the previous snapshot by content hash and hands only the
changed ones to a callback. A failed fetch is logged and retried on the next
tick.
"""

import asyncio
import hashlib
import inspect
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Union

import httpx

from tableside.core.config import settings

logger = logging.getLogger(__name__)

DEFAULT_COLLECTIONS = ("orders", "tables", "service-requests", "billing-requests")


class TablesideClientError(Exception):
    """Non-2xx response from the API, carrying its ``{"error", "code"}`` body."""

    def __init__(self, status_code: int, message: str, code: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.code = code
        super().__init__(f"{status_code} {code or 'Error'}: {message}")


class TablesideClient:
    """Thin async wrapper over the JSON API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        api_prefix: Optional[str] = None,
    ):
        prefix = settings.api_prefix if api_prefix is None else api_prefix
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + prefix,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "TablesideClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        resp = await self._client.request(method, path, **kwargs)
        if resp.is_error:
            try:
                body = resp.json()
            except ValueError:
                body = {}
            raise TablesideClientError(resp.status_code, body.get("error", resp.text), body.get("code"))
        return resp.json()

    async def fetch(self, collection: str, **params) -> Any:
        """GET a whole collection, e.g. ``orders`` or ``service-requests``."""
        params = {k: v for k, v in params.items() if v is not None}
        return await self._request("GET", f"/{collection}", params=params)

    # Menu

    async def list_menu(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        return await self.fetch("menu", category=category)

    # Orders

    async def list_orders(self, status: Optional[str] = None, table: Optional[int] = None) -> List[Dict[str, Any]]:
        return await self.fetch("orders", status=status, table=table)

    async def create_order(
        self,
        table: int,
        lines: Iterable[Dict[str, Any]],
        payment_mode: str = "cash",
        order_type: str = "dine-in",
        **extra,
    ) -> Dict[str, Any]:
        body = {"table": table, "lines": list(lines), "paymentMode": payment_mode, "orderType": order_type}
        body.update(extra)
        return await self._request("POST", "/orders", json=body)

    async def update_order_status(self, order_id: int, status: str, version: Optional[int] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"status": status}
        if version is not None:
            body["version"] = version
        return await self._request("PATCH", f"/orders/{order_id}", json=body)

    async def pay_order(self, order_id: int) -> Dict[str, Any]:
        return await self._request("POST", f"/orders/{order_id}/pay")

    # Tables

    async def list_tables(self) -> List[Dict[str, Any]]:
        return await self.fetch("tables")

    # Service and billing requests

    async def raise_service_request(self, table: int, request_type: str) -> Dict[str, Any]:
        return await self._request("POST", "/service-requests", json={"table": table, "requestType": request_type})

    async def complete_service_request(self, request_id: int) -> Dict[str, Any]:
        return await self._request("POST", f"/service-requests/{request_id}/complete")

    async def request_bill(self, table: int, order_id: Optional[int] = None) -> Dict[str, Any]:
        return await self._request("POST", "/billing-requests", json={"table": table, "orderId": order_id})

    async def complete_billing_request(self, request_id: int, mark_order_paid: Optional[bool] = None) -> Dict[str, Any]:
        body = {} if mark_order_paid is None else {"markOrderPaid": mark_order_paid}
        return await self._request("POST", f"/billing-requests/{request_id}/complete", json=body)

    # Loyalty

    async def get_loyalty(self, customer_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/loyalty/{customer_id}")

    async def redeem(self, customer_id: str, reward_id: str) -> Dict[str, Any]:
        return await self._request("POST", f"/loyalty/{customer_id}/redeem", json={"rewardId": reward_id})


ChangeCallback = Callable[[str, Any], Union[None, Awaitable[None]]]


def fingerprint(data: Any) -> str:
    """Stable hash of a JSON document, independent of key order."""
    encoded = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


class StatePoller:
    """Re-fetch collections on a fixed interval and report the ones that changed."""

    def __init__(
        self,
        client: TablesideClient,
        on_change: ChangeCallback,
        collections: Iterable[str] = DEFAULT_COLLECTIONS,
        interval: Optional[float] = None,
    ):
        self.client = client
        self.on_change = on_change
        self.collections = tuple(collections)
        self.interval = interval if interval is not None else settings.poll_interval_seconds
        self._fingerprints: Dict[str, str] = {}
        self._stop = asyncio.Event()

    async def poll_once(self) -> List[str]:
        """One refresh tick. Returns the collections whose content changed."""
        changed = []
        for collection in self.collections:
            try:
                data = await self.client.fetch(collection)
            except (httpx.HTTPError, TablesideClientError) as e:
                logger.warning(f"Polling '{collection}' failed, retrying next tick: {e}")
                continue

            digest = fingerprint(data)
            if self._fingerprints.get(collection) == digest:
                continue
            self._fingerprints[collection] = digest
            changed.append(collection)

            result = self.on_change(collection, data)
            if inspect.isawaitable(result):
                await result
        return changed

    async def run(self) -> None:
        """Poll until ``stop()`` is called."""
        self._stop.clear()
        logger.info(f"Polling {', '.join(self.collections)} every {self.interval}s")
        while not self._stop.is_set():
            await self.poll_once()
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
        logger.info("Polling stopped")

    def stop(self) -> None:
        self._stop.set()
