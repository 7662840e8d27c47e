import asyncio
import logging
from typing import List, Optional
from urllib.parse import quote

import aiohttp
from pydantic import ValidationError

from .config import BASE_URL, ORDERS_PATH, ORDERS_TIMEOUT
from .models import Order, OrderStatus, PaymentMethod

logger = logging.getLogger(__name__)

# Fields the admin board is allowed to change, with their value types
UPDATABLE_FIELDS = {
    "status": OrderStatus,
    "payment": PaymentMethod,
}


class StoreError(Exception):
    """Base class for order store failures."""


class NetworkFailure(StoreError):
    """The request could not complete or the response was unusable."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class OrderNotFound(StoreError):
    """The target order no longer exists at the store."""

    def __init__(self, order_id: str):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class OrderStoreClient:
    """HTTP client for the remote order store.

    Reads the whole collection and submits single-field updates. Never
    caches or patches orders locally.
    """

    def __init__(
        self,
        base_url: str = BASE_URL,
        orders_path: str = ORDERS_PATH,
        timeout: float = ORDERS_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.orders_path = "/" + orders_path.strip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.session = session
        self._owns_session = False

    async def connect(self):
        """Open an HTTP session unless one was handed in"""
        if self.session is None:
            self.session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
            logger.info("Order store client ready: %s", self.collection_url)

    async def close(self):
        if self.session is not None and self._owns_session:
            await self.session.close()
            logger.info("Order store session closed")
        self.session = None
        self._owns_session = False

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    @property
    def collection_url(self) -> str:
        return f"{self.base_url}{self.orders_path}"

    def order_url(self, order_id: str) -> str:
        return f"{self.collection_url}/{quote(str(order_id), safe='')}"

    def _require_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            raise RuntimeError("OrderStoreClient is not connected; call connect() first")
        return self.session

    async def fetch_all(self) -> List[Order]:
        """Return every order known to the store, unfiltered and unsorted."""
        session = self._require_session()
        try:
            async with session.get(self.collection_url, timeout=self.timeout) as resp:
                if not 200 <= resp.status < 300:
                    raise NetworkFailure(
                        f"GET {self.collection_url} returned {resp.status}", status=resp.status
                    )
                payload = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkFailure(f"GET {self.collection_url} failed: {e}") from e
        except ValueError as e:
            raise NetworkFailure(f"GET {self.collection_url} returned invalid JSON: {e}") from e

        if not isinstance(payload, list):
            raise NetworkFailure(f"GET {self.collection_url} did not return a list of orders")

        # One unreadable order must not hide the rest of the board
        orders = []
        for doc in payload:
            try:
                orders.append(Order.model_validate(doc))
            except ValidationError as e:
                order_id = doc.get("_id") if isinstance(doc, dict) else None
                logger.warning("Skipping unreadable order %s: %s", order_id, e)

        logger.debug("Fetched %d of %d orders", len(orders), len(payload))
        return orders

    async def update_field(self, order_id: str, field: str, value) -> None:
        """Request a partial update of one field on one order.

        Raises ValueError for a field or value the board may not set,
        OrderNotFound on 404 and NetworkFailure for everything else.
        """
        if field not in UPDATABLE_FIELDS:
            raise ValueError(f"Field {field!r} cannot be updated")
        value = UPDATABLE_FIELDS[field](value)

        session = self._require_session()
        url = self.order_url(order_id)
        try:
            async with session.put(url, json={field: value.value}, timeout=self.timeout) as resp:
                if resp.status == 404:
                    raise OrderNotFound(order_id)
                if not 200 <= resp.status < 300:
                    raise NetworkFailure(f"PUT {url} returned {resp.status}", status=resp.status)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkFailure(f"PUT {url} failed: {e}") from e

        logger.info("Order %s: %s -> %s", order_id, field, value.value)
