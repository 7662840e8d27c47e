import logging
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .models import DATE_FILTER_ALL, Order, OrderStatus, PaymentMethod, SortDirection
from .operations import available_dates, filter_and_sort
from .store import OrderStoreClient, StoreError
from utils.helpers import is_calendar_date

logger = logging.getLogger(__name__)


class BoardState(BaseModel):
    """Immutable snapshot of the order board.

    `orders` is always derived from `all_orders` plus the current
    filter/sort selection; every change produces a new snapshot.
    """

    model_config = ConfigDict(frozen=True)

    all_orders: Tuple[Order, ...] = ()
    orders: Tuple[Order, ...] = ()
    dates: Tuple[str, ...] = ()
    date_filter: str = DATE_FILTER_ALL
    sort: SortDirection = SortDirection.NEWEST
    loaded: bool = False

    @classmethod
    def build(cls, all_orders, date_filter: str = DATE_FILTER_ALL,
              sort=SortDirection.NEWEST, loaded: bool = True) -> "BoardState":
        all_orders = tuple(all_orders)
        sort = SortDirection(sort)
        return cls(
            all_orders=all_orders,
            orders=tuple(filter_and_sort(all_orders, date_filter, sort)),
            dates=tuple(available_dates(all_orders)),
            date_filter=date_filter,
            sort=sort,
            loaded=loaded,
        )

    def with_orders(self, all_orders) -> "BoardState":
        return BoardState.build(all_orders, self.date_filter, self.sort)

    def with_date_filter(self, date_filter: str) -> "BoardState":
        if date_filter != DATE_FILTER_ALL and not is_calendar_date(date_filter):
            raise ValueError(f"Invalid date filter: {date_filter!r}")
        return BoardState.build(self.all_orders, date_filter, self.sort, self.loaded)

    def with_sort(self, sort) -> "BoardState":
        return BoardState.build(self.all_orders, self.date_filter, sort, self.loaded)

    def find(self, order_id: str) -> Optional[Order]:
        """Look an order up in the full collection."""
        for order in self.all_orders:
            if order.id == order_id:
                return order
        return None


class OrderBoard:
    """View-model for one admin's order board.

    Holds the current snapshot and dispatches status/payment changes to the
    store, re-fetching the whole collection after each one.
    """

    def __init__(self, store: OrderStoreClient, state: Optional[BoardState] = None):
        self.store = store
        self.state = state or BoardState()
        self._issued = 0
        self._applied = 0

    async def refresh(self) -> BoardState:
        """Re-fetch the collection; on failure keep the previous snapshot."""
        self._issued += 1
        ticket = self._issued
        try:
            orders = await self.store.fetch_all()
        except StoreError as e:
            logger.error("Error fetching orders: %s", e)
            return self.state

        # A refresh issued later has already landed; this response is stale
        if ticket < self._applied:
            logger.debug("Dropping stale refresh #%d (applied #%d)", ticket, self._applied)
            return self.state

        self._applied = ticket
        self.state = self.state.with_orders(orders)
        return self.state

    def set_date_filter(self, date_filter: str) -> BoardState:
        self.state = self.state.with_date_filter(date_filter)
        return self.state

    def set_sort(self, sort) -> BoardState:
        self.state = self.state.with_sort(sort)
        return self.state

    async def _dispatch(self, order_id: str, field: str, value) -> BoardState:
        try:
            await self.store.update_field(order_id, field, value)
        except StoreError as e:
            logger.error("Error updating %s of order %s: %s", field, order_id, e)
        return await self.refresh()

    async def request_status_change(self, order_id: str, status: OrderStatus) -> BoardState:
        return await self._dispatch(order_id, "status", OrderStatus(status))

    async def request_payment_change(self, order_id: str, payment: PaymentMethod) -> BoardState:
        return await self._dispatch(order_id, "payment", PaymentMethod(payment))

    @property
    def orders(self) -> List[Order]:
        return list(self.state.orders)
