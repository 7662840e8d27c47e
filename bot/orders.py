"""Order card and board rendering for the What The Food admin bot."""
from typing import List, NamedTuple, Optional

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from data.board import BoardState
from data.models import DATE_FILTER_ALL, Order, OrderStatus, PaymentMethod, SortDirection
from utils.helpers import format_amount, format_reference_datetime

# Telegram caps inline keyboards at 100 buttons; only the latest days get one
MAX_DATE_BUTTONS = 12

SORT_TITLES = {
    SortDirection.NEWEST: "Newest First",
    SortDirection.OLDEST: "Oldest First",
}

class OrderAction(NamedTuple):
    field: str
    order_id: str
    value: str

class BoardAction(NamedTuple):
    action: str
    value: Optional[str]


def format_order_card(order: Order) -> str:
    """Render one order card as plain text."""
    badge = "🟢 Delivered" if order.is_delivered else "🟠 Pending"
    lines = []
    if order.is_delivered:
        lines.append("✔️ DELIVERED")
    lines.append(f"👤 {order.name or '—'}   [{badge}]")
    lines.append(f"🎓 Roll No: {order.roll_no or '—'}")
    lines.append(f"📞 Contact: {order.contact or '—'}")
    lines.append(f"📍 {order.location or '—'}")
    lines.append(f"💰 Total: {format_amount(order.total_amount)}")
    lines.append(f"💳 Payment: {order.payment.value}")
    lines.append(f"📅 {format_reference_datetime(order.created_at)}")

    lines.append("\n🛒 Ordered Items")
    if order.items:
        for item in order.items:
            lines.append(f"• {item.name} × {item.quantity}")
    else:
        lines.append("—")
    return "\n".join(lines)


def build_order_card_kb(order: Order) -> InlineKeyboardMarkup:
    """Status row and payment row; each button submits its own value."""
    kb = InlineKeyboardBuilder()
    kb.row(*[
        InlineKeyboardButton(
            text=("🚚 " if status == order.status else "") + status.value,
            callback_data=f"order:status:{order.id}:{status.value}",
        )
        for status in OrderStatus
    ])
    kb.row(*[
        InlineKeyboardButton(
            text=("💳 " if payment == order.payment else "") + payment.value,
            callback_data=f"order:payment:{order.id}:{payment.value}",
        )
        for payment in PaymentMethod
    ])
    return kb.as_markup()


def format_board_header(state: BoardState) -> str:
    date_title = "All Dates" if state.date_filter == DATE_FILTER_ALL else state.date_filter
    lines = ["🚀 What The Food 🫵🤞", ""]
    lines.append(f"📅 {date_title} · ⏱ {SORT_TITLES[state.sort]}")
    if not state.loaded:
        lines.append("⚠️ Orders could not be loaded yet.")
    elif not state.orders:
        lines.append("📭 No orders.")
    else:
        lines.append(f"📋 Orders shown: {len(state.orders)} of {len(state.all_orders)}")
    return "\n".join(lines)


def date_options(state: BoardState) -> List[str]:
    """Most recent dates first, capped, always including the selected one."""
    dates = sorted(state.dates, reverse=True)[:MAX_DATE_BUTTONS]
    if state.date_filter != DATE_FILTER_ALL and state.date_filter not in dates:
        dates.append(state.date_filter)
    return dates


def build_board_kb(state: BoardState) -> InlineKeyboardMarkup:
    """Date filter, sort direction and refresh controls."""
    kb = InlineKeyboardBuilder()

    def mark(text: str, selected: bool) -> str:
        return f"• {text} •" if selected else text

    kb.row(InlineKeyboardButton(
        text=mark("All Dates", state.date_filter == DATE_FILTER_ALL),
        callback_data=f"board:date:{DATE_FILTER_ALL}",
    ))
    date_buttons = [
        InlineKeyboardButton(text=mark(d, state.date_filter == d), callback_data=f"board:date:{d}")
        for d in date_options(state)
    ]
    for i in range(0, len(date_buttons), 3):
        kb.row(*date_buttons[i:i + 3])

    kb.row(*[
        InlineKeyboardButton(
            text=mark(SORT_TITLES[direction], state.sort == direction),
            callback_data=f"board:sort:{direction.value}",
        )
        for direction in SortDirection
    ])
    kb.row(InlineKeyboardButton(text="🔄 Refresh", callback_data="board:refresh"))
    return kb.as_markup()


def parse_order_callback(data: str) -> OrderAction:
    """Parse order:<status|payment>:<id>:<value>. Raises ValueError."""
    parts = (data or "").split(":", 2)
    if len(parts) != 3 or parts[0] != "order" or ":" not in parts[2]:
        raise ValueError(f"Bad order callback: {data!r}")
    _, field, rest = parts
    # The id may itself contain ":"; the value never does
    order_id, raw = rest.rsplit(":", 1)
    if not order_id:
        raise ValueError(f"Bad order callback: {data!r}")
    if field == "status":
        value = OrderStatus(raw).value
    elif field == "payment":
        value = PaymentMethod(raw).value
    else:
        raise ValueError(f"Unknown order field: {field!r}")
    return OrderAction(field, order_id, value)


def parse_board_callback(data: str) -> BoardAction:
    """Parse board:date:<value> | board:sort:<value> | board:refresh. Raises ValueError."""
    parts = (data or "").split(":", 2)
    if len(parts) < 2 or parts[0] != "board":
        raise ValueError(f"Bad board callback: {data!r}")
    action = parts[1]
    if action == "refresh" and len(parts) == 2:
        return BoardAction(action, None)
    if action == "sort" and len(parts) == 3:
        return BoardAction(action, SortDirection(parts[2]).value)
    if action == "date" and len(parts) == 3:
        return BoardAction(action, parts[2])
    raise ValueError(f"Bad board callback: {data!r}")
