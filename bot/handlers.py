import asyncio
import logging
from typing import Dict, List

from aiogram import types, Router, F
from aiogram.exceptions import TelegramBadRequest, TelegramRetryAfter
from aiogram.filters import Command
from aiogram.types import CallbackQuery

from bot.orders import (
    MAX_DATE_BUTTONS,
    build_board_kb,
    build_order_card_kb,
    format_board_header,
    format_order_card,
    parse_board_callback,
    parse_order_callback,
)
from data.board import BoardState, OrderBoard
from data.store import OrderStoreClient
from utils.helpers import is_admin

logger = logging.getLogger(__name__)

router = Router()

ACCESS_DENIED = "⛔️ Access denied. You are not an administrator."

# Pause between order cards and how often to wait out flood control
CARD_SEND_INTERVAL = 0.05
MAX_FLOOD_RETRIES = 3

# One board (filter/sort selection + snapshot) per admin chat
boards: Dict[int, OrderBoard] = {}

# Messages of the board currently on screen, per chat
header_messages: Dict[int, types.Message] = {}
card_messages: Dict[int, List[types.Message]] = {}

def get_board(chat_id: int, store: OrderStoreClient) -> OrderBoard:
    board = boards.get(chat_id)
    if board is None:
        board = OrderBoard(store)
        boards[chat_id] = board
    return board


async def _telegram_call(call, *args, **kwargs):
    """Run a Bot API call, sleeping through flood control."""
    for _ in range(MAX_FLOOD_RETRIES):
        try:
            return await call(*args, **kwargs)
        except TelegramRetryAfter as e:
            logger.warning("Flood control, retrying in %s s", e.retry_after)
            await asyncio.sleep(e.retry_after)
    return await call(*args, **kwargs)


async def _delete(message: types.Message):
    try:
        await _telegram_call(message.delete)
    except TelegramBadRequest as e:
        # Older than 48 hours or already deleted by hand
        logger.debug("Could not delete message %s: %s", message.message_id, e)


async def _send_cards(message: types.Message, state: BoardState):
    """Replace the cards on screen with one card per displayed order."""
    chat_id = message.chat.id
    for old in card_messages.pop(chat_id, []):
        await _delete(old)

    sent_cards = card_messages.setdefault(chat_id, [])
    for order in state.orders:
        sent = await _telegram_call(
            message.answer, format_order_card(order), reply_markup=build_order_card_kb(order)
        )
        sent_cards.append(sent)
        await asyncio.sleep(CARD_SEND_INTERVAL)


async def _send_board(message: types.Message, state: BoardState):
    """Send the control message followed by the cards, dropping the previous board."""
    old_header = header_messages.pop(message.chat.id, None)
    if old_header is not None:
        await _delete(old_header)
    header_messages[message.chat.id] = await _telegram_call(
        message.answer, format_board_header(state), reply_markup=build_board_kb(state)
    )
    await _send_cards(message, state)


async def _edit(message: types.Message, text: str, reply_markup=None):
    try:
        await _telegram_call(message.edit_text, text, reply_markup=reply_markup)
    except TelegramBadRequest as e:
        # Nothing changed (e.g. the update failed and the refresh returned the same order)
        if "message is not modified" not in str(e):
            raise


# 1. Authentication & help
@router.message(Command("start"))
async def cmd_start(message: types.Message):
    if not is_admin(message.from_user.id):
        await message.answer(ACCESS_DENIED)
        return

    await message.answer(
        f"👋 Hi, {message.from_user.full_name}! You are signed in as an administrator.\n\n"
        "Use /orders to open the order board or /help for details."
    )


@router.message(Command("help"))
async def cmd_help(message: types.Message):
    if not is_admin(message.from_user.id):
        await message.answer(ACCESS_DENIED)
        return

    help_text = f"""🔧 Available commands:

/orders — Open the order board
/help — This help

On the board:
• Pick a date or "All Dates" to filter orders by the day they were placed
• Switch between "Newest First" and "Oldest First"
• 🔄 Refresh reloads every order from the server

On each order card:
• Top row sets the delivery status (Pending / Delivered)
• Bottom row sets the payment method (Nan / COD / Gpay)
The card is reloaded from the server after every change.

Changing the date, sort or refreshing replaces the cards below the board;
only the latest {MAX_DATE_BUTTONS} days get a date button."""

    await message.answer(help_text)


# 2. Order board
@router.message(Command("orders"))
async def cmd_orders(message: types.Message, store: OrderStoreClient):
    if not is_admin(message.from_user.id):
        await message.answer(ACCESS_DENIED)
        return

    board = get_board(message.chat.id, store)
    state = await board.refresh()
    await _send_board(message, state)


@router.callback_query(F.data.startswith("board:"))
async def cb_board_controls(callback: CallbackQuery, store: OrderStoreClient):
    if not is_admin(callback.from_user.id):
        await callback.answer("No permission", show_alert=True)
        return
    try:
        action = parse_board_callback(callback.data)
    except ValueError:
        await callback.answer("Bad data", show_alert=True)
        return

    board = get_board(callback.message.chat.id, store)
    if action.action == "refresh":
        state = await board.refresh()
    elif action.action == "sort":
        state = board.set_sort(action.value)
    else:
        try:
            state = board.set_date_filter(action.value)
        except ValueError:
            await callback.answer("Bad date", show_alert=True)
            return

    await callback.answer()
    await _edit(callback.message, format_board_header(state), build_board_kb(state))
    await _send_cards(callback.message, state)


@router.callback_query(F.data.startswith("order:"))
async def cb_order_update(callback: CallbackQuery, store: OrderStoreClient):
    if not is_admin(callback.from_user.id):
        await callback.answer("No permission", show_alert=True)
        return
    try:
        action = parse_order_callback(callback.data)
    except ValueError:
        await callback.answer("Bad data", show_alert=True)
        return

    await callback.answer()
    board = get_board(callback.message.chat.id, store)
    if action.field == "status":
        state = await board.request_status_change(action.order_id, action.value)
    else:
        state = await board.request_payment_change(action.order_id, action.value)

    order = state.find(action.order_id)
    if order is None:
        await _edit(callback.message, f"🗑 Order {action.order_id} is no longer on the server.")
        return
    await _edit(callback.message, format_order_card(order), build_order_card_kb(order))
