"""Tests for updates fed concurrently through the dispatcher."""
import asyncio
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from aiogram import Bot
from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import StorageKey
from aiogram.fsm.storage.memory import SimpleEventIsolation
from aiogram.types import CallbackQuery, Chat, Message, Update, User

from bot.handlers.quiz import start_quiz
from run import create_dispatcher

BOT_TOKEN = "42:TEST"
BOT_ID = 42


@pytest.fixture(scope="module")
def dispatcher():
    # Routers can only be attached to one dispatcher per process
    return create_dispatcher()


async def _api_round_trip(method, *args, **kwargs):
    """Stand-in for Bot.__call__: yields to the loop like a network request."""
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    return True


def _callback_update(update_id: int, chat_id: int, data: str) -> Update:
    user = User(id=chat_id, is_bot=False, first_name="Tester")
    message = Message(
        message_id=update_id,
        date=datetime.now(),
        chat=Chat(id=chat_id, type="private"),
        text="question",
    )
    return Update(
        update_id=update_id,
        callback_query=CallbackQuery(
            id=str(update_id),
            from_user=user,
            chat_instance="test",
            message=message,
            data=data,
        ),
    )


async def _start(dispatcher, sample_questions, chat_id: int) -> FSMContext:
    state = FSMContext(
        storage=dispatcher.fsm.storage,
        key=StorageKey(bot_id=BOT_ID, chat_id=chat_id, user_id=chat_id),
    )
    message = AsyncMock()
    message.chat = MagicMock()
    message.chat.id = chat_id
    with patch("bot.handlers.quiz.get_questions", return_value=sample_questions):
        await start_quiz(message, state)
    return state


# ============================================================================
# EVENT ISOLATION
# ============================================================================


class TestConcurrentUpdates:
    """Updates from one chat must not interleave their FSM reads and writes."""

    def test_dispatcher_isolates_events(self, dispatcher):
        assert isinstance(dispatcher.fsm.events_isolation, SimpleEventIsolation)

    @patch.object(Bot, "__call__", new_callable=AsyncMock, side_effect=_api_round_trip)
    async def test_quick_taps_keep_both_selections(self, mock_api, dispatcher, sample_questions):
        chat_id = 1001
        state = await _start(dispatcher, sample_questions, chat_id)
        # Move to the multiple-answer question
        await state.update_data(current_index=1)
        bot = Bot(token=BOT_TOKEN)

        try:
            await asyncio.gather(
                dispatcher.feed_update(bot, _callback_update(1, chat_id, "choice:1:1")),
                dispatcher.feed_update(bot, _callback_update(2, chat_id, "choice:1:2")),
            )
        finally:
            await bot.session.close()

        assert (await state.get_data())["selection"] == [1, 2]
        assert mock_api.await_count >= 2

    @patch.object(Bot, "__call__", new_callable=AsyncMock, side_effect=_api_round_trip)
    async def test_double_next_tap_advances_once(self, mock_api, dispatcher, sample_questions):
        chat_id = 1002
        state = await _start(dispatcher, sample_questions, chat_id)
        await state.update_data(selection=[1])
        bot = Bot(token=BOT_TOKEN)

        try:
            await asyncio.gather(
                dispatcher.feed_update(bot, _callback_update(3, chat_id, "next_question:0")),
                dispatcher.feed_update(bot, _callback_update(4, chat_id, "next_question:0")),
            )
        finally:
            await bot.session.close()

        data = await state.get_data()
        assert data["current_index"] == 1
        assert data["answers"] == [[1], [], []]
