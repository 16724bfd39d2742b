"""Shared fixtures for quiz tests."""
import pytest
from unittest.mock import AsyncMock, MagicMock

from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import StorageKey
from aiogram.fsm.storage.memory import MemoryStorage

from bot.quiz.models import MultipleAnswer, Question, QuestionType, SingleAnswer


@pytest.fixture
def single_question():
    """Single-answer question: the bat is correct (index 1)."""
    return Question(
        prompt="What’s the only flying mammal?",
        type=QuestionType.SINGLE_CHOICE,
        choices=("Eagle", "Bat", "Flying Squirrel", "Penguin"),
        correct=SingleAnswer(1),
    )


@pytest.fixture
def multiple_question():
    """Multiple-answer question: Blue and Yellow (indexes 1 and 2)."""
    return Question(
        prompt="What are IKEA’s colors?",
        type=QuestionType.MULTIPLE_CHOICE,
        choices=("Red", "Blue", "Yellow", "Green"),
        correct=MultipleAnswer(frozenset({1, 2})),
    )


@pytest.fixture
def boolean_question():
    """True/false question: True (index 0) is correct."""
    return Question(
        prompt="Is 2 + 2 = 4?",
        type=QuestionType.BOOLEAN,
        choices=("True", "False"),
        correct=SingleAnswer(0),
    )


@pytest.fixture
def sample_questions(single_question, multiple_question, boolean_question):
    """The three-question sample quiz, in order."""
    return [single_question, multiple_question, boolean_question]


@pytest.fixture
def state():
    """Real FSM context over in-memory storage."""
    return FSMContext(
        storage=MemoryStorage(),
        key=StorageKey(bot_id=1, chat_id=12345, user_id=12345),
    )


@pytest.fixture
def make_message():
    def _make(chat_id: int = 12345) -> AsyncMock:
        message = AsyncMock()
        message.chat = MagicMock()
        message.chat.id = chat_id
        message.from_user = MagicMock()
        message.from_user.id = chat_id
        message.answer = AsyncMock()
        message.edit_text = AsyncMock()
        message.edit_reply_markup = AsyncMock()
        return message
    return _make


@pytest.fixture
def make_callback(make_message):
    def _make(data: str, chat_id: int = 12345) -> AsyncMock:
        callback = AsyncMock()
        callback.from_user = MagicMock()
        callback.from_user.id = chat_id
        callback.data = data
        callback.message = make_message(chat_id)
        callback.answer = AsyncMock()
        return callback
    return _make
