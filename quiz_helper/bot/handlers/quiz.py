import logging

from aiogram import Router, F
from aiogram.types import Message, CallbackQuery
from aiogram.fsm.context import FSMContext

from bot.handlers.results import show_results
from bot.keyboards.main_menu import main_menu_keyboard
from bot.keyboards.quiz_kb import question_keyboard
from bot.quiz.controller import QuestionController
from bot.quiz.models import AnswerRecord, ShowQuestion
from bot.services.question_bank import get_questions, questions_from_data, questions_to_data
from bot.states.quiz_states import QuizFlow

logger = logging.getLogger(__name__)

router = Router()

STALE_QUIZ_TEXT = "This quiz is already over. Start a new one from the menu."


async def start_quiz(message: Message, state: FSMContext):
    """Reset the flow to question 0 with an empty answer record."""
    questions = get_questions()
    await state.set_state(QuizFlow.answering_question)
    await state.update_data(
        questions=questions_to_data(questions),
        current_index=0,
        answers=AnswerRecord.empty(len(questions)).to_data(),
        selection=[],
    )
    logger.info("Chat %s started a quiz with %d questions", message.chat.id, len(questions))
    await _send_current_question(message, state)


async def _restore_controller(state: FSMContext) -> QuestionController:
    """Rebuild the controller for the question on screen from FSM data."""
    data = await state.get_data()
    return QuestionController(
        questions_from_data(data["questions"]),
        data["current_index"],
        AnswerRecord.from_data(data["answers"]),
        selection=data.get("selection", []),
    )


def _format_question(controller: QuestionController) -> str:
    question = controller.question
    text = f"❓ Question {controller.current_index + 1} of {controller.total_questions}\n\n{question.prompt}"
    if question.allows_multiple:
        text += "\n\n☑️ Select all that apply."
    return text


async def _send_current_question(message: Message, state: FSMContext):
    controller = await _restore_controller(state)
    await message.answer(_format_question(controller), reply_markup=question_keyboard(controller))


@router.callback_query(F.data == "start_quiz")
async def start_quiz_callback(callback: CallbackQuery, state: FSMContext):
    await callback.answer()
    await start_quiz(callback.message, state)


def _parse_callback_data(data: str, prefix: str) -> tuple[int, ...] | None:
    """'choice:2:1' -> (2, 1). None for anything that doesn't match."""
    parts = data.split(":")
    if parts[0] != prefix or len(parts) < 2:
        return None
    try:
        return tuple(int(part) for part in parts[1:])
    except ValueError:
        return None


@router.callback_query(QuizFlow.answering_question, F.data.startswith("choice:"))
async def choice_selected(callback: CallbackQuery, state: FSMContext):
    """Toggle or replace the selection and redraw the buttons."""
    parsed = _parse_callback_data(callback.data, "choice")
    if parsed is None or len(parsed) != 2:
        await callback.answer()
        return
    question_index, choice_index = parsed

    controller = await _restore_controller(state)
    if question_index != controller.current_index or not controller.question.is_valid_choice(choice_index):
        # Button from a keyboard that no longer matches the question on screen
        await callback.answer()
        return

    before = controller.selection
    controller.select_choice(choice_index)
    await callback.answer()

    if controller.selection == before:
        return
    await state.update_data(selection=list(controller.selection))
    await callback.message.edit_reply_markup(reply_markup=question_keyboard(controller))


@router.callback_query(QuizFlow.answering_question, F.data.startswith("next_question:"))
async def next_question(callback: CallbackQuery, state: FSMContext):
    """Store the selection and move to the next question or the summary."""
    parsed = _parse_callback_data(callback.data, "next_question")
    controller = await _restore_controller(state)
    if parsed != (controller.current_index,):
        # Second tap on a question that was already answered
        await callback.answer()
        return

    navigation = controller.advance()

    await callback.answer()
    await callback.message.edit_reply_markup(reply_markup=None)

    if isinstance(navigation, ShowQuestion):
        await state.update_data(
            current_index=navigation.next_index,
            answers=navigation.answers.to_data(),
            selection=[],
        )
        await _send_current_question(callback.message, state)
        return

    logger.info("Chat %s finished the quiz", callback.message.chat.id)
    await show_results(callback.message, state, navigation)


@router.callback_query(F.data == "cancel_quiz")
async def cancel_quiz(callback: CallbackQuery, state: FSMContext):
    """Cancel the current quiz and go home."""
    await state.clear()
    await callback.message.answer(
        "Quiz cancelled. Back to the main menu.",
        reply_markup=main_menu_keyboard(),
    )
    await callback.answer()


@router.callback_query(F.data.startswith("choice:") | F.data.startswith("next_question:"))
async def stale_quiz_action(callback: CallbackQuery):
    """Buttons pressed on a quiz that is no longer running."""
    await callback.answer(STALE_QUIZ_TEXT)
