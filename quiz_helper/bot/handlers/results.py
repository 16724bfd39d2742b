import html
import logging
from typing import Sequence

from aiogram.types import Message
from aiogram.fsm.context import FSMContext

from bot.keyboards.quiz_kb import results_keyboard
from bot.quiz.models import ChoiceMark, Question, ShowSummary, Summary
from bot.quiz.scoring import evaluate

logger = logging.getLogger(__name__)

CHOICE_STYLES = {
    ChoiceMark.SELECTED_CORRECT: "✅ <b>{}</b>",
    ChoiceMark.SELECTED_INCORRECT: "❌ <s>{}</s>",
    ChoiceMark.UNSELECTED_CORRECT: "▫️ <b>{}</b>",
    ChoiceMark.UNSELECTED_INCORRECT: "▫️ {}",
}


async def show_results(message: Message, state: FSMContext, navigation: ShowSummary):
    """Score the finished quiz and show the summary."""
    summary = evaluate(navigation.questions, navigation.answers)
    logger.info(
        "Chat %s scored %d/%d",
        message.chat.id, summary.total_score, summary.total_questions,
    )

    await state.clear()
    await message.answer(
        format_summary(navigation.questions, summary),
        parse_mode="HTML",
        reply_markup=results_keyboard(),
    )


def format_summary(questions: Sequence[Question], summary: Summary) -> str:
    blocks = []
    for question, result in zip(questions, summary.per_question):
        lines = [f"<b>{html.escape(question.prompt)}</b>"]
        for choice, mark in zip(question.choices, result.marks):
            lines.append(CHOICE_STYLES[mark].format(html.escape(choice)))
        lines.append("🟢 Correct" if result.is_correct else "🔴 Incorrect")
        blocks.append("\n".join(lines))

    emoji, comment = _score_comment(summary.percent)
    footer = (
        f"{emoji} <b>Total Score: {summary.total_score}/{summary.total_questions}</b> "
        f"({summary.percent}%)\n\n{comment}"
    )
    return "📊 Quiz results\n\n" + "\n\n".join(blocks) + "\n\n" + footer


def _score_comment(percent: int) -> tuple[str, str]:
    if percent >= 90:
        return "🏆", "Excellent result!"
    if percent >= 70:
        return "👍", "Good result!"
    if percent >= 50:
        return "📖", "Not bad, but there is room to improve."
    return "💪", "Keep practicing. You'll get there!"
