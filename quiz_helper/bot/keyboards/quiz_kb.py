from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton

from bot.quiz.controller import QuestionController

# (selected, unselected)
RADIO_MARKS = ("🔘", "⚪")
CHECKBOX_MARKS = ("☑️", "⬜")


def question_keyboard(controller: QuestionController) -> InlineKeyboardMarkup:
    """Choice buttons for the current question plus the next/finish button."""
    question = controller.question
    selected_mark, unselected_mark = CHECKBOX_MARKS if question.allows_multiple else RADIO_MARKS

    buttons = []
    for i, choice in enumerate(question.choices):
        mark = selected_mark if controller.is_selected(i) else unselected_mark
        buttons.append([InlineKeyboardButton(
            text=f"{mark} {choice}",
            callback_data=f"choice:{controller.current_index}:{i}",
        )])

    next_text = "🏁 Finish Quiz" if controller.is_last else "➡️ Next Question"
    buttons.append([InlineKeyboardButton(
        text=next_text,
        callback_data=f"next_question:{controller.current_index}",
    )])
    buttons.append([InlineKeyboardButton(text="❌ Cancel quiz", callback_data="cancel_quiz")])
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def results_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="🔁 Try again", callback_data="start_quiz")],
        [InlineKeyboardButton(text="🏠 Main menu", callback_data="go_home")],
    ])
