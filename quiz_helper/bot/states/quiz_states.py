from aiogram.fsm.state import StatesGroup, State


class QuizFlow(StatesGroup):
    answering_question = State()
