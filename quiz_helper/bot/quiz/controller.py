import logging
from typing import Iterable, Sequence

from bot.quiz.exceptions import ContractViolation
from bot.quiz.models import AnswerRecord, Navigation, Question, ShowQuestion, ShowSummary

logger = logging.getLogger(__name__)


class QuestionController:
    """Selection state for the question currently on screen.

    A controller lives for one step of the quiz. The host builds it from
    ``(questions, current_index, answers)``, feeds it choice taps, and calls
    ``advance()`` once to get the next navigation instruction.

    ``selection`` lets the host restore choices made earlier on the same
    question (e.g. between two callbacks). A freshly entered question starts
    with nothing selected.
    """

    def __init__(
        self,
        questions: Sequence[Question],
        current_index: int,
        answers: AnswerRecord,
        selection: Iterable[int] = (),
    ):
        if not questions:
            raise ContractViolation("Quiz has no questions")
        if not 0 <= current_index < len(questions):
            raise ContractViolation(f"Question index {current_index} out of range for {len(questions)} questions")
        if len(answers) != len(questions):
            raise ContractViolation(
                f"Answer record has {len(answers)} entries for {len(questions)} questions"
            )

        self._questions = tuple(questions)
        self._index = current_index
        self._answers = answers
        self._selection: list[int] = []
        self._finished = False

        for choice_index in selection:
            self._check_choice(choice_index)
            if choice_index not in self._selection:
                self._selection.append(choice_index)
        if len(self._selection) > 1 and not self.question.allows_multiple:
            raise ContractViolation(
                f"Single-answer question {self._index} restored with {len(self._selection)} selections"
            )

    @property
    def question(self) -> Question:
        return self._questions[self._index]

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    @property
    def is_last(self) -> bool:
        return self._index + 1 >= len(self._questions)

    @property
    def selection(self) -> tuple[int, ...]:
        """Currently selected choice indexes, in the order they were picked."""
        return tuple(self._selection)

    def is_selected(self, choice_index: int) -> bool:
        return choice_index in self._selection

    def select_choice(self, choice_index: int) -> None:
        """Toggle (multiple-answer) or replace (single-answer) the selection."""
        self._check_choice(choice_index)

        if self.question.allows_multiple:
            if choice_index in self._selection:
                self._selection.remove(choice_index)
            else:
                self._selection.append(choice_index)
        else:
            self._selection = [choice_index]

    def advance(self) -> Navigation:
        """Fold the selection into a new answer record and say where to go next."""
        if self._finished:
            raise ContractViolation(f"Question {self._index} was already advanced past")
        self._finished = True

        answers = self._answers.with_entry(self._index, self._selection)
        next_index = self._index + 1

        if next_index < len(self._questions):
            logger.debug("Question %d answered with %s, moving to %d", self._index, self._selection, next_index)
            return ShowQuestion(self._questions, next_index, answers)

        logger.debug("Last question %d answered with %s, quiz complete", self._index, self._selection)
        return ShowSummary(self._questions, answers)

    def _check_choice(self, choice_index: int) -> None:
        if not self.question.is_valid_choice(choice_index):
            raise ContractViolation(
                f"Choice {choice_index} out of range for question {self._index} "
                f"with {len(self.question.choices)} choices"
            )
