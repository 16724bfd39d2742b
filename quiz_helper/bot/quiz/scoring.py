from typing import Collection, Sequence

from bot.quiz.exceptions import ContractViolation
from bot.quiz.models import (
    AnswerRecord,
    ChoiceMark,
    MultipleAnswer,
    Question,
    QuestionResult,
    Summary,
)


def is_correct(question: Question, selection: Collection[int]) -> bool:
    """Check if the user's selection answers the question correctly."""
    correct = question.correct

    if isinstance(correct, MultipleAnswer):
        # All or nothing: a subset or a superset is wrong
        return frozenset(selection) == correct.indexes

    # QuestionController never stores more than one choice here
    if len(selection) != 1:
        return False
    return correct.index in selection


def classify_choice(question: Question, selection: Collection[int], choice_index: int) -> ChoiceMark:
    """Cross selection membership with correctness for one choice."""
    selected = choice_index in selection
    correct = choice_index in question.correct.indexes

    if selected and correct:
        return ChoiceMark.SELECTED_CORRECT
    if selected:
        return ChoiceMark.SELECTED_INCORRECT
    if correct:
        return ChoiceMark.UNSELECTED_CORRECT
    return ChoiceMark.UNSELECTED_INCORRECT


def evaluate(questions: Sequence[Question], answers: AnswerRecord) -> Summary:
    """Score a completed answer record.

    Unanswered questions (empty selections) simply count as incorrect.
    """
    if not questions:
        raise ContractViolation("Cannot evaluate a quiz without questions")
    if len(answers) != len(questions):
        raise ContractViolation(
            f"Answer record has {len(answers)} entries for {len(questions)} questions"
        )

    results = []
    for index, (question, selection) in enumerate(zip(questions, answers)):
        stray = [i for i in selection if not question.is_valid_choice(i)]
        if stray:
            raise ContractViolation(f"Answer for question {index} has out-of-range choices {sorted(stray)}")

        marks = tuple(
            classify_choice(question, selection, i) for i in range(len(question.choices))
        )
        results.append(QuestionResult(
            is_correct=is_correct(question, selection),
            selection=frozenset(selection),
            marks=marks,
        ))

    return Summary(
        per_question=tuple(results),
        total_score=sum(1 for r in results if r.is_correct),
        total_questions=len(questions),
    )
