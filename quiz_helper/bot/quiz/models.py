"""Data models for questions, answers and quiz results."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Sequence

from bot.quiz.exceptions import ContractViolation


class QuestionType(str, Enum):
    SINGLE_CHOICE = "single_choice"
    MULTIPLE_CHOICE = "multiple_choice"
    BOOLEAN = "boolean"

    @property
    def allows_multiple(self) -> bool:
        return self is QuestionType.MULTIPLE_CHOICE


@dataclass(frozen=True)
class SingleAnswer:
    """Exactly one choice is correct."""
    index: int

    @property
    def indexes(self) -> frozenset[int]:
        return frozenset({self.index})


@dataclass(frozen=True)
class MultipleAnswer:
    """Every choice in ``indexes`` must be selected, and nothing else."""
    indexes: frozenset[int]

    def __post_init__(self):
        object.__setattr__(self, "indexes", frozenset(self.indexes))


CorrectSpec = SingleAnswer | MultipleAnswer


@dataclass(frozen=True)
class Question:
    """Single quiz item."""
    prompt: str
    type: QuestionType
    choices: tuple[str, ...]
    correct: CorrectSpec

    def __post_init__(self):
        try:
            object.__setattr__(self, "type", QuestionType(self.type))
        except ValueError:
            raise ContractViolation(f"Question {self.prompt!r} has unknown type {self.type!r}") from None
        object.__setattr__(self, "choices", tuple(self.choices))
        count = len(self.choices)

        if count < 2:
            raise ContractViolation(f"Question {self.prompt!r} needs at least 2 choices, got {count}")
        if self.type is QuestionType.BOOLEAN and count != 2:
            raise ContractViolation(f"Boolean question {self.prompt!r} must have exactly 2 choices")

        expected = MultipleAnswer if self.type.allows_multiple else SingleAnswer
        if not isinstance(self.correct, expected):
            raise ContractViolation(
                f"Question {self.prompt!r} of type {self.type.value} needs {expected.__name__}"
            )
        if not self.correct.indexes:
            raise ContractViolation(f"Question {self.prompt!r} has no correct choices")

        out_of_range = [i for i in self.correct.indexes if not 0 <= i < count]
        if out_of_range:
            raise ContractViolation(
                f"Question {self.prompt!r} marks out-of-range choices as correct: {sorted(out_of_range)}"
            )

    @property
    def allows_multiple(self) -> bool:
        return self.type.allows_multiple

    def is_valid_choice(self, choice_index: int) -> bool:
        return 0 <= choice_index < len(self.choices)

    def to_dict(self) -> dict:
        """Plain representation, suitable for FSM storage and JSON files."""
        if isinstance(self.correct, MultipleAnswer):
            correct = sorted(self.correct.indexes)
        else:
            correct = self.correct.index
        return {
            "prompt": self.prompt,
            "type": self.type.value,
            "choices": list(self.choices),
            "correct": correct,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Question":
        """Inverse of ``to_dict``. Choice text is taken as is."""
        q_type = QuestionType(data["type"])
        if q_type.allows_multiple:
            correct = MultipleAnswer(frozenset(data["correct"]))
        else:
            correct = SingleAnswer(data["correct"])
        return cls(data["prompt"], q_type, tuple(data["choices"]), correct)


@dataclass(frozen=True)
class AnswerRecord:
    """Finalized selections, one entry per question (empty set = unanswered).

    Records are never changed in place: ``with_entry`` hands back a new one.
    """
    entries: tuple[frozenset[int], ...]

    @classmethod
    def empty(cls, question_count: int) -> "AnswerRecord":
        return cls(tuple(frozenset() for _ in range(question_count)))

    @classmethod
    def from_data(cls, data: Sequence[Iterable[int]]) -> "AnswerRecord":
        return cls(tuple(frozenset(entry) for entry in data))

    def to_data(self) -> list[list[int]]:
        return [sorted(entry) for entry in self.entries]

    def with_entry(self, index: int, selection: Iterable[int]) -> "AnswerRecord":
        if not 0 <= index < len(self.entries):
            raise ContractViolation(f"Answer index {index} outside record of {len(self.entries)}")
        entries = list(self.entries)
        entries[index] = frozenset(selection)
        return AnswerRecord(tuple(entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> frozenset[int]:
        return self.entries[index]

    def __iter__(self) -> Iterator[frozenset[int]]:
        return iter(self.entries)


class ChoiceMark(str, Enum):
    """How a choice should be highlighted on the summary screen."""
    SELECTED_CORRECT = "selected_correct"
    SELECTED_INCORRECT = "selected_incorrect"
    UNSELECTED_CORRECT = "unselected_correct"
    UNSELECTED_INCORRECT = "unselected_incorrect"


@dataclass(frozen=True)
class QuestionResult:
    is_correct: bool
    selection: frozenset[int] = frozenset()
    marks: tuple[ChoiceMark, ...] = ()


@dataclass(frozen=True)
class Summary:
    per_question: tuple[QuestionResult, ...]
    total_score: int
    total_questions: int

    @property
    def percent(self) -> int:
        if self.total_questions == 0:
            return 0
        return round(self.total_score / self.total_questions * 100)


# ============================================================================
# Navigation instructions produced by QuestionController.advance()
# ============================================================================

@dataclass(frozen=True)
class ShowQuestion:
    questions: tuple[Question, ...]
    next_index: int
    answers: AnswerRecord = field(repr=False)


@dataclass(frozen=True)
class ShowSummary:
    questions: tuple[Question, ...]
    answers: AnswerRecord = field(repr=False)


Navigation = ShowQuestion | ShowSummary
