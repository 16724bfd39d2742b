import json
import logging
import re
from typing import Any, Iterable

from bot.quiz.exceptions import ContractViolation, InvalidQuestionError
from bot.quiz.models import MultipleAnswer, Question, QuestionType, SingleAnswer

logger = logging.getLogger(__name__)

TYPE_ALIASES = {
    "single_choice": QuestionType.SINGLE_CHOICE,
    "multiple_choice": QuestionType.MULTIPLE_CHOICE,
    "multiple_answer": QuestionType.MULTIPLE_CHOICE,
    "boolean": QuestionType.BOOLEAN,
    "true_false": QuestionType.BOOLEAN,
}

_LETTER_PREFIX_RE = re.compile(r"^([A-Za-z])[).:]\s+")


def load_questions(raw_text: str) -> list[Question] | None:
    """Parse JSON text into a list of questions. Returns None on failure."""
    if not raw_text:
        return None

    items = _try_parse_json(raw_text)

    # Try extracting from markdown code block
    if items is None:
        match = re.search(r"```(?:json)?\s*(\[.+?])\s*```", raw_text, re.DOTALL)
        if match:
            items = _try_parse_json(match.group(1))

    if items is None:
        logger.error("Failed to parse question data as a JSON array")
        return None

    questions = parse_questions(items)
    return questions if questions else None


def parse_questions(items: Iterable[Any]) -> list[Question]:
    """Build questions from raw dicts, skipping the ones that don't hold up."""
    valid = []
    for item in items:
        try:
            valid.append(parse_question(item))
        except (InvalidQuestionError, ContractViolation) as e:
            logger.warning("Skipping invalid question %r: %s", item, e)
    return valid


def parse_question(raw: Any) -> Question:
    if not isinstance(raw, dict):
        raise InvalidQuestionError(f"Expected an object, got {type(raw).__name__}")

    prompt = raw.get("prompt") or raw.get("question")
    if not isinstance(prompt, str) or not prompt.strip():
        raise InvalidQuestionError("Question has no prompt")

    raw_type = str(raw.get("type", "")).strip().lower().replace("-", "_")
    q_type = TYPE_ALIASES.get(raw_type)
    if q_type is None:
        raise InvalidQuestionError(f"Unknown question type {raw.get('type')!r}")

    choices = raw.get("choices") or raw.get("options")
    if not isinstance(choices, list) or not all(isinstance(c, str) for c in choices):
        raise InvalidQuestionError("Question choices must be a list of strings")
    choices = _strip_letter_prefixes(choices)

    if "correct" not in raw:
        raise InvalidQuestionError("Question has no correct answer")
    correct = raw["correct"]

    if q_type.allows_multiple:
        if not isinstance(correct, list):
            raise InvalidQuestionError("Multiple-answer question needs a list of correct choices")
        spec = MultipleAnswer(frozenset(_resolve_index(value) for value in correct))
    else:
        if isinstance(correct, list):
            raise InvalidQuestionError("Single-answer question needs exactly one correct choice")
        spec = SingleAnswer(_resolve_index(correct))

    return Question(prompt=prompt.strip(), type=q_type, choices=tuple(choices), correct=spec)


def _strip_letter_prefixes(choices: list[str]) -> list[str]:
    """Drop "A) ", "B. " ... labels, but only when every choice carries them in order."""
    stripped = []
    for i, choice in enumerate(choices):
        match = _LETTER_PREFIX_RE.match(choice)
        if not match or match.group(1).upper() != chr(ord("A") + i):
            return [c.strip() for c in choices]
        stripped.append(choice[match.end():].strip())
    return stripped


def _resolve_index(value: Any) -> int:
    """Accept a 0-based index or a choice letter (A = 0)."""
    if isinstance(value, bool):
        raise InvalidQuestionError(f"Correct choice must be an index or a letter, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and re.match(r"^[A-Za-z]$", value.strip()):
        return ord(value.strip().upper()) - ord("A")
    raise InvalidQuestionError(f"Correct choice must be an index or a letter, got {value!r}")


def _try_parse_json(text: str) -> list | None:
    try:
        data = json.loads(text)
        if isinstance(data, list):
            return data
    except (json.JSONDecodeError, TypeError):
        pass
    return None
