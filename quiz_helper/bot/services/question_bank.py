import logging
from pathlib import Path

from bot.config import SAMPLE_QUESTIONS, settings
from bot.quiz.loader import load_questions, parse_questions
from bot.quiz.models import Question

logger = logging.getLogger(__name__)


def get_questions(quiz_file: str | None = None) -> list[Question]:
    """Questions for a new quiz: the configured JSON file, or the built-in sample."""
    path = quiz_file if quiz_file is not None else settings.QUIZ_FILE

    if path:
        try:
            raw = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Could not read quiz file %s (%s), using the sample quiz", path, e)
        else:
            questions = load_questions(raw)
            if questions:
                logger.info("Loaded %d questions from %s", len(questions), path)
                return questions
            logger.warning("No usable questions in %s, using the sample quiz", path)

    return parse_questions(SAMPLE_QUESTIONS)


def questions_to_data(questions: list[Question]) -> list[dict]:
    return [q.to_dict() for q in questions]


def questions_from_data(data: list[dict]) -> list[Question]:
    return [Question.from_dict(item) for item in data]
