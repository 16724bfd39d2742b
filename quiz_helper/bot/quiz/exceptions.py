"""Custom exceptions for the quiz core."""


class QuizError(Exception):
    """Base exception for quiz errors."""
    pass


class ContractViolation(QuizError):
    """Caller broke the core's contract (bad index, mismatched record, broken question)."""
    pass


class InvalidQuestionError(QuizError):
    """Raw question data could not be turned into a Question."""
    pass
