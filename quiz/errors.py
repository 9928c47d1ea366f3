class QuizError(Exception):
    """Base class for errors surfaced by the quiz service."""


class NotFound(QuizError):
    pass


class DomainError(QuizError):
    """The test is in a state that cannot be scored."""


class PersistenceError(QuizError):
    """Appending to storage failed; nothing was saved."""

    def __init__(self, message: str, *, integrity: bool = False):
        super().__init__(message)
        self.integrity = integrity
