"""Error types raised by the quiz service and its collaborators."""


class CodeQuizError(Exception):
    """Base class for quiz service errors."""


class NotAuthenticatedError(CodeQuizError):
    """An operation needed a signed-in user and there was none."""

    def __init__(self, message: str = "User not authenticated.") -> None:
        super().__init__(message)


class CollaboratorError(CodeQuizError):
    """An external collaborator (AI service, result store) failed."""


class StoreUnavailableError(CollaboratorError):
    """The result store could not complete a read or write."""

    def __init__(self, message: str = "Result store unavailable.") -> None:
        super().__init__(message)


class AIServiceError(CollaboratorError):
    """The generative AI service failed or returned unusable output."""
