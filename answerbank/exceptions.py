"""
Custom exception hierarchy for the Answerbank application.
"""

from typing import Dict, Any

class AnswerbankException(Exception):
    """Base exception for Answerbank application."""
    def __init__(self, message: str, context: Dict[str, Any] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

class ValidationError(AnswerbankException):
    """Raised when a required field is missing or empty."""
    pass

class NotFoundError(AnswerbankException):
    """Raised when a response, version or job is absent or not owned by the caller."""
    pass

class ConflictError(AnswerbankException):
    """Raised when a version number could not be allocated after retrying."""
    pass

class PersistenceError(AnswerbankException):
    """Raised when the database rejects a read or write."""
    pass

class AIServiceError(AnswerbankException):
    """Base exception for feedback service errors."""
    pass

class UpstreamUnavailableError(AIServiceError):
    """Raised when the feedback service cannot be reached or times out."""
    pass

class InvalidResponseError(AIServiceError):
    """Raised when the feedback service reply cannot be parsed."""
    pass
