from typing import Optional


class InvalidInput(ValueError):
    """Raised when a caller passes a value the catalog engine cannot price or sort by."""


class IngestionError(ValueError):
    """Raised when a catalog source file is missing or unreadable, or a row fails validation in strict mode."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
