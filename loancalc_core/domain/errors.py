from __future__ import annotations


class InvalidFieldError(ValueError):
    """A single user-supplied field failed validation."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
