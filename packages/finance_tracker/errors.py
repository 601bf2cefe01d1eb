"""Domain error kinds raised by the service layer.

The web layer maps these to HTTP responses; storage failures
(``sqlalchemy.exc.SQLAlchemyError``) are not wrapped and reach the
generic server error path unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence


class FinanceTrackerError(Exception):
    """Base class for errors raised by ``finance_tracker`` services."""


class ValidationError(FinanceTrackerError):
    """One or more input fields failed their constraints.

    ``errors`` maps each failing field to its human-readable messages. Nothing
    is written when this is raised.
    """

    def __init__(self, errors: Mapping[str, Sequence[str]]) -> None:
        self.errors: dict[str, list[str]] = {k: list(v) for k, v in errors.items()}
        fields = ", ".join(sorted(self.errors)) or "<none>"
        super().__init__(f"invalid input for: {fields}")

    @property
    def message(self) -> str:
        """First message of the first failing field."""

        for messages in self.errors.values():
            if messages:
                extra = sum(len(m) for m in self.errors.values()) - 1
                if extra > 0:
                    noun = "error" if extra == 1 else "errors"
                    return f"{messages[0]} (and {extra} more {noun})"
                return messages[0]
        return "The given data was invalid."


class NotFoundError(FinanceTrackerError):
    """An identifier did not resolve to a stored entity."""

    def __init__(self, resource: str, identifier: object) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier!r} not found")


__all__ = ["FinanceTrackerError", "ValidationError", "NotFoundError"]
