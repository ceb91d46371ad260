"""Error types raised by the accountability services and utilities."""

from __future__ import annotations


class AccountabilityError(Exception):
    """Base class for all accountability errors."""


class EntityNotFound(AccountabilityError):
    """A round, goal or progress entry with the given id does not exist."""

    def __init__(self, kind: str, entity_id: str, parent_id: str | None = None) -> None:
        self.kind = kind
        self.entity_id = entity_id
        self.parent_id = parent_id
        message = f"{kind.capitalize()} with id {entity_id} not found"
        if parent_id:
            message += f" in round {parent_id}"
        super().__init__(message)


class ValidationError(AccountabilityError):
    """Input was rejected; ``errors`` lists every problem found."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid input")


class InvalidDateRange(AccountabilityError, ValueError):
    """A date range whose start lies after its end."""

    def __init__(self, start: str, end: str) -> None:
        self.start = start
        self.end = end
        super().__init__(f"Invalid date range: {start} is after {end}")
