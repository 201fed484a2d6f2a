"""Errors raised by repository implementations."""


class UniqueViolation(Exception):
    """A write collided with a uniqueness constraint in the row store."""

    def __init__(self, constraint: str) -> None:
        self.constraint = constraint
        super().__init__(f"Unique constraint violated: {constraint}")
