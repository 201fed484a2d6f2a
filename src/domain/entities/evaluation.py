"""Evaluation domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

MIN_RATING = 1
MAX_RATING = 5


@dataclass
class Evaluation:
    """Domain entity for a user's rating and comment on a game."""

    user_id: UUID
    game_id: int
    rating: int
    id: UUID = field(default_factory=uuid4)
    comment: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def revise(self, rating: int, comment: str | None) -> None:
        """Replace rating and comment of an existing evaluation."""
        self.rating = rating
        self.comment = comment
        self.updated_at = datetime.utcnow()

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


@dataclass
class EvaluationWithAuthor:
    """Evaluation joined with the author's public profile fields."""

    evaluation: Evaluation
    username: str
    first_name: str | None = None
    last_name: str | None = None
