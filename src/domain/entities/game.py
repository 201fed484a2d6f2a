"""Game domain entities."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Game:
    """Domain entity for a catalog board game."""

    name: str
    min_players: int
    max_players: int
    playing_time: int
    id: int | None = None
    description: str | None = None
    thumbnail_url: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class LeaderboardEntry:
    """A rated game with its community average and position."""

    game: Game
    average_rating: float
    total_evaluations: int
    rank: int = 0
