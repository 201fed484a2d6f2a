"""Pydantic schemas for user game lists API."""

from datetime import datetime

from pydantic import BaseModel

from api.v1.schemas.game import GameResponse
from domain.entities.list_membership import ListKind, MembershipState


class ListStatusResponse(BaseModel):
    """Which lists contain a game."""

    game_id: int
    collection: bool
    wishlist: bool
    played: bool


class ListStatusDetailResponse(BaseModel):
    data: ListStatusResponse


class ToggleResponse(BaseModel):
    """Result of toggling a game in a list, with the refreshed status."""

    game_id: int
    kind: ListKind
    state: MembershipState
    status: ListStatusResponse


class ToggleDetailResponse(BaseModel):
    data: ToggleResponse


class ListEntryResponse(BaseModel):
    """One game in a user's list."""

    kind: ListKind
    added_at: datetime
    game: GameResponse


class ListEntriesResponse(BaseModel):
    data: list[ListEntryResponse]
