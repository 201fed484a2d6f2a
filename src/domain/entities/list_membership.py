"""List membership domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class ListKind(StrEnum):
    """The personal lists a game can be placed in."""

    COLLECTION = "collection"
    WISHLIST = "wishlist"
    PLAYED = "played"


class MembershipState(StrEnum):
    """Presence of a (user, game, kind) row after a toggle."""

    PRESENT = "present"
    ABSENT = "absent"


# Adding a game to the key kind removes it from the value kinds.
SUPERSEDES: dict[ListKind, tuple[ListKind, ...]] = {
    ListKind.COLLECTION: (ListKind.WISHLIST,),
    ListKind.WISHLIST: (),
    ListKind.PLAYED: (),
}

# A game in any of the value kinds cannot be added to the key kind.
BLOCKED_BY: dict[ListKind, tuple[ListKind, ...]] = {
    ListKind.COLLECTION: (),
    ListKind.WISHLIST: (ListKind.COLLECTION,),
    ListKind.PLAYED: (),
}


@dataclass
class ListMembership:
    """Domain entity for one game in one of a user's lists."""

    user_id: UUID
    game_id: int
    kind: ListKind
    added_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class GameListStatus:
    """Which of the user's lists currently contain a game."""

    collection: bool = False
    wishlist: bool = False
    played: bool = False

    @classmethod
    def from_kinds(cls, kinds: set[ListKind]) -> "GameListStatus":
        return cls(
            collection=ListKind.COLLECTION in kinds,
            wishlist=ListKind.WISHLIST in kinds,
            played=ListKind.PLAYED in kinds,
        )
