"""List membership repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.game import Game
from domain.entities.list_membership import ListKind, ListMembership


class IListMembershipRepository(Protocol):
    """Repository interface for the user_game_lists relation."""

    async def exists(self, user_id: UUID, game_id: int, kind: ListKind) -> bool:
        """Check whether the (user, game, kind) row exists."""
        ...

    async def get_kinds(self, user_id: UUID, game_id: int) -> set[ListKind]:
        """Get the kinds of list a user has placed a game in."""
        ...

    async def get_for_user(
        self, user_id: UUID, kind: ListKind
    ) -> list[tuple[ListMembership, Game]]:
        """Get one of a user's lists, newest first, joined with its games."""
        ...

    async def add(self, membership: ListMembership) -> ListMembership:
        """Insert a row. Raises UniqueViolation on a uniqueness violation."""
        ...

    async def remove(self, user_id: UUID, game_id: int, kind: ListKind) -> bool:
        """Delete a row; False when it did not exist."""
        ...

    async def delete_for_game(self, game_id: int) -> int:
        """Delete every membership row of a game and return the count."""
        ...
