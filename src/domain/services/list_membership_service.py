"""List membership service: collection, wishlist and played toggles."""

from typing import Callable, List, Optional, Tuple
from uuid import UUID

import structlog

from core.exceptions import ConsistencyConflictError, GameNotFoundError, NotAuthenticatedError
from domain.entities.game import Game
from domain.entities.list_membership import (
    BLOCKED_BY,
    SUPERSEDES,
    GameListStatus,
    ListKind,
    ListMembership,
    MembershipState,
)
from domain.repositories.errors import UniqueViolation
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class ListMembershipService:
    """Toggles a game in a user's lists, keeping collection and wishlist exclusive.

    Adding to the collection removes the game from the wishlist, and a game
    already in the collection cannot be added to the wishlist.

    A toggle reads the current row and then writes, inside one unit of work.
    Two sessions racing on the same (user, game, kind) are caught by the
    unique constraint on insert; the loser is rolled back and told to re-query.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def toggle(
        self, user_id: Optional[UUID], game_id: int, kind: ListKind
    ) -> MembershipState:
        """Flip the presence of a game in one list and return the new state."""
        state, _ = await self.toggle_with_status(user_id, game_id, kind)
        return state

    async def toggle_with_status(
        self, user_id: Optional[UUID], game_id: int, kind: ListKind
    ) -> Tuple[MembershipState, GameListStatus]:
        """Toggle, then read the game's lists back in the same unit of work."""
        if user_id is None:
            raise NotAuthenticatedError()

        async with self._uow_factory() as uow:
            state = await self._toggle(uow, user_id, game_id, kind)
            kinds = await uow.list_memberships.get_kinds(user_id, game_id)
            await uow.commit()

        return state, GameListStatus.from_kinds(kinds)

    async def _toggle(
        self, uow: IUnitOfWork, user_id: UUID, game_id: int, kind: ListKind
    ) -> MembershipState:
        log = logger.bind(user_id=str(user_id), game_id=game_id, kind=kind.value)

        if await uow.list_memberships.exists(user_id, game_id, kind):
            await uow.list_memberships.remove(user_id, game_id, kind)
            log.info("list_membership_removed")
            return MembershipState.ABSENT

        if not await uow.games.get(game_id):
            raise GameNotFoundError(game_id)

        for blocker in BLOCKED_BY[kind]:
            if await uow.list_memberships.exists(user_id, game_id, blocker):
                log.info("list_membership_blocked", by=blocker.value)
                return MembershipState.ABSENT

        for superseded in SUPERSEDES[kind]:
            if await uow.list_memberships.remove(user_id, game_id, superseded):
                log.info("list_membership_superseded", superseded=superseded.value)

        try:
            await uow.list_memberships.add(
                ListMembership(user_id=user_id, game_id=game_id, kind=kind)
            )
        except UniqueViolation as e:
            await uow.rollback()
            log.warning("list_membership_conflict")
            raise ConsistencyConflictError(str(user_id), game_id, kind.value) from e

        log.info("list_membership_added")
        return MembershipState.PRESENT

    async def get_status(self, user_id: Optional[UUID], game_id: int) -> GameListStatus:
        """Which lists currently hold the game. Anonymous users have none."""
        if user_id is None:
            return GameListStatus()
        async with self._uow_factory() as uow:
            kinds = await uow.list_memberships.get_kinds(user_id, game_id)
            return GameListStatus.from_kinds(kinds)

    async def get_list(
        self, user_id: Optional[UUID], kind: ListKind
    ) -> List[Tuple[ListMembership, Game]]:
        """Get one of the user's lists, most recently added first."""
        if user_id is None:
            raise NotAuthenticatedError()
        async with self._uow_factory() as uow:
            return await uow.list_memberships.get_for_user(user_id, kind)

    async def remove(self, user_id: Optional[UUID], game_id: int, kind: ListKind) -> bool:
        """Take a game off a list. Removing an absent game is not an error."""
        if user_id is None:
            raise NotAuthenticatedError()
        async with self._uow_factory() as uow:
            removed = await uow.list_memberships.remove(user_id, game_id, kind)
            await uow.commit()
            return removed
