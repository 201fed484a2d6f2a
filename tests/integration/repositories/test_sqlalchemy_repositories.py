"""Integration tests for the SQLAlchemy repositories and unit of work."""

import itertools
from typing import Any, Callable
from uuid import UUID, uuid4

import pytest

from domain.entities.evaluation import Evaluation
from domain.entities.list_membership import ListKind, ListMembership, MembershipState
from domain.entities.profile import Profile
from domain.repositories.errors import UniqueViolation
from domain.services.evaluation_service import EvaluationService
from domain.services.game_service import GameService
from domain.services.list_membership_service import ListMembershipService


class TestProfileRepository:
    @pytest.mark.asyncio
    async def test_duplicate_username_is_a_unique_violation(
        self, uow_factory: Callable[[], Any], test_user_id: UUID
    ):
        async with uow_factory() as uow:
            with pytest.raises(UniqueViolation):
                await uow.profiles.create(Profile(id=uuid4(), username="ana123"))
            await uow.rollback()

    @pytest.mark.asyncio
    async def test_username_exists_excludes_own_profile(
        self, uow_factory: Callable[[], Any], test_user_id: UUID
    ):
        async with uow_factory() as uow:
            assert await uow.profiles.username_exists("ana123") is True
            assert await uow.profiles.username_exists("ana123", exclude_id=test_user_id) is False


class TestListMembershipRepository:
    @pytest.mark.asyncio
    async def test_duplicate_row_is_a_unique_violation(
        self, uow_factory: Callable[[], Any], test_user_id: UUID, game_ids: list[int]
    ):
        membership = ListMembership(user_id=test_user_id, game_id=game_ids[0], kind=ListKind.PLAYED)
        async with uow_factory() as uow:
            await uow.list_memberships.add(membership)
            await uow.commit()

        async with uow_factory() as uow:
            with pytest.raises(UniqueViolation):
                await uow.list_memberships.add(
                    ListMembership(user_id=test_user_id, game_id=game_ids[0], kind=ListKind.PLAYED)
                )
            await uow.rollback()

    @pytest.mark.asyncio
    async def test_get_for_user_joins_games(
        self, uow_factory: Callable[[], Any], test_user_id: UUID, game_ids: list[int]
    ):
        async with uow_factory() as uow:
            for game_id in game_ids[:2]:
                await uow.list_memberships.add(
                    ListMembership(user_id=test_user_id, game_id=game_id, kind=ListKind.WISHLIST)
                )
            await uow.commit()

        async with uow_factory() as uow:
            entries = await uow.list_memberships.get_for_user(test_user_id, ListKind.WISHLIST)

        assert {game.name for _, game in entries} == {"Azul", "Catan"}


class TestToggleAgainstDatabase:
    @pytest.mark.asyncio
    async def test_collection_and_wishlist_stay_exclusive(
        self, uow_factory: Callable[[], Any], test_user_id: UUID, game_ids: list[int]
    ):
        service = ListMembershipService(uow_factory)
        game_id = game_ids[0]

        await service.toggle(test_user_id, game_id, ListKind.WISHLIST)
        await service.toggle(test_user_id, game_id, ListKind.COLLECTION)
        await service.toggle(test_user_id, game_id, ListKind.PLAYED)

        status = await service.get_status(test_user_id, game_id)
        assert status.collection is True
        assert status.wishlist is False
        assert status.played is True

        # Removing from the collection does not bring the wishlist entry back
        await service.toggle(test_user_id, game_id, ListKind.COLLECTION)
        status = await service.get_status(test_user_id, game_id)
        assert (status.collection, status.wishlist, status.played) == (False, False, True)

    @pytest.mark.asyncio
    async def test_toggle_twice_restores_state(
        self, uow_factory: Callable[[], Any], test_user_id: UUID, game_ids: list[int]
    ):
        service = ListMembershipService(uow_factory)
        game_id = game_ids[1]

        for kind in ListKind:
            before = await service.get_status(test_user_id, game_id)
            first = await service.toggle(test_user_id, game_id, kind)
            second = await service.toggle(test_user_id, game_id, kind)
            after = await service.get_status(test_user_id, game_id)

            assert {first, second} == {MembershipState.PRESENT, MembershipState.ABSENT}
            assert getattr(after, kind.value) == getattr(before, kind.value)

    @pytest.mark.asyncio
    async def test_wishlist_refused_for_owned_game(
        self, uow_factory: Callable[[], Any], test_user_id: UUID, game_ids: list[int]
    ):
        service = ListMembershipService(uow_factory)
        game_id = game_ids[0]

        await service.toggle(test_user_id, game_id, ListKind.COLLECTION)
        result = await service.toggle(test_user_id, game_id, ListKind.WISHLIST)

        assert result == MembershipState.ABSENT
        status = await service.get_status(test_user_id, game_id)
        assert (status.collection, status.wishlist) == (True, False)

    @pytest.mark.asyncio
    async def test_collection_and_wishlist_never_both_present(
        self, uow_factory: Callable[[], Any], test_user_id: UUID, game_ids: list[int]
    ):
        service = ListMembershipService(uow_factory)
        game_id = game_ids[2]
        sequences = [
            seq for length in range(1, 4) for seq in itertools.product(ListKind, repeat=length)
        ]

        for seq in sequences:
            for kind in ListKind:
                await service.remove(test_user_id, game_id, kind)

            for kind in seq:
                await service.toggle(test_user_id, game_id, kind)
                status = await service.get_status(test_user_id, game_id)
                assert not (status.collection and status.wishlist), seq


class TestEvaluationUniqueness:
    @pytest.mark.asyncio
    async def test_second_submit_revises_the_same_row(
        self, uow_factory: Callable[[], Any], test_user_id: UUID, game_ids: list[int]
    ):
        service = EvaluationService(uow_factory)

        first = await service.submit(test_user_id, game_ids[0], 3, "ok")
        second = await service.submit(test_user_id, game_ids[0], 5, "ótimo")

        assert first.id == second.id
        listed = await service.list_for_game(game_ids[0])
        assert len(listed) == 1
        assert listed[0].evaluation.rating == 5
        assert listed[0].username == "ana123"

    @pytest.mark.asyncio
    async def test_duplicate_insert_is_a_unique_violation(
        self, uow_factory: Callable[[], Any], test_user_id: UUID, game_ids: list[int]
    ):
        async with uow_factory() as uow:
            await uow.evaluations.create(
                Evaluation(user_id=test_user_id, game_id=game_ids[0], rating=4)
            )
            await uow.commit()

        async with uow_factory() as uow:
            with pytest.raises(UniqueViolation):
                await uow.evaluations.create(
                    Evaluation(user_id=test_user_id, game_id=game_ids[0], rating=2)
                )
            await uow.rollback()


class TestGameDeletionCascade:
    @pytest.mark.asyncio
    async def test_delete_removes_evaluations_and_list_rows(
        self,
        uow_factory: Callable[[], Any],
        test_user_id: UUID,
        admin_user_id: UUID,
        game_ids: list[int],
    ):
        game_id = game_ids[0]
        await EvaluationService(uow_factory).submit(test_user_id, game_id, 4)
        await ListMembershipService(uow_factory).toggle(test_user_id, game_id, ListKind.COLLECTION)
        async with uow_factory() as uow:
            admin = await uow.profiles.get(admin_user_id)

        await GameService(uow_factory).delete(actor=admin, game_id=game_id)

        async with uow_factory() as uow:
            assert await uow.games.get(game_id) is None
            assert await uow.evaluations.get_for_user_and_game(test_user_id, game_id) is None
            assert await uow.list_memberships.get_kinds(test_user_id, game_id) == set()
            assert await uow.games.get(game_ids[1]) is not None
