"""User game list API routes."""

from fastapi import APIRouter, Depends, Response, status

from api.dependencies.auth import OptionalProfile
from api.v1.dependencies import get_list_membership_service
from api.v1.schemas.game import GameResponse
from api.v1.schemas.list_membership import (
    ListEntriesResponse,
    ListEntryResponse,
    ListStatusDetailResponse,
    ListStatusResponse,
    ToggleDetailResponse,
    ToggleResponse,
)
from domain.entities.list_membership import GameListStatus, ListKind
from domain.services.list_membership_service import ListMembershipService

game_lists_router = APIRouter(prefix="/games/{game_id}/lists", tags=["lists"])
router = APIRouter(prefix="/lists", tags=["lists"])


def _status_response(game_id: int, list_status: GameListStatus) -> ListStatusResponse:
    return ListStatusResponse(
        game_id=game_id,
        collection=list_status.collection,
        wishlist=list_status.wishlist,
        played=list_status.played,
    )


@game_lists_router.get(
    "",
    response_model=ListStatusDetailResponse,
    summary="Lists containing a game",
)
async def get_list_status(
    game_id: int,
    profile: OptionalProfile,
    service: ListMembershipService = Depends(get_list_membership_service),
) -> ListStatusDetailResponse:
    list_status = await service.get_status(profile.id if profile else None, game_id)
    return ListStatusDetailResponse(data=_status_response(game_id, list_status))


@game_lists_router.post(
    "/{kind}/toggle",
    response_model=ToggleDetailResponse,
    summary="Toggle a game in a list",
    responses={
        401: {"description": "Not logged in"},
        409: {"description": "Concurrent change, re-fetch the status"},
    },
)
async def toggle_list(
    game_id: int,
    kind: ListKind,
    profile: OptionalProfile,
    service: ListMembershipService = Depends(get_list_membership_service),
) -> ToggleDetailResponse:
    """
    Add or remove a game from a list.

    Adding to the collection removes the game from the wishlist. Adding to
    the wishlist a game that is in the collection is refused and reports
    ``absent``. The returned status is read in the same transaction.
    """
    state, list_status = await service.toggle_with_status(
        profile.id if profile else None, game_id, kind
    )
    return ToggleDetailResponse(
        data=ToggleResponse(
            game_id=game_id,
            kind=kind,
            state=state,
            status=_status_response(game_id, list_status),
        )
    )


@router.get(
    "/{kind}",
    response_model=ListEntriesResponse,
    summary="Get one of the user's lists",
)
async def get_list(
    kind: ListKind,
    profile: OptionalProfile,
    service: ListMembershipService = Depends(get_list_membership_service),
) -> ListEntriesResponse:
    entries = await service.get_list(profile.id if profile else None, kind)
    return ListEntriesResponse(
        data=[
            ListEntryResponse(
                kind=membership.kind,
                added_at=membership.added_at,
                game=GameResponse.model_validate(game),
            )
            for membership, game in entries
        ]
    )


@router.delete(
    "/{kind}/{game_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a game from a list",
)
async def remove_from_list(
    kind: ListKind,
    game_id: int,
    profile: OptionalProfile,
    service: ListMembershipService = Depends(get_list_membership_service),
) -> Response:
    await service.remove(profile.id if profile else None, game_id, kind)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
