"""Integration tests for user game lists API."""

import pytest
from httpx import AsyncClient


class TestListsAPI:
    """Toggle semantics over HTTP."""

    @pytest.mark.asyncio
    async def test_wishlist_then_collection(
        self, authenticated_client: AsyncClient, game_ids: list[int]
    ):
        game_id = game_ids[0]

        first = await authenticated_client.post(f"/api/v1/games/{game_id}/lists/wishlist/toggle")
        second = await authenticated_client.post(
            f"/api/v1/games/{game_id}/lists/collection/toggle"
        )

        assert first.status_code == 200
        assert first.json()["data"]["state"] == "present"
        status = second.json()["data"]["status"]
        assert status == {
            "game_id": game_id,
            "collection": True,
            "wishlist": False,
            "played": False,
        }

    @pytest.mark.asyncio
    async def test_owned_game_cannot_be_wishlisted(
        self, authenticated_client: AsyncClient, game_ids: list[int]
    ):
        game_id = game_ids[0]
        await authenticated_client.post(f"/api/v1/games/{game_id}/lists/collection/toggle")

        response = await authenticated_client.post(
            f"/api/v1/games/{game_id}/lists/wishlist/toggle"
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["state"] == "absent"
        assert data["status"]["collection"] is True
        assert data["status"]["wishlist"] is False

    @pytest.mark.asyncio
    async def test_toggle_twice_removes(
        self, authenticated_client: AsyncClient, game_ids: list[int]
    ):
        url = f"/api/v1/games/{game_ids[1]}/lists/played/toggle"

        await authenticated_client.post(url)
        response = await authenticated_client.post(url)

        assert response.json()["data"]["state"] == "absent"
        assert response.json()["data"]["status"]["played"] is False

    @pytest.mark.asyncio
    async def test_get_list(self, authenticated_client: AsyncClient, game_ids: list[int]):
        for game_id in game_ids[:2]:
            await authenticated_client.post(f"/api/v1/games/{game_id}/lists/collection/toggle")

        response = await authenticated_client.get("/api/v1/lists/collection")

        assert response.status_code == 200
        names = {entry["game"]["name"] for entry in response.json()["data"]}
        assert names == {"Azul", "Catan"}

    @pytest.mark.asyncio
    async def test_remove_from_list(
        self, authenticated_client: AsyncClient, game_ids: list[int]
    ):
        game_id = game_ids[2]
        await authenticated_client.post(f"/api/v1/games/{game_id}/lists/wishlist/toggle")

        response = await authenticated_client.delete(f"/api/v1/lists/wishlist/{game_id}")

        assert response.status_code == 204
        status = (await authenticated_client.get(f"/api/v1/games/{game_id}/lists")).json()
        assert status["data"]["wishlist"] is False

    @pytest.mark.asyncio
    async def test_anonymous_toggle_is_rejected(self, client: AsyncClient, game_ids: list[int]):
        response = await client.post(f"/api/v1/games/{game_ids[0]}/lists/collection/toggle")

        assert response.status_code == 401
        assert response.json()["error_code"] == "NOT_AUTHENTICATED"

    @pytest.mark.asyncio
    async def test_anonymous_status_is_empty(self, client: AsyncClient, game_ids: list[int]):
        response = await client.get(f"/api/v1/games/{game_ids[0]}/lists")

        assert response.status_code == 200
        data = response.json()["data"]
        assert (data["collection"], data["wishlist"], data["played"]) == (False, False, False)

    @pytest.mark.asyncio
    async def test_unknown_kind(self, authenticated_client: AsyncClient, game_ids: list[int]):
        response = await authenticated_client.post(
            f"/api/v1/games/{game_ids[0]}/lists/favorites/toggle"
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_game(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post("/api/v1/games/999/lists/played/toggle")

        assert response.status_code == 404
