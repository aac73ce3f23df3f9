import asyncio
from unittest.mock import AsyncMock

from services.facility_service.favorites import FavoritesService
from shared.domain.exceptions import PersistenceError
from shared.domain.result import Err, Ok


async def test_toggle_twice_returns_to_not_favorited(repositories, equipment, general):
    service = FavoritesService(repositories.users)

    assert await service.toggle(general.id, equipment.id) == Ok(True)
    assert (await repositories.users.get_favorites(general.id)).unwrap() == {equipment.id}
    assert await service.toggle(general.id, equipment.id) == Ok(False)
    assert (await repositories.users.get_favorites(general.id)).unwrap() == set()


async def test_toggle_calls_exactly_one_mutation():
    users = AsyncMock()
    users.get_favorites.return_value = Ok({"e-1"})
    users.remove_favorite.return_value = Ok(None)

    result = await FavoritesService(users).toggle("u-1", "e-1")

    assert result == Ok(False)
    users.remove_favorite.assert_awaited_once_with("u-1", "e-1")
    users.add_favorite.assert_not_awaited()


async def test_toggle_propagates_read_failure():
    users = AsyncMock()
    users.get_favorites.return_value = Err(PersistenceError("timeout"))

    result = await FavoritesService(users).toggle("u-1", "e-1")

    assert result == Err(PersistenceError("timeout"))
    users.add_favorite.assert_not_awaited()
    users.remove_favorite.assert_not_awaited()


async def test_concurrent_double_add_leaves_one_entry(repositories, equipment, general):
    results = await asyncio.gather(
        repositories.users.add_favorite(general.id, equipment.id),
        repositories.users.add_favorite(general.id, equipment.id),
    )

    assert all(result.is_ok() for result in results)
    assert (await repositories.users.get_favorites(general.id)).unwrap() == {equipment.id}


async def test_removing_an_absent_favorite_is_a_no_op(repositories, equipment, general):
    assert (await repositories.users.remove_favorite(general.id, equipment.id)).is_ok()
    assert (await repositories.users.get_favorites(general.id)).unwrap() == set()


async def test_toggle_action(actions, equipment, general, sign_in, views):
    sign_in(general)

    first = await actions.favorites.toggle(equipment.id)
    second = await actions.favorites.toggle(equipment.id)

    assert first.to_dict() == {"success": True, "data": {"is_favorite": True}}
    assert second.to_dict() == {"success": True, "data": {"is_favorite": False}}
    assert views.paths[:3] == ["/dashboard", "/equipments", f"/equipments/{equipment.id}"]
    assert (await actions.favorites.favorite_ids()).unwrap() == set()


async def test_toggle_unknown_equipment(actions, general, sign_in):
    sign_in(general)
    assert (await actions.favorites.toggle("missing")).error == "Equipment not found"


async def test_favorites_require_a_session(actions, equipment):
    assert (await actions.favorites.toggle(equipment.id)).error == "Unauthorized"
    assert (await actions.favorites.favorite_ids()).unwrap_err().message == "Unauthorized"
