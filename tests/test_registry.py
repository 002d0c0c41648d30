"""
Write-side registry tests: validation, id assignment and the change counter
contract (exactly one increment per mutation).
"""

import logging

import pytest

from coasters.errors import CoasterNotFoundError, FormatError, RangeError, WagonNotFoundError
from coasters.services.registry import CoasterRegistry, validate_coaster, validate_wagon


@pytest.fixture
def registry(store):
    return CoasterRegistry(store)


class TestValidation:
    """Test boundary validation of raw input."""

    def test_valid_coaster(self):
        coaster = validate_coaster(3, 1000, 1000, "9", "17:00")
        assert coaster.opens_at == 540
        assert coaster.closes_at == 1020

    def test_malformed_clock(self):
        with pytest.raises(FormatError):
            validate_coaster(3, 1000, 1000, "9am", "17")

    @pytest.mark.parametrize("opens_at,closes_at", [("17", "9"), ("9", "9:00")])
    def test_empty_window(self, opens_at, closes_at):
        with pytest.raises(RangeError):
            validate_coaster(3, 1000, 1000, opens_at, closes_at)

    @pytest.mark.parametrize("staff,clients,length", [(3, 1000, 0), (-1, 1000, 10), (3, -5, 10)])
    def test_out_of_range_numbers(self, staff, clients, length):
        with pytest.raises(RangeError):
            validate_coaster(staff, clients, length, "9", "17")

    @pytest.mark.parametrize(
        "capacity,speed",
        [(0, 1.0), (10, 0.0), (10, -1.0), (10, float("inf")), (10, float("nan"))],
    )
    def test_invalid_wagon(self, coaster, capacity, speed):
        with pytest.raises(RangeError):
            validate_wagon(coaster, capacity, speed)

    def test_wagon_that_cannot_finish_the_route(self, coaster):
        # 1000 m at 0.01 m/s takes far longer than 8 hours
        with pytest.raises(RangeError):
            validate_wagon(coaster, 20, 0.01)


class TestCoasters:
    """Test coaster mutations."""

    @pytest.mark.asyncio
    async def test_add_coaster_assigns_ids_and_bumps_counter(self, registry, store):
        first = await registry.add_coaster(3, 1000, 1000, "9", "17")
        second = await registry.add_coaster(5, 2000, 800, "10:30", "18")

        assert (first, second) == (1, 2)
        assert await store.get() == 2
        coasters = await registry.get_coasters()
        assert list(coasters) == [1, 2]
        assert coasters[2].opens_at == 630
        assert await registry.get_wagons(1) == {}

    @pytest.mark.asyncio
    async def test_invalid_coaster_is_not_stored(self, registry, store):
        with pytest.raises(RangeError):
            await registry.add_coaster(3, 1000, 1000, "17", "9")
        assert await store.get() == 0
        assert await registry.get_coasters() == {}

    @pytest.mark.asyncio
    async def test_update_keeps_route_length_and_unset_fields(self, registry, store):
        coaster_id = await registry.add_coaster(3, 1000, 1000, "9", "17")
        updated = await registry.update_coaster(coaster_id, client_target=3000, closes_at="18:15")

        assert updated.route_length == 1000
        assert updated.staff_available == 3
        assert updated.client_target == 3000
        assert updated.opens_at == 540
        assert updated.closes_at == 1095
        assert await registry.get_coaster(coaster_id) == updated
        assert await store.get() == 2

    @pytest.mark.asyncio
    async def test_update_requires_a_field(self, registry):
        coaster_id = await registry.add_coaster(3, 1000, 1000, "9", "17")
        with pytest.raises(RangeError):
            await registry.update_coaster(coaster_id)

    @pytest.mark.asyncio
    async def test_update_rejects_inverted_window(self, registry):
        coaster_id = await registry.add_coaster(3, 1000, 1000, "9", "17")
        with pytest.raises(RangeError):
            await registry.update_coaster(coaster_id, opens_at="18")

    @pytest.mark.asyncio
    async def test_update_unknown_coaster(self, registry):
        with pytest.raises(CoasterNotFoundError):
            await registry.update_coaster(99, staff_available=1)

    @pytest.mark.asyncio
    async def test_deleted_coaster_id_not_reused(self, registry, store):
        first = await registry.add_coaster(3, 1000, 1000, "9", "17")
        await registry.add_wagon(first, 20, 10.0)
        await registry.delete_coaster(first)

        assert await registry.get_coasters() == {}
        assert await store.get_fleet(first) == {}
        assert await registry.add_coaster(3, 1000, 1000, "9", "17") == first + 1


class TestWagons:
    """Test fleet mutations."""

    @pytest.mark.asyncio
    async def test_add_and_delete_wagon(self, registry, store):
        coaster_id = await registry.add_coaster(3, 1000, 1000, "9", "17")
        wagon_id = await registry.add_wagon(coaster_id, 20, 10.0)

        assert wagon_id == 1
        assert list(await registry.get_wagons(coaster_id)) == [1]

        await registry.delete_wagon(coaster_id, wagon_id)
        assert await registry.get_wagons(coaster_id) == {}
        assert await store.get() == 3

    @pytest.mark.asyncio
    async def test_infinite_speed_not_stored(self, registry, store):
        coaster_id = await registry.add_coaster(3, 1000, 1000, "9", "17")

        with pytest.raises(RangeError):
            await registry.add_wagon(coaster_id, 20, float("inf"))

        assert await store.get_fleet(coaster_id) == {}
        assert await store.get() == 1
        snapshot = await store.snapshot()
        assert snapshot[0][2] == {}

    @pytest.mark.asyncio
    async def test_wagon_ids_never_reused(self, registry):
        coaster_id = await registry.add_coaster(3, 1000, 1000, "9", "17")
        await registry.add_wagon(coaster_id, 20, 10.0)
        second = await registry.add_wagon(coaster_id, 20, 10.0)
        await registry.delete_wagon(coaster_id, second)

        assert await registry.add_wagon(coaster_id, 20, 10.0) == 3

    @pytest.mark.asyncio
    async def test_wagon_ids_are_per_coaster(self, registry):
        first = await registry.add_coaster(3, 1000, 1000, "9", "17")
        second = await registry.add_coaster(3, 1000, 1000, "9", "17")
        await registry.add_wagon(first, 20, 10.0)
        assert await registry.add_wagon(second, 20, 10.0) == 1

    @pytest.mark.asyncio
    async def test_wagon_for_unknown_coaster(self, registry, store):
        with pytest.raises(CoasterNotFoundError):
            await registry.add_wagon(7, 20, 10.0)
        assert await store.get() == 0

    @pytest.mark.asyncio
    async def test_delete_unknown_wagon(self, registry, store):
        coaster_id = await registry.add_coaster(3, 1000, 1000, "9", "17")
        with pytest.raises(WagonNotFoundError):
            await registry.delete_wagon(coaster_id, 5)
        assert await store.get() == 1


class TestProblemLogging:
    """Mutations leaving a coaster in a problem state are logged as errors."""

    @pytest.mark.asyncio
    async def test_problem_logged(self, registry, caplog):
        with caplog.at_level(logging.ERROR, logger="coasters.services.registry"):
            coaster_id = await registry.add_coaster(3, 1000, 1000, "9", "17")
        assert f"Coaster {coaster_id} - Problem: No wagons" in caplog.text

    @pytest.mark.asyncio
    async def test_balanced_coaster_not_logged(self, registry, caplog):
        coaster_id = await registry.add_coaster(3, 1000, 1000, "9", "17")
        caplog.clear()
        with caplog.at_level(logging.ERROR, logger="coasters.services.registry"):
            await registry.add_wagon(coaster_id, 20, 10.0)
        assert caplog.records == []
