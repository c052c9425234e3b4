from unittest import TestCase

from clinicflow.core.application.commands.allocation_commands import (
    CreateAllocationCommand,
    DeleteAllocationCommand,
)
from clinicflow.core.application.commands.room_commands import (
    CreateRoomCommand,
    DeleteRoomCommand,
    UpdateRoomCommand,
)
from clinicflow.core.application.dtos.allocation_dto import AllocationDTO
from clinicflow.core.application.dtos.room_dto import RoomDTO
from clinicflow.core.domain.exceptions import PartialCascadeError, ScheduleConflictError, UniqueViolationError
from tests.helpers.container import build_container
from tests.helpers.fake_store import FakeRemoteStore
from tests.helpers.rows import allocation_row, user_row

MONDAY, TUESDAY = "Segunda-feira", "Terça-feira"
MORNING, NIGHT = "Manhã (08h-12h)", "Noite (18h-22h)"


class AllocationTests(TestCase):
    def setUp(self) -> None:
        self.store = FakeRemoteStore()
        self.store.seed("users", user_row("u1"), user_row("u2"))
        self.container = build_container(self.store)
        self.cache = self.container.state_cache()
        self.cache.load_all()
        self.bus = self.container.command_bus()
        self.room = self.bus.dispatch(CreateRoomCommand(payload=RoomDTO(name="Sala Azul")))

    def _allocate(self, user_id: str, day: str = MONDAY, shift: str = MORNING):
        return self.bus.dispatch(
            CreateAllocationCommand(
                payload=AllocationDTO(user_id=user_id, room_id=self.room.id, day=day, shift=shift)
            )
        )

    def test_room_and_allocation_round_trip(self) -> None:
        alloc = self._allocate("u1")
        snap = self.cache.snapshot
        self.assertEqual([r.name for r in snap.rooms], ["Sala Azul"])
        self.assertEqual([a.id for a in snap.allocations], [alloc.id])
        self.assertEqual(snap.allocations[0].slot, (self.room.id, MONDAY, MORNING))

        self.bus.dispatch(DeleteAllocationCommand(id=alloc.id))
        self.assertEqual(self.cache.snapshot.allocations, ())

    def test_same_slot_is_rejected_before_writing(self) -> None:
        self._allocate("u1")
        writes = list(self.store.writes)
        with self.assertRaises(ScheduleConflictError) as ctx:
            self._allocate("u2")
        self.assertEqual(ctx.exception.day, MONDAY)
        self.assertEqual(self.store.writes, writes)
        self.assertEqual(len(self.cache.snapshot.allocations), 1)

    def test_other_day_or_shift_is_free(self) -> None:
        self._allocate("u1")
        self._allocate("u2", day=TUESDAY)
        self._allocate("u2", shift=NIGHT)
        self.assertEqual(len(self.cache.snapshot.allocations), 3)

    def test_server_unique_index_catches_stale_snapshot(self) -> None:
        # outro cliente reservou o slot depois da última recarga
        self.store.seed("allocations", allocation_row("other", "u2", self.room.id, MONDAY, MORNING))
        with self.assertRaises(UniqueViolationError):
            self._allocate("u1")
        self.assertEqual([a.id for a in self.cache.snapshot.allocations], ["other"])

    def test_update_room_keeps_allocations(self) -> None:
        self._allocate("u1")
        self.bus.dispatch(UpdateRoomCommand(id=self.room.id, payload=RoomDTO(name="Sala Verde", description="2º andar")))
        snap = self.cache.snapshot
        self.assertEqual(snap.rooms[0].name, "Sala Verde")
        self.assertEqual(snap.rooms[0].description, "2º andar")
        self.assertEqual(len(snap.allocations), 1)

    def test_update_room_keeps_description_not_sent(self) -> None:
        self.bus.dispatch(UpdateRoomCommand(id=self.room.id, payload=RoomDTO(name="Sala Azul", description="Térreo")))
        self.bus.dispatch(UpdateRoomCommand(id=self.room.id, payload=RoomDTO(name="Sala Verde")))
        self.assertEqual(self.store.rows("rooms")[0]["description"], "Térreo")
        self.assertEqual(self.cache.snapshot.rooms[0].name, "Sala Verde")

    def test_delete_room_cascades_to_allocations(self) -> None:
        self._allocate("u1")
        self._allocate("u2", day=TUESDAY)
        self.bus.dispatch(DeleteRoomCommand(id=self.room.id))
        self.assertEqual(self.store.rows("rooms"), [])
        self.assertEqual(self.store.rows("allocations"), [])
        self.assertEqual(self.cache.snapshot.allocations, ())

    def test_delete_room_failure_after_children_is_partial(self) -> None:
        self._allocate("u1")
        self.store.fail_on("rooms", "delete")
        with self.assertRaises(PartialCascadeError) as ctx:
            self.bus.dispatch(DeleteRoomCommand(id=self.room.id))
        self.assertEqual(ctx.exception.completed_steps, ["delete_allocations"])
        self.assertEqual(ctx.exception.failed_step, "delete_room")
        # sem rollback: a sala ficou sem alocações
        self.assertEqual(len(self.cache.snapshot.rooms), 1)
        self.assertEqual(self.cache.snapshot.allocations, ())
