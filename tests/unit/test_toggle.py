"""Unit tests for completion toggling: pure plans and the async controller."""
import asyncio

import pytest

from learning.entities import Completion
from learning.errors import AuthRequired, NoOpCondition, RemoteWriteFailure
from learning.session import AuthSession, DashboardSession
from learning.toggle import ModuleToggleController, OpKind, apply_op, plan_mark_all, plan_toggle


@pytest.mark.unit
class TestPlanToggle:
    def test_insert_when_absent(self, done):
        plan = plan_toggle("u1", "ui-1", done())
        assert plan.op.kind is OpKind.INSERT
        assert plan.op.rows == (Completion("u1", "ui-1"),)
        assert plan.completions == done("ui-1")

    def test_delete_when_present(self, done):
        plan = plan_toggle("u1", "ui-1", done("ui-1", "ui-2"))
        assert plan.op.kind is OpKind.DELETE
        assert plan.completions == done("ui-2")

    def test_other_users_record_does_not_count(self):
        current = frozenset({Completion("someone-else", "ui-1")})
        plan = plan_toggle("u1", "ui-1", current)
        assert plan.op.kind is OpKind.INSERT

    @pytest.mark.parametrize("start", [(), ("ui-1",), ("ui-1", "ui-2"), ("ui-2",)])
    def test_double_toggle_restores_original(self, done, start):
        original = done(*start)
        once = plan_toggle("u1", "ui-1", original)
        twice = plan_toggle("u1", "ui-1", once.completions)
        assert twice.completions == original

    def test_input_not_mutated(self, done):
        current = set(done("ui-1"))
        plan_toggle("u1", "ui-1", current)
        assert current == set(done("ui-1"))


@pytest.mark.unit
class TestPlanMarkAll:
    def test_inserts_only_missing(self, modules, done):
        ui = [m for m in modules if m.course_id == "ui"]
        plan = plan_mark_all("u1", ui, done("ui-1"))
        assert plan.op.kind is OpKind.INSERT
        assert [r.module_id for r in plan.op.rows] == ["ui-2", "ui-3"]
        assert plan.completions == done("ui-1", "ui-2", "ui-3")

    def test_already_complete_is_noop(self, modules, done):
        ui = [m for m in modules if m.course_id == "ui"]
        plan = plan_mark_all("u1", ui, done("ui-1", "ui-2", "ui-3"))
        assert plan.is_noop
        assert plan.completions == done("ui-1", "ui-2", "ui-3")

    def test_apply_none_is_identity(self, done):
        assert apply_op(done("a"), None) == done("a")


def _session() -> DashboardSession:
    return DashboardSession(AuthSession(user_id="u1", email="ada@example.com"))


async def _loaded(gateway) -> tuple[DashboardSession, ModuleToggleController]:
    session = _session()
    await session.load(gateway)
    return session, ModuleToggleController(gateway, session, timeout=1.0)


@pytest.mark.unit
class TestModuleToggleController:
    @pytest.mark.asyncio
    async def test_toggle_inserts_then_deletes(self, gateway, done):
        session, controller = await _loaded(gateway)

        result = await controller.toggle("ui-1")
        assert result.completed is True
        assert session.completions == done("ui-1")
        assert Completion("u1", "ui-1") in gateway.completions

        result = await controller.toggle("ui-1")
        assert result.completed is False
        assert session.completions == done()
        assert gateway.calls == [("insert", ("ui-1",)), ("delete", ("ui-1",))]

    @pytest.mark.asyncio
    async def test_failed_write_leaves_snapshot_unchanged(self, gateway, done):
        gateway.completions = set(done("ui-2"))
        session, controller = await _loaded(gateway)
        before = session.completions
        gateway.fail_writes = True

        with pytest.raises(RemoteWriteFailure):
            await controller.toggle("ui-1")
        with pytest.raises(RemoteWriteFailure):
            await controller.toggle("ui-2")

        assert session.completions == before

    @pytest.mark.asyncio
    async def test_timeout_is_a_write_failure(self, gateway, done):
        session, controller = await _loaded(gateway)
        controller.timeout = 0.05
        gateway.write_gate = asyncio.Event()  # never set

        with pytest.raises(RemoteWriteFailure):
            await controller.toggle("ui-1")
        assert session.completions == done()

    @pytest.mark.asyncio
    async def test_snapshot_unchanged_until_write_confirmed(self, gateway, done):
        session, controller = await _loaded(gateway)
        gateway.write_gate = asyncio.Event()

        task = asyncio.create_task(controller.toggle("ui-1"))
        await asyncio.sleep(0.01)
        assert session.completions == done()

        gateway.write_gate.set()
        await task
        assert session.completions == done("ui-1")

    @pytest.mark.asyncio
    async def test_same_module_toggles_are_serialised(self, gateway, done):
        session, controller = await _loaded(gateway)
        gateway.write_gate = asyncio.Event()

        first = asyncio.create_task(controller.toggle("ui-1"))
        second = asyncio.create_task(controller.toggle("ui-1"))
        await asyncio.sleep(0.01)
        # Second toggle has not planned anything while the first is in flight.
        assert gateway.calls == [("insert", ("ui-1",))]

        gateway.write_gate.set()
        results = await asyncio.gather(first, second)
        assert [r.completed for r in results] == [True, False]
        assert gateway.calls == [("insert", ("ui-1",)), ("delete", ("ui-1",))]
        assert session.completions == done()

    @pytest.mark.asyncio
    async def test_different_modules_run_concurrently(self, gateway, done):
        session, controller = await _loaded(gateway)
        gateway.write_gate = asyncio.Event()

        tasks = [asyncio.create_task(controller.toggle(m)) for m in ("ui-1", "ui-2", "be-1")]
        await asyncio.sleep(0.01)
        assert len(gateway.calls) == 3

        gateway.write_gate.set()
        await asyncio.gather(*tasks)
        assert session.completions == done("ui-1", "ui-2", "be-1")

    @pytest.mark.asyncio
    async def test_sign_out_discards_in_flight_write(self, gateway, done):
        session, controller = await _loaded(gateway)
        gateway.write_gate = asyncio.Event()

        task = asyncio.create_task(controller.toggle("ui-1"))
        await asyncio.sleep(0.01)
        session.close()
        gateway.write_gate.set()

        with pytest.raises(AuthRequired):
            await task
        assert session.completions == done()

    @pytest.mark.asyncio
    async def test_closed_session_rejects_toggle(self, gateway):
        session, controller = await _loaded(gateway)
        session.close()
        with pytest.raises(AuthRequired):
            await controller.toggle("ui-1")
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_mark_all_complete_inserts_missing_once(self, gateway, done):
        gateway.completions = set(done("ui-1"))
        session, controller = await _loaded(gateway)

        result = await controller.mark_all_complete("ui")
        assert sorted(result.module_ids) == ["ui-2", "ui-3"]
        assert gateway.calls == [("insert", ("ui-2", "ui-3"))]
        assert session.completions == done("ui-1", "ui-2", "ui-3")

        with pytest.raises(NoOpCondition):
            await controller.mark_all_complete("ui")
        assert len(gateway.calls) == 1

    @pytest.mark.asyncio
    async def test_mark_all_failure_keeps_snapshot(self, gateway, done):
        gateway.completions = set(done("ui-1"))
        session, controller = await _loaded(gateway)
        gateway.fail_writes = True

        with pytest.raises(RemoteWriteFailure):
            await controller.mark_all_complete("ui")
        assert session.completions == done("ui-1")
