"""Tests for the workspace, user service and container."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from result import Err, Ok

from fatigat.config import Config
from fatigat.data.seed import seed_sample_users
from fatigat.data.store import ProjectStore
from fatigat.models.projects import Project
from fatigat.services.container import ServiceContainer
from fatigat.services.user_service import UserService
from fatigat.services.workspace import TrackerWorkspace

from .conftest import START_MS, FakeClock


class TestTrackerWorkspace:
    @pytest.mark.asyncio
    async def test_open_persists_changes(self, store: ProjectStore, clock: FakeClock) -> None:
        workspace = TrackerWorkspace(store, clock)
        async with workspace.open("Alice") as timer:
            project = timer.create_project("Thesis", ["Research"]).unwrap()
            timer.start(project.id)
            clock.advance(1200)
            timer.stop()
        stored = await store.load("alice")
        assert len(stored) == 1
        assert stored[0].session_lengths == [1200.0]

    @pytest.mark.asyncio
    async def test_timer_state_survives_between_opens(
        self, store: ProjectStore, clock: FakeClock
    ) -> None:
        workspace = TrackerWorkspace(store, clock)
        async with workspace.open("alice") as timer:
            project_id = timer.create_project("Thesis").unwrap().id
            timer.start(project_id)
        async with workspace.open("ALICE") as timer:
            assert timer.is_tracking
            clock.advance(60)
            assert isinstance(timer.stop(), Ok)

    @pytest.mark.asyncio
    async def test_users_are_isolated(self, store: ProjectStore, clock: FakeClock) -> None:
        workspace = TrackerWorkspace(store, clock)
        async with workspace.open("alice") as alice:
            alice_project = alice.create_project("A").unwrap()
            alice.start(alice_project.id)
        clock.advance(1)
        async with workspace.open("bob") as bob:
            bob_project = bob.create_project("B").unwrap()
            assert isinstance(bob.start(bob_project.id), Ok)
            assert [p.name for p in bob.projects] == ["B"]
            assert all(p is not alice_project for p in bob.projects)
        async with workspace.open("alice") as alice:
            assert [p.name for p in alice.projects] == ["A"]
            assert alice.active is not None
            assert alice.active.project_id == alice_project.id

    @pytest.mark.asyncio
    async def test_mutations_for_one_user_are_serialized(
        self, store: ProjectStore, clock: FakeClock
    ) -> None:
        workspace = TrackerWorkspace(store, clock)
        order: list[str] = []

        async def worker(name: str) -> None:
            async with workspace.open("alice"):
                order.append(f"{name}-in")
                await asyncio.sleep(0.01)
                order.append(f"{name}-out")

        await asyncio.gather(worker("a"), worker("b"))
        assert order in (["a-in", "a-out", "b-in", "b-out"], ["b-in", "b-out", "a-in", "a-out"])

    @pytest.mark.asyncio
    async def test_blank_username_rejected(self, store: ProjectStore) -> None:
        workspace = TrackerWorkspace(store)
        with pytest.raises(ValueError, match="Username is required"):
            async with workspace.open("  "):
                pass

    @pytest.mark.asyncio
    async def test_break_interval_is_configurable(
        self, store: ProjectStore, clock: FakeClock
    ) -> None:
        due: list[str] = []
        workspace = TrackerWorkspace(
            store, clock, lambda project: due.append(project.name), break_interval=3
        )
        async with workspace.open("alice") as timer:
            project = timer.create_project("Short").unwrap()
            timer.start(project.id)
            for _ in range(3):
                timer.tick()
        assert due == ["Short"]


class TestUserService:
    @pytest.mark.asyncio
    async def test_get_user_data_errors(self, store: ProjectStore, clock: FakeClock) -> None:
        svc = UserService(store, clock=clock)
        blank = await svc.get_user_data(" ")
        assert isinstance(blank, Err)
        assert blank.err_value == "Username is required"
        missing = await svc.get_user_data("ghost")
        assert isinstance(missing, Err)
        assert "not found" in missing.err_value

    @pytest.mark.asyncio
    async def test_get_seeded_user(self, store: ProjectStore, clock: FakeClock) -> None:
        await seed_sample_users(store, START_MS)
        svc = UserService(store, clock=clock)
        result = await svc.get_user_data("Test-User")
        assert isinstance(result, Ok)
        assert result.ok_value.username == "test-user"
        assert [p.name for p in result.ok_value.projects] == ["Bug Fixes"]
        assert result.ok_value.last_updated > 0

    @pytest.mark.asyncio
    async def test_update_user_data_refreshes_workspace(
        self, store: ProjectStore, clock: FakeClock
    ) -> None:
        workspace = TrackerWorkspace(store, clock)
        svc = UserService(store, workspace, clock)
        async with workspace.open("carol") as timer:
            timer.create_project("Old")

        result = await svc.update_user_data("Carol", [Project(id=5, name="New")])
        assert isinstance(result, Ok)
        assert result.ok_value.last_updated == clock.now

        async with workspace.open("carol") as timer:
            assert [p.name for p in timer.projects] == ["New"]
        assert await store.last_updated("carol") == clock.now

    @pytest.mark.asyncio
    async def test_update_waits_for_an_open_workspace(
        self, store: ProjectStore, clock: FakeClock
    ) -> None:
        workspace = TrackerWorkspace(store, clock)
        svc = UserService(store, workspace, clock)
        async with workspace.open("alice") as timer:
            timer.create_project("Old")

        entered = asyncio.Event()
        release = asyncio.Event()

        async def hold_open() -> None:
            async with workspace.open("alice"):
                entered.set()
                await release.wait()

        holder = asyncio.create_task(hold_open())
        await entered.wait()
        update = asyncio.create_task(svc.update_user_data("alice", [Project(id=9, name="New")]))
        await asyncio.sleep(0.01)
        assert not update.done()
        release.set()
        await holder
        result = await update
        assert isinstance(result, Ok)
        assert [p.name for p in await store.load("alice")] == ["New"]
        async with workspace.open("alice") as timer:
            assert [p.name for p in timer.projects] == ["New"]

    @pytest.mark.asyncio
    async def test_update_stamps_the_stored_timestamp(
        self, store: ProjectStore, clock: FakeClock
    ) -> None:
        svc = UserService(store, clock=clock)
        clock.advance(30)
        result = await svc.update_user_data("erin", [])
        assert isinstance(result, Ok)
        assert result.ok_value.last_updated == await store.last_updated("erin") == clock.now

    @pytest.mark.asyncio
    async def test_timer_use_keeps_demo_flag(self, store: ProjectStore, clock: FakeClock) -> None:
        workspace = TrackerWorkspace(store, clock)
        await workspace.replace("octocat", [Project(id=1, name="Demo")], is_demo=True)
        async with workspace.open("octocat") as timer:
            timer.take_break(1)
        users = await store.list_users()
        assert [(u.username, u.is_demo) for u in users] == [("octocat", True)]

    @pytest.mark.asyncio
    async def test_update_requires_username(self, store: ProjectStore) -> None:
        svc = UserService(store)
        result = await svc.update_user_data("", [])
        assert isinstance(result, Err)

    @pytest.mark.asyncio
    async def test_list_users_and_health(self, store: ProjectStore, clock: FakeClock) -> None:
        await seed_sample_users(store, START_MS)
        svc = UserService(store, clock=clock)
        listed = await svc.list_users()
        assert isinstance(listed, Ok)
        assert {u.username for u in listed.ok_value} == {
            "demo-user",
            "sindhu-m-valerie",
            "test-user",
        }
        status = await svc.health()
        assert status.status == "OK"
        assert status.active_users == 3
        assert status.timestamp == clock.now
        assert status.uptime_seconds >= 0

    def test_demo_user_data(self, store: ProjectStore, clock: FakeClock) -> None:
        svc = UserService(store, clock=clock)
        result = svc.demo_user_data("OctoCat")
        assert isinstance(result, Ok)
        assert result.ok_value.is_demo
        assert result.ok_value.username == "octocat"
        assert len(result.ok_value.projects) >= 2
        assert isinstance(svc.demo_user_data(""), Err)


@pytest.mark.asyncio
async def test_service_container_wiring_and_close(monkeypatch, tmp_path: Path) -> None:
    created: dict[str, object] = {}

    class FakeDatabase:
        def __init__(self, path: Path) -> None:
            created["db_path"] = path

        async def connect(self) -> None:
            created["connected"] = True

        async def close(self) -> None:
            created["closed"] = True

    monkeypatch.setattr("fatigat.services.container.Database", FakeDatabase)

    config = Config(data_dir=tmp_path / "data")
    container = await ServiceContainer.create(config)
    assert created["connected"] is True
    assert created["db_path"] == config.db_path
    assert isinstance(container.store, ProjectStore)
    await container.close()
    assert created["closed"] is True


@pytest.mark.asyncio
async def test_service_container_round_trip(test_config: Config) -> None:
    container = await ServiceContainer.create(test_config)
    try:
        async with container.workspace.open("dana") as timer:
            timer.create_project("Report")
        result = await container.user_service.get_user_data("dana")
        assert isinstance(result, Ok)
        assert result.ok_value.projects[0].name == "Report"
    finally:
        await container.close()
    assert test_config.db_path.exists()
