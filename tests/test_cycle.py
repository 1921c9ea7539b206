"""Tests for BackupCycle and the single-flight guard.

Covers the end-to-end scenarios: direct relay, staged relay, and a
staging outage, all with a fake archiver and a recording backend.
"""

import asyncio
import random
import threading
from datetime import datetime, timedelta, timezone

import pytest

from autobackup.core.errors import TransportError
from autobackup.services.backup.cycle import (
    BackupCycle,
    CycleOutcome,
    SingleFlightGuard,
    artifact_path_for,
)
from autobackup.services.backup.router import TransferRouter
from autobackup.services.backup.selector import EndpointSelector
from autobackup.services.backup.staging import StagingUploader
from helpers import MB, FakeArchiver, RecordingBackend, staging_down, staging_ok


FIXED_NOW = datetime(2026, 10, 16, 9, 30, 0)


def make_cycle(config, archiver, backend, guard=None):
    router = TransferRouter(
        webhooks=config.webhooks,
        backend=backend,
        staging=StagingUploader(backend),
        selector=EndpointSelector(random.Random(3)),
    )
    return BackupCycle(config, archiver, router, guard=guard, clock=lambda: FIXED_NOW)


class TestSingleFlightGuard:
    """Tests for SingleFlightGuard."""

    def test_second_acquire_fails_until_release(self):
        guard = SingleFlightGuard()

        assert guard.try_acquire()
        assert guard.active
        assert not guard.try_acquire()

        guard.release()
        assert not guard.active
        assert guard.try_acquire()

    def test_visible_across_threads(self):
        guard = SingleFlightGuard()
        guard.try_acquire()
        results = []

        worker = threading.Thread(target=lambda: results.append(guard.try_acquire()))
        worker.start()
        worker.join()

        assert results == [False]


class TestBackupCycle:
    """Tests for BackupCycle.run_once()."""

    async def test_scenario_a_small_artifact_direct_relay(self, backup_config):
        archiver = FakeArchiver(size=10 * MB)
        backend = RecordingBackend()

        outcome = await make_cycle(backup_config, archiver, backend).run_once()

        assert outcome is CycleOutcome.SUCCESS
        assert len(backend.file_calls) == 1
        assert backend.file_calls[0][0] in backup_config.webhooks
        assert backend.json_calls == []

    async def test_scenario_b_large_artifact_staged_relay(self, backup_config):
        archiver = FakeArchiver(size=25 * MB)
        backend = RecordingBackend(file_responses=staging_ok("https://stage.example/xyz"))

        outcome = await make_cycle(backup_config, archiver, backend).run_once()

        assert outcome is CycleOutcome.SUCCESS
        assert len(backend.staging_calls) == 1
        [(url, payload)] = backend.json_calls
        assert url in backup_config.webhooks
        assert "https://stage.example/xyz" in payload["content"]

    async def test_scenario_c_staging_outage(self, backup_config):
        archiver = FakeArchiver(size=25 * MB)
        backend = RecordingBackend(file_responses=staging_down())

        outcome = await make_cycle(backup_config, archiver, backend).run_once()

        assert outcome is CycleOutcome.TRANSFER_FAILED
        assert backend.json_calls == []
        assert backend.webhook_file_calls == []

    async def test_already_in_progress_has_no_side_effects(self, backup_config):
        guard = SingleFlightGuard()
        guard.try_acquire()
        archiver = FakeArchiver()
        backend = RecordingBackend()

        outcome = await make_cycle(backup_config, archiver, backend, guard=guard).run_once()

        assert outcome is CycleOutcome.ALREADY_IN_PROGRESS
        assert archiver.calls == []
        assert backend.file_calls == []
        assert backend.json_calls == []
        assert guard.active

    async def test_overlapping_runs_are_rejected(self, backup_config):
        release = asyncio.Event()

        class SlowArchiver(FakeArchiver):
            async def archive(self, source, destination):
                await release.wait()
                return await super().archive(source, destination)

        archiver = SlowArchiver()
        backend = RecordingBackend()
        cycle = make_cycle(backup_config, archiver, backend)

        first = asyncio.create_task(cycle.run_once())
        await asyncio.sleep(0)
        second = await cycle.run_once()
        release.set()

        assert second is CycleOutcome.ALREADY_IN_PROGRESS
        assert await first is CycleOutcome.SUCCESS
        assert len(archiver.calls) == 1

    async def test_archive_failure(self, backup_config):
        archiver = FakeArchiver(error="7z exited with code 2")
        backend = RecordingBackend()
        cycle = make_cycle(backup_config, archiver, backend)

        outcome = await cycle.run_once()

        assert outcome is CycleOutcome.ARCHIVE_FAILED
        assert backend.file_calls == []
        assert not cycle.guard.active

    async def test_guard_released_after_transfer_failure(self, backup_config):
        archiver = FakeArchiver(size=MB)
        backend = RecordingBackend(file_responses={
            url: TransportError("HTTP 500") for url in backup_config.webhooks
        })
        cycle = make_cycle(backup_config, archiver, backend)

        assert await cycle.run_once() is CycleOutcome.TRANSFER_FAILED
        assert not cycle.guard.active

    async def test_guard_released_when_router_raises(self, backup_config):
        class BrokenRouter:
            async def route(self, path, size):
                raise RuntimeError("boom")

        cycle = BackupCycle(backup_config, FakeArchiver(size=MB), BrokenRouter(), clock=lambda: FIXED_NOW)

        with pytest.raises(RuntimeError):
            await cycle.run_once()
        assert not cycle.guard.active

    async def test_artifact_is_left_on_disk(self, backup_config):
        archiver = FakeArchiver(size=MB)
        backend = RecordingBackend(file_responses={
            url: TransportError("HTTP 500") for url in backup_config.webhooks
        })

        await make_cycle(backup_config, archiver, backend).run_once()

        expected = artifact_path_for(backup_config.backup_folder, FIXED_NOW)
        assert archiver.calls == [(backup_config.folder_to_backup, expected)]
        assert expected.exists()
        assert list(backup_config.backup_folder.iterdir()) == [expected]


def test_artifact_path_uses_timestamp(tmp_path):
    path = artifact_path_for(tmp_path, FIXED_NOW)

    assert path == tmp_path / "backup_2026-10-16_09-30-00.7z"


def test_artifact_path_stamps_aware_times_in_utc(tmp_path):
    eastern = timezone(timedelta(hours=-4))

    path = artifact_path_for(tmp_path, datetime(2026, 10, 16, 9, 30, 0, tzinfo=eastern))

    assert path == tmp_path / "backup_2026-10-16_13-30-00.7z"


def test_repeated_dst_hour_gives_distinct_names(tmp_path):
    # 01:30 on the fall-back night happens once in EDT and once in EST
    first = datetime(2026, 11, 1, 1, 30, 0, tzinfo=timezone(timedelta(hours=-4)))
    second = datetime(2026, 11, 1, 1, 30, 0, tzinfo=timezone(timedelta(hours=-5)))

    assert artifact_path_for(tmp_path, first) != artifact_path_for(tmp_path, second)
