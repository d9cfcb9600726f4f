import threading
from unittest.mock import MagicMock

import pytest

from app.features.contact_finder.errors import JobAlreadyExists, JobNotFound
from app.features.contact_finder.services.job_registry import JobRegistry


class TestJobRegistry:
    def test_register_creates_active_job(self, registry):
        job = registry.register("job-1")

        assert job.job_id == "job-1"
        assert job.active is True
        assert job.resource is None
        assert registry.is_active("job-1")
        assert "job-1" in registry

    def test_duplicate_register_fails(self, registry):
        registry.register("job-1")

        with pytest.raises(JobAlreadyExists):
            registry.register("job-1")

    def test_unknown_job_is_inactive(self, registry):
        assert registry.is_active("missing") is False

    def test_cancel_unknown_job_raises(self, registry):
        with pytest.raises(JobNotFound):
            registry.cancel("missing")

    def test_cancel_closes_attached_resource(self, registry):
        resource = MagicMock()
        registry.register("job-1")
        assert registry.attach_resource("job-1", resource) is True

        job = registry.cancel("job-1")

        assert job.active is False
        assert job.resource is None
        resource.close.assert_called_once()
        assert registry.is_active("job-1") is False

    def test_cancel_swallows_close_errors(self, registry):
        resource = MagicMock()
        resource.close.side_effect = RuntimeError("browser already gone")
        registry.register("job-1")
        registry.attach_resource("job-1", resource)

        registry.cancel("job-1")

        assert registry.is_active("job-1") is False

    def test_attach_after_cancel_closes_immediately(self, registry):
        resource = MagicMock()
        registry.register("job-1")
        registry.cancel("job-1")

        assert registry.attach_resource("job-1", resource) is False
        resource.close.assert_called_once()

    def test_attach_to_unknown_job_closes_immediately(self, registry):
        resource = MagicMock()

        assert registry.attach_resource("missing", resource) is False
        resource.close.assert_called_once()

    def test_detach_only_removes_matching_resource(self, registry):
        first, second = MagicMock(), MagicMock()
        registry.register("job-1")
        registry.attach_resource("job-1", second)

        registry.detach_resource("job-1", first)
        assert registry.get("job-1").resource is second

        registry.detach_resource("job-1", second)
        assert registry.get("job-1").resource is None

    def test_remove_forgets_job(self, registry):
        job = registry.register("job-1")

        registry.remove("job-1")

        assert job.active is False
        assert "job-1" not in registry
        with pytest.raises(JobNotFound):
            registry.cancel("job-1")

    def test_remove_unknown_job_is_noop(self, registry):
        registry.remove("missing")

        assert len(registry) == 0

    def test_jobs_are_independent(self, registry):
        registry.register("job-1")
        registry.register("job-2")

        registry.cancel("job-1")

        assert registry.is_active("job-1") is False
        assert registry.is_active("job-2") is True


def test_concurrent_register_allows_exactly_one_winner():
    registry = JobRegistry()
    outcomes = []
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        try:
            registry.register("shared")
            outcomes.append("ok")
        except JobAlreadyExists:
            outcomes.append("dup")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("dup") == 7


def test_concurrent_cancel_closes_resource_once():
    registry = JobRegistry()
    resource = MagicMock()
    registry.register("job-1")
    registry.attach_resource("job-1", resource)
    barrier = threading.Barrier(4)

    def worker():
        barrier.wait()
        registry.cancel("job-1")

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    resource.close.assert_called_once()
