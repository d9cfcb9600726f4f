"""
Job Registry

Tracks one record per in-flight batch: its `active` flag and the resource
(a live browser session) a cancel request must close. This is the only
state shared between concurrent jobs; cancel runs on the event loop while
checkpoints run on worker threads, hence the threading lock.
"""
import threading
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from app.features.contact_finder.errors import JobAlreadyExists, JobNotFound
from app.platform.logger import get_logger

logger = get_logger(__name__)


class Closable(Protocol):
    def close(self) -> None: ...


@dataclass
class Job:
    job_id: str
    active: bool = True
    resource: Optional[Closable] = None


def _close_quietly(job_id: str, resource: Closable) -> None:
    try:
        resource.close()
    except Exception as e:
        logger.warning(f"Job {job_id}: failed to close attached resource: {e}")


class JobRegistry:
    def __init__(self):
        self._jobs: Dict[str, Job] = {}
        self._lock = threading.Lock()

    def register(self, job_id: str) -> Job:
        with self._lock:
            if job_id in self._jobs:
                raise JobAlreadyExists(job_id)
            job = Job(job_id=job_id)
            self._jobs[job_id] = job
        logger.info(f"Job {job_id} registered")
        return job

    def get(self, job_id: str) -> Optional[Job]:
        with self._lock:
            return self._jobs.get(job_id)

    def is_active(self, job_id: str) -> bool:
        with self._lock:
            job = self._jobs.get(job_id)
            return job is not None and job.active

    def attach_resource(self, job_id: str, resource: Closable) -> bool:
        """
        Bind `resource` so a concurrent cancel can close it.
        If the job is gone or already cancelled the resource is closed at once
        and False is returned.
        """
        with self._lock:
            job = self._jobs.get(job_id)
            if job is not None and job.active:
                job.resource = resource
                return True
        _close_quietly(job_id, resource)
        return False

    def detach_resource(self, job_id: str, resource: Closable) -> None:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is not None and job.resource is resource:
                job.resource = None

    def cancel(self, job_id: str) -> Job:
        """
        Mark the job inactive and close its attached resource, if any.

        Raises:
            JobNotFound: unknown or already finished job id
        """
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                raise JobNotFound(job_id)
            job.active = False
            resource, job.resource = job.resource, None

        logger.info(f"Job {job_id} cancelled")
        if resource is not None:
            _close_quietly(job_id, resource)
        return job

    def remove(self, job_id: str) -> None:
        with self._lock:
            job = self._jobs.pop(job_id, None)
            if job is not None:
                job.active = False
                job.resource = None
        if job is not None:
            logger.info(f"Job {job_id} removed")

    def __contains__(self, job_id: str) -> bool:
        with self._lock:
            return job_id in self._jobs

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)
