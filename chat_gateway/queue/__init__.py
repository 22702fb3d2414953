"""Work-queue collaborator interface."""

from .work_queue import Delivery, InMemoryWorkQueue, WorkQueue  # noqa: F401

__all__ = ["Delivery", "InMemoryWorkQueue", "WorkQueue"]
