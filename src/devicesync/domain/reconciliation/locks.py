"""In-process serialization of reconcile calls per tenant."""

from __future__ import annotations

import threading
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


@dataclass(slots=True)
class TenantLocks:
    """One lock per tenant, created on demand.

    ``hold`` takes locks in ascending tenant order so two calls covering
    overlapping tenant sets cannot deadlock.
    """

    _locks: dict[int, threading.Lock] = field(default_factory=dict[int, threading.Lock])
    _registry_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def _lock_for(self, tenant_id: int) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(tenant_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[tenant_id] = lock
            return lock

    @contextmanager
    def hold(self, tenant_ids: Iterable[int]) -> Iterator[None]:
        with ExitStack() as stack:
            for tenant_id in sorted(set(tenant_ids)):
                stack.enter_context(self._lock_for(tenant_id))
            yield

    def is_held(self, tenant_id: int) -> bool:
        return self._lock_for(tenant_id).locked()
