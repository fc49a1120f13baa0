"""Registry of exclusive long-running task slots.

Some workflows (position monitoring, rebalancing loops) must run at most
once per agent instance. Instead of a module-level "current task" variable,
the agent's shared custom context owns a ``TaskSlotRegistry`` and callers
claim a slot by kind before starting work and release it when done.
"""

from __future__ import annotations

import threading
from typing import Dict, Optional


class TaskSlotRegistry:
    """Atomic claim/release of named slots, one owner per slot."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._holders: Dict[str, str] = {}

    def claim(self, kind: str, owner_id: str) -> bool:
        """Claim ``kind`` for ``owner_id``; False if another owner holds it.

        Re-claiming a slot already held by the same owner succeeds.
        """
        with self._lock:
            holder = self._holders.get(kind)
            if holder is not None and holder != owner_id:
                return False
            self._holders[kind] = owner_id
            return True

    def release(self, kind: str, owner_id: str) -> bool:
        """Release ``kind`` if held by ``owner_id``; other owners cannot release it."""
        with self._lock:
            if self._holders.get(kind) != owner_id:
                return False
            del self._holders[kind]
            return True

    def holder(self, kind: str) -> Optional[str]:
        with self._lock:
            return self._holders.get(kind)

    def active(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._holders)
