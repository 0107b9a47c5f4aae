"""
=============================================================================
SHARED STATE
=============================================================================

Process-wide data reachable from every connection handler.

Right now that is a single number: how many times /count was hit.

=============================================================================
WHY A LOCK?
=============================================================================

"visit_count += 1" is a read, an add, and a write. If two callers
interleave between the read and the write, one increment is lost:

    Caller A            Caller B            visit_count
    ────────            ────────            ───────────
    read 7                                       7
                        read 7                   7
    write 8                                      8
                        write 8                  8   ← lost update

record_visit() does the increment AND the read-back under one lock
acquisition, so each caller gets the value its own increment produced
and no two callers ever see the same number.

The critical section is two integer operations. It never covers socket or
file I/O, so holding it never makes one connection wait on another's
network.

=============================================================================
"""

import threading


class SharedState:
    """
    Lock-protected visit counter.

    Safe to share between asyncio tasks and between threads.
    """

    def __init__(self, visit_count: int = 0):
        self._visit_count = visit_count
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"SharedState(visit_count={self.visit_count})"

    @property
    def visit_count(self) -> int:
        with self._lock:
            return self._visit_count

    def record_visit(self) -> int:
        """
        Increment the counter and return the new value.

        Returns:
            The count immediately after this call's increment.
        """
        with self._lock:
            self._visit_count += 1
            return self._visit_count
