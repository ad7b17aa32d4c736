"""
Record identifier generation.

Identifiers are 24 hex characters: creation time in seconds (8), a random
value fixed for the process (10) and a counter (6). Identifiers minted by
one process sort lexicographically in creation order.
"""
import itertools
import os
import threading
import time

_PROCESS_TAG = os.urandom(5).hex()
# Seeded in the lower half so the counter does not wrap in practice
_counter = itertools.count(int.from_bytes(os.urandom(3), "big") >> 1)
_lock = threading.Lock()


def new_record_id() -> str:
    """Return a fresh, unique record identifier"""
    with _lock:
        seconds = int(time.time()) & 0xFFFFFFFF
        count = next(_counter) & 0xFFFFFF
    return f"{seconds:08x}{_PROCESS_TAG}{count:06x}"
