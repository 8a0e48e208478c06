"""
Time-ordered identifiers.

Account and session ids are UUIDv7 values: a 48-bit millisecond timestamp
followed by a 12-bit sequence and 62 random bits. Ids generated by one
process are strictly increasing, so "oldest" can always be derived from the
id when two rows share a creation timestamp.
"""

import secrets
import threading
import time
import uuid

_lock = threading.Lock()
_last_ms = 0
_sequence = 0

_MAX_SEQUENCE = 0xFFF


def uuid7() -> uuid.UUID:
    global _last_ms, _sequence

    with _lock:
        now_ms = time.time_ns() // 1_000_000
        if now_ms > _last_ms:
            _last_ms = now_ms
            # leave headroom so a burst within one millisecond does not overflow
            _sequence = secrets.randbits(10)
        else:
            _sequence += 1
            if _sequence > _MAX_SEQUENCE:
                _last_ms += 1
                _sequence = 0

        timestamp_ms = _last_ms
        sequence = _sequence

    value = (timestamp_ms & 0xFFFF_FFFF_FFFF) << 80
    value |= 0x7 << 76
    value |= sequence << 64
    value |= 0b10 << 62
    value |= secrets.randbits(62)

    return uuid.UUID(int=value)
