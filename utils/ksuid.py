"""
KSUID - K-Sortable Unique Identifier.

Snapshot and error ids. 4 bytes of seconds since the KSUID epoch followed by
16 random bytes, base62 encoded into 27 characters so ids sort by creation time.
"""

import os
import struct
import time

KSUID_EPOCH = 1400000000  # 2014-05-13
KSUID_LENGTH = 27
BASE62 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"


def generate_ksuid(unix_seconds=None):
    """Generate a 27-character sortable unique ID."""
    if unix_seconds is None:
        unix_seconds = time.time()
    n = int.from_bytes(struct.pack(">I", int(unix_seconds) - KSUID_EPOCH) + os.urandom(16), "big")

    chars = []
    while n > 0:
        n, remainder = divmod(n, 62)
        chars.append(BASE62[remainder])
    return "".join(reversed(chars)).rjust(KSUID_LENGTH, "0")


def ksuid_seconds(ksuid):
    """Unix time (whole seconds) encoded in ``ksuid``."""
    if len(ksuid) != KSUID_LENGTH:
        raise ValueError(f"KSUID must be {KSUID_LENGTH} characters, got {len(ksuid)}")
    n = 0
    for char in ksuid:
        n = n * 62 + BASE62.index(char)
    return (n >> 128) + KSUID_EPOCH
