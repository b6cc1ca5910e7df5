# proof_of_work.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

import asyncio
import hashlib

SALT_SIZE = 8
SALT_MASK = (1 << (SALT_SIZE * 8)) - 1
SEPARATOR = b":"
DIGEST_SIZE = 32
DIGEST_BITS = DIGEST_SIZE * 8
HEARTBEAT_INTERVAL = 10_000


class Cancelled(Exception):
    """The search was cancelled before any salt met the difficulty."""


class CancelToken(Protocol):
    def is_set(self) -> bool: ...


@dataclass(frozen=True, slots=True)
class Progress:
    """Progress report from a running search.

    Heartbeats only carry the iteration offset; improvements also carry the
    best difficulty reached and the percentage of the target it represents.
    """
    iteration_offset: int
    best_difficulty: Optional[int] = None
    progress_percent: Optional[int] = None

    @property
    def is_heartbeat(self) -> bool:
        return self.best_difficulty is None


ProgressFn = Callable[[Progress], None]


def encode_salt(salt: int) -> bytes:
    """Encode a salt as 8 little-endian bytes."""
    return salt.to_bytes(SALT_SIZE, "little")


def build_message(identifier: str, salt: int) -> bytearray:
    """identifier (utf-8) || ':' || salt (u64 little-endian)"""
    message = bytearray(identifier.encode("utf-8"))
    message += SEPARATOR
    message += encode_salt(salt)
    return message


def increment_salt(message: bytearray) -> None:
    """
    Add one to the salt held in the last 8 bytes of the message, in place.
    Starts at the lowest-order byte and carries while bytes roll over from 0xff.
    """
    for i in range(len(message) - SALT_SIZE, len(message)):
        if message[i] == 0xFF:
            message[i] = 0
        else:
            message[i] += 1
            break


def digest(message: bytes | bytearray) -> bytes:
    return hashlib.sha256(message).digest()


def leading_zero_bits(data: bytes) -> int:
    """
    Count the zero bits at the start of the digest.
    Stops at the first byte that is not entirely zero, so later zero bytes never add to the count.
    """
    total = 0
    for byte in data:
        zeros = 8 - byte.bit_length()
        total += zeros
        if zeros < 8:
            break
    return total


def verify(identifier: str, salt: int, min_difficulty: int) -> bool:
    """Check a salt the same way the faucet does before honoring a transfer."""
    if not 0 <= salt <= SALT_MASK:
        return False
    return leading_zero_bits(digest(build_message(identifier, salt))) >= min_difficulty


def _check_arguments(min_difficulty: int, initial_salt: int, heartbeat_interval: int) -> None:
    if min_difficulty < 0:
        raise ValueError(f"min_difficulty must be >= 0, got {min_difficulty}")
    if not 0 <= initial_salt <= SALT_MASK:
        raise ValueError(f"initial_salt must fit in an unsigned 64-bit integer, got {initial_salt}")
    if heartbeat_interval < 1:
        raise ValueError(f"heartbeat_interval must be >= 1, got {heartbeat_interval}")


class _Search:
    """Mutable state of one solve run. Owns the message buffer."""

    def __init__(self, identifier: str, min_difficulty: int, initial_salt: int,
                 on_progress: Optional[ProgressFn], heartbeat_interval: int) -> None:
        self.min_difficulty = min_difficulty
        self.initial_salt = initial_salt
        self.salt = initial_salt
        self.best_difficulty = 0
        self.on_progress = on_progress
        self.heartbeat_interval = heartbeat_interval
        self.message = build_message(identifier, initial_salt)

    def step(self) -> Optional[int]:
        """Try the current salt. Returns it on success, otherwise advances to the next one."""
        zeros = leading_zero_bits(digest(self.message))
        if zeros >= self.min_difficulty:
            return self.salt

        offset = self.salt - self.initial_salt
        if zeros > self.best_difficulty:
            self.best_difficulty = zeros
            self._notify(Progress(
                iteration_offset=offset,
                best_difficulty=zeros,
                progress_percent=zeros * 100 // self.min_difficulty,
            ))
        elif offset % self.heartbeat_interval == 0:
            self._notify(Progress(iteration_offset=offset))

        increment_salt(self.message)
        self.salt += 1
        return None

    def _notify(self, progress: Progress) -> None:
        if self.on_progress is not None:
            self.on_progress(progress)


def solve(
    identifier: str,
    min_difficulty: int,
    initial_salt: int,
    on_progress: Optional[ProgressFn] = None,
    cancel_token: Optional[CancelToken] = None,
    *,
    heartbeat_interval: int = HEARTBEAT_INTERVAL,
) -> int:
    """
    Find the first salt >= initial_salt such that sha256(identifier || ':' || salt_le64)
    has at least min_difficulty leading zero bits.

    - on_progress receives a Progress whenever the best difficulty improves, and a
      heartbeat every heartbeat_interval iterations without improvement.
    - cancel_token is checked after every candidate; Cancelled is raised once it is set.

    A min_difficulty above 256 can never be met, so such a search only ends by cancellation.
    """
    _check_arguments(min_difficulty, initial_salt, heartbeat_interval)
    search = _Search(identifier, min_difficulty, initial_salt, on_progress, heartbeat_interval)

    while True:
        salt = search.step()
        if salt is not None:
            return salt
        if cancel_token is not None and cancel_token.is_set():
            raise Cancelled(f"cancelled after {search.salt - initial_salt} iterations")


async def solve_async(
    identifier: str,
    min_difficulty: int,
    initial_salt: int,
    on_progress: Optional[ProgressFn] = None,
    cancel_token: Optional[CancelToken] = None,
    *,
    heartbeat_interval: int = HEARTBEAT_INTERVAL,
    yield_every: int = 1_000,
) -> int:
    """Same search as solve(), giving control back to the event loop every yield_every candidates."""
    _check_arguments(min_difficulty, initial_salt, heartbeat_interval)
    if yield_every < 1:
        raise ValueError(f"yield_every must be >= 1, got {yield_every}")
    search = _Search(identifier, min_difficulty, initial_salt, on_progress, heartbeat_interval)

    while True:
        for _ in range(yield_every):
            salt = search.step()
            if salt is not None:
                return salt
            if cancel_token is not None and cancel_token.is_set():
                raise Cancelled(f"cancelled after {search.salt - initial_salt} iterations")
        await asyncio.sleep(0)
