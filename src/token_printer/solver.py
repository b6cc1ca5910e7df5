import threading
import time
from typing import Optional

import structlog

from token_printer.algorithm.proof_of_work import (
    Cancelled,
    Progress,
    build_message,
    digest,
    leading_zero_bits,
    solve,
)
from token_printer.config import HEARTBEAT_INTERVAL
from token_printer.state_queue import SingleSlotQueue
from token_printer.state_snapshot import SolverSnapshot

log = structlog.get_logger()


def current_time_salt() -> int:
    """Milliseconds since the epoch, so reruns don't start from a salt already used."""
    return time.time_ns() // 1_000_000


def solve_challenge(
    identifier: str,
    min_difficulty: int,
    state_queue: SingleSlotQueue[SolverSnapshot],
    cancel: threading.Event,
    *,
    initial_salt: Optional[int] = None,
    heartbeat_interval: int = HEARTBEAT_INTERVAL,
) -> Optional[int]:
    """
    Run the proof-of-work search and publish snapshots of its progress.
    Returns the salt, or None if cancelled.
    The final snapshot is published last, then the queue is closed.
    """
    if initial_salt is None:
        initial_salt = current_time_salt()

    snapshot = SolverSnapshot(state_version=0, identifier=identifier, min_difficulty=min_difficulty)

    def on_progress(progress: Progress) -> None:
        nonlocal snapshot
        try:
            snapshot = snapshot.advance(progress)
            state_queue.publish(snapshot)
        except Exception:
            # Progress is advisory; a broken consumer must not stop the search.
            log.exception("progress_callback_failed", identifier=identifier)

    try:
        state_queue.publish(snapshot)
        log.info(
            "solving",
            identifier=identifier,
            min_difficulty=min_difficulty,
            initial_salt=initial_salt,
        )
        started = time.monotonic()

        try:
            salt = solve(
                identifier,
                min_difficulty,
                initial_salt,
                on_progress,
                cancel,
                heartbeat_interval=heartbeat_interval,
            )
        except Cancelled as e:
            log.warning("solve_cancelled", identifier=identifier, reason=str(e))
            state_queue.publish(SolverSnapshot(
                state_version=snapshot.state_version + 1,
                identifier=identifier,
                min_difficulty=min_difficulty,
                cancelled=True,
                iterations=snapshot.iterations,
                best_difficulty=snapshot.best_difficulty,
                progress_percent=snapshot.progress_percent,
            ))
            return None

        iterations = salt - initial_salt
        log.info(
            "solved",
            identifier=identifier,
            salt=salt,
            iterations=iterations,
            elapsed=round(time.monotonic() - started, 3),
        )
        state_queue.publish(SolverSnapshot(
            state_version=snapshot.state_version + 1,
            identifier=identifier,
            min_difficulty=min_difficulty,
            complete=True,
            iterations=iterations,
            best_difficulty=leading_zero_bits(digest(build_message(identifier, salt))),
            progress_percent=100,
            salt=salt,
        ))
        return salt
    finally:
        # Always close the queue so the UI can exit.
        state_queue.close()
