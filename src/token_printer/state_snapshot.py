from dataclasses import dataclass, replace
from typing import Optional

from token_printer.algorithm.proof_of_work import Progress


@dataclass(frozen=True, slots=True)
class SolverSnapshot:
    """Minimal immutable snapshot of a proof-of-work run, for the UI."""

    state_version: int
    identifier: str
    min_difficulty: int
    complete: bool = False
    cancelled: bool = False

    iterations: int = 0
    best_difficulty: int = 0
    progress_percent: int = 0
    salt: Optional[int] = None

    @property
    def finished(self) -> bool:
        return self.complete or self.cancelled

    def advance(self, progress: Progress) -> "SolverSnapshot":
        """Next snapshot after a progress report. Heartbeats keep the previous difficulty."""
        if progress.is_heartbeat:
            return replace(
                self,
                state_version=self.state_version + 1,
                iterations=progress.iteration_offset,
            )
        return replace(
            self,
            state_version=self.state_version + 1,
            iterations=progress.iteration_offset,
            best_difficulty=progress.best_difficulty,
            progress_percent=progress.progress_percent,
        )
