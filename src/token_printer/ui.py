from typing import Optional

from rich.live import Live
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table

from token_printer.config import HEARTBEAT_INTERVAL, UI_REFRESH_PER_SECOND
from token_printer.state_queue import SingleSlotQueue
from token_printer.state_snapshot import SolverSnapshot
from token_printer.utils import brrr


COLORS = {
    "label": "cyan",
    "running": "yellow",
    "complete": "spring_green2",
    "cancelled": "red",
}

# Cap for the "goes BRRR" line so long runs don't wrap the panel.
MAX_PRINTER_NOISE = 48


def status_line(state: SolverSnapshot) -> str:
    """One-line status, coloured by how the run is going."""
    if state.complete:
        return f"[{COLORS['complete']}]Printing is done! Salt {state.salt}[/{COLORS['complete']}]"
    if state.cancelled:
        return f"[{COLORS['cancelled']}]Cancelled after {state.iterations:,} hashes[/{COLORS['cancelled']}]"
    noise = brrr(min(state.iterations // HEARTBEAT_INTERVAL, MAX_PRINTER_NOISE))
    return f"[{COLORS['running']}]Token printer goes {noise}.[/{COLORS['running']}]"


def render(state: Optional[SolverSnapshot]):
    """Render the solver state snapshot."""
    if state is None:
        return Panel("Waiting for first update…", title="Token Printer", border_style="dim")

    ui_table = Table.grid(padding=(0, 2))
    ui_table.add_column(style=COLORS["label"], justify="right", no_wrap=True)
    ui_table.add_column(no_wrap=True, overflow="crop")

    ui_table.add_row("Account", f"@{state.identifier}")
    ui_table.add_row("Hashes", f"{state.iterations:,}")
    ui_table.add_row(
        "Difficulty",
        f"{brrr(state.best_difficulty)} out of {brrr(state.min_difficulty)}",
    )
    ui_table.add_row(
        "Progress",
        ProgressBar(total=100, completed=min(state.progress_percent, 100), width=40),
    )
    ui_table.add_row("", status_line(state))

    if state.complete:
        border_style = COLORS["complete"]
    elif state.cancelled:
        border_style = COLORS["cancelled"]
    else:
        border_style = COLORS["running"]
    return Panel(ui_table, title=f"Token Printer  |  v{state.state_version}", border_style=border_style)


def ui_loop(state_queue: SingleSlotQueue[SolverSnapshot]) -> Optional[SolverSnapshot]:
    """Loop the UI until the solver closes the queue. Returns the last snapshot seen."""
    last = None
    with Live(render(None), refresh_per_second=UI_REFRESH_PER_SECOND, screen=False) as live:
        for last in state_queue:
            live.update(render(last))
    return last


def drain_loop(state_queue: SingleSlotQueue[SolverSnapshot]) -> Optional[SolverSnapshot]:
    """Consume snapshots without drawing anything."""
    last = None
    for last in state_queue:
        pass
    return last
