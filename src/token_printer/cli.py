import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import click
import requests
import structlog

from token_printer.algorithm.proof_of_work import (
    DIGEST_BITS,
    SALT_MASK,
    build_message,
    digest,
    leading_zero_bits,
)
from token_printer.config import (
    DEFAULT_ENDPOINT,
    DEMO_API_HOST,
    DEMO_API_PORT,
    HEARTBEAT_INTERVAL,
    REQUEST_TIMEOUT,
)
from token_printer.faucet_client import (
    FaucetError,
    account_exists,
    fetch_faucet_info,
    request_transfer,
)
from token_printer.logging_config import configure_logging
from token_printer.solver import solve_challenge
from token_printer.state_queue import SingleSlotQueue
from token_printer.state_snapshot import SolverSnapshot
from token_printer.ui import drain_loop, ui_loop
from token_printer.utils import InvalidAccountIdError, brrr, format_tokens, parse_account_id

log = structlog.get_logger()

endpoint_option = click.option(
    "--endpoint", "-e",
    default=DEFAULT_ENDPOINT,
    envvar="TOKEN_PRINTER_ENDPOINT",
    show_default=True,
    help="Base URL of the faucet service.",
)
timeout_option = click.option(
    "--timeout",
    default=REQUEST_TIMEOUT,
    envvar="TOKEN_PRINTER_TIMEOUT",
    show_default=True,
    type=float,
    help="HTTP timeout in seconds.",
)
salt_option = click.option(
    "--salt", "-s",
    "initial_salt",
    type=click.IntRange(0, SALT_MASK),
    default=None,
    help="Salt to start searching from. Defaults to the current time in milliseconds.",
)
no_ui_option = click.option("--no-ui", is_flag=True, help="Do not draw the progress panel.")


def account_id_argument(ctx: click.Context, param: click.Parameter, value: str) -> str:
    try:
        return parse_account_id(value)
    except InvalidAccountIdError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param)


@click.group()
@click.option("--verbose", "-v", is_flag=True, envvar="TOKEN_PRINTER_VERBOSE", help="Show debug logs.")
def cli(verbose: bool):
    configure_logging(verbose)


def solver(
    account_id: str,
    min_difficulty: int,
    initial_salt: Optional[int] = None,
    heartbeat_interval: int = HEARTBEAT_INTERVAL,
    show_ui: bool = True,
) -> Optional[int]:
    """Run the proof-of-work search on a worker thread while the UI follows its progress."""
    state_queue: SingleSlotQueue[SolverSnapshot] = SingleSlotQueue()
    cancel = threading.Event()
    consume = ui_loop if show_ui else drain_loop

    with ThreadPoolExecutor(max_workers=1) as executor:
        future = executor.submit(
            solve_challenge,
            account_id,
            min_difficulty,
            state_queue,
            cancel,
            initial_salt=initial_salt,
            heartbeat_interval=heartbeat_interval,
        )

        try:
            consume(state_queue)
        except KeyboardInterrupt:
            cancel.set()
            state_queue.close()

        salt = future.result()
    log.debug("solver_finished", salt=salt, skipped_snapshots=state_queue.skipped)
    return salt


@cli.command()
@click.argument("account_id", callback=account_id_argument)
@click.option("--difficulty", "-d", required=True, type=click.IntRange(0, None),
              help="Required number of leading zero bits.")
@salt_option
@click.option("--heartbeat", default=HEARTBEAT_INTERVAL, show_default=True, type=click.IntRange(1, None),
              help="Report progress at least every N hashes.")
@no_ui_option
def solve(account_id: str, difficulty: int, initial_salt: Optional[int], heartbeat: int, no_ui: bool):
    """Find a salt for ACCOUNT_ID locally without contacting the faucet."""
    if difficulty > DIGEST_BITS:
        log.warning("difficulty_unreachable", difficulty=difficulty, digest_bits=DIGEST_BITS)
        click.echo(f"Difficulty {difficulty} exceeds {DIGEST_BITS} bits; searching until interrupted.", err=True)

    salt = solver(account_id, difficulty, initial_salt, heartbeat, show_ui=not no_ui)
    if salt is None:
        click.echo("Cancelled.", err=True)
        raise SystemExit(1)
    click.echo(salt)


@cli.command()
@click.argument("account_id", callback=account_id_argument)
@click.argument("salt", type=click.IntRange(0, SALT_MASK))
@click.option("--difficulty", "-d", required=True, type=click.IntRange(0, None),
              help="Required number of leading zero bits.")
def verify(account_id: str, salt: int, difficulty: int):
    """Check whether SALT is a valid proof of work for ACCOUNT_ID."""
    hash_bytes = digest(build_message(account_id, salt))
    zeros = leading_zero_bits(hash_bytes)
    click.echo(f"sha256: {hash_bytes.hex()}")
    click.echo(f"leading zero bits: {zeros} (required {difficulty})")
    if zeros < difficulty:
        click.echo("The proof of work is too weak.", err=True)
        raise SystemExit(1)
    click.echo("OK")


@cli.command()
@endpoint_option
@timeout_option
def stats(endpoint: str, timeout: float):
    """Show how many accounts the faucet has funded."""
    try:
        info = fetch_faucet_info(endpoint, timeout)
    except (FaucetError, requests.RequestException) as e:
        raise click.ClickException(str(e))

    click.echo(
        f"There were {info.num_transfers} accounts funded and total "
        f"{format_tokens(info.total_printed)} Ⓝ tokens were printed."
    )
    click.echo(f"Each request prints {format_tokens(info.transfer_amount)} Ⓝ at difficulty {info.min_difficulty}.")


@cli.command()
@click.argument("account_id", callback=account_id_argument)
@endpoint_option
@timeout_option
@salt_option
@no_ui_option
def request(account_id: str, endpoint: str, timeout: float, initial_salt: Optional[int], no_ui: bool):
    """Ask the faucet to print tokens for ACCOUNT_ID."""
    try:
        info = fetch_faucet_info(endpoint, timeout)
        if not account_exists(endpoint, account_id, timeout):
            raise click.ClickException(f"Account @{account_id} doesn't exist!")
    except (FaucetError, requests.RequestException) as e:
        raise click.ClickException(str(e))

    click.echo(
        f"Asking to print {format_tokens(info.transfer_amount)} Ⓝ for @{account_id} "
        f"({brrr(info.min_difficulty)})."
    )
    salt = solver(account_id, info.min_difficulty, initial_salt, show_ui=not no_ui)
    if salt is None:
        click.echo("Cancelled.", err=True)
        raise SystemExit(1)

    click.echo("Printing is done! Delivering.")
    try:
        receipt = request_transfer(endpoint, account_id, salt, timeout)
    except (FaucetError, requests.RequestException) as e:
        raise click.ClickException(str(e))

    log.info("transfer_requested", account_id=account_id, salt=salt, hash=receipt.hash_hex)
    click.echo(f"Sent {format_tokens(receipt.amount)} Ⓝ to @{receipt.account_id} (salt {receipt.salt}).")
    click.echo(
        f"There were {receipt.num_transfers} accounts funded and total "
        f"{format_tokens(receipt.num_transfers * receipt.amount)} Ⓝ tokens were printed."
    )


@cli.command("demo-api")
@click.option("--host", default=DEMO_API_HOST, help="Host to bind the server to")
@click.option("--port", default=DEMO_API_PORT, help="Port to bind the server to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
def demo_api(host: str, port: int, reload: bool):
    """Start the demo faucet server for trying out requests locally."""
    import uvicorn

    click.echo(f"Starting demo faucet on http://{host}:{port}")
    click.echo("Available endpoints:")
    click.echo("  - GET  /api/faucet               - Transfer amount, difficulty, transfer count")
    click.echo("  - GET  /api/accounts/{account_id} - Account existence")
    click.echo("  - POST /api/transfers             - Submit a proof of work")
    click.echo("\nPress Ctrl+C to stop the server")

    if reload:
        # Use import string for reload mode
        uvicorn.run("faucet_api.api:app", host=host, port=port, reload=True)
    else:
        from faucet_api.api import app
        uvicorn.run(app, host=host, port=port, reload=False)


if __name__ == "__main__":
    cli()
