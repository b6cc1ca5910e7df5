"""`python -m token_printer` and the `token-printer` console script."""
from typing import Optional, Sequence

from token_printer.cli import cli

PROG_NAME = "token-printer"


def main(argv: Optional[Sequence[str]] = None) -> None:
    # Same usage line whether started as a script or with -m.
    cli.main(args=list(argv) if argv is not None else None, prog_name=PROG_NAME)


if __name__ == "__main__":
    main()
