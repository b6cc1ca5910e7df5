import logging
import sys

import structlog


def stderr_logger_factory(*args) -> structlog.PrintLogger:
    """Loggers write to stderr so stdout only carries command results."""
    return structlog.PrintLogger(sys.stderr)


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog for the CLI. Warnings and errors only, unless verbose."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.WARNING
        ),
        context_class=dict,
        # Looked up per logger, so a replaced sys.stderr is always honoured.
        logger_factory=stderr_logger_factory,
        cache_logger_on_first_use=False,
    )
