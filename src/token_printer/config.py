"""Client defaults. Each one can be overridden from the command line or a TOKEN_PRINTER_* variable."""
from token_printer.algorithm import proof_of_work

DEFAULT_ENDPOINT = "http://127.0.0.1:8000"
REQUEST_TIMEOUT = 10.0

HEARTBEAT_INTERVAL = proof_of_work.HEARTBEAT_INTERVAL
UI_REFRESH_PER_SECOND = 30

DEMO_API_HOST = "127.0.0.1"
DEMO_API_PORT = 8000
