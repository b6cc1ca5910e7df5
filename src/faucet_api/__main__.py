"""Entry point for the demo faucet."""

import uvicorn

from token_printer.config import DEMO_API_HOST, DEMO_API_PORT


def main():
    """Start the demo faucet server."""
    uvicorn.run("faucet_api.api:app", host=DEMO_API_HOST, port=DEMO_API_PORT, reload=True)


if __name__ == "__main__":
    main()
