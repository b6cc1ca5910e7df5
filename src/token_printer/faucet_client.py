from dataclasses import dataclass
from urllib.parse import quote

import requests

from token_printer.config import REQUEST_TIMEOUT


class FaucetError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True, slots=True)
class FaucetInfo:
    transfer_amount: int
    min_difficulty: int
    num_transfers: int

    @property
    def total_printed(self) -> int:
        return self.transfer_amount * self.num_transfers


@dataclass(frozen=True, slots=True)
class TransferReceipt:
    account_id: str
    salt: int
    amount: int
    hash_hex: str
    num_transfers: int


def _url(endpoint: str, path: str) -> str:
    return f"{endpoint.rstrip('/')}/api{path}"


def _detail(response: requests.Response) -> str:
    try:
        return str(response.json().get("detail", response.text))
    except ValueError:
        return response.text


def _raise_for_status(response: requests.Response, action: str) -> None:
    if response.status_code != 200:
        raise FaucetError(
            f"Failed to {action}: {response.status_code} {_detail(response)}",
            status_code=response.status_code,
        )


def fetch_faucet_info(endpoint: str, timeout: float = REQUEST_TIMEOUT) -> FaucetInfo:
    """Fetch the transfer amount, required difficulty and transfer count."""
    response = requests.get(_url(endpoint, "/faucet"), timeout=timeout)
    _raise_for_status(response, "fetch faucet info")
    data = response.json()
    return FaucetInfo(
        transfer_amount=int(data["transfer_amount"]),
        min_difficulty=int(data["min_difficulty"]),
        num_transfers=int(data["num_transfers"]),
    )


def account_exists(endpoint: str, account_id: str, timeout: float = REQUEST_TIMEOUT) -> bool:
    response = requests.get(_url(endpoint, f"/accounts/{quote(account_id, safe='')}"), timeout=timeout)
    if response.status_code == 404:
        return False
    _raise_for_status(response, f"look up account {account_id}")
    return True


def request_transfer(
    endpoint: str,
    account_id: str,
    salt: int,
    timeout: float = REQUEST_TIMEOUT,
) -> TransferReceipt:
    """ Submit a solved salt and ask the faucet to transfer tokens to the account. """
    payload = {
        "account_id": account_id,
        "salt": salt,
    }
    response = requests.post(_url(endpoint, "/transfers"), json=payload, timeout=timeout)
    _raise_for_status(response, f"request transfer for {account_id}")
    data = response.json()
    return TransferReceipt(
        account_id=data["account_id"],
        salt=int(data["salt"]),
        amount=int(data["amount"]),
        hash_hex=data["hash_hex"],
        num_transfers=int(data["num_transfers"]),
    )
