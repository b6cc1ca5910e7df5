import threading
from dataclasses import dataclass
from typing import Iterable

import structlog

from token_printer.algorithm.proof_of_work import build_message, digest, leading_zero_bits

from .config import Settings

log = structlog.get_logger()


class WeakProofError(ValueError):
    pass


class HashAlreadyUsedError(ValueError):
    pass


@dataclass(frozen=True)
class Transfer:
    account_id: str
    salt: int
    amount: int
    hash_bytes: bytes
    num_transfers: int


class FaucetLedger:
    """In-memory faucet state: known accounts, used proof hashes, transfer count."""

    def __init__(self, transfer_amount: int, min_difficulty: int, accounts: Iterable[str] = ()) -> None:
        self.transfer_amount = transfer_amount
        self.min_difficulty = min_difficulty
        self._accounts = set(accounts)
        self._used_hashes: set[bytes] = set()
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "FaucetLedger":
        return cls(settings.transfer_amount, settings.min_difficulty, settings.accounts)

    @property
    def num_transfers(self) -> int:
        with self._lock:
            return len(self._used_hashes)

    def account_exists(self, account_id: str) -> bool:
        with self._lock:
            return account_id in self._accounts

    def request_transfer(self, account_id: str, salt: int) -> Transfer:
        """
        Check the proof of work for (account_id, salt) and record the transfer.

        The hash of every accepted proof is remembered, so a salt can only be used once
        per account. One account may still request many transfers with different salts.
        """
        hash_bytes = digest(build_message(account_id, salt))
        zeros = leading_zero_bits(hash_bytes)
        if zeros < self.min_difficulty:
            raise WeakProofError("The proof of work is too weak")

        with self._lock:
            if hash_bytes in self._used_hashes:
                raise HashAlreadyUsedError("The given hash is already used for transfer")
            self._used_hashes.add(hash_bytes)
            num_transfers = len(self._used_hashes)

        log.info(
            "transfer_recorded",
            account_id=account_id,
            salt=salt,
            difficulty=zeros,
            num_transfers=num_transfers,
        )
        return Transfer(
            account_id=account_id,
            salt=salt,
            amount=self.transfer_amount,
            hash_bytes=hash_bytes,
            num_transfers=num_transfers,
        )
