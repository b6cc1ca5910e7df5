from pydantic import BaseModel, Field

from token_printer.algorithm.proof_of_work import SALT_MASK
from token_printer.utils import ACCOUNT_ID_PATTERN, MAX_ACCOUNT_ID_LEN, MIN_ACCOUNT_ID_LEN


class FaucetInfoResponse(BaseModel):
    transfer_amount: str  # yocto units; too large for a JSON number
    min_difficulty: int
    num_transfers: int


class AccountResponse(BaseModel):
    account_id: str
    exists: bool


class TransferRequest(BaseModel):
    account_id: str = Field(
        min_length=MIN_ACCOUNT_ID_LEN,
        max_length=MAX_ACCOUNT_ID_LEN,
        pattern=ACCOUNT_ID_PATTERN,
    )
    salt: int = Field(ge=0, le=SALT_MASK)


class TransferResponse(BaseModel):
    account_id: str
    salt: int
    amount: str
    hash_hex: str
    num_transfers: int
