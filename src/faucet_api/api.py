from fastapi import APIRouter, Depends, FastAPI, HTTPException
import structlog

from . import models
from .config import settings
from .ledger import FaucetLedger, HashAlreadyUsedError, WeakProofError

log = structlog.get_logger()

# Create the FastAPI app
app = FastAPI(title="Token Printer Demo Faucet")

# Create the router for API endpoints
router = APIRouter()

ledger = FaucetLedger.from_settings(settings)
log.info(
    "faucet_initialized",
    transfer_amount=str(ledger.transfer_amount),
    min_difficulty=ledger.min_difficulty,
    accounts=len(settings.accounts),
)


def get_ledger() -> FaucetLedger:
    return ledger


@router.get("/faucet", response_model=models.FaucetInfoResponse)
def faucet_info(ledger: FaucetLedger = Depends(get_ledger)):
    """ Transfer amount, required difficulty and number of transfers so far. """
    return models.FaucetInfoResponse(
        transfer_amount=str(ledger.transfer_amount),
        min_difficulty=ledger.min_difficulty,
        num_transfers=ledger.num_transfers,
    )


@router.get("/accounts/{account_id}", response_model=models.AccountResponse)
def get_account(account_id: str, ledger: FaucetLedger = Depends(get_ledger)):
    if not ledger.account_exists(account_id):
        raise HTTPException(status_code=404, detail=f"Account {account_id} does not exist")
    return models.AccountResponse(account_id=account_id, exists=True)


@router.post("/transfers", response_model=models.TransferResponse)
def request_transfer(req: models.TransferRequest, ledger: FaucetLedger = Depends(get_ledger)):
    """ Verify the proof of work for (account_id, salt) and send tokens.
    Proofs are sha256(account_id || ':' || salt as u64 little-endian) with at least
    min_difficulty leading zero bits, and each proof hash is accepted only once.
    """
    try:
        transfer = ledger.request_transfer(req.account_id, req.salt)
    except WeakProofError as e:
        log.warning("transfer_rejected", account_id=req.account_id, salt=req.salt, reason=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except HashAlreadyUsedError as e:
        log.warning("transfer_rejected", account_id=req.account_id, salt=req.salt, reason=str(e))
        raise HTTPException(status_code=409, detail=str(e))

    log.info("transfer_accepted", account_id=transfer.account_id, num_transfers=transfer.num_transfers)
    return models.TransferResponse(
        account_id=transfer.account_id,
        salt=transfer.salt,
        amount=str(transfer.amount),
        hash_hex=transfer.hash_bytes.hex(),
        num_transfers=transfer.num_transfers,
    )


# Include the router in the app (after all routes are defined)
app.include_router(router, prefix="/api")
