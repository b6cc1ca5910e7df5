import re
from decimal import Decimal, getcontext, localcontext

MIN_ACCOUNT_ID_LEN = 2
MAX_ACCOUNT_ID_LEN = 64
ACCOUNT_ID_PATTERN = r"^(([a-z\d]+[-_])*[a-z\d]+\.)*([a-z\d]+[-_])*[a-z\d]+$"
VALID_ACCOUNT_RE = re.compile(ACCOUNT_ID_PATTERN)
INVALID_ACCOUNT_CHARS_RE = re.compile(r"[^a-z0-9\-_.]")

YOCTO_DIGITS = 24
ONE_NEAR = 10**YOCTO_DIGITS


class InvalidAccountIdError(ValueError):
    pass


def normalize_account_id(value: str) -> str:
    """Lowercase the account id and drop characters that can never appear in one."""
    return INVALID_ACCOUNT_CHARS_RE.sub("", value.strip().lower())


def is_valid_account_id(account_id: str) -> bool:
    return (
        MIN_ACCOUNT_ID_LEN <= len(account_id) <= MAX_ACCOUNT_ID_LEN
        and VALID_ACCOUNT_RE.match(account_id) is not None
    )


def parse_account_id(value: str) -> str:
    """Normalize the account id and reject it if it is still not valid."""
    account_id = normalize_account_id(value)
    if not is_valid_account_id(account_id):
        raise InvalidAccountIdError(
            f"Invalid account id {value!r}: expected {MIN_ACCOUNT_ID_LEN}-{MAX_ACCOUNT_ID_LEN} "
            "characters of a-z, 0-9, '-', '_' separated by '.'"
        )
    return account_id


def _exact(amount: int):
    # Enough digits that no yocto is rounded away.
    return localcontext(prec=max(getcontext().prec, len(str(abs(amount)))))


def from_yocto(amount: int) -> Decimal:
    """Tokens in an amount of yocto units, fraction included."""
    with _exact(amount):
        return Decimal(amount).scaleb(-YOCTO_DIGITS)


def format_tokens(amount: int) -> str:
    """Yocto amount as a plain token count: 100, 0.5, never 1E+2."""
    with _exact(amount):
        return f"{from_yocto(amount).normalize():f}"


def brrr(n: int) -> str:
    """ The printer goes B, BR, BRR, ... """
    return "B" + "R" * max(n, 0)
