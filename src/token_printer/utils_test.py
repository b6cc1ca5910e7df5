from decimal import Decimal

import pytest

from token_printer.utils import (
    InvalidAccountIdError,
    brrr,
    format_tokens,
    from_yocto,
    is_valid_account_id,
    normalize_account_id,
    parse_account_id,
)


class TestAccountId:
    """Test suite for account id rules"""

    @pytest.mark.parametrize(
        "account_id",
        ["ab", "alice", "test.alice", "eugenethedream", "a-b_c.near", "0x1", "a" * 64],
    )
    def test_valid(self, account_id):
        assert is_valid_account_id(account_id)

    @pytest.mark.parametrize(
        "account_id",
        ["", "a", "a" * 65, "Alice", "alice.", ".alice", "a..b", "a-.b", "-alice", "alice_", "al ice", "al@ice"],
    )
    def test_invalid(self, account_id):
        assert not is_valid_account_id(account_id)

    def test_normalize(self):
        """Uppercase is folded and stray characters are dropped"""
        assert normalize_account_id("  Alice.NEAR ") == "alice.near"
        assert normalize_account_id("al!ce@test") == "alcetest"
        assert normalize_account_id("Bob_1-x") == "bob_1-x"

    def test_parse(self):
        assert parse_account_id("Test.Alice") == "test.alice"

    def test_parse_rejects(self):
        with pytest.raises(InvalidAccountIdError, match="Invalid account id"):
            parse_account_id("x")
        with pytest.raises(ValueError):
            parse_account_id("alice..bob")


class TestFormatting:
    """Test suite for amount formatting helpers"""

    def test_from_yocto(self):
        assert from_yocto(100 * 10**24) == 100
        assert from_yocto(10**24 // 2) == Decimal("0.5")
        assert from_yocto(0) == 0

    def test_from_yocto_keeps_every_yocto(self):
        """Large amounts are not rounded to the default decimal precision"""
        amount = 123_456 * 10**24 + 1
        assert from_yocto(amount) == Decimal("123456.000000000000000000000001")

    @pytest.mark.parametrize(
        "amount, expected",
        [
            (100 * 10**24, "100"),
            (10**24 // 2, "0.5"),
            (10**24 - 1, "0.999999999999999999999999"),
            (1, "0.000000000000000000000001"),
            (0, "0"),
        ],
    )
    def test_format_tokens(self, amount, expected):
        assert format_tokens(amount) == expected

    def test_brrr(self):
        assert brrr(0) == "B"
        assert brrr(3) == "BRRR"
        assert brrr(-2) == "B"
