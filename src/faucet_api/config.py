from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FAUCET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Amount sent per transfer, in yocto units (100 tokens)
    transfer_amount: int = 100 * 10**24

    # Proof of Work
    min_difficulty: int = 20  # ~1M hashes on average

    # Accounts the demo ledger knows about
    accounts: list[str] | str = ["alice", "bob", "test.alice", "eugenethedream"]

    @field_validator("accounts", mode="before")
    @classmethod
    def parse_accounts(cls, v):
        """Parse accounts from a comma-separated string or list."""
        if isinstance(v, str):
            return [account.strip() for account in v.split(",") if account.strip()]
        return v


settings = Settings()
