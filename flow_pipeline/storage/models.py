from pydantic import BaseModel, ConfigDict, Field, field_validator


class _LedgerRow(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TransferRow(_LedgerRow):
    chain_id: int = Field(alias="chainId")
    block_timestamp: int = Field(alias="blockTimestamp")
    from_address: str = Field(alias="from")
    to_address: str = Field(alias="to")
    value: int = Field(ge=0)

    @field_validator("from_address", "to_address")
    @classmethod
    def _lowercase(cls, v: str) -> str:
        return v.lower()


class AccountRow(_LedgerRow):
    address: str
    chain_id: int = Field(alias="chainId")
    balance: int
    transfer_count: int = Field(default=0, alias="transferCount")

    @field_validator("address")
    @classmethod
    def _lowercase(cls, v: str) -> str:
        return v.lower()
