"""
Pydantic schemas for chart-of-accounts operations.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from bookkeeping.models.enums import AccountType


class AccountCreate(BaseModel):
    """
    Request to register a new account.

    account_type is taken as a plain string so that an unknown
    category surfaces as InvalidAccountType from the service,
    not as a generic schema error.
    """
    code: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=100)
    account_type: str = Field(min_length=1, max_length=20)
    parent_id: int | None = None

    @field_validator("code", "name")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class AccountRename(BaseModel):
    name: str = Field(min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class AccountResponse(BaseModel):
    id: int
    code: str
    name: str
    account_type: AccountType
    parent_id: int | None
    balance: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
