"""Bank directory schemas."""

from pydantic import BaseModel

from hopeshare.schemas.common import PageRequest


class BankSearchRequest(PageRequest):
    search: str | None = None


class BankResponse(BaseModel):
    code: str
    name: str
    full_name: str

    model_config = {"from_attributes": True}
