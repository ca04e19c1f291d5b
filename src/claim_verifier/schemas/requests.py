from typing import Optional
from pydantic import BaseModel, Field, field_validator

class ClaimRequest(BaseModel):
    claim: str
    # Interpolated into the encyclopedia host name, so keep it to a bare ISO-639 code.
    language: Optional[str] = Field(None, pattern=r"^[a-z]{2,3}$")

    @field_validator("claim")
    @classmethod
    def claim_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("No claim provided")
        return value
