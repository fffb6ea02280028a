"""HTTP wire models for the donation extraction endpoint.

Field names match the JSON contract used by the web client:
request ``{"chatMessage": str}``, response
``{"status": "success"|"failed", "result"?: {...}, "message"?: str}``.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "ExtractionRequest",
    "ExtractionResponse",
    "ExtractionResultBody",
]


class ExtractionRequest(BaseModel):
    """Body of a donation extraction request."""

    model_config = ConfigDict(populate_by_name=True)

    chat_message: str = Field(alias="chatMessage")


class ExtractionResultBody(BaseModel):
    """Extracted donation, amount as a JSON number in whole ETH."""

    amount: float
    message: str


class ExtractionResponse(BaseModel):
    """Response of a donation extraction request."""

    status: Literal["success", "failed"]
    result: ExtractionResultBody | None = None
    message: str | None = None

    @classmethod
    def success(cls, amount: float, message: str) -> "ExtractionResponse":
        return cls(status="success", result=ExtractionResultBody(amount=amount, message=message))

    @classmethod
    def failed(cls, message: str) -> "ExtractionResponse":
        return cls(status="failed", message=message)
