"""Fake chain layer and stream directory for testing."""

import asyncio
from dataclasses import dataclass

from strmly_bot.errors import DispatchRejected


@dataclass(frozen=True)
class SubmittedTx:
    donor_address: str
    recipient_address: str
    message: str
    value_smallest_unit: int
    tx_hash: str


class RecordingChainSubmitter:
    """Records submissions and returns sequential transaction hashes."""

    config_class = None

    def __init__(
        self,
        reject_with: str | None = None,
        delay_seconds: float = 0.0,
        receipt_status: bool | None = True,
    ) -> None:
        self.submissions: list[SubmittedTx] = []
        self.receipt_checks = 0
        self._reject_with = reject_with
        self._delay = delay_seconds
        self._receipt_status = receipt_status

    @classmethod
    async def from_dict(cls, config: dict) -> "RecordingChainSubmitter":
        return cls(**config)

    async def submit(
        self,
        donor_address: str,
        recipient_address: str,
        message: str,
        value_smallest_unit: int,
    ) -> str:
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._reject_with is not None:
            raise DispatchRejected(self._reject_with)
        tx_hash = "0x" + f"{len(self.submissions) + 1:064x}"
        self.submissions.append(
            SubmittedTx(donor_address, recipient_address, message, value_smallest_unit, tx_hash)
        )
        return tx_hash

    async def get_receipt_status(self, tx_hash: str) -> bool | None:
        self.receipt_checks += 1
        return self._receipt_status


class StaticDirectory:
    """Stream directory backed by a dict."""

    config_class = None

    def __init__(
        self,
        owners: dict[str, str] | None = None,
        delay_seconds: float = 0.0,
    ) -> None:
        self.owners = owners or {}
        self.lookups: list[str] = []
        self._delay = delay_seconds

    @classmethod
    async def from_dict(cls, config: dict) -> "StaticDirectory":
        return cls(config.get("owners"))

    async def lookup_owner(self, stream_id: str) -> str | None:
        self.lookups.append(stream_id)
        if self._delay:
            await asyncio.sleep(self._delay)
        return self.owners.get(stream_id)
