"""JSON-RPC chain submitter for strmly_bot.

Sends donation transactions to an EVM node over JSON-RPC with aiohttp.
Each donation is sent from the donor's own account with
eth_sendTransaction and signed node-side; the node must manage that account.
"""

import itertools
from typing import Any, Self

import aiohttp

from strmly_bot.config import ChainSettings
from strmly_bot.errors import DispatchRejected
from strmly_bot.interfaces.chain import ChainSubmitterInterface
from strmly_bot.logging import get_logger
from strmly_bot.models.chat import is_account_address

__all__ = [
    "JsonRpcChainSubmitter",
    "JsonRpcError",
    "encode_donate_call",
]

logger = get_logger(__name__)

_WORD = 32


class JsonRpcError(Exception):
    """Error object returned by the node."""

    def __init__(self, code: int | None, message: str) -> None:
        super().__init__(f"{message} (code {code})" if code is not None else message)
        self.code = code
        self.message = message


def _pad_word(data: bytes) -> bytes:
    remainder = len(data) % _WORD
    return data + b"\x00" * ((_WORD - remainder) % _WORD)


def encode_donate_call(selector: str, recipient_address: str, message: str) -> str:
    """ABI-encode a call to donate(address,string).

    Args:
        selector: 4-byte function selector as hex (with or without 0x)
        recipient_address: 0x-prefixed 20-byte address
        message: UTF-8 message argument

    Returns:
        0x-prefixed calldata
    """
    selector_bytes = bytes.fromhex(selector.removeprefix("0x"))
    if len(selector_bytes) != 4:
        raise ValueError(f"selector must be 4 bytes, got {len(selector_bytes)}")
    if not is_account_address(recipient_address):
        raise ValueError(f"malformed recipient address: {recipient_address!r}")

    encoded_message = message.encode("utf-8")
    head = (
        bytes.fromhex(recipient_address[2:]).rjust(_WORD, b"\x00")
        # string is dynamic: head holds the offset of its tail (after two head words)
        + (2 * _WORD).to_bytes(_WORD, "big")
    )
    tail = len(encoded_message).to_bytes(_WORD, "big") + _pad_word(encoded_message)
    return "0x" + (selector_bytes + head + tail).hex()


class JsonRpcChainSubmitter(ChainSubmitterInterface):
    """ChainSubmitterInterface over EVM JSON-RPC.

    Example:
        async with JsonRpcChainSubmitter(settings) as chain:
            tx_hash = await chain.submit("0xAAA...", "0xBBB...", "nice stream", 10**17)
    """

    config_class = ChainSettings

    def __init__(self, settings: ChainSettings) -> None:
        """Initialize submitter.

        Args:
            settings: Chain settings; contract_address and donate_selector
                are required
        """
        missing = [
            name
            for name in ("contract_address", "donate_selector")
            if not getattr(settings, name)
        ]
        if missing:
            raise ValueError(f"chain settings missing: {', '.join(missing)}")

        self._settings = settings
        self._rpc_url = settings.rpc_url
        self._contract = settings.contract_address
        self._signers = {address.lower() for address in settings.signer_addresses}
        self._selector = settings.donate_selector
        self._timeout = aiohttp.ClientTimeout(total=settings.request_timeout_seconds)
        self._ids = itertools.count(1)
        self._session: aiohttp.ClientSession | None = None

    @classmethod
    async def from_config(cls, config: ChainSettings) -> Self:
        """Factory method for StrmlyBot instantiation."""
        return cls(config)

    @classmethod
    async def from_dict(cls, config: dict[str, Any]) -> Self:
        """Factory method for custom config dict."""
        return cls(ChainSettings(**config))

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _call(self, method: str, params: list[Any]) -> Any:
        """Perform one JSON-RPC call and return its result.

        Raises:
            JsonRpcError: If the node answers with an error object
            aiohttp.ClientError: On transport failure
        """
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        session = await self._get_session()
        async with session.post(self._rpc_url, json=payload) as resp:
            if resp.status != 200:
                body = await resp.text()
                raise JsonRpcError(None, f"HTTP {resp.status}: {body[:200]}")
            data = await resp.json(content_type=None)

        error = data.get("error")
        if error:
            raise JsonRpcError(error.get("code"), error.get("message", "unknown error"))
        return data.get("result")

    def can_sign_for(self, address: str) -> bool:
        """Check whether a donor may be used as the transaction sender."""
        if not is_account_address(address):
            return False
        return not self._signers or address.lower() in self._signers

    async def submit(
        self,
        donor_address: str,
        recipient_address: str,
        message: str,
        value_smallest_unit: int,
    ) -> str:
        """Send donate(recipient, message) from the donor with value attached."""
        if not self.can_sign_for(donor_address):
            logger.warning("chain_donor_not_signable", donor=donor_address)
            raise DispatchRejected(f"cannot send from donor account {donor_address}")

        tx = {
            "from": donor_address,
            "to": self._contract,
            "value": hex(value_smallest_unit),
            "data": encode_donate_call(self._selector, recipient_address, message),  # type: ignore[arg-type]
        }
        try:
            tx_hash = await self._call("eth_sendTransaction", [tx])
        except (JsonRpcError, aiohttp.ClientError) as e:
            logger.error(
                "chain_submission_rejected",
                donor=donor_address,
                recipient=recipient_address,
                error=str(e),
            )
            raise DispatchRejected(str(e)) from e

        if not isinstance(tx_hash, str):
            raise DispatchRejected(f"node returned no transaction hash: {tx_hash!r}")
        return tx_hash

    async def get_receipt_status(self, tx_hash: str) -> bool | None:
        """Read the receipt status (None while pending)."""
        receipt = await self._call("eth_getTransactionReceipt", [tx_hash])
        if not receipt:
            return None
        return int(receipt.get("status", "0x0"), 16) == 1
