"""Chain infrastructure for strmly_bot."""

from strmly_bot.infra.chain.rpc_submitter import JsonRpcChainSubmitter, encode_donate_call

__all__ = ["JsonRpcChainSubmitter", "encode_donate_call"]
