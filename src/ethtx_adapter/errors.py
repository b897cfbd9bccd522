"""Error types raised by the adapter components and the node-backed ledger."""

from __future__ import annotations


class EthTxError(Exception):
    """Base class for every error the adapter turns into an errored run."""


class EncodingError(EthTxError):
    """The run result cannot be transcoded under the configured data format."""


class SubmissionError(EthTxError):
    """The ledger refused or failed to create the transaction.

    ``retryable`` tells the submitter whether the next poll may try again.
    Unknown failures are assumed transient.
    """

    def __init__(self, message: str, retryable: bool = True) -> None:
        super().__init__(message)
        self.retryable = retryable


class TxLookupError(EthTxError):
    """A previously submitted transaction could not be found by hash."""


class MissingReceiptError(EthTxError):
    """The ledger reports the transaction confirmed but holds no receipt."""

    def __init__(self, message: str = "missing receipt for transaction") -> None:
        super().__init__(message)


class TransactionFailedError(EthTxError):
    """The ledger gave up on the transaction. Terminal, never retried."""

    def __init__(self, message: str = "transaction never succeeded") -> None:
        super().__init__(message)


class RpcError(EthTxError):
    """JSON-RPC error object returned by the Ethereum node."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"rpc error {code}: {message}")
        self.code = code
        self.rpc_message = message
