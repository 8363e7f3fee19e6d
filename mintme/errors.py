"""
Custom Exception Classes for the MintMe SDK

This module defines the exception classes raised while creating tokens and
revoking token authorities through the MintMe on-chain program. They separate
caller-correctable input problems from transient network failures and from
rejections issued by the remote program itself.

Exception Categories:
- Input Errors: token parameters or wallets the caller must fix
- Derivation Errors: seeds or keys that cannot produce a program address
- Descriptor Errors: the program IDL could not be read or parsed
- Balance Errors: the payer cannot cover fees before submission
- Transaction Errors: submission, confirmation and program rejections

Usage:
    Local precondition failures are raised to the caller. Descriptor, network
    and program errors are caught at the operation boundary and returned as a
    failed OperationResult so batch callers can keep going.
"""
from typing import List, Optional


class MintmeError(Exception):
    """Base class for every error raised by the SDK."""


class InputValidationError(MintmeError):
    """Raised when token parameters violate one or more protocol rules."""

    def __init__(self, errors: List[str], max_supply: Optional[str] = None):
        self.errors = list(errors)
        self.max_supply = max_supply
        super().__init__(f"Token validation failed: {', '.join(self.errors)}")


class AddressDerivationError(MintmeError):
    """Raised when a seed is too long or a key cannot be decoded."""


class DescriptorLoadError(MintmeError):
    """Raised when the program IDL cannot be read, fetched or parsed."""


class InsufficientBalanceError(MintmeError):
    """Raised when the payer cannot cover the transaction and protocol fees."""

    def __init__(self, message: str, required: Optional[int] = None, balance: Optional[int] = None):
        self.required = required
        self.balance = balance
        super().__init__(message)


class NetworkSubmissionError(MintmeError):
    """Raised when an RPC request or transaction submission fails in transit."""


class ConfirmationTimeoutError(MintmeError):
    """Raised when a submitted transaction is not confirmed in time."""


class RemoteProgramError(MintmeError):
    """Raised when the on-chain program rejects the transaction."""

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        name: Optional[str] = None,
        logs: Optional[List[str]] = None,
    ):
        self.code = code
        self.name = name
        self.logs = logs or []
        super().__init__(message)


class WalletLoadError(MintmeError):
    """Raised when a wallet file is missing or does not hold a valid keypair."""


class ConfigurationError(MintmeError):
    """Raised when there are configuration-related errors."""


# Custom error codes emitted by the MintMe program. Descriptors that carry
# their own `errors` table take precedence over this one.
PROGRAM_ERRORS = {
    6000: ("NoFreezeAuthority", "The mint has no freeze authority"),
    6001: ("NoMintAuthority", "The mint has no mint authority"),
    6002: ("InsufficientFunds", "Insufficient funds to pay the protocol fee"),
    6003: ("InvalidPda", "A provided account does not match the expected program address"),
    6004: ("InvalidReceiver", "The fee receiver account is invalid"),
    6005: ("Unauthorized", "The signer is not allowed to perform this operation"),
}
