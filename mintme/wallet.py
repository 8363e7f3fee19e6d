"""
Wallet handling.

A payer is resolved once, at the operation boundary, into one of two
identities:
- KeypairIdentity: a local solders Keypair that signs in-process
- ExternalSigner: a public key plus a signing callback (hardware wallet,
  browser bridge, remote signer); the callback may be sync or async

Nothing below the builders inspects the raw payer object again.
"""
import inspect
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Union

from solders.hash import Hash as Blockhash
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from mintme.errors import WalletLoadError
from mintme.utils import logger

SignFn = Callable[[Transaction], Union[Transaction, Awaitable[Transaction]]]


@dataclass(frozen=True)
class KeypairIdentity:
    keypair: Keypair

    @property
    def public_key(self) -> Pubkey:
        return self.keypair.pubkey()


@dataclass(frozen=True)
class ExternalSigner:
    public_key: Pubkey
    sign_transaction: SignFn


Identity = Union[KeypairIdentity, ExternalSigner]


def verify_wallet_file(wallet_path: Union[str, Path]) -> bool:
    """Returns True if the wallet file exists."""
    return Path(wallet_path).expanduser().is_file()


def load_wallet_from_file(wallet_path: Union[str, Path]) -> Keypair:
    """
    Loads a keypair from a Solana CLI wallet file (a JSON array of 64 bytes).

    Raises:
        WalletLoadError: If the file is missing or does not hold a keypair.
    """
    path = Path(wallet_path).expanduser()
    if not path.is_file():
        raise WalletLoadError(f"Wallet file not found at {path}")
    try:
        secret = json.loads(path.read_text(encoding="utf-8"))
        keypair = Keypair.from_bytes(bytes(secret))
    except (OSError, ValueError, TypeError) as e:
        raise WalletLoadError(f"Error loading wallet from {path}: {e}")
    logger.debug(f"Loaded wallet {keypair.pubkey()} from {path}")
    return keypair


def resolve_identity(payer: Any) -> Identity:
    """
    Turns a payer into an Identity.

    Accepts an Identity, a Keypair, a path to a wallet file, or any object
    exposing a public key (`public_key` or `pubkey`, attribute or method) and
    a `sign_transaction` callable.

    Raises:
        WalletLoadError: If the payer is missing or of an unsupported kind.
    """
    if payer is None:
        raise WalletLoadError("A payer (wallet or keypair) is required")
    if isinstance(payer, (KeypairIdentity, ExternalSigner)):
        return payer
    if isinstance(payer, Keypair):
        return KeypairIdentity(payer)
    if isinstance(payer, (str, Path)):
        return KeypairIdentity(load_wallet_from_file(payer))

    public_key = getattr(payer, "public_key", None) or getattr(payer, "pubkey", None)
    if callable(public_key):
        public_key = public_key()
    sign = getattr(payer, "sign_transaction", None)
    if isinstance(public_key, Pubkey) and callable(sign):
        return ExternalSigner(public_key, sign)
    raise WalletLoadError(f"Unsupported wallet format: {type(payer).__name__}")


async def sign_message(identity: Identity, message: Message, blockhash: Blockhash) -> Transaction:
    """Returns a transaction for *message* signed by *identity*."""
    if isinstance(identity, KeypairIdentity):
        return Transaction([identity.keypair], message, blockhash)
    signed = identity.sign_transaction(Transaction.new_unsigned(message))
    if inspect.isawaitable(signed):
        signed = await signed
    return signed
