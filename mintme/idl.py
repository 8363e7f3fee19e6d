"""
Interface Descriptor (IDL) Loading

Resolves the MintMe program's IDL from, in order:
1. an Idl instance or a dict, used as-is
2. a path to a local JSON file
3. an http(s) URL, fetched with httpx
4. nothing at all: the configured default path if the file exists, otherwise
   the embedded descriptor below

Parse failures and HTTP error statuses raise DescriptorLoadError. Transport
errors from httpx propagate unchanged. Nothing is retried.
"""
import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import httpx
from pydantic import ValidationError

from mintme import config
from mintme.errors import DescriptorLoadError
from mintme.schemas import Idl
from mintme.utils import logger

IdlSource = Union[Idl, Dict[str, Any], str, None]

# Minimal descriptor covering exactly the instructions this client calls.
EMBEDDED_IDL: Dict[str, Any] = {
    "version": "0.1.0",
    "name": "token_creator",
    "instructions": [
        {
            "name": "createToken",
            "accounts": [
                {"name": "payer", "isMut": True, "isSigner": True},
                {"name": "config", "isMut": True, "isSigner": False},
                {"name": "mint", "isMut": True, "isSigner": False},
                {"name": "tokenAccount", "isMut": True, "isSigner": False},
                {"name": "metadata", "isMut": True, "isSigner": False},
                {"name": "tokenPda", "isMut": True, "isSigner": False},
                {"name": "tokenProgram", "isMut": False, "isSigner": False},
                {"name": "metadataProgram", "isMut": False, "isSigner": False},
                {"name": "systemProgram", "isMut": False, "isSigner": False},
                {"name": "partnerWallet", "isMut": True, "isSigner": False},
                {"name": "rent", "isMut": False, "isSigner": False},
                {"name": "associatedTokenProgram", "isMut": False, "isSigner": False},
            ],
            "args": [
                {"name": "name", "type": "string"},
                {"name": "symbol", "type": "string"},
                {"name": "uniqueKey", "type": "string"},
                {"name": "decimals", "type": "u8"},
                {"name": "initialSupply", "type": "u64"},
                {"name": "uri", "type": "string"},
                {"name": "revokeMint", "type": "bool"},
                {"name": "revokeFreeze", "type": "bool"},
                {"name": "partnerWallet", "type": "publicKey"},
                {"name": "partnerAmount", "type": "u64"},
            ],
        },
        {
            "name": "revokeAuthority",
            "accounts": [
                {"name": "payer", "isMut": True, "isSigner": True},
                {"name": "mint", "isMut": True, "isSigner": False},
                {"name": "tokenProgram", "isMut": False, "isSigner": False},
                {"name": "systemProgram", "isMut": False, "isSigner": False},
                {"name": "tokenPda", "isMut": True, "isSigner": False},
                {"name": "config", "isMut": False, "isSigner": False},
            ],
            "args": [
                {"name": "name", "type": "string"},
                {"name": "uniqueKey", "type": "string"},
                {"name": "revokeMint", "type": "bool"},
                {"name": "revokeFreeze", "type": "bool"},
            ],
        },
    ],
    "errors": [
        {"code": 6000, "name": "NoFreezeAuthority", "msg": "The mint has no freeze authority"},
        {"code": 6001, "name": "NoMintAuthority", "msg": "The mint has no mint authority"},
        {"code": 6002, "name": "InsufficientFunds", "msg": "Insufficient funds to pay the protocol fee"},
        {"code": 6003, "name": "InvalidPda", "msg": "A provided account does not match the expected program address"},
        {"code": 6004, "name": "InvalidReceiver", "msg": "The fee receiver account is invalid"},
        {"code": 6005, "name": "Unauthorized", "msg": "The signer is not allowed to perform this operation"},
    ],
}


def parse_idl(data: Any, origin: str = "object") -> Idl:
    """Validates raw IDL data (a dict or a JSON string)."""
    try:
        if isinstance(data, (str, bytes)):
            data = json.loads(data)
        return Idl.model_validate(data)
    except json.JSONDecodeError as e:
        raise DescriptorLoadError(f"IDL from {origin} is not valid JSON: {e}")
    except ValidationError as e:
        raise DescriptorLoadError(f"IDL from {origin} does not match the expected schema: {e}")


def load_idl_file(path: Union[str, Path]) -> Idl:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DescriptorLoadError(f"Error reading IDL file {path}: {e}")
    logger.debug(f"Loaded IDL from file {path}")
    return parse_idl(text, origin=str(path))


async def fetch_idl(url: str, client: Optional[httpx.AsyncClient] = None) -> Idl:
    """Fetches an IDL over HTTP."""
    if client is None:
        async with httpx.AsyncClient(timeout=httpx.Timeout(10.0, connect=5.0)) as own_client:
            return await fetch_idl(url, own_client)

    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.error(f"HTTP error loading IDL from {url}: {e.response.status_code}")
        raise DescriptorLoadError(f"Error loading IDL: HTTP {e.response.status_code}")
    logger.debug(f"Fetched IDL from {url}")
    return parse_idl(response.text, origin=url)


def embedded_idl() -> Idl:
    return Idl.model_validate(EMBEDDED_IDL)


async def load_idl(
    source: IdlSource = None,
    client: Optional[httpx.AsyncClient] = None,
    default_path: Optional[str] = None,
) -> Idl:
    """
    Loads the program IDL.

    Args:
        source: An Idl, a dict, a file path, an http(s) URL, or None.
        client: Optional httpx client used for URL sources.
        default_path: Local file tried when *source* is None; defaults to
            config.DEFAULT_IDL_PATH.

    Returns:
        The parsed Idl.

    Raises:
        DescriptorLoadError: If the source cannot be read or parsed.
        httpx.TransportError: If fetching a URL fails in transit.
    """
    if isinstance(source, Idl):
        return source
    if isinstance(source, dict):
        return parse_idl(source)

    if source is None:
        path = Path(default_path or config.DEFAULT_IDL_PATH)
        if path.is_file():
            return load_idl_file(path)
        logger.debug(f"No IDL file at {path}, using the embedded IDL")
        return embedded_idl()

    if isinstance(source, str):
        if source.startswith(("http://", "https://")):
            return await fetch_idl(source, client)
        if Path(source).is_file():
            return load_idl_file(source)
        raise DescriptorLoadError(f"IDL source '{source}' is neither an existing file nor an http(s) URL")

    raise DescriptorLoadError(f"Invalid IDL source type: {type(source).__name__}")
