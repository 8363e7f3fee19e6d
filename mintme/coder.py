"""
Anchor instruction coder.

Turns an IDL instruction plus named account and argument values into a solders
Instruction: an 8-byte discriminator, the Borsh-encoded arguments in IDL order,
and the account metas in the exact order the IDL lists them.
"""
import hashlib
import re
from typing import Any, Dict, Mapping, Tuple

from construct import Bytes, ConstructError, Flag, Int8ul, Int16ul, Int32ul, Int64sl, Int64ul, PascalString, Struct
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from mintme.errors import DescriptorLoadError, InputValidationError
from mintme.schemas import Idl, IdlInstruction

DISCRIMINATOR_SIZE = 8

_PUBKEY = Bytes(32)

BORSH_TYPES = {
    "bool": Flag,
    "u8": Int8ul,
    "u16": Int16ul,
    "u32": Int32ul,
    "u64": Int64ul,
    "i64": Int64sl,
    "string": PascalString(Int32ul, "utf8"),
    "publicKey": _PUBKEY,
    "pubkey": _PUBKEY,
    "address": _PUBKEY,
}

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def snake_case(name: str) -> str:
    return _CAMEL_RE.sub("_", name).lower()


def _key(name: str) -> str:
    return name.replace("_", "").lower()


def instruction_discriminator(ix: IdlInstruction) -> bytes:
    """sha256("global:<snake_name>")[:8], unless the IDL states the discriminator."""
    if ix.discriminator:
        return bytes(ix.discriminator)
    return hashlib.sha256(f"global:{snake_case(ix.name)}".encode()).digest()[:DISCRIMINATOR_SIZE]


def _args_layout(ix: IdlInstruction) -> Struct:
    fields = []
    for arg in ix.args:
        if not isinstance(arg.type, str) or arg.type not in BORSH_TYPES:
            raise DescriptorLoadError(f"Unsupported type {arg.type!r} for argument '{arg.name}' of {ix.name}")
        fields.append(arg.name / BORSH_TYPES[arg.type])
    return Struct(*fields)


def _lookup(values: Mapping[str, Any], name: str, what: str, ix_name: str) -> Any:
    by_key = {_key(k): v for k, v in values.items()}
    try:
        return by_key[_key(name)]
    except KeyError:
        raise DescriptorLoadError(f"Instruction {ix_name} requires {what} '{name}', which this client does not provide")


def encode_instruction_args(ix: IdlInstruction, args: Mapping[str, Any]) -> bytes:
    """Encodes discriminator + Borsh arguments for *ix*."""
    layout = _args_layout(ix)
    values = {}
    for arg in ix.args:
        value = _lookup(args, arg.name, "argument", ix.name)
        if isinstance(value, Pubkey):
            value = bytes(value)
        values[arg.name] = value
    try:
        encoded = layout.build(values)
    except ConstructError as e:
        raise InputValidationError([f"Argument out of range for {ix.name}: {e}"])
    return instruction_discriminator(ix) + encoded


def account_metas(ix: IdlInstruction, accounts: Mapping[str, Pubkey]) -> list:
    return [
        AccountMeta(
            pubkey=_lookup(accounts, item.name, "account", ix.name),
            is_signer=item.is_signer,
            is_writable=item.is_mut,
        )
        for item in ix.accounts
    ]


def build_instruction(
    idl: Idl,
    name: str,
    program_id: Pubkey,
    accounts: Mapping[str, Pubkey],
    args: Mapping[str, Any],
) -> Instruction:
    """
    Builds the *name* instruction described by *idl*.

    Accounts and arguments are looked up by their IDL names (camelCase and
    snake_case spellings are equivalent) and laid out in IDL order.

    Raises:
        DescriptorLoadError: If the IDL lacks the instruction, or names an
            account, argument or type this client cannot supply.
        InputValidationError: If an argument does not fit its declared type.
    """
    ix = idl.get_instruction(name)
    if ix is None:
        raise DescriptorLoadError(f"IDL '{idl.name}' has no instruction named '{name}'")
    data = encode_instruction_args(ix, args)
    return Instruction(program_id, data, account_metas(ix, accounts))


def decode_instruction(idl: Idl, data: bytes) -> Tuple[str, Dict[str, Any]]:
    """Decodes instruction data back to (instruction name, arguments)."""
    prefix = bytes(data[:DISCRIMINATOR_SIZE])
    for ix in idl.instructions:
        if instruction_discriminator(ix) != prefix:
            continue
        parsed = _args_layout(ix).parse(bytes(data[DISCRIMINATOR_SIZE:]))
        args = {}
        for arg in ix.args:
            value = parsed[arg.name]
            if BORSH_TYPES[arg.type] is _PUBKEY:
                value = Pubkey.from_bytes(value)
            args[arg.name] = value
        return ix.name, args
    raise DescriptorLoadError(f"No instruction in IDL '{idl.name}' matches discriminator {prefix.hex()}")
