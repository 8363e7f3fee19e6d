"""
Pydantic Data Models for the MintMe SDK

This module defines the data models passed between the validator, the address
deriver and the transaction builders, plus the schema of the program's
interface descriptor (IDL).

Key Components:
- SupplyUnit / OperationState: enums that keep conventions explicit
- TokenCreationRequest: caller parameters for the create-token operation
- DerivedAddress / DerivedAddressSet: program-derived addresses and bumps
- Idl and its parts: accounts, arguments and error codes of each instruction
- OperationResult: immutable outcome returned by every operation
- SimpleTokenConfig / RevokeConfig: defaults for the simple helpers

Fields checked by mintme.validation are typed as Any: pydantic stores them and
the validator reports every violation at once.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, NamedTuple, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from solders.pubkey import Pubkey

from mintme.constants import DEFAULT_URI


class SupplyUnit(str, Enum):
    """How `initial_supply` is expressed by the caller."""
    base = "base"    # smallest unit, sent unchanged
    human = "human"  # whole tokens, multiplied by 10**decimals


class OperationState(str, Enum):
    validating = "validating"
    deriving = "deriving"
    submitting = "submitting"
    confirmed = "confirmed"
    failed = "failed"


class TokenCreationRequest(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: Any = None
    symbol: Any = None
    unique_key: Optional[str] = None
    decimals: Any = 9
    initial_supply: Any = 1
    uri: Any = DEFAULT_URI
    revoke_mint: bool = False
    revoke_freeze: bool = False
    partner_wallet: Any = None
    partner_amount: Any = 0
    supply_unit: SupplyUnit = SupplyUnit.base


class FieldValidation(BaseModel):
    is_valid: bool
    message: Optional[str] = None


class SupplyValidation(FieldValidation):
    max_supply: str


class ValidationResult(BaseModel):
    is_valid: bool
    errors: List[str] = []
    max_supply: str = ""


class DerivedAddress(NamedTuple):
    address: Pubkey
    bump: int


@dataclass(frozen=True)
class DerivedAddressSet:
    mint: DerivedAddress
    payment: DerivedAddress
    token_account: DerivedAddress
    metadata: DerivedAddress
    network_fee_config: DerivedAddress
    revoke_fee_config: DerivedAddress


# --- Interface descriptor (Anchor IDL) ---

class IdlAccountItem(BaseModel):
    name: str
    is_mut: bool = Field(False, validation_alias=AliasChoices("isMut", "writable", "is_mut"))
    is_signer: bool = Field(False, validation_alias=AliasChoices("isSigner", "signer", "is_signer"))


class IdlArg(BaseModel):
    name: str
    type: Any


class IdlInstruction(BaseModel):
    name: str
    accounts: List[IdlAccountItem] = []
    args: List[IdlArg] = []
    discriminator: Optional[List[int]] = None


class IdlErrorCode(BaseModel):
    code: int
    name: str
    msg: Optional[str] = None


class Idl(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: str = "0.1.0"
    name: str = ""
    instructions: List[IdlInstruction]
    errors: List[IdlErrorCode] = []

    def get_instruction(self, name: str) -> Optional[IdlInstruction]:
        """Finds an instruction by name, matching camelCase and snake_case spellings."""
        wanted = _normalize(name)
        for ix in self.instructions:
            if _normalize(ix.name) == wanted:
                return ix
        return None

    def get_error(self, code: int) -> Optional[IdlErrorCode]:
        for err in self.errors:
            if err.code == code:
                return err
        return None


def _normalize(name: str) -> str:
    return name.replace("_", "").lower()


# --- Results ---

class OperationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    state: OperationState
    mint: Optional[str] = None
    token_account: Optional[str] = None
    metadata: Optional[str] = None
    tx_signature: Optional[str] = None
    token_name: Optional[str] = None
    token_symbol: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[int] = None
    error_name: Optional[str] = None
    details: Optional[Any] = None


# --- Simple helper configuration ---

class SimpleTokenConfig(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    token_name: Any
    token_symbol: Any
    unique_key: str
    decimals: Any
    initial_supply: Any
    uri: Any
    revoke_mint: bool = False
    revoke_freeze: bool = False
    partner_wallet: Any = None
    partner_amount: Union[int, float, str] = 0  # SOL
    wallet_path: str
    wallet: Any = None
    connection: Any
    cluster: str
    program_id: Any = None
    idl: Any = None
    logger: Optional[Callable[[str], None]] = None


class RevokeConfig(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    token_name: Any
    unique_key: str
    revoke_mint: bool = False
    revoke_freeze: bool = False
    wallet_path: str
    wallet: Any = None
    connection: Any
    cluster: str
    program_id: Any = None
    idl: Any = None
    revoke_fee_lamports: Optional[int] = None
    logger: Optional[Callable[[str], None]] = None
