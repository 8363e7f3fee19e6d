from unittest.mock import MagicMock

import pytest

from mintme.authority import (
    revoke_authority,
    revoke_authority_simple,
    revoke_freeze_authority_simple,
    revoke_mint_authority_simple,
)
from mintme.constants import SYSTEM_PROGRAM_ID, TOKEN_PROGRAM_ID
from mintme.errors import InputValidationError, InsufficientBalanceError, RemoteProgramError
from mintme.pda import derive_mint_address, derive_payment_address, derive_revoke_fee_config_address
from mintme.schemas import OperationState


@pytest.mark.asyncio
async def test_revoke_requires_an_authority(payer, fake_connection):
    with pytest.raises(InputValidationError, match="No authority specified"):
        await revoke_authority(fake_connection, payer, "MINTME", "VERSION_1")
    assert fake_connection.calls == []


@pytest.mark.asyncio
async def test_revoke_accounts_and_args(payer, program_id, fake_connection):
    result = await revoke_authority(
        fake_connection,
        payer,
        "MINTME",
        "VERSION_1",
        revoke_mint=True,
        revoke_freeze=True,
        program_id=program_id,
        logger=MagicMock(),
    )

    assert result.success
    assert result.state == OperationState.confirmed
    mint = derive_mint_address(program_id, payer.pubkey(), "MINTME", "VERSION_1").address
    assert result.mint == str(mint)

    name, keys, args = fake_connection.received()
    assert name == "revokeAuthority"
    assert keys == [
        payer.pubkey(),
        mint,
        TOKEN_PROGRAM_ID,
        SYSTEM_PROGRAM_ID,
        derive_payment_address(program_id).address,
        derive_revoke_fee_config_address(program_id).address,
    ]
    assert args == {"name": "MINTME", "uniqueKey": "VERSION_1", "revokeMint": True, "revokeFreeze": True}


@pytest.mark.asyncio
async def test_low_balance_raises_before_sending(payer, program_id, make_connection):
    conn = make_connection(balance=10_000_000, fee=5_000)
    with pytest.raises(InsufficientBalanceError) as excinfo:
        await revoke_authority(
            conn, payer, "MINTME", "VERSION_1", revoke_mint=True, program_id=program_id, logger=MagicMock()
        )
    assert excinfo.value.required == 10_005_000
    assert excinfo.value.balance == 10_000_000
    assert "sendTransaction" not in conn.calls


@pytest.mark.asyncio
async def test_revoke_fee_can_be_overridden(payer, program_id, make_connection):
    conn = make_connection(balance=10_000, fee=5_000)
    result = await revoke_authority(
        conn,
        payer,
        "MINTME",
        "VERSION_1",
        revoke_freeze=True,
        program_id=program_id,
        revoke_fee_lamports=0,
        logger=MagicMock(),
    )
    assert result.success


@pytest.mark.asyncio
async def test_revoke_program_error(payer, program_id, make_connection):
    conn = make_connection(send_error=RemoteProgramError("simulation failed", code=6001))
    result = await revoke_authority(
        conn, payer, "MINTME", "VERSION_1", revoke_mint=True, program_id=program_id, logger=MagicMock()
    )
    assert not result.success
    assert result.error_name == "NoMintAuthority"


@pytest.mark.asyncio
async def test_revoke_simple_variants(payer, program_id, make_connection):
    conn = make_connection()
    result = await revoke_mint_authority_simple(
        wallet=payer, connection=conn, program_id=program_id, unique_key="VERSION_1", logger=MagicMock()
    )
    assert result.success
    _, _, args = conn.received()
    assert (args["revokeMint"], args["revokeFreeze"]) == (True, False)
    assert args["name"] == "MINTME.DEV"

    result = await revoke_freeze_authority_simple(
        {"token_name": "MINTME"}, wallet=payer, connection=conn, program_id=program_id, logger=MagicMock()
    )
    assert result.success
    _, _, args = conn.received()
    assert (args["revokeMint"], args["revokeFreeze"]) == (False, True)
    assert args["uniqueKey"] == "mintme.dev"


@pytest.mark.asyncio
async def test_revoke_simple_returns_errors_instead_of_raising(payer, fake_connection):
    result = await revoke_authority_simple(wallet=payer, connection=fake_connection, logger=MagicMock())
    assert not result.success
    assert "No authority specified" in result.error
    assert fake_connection.calls == []


@pytest.mark.asyncio
async def test_revoke_simple_reports_mistyped_unique_key(payer, fake_connection):
    result = await revoke_mint_authority_simple(wallet=payer, connection=fake_connection, unique_key=5, logger=MagicMock())
    assert not result.success
    assert result.details["type"] == "AddressDerivationError"
    assert fake_connection.calls == []


@pytest.mark.asyncio
async def test_revoke_with_empty_unique_key_targets_default_mint(payer, program_id, fake_connection):
    result = await revoke_authority(
        fake_connection, payer, "MINTME", "", revoke_mint=True, program_id=program_id, logger=MagicMock()
    )
    assert result.mint == str(derive_mint_address(program_id, payer.pubkey(), "MINTME", "mintme.dev").address)
