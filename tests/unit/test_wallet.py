import json
from unittest.mock import MagicMock

import pytest
from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.transaction import Transaction

from mintme.errors import WalletLoadError
from mintme.wallet import (
    ExternalSigner,
    KeypairIdentity,
    load_wallet_from_file,
    resolve_identity,
    sign_message,
    verify_wallet_file,
)


def write_wallet(path, keypair):
    path.write_text(json.dumps(list(bytes(keypair))))
    return path


def memo_message(payer):
    ix = Instruction(Keypair().pubkey(), b"hello", [])
    return Message.new_with_blockhash([ix], payer, Hash.default())


def test_load_wallet_from_file(tmp_path, payer):
    path = write_wallet(tmp_path / "wallet.json", payer)
    assert verify_wallet_file(path)
    assert load_wallet_from_file(path).pubkey() == payer.pubkey()


def test_missing_wallet_file(tmp_path):
    assert not verify_wallet_file(tmp_path / "nope.json")
    with pytest.raises(WalletLoadError, match="not found"):
        load_wallet_from_file(tmp_path / "nope.json")


def test_corrupt_wallet_file(tmp_path):
    path = tmp_path / "wallet.json"
    path.write_text("[1, 2, 3]")
    with pytest.raises(WalletLoadError):
        load_wallet_from_file(path)


def test_resolve_identity_variants(tmp_path, payer):
    identity = resolve_identity(payer)
    assert isinstance(identity, KeypairIdentity)
    assert identity.public_key == payer.pubkey()
    assert resolve_identity(str(write_wallet(tmp_path / "w.json", payer))).public_key == payer.pubkey()

    adapter = MagicMock(spec=["public_key", "sign_transaction"])
    adapter.public_key = payer.pubkey()
    identity = resolve_identity(adapter)
    assert isinstance(identity, ExternalSigner)
    assert identity.public_key == payer.pubkey()

    callable_key = MagicMock(spec=["pubkey", "sign_transaction"])
    callable_key.pubkey.return_value = payer.pubkey()
    assert resolve_identity(callable_key).public_key == payer.pubkey()


@pytest.mark.parametrize("bad", [None, 42, object()])
def test_resolve_identity_rejects_unknown_wallets(bad):
    with pytest.raises(WalletLoadError):
        resolve_identity(bad)


@pytest.mark.asyncio
async def test_keypair_identity_signs(payer):
    message = memo_message(payer.pubkey())
    tx = await sign_message(KeypairIdentity(payer), message, Hash.default())
    tx.verify()
    assert tx.message == message


@pytest.mark.asyncio
async def test_external_signer_may_be_async(payer):
    async def sign(tx: Transaction) -> Transaction:
        tx.sign([payer], tx.message.recent_blockhash)
        return tx

    tx = await sign_message(ExternalSigner(payer.pubkey(), sign), memo_message(payer.pubkey()), Hash.default())
    tx.verify()
