import pytest
from dotenv import load_dotenv
from solders.hash import Hash
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature

from mintme.coder import decode_instruction
from mintme.constants import LAMPORTS_PER_SOL
from mintme.idl import embedded_idl


class FakeConnection:
    """
    Stands in for mintme.solana_utils.Connection.

    Captures every submitted transaction so tests can decode the accounts and
    arguments the program would have received.
    """

    def __init__(self, balance=10 * LAMPORTS_PER_SOL, fee=5000, send_error=None, confirm_error=None):
        self.balance = balance
        self.fee = fee
        self.send_error = send_error
        self.confirm_error = confirm_error
        self.sent = []
        self.calls = []

    async def get_balance(self, pubkey):
        self.calls.append("getBalance")
        return self.balance

    async def get_latest_blockhash(self):
        self.calls.append("getLatestBlockhash")
        return Hash.default()

    async def get_fee_for_message(self, message):
        self.calls.append("getFeeForMessage")
        return self.fee

    async def send_transaction(self, transaction):
        self.calls.append("sendTransaction")
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(transaction)
        return transaction.signatures[0]

    async def confirm_transaction(self, signature):
        self.calls.append("getSignatureStatuses")
        if self.confirm_error is not None:
            raise self.confirm_error

    async def aclose(self):
        pass

    def received(self, index=-1):
        """Returns (instruction name, [account keys in order], args) of a sent transaction."""
        message = self.sent[index].message
        instruction = message.instructions[0]
        keys = [message.account_keys[i] for i in instruction.accounts]
        name, args = decode_instruction(embedded_idl(), bytes(instruction.data))
        return name, keys, args


@pytest.fixture(scope="session", autouse=True)
def load_test_env():
    load_dotenv()


@pytest.fixture
def payer():
    return Keypair.from_seed(bytes([7] * 32))


@pytest.fixture
def program_id():
    return Pubkey.from_string("4eujMtc4dqftZ2ZZQbH4RAMK7mjf9DGpRMpWhLxYr7hB")


@pytest.fixture
def fake_connection():
    return FakeConnection()


@pytest.fixture
def make_connection():
    return FakeConnection


@pytest.fixture
def signature():
    return str(Signature.default())
