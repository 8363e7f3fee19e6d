import asyncio
import base64
from typing import Any, Optional

import httpx
from solders.hash import Hash as Blockhash
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction

from mintme import config
from mintme.constants import LAMPORTS_PER_SIGNATURE
from mintme.errors import ConfirmationTimeoutError, NetworkSubmissionError, RemoteProgramError
from mintme.utils import logger
from mintme.wallet import Identity, sign_message

_COMMITMENT_RANK = {"processed": 0, "confirmed": 1, "finalized": 2}


def extract_custom_error_code(err: Any) -> Optional[int]:
    """
    Returns the program's custom error code from a transaction error, if any.

    Transaction errors look like {"InstructionError": [0, {"Custom": 6000}]}.
    """
    if not isinstance(err, dict):
        return None
    instruction_error = err.get("InstructionError")
    if not isinstance(instruction_error, list) or len(instruction_error) != 2:
        return None
    detail = instruction_error[1]
    if isinstance(detail, dict) and isinstance(detail.get("Custom"), int):
        return detail["Custom"]
    return None


class Connection:
    """
    Minimal async JSON-RPC client for the calls the SDK needs.

    Wraps an httpx.AsyncClient; a client created here is closed by aclose()
    or by leaving the `async with` block.
    """

    def __init__(
        self,
        endpoint: str = config.RPC_ENDPOINT,
        commitment: str = config.COMMITMENT,
        client: Optional[httpx.AsyncClient] = None,
        confirm_timeout: float = config.CONFIRM_TIMEOUT_SECONDS,
        poll_interval: float = config.CONFIRM_POLL_INTERVAL_SECONDS,
    ):
        self.endpoint = endpoint
        self.commitment = commitment
        self.confirm_timeout = confirm_timeout
        self.poll_interval = poll_interval
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(30.0, connect=5.0),
            limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
        )
        self._request_id = 0

    async def __aenter__(self) -> "Connection":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _post(self, method: str, params: list) -> dict:
        self._request_id += 1
        try:
            response = await self._client.post(
                self.endpoint,
                json={"jsonrpc": "2.0", "id": self._request_id, "method": method, "params": params},
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error calling {method}: {e.response.status_code} - {e.response.text}")
            raise NetworkSubmissionError(f"HTTP error calling {method}: {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.error(f"Transport error calling {method}: {e}")
            raise NetworkSubmissionError(f"Transport error calling {method}: {e}")
        except ValueError as e:
            raise NetworkSubmissionError(f"Malformed response from {method}: {e}")

    async def request(self, method: str, params: list) -> Any:
        """Sends a JSON-RPC request and returns its `result`."""
        data = await self._post(method, params)
        if data.get("error"):
            raise NetworkSubmissionError(f"RPC error from {method}: {data['error']}")
        if "result" not in data:
            raise NetworkSubmissionError(f"Unexpected response format from {method}")
        return data["result"]

    async def get_balance(self, pubkey: Pubkey) -> int:
        result = await self.request("getBalance", [str(pubkey), {"commitment": self.commitment}])
        return int(result["value"])

    async def get_latest_blockhash(self) -> Blockhash:
        result = await self.request("getLatestBlockhash", [{"commitment": self.commitment}])
        return Blockhash.from_string(result["value"]["blockhash"])

    async def get_fee_for_message(self, message: Message) -> Optional[int]:
        """Fee in lamports the cluster would charge for *message*, or None if unknown."""
        encoded = base64.b64encode(bytes(message)).decode("ascii")
        result = await self.request("getFeeForMessage", [encoded, {"commitment": self.commitment}])
        value = result.get("value") if isinstance(result, dict) else None
        return int(value) if value is not None else None

    async def send_transaction(self, transaction: Transaction) -> Signature:
        """
        Submits a signed transaction with preflight at the connection commitment.

        Raises:
            RemoteProgramError: If preflight simulation reports a program error.
            NetworkSubmissionError: For transport and other RPC failures.
        """
        encoded = base64.b64encode(bytes(transaction)).decode("ascii")
        data = await self._post(
            "sendTransaction",
            [encoded, {"encoding": "base64", "skipPreflight": False, "preflightCommitment": self.commitment}],
        )
        error = data.get("error")
        if error:
            details = error.get("data") or {}
            err = details.get("err") if isinstance(details, dict) else None
            if err is not None:
                raise RemoteProgramError(
                    error.get("message", "Transaction simulation failed"),
                    code=extract_custom_error_code(err),
                    logs=details.get("logs") or [],
                )
            raise NetworkSubmissionError(f"RPC error from sendTransaction: {error}")
        signature = Signature.from_string(data["result"])
        logger.info(f"Sent transaction {signature}")
        return signature

    async def confirm_transaction(self, signature: Signature) -> None:
        """
        Polls the signature status until it reaches the connection commitment.

        Raises:
            RemoteProgramError: If the transaction failed on-chain.
            ConfirmationTimeoutError: If it is not confirmed within the timeout.
        """
        wanted = _COMMITMENT_RANK.get(self.commitment, 1)
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.confirm_timeout
        while True:
            result = await self.request(
                "getSignatureStatuses", [[str(signature)], {"searchTransactionHistory": True}]
            )
            status = result["value"][0]
            if status:
                if status.get("err") is not None:
                    logger.error(f"Transaction {signature} failed on-chain: {status['err']}")
                    raise RemoteProgramError(
                        f"Transaction failed: {status['err']}",
                        code=extract_custom_error_code(status["err"]),
                    )
                if _COMMITMENT_RANK.get(status.get("confirmationStatus"), -1) >= wanted:
                    logger.info(f"Transaction {signature} confirmed.")
                    return
            if loop.time() >= deadline:
                break
            await asyncio.sleep(self.poll_interval)
        logger.warning(f"Transaction {signature} confirmation timed out.")
        raise ConfirmationTimeoutError(
            f"Transaction {signature} was not confirmed within {self.confirm_timeout:.0f}s"
        )


def open_connection(connection: Any) -> tuple:
    """
    Returns (connection, owned) for a Connection or an endpoint URL.

    A connection created from a URL is owned by the caller, who must close it.
    """
    if isinstance(connection, str):
        return Connection(connection), True
    if connection is None:
        return Connection(), True
    return connection, False


async def prepare_message(connection: Connection, payer: Pubkey, instructions: list) -> tuple:
    """Fetches a recent blockhash and compiles *instructions* into a message paid by *payer*."""
    blockhash = await connection.get_latest_blockhash()
    return Message.new_with_blockhash(instructions, payer, blockhash), blockhash


async def estimate_fee(connection: Connection, message: Message) -> int:
    """Network fee for *message*, falling back to the per-signature base fee."""
    fee = await connection.get_fee_for_message(message)
    if fee is None:
        fee = LAMPORTS_PER_SIGNATURE * message.header.num_required_signatures
    return fee


async def send_and_confirm(connection: Connection, identity: Identity, message: Message, blockhash: Blockhash) -> str:
    """Signs, submits and waits for confirmation; returns the signature string."""
    transaction = await sign_message(identity, message, blockhash)
    signature = await connection.send_transaction(transaction)
    await connection.confirm_transaction(signature)
    return str(signature)
