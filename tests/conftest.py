"""Pytest configuration and fixtures."""

import json
import os
from typing import Callable

import httpx
import pytest
import pytest_asyncio
from solders.system_program import TransferParams, transfer

# Keep the developer's .env / shell from leaking into settings-driven tests
for _key in list(os.environ):
    if _key.startswith(("SIGNER_", "SOLANA_", "VAULT_", "PRIVY_", "TURNKEY_")):
        del os.environ[_key]

from solana_signers.sdk import Hash, Keypair, Message, Pubkey, Transaction

TEST_KEYPAIR_BYTES = (
    "[41,99,180,88,51,57,48,80,61,63,219,75,176,49,116,254,227,176,196,204,122,47,166,133,"
    "155,252,217,0,253,17,49,143,47,94,121,167,195,136,72,22,157,48,77,88,63,96,57,122,181,"
    "243,236,188,241,134,174,224,100,246,17,170,104,17,151,48]"
)
TEST_KEYPAIR_BASE58 = (
    "pzjkwgQ5shhq3Awijz6CjDjZrXPX7YKKgkTipBK7JAq8XW5GbDynBFChESMBrz4SvFiZ8qJAtUB6sL3PpVCnbR1"
)
TEST_PUBKEY = "4BuiY9QUUfPoAGNJBja3JapAuVWMc9c7in6UCgyC2zPR"


def create_test_transaction(signer: Pubkey) -> Transaction:
    """Unsigned single-signer transfer with a default blockhash."""
    instruction = transfer(
        TransferParams(from_pubkey=signer, to_pubkey=Pubkey.new_unique(), lamports=1_000_000)
    )
    message = Message.new_with_blockhash([instruction], signer, Hash.default())
    return Transaction.new_unsigned(message)


def create_multi_signer_transaction(payer: Pubkey, other: Pubkey) -> Transaction:
    """Unsigned transaction requiring signatures from payer (index 0) and other (index 1)."""
    instructions = [
        transfer(TransferParams(from_pubkey=payer, to_pubkey=Pubkey.new_unique(), lamports=1_000)),
        transfer(TransferParams(from_pubkey=other, to_pubkey=Pubkey.new_unique(), lamports=2_000)),
    ]
    message = Message.new_with_blockhash(instructions, payer, Hash.default())
    return Transaction.new_unsigned(message)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_handler)

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def keypair() -> Keypair:
    return Keypair()


@pytest_asyncio.fixture
async def mock_api():
    """Build an AsyncClient whose requests are answered by ``handler``.

    Usage: ``client, transport = mock_api(handler)``
    """
    clients = []

    def _factory(handler):
        transport = RecordingTransport(handler)
        client = httpx.AsyncClient(transport=transport)
        clients.append(client)
        return client, transport

    yield _factory

    for client in clients:
        await client.aclose()


def json_response(status_code: int, payload) -> Callable[[httpx.Request], httpx.Response]:
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)

    return _handler
