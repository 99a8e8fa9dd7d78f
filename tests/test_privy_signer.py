"""Tests for the Privy signing backend."""

import base64

import httpx
import pytest

from conftest import create_test_transaction, json_response
from solana_signers.errors import (
    ConfigError,
    InvalidPublicKeyError,
    NotAvailableError,
    RemoteApiError,
    SerializationError,
    SigningFailedError,
)
from solana_signers.sdk import Keypair, Pubkey, Signature, Transaction
from solana_signers.signing.privy import PrivySigner
from solana_signers.transaction_util import serialize_transaction

APP_ID = "test-app-id"
APP_SECRET = "test-app-secret"
WALLET_ID = "test-wallet-id"
API_BASE = "https://privy.test/v1"


def make_signer(client, **kwargs) -> PrivySigner:
    return PrivySigner(APP_ID, APP_SECRET, WALLET_ID, api_base_url=API_BASE, client=client, **kwargs)


def wallet_payload(address: str) -> dict:
    return {"id": WALLET_ID, "address": address, "chain_type": "solana"}


def signed_by(keypair: Keypair, tx: Transaction) -> str:
    """Base64 of a copy of ``tx`` signed by ``keypair``, as Privy returns it."""
    signed = Transaction.from_bytes(bytes(tx))
    signed.sign([keypair], signed.message.recent_blockhash)
    return serialize_transaction(signed)


def privy_api(keypair: Keypair, tx: Transaction):
    """Handler serving the wallet lookup and the signing RPC."""
    signed_tx = signed_by(keypair, tx)

    def _handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET" and request.url.path.endswith(f"/wallets/{WALLET_ID}"):
            return httpx.Response(200, json=wallet_payload(str(keypair.pubkey())))
        if request.method == "POST" and request.url.path.endswith(f"/wallets/{WALLET_ID}/rpc"):
            return httpx.Response(
                200,
                json={"method": "signTransaction", "data": {"signed_transaction": signed_tx, "encoding": "base64"}},
            )
        return httpx.Response(404, json={"error": "not found"})

    return _handler


class TestConstruction:
    """Tests for building a Privy signer."""

    def test_missing_fields(self):
        """Empty credentials are a config error."""
        with pytest.raises(ConfigError):
            PrivySigner("", APP_SECRET, WALLET_ID)
        with pytest.raises(ConfigError):
            PrivySigner(APP_ID, APP_SECRET, "")

    @pytest.mark.asyncio
    async def test_not_initialized(self, mock_api):
        """A fresh signer is unavailable and has the default pubkey."""
        client, transport = mock_api(json_response(200, {}))
        signer = make_signer(client)

        assert signer.initialized is False
        assert signer.pubkey() == Pubkey.default()
        assert await signer.is_available() is False
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_sign_before_init(self, mock_api):
        """Signing before init() fails without contacting Privy."""
        client, transport = mock_api(json_response(200, {}))
        signer = make_signer(client)

        with pytest.raises(NotAvailableError):
            await signer.sign_message(b"x")
        assert transport.requests == []


class TestInit:
    """Tests for fetching the wallet public key."""

    @pytest.mark.asyncio
    async def test_init(self, mock_api, keypair):
        """init() stores the wallet address and authenticates with Basic auth."""
        client, transport = mock_api(json_response(200, wallet_payload(str(keypair.pubkey()))))
        signer = make_signer(client)

        await signer.init()

        assert signer.pubkey() == keypair.pubkey()
        assert await signer.is_available() is True

        request = transport.requests[0]
        assert request.method == "GET"
        assert str(request.url) == f"{API_BASE}/wallets/{WALLET_ID}"
        expected_auth = base64.b64encode(f"{APP_ID}:{APP_SECRET}".encode()).decode()
        assert request.headers["Authorization"] == f"Basic {expected_auth}"
        assert request.headers["privy-app-id"] == APP_ID

    @pytest.mark.asyncio
    async def test_init_unauthorized(self, mock_api):
        """A 401 leaves the signer uninitialized."""
        client, _ = mock_api(json_response(401, {"error": "Unauthorized"}))
        signer = make_signer(client)

        with pytest.raises(RemoteApiError):
            await signer.init()
        assert await signer.is_available() is False

    @pytest.mark.asyncio
    async def test_init_invalid_address(self, mock_api):
        """A malformed wallet address is an invalid public key."""
        client, _ = mock_api(json_response(200, wallet_payload("not-a-pubkey!")))
        signer = make_signer(client)

        with pytest.raises(InvalidPublicKeyError):
            await signer.init()
        assert signer.initialized is False

    @pytest.mark.asyncio
    async def test_init_missing_address(self, mock_api):
        """A response without an address is a serialization error."""
        client, _ = mock_api(json_response(200, {"id": WALLET_ID}))
        signer = make_signer(client)

        with pytest.raises(SerializationError):
            await signer.init()

    @pytest.mark.asyncio
    async def test_init_can_be_retried(self, mock_api, keypair):
        """A failed init() may be followed by a successful one."""
        responses = iter([
            httpx.Response(503, json={"error": "unavailable"}),
            httpx.Response(200, json=wallet_payload(str(keypair.pubkey()))),
        ])
        client, _ = mock_api(lambda request: next(responses))
        signer = make_signer(client)

        with pytest.raises(RemoteApiError):
            await signer.init()
        await signer.init()

        assert signer.pubkey() == keypair.pubkey()


class TestSigning:
    """Tests for the wallet RPC signing call."""

    @pytest.mark.asyncio
    async def test_sign_transaction(self, mock_api, keypair):
        """The wallet's signature is extracted and written into the transaction."""
        tx = create_test_transaction(keypair.pubkey())
        client, transport = mock_api(privy_api(keypair, tx))
        signer = make_signer(client)
        await signer.init()

        result = await signer.sign_transaction(tx)

        assert result.signature == keypair.sign_message(tx.message_data())
        assert tx.signatures[0] == result.signature
        assert result.transaction == signed_by(keypair, tx)

        request = transport.requests[-1]
        assert str(request.url) == f"{API_BASE}/wallets/{WALLET_ID}/rpc"
        assert request.headers["Content-Type"] == "application/json"
        body = transport.last_json()
        assert body["method"] == "signTransaction"
        assert body["params"]["encoding"] == "base64"
        assert base64.b64decode(body["params"]["transaction"]) == tx.message_data()

    @pytest.mark.asyncio
    async def test_sign_message(self, mock_api, keypair):
        """sign_message returns the signature Privy produced."""
        tx = create_test_transaction(keypair.pubkey())
        client, _ = mock_api(privy_api(keypair, tx))
        signer = make_signer(client)
        await signer.init()

        signature = await signer.sign_message(tx.message_data())

        assert signature.verify(keypair.pubkey(), tx.message_data())

    @pytest.mark.asyncio
    async def test_signer_missing_from_response(self, mock_api, keypair):
        """A signed transaction that does not list this wallet fails."""
        other = Keypair()
        tx = create_test_transaction(other.pubkey())
        signed_tx = signed_by(other, tx)

        def _handler(request):
            if request.method == "GET":
                return httpx.Response(200, json=wallet_payload(str(keypair.pubkey())))
            return httpx.Response(200, json={"data": {"signed_transaction": signed_tx}})

        client, _ = mock_api(_handler)
        signer = make_signer(client)
        await signer.init()

        with pytest.raises(SigningFailedError):
            await signer.sign_message(b"x")

    @pytest.mark.asyncio
    async def test_unsigned_slot_in_response(self, mock_api, keypair):
        """A default signature in the wallet's slot fails."""
        tx = create_test_transaction(keypair.pubkey())
        unsigned = serialize_transaction(tx)
        assert tx.signatures[0] == Signature.default()

        def _handler(request):
            if request.method == "GET":
                return httpx.Response(200, json=wallet_payload(str(keypair.pubkey())))
            return httpx.Response(200, json={"data": {"signed_transaction": unsigned}})

        client, _ = mock_api(_handler)
        signer = make_signer(client)
        await signer.init()

        with pytest.raises(SigningFailedError):
            await signer.sign_transaction(tx)

    @pytest.mark.asyncio
    async def test_undecodable_signed_transaction(self, mock_api, keypair):
        """A signed transaction that cannot be decoded is a serialization error."""

        def _handler(request):
            if request.method == "GET":
                return httpx.Response(200, json=wallet_payload(str(keypair.pubkey())))
            return httpx.Response(200, json={"data": {"signed_transaction": "!!!"}})

        client, _ = mock_api(_handler)
        signer = make_signer(client)
        await signer.init()

        with pytest.raises(SerializationError):
            await signer.sign_message(b"x")

    @pytest.mark.asyncio
    async def test_rpc_error_status(self, mock_api, keypair):
        """A non-success RPC status is a remote API error."""

        def _handler(request):
            if request.method == "GET":
                return httpx.Response(200, json=wallet_payload(str(keypair.pubkey())))
            return httpx.Response(400, json={"error": "bad request"})

        client, _ = mock_api(_handler)
        signer = make_signer(client)
        await signer.init()

        with pytest.raises(RemoteApiError):
            await signer.sign_message(b"x")
