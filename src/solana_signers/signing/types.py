"""Wire models for the remote signing APIs."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# ======================
# Vault transit
# ======================


class VaultSignRequest(BaseModel):
    input: str = Field(..., description="Base64 payload to sign")


class VaultSignData(BaseModel):
    signature: Optional[str] = Field(None, description="vault:v1:<base64 signature>")


class VaultSignResponse(BaseModel):
    data: Optional[VaultSignData] = None


# ======================
# Privy
# ======================


class PrivyWalletResponse(BaseModel):
    """Wallet info. For Solana wallets the address is the public key."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    address: str
    chain_type: Optional[str] = None
    public_key: Optional[str] = None
    created_at: Optional[int] = None


class PrivySignTransactionParams(BaseModel):
    transaction: str
    encoding: str = "base64"


class PrivySignTransactionRequest(BaseModel):
    method: str = "signTransaction"
    params: PrivySignTransactionParams


class PrivySignTransactionData(BaseModel):
    signed_transaction: str
    encoding: str = "base64"


class PrivySignTransactionResponse(BaseModel):
    method: Optional[str] = None
    data: PrivySignTransactionData


# ======================
# Turnkey
# ======================

TURNKEY_SIGN_RAW_PAYLOAD = "ACTIVITY_TYPE_SIGN_RAW_PAYLOAD_V2"
TURNKEY_PAYLOAD_ENCODING_HEX = "PAYLOAD_ENCODING_HEXADECIMAL"
TURNKEY_HASH_NOT_APPLICABLE = "HASH_FUNCTION_NOT_APPLICABLE"


class TurnkeySignParameters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sign_with: str = Field(..., alias="signWith")
    payload: str
    encoding: str = TURNKEY_PAYLOAD_ENCODING_HEX
    hash_function: str = Field(TURNKEY_HASH_NOT_APPLICABLE, alias="hashFunction")


class TurnkeySignRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str = TURNKEY_SIGN_RAW_PAYLOAD
    timestamp_ms: str = Field(..., alias="timestampMs")
    organization_id: str = Field(..., alias="organizationId")
    parameters: TurnkeySignParameters


class TurnkeySignResult(BaseModel):
    r: str
    s: str


class TurnkeyActivityResult(BaseModel):
    sign_raw_payload_result: Optional[TurnkeySignResult] = Field(
        None, alias="signRawPayloadResult"
    )


class TurnkeyActivity(BaseModel):
    result: Optional[TurnkeyActivityResult] = None


class TurnkeyActivityResponse(BaseModel):
    activity: TurnkeyActivity


class TurnkeyWhoAmIRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    organization_id: str = Field(..., alias="organizationId")
