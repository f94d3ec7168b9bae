"""
Pytest fixtures for the co-signer callback tests.
"""
import copy

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import (
    Encoding, NoEncryption, PrivateFormat, PublicFormat
)

from cosigner_callback._rate_limited_log import reset_rate_limits
from cosigner_callback.config import Settings
from cosigner_callback.keys import KeyMaterial

# Unsigned fee-market transfer of 0.01 ETH on chain 1
SAMPLE_RAW_TX = (
    "02ef0104843b9aca008506a0c1987d825208945dc69b1fbb13bafd09af88a782f0f285772ad5f8"
    "872386f26fc1000080c0"
)
SAMPLE_PAYLOAD = "77b4e74099ce90c08503c0e0bb6e672dbe1c5e3e127ce333bf22eb581cd3f6ce"
SAMPLE_DST_ADDRESS = "0x5dC69B1Fbb13Bafd09af88a782F0F285772Ad5f8"
SAMPLE_REQUEST_ID = "3b3a1a5c-8e8b-4d6a-9d53-5f4b1c2f0e11"

SAMPLE_CLAIMS = {
    "requestId": SAMPLE_REQUEST_ID,
    "txId": "b70701f4-d7b1-4795-a8ee-b09cdb5b850d",
    "asset": "ETH",
    "operation": "TRANSFER",
    "sourceType": "VAULT",
    "destinations": [
        {
            "amountNative": 0.01,
            "amount": 18.5,
            "type": "ONE_TIME_ADDRESS",
            "displayDstAddress": SAMPLE_DST_ADDRESS,
        }
    ],
    "rawTx": [
        {
            "keyDerivationPath": [44, 60, 0, 0, 0],
            "rawTx": SAMPLE_RAW_TX,
            "payload": SAMPLE_PAYLOAD,
        }
    ],
}


def _generate_rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def cosigner_private_key():
    """Private key held by the co-signer (signs inbound requests)"""
    return _generate_rsa_key()


@pytest.fixture(scope="session")
def callback_private_key():
    """Private key held by the callback (signs outbound decisions)"""
    return _generate_rsa_key()


@pytest.fixture(scope="session")
def attacker_private_key():
    return _generate_rsa_key()


@pytest.fixture
def key_material(cosigner_private_key, callback_private_key):
    return KeyMaterial(
        cosigner_public_key=cosigner_private_key.public_key(),
        signing_private_key=callback_private_key,
    )


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def sample_claims():
    """Fresh deep copy of the sample approval claims"""
    return copy.deepcopy(SAMPLE_CLAIMS)


@pytest.fixture
def sign_request(cosigner_private_key):
    """Return a function that signs claims as the co-signer would."""
    def _sign(claims, key=None, algorithm="RS256"):
        return jwt.encode(claims, key or cosigner_private_key, algorithm=algorithm).encode("ascii")
    return _sign


@pytest.fixture
def key_files(tmp_path, cosigner_private_key, callback_private_key):
    """Write the callback private key and co-signer public key as PEM files."""
    private_path = tmp_path / "callback_private.pem"
    public_path = tmp_path / "cosigner_public.pem"
    private_path.write_bytes(callback_private_key.private_bytes(
        Encoding.PEM, PrivateFormat.PKCS8, NoEncryption()
    ))
    public_path.write_bytes(cosigner_private_key.public_key().public_bytes(
        Encoding.PEM, PublicFormat.SubjectPublicKeyInfo
    ))
    return private_path, public_path


@pytest.fixture
def fresh_rate_limits():
    """Clear suppressed log messages before and after the test."""
    reset_rate_limits()
    yield
    reset_rate_limits()
