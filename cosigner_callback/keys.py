"""
Key material for envelope verification and signing.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey
from cryptography.hazmat.primitives.serialization import (
    load_pem_private_key, load_pem_public_key
)

from .config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyMaterial:
    """
    Process-wide key pair, loaded once at startup and read-only afterwards.

    Attributes:
        cosigner_public_key: Verifies inbound envelopes
        signing_private_key: Signs outbound decisions
    """
    cosigner_public_key: RSAPublicKey
    signing_private_key: RSAPrivateKey

    @classmethod
    def from_settings(cls, settings: Settings) -> "KeyMaterial":
        return load_key_material(
            settings.private_key_path,
            settings.cosigner_pubkey_path,
            password=settings.private_key_password,
        )


def load_key_material(
    private_key_path: Union[str, Path],
    public_key_path: Union[str, Path],
    password: Optional[str] = None,
) -> KeyMaterial:
    """
    Load the callback private key and co-signer public key from PEM files.

    Args:
        private_key_path: PEM file with this service's RSA private key
        public_key_path: PEM file with the co-signer's RSA public key
        password: Optional passphrase of the private key

    Returns:
        KeyMaterial

    Raises:
        FileNotFoundError: If either file does not exist
        ValueError: If either file is not a PEM-encoded RSA key
    """
    private_pem = Path(private_key_path).read_bytes()
    public_pem = Path(public_key_path).read_bytes()

    private_key = load_pem_private_key(
        private_pem, password=password.encode("utf-8") if password else None
    )
    public_key = load_pem_public_key(public_pem)

    if not isinstance(private_key, RSAPrivateKey):
        raise ValueError(f"{private_key_path} does not contain an RSA private key")
    if not isinstance(public_key, RSAPublicKey):
        raise ValueError(f"{public_key_path} does not contain an RSA public key")

    logger.info(f"Loaded callback signing key from {private_key_path}")
    logger.info(f"Loaded co-signer public key from {public_key_path}")
    return KeyMaterial(cosigner_public_key=public_key, signing_private_key=private_key)
