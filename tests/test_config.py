"""
Tests for environment-based configuration and key loading.
"""
import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey
from cryptography.hazmat.primitives.serialization import (
    BestAvailableEncryption, Encoding, PrivateFormat, PublicFormat
)

from cosigner_callback.config import Settings, get_log_level
from cosigner_callback.keys import KeyMaterial, load_key_material

CALLBACK_VARS = [
    "CALLBACK_PRIVATE_KEY_PATH",
    "CALLBACK_COSIGNER_PUBKEY_PATH",
    "CALLBACK_PRIVATE_KEY_PASSWORD",
    "CALLBACK_NATIVE_DECIMALS",
    "CALLBACK_JWT_ALGORITHM",
    "CALLBACK_HOST",
    "CALLBACK_PORT",
    "CALLBACK_LOG_LEVEL",
    "CALLBACK_AUTH_LOG_INTERVAL",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in CALLBACK_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """Settings.from_env"""

    def test_defaults(self):
        s = Settings.from_env()
        assert s == Settings()
        assert s.native_decimals == 18
        assert s.jwt_algorithm == "RS256"
        assert s.port == 3000
        assert s.log_level == "INFO"

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("CALLBACK_PRIVATE_KEY_PATH", "/keys/priv.pem")
        monkeypatch.setenv("CALLBACK_COSIGNER_PUBKEY_PATH", "/keys/cosigner.pem")
        monkeypatch.setenv("CALLBACK_NATIVE_DECIMALS", "6")
        monkeypatch.setenv("CALLBACK_PORT", "8443")
        monkeypatch.setenv("CALLBACK_LOG_LEVEL", "debug")

        s = Settings.from_env()
        assert s.private_key_path == "/keys/priv.pem"
        assert s.cosigner_pubkey_path == "/keys/cosigner.pem"
        assert s.native_decimals == 6
        assert s.port == 8443
        assert s.log_level == "DEBUG"

    def test_invalid_integer(self, monkeypatch):
        monkeypatch.setenv("CALLBACK_PORT", "eighty")
        with pytest.raises(ValueError, match="CALLBACK_PORT"):
            Settings.from_env()

    @pytest.mark.parametrize("alg", ["none", "NONE", ""])
    def test_unsafe_algorithm(self, monkeypatch, alg):
        monkeypatch.setenv("CALLBACK_JWT_ALGORITHM", alg)
        with pytest.raises(ValueError, match="Unsafe"):
            Settings.from_env()

    def test_negative_decimals(self):
        with pytest.raises(ValueError):
            Settings(native_decimals=-1)

    def test_unknown_log_level(self, monkeypatch):
        monkeypatch.setenv("CALLBACK_LOG_LEVEL", "chatty")
        assert get_log_level() == "INFO"

    def test_password_not_in_repr(self):
        assert "hunter2" not in repr(Settings(private_key_password="hunter2"))


class TestLoadKeyMaterial:
    """PEM key loading"""

    def test_loads_rsa_pair(self, key_files, callback_private_key, cosigner_private_key):
        private_path, public_path = key_files
        keys = load_key_material(private_path, public_path)

        assert isinstance(keys.signing_private_key, RSAPrivateKey)
        assert isinstance(keys.cosigner_public_key, RSAPublicKey)
        assert keys.cosigner_public_key.public_numbers() == cosigner_private_key.public_key().public_numbers()
        assert keys.signing_private_key.private_numbers() == callback_private_key.private_numbers()

    def test_from_settings(self, key_files):
        private_path, public_path = key_files
        keys = KeyMaterial.from_settings(
            Settings(private_key_path=str(private_path), cosigner_pubkey_path=str(public_path))
        )
        assert isinstance(keys, KeyMaterial)

    def test_encrypted_private_key(self, tmp_path, key_files, callback_private_key):
        _, public_path = key_files
        encrypted = tmp_path / "encrypted.pem"
        encrypted.write_bytes(callback_private_key.private_bytes(
            Encoding.PEM, PrivateFormat.PKCS8, BestAvailableEncryption(b"s3cret")
        ))
        keys = load_key_material(encrypted, public_path, password="s3cret")
        assert keys.signing_private_key.private_numbers() == callback_private_key.private_numbers()

    def test_missing_file(self, tmp_path, key_files):
        _, public_path = key_files
        with pytest.raises(FileNotFoundError):
            load_key_material(tmp_path / "absent.pem", public_path)

    def test_not_pem(self, tmp_path, key_files):
        _, public_path = key_files
        bogus = tmp_path / "bogus.pem"
        bogus.write_text("not a key")
        with pytest.raises(ValueError):
            load_key_material(bogus, public_path)

    def test_non_rsa_key_rejected(self, tmp_path, key_files):
        private_path, _ = key_files
        ec_public = tmp_path / "ec_public.pem"
        ec_public.write_bytes(ec.generate_private_key(ec.SECP256R1()).public_key().public_bytes(
            Encoding.PEM, PublicFormat.SubjectPublicKeyInfo
        ))
        with pytest.raises(ValueError, match="RSA public key"):
            load_key_material(private_path, ec_public)

    def test_key_material_is_immutable(self, key_material):
        with pytest.raises(AttributeError):
            key_material.signing_private_key = None
