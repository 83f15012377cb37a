"""
RSA Key Provider

Loads the RS256 signing key pair from configuration, tolerating the usual
ways PEM text gets mangled in environment variables: literal "\\n" escapes,
CRLF line endings, missing headers, PKCS#1 instead of PKCS#8.
"""

import base64
import binascii
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

logger = logging.getLogger(__name__)

DEFAULT_KEY_ID = "auth-key-1"
_PROBE = b"auth-service key pair probe"
_PEM_BOUNDARY = re.compile(r"-----(BEGIN|END)[A-Z0-9 ]*-----")


class KeyConfigurationError(Exception):
    """Signing keys are missing, malformed or do not form a pair"""


def _b64url_uint(value: int) -> str:
    raw = value.to_bytes((value.bit_length() + 7) // 8 or 1, "big")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


@dataclass(frozen=True)
class VerificationKey:
    """Public key published in the JWKS and accepted for validation"""

    key_id: str
    public_key: rsa.RSAPublicKey
    public_pem: str

    def to_jwk(self) -> Dict[str, Any]:
        numbers = self.public_key.public_numbers()
        return {
            "kty": "RSA",
            "use": "sig",
            "alg": "RS256",
            "kid": self.key_id,
            "n": _b64url_uint(numbers.n),
            "e": _b64url_uint(numbers.e),
        }


@dataclass(frozen=True)
class KeyMaterial:
    """Active signing key pair"""

    signing_key: rsa.RSAPrivateKey
    verification_key: rsa.RSAPublicKey
    key_id: str
    private_pem: str = field(repr=False)
    public_pem: str

    def as_verification_key(self) -> VerificationKey:
        return VerificationKey(self.key_id, self.verification_key, self.public_pem)

    def to_jwk(self) -> Dict[str, Any]:
        return self.as_verification_key().to_jwk()


def normalize_key_text(material: str) -> str:
    return material.replace("\\n", "\n").replace("\r", "").strip()


def _key_body(material: str) -> bytes:
    body = _PEM_BOUNDARY.sub("", normalize_key_text(material))
    body = "".join(body.split())
    if not body:
        raise KeyConfigurationError("Key material is empty")
    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise KeyConfigurationError("Key material is not valid base64") from e


def _to_pem(der: bytes, label: str) -> bytes:
    encoded = base64.b64encode(der).decode("ascii")
    lines = [encoded[i:i + 64] for i in range(0, len(encoded), 64)]
    return ("-----BEGIN %s-----\n%s\n-----END %s-----\n" % (label, "\n".join(lines), label)).encode()


def load_private_key(material: str) -> rsa.RSAPrivateKey:
    """Parse a PKCS#8 or PKCS#1 RSA private key"""
    der = _key_body(material)
    for label in ("PRIVATE KEY", "RSA PRIVATE KEY"):
        try:
            key = serialization.load_pem_private_key(_to_pem(der, label), password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm):
            continue
        if not isinstance(key, rsa.RSAPrivateKey):
            raise KeyConfigurationError("Signing key is not an RSA key")
        return key
    raise KeyConfigurationError("Signing key could not be parsed as PKCS#8 or PKCS#1")


def load_public_key(material: str) -> rsa.RSAPublicKey:
    """Parse a SubjectPublicKeyInfo or PKCS#1 RSA public key"""
    der = _key_body(material)
    for label in ("PUBLIC KEY", "RSA PUBLIC KEY"):
        try:
            key = serialization.load_pem_public_key(_to_pem(der, label))
        except (ValueError, TypeError, UnsupportedAlgorithm):
            continue
        if not isinstance(key, rsa.RSAPublicKey):
            raise KeyConfigurationError("Verification key is not an RSA key")
        return key
    raise KeyConfigurationError("Verification key could not be parsed as SPKI or PKCS#1")


def _private_pem(key: rsa.RSAPrivateKey) -> str:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


def _public_pem(key: rsa.RSAPublicKey) -> str:
    return key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")


def _check_pair(private_key: rsa.RSAPrivateKey, public_key: rsa.RSAPublicKey) -> None:
    signature = private_key.sign(_PROBE, padding.PKCS1v15(), hashes.SHA256())
    try:
        public_key.verify(signature, _PROBE, padding.PKCS1v15(), hashes.SHA256())
    except InvalidSignature as e:
        raise KeyConfigurationError(
            "Verification key is not the public half of the signing key"
        ) from e


def load_key_material(
    private_key_material: str, public_key_material: str, key_id: str = DEFAULT_KEY_ID
) -> KeyMaterial:
    """
    Load and cross-check an RSA key pair.

    Args:
        private_key_material: PKCS#8 or PKCS#1 private key, PEM or bare base64
        public_key_material: SPKI or PKCS#1 public key, PEM or bare base64
        key_id: Identifier published as "kid"

    Raises:
        KeyConfigurationError: a key is malformed, not RSA, or the two do not match
    """
    private_key = load_private_key(private_key_material)
    public_key = load_public_key(public_key_material)
    _check_pair(private_key, public_key)
    logger.info("Loaded RSA signing key %s (%d bits)", key_id, private_key.key_size)
    return KeyMaterial(
        signing_key=private_key,
        verification_key=public_key,
        key_id=key_id,
        private_pem=_private_pem(private_key),
        public_pem=_public_pem(public_key),
    )


def generate_key_material(key_id: str = DEFAULT_KEY_ID, key_size: int = 2048) -> KeyMaterial:
    """Ephemeral key pair for development; tokens die with the process"""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    public_key = private_key.public_key()
    return KeyMaterial(
        signing_key=private_key,
        verification_key=public_key,
        key_id=key_id,
        private_pem=_private_pem(private_key),
        public_pem=_public_pem(public_key),
    )


class RsaKeyProvider:
    """Active signing key plus any historical verification keys"""

    def __init__(
        self,
        material: KeyMaterial,
        additional_keys: Optional[List[VerificationKey]] = None,
    ):
        self.material = material
        self._verification_keys = {material.key_id: material.as_verification_key()}
        for key in additional_keys or []:
            if key.key_id in self._verification_keys:
                logger.warning("Ignoring additional public key with active kid %s", key.key_id)
                continue
            self._verification_keys[key.key_id] = key

    @property
    def key_id(self) -> str:
        return self.material.key_id

    @classmethod
    def from_config(
        cls,
        private_key: Optional[str],
        public_key: Optional[str],
        key_id: str = DEFAULT_KEY_ID,
        additional_public_keys: Optional[Mapping[str, str]] = None,
        allow_generated: bool = False,
    ) -> "RsaKeyProvider":
        """
        Build the provider from configuration values.

        Raises:
            KeyConfigurationError: only one key configured, no keys and
                generation disallowed, or any key fails to load
        """
        has_private = bool(private_key and private_key.strip())
        has_public = bool(public_key and public_key.strip())

        if has_private != has_public:
            raise KeyConfigurationError(
                "JWT_PRIVATE_KEY and JWT_PUBLIC_KEY must be configured together"
            )

        if has_private:
            material = load_key_material(private_key, public_key, key_id)
        elif allow_generated:
            logger.warning(
                "No JWT keys configured, generating an ephemeral RSA key pair. "
                "Issued tokens will not survive a restart."
            )
            material = generate_key_material(key_id)
        else:
            raise KeyConfigurationError("JWT_PRIVATE_KEY and JWT_PUBLIC_KEY are not configured")

        additional = []
        for kid, pem in (additional_public_keys or {}).items():
            key = load_public_key(pem)
            additional.append(VerificationKey(kid, key, _public_pem(key)))
        return cls(material, additional)

    def verification_key_for(self, key_id: Optional[str]) -> Optional[VerificationKey]:
        if not key_id:
            return None
        return self._verification_keys.get(key_id)

    def jwks(self) -> Dict[str, Any]:
        """Active key first, then historical keys"""
        return {"keys": [key.to_jwk() for key in self._verification_keys.values()]}
