import base64

import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from ksef_client.crypto.rsa import (
    certificate_to_pem,
    encrypt_short_secret,
    encrypt_short_secret_b64,
    load_public_key,
    max_oaep_payload,
)
from ksef_client.exceptions import CryptoError
from ksef_client.tests.utils.certificates import oaep_decrypt


def test_pem_body_is_wrapped_at_64_characters(token_certificate_b64: str) -> None:
    pem = certificate_to_pem(token_certificate_b64)
    lines = pem.split("\n")

    assert lines[0] == "-----BEGIN CERTIFICATE-----"
    assert lines[-1] == "-----END CERTIFICATE-----"
    body = lines[1:-1]
    assert all(len(line) == 64 for line in body[:-1])
    assert 0 < len(body[-1]) <= 64
    assert "".join(body) == token_certificate_b64


def test_pem_framing_ignores_whitespace_in_input() -> None:
    pem = certificate_to_pem(" QUJD\nREVG \n")

    assert pem == "-----BEGIN CERTIFICATE-----\nQUJDREVG\n-----END CERTIFICATE-----"


def test_pem_framing_rejects_empty_input() -> None:
    with pytest.raises(CryptoError, match="Empty certificate"):
        certificate_to_pem("  ")


def test_load_public_key_returns_certificate_key(
    token_certificate_b64: str, token_private_key: rsa.RSAPrivateKey
) -> None:
    public_key = load_public_key(certificate_to_pem(token_certificate_b64))

    assert public_key.public_numbers() == token_private_key.public_key().public_numbers()


def test_load_public_key_rejects_malformed_certificate() -> None:
    pem = certificate_to_pem(base64.b64encode(b"not a certificate").decode())

    with pytest.raises(CryptoError, match="Malformed certificate"):
        load_public_key(pem)


def test_encrypted_secret_decrypts_with_private_key(
    token_certificate_b64: str, token_private_key: rsa.RSAPrivateKey
) -> None:
    public_key = load_public_key(certificate_to_pem(token_certificate_b64))
    secret = b"5265877635-20250826-0100A9C4B2-FB|1767867330123"

    ciphertext = encrypt_short_secret(secret, public_key)

    assert len(ciphertext) == public_key.key_size // 8
    assert oaep_decrypt(token_private_key, ciphertext) == secret


def test_oaep_is_randomized(token_private_key: rsa.RSAPrivateKey) -> None:
    public_key = token_private_key.public_key()

    assert encrypt_short_secret(b"same", public_key) != encrypt_short_secret(b"same", public_key)


def test_b64_variant_is_standard_base64(token_private_key: rsa.RSAPrivateKey) -> None:
    encoded = encrypt_short_secret_b64(b"secret", token_private_key.public_key())

    assert oaep_decrypt(token_private_key, base64.b64decode(encoded, validate=True)) == b"secret"


def test_max_payload_for_2048_bit_key(token_private_key: rsa.RSAPrivateKey) -> None:
    assert max_oaep_payload(token_private_key.public_key()) == 190


def test_secret_at_limit_is_accepted(token_private_key: rsa.RSAPrivateKey) -> None:
    public_key = token_private_key.public_key()
    secret = b"k" * max_oaep_payload(public_key)

    assert oaep_decrypt(token_private_key, encrypt_short_secret(secret, public_key)) == secret


def test_oversized_secret_is_rejected(token_private_key: rsa.RSAPrivateKey) -> None:
    public_key = token_private_key.public_key()

    with pytest.raises(CryptoError, match="too large"):
        encrypt_short_secret(b"k" * (max_oaep_payload(public_key) + 1), public_key)


def test_non_rsa_key_is_rejected() -> None:
    ec_key = ec.generate_private_key(ec.SECP256R1()).public_key()

    with pytest.raises(CryptoError):
        encrypt_short_secret(b"secret", ec_key)  # type: ignore[arg-type]
