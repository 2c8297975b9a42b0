# localcert/crypto/sign.py
"""
RSA key helpers using cryptography.
Provides:
 - generate_key(key_size, public_exponent)
 - private_key_pem(key)  # PKCS#1 "RSA PRIVATE KEY" block
 - load_private_key(pem_bytes)
"""
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa


def generate_key(key_size: int = 4096, public_exponent: int = 65537) -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=public_exponent, key_size=key_size)


def private_key_pem(key) -> bytes:
    """
    Serialize an unencrypted private key as PKCS#1 PEM.
    """
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )


def load_private_key(pem_bytes: bytes):
    """
    Load a PEM-encoded private key (no password).
    """
    return serialization.load_pem_private_key(pem_bytes, password=None)
