# localcert/crypto/pki.py

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.x509.verification import PolicyBuilder, Store

from localcert.common.errors import CALoadError
from localcert.crypto.sign import load_private_key


def load_cert(pem_bytes: bytes) -> x509.Certificate:
    """Load a PEM-encoded certificate and return an x509.Certificate object."""
    return x509.load_pem_x509_certificate(pem_bytes)


def load_cert_file(path: str) -> x509.Certificate:
    with open(path, "rb") as f:
        return load_cert(f.read())


def load_ca(cert_path: str, key_path: str):
    """
    Load the CA certificate and its private key.

    Raises CALoadError if either file is missing or unparsable, or if the key
    does not belong to the certificate.
    """
    try:
        with open(cert_path, "rb") as f:
            cert_pem = f.read()
        with open(key_path, "rb") as f:
            key_pem = f.read()
    except OSError as e:
        raise CALoadError(f"failed to load CA keypair: {e}") from e

    try:
        cert = load_cert(cert_pem)
    except ValueError as e:
        raise CALoadError(f"failed to parse CA certificate {cert_path}: {e}") from e

    try:
        key = load_private_key(key_pem)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise CALoadError(f"failed to parse CA private key {key_path}: {e}") from e

    if cert.public_key().public_numbers() != key.public_key().public_numbers():
        raise CALoadError(f"CA private key {key_path} does not match certificate {cert_path}")

    return cert, key


def verify_server_cert(cert: x509.Certificate, ca_cert: x509.Certificate, hostname: str, at=None):
    """
    Verify `cert` as a TLS server certificate for `hostname`, trusting only `ca_cert`.

    Read-back check for issued artifacts; the issuers themselves never call it.
    Name constraints on the CA are enforced. Returns the verified chain.
    Raises:
      - cryptography.x509.verification.VerificationError if validation fails
    """
    builder = PolicyBuilder().store(Store([ca_cert]))
    if at is not None:
        builder = builder.time(at)
    verifier = builder.build_server_verifier(x509.DNSName(hostname))
    return verifier.verify(cert, [])


def dns_names(cert: x509.Certificate) -> list:
    """DNS names from the SAN extension, empty if there is none. Used to read back issued certificates."""
    try:
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    except x509.ExtensionNotFound:
        return []
    return san.get_values_for_type(x509.DNSName)


def permitted_dns_domains(cert: x509.Certificate) -> list:
    """Permitted DNS subtrees of a CA's name constraints, empty if unconstrained. Read-back helper."""
    try:
        nc = cert.extensions.get_extension_for_class(x509.NameConstraints).value
    except x509.ExtensionNotFound:
        return []
    return [n.value for n in nc.permitted_subtrees or [] if isinstance(n, x509.DNSName)]


def cert_fingerprint_hex(cert: x509.Certificate) -> str:
    """Return the SHA-256 fingerprint of the certificate as a hex string."""
    return cert.fingerprint(hashes.SHA256()).hex()
