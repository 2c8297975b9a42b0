# localcert/issuer.py
"""
Issue the local CA and the server certificate it signs.

Writes (inside out_dir, names from IssuerConfig):
  ca.crt / ca.key          self-signed CA, optionally name-constrained to the SANs
  server.crt / server.key  server-auth leaf signed by the CA

Each issuer is skipped entirely when its key file already exists.
"""
import logging
import os

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.serialization import Encoding
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from localcert.common.config import IssuerConfig
from localcert.common.errors import ConfigError, CryptoError, PemWriteError
from localcert.common.utils import add_years, now_utc
from localcert.crypto import pki
from localcert.crypto.pem import write_pem
from localcert.crypto.sign import generate_key, private_key_pem

log = logging.getLogger(__name__)

CERT_LABEL = "CERTIFICATE"
KEY_LABEL = "RSA PRIVATE KEY"

# X.509 upper bound for commonName
MAX_COMMON_NAME = 64


def check_sans(sans) -> list:
    sans = list(sans or [])
    if not sans:
        raise ConfigError("at least one SAN must be provided")
    for san in sans:
        if not san:
            raise ConfigError("SANs must not be empty strings")
    return sans


def _name(common_name: str, organization: str) -> x509.Name:
    return x509.Name([
        x509.NameAttribute(NameOID.COMMON_NAME, common_name[:MAX_COMMON_NAME]),
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, organization),
    ])


def _new_key(config: IssuerConfig, key_size: int, what: str):
    try:
        return generate_key(key_size, config.public_exponent)
    except (ValueError, UnsupportedAlgorithm) as e:
        raise CryptoError(f"failed to generate {what} key: {e}") from e


def _sign(builder: x509.CertificateBuilder, signer, what: str) -> x509.Certificate:
    try:
        return builder.sign(signer, hashes.SHA256())
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise CryptoError(f"failed to create {what} certificate: {e}") from e


def _persist(cert: x509.Certificate, key, cert_path: str, key_path: str, config: IssuerConfig, what: str):
    # certificate first: the key file is the idempotency marker
    try:
        write_pem(cert_path, CERT_LABEL, cert.public_bytes(Encoding.PEM), config.cert_file_mode)
    except PemWriteError as e:
        raise PemWriteError(f"failed to write {what} certificate: {e}") from e
    try:
        write_pem(key_path, KEY_LABEL, private_key_pem(key), config.key_file_mode)
    except PemWriteError as e:
        raise PemWriteError(f"failed to write {what} private key: {e}") from e


def issue_ca(out_dir: str, sans, use_name_constraints: bool = True, config: IssuerConfig = None) -> bool:
    """
    Create the self-signed CA in out_dir.

    Returns False without touching anything if the CA key already exists,
    True once the certificate and key have been written.
    """
    config = config or IssuerConfig()
    sans = check_sans(sans)

    key_path = config.ca_key_path(out_dir)
    if os.path.exists(key_path):
        log.info("%s already exists, skipping creation", key_path)
        return False

    key = _new_key(config, config.key_size, "CA")

    subject = _name(config.ca_common_name_prefix + sans[0], config.ca_organization)
    now = now_utc()
    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(key.public_key())
        .serial_number(config.ca_serial)
        .not_valid_before(now)
        .not_valid_after(add_years(now, config.validity_years))
        .add_extension(
            x509.KeyUsage(
                digital_signature=False,
                content_commitment=False,
                key_encipherment=False,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=True,
                crl_sign=True,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=True,
        )
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .add_extension(x509.SubjectKeyIdentifier.from_public_key(key.public_key()), critical=False)
    )

    if use_name_constraints:
        # critical so verifiers that don't understand it must reject instead of ignoring it
        try:
            constraints = x509.NameConstraints(
                permitted_subtrees=[x509.DNSName(san) for san in sans],
                excluded_subtrees=None,
            )
        except ValueError as e:
            raise CryptoError(f"failed to build CA name constraints: {e}") from e
        builder = builder.add_extension(constraints, critical=True)

    cert = _sign(builder, key, "CA")
    _persist(cert, key, config.ca_cert_path(out_dir), key_path, config, "CA")
    return True


def _authority_key_id(ca_cert: x509.Certificate, ca_key) -> x509.AuthorityKeyIdentifier:
    try:
        ski = ca_cert.extensions.get_extension_for_class(x509.SubjectKeyIdentifier).value
    except x509.ExtensionNotFound:
        return x509.AuthorityKeyIdentifier.from_issuer_public_key(ca_key.public_key())
    return x509.AuthorityKeyIdentifier.from_issuer_subject_key_identifier(ski)


def issue_server_cert(out_dir: str, sans, config: IssuerConfig = None) -> bool:
    """
    Create the server certificate in out_dir, signed by the CA found there.

    An existing server key means nothing is regenerated, even if `sans`
    differs from the list the certificate was issued for.
    """
    config = config or IssuerConfig()
    sans = check_sans(sans)

    key_path = config.server_key_path(out_dir)
    if os.path.exists(key_path):
        log.info("%s already exists, skipping creation", key_path)
        return False

    ca_cert, ca_key = pki.load_ca(config.ca_cert_path(out_dir), config.ca_key_path(out_dir))

    # same size as the CA key, whatever config.key_size says now
    key = _new_key(config, ca_key.key_size, "server")

    now = now_utc()
    builder = (
        x509.CertificateBuilder()
        .subject_name(_name(sans[0], config.server_organization))
        .issuer_name(ca_cert.subject)
        .public_key(key.public_key())
        .serial_number(config.server_serial)
        .not_valid_before(now)
        .not_valid_after(add_years(now, config.validity_years))
        .add_extension(x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH]), critical=False)
        .add_extension(
            x509.KeyUsage(
                digital_signature=True,
                content_commitment=False,
                key_encipherment=True,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=False,
                crl_sign=False,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=True,
        )
        .add_extension(_authority_key_id(ca_cert, ca_key), critical=False)
    )
    try:
        builder = builder.add_extension(
            x509.SubjectAlternativeName([x509.DNSName(san) for san in sans]),
            critical=False,
        )
    except ValueError as e:
        raise CryptoError(f"failed to build server SAN list: {e}") from e

    cert = _sign(builder, ca_key, "server")
    _persist(cert, key, config.server_cert_path(out_dir), key_path, config, "server")
    return True
