# localcert/common/errors.py
"""
Exceptions raised while issuing certificates.
Every one of them is fatal; the CLI turns them into a non-zero exit.
"""


class LocalCertError(Exception):
    """Base class for all issuance failures."""


class ConfigError(LocalCertError):
    """Bad input: no SANs, empty SAN, unresolvable output path."""


class FileSystemError(LocalCertError):
    """Directory or file could not be created."""


class PemWriteError(FileSystemError):
    """A PEM file could not be created, chmod'ed or written."""


class CryptoError(LocalCertError):
    """Key generation or certificate signing failed."""


class CALoadError(LocalCertError):
    """CA certificate or key is missing, corrupt, or the two don't match."""
