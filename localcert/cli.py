# localcert/cli.py
"""
create-local-cert: issue a local CA and a server certificate for the given SANs.

Usage:
    create-local-cert [-out ./certs] [-name-constraints=false] example.com 127.0.0.1
"""
import argparse
import logging
import os
import sys

from localcert.common.config import (
    BUILD_COMMIT,
    BUILD_DATE,
    BUILD_VERSION,
    DEFAULT_OUT_DIR,
    IssuerConfig,
)
from localcert.common.errors import CALoadError, ConfigError, FileSystemError, LocalCertError
from localcert.crypto import pki
from localcert.issuer import check_sans, issue_ca, issue_server_cert

log = logging.getLogger("localcert")

_TRUE = {"1", "t", "true"}
_FALSE = {"0", "f", "false"}

NAME_CONSTRAINTS_FLAG = "-name-constraints"
_NO_NAME_CONSTRAINTS_FLAG = "-no-name-constraints"


def parse_bool(value: str) -> bool:
    v = value.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value {value!r}")


def build_parser() -> argparse.ArgumentParser:
    defaults = IssuerConfig()
    p = argparse.ArgumentParser(prog="create-local-cert", description="Issue a local CA and a server certificate")
    p.add_argument("sans", nargs="*", metavar="SAN", help="hostnames/IPs the server certificate is valid for")
    p.add_argument("-out", default=DEFAULT_OUT_DIR, help="Output path for certificates (default: %(default)s)")
    # bare flag means true; -name-constraints=BOOL is rewritten by parse_args
    p.add_argument(NAME_CONSTRAINTS_FLAG, dest="name_constraints", action="store_true", default=True,
                   help="Use name constraints in the CA certificate, -name-constraints=false to disable (default: true)")
    p.add_argument(_NO_NAME_CONSTRAINTS_FLAG, dest="name_constraints", action="store_false", help=argparse.SUPPRESS)
    p.add_argument("-key-size", dest="key_size", type=int, default=defaults.key_size,
                   help="RSA key size in bits (default: %(default)s)")
    p.add_argument("-version", action="version",
                   version=f"create-local-cert {BUILD_VERSION} ({BUILD_COMMIT}) built on {BUILD_DATE}")
    return p


def parse_args(argv=None, parser: argparse.ArgumentParser = None) -> argparse.Namespace:
    """
    Parse the command line, accepting Go-style boolean flags:
    -name-constraints, -name-constraints=true, -name-constraints=false.
    """
    parser = parser or build_parser()
    if argv is None:
        argv = sys.argv[1:]
    args = []
    for arg in argv:
        flag, sep, value = arg.partition("=")
        if sep and flag == NAME_CONSTRAINTS_FLAG:
            try:
                on = parse_bool(value)
            except argparse.ArgumentTypeError as e:
                parser.error(f"argument {NAME_CONSTRAINTS_FLAG}: {e}")
            arg = NAME_CONSTRAINTS_FLAG if on else _NO_NAME_CONSTRAINTS_FLAG
        args.append(arg)
    return parser.parse_args(args)


def run(sans, out: str, use_name_constraints: bool = True, config: IssuerConfig = None) -> str:
    """
    Issue the CA and the server certificate into `out`.
    Returns the resolved output directory. Raises LocalCertError on any failure.
    """
    config = config or IssuerConfig()
    sans = check_sans(sans)

    try:
        out_path = os.path.abspath(out)
    except OSError as e:
        raise ConfigError(f"failed to resolve outpath: {e}") from e

    log.info("Params:")
    log.info("  SANs: %s", sans)
    log.info("  outPath: %s", out_path)
    log.info("  isUsingNameConstraints: %s", use_name_constraints)

    try:
        os.makedirs(out_path, 0o755, exist_ok=True)
    except OSError as e:
        raise FileSystemError(f"failed to create output directory: {e}") from e

    log.info("Creating CA...")
    try:
        issue_ca(out_path, sans, use_name_constraints, config)
    except LocalCertError as e:
        raise type(e)(f"failed to create CA: {e}") from e

    log.info("Creating server certificate...")
    try:
        issue_server_cert(out_path, sans, config)
    except LocalCertError as e:
        raise type(e)(f"failed to create server certificate: {e}") from e

    try:
        ca_cert = pki.load_cert_file(config.ca_cert_path(out_path))
    except (OSError, ValueError) as e:
        raise CALoadError(f"failed to read back CA certificate: {e}") from e
    log.info("CA fingerprint (SHA-256): %s", pki.cert_fingerprint_hex(ca_cert))
    log.info("Done!")
    return out_path


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    args = parse_args(argv)

    log.info("create-local-cert %s (%s) built on %s", BUILD_VERSION, BUILD_COMMIT, BUILD_DATE)

    try:
        config = IssuerConfig(key_size=args.key_size)
    except ValueError as e:
        log.error("failed: invalid configuration: %s", e)
        return 1

    try:
        run(args.sans, args.out, args.name_constraints, config)
    except LocalCertError as e:
        log.error("failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
