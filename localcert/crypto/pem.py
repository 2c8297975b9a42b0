# localcert/crypto/pem.py
"""
PEM writer.

The file is created, chmod'ed to its final mode and only then written, so key
material never sits in a file with looser permissions than requested.
"""
import logging
import os

from localcert.common.errors import PemWriteError

log = logging.getLogger(__name__)


def pem_label(pem: bytes) -> str:
    """Label of the first PEM block in `pem`, or "" if there is none."""
    first = pem.lstrip().split(b"\n", 1)[0].strip()
    if first.startswith(b"-----BEGIN ") and first.endswith(b"-----"):
        return first[len(b"-----BEGIN "):-len(b"-----")].decode("ascii", "replace")
    return ""


def write_pem(path: str, label: str, pem: bytes, mode: int) -> None:
    """
    Write an already encoded PEM block labeled `label` to `path` with permission bits `mode`.

    Raises PemWriteError naming the step that failed. A partially written
    file is left behind.
    """
    found = pem_label(pem)
    if found != label:
        raise PemWriteError(f"refusing to write {path}: expected a {label} block, got {found or 'no PEM block'}")

    log.info("Writing %s with mode %s", path, format(mode, "#05o"))

    try:
        out = open(path, "wb")
    except OSError as e:
        raise PemWriteError(f"file creation failed for {path}: {e}") from e

    with out:
        try:
            os.chmod(path, mode)
        except OSError as e:
            raise PemWriteError(f"failed to set file permissions on {path}: {e}") from e

        try:
            out.write(pem)
        except OSError as e:
            raise PemWriteError(f"failed to write PEM block to {path}: {e}") from e
