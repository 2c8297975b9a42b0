# localcert/common/config.py
import os

from pydantic import BaseModel, Field

BUILD_VERSION = "dev"
BUILD_COMMIT = "none"
BUILD_DATE = "na"

DEFAULT_OUT_DIR = os.environ.get("LOCAL_CERT_OUT", "./certs")


class IssuerConfig(BaseModel):
    """File layout, key size and naming used by both issuers."""

    key_size: int = Field(4096, ge=1024)
    public_exponent: int = 65537

    ca_key_file: str = "ca.key"
    ca_cert_file: str = "ca.crt"
    server_key_file: str = "server.key"
    server_cert_file: str = "server.crt"

    key_file_mode: int = 0o400   # owner read-only
    cert_file_mode: int = 0o444  # world readable

    validity_years: int = Field(10, ge=1)
    ca_serial: int = Field(1, ge=1)
    server_serial: int = Field(2, ge=1)

    ca_common_name_prefix: str = "create-local-cert CA for "
    ca_organization: str = "create-local-cert CA"
    server_organization: str = "create-local-cert"

    def ca_key_path(self, out_dir: str) -> str:
        return os.path.join(out_dir, self.ca_key_file)

    def ca_cert_path(self, out_dir: str) -> str:
        return os.path.join(out_dir, self.ca_cert_file)

    def server_key_path(self, out_dir: str) -> str:
        return os.path.join(out_dir, self.server_key_file)

    def server_cert_path(self, out_dir: str) -> str:
        return os.path.join(out_dir, self.server_cert_file)
