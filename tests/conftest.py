import pytest

from localcert.common.config import IssuerConfig


@pytest.fixture
def config():
    # 2048 is the smallest size the path validator accepts; 4096 is just slow
    return IssuerConfig(key_size=2048)


@pytest.fixture
def out_dir(tmp_path):
    d = tmp_path / "certs"
    d.mkdir()
    return str(d)
