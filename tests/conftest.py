import struct

import pytest

from postgis_codec.config import ENV_VARS


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep POSTGIS_CODEC_* variables from the host out of the tests."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def point_ewkb():
    """Little endian EWKB for POINT(9.1 48.7) with SRID 4326."""
    return struct.pack("<BIidd", 1, 0x20000001, 4326, 9.1, 48.7)
