import pytest

from pkg_jwt import FixedClock, create_jwt_decoder

from jwt_fixtures import NOW


@pytest.fixture(autouse=True)
def _clean_jwt_env(monkeypatch):
    for key in (
        "JWT_VALIDATE_EXP",
        "JWT_VALIDATE_NBF",
        "JWT_CLOCK_SKEW",
        "JWT_EXPECTED_ISSUER",
        "JWT_EXPECTED_AUDIENCE",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def decoder():
    return create_jwt_decoder(clock=FixedClock(NOW))
