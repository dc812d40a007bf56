import pytest

from pkg_jwt.adapters.clock import FixedClock
from pkg_jwt.application.use_cases.validate import ValidateTokenUseCase
from pkg_jwt.domain.constants import MISSING_ALGORITHM, TOKEN_EXPIRED, TOKEN_NOT_YET_VALID
from pkg_jwt.domain.entities import DecodedToken, JWTHeader, JWTPayload
from pkg_jwt.domain.value_objects import ValidationOptions

from jwt_fixtures import NOW


def _token(payload: dict, header: dict | None = None) -> DecodedToken:
    return DecodedToken(
        header=JWTHeader({"alg": "HS256"} if header is None else header),
        payload=JWTPayload(payload),
        signature="sig",
    )


@pytest.fixture
def validator():
    return ValidateTokenUseCase(clock=FixedClock(NOW))


def test_far_future_expiration_is_valid(validator):
    result = validator.execute(_token({"exp": 9999999999}))

    assert result.is_valid
    assert result.errors == ()
    assert not result.is_expired
    assert not result.is_not_yet_valid


def test_no_time_claims_is_valid(validator):
    assert validator.execute(_token({"sub": "s"})).is_valid


def test_default_options_use_the_clock(validator):
    assert validator.execute(_token({"exp": NOW - 31})).is_expired
    assert not validator.execute(_token({"exp": NOW - 30})).is_expired


def test_current_time_overrides_clock(validator):
    result = validator.execute(_token({"exp": 100}), ValidationOptions(current_time=50))
    assert result.is_valid


# --- header ---

@pytest.mark.parametrize("header", [{}, {"alg": ""}, {"alg": None}, {"typ": "JWT"}])
def test_missing_algorithm(validator, header):
    result = validator.execute(_token({}, header=header))

    assert not result.is_valid
    assert result.errors == (MISSING_ALGORITHM,)


# --- expiration ---

def test_expired_token(validator):
    result = validator.execute(_token({"exp": 1516239022}))

    assert not result.is_valid
    assert result.is_expired
    assert any("expired" in e for e in result.errors)
    assert result.errors == (TOKEN_EXPIRED,)


def test_expiration_clock_skew_boundary(validator):
    exp = NOW - 10
    assert validator.execute(_token({"exp": exp}), ValidationOptions(clock_skew=10)).is_valid
    assert validator.execute(_token({"exp": exp}), ValidationOptions(clock_skew=9)).is_expired
    assert validator.execute(_token({"exp": NOW}), ValidationOptions(clock_skew=0)).is_valid


def test_non_numeric_expiration_fails_closed(validator):
    for exp in ("9999999999", None, True):
        result = validator.execute(_token({"exp": exp}))
        assert result.is_expired
        assert result.errors == (TOKEN_EXPIRED,)


# --- not before ---

@pytest.mark.parametrize("claim", ["exp", "nbf"])
@pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
def test_non_finite_time_claims_fail_closed(validator, claim, value):
    result = validator.execute(_token({claim: value}))

    assert not result.is_valid
    if claim == "exp":
        assert result.is_expired
        assert result.errors == (TOKEN_EXPIRED,)
    else:
        assert result.is_not_yet_valid
        assert result.errors == (TOKEN_NOT_YET_VALID,)


def test_not_yet_valid_token(validator):
    result = validator.execute(_token({"nbf": 9999999999}))

    assert not result.is_valid
    assert result.is_not_yet_valid
    assert not result.is_expired
    assert result.errors == (TOKEN_NOT_YET_VALID,)


def test_not_before_clock_skew_boundary(validator):
    nbf = NOW + 30
    assert validator.execute(_token({"nbf": nbf})).is_valid
    assert validator.execute(_token({"nbf": nbf + 1})).is_not_yet_valid


def test_expired_and_not_yet_valid_together(validator):
    result = validator.execute(_token({"exp": 1, "nbf": 9999999999}))

    assert result.is_expired
    assert result.is_not_yet_valid
    assert result.errors == (TOKEN_EXPIRED, TOKEN_NOT_YET_VALID)


def test_disabled_time_checks_clear_errors_and_flags(validator):
    options = ValidationOptions(
        validate_exp=False,
        validate_nbf=False,
        expected_issuer="https://issuer",
        expected_audience="myapp",
    )
    token = _token({"exp": 1, "nbf": 9999999999, "iss": "https://other", "aud": "myapp"})

    result = validator.execute(token, options)

    assert not result.is_expired
    assert not result.is_not_yet_valid
    assert result.errors == (
        "JWT issuer mismatch. Expected: https://issuer, Got: https://other",
    )


# --- issuer ---

def test_issuer_match(validator):
    options = ValidationOptions(expected_issuer="http://example.com")
    assert validator.execute(_token({"iss": "http://example.com"}), options).is_valid


def test_issuer_is_case_sensitive(validator):
    options = ValidationOptions(expected_issuer="http://example.com")
    result = validator.execute(_token({"iss": "http://EXAMPLE.com"}), options)

    assert result.errors == (
        "JWT issuer mismatch. Expected: http://example.com, Got: http://EXAMPLE.com",
    )


def test_missing_issuer(validator):
    options = ValidationOptions(expected_issuer="http://example.com")
    result = validator.execute(_token({}), options)

    assert result.errors == ("JWT issuer mismatch. Expected: http://example.com, Got: None",)


# --- audience ---

@pytest.mark.parametrize("aud", ["myapp", ["myapp", "other"], ["other", "myapp"]])
def test_audience_match(validator, aud):
    options = ValidationOptions(expected_audience="myapp")
    assert validator.execute(_token({"aud": aud}), options).is_valid


def test_audience_any_of_expected(validator):
    options = ValidationOptions(expected_audience=["web", "mobile"])
    assert validator.execute(_token({"aud": "mobile"}), options).is_valid


def test_audience_mismatch(validator):
    options = ValidationOptions(expected_audience="myapp")
    result = validator.execute(_token({"aud": "otherapp"}), options)

    assert not result.is_valid
    assert result.errors == ("JWT audience mismatch. Expected one of: myapp, Got: otherapp",)


@pytest.mark.parametrize("payload", [{}, {"aud": []}, {"aud": None}])
def test_absent_and_empty_audience_are_equivalent(validator, payload):
    options = ValidationOptions(expected_audience=["a", "b"])
    result = validator.execute(_token(payload), options)

    assert result.errors == ("JWT audience mismatch. Expected one of: a, b, Got: ",)


# --- ordering ---

def test_all_checks_run_in_order(validator):
    options = ValidationOptions(expected_issuer="iss", expected_audience="aud")
    token = _token({"exp": 1, "nbf": 9999999999}, header={})

    result = validator.execute(token, options)

    assert result.errors == (
        MISSING_ALGORITHM,
        TOKEN_EXPIRED,
        TOKEN_NOT_YET_VALID,
        "JWT issuer mismatch. Expected: iss, Got: None",
        "JWT audience mismatch. Expected one of: aud, Got: ",
    )
    assert result.is_expired and result.is_not_yet_valid


def test_plain_dict_token_is_validated(validator):
    token = DecodedToken(header={"alg": "HS256"}, payload={"exp": 1})

    result = validator.execute(token)

    assert result.is_expired
    assert result.errors == (TOKEN_EXPIRED,)
