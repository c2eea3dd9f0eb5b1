"""
Tests for the bootstrap spec and its password secret names
"""

# Third Party
import pytest

# Local
from arangodb_operator.exceptions import ValidationError
from arangodb_operator.spec import BootstrapSpec, PasswordSecretName
from arangodb_operator.spec.bootstrap import get_secret_name_for_user_password
from arangodb_operator.test_helpers.helpers import (
    TEST_DEPLOYMENT_NAME,
    configure_logging,
)

configure_logging()

## PasswordSecretName ##########################################################


def test_password_secret_name_sentinels():
    """Make sure the sentinels are recognized"""
    assert PasswordSecretName("None").is_none()
    assert PasswordSecretName("").is_none()
    assert PasswordSecretName("Auto").is_auto()
    assert not PasswordSecretName("my-secret").is_none()
    assert not PasswordSecretName("my-secret").is_auto()


def test_generated_secret_name():
    """Make sure generated names follow <deployment>-<user>-password"""
    assert get_secret_name_for_user_password("db", "root") == "db-root-password"


## Defaults ####################################################################


def test_set_defaults_empty():
    """Make sure root gets a generated secret when nothing is listed"""
    spec = BootstrapSpec()
    spec.set_defaults(TEST_DEPLOYMENT_NAME)
    assert spec.password_secret_names == {
        "root": f"{TEST_DEPLOYMENT_NAME}-root-password"
    }


def test_set_defaults_resolves_auto():
    """Make sure every Auto entry is resolved"""
    spec = BootstrapSpec.from_dict(
        {"passwordSecretNames": {"root": "Auto", "other": "Auto"}}
    )
    spec.set_defaults(TEST_DEPLOYMENT_NAME)
    assert spec.password_secret_names == {
        "root": f"{TEST_DEPLOYMENT_NAME}-root-password",
        "other": f"{TEST_DEPLOYMENT_NAME}-other-password",
    }


def test_set_defaults_keeps_concrete_names():
    """Make sure concrete names and the None sentinel are left alone and root is
    added when missing
    """
    spec = BootstrapSpec.from_dict(
        {"passwordSecretNames": {"other": "my-secret", "guest": "None"}}
    )
    spec.set_defaults(TEST_DEPLOYMENT_NAME)
    assert spec.password_secret_names == {
        "other": "my-secret",
        "guest": "None",
        "root": f"{TEST_DEPLOYMENT_NAME}-root-password",
    }
    assert isinstance(spec.password_secret_names["root"], PasswordSecretName)


def test_set_defaults_keeps_root_none():
    """Make sure an explicit None for root is kept"""
    spec = BootstrapSpec.from_dict({"passwordSecretNames": {"root": "None"}})
    spec.set_defaults(TEST_DEPLOYMENT_NAME)
    assert spec.password_secret_names.get_secret_name("root").is_none()


def test_set_defaults_idempotent():
    """Make sure defaulting twice equals defaulting once"""
    spec = BootstrapSpec.from_dict({"passwordSecretNames": {"other": "Auto"}})
    spec.set_defaults(TEST_DEPLOYMENT_NAME)
    once = spec.to_dict()
    spec.set_defaults(TEST_DEPLOYMENT_NAME)
    assert spec.to_dict() == once


def test_set_defaults_from_copies():
    """Make sure an unset list is copied from the source, not shared"""
    source = BootstrapSpec.from_dict({"passwordSecretNames": {"root": "a-secret"}})
    spec = BootstrapSpec()
    spec.set_defaults_from(source)
    assert spec.password_secret_names == {"root": "a-secret"}
    spec.password_secret_names["other"] = "b-secret"
    assert "other" not in source.password_secret_names


def test_set_defaults_from_keeps_own():
    """Make sure a set list is not touched"""
    spec = BootstrapSpec.from_dict({"passwordSecretNames": {"root": "mine"}})
    spec.set_defaults_from(
        BootstrapSpec.from_dict({"passwordSecretNames": {"root": "accepted"}})
    )
    assert spec.password_secret_names == {"root": "mine"}


## Validation ##################################################################


def test_validate_valid():
    """Make sure sentinels and concrete names pass"""
    BootstrapSpec().validate()
    BootstrapSpec.from_dict(
        {"passwordSecretNames": {"root": "None", "a": "Auto", "b": "b-secret"}}
    ).validate()


def test_validate_invalid():
    """Make sure malformed secret names fail"""
    with pytest.raises(ValidationError):
        BootstrapSpec.from_dict({"passwordSecretNames": {"root": "Bad"}}).validate()


def test_nothing_is_immutable():
    """Make sure bootstrap settings can always change"""
    target = BootstrapSpec.from_dict({"passwordSecretNames": {"root": "b"}})
    source = BootstrapSpec.from_dict({"passwordSecretNames": {"root": "a"}})
    assert source.reset_immutable_fields("bootstrap", target) == []
    assert target.password_secret_names == {"root": "b"}
