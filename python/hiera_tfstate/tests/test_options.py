"""
hiera_tfstate/tests/test_options.py

Tests for option models and their validation.
"""

import pytest
from pydantic import ValidationError

from hiera_tfstate.errors import OptionsError
from hiera_tfstate.lookup import parse_options
from hiera_tfstate.models.options import ConvertOptions, LookupOptions
from hiera_tfstate.models.settings import HttpSettings, S3Settings


def test_convert_options_defaults():
    options = ConvertOptions()
    assert options.no_root_module is False
    assert options.debug is False


def test_convert_options_reject_unknown_keys():
    with pytest.raises(ValidationError):
        ConvertOptions(no_root_modules=True)


def test_file_options():
    options = parse_options(
        {"backend": "file", "statefile": "/tmp/terraform.tfstate", "debug": True}
    )
    assert options.to_convert_options() == ConvertOptions(debug=True)


def test_s3_options():
    options = parse_options(
        {"backend": "s3", "bucket": "states", "key": "prod.tfstate", "profile": "prod"}
    )
    assert options.profile == "prod"


def test_unknown_option_rejected():
    with pytest.raises(OptionsError) as excinfo:
        parse_options({"backend": "file", "statefile": "x", "no_root_modules": True})
    assert excinfo.value.field == "no_root_modules"


def test_backend_required():
    with pytest.raises(OptionsError) as excinfo:
        parse_options({"statefile": "x"})
    assert excinfo.value.field == "backend"


@pytest.mark.parametrize(
    "raw, missing",
    [
        ({"backend": "file"}, "statefile"),
        ({"backend": "s3", "bucket": "states"}, "key"),
        ({"backend": "http"}, "url"),
    ],
)
def test_backend_fields_required(raw, missing):
    with pytest.raises(OptionsError) as excinfo:
        parse_options(raw)
    assert missing in str(excinfo.value)


def test_wrong_type_rejected():
    with pytest.raises(OptionsError) as excinfo:
        parse_options({"backend": "file", "statefile": "x", "debug": "sometimes"})
    assert excinfo.value.field == "debug"


def test_unknown_backend_passes_option_validation():
    assert parse_options({"backend": "consul"}).backend == "consul"


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("TFSTATE_S3_ENDPOINT", "minio.local:9000")
    monkeypatch.setenv("TFSTATE_S3_SECURE", "false")
    monkeypatch.setenv("TFSTATE_HTTP_USERNAME", "terraform")
    s3 = S3Settings()
    assert s3.endpoint == "minio.local:9000"
    assert s3.secure is False
    assert HttpSettings().username == "terraform"


def test_lookup_options_are_frozen():
    options = LookupOptions(backend="file", statefile="x")
    with pytest.raises(ValidationError):
        options.debug = True
