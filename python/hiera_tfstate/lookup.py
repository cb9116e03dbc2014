"""
hiera_tfstate/lookup.py

The Hiera-style `data_hash` entry point: validate the backend options, load the
raw state from the configured source and convert it into the flat mapping.

Usage example:
    import asyncio
    from hiera_tfstate.lookup import data_hash, lookup_key

    flat = asyncio.run(
        data_hash({"backend": "file", "statefile": "terraform.tfstate"})
    )
    print(lookup_key(flat, "aws_instance::web::id"))
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from hiera_tfstate.core.convert import convert
from hiera_tfstate.core.explain import Explain, log_explain
from hiera_tfstate.core.flatten import DELIMITER, ROOT_SEGMENT, FlatMap
from hiera_tfstate.models.options import LookupOptions
from hiera_tfstate.models.settings import HttpSettings, S3Settings
from hiera_tfstate.models.validator import validate_type
from hiera_tfstate.utils.sources import get_state_source

logger = logging.getLogger(__name__)


REDACTED = "***"


def redact_options(options: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy of the options with request header values masked."""
    redacted = dict(options)
    headers = redacted.get("headers")
    if isinstance(headers, Mapping):
        redacted["headers"] = {name: REDACTED for name in headers}
    return redacted


def parse_options(options: Mapping[str, Any]) -> LookupOptions:
    """Validate a raw options mapping into LookupOptions.

    Raises:
        OptionsError: On unknown keys, wrong types or missing backend fields.
    """
    return validate_type(dict(options), LookupOptions)


async def data_hash(
    options: Mapping[str, Any],
    explain: Optional[Explain] = None,
    *,
    s3_settings: Optional[S3Settings] = None,
    http_settings: Optional[HttpSettings] = None,
) -> FlatMap:
    """
    Load the configured state and return its flattened key/value mapping.

    Args:
        options (Mapping[str, Any]): The backend options hash.
        explain (Optional[Explain]): Trace sink; defaults to log_explain.
        s3_settings (Optional[S3Settings]): Settings for the s3 backend.
        http_settings (Optional[HttpSettings]): Settings for the http backend.

    Returns:
        FlatMap: `tfstate::...` key -> attribute value.

    Raises:
        OptionsError: If the options are invalid.
        SourceError: If the state cannot be loaded (or the backend is unknown).
        ConversionError: If the state cannot be converted.
    """
    if explain is None:
        explain = log_explain
    explain(lambda: f"Backend options: {redact_options(options)}")

    lookup_options = parse_options(options)
    source = get_state_source(
        lookup_options, s3_settings=s3_settings, http_settings=http_settings
    )
    raw = await source.read()
    logger.debug("Read %d bytes of terraform state from %s", len(raw), source.location)

    flat = convert(raw, lookup_options.to_convert_options(), explain)
    logger.debug("Flattened %s into %d keys", source.location, len(flat))
    return flat


def lookup_key(flat: FlatMap, key: str) -> Any:
    """
    Return the value stored under `key`.

    The leading `tfstate::` may be omitted.

    Raises:
        KeyError: If there is no such key.
    """
    if key in flat:
        return flat[key]
    prefixed = f"{ROOT_SEGMENT}{DELIMITER}{key}"
    if prefixed in flat:
        return flat[prefixed]
    raise KeyError(key)
