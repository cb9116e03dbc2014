"""
hiera_tfstate/core/convert.py

Entry point of the conversion core: raw state bytes in, flat mapping out.

    decode + parse -> validate -> flatten -> (debug) dump to the explain sink

No I/O happens here; loading the raw document is up to the caller (see
hiera_tfstate.utils.sources). Any failure aborts the whole conversion, a
partially built mapping is never returned.
"""

from __future__ import annotations

from typing import Optional, Union

import yaml

from hiera_tfstate.core.explain import Explain, log_explain
from hiera_tfstate.core.flatten import FlatMap, flatten
from hiera_tfstate.core.validate import validate
from hiera_tfstate.errors import MalformedDocumentError
from hiera_tfstate.models.options import ConvertOptions
from hiera_tfstate.models.state import StateDocument
from hiera_tfstate.models.validator import validate_json


def parse_state(raw: Union[str, bytes]) -> StateDocument:
    """Parse raw JSON into a StateDocument.

    Raises:
        MalformedDocumentError: If the JSON is invalid or lacks required fields
            (resources, instances, attributes, ...).
    """
    return validate_json(raw, StateDocument, MalformedDocumentError)


def dump_flat_map(flat: FlatMap) -> str:
    """Render a flat mapping as YAML, keys in insertion order."""
    return yaml.safe_dump(flat, default_flow_style=False, sort_keys=False)


def convert(
    raw: Union[str, bytes],
    options: Optional[ConvertOptions] = None,
    explain: Optional[Explain] = None,
) -> FlatMap:
    """Convert a raw Terraform state document into a flat key/value mapping.

    Args:
        raw (Union[str, bytes]): The state file contents.
        options (Optional[ConvertOptions]): Conversion switches; defaults apply
            when omitted.
        explain (Optional[Explain]): Trace sink; defaults to log_explain.

    Returns:
        FlatMap: `tfstate::...` key -> attribute value.

    Raises:
        MalformedDocumentError: Structurally invalid document.
        UnsupportedVersionError: State written by an unsupported Terraform.
        RootModuleStrippingError: no_root_module set but a resource has no module.
    """
    if options is None:
        options = ConvertOptions()
    if explain is None:
        explain = log_explain

    document = parse_state(raw)
    validate(document, options)
    flat = flatten(document, options)

    if options.debug:
        snapshot = dict(flat)
        explain(lambda: dump_flat_map(snapshot))
    return flat
