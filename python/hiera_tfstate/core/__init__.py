"""
hiera_tfstate/core/__init__.py

Provides a convenient import interface for the conversion core:

- validate.py for the document preconditions
- flatten.py for the state -> flat mapping walk
- convert.py for the end-to-end conversion of raw bytes
- explain.py for the trace sink

Exports:
  - convert, parse_state, dump_flat_map
  - validate, validate_terraform_version, validate_resource_paths
  - flatten, module_path, sanitize_module, FlatMap
  - Explain, log_explain
"""

from hiera_tfstate.core.convert import convert, dump_flat_map, parse_state
from hiera_tfstate.core.explain import Explain, log_explain
from hiera_tfstate.core.flatten import (
    DELIMITER,
    ROOT_SEGMENT,
    FlatMap,
    flatten,
    join_path,
    module_path,
    sanitize_module,
)
from hiera_tfstate.core.validate import (
    validate,
    validate_resource_paths,
    validate_terraform_version,
)

__all__ = [
    "convert",
    "parse_state",
    "dump_flat_map",
    "Explain",
    "log_explain",
    "DELIMITER",
    "ROOT_SEGMENT",
    "FlatMap",
    "flatten",
    "join_path",
    "module_path",
    "sanitize_module",
    "validate",
    "validate_terraform_version",
    "validate_resource_paths",
]
