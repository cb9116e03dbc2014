"""
hiera_tfstate/core/flatten.py

Turns a validated StateDocument into a flat mapping suitable for Hiera lookups.

Raw state files keep all resources inside an array, so referring to a resource
would need volatile array indices. Instead every attribute value gets a stable
key built from where it lives:

    tfstate::<module segments...>::<type>::<name>[::<index_key>]::<attribute>

e.g. `tfstate::aws_instance::web::id` or
`tfstate::module::vpc::aws_subnet::private::0::cidr_block`.

Compound attribute values (objects, lists) are stored as-is under their
attribute key. Keys are not checked for collisions: when two resources resolve
to the same key the one that comes later in the document wins.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterator, Optional, Sequence, Tuple, Union

from hiera_tfstate.models.options import ConvertOptions
from hiera_tfstate.models.state import StateDocument

ROOT_SEGMENT = "tfstate"
DELIMITER = "::"

# Number of leading module segments ("module", "<first module name>") removed
# when no_root_module is enabled.
ROOT_MODULE_SEGMENTS = 2

FlatMap = Dict[str, Any]
Segment = Union[str, int]
Path = Tuple[Segment, ...]

_INDEX_RE = re.compile(r'\[\s*"?([^\]"]*)"?\s*\]')
_UNSAFE_RE = re.compile(r"[^A-Za-z0-9_.\-]")


def sanitize_module(module: str) -> str:
    """Rewrite a module address into plain dot-separated safe segments.

    Indexed module references become an extra segment and every character other
    than alphanumerics, '-', '_' and '.' is dropped:

        'module.a["key"].module.b[0]' -> 'module.a.key.module.b.0'
    """
    return _UNSAFE_RE.sub("", _INDEX_RE.sub(r".\1", module))


def module_path(module: Optional[str], no_root_module: bool = False) -> Tuple[str, ...]:
    """Split a resource's module address into path segments.

    Args:
        module: The resource's `module` field; None/"" for the root module.
        no_root_module: Drop the first two segments ("module", "<name>").

    Returns:
        Tuple[str, ...]: The segments, empty for the root module.
    """
    if not module:
        return ()
    segments = tuple(seg for seg in sanitize_module(module).split(".") if seg)
    if no_root_module:
        return segments[ROOT_MODULE_SEGMENTS:]
    return segments


def join_path(path: Sequence[Segment]) -> str:
    """Join path segments into a single lookup key."""
    return DELIMITER.join(str(segment) for segment in path)


def iter_flattened(
    document: StateDocument, options: ConvertOptions
) -> Iterator[Tuple[str, Any]]:
    """Yield (key, value) for every attribute of every instance, in document order."""
    for resource in document.resources:
        prefix: Path = (
            ROOT_SEGMENT,
            *module_path(resource.module, options.no_root_module),
            resource.type,
            resource.name,
        )
        for instance in resource.instances:
            instance_path = (
                prefix if instance.index_key is None else prefix + (instance.index_key,)
            )
            for attribute, value in instance.attributes.items():
                yield join_path(instance_path + (attribute,)), value


def flatten(document: StateDocument, options: ConvertOptions) -> FlatMap:
    """Build the flat mapping of a validated document.

    Later entries overwrite earlier ones on key collision.
    """
    flat: FlatMap = {}
    for key, value in iter_flattened(document, options):
        flat[key] = value
    return flat
