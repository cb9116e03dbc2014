"""
hiera_tfstate/core/validate.py

Preconditions checked on a parsed StateDocument before it is flattened:

  - the state was written by a supported Terraform version (0.13.x)
  - when root module stripping is enabled, every resource lives in a module

Both checks raise on failure; nothing is flattened for a document that fails
either of them.
"""

from __future__ import annotations

import re

from hiera_tfstate.errors import RootModuleStrippingError, UnsupportedVersionError
from hiera_tfstate.models.options import ConvertOptions
from hiera_tfstate.models.state import StateDocument

SUPPORTED_VERSION_FAMILY = "0.13.x"

# 0.13.<patch>, optionally with a pre-release or build suffix (0.13.0-beta2).
_SUPPORTED_VERSION_RE = re.compile(r"^0\.13\.\d+(?:[-+][0-9A-Za-z.\-+]*)?$")


def validate_terraform_version(document: StateDocument) -> None:
    """Ensure the state belongs to a known good Terraform version.

    Raises:
        UnsupportedVersionError: If terraform_version is not 0.13.x.
    """
    if _SUPPORTED_VERSION_RE.match(document.terraform_version.strip()):
        return
    raise UnsupportedVersionError(document.terraform_version, SUPPORTED_VERSION_FAMILY)


def validate_resource_paths(document: StateDocument, options: ConvertOptions) -> None:
    """Ensure the root module segments can be stripped from every resource path.

    Only enforced when `options.no_root_module` is set.

    Raises:
        RootModuleStrippingError: For the first resource defined in the root module.
    """
    if not options.no_root_module:
        return
    for resource in document.resources:
        if not resource.module:
            raise RootModuleStrippingError(resource.address)


def validate(document: StateDocument, options: ConvertOptions) -> None:
    """Run all document checks in order: version first, then module scope."""
    validate_terraform_version(document)
    validate_resource_paths(document, options)
