"""
hiera_tfstate/errors.py

Defines the exception hierarchy raised by hiera_tfstate:

  HieraTfstateError
   ├─ ConversionError           (raised by the state conversion core)
   │   ├─ UnsupportedVersionError
   │   ├─ RootModuleStrippingError
   │   └─ MalformedDocumentError
   ├─ OptionsError              (invalid lookup / convert options)
   └─ SourceError               (raised while loading the raw state)
       ├─ SourceNotFoundError
       ├─ SourceUnavailableError
       └─ UnsupportedBackendError

Every error carries the structured context needed to act on it (the offending
version, resource address, field or location) in addition to its message,
which is meant to be shown verbatim to whoever performs the lookup.
"""

from __future__ import annotations

from typing import Optional


class HieraTfstateError(Exception):
    """Base class for all hiera_tfstate errors."""


class ConversionError(HieraTfstateError):
    """A state document could not be converted into a flat mapping."""


class UnsupportedVersionError(ConversionError):
    """The state was written by a Terraform version outside the supported family.

    Attributes:
        terraform_version (str): The version recorded in the state document.
        supported (str): Human-readable supported version family, e.g. "0.13.x".
    """

    def __init__(self, terraform_version: str, supported: str) -> None:
        super().__init__(
            f"this backend supports only Terraform {supported} state files "
            f"(got terraform_version={terraform_version!r})"
        )
        self.terraform_version = terraform_version
        self.supported = supported


class RootModuleStrippingError(ConversionError):
    """Root module stripping was requested but a resource lives in the root module.

    Attributes:
        resource_address (str): Address of the first resource without a module.
    """

    def __init__(self, resource_address: str) -> None:
        super().__init__(
            "no_root_module works only if all resources are in a module; "
            f"resource {resource_address!r} is defined in the root module"
        )
        self.resource_address = resource_address


class MalformedDocumentError(ConversionError):
    """The raw document is not a structurally valid Terraform state.

    Attributes:
        field (Optional[str]): Dotted location of the offending field, if known.
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        if field:
            message = f"{message} (at {field})"
        super().__init__(f"malformed terraform state: {message}")
        self.field = field


class OptionsError(HieraTfstateError):
    """Lookup or conversion options failed validation.

    Attributes:
        field (Optional[str]): The option that was rejected, if known.
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        if field:
            message = f"{field}: {message}"
        super().__init__(f"invalid backend options: {message}")
        self.field = field


class SourceError(HieraTfstateError):
    """The raw state document could not be loaded.

    Attributes:
        backend (str): The backend that failed, e.g. "file" or "s3".
        location (str): Where the state was expected (path, s3://bucket/key, URL).
    """

    def __init__(self, message: str, backend: str, location: str) -> None:
        super().__init__(message)
        self.backend = backend
        self.location = location


class SourceNotFoundError(SourceError):
    """The state file/object does not exist at the configured location."""

    def __init__(self, backend: str, location: str) -> None:
        super().__init__(
            f"terraform state {location} not found ({backend} backend)",
            backend,
            location,
        )


class SourceUnavailableError(SourceError):
    """The state location exists (or may exist) but could not be read."""

    def __init__(self, backend: str, location: str, reason: str) -> None:
        super().__init__(
            f"failed to read terraform state {location} ({backend} backend): {reason}",
            backend,
            location,
        )
        self.reason = reason


class UnsupportedBackendError(SourceError):
    """No loader exists for the requested backend."""

    def __init__(self, backend: str) -> None:
        super().__init__(f"unsupported backend: {backend!r}", backend, "")
