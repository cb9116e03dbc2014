"""
hiera_tfstate/models/options.py

Pydantic models for the options accepted by hiera_tfstate:

  - ConvertOptions: the two switches the conversion core understands.
  - LookupOptions: the full backend `options` hash (as configured in
    hiera.yaml), i.e. where to load the state from plus the ConvertOptions.

Unknown keys are rejected by both models, so a typo such as `no_root_modules`
fails loudly instead of being ignored.
"""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ConvertOptions(BaseModel):
    """Switches for the state -> flat mapping conversion.

    Attributes:
        no_root_module (bool): Drop the leading `module.<name>` segments of every
            module path. Requires that every resource lives in a module.
        debug (bool): Dump the complete flattened mapping to the explain sink.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    no_root_module: bool = False
    debug: bool = False


# Fields each known backend cannot do without.
_REQUIRED_BY_BACKEND: Dict[str, tuple] = {
    "file": ("statefile",),
    "s3": ("bucket", "key"),
    "http": ("url",),
}


class LookupOptions(BaseModel):
    """The backend options hash.

    Which fields are required depends on `backend`:
      - file: statefile
      - s3:   bucket, key (profile, endpoint, region optional)
      - http: url (headers, timeout optional)

    An unknown `backend` passes validation here; it is rejected when a state
    source is requested for it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    backend: str = Field(..., description="Where to load the state from.")

    # file backend
    statefile: Optional[str] = Field(None, description="Path to a local state file.")

    # s3 backend
    bucket: Optional[str] = Field(None, description="S3 bucket holding the state.")
    key: Optional[str] = Field(None, description="Object key of the state.")
    profile: Optional[str] = Field(
        None, description="AWS shared-credentials profile to authenticate with."
    )
    endpoint: Optional[str] = Field(
        None, description="S3 endpoint (host[:port]); overrides the settings."
    )
    region: Optional[str] = Field(None, description="S3 region; overrides the settings.")

    # http backend
    url: Optional[str] = Field(None, description="Terraform http backend address.")
    headers: Dict[str, str] = Field(
        default_factory=dict, description="Extra request headers."
    )
    timeout: Optional[float] = Field(
        None, gt=0, description="Total request timeout in seconds."
    )

    no_root_module: bool = False
    debug: bool = False

    @model_validator(mode="after")
    def check_backend_fields(self) -> "LookupOptions":
        """Ensure the fields required by the chosen backend are present."""
        missing = [
            name
            for name in _REQUIRED_BY_BACKEND.get(self.backend, ())
            if not getattr(self, name)
        ]
        if missing:
            raise ValueError(
                f"backend {self.backend!r} requires option(s): {', '.join(missing)}"
            )
        return self

    def to_convert_options(self) -> ConvertOptions:
        """Project these options onto the switches understood by the core."""
        return ConvertOptions(no_root_module=self.no_root_module, debug=self.debug)
