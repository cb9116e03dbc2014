"""
hiera_tfstate/models/state.py

Holds the pydantic models for a raw Terraform state document (state format v4,
as written to terraform.tfstate by Terraform 0.12+):

  - InstanceRecord: one concrete instance of a resource (count / for_each fan-out)
  - ResourceRecord: one resource block, possibly inside a (nested) module
  - StateDocument: the whole state file

Only the fields the flattening needs are declared; everything else in the state
(providers, dependencies, outputs, ...) is ignored. All models are frozen so the
parsed document can be shared but never mutated.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict


class InstanceRecord(BaseModel):
    """One instance of a resource.

    Attributes:
        index_key: The count index (int) or for_each key (str). Absent for
            single-instance resources.
        attributes: Attribute name -> value, in document order. Values may be
            compound (objects / lists) and are kept as-is.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    index_key: Optional[Union[int, str]] = None
    attributes: Dict[str, Any]


class ResourceRecord(BaseModel):
    """One resource block of the state.

    Attributes:
        module: Dotted module path such as "module.a.module.b" or
            'module.a["key"]'; None for resources in the root module.
        mode: "managed" or "data".
        type: Resource type, e.g. "aws_instance".
        name: Resource name, e.g. "web".
        instances: The resource's instances, in document order.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    module: Optional[str] = None
    mode: str = "managed"
    type: str
    name: str
    instances: List[InstanceRecord]

    @property
    def address(self) -> str:
        """Terraform-style address, e.g. "module.net.aws_subnet.public"."""
        parts: List[str] = []
        if self.module:
            parts.append(self.module)
        if self.mode == "data":
            parts.append("data")
        parts.extend([self.type, self.name])
        return ".".join(parts)


class StateDocument(BaseModel):
    """A parsed Terraform state document.

    Attributes:
        terraform_version: Version of Terraform that last wrote the state.
        resources: All resources, in document order.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    terraform_version: str
    resources: List[ResourceRecord]
