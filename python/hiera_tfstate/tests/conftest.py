"""
hiera_tfstate/tests/conftest.py

Shared fixtures: builders for raw Terraform state documents.
"""

import json
from typing import Any, Callable, Dict, List, Optional

import pytest


def _resource(
    rtype: str,
    name: str,
    instances: List[Dict[str, Any]],
    module: Optional[str] = None,
    mode: str = "managed",
) -> Dict[str, Any]:
    resource: Dict[str, Any] = {
        "mode": mode,
        "type": rtype,
        "name": name,
        "provider": 'provider["registry.terraform.io/hashicorp/aws"]',
        "instances": instances,
    }
    if module is not None:
        resource["module"] = module
    return resource


def _state(
    resources: List[Dict[str, Any]], terraform_version: str = "0.13.5"
) -> Dict[str, Any]:
    return {
        "version": 4,
        "terraform_version": terraform_version,
        "serial": 7,
        "lineage": "3f1e0c2a-0000-4000-8000-000000000000",
        "outputs": {},
        "resources": resources,
    }


@pytest.fixture
def make_resource() -> Callable[..., Dict[str, Any]]:
    """Builds one raw resource block."""
    return _resource


@pytest.fixture
def make_state() -> Callable[..., Dict[str, Any]]:
    """Builds a raw state document around a list of resource blocks."""
    return _state


@pytest.fixture
def sample_state() -> Dict[str, Any]:
    """A small but realistic 0.13 state: root, module, count and for_each resources."""
    return _state(
        [
            _resource(
                "aws_instance",
                "web",
                [{"schema_version": 1, "attributes": {"id": "i-123", "ami": "ami-1"}}],
            ),
            _resource(
                "aws_subnet",
                "private",
                [
                    {"index_key": 0, "attributes": {"id": "subnet-a", "cidr_block": "10.0.1.0/24"}},
                    {"index_key": 1, "attributes": {"id": "subnet-b", "cidr_block": "10.0.2.0/24"}},
                ],
                module="module.vpc",
            ),
            _resource(
                "aws_iam_user",
                "users",
                [
                    {"index_key": "alice", "attributes": {"arn": "arn:aws:iam::1:user/alice"}},
                ],
                module='module.iam["prod"]',
            ),
        ]
    )


@pytest.fixture
def sample_state_bytes(sample_state: Dict[str, Any]) -> bytes:
    return json.dumps(sample_state).encode("utf-8")
