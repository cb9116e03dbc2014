"""
hiera_tfstate/tests/test_flatten.py

Tests for the state -> flat mapping walk.
"""

from hiera_tfstate.core.flatten import (
    flatten,
    join_path,
    module_path,
    sanitize_module,
)
from hiera_tfstate.models.options import ConvertOptions
from hiera_tfstate.models.state import StateDocument


def _flatten(raw_state, **options):
    return flatten(StateDocument.model_validate(raw_state), ConvertOptions(**options))


# ---------------------------------------------------------------------------
# module paths
# ---------------------------------------------------------------------------


def test_module_path_root_module_is_empty():
    assert module_path(None) == ()
    assert module_path("") == ()


def test_module_path_splits_nested_modules():
    assert module_path("module.foo.module.bar") == ("module", "foo", "module", "bar")


def test_module_path_no_root_module_drops_two_segments():
    assert module_path("module.foo.module.bar", no_root_module=True) == ("module", "bar")
    assert module_path("module.foo", no_root_module=True) == ()


def test_sanitize_turns_index_into_segment():
    assert sanitize_module('module.foo["x"]') == "module.foo.x"
    assert sanitize_module("module.foo[0].module.bar") == "module.foo.0.module.bar"


def test_sanitize_drops_unsafe_characters():
    assert sanitize_module('module.a["we::ird/key"]') == "module.a.weirdkey"
    assert module_path('module.a["b c"]') == ("module", "a", "bc")


def test_join_path_stringifies_segments():
    assert join_path(("tfstate", "aws_instance", "web", 0, "id")) == (
        "tfstate::aws_instance::web::0::id"
    )


# ---------------------------------------------------------------------------
# flattening
# ---------------------------------------------------------------------------


def test_single_resource_shape(make_state, make_resource):
    state = make_state(
        [make_resource("aws_instance", "web", [{"attributes": {"id": "i-123"}}])]
    )
    assert _flatten(state) == {"tfstate::aws_instance::web::id": "i-123"}


def test_fan_out_instances_get_their_own_index(make_state, make_resource):
    state = make_state(
        [
            make_resource(
                "aws_instance",
                "web",
                [
                    {"index_key": 0, "attributes": {"id": "i-0"}},
                    {"index_key": 1, "attributes": {"id": "i-1"}},
                ],
            )
        ]
    )
    assert _flatten(state) == {
        "tfstate::aws_instance::web::0::id": "i-0",
        "tfstate::aws_instance::web::1::id": "i-1",
    }


def test_for_each_string_keys(make_state, make_resource):
    state = make_state(
        [
            make_resource(
                "aws_s3_bucket",
                "logs",
                [{"index_key": "eu", "attributes": {"bucket": "logs-eu"}}],
            )
        ]
    )
    assert _flatten(state) == {"tfstate::aws_s3_bucket::logs::eu::bucket": "logs-eu"}


def test_module_segments_are_spliced(make_state, make_resource):
    state = make_state(
        [
            make_resource(
                "aws_vpc",
                "main",
                [{"attributes": {"id": "vpc-1"}}],
                module="module.foo.module.bar",
            )
        ]
    )
    assert _flatten(state) == {
        "tfstate::module::foo::module::bar::aws_vpc::main::id": "vpc-1"
    }


def test_no_root_module_strips_convention_segments(make_state, make_resource):
    state = make_state(
        [
            make_resource(
                "aws_vpc", "main", [{"attributes": {"id": "vpc-1"}}], module="module.net"
            ),
            make_resource(
                "aws_subnet",
                "a",
                [{"attributes": {"id": "subnet-1"}}],
                module="module.net.module.subnets",
            ),
        ]
    )
    assert _flatten(state, no_root_module=True) == {
        "tfstate::aws_vpc::main::id": "vpc-1",
        "tfstate::module::subnets::aws_subnet::a::id": "subnet-1",
    }


def test_indexed_module_is_sanitized(make_state, make_resource):
    state = make_state(
        [
            make_resource(
                "aws_iam_user",
                "u",
                [{"attributes": {"name": "alice"}}],
                module='module.foo["x"]',
            )
        ]
    )
    flat = _flatten(state)
    assert flat == {"tfstate::module::foo::x::aws_iam_user::u::name": "alice"}
    assert all('"' not in key and "[" not in key for key in flat)


def test_attributes_keep_document_order(make_state, make_resource):
    state = make_state(
        [
            make_resource(
                "aws_instance",
                "web",
                [{"attributes": {"id": "i-1", "ami": "ami-1", "arn": "arn:1"}}],
            )
        ]
    )
    assert list(_flatten(state)) == [
        "tfstate::aws_instance::web::id",
        "tfstate::aws_instance::web::ami",
        "tfstate::aws_instance::web::arn",
    ]


def test_compound_values_are_kept_as_is(make_state, make_resource):
    tags = {"Name": "web", "env": "prod"}
    state = make_state(
        [
            make_resource(
                "aws_instance",
                "web",
                [{"attributes": {"tags": tags, "security_groups": ["sg-1", "sg-2"]}}],
            )
        ]
    )
    flat = _flatten(state)
    assert flat["tfstate::aws_instance::web::tags"] == tags
    assert flat["tfstate::aws_instance::web::security_groups"] == ["sg-1", "sg-2"]


def test_collisions_last_write_wins(make_state, make_resource):
    state = make_state(
        [
            make_resource("aws_ami", "ubuntu", [{"attributes": {"id": "first"}}]),
            make_resource(
                "aws_ami", "ubuntu", [{"attributes": {"id": "second"}}], mode="data"
            ),
        ]
    )
    assert _flatten(state) == {"tfstate::aws_ami::ubuntu::id": "second"}


def test_flatten_is_deterministic(sample_state):
    first = _flatten(sample_state)
    second = _flatten(sample_state)
    assert first == second
    assert list(first) == list(second)


def test_sample_state(sample_state):
    assert _flatten(sample_state) == {
        "tfstate::aws_instance::web::id": "i-123",
        "tfstate::aws_instance::web::ami": "ami-1",
        "tfstate::module::vpc::aws_subnet::private::0::id": "subnet-a",
        "tfstate::module::vpc::aws_subnet::private::0::cidr_block": "10.0.1.0/24",
        "tfstate::module::vpc::aws_subnet::private::1::id": "subnet-b",
        "tfstate::module::vpc::aws_subnet::private::1::cidr_block": "10.0.2.0/24",
        "tfstate::module::iam::prod::aws_iam_user::users::alice::arn": (
            "arn:aws:iam::1:user/alice"
        ),
    }
