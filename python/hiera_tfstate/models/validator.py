"""
hiera_tfstate/models/validator.py

Utility functions for validating Python objects or raw JSON against a
pydantic-based type using TypeAdapter, translating pydantic's ValidationError
into one of our own error types (OptionsError, MalformedDocumentError, ...).
"""

from typing import Any, Callable, Optional, Type, TypeVar, Union

from pydantic import TypeAdapter, ValidationError

from hiera_tfstate.errors import HieraTfstateError, OptionsError

T = TypeVar("T")

ErrorFactory = Callable[[str, Optional[str]], HieraTfstateError]


def _translate(exc: ValidationError, error: ErrorFactory) -> HieraTfstateError:
    """Build our error from the first pydantic error, keeping its location."""
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    return error(first.get("msg", str(exc)), field or None)


def validate_type(
    obj: Any,
    expected_type: Type[T],
    error: ErrorFactory = OptionsError,
) -> T:
    """
    Validates that a given Python object conforms to the expected pydantic-based type.

    Args:
        obj (Any): The object to validate.
        expected_type (Type[T]): The type (pydantic or otherwise) to validate against.
        error (ErrorFactory): Builds the exception raised on failure from
            (message, field). Defaults to OptionsError.

    Returns:
        T: The validated object, cast to the expected type.

    Raises:
        HieraTfstateError: Whatever `error` builds, if validation fails.
    """
    try:
        return TypeAdapter(expected_type).validate_python(obj)
    except ValidationError as e:
        raise _translate(e, error) from e


def validate_json(
    raw: Union[str, bytes],
    expected_type: Type[T],
    error: ErrorFactory,
) -> T:
    """
    Parses raw JSON and validates it against the expected type in one pass.

    Invalid JSON and schema violations are both reported through `error`.

    Args:
        raw (Union[str, bytes]): The raw JSON document.
        expected_type (Type[T]): The type to validate against.
        error (ErrorFactory): Builds the exception raised on failure.

    Returns:
        T: The validated object.
    """
    try:
        return TypeAdapter(expected_type).validate_json(raw)
    except ValidationError as e:
        raise _translate(e, error) from e
