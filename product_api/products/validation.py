"""Payload validation for product create and update requests.

Both modes share one rule table. Strict mode (create) treats ``name``,
``price`` and ``category`` as mandatory; partial mode (update) only checks
the fields that are present. Every violation is collected, in rule order,
before a single ``ValidationError`` is raised.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Final

from product_api.core.exceptions import ValidationError
from product_api.infrastructure.database.models import (
    CATEGORY_MAX_LENGTH,
    ID_MAX_LENGTH,
    NAME_MAX_LENGTH,
)

VALIDATION_FAILED_MESSAGE: Final[str] = "Validation failed"
BODY_NOT_OBJECT_MESSAGE: Final[str] = "Request body must be a JSON object"
INVALID_ID_MESSAGE: Final[str] = "Id must be a non-empty string"


def is_non_empty_string(value: Any) -> bool:  # noqa: ANN401 - raw JSON value
    return isinstance(value, str) and bool(value.strip())


def is_non_negative_number(value: Any) -> bool:  # noqa: ANN401 - raw JSON value
    # bool is a subclass of int but never a price
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    try:
        return math.isfinite(float(value)) and value >= 0
    except OverflowError:
        return False


def is_boolean(value: Any) -> bool:  # noqa: ANN401 - raw JSON value
    return isinstance(value, bool)


def _strip(value: str) -> str:
    return value.strip()


@dataclass(frozen=True, slots=True)
class FieldRule:
    """Validation rule for one payload field.

    Attributes:
        field: Key in the JSON payload.
        attribute: Product attribute the value is stored in.
        check: Predicate the value must satisfy.
        invalid_message: Message when a present value fails ``check`` (strict).
        partial_message: Message when a present value fails ``check`` (partial).
        required_message: Message when the field is absent in strict mode, or
            None if the field is optional.
        normalize: Conversion applied to a valid value.
        max_length: Longest accepted string after normalization, or None.
    """

    field: str
    attribute: str
    check: Callable[[Any], bool]
    invalid_message: str
    partial_message: str
    required_message: str | None = None
    normalize: Callable[[Any], Any] = lambda value: value
    max_length: int | None = None

    @property
    def required(self) -> bool:
        return self.required_message is not None

    @property
    def too_long_message(self) -> str:
        return f"{self.field.capitalize()} must be at most {self.max_length} characters"


PRODUCT_RULES: Final[tuple[FieldRule, ...]] = (
    FieldRule(
        field="name",
        attribute="name",
        check=is_non_empty_string,
        required_message="Name is required and must be a non-empty string",
        invalid_message="Name is required and must be a non-empty string",
        partial_message="Name must be a non-empty string",
        normalize=_strip,
        max_length=NAME_MAX_LENGTH,
    ),
    FieldRule(
        field="price",
        attribute="price",
        check=is_non_negative_number,
        required_message="Price is required",
        invalid_message="Price must be a non-negative number",
        partial_message="Price must be a non-negative number",
        normalize=float,
    ),
    FieldRule(
        field="category",
        attribute="category",
        check=is_non_empty_string,
        required_message="Category is required and must be a non-empty string",
        invalid_message="Category is required and must be a non-empty string",
        partial_message="Category must be a non-empty string",
        normalize=_strip,
        max_length=CATEGORY_MAX_LENGTH,
    ),
    FieldRule(
        field="inStock",
        attribute="in_stock",
        check=is_boolean,
        invalid_message="inStock must be a boolean value",
        partial_message="inStock must be a boolean value",
    ),
)

ID_RULE: Final[FieldRule] = FieldRule(
    field="id",
    attribute="id",
    check=is_non_empty_string,
    invalid_message=INVALID_ID_MESSAGE,
    partial_message=INVALID_ID_MESSAGE,
    normalize=_strip,
    max_length=ID_MAX_LENGTH,
)

# Product attribute -> payload field name
PAYLOAD_FIELDS: Final[dict[str, str]] = {
    rule.attribute: rule.field for rule in (*PRODUCT_RULES, ID_RULE)
}


def collect_violations(
    payload: dict[str, Any],
    *,
    partial: bool = False,
) -> tuple[list[str], dict[str, Any]]:
    """Apply the product rules to ``payload``.

    Args:
        payload: Decoded JSON object from the request body.
        partial: True for update semantics, False for create.

    Returns:
        tuple[list[str], dict[str, Any]]: Violation messages in rule order and
            the normalized values keyed by Product attribute. Unknown keys are
            dropped; ``id`` is only considered on create.
    """
    rules = PRODUCT_RULES if partial else (*PRODUCT_RULES, ID_RULE)
    violations: list[str] = []
    values: dict[str, Any] = {}

    for rule in rules:
        if rule.field not in payload:
            if not partial and rule.required:
                violations.append(rule.required_message or rule.invalid_message)
            continue

        value = payload[rule.field]

        # null means "not provided" on create
        if value is None and not partial:
            if rule.required:
                violations.append(rule.required_message or rule.invalid_message)
            continue

        if not rule.check(value):
            violations.append(rule.partial_message if partial else rule.invalid_message)
            continue

        normalized = rule.normalize(value)
        if rule.max_length is not None and len(normalized) > rule.max_length:
            violations.append(rule.too_long_message)
            continue

        values[rule.attribute] = normalized

    return violations, values


def ensure_json_object(body: Any) -> dict[str, Any]:  # noqa: ANN401 - decoded JSON
    """Reject request bodies that are not JSON objects.

    Raises:
        ValidationError: If ``body`` is not a dict.
    """
    if not isinstance(body, dict):
        raise ValidationError(BODY_NOT_OBJECT_MESSAGE, errors=[BODY_NOT_OBJECT_MESSAGE])
    return body


def validate_product_payload(
    payload: Any,  # noqa: ANN401 - decoded JSON
    *,
    partial: bool = False,
) -> dict[str, Any]:
    """Validate a create or update payload.

    Args:
        payload: Decoded JSON request body.
        partial: True for update semantics, False for create.

    Returns:
        dict[str, Any]: Normalized values keyed by Product attribute.

    Raises:
        ValidationError: If the body is not an object or any rule fails. All
            violations are listed in ``errors``.
    """
    body = ensure_json_object(payload)
    violations, values = collect_violations(body, partial=partial)

    if violations:
        raise ValidationError(
            VALIDATION_FAILED_MESSAGE,
            errors=violations,
            context={"mode": "partial" if partial else "strict"},
        )

    return values
