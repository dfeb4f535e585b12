"""Unit tests for product payload validation."""

import math
from typing import Any

import pytest
import pytest_check as check

from product_api.core.exceptions import ValidationError
from product_api.products.validation import (
    BODY_NOT_OBJECT_MESSAGE,
    INVALID_ID_MESSAGE,
    PRODUCT_RULES,
    collect_violations,
    is_non_negative_number,
    validate_product_payload,
)


@pytest.mark.unit
class TestFieldChecks:
    """Test the primitive value predicates."""

    @pytest.mark.parametrize("value", [0, 0.0, 1, 19.99, 10**6])
    def test_accepts_non_negative_numbers(self, value: float) -> None:
        assert is_non_negative_number(value) is True

    @pytest.mark.parametrize(
        "value", [-1, -0.01, True, False, "10", None, math.inf, math.nan, 10**400]
    )
    def test_rejects_other_values(self, value: Any) -> None:
        assert is_non_negative_number(value) is False


@pytest.mark.unit
class TestStrictValidation:
    """Test create (strict) validation."""

    def test_valid_payload_returns_normalized_values(self) -> None:
        values = validate_product_payload(
            {"name": "  Desk Lamp ", "price": 30, "category": "home", "inStock": False}
        )

        assert values == {
            "name": "Desk Lamp",
            "price": 30.0,
            "category": "home",
            "in_stock": False,
        }

    def test_in_stock_is_optional(self) -> None:
        values = validate_product_payload({"name": "Lamp", "price": 1, "category": "home"})

        assert "in_stock" not in values

    def test_missing_required_fields_are_all_reported(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_product_payload({})

        error = exc_info.value
        check.equal(error.message, "Validation failed")
        check.equal(
            error.errors,
            [
                "Name is required and must be a non-empty string",
                "Price is required",
                "Category is required and must be a non-empty string",
            ],
        )
        check.equal(error.status_code, 400)

    def test_empty_name_and_negative_price(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_product_payload({"name": "", "price": -50})

        assert exc_info.value.errors == [
            "Name is required and must be a non-empty string",
            "Price must be a non-negative number",
            "Category is required and must be a non-empty string",
        ]

    def test_null_counts_as_missing(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_product_payload(
                {"name": None, "price": None, "category": "x", "inStock": None}
            )

        assert exc_info.value.errors == [
            "Name is required and must be a non-empty string",
            "Price is required",
        ]

    def test_whitespace_only_strings_are_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_product_payload({"name": "   ", "price": 1, "category": "\t"})

        assert len(exc_info.value.errors) == 2

    def test_boolean_price_is_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_product_payload({"name": "A", "price": True, "category": "b"})

        assert exc_info.value.errors == ["Price must be a non-negative number"]

    def test_non_boolean_in_stock_is_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_product_payload(
                {"name": "A", "price": 1, "category": "b", "inStock": "yes"}
            )

        assert exc_info.value.errors == ["inStock must be a boolean value"]

    def test_unknown_fields_are_dropped(self) -> None:
        values = validate_product_payload(
            {"name": "A", "price": 1, "category": "b", "createdAt": "x", "color": "red"}
        )

        assert set(values) == {"name", "price", "category"}

    def test_caller_supplied_id_is_kept(self) -> None:
        values = validate_product_payload(
            {"id": "sku-1", "name": "A", "price": 1, "category": "b"}
        )

        assert values["id"] == "sku-1"

    @pytest.mark.parametrize("bad_id", ["", "  ", 42, ["x"]])
    def test_invalid_id_is_rejected(self, bad_id: Any) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_product_payload(
                {"id": bad_id, "name": "A", "price": 1, "category": "b"}
            )

        assert exc_info.value.errors == [INVALID_ID_MESSAGE]

    def test_overlong_strings_are_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_product_payload(
                {
                    "id": "i" * 65,
                    "name": "n" * 256,
                    "price": 1,
                    "category": "c" * 101,
                }
            )

        assert exc_info.value.errors == [
            "Name must be at most 255 characters",
            "Category must be at most 100 characters",
            "Id must be at most 64 characters",
        ]

    def test_length_is_measured_after_trimming(self) -> None:
        values = validate_product_payload(
            {"name": f"  {'n' * 255}  ", "price": 1, "category": "c"}
        )

        assert len(values["name"]) == 255

    @pytest.mark.parametrize("body", [[], "text", 3, None])
    def test_non_object_body_is_rejected(self, body: Any) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_product_payload(body)

        assert exc_info.value.message == BODY_NOT_OBJECT_MESSAGE


@pytest.mark.unit
class TestPartialValidation:
    """Test update (partial) validation."""

    def test_empty_payload_is_valid(self) -> None:
        assert validate_product_payload({}, partial=True) == {}

    def test_only_present_fields_are_returned(self) -> None:
        values = validate_product_payload({"price": 12.5}, partial=True)

        assert values == {"price": 12.5}

    def test_negative_price_is_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_product_payload({"price": -1}, partial=True)

        assert exc_info.value.errors == ["Price must be a non-negative number"]

    def test_null_is_invalid(self) -> None:
        violations, values = collect_violations(
            {"name": None, "category": None, "inStock": None}, partial=True
        )

        assert violations == [
            "Name must be a non-empty string",
            "Category must be a non-empty string",
            "inStock must be a boolean value",
        ]
        assert values == {}

    def test_overlong_name_is_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_product_payload({"name": "n" * 300}, partial=True)

        assert exc_info.value.errors == ["Name must be at most 255 characters"]

    def test_id_is_ignored(self) -> None:
        assert validate_product_payload({"id": "new-id"}, partial=True) == {}

    def test_violations_follow_rule_order(self) -> None:
        violations, _ = collect_violations(
            {"inStock": 1, "category": "", "price": "free", "name": ""}, partial=True
        )

        expected = [rule.partial_message for rule in PRODUCT_RULES]
        assert violations == expected
