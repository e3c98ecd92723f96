"""
Tests for result types and exceptions.
"""

import copy
import pickle

import pytest

from dataknobs_rules import (
    MISSING,
    EvaluatorNotFoundError,
    RecordValidationError,
    RulesError,
    ValidationResult,
    Violation,
    ViolationKind,
)


class TestValidationResult:
    """Test ValidationResult functionality."""

    def test_success_result(self):
        """Test creating a successful result."""
        result = ValidationResult.success({"id": "1"})
        assert result.valid is True
        assert result.value == {"id": "1"}
        assert result.violation is None
        assert result.error is None
        assert result.field is None
        assert bool(result) is True

    def test_failure_result(self):
        """Test creating a failed result."""
        violation = Violation("id", ViolationKind.REQUIRED, "id is required")
        result = ValidationResult.failure({}, violation)
        assert result.valid is False
        assert result.value == {}
        assert result.error == "id is required"
        assert result.field == "id"
        assert bool(result) is False

    def test_raise_for_error(self):
        violation = Violation("id", ViolationKind.LENGTH, "id length must be 3 characters", {"length": 3})
        with pytest.raises(RecordValidationError) as exc_info:
            ValidationResult.failure({"id": "ab"}, violation).raise_for_error()

        error = exc_info.value
        assert error.violation is violation
        assert error.context == {
            "field": "id",
            "kind": "length",
            "message": "id length must be 3 characters",
            "params": {"length": 3},
        }
        assert isinstance(error, RulesError)


class TestMissing:
    """Test the absent-key marker."""

    def test_singleton(self):
        assert copy.copy(MISSING) is MISSING
        assert copy.deepcopy(MISSING) is MISSING
        assert pickle.loads(pickle.dumps(MISSING)) is MISSING

    def test_distinct_from_none(self):
        assert MISSING is not None
        assert not MISSING
        assert repr(MISSING) == "MISSING"


class TestExceptions:
    """Test the exception hierarchy."""

    def test_context_and_details(self):
        error = RulesError("failed", context={"a": 1})
        assert str(error) == "failed"
        assert error.context == {"a": 1}
        assert error.details == {"a": 1}

        error = RulesError("failed", context={"a": 1}, details={"b": 2})
        assert error.context == {"b": 2}

        assert RulesError("failed").context == {}

    def test_evaluator_not_found(self):
        error = EvaluatorNotFoundError("number", ["string"])
        assert str(error) == "No field evaluator registered for rule type 'number'"
        assert error.context == {"type_name": "number", "available": ["string"]}
