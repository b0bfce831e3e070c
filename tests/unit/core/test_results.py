"""Tests for protocol result types and errors."""

import pytest

from composablestate.core.errors import (
    ContractError,
    DecodeError,
    DomainError,
    EncodeError,
    UnresolvedDependencies,
)
from composablestate.core.results import (
    UpdateModification,
    ValidateResult,
    ValidationOutcome,
)


class TestValidateResult:
    """Tests for ValidateResult constructors."""

    def test_valid(self):
        result = ValidateResult.valid()
        assert result.outcome is ValidationOutcome.VALID
        assert result.is_valid
        assert result.related == ()

    def test_invalid_keeps_reason(self):
        result = ValidateResult.invalid("too big")
        assert result.is_invalid
        assert result.reason == "too big"

    def test_request_related(self):
        result = ValidateResult.request_related(["x", "y"])
        assert result.requests_related
        assert result.related == ("x", "y")

    def test_request_related_needs_keys(self):
        with pytest.raises(ValueError):
            ValidateResult.request_related([])

    def test_is_immutable(self):
        result = ValidateResult.valid()
        with pytest.raises(AttributeError):
            result.outcome = ValidationOutcome.INVALID


class TestUpdateModification:
    """Tests for UpdateModification constructors."""

    def test_valid(self):
        mod = UpdateModification.valid(b'{"count":5}', b'{"count":5}')
        assert mod.new_state == b'{"count":5}'
        assert mod.summary == b'{"count":5}'
        assert not mod.requires_related

    def test_requires(self):
        mod = UpdateModification.requires(["x"])
        assert mod.new_state is None
        assert mod.related == ("x",)
        assert mod.requires_related

    def test_requires_needs_keys(self):
        with pytest.raises(ValueError):
            UpdateModification.requires([])


class TestErrors:
    """Tests for the error taxonomy."""

    def test_all_derive_from_contract_error(self):
        for cls in (DecodeError, EncodeError, DomainError, UnresolvedDependencies):
            assert issubclass(cls, ContractError)

    def test_decode_error_names_field(self):
        err = DecodeError("summary", "Expecting value")
        assert err.field == "summary"
        assert "summary" in str(err)
        assert "Expecting value" in str(err)

    def test_decode_error_with_index_and_key(self):
        err = DecodeError("related", "bad", index=3, key="x")
        assert "update #3" in str(err)
        assert "'x'" in str(err)

    def test_domain_error_without_index(self):
        err = DomainError("negative count")
        assert str(err) == "negative count"
        assert err.index is None

    def test_domain_error_with_index(self):
        err = DomainError("negative count", index=2, kind="delta")
        assert err.message == "negative count"
        assert "update #2 (delta)" in str(err)

    def test_unresolved_dependencies(self):
        err = UnresolvedDependencies(("x", "y"), rounds=3)
        assert err.keys == ("x", "y")
        assert err.rounds == 3
        assert "3 round(s)" in str(err)
