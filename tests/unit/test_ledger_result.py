"""Unit tests for the LedgerResult boundary value."""

from decimal import Decimal

import pytest

from restoration_kernel.domain.results import LedgerResult
from restoration_kernel.domain.values import Project
from restoration_kernel.exceptions import (
    LedgerResultError,
    ProjectNotFoundError,
    SharesNotFoundError,
    UnauthorizedMintError,
)


class TestLedgerResult:

    def test_success(self):
        result = LedgerResult.success(7)

        assert result.ok
        assert result.value == 7
        assert result.error is None
        assert result.code is None
        assert result.unwrap() == 7

    def test_success_may_carry_false_like_values(self):
        assert LedgerResult.success(0).ok
        assert LedgerResult.success(Decimal("0")).unwrap() == 0

    def test_failure_from_exception(self):
        result = LedgerResult.failure(ProjectNotFoundError(3))

        assert result.ok is False
        assert result.value is None
        assert result.error == "Project not found"
        assert result.code == "PROJECT_NOT_FOUND"

    def test_unwrap_failure_raises(self):
        result = LedgerResult.failure(SharesNotFoundError(3))

        with pytest.raises(LedgerResultError) as exc_info:
            result.unwrap()
        assert exc_info.value.error_code == "SHARES_NOT_FOUND"
        assert exc_info.value.reason == "No shares found for project"

    def test_is_not_found(self):
        assert LedgerResult.failure(ProjectNotFoundError(1)).is_not_found
        assert LedgerResult.failure(SharesNotFoundError(1)).is_not_found
        assert not LedgerResult.failure(UnauthorizedMintError(1, "x", "o")).is_not_found
        assert not LedgerResult.success(True).is_not_found

    def test_as_dict_success_plain_value(self):
        assert LedgerResult.success(True).as_dict() == {"ok": True, "value": True}

    def test_as_dict_success_uses_value_as_dict(self):
        project = Project(1, "n", "d", Decimal("10"), Decimal("0"), "o")

        payload = LedgerResult.success(project).as_dict()

        assert payload["ok"] is True
        assert payload["value"]["project_id"] == 1
        assert payload["value"]["status"] == "active"

    def test_as_dict_failure(self):
        payload = LedgerResult.failure(ProjectNotFoundError(9)).as_dict()

        assert payload == {"ok": False, "error": "Project not found", "code": "PROJECT_NOT_FOUND"}
