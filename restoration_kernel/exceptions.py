"""
Typed Exception Hierarchy for the Restoration Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Store internals raise typed exceptions; the public store boundary converts
them into failed ``LedgerResult`` values.  Catching by type (not by message)
keeps that conversion exact:

    try:
        self._fund(project_id, amount, funder)
    except ProjectNotFoundError as e:
        return LedgerResult.failure(e)    # error="Project not found"

Every class carries:
  1. A ``code`` class attribute (machine-readable, API-safe)
  2. A ``reason`` string (the human-readable failure text callers see)
  3. Structured attributes (project_id, amount, ...) for logs

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    RestorationKernelError (base)
    |
    +-- NotFoundError
    |   +-- ProjectNotFoundError
    |   +-- SharesNotFoundError
    |
    +-- PolicyViolationError
    |   +-- InvalidAmountError
    |   +-- InvalidProjectDataError
    |   +-- FundingCapExceededError
    |   +-- UnauthorizedMintError
    |
    +-- LedgerResultError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category   | Code                  | When Raised
-----------|-----------------------|------------------------------------------
NotFound   | PROJECT_NOT_FOUND     | Project id was never allocated
           | SHARES_NOT_FOUND      | Transfer on a project with no shares
-----------|-----------------------|------------------------------------------
Policy     | INVALID_AMOUNT        | Non-positive amount / goal / share count
           | INVALID_PROJECT_DATA  | Empty name or description
           | FUNDING_CAP_EXCEEDED  | Funding would pass the goal (cap enabled)
           | UNAUTHORIZED_MINT     | Mint by someone other than the owner
-----------|-----------------------|------------------------------------------
Result     | LEDGER_RESULT_ERROR   | unwrap() on a failed LedgerResult
-----------|-----------------------|------------------------------------------
Config     | CONFIGURATION_ERROR   | Bad settings file or environment value

Only the NotFound family is produced by the core under the default
(permissive) policy.  Policy errors come from the optional StrictPolicy.
"""

from decimal import Decimal


class RestorationKernelError(Exception):
    """
    Base exception for all restoration kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "RESTORATION_KERNEL_ERROR"

    @property
    def reason(self) -> str:
        """Human-readable failure text carried into a LedgerResult."""
        return str(self)


# Lookup failures


class NotFoundError(RestorationKernelError):
    """Base exception for references to ledger records that do not exist."""

    code: str = "NOT_FOUND"


class ProjectNotFoundError(NotFoundError):
    """Project with the given id was never created."""

    code: str = "PROJECT_NOT_FOUND"

    def __init__(self, project_id: int):
        self.project_id = project_id
        super().__init__("Project not found")


class SharesNotFoundError(NotFoundError):
    """Project has no (or a zero) recorded share total."""

    code: str = "SHARES_NOT_FOUND"

    def __init__(self, project_id: int):
        self.project_id = project_id
        super().__init__("No shares found for project")


# Policy failures


class PolicyViolationError(RestorationKernelError):
    """Base exception for rejections by a ledger policy."""

    code: str = "POLICY_VIOLATION"


class InvalidAmountError(PolicyViolationError):
    """Amount, goal or share count is not strictly positive."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, field_name: str, value: Decimal | int):
        self.field_name = field_name
        self.value = value
        super().__init__(f"{field_name} must be positive, got {value}")


class InvalidProjectDataError(PolicyViolationError):
    """Project name or description is empty."""

    code: str = "INVALID_PROJECT_DATA"

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Project {field_name} must not be empty")


class FundingCapExceededError(PolicyViolationError):
    """Funding would push current_funding past the project's funding goal."""

    code: str = "FUNDING_CAP_EXCEEDED"

    def __init__(
        self,
        project_id: int,
        funding_goal: Decimal,
        current_funding: Decimal,
        amount: Decimal,
    ):
        self.project_id = project_id
        self.funding_goal = funding_goal
        self.current_funding = current_funding
        self.amount = amount
        super().__init__(
            f"Funding {amount} would exceed goal {funding_goal} "
            f"(current {current_funding}) for project {project_id}"
        )


class UnauthorizedMintError(PolicyViolationError):
    """Shares may only be minted by the project owner."""

    code: str = "UNAUTHORIZED_MINT"

    def __init__(self, project_id: int, caller: str | None, owner: str):
        self.project_id = project_id
        self.caller = caller
        self.owner = owner
        super().__init__(
            f"Caller {caller!r} is not the owner of project {project_id}"
        )


# Result handling


class LedgerResultError(RestorationKernelError):
    """
    Raised by ``LedgerResult.unwrap()`` on a failed result.

    Carries the failed result's code and reason so callers that prefer
    exceptions keep the structured data.
    """

    code: str = "LEDGER_RESULT_ERROR"

    def __init__(self, error_code: str, reason: str):
        self.error_code = error_code
        super().__init__(reason)


# Configuration


class ConfigurationError(RestorationKernelError):
    """Settings file or environment value is invalid."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, setting: str, detail: str):
        self.setting = setting
        self.detail = detail
        super().__init__(f"Invalid setting {setting!r}: {detail}")
