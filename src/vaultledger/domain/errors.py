"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling. ``kind`` names the category
    for callers that report failures as values instead of exceptions.
    """

    kind = "Error"


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    kind = "InvalidInput"


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""

    kind = "NotFound"


class InsufficientFundsError(DomainError):
    """Source account cannot cover a transfer."""

    kind = "InsufficientFunds"


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""

    kind = "EntityInUse"


class SnapshotCorruptedError(DomainError):
    """A stored ledger snapshot could not be decoded."""

    kind = "Corrupted"


class StorageError(DomainError):
    """The database rejected a write the caller waits on."""

    kind = "StorageFailure"


class SessionClosedError(DomainError):
    """A mutation was attempted on a closed session."""

    kind = "SessionClosed"


def account_not_found() -> str:
    """Return message for missing account."""
    return "Account not found."


def transaction_not_found() -> str:
    """Return message for missing expense or income."""
    return "Transaction not found."


def debt_not_found() -> str:
    """Return message for missing debt."""
    return "Debt not found."


def goal_not_found() -> str:
    """Return message for missing savings goal."""
    return "Goal not found."


def amount_not_positive() -> str:
    return "Amount must be greater than zero."


def empty_name(entity: str) -> str:
    return f"{entity} name must not be empty."


def same_account_transfer() -> str:
    return "Cannot transfer funds to the same account."


def insufficient_funds(account_name: str) -> str:
    return f"Insufficient funds in {account_name}."


def account_delete_blocked(account_name: str, transaction_count: int) -> str:
    """Return message when account still has dependent transactions."""
    return (
        f"Cannot delete account '{account_name}': it has {transaction_count} "
        f"transaction{'s' if transaction_count != 1 else ''}. "
        "Please delete them first."
    )


def memory_not_saved() -> str:
    return "Could not save that to memory. Please try again later."


def session_closed() -> str:
    return "Session is closed. Changes can no longer be made."
