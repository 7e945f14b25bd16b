"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class InvalidPeriodError(ValidationError):
    """A year/month pair that cannot be reported on."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class PersistenceError(DomainError):
    """The backing store rejected or failed a read or write."""


class NotAuthenticatedError(DomainError):
    """No user is signed in."""


def account_not_found(account_id: str) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_not_found(category_id: str) -> str:
    """Return message for missing category."""
    return f"Category {category_id} not found"


def entity_not_found(kind: str, entity_id: str) -> str:
    """Return message for any other missing entity."""
    return f"{kind} {entity_id} not found"


def ambiguous_reference(kind: str, reference: str, count: int) -> str:
    """Return message for an id prefix or name matching several entities."""
    return f"{kind} '{reference}' is ambiguous ({count} matches)"


def entity_delete_blocked(kind: str, name: str, dependents: dict[str, int]) -> str:
    """Return message when an entity still has dependent records."""
    parts = [
        f"{count} {label}{'s' if count != 1 else ''}"
        for label, count in dependents.items()
        if count > 0
    ]
    return (
        f"Cannot delete {kind} '{name}': it has {', '.join(parts)}. "
        "Please reassign or delete them first."
    )
