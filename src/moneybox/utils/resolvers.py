"""Utilities for resolving user-typed references to entities."""

from typing import Iterable, Optional, TypeVar

from moneybox.domain.entities import Account, Category, TransactionType
from moneybox.domain.errors import ConflictError, NotFoundError, ambiguous_reference, entity_not_found

T = TypeVar("T")


def resolve_entity(entities: Iterable[T], reference: str, kind: str, by_name: bool = False) -> T:
    """Resolve a full id, a unique id prefix or (optionally) a name.

    Names match case-insensitively. An exact id always wins.

    Raises:
        NotFoundError: If nothing matches
        ConflictError: If the prefix or name matches more than one entity
    """
    reference = (reference or "").strip()
    if not reference:
        raise NotFoundError(f"{kind} reference is empty")
    candidates = list(entities)

    for entity in candidates:
        if entity.id == reference:
            return entity

    if by_name:
        named = [e for e in candidates if e.name.lower() == reference.lower()]
        if len(named) == 1:
            return named[0]
        if len(named) > 1:
            raise ConflictError(ambiguous_reference(kind, reference, len(named)))

    prefixed = [e for e in candidates if e.id.startswith(reference)]
    if len(prefixed) == 1:
        return prefixed[0]
    if len(prefixed) > 1:
        raise ConflictError(ambiguous_reference(kind, reference, len(prefixed)))
    raise NotFoundError(entity_not_found(kind, reference))


def resolve_account(accounts: Iterable[Account], reference: str) -> Account:
    """Resolve an account by id, id prefix or name."""
    return resolve_entity(accounts, reference, "Account", by_name=True)


def resolve_category(
    categories: Iterable[Category], reference: str, txn_type: Optional[TransactionType] = None
) -> Category:
    """Resolve a category by id, id prefix or name.

    With ``txn_type``, only categories of that type are considered, so an
    income and an expense category may share a name.
    """
    if txn_type is not None:
        categories = [c for c in categories if c.type == txn_type]
    return resolve_entity(categories, reference, "Category", by_name=True)
