"""Utility for resolving human-typed names to ledger entities.

Matching is case-insensitive substring containment and the first match in
collection order wins. There is no ranking: "chase" against
["Chase Checking", "Chase Savings"] always yields "Chase Checking". Callers
rely on this order, so do not replace it with a scoring match.
"""

from typing import Callable, Iterable, Optional, TypeVar

from vaultledger.domain.constants import CATEGORIES, DEFAULT_EXPENSE_CATEGORY_ID
from vaultledger.domain.entities import LedgerSnapshot, Transaction

T = TypeVar("T")


def _by_name(entity) -> str:
    return entity.name


def resolve(
    query: str, collection: Iterable[T], key: Callable[[T], str] = _by_name
) -> Optional[T]:
    """Return the first entity whose key contains ``query``, ignoring case.

    Args:
        query: Name fragment
        collection: Entities in insertion order
        key: Function returning the text to match against (defaults to ``name``)

    Returns:
        The first matching entity, or None
    """
    needle = query.lower()
    for entity in collection:
        if needle in key(entity).lower():
            return entity
    return None


def resolve_id(query: str, collection: Iterable[T], key: Callable[[T], str] = _by_name) -> Optional[int]:
    """Return the ID of the first matching entity, or None."""
    entity = resolve(query, collection, key)
    return entity.id if entity is not None else None


def resolve_or_default(query: Optional[str], collection: list[T]) -> Optional[T]:
    """Resolve ``query``, falling back to the first entity when it is absent or unmatched."""
    if query:
        entity = resolve(query, collection)
        if entity is not None:
            return entity
    return collection[0] if collection else None


def resolve_transaction(term: str, snapshot: LedgerSnapshot) -> Optional[Transaction]:
    """Find a transaction by its notes.

    Expenses are searched first, then income (by notes, then by source).
    """
    expense = resolve(term, snapshot.expenses, key=lambda e: e.notes)
    if expense is not None:
        return expense
    return resolve(term, snapshot.income, key=lambda i: f"{i.notes}\n{i.source}")


def resolve_category(name: Optional[str]) -> int:
    """Resolve a category name to its ID, defaulting to the first category."""
    if name:
        category = resolve(name, CATEGORIES)
        if category is not None:
            return category.id
    return DEFAULT_EXPENSE_CATEGORY_ID
