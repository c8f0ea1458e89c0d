"""Utility functions for vaultledger."""

from vaultledger.utils.date_parser import parse_date
from vaultledger.utils.amount_parser import parse_amount, to_cents
from vaultledger.utils.entity_resolver import resolve, resolve_or_default

__all__ = ["parse_date", "parse_amount", "to_cents", "resolve", "resolve_or_default"]
