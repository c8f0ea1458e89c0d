"""Named-action dispatch for vaultledger."""

from vaultledger.actions.dispatcher import ActionDispatcher, ActionResult

__all__ = ["ActionDispatcher", "ActionResult"]
