"""Tests for snapshot serialization."""

import pytest

from vaultledger.database.mappers import SCHEMA_VERSION, snapshot_from_dict, snapshot_to_dict
from vaultledger.domain.entities import Frequency, TransactionKind
from vaultledger.domain.errors import SnapshotCorruptedError
from vaultledger.domain.ledger import Recurrence


def test_snapshot_dict_is_versioned(engine, checking):
    data = snapshot_to_dict(engine.snapshot)

    assert data["schema_version"] == SCHEMA_VERSION
    assert data["accounts"][0]["balance_cents"] == 100_000
    assert data["accounts"][0]["type"] == "BANK"


def test_snapshot_restores_entities(engine, checking):
    """Test that a stored snapshot restores equal entities."""
    engine.create_transaction(
        TransactionKind.EXPENSE, 1500, checking.id, notes="Gym", recurrence=Recurrence(Frequency.MONTHLY)
    )
    engine.create_transaction(TransactionKind.INCOME, 9000, checking.id, category_or_source="Salary")
    engine.create_debt("Loan", 50_000)
    engine.create_savings_goal("Trip", 20_000)
    engine.update_profile(occupation="Nurse")

    restored = snapshot_from_dict(snapshot_to_dict(engine.snapshot))

    assert restored == engine.snapshot


def test_last_id_never_below_highest_id(engine, checking):
    data = snapshot_to_dict(engine.snapshot)
    data["last_id"] = 0

    restored = snapshot_from_dict(data)
    assert restored.last_id == checking.id


@pytest.mark.parametrize(
    "mutate",
    [
        lambda d: d.pop("accounts"),
        lambda d: d["accounts"][0].update(type="BOAT"),
        lambda d: d["accounts"][0].update(created_at="yesterday"),
        lambda d: d.update(stats=None),
    ],
)
def test_malformed_snapshot_raises_corrupted(engine, checking, mutate):
    data = snapshot_to_dict(engine.snapshot)
    mutate(data)

    with pytest.raises(SnapshotCorruptedError):
        snapshot_from_dict(data)
