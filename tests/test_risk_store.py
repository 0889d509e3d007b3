# tests/test_risk_store.py

import pytest
from pydantic import ValidationError

from risklens.schemas.risk import RiskCreate, RiskStatus, RiskUpdate
from risklens.services.risk_store import InMemoryRiskStore, RiskNotFoundError


def _create(**overrides):
    fields = {"title": "Server capacity", "business_unit": "IT", "likelihood": 3, "impact": 4}
    fields.update(overrides)
    return RiskCreate(**fields)


@pytest.fixture
def store():
    return InMemoryRiskStore()


def test_add_assigns_id_and_score(store):
    risk = store.add(_create())
    assert risk.id
    assert risk.score == 12
    assert store.get(risk.id) == risk


def test_list_is_newest_first(store):
    first = store.add(_create(title="First"))
    second = store.add(_create(title="Second"))
    assert [r.id for r in store.list()] == [second.id, first.id]
    assert len(store) == 2


def test_ids_are_unique(store):
    ids = {store.add(_create()).id for _ in range(20)}
    assert len(ids) == 20


def test_update_keeps_score_in_step(store):
    risk = store.add(_create())
    updated = store.update(risk.id, RiskUpdate(likelihood=5))
    assert updated.score == 20
    assert updated.impact == 4
    assert store.get(risk.id).score == 20


def test_update_only_applies_set_fields(store):
    risk = store.add(_create(description="keep me", assigned_to="somchai"))
    updated = store.update(risk.id, RiskUpdate(status=RiskStatus.MITIGATED))
    assert updated.status == RiskStatus.MITIGATED
    assert updated.description == "keep me"
    assert updated.assigned_to == "somchai"
    assert updated.created_at == risk.created_at


def test_update_refreshes_updated_at(store):
    risk = store.add(_create())
    updated = store.update(risk.id, RiskUpdate(title="Renamed"))
    assert updated.updated_at >= risk.updated_at
    assert updated.id == risk.id


def test_update_rejects_out_of_range_values(store):
    risk = store.add(_create())
    with pytest.raises(ValidationError):
        store.update(risk.id, RiskUpdate(likelihood=6))


def test_assignment_is_validated(store):
    risk = store.add(_create())
    with pytest.raises(ValidationError):
        risk.impact = 0


def test_missing_risk_raises(store):
    with pytest.raises(RiskNotFoundError):
        store.get("missing")
    with pytest.raises(RiskNotFoundError):
        store.update("missing", RiskUpdate(title="x"))
    with pytest.raises(RiskNotFoundError):
        store.delete("missing")


def test_delete(store):
    risk = store.add(_create())
    store.delete(risk.id)
    assert len(store) == 0
    with pytest.raises(RiskNotFoundError):
        store.get(risk.id)


def test_seed_is_copied(make_risk):
    original = make_risk(title="Seeded")
    store = InMemoryRiskStore(seed=[original])
    store.update(original.id, RiskUpdate(title="Changed"))
    assert original.title == "Seeded"
    assert store.get(original.id).title == "Changed"


@pytest.mark.parametrize("field", ["title", "description", "likelihood", "impact", "business_unit", "kind", "status"])
def test_update_rejects_null_for_required_fields(field):
    with pytest.raises(ValidationError):
        RiskUpdate(**{field: None})


def test_update_can_clear_nullable_fields(store):
    risk = store.add(_create(assigned_to="somchai", financial_impact=5000))
    updated = store.update(risk.id, RiskUpdate(assigned_to=None, financial_impact=None))
    assert updated.assigned_to is None
    assert updated.financial_impact is None
    assert updated.description == risk.description
