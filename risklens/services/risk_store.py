"""
In-memory risk register.

Owns create/update/delete for the API; the analytics only ever read the
lists it hands out. State lives as long as the process.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from risklens.schemas.risk import Risk, RiskCreate, RiskUpdate


logger = logging.getLogger(__name__)


class RiskNotFoundError(KeyError):
    """No risk with the given id"""
    pass


class InMemoryRiskStore:
    """Risks ordered newest first, as the register displays them."""

    def __init__(self, seed: Optional[Iterable[Risk]] = None):
        self._risks: Dict[str, Risk] = {}
        self._order: List[str] = []
        if seed:
            self.reset(seed)

    def add(self, data: RiskCreate) -> Risk:
        risk = Risk(**data.model_dump())
        self._risks[risk.id] = risk
        self._order.insert(0, risk.id)
        logger.info(f"Risk added: id={risk.id}, score={risk.score}, unit={risk.business_unit.value}")
        return risk

    def get(self, risk_id: str) -> Risk:
        try:
            return self._risks[risk_id]
        except KeyError:
            raise RiskNotFoundError(risk_id)

    def list(self) -> List[Risk]:
        return [self._risks[risk_id] for risk_id in self._order]

    def update(self, risk_id: str, changes: RiskUpdate) -> Risk:
        """
        Applies the explicitly set fields and refreshes ``updated_at``.
        The whole record is revalidated; ``score`` follows likelihood and impact.
        """
        current = self.get(risk_id)
        data = current.model_dump(exclude={"score"})
        data.update(changes.model_dump(exclude_unset=True))
        data["updated_at"] = datetime.now(timezone.utc)
        updated = Risk(**data)
        self._risks[risk_id] = updated
        logger.info(f"Risk updated: id={risk_id}, score={updated.score}")
        return updated

    def delete(self, risk_id: str) -> None:
        self.get(risk_id)
        del self._risks[risk_id]
        self._order.remove(risk_id)
        logger.info(f"Risk deleted: id={risk_id}")

    def reset(self, seed: Iterable[Risk] = ()) -> None:
        self._risks = {}
        self._order = []
        for risk in seed:
            copy = risk.model_copy(deep=True)
            self._risks[copy.id] = copy
            self._order.append(copy.id)

    def __len__(self) -> int:
        return len(self._order)
