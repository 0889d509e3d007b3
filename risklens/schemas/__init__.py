from risklens.schemas.risk import (
    BusinessUnit,
    Risk,
    RiskCreate,
    RiskStatus,
    RiskType,
    RiskUpdate,
)

__all__ = ["BusinessUnit", "Risk", "RiskCreate", "RiskStatus", "RiskType", "RiskUpdate"]
