from risklens.agents.risk_advisor import RiskAdvisor, AdvisorResult
from risklens.agents.risk_interview import RiskInterview, select_flow, generate_statement

__all__ = ["RiskAdvisor", "AdvisorResult", "RiskInterview", "select_flow", "generate_statement"]
