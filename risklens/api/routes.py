"""
API Routes
"""
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from risklens.agents.risk_advisor import AdvisorResult, RiskAdvisor
from risklens.agents.risk_interview import (
    QUESTION_TEMPLATES,
    Answer,
    FlowSelection,
    InterviewQuestion,
    InvalidAnswerError,
    RiskStatement,
    generate_statement,
    select_flow,
)
from risklens.analytics.correlation_engine import (
    build_network,
    calculate_risk_velocity,
    find_cascade_risks,
    network_stats,
)
from risklens.analytics.dashboard import dashboard_summary, decision_queue, weekly_summary
from risklens.analytics.network_layout import ForceLayout
from risklens.analytics.risk_classifier import classify_risk_text, risk_level
from risklens.analytics.schemas import (
    CorrelationNetwork,
    DashboardSummary,
    DecisionItem,
    NetworkStats,
    RiskClassification,
    RiskVelocity,
    SentimentResult,
    SentimentSummary,
    SimilarRiskMatch,
    WeeklySummary,
)
from risklens.analytics.sentiment_analyzer import (
    analyze_batch_sentiment,
    analyze_sentiment,
    organization_sentiment_summary,
)
from risklens.analytics.similarity_engine import find_similar_risks
from risklens.config import Settings, get_settings
from risklens.dependencies import get_notification_service, get_risk_advisor, get_risk_store
from risklens.schemas.risk import Risk, RiskCreate, RiskType, RiskUpdate
from risklens.services import InMemoryRiskStore, NotificationService, RiskNotFoundError

router = APIRouter()
logger = logging.getLogger(__name__)


# ====== Request / Response Models ======

class RiskCreatedResponse(BaseModel):
    risk: Risk
    level: str
    notified: bool = Field(..., description="Whether a critical-risk alert was sent")


class EscalationResponse(BaseModel):
    risk_id: str
    notified: bool


class SimilarRiskRequest(BaseModel):
    title: str = ""
    description: str = ""


class NetworkResponse(BaseModel):
    network: CorrelationNetwork
    stats: NetworkStats


class CascadeResponse(BaseModel):
    risk_id: str
    velocity: RiskVelocity
    cascades: List[Risk]


class TextRequest(BaseModel):
    text: str = Field(..., description="Free text to analyse")


class AdvisorRequest(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    target_kind: RiskType = RiskType.RISK


class InterviewFlowResponse(BaseModel):
    selection: FlowSelection
    questions: List[InterviewQuestion]


class InterviewStatementRequest(BaseModel):
    original_input: str = Field(..., min_length=1)
    flow: Optional[str] = Field(None, description="Question flow; picked from original_input when omitted")
    answers: Dict[str, Answer] = Field(default_factory=dict)


def _get_or_404(store: InMemoryRiskStore, risk_id: str) -> Risk:
    try:
        return store.get(risk_id)
    except RiskNotFoundError:
        raise HTTPException(status_code=404, detail=f"Risk not found: {risk_id}")


# ====== Risk Register ======

@router.get("/risks", response_model=List[Risk])
async def list_risks(store: InMemoryRiskStore = Depends(get_risk_store)):
    return store.list()


@router.post("/risks", response_model=RiskCreatedResponse, status_code=201)
async def create_risk(
    data: RiskCreate,
    store: InMemoryRiskStore = Depends(get_risk_store),
    notifications: NotificationService = Depends(get_notification_service),
):
    risk = store.add(data)
    notified = notifications.on_risk_created(risk)
    return RiskCreatedResponse(risk=risk, level=risk_level(risk.score), notified=notified)


@router.get("/risks/{risk_id}", response_model=Risk)
async def get_risk(risk_id: str, store: InMemoryRiskStore = Depends(get_risk_store)):
    return _get_or_404(store, risk_id)


@router.patch("/risks/{risk_id}", response_model=Risk)
async def update_risk(risk_id: str, changes: RiskUpdate, store: InMemoryRiskStore = Depends(get_risk_store)):
    try:
        return store.update(risk_id, changes)
    except RiskNotFoundError:
        raise HTTPException(status_code=404, detail=f"Risk not found: {risk_id}")


@router.delete("/risks/{risk_id}", status_code=204)
async def delete_risk(risk_id: str, store: InMemoryRiskStore = Depends(get_risk_store)):
    try:
        store.delete(risk_id)
    except RiskNotFoundError:
        raise HTTPException(status_code=404, detail=f"Risk not found: {risk_id}")


@router.post("/risks/{risk_id}/escalate", response_model=EscalationResponse)
async def escalate_risk(
    risk_id: str,
    store: InMemoryRiskStore = Depends(get_risk_store),
    notifications: NotificationService = Depends(get_notification_service),
):
    risk = _get_or_404(store, risk_id)
    return EscalationResponse(risk_id=risk.id, notified=notifications.on_escalated(risk))


@router.post("/risks/similar", response_model=List[SimilarRiskMatch])
async def similar_risks(request: SimilarRiskRequest, store: InMemoryRiskStore = Depends(get_risk_store)):
    """Near-duplicates of a draft, checked while the user types"""
    return find_similar_risks(store.list(), request.title, request.description)


@router.get("/risks/{risk_id}/cascades", response_model=CascadeResponse)
async def risk_cascades(
    risk_id: str,
    store: InMemoryRiskStore = Depends(get_risk_store),
    settings: Settings = Depends(get_settings),
):
    target = _get_or_404(store, risk_id)
    cascades = find_cascade_risks(store.list(), target, max_records=settings.max_network_records)
    return CascadeResponse(risk_id=risk_id, velocity=calculate_risk_velocity(target), cascades=cascades)


# ====== Correlation Network ======
# Pairwise work is O(n^2); sync endpoints run in the threadpool, off the event loop

@router.get("/network", response_model=NetworkResponse)
def correlation_network(
    store: InMemoryRiskStore = Depends(get_risk_store),
    settings: Settings = Depends(get_settings),
):
    network = build_network(store.list(), max_records=settings.max_network_records)
    return NetworkResponse(network=network, stats=network_stats(network))


@router.get("/network/layout", response_model=CorrelationNetwork)
def network_layout(
    ticks: int = Query(300, ge=0, le=2000, description="Simulation ticks to run"),
    seed: Optional[int] = Query(None, description="Seed for initial placement"),
    store: InMemoryRiskStore = Depends(get_risk_store),
    settings: Settings = Depends(get_settings),
):
    """Snapshot of the force layout after a fixed number of ticks"""
    network = build_network(store.list(), max_records=settings.max_network_records)
    layout = ForceLayout(width=settings.layout_width, height=settings.layout_height, seed=seed)
    layout.set_network(network)
    nodes = layout.run(ticks)
    return CorrelationNetwork(nodes=nodes, edges=network.edges)


# ====== Tone Analysis ======

@router.post("/sentiment", response_model=SentimentResult)
async def sentiment(request: TextRequest):
    return analyze_sentiment(request.text)


@router.get("/sentiment", response_model=Dict[str, SentimentResult])
async def register_sentiment(store: InMemoryRiskStore = Depends(get_risk_store)):
    return analyze_batch_sentiment(store.list())


@router.get("/sentiment/summary", response_model=SentimentSummary)
async def sentiment_summary(store: InMemoryRiskStore = Depends(get_risk_store)):
    return organization_sentiment_summary(analyze_batch_sentiment(store.list()))


# ====== Dashboard / Classification ======

@router.get("/dashboard", response_model=DashboardSummary)
def dashboard(
    store: InMemoryRiskStore = Depends(get_risk_store),
    settings: Settings = Depends(get_settings),
):
    return dashboard_summary(
        store.list(),
        critical_threshold=settings.critical_risk_threshold,
        max_records=settings.max_network_records,
    )


@router.get("/dashboard/decisions", response_model=List[DecisionItem])
def decisions(
    store: InMemoryRiskStore = Depends(get_risk_store),
    settings: Settings = Depends(get_settings),
):
    """Executive decision queue; cascade counts make this O(n^2)"""
    return decision_queue(
        store.list(),
        critical_threshold=settings.critical_risk_threshold,
        max_records=settings.max_network_records,
    )


@router.get("/dashboard/weekly", response_model=WeeklySummary)
async def weekly(store: InMemoryRiskStore = Depends(get_risk_store)):
    return weekly_summary(store.list())


@router.post("/classify", response_model=RiskClassification)
async def classify(request: TextRequest):
    return classify_risk_text(request.text)


@router.post("/advisor", response_model=AdvisorResult)
def advisor(request: AdvisorRequest, risk_advisor: RiskAdvisor = Depends(get_risk_advisor)):
    # sync endpoint: the LLM call blocks, FastAPI runs it in the threadpool
    return risk_advisor.analyze(request.title, request.description, request.target_kind)


# ====== Interview ======

@router.post("/interview/flow", response_model=InterviewFlowResponse)
async def interview_flow(request: TextRequest):
    selection = select_flow(request.text)
    return InterviewFlowResponse(selection=selection, questions=QUESTION_TEMPLATES[selection.flow])


@router.post("/interview/statement", response_model=RiskStatement)
async def interview_statement(request: InterviewStatementRequest):
    try:
        return generate_statement(request.original_input, request.answers, flow=request.flow)
    except InvalidAnswerError as e:
        raise HTTPException(status_code=422, detail=str(e))
