from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

REQUIRED_CONTEXT_FIELDS = ("aircraft", "origin", "destination", "date", "pax", "budget_gbp")


class ConversationState(str, Enum):
    IDLE = "idle"
    REASSURE = "reassure"
    INTAKE = "intake"
    SEARCHING = "searching"
    PRICING = "pricing"
    PRESENTING = "presenting"
    CONFIRMING = "confirming"


class IntentType(str, Enum):
    REASSURE = "reassure"
    INTAKE = "intake"
    PRICING = "pricing"
    AVAILABILITY = "availability"
    SUMMARY = "summary"
    POLICY = "policy"
    TOOLS = "tools"
    GENERAL = "general"


class ModelSlot(str, Enum):
    PRIMARY = "primary"
    REASONING = "reasoning"
    SUMMARY = "summary"


class TerminalRole(str, Enum):
    BROKER = "broker"
    OPERATOR = "operator"
    PILOT = "pilot"
    CREW = "crew"


class PolicyViolation(str, Enum):
    BAD_BRAND = "bad_brand"
    UNDERCUT = "undercut"
    TARGET_USERS = "target_users"
    EXPLICIT = "explicit"
    NONE = "none"


class AviationContext(BaseModel):
    aircraft: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    date: Optional[str] = None
    pax: Optional[int] = None
    budget_gbp: Optional[int] = None
    bags: Optional[int] = None
    cabin_preference: Optional[str] = None
    flexibility: Optional[str] = None


class PolicyResult(BaseModel):
    violation: PolicyViolation = PolicyViolation.NONE
    message: str = ""
    blocked: bool = False


class RoutingDecision(BaseModel):
    intent: IntentType
    model_slot: ModelSlot
    model_name: str = ""
    confidence: float
    reasoning: str = ""


class GenerationResult(BaseModel):
    text: str
    intent: IntentType
    model_used: str
    confidence: float
    reasoning: str = ""


class ToolResult(BaseModel, Generic[T]):
    ok: bool
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, data: Any) -> "ToolResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "ToolResult":
        return cls(ok=False, error=error)


class ToolCallRecord(BaseModel):
    tool_name: str
    args: Dict[str, Any] = Field(default_factory=dict)
    result_summary: str = ""
    success: bool = True
    duration_ms: int = 0


class AvailabilityItem(BaseModel):
    operator_id: str
    operator_name: str
    aircraft_type: str
    tail: Optional[str] = None
    base_airport: Optional[str] = None
    reposition_nm: Optional[int] = None
    est_block_time_min: Optional[int] = None
    notes: Optional[str] = None


class PriceBreakdown(BaseModel):
    flight: int
    reposition: int
    fees: int
    margin: int


class PriceEstimate(BaseModel):
    operator_id: str
    aircraft_type: str
    est_price_gbp: int
    breakdown: PriceBreakdown
    constraints: List[str] = Field(default_factory=list)


class PriceCandidate(BaseModel):
    operator_id: str
    est_price_gbp: int


class RankEntry(BaseModel):
    operator_id: str
    score: int
    note: str


class PriceMatchResult(BaseModel):
    best_operator_id: str
    rank: List[RankEntry] = Field(default_factory=list)
    note: str


class OperatorProfile(BaseModel):
    operator_id: str
    name: str
    home_bases: List[str] = Field(default_factory=list)
    safety_notes: Optional[str] = None
    typical_turn_time_min: Optional[int] = None
    contact_masked: Optional[str] = None


class AircraftSpecs(BaseModel):
    type: str
    manufacturer: str
    model: str
    seats: int
    range_nm: int
    mtow_lbs: int
    baggage_cu_ft: int
    noise_level: str
    certification: List[str] = Field(default_factory=list)


class SanctionsResult(BaseModel):
    clear: bool
    notes: str = ""


class ConversationRecord(BaseModel):
    id: str
    state: ConversationState = ConversationState.IDLE
    context: AviationContext = Field(default_factory=AviationContext)
    history: List[str] = Field(default_factory=list)
    tool_outputs: Dict[str, Any] = Field(default_factory=dict)
    terminal_role: TerminalRole = TerminalRole.BROKER
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class OrchestratorResponse(BaseModel):
    reply: str
    new_state: ConversationState
    context: AviationContext
    tool_calls: List[str] = Field(default_factory=list)
    confidence: float


class TurnDecisionLog(BaseModel):
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    conversation_id: str
    agent: str
    action: str
    reasoning: str
    tool_calls: List[ToolCallRecord] = Field(default_factory=list)
    duration_ms: int = 0
    outcome: str = "ok"
