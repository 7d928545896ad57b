from .schemas import (
    AviationContext,
    ConversationRecord,
    ConversationState,
    GenerationResult,
    IntentType,
    ModelSlot,
    OrchestratorResponse,
    PolicyResult,
    PolicyViolation,
    RoutingDecision,
    TerminalRole,
    ToolCallRecord,
    ToolResult,
)

__all__ = [
    "AviationContext",
    "ConversationRecord",
    "ConversationState",
    "GenerationResult",
    "IntentType",
    "ModelSlot",
    "OrchestratorResponse",
    "PolicyResult",
    "PolicyViolation",
    "RoutingDecision",
    "TerminalRole",
    "ToolCallRecord",
    "ToolResult",
]
