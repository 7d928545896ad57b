from __future__ import annotations

import logging

from fastapi import FastAPI

from agents.orchestrator import OrchestratorAgent
from api.middleware.logging import RequestLoggingMiddleware
from api.routers import chat
from api.routers import tools as tools_router
from settings import SETTINGS
from tools import AircraftTools, OperatorTools, PricingTools, SanctionsTools


def create_app(orchestrator: OrchestratorAgent | None = None) -> FastAPI:
    logging.basicConfig(level=getattr(logging, SETTINGS.log_level.upper(), logging.INFO))
    app = FastAPI(title="Stratus Assist", version="0.1.0", debug=SETTINGS.debug)
    app.add_middleware(RequestLoggingMiddleware)
    app.state.orchestrator = orchestrator or OrchestratorAgent()
    app.state.tools = {
        "aircraft": AircraftTools(),
        "operators": OperatorTools(),
        "pricing": PricingTools(),
        "sanctions": SanctionsTools(),
    }

    api_prefix = "/api/v1"
    app.include_router(chat.router, prefix=api_prefix)
    app.include_router(tools_router.router, prefix=api_prefix)

    @app.get("/health")
    async def health():
        orch: OrchestratorAgent = app.state.orchestrator
        return {
            "ok": True,
            "service": "stratus-assist",
            "llm_provider": orch.llm.provider,
            "llm_models": orch.llm.models(),
            "llm_runtime_available": await orch.llm.available(),
        }

    return app


app = create_app()
