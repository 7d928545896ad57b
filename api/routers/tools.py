from __future__ import annotations

from typing import List, Literal, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from models.schemas import PriceCandidate, ToolResult


router = APIRouter(prefix="/tools", tags=["tools"])


class SanctionsCheckRequest(BaseModel):
    name: str
    company: Optional[str] = None
    country: Optional[str] = None


class PriceMatchRequest(BaseModel):
    candidates: List[PriceCandidate]
    target_budget_gbp: int
    tie_break: Optional[Literal["response_speed", "aog_history", "home_base_fit"]] = None


def _tools(request: Request):
    return request.app.state.tools


def _unwrap(result: ToolResult, status_code: int):
    if not result.ok:
        raise HTTPException(status_code=status_code, detail=result.error)
    return result.model_dump(mode="json")


@router.get("/aircraft/{aircraft_type}")
async def get_aircraft_specs(aircraft_type: str, request: Request):
    result = await _tools(request)["aircraft"].get_aircraft_specs(aircraft_type)
    return _unwrap(result, 404)


@router.get("/operators/{operator_id}")
async def get_operator_profile(operator_id: str, request: Request):
    result = await _tools(request)["operators"].get_operator_profile(operator_id)
    return _unwrap(result, 404)


@router.post("/sanctions-check")
async def post_sanctions_check(payload: SanctionsCheckRequest, request: Request):
    result = await _tools(request)["sanctions"].sanctions_check(
        payload.name, company=payload.company, country=payload.country
    )
    return _unwrap(result, 502)


@router.post("/price-match")
async def post_price_match(payload: PriceMatchRequest, request: Request):
    result = await _tools(request)["pricing"].price_match(
        payload.candidates, payload.target_budget_gbp, tie_break=payload.tie_break
    )
    return _unwrap(result, 422)
