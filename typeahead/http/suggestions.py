"""HTTP routes exposing the suggestion engine."""
from __future__ import annotations

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, field_validator

from typeahead.engine import SuggestionEngine
from typeahead.models import Suggestion

router = APIRouter(prefix="/suggestions", tags=["suggestions"])


def get_engine(request: Request) -> SuggestionEngine:
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="suggestion engine not ready")
    return engine


def _clean_query(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("query is required")
    return value.strip()


class HistoryRequest(BaseModel):
    query: str
    type: str = "general"

    @field_validator("query")
    @classmethod
    def _validate_query(cls, value: str) -> str:
        return _clean_query(value)


class CustomRequest(BaseModel):
    query: str
    type: Optional[str] = None
    category: Optional[str] = None

    @field_validator("query")
    @classmethod
    def _validate_query(cls, value: str) -> str:
        return _clean_query(value)


class SelectRequest(BaseModel):
    query: str
    type: str = "general"
    source: str = "history"

    @field_validator("query")
    @classmethod
    def _validate_query(cls, value: str) -> str:
        return _clean_query(value)


class TrendingItem(BaseModel):
    query: str
    count: int = 0
    trend: Literal["up", "stable", "down"] = "stable"

    @field_validator("query")
    @classmethod
    def _validate_query(cls, value: str) -> str:
        return _clean_query(value)


class TrendingUpdate(BaseModel):
    entries: List[TrendingItem]


def _serialise(items: List[Suggestion]) -> List[dict]:
    return [item.to_dict() for item in items]


@router.get("")
def list_suggestions(
    q: str = "",
    category: str = "all",
    limit: Optional[int] = None,
    engine: SuggestionEngine = Depends(get_engine),
) -> dict:
    options = engine.resolve_options({"category": category, "limit": limit})
    results = engine.get_suggestions(q, options)
    return {
        "query": q,
        "category": options.category,
        "limit": options.limit,
        "suggestions": _serialise(results),
    }


@router.get("/grouped")
def grouped_suggestions(q: str = "", engine: SuggestionEngine = Depends(get_engine)) -> dict:
    return engine.get_suggestions_by_category(q).to_dict()


@router.get("/popular")
def popular_suggestions(limit: Optional[int] = None, engine: SuggestionEngine = Depends(get_engine)) -> dict:
    return {"suggestions": _serialise(engine.get_popular_suggestions(limit))}


@router.get("/trending")
def trending_searches(limit: int = 5, engine: SuggestionEngine = Depends(get_engine)) -> dict:
    return {"suggestions": _serialise(engine.get_trending_searches(limit))}


@router.put("/trending")
def replace_trending(payload: TrendingUpdate, engine: SuggestionEngine = Depends(get_engine)) -> dict:
    entries = [item.model_dump() for item in payload.entries]
    if not engine.set_trending_searches(entries):
        raise HTTPException(status_code=422, detail="trending dataset rejected")
    return {"status": "ok", "count": len(entries)}


@router.get("/history")
def search_history(limit: Optional[int] = None, engine: SuggestionEngine = Depends(get_engine)) -> dict:
    entries = engine.get_recent_searches(limit) if limit is not None else engine.get_search_history()
    return {"history": [entry.to_dict() for entry in entries]}


@router.post("/history")
def save_history(payload: HistoryRequest, engine: SuggestionEngine = Depends(get_engine)) -> dict:
    return {"status": "ok", "saved": engine.save_search_history(payload.query, payload.type)}


@router.delete("/history")
def clear_history(engine: SuggestionEngine = Depends(get_engine)) -> dict:
    return {"status": "ok", "cleared": engine.clear_search_history()}


@router.post("/custom", status_code=201)
def add_custom(payload: CustomRequest, engine: SuggestionEngine = Depends(get_engine)) -> dict:
    if not engine.add_custom_suggestion(payload.model_dump(exclude_none=True)):
        raise HTTPException(status_code=409, detail="suggestion already pinned")
    return {"status": "ok", "query": payload.query}


@router.delete("/custom/{query}")
def remove_custom(query: str, engine: SuggestionEngine = Depends(get_engine)) -> dict:
    if not engine.remove_custom_suggestion(query):
        raise HTTPException(status_code=404, detail="suggestion not pinned")
    return {"status": "ok", "query": query}


@router.post("/select")
def select_suggestion(payload: SelectRequest, engine: SuggestionEngine = Depends(get_engine)) -> dict:
    suggestion = Suggestion(query=payload.query, type=payload.type, source=payload.source)
    return {"status": "ok", "saved": engine.select(suggestion)}


@router.delete("/cache")
def clear_cache(engine: SuggestionEngine = Depends(get_engine)) -> dict:
    engine.clear_suggestion_cache()
    return {"status": "ok", "cache_size": engine.cache_size}
