"""ntrcheck FastAPI application — broker endpoint, analysis and settings."""

import logging
from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from ntrcheck.broker import GeneLookupBroker, LocalTransport
from ntrcheck.config import config
from ntrcheck.host.settings_store import MemorySettingsStore, SettingsStore
from ntrcheck.models import IssueContext, PipelineEvent, RunState
from ntrcheck.pipeline.orchestrator import run_analysis

logger = logging.getLogger(__name__)


class AnalyzeResponse(BaseModel):
    state: RunState
    html: str
    result: dict[str, Any]
    progress: list[str]


class SettingsResponse(BaseModel):
    api_key_set: bool
    model: str


class SettingsUpdate(BaseModel):
    openai_api_key: str


def _default_store() -> SettingsStore:
    initial = {}
    if config.llm.openai_api_key:
        initial[config.settings_store.api_key_name] = config.llm.openai_api_key
    return MemorySettingsStore(initial)


def create_app(store: SettingsStore | None = None, http: httpx.AsyncClient | None = None) -> FastAPI:
    """Application factory — returns configured FastAPI instance."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        own_http = http is None
        app.state.http = http or httpx.AsyncClient(timeout=config.http_timeout, follow_redirects=True)
        app.state.broker = GeneLookupBroker(app.state.http)
        yield
        if own_http:
            await app.state.http.aclose()

    app = FastAPI(
        title="ntrcheck",
        version="0.1.0",
        description="Compliance analysis for Mondo new term request issues",
        lifespan=lifespan,
    )
    app.state.store = store or _default_store()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": "0.1.0"}

    @app.post("/api/broker")
    async def broker_endpoint(request: Request, payload: Any = Body(...)):
        response = await request.app.state.broker.handle_message(payload)
        return response.model_dump(mode="json", by_alias=True)

    @app.post("/api/analyze", response_model=AnalyzeResponse)
    async def analyze(request: Request, issue: IssueContext):
        state = request.app.state
        api_key = await state.store.get(config.settings_store.api_key_name)
        progress: list[str] = []
        terminal: PipelineEvent | None = None
        async for event in run_analysis(
            issue,
            api_key=api_key,
            http=state.http,
            transport=LocalTransport(state.broker),
        ):
            if event.is_terminal:
                terminal = event
            else:
                progress.append(event.message)
        return AnalyzeResponse(
            state=terminal.state,
            html=terminal.html or "",
            result=terminal.result.model_dump(mode="json", by_alias=True),
            progress=progress,
        )

    @app.get("/api/settings", response_model=SettingsResponse)
    async def get_settings(request: Request):
        key = await request.app.state.store.get(config.settings_store.api_key_name)
        return SettingsResponse(api_key_set=bool(key), model=config.llm.model)

    @app.put("/api/settings", response_model=SettingsResponse)
    async def update_settings(request: Request, body: SettingsUpdate):
        try:
            await request.app.state.store.set(config.settings_store.api_key_name, body.openai_api_key)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return SettingsResponse(api_key_set=True, model=config.llm.model)

    return app
