"""FastAPI adapter — HTTP batch, SSE and WebSocket relays, no business logic."""

from __future__ import annotations

import asyncio
import json
import logging
from uuid import uuid4

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse, Response, StreamingResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from focus_engine import create_engine
from focus_engine.adapters.relay import collect
from focus_engine.adapters.web_fastapi.ws import handle_message
from focus_engine.engine.agent import FocusEngine
from focus_engine.engine.errors import InvalidQueryFormat, UnknownFocusMode
from focus_engine.engine.models import EvaluationVerdict, OptimizationMode, SearchRequest, history_from_wire
from focus_engine.modes.config import FocusMode
from focus_engine.search.restaurant import parse_restaurant_query

logger = logging.getLogger(__name__)


class SearchBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    focus_mode: str = Field(alias="focusMode", min_length=1)
    query: str = Field(min_length=1)
    history: list[tuple[str, str]] = Field(default_factory=list)
    optimization_mode: OptimizationMode = Field(default=OptimizationMode.BALANCED, alias="optimizationMode")
    files: list[str] = Field(default_factory=list)

    def to_request(self) -> SearchRequest:
        return SearchRequest(
            focus_mode=self.focus_mode,
            query=self.query,
            history=history_from_wire(self.history),
            optimization_mode=self.optimization_mode,
            files=self.files,
        )


class RestaurantBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    restaurant_name: str = Field(default="", alias="restaurantName")
    address: str = ""
    optimization_mode: OptimizationMode = Field(default=OptimizationMode.BALANCED, alias="optimizationMode")


class UploadBody(BaseModel):
    name: str = Field(min_length=1)
    content: str


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse({"message": message}, status_code=400)


async def _parse_search_body(request: Request) -> SearchBody | JSONResponse:
    try:
        body = SearchBody.model_validate(await request.json())
    except (ValidationError, json.JSONDecodeError):
        return _bad_request("Missing focus mode or query")
    try:
        mode, _ = request.app.state.engine.registry.resolve(body.focus_mode)
    except UnknownFocusMode:
        return _bad_request("Invalid focus mode")
    if mode is FocusMode.RESTAURANT:
        try:
            parse_restaurant_query(body.query)
        except InvalidQueryFormat as exc:
            return _bad_request(str(exc))
    return body


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Safety net for unexpected 500s; never leaks exception details."""
    error_id = uuid4()
    logger.error("Unhandled exception %s: %s", error_id, exc, exc_info=True)
    return JSONResponse(
        {"message": "Internal server error", "error_id": str(error_id)},
        status_code=500,
    )


def create_app(engine: FocusEngine | None = None) -> FastAPI:
    engine = engine or create_engine()
    app = FastAPI(title="FocusEngine API", version="0.1.0")
    app.state.engine = engine
    app.add_exception_handler(Exception, global_exception_handler)

    @app.post("/api/search")
    async def search(request: Request) -> JSONResponse:
        body = await _parse_search_body(request)
        if isinstance(body, JSONResponse):
            return body

        answer = await collect(engine.handle(body.to_request()))
        if answer.error is not None:
            return JSONResponse({"message": answer.error}, status_code=500)
        return JSONResponse({"message": answer.message, "sources": answer.sources})

    @app.post("/api/search/stream", response_model=None)
    async def search_stream(request: Request) -> Response:
        body = await _parse_search_body(request)
        if isinstance(body, JSONResponse):
            return body
        events = engine.handle(body.to_request())

        async def sse_stream():
            async for event in events:
                payload = json.dumps(event.to_wire(), default=str)
                yield f"event: {event.type.value}\ndata: {payload}\n\n"

        return StreamingResponse(
            sse_stream(),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "X-Accel-Buffering": "no",
            },
        )

    @app.post("/api/search/restaurant")
    async def search_restaurant(request: Request) -> JSONResponse:
        try:
            body = RestaurantBody.model_validate(await request.json())
        except (ValidationError, json.JSONDecodeError):
            return _bad_request("Invalid restaurant search input format")
        try:
            record = parse_restaurant_query({"restaurantName": body.restaurant_name, "address": body.address})
        except InvalidQueryFormat:
            return _bad_request("Restaurant name and address are required")

        answer = await collect(engine.evaluate_restaurant(record, optimization_mode=body.optimization_mode))
        if answer.error is not None:
            return JSONResponse({"message": answer.error}, status_code=500)
        verdict = EvaluationVerdict.parse(answer.message)
        return JSONResponse({
            "status": "success",
            "events": answer.events,
            "evaluation": verdict.model_dump() if verdict else None,
        })

    @app.post("/api/uploads")
    async def upload(request: Request) -> JSONResponse:
        try:
            body = UploadBody.model_validate(await request.json())
        except (ValidationError, json.JSONDecodeError):
            return _bad_request("Upload needs a name and text content")
        stored = await engine.file_store.add(body.name, body.content)
        return JSONResponse({"fileId": stored.file_id, "name": stored.name, "chunks": len(stored.chunks)})

    @app.get("/api/chats/{chat_id}")
    async def get_chat(chat_id: str) -> JSONResponse:
        chat = await engine.chat_store.get_chat(chat_id)
        if chat is None:
            return JSONResponse({"message": "Chat not found"}, status_code=404)
        return JSONResponse(chat.model_dump())

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket) -> None:
        await ws.accept()
        # one task per message so a long answer does not block the next one
        pending: set[asyncio.Task] = set()
        try:
            while True:
                raw = await ws.receive_text()
                task = asyncio.create_task(handle_message(raw, ws, engine))
                pending.add(task)
                task.add_done_callback(pending.discard)
        except WebSocketDisconnect:
            logger.info("websocket client disconnected")
        finally:
            for task in pending:
                task.cancel()

    @app.get("/api")
    async def api_root() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    @app.get("/health")
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    return app


# Module-level instance for ``uvicorn focus_engine.adapters.web_fastapi.app:app``
app = create_app()


def serve() -> None:
    """Entry-point for ``focus-web`` console script."""
    import uvicorn

    uvicorn.run(
        "focus_engine.adapters.web_fastapi.app:app",
        host="0.0.0.0",
        port=8000,
        log_level="info",
    )
