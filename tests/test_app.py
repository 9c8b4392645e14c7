"""Tests for the FastAPI adapter — HTTP batch, SSE, uploads, chats and WebSocket."""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from focus_engine.adapters.web_fastapi.app import create_app
from focus_engine.engine.agent import FocusEngine
from focus_engine.engine.embeddings import MockEmbeddingClient
from focus_engine.engine.llm import MockLLMClient
from focus_engine.modes.registry import build_focus_registry
from focus_engine.store.in_memory import InMemoryChatStore

EXTRACTION = "<atmosphere>Cozy.</atmosphere><cuisine>Italian.</cuisine><menu>Truffle pasta.</menu><reviews>Loved.</reviews>"
EVALUATION = "Upscale Italian with truffles: 8 out of 10 likelihood of a good fit."


@pytest.fixture
def make_client(provider_registry, file_store, chat_store):
    def factory(responses):
        engine = FocusEngine(
            registry=build_focus_registry(provider_registry, file_store=file_store),
            llm_client=MockLLMClient(responses),
            embedding_client=MockEmbeddingClient(),
            file_store=file_store,
            chat_store=chat_store,
        )
        return TestClient(create_app(engine))
    return factory


def parse_sse(body: str) -> list[tuple[str, dict]]:
    events = []
    for block in body.strip().split("\n\n"):
        lines = dict(line.split(": ", 1) for line in block.split("\n"))
        events.append((lines["event"], json.loads(lines["data"])))
    return events


class TestHttpSearch:
    def test_health(self, make_client):
        client = make_client([])
        assert client.get("/health").json() == {"status": "ok"}
        assert client.get("/api").json() == {"status": "ok"}

    def test_missing_query_is_400(self, make_client):
        response = make_client([]).post("/api/search", json={"focusMode": "webSearch"})
        assert response.status_code == 400
        assert response.json() == {"message": "Missing focus mode or query"}

    def test_unknown_focus_mode_is_400(self, make_client):
        response = make_client([]).post("/api/search", json={"focusMode": "nope", "query": "q"})
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid focus mode"}

    def test_writing_assistant_answer(self, make_client):
        client = make_client(["A short poem"])
        response = client.post("/api/search", json={
            "focusMode": "writingAssistant",
            "query": "write a poem",
            "history": [["human", "hello"], ["assistant", "hi"]],
        })
        assert response.status_code == 200
        assert response.json() == {"message": "A short poem", "sources": []}

    def test_web_search_returns_sources(self, make_client):
        client = make_client(["<question>\nq\n</question>", "Answer text"])
        response = client.post("/api/search", json={"focusMode": "webSearch", "query": "q", "optimizationMode": "speed"})
        body = response.json()
        assert response.status_code == 200
        assert body["message"] == "Answer text"
        assert isinstance(body["sources"], list)

    def test_pipeline_error_is_500(self, make_client):
        client = make_client([RuntimeError("boom")])
        response = client.post("/api/search", json={"focusMode": "webSearch", "query": "q"})
        assert response.status_code == 500
        assert response.json() == {"message": "Language model call failed (RuntimeError)"}

    def test_history_pair_of_wrong_length_is_400(self, make_client):
        response = make_client([]).post("/api/search", json={
            "focusMode": "writingAssistant", "query": "q", "history": [["human"]],
        })
        assert response.status_code == 400
        assert response.json() == {"message": "Missing focus mode or query"}

    def test_restaurant_focus_validates_query(self, make_client):
        response = make_client([]).post("/api/search", json={"focusMode": "restaurantSearch", "query": "invalid input"})
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid restaurant query format"}


class TestHttpRestaurant:
    def test_missing_address_is_400(self, make_client):
        response = make_client([]).post("/api/search/restaurant", json={"restaurantName": "Luigi's"})
        assert response.status_code == 400

    def test_evaluation(self, make_client):
        client = make_client(["<question>\nLuigi's\n</question>", "Luigi's serves truffle pasta.", EXTRACTION, EVALUATION])
        response = client.post("/api/search/restaurant", json={"restaurantName": "Luigi's", "address": "2 Elm St"})
        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "success"
        assert body["evaluation"]["score"] == 8
        assert body["events"][-1] == {"type": "messageEnd"}


class TestSseStream:
    def test_stream_ends_with_message_end(self, make_client):
        client = make_client(["Draft one"])
        response = client.post("/api/search/stream", json={"focusMode": "writingAssistant", "query": "write"})
        assert response.headers["content-type"].startswith("text/event-stream")

        events = parse_sse(response.text)
        assert events[0] == ("status", {"type": "status", "data": "Generating answer..."})
        assert events[-1] == ("messageEnd", {"type": "messageEnd"})
        assert "".join(data["data"] for name, data in events if name == "response") == "Draft one"

    def test_stream_error_event(self, make_client):
        client = make_client([RuntimeError("boom")])
        response = client.post("/api/search/stream", json={"focusMode": "writingAssistant", "query": "write"})
        events = parse_sse(response.text)
        assert events[-1][0] == "error"
        assert [name for name, _ in events].count("error") == 1


class TestUploadsAndChats:
    def test_upload_then_search_with_file(self, make_client):
        client = make_client(["<question>\nq\n</question>", "From your file"])
        upload = client.post("/api/uploads", json={"name": "notes.txt", "content": "Para one\n\nPara two"})
        assert upload.status_code == 200
        file_id = upload.json()["fileId"]
        assert upload.json()["chunks"] == 1

        response = client.post("/api/search", json={
            "focusMode": "academicSearch", "query": "q", "files": [file_id],
        })
        sources = response.json()["sources"]
        assert any(s["metadata"]["engine"] == "file" for s in sources)

    def test_unknown_chat_is_404(self, make_client):
        assert make_client([]).get("/api/chats/missing").status_code == 404


class TestWebSocket:
    def _message(self, content, focus_mode="writingAssistant", chat_id="chat-1"):
        return json.dumps({
            "type": "message",
            "message": {"messageId": "user-1", "chatId": chat_id, "content": content},
            "focusMode": focus_mode,
            "history": [],
        })

    def test_answer_relayed_and_recorded(self, make_client):
        client = make_client(["Hello from the assistant"])
        with client.websocket_connect("/ws") as ws:
            ws.send_text(self._message("hi there"))
            frames = []
            while True:
                frame = ws.receive_json()
                frames.append(frame)
                if frame["type"] in ("messageEnd", "error"):
                    break

        assert frames[-1]["type"] == "messageEnd"
        message_ids = {f["messageId"] for f in frames}
        assert len(message_ids) == 1

        chat = client.get("/api/chats/chat-1").json()
        assert [m["role"] for m in chat["messages"]] == ["user", "assistant"]
        assert chat["messages"][1]["content"] == "Hello from the assistant"
        assert chat["messages"][1]["message_id"] == message_ids.pop()

    def test_malformed_message(self, make_client):
        with make_client([]).websocket_connect("/ws") as ws:
            ws.send_text("{not json")
            assert ws.receive_json() == {"type": "error", "data": "Invalid message format", "key": "INVALID_FORMAT"}

    def test_unknown_focus_mode(self, make_client):
        with make_client([]).websocket_connect("/ws") as ws:
            ws.send_text(self._message("hi", focus_mode="bogus"))
            assert ws.receive_json()["key"] == "INVALID_FOCUS_MODE"

    def test_invalid_restaurant_input(self, make_client):
        with make_client([]).websocket_connect("/ws") as ws:
            ws.send_text(self._message("invalid input", focus_mode="restaurantSearch"))
            frame = ws.receive_json()
            assert frame["key"] == "INVALID_FORMAT"
            assert frame["data"] == "Invalid restaurant search input format"

    def test_chain_error(self, make_client):
        client = make_client([RuntimeError("boom")])
        with client.websocket_connect("/ws") as ws:
            ws.send_text(self._message("hi", chat_id="chat-err"))
            frames = [ws.receive_json()]
            while frames[-1]["type"] != "error":
                frames.append(ws.receive_json())

        assert frames[-1]["key"] == "CHAIN_ERROR"
        chat = client.get("/api/chats/chat-err").json()
        assert [m["role"] for m in chat["messages"]] == ["user"]

    def test_history_pair_of_wrong_length(self, make_client):
        message = json.loads(self._message("hi"))
        message["history"] = [["human", "a", "b"]]
        with make_client([]).websocket_connect("/ws") as ws:
            ws.send_text(json.dumps(message))
            assert ws.receive_json()["key"] == "INVALID_FORMAT"

    def test_unexpected_failure_sends_processing_error(self, provider_registry, file_store):
        class BrokenChatStore(InMemoryChatStore):
            async def create_chat(self, chat):
                raise RuntimeError("disk full")

        engine = FocusEngine(
            registry=build_focus_registry(provider_registry, file_store=file_store),
            llm_client=MockLLMClient(["unused"]),
            embedding_client=MockEmbeddingClient(),
            file_store=file_store,
            chat_store=BrokenChatStore(),
        )
        with TestClient(create_app(engine)).websocket_connect("/ws") as ws:
            ws.send_text(self._message("hi"))
            assert ws.receive_json() == {"type": "error", "data": "Failed to process message", "key": "PROCESSING_ERROR"}

    def test_socket_survives_a_failed_message(self, make_client):
        with make_client(["Second answer"]).websocket_connect("/ws") as ws:
            ws.send_text("{not json")
            assert ws.receive_json()["key"] == "INVALID_FORMAT"
            ws.send_text(self._message("hello again", chat_id="chat-2"))
            frames = [ws.receive_json()]
            while frames[-1]["type"] != "messageEnd":
                frames.append(ws.receive_json())
        assert "".join(f["data"] for f in frames if f["type"] == "response") == "Second answer"
