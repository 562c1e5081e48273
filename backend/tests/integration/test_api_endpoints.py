"""
Integration tests for the FitCoach API endpoints.

Tests the full request/response cycle against an in-memory database and
a scripted completion client.
"""

import asyncio
import json

import pytest
from fastapi.testclient import TestClient
from httpx import AsyncClient


@pytest.fixture(autouse=True)
def reset_sse_exit_event():
    """Reset sse-starlette's process-wide exit event between event loops."""
    from sse_starlette.sse import AppStatus

    if hasattr(AppStatus, "should_exit_event"):
        AppStatus.should_exit_event = None
    yield


def _sse_data(body: str):
    return [line[len("data:"):].strip() for line in body.splitlines() if line.startswith("data:")]


async def _new_thread(ac: AsyncClient, title=None) -> dict:
    response = await ac.post("/api/chat/threads", json={"title": title} if title else {})
    assert response.status_code == 201
    return response.json()


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_root_endpoint(self, client: TestClient):
        """Root endpoint should return welcome message."""
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["message"] == "FitCoach API"

    def test_health_endpoint(self, client: TestClient):
        """Health endpoint should return healthy status."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_protected_endpoint_requires_session(self, client: TestClient):
        response = client.get("/api/user")
        assert response.status_code == 401
        assert response.json()["error"] == "AuthError"


class TestAuthEndpoints:

    @pytest.mark.asyncio
    async def test_register_logs_in(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/register",
            json={"username": "alice", "password": "secret123", "email": "a@example.com"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["username"] == "alice"
        assert "password_hash" not in body

        me = await async_client.get("/api/user")
        assert me.status_code == 200
        assert me.json()["id"] == body["id"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"username": "alice"},
            {"password": "secret123"},
            {"username": "al", "password": "secret123"},
            {"username": "alice", "password": "123"},
        ],
    )
    async def test_register_validation(self, async_client: AsyncClient, payload):
        response = await async_client.post("/api/register", json=payload)
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"

    @pytest.mark.asyncio
    async def test_duplicate_username(self, logged_in_client: AsyncClient):
        response = await logged_in_client.post(
            "/api/register",
            json={"username": "alice", "password": "another1"},
        )
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_login_logout_cycle(self, logged_in_client: AsyncClient):
        assert (await logged_in_client.post("/api/logout")).json() == {"success": True}
        logged_in_client.cookies.clear()
        assert (await logged_in_client.get("/api/user")).status_code == 401

        wrong = await logged_in_client.post(
            "/api/login", json={"username": "alice", "password": "wrong-password"}
        )
        assert wrong.status_code == 401

        missing = await logged_in_client.post("/api/login", json={"username": "alice"})
        assert missing.status_code == 400

        ok = await logged_in_client.post(
            "/api/login", json={"username": "alice", "password": "secret123"}
        )
        assert ok.status_code == 200
        assert (await logged_in_client.get("/api/user")).json()["username"] == "alice"

    @pytest.mark.asyncio
    async def test_logout_invalidates_server_session(self, logged_in_client: AsyncClient, session_store):
        assert len(session_store) == 1
        await logged_in_client.post("/api/logout")
        assert len(session_store) == 0

    @pytest.mark.asyncio
    async def test_unknown_session_cookie(self, async_client: AsyncClient):
        async_client.cookies.set("fitcoach_session", "forged")
        assert (await async_client.get("/api/user")).status_code == 401


class TestProfileEndpoints:

    @pytest.mark.asyncio
    async def test_profile_upsert(self, logged_in_client: AsyncClient, sample_profile):
        assert (await logged_in_client.get("/api/profile")).json() is None

        created = await logged_in_client.post("/api/profile", json=sample_profile)
        assert created.status_code == 200
        assert created.json()["goal"] == "cut"

        updated = await logged_in_client.post("/api/profile", json={"weight": 78.5})
        assert updated.json()["weight"] == 78.5
        assert updated.json()["goal"] == "cut"
        assert updated.json()["id"] == created.json()["id"]

    @pytest.mark.asyncio
    async def test_profile_rejects_bad_values(self, logged_in_client: AsyncClient):
        response = await logged_in_client.post("/api/profile", json={"age": 5})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_coach_defaults(self, logged_in_client: AsyncClient):
        response = await logged_in_client.post("/api/coach", json={"tone": "calm"})
        assert response.status_code == 200
        coach = response.json()
        assert coach["tone"] == "calm"
        assert coach["name"] == "Coach"
        assert coach["style"] == "supportive"


class TestActivityEndpoints:

    @pytest.mark.asyncio
    async def test_workouts(self, logged_in_client: AsyncClient):
        created = await logged_in_client.post(
            "/api/workouts",
            json={
                "name": "Push Day",
                "date": "2025-03-01T18:00:00+02:00",
                "duration": 55,
                "exercises": [{"name": "Bench Press", "sets": 4, "reps": 8}],
            },
        )
        assert created.status_code == 201
        workout = created.json()
        assert workout["date"].startswith("2025-03-01T16:00:00")

        listed = (await logged_in_client.get("/api/workouts")).json()
        assert [w["id"] for w in listed] == [workout["id"]]

        fetched = await logged_in_client.get(f"/api/workouts/{workout['id']}")
        assert fetched.json()["exercises"][0]["name"] == "Bench Press"

        assert (await logged_in_client.get("/api/workouts/9999")).status_code == 404

    @pytest.mark.asyncio
    async def test_progress(self, logged_in_client: AsyncClient):
        assert (await logged_in_client.get("/api/progress/latest")).json() is None

        for date, weight in [("2025-03-01T08:00:00", 80.0), ("2025-03-08T08:00:00", 79.2)]:
            response = await logged_in_client.post(
                "/api/progress", json={"date": date, "weight": weight}
            )
            assert response.status_code == 201

        latest = (await logged_in_client.get("/api/progress/latest")).json()
        assert latest["weight"] == 79.2
        assert len((await logged_in_client.get("/api/progress")).json()) == 2


class TestPlanEndpoints:

    @pytest.mark.asyncio
    async def test_generate_requires_profile(self, logged_in_client: AsyncClient):
        response = await logged_in_client.post("/api/plans/training/generate")
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_generate_training_plan(self, logged_in_client: AsyncClient, fake_client, sample_profile):
        await logged_in_client.post("/api/profile", json=sample_profile)
        fake_client.complete_response = json.dumps({"name": "PPL", "days": []})

        response = await logged_in_client.post("/api/plans/training/generate")

        assert response.status_code == 200
        assert response.json()["name"] == "PPL"
        active = (await logged_in_client.get("/api/plans/training")).json()
        assert active["id"] == response.json()["id"]

    @pytest.mark.asyncio
    async def test_generate_nutrition_plan(self, logged_in_client: AsyncClient, fake_client, sample_profile):
        await logged_in_client.post("/api/profile", json=sample_profile)
        fake_client.complete_response = json.dumps({"meals": []})

        response = await logged_in_client.post("/api/plans/nutrition/generate")

        assert response.status_code == 200
        assert response.json()["calories"] == 2207

    @pytest.mark.asyncio
    async def test_weekly_checkin(self, logged_in_client: AsyncClient, fake_client, sample_profile):
        await logged_in_client.post("/api/profile", json=sample_profile)
        fake_client.complete_response = "Solid week!"

        response = await logged_in_client.post("/api/coach/weekly-checkin")

        assert response.json() == {"message": "Solid week!"}


class TestChatThreadEndpoints:

    @pytest.mark.asyncio
    async def test_thread_crud(self, logged_in_client: AsyncClient):
        thread = await _new_thread(logged_in_client)
        assert thread["title"] == "New Chat"

        named = await _new_thread(logged_in_client, "Cutting questions")
        listed = (await logged_in_client.get("/api/chat/threads")).json()
        assert {t["id"] for t in listed} == {thread["id"], named["id"]}

        fetched = await logged_in_client.get(f"/api/chat/threads/{named['id']}")
        assert fetched.json()["title"] == "Cutting questions"

        deleted = await logged_in_client.delete(f"/api/chat/threads/{thread['id']}")
        assert deleted.status_code == 204
        assert (await logged_in_client.get(f"/api/chat/threads/{thread['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_other_users_thread_is_forbidden(self, logged_in_client: AsyncClient):
        thread = await _new_thread(logged_in_client)

        logged_in_client.cookies.clear()
        await logged_in_client.post(
            "/api/register", json={"username": "mallory", "password": "secret123"}
        )

        assert (await logged_in_client.get(f"/api/chat/threads/{thread['id']}")).status_code == 403
        assert (await logged_in_client.get(f"/api/chat/threads/{thread['id']}/messages")).status_code == 403
        assert (await logged_in_client.delete(f"/api/chat/threads/{thread['id']}")).status_code == 403
        assert (await logged_in_client.get("/api/chat/threads")).json() == []


class TestChatStreamEndpoint:

    @pytest.mark.asyncio
    async def test_stream_reply(self, logged_in_client: AsyncClient, fake_client):
        fake_client.fragments = ["Eat ", "more ", "protein."]
        thread = await _new_thread(logged_in_client)

        response = await logged_in_client.post(
            "/api/chat/stream",
            json={"threadId": thread["id"], "message": "How do I keep muscle on a cut?"},
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        frames = _sse_data(response.text)
        assert frames[-1] == "[DONE]"
        assert [json.loads(f)["content"] for f in frames[:-1]] == ["Eat ", "more ", "protein."]

        messages = (await logged_in_client.get(f"/api/chat/threads/{thread['id']}/messages")).json()
        assert [(m["role"], m["content"]) for m in messages] == [
            ("user", "How do I keep muscle on a cut?"),
            ("assistant", "Eat more protein."),
        ]

        refreshed = (await logged_in_client.get(f"/api/chat/threads/{thread['id']}")).json()
        assert refreshed["title"] == "How do I keep muscle on a cut?"

    @pytest.mark.asyncio
    async def test_stream_upstream_error_frame(self, logged_in_client: AsyncClient, fake_client):
        from fitcoach.infrastructure.exceptions import UpstreamError

        fake_client.fragments = ["Hmm"]
        fake_client.error = UpstreamError("provider went away", model="fake-model")
        thread = await _new_thread(logged_in_client)

        response = await logged_in_client.post(
            "/api/chat/stream", json={"threadId": thread["id"], "message": "hi"}
        )

        frames = _sse_data(response.text)
        assert "[DONE]" not in frames
        assert json.loads(frames[-1])["error"] == "upstream_error"

        messages = (await logged_in_client.get(f"/api/chat/threads/{thread['id']}/messages")).json()
        assert [m["role"] for m in messages] == ["user"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [{"message": "hi"}, {"threadId": 1}, {"threadId": 1, "message": "  "}],
    )
    async def test_stream_validation(self, logged_in_client: AsyncClient, fake_client, payload):
        response = await logged_in_client.post("/api/chat/stream", json=payload)
        assert response.status_code == 400
        assert fake_client.stream_calls == []

    @pytest.mark.asyncio
    async def test_stream_unknown_thread(self, logged_in_client: AsyncClient):
        response = await logged_in_client.post(
            "/api/chat/stream", json={"threadId": 9999, "message": "hi"}
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_stream_requires_login(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/chat/stream", json={"threadId": 1, "message": "hi"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_client_disconnect_mid_stream(self, app, logged_in_client: AsyncClient, fake_client):
        """A real http.disconnect after three frames ends the turn without a reply."""
        fake_client.fragments = ["One ", "two ", "three ", "four ", "five"]
        fake_client.hang = True
        thread = await _new_thread(logged_in_client)
        session_id = logged_in_client.cookies.get("fitcoach_session")
        body = json.dumps({"threadId": thread["id"], "message": "Plan my week"}).encode()

        scope = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": "POST",
            "scheme": "http",
            "path": "/api/chat/stream",
            "raw_path": b"/api/chat/stream",
            "root_path": "",
            "query_string": b"",
            "headers": [
                (b"host", b"test"),
                (b"content-type", b"application/json"),
                (b"content-length", str(len(body)).encode()),
                (b"cookie", f"fitcoach_session={session_id}".encode()),
            ],
            "client": ("127.0.0.1", 50000),
            "server": ("test", 80),
        }

        disconnected = asyncio.Event()
        request_sent = False
        data_frames = 0
        sent = []

        async def receive():
            nonlocal request_sent
            if not request_sent:
                request_sent = True
                return {"type": "http.request", "body": body, "more_body": False}
            await disconnected.wait()
            return {"type": "http.disconnect"}

        async def send(message):
            nonlocal data_frames
            sent.append(message)
            if message["type"] == "http.response.body" and b"data:" in message.get("body", b""):
                data_frames += 1
                if data_frames >= 3:
                    disconnected.set()

        await asyncio.wait_for(app(scope, receive, send), timeout=5)

        start = next(m for m in sent if m["type"] == "http.response.start")
        assert start["status"] == 200
        stream_body = b"".join(
            m.get("body", b"") for m in sent if m["type"] == "http.response.body"
        ).decode()
        frames = _sse_data(stream_body)
        assert "[DONE]" not in frames
        assert [json.loads(f)["content"] for f in frames] == ["One ", "two ", "three "]

        for _ in range(100):
            if fake_client.closed:
                break
            await asyncio.sleep(0.01)
        assert fake_client.closed

        messages = (await logged_in_client.get(f"/api/chat/threads/{thread['id']}/messages")).json()
        assert [m["role"] for m in messages] == ["user"]
