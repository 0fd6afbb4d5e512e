"""Tests for the entry submission pipeline and history endpoint."""

from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from happiness.api.routes import entries as entries_routes
from happiness.db.models import ContextFact, Entry
from happiness.services.completion_client import CompletionError
from happiness.services.entry_pipeline import build_prompt, submit_entry

BASE_TIME = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


async def count_entries(db) -> int:
    return await db.scalar(select(func.count()).select_from(Entry))


class TestSubmitEntry:
    async def test_success_persists_one_entry(self, client, db, make_user, auth_headers, completion) -> None:
        user = await make_user()

        response = await client.post(
            "/entries", json={"content": "I feel stuck at work"}, headers=auth_headers(user.id)
        )

        assert response.status_code == 200
        body = response.json()
        assert body["recommendation"] == completion.reply
        assert body["entry"]["ai_response"] == completion.reply
        assert body["entry"]["content"] == "I feel stuck at work"
        assert body["entry"]["user_id"] == user.id

        rows = (await db.execute(select(Entry.id, Entry.content, Entry.ai_response))).all()
        assert len(rows) == 1
        assert rows[0].id == body["entry"]["id"]
        assert rows[0].ai_response == completion.reply

    async def test_prompt_includes_context_and_history(
        self, client, db, make_user, auth_headers, completion
    ) -> None:
        user = await make_user()
        db.add(ContextFact(user_id=user.id, context_key="goal", context_value="sleep better"))
        db.add(Entry(user_id=user.id, content="tired", ai_response="rest", created_at=BASE_TIME))
        await db.commit()

        await client.post("/entries", json={"content": "still tired"}, headers=auth_headers(user.id))

        assert completion.prompts == [
            build_prompt(
                "User Context: goal: sleep better\n\n"
                "Recent conversation history:\nUser: tired\nAI: rest",
                "still tired",
            )
        ]
        prompt = completion.prompts[0]
        assert prompt.startswith("You are a personal well-being assistant")
        assert 'Current user input: "still tired"' in prompt

    async def test_first_entry_prompt_uses_fallbacks(self, client, make_user, auth_headers, completion) -> None:
        user = await make_user()

        await client.post("/entries", json={"content": "hello"}, headers=auth_headers(user.id))

        assert "User Context: No specific context available" in completion.prompts[0]
        assert "No previous conversations" in completion.prompts[0]

    async def test_empty_content_is_rejected(self, client, db, make_user, auth_headers, completion) -> None:
        user = await make_user()

        for payload in ({}, {"content": ""}, {"content": "   "}, {"content": None}):
            response = await client.post("/entries", json=payload, headers=auth_headers(user.id))
            assert response.status_code == 400
            assert response.json()["detail"] == "Content is required"

        assert completion.prompts == []
        assert await count_entries(db) == 0
        assert await db.scalar(select(func.count()).select_from(ContextFact)) == 0

    async def test_requires_authentication(self, client, db, completion) -> None:
        response = await client.post("/entries", json={"content": "hello"})

        assert response.status_code == 401
        assert completion.prompts == []
        assert await count_entries(db) == 0

    async def test_completion_failure_writes_nothing(
        self, client, db, make_user, auth_headers, completion
    ) -> None:
        user = await make_user()
        completion.error = CompletionError("Completion service request failed")

        response = await client.post("/entries", json={"content": "hello"}, headers=auth_headers(user.id))

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to generate recommendation"}
        assert len(completion.prompts) == 1
        assert await count_entries(db) == 0

    async def test_storage_failure_after_insert_writes_nothing(
        self, client, db, make_user, auth_headers, monkeypatch
    ) -> None:
        user = await make_user()

        async def submit_then_fail(*args, **kwargs):
            await submit_entry(*args, **kwargs)
            raise OperationalError("INSERT INTO user_entries ...", {}, Exception("disk I/O error"))

        monkeypatch.setattr(entries_routes, "submit_entry", submit_then_fail)

        response = await client.post("/entries", json={"content": "hello"}, headers=auth_headers(user.id))

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to generate recommendation"}
        assert await count_entries(db) == 0

    async def test_content_is_stored_verbatim(self, client, db, make_user, auth_headers, completion) -> None:
        user = await make_user()
        content = "  I feel low today\n"

        response = await client.post("/entries", json={"content": content}, headers=auth_headers(user.id))

        assert response.json()["entry"]["content"] == content
        assert await db.scalar(select(Entry.content)) == content
        assert f'Current user input: "{content}"' in completion.prompts[0]


class TestListEntries:
    async def seed(self, db, user_id: int, count: int) -> None:
        for i in range(count):
            db.add(
                Entry(
                    user_id=user_id,
                    content=f"entry {i}",
                    ai_response=f"reply {i}",
                    created_at=BASE_TIME + timedelta(hours=i),
                )
            )
        await db.commit()

    async def test_newest_first_with_defaults(self, client, db, make_user, auth_headers) -> None:
        user = await make_user()
        await self.seed(db, user.id, 3)

        response = await client.get("/entries", headers=auth_headers(user.id))

        assert response.status_code == 200
        assert [e["content"] for e in response.json()["entries"]] == ["entry 2", "entry 1", "entry 0"]

    async def test_default_limit_is_twenty(self, client, db, make_user, auth_headers) -> None:
        user = await make_user()
        await self.seed(db, user.id, 25)

        response = await client.get("/entries", headers=auth_headers(user.id))

        assert len(response.json()["entries"]) == 20

    async def test_pagination(self, client, db, make_user, auth_headers) -> None:
        user = await make_user()
        await self.seed(db, user.id, 5)

        response = await client.get("/entries?limit=2&offset=1", headers=auth_headers(user.id))

        assert [e["content"] for e in response.json()["entries"]] == ["entry 3", "entry 2"]

    async def test_only_own_entries(self, client, db, make_user, auth_headers) -> None:
        user = await make_user()
        other = await make_user(email="other@example.com")
        await self.seed(db, other.id, 2)

        response = await client.get("/entries", headers=auth_headers(user.id))

        assert response.json() == {"entries": []}

    async def test_invalid_paging_parameters(self, client, make_user, auth_headers) -> None:
        user = await make_user()

        for query in ("limit=0", "limit=101", "offset=-1", "limit=abc"):
            response = await client.get(f"/entries?{query}", headers=auth_headers(user.id))
            assert response.status_code == 422
