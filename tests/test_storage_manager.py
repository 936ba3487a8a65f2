"""Tests for the session stores."""

import json

import pytest

from mock_interview.models.enums import SessionStatus
from mock_interview.models.interview import InterviewSession, QuestionAttempt
from mock_interview.services.storage_manager import FileSessionStore, MemorySessionStore, StorageManager
from mock_interview.utils.exceptions import StorageError

# A record in the layout written by the browser version of the tool
BROWSER_RECORD = {
    "id": "s_1700000000000",
    "name": "Jane Doe",
    "email": "jane@example.com",
    "phone": "",
    "resumeText": "Jane Doe\njane@example.com",
    "questions": [
        {"id": "q1", "text": "Tell me about a recent project you built.", "difficulty": "easy",
         "timeLimit": 20, "answer": "hello", "score": 8, "feedback": "good", "timeRemaining": 12},
        {"id": "q2", "text": "Explain how you manage state in a React app.", "difficulty": "easy",
         "timeLimit": 60, "answer": "", "score": None, "feedback": "", "timeRemaining": 60},
    ],
    "currentQuestionIndex": 1,
    "status": "in-progress",
    "finalScore": None,
    "createdAt": "2024-01-01T10:00:00.000Z",
}


@pytest.fixture
def store(tmp_path) -> FileSessionStore:
    file_store = FileSessionStore(base_path=str(tmp_path), max_backup_count=2)
    file_store.initialize()
    return file_store


class TestFileSessionStore:
    async def test_missing_file_loads_empty(self, store):
        assert await store.load() == []

    async def test_save_then_load(self, store, session):
        session.status = SessionStatus.IN_PROGRESS
        session.questions = [QuestionAttempt.model_validate(q) for q in BROWSER_RECORD["questions"]]

        await store.save([session])
        loaded = await store.load()

        assert len(loaded) == 1
        assert loaded[0].id == session.id
        assert loaded[0].status == SessionStatus.IN_PROGRESS
        assert loaded[0].questions[0].answer == "hello"
        assert loaded[0].questions[1].score is None

    async def test_file_uses_persisted_layout(self, store, session):
        await store.save([session])

        data = json.loads(store.file_path.read_text(encoding="utf-8"))

        record = data["sessions"][0]
        assert record["resumeText"] == session.resume_text
        assert record["currentQuestionIndex"] == 0
        assert record["status"] == "created"
        assert record["finalScore"] is None
        assert "createdAt" in record

    async def test_reads_browser_layout(self, store):
        store.file_path.write_text(json.dumps({"sessions": [BROWSER_RECORD]}), encoding="utf-8")

        loaded = await store.load()

        assert loaded[0].id == "s_1700000000000"
        assert loaded[0].current_question_index == 1
        assert loaded[0].questions[0].time_remaining == 12

    async def test_reads_bare_array(self, store):
        store.file_path.write_text(json.dumps([BROWSER_RECORD]), encoding="utf-8")

        assert [s.id for s in await store.load()] == ["s_1700000000000"]

    @pytest.mark.parametrize("content", ["{not json", '{"sessions": [{"status": "bogus"}]}'])
    async def test_corrupt_file_loads_empty(self, store, content):
        store.file_path.write_text(content, encoding="utf-8")

        assert await store.load() == []

    async def test_backups_are_pruned(self, store, session):
        for _ in range(5):
            await store.save([session])

        backups = list(store.backup_path.glob("sessions_*"))
        assert len(backups) == 2

    async def test_save_replaces_whole_collection(self, store, session):
        other = InterviewSession(name="John Smith")
        await store.save([session, other])
        await store.save([other])

        assert [s.id for s in await store.load()] == [other.id]


class TestMemorySessionStore:
    async def test_round_trip(self, session):
        memory = MemorySessionStore()

        await memory.save([session])

        assert [s.id for s in await memory.load()] == [session.id]
        assert memory.save_count == 1

    async def test_corrupt_content_loads_empty(self):
        assert await MemorySessionStore(content="garbage").load() == []


class TestStorageManager:
    def test_unknown_storage_type(self):
        with pytest.raises(StorageError):
            StorageManager("database")

    async def test_delegates_to_memory_store(self, session):
        manager = StorageManager("memory")
        manager.initialize()

        await manager.save([session])

        assert [s.id for s in await manager.load()] == [session.id]
