"""
UNIT OF WORK / GATEWAY TESTS
============================

Transaction boundaries and error mapping, using a recording fake session
instead of a database.
"""
import uuid

import pytest
from sqlalchemy.exc import OperationalError
from structlog.testing import capture_logs

from exceptions import ConversationNotFound, GatewayFailure
from infrastructure.gateway import PersistenceGateway
from infrastructure.uow import UnitOfWork

pytestmark = pytest.mark.asyncio


class FakeResult:
    def __init__(self, value):
        self._value = value

    def scalar_one_or_none(self):
        return self._value


class FakeSession:
    def __init__(self, execute_result=None, fail_flush=False):
        self.events = []
        self.added = []
        self.statements = []
        self._execute_result = execute_result
        self._fail_flush = fail_flush

    def add(self, obj):
        self.added.append(obj)
        self.events.append("add")

    async def flush(self):
        self.events.append("flush")
        if self._fail_flush:
            raise OperationalError("INSERT", {}, Exception("connection lost"))

    async def execute(self, stmt):
        self.events.append("execute")
        self.statements.append(stmt)
        return FakeResult(self._execute_result)

    async def commit(self):
        self.events.append("commit")

    async def rollback(self):
        self.events.append("rollback")

    async def close(self):
        self.events.append("close")


class SessionFactory:
    def __init__(self, **session_kwargs):
        self.sessions = []
        self._kwargs = session_kwargs

    def __call__(self):
        session = FakeSession(**self._kwargs)
        self.sessions.append(session)
        return session


class TestUnitOfWork:

    async def test_commit_on_success(self):
        factory = SessionFactory()

        async with UnitOfWork(factory) as uow:
            uow.session.add(object())

        assert factory.sessions[0].events == ["add", "commit", "close"]

    async def test_rollback_on_error(self):
        factory = SessionFactory()

        with pytest.raises(RuntimeError, match="Simulated error"):
            async with UnitOfWork(factory) as uow:
                uow.session.add(object())
                raise RuntimeError("Simulated error after add")

        assert factory.sessions[0].events == ["add", "rollback", "close"]

    async def test_session_unavailable_outside_context(self):
        uow = UnitOfWork(SessionFactory())

        with pytest.raises(RuntimeError, match="Session not available"):
            uow.session


class TestPersistenceGateway:

    async def test_new_conversation_created(self):
        factory = SessionFactory()

        resolved = await PersistenceGateway(factory).get_or_create_conversation("demo-user", None, "Title...")

        assert resolved.created
        assert resolved.value.title == "Title..."
        assert resolved.value.user_id == "demo-user"
        assert factory.sessions[0].events == ["add", "flush", "commit", "close"]

    async def test_existing_conversation_resolved(self):
        existing = object()
        factory = SessionFactory(execute_result=existing)

        resolved = await PersistenceGateway(factory).get_or_create_conversation("demo-user", uuid.uuid4(), "t")

        assert not resolved.created
        assert resolved.value is existing

    async def test_unknown_conversation_rolls_back(self):
        factory = SessionFactory(execute_result=None)

        with pytest.raises(ConversationNotFound):
            await PersistenceGateway(factory).get_or_create_conversation("demo-user", uuid.uuid4(), "t")

        assert factory.sessions[0].events == ["execute", "rollback", "close"]

    async def test_storage_error_wrapped(self):
        factory = SessionFactory(fail_flush=True)

        with capture_logs() as logs, pytest.raises(GatewayFailure) as exc_info:
            await PersistenceGateway(factory).create_message(uuid.uuid4(), "user", "hi")

        assert exc_info.value.details == {"operation": "create_message"}
        failures = [e for e in logs if e["event"] == "gateway_operation_failed"]
        assert failures[0]["operation"] == "create_message"
        assert failures[0]["error_type"] == "OperationalError"
        assert factory.sessions[0].events[-2:] == ["rollback", "close"]

    async def test_missing_goal_returns_none(self):
        factory = SessionFactory(execute_result=None)

        assert await PersistenceGateway(factory).update_goal_progress("demo-user", uuid.uuid4(), 10) is None


def where_clause(stmt):
    """Rendered SQL plus bound values of a captured statement"""
    compiled = stmt.compile()
    return str(compiled), set(compiled.params.values())


class TestActorScoping:

    async def test_conversation_lookup_filters_owner(self):
        factory = SessionFactory(execute_result=None)
        conversation_id = uuid.uuid4()

        with pytest.raises(ConversationNotFound):
            await PersistenceGateway(factory).get_or_create_conversation("alice", conversation_id, "t")

        sql, params = where_clause(factory.sessions[0].statements[0])
        assert "conversations.user_id" in sql
        assert {"alice", conversation_id} <= params

    async def test_history_of_unowned_conversation_not_found(self):
        factory = SessionFactory(execute_result=None)

        with pytest.raises(ConversationNotFound):
            await PersistenceGateway(factory).list_messages("mallory", uuid.uuid4())

        sql, params = where_clause(factory.sessions[0].statements[0])
        assert "conversations.user_id" in sql
        assert "mallory" in params
        assert factory.sessions[0].events == ["execute", "rollback", "close"]

    async def test_goal_update_locks_owned_row_only(self):
        factory = SessionFactory(execute_result=None)

        assert await PersistenceGateway(factory).update_goal_progress("mallory", uuid.uuid4(), 99) is None

        sql, params = where_clause(factory.sessions[0].statements[0])
        assert "goals.user_id" in sql
        assert "FOR UPDATE" in sql
        assert "mallory" in params
        assert factory.sessions[0].added == []

    async def test_decision_fetch_filters_owner(self):
        factory = SessionFactory(execute_result=None)

        assert await PersistenceGateway(factory).get_decision("mallory", uuid.uuid4()) is None

        sql, params = where_clause(factory.sessions[0].statements[0])
        assert "decisions.user_id" in sql
        assert "mallory" in params
