import pytest
from sqlalchemy.exc import SQLAlchemyError

from timeblock.core.auth.security import TokenVerifier, create_access_token
from timeblock.core.chats import ChatRoundTrip, ChatStore
from timeblock.core.chats.models import Chat
from timeblock.core.errors import (
    AuthenticationFailure,
    HistoryFetchFailure,
    ModelInvocationFailure,
    PersistFailure,
)
from timeblock.core.llm.client import LLMClient
from timeblock.core.llm.providers.base import BaseLLMProvider
from timeblock.core.users.models import User
from timeblock.db.base import async_session_context


class RecordingProvider(BaseLLMProvider):
    name = "recording"

    def __init__(self, reply="Title: Gym\nStart: today at 6:00 PM\nEnd: today at 7:00 PM", error=None):
        self.reply = reply
        self.error = error
        self.transcripts = []

    async def complete(self, messages):
        self.transcripts.append(list(messages))
        if self.error is not None:
            raise self.error
        return self.reply


class BrokenTouchStore(ChatStore):
    async def touch_chat(self, chat_id):
        raise SQLAlchemyError("disk I/O error")


class BrokenInsertStore(ChatStore):
    async def insert_message(self, chat_id, role, content):
        raise SQLAlchemyError("database is locked")


class BrokenAssistantInsertStore(ChatStore):
    touched = False

    async def insert_message(self, chat_id, role, content):
        if role == "assistant":
            raise SQLAlchemyError("database is locked")
        return await super().insert_message(chat_id, role, content)

    async def touch_chat(self, chat_id):
        self.touched = True
        await super().touch_chat(chat_id)


def make_round_trip(db_session, provider, store_cls=ChatStore):
    return ChatRoundTrip(TokenVerifier(db_session), store_cls(db_session), LLMClient(provider=provider))


async def stored_messages(chat_id):
    async with async_session_context() as session:
        return [(m.role, m.content) for m in await ChatStore(session).list_messages(chat_id)]


@pytest.mark.asyncio
async def test_success_persists_user_then_assistant(db_session, chat, token):
    provider = RecordingProvider(reply="Sure, see you at the gym.")
    reply = await make_round_trip(db_session, provider).run(token, chat.id, "Plan my gym session")

    assert reply == "Sure, see you at the gym."
    assert await stored_messages(chat.id) == [
        ("user", "Plan my gym session"),
        ("assistant", "Sure, see you at the gym."),
    ]


@pytest.mark.asyncio
async def test_transcript_has_history_and_new_message_once(db_session, chat, token):
    store = ChatStore(db_session)
    await store.insert_message(chat.id, "user", "hi")
    await store.insert_message(chat.id, "assistant", "hello, what shall we plan?")

    provider = RecordingProvider()
    await make_round_trip(db_session, provider).run(token, chat.id, "tomorrow morning")

    transcript = provider.transcripts[0]
    assert transcript[0]["role"] == "system"
    assert [(m["role"], m["content"]) for m in transcript[1:]] == [
        ("user", "hi"),
        ("assistant", "hello, what shall we plan?"),
        ("user", "tomorrow morning"),
    ]


@pytest.mark.asyncio
async def test_model_failure_keeps_user_message_only(db_session, chat, token):
    provider = RecordingProvider(error=ModelInvocationFailure("OpenAI API error: 500"))
    with pytest.raises(ModelInvocationFailure) as exc_info:
        await make_round_trip(db_session, provider).run(token, chat.id, "anything")

    assert exc_info.value.message == "OpenAI API error: 500"
    assert await stored_messages(chat.id) == [("user", "anything")]


@pytest.mark.asyncio
async def test_unexpected_provider_error_becomes_model_failure(db_session, chat, token):
    provider = RecordingProvider(error=KeyError("choices"))
    with pytest.raises(ModelInvocationFailure):
        await make_round_trip(db_session, provider).run(token, chat.id, "anything")


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_token", [None, "", "not-a-jwt"])
async def test_auth_failure_persists_nothing(db_session, chat, bad_token):
    provider = RecordingProvider()
    with pytest.raises(AuthenticationFailure):
        await make_round_trip(db_session, provider).run(bad_token, chat.id, "hi")

    assert provider.transcripts == []
    assert await stored_messages(chat.id) == []


@pytest.mark.asyncio
async def test_token_for_unknown_user_is_rejected(db_session, chat):
    token = create_access_token(data={"user_id": "ghost"})
    with pytest.raises(AuthenticationFailure):
        await make_round_trip(db_session, RecordingProvider()).run(token, chat.id, "hi")


@pytest.mark.asyncio
async def test_unknown_chat_fails_history_fetch(db_session, user, token):
    provider = RecordingProvider()
    with pytest.raises(HistoryFetchFailure) as exc_info:
        await make_round_trip(db_session, provider).run(token, "no-such-chat", "hi")

    assert exc_info.value.message == "Failed to fetch chat history"
    assert provider.transcripts == []


@pytest.mark.asyncio
async def test_foreign_chat_fails_history_fetch(db_session, user, token):
    async with async_session_context() as session:
        session.add(User(id="u2", name="Other"))
        foreign = Chat(user_id="u2", title="Theirs")
        session.add(foreign)

    with pytest.raises(HistoryFetchFailure):
        await make_round_trip(db_session, RecordingProvider()).run(token, foreign.id, "hi")
    assert await stored_messages(foreign.id) == []


@pytest.mark.asyncio
async def test_persist_failure_skips_model(db_session, chat, token):
    provider = RecordingProvider()
    with pytest.raises(PersistFailure) as exc_info:
        await make_round_trip(db_session, provider, BrokenInsertStore).run(token, chat.id, "hi")

    assert exc_info.value.message == "Failed to save user message"
    assert provider.transcripts == []


@pytest.mark.asyncio
async def test_assistant_persist_failure_keeps_user_message(db_session, chat, token):
    store = BrokenAssistantInsertStore(db_session)
    provider = RecordingProvider(reply="see you at six")
    round_trip = ChatRoundTrip(TokenVerifier(db_session), store, LLMClient(provider=provider))

    with pytest.raises(PersistFailure) as exc_info:
        await round_trip.run(token, chat.id, "gym tonight")

    assert exc_info.value.message == "Failed to save assistant message"
    assert len(provider.transcripts) == 1
    assert store.touched is False
    assert await stored_messages(chat.id) == [("user", "gym tonight")]


@pytest.mark.asyncio
async def test_timestamp_failure_is_not_fatal(db_session, chat, token):
    reply = await make_round_trip(db_session, RecordingProvider(reply="done"), BrokenTouchStore).run(
        token, chat.id, "hi"
    )
    assert reply == "done"
    assert await stored_messages(chat.id) == [("user", "hi"), ("assistant", "done")]


@pytest.mark.asyncio
async def test_timestamp_is_bumped(db_session, chat, token):
    before = chat.updated_at
    await make_round_trip(db_session, RecordingProvider()).run(token, chat.id, "hi")

    async with async_session_context() as session:
        refreshed = await session.get(Chat, chat.id)
    assert refreshed.updated_at.replace(tzinfo=None) > before.replace(tzinfo=None)
