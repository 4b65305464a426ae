"""
Test suite for SendOrchestrator.

Runs chat turns against the in-memory gateway with a fake inference
client and a mocked attachment store.

System role: Verification of the chat turn use case
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from chatflow.application.services.send_orchestrator import (
    SendOrchestrator,
    SendState,
    SendStep,
    SubmissionOutcome,
)
from chatflow.application.view_models.session_view_model import SessionViewModel
from chatflow.core.attachments.validator import CandidateFile
from chatflow.core.exceptions import PersistenceError, TransportError
from chatflow.models.chat import MessageRole


@pytest.fixture
def view_model(gateway, user_id) -> SessionViewModel:
    return SessionViewModel(gateway=gateway, current_user_id=user_id)


@pytest.fixture
def orchestrator(view_model, gateway, inference_client, mock_attachment_store) -> SendOrchestrator:
    return SendOrchestrator(
        view_model=view_model,
        gateway=gateway,
        inference_client=inference_client,
        attachment_store=mock_attachment_store,
    )


def png(name="a.png") -> CandidateFile:
    return CandidateFile(name=name, content_type="image/png", size=4, data=b"\x89PNG")


class TestNewConversation:
    async def test_hello_creates_session_and_both_messages(
        self, orchestrator, view_model, gateway, inference_client, user_id
    ):
        # Act
        result = await orchestrator.submit("Hello")

        # Assert
        assert result.outcome is SubmissionOutcome.COMPLETED
        session = await gateway.get_session(result.session.id)
        assert session.title == "Hello"
        assert session.owner_id == user_id
        assert session.model == "gpt-4-mini"

        messages = await gateway.list_messages(session.id)
        assert [(m.role, m.content) for m in messages] == [
            (MessageRole.USER, "Hello"),
            (MessageRole.ASSISTANT, "Hi there!"),
        ]
        assert session.updated_at >= session.created_at

        assert view_model.active_session_id == session.id
        assert [m.id for m in view_model.messages] == [m.id for m in messages]
        assert view_model.sending is False

    async def test_title_is_first_fifty_characters(self, orchestrator):
        text = "x" * 80

        result = await orchestrator.submit(text)

        assert result.session.title == "x" * 50

    async def test_text_is_stripped(self, orchestrator, gateway):
        result = await orchestrator.submit("   Hello   ")

        assert result.user_message.content == "Hello"
        assert result.session.title == "Hello"

    async def test_new_session_uses_selected_model(self, orchestrator, view_model, inference_client):
        await view_model.change_model("claude-sonnet-4")

        result = await orchestrator.submit("Hello")

        assert result.session.model == "claude-sonnet-4"
        assert inference_client.requests[0].model == "claude-sonnet-4"

    async def test_inference_request_payload(self, orchestrator, inference_client, user_id):
        result = await orchestrator.submit("Describe", [png()])

        request = inference_client.requests[0]
        assert request.message == "Describe"
        assert request.chat_id == result.session.id
        assert request.user_id == user_id
        assert [f.model_dump() for f in request.files] == [
            {"name": "a.png", "type": "image/png", "size": 4}
        ]

    async def test_attachment_only_turn_uses_placeholder_title(self, orchestrator):
        result = await orchestrator.submit("", [png()])

        assert result.outcome is SubmissionOutcome.COMPLETED
        assert result.session.title == "New Chat"


class TestExistingConversation:
    async def test_second_turn_appends_to_active_session(self, orchestrator, gateway):
        first = await orchestrator.submit("Hello")

        second = await orchestrator.submit("Again")

        assert second.session.id == first.session.id
        messages = await gateway.list_messages(first.session.id)
        assert [m.content for m in messages] == ["Hello", "Hi there!", "Again", "Hi there!"]

    async def test_updated_at_never_decreases(self, orchestrator, gateway):
        first = await orchestrator.submit("Hello")
        before = (await gateway.get_session(first.session.id)).updated_at

        await orchestrator.submit("Again")

        after = (await gateway.get_session(first.session.id)).updated_at
        assert after >= before

    async def test_explicit_session_overrides_view_model(self, orchestrator, gateway, user_id):
        other = await gateway.create_session(user_id, "other", "gpt-4")

        result = await orchestrator.submit("Into other", active_session=other)

        assert result.session.id == other.id


class TestRejections:
    @pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
    async def test_empty_submission_is_a_no_op(self, orchestrator, gateway, inference_client, user_id, text):
        # Act
        result = await orchestrator.submit(text)

        # Assert
        assert result.outcome is SubmissionOutcome.REJECTED
        assert await gateway.list_sessions(owner_id=user_id) == []
        assert inference_client.requests == []
        assert orchestrator.state is SendState.IDLE

    async def test_concurrent_submit_is_rejected(self, view_model, gateway, user_id):
        # Arrange
        release = asyncio.Event()

        class SlowClient:
            async def dispatch(self, request):
                await release.wait()
                return "done"

        orchestrator = SendOrchestrator(view_model, gateway, SlowClient())

        # Act
        first = asyncio.create_task(orchestrator.submit("first"))
        while not view_model.messages:
            await asyncio.sleep(0)
        assert orchestrator.state is SendState.SENDING
        second = await orchestrator.submit("second")
        release.set()
        first_result = await first

        # Assert
        assert second.outcome is SubmissionOutcome.REJECTED
        assert first_result.outcome is SubmissionOutcome.COMPLETED
        messages = await gateway.list_messages(first_result.session.id)
        assert [m.content for m in messages] == ["first", "done"]
        assert orchestrator.state is SendState.IDLE


class TestFailures:
    async def test_dispatch_failure_keeps_user_turn_only(
        self, view_model, gateway, failing_inference_client
    ):
        # Arrange
        orchestrator = SendOrchestrator(view_model, gateway, failing_inference_client)

        # Act
        result = await orchestrator.submit("Hello")

        # Assert
        assert result.outcome is SubmissionOutcome.FAILED
        assert result.failed_step is SendStep.DISPATCH
        assert isinstance(result.error, TransportError)
        messages = await gateway.list_messages(result.session.id)
        assert [m.role for m in messages] == [MessageRole.USER]
        assert view_model.sending is False
        assert view_model.notifications.errors[-1].description == (
            "Failed to send message. Please try again."
        )
        assert result.committed_ids() == {
            "session_id": str(result.session.id),
            "user_message_id": str(result.user_message.id),
        }

    async def test_dispatch_failure_still_bumps_activity(
        self, view_model, gateway, failing_inference_client
    ):
        gateway.touch_session = AsyncMock(wraps=gateway.touch_session)
        orchestrator = SendOrchestrator(view_model, gateway, failing_inference_client)

        result = await orchestrator.submit("Hello")

        gateway.touch_session.assert_awaited_once_with(result.session.id)

    async def test_session_creation_failure_creates_nothing(
        self, view_model, gateway, inference_client, user_id
    ):
        gateway.create_session = AsyncMock(side_effect=PersistenceError("insert failed"))
        gateway.touch_session = AsyncMock()
        orchestrator = SendOrchestrator(view_model, gateway, inference_client)

        result = await orchestrator.submit("Hello")

        assert result.failed_step is SendStep.CREATE_SESSION
        assert result.session is None
        assert inference_client.requests == []
        gateway.touch_session.assert_not_awaited()
        assert view_model.active_session is None
        assert view_model.notifications.errors[-1].description == "Failed to create new chat"

    async def test_user_message_failure_aborts_before_dispatch(
        self, view_model, gateway, inference_client
    ):
        gateway.append_message = AsyncMock(side_effect=PersistenceError("insert failed"))
        orchestrator = SendOrchestrator(view_model, gateway, inference_client)

        result = await orchestrator.submit("Hello")

        assert result.failed_step is SendStep.PERSIST_USER_MESSAGE
        assert result.session is not None
        assert inference_client.requests == []
        assert view_model.sending is False

    async def test_touch_failure_is_not_fatal(self, orchestrator, gateway):
        gateway.touch_session = AsyncMock(side_effect=PersistenceError("update failed"))

        result = await orchestrator.submit("Hello")

        assert result.outcome is SubmissionOutcome.COMPLETED

    async def test_unexpected_error_resets_sending(self, view_model, gateway):
        class BrokenClient:
            async def dispatch(self, request):
                raise RuntimeError("bug")

        orchestrator = SendOrchestrator(view_model, gateway, BrokenClient())

        with pytest.raises(RuntimeError):
            await orchestrator.submit("Hello")

        assert view_model.sending is False


class TestAttachments:
    async def test_attachments_uploaded_and_recorded(
        self, orchestrator, gateway, mock_attachment_store, user_id
    ):
        # Act
        result = await orchestrator.submit("Look", [png("a.png"), png("b.png")])

        # Assert
        assert mock_attachment_store.upload.await_count == 2
        records = await gateway.list_attachments(result.user_message.id)
        assert sorted(r.file_name for r in records) == ["a.png", "b.png"]
        assert all(r.storage_path.startswith(f"{user_id}/{result.user_message.id}/") for r in records)
        assert len(result.attachments) == 2

    async def test_upload_failure_is_not_fatal(
        self, orchestrator, gateway, mock_attachment_store
    ):
        # Arrange
        async def flaky_upload(owner_id, message_id, file, timestamp_ms=None):
            if file.name == "bad.png":
                raise TransportError("Upload failed", target="bad")
            return f"{owner_id}/{message_id}/1.png"

        mock_attachment_store.upload.side_effect = flaky_upload

        # Act
        result = await orchestrator.submit("Look", [png("bad.png"), png("good.png")])

        # Assert
        assert result.outcome is SubmissionOutcome.COMPLETED
        assert [a.file_name for a in result.attachments] == ["good.png"]
        assert result.assistant_message is not None

    async def test_crashing_upload_returns_to_idle(
        self, orchestrator, view_model, mock_attachment_store
    ):
        # Arrange
        mock_attachment_store.upload.side_effect = RuntimeError("boom")

        # Act
        result = await orchestrator.submit("Look", [png()])

        # Assert
        assert result.outcome is SubmissionOutcome.COMPLETED
        assert result.attachments == []
        assert view_model.sending is False
        follow_up = await orchestrator.submit("Still there?")
        assert follow_up.outcome is SubmissionOutcome.COMPLETED

    async def test_attachments_recorded_even_when_dispatch_fails(
        self, view_model, gateway, failing_inference_client, mock_attachment_store
    ):
        orchestrator = SendOrchestrator(
            view_model, gateway, failing_inference_client, mock_attachment_store
        )

        result = await orchestrator.submit("Look", [png()])

        assert result.outcome is SubmissionOutcome.FAILED
        assert len(await gateway.list_attachments(result.user_message.id)) == 1

    async def test_missing_store_skips_uploads(self, view_model, gateway, inference_client):
        orchestrator = SendOrchestrator(view_model, gateway, inference_client)

        result = await orchestrator.submit("Look", [png()])

        assert result.outcome is SubmissionOutcome.COMPLETED
        assert result.attachments == []


class TestSurfacing:
    async def test_messages_not_surfaced_after_switching_away(
        self, view_model, gateway, user_id
    ):
        # Arrange
        release = asyncio.Event()

        class SlowClient:
            async def dispatch(self, request):
                await release.wait()
                return "late reply"

        orchestrator = SendOrchestrator(view_model, gateway, SlowClient())
        other = await gateway.create_session(user_id, "other", "gpt-4")

        # Act
        task = asyncio.create_task(orchestrator.submit("Hello"))
        while not view_model.messages:
            await asyncio.sleep(0)
        await view_model.select_session(other.id)
        release.set()
        result = await task

        # Assert
        assert result.outcome is SubmissionOutcome.COMPLETED
        assert view_model.active_session_id == other.id
        assert view_model.messages == []
        assert len(await gateway.list_messages(result.session.id)) == 2
