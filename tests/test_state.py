"""Tests for the BridgeState orchestration flows."""

import pytest

from conftest import FakeSession
from shortlist_bridge.context.notifier import VoiceContextNotifier
from shortlist_bridge.errors import ValidationError
from shortlist_bridge.models.config import BridgeConfig
from shortlist_bridge.models.voice import (
    ProposedAction,
    TranslationProvenance,
    TranslationResult,
)
from shortlist_bridge.state import BridgeState
from shortlist_bridge.translation.translator import IntentTranslator


class RecordingBackend:
    def __init__(self, result):
        self.result = result
        self.closed = False

    def translate(self, text, candidate_names):
        return self.result

    def close(self):
        self.closed = True


@pytest.fixture
def state():
    return BridgeState(config=BridgeConfig())


class TestUpload:
    def test_upload_then_voice(self, state):
        state.upload_candidates(
            [{"name": "Todd Kurtz"}, {"name": "Kyle Scharnhorst"}], source="chrome"
        )

        submission, outcome, actions = state.process_voice_command(
            "please shortlist todd kurtz now", source="elevenlabs"
        )

        assert outcome.provenance == TranslationProvenance.FALLBACK
        assert len(actions) == 1
        assert actions[0].origin_submission_id == submission.id
        assert submission.source == "elevenlabs"
        assert [a.id for a in state.command_queue.list_pending()] == [actions[0].id]
        assert state.voice_log.find(submission.id) is not None

    def test_upload_notifies_voice_context(self):
        session = FakeSession()
        notifier = VoiceContextNotifier(url="https://voice.example.com/ctx", session=session)
        state = BridgeState(config=BridgeConfig(), notifier=notifier)

        state.upload_candidates([{"name": "Todd Kurtz"}])

        assert "Todd Kurtz" in session.calls[0]["json"]["context"]

    def test_invalid_upload_does_not_notify(self):
        session = FakeSession()
        notifier = VoiceContextNotifier(url="https://voice.example.com/ctx", session=session)
        state = BridgeState(config=BridgeConfig(), notifier=notifier)

        with pytest.raises(ValidationError):
            state.upload_candidates("not a list")

        assert session.calls == []


class TestVoice:
    @pytest.mark.parametrize("text", [None, "", "   ", 42])
    def test_missing_text_mutates_nothing(self, state, text):
        with pytest.raises(ValidationError):
            state.process_voice_command(text)
        assert len(state.voice_log) == 0
        assert len(state.command_queue) == 0

    def test_no_intent_still_logged(self, state):
        state.upload_candidates([{"name": "Todd Kurtz"}])
        submission, outcome, actions = state.process_voice_command("hello there")
        assert actions == []
        assert len(state.voice_log) == 1
        assert len(state.command_queue) == 0

    def test_backend_actions_queued(self):
        result = TranslationResult(
            interpretation="Remove Kyle",
            actions=[ProposedAction(operation="remove", target_name="Kyle Scharnhorst", confidence=0.9)],
        )
        state = BridgeState(
            config=BridgeConfig(),
            translator=IntentTranslator(backend=RecordingBackend(result)),
        )
        state.upload_candidates([{"name": "Kyle Scharnhorst"}])

        submission, outcome, actions = state.process_voice_command("remove kyle")

        assert outcome.provenance == TranslationProvenance.BACKEND
        assert submission.provenance == TranslationProvenance.BACKEND
        assert actions[0].operation.value == "remove"


class TestReportAndDashboard:
    def test_report_flow(self, state):
        state.upload_candidates([{"name": "Todd Kurtz"}])
        _, _, actions = state.process_voice_command("shortlist todd kurtz")

        state.report_execution(actions[0].id, True, "done", source="chrome")

        dash = state.dashboard()
        assert dash["pendingCommands"]["unExecuted"] == 0
        assert dash["pendingCommands"]["total"] == 1
        assert dash["executionHistory"]["total"] == 1
        assert dash["candidates"]["names"] == ["Todd Kurtz"]
        assert dash["voiceCommands"]["total"] == 1
        assert dash["systemStatus"]["translationBackendAvailable"] is False

    def test_dashboard_recent_window(self):
        state = BridgeState(config=BridgeConfig(dashboard_recent_window=2))
        state.upload_candidates([{"name": "Todd Kurtz"}])
        for _ in range(4):
            state.process_voice_command("shortlist todd kurtz")

        dash = state.dashboard()
        assert len(dash["voiceCommands"]["recent"]) == 2
        assert len(dash["pendingCommands"]["recent"]) == 2
        assert dash["pendingCommands"]["unExecuted"] == 4

    def test_close(self):
        backend = RecordingBackend(TranslationResult(interpretation=""))
        session = FakeSession()
        state = BridgeState(
            config=BridgeConfig(),
            translator=IntentTranslator(backend=backend),
            notifier=VoiceContextNotifier(session=session),
        )
        state.close()
        assert backend.closed is True
        assert session.closed is True
