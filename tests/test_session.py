"""Tests for signing sessions."""

from __future__ import annotations

import pytest

from realitystamp.config import EngineConfig
from realitystamp.errors import AlreadySignedError, EmptyContentError, InsufficientEntropyError
from realitystamp.feed import PostStore
from realitystamp.payload import TextPayload
from realitystamp.provenance.entropy import sweep_positions
from realitystamp.provenance.session import SessionEvents, SigningSession
from realitystamp.provenance.verifier import TrustVerdict, VerificationEngine

SMALL = EngineConfig(cell_size=45, surface_width=90, surface_height=90)


def fill(session: SigningSession) -> None:
    config = session.config
    for x, y in sweep_positions(config.cell_size, config.surface_width, config.surface_height):
        session.report_position(x, y)


class TestSigningSession:
    """Test the signing session lifecycle."""

    def test_entropy_events(self):
        """Test coverage changes are forwarded to listeners."""
        session = SigningSession(SMALL)
        seen = []
        session.events.subscribe("entropy_changed", seen.append)

        fill(session)

        assert seen == [25, 50, 75, 100]

    def test_issue_suspends_collector(self):
        """Test issuing binds the certificate and stops entropy collection."""
        session = SigningSession(SMALL)
        issued = []
        session.events.subscribe("certificate_issued", issued.append)

        session.submit_content(TextPayload("hello"))
        fill(session)
        certificate = session.request_issue()

        assert certificate is not None
        assert issued == [certificate]
        assert session.signed
        assert session.coverage == 0
        assert session.report_position(10, 10) == 0

    def test_failure_is_reported_and_leaves_state(self):
        """Test a refused issuance records nothing."""
        session = SigningSession(SMALL)
        failures = []
        session.events.subscribe("issue_failed", failures.append)

        session.submit_content(TextPayload("hello"))
        session.report_position(10, 10)

        assert session.request_issue() is None
        assert isinstance(failures[0], InsufficientEntropyError)
        assert not session.signed
        assert session.coverage == 25

    def test_empty_content_reported(self):
        """Test blank text is refused even at full coverage."""
        session = SigningSession(SMALL)
        failures = []
        session.events.subscribe("issue_failed", failures.append)

        session.submit_content(TextPayload("   "))
        fill(session)

        assert session.request_issue() is None
        assert isinstance(failures[0], EmptyContentError)

    def test_single_shot(self):
        """Test a second issuance in the same session is refused."""
        session = SigningSession(SMALL)
        session.submit_content(TextPayload("hello"))
        fill(session)
        first = session.request_issue()

        failures = []
        session.events.subscribe("issue_failed", failures.append)
        assert session.request_issue() is None
        assert isinstance(failures[0], AlreadySignedError)

        with pytest.raises(AlreadySignedError):
            session.issuer.issue(TextPayload("hello"), 100, session=session)
        assert session.certificate is first

    def test_reset_starts_new_session(self):
        """Test reset clears content and allows signing again."""
        session = SigningSession(SMALL)
        session.submit_content(TextPayload("hello"))
        fill(session)
        first = session.request_issue()
        old_id = session.session_id

        session.request_reset()

        assert session.session_id != old_id
        assert session.payload is None
        assert not session.signed
        assert session.coverage == 0

        session.submit_content(TextPayload("second"))
        fill(session)
        second = session.request_issue()

        assert second is not None
        assert second.proof_id != first.proof_id
        # The first certificate is untouched by the reset
        assert first.fingerprint == first.original_fingerprint

    def test_auto_issue_at_full_entropy(self):
        """Test auto-issue signs as soon as coverage reaches 100%."""
        config = EngineConfig(cell_size=45, surface_width=90, surface_height=90, auto_issue=True)
        session = SigningSession(config)
        issued = []
        session.events.subscribe("certificate_issued", issued.append)

        session.submit_content(TextPayload("hello"))
        fill(session)

        assert len(issued) == 1
        assert session.certificate is issued[0]

    def test_auto_issue_report_returns_live_coverage(self):
        """Test the report that triggers auto-issue returns the cleared coverage."""
        config = EngineConfig(cell_size=45, surface_width=90, surface_height=90, auto_issue=True)
        session = SigningSession(config)
        session.submit_content(TextPayload("hello"))

        positions = sweep_positions(config.cell_size, config.surface_width, config.surface_height)
        results = [session.report_position(x, y) for x, y in positions]

        assert results == [25, 50, 75, 0]
        assert session.signed
        assert results[-1] == session.coverage

    def test_auto_issue_waits_for_content(self):
        """Test auto-issue fires on submit when entropy is already complete."""
        config = EngineConfig(cell_size=45, surface_width=90, surface_height=90, auto_issue=True)
        session = SigningSession(config)

        fill(session)
        assert not session.signed

        session.submit_content(TextPayload("late"))
        assert session.signed

    def test_resize_surface(self):
        """Test resizing changes the cell count."""
        session = SigningSession(SMALL)
        session.resize_surface(45, 45)

        assert session.report_position(0, 0) == 100


class TestSessionEvents:
    """Test the event registry."""

    def test_unknown_event(self):
        """Test subscribing to an unknown event fails."""
        with pytest.raises(ValueError):
            SessionEvents().subscribe("nope", print)

    def test_verdict_callback_feeds_store_verdicts(self):
        """Test verdicts computed by the store reach session listeners."""
        events = SessionEvents()
        seen = []
        events.subscribe("verdict_computed", lambda post_id, verdict: seen.append((post_id, verdict)))
        store = PostStore(engine=VerificationEngine(on_verdict=events.verdict_callback()))

        session = SigningSession(SMALL, events=events)
        session.submit_content(TextPayload("hello"))
        fill(session)
        post = store.publish(session.request_issue(), session.payload)
        store.verify(post.id)

        assert seen == [(post.id, TrustVerdict.VERIFIED)]
