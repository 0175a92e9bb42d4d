"""Explicit session state for a guide request and its view projection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, FrozenSet, Optional, Protocol, Sequence

from travelsynth.agents import GuideGenerationError, UrlValidationError, filter_urls
from travelsynth.schemas import TravelGuideResponse, TravelPreferences

_LOGGER = logging.getLogger(__name__)

VALIDATION_MESSAGE = "Please enter at least one URL to analyze."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."


class LoadingState(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    SYNTHESIZING = "synthesizing"
    COMPLETE = "complete"
    ERROR = "error"


class SessionEvent(str, Enum):
    SUBMIT = "submit"
    SYNTHESIZE = "synthesize"
    SUCCEED = "succeed"
    FAIL = "fail"
    REJECT = "reject"
    DISMISS_ERROR = "dismiss_error"


class InvalidTransitionError(ValueError):
    """Raised when an event is not allowed from the current status."""


_BUSY: FrozenSet[LoadingState] = frozenset({LoadingState.ANALYZING, LoadingState.SYNTHESIZING})
_SETTLED: FrozenSet[LoadingState] = frozenset(
    {LoadingState.IDLE, LoadingState.COMPLETE, LoadingState.ERROR}
)

_ALLOWED: Dict[SessionEvent, FrozenSet[LoadingState]] = {
    SessionEvent.SUBMIT: _SETTLED,
    SessionEvent.REJECT: _SETTLED,
    SessionEvent.DISMISS_ERROR: _SETTLED,
    SessionEvent.SYNTHESIZE: frozenset({LoadingState.ANALYZING}),
    SessionEvent.SUCCEED: _BUSY,
    SessionEvent.FAIL: _BUSY,
}


@dataclass(frozen=True)
class GuideSession:
    """Everything the page needs to know about the current request."""

    status: LoadingState = LoadingState.IDLE
    result: Optional[TravelGuideResponse] = None
    error: Optional[str] = None

    @property
    def is_loading(self) -> bool:
        return self.status in _BUSY


def transition(
    session: GuideSession,
    event: SessionEvent,
    *,
    result: Optional[TravelGuideResponse] = None,
    error: Optional[str] = None,
) -> GuideSession:
    """Return the session that follows ``event``.

    Submitting clears both the previous result and error before the request
    is issued. A rejected submission only records the message.
    """

    if session.status not in _ALLOWED[event]:
        raise InvalidTransitionError(
            f"Cannot apply {event.value!r} while {session.status.value!r}"
        )

    if event is SessionEvent.SUBMIT:
        return GuideSession(status=LoadingState.ANALYZING)
    if event is SessionEvent.SYNTHESIZE:
        return replace(session, status=LoadingState.SYNTHESIZING)
    if event is SessionEvent.SUCCEED:
        if result is None:
            raise InvalidTransitionError("A successful request must carry a result")
        return GuideSession(status=LoadingState.COMPLETE, result=result)
    if event is SessionEvent.FAIL:
        return GuideSession(status=LoadingState.ERROR, error=error or UNEXPECTED_ERROR_MESSAGE)
    if event is SessionEvent.REJECT:
        return replace(session, error=error or VALIDATION_MESSAGE)
    return replace(session, error=None)


class GuideGenerator(Protocol):
    def run(
        self, urls: Sequence[str], preferences: TravelPreferences
    ) -> TravelGuideResponse:  # pragma: no cover - protocol
        ...


OnChange = Optional[Callable[[GuideSession], None]]


def _emit(updated: GuideSession, on_change: OnChange) -> GuideSession:
    if on_change is not None:
        on_change(updated)
    return updated


def submit_guide_request(
    session: GuideSession, urls: Sequence[str], *, on_change: OnChange = None
) -> GuideSession:
    """Validate ``urls`` and move the session into ``ANALYZING``.

    Without a non-blank URL the session keeps its status and only records the
    validation message.
    """

    if not filter_urls(urls):
        return _emit(transition(session, SessionEvent.REJECT, error=VALIDATION_MESSAGE), on_change)
    return _emit(transition(session, SessionEvent.SUBMIT), on_change)


def complete_guide_request(
    session: GuideSession,
    urls: Sequence[str],
    preferences: TravelPreferences,
    *,
    composer: GuideGenerator,
    on_change: OnChange = None,
) -> GuideSession:
    """Issue the submitted request and settle the session on its outcome."""

    session = _emit(transition(session, SessionEvent.SYNTHESIZE), on_change)

    try:
        response = composer.run(filter_urls(urls), preferences)
    except (GuideGenerationError, UrlValidationError) as exc:
        return _emit(transition(session, SessionEvent.FAIL, error=str(exc)), on_change)
    except Exception:
        _LOGGER.exception("Guide request failed unexpectedly")
        return _emit(
            transition(session, SessionEvent.FAIL, error=UNEXPECTED_ERROR_MESSAGE), on_change
        )

    return _emit(transition(session, SessionEvent.SUCCEED, result=response), on_change)


def run_guide_request(
    session: GuideSession,
    urls: Sequence[str],
    preferences: TravelPreferences,
    *,
    composer: GuideGenerator,
    on_change: OnChange = None,
) -> GuideSession:
    """Validate, submit and settle a single guide request.

    ``on_change`` is called with every intermediate session so the caller can
    update the page while the request is in flight.
    """

    session = submit_guide_request(session, urls, on_change=on_change)
    if session.status is not LoadingState.ANALYZING:
        return session
    return complete_guide_request(
        session, urls, preferences, composer=composer, on_change=on_change
    )


@dataclass(frozen=True)
class GuideView:
    """What the page should show for a given session."""

    inputs_disabled: bool
    button_label: str
    show_tips: bool
    show_empty_state: bool
    show_skeleton: bool
    show_result: bool
    error: Optional[str]


def project_view(session: GuideSession) -> GuideView:
    if session.status is LoadingState.ANALYZING:
        label = "Reading Links..."
    elif session.status is LoadingState.SYNTHESIZING:
        label = "Synthesizing Guide..."
    else:
        label = "Generate Travel Guide"

    return GuideView(
        inputs_disabled=session.is_loading,
        button_label=label,
        show_tips=session.result is None,
        show_empty_state=(
            session.status is LoadingState.IDLE and session.result is None and not session.error
        ),
        show_skeleton=session.is_loading,
        show_result=session.status is LoadingState.COMPLETE and session.result is not None,
        error=session.error,
    )


__all__ = [
    "GuideSession",
    "GuideView",
    "InvalidTransitionError",
    "LoadingState",
    "SessionEvent",
    "complete_guide_request",
    "project_view",
    "run_guide_request",
    "submit_guide_request",
    "transition",
]
