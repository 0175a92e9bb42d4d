from __future__ import annotations

from typing import List, Sequence

import pytest

from travelsynth.agents import GuideGenerationError
from travelsynth.schemas import GroundingSource, TravelGuideResponse, TravelPreferences
from travelsynth.workflows import (
    GuideSession,
    InvalidTransitionError,
    LoadingState,
    SessionEvent,
    project_view,
    run_guide_request,
    transition,
)
from travelsynth.workflows.guide_session import UNEXPECTED_ERROR_MESSAGE, VALIDATION_MESSAGE


GUIDE = TravelGuideResponse(
    markdown_content="# Lisbon",
    sources=(GroundingSource(title="Visit Lisboa", uri="https://visitlisboa.com"),),
)


class StubComposer:
    def __init__(self, result: TravelGuideResponse | None = None, error: Exception | None = None):
        self.result = result
        self.error = error
        self.calls: List[Sequence[str]] = []

    def run(self, urls: Sequence[str], preferences: TravelPreferences) -> TravelGuideResponse:
        self.calls.append(list(urls))
        if self.error is not None:
            raise self.error
        assert self.result is not None
        return self.result


def test_blank_urls_are_rejected_without_calling_composer() -> None:
    composer = StubComposer(result=GUIDE)

    session = run_guide_request(GuideSession(), ["", " "], TravelPreferences(), composer=composer)

    assert composer.calls == []
    assert session.status is LoadingState.IDLE
    assert session.error == VALIDATION_MESSAGE


def test_rejection_keeps_previous_result() -> None:
    previous = GuideSession(status=LoadingState.COMPLETE, result=GUIDE)

    session = run_guide_request(previous, [""], TravelPreferences(), composer=StubComposer())

    assert session.result == GUIDE
    assert session.status is LoadingState.COMPLETE


def test_successful_request_walks_through_each_status() -> None:
    seen: List[GuideSession] = []
    composer = StubComposer(result=GUIDE)

    session = run_guide_request(
        GuideSession(),
        ["", "https://a.example"],
        TravelPreferences(),
        composer=composer,
        on_change=seen.append,
    )

    assert [item.status for item in seen] == [
        LoadingState.ANALYZING,
        LoadingState.SYNTHESIZING,
        LoadingState.COMPLETE,
    ]
    assert composer.calls == [["https://a.example"]]
    assert session.result == GUIDE
    assert session.error is None


def test_resubmission_clears_stale_result_before_request() -> None:
    seen: List[GuideSession] = []
    previous = GuideSession(status=LoadingState.COMPLETE, result=GUIDE)
    composer = StubComposer(error=GuideGenerationError("Failed to generate the travel guide."))

    session = run_guide_request(
        previous,
        ["https://a.example"],
        TravelPreferences(),
        composer=composer,
        on_change=seen.append,
    )

    assert seen[0].result is None
    assert session.status is LoadingState.ERROR
    assert session.result is None
    assert session.error == "Failed to generate the travel guide."


def test_unexpected_errors_use_generic_message() -> None:
    composer = StubComposer(error=KeyError("candidates"))

    session = run_guide_request(
        GuideSession(), ["https://a.example"], TravelPreferences(), composer=composer
    )

    assert session.status is LoadingState.ERROR
    assert session.error == UNEXPECTED_ERROR_MESSAGE


@pytest.mark.parametrize(
    "status, event",
    [
        (LoadingState.ANALYZING, SessionEvent.SUBMIT),
        (LoadingState.SYNTHESIZING, SessionEvent.SUBMIT),
        (LoadingState.IDLE, SessionEvent.SYNTHESIZE),
        (LoadingState.COMPLETE, SessionEvent.FAIL),
        (LoadingState.IDLE, SessionEvent.SUCCEED),
    ],
)
def test_invalid_transitions_are_refused(status: LoadingState, event: SessionEvent) -> None:
    with pytest.raises(InvalidTransitionError):
        transition(GuideSession(status=status), event, result=GUIDE)


def test_dismiss_error_keeps_status() -> None:
    session = GuideSession(status=LoadingState.ERROR, error="nope")

    dismissed = transition(session, SessionEvent.DISMISS_ERROR)

    assert dismissed == GuideSession(status=LoadingState.ERROR)


def test_view_while_loading_disables_inputs() -> None:
    analyzing = project_view(GuideSession(status=LoadingState.ANALYZING))
    synthesizing = project_view(GuideSession(status=LoadingState.SYNTHESIZING))

    assert analyzing.inputs_disabled and synthesizing.inputs_disabled
    assert analyzing.button_label == "Reading Links..."
    assert synthesizing.button_label == "Synthesizing Guide..."
    assert analyzing.show_skeleton and not analyzing.show_result


def test_view_projection_for_idle_and_complete() -> None:
    idle = project_view(GuideSession())
    complete = project_view(GuideSession(status=LoadingState.COMPLETE, result=GUIDE))

    assert idle.show_empty_state and idle.show_tips
    assert idle.button_label == "Generate Travel Guide"
    assert complete.show_result and not complete.show_tips and not complete.inputs_disabled
    assert not project_view(GuideSession(error="bad")).show_empty_state
