"""Workflow entry points for running guide requests."""

from .guide_session import (
    GuideSession,
    GuideView,
    InvalidTransitionError,
    LoadingState,
    SessionEvent,
    complete_guide_request,
    project_view,
    run_guide_request,
    submit_guide_request,
    transition,
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
