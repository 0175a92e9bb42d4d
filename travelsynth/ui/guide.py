"""UI helpers for composing a travel guide from several sources."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import streamlit as st

from travelsynth.agents import GuideComposer, filter_urls
from travelsynth.core.markdown import markdown_to_html
from travelsynth.schemas import (
    BudgetLevel,
    CompanionType,
    TravelGuideResponse,
    TravelPreferences,
    TravelSeason,
)
from travelsynth.ui.url_inputs import URLS_KEY, current_urls, render_url_inputs
from travelsynth.workflows import (
    GuideSession,
    LoadingState,
    SessionEvent,
    complete_guide_request,
    project_view,
    submit_guide_request,
    transition,
)

_LOGGER = logging.getLogger(__name__)

SESSION_KEY = "_guide_session"
_PENDING_REQUEST_KEY = "_guide_pending_request"
_COMPOSER_KEY = "_guide_composer"
_BUDGET_KEY = "guide_budget"
_SEASON_KEY = "guide_season"
_COMPANION_KEY = "guide_companion"
_NOTES_KEY = "guide_notes"

_BUDGET_LABELS: Dict[str, str] = {
    "": "Any / Mixed",
    BudgetLevel.ECONOMY.value: "Economy (Budget-friendly)",
    BudgetLevel.COMFORT.value: "Comfort (Standard)",
    BudgetLevel.LUXURY.value: "Luxury (High-end)",
}
_COMPANION_LABELS: Dict[str, str] = {
    "": "General",
    CompanionType.SOLO.value: "Solo Traveler",
    CompanionType.COUPLE.value: "Couple / Romantic",
    CompanionType.FAMILY.value: "Family with Kids",
    CompanionType.FRIENDS.value: "Group of Friends",
}
_SEASON_LABELS: Dict[str, str] = {
    "": "Not decided yet",
    TravelSeason.OFF_PEAK.value: "Off-peak (Fewer crowds)",
    TravelSeason.SHOULDER.value: "Shoulder Season",
    TravelSeason.PEAK.value: "Peak Season (Best weather)",
}

_PRO_TIPS: Tuple[str, ...] = (
    'Use specific blog posts (e.g., "3 Days in Tokyo").',
    "Mix different types of sources (e.g., a food blog + a museum guide).",
    "Select your travel style above to get tailored recommendations.",
)

_GUIDE_STYLES = """
<style>
.ts-guide h1 { font-family: serif; font-size: 1.9rem; margin-bottom: 1.2rem; }
.ts-guide h2 { font-family: serif; font-size: 1.5rem; margin-top: 2rem;
  border-bottom: 1px solid #e2e8f0; padding-bottom: 0.4rem; }
.ts-guide h3 { font-size: 1.2rem; margin-top: 1.4rem; }
.ts-guide ul { padding-left: 1.25rem; margin-bottom: 1rem; }
.ts-guide p, .ts-guide li { line-height: 1.65; color: #334155; }
</style>
"""


def ensure_guide_state() -> None:
    """Initialise the Streamlit session state used by the guide page."""

    st.session_state.setdefault(SESSION_KEY, GuideSession())
    st.session_state.setdefault(_PENDING_REQUEST_KEY, None)
    st.session_state.setdefault(_BUDGET_KEY, "")
    st.session_state.setdefault(_SEASON_KEY, "")
    st.session_state.setdefault(_COMPANION_KEY, "")
    st.session_state.setdefault(_NOTES_KEY, "")


def _session() -> GuideSession:
    return st.session_state[SESSION_KEY]


def _composer() -> GuideComposer:
    composer = st.session_state.get(_COMPOSER_KEY)
    if composer is None:
        composer = GuideComposer()
        st.session_state[_COMPOSER_KEY] = composer
    return composer


def _current_preferences() -> TravelPreferences:
    return TravelPreferences(
        budget=st.session_state.get(_BUDGET_KEY, ""),
        season=st.session_state.get(_SEASON_KEY, ""),
        companion=st.session_state.get(_COMPANION_KEY, ""),
        additional_notes=st.session_state.get(_NOTES_KEY, ""),
    )


def _on_generate() -> None:
    if _session().is_loading:
        return

    urls = current_urls()
    session = submit_guide_request(_session(), urls)
    st.session_state[SESSION_KEY] = session
    if session.status is LoadingState.ANALYZING:
        st.session_state[_PENDING_REQUEST_KEY] = (urls, _current_preferences())


def _on_dismiss_error() -> None:
    st.session_state[SESSION_KEY] = transition(_session(), SessionEvent.DISMISS_ERROR)


def _render_select(
    container, label: str, key: str, labels: Dict[str, str], *, disabled: bool
) -> None:
    container.selectbox(
        label,
        options=list(labels),
        format_func=lambda value: labels[value],
        key=key,
        disabled=disabled,
    )


def _render_form(container, session: GuideSession) -> None:
    view = project_view(session)

    with container:
        st.subheader("Create Your Guide")
        st.caption(
            "Paste 3-5 links to travel blogs, articles, or location pages. AI will read them "
            "and merge them into one master itinerary."
        )
        render_url_inputs(st.container(), disabled=view.inputs_disabled)

        st.divider()
        st.markdown("**Trip Preferences**")
        _render_select(st, "Budget Style", _BUDGET_KEY, _BUDGET_LABELS, disabled=view.inputs_disabled)
        _render_select(
            st, "Who is traveling?", _COMPANION_KEY, _COMPANION_LABELS, disabled=view.inputs_disabled
        )
        _render_select(
            st, "When are you going?", _SEASON_KEY, _SEASON_LABELS, disabled=view.inputs_disabled
        )

        st.text_area(
            "Additional Notes (Optional)",
            key=_NOTES_KEY,
            placeholder="e.g., specific dietary needs, focus on museums, etc.",
            disabled=view.inputs_disabled,
        )

        st.button(
            view.button_label,
            key="guide_generate",
            type="primary",
            disabled=view.inputs_disabled,
            on_click=_on_generate,
        )

        if view.show_tips:
            tips = "\n".join(f"- {tip}" for tip in _PRO_TIPS)
            st.info(f"**Pro Tips:**\n{tips}")


def result_badges(urls: Sequence[str], preferences: TravelPreferences) -> List[str]:
    """Return the badge labels shown under the result heading."""

    badges = [f"{len(filter_urls(urls))} Sources"]
    if preferences.budget:
        badges.append(preferences.budget.value)
    if preferences.companion:
        badges.append(preferences.companion.value)
    return badges


def _render_result(container, response: TravelGuideResponse) -> None:
    pending = st.session_state.get(_PENDING_REQUEST_KEY)
    if pending is not None:
        urls, preferences = pending
    else:
        urls, preferences = st.session_state.get(URLS_KEY, []), _current_preferences()

    with container:
        st.header("Your Custom Guide")
        st.caption(" · ".join(result_badges(urls, preferences)))

        st.markdown(_GUIDE_STYLES, unsafe_allow_html=True)
        st.markdown(
            f'<div class="ts-guide">{markdown_to_html(response.markdown_content)}</div>',
            unsafe_allow_html=True,
        )

        if response.sources:
            st.divider()
            st.caption("CITED SOURCES & GROUNDING")
            for index, source in enumerate(response.sources, start=1):
                st.markdown(f"{index}. [{source.title}]({source.uri})  \n`{source.hostname}`")


def _render_output(container, session: GuideSession):
    """Render the result column and return the loading placeholder, if any."""

    view = project_view(session)
    status_box = None

    with container:
        if view.error:
            st.error(view.error)
            st.button("Dismiss", key="guide_dismiss_error", on_click=_on_dismiss_error)

        if view.show_empty_state:
            st.markdown("### Ready to plan your trip?")
            st.write(
                "Add a few URLs on the left and set your preferences. We will build a custom "
                "comprehensive guide tailored to you."
            )

        if view.show_skeleton:
            status_box = st.empty()
            status_box.info(view.button_label)

        if view.show_result and session.result is not None:
            _render_result(st.container(), session.result)

    return status_box


def _run_pending_request(status_box) -> None:
    """Issue the request submitted on the previous interaction, if any."""

    session = _session()
    if session.status is not LoadingState.ANALYZING:
        return

    pending: Optional[Tuple[List[str], TravelPreferences]] = st.session_state.get(
        _PENDING_REQUEST_KEY
    )
    if pending is None:
        _LOGGER.warning("Guide session was analyzing without a pending request")
        st.session_state[SESSION_KEY] = transition(
            session, SessionEvent.FAIL, error="The previous request was interrupted. Please try again."
        )
        st.rerun()

    urls, preferences = pending

    def _show_status(updated: GuideSession) -> None:
        if status_box is not None:
            status_box.info(project_view(updated).button_label)

    with st.spinner("Generating your travel guide…"):
        session = complete_guide_request(
            session,
            urls,
            preferences,
            composer=_composer(),
            on_change=_show_status,
        )

    st.session_state[SESSION_KEY] = session
    st.rerun()


def render_guide_page() -> None:
    """Render the two-column guide composer."""

    session = _session()

    form_column, output_column = st.columns([4, 8], gap="large")
    _render_form(form_column, session)
    status_box = _render_output(output_column, session)
    _run_pending_request(status_box)


__all__ = ["SESSION_KEY", "ensure_guide_state", "render_guide_page", "result_badges"]
