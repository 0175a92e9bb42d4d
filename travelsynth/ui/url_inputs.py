"""URL slot list shown at the top of the guide form."""

from __future__ import annotations

from typing import List, Sequence

import streamlit as st

from travelsynth.schemas import DEFAULT_URL_SLOTS, MAX_URL_SLOTS

URLS_KEY = "guide_urls"
_URL_WIDGET_PREFIX = "guide_url_slot_"


def default_url_slots() -> List[str]:
    return [""] * DEFAULT_URL_SLOTS


def add_url_slot(urls: Sequence[str]) -> List[str]:
    """Append an empty slot unless the list is already full."""

    if len(urls) >= MAX_URL_SLOTS:
        return list(urls)
    return [*urls, ""]


def remove_url_slot(urls: Sequence[str], index: int) -> List[str]:
    """Remove the slot at ``index``, always keeping at least one slot."""

    if len(urls) <= 1 or not 0 <= index < len(urls):
        return list(urls)
    return [url for position, url in enumerate(urls) if position != index]


def _widget_key(index: int) -> str:
    return f"{_URL_WIDGET_PREFIX}{index}"


def _store_urls(urls: Sequence[str]) -> None:
    """Write ``urls`` back to session state, widget keys included."""

    st.session_state[URLS_KEY] = list(urls)
    for index in range(MAX_URL_SLOTS):
        key = _widget_key(index)
        if index < len(urls):
            st.session_state[key] = urls[index]
        else:
            st.session_state.pop(key, None)


def current_urls() -> List[str]:
    urls = list(st.session_state.get(URLS_KEY, []))
    return [st.session_state.get(_widget_key(index), url) for index, url in enumerate(urls)]


def _on_add() -> None:
    _store_urls(add_url_slot(current_urls()))


def _on_remove(index: int) -> None:
    _store_urls(remove_url_slot(current_urls(), index))


def render_url_inputs(container, *, disabled: bool) -> List[str]:
    """Render the URL slots and return their current values."""

    if URLS_KEY not in st.session_state:
        _store_urls(default_url_slots())

    slot_count = len(st.session_state[URLS_KEY])

    header_left, header_right = container.columns([3, 1])
    header_left.markdown("**Source URLs** (Max 5)")
    header_right.caption(f"{slot_count}/{MAX_URL_SLOTS} links")

    for index in range(slot_count):
        input_col, remove_col = container.columns([6, 1])
        input_col.text_input(
            f"URL {index + 1}",
            key=_widget_key(index),
            placeholder="Paste travel blog or website link here...",
            disabled=disabled,
            label_visibility="collapsed",
        )
        if slot_count > 1:
            remove_col.button(
                "✕",
                key=f"guide_url_remove_{index}",
                disabled=disabled,
                help="Remove URL",
                on_click=_on_remove,
                args=(index,),
            )

    if slot_count < MAX_URL_SLOTS:
        container.button(
            "+ Add another URL",
            key="guide_url_add",
            disabled=disabled,
            on_click=_on_add,
        )

    urls = current_urls()
    st.session_state[URLS_KEY] = urls
    return urls


__all__ = [
    "URLS_KEY",
    "add_url_slot",
    "current_urls",
    "default_url_slots",
    "remove_url_slot",
    "render_url_inputs",
]
