"""Agent that merges several travel sources into one grounded guide."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from travelsynth.agents import (
    GuideGenerationError,
    UrlValidationError,
    filter_urls,
)
from travelsynth.core.llm import LLMClient
from travelsynth.schemas import GroundingSource, TravelGuideResponse, TravelPreferences

_LOGGER = logging.getLogger(__name__)

GUIDE_SECTIONS: Sequence[str] = (
    "Executive Summary",
    "Best Time to Go",
    "Day-by-Day Itinerary",
    "Must-See Attractions",
    "Food & Dining",
    "Logistics",
)

EMPTY_GUIDE_MESSAGE = (
    "Sorry, I couldn't generate a guide based on those links. Please try different URLs."
)
GENERATION_FAILED_MESSAGE = (
    "Failed to generate the travel guide. Please verify the URLs or try again later."
)
MISSING_URLS_MESSAGE = "Please provide at least one URL."


def extract_sources(chunks: Iterable[Mapping[str, Any]]) -> List[GroundingSource]:
    """Turn raw grounding chunks into unique citations.

    Chunks without a web entry, a title or a URI are skipped. When a URI is
    cited more than once it keeps its first position and its last title.
    """

    unique: Dict[str, GroundingSource] = {}
    for chunk in chunks:
        web = chunk.get("web") if isinstance(chunk, Mapping) else None
        if not isinstance(web, Mapping):
            continue
        uri = web.get("uri")
        title = web.get("title")
        if not uri or not title:
            continue
        unique[uri] = GroundingSource(title=title, uri=uri)
    return list(unique.values())


class GuideComposer:
    """Builds the guide prompt and calls the grounded generation service."""

    system_prompt = (
        "You are a world-class travel writer helping a user build the perfect trip "
        "summary from multiple sources."
    )
    prompt_version = "guide.v1"
    temperature = 0.4

    def __init__(
        self,
        *,
        model: Optional[str] = None,
        client: Optional[LLMClient] = None,
    ) -> None:
        # None defers to the client, which reads GEMINI_MODEL when it is built.
        self.model = model
        self.client = client or LLMClient()

    def build_prompt(self, urls: Sequence[str], preferences: TravelPreferences) -> str:
        """Return the instruction text for the supplied URLs and preferences."""

        budget = preferences.budget.value if preferences.budget else None
        season = preferences.season.value if preferences.season else None
        companion = preferences.companion.value if preferences.companion else None
        notes = preferences.additional_notes.strip() or "None"

        url_lines = "\n".join(f"{index}. {url}" for index, url in enumerate(urls, start=1))
        sections = {
            "Executive Summary": (
                "A quick vibe check of the trip, specifically addressing the "
                f"{companion or 'traveler'} style."
            ),
            "Best Time to Go": (
                "Weather and crowd advice (specifically for "
                f"{season or 'the recommended season'})."
            ),
            "Day-by-Day Itinerary": "A detailed schedule combining the best parts of the inputs.",
            "Must-See Attractions": 'With practical tips (e.g., "book in advance").',
            "Food & Dining": f"Recommendations tailored to the {budget or 'standard'} budget.",
            "Logistics": "Transport, accommodation areas, and budget estimates.",
        }
        section_lines = "\n".join(
            f"   - **{name}**: {sections[name]}" for name in GUIDE_SECTIONS
        )

        return (
            "You are an expert travel consultant and itinerary planner.\n"
            "\n"
            'Task: Create a comprehensive "Master Travel Guide" based on the topics, '
            "destinations, and advice found in the following URLs:\n"
            f"{url_lines}\n"
            "\n"
            "User Preferences & Constraints:\n"
            f"- Budget Level: {budget or 'Not specified (Provide a balanced mix)'}\n"
            f"- Travel Season: {season or 'Not specified (Mention best times generally)'}\n"
            f"- Travel Companions: {companion or 'Not specified (General)'}\n"
            f'- Additional Focus/Notes: "{notes}"\n'
            "\n"
            "Instructions:\n"
            "1. Use the Google Search tool to research the content, locations, and itineraries "
            "mentioned in these URLs. If a URL cannot be read directly, search for the "
            "destination and topic inferred from the URL instead.\n"
            "2. Synthesize everything into a single, cohesive guide. Do not just list the "
            "websites; combine their wisdom.\n"
            "3. **CRITICAL**: Tailor the recommendations to the User Preferences above.\n"
            "   - If Budget is Economy, focus on free attractions and cheap eats. If Luxury, "
            "suggest fine dining and exclusive experiences.\n"
            "   - If Family, check for kid-friendly activities. If Couple, look for romantic spots.\n"
            "   - If Season is specified, adjust for weather and seasonal closures.\n"
            "4. Verify facts (opening hours, ticket prices, transport options) using Google "
            "Search so the guide is up-to-date.\n"
            "5. Structure the guide in Markdown with the following sections:\n"
            f"{section_lines}\n"
            "\n"
            "Make the tone inspiring, practical, and organized. Use bullet points, bold text "
            "for emphasis, and clear headings."
        )

    def run(self, urls: Sequence[str], preferences: TravelPreferences) -> TravelGuideResponse:
        """Generate a guide for ``urls`` tailored to ``preferences``."""

        valid_urls = filter_urls(urls)
        if not valid_urls:
            raise UrlValidationError(MISSING_URLS_MESSAGE)

        prompt = self.build_prompt(valid_urls, preferences)

        start = time.perf_counter()
        try:
            response = self.client.generate(
                prompt=prompt,
                system=self.system_prompt,
                model=self.model,
                temperature=self.temperature,
                search_grounding=True,
            )
            text = self.client.extract_text(response)
            sources = extract_sources(self.client.extract_grounding_chunks(response))
        except Exception as exc:
            _LOGGER.exception("Guide generation failed [prompt_version=%s]", self.prompt_version)
            raise GuideGenerationError(GENERATION_FAILED_MESSAGE) from exc

        _LOGGER.info(
            "Guide generated from %d URL(s) with %d source(s) in %.2fs [prompt_version=%s]",
            len(valid_urls),
            len(sources),
            time.perf_counter() - start,
            self.prompt_version,
        )

        return TravelGuideResponse(
            markdown_content=text or EMPTY_GUIDE_MESSAGE,
            sources=tuple(sources),
        )


__all__ = [
    "EMPTY_GUIDE_MESSAGE",
    "GENERATION_FAILED_MESSAGE",
    "GUIDE_SECTIONS",
    "GuideComposer",
    "extract_sources",
]
