"""Care requirement research across web sources."""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote_plus

from plant_tracker.domain.identification import (
    CareRequirements,
    CareResearch,
    SearchResult,
)
from plant_tracker.services.identification import StructuredLLMClient

MIN_SOURCES_REQUIRED = 3
MIN_SOURCE_CONFIDENCE = 0.5
MIN_INFO_FIELDS = 2
_MIN_CONTENT_CHARS = 20
_MIN_PAGE_CHARS = 100

CARE_RESEARCH_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "source_name": {"type": "string"},
        "source_url": {"type": "string"},
        "has_watering_info": {"type": "boolean"},
        "watering_frequency_days": {"type": "number", "minimum": 0},
        "has_fertilizing_info": {"type": "boolean"},
        "fertilizing_frequency_days": {"type": "number", "minimum": 0},
        "has_light_info": {"type": "boolean"},
        "sunlight_level": {
            "type": "string",
            "enum": ["low", "medium", "bright", "direct"],
        },
        "has_humidity_info": {"type": "boolean"},
        "humidity_preference": {"type": "string"},
        "has_temperature_info": {"type": "boolean"},
        "temperature_range": {"type": "string"},
        "care_notes": {"type": "string"},
        "confidence": {"type": "number", "minimum": 0.0, "maximum": 1.0},
    },
    "required": [
        "source_name",
        "source_url",
        "has_watering_info",
        "watering_frequency_days",
        "has_fertilizing_info",
        "fertilizing_frequency_days",
        "has_light_info",
        "sunlight_level",
        "has_humidity_info",
        "humidity_preference",
        "has_temperature_info",
        "temperature_range",
        "care_notes",
        "confidence",
    ],
    "additionalProperties": False,
}

_PLANT_DATABASES = (
    (
        "Royal Horticultural Society",
        "https://www.rhs.org.uk/search?query={query}",
    ),
    (
        "Missouri Botanical Garden",
        "https://www.missouribotanicalgarden.org/PlantFinder/FullQuery.aspx"
        "?searchterm={query}",
    ),
    ("University Extension Services", "https://extension.org/?s={query}+care"),
)

_logger = logging.getLogger(__name__)


class SearchClient(Protocol):
    """Interface for web search."""

    async def search(self, query: str, max_results: int = 5) -> list[SearchResult]:
        """Return search results for a query."""


class PageFetcher(Protocol):
    """Interface for reading the care text of a web page."""

    async def fetch_text(self, url: str) -> str:
        """Return the page's main text, or an empty string when unavailable."""


class ResearchError(Exception):
    """Not enough reliable sources were found."""


@dataclass
class CareResearchService:
    """Collects care recommendations from several independent sources."""

    search_client: SearchClient
    page_fetcher: PageFetcher
    client: StructuredLLMClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def research(self, species: str, scientific_name: str) -> list[CareResearch]:
        """Research care sources, broadening the query until enough agree."""
        accepted: list[CareResearch] = []
        seen_urls: set[str] = set()
        for query in _search_strategies(species, scientific_name):
            if len(accepted) >= MIN_SOURCES_REQUIRED:
                break
            for result in await self._search(query, species):
                if len(accepted) >= MIN_SOURCES_REQUIRED:
                    break
                if result.url in seen_urls:
                    continue
                seen_urls.add(result.url)
                source = await self._analyze(result, species, scientific_name)
                if source is not None:
                    accepted.append(source)

        if len(accepted) < MIN_SOURCES_REQUIRED:
            raise ResearchError(
                "Unable to find sufficient reliable care information. "
                f"Found {len(accepted)} valid source(s) out of "
                f"{MIN_SOURCES_REQUIRED} required. "
                "Please add this plant manually with care instructions from a "
                "trusted source."
            )
        _logger.info(
            "Care research complete: species=%s sources=%s", species, len(accepted)
        )
        return accepted

    async def _search(self, query: str, species: str) -> list[SearchResult]:
        try:
            results = await self.search_client.search(query)
        except Exception as exc:
            _logger.warning("Care search failed: query=%s error=%s", query, exc)
            results = []
        return results or _plant_database_results(species)

    async def _analyze(
        self, result: SearchResult, species: str, scientific_name: str
    ) -> CareResearch | None:
        page_text = (await self.page_fetcher.fetch_text(result.url)).strip()
        if len(page_text) >= _MIN_PAGE_CHARS:
            content = page_text
        else:
            content = result.snippet.strip()
        if len(content) < _MIN_CONTENT_CHARS:
            _logger.warning("Care source skipped, too little content: %s", result.url)
            return None
        try:
            raw = await self.client.extract(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=_analysis_prompt(result, content, species, scientific_name),
                schema=CARE_RESEARCH_SCHEMA,
                schema_name="care_research",
            )
            source = CareResearch.model_validate(raw)
        except Exception as exc:
            _logger.warning("Care source analysis failed: %s (%s)", result.url, exc)
            return None
        if source.confidence < MIN_SOURCE_CONFIDENCE:
            _logger.warning(
                "Care source rejected: url=%s confidence=%.2f",
                result.url,
                source.confidence,
            )
            return None
        if source.info_count < MIN_INFO_FIELDS:
            _logger.warning(
                "Care source rejected: url=%s info_fields=%s/5",
                result.url,
                source.info_count,
            )
            return None
        return source


def consolidate_care_requirements(sources: list[CareResearch]) -> CareRequirements:
    """Merge per-source recommendations into one set of requirements."""
    if not sources:
        raise ResearchError("No care sources to consolidate")
    count = len(sources)
    watering = round(sum(s.watering_frequency_days for s in sources) / count)
    fertilizing = round(sum(s.fertilizing_frequency_days for s in sources) / count)
    votes = Counter(s.sunlight_level for s in sources)
    # Ties go to the level that first appeared latest.
    sunlight_level = max(reversed(list(votes)), key=votes.__getitem__)
    return CareRequirements(
        watering_frequency_days=watering,
        fertilizing_frequency_days=fertilizing,
        sunlight_level=sunlight_level,
        humidity_preference=sources[0].humidity_preference,
        temperature_range=sources[0].temperature_range,
        care_notes=" ".join(s.care_notes for s in sources),
    )


def _search_strategies(species: str, scientific_name: str) -> list[str]:
    return [
        f"{species} {scientific_name} plant care watering fertilizing light "
        "requirements",
        f"{scientific_name} care guide watering sunlight",
        f"{species} plant care instructions",
        f"how to care for {species} {scientific_name}",
    ]


def _plant_database_results(species: str) -> list[SearchResult]:
    """Fallback results pointing at well-known plant databases."""
    query = quote_plus(species)
    return [
        SearchResult(
            title=f"{species} - {name}",
            url=template.format(query=query),
            snippet=f"Plant care information from {name}",
        )
        for name, template in _PLANT_DATABASES
    ]


def _analysis_prompt(
    result: SearchResult, content: str, species: str, scientific_name: str
) -> str:
    return (
        f"You are analyzing plant care information for {species} "
        f"({scientific_name}) from {result.title} ({result.url}).\n\n"
        f"Content to analyze:\n{content}\n\n"
        "Extract information ONLY if it is explicitly stated in the content. "
        "For each field set the matching has_*_info flag; when the content does "
        "not mention it, set the flag to false and give a reasonable default. "
        "Set confidence (0-1) to how explicitly the content supports your "
        "answer, and use 0 if you had to guess. "
        f'Use "{result.title}" as source_name and "{result.url}" as source_url.'
    )
