"""Plant identification from photos using LLMs."""

from dataclasses import dataclass
from typing import Protocol

from plant_tracker.domain.identification import PlantIdentification

_CANDIDATE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "species": {"type": "string"},
        "scientific_name": {"type": "string"},
        "confidence": {"type": "number", "minimum": 0.0, "maximum": 1.0},
        "description": {"anyOf": [{"type": "string"}, {"type": "null"}]},
    },
    "required": ["species", "scientific_name", "confidence", "description"],
    "additionalProperties": False,
}

IDENTIFICATION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "identified_species": {"anyOf": [{"type": "string"}, {"type": "null"}]},
        "scientific_name": {"anyOf": [{"type": "string"}, {"type": "null"}]},
        "confidence": {"type": "number", "minimum": 0.0, "maximum": 1.0},
        "suggestions": {"type": "array", "items": _CANDIDATE_SCHEMA},
    },
    "required": ["identified_species", "scientific_name", "confidence", "suggestions"],
    "additionalProperties": False,
}

_IDENTIFY_PROMPT = (
    "Identify the plant in this photo. "
    "Return the common name, the scientific name and your confidence (0-1). "
    "If you are not sure, list up to 5 candidate species ordered from most to "
    "least likely, each with a one-line description of how to tell it apart."
)


class StructuredLLMClient(Protocol):
    """Interface for LLM calls with JSON schema outputs."""

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        image_url: str | None = None,
    ) -> dict[str, object]:
        """Return structured data matching the schema."""


@dataclass
class IdentificationService:
    """Service that prepares identification prompts and validates results."""

    client: StructuredLLMClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def identify(self, image_url: str) -> PlantIdentification:
        """Identify the plant shown at image_url."""
        raw = await self.client.extract(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=_IDENTIFY_PROMPT,
            schema=IDENTIFICATION_SCHEMA,
            schema_name="plant_identification",
            image_url=image_url,
        )
        return PlantIdentification.model_validate(raw)
