"""Pydantic models for API request bodies."""

from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field


class CreateImportSessionRequest(BaseModel):
    """Body for creating an import session."""

    image_url: str | None = Field(
        default=None, validation_alias=AliasChoices("image_url", "imageUrl")
    )


class SelectSpeciesRequest(BaseModel):
    """Body for choosing one of the suggested species.

    Both fields are optional here so missing values surface as a domain
    validation error rather than a schema error.
    """

    species: str | None = None
    scientific_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("scientific_name", "scientificName"),
    )


class IdentifyPlantRequest(BaseModel):
    """Body for the initial identification run."""

    session_id: UUID = Field(validation_alias=AliasChoices("sessionId", "session_id"))
    image_url: str | None = Field(
        default=None, validation_alias=AliasChoices("imageUrl", "image_url")
    )


class ContinueIdentificationRequest(BaseModel):
    """Body for the identification continuation."""

    session_id: UUID = Field(validation_alias=AliasChoices("sessionId", "session_id"))
    species: str | None = None
    scientific_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("scientific_name", "scientificName"),
    )
