"""Conversation state machine models.

Every step of a multi-step flow is a separate model tagged by ``step``.
``ConversationState`` is the discriminated union of all of them, so a
snapshot round-trips back into the exact step type with its payload.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from .ebird import Hotspot
from .results import QueryType


class Button(BaseModel):
    """Inline keyboard button."""

    text: str
    payload: str


Keyboard = list[list[Button]]


class SpeciesRef(BaseModel):
    """Species chosen by the user for a species search."""

    code: str
    common_name: str
    scientific_name: str = ""


class _Step(BaseModel):
    pass


class AwaitingRegion(_Step):
    """Waiting for a region name or ``place, region`` text."""

    step: Literal["awaiting_region"] = "awaiting_region"
    query_type: QueryType = QueryType.SIGHTINGS


class AwaitingHotspotsRegion(_Step):
    """Waiting for a region whose popular hotspots should be listed."""

    step: Literal["awaiting_hotspots_region"] = "awaiting_hotspots_region"


class DateSelection(_Step):
    """Location resolved; waiting for a date preset or custom choice."""

    step: Literal["date_selection"] = "date_selection"
    region_code: str
    display_name: str
    query_type: QueryType
    is_hotspot: bool = False
    species: SpeciesRef | None = None


class AwaitingCustomDate(_Step):
    """Waiting for a free-text date or date range."""

    step: Literal["awaiting_custom_date"] = "awaiting_custom_date"
    region_code: str
    display_name: str
    query_type: QueryType
    is_hotspot: bool = False
    species: SpeciesRef | None = None


class HotspotSelection(_Step):
    """Several hotspots matched a place search; waiting for a pick."""

    step: Literal["hotspot_selection"] = "hotspot_selection"
    query_type: QueryType
    candidates: list[Hotspot] = Field(default_factory=list)
    species: SpeciesRef | None = None


class AwaitingSpeciesName(_Step):
    step: Literal["awaiting_species_name"] = "awaiting_species_name"


class AwaitingSpeciesLocation(_Step):
    step: Literal["awaiting_species_location"] = "awaiting_species_location"
    species: SpeciesRef


class AwaitingNearbyDistance(_Step):
    step: Literal["awaiting_nearby_distance"] = "awaiting_nearby_distance"
    latitude: float
    longitude: float


class AwaitingJumpPage(_Step):
    """Waiting for a one-based page number for a cached result set."""

    step: Literal["awaiting_jump_page"] = "awaiting_jump_page"
    query_type: QueryType
    total_pages: int
    message_id: int | None = None


ConversationState = Annotated[
    Union[
        AwaitingRegion,
        AwaitingHotspotsRegion,
        DateSelection,
        AwaitingCustomDate,
        HotspotSelection,
        AwaitingSpeciesName,
        AwaitingSpeciesLocation,
        AwaitingNearbyDistance,
        AwaitingJumpPage,
    ],
    Field(discriminator="step"),
]


class PromptRecord(BaseModel):
    """Last re-issuable prompt shown to a chat, with the state it belongs to."""

    text: str
    keyboard: Keyboard | None = None
    state_to_restore: ConversationState | None = None


ConversationStateMap = TypeAdapter(dict[int, ConversationState])
PromptRecordMap = TypeAdapter(dict[int, PromptRecord])
