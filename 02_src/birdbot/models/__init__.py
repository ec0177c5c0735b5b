"""Core data models for the bird sighting bot."""

from .bus import BusMessage, Topic
from .dialogue import (
    AwaitingCustomDate,
    AwaitingHotspotsRegion,
    AwaitingJumpPage,
    AwaitingNearbyDistance,
    AwaitingRegion,
    AwaitingSpeciesLocation,
    AwaitingSpeciesName,
    Button,
    ConversationState,
    ConversationStateMap,
    DateSelection,
    HotspotSelection,
    Keyboard,
    PromptRecord,
    PromptRecordMap,
    SpeciesRef,
)
from .ebird import Hotspot, Observation, SpeciesMatch
from .events import ButtonEvent, CommandEvent, InboundEvent, LocationEvent, TextEvent
from .results import CachedResultSet, DateFilter, Page, QueryType
from .search import SearchRecord

__all__ = [
    # eBird records
    "Observation",
    "Hotspot",
    "SpeciesMatch",
    # Results
    "QueryType",
    "DateFilter",
    "CachedResultSet",
    "Page",
    # Dialogue
    "Button",
    "Keyboard",
    "SpeciesRef",
    "ConversationState",
    "ConversationStateMap",
    "AwaitingRegion",
    "AwaitingHotspotsRegion",
    "DateSelection",
    "AwaitingCustomDate",
    "HotspotSelection",
    "AwaitingSpeciesName",
    "AwaitingSpeciesLocation",
    "AwaitingNearbyDistance",
    "AwaitingJumpPage",
    "PromptRecord",
    "PromptRecordMap",
    # Events
    "InboundEvent",
    "CommandEvent",
    "TextEvent",
    "LocationEvent",
    "ButtonEvent",
    # Search log
    "SearchRecord",
    # Bus
    "BusMessage",
    "Topic",
]
