"""Inline button payload codec.

Payloads are colon-tagged: ``tag:field:field``. Every field sits in its own
segment, so preset names that contain underscores need no special casing.
The decoder also understands the older underscore form
(``date_sightings_last_3_days_SG``) so buttons already sitting in chat
history keep working.
"""

from dataclasses import dataclass
from enum import Enum

from ..dates import PRESETS
from ..models import QueryType

# Telegram rejects callback_data longer than 64 bytes
MAX_PAYLOAD_BYTES = 64
SEPARATOR = ":"
CUSTOM_PRESET = "custom"
DATE_CHOICES = tuple(PRESETS) + (CUSTOM_PRESET,)


class Action(str, Enum):
    """What a button press asks for."""

    DATE = "date"
    PAGE = "page"
    JUMP = "jump"
    SUMMARY = "specsummary"
    FULL_LIST = "fulllist"
    SHARE = "share"
    GENERATE_SHARE = "generate_share"
    HOTSPOT = "hotspot"
    NEARBY_DISTANCE = "nearby_dist"
    COMMAND = "cmd"
    PAGE_INFO = "page_info"
    CANCEL_SHARE = "cancel_share"
    NEW_SEARCH = "new_search"
    DONE = "done"
    HELP = "help"
    REQUEST_LOCATION = "request_location"


FIXED_TOKENS = {
    Action.PAGE_INFO.value: Action.PAGE_INFO,
    Action.CANCEL_SHARE.value: Action.CANCEL_SHARE,
    Action.NEW_SEARCH.value: Action.NEW_SEARCH,
    Action.DONE.value: Action.DONE,
    Action.HELP.value: Action.HELP,
    Action.REQUEST_LOCATION.value: Action.REQUEST_LOCATION,
}

# Actions whose only field is the query type
_QUERY_ONLY = (
    Action.JUMP,
    Action.SUMMARY,
    Action.FULL_LIST,
    Action.SHARE,
    Action.GENERATE_SHARE,
)


@dataclass(frozen=True)
class ButtonPayload:
    """Decoded button payload."""

    action: Action
    query_type: QueryType | None = None
    preset: str | None = None
    region_code: str | None = None
    page_index: int | None = None
    loc_id: str | None = None
    distance_km: int | None = None
    command: str | None = None


def _join(*parts: str) -> str:
    payload = SEPARATOR.join(str(part) for part in parts)
    if len(payload.encode("utf-8")) > MAX_PAYLOAD_BYTES:
        raise ValueError(f"Button payload too long: {payload!r}")
    return payload


def _query_value(query_type: QueryType) -> str:
    return QueryType(query_type).value


def encode_date(query_type: QueryType, preset: str, region_code: str) -> str:
    if preset not in DATE_CHOICES:
        raise ValueError(f"Unknown date preset {preset!r}")
    return _join(Action.DATE.value, _query_value(query_type), preset, region_code)


def encode_page(query_type: QueryType, page_index: int) -> str:
    return _join(Action.PAGE.value, _query_value(query_type), page_index)


def encode_jump(query_type: QueryType) -> str:
    return _join(Action.JUMP.value, _query_value(query_type))


def encode_summary(query_type: QueryType) -> str:
    return _join(Action.SUMMARY.value, _query_value(query_type))


def encode_full_list(query_type: QueryType) -> str:
    return _join(Action.FULL_LIST.value, _query_value(query_type))


def encode_share(query_type: QueryType) -> str:
    return _join(Action.SHARE.value, _query_value(query_type))


def encode_generate_share(query_type: QueryType) -> str:
    return _join(Action.GENERATE_SHARE.value, _query_value(query_type))


def encode_hotspot(query_type: QueryType, loc_id: str) -> str:
    return _join(Action.HOTSPOT.value, _query_value(query_type), loc_id)


def encode_nearby_distance(distance_km: int) -> str:
    return _join(Action.NEARBY_DISTANCE.value, int(distance_km))


def encode_command(command: str) -> str:
    return _join(Action.COMMAND.value, command)


def decode(payload: str) -> ButtonPayload | None:
    """Decode a button payload; None when it is not recognised."""
    if not payload:
        return None
    if payload in FIXED_TOKENS:
        return ButtonPayload(action=FIXED_TOKENS[payload])
    try:
        if SEPARATOR in payload:
            return _decode_tagged(payload)
        return _decode_legacy(payload)
    except ValueError:
        return None


def _decode_tagged(payload: str) -> ButtonPayload | None:
    tag, _, rest = payload.partition(SEPARATOR)
    action = Action(tag)

    if action == Action.DATE:
        query, preset, region_code = rest.split(SEPARATOR, 2)
        return _date_payload(query, preset, region_code)
    if action == Action.PAGE:
        query, index = rest.split(SEPARATOR, 1)
        return ButtonPayload(action, query_type=QueryType(query), page_index=int(index))
    if action in _QUERY_ONLY:
        return ButtonPayload(action, query_type=QueryType(rest))
    if action == Action.HOTSPOT:
        query, loc_id = rest.split(SEPARATOR, 1)
        return _hotspot_payload(query, loc_id)
    if action == Action.NEARBY_DISTANCE:
        return ButtonPayload(action, distance_km=int(rest))
    if action == Action.COMMAND:
        return ButtonPayload(action, command=rest) if rest else None
    return None


def _decode_legacy(payload: str) -> ButtonPayload | None:
    # Longer prefixes first: "generate_share_" must win over "share_"
    if payload.startswith("generate_share_"):
        return ButtonPayload(
            Action.GENERATE_SHARE, query_type=QueryType(payload[len("generate_share_"):])
        )
    if payload.startswith("nearby_dist_"):
        return ButtonPayload(
            Action.NEARBY_DISTANCE, distance_km=int(payload[len("nearby_dist_"):])
        )

    tag, _, rest = payload.partition("_")
    if not rest:
        return None
    action = Action(tag)

    if action == Action.DATE:
        query, _, remainder = rest.partition("_")
        # Match known preset names rather than counting segments
        for preset in sorted(DATE_CHOICES, key=len, reverse=True):
            if remainder.startswith(preset + "_"):
                return _date_payload(query, preset, remainder[len(preset) + 1:])
        return None
    if action == Action.PAGE:
        query, _, index = rest.partition("_")
        return ButtonPayload(action, query_type=QueryType(query), page_index=int(index))
    if action in _QUERY_ONLY:
        return ButtonPayload(action, query_type=QueryType(rest))
    if action == Action.HOTSPOT:
        query, _, loc_id = rest.partition("_")
        return _hotspot_payload(query, loc_id)
    if action == Action.COMMAND:
        return ButtonPayload(action, command=rest)
    return None


def _date_payload(query: str, preset: str, region_code: str) -> ButtonPayload | None:
    if preset not in DATE_CHOICES or not region_code:
        return None
    return ButtonPayload(
        Action.DATE,
        query_type=QueryType(query),
        preset=preset,
        region_code=region_code,
    )


def _hotspot_payload(query: str, loc_id: str) -> ButtonPayload | None:
    if not loc_id:
        return None
    return ButtonPayload(Action.HOTSPOT, query_type=QueryType(query), loc_id=loc_id)
