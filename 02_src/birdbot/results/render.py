"""Telegram Markdown rendering of cached result sets."""

import re
from dataclasses import dataclass
from typing import Sequence

from ..config import MESSAGE_CHAR_BUDGET, SUMMARY_CHAR_BUDGET
from ..dates import format_obs_date
from ..dialogue import payloads
from ..models import Button, CachedResultSet, Keyboard, Observation, Page, QueryType

RULE = "━━━━━━━━━━━━━━━━━━━━"
SIGNATURE = "🤖 _Bird Sighting Bot_"

_MARKDOWN_SPECIALS = re.compile(r"([*_`\[])")


@dataclass
class OutboundMessage:
    """Text plus optional inline keyboard, ready for the transport."""

    text: str
    keyboard: Keyboard | None = None


def esc(text) -> str:
    """Escape Telegram Markdown (v1) specials in user or API text."""
    if text is None or text == "":
        return ""
    return _MARKDOWN_SPECIALS.sub(r"\\\1", str(text))


def build_title(query_type: QueryType, display_name: str) -> str:
    name = esc(display_name)
    if query_type == QueryType.NOTABLE:
        return f"⭐ Notable Sightings in {name}"
    if query_type == QueryType.NEARBY:
        return f"🐦 Birds Near {name}"
    if query_type == QueryType.SPECIES:
        return f"🔎 {name} Sightings"
    return f"🐦 Recent Sightings in {name}"


def format_observation(obs: Observation, tz_abbr: str | None = None) -> str:
    lines = [
        f"🐦 *{esc(obs.common_name)}*",
        f"   _{esc(obs.scientific_name)}_",
        f"📍 {esc(obs.loc_name)}",
    ]
    if obs.lat is not None and obs.lng is not None:
        lines.append(
            f"🗺️ [📍 View on Google Maps](https://maps.google.com/?q={obs.lat},{obs.lng})"
        )
    when = format_obs_date(obs.obs_dt)
    lines.append(f"📅 {when} {tz_abbr}" if tz_abbr and obs.obs_dt else f"📅 {when}")
    if obs.user_display_name:
        lines.append(f"👤 Reported by: {esc(obs.user_display_name)}")
    if obs.how_many and obs.how_many > 1:
        lines.append(f"🔢 Count: {obs.how_many}")
    return "\n".join(lines) + "\n"


def page_keyboard(query_type: QueryType, page: Page) -> Keyboard:
    nav_row = []
    if not page.is_first:
        nav_row.append(Button(text="⏮️ First", payload=payloads.encode_page(query_type, 0)))
        nav_row.append(
            Button(text="⬅️ Prev", payload=payloads.encode_page(query_type, page.page_index - 1))
        )
    nav_row.append(
        Button(
            text=f"{page.page_index + 1}/{page.total_pages}",
            payload=payloads.Action.PAGE_INFO.value,
        )
    )
    if not page.is_last:
        nav_row.append(
            Button(text="Next ➡️", payload=payloads.encode_page(query_type, page.page_index + 1))
        )
        nav_row.append(
            Button(text="Last ⏭️", payload=payloads.encode_page(query_type, page.total_pages - 1))
        )

    keyboard = [nav_row]
    if page.total_pages > 2:
        keyboard.append(
            [Button(text="🔢 Jump to Page", payload=payloads.encode_jump(query_type))]
        )
    keyboard.append(
        [
            Button(text="📊 Summary List", payload=payloads.encode_summary(query_type)),
            Button(text="📋 Full List", payload=payloads.encode_full_list(query_type)),
        ]
    )
    keyboard.append(
        [
            Button(text="📤 Share", payload=payloads.encode_share(query_type)),
            Button(text="🔍 New Search", payload=payloads.Action.NEW_SEARCH.value),
            Button(text="✅ Done", payload=payloads.Action.DONE.value),
        ]
    )
    return keyboard


def render_page(
    result_set: CachedResultSet, page: Page, tz_abbr: str | None = None
) -> OutboundMessage:
    title = build_title(result_set.query_type, result_set.display_name)
    parts = [
        f"*{title}*\n",
        f"{RULE}\n",
        f"📊 Showing {page.start_index + 1}-{page.end_index} of {page.total_items}\n",
        f"📄 Page {page.page_index + 1} of {page.total_pages}\n\n",
    ]
    for offset, obs in enumerate(page.items):
        parts.append(f"{page.start_index + offset + 1}. {format_observation(obs, tz_abbr)}\n")
    return OutboundMessage(
        text="".join(parts), keyboard=page_keyboard(result_set.query_type, page)
    )


def _group_by_species(items: Sequence[Observation]) -> dict:
    """species key -> {name, count, locations: {loc -> {count, dates: {dd/mm/yyyy -> set(times)}}}}"""
    species: dict = {}
    for obs in items:
        entry = species.setdefault(
            obs.species_key, {"name": obs.common_name, "count": 0, "locations": {}}
        )
        entry["count"] += obs.count

        location = entry["locations"].setdefault(obs.loc_name, {"count": 0, "dates": {}})
        location["count"] += obs.count

        if obs.obs_dt:
            date_part, _, time_part = obs.obs_dt.partition(" ")
            year, _, rest = date_part.partition("-")
            month, _, day = rest.partition("-")
            times = location["dates"].setdefault(f"{day}/{month}/{year}", set())
            if time_part:
                times.add(time_part)
    return species


def render_summary(
    result_set: CachedResultSet,
    tz_abbr: str = "Local",
    budget: int = SUMMARY_CHAR_BUDGET,
) -> OutboundMessage:
    """One message grouping species -> location -> date with observation times."""
    title = build_title(result_set.query_type, result_set.display_name)
    species = _group_by_species(result_set.items)

    msg = f"📊 *Summary*\n{RULE}\n*{title}*\n"
    msg += f"🐦 *{len(species)}* species · {len(result_set.items)} sightings\n\n"

    for index, entry in enumerate(species.values(), start=1):
        msg += f"{index}. *{esc(entry['name'])}* (x{entry['count']})\n"
        for loc_name, location in entry["locations"].items():
            msg += f"    📍 {esc(loc_name)} (x{location['count']})\n"
            for day, times in location["dates"].items():
                if times:
                    msg += f"    📅 {day} {', '.join(sorted(times))} {tz_abbr}\n"
                else:
                    msg += f"    📅 {day} {tz_abbr}\n"
        msg += "\n"

        if len(msg) > budget:
            remaining = len(species) - index
            if remaining > 0:
                msg += f"\n_...and {remaining} more species_\n"
            break

    msg += f"\n{RULE}\n{SIGNATURE}"
    return OutboundMessage(text=msg)


def _split_detailed(
    result_set: CachedResultSet,
    heading: str,
    footer: str,
    tz_abbr: str | None,
    budget: int,
) -> list[OutboundMessage]:
    title = build_title(result_set.query_type, result_set.display_name)
    current = f"{heading}\n{RULE}\n*{title}*\n📊 Total: {len(result_set.items)} sightings\n\n"
    messages = []
    part = 1

    for index, obs in enumerate(result_set.items, start=1):
        line = f"{index}. {format_observation(obs, tz_abbr)}"
        if len(current) + len(line) + 2 > budget:
            messages.append(current)
            part += 1
            current = f"{heading.rstrip('*')} (Part {part})*\n{RULE}\n\n"
        current += line + "\n"

    current += f"\n{RULE}\n{footer}"
    messages.append(current)
    return [OutboundMessage(text=text) for text in messages]


def render_full_list(
    result_set: CachedResultSet,
    tz_abbr: str | None = None,
    budget: int = MESSAGE_CHAR_BUDGET,
) -> list[OutboundMessage]:
    """Every sighting in full detail, split into parts."""
    return _split_detailed(
        result_set, "📋 *Full Sightings List*", SIGNATURE, tz_abbr, budget
    )


def render_share(
    result_set: CachedResultSet,
    tz_abbr: str | None = None,
    budget: int = MESSAGE_CHAR_BUDGET,
) -> list[OutboundMessage]:
    """Forwardable copy of the full list: no buttons, share footer."""
    footer = "🤖 _Shared via Bird Sighting Bot_\n📱 _Forward this message to share!_"
    return _split_detailed(result_set, "📤 *Shared Bird Sightings*", footer, tz_abbr, budget)
