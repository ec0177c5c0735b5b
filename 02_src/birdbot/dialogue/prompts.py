"""Message texts and keyboards shown by the dialog."""

from ..config import MAX_HOTSPOT_CANDIDATES, NEARBY_DISTANCES_KM
from ..ebird import POPULAR_LOCATIONS
from ..models import Button, Hotspot, Keyboard, QueryType
from ..results import esc
from . import payloads

WELCOME = """
🦅 *Welcome to the Bird Sighting Bot, {name}!*

I can help you discover bird sightings using data from eBird, the world's largest biodiversity database.

*🔍 Two Ways to Search:*

📍 *By Location* - /sightings
   See all birds spotted in an area
   Example: "Singapore", "New York", "Malaysia"

🐦 *By Species* - /species
   Find where a specific bird was seen
   Example: "House Sparrow", "Common Myna"

*Other Commands:*
⭐ /notable - Rare and unusual sightings
📍 /nearby - Birds near your GPS location
🗺️ /hotspots - Popular birding spots

Type /help for more details. Happy birding! 🐦
"""

HELP = """
*🐦 Bird Sighting Bot - Help*

*🔍 Two Ways to Search:*

━━━━━━━━━━━━━━━━━━━━
📍 *SEARCH BY LOCATION*
━━━━━━━━━━━━━━━━━━━━
Use /sightings to see ALL birds in an area

*By Region:*
• `/sightings Singapore`
• `/sightings New York`

*By Specific Place:*
• `/sightings Botanic Gardens, Singapore`
• `/sightings Central Park, USA`

💡 Use /hotspots to discover location names

━━━━━━━━━━━━━━━━━━━━
🐦 *SEARCH BY SPECIES*
━━━━━━━━━━━━━━━━━━━━
Use /species to find a specific bird

Examples:
• `/species House Sparrow`
• `/species Common Myna`

*Other Commands:*
⭐ /notable - Rare sightings
📍 /nearby - Birds near your GPS
🗺️ /hotspots - Find location names
📋 /regions - Region code help
"""

REGIONS = """
*🌍 Understanding Region Codes*

Region codes are used to specify geographic areas for bird sightings.

*Format:*
• Country: `XX` (2-letter ISO code)
• State/Province: `XX-YY`
• County/District: `XX-YY-ZZZ`

*Examples:*

🇺🇸 *United States:*
• `US` - All of United States
• `US-CA` - California
• `US-NY` - New York
• `US-TX` - Texas
• `US-CA-037` - Los Angeles County

🇬🇧 *United Kingdom:*
• `GB` - United Kingdom
• `GB-ENG` - England
• `GB-SCT` - Scotland

🇨🇦 *Canada:*
• `CA` - Canada
• `CA-ON` - Ontario
• `CA-BC` - British Columbia

🇦🇺 *Australia:*
• `AU` - Australia
• `AU-NSW` - New South Wales
• `AU-VIC` - Victoria

🇩🇪 *Germany:*
• `DE` - Germany
• `DE-BY` - Bavaria
• `DE-BE` - Berlin

*Tip:* Start with a country code and add more detail as needed!
"""

SIGHTINGS_PROMPT = f"""📍 *Enter a location to see recent bird sightings:*

You can type:
• Region: `Singapore`, `New York`, `Malaysia`
• Specific place: `Botanic Gardens, Singapore`
• Region code: `SG`, `US-NY`, `MY`

{POPULAR_LOCATIONS}"""

NOTABLE_PROMPT = """⭐ *Enter a location to see notable sightings:*

Notable sightings include rare species and unusual observations.

You can type:
• Region: `Singapore`, `New York`, `US`
• Specific place: `Botanic Gardens, Singapore`"""

HOTSPOTS_PROMPT = """🗺️ *Enter a region to find birding hotspots:*

You can type the full name or region code:
• `Singapore` or `SG`
• `California` or `US-CA`

💡 Use /hotspots to discover location names you can search with /sightings"""

SPECIES_PROMPT = """🐦 *Search by Species Name*

Enter the species name you want to find:

*Examples:*
• `House Sparrow`
• `Common Myna`
• `Oriental Magpie-Robin`
• `American Robin`
• `European Robin`

💡 Use the full species name as it appears in eBird.
After finding the species, you can narrow down by location."""

NEARBY_PROMPT = (
    "📍 *Share your location to find nearby bird sightings!*\n\n"
    "After sharing, you can choose the search radius."
)
SHARE_LOCATION_BUTTON = "📍 Share My Location"

CUSTOM_DATE_PROMPT = """📆 *Enter custom date:*

*Option 1: Single Date*
Enter a date to see all sightings for that day:
_(from 00:00 to 23:59 of that date)_
Format: `DD/MM/YYYY` or `YYYY-MM-DD`

*Option 2: Multiple Days*
Enter start and end dates separated by " to ":
Format: `DD/MM/YYYY to DD/MM/YYYY`
_(from 00:00 of start date to 23:59 of end date)_

*Examples:*
• `01/02/2026` - All sightings on 1 Feb 2026
• `01/02/2026 to 07/02/2026` - Sightings from 1-7 Feb 2026

⚠️ Note: eBird API limits data to the last 30 days."""

INVALID_DATE = (
    "❌ Invalid date format. Please use:\n"
    "• Single date: `DD/MM/YYYY`\n"
    "• Date range: `DD/MM/YYYY to DD/MM/YYYY`"
)

SHARE_OPTIONS = (
    "📤 *Share Bird Sightings*\n\nHow would you like to share?\n\n"
    "Once I send the list, you can:\n"
    "• Long-press the message → Forward\n"
    "• Or tap the forward icon ↗️"
)

NEW_SEARCH = "🔍 *What would you like to search?*\n\nChoose a search type:"
NEXT_STEP = "🔍 *What would you like to do next?*"
DONE = "✅ Happy birding! Send /start anytime to begin again. 🐦"
SHARE_CANCELLED = "✅ Share cancelled."
NO_CACHED_RESULTS = "❌ No cached results found. Please perform a new search."
UNABLE_TO_SHARE = "❌ Unable to share. Please perform a new search."
RESULTS_EXPIRED = "⌛ Those results have expired. Please start a new search."
SEARCH_EXPIRED = "⌛ This species search has expired. Please start again with /species."
SHARE_LOCATION_AGAIN = "⚠️ Please share your location again using /nearby."
GENERIC_ERROR = "⚠️ Something went wrong. Please try again or send /start to restart."
THROTTLED = "⏳ You're sending requests too quickly. Please wait a minute and try again."

PLACE_FORMAT_ERROR = (
    "❌ Please provide both place and region.\n\n"
    "*Format:* `Location, Country`\n*Example:* `Botanic Gardens, Singapore`"
)
SPECIES_FORMAT_ERROR = (
    "❌ Please provide both a location and a species name.\n\n"
    "*Format:* `location, species name`\n*Example:* `Singapore, House Sparrow`"
)

_DATE_BUTTONS = (
    (("📅 Today", "today"), ("📅 Yesterday", "yesterday")),
    (("📅 Last 3 Days", "last_3_days"), ("📅 Last Week", "last_week")),
    (("📅 Last 14 Days", "last_14_days"), ("📅 Last Month", "last_month")),
    (("📆 Custom Date", payloads.CUSTOM_PRESET),),
)


def welcome(name: str | None) -> str:
    return WELCOME.format(name=esc(name or "Birder"))


def date_selection(display_name: str, species_name: str | None = None) -> str:
    if species_name:
        return (
            f"📅 *Select date for {esc(species_name)} in {esc(display_name)}:*\n\n"
            "Choose a preset or enter a custom date.\n"
            "_All sightings from 00:00 to 23:59 of selected date(s)_"
        )
    return (
        f"📅 *Select date for {esc(display_name)}:*\n\n"
        "Choose a preset or enter a custom date.\n"
        "_All sightings from 00:00 to 23:59 of selected date(s)_\n\n"
        "*Quick Options:*"
    )


def date_keyboard(query_type: QueryType, region_code: str) -> Keyboard:
    return [
        [
            Button(text=text, payload=payloads.encode_date(query_type, preset, region_code))
            for text, preset in row
        ]
        for row in _DATE_BUTTONS
    ]


def range_limit(earliest: str, latest: str) -> str:
    return (
        "⚠️ eBird API only provides data for the last 30 days.\n\n"
        f"📅 Available range: {earliest} to {latest}\n\n"
        "Please enter a date within this range."
    )


def jump_prompt(total_pages: int) -> str:
    return f"🔢 *Enter a page number (1-{total_pages}):*"


def hotspot_selection(candidates: list[Hotspot], region_name: str) -> str:
    return f"📍 *Found {len(candidates)} locations in {esc(region_name)}:*\n\nSelect a location:\n"


def hotspot_keyboard(query_type: QueryType, candidates: list[Hotspot]) -> Keyboard:
    rows = []
    for index, hotspot in enumerate(candidates[:MAX_HOTSPOT_CANDIDATES], start=1):
        species = (
            f" ({hotspot.num_species_all_time} species)" if hotspot.num_species_all_time else ""
        )
        rows.append(
            [
                Button(
                    text=f"{index}. {hotspot.loc_name}{species}",
                    payload=payloads.encode_hotspot(query_type, hotspot.loc_id),
                )
            ]
        )
    return rows


def no_place_matches(place: str, region_name: str, popular: list[Hotspot]) -> str:
    text = f"❌ No locations found matching \"*{esc(place)}*\" in *{esc(region_name)}*."
    if popular:
        text += f"\n\n💡 *Popular birding spots in {esc(region_name)}:*\n"
        for index, hotspot in enumerate(popular, start=1):
            text += f"{index}. {esc(hotspot.loc_name)}"
            if hotspot.num_species_all_time:
                text += f" ({hotspot.num_species_all_time} species)"
            text += "\n"
        text += (
            "\n_Try searching for one of these locations, or search the entire region "
            f"with just_ `{esc(region_name)}`"
        )
    else:
        text += f"\n\n💡 Try searching the entire region with just `{esc(region_name)}`"
    return text


def popular_hotspots(hotspots: list[Hotspot], region_name: str) -> str:
    text = f"*🗺️ Popular Birding Hotspots in {esc(region_name)}*\n"
    text += "━━━━━━━━━━━━━━━━━━━━\n"
    text += "_Sorted by number of species recorded_\n\n"
    for index, spot in enumerate(hotspots[:10], start=1):
        text += f"{index}. *{esc(spot.loc_name)}*\n"
        if spot.num_species_all_time:
            text += f"   🐦 {spot.num_species_all_time} species recorded\n"
        text += "\n"

    example = hotspots[0].loc_name.split("--")[0].strip() if hotspots else ""
    text += "\n💡 *To search a specific location:*\n"
    text += f"Type: `Location Name, {esc(region_name)}`\n"
    text += f"Example: `{esc(example or 'Park Name')}, {esc(region_name)}`"
    return text


def popular_hotspots_keyboard(hotspots: list[Hotspot]) -> Keyboard:
    rows = []
    for spot in hotspots[:5]:
        name = spot.loc_name
        label = name[:35] + ("..." if len(name) > 35 else "")
        rows.append(
            [
                Button(
                    text=f"📍 {label}",
                    payload=payloads.encode_hotspot(QueryType.SIGHTINGS, spot.loc_id),
                )
            ]
        )
    return rows


def nearby_hotspots(hotspots: list[Hotspot]) -> str:
    text = "*🗺️ Nearby Birding Hotspots:*\n\n"
    for index, spot in enumerate(hotspots[:5], start=1):
        text += f"{index}. *{esc(spot.loc_name)}*\n"
        if spot.num_species_all_time:
            text += f"   🐦 Species recorded: {spot.num_species_all_time}\n"
        text += "\n"
    return text


def location_received(latitude: float, longitude: float) -> str:
    maps_link = f"https://maps.google.com/?q={latitude},{longitude}"
    return (
        "📍 Location received!\n\n"
        f"*Coordinates:* [{latitude:.4f}, {longitude:.4f}]({maps_link})\n\n"
        "📏 *Choose search radius:*"
    )


def distance_keyboard() -> Keyboard:
    buttons = [
        Button(text=f"{km} km", payload=payloads.encode_nearby_distance(km))
        for km in NEARBY_DISTANCES_KM
    ]
    return [buttons[i:i + 2] for i in range(0, len(buttons), 2)]


def species_found(species, similar: list) -> str:
    text = f"✅ *Found: {esc(species.common_name)}*\n"
    text += f"🔬 _{esc(species.scientific_name)}_\n"
    text += f"📋 Species Code: `{species.species_code}`\n\n"
    if similar:
        text += "*Similar species:*\n"
        for match in similar[:4]:
            text += f"• {esc(match.common_name)}\n"
        text += "\n"
    text += f"📍 *Now enter a location* to see sightings of {esc(species.common_name)}:\n\n"
    text += "*Examples:*\n• `Singapore`\n• `New York`\n• `California`\n• `Malaysia`\n• `UK`"
    return text


def species_not_found(name: str) -> str:
    return (
        f"❌ Species \"*{esc(name)}*\" not found.\n\n"
        "💡 Try the exact species name as it appears in eBird, such as:\n"
        "• \"House Sparrow\"\n• \"Common Myna\"\n• \"Oriental Magpie-Robin\""
    )


def share_keyboard(query_type: QueryType) -> Keyboard:
    return [
        [
            Button(
                text="📋 Generate Shareable List",
                payload=payloads.encode_generate_share(query_type),
            )
        ],
        [Button(text="❌ Cancel", payload=payloads.Action.CANCEL_SHARE.value)],
    ]


def new_search_keyboard() -> Keyboard:
    return [
        [
            Button(text="📍 By Location", payload=payloads.encode_command("sightings")),
            Button(text="🐦 By Species", payload=payloads.encode_command("species")),
        ],
        [
            Button(text="⭐ Notable", payload=payloads.encode_command("notable")),
            Button(text="📍 Nearby", payload=payloads.encode_command("nearby")),
        ],
        [Button(text="🗺️ Hotspots", payload=payloads.encode_command("hotspots"))],
    ]


def next_step_keyboard() -> Keyboard:
    return [
        [Button(text="📊 Summary List", payload=payloads.encode_summary(QueryType.NEARBY))],
        [
            Button(text="🔍 New Search", payload=payloads.Action.NEW_SEARCH.value),
            Button(text="✅ Done", payload=payloads.Action.DONE.value),
        ],
    ]


def nearby_retry_keyboard() -> Keyboard:
    return [
        [
            Button(text="🔄 Try Again", payload=payloads.encode_command("nearby")),
            Button(text="🔍 New Search", payload=payloads.Action.NEW_SEARCH.value),
        ]
    ]


def error_keyboard() -> Keyboard:
    return [
        [
            Button(text="🔄 Try Again", payload=payloads.Action.NEW_SEARCH.value),
            Button(text="🏠 Start Over", payload=payloads.encode_command("start")),
        ]
    ]


def expired_keyboard() -> Keyboard:
    return [[Button(text="🔍 New Search", payload=payloads.Action.NEW_SEARCH.value)]]


def unknown_location(display_name: str) -> str:
    return (
        f"❌ Could not recognise *{esc(display_name)}* as a location.\n\n"
        "💡 Try a region name like `Singapore` or a code like `US-NY`."
    )
