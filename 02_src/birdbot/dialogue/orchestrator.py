"""Dialog orchestrator: routes inbound events through the conversation state machine."""

from datetime import datetime, timezone
from typing import Protocol

from ..config import ITEMS_PER_PAGE, MAX_HOTSPOT_CANDIDATES, UPSTREAM_MAX_RESULTS
from ..dates import IDateRangeResolver, format_ddmmyyyy
from ..ebird import IObservationSource, to_region_code
from ..errors import (
    InvalidPageError,
    RangeLimitError,
    RateLimitExceeded,
    RenderError,
    UpstreamFetchError,
)
from ..event_bus import IEventBus, new_message
from ..logging_config import get_logger
from ..models import (
    AwaitingCustomDate,
    AwaitingHotspotsRegion,
    AwaitingJumpPage,
    AwaitingNearbyDistance,
    AwaitingRegion,
    AwaitingSpeciesLocation,
    AwaitingSpeciesName,
    ButtonEvent,
    CachedResultSet,
    CommandEvent,
    DateFilter,
    DateSelection,
    HotspotSelection,
    InboundEvent,
    Keyboard,
    LocationEvent,
    Observation,
    PromptRecord,
    QueryType,
    SpeciesRef,
    TextEvent,
    Topic,
)
from ..results import (
    esc,
    page_index_from_user,
    paginate,
    render_full_list,
    render_page,
    render_share,
    render_summary,
)
from ..search_log import search_completed_payload
from ..session import SessionContext
from ..transport import ITransport
from . import prompts
from .payloads import CUSTOM_PRESET, Action, ButtonPayload, decode

logger = get_logger(__name__)


class IDialogOrchestrator(Protocol):
    """Entry point for every inbound user event."""

    async def dispatch(self, event: InboundEvent) -> None:
        """Handle one event. Never raises."""
        ...


class DialogOrchestrator:
    """Drives the per-chat conversation state machine.

    What a free-text message means is decided only by the chat's stored
    step. Every handled event runs inside a safety net that turns any
    unexpected exception into a generic apology.
    """

    def __init__(
        self,
        transport: ITransport,
        source: IObservationSource,
        resolver: IDateRangeResolver,
        session: SessionContext | None = None,
        event_bus: IEventBus | None = None,
    ):
        self._transport = transport
        self._source = source
        self._resolver = resolver
        self._session = session or SessionContext()
        self._event_bus = event_bus

        self._commands = {
            "start": self._cmd_start,
            "help": self._cmd_help,
            "regions": self._cmd_regions,
            "sightings": self._cmd_sightings,
            "notable": self._cmd_notable,
            "species": self._cmd_species,
            "nearby": self._cmd_nearby,
            "hotspots": self._cmd_hotspots,
        }

    @property
    def session(self) -> SessionContext:
        return self._session

    async def dispatch(self, event: InboundEvent) -> None:
        """Throttle, route and handle one event."""
        chat_id = event.chat_id
        try:
            self._session.remember_user(chat_id, event.user_name)
            if isinstance(event, ButtonEvent):
                await self._transport.answer_callback(event.callback_id)
            if self._session.rate_limiter.is_limited(chat_id):
                raise RateLimitExceeded(chat_id)
            await self._route(event)
        except RateLimitExceeded as e:
            logger.warning(str(e))
            await self._notify(chat_id, prompts.THROTTLED)
        except Exception as e:
            logger.error(f"Unhandled error for chat {chat_id}: {e}", exc_info=True)
            await self._notify(chat_id, prompts.GENERIC_ERROR, prompts.error_keyboard())

    async def _notify(self, chat_id: int, text: str, keyboard: Keyboard | None = None) -> None:
        try:
            await self._transport.send_message(chat_id, text, keyboard)
        except Exception as e:
            logger.error(f"Could not notify chat {chat_id}: {e}")

    async def _route(self, event: InboundEvent) -> None:
        if isinstance(event, CommandEvent):
            handler = self._commands.get(event.command)
            if handler is None:
                logger.debug(f"Ignoring unknown command /{event.command}")
                return
            await self._run_command(handler, event.chat_id, event.args.strip(), event.user_name)
        elif isinstance(event, LocationEvent):
            await self._on_location(event)
        elif isinstance(event, ButtonEvent):
            await self._on_button(event)
        elif isinstance(event, TextEvent):
            await self._on_text(event)

    async def _run_command(self, handler, chat_id: int, args: str, user_name: str) -> None:
        # Commands start a fresh flow
        self._session.prompts.delete(chat_id)
        await handler(chat_id, args, user_name)

    async def _send(self, chat_id: int, text: str, keyboard: Keyboard | None = None) -> int | None:
        return await self._transport.send_message(chat_id, text, keyboard)

    def _remember_prompt(self, chat_id: int, text: str, keyboard: Keyboard | None, state) -> None:
        self._session.prompts.set(
            chat_id, PromptRecord(text=text, keyboard=keyboard, state_to_restore=state)
        )

    async def _resend_last_prompt(self, chat_id: int) -> None:
        """Re-issue the last prompt and put the chat back on its step."""
        record = self._session.prompts.get(chat_id)
        if record is None:
            return
        await self._send(chat_id, record.text, record.keyboard)
        if record.state_to_restore is not None:
            self._session.states.set(chat_id, record.state_to_restore)
        else:
            self._session.states.delete(chat_id)

    # Commands

    async def _cmd_start(self, chat_id: int, args: str, user_name: str) -> None:
        self._session.states.delete(chat_id)
        await self._send(chat_id, prompts.welcome(user_name))

    async def _cmd_help(self, chat_id: int, args: str = "", user_name: str = "") -> None:
        self._session.states.delete(chat_id)
        await self._send(chat_id, prompts.HELP)

    async def _cmd_regions(self, chat_id: int, args: str, user_name: str) -> None:
        self._session.states.delete(chat_id)
        await self._send(chat_id, prompts.REGIONS)

    async def _cmd_sightings(self, chat_id: int, args: str, user_name: str = "") -> None:
        await self._start_location_search(chat_id, args, QueryType.SIGHTINGS)

    async def _cmd_notable(self, chat_id: int, args: str, user_name: str = "") -> None:
        await self._start_location_search(chat_id, args, QueryType.NOTABLE)

    async def _start_location_search(self, chat_id: int, args: str, query_type: QueryType) -> None:
        self._session.states.delete(chat_id)
        if not args:
            state = AwaitingRegion(query_type=query_type)
            text = (
                prompts.NOTABLE_PROMPT
                if query_type == QueryType.NOTABLE
                else prompts.SIGHTINGS_PROMPT
            )
            self._session.states.set(chat_id, state)
            self._remember_prompt(chat_id, text, None, state)
            await self._send(chat_id, text)
            return

        await self._on_location_text(chat_id, args, query_type)

    async def _cmd_species(self, chat_id: int, args: str, user_name: str = "") -> None:
        self._session.states.delete(chat_id)
        if not args:
            state = AwaitingSpeciesName()
            self._session.states.set(chat_id, state)
            self._remember_prompt(chat_id, prompts.SPECIES_PROMPT, None, state)
            await self._send(chat_id, prompts.SPECIES_PROMPT)
            return

        if "," in args:
            await self._species_with_location(chat_id, args)
        else:
            await self._search_species(chat_id, args)

    async def _cmd_nearby(self, chat_id: int, args: str = "", user_name: str = "") -> None:
        self._session.states.delete(chat_id)
        await self._transport.send_location_request(
            chat_id, prompts.NEARBY_PROMPT, prompts.SHARE_LOCATION_BUTTON
        )

    async def _cmd_hotspots(self, chat_id: int, args: str, user_name: str = "") -> None:
        self._session.states.delete(chat_id)
        if not args:
            state = AwaitingHotspotsRegion()
            self._session.states.set(chat_id, state)
            await self._send(chat_id, prompts.HOTSPOTS_PROMPT)
            return
        await self._show_popular_hotspots(chat_id, args)

    # Free text

    async def _on_text(self, event: TextEvent) -> None:
        chat_id = event.chat_id
        text = (event.text or "").strip()
        state = self._session.states.get(chat_id)
        if state is None or not text:
            return

        if isinstance(state, AwaitingRegion):
            self._session.states.delete(chat_id)
            await self._on_location_text(chat_id, text, state.query_type)

        elif isinstance(state, AwaitingHotspotsRegion):
            self._session.states.delete(chat_id)
            await self._show_popular_hotspots(chat_id, text)

        elif isinstance(state, DateSelection):
            # A new location replaces the one awaiting a date
            self._session.states.delete(chat_id)
            await self._on_location_text(chat_id, text, state.query_type, state.species)

        elif isinstance(state, AwaitingCustomDate):
            await self._on_custom_date(chat_id, text, state)

        elif isinstance(state, HotspotSelection):
            await self._on_hotspot_text(chat_id, text, state)

        elif isinstance(state, AwaitingSpeciesName):
            self._session.states.delete(chat_id)
            if "," in text:
                await self._species_with_location(chat_id, text)
            else:
                await self._search_species(chat_id, text)

        elif isinstance(state, AwaitingSpeciesLocation):
            await self._on_location_text(chat_id, text, QueryType.SPECIES, state.species)

        elif isinstance(state, AwaitingJumpPage):
            self._session.states.delete(chat_id)
            await self._on_jump_page(chat_id, text, state)

        # AwaitingNearbyDistance only accepts the radius buttons

    async def _on_location_text(
        self,
        chat_id: int,
        text: str,
        query_type: QueryType,
        species: SpeciesRef | None = None,
    ) -> None:
        """``place, region`` searches hotspots; anything else is a region."""
        if "," in text:
            await self._place_search(chat_id, text, query_type, species)
        else:
            await self._show_date_selection(
                chat_id, to_region_code(text), text, query_type, species=species
            )

    async def _on_hotspot_text(self, chat_id: int, text: str, state: HotspotSelection) -> None:
        if text.isdigit() and 1 <= int(text) <= len(state.candidates):
            hotspot = state.candidates[int(text) - 1]
            await self._show_date_selection(
                chat_id,
                hotspot.loc_id,
                hotspot.loc_name,
                state.query_type,
                is_hotspot=True,
                species=state.species,
            )
            return
        self._session.states.delete(chat_id)
        await self._on_location_text(chat_id, text, state.query_type, state.species)

    # Location resolution

    async def _place_search(
        self,
        chat_id: int,
        text: str,
        query_type: QueryType,
        species: SpeciesRef | None = None,
    ) -> None:
        place, _, region_input = text.partition(",")
        place = place.strip()
        region_input = region_input.strip()
        if not place or not region_input:
            await self._send(chat_id, prompts.PLACE_FORMAT_ERROR)
            return

        region_code = to_region_code(region_input)
        status_id = await self._send(
            chat_id, f"🔍 Searching for \"*{esc(place)}*\" in *{esc(region_input)}*..."
        )
        try:
            hotspots = await self._source.search_hotspots_by_name(region_code, place)
        except UpstreamFetchError as e:
            logger.error(f"Place search failed for {place!r} in {region_code}: {e}")
            await self._transport.delete_message(chat_id, status_id)
            await self._send(
                chat_id,
                "❌ Error searching for locations. Please try again.\n\n"
                f"💡 You can also search the entire region with just `{esc(region_input)}`",
            )
            await self._resend_last_prompt(chat_id)
            return
        await self._transport.delete_message(chat_id, status_id)

        if not hotspots:
            try:
                popular = await self._source.get_popular_hotspots(region_code, 5)
            except UpstreamFetchError as e:
                logger.warning(f"Popular hotspots unavailable for {region_code}: {e}")
                popular = []
            await self._send(chat_id, prompts.no_place_matches(place, region_input, popular))
            await self._resend_last_prompt(chat_id)
            return

        if len(hotspots) == 1:
            hotspot = hotspots[0]
            await self._show_date_selection(
                chat_id,
                hotspot.loc_id,
                hotspot.loc_name,
                query_type,
                is_hotspot=True,
                species=species,
            )
            return

        candidates = hotspots[:MAX_HOTSPOT_CANDIDATES]
        state = HotspotSelection(query_type=query_type, candidates=candidates, species=species)
        text = prompts.hotspot_selection(candidates, region_input)
        keyboard = prompts.hotspot_keyboard(query_type, candidates)
        self._session.states.set(chat_id, state)
        self._remember_prompt(chat_id, text, keyboard, state)
        await self._send(chat_id, text, keyboard)

    async def _show_date_selection(
        self,
        chat_id: int,
        region_code: str | None,
        display_name: str,
        query_type: QueryType,
        is_hotspot: bool = False,
        species: SpeciesRef | None = None,
    ) -> None:
        try:
            if not region_code:
                raise ValueError("empty region code")
            keyboard = prompts.date_keyboard(query_type, region_code)
        except ValueError:
            # Empty, or too long to fit in a button payload
            await self._send(chat_id, prompts.unknown_location(display_name))
            return

        state = DateSelection(
            region_code=region_code,
            display_name=display_name,
            query_type=query_type,
            is_hotspot=is_hotspot,
            species=species,
        )
        text = prompts.date_selection(display_name, species.common_name if species else None)
        self._session.states.set(chat_id, state)
        self._remember_prompt(chat_id, text, keyboard, state)
        await self._send(chat_id, text, keyboard)

    async def _show_popular_hotspots(self, chat_id: int, user_input: str) -> None:
        region_code = to_region_code(user_input)
        status_id = await self._send(
            chat_id,
            f"🔍 Finding popular birding hotspots in *{esc(user_input)}* ({region_code})...",
        )
        try:
            hotspots = await self._source.get_popular_hotspots(region_code, 15)
        except UpstreamFetchError as e:
            logger.error(f"Hotspot lookup failed for {region_code}: {e}")
            await self._transport.delete_message(chat_id, status_id)
            await self._send(chat_id, f"❌ Could not fetch hotspots for *{esc(user_input)}*.")
            return
        await self._transport.delete_message(chat_id, status_id)

        if not hotspots:
            await self._send(chat_id, f"❌ No hotspots found for *{esc(user_input)}*.")
            return

        await self._send(
            chat_id,
            prompts.popular_hotspots(hotspots, user_input),
            prompts.popular_hotspots_keyboard(hotspots),
        )

    # Species

    async def _search_species(self, chat_id: int, name: str) -> None:
        status_id = await self._send(chat_id, f"🔍 Searching for *{esc(name)}* in eBird database...")
        try:
            matches = await self._source.search_species_by_name(name)
        except UpstreamFetchError as e:
            logger.error(f"Species search failed for {name!r}: {e}")
            await self._transport.delete_message(chat_id, status_id)
            await self._send(chat_id, "❌ Error searching for species. Please try again.")
            return
        await self._transport.delete_message(chat_id, status_id)

        if not matches:
            await self._send(chat_id, prompts.species_not_found(name))
            return

        best = matches[0]
        species = SpeciesRef(
            code=best.species_code,
            common_name=best.common_name,
            scientific_name=best.scientific_name,
        )
        state = AwaitingSpeciesLocation(species=species)
        text = prompts.species_found(best, matches[1:5])
        self._session.states.set(chat_id, state)
        self._remember_prompt(chat_id, text, None, state)
        await self._send(chat_id, text)

    async def _species_with_location(self, chat_id: int, text: str) -> None:
        """``location, species name``: look the species up, then ask for a date."""
        location, _, species_input = text.partition(",")
        location = location.strip()
        species_input = species_input.strip()
        if not location or not species_input:
            await self._send(chat_id, prompts.SPECIES_FORMAT_ERROR)
            return

        status_id = await self._send(chat_id, f"🔍 Looking up *{esc(species_input)}*...")
        try:
            matches = await self._source.search_species_by_name(species_input)
        except UpstreamFetchError as e:
            logger.error(f"Species search failed for {species_input!r}: {e}")
            await self._transport.delete_message(chat_id, status_id)
            await self._send(chat_id, "❌ Error searching for species. Please try again.")
            return
        await self._transport.delete_message(chat_id, status_id)

        if not matches:
            await self._send(
                chat_id,
                f"❌ Species \"*{esc(species_input)}*\" not found.\n\n"
                "💡 Try the exact species name as it appears in eBird.",
            )
            return

        best = matches[0]
        species = SpeciesRef(
            code=best.species_code,
            common_name=best.common_name,
            scientific_name=best.scientific_name,
        )
        await self._show_date_selection(
            chat_id, to_region_code(location), location, QueryType.SPECIES, species=species
        )

    # Dates

    async def _on_date_choice(self, chat_id: int, payload: ButtonPayload) -> None:
        query_type = payload.query_type
        region_code = payload.region_code
        state = self._session.states.get(chat_id)

        if isinstance(state, (DateSelection, AwaitingCustomDate)) and state.region_code == region_code:
            display_name = state.display_name
            is_hotspot = state.is_hotspot
            species = state.species
        else:
            display_name, is_hotspot, species = region_code, False, None

        self._session.states.delete(chat_id)

        if payload.preset == CUSTOM_PRESET:
            custom = AwaitingCustomDate(
                region_code=region_code,
                display_name=display_name,
                query_type=query_type,
                is_hotspot=is_hotspot,
                species=species,
            )
            self._session.states.set(chat_id, custom)
            self._remember_prompt(chat_id, prompts.CUSTOM_DATE_PROMPT, None, custom)
            await self._send(chat_id, prompts.CUSTOM_DATE_PROMPT)
            return

        date_filter = self._resolver.get_preset(payload.preset, region_code)
        await self._run_search(
            chat_id, query_type, region_code, display_name, date_filter, is_hotspot, species
        )

    async def _on_custom_date(self, chat_id: int, text: str, state: AwaitingCustomDate) -> None:
        """Bad input keeps the chat on this step so the user can retype."""
        try:
            date_filter = self._resolver.parse_custom_range(text, state.region_code)
        except RangeLimitError as e:
            await self._send(
                chat_id,
                prompts.range_limit(format_ddmmyyyy(e.earliest), format_ddmmyyyy(e.latest)),
            )
            return

        if date_filter is None:
            await self._send(chat_id, prompts.INVALID_DATE)
            return

        self._session.states.delete(chat_id)
        await self._run_search(
            chat_id,
            state.query_type,
            state.region_code,
            state.display_name,
            date_filter,
            state.is_hotspot,
            state.species,
        )

    # Fetching

    async def _fetch(
        self,
        query_type: QueryType,
        region_code: str,
        lookback: int,
        is_hotspot: bool,
        species: SpeciesRef | None,
    ) -> list[Observation]:
        if query_type == QueryType.SPECIES:
            return await self._source.get_species_observations(region_code, species.code, lookback)
        if is_hotspot:
            # No notable endpoint exists for a single hotspot
            return await self._source.get_hotspot_observations(
                region_code, lookback, UPSTREAM_MAX_RESULTS
            )
        if query_type == QueryType.NOTABLE:
            return await self._source.get_notable_observations(
                region_code, lookback, UPSTREAM_MAX_RESULTS
            )
        return await self._source.get_recent_observations(
            region_code, lookback, UPSTREAM_MAX_RESULTS
        )

    async def _run_search(
        self,
        chat_id: int,
        query_type: QueryType,
        region_code: str,
        display_name: str,
        date_filter: DateFilter,
        is_hotspot: bool = False,
        species: SpeciesRef | None = None,
    ) -> None:
        """Fetch, filter, cache and show the first page of a new search."""
        if query_type == QueryType.SPECIES and species is None:
            await self._send(chat_id, prompts.SEARCH_EXPIRED)
            return

        label = date_filter.label
        place = "📍 Hotspot" if is_hotspot else "🗺️ Region"
        if query_type == QueryType.SPECIES:
            status = (
                f"🔍 Searching for *{esc(species.common_name)}* in *{esc(display_name)}*\n"
                f"📅 {label}..."
            )
            what = f"{species.common_name} in {display_name}"
        else:
            kind = "notable sightings" if query_type == QueryType.NOTABLE else "sightings"
            status = (
                f"🔍 Searching for {kind} in *{esc(display_name)}*\n"
                f"{place}: {region_code}\n📅 {label}..."
            )
            what = display_name

        status_id = await self._send(chat_id, status)
        try:
            fetched = await self._fetch(
                query_type, region_code, date_filter.lookback_days, is_hotspot, species
            )
        except UpstreamFetchError as e:
            logger.error(
                "Search failed",
                extra={
                    "context": {
                        "chat_id": chat_id,
                        "query_type": query_type.value,
                        "region_code": region_code,
                        "error": str(e),
                    }
                },
            )
            await self._transport.delete_message(chat_id, status_id)
            await self._send(
                chat_id,
                f"❌ Could not fetch {query_type.value} for *{esc(display_name)}*.\n\n"
                "Please check the location and try again.",
                prompts.error_keyboard(),
            )
            await self._resend_last_prompt(chat_id)
            return

        observations = self._resolver.filter_observations(fetched, date_filter)
        await self._transport.delete_message(chat_id, status_id)

        if not observations:
            await self._send(
                chat_id,
                f"❌ No observations found for *{esc(what)}* in the selected time range.",
            )
            await self._resend_last_prompt(chat_id)
            return

        result_set = CachedResultSet(
            items=observations,
            display_name=f"{what} ({label})",
            region_code=region_code,
            query_type=query_type,
            date_label=label,
            date_filter=date_filter,
            is_hotspot=is_hotspot,
            fetched_at=datetime.now(timezone.utc),
        )
        self._session.results.put(query_type, chat_id, result_set)
        logger.info(
            "Search completed",
            extra={
                "context": {
                    "chat_id": chat_id,
                    "query_type": query_type.value,
                    "region_code": region_code,
                    "fetched": len(fetched),
                    "kept": len(observations),
                }
            },
        )
        self._publish_search(chat_id, query_type, what, region_code, observations)
        await self._show_page(chat_id, result_set, 0)

    def _publish_search(
        self,
        chat_id: int,
        query_type: QueryType,
        query: str,
        region_code: str | None,
        observations: list[Observation],
    ) -> None:
        if self._event_bus is None:
            return
        payload = search_completed_payload(
            chat_id=chat_id,
            username=self._session.user_name(chat_id),
            command=query_type.value,
            query=query,
            region_code=region_code,
            observations=observations,
        )
        self._event_bus.publish_nowait(
            new_message(Topic.SEARCH_COMPLETED, payload, source="dialog_orchestrator")
        )

    # Nearby

    async def _on_location(self, event: LocationEvent) -> None:
        state = AwaitingNearbyDistance(latitude=event.latitude, longitude=event.longitude)
        self._session.states.set(event.chat_id, state)
        await self._send(
            event.chat_id,
            prompts.location_received(event.latitude, event.longitude),
            prompts.distance_keyboard(),
        )

    async def _fetch_nearby(
        self, chat_id: int, latitude: float, longitude: float, distance_km: int
    ) -> None:
        """Observations and hotspots are fetched independently; show whatever succeeded."""
        status_id = await self._send(
            chat_id, f"🔍 Searching for sightings within *{distance_km} km*..."
        )

        observations: list[Observation] = []
        hotspots = []
        failures = 0
        try:
            observations = await self._source.get_nearby_observations(
                latitude, longitude, distance_km
            )
        except UpstreamFetchError as e:
            failures += 1
            logger.error(f"Error fetching nearby observations: {e}")
        try:
            hotspots = await self._source.get_nearby_hotspots(latitude, longitude, distance_km)
        except UpstreamFetchError as e:
            failures += 1
            logger.error(f"Error fetching nearby hotspots: {e}")

        await self._transport.delete_message(chat_id, status_id)

        if failures == 2:
            await self._send(
                chat_id,
                "❌ Could not fetch nearby sightings. Please try again later.",
                prompts.nearby_retry_keyboard(),
            )
            return

        if observations:
            display_name = f"Your Location ({distance_km} km)"
            region_code = observations[0].country_code
            result_set = CachedResultSet(
                items=observations,
                display_name=display_name,
                region_code=region_code,
                query_type=QueryType.NEARBY,
                fetched_at=datetime.now(timezone.utc),
            )
            self._session.results.put(QueryType.NEARBY, chat_id, result_set)
            self._publish_search(
                chat_id, QueryType.NEARBY, f"Nearby ({distance_km} km)", region_code, observations
            )
            await self._show_page(chat_id, result_set, 0)
        else:
            await self._send(
                chat_id,
                f"❌ No bird sightings found within *{distance_km} km* of your location.\n\n"
                "Try a larger search radius or a different location.",
            )

        if hotspots:
            await self._send(chat_id, prompts.nearby_hotspots(hotspots))

        await self._send(chat_id, prompts.NEXT_STEP, prompts.next_step_keyboard())

    # Cached result views

    async def _show_page(
        self,
        chat_id: int,
        result_set: CachedResultSet,
        page_index: int,
        message_id: int | None = None,
    ) -> None:
        """Render a page, editing ``message_id`` in place when given."""
        page = paginate(result_set.items, ITEMS_PER_PAGE, page_index)
        tz_abbr = self._resolver.timezone_abbreviation(result_set.region_code)
        message = render_page(result_set, page, tz_abbr)

        if message_id:
            try:
                await self._transport.edit_message(
                    chat_id, message_id, message.text, message.keyboard
                )
                return
            except RenderError as e:
                logger.info(f"Edit of message {message_id} failed, sending new: {e}")

        await self._send(chat_id, message.text, message.keyboard)

    async def _on_jump_page(self, chat_id: int, text: str, state: AwaitingJumpPage) -> None:
        try:
            page_index = page_index_from_user(text, state.total_pages)
        except InvalidPageError as e:
            await self._send(chat_id, f"❌ {e}")
            return

        cached = self._session.results.get(state.query_type, chat_id)
        if cached is None:
            # Cache entries do not survive a restart, conversation steps do
            await self._send(chat_id, prompts.RESULTS_EXPIRED, prompts.expired_keyboard())
            return
        await self._show_page(chat_id, cached, page_index, state.message_id)

    async def _send_parts(self, chat_id: int, messages) -> None:
        for message in messages:
            await self._send(chat_id, message.text, message.keyboard)

    # Buttons

    async def _on_button(self, event: ButtonEvent) -> None:
        chat_id = event.chat_id
        payload = decode(event.payload)
        if payload is None:
            logger.warning(f"Unrecognised button payload {event.payload!r}")
            return

        action = payload.action

        if action == Action.PAGE_INFO:
            return

        if action == Action.DATE:
            await self._on_date_choice(chat_id, payload)
            return

        if action in (
            Action.PAGE,
            Action.JUMP,
            Action.SUMMARY,
            Action.FULL_LIST,
            Action.SHARE,
            Action.GENERATE_SHARE,
        ):
            await self._on_result_action(chat_id, payload, event.message_id)
            return

        if action == Action.CANCEL_SHARE:
            await self._send(chat_id, prompts.SHARE_CANCELLED)
        elif action == Action.HOTSPOT:
            await self._on_hotspot_choice(chat_id, payload)
        elif action == Action.NEARBY_DISTANCE:
            state = self._session.states.get(chat_id)
            if isinstance(state, AwaitingNearbyDistance):
                self._session.states.delete(chat_id)
                await self._fetch_nearby(
                    chat_id, state.latitude, state.longitude, payload.distance_km
                )
            else:
                await self._send(chat_id, prompts.SHARE_LOCATION_AGAIN)
        elif action == Action.COMMAND:
            handler = self._commands.get(payload.command)
            if handler is None:
                logger.warning(f"Unknown command shortcut {payload.command!r}")
                return
            await self._run_command(
                handler, chat_id, "", self._session.user_names.get(chat_id, "")
            )
        elif action == Action.NEW_SEARCH:
            self._session.states.delete(chat_id)
            await self._send(chat_id, prompts.NEW_SEARCH, prompts.new_search_keyboard())
        elif action == Action.DONE:
            self._session.states.delete(chat_id)
            await self._send(chat_id, prompts.DONE)
        elif action == Action.HELP:
            await self._cmd_help(chat_id)
        elif action == Action.REQUEST_LOCATION:
            await self._cmd_nearby(chat_id)

    async def _on_hotspot_choice(self, chat_id: int, payload: ButtonPayload) -> None:
        state = self._session.states.get(chat_id)
        display_name = payload.loc_id
        species = None
        if isinstance(state, HotspotSelection):
            species = state.species
            for hotspot in state.candidates:
                if hotspot.loc_id == payload.loc_id:
                    display_name = hotspot.loc_name
                    break
        await self._show_date_selection(
            chat_id,
            payload.loc_id,
            display_name,
            payload.query_type,
            is_hotspot=True,
            species=species,
        )

    async def _on_result_action(
        self, chat_id: int, payload: ButtonPayload, message_id: int | None
    ) -> None:
        """Views over a cached result set. None of them fetch."""
        action = payload.action
        query_type = payload.query_type
        cached = self._session.results.get(query_type, chat_id)

        if cached is None:
            if action in (Action.SHARE, Action.GENERATE_SHARE):
                await self._send(chat_id, prompts.UNABLE_TO_SHARE)
            else:
                await self._send(chat_id, prompts.NO_CACHED_RESULTS)
            return

        if action == Action.PAGE:
            try:
                await self._show_page(chat_id, cached, payload.page_index, message_id)
            except InvalidPageError as e:
                await self._send(chat_id, f"❌ {e}")
            return

        if action == Action.JUMP:
            total_pages = paginate(cached.items, ITEMS_PER_PAGE, 0).total_pages
            self._session.states.set(
                chat_id,
                AwaitingJumpPage(
                    query_type=query_type, total_pages=total_pages, message_id=message_id
                ),
            )
            await self._send(chat_id, prompts.jump_prompt(total_pages))
            return

        if action == Action.SHARE:
            await self._send(chat_id, prompts.SHARE_OPTIONS, prompts.share_keyboard(query_type))
            return

        tz_abbr = self._resolver.timezone_abbreviation(cached.region_code)
        if action == Action.SUMMARY:
            status_id = await self._send(chat_id, "📊 *Generating species summary...*")
            summary = render_summary(cached, tz_abbr)
            await self._send(chat_id, summary.text)
        elif action == Action.FULL_LIST:
            status_id = await self._send(chat_id, "📋 *Generating full list...*")
            await self._send_parts(chat_id, render_full_list(cached, tz_abbr))
        else:
            status_id = await self._send(
                chat_id,
                "📤 *Generating shareable list...*\n\n"
                "_Long-press or use the forward button ↗️ to share these messages:_",
            )
            await self._send_parts(chat_id, render_share(cached, tz_abbr))
        await self._transport.delete_message(chat_id, status_id)
