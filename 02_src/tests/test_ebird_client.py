"""Tests for EBirdClient and name matching."""

import httpx
import pytest

from birdbot.ebird import EBirdClient, rank_hotspots, rank_species, to_region_code
from birdbot.errors import UpstreamFetchError
from birdbot.models import Hotspot, SpeciesMatch

BASE_URL = "https://api.ebird.org/v2"


def make_client(handler) -> tuple[EBirdClient, list[httpx.Request]]:
    requests = []

    def recording(request: httpx.Request):
        requests.append(request)
        return handler(request)

    http_client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(recording))
    return EBirdClient(api_key="test-key", http_client=http_client), requests


def hotspot(loc_id, name, species=None):
    return Hotspot.model_validate({"locId": loc_id, "locName": name, "numSpeciesAllTime": species})


def species(code, name, sci=""):
    return SpeciesMatch.model_validate({"speciesCode": code, "comName": name, "sciName": sci})


class TestEBirdClientConfig:
    """Tests for construction."""

    def test_requires_api_key(self, monkeypatch):
        """Test that a missing key fails at startup."""
        monkeypatch.delenv("EBIRD_API_KEY", raising=False)
        with pytest.raises(ValueError):
            EBirdClient()

    @pytest.mark.asyncio
    async def test_sends_token_header(self):
        """Test that the API key goes in the eBird token header."""
        client = EBirdClient(api_key="secret")
        try:
            assert client._client.headers["X-eBirdApiToken"] == "secret"
        finally:
            await client.close()


class TestEBirdClientRequests:
    """Tests for endpoint calls."""

    @pytest.mark.asyncio
    async def test_recent_observations(self):
        """Test path, query and parsing."""
        client, requests = make_client(
            lambda request: httpx.Response(
                200,
                json=[
                    {
                        "speciesCode": "houspa",
                        "comName": "House Sparrow",
                        "sciName": "Passer domesticus",
                        "locName": "Botanic Gardens",
                        "obsDt": "2026-02-14 08:30",
                        "howMany": 4,
                    }
                ],
            )
        )
        observations = await client.get_recent_observations("sg", 7, 100)

        assert requests[0].url.path == "/v2/data/obs/SG/recent"
        assert requests[0].url.params["back"] == "7"
        assert requests[0].url.params["maxResults"] == "100"
        assert observations[0].common_name == "House Sparrow"
        assert observations[0].how_many == 4

    @pytest.mark.asyncio
    async def test_nearby_observations(self):
        """Test the geo endpoint parameters."""
        client, requests = make_client(lambda request: httpx.Response(200, json=[]))
        assert await client.get_nearby_observations(1.35, 103.85, 10) == []
        params = requests[0].url.params
        assert requests[0].url.path == "/v2/data/obs/geo/recent"
        assert params["lat"] == "1.35"
        assert params["dist"] == "10"

    @pytest.mark.asyncio
    async def test_hotspots_request_json(self):
        """Test that hotspot lookups ask for JSON."""
        client, requests = make_client(
            lambda request: httpx.Response(200, json=[{"locId": "L1", "locName": "Park"}])
        )
        hotspots = await client.get_hotspots("SG")
        assert requests[0].url.params["fmt"] == "json"
        assert hotspots[0].loc_id == "L1"

    @pytest.mark.asyncio
    async def test_popular_hotspots_sorted_by_species(self):
        """Test ordering and limit."""
        client, _ = make_client(
            lambda request: httpx.Response(
                200,
                json=[
                    {"locId": "L1", "locName": "Small", "numSpeciesAllTime": 10},
                    {"locId": "L2", "locName": "Big", "numSpeciesAllTime": 300},
                    {"locId": "L3", "locName": "Unknown"},
                ],
            )
        )
        popular = await client.get_popular_hotspots("SG", 2)
        assert [h.loc_id for h in popular] == ["L2", "L1"]

    @pytest.mark.asyncio
    async def test_taxonomy_loaded_once(self):
        """Test that repeated species searches reuse the taxonomy."""
        client, requests = make_client(
            lambda request: httpx.Response(
                200,
                json=[
                    {"speciesCode": "houspa", "comName": "House Sparrow", "sciName": "Passer domesticus"},
                    {"speciesCode": "commyn", "comName": "Common Myna", "sciName": "Acridotheres tristis"},
                ],
            )
        )
        first = await client.search_species_by_name("sparrow")
        second = await client.search_species_by_name("myna")
        assert len(requests) == 1
        assert requests[0].url.params["cat"] == "species"
        assert first[0].species_code == "houspa"
        assert second[0].species_code == "commyn"


class TestEBirdClientErrors:
    """Tests for failure mapping."""

    @pytest.mark.asyncio
    async def test_http_error(self):
        """Test that a 5xx becomes UpstreamFetchError."""
        client, _ = make_client(lambda request: httpx.Response(500, text="oops"))
        with pytest.raises(UpstreamFetchError):
            await client.get_recent_observations("SG")

    @pytest.mark.asyncio
    async def test_network_error(self):
        """Test that a connection failure becomes UpstreamFetchError."""

        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client, _ = make_client(handler)
        with pytest.raises(UpstreamFetchError):
            await client.get_notable_observations("SG")

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        """Test that a non-JSON body becomes UpstreamFetchError."""
        client, _ = make_client(lambda request: httpx.Response(200, content=b"L1,Park,1.3"))
        with pytest.raises(UpstreamFetchError):
            await client.get_hotspots("SG")

    @pytest.mark.asyncio
    async def test_unexpected_shape(self):
        """Test that a payload of the wrong shape becomes UpstreamFetchError."""
        client, _ = make_client(lambda request: httpx.Response(200, json=[1, 2, 3]))
        with pytest.raises(UpstreamFetchError):
            await client.get_recent_observations("SG")


class TestRanking:
    """Tests for local name matching."""

    def test_rank_hotspots(self):
        """Test exact match first and filler words ignored."""
        hotspots = [
            hotspot("L1", "Singapore Botanic Gardens", 300),
            hotspot("L2", "Botanic Gardens", 100),
            hotspot("L3", "Jurong Lake Gardens", 400),
        ]
        ranked = rank_hotspots(hotspots, "Botanic Gardens")
        assert [h.loc_id for h in ranked] == ["L2", "L1"]

    def test_rank_hotspots_word_match(self):
        """Test that half the significant words are enough."""
        hotspots = [hotspot("L1", "Sungei Buloh Wetland Reserve")]
        assert rank_hotspots(hotspots, "Buloh wetlands") == hotspots

    def test_rank_species(self):
        """Test that prefix matches come first."""
        taxonomy = [
            species("houspa", "House Sparrow"),
            species("eurspa", "Eurasian Sparrowhawk"),
            species("spalar", "Sparrow Lark"),
            species("commyn", "Common Myna"),
        ]
        ranked = rank_species(taxonomy, "sparrow")
        assert [s.species_code for s in ranked] == ["spalar", "eurspa", "houspa"]
        assert rank_species(taxonomy, "  ") == []

    def test_rank_species_scientific_name(self):
        """Test matching on the scientific name."""
        taxonomy = [species("houspa", "House Sparrow", "Passer domesticus")]
        assert rank_species(taxonomy, "passer")[0].species_code == "houspa"


class TestToRegionCode:
    """Tests for region name lookup."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Singapore", "SG"),
            ("  singapore ", "SG"),
            ("uk", "GB"),
            ("UK", "GB"),
            ("us-ny", "US-NY"),
            ("US-CA-037", "US-CA-037"),
            ("sg", "SG"),
            ("New York", "US-NY"),
        ],
    )
    def test_known(self, text, expected):
        """Test names and codes."""
        assert to_region_code(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty(self, text):
        """Test that blank input has no region."""
        assert to_region_code(text) is None
