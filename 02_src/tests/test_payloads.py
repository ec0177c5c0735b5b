"""Tests for the button payload codec."""

import pytest

from birdbot.dialogue.payloads import (
    Action,
    decode,
    encode_date,
    encode_hotspot,
    encode_nearby_distance,
    encode_page,
)
from birdbot.models import QueryType


class TestEncode:
    """Tests for encoders."""

    def test_date_payload(self):
        """Test that presets with underscores sit in their own segment."""
        payload = encode_date(QueryType.SIGHTINGS, "last_3_days", "US-NY")
        assert payload == "date:sightings:last_3_days:US-NY"
        decoded = decode(payload)
        assert decoded.action == Action.DATE
        assert decoded.query_type == QueryType.SIGHTINGS
        assert decoded.preset == "last_3_days"
        assert decoded.region_code == "US-NY"

    def test_page_payload(self):
        """Test page payload round trip."""
        decoded = decode(encode_page(QueryType.NOTABLE, 4))
        assert decoded.action == Action.PAGE
        assert decoded.page_index == 4

    def test_hotspot_and_distance(self):
        """Test hotspot and nearby radius payloads."""
        assert decode(encode_hotspot(QueryType.SPECIES, "L1234567")).loc_id == "L1234567"
        assert decode(encode_nearby_distance(15)).distance_km == 15

    def test_unknown_preset_rejected(self):
        """Test that only known presets are encoded."""
        with pytest.raises(ValueError):
            encode_date(QueryType.SIGHTINGS, "fortnight", "SG")

    def test_payload_size_limit(self):
        """Test that payloads over 64 bytes are refused."""
        with pytest.raises(ValueError):
            encode_date(QueryType.SIGHTINGS, "today", "X" * 60)


class TestDecodeLegacy:
    """Tests for underscore payloads already in chat history."""

    @pytest.mark.parametrize(
        "payload,preset,region",
        [
            ("date_sightings_today_SG", "today", "SG"),
            ("date_sightings_last_3_days_SG", "last_3_days", "SG"),
            ("date_notable_last_14_days_US-NY", "last_14_days", "US-NY"),
            ("date_sightings_last_week_MY", "last_week", "MY"),
            ("date_species_custom_L123456", "custom", "L123456"),
        ],
    )
    def test_date(self, payload, preset, region):
        """Test that every preset is recovered by name."""
        decoded = decode(payload)
        assert decoded.action == Action.DATE
        assert decoded.preset == preset
        assert decoded.region_code == region

    def test_page(self):
        """Test legacy page payload."""
        decoded = decode("page_sightings_1")
        assert decoded.action == Action.PAGE
        assert decoded.query_type == QueryType.SIGHTINGS
        assert decoded.page_index == 1

    def test_generate_share_not_confused_with_share(self):
        """Test prefix precedence."""
        assert decode("generate_share_nearby").action == Action.GENERATE_SHARE
        assert decode("share_nearby").action == Action.SHARE

    def test_misc(self):
        """Test hotspot, distance and command shortcuts."""
        assert decode("hotspot_sightings_L99").loc_id == "L99"
        assert decode("nearby_dist_10").distance_km == 10
        assert decode("cmd_start").command == "start"
        assert decode("specsummary_notable").action == Action.SUMMARY
        assert decode("fulllist_species").action == Action.FULL_LIST
        assert decode("jump_nearby").query_type == QueryType.NEARBY


class TestDecodeFixedAndInvalid:
    """Tests for fixed tokens and garbage."""

    @pytest.mark.parametrize(
        "token,action",
        [
            ("page_info", Action.PAGE_INFO),
            ("cancel_share", Action.CANCEL_SHARE),
            ("new_search", Action.NEW_SEARCH),
            ("done", Action.DONE),
            ("help", Action.HELP),
            ("request_location", Action.REQUEST_LOCATION),
        ],
    )
    def test_fixed_tokens(self, token, action):
        """Test fixed tokens decode to their action."""
        assert decode(token).action == action

    @pytest.mark.parametrize(
        "payload",
        [
            "",
            "bogus",
            "date:sightings:fortnight:SG",
            "date:birds:today:SG",
            "page:sightings:x",
            "date_sightings_fortnight_SG",
            "hotspot:sightings:",
            "cmd:",
        ],
    )
    def test_invalid_returns_none(self, payload):
        """Test that unrecognised payloads decode to None."""
        assert decode(payload) is None
