"""Records returned by the eBird API."""

from pydantic import BaseModel, ConfigDict, Field


class _EBirdRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Observation(_EBirdRecord):
    """One species sighting at one location."""

    species_code: str = Field("", alias="speciesCode")
    common_name: str = Field("", alias="comName")
    scientific_name: str = Field("", alias="sciName")
    loc_id: str = Field("", alias="locId")
    loc_name: str = Field("", alias="locName")
    obs_dt: str | None = Field(None, alias="obsDt")  # "YYYY-MM-DD HH:MM", time optional
    how_many: int | None = Field(None, alias="howMany")
    lat: float | None = None
    lng: float | None = None
    country_code: str | None = Field(None, alias="countryCode")
    subnational1_code: str | None = Field(None, alias="subnational1Code")
    user_display_name: str | None = Field(None, alias="userDisplayName")
    sub_id: str | None = Field(None, alias="subId")

    @property
    def species_key(self) -> str:
        return self.species_code or self.common_name

    @property
    def count(self) -> int:
        return self.how_many or 1


class Hotspot(_EBirdRecord):
    """A named public birding location."""

    loc_id: str = Field(alias="locId")
    loc_name: str = Field("", alias="locName")
    country_code: str | None = Field(None, alias="countryCode")
    subnational1_code: str | None = Field(None, alias="subnational1Code")
    lat: float | None = None
    lng: float | None = None
    latest_obs_dt: str | None = Field(None, alias="latestObsDt")
    num_species_all_time: int | None = Field(None, alias="numSpeciesAllTime")


class SpeciesMatch(_EBirdRecord):
    """Taxonomy entry for a species."""

    species_code: str = Field(alias="speciesCode")
    common_name: str = Field("", alias="comName")
    scientific_name: str = Field("", alias="sciName")
    category: str | None = None
