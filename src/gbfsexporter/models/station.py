"""Station feeds: station_information.json and station_status.json."""

from __future__ import annotations

from pydantic import Field, StrictBool, StrictFloat, StrictInt, StrictStr

from gbfsexporter.models.base import FeedEnvelope, GBFSModel


class StationInformation(GBFSModel):
    """Static station inventory record.

    Example:
        >>> info = StationInformation.model_validate(
        ...     {"station_id": "1", "name": "Main St", "capacity": 15}
        ... )
        >>> info.capacity
        15
        >>> info.has_kiosk
        False
    """

    station_id: StrictStr = ""
    name: StrictStr = ""
    short_name: StrictStr = ""
    station_type: StrictStr = ""
    lat: StrictFloat = 0.0
    lon: StrictFloat = 0.0
    external_id: StrictStr = ""
    capacity: StrictInt = 0
    has_kiosk: StrictBool = False
    electric_bike_surcharge_waiver: StrictBool = False


class StationStatus(GBFSModel):
    """Live status of one station.

    The ``is_*`` flags are published as 0/1 integers and are kept numeric.
    """

    station_id: StrictStr = ""
    is_installed: StrictInt = 0
    is_renting: StrictInt = 0
    is_returning: StrictInt = 0
    last_reported: StrictInt = 0
    num_bikes_available: StrictInt = 0
    num_bikes_disabled: StrictInt = 0
    num_docks_available: StrictInt = 0
    num_docks_disabled: StrictInt = 0
    num_ebikes_available: StrictInt = 0
    num_scooters_available: StrictInt = 0
    num_scooters_unavailable: StrictInt = 0


class _StationInformationData(GBFSModel):
    stations: list[StationInformation] = Field(default_factory=list)


class _StationStatusData(GBFSModel):
    stations: list[StationStatus] = Field(default_factory=list)


class StationInformationResponse(FeedEnvelope):
    """``{"data": {"stations": [...]}}`` envelope of station_information.json."""

    data: _StationInformationData = Field(default_factory=_StationInformationData)

    @property
    def stations(self) -> list[StationInformation]:
        return self.data.stations


class StationStatusResponse(FeedEnvelope):
    """``{"data": {"stations": [...]}}`` envelope of station_status.json."""

    data: _StationStatusData = Field(default_factory=_StationStatusData)

    @property
    def stations(self) -> list[StationStatus]:
        return self.data.stations
