"""Free-floating vehicle feed: free_bike_status.json."""

from __future__ import annotations

from pydantic import Field, StrictFloat, StrictInt, StrictStr

from gbfsexporter.models.base import FeedEnvelope, GBFSModel


class BikeStatus(GBFSModel):
    """One free bike. Flags are 0/1 integers as published.

    Example:
        >>> bike = BikeStatus.model_validate({"bike_id": "b1", "is_disabled": 1})
        >>> bike.is_disabled, bike.is_reserved
        (1, 0)
    """

    bike_id: StrictStr = ""
    is_disabled: StrictInt = 0
    is_reserved: StrictInt = 0
    lat: StrictFloat = 0.0
    lon: StrictFloat = 0.0


class _FreeBikeStatusData(GBFSModel):
    bikes: list[BikeStatus] = Field(default_factory=list)


class FreeBikeStatusResponse(FeedEnvelope):
    """``{"data": {"bikes": [...]}}`` envelope of free_bike_status.json."""

    data: _FreeBikeStatusData = Field(default_factory=_FreeBikeStatusData)

    @property
    def bikes(self) -> list[BikeStatus]:
        return self.data.bikes
