"""Base models shared by the GBFS feed schemas.

GBFS publishers are loose with optional fields, so records follow zero-value
semantics: a missing or ``null`` field takes the type's zero value instead of
failing the whole document, and a ``null`` list element becomes an all-zero
record. Fields are strictly typed: ``"15"`` for a count, ``1`` for a boolean
or ``true`` for a 0/1 flag fails decoding of the whole document.

Example:
    >>> from gbfsexporter.models.station import StationInformation
    >>> StationInformation.model_validate({"station_id": "1", "name": None}).name
    ''
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictInt, model_validator


class Feed(str, Enum):
    """GBFS feeds sampled on every pass.

    The value is the document name under the feed base URL.

    Example:
        >>> Feed.STATION_STATUS.filename
        'station_status.json'
    """

    STATION_INFORMATION = "station_information"
    STATION_STATUS = "station_status"
    FREE_BIKE_STATUS = "free_bike_status"

    @property
    def filename(self) -> str:
        return f"{self.value}.json"


class GBFSModel(BaseModel):
    """Base model with standard configuration for feed records."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # a null record decodes as an all-zero record
        if data is None:
            return {}
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class FeedEnvelope(GBFSModel):
    """Fields common to every GBFS document."""

    last_updated: StrictInt | None = None
    ttl: StrictInt | None = None
