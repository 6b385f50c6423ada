"""HTTP access to GBFS feeds.

Example:
    >>> from gbfsexporter.http import GBFSClient
    >>>
    >>> async with GBFSClient("https://gbfs.baywheels.com/gbfs/en") as client:
    ...     info = await client.fetch_station_information()
"""

from gbfsexporter.http.client import GBFSClient

__all__ = [
    "GBFSClient",
]
