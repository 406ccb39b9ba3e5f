"""
Best-effort visitor geolocation.

Two stages: a trusted IP lookup, then an ipapi.co style JSON lookup of that
IP. Any failure yields an all-null GeoLocation; resolution never raises.
"""

import ipaddress
import logging
from typing import Any, Callable, Optional

import requests

from ..backend import BackendClient
from ..models.results import GeoLocation

logger = logging.getLogger(__name__)

IpLookup = Callable[[], Optional[str]]

DEFAULT_GEOLOCATION_URL = "https://ipapi.co"


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def is_public_ip(ip: str) -> bool:
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return address.is_global


def backend_ip_lookup(backend: BackendClient) -> IpLookup:
    """IP lookup through the backend's ``get-client-ip`` function."""
    def lookup() -> Optional[str]:
        data = backend.invoke_function("get-client-ip")
        if isinstance(data, dict):
            return data.get("ip")
        return None
    return lookup


class GeolocationResolver:
    def __init__(self, ip_lookup: IpLookup, service_url: str = DEFAULT_GEOLOCATION_URL,
                 timeout: float = 5.0, session: Optional[requests.Session] = None):
        self.ip_lookup = ip_lookup
        self.service_url = service_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def resolve(self) -> GeoLocation:
        try:
            ip = self.ip_lookup()
        except Exception as e:
            logger.warning(f"Client IP lookup failed: {e}")
            return GeoLocation()

        if not ip or not is_public_ip(ip):
            return GeoLocation()

        try:
            response = self.session.get(f"{self.service_url}/{ip}/json/", timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Geolocation lookup failed for {ip}: {e}")
            return GeoLocation()

        if not isinstance(data, dict) or data.get("error"):
            reason = data.get("reason") if isinstance(data, dict) else data
            logger.warning(f"Geolocation service refused {ip}: {reason}")
            return GeoLocation()

        return GeoLocation(
            ip_address=ip,
            country=data.get("country_name"),
            city=data.get("city"),
            latitude=_to_float(data.get("latitude")),
            longitude=_to_float(data.get("longitude")),
        )
