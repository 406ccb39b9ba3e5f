"""
Tests for best-effort geolocation.
"""
from unittest.mock import MagicMock

import requests

from portal_service.backend import BackendError
from portal_service.tracking import GeolocationResolver, backend_ip_lookup, is_public_ip


def _session(payload=None, exc=None):
    session = MagicMock()
    if exc is not None:
        session.get.side_effect = exc
    else:
        response = MagicMock()
        response.json.return_value = payload
        session.get.return_value = response
    return session


class TestIsPublicIp:
    def test_public(self):
        assert is_public_ip("8.8.8.8")

    def test_private_and_loopback(self):
        assert not is_public_ip("127.0.0.1")
        assert not is_public_ip("192.168.1.10")

    def test_garbage(self):
        assert not is_public_ip("not-an-ip")


class TestGeolocationResolver:
    """Lookups never raise and degrade to all-null."""

    def test_successful_lookup(self):
        session = _session({"country_name": "Albania", "city": "Tirana",
                            "latitude": 41.3275, "longitude": "19.8187"})
        resolver = GeolocationResolver(lambda: "8.8.8.8", "https://ipapi.co/", session=session)

        location = resolver.resolve()

        assert location.ip_address == "8.8.8.8"
        assert location.country == "Albania"
        assert location.city == "Tirana"
        assert location.longitude == 19.8187
        session.get.assert_called_once_with("https://ipapi.co/8.8.8.8/json/", timeout=5.0)

    def test_ip_lookup_failure(self):
        def lookup():
            raise BackendError("function unavailable")

        session = _session({})
        assert GeolocationResolver(lookup, session=session).resolve().is_empty()
        session.get.assert_not_called()

    def test_no_ip(self):
        assert GeolocationResolver(lambda: None, session=_session({})).resolve().is_empty()

    def test_private_ip_skips_lookup(self):
        session = _session({})
        assert GeolocationResolver(lambda: "10.0.0.1", session=session).resolve().is_empty()
        session.get.assert_not_called()

    def test_network_error(self):
        session = _session(exc=requests.ConnectionError("down"))
        assert GeolocationResolver(lambda: "8.8.8.8", session=session).resolve().is_empty()

    def test_service_error_payload(self):
        session = _session({"error": True, "reason": "RateLimited"})
        assert GeolocationResolver(lambda: "8.8.8.8", session=session).resolve().is_empty()

    def test_non_json_body(self):
        session = MagicMock()
        session.get.return_value.json.side_effect = ValueError("no json")
        assert GeolocationResolver(lambda: "8.8.8.8", session=session).resolve().is_empty()


class TestBackendIpLookup:
    def test_reads_ip_from_function(self, backend):
        backend.register_function("get-client-ip", lambda body: {"ip": "8.8.4.4"})
        assert backend_ip_lookup(backend)() == "8.8.4.4"

    def test_non_dict_response(self, backend):
        backend.register_function("get-client-ip", lambda body: "8.8.4.4")
        assert backend_ip_lookup(backend)() is None
