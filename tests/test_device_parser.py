"""
Tests for User-Agent parsing.
"""

import pytest

from portal_service.models.results import DeviceInfo
from portal_service.tracking import parse_user_agent

CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.6099.109 Safari/537.36"
)
EDGE_WINDOWS = CHROME_WINDOWS + " Edg/120.0.2210.91"
SAFARI_IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_1_2 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1.2 Mobile/15E148 Safari/604.1"
)
SAFARI_MAC = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.2 Safari/605.1.15"
)
FIREFOX_LINUX = "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"
CHROME_ANDROID = (
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.6099.144 Mobile Safari/537.36"
)
SAFARI_IPAD = (
    "Mozilla/5.0 (iPad; CPU OS 16_6 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/16.6 Safari/604.1"
)
OPERA_WINDOWS = CHROME_WINDOWS + " OPR/105.0.0.0"


class TestBrowserDetection:
    """Browser name and version."""

    def test_chrome(self):
        info = parse_user_agent(CHROME_WINDOWS)
        assert info.browser == "Chrome"
        assert info.browser_version == "120.0.6099.109"

    def test_edge_wins_over_chrome(self):
        info = parse_user_agent(EDGE_WINDOWS)
        assert info.browser == "Edge"
        assert info.browser_version == "120.0.2210.91"

    def test_opera_wins_over_chrome(self):
        info = parse_user_agent(OPERA_WINDOWS)
        assert info.browser == "Opera"
        assert info.browser_version == "105.0.0.0"

    def test_firefox(self):
        info = parse_user_agent(FIREFOX_LINUX)
        assert info.browser == "Firefox"
        assert info.browser_version == "121.0"

    def test_safari_version_comes_from_version_token(self):
        info = parse_user_agent(SAFARI_MAC)
        assert info.browser == "Safari"
        assert info.browser_version == "17.2"


class TestOsAndDevice:
    """Operating system and device class."""

    def test_windows_10_desktop(self):
        info = parse_user_agent(CHROME_WINDOWS)
        assert info.os == "Windows 10"
        assert info.device == "Desktop"
        assert info.device_type == "desktop"

    def test_macos_version_uses_dots(self):
        assert parse_user_agent(SAFARI_MAC).os == "macOS 10.15.7"

    def test_iphone(self):
        info = parse_user_agent(SAFARI_IPHONE)
        assert info.os == "iOS 17.1.2"
        assert info.device == "iPhone"
        assert info.device_type == "mobile"

    def test_android_phone(self):
        info = parse_user_agent(CHROME_ANDROID)
        assert info.os == "Android 14"
        assert info.device == "Android Phone"
        assert info.device_type == "mobile"

    @pytest.mark.parametrize("ua, expected", [
        ("Mozilla/5.0 (Linux; Android 10.0.1; SM-G973F) Mobile Safari/537.36", "Android 10.0.1"),
        ("Mozilla/5.0 (Linux; Android; K) Mobile Safari/537.36", "Android"),
    ])
    def test_android_version(self, ua, expected):
        assert parse_user_agent(ua).os == expected

    def test_ipad_is_tablet(self):
        info = parse_user_agent(SAFARI_IPAD)
        assert info.os == "iOS 16.6"
        assert info.device == "iPad"
        assert info.device_type == "tablet"

    def test_linux(self):
        assert parse_user_agent(FIREFOX_LINUX).os == "Linux"


class TestEdgeCases:
    """Unknown and empty headers."""

    def test_empty_header(self):
        info = parse_user_agent("")
        assert info == DeviceInfo("Unknown", "", "Unknown", "Desktop", "desktop")

    def test_none_header(self):
        assert parse_user_agent(None).browser == "Unknown"

    def test_pure_function(self):
        """Same input always gives an equal result."""
        assert parse_user_agent(SAFARI_IPHONE) == parse_user_agent(SAFARI_IPHONE)

    def test_case_insensitive(self):
        assert parse_user_agent(CHROME_WINDOWS.upper()).browser == "Chrome"
