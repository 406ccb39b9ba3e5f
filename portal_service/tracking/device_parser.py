"""
User-Agent parsing for the analytics dashboard.

Pure substring and regex matching on the lowercased header; no lookup tables
or third-party detection.
"""

import re
from typing import Optional

from ..models.results import DeviceInfo

UNKNOWN = "Unknown"

WINDOWS_VERSIONS = [
    ("windows nt 10.0", "Windows 10"),
    ("windows nt 6.3", "Windows 8.1"),
    ("windows nt 6.2", "Windows 8"),
    ("windows nt 6.1", "Windows 7"),
]


def _search(pattern: str, ua: str, group: int = 1) -> str:
    match = re.search(pattern, ua)
    return match.group(group) if match else ""


def _detect_browser(ua: str):
    # Edge and Opera both announce chrome/ as well, so they go first.
    if "edg/" in ua:
        return "Edge", _search(r"edg/([\d.]+)", ua)
    if "opr/" in ua or "opera/" in ua:
        return "Opera", _search(r"(opera|opr)/([\d.]+)", ua, group=2)
    if "chrome/" in ua:
        return "Chrome", _search(r"chrome/([\d.]+)", ua)
    if "firefox/" in ua:
        return "Firefox", _search(r"firefox/([\d.]+)", ua)
    if "safari/" in ua and "chrome" not in ua:
        return "Safari", _search(r"version/([\d.]+)", ua)
    return UNKNOWN, ""


def _detect_os(ua: str) -> str:
    for marker, name in WINDOWS_VERSIONS:
        if marker in ua:
            return name
    # iOS devices also say "like mac os x".
    if "iphone" in ua or "ipad" in ua:
        version = _search(r"os ([\d_]+)", ua).replace("_", ".")
        return f"iOS {version}".strip()
    if "mac os x" in ua:
        version = _search(r"mac os x ([\d_]+)", ua).replace("_", ".")
        return f"macOS {version}".strip()
    if "android" in ua:
        version = _search(r"android ([\d.]+)", ua)
        return f"Android {version}".strip()
    if "linux" in ua:
        return "Linux"
    return UNKNOWN


def _detect_device(ua: str):
    if "mobile" in ua or "android" in ua:
        if "iphone" in ua:
            return "iPhone", "mobile"
        if "android" in ua:
            return "Android Phone", "mobile"
        return "Mobile", "mobile"
    if "tablet" in ua or "ipad" in ua:
        return ("iPad" if "ipad" in ua else "Tablet"), "tablet"
    return "Desktop", "desktop"


def parse_user_agent(user_agent: Optional[str]) -> DeviceInfo:
    """Summarize a User-Agent header as browser, OS and device class."""
    ua = (user_agent or "").lower()
    browser, browser_version = _detect_browser(ua)
    device, device_type = _detect_device(ua)
    return DeviceInfo(
        browser=browser,
        browser_version=browser_version,
        os=_detect_os(ua),
        device=device,
        device_type=device_type,
    )
