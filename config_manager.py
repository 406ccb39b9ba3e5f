"""
Configuration management for the bilingual portal.
Handles loading, validating, and providing access to application settings.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass


@dataclass
class BackendConfig:
    """Hosted backend connection settings."""
    provider: str
    url: str
    anon_key: str
    service_role_key: str
    timeout: float


@dataclass
class AppConfig:
    """Application configuration settings."""
    host: str
    port: int
    debug: bool
    admin_path: str
    default_language: str


@dataclass
class TrackingConfig:
    """Visitor tracking configuration settings."""
    heartbeat_interval_seconds: int
    active_window_minutes: int
    dedup_window_hours: int


@dataclass
class TrendingConfig:
    """Trending content configuration settings."""
    window_days: int
    limit: int
    refresh_seconds: int


@dataclass
class EmailVerificationConfig:
    """Email verification configuration settings."""
    provider: str
    max_retries: int
    base_delay_seconds: float
    abstractapi_key: str


@dataclass
class GeolocationConfig:
    """IP geolocation service settings."""
    url: str
    timeout: float


@dataclass
class PathsConfig:
    """Path configuration settings."""
    visitor_data_dir: str


class ConfigManager:
    """Manages application configuration loading and access."""

    def __init__(self, config_file: str = "web_app_config.json"):
        self.config_file = Path(config_file)
        self._config: Optional[Dict[str, Any]] = None
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file and environment variables."""
        self._config = self._get_default_config()

        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
                    self._merge_config(file_config)
            except (json.JSONDecodeError, FileNotFoundError):
                # Keep default config if file is invalid or not found
                pass

        self._override_with_env()

        # Without a project URL only the in-memory backend can work.
        if not self._config["backend"]["provider"]:
            self._config["backend"]["provider"] = "supabase" if self._config["backend"]["url"] else "memory"

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "backend": {
                "provider": "",
                "url": "",
                "anon_key": "",
                "service_role_key": "",
                "timeout": 10
            },
            "app": {
                "host": "0.0.0.0",
                "port": 8080,
                "debug": False,
                "admin_path": "/cms-0x9f3b",
                "default_language": "sq"
            },
            "tracking": {
                "heartbeat_interval_seconds": 60,
                "active_window_minutes": 5,
                "dedup_window_hours": 24
            },
            "trending": {
                "window_days": 7,
                "limit": 10,
                "refresh_seconds": 30
            },
            "email_verification": {
                "provider": "backend",
                "max_retries": 3,
                "base_delay_seconds": 1.0,
                "abstractapi_key": ""
            },
            "geolocation": {
                "url": "https://ipapi.co",
                "timeout": 5
            },
            "paths": {
                "visitor_data_dir": "visitor_data"
            }
        }

    def _merge_config(self, file_config: Dict[str, Any]) -> None:
        """Merge file configuration with current config."""
        for section, values in file_config.items():
            if section in self._config and isinstance(values, dict):
                self._config[section].update(values)
            else:
                self._config[section] = values

    def _override_with_env(self) -> None:
        """Override configuration with environment variables."""
        # Backend settings
        if os.getenv("SUPABASE_URL"):
            self._config["backend"]["url"] = os.getenv("SUPABASE_URL")

        if os.getenv("SUPABASE_ANON_KEY"):
            self._config["backend"]["anon_key"] = os.getenv("SUPABASE_ANON_KEY")

        if os.getenv("SUPABASE_SERVICE_ROLE_KEY"):
            self._config["backend"]["service_role_key"] = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

        if os.getenv("BACKEND_PROVIDER"):
            self._config["backend"]["provider"] = os.getenv("BACKEND_PROVIDER").lower()

        # App settings
        if os.getenv("APP_HOST"):
            self._config["app"]["host"] = os.getenv("APP_HOST")

        if os.getenv("APP_PORT"):
            self._config["app"]["port"] = int(os.getenv("APP_PORT"))

        if os.getenv("APP_DEBUG"):
            self._config["app"]["debug"] = os.getenv("APP_DEBUG").lower() == "true"

        if os.getenv("ADMIN_PATH"):
            self._config["app"]["admin_path"] = os.getenv("ADMIN_PATH")

        # Tracking settings
        if os.getenv("HEARTBEAT_INTERVAL_SECONDS"):
            self._config["tracking"]["heartbeat_interval_seconds"] = int(os.getenv("HEARTBEAT_INTERVAL_SECONDS"))

        # Email verification settings
        if os.getenv("ABSTRACTAPI_EMAIL_VALIDATION_KEY"):
            self._config["email_verification"]["abstractapi_key"] = os.getenv("ABSTRACTAPI_EMAIL_VALIDATION_KEY")

        # Geolocation settings
        if os.getenv("GEOLOCATION_URL"):
            self._config["geolocation"]["url"] = os.getenv("GEOLOCATION_URL")

    def get_backend_config(self) -> BackendConfig:
        """Get backend configuration."""
        backend_config = self._config["backend"]
        return BackendConfig(
            provider=backend_config["provider"],
            url=backend_config["url"],
            anon_key=backend_config["anon_key"],
            service_role_key=backend_config["service_role_key"],
            timeout=float(backend_config["timeout"])
        )

    def get_app_config(self) -> AppConfig:
        """Get application configuration."""
        app_config = self._config["app"]
        admin_path = "/" + str(app_config["admin_path"]).strip("/")
        return AppConfig(
            host=app_config["host"],
            port=app_config["port"],
            debug=app_config["debug"],
            admin_path=admin_path,
            default_language=app_config["default_language"]
        )

    def get_tracking_config(self) -> TrackingConfig:
        """Get visitor tracking configuration."""
        tracking_config = self._config["tracking"]
        return TrackingConfig(
            heartbeat_interval_seconds=tracking_config["heartbeat_interval_seconds"],
            active_window_minutes=tracking_config["active_window_minutes"],
            dedup_window_hours=tracking_config["dedup_window_hours"]
        )

    def get_trending_config(self) -> TrendingConfig:
        """Get trending configuration."""
        trending_config = self._config["trending"]
        return TrendingConfig(
            window_days=trending_config["window_days"],
            limit=trending_config["limit"],
            refresh_seconds=trending_config["refresh_seconds"]
        )

    def get_email_verification_config(self) -> EmailVerificationConfig:
        """Get email verification configuration."""
        email_config = self._config["email_verification"]
        return EmailVerificationConfig(
            provider=email_config["provider"],
            max_retries=email_config["max_retries"],
            base_delay_seconds=float(email_config["base_delay_seconds"]),
            abstractapi_key=email_config["abstractapi_key"]
        )

    def get_geolocation_config(self) -> GeolocationConfig:
        """Get geolocation configuration."""
        geo_config = self._config["geolocation"]
        return GeolocationConfig(
            url=geo_config["url"],
            timeout=float(geo_config["timeout"])
        )

    def get_paths_config(self) -> PathsConfig:
        """Get paths configuration."""
        paths_config = self._config["paths"]
        return PathsConfig(
            visitor_data_dir=paths_config["visitor_data_dir"]
        )

    def get_config(self) -> Dict[str, Any]:
        """Get raw configuration dictionary."""
        return self._config.copy()

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    def save_config(self) -> None:
        """Save current configuration to file."""
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2, ensure_ascii=False)


# Global configuration instance
config_manager = ConfigManager()


def get_backend_config() -> BackendConfig:
    """Get backend configuration."""
    return config_manager.get_backend_config()


def get_app_config() -> AppConfig:
    """Get application configuration."""
    return config_manager.get_app_config()


def get_tracking_config() -> TrackingConfig:
    """Get visitor tracking configuration."""
    return config_manager.get_tracking_config()


def get_trending_config() -> TrendingConfig:
    """Get trending configuration."""
    return config_manager.get_trending_config()


def get_paths_config() -> PathsConfig:
    """Get paths configuration."""
    return config_manager.get_paths_config()


def reload_config() -> None:
    """Reload configuration."""
    config_manager.reload()


def save_config() -> None:
    """Save configuration to file."""
    config_manager.save_config()
