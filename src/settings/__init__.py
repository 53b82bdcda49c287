"""Environment-driven settings for the on-this-day pipeline."""

from src.settings.app import AppSettings, get_settings


__all__ = ["AppSettings", "get_settings"]
