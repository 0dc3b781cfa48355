"""
Configuration management for Holderscope.

Loads settings from environment variables and an optional .env file at the
project root. get_settings() is the single source of truth for the client,
aggregation caps, API server and export tool.
"""

from holderscope.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
