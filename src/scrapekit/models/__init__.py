"""Scrapekit configuration models."""

from .config import LOG_LEVELS, AuthConfig, AuthType, ByteSize, ClientConfig, LogLevel, ScrapeConfig

__all__ = [
    "AuthConfig",
    "AuthType",
    "ByteSize",
    "ClientConfig",
    "LOG_LEVELS",
    "LogLevel",
    "ScrapeConfig",
]
