"""Errors raised while reading santapy settings from the environment."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A santapy setting is present but unusable."""


class MissingConfigurationError(ConfigurationError):
    """A required ``SANTAPY_*`` variable is absent or blank."""
