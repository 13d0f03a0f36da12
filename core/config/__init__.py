# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 02 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the indoor map service.
"""

from core.config.defaults import (
    StoreBackend,
    StoreDefaults,
    TileDefaults,
    ApiDefaults,
    Defaults,
    get_connection_string,
    get_defaults,
)

__all__ = [
    "StoreBackend",
    "StoreDefaults",
    "TileDefaults",
    "ApiDefaults",
    "Defaults",
    "get_connection_string",
    "get_defaults",
]
