# ============================================================================
# VERSION - INDOOR MAP SERVICE
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# ============================================================================
"""
Version information for the Indoor Map Service.

This is the single source of truth for the application version.
Updated manually for each release.
"""
# Version format: major.minor.patch.build
__version__ = "0.3.0.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Build metadata
BUILD_DATE = "2026-10-19"

EPOCH = 1
CODENAME = "Indoor Map Service"
