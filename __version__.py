# ============================================================================
# VERSION - EXTERNAL VOCABULARY ENGINE
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# ============================================================================
"""
Version information for the External Vocabulary Engine.

This is the single source of truth for the application version.
Updated manually for each release.
"""
# Version format: major.minor.patch.build
__version__ = "0.3.0.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Build metadata
BUILD_DATE = "2026-03-02"

EPOCH = 1
CODENAME = "External Vocabulary Engine"
