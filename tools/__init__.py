# ============================================================================
# TOOLS MODULE
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Tool - Command line utilities
# PURPOSE: Developer tools runnable with python -m tools.<name>
# CREATED: 05 MAR 2026
# ============================================================================
