"""polyapi database layer.

Provides the DuckDB-backed reference store that caches geocoded
addresses and ticker symbols between sessions.
"""
