"""
Configuration constants for row sources.

This module centralizes the fixed parameters used while opening and reading
backing resources, so they can be adjusted without touching core logic.
"""

# Key column used when a model is inferred and no key names were given
DEFAULT_KEY_COLUMN_INDEX = 0

# Directories searched (before sys.path) when a resource path isn't on disk
RESOURCE_ROOTS = ['resources', 'tests/resources']

# Only sorted sources can feed the diff engine
SUPPORTED_IS_SORTED = True
