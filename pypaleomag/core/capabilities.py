"""
Capability string constants for pypaleomag.

This module is the SINGLE SOURCE OF TRUTH for capability strings.
Import from here, never use raw strings.

Usage:
    from pypaleomag.core.capabilities import CAPABILITY_BEDDING

    if directions.supports(CAPABILITY_BEDDING):
        tectonic = directions.tilt_corrected()
"""

# Data can be returned as full numpy arrays in memory
CAPABILITY_MATERIALIZED = 'materialized'

# Data can be iterated multiple times (required for resampling)
CAPABILITY_REPEATABLE = 'repeatable'

# Every direction carries a bedding orientation (strike, dip)
CAPABILITY_BEDDING = 'bedding'

# Every direction carries a provenance tag (sample or site name)
CAPABILITY_PROVENANCE = 'provenance'

# All capabilities as a frozenset for validation
ALL_CAPABILITIES = frozenset({
    CAPABILITY_MATERIALIZED,
    CAPABILITY_REPEATABLE,
    CAPABILITY_BEDDING,
    CAPABILITY_PROVENANCE,
})

__all__ = [
    'CAPABILITY_MATERIALIZED',
    'CAPABILITY_REPEATABLE',
    'CAPABILITY_BEDDING',
    'CAPABILITY_PROVENANCE',
    'ALL_CAPABILITIES',
]
