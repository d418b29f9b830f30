# src/mdchunk/observability/names.py

"""Standard metric names for mdchunk observability.

Use these constants instead of hardcoded strings for consistency
across the codebase.

Note: All duration metrics are in milliseconds by convention.
Units are handled by the metrics backend (e.g., converted to seconds in Prometheus).
"""

# ============================================================================
# Splitting Metrics
# ============================================================================

# Duration
SPLIT_DURATION = "split_duration"

# Counters (chunks accumulate over time)
SPLIT_CHUNKS_CREATED = "split_chunks_created"
SPLIT_OVERSIZED_CHUNKS = "split_oversized_chunks"
SPLIT_RAW_SIZE_CUTS = "split_raw_size_cuts"

# Gauges
SPLIT_INPUT_SIZE = "split_input_size"
