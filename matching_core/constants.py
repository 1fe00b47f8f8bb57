# matching_core/constants.py
from __future__ import annotations

# --- Core selection ---
DEFAULT_CORE = "dense"
AUTO_CORE = "auto"

# --- Labeled graphs ---
# Absent (from, to) pairs cost this multiple of the largest observed cost.
DEFAULT_SENTINEL_FACTOR = 2.0
# Used instead when every observed cost is zero.
ZERO_COST_SENTINEL = 1.0

# --- Banded (diagonal) matrices ---
# Valid cells lie within this many columns of the main diagonal.
BAND_RADIUS = 1

# Default CSV layout for candidate edge lists
CANDIDATE_COLUMNS = ["from", "to", "cost"]
