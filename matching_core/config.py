# matching_core/config.py
from __future__ import annotations
import os
import textwrap

from matching_core.constants import AUTO_CORE, DEFAULT_SENTINEL_FACTOR

# ===== Solver defaults =====
DEFAULT_CONFIG = {
    "core": AUTO_CORE,                           # "auto", "dense", "basic" or "diagonal"
    "sentinel_factor": DEFAULT_SENTINEL_FACTOR,  # missing pairs cost factor * max cost
}

def ensure_config_exists(path: str) -> str:
    """Write the default config to path unless a file is already there."""
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    if not os.path.exists(path):
        with open(path, "w", encoding="utf-8") as f:
            f.write(DEFAULT_CONFIG_YAML)
    return path

# ===== Default config file =====
DEFAULT_CONFIG_YAML = textwrap.dedent(f"""\
# Coverage core: auto picks the default (dense)
core: {DEFAULT_CONFIG["core"]}

# Cost given to from/to pairs with no edge, as a multiple of the largest cost
sentinel_factor: {DEFAULT_CONFIG["sentinel_factor"]}
""")
