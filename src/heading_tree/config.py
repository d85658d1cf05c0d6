"""Local configuration for heading_tree."""

from __future__ import annotations

import os


MIN_LEVEL = 1
MAX_LEVEL = 10
# Levels above this have no native <hN> tag and travel as an explicit attribute.
NATIVE_HEADING_LEVELS = 6

DEFAULT_REPAIR_PASS_LIMIT = MAX_LEVEL

HN10_REPAIR_PASS_LIMIT = int(os.getenv("HN10_REPAIR_PASS_LIMIT", str(DEFAULT_REPAIR_PASS_LIMIT)))
