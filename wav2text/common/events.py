"""Compact JSON event lines for diagnostics.

Events go to stderr so that stdout stays free for the transcript.
"""

from __future__ import annotations

import json
import os
import sys
import time
from typing import Any

ENABLED = os.getenv("WAV2TEXT_EVENTS", "1") != "0"


def emit(topic: str, **fields: Any) -> None:
    if not ENABLED:
        return
    msg = {"topic": topic, **fields, "ts": time.time()}
    print(json.dumps(msg, separators=(",", ":"), default=str), file=sys.stderr)
