"""ISO 8601 duration parsing for video content details."""

import re
from typing import Optional

_DURATION_PATTERN = re.compile(r'PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?')


def parse_duration(duration: Optional[str]) -> int:
    """Convert an ISO 8601 duration such as ``PT1H30M`` into seconds.

    Missing components count as zero. ``None``, empty or unparseable
    input yields 0.
    """
    if not duration or not isinstance(duration, str):
        return 0

    match = _DURATION_PATTERN.search(duration)
    if not match:
        return 0

    hours, minutes, seconds = (int(part or 0) for part in match.groups())
    return hours * 3600 + minutes * 60 + seconds
