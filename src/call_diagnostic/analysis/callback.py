"""
Callback latency estimation
"""

import math
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from .models import ClassifiedCall


def group_by_caller(calls: Sequence[ClassifiedCall]) -> Dict[str, List[ClassifiedCall]]:
    """Group timestamped calls by caller, each group in chronological order"""
    groups: Dict[str, List[ClassifiedCall]] = defaultdict(list)
    for call in calls:
        if call.start_time is not None:
            groups[call.caller_key].append(call)

    for group in groups.values():
        group.sort(key=lambda c: c.start_time)

    return dict(groups)


def callback_observations(group: Sequence[ClassifiedCall]) -> List[float]:
    """
    Minutes from each missed call to the next accepted call in a
    chronologically sorted group.

    Each accepted call resolves at most one missed call: once matched, the
    scan for later missed calls starts after it.
    """
    observations = []
    if len(group) < 2:
        return observations

    cursor = 0
    for i, call in enumerate(group):
        if not call.is_missed:
            continue

        j = max(i + 1, cursor)
        while j < len(group) and not group[j].is_accepted:
            j += 1

        if j >= len(group):
            break

        elapsed = (group[j].start_time - call.start_time).total_seconds() / 60
        observations.append(elapsed)
        cursor = j + 1

    return observations


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def average_callback_minutes(calls: Sequence[ClassifiedCall]) -> Optional[int]:
    """
    Average missed-to-accepted callback time across all callers

    Returns:
        Mean in whole minutes, or None when no caller has a missed call
        followed by an accepted one
    """
    observations = []
    for group in group_by_caller(calls).values():
        observations.extend(callback_observations(group))

    if not observations:
        return None

    return round_half_up(sum(observations) / len(observations))
