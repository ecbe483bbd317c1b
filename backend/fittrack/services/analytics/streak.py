"""
Streak Calculator - Longest run of consecutive active calendar days.

Reports the best historical run anywhere in the history, not the
run ending today.
"""
from datetime import date
from typing import Iterable, List


def consecutive_runs(days: Iterable[date]) -> List[List[date]]:
    """
    Split distinct days into runs of calendar-consecutive days.

    Args:
        days: Calendar days in any order, duplicates allowed

    Returns:
        Runs in ascending order, each run ascending
    """
    runs: List[List[date]] = []
    previous_ordinal = None

    for day in sorted(set(days)):
        ordinal = day.toordinal()
        if previous_ordinal is not None and ordinal - previous_ordinal == 1:
            runs[-1].append(day)
        else:
            runs.append([day])
        previous_ordinal = ordinal

    return runs


def longest_streak(days: Iterable[date]) -> int:
    """
    Length of the longest block of consecutive days.

    Returns 0 for an empty history. Gaps only end a run, so
    the result never exceeds the number of distinct days.
    """
    return max((len(run) for run in consecutive_runs(days)), default=0)
