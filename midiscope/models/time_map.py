"""
Sorted time index for "value in effect at a given tick" lookups.
"""

from bisect import bisect_right
from typing import Any, Iterator, List, Optional, Tuple


class TimeMap:
    """
    Values keyed by cumulative time.

    Lookups return the value most recently set at or before the given time.
    When several values share a time, the one added last wins.

    Example:
        channels = TimeMap()
        channels.add(0, 3)
        channels.add(480, 5)
        channels.at(479)  # 3
        channels.at(480)  # 5
    """

    def __init__(self):
        self._times: List[int] = []
        self._values: List[Any] = []

    def add(self, time: int, value: Any) -> None:
        position = bisect_right(self._times, time)
        self._times.insert(position, time)
        self._values.insert(position, value)

    def at(self, time: int) -> Optional[Any]:
        position = bisect_right(self._times, time)
        if position == 0:
            return None
        return self._values[position - 1]

    def remove(self, time: int, value: Any) -> bool:
        """Remove one entry equal to (time, value). Returns True if found."""
        position = bisect_right(self._times, time) - 1
        while position >= 0 and self._times[position] == time:
            if self._values[position] == value:
                del self._times[position]
                del self._values[position]
                return True
            position -= 1
        return False

    def clear(self) -> None:
        self._times.clear()
        self._values.clear()

    def items(self) -> Iterator[Tuple[int, Any]]:
        return iter(list(zip(self._times, self._values)))

    def __len__(self) -> int:
        return len(self._times)

    def __bool__(self) -> bool:
        return bool(self._times)
