# burgerline/restaurant/strategies.py
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Sequence


class StationChoiceStrategy(ABC):
    @abstractmethod
    def select(self, lengths: Sequence[int]) -> int:
        """Return the index of the counter that receives the next arrival."""
        ...


# Shortest line wins; on a tie the lowest index wins
class ShortestLineStrategy(StationChoiceStrategy):
    def select(self, lengths):
        if not lengths:
            raise ValueError("cannot route a customer: there are no counters")
        best = 0
        for i in range(1, len(lengths)):
            if lengths[i] < lengths[best]:
                best = i
        return best
