"""Scrolling window over a class's controls, whose heights vary."""
from typing import Iterable, List, Tuple


class ViewportWindow:
    """Decides which contiguous run of controls fits in ``row_budget`` rows.

    ``top`` is the index of the first visible control. A control taller
    than the whole budget is still shown (clipped) when it is at the top,
    otherwise it could never receive focus.
    """

    def __init__(self, heights: Iterable[int] = (), row_budget: int = 0):
        self.heights: List[int] = list(heights)
        self.row_budget = row_budget
        self.top = 0

    def reset(self, heights: Iterable[int]):
        """Load a new class's control heights and scroll back to the start."""
        self.heights = list(heights)
        self.top = 0

    def set_row_budget(self, row_budget: int):
        self.row_budget = max(0, row_budget)

    def within_bounds(self, index: int, top: int = None) -> bool:
        """True if controls ``top..index`` fit in the row budget."""
        if top is None:
            top = self.top
        if index < top or index >= len(self.heights):
            return False
        total = 0
        for i in range(top, index + 1):
            total += self.heights[i]
            if total > self.row_budget:
                return False
        return True

    def scroll_to(self, focus: int) -> bool:
        """Move ``top`` so that ``focus`` is visible.

        Scrolling up jumps straight to the focused control; scrolling down
        advances one control at a time.

        Returns:
            True if the window moved.
        """
        old_top = self.top
        if focus < self.top:
            self.top = max(focus, 0)
        elif focus > self.top:
            while self.top < focus and not self.within_bounds(focus):
                self.top += 1
        return self.top != old_top

    def visible_range(self) -> range:
        """Indices of the controls drawn for the current ``top``."""
        end = self.top
        total = 0
        while end < len(self.heights):
            total += self.heights[end]
            if total > self.row_budget:
                break
            end += 1
        if end == self.top and self.top < len(self.heights):
            end += 1
        return range(self.top, end)

    def placements(self) -> List[Tuple[int, int]]:
        """(control index, first row) for each visible control."""
        row = 0
        result = []
        for index in self.visible_range():
            result.append((index, row))
            row += self.heights[index]
        return result
