"""Placement of text labels around boxes so that they overlap as little as possible."""

from __future__ import annotations

from typing import Callable

Box = tuple[float, float, float, float]
FontSizeFunc = Callable[[str], tuple[int, int, int]]


def _area(box: Box) -> float:
    left, top, right, bottom = box
    return (right - left) * (bottom - top)


def intersection_area(box1: Box, box2: Box) -> float:
    """Area shared by two ``(left, top, right, bottom)`` boxes."""
    l1, t1, r1, b1 = box1
    l2, t2, r2, b2 = box2
    width = max(0.0, min(r1, r2) - max(l1, l2))
    height = max(0.0, min(b1, b2) - max(t1, t2))
    return width * height


def iou(box1: Box, box2: Box) -> float:
    """Intersection over union; 0 when either box or the intersection is empty."""
    area_a = _area(box1)
    area_b = _area(box2)
    inter = intersection_area(box1, box2)
    if area_a == 0 or area_b == 0 or inter == 0:
        return 0.0
    return inter / (area_a + area_b - inter)


def overlap(box1: Box, box2: Box) -> float:
    """Intersection relative to the smaller box; 1 means one box contains the other."""
    area_a = _area(box1)
    area_b = _area(box2)
    inter = intersection_area(box1, box2)
    if area_a == 0 or area_b == 0 or inter == 0:
        return 0.0
    return inter / min(area_a, area_b)


class PositionManager:
    """Chooses label positions, remembering the ones already taken."""

    def __init__(self, font_size_func: FontSizeFunc) -> None:
        self._font_size = font_size_func
        self.marked_positions: list[Box] = []

    def select_optimal_position(
        self, box: Box, canvas_width: int, canvas_height: int, text: str
    ) -> tuple[float, float]:
        """Return the text origin (left, baseline top) for ``text`` near ``box``."""
        text_width, text_height, baseline = self._font_size(text)
        candidates = self.find_candidate_positions(
            box, canvas_width, canvas_height, text_width, text_height, baseline
        )

        min_iou = 1.0
        chosen = candidates[0]
        for candidate in candidates:
            worst = max((iou(candidate, marked) for marked in self.marked_positions), default=0.0)
            if worst == 0.0:
                chosen = candidate
                break
            if worst < min_iou:
                min_iou = worst
                chosen = candidate
        self.marked_positions.append(chosen)

        left, top, _right, _bottom = chosen
        return left, top + text_height

    def clear_marked_positions(self) -> None:
        """Forget every position taken so far."""
        self.marked_positions.clear()

    def find_candidate_positions(
        self,
        box: Box,
        canvas_width: int,
        canvas_height: int,
        text_width: int,
        text_height: int,
        baseline: int,
    ) -> list[Box]:
        """Return the label rectangles around ``box`` that lie fully on the canvas."""
        left, top, right, bottom = box
        left = max(0.0, left)
        top = max(0.0, top)
        right = min(float(canvas_width), right)
        bottom = min(float(canvas_height), bottom)
        canvas: Box = (0.0, 0.0, float(canvas_width), float(canvas_height))
        full = text_height + baseline

        positions: list[Box] = [
            (left, top - full, left + text_width, top),
            (right, top, right + text_width, top + full),
            (left - text_width, top, left, top + full),
            (left, bottom, left + text_width, bottom + full),
            (right - text_width, top - full, right, top),
            (right - text_width, bottom, right, bottom + full),
            (left, top, left + text_width, top + full),
            (right - text_width, top, right, top + full),
            (right - text_width, bottom - full, right, bottom),
            (left, bottom - full, left + text_width, bottom),
        ]
        candidates = [pos for pos in positions if overlap(canvas, pos) == 1.0]
        if not candidates:
            candidates.append((left, top, left + text_width, top + full))
        return candidates