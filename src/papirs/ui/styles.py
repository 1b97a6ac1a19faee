from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import pygame


Point = Tuple[int, int]
RGBA = Tuple[int, int, int, int]


@dataclass(frozen=True)
class Shadow:
    offset: Point
    color: RGBA


DROP_SHADOW = Shadow(offset=(0, 2), color=(0, 0, 0, 60))


@dataclass(frozen=True)
class ButtonStyle:
    size: int
    border_radius: int
    padding: int = 0
    border_width: int = 0
    shadow: Shadow = DROP_SHADOW

    def rect_at(self, topleft: Point) -> pygame.Rect:
        return pygame.Rect(topleft[0], topleft[1], self.size, self.size)


def circular_button(size: int) -> ButtonStyle:
    if size <= 0:
        raise ValueError(f"button size must be positive, got {size}")
    # 50% of the side: the square renders as a circle.
    return ButtonStyle(size=size, border_radius=size // 2)


def image_fill(box: pygame.Rect, inset: int) -> pygame.Rect:
    width = max(1, box.width - 2 * inset)
    height = max(1, box.height - 2 * inset)
    child = pygame.Rect(0, 0, width, height)
    child.center = box.center
    return child


def vertical_stack(origin: Point, item_size: int, count: int, spacing: int) -> List[pygame.Rect]:
    left, top = origin
    return [
        pygame.Rect(left, top + idx * (item_size + spacing), item_size, item_size)
        for idx in range(count)
    ]


def stack_extent(item_size: int, count: int, spacing: int) -> int:
    if count <= 0:
        return 0
    return count * item_size + (count - 1) * spacing
