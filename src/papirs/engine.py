from __future__ import annotations

from typing import Dict, Optional, Tuple

import pygame

from papirs.state import BoardSnapshot


Point = Tuple[int, int]


class DrawingEngine:
    def __init__(self) -> None:
        self.layers: Optional[Dict[str, pygame.Surface]] = None

    def attach(self, layers: Dict[str, pygame.Surface]) -> None:
        self.layers = layers

    def pointer_down(self, pos: Point, snapshot: BoardSnapshot) -> None:
        pass

    def pointer_move(self, pos: Point, snapshot: BoardSnapshot) -> None:
        pass

    def pointer_up(self, snapshot: BoardSnapshot) -> None:
        pass

    def clear(self) -> None:
        if not self.layers:
            return
        for surface in self.layers.values():
            surface.fill((0, 0, 0, 0))
