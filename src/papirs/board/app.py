from __future__ import annotations

import logging
import sys
import time
import webbrowser
from typing import Any, Dict, Optional

import pygame

from papirs.config import ConfigError, InfoEntry, load_board_settings, load_config
from papirs.engine import DrawingEngine
from papirs.paths import get_assets_root
from papirs.state import BoardState, Tool
from papirs.ui.common import FINGERMOTION, Point, create_window, is_primary_pointer_event, pointer_event_pos
from papirs.ui.panels import ControlPalette, InfoPanel, LayoutRoot, PenColorDrawer

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = (1280, 800)


class BoardApp:
    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        engine: Optional[DrawingEngine] = None,
        screen: Optional[pygame.Surface] = None,
    ) -> None:
        self.config = config if config is not None else load_config()
        self.settings = load_board_settings(self.config)
        self.assets_root = get_assets_root(self.config)

        if screen is None:
            screen, _ = create_window(DEFAULT_WINDOW_SIZE)
        self.screen = screen
        self.screen_rect = screen.get_rect()
        self.clock = pygame.time.Clock()

        self.state = BoardState.from_settings(self.settings)
        self.root = LayoutRoot(self.settings.layers, self.screen_rect.size)

        margin = self.settings.sizes.margin
        origin = (margin + self.settings.sizes.spacing, margin + self.settings.sizes.spacing)
        self.palette = ControlPalette(self.state, self.settings, self.assets_root, origin)
        anchor = self.palette.button_rect(Tool.PEN) or self.palette.rect
        self.drawer = PenColorDrawer(self.state, self.settings, anchor)
        self.info = InfoPanel(self.settings, self.assets_root, self.screen_rect)

        self.engine = engine if engine is not None else DrawingEngine()
        self.engine.attach(self.root.layers)

        self.pointer_down = False
        self.engine_stroke = False
        logger.info(
            "Board ready: tool=%s pen_color=%s",
            self.state.tool.value,
            self.state.pen_color,
        )

    def handle_pointer_down(self, pos: Point) -> bool:
        # Panels sit above the board, so they get the click first.
        if self.drawer.handle_click(pos):
            return False
        if self.palette.handle_click(pos):
            return False
        entry = self.info.hit_test(pos)
        if entry is not None:
            return self._run_info(entry)
        if self.info.covers(pos):
            return False
        self.engine_stroke = True
        self.engine.pointer_down(pos, self.state.snapshot())
        return False

    def handle_pointer_move(self, pos: Point) -> None:
        if self.engine_stroke:
            self.engine.pointer_move(pos, self.state.snapshot())

    def handle_pointer_up(self) -> None:
        if self.engine_stroke:
            self.engine_stroke = False
            self.engine.pointer_up(self.state.snapshot())

    def _run_info(self, entry: InfoEntry) -> bool:
        logger.info("Info entry %s", entry.id)
        if entry.url is not None:
            webbrowser.open(entry.url)
            return False
        if entry.action == "clear":
            self.engine.clear()
            return False
        return entry.action == "quit"

    def handle_resize(self, size) -> None:
        self.screen_rect = pygame.Rect((0, 0), size)
        self.root.resize(size)
        self.info.layout(self.screen_rect)

    def draw(self, now: float) -> None:
        self.root.draw(self.screen)
        self.palette.draw(self.screen, now)
        self.drawer.draw(self.screen, now)
        self.info.draw(self.screen)

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            return False
        if event.type == pygame.VIDEORESIZE:
            self.screen = pygame.display.get_surface() or self.screen
            self.handle_resize(event.size)
        elif is_primary_pointer_event(event, is_down=True):
            if self.pointer_down:
                # Ignore duplicate emulated pointer-down events from touch stacks.
                return True
            pos = pointer_event_pos(event, self.screen_rect)
            if pos is None:
                return True
            self.pointer_down = True
            if self.handle_pointer_down(pos):
                return False
        elif event.type == pygame.MOUSEMOTION or (FINGERMOTION is not None and event.type == FINGERMOTION):
            if not self.pointer_down:
                return True
            if event.type == pygame.MOUSEMOTION and getattr(event, "touch", False):
                # The finger motion already carried this move.
                return True
            pos = pointer_event_pos(event, self.screen_rect)
            if pos is None:
                return True
            self.handle_pointer_move(pos)
        elif is_primary_pointer_event(event, is_down=False):
            if not self.pointer_down:
                # Ignore duplicate emulated pointer-up events.
                return True
            self.pointer_down = False
            self.handle_pointer_up()
        return True

    def run(self) -> None:
        running = True
        while running:
            for event in pygame.event.get():
                if not self.handle_event(event):
                    running = False
                    break

            self.draw(time.monotonic())
            pygame.display.flip()
            self.clock.tick(60)

        pygame.quit()


def main() -> None:
    config = load_config()
    logging.basicConfig(
        level=str(config.get("log_level", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        app = BoardApp(config)
    except ConfigError as exc:
        logger.error("Invalid board configuration: %s", exc)
        sys.exit(2)
    try:
        app.run()
    except Exception:
        logger.exception("Board crashed")
        pygame.quit()
        sys.exit(1)


if __name__ == "__main__":
    main()
