from __future__ import annotations

import enum
import logging
import time
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

import pygame

from papirs.config import BoardSettings, InfoEntry
from papirs.paths import icon_path
from papirs.state import BoardState, Tool, tool_control_ids
from papirs.ui.common import (
    CircleButton,
    Color,
    Point,
    Transition,
    blend_images,
    invert_image,
    load_image,
    placeholder_glyph,
)
from papirs.ui.styles import circular_button, image_fill, stack_extent, vertical_stack

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

PANEL_BG: Color = (246, 244, 240)
BOARD_BG: Color = (252, 251, 248)
BUTTON_FILL: Color = (255, 255, 255)
BUTTON_FILL_ACTIVE: Color = (48, 48, 48)
ICON_DARK: Color = (40, 40, 40)
ICON_LIGHT: Color = (245, 245, 245)


def _draw_backdrop(surface: pygame.Surface, rect: pygame.Rect, opacity: float = 1.0) -> None:
    backdrop = pygame.Surface(rect.size, pygame.SRCALPHA)
    radius = min(rect.width, rect.height) // 2
    pygame.draw.rect(backdrop, PANEL_BG, backdrop.get_rect(), border_radius=radius)
    if opacity < 1.0:
        backdrop.set_alpha(int(round(255 * opacity)))
    surface.blit(backdrop, rect.topleft)


def _load_icon_pair(
    assets_root: Path,
    name: str,
    rect: pygame.Rect,
    inset: int,
) -> Tuple[Optional[pygame.Surface], Optional[pygame.Surface]]:
    icon = load_image(icon_path(assets_root, name), image_fill(rect, inset).size)
    if icon is not None:
        return icon, invert_image(icon)
    return (
        placeholder_glyph(name, rect.width, ICON_DARK),
        placeholder_glyph(name, rect.width, ICON_LIGHT),
    )


class ControlPalette:
    def __init__(
        self,
        state: BoardState,
        settings: BoardSettings,
        assets_root: Path,
        origin: Point,
        clock: Clock = time.monotonic,
    ) -> None:
        self.state = state
        self.clock = clock
        sizes = settings.sizes
        self.style = circular_button(sizes.tool)
        self.control_ids = tool_control_ids(settings.tools)

        rects = vertical_stack(origin, sizes.tool, len(settings.tools), sizes.spacing)
        self.buttons: Dict[Tool, CircleButton] = {}
        self.icons: Dict[Tool, Tuple[Optional[pygame.Surface], Optional[pygame.Surface]]] = {}
        self.inversion: Dict[Tool, Transition] = {}
        for tool, rect in zip(settings.tools, rects):
            self.buttons[tool] = CircleButton(rect=rect, style=self.style, label=self.control_ids[tool])
            self.icons[tool] = _load_icon_pair(assets_root, tool.value, rect, sizes.inset)
            self.inversion[tool] = Transition(
                1.0 if state.tools.is_active(tool) else 0.0,
                settings.timings.icon_invert,
            )

        pad = sizes.spacing
        self.rect = pygame.Rect(
            origin[0] - pad,
            origin[1] - pad,
            sizes.tool + 2 * pad,
            stack_extent(sizes.tool, len(rects), sizes.spacing) + 2 * pad,
        )
        state.subscribe(self._on_state_change)

    def button_rect(self, tool: Tool) -> Optional[pygame.Rect]:
        button = self.buttons.get(tool)
        return button.rect if button is not None else None

    def invert_amount(self, tool: Tool, now: float) -> float:
        return self.inversion[tool].value(now)

    def fill_for(self, tool: Tool) -> Color:
        return BUTTON_FILL_ACTIVE if self.state.tools.is_active(tool) else BUTTON_FILL

    def hit_test(self, pos: Point) -> Optional[Tool]:
        for tool, button in self.buttons.items():
            if button.hit(pos):
                return tool
        return None

    def handle_click(self, pos: Point) -> bool:
        tool = self.hit_test(pos)
        if tool is None:
            return bool(self.rect.collidepoint(pos))
        self.state.select_tool(tool)
        return True

    def _on_state_change(self, state: BoardState, field: str) -> None:
        if field != "tool":
            return
        now = self.clock()
        for tool, transition in self.inversion.items():
            transition.retarget(1.0 if state.tools.is_active(tool) else 0.0, now)

    def draw(self, surface: pygame.Surface, now: float) -> None:
        _draw_backdrop(surface, self.rect)
        for tool, button in self.buttons.items():
            icon, inverted = self.icons[tool]
            image = icon
            if icon is not None and inverted is not None:
                image = blend_images(icon, inverted, self.invert_amount(tool, now))
            button.draw(surface, self.fill_for(tool), image=image)


class DrawerState(enum.Enum):
    HIDDEN = "hidden"
    VISIBLE = "visible"


class PenColorDrawer:
    def __init__(
        self,
        state: BoardState,
        settings: BoardSettings,
        anchor: pygame.Rect,
        clock: Clock = time.monotonic,
    ) -> None:
        self.state = state
        self.palette = settings.palette
        self.clock = clock
        sizes = settings.sizes
        timings = settings.timings
        self.style = circular_button(sizes.color)
        self.border_max = timings.swatch_border_width

        pad = sizes.spacing
        origin = (anchor.right + 2 * pad, anchor.top + (anchor.height - sizes.color) // 2)
        rects = vertical_stack(origin, sizes.color, len(self.palette), sizes.spacing)
        self.swatches: Dict[str, CircleButton] = {}
        self.borders: Dict[str, Transition] = {}
        for entry, rect in zip(self.palette, rects):
            self.swatches[entry.id] = CircleButton(rect=rect, style=self.style, label=self.palette.control_ids[entry.id])
            self.borders[entry.id] = Transition(self._border_target(entry.id), timings.swatch_border)

        self.rect = pygame.Rect(
            origin[0] - pad,
            origin[1] - pad,
            sizes.color + 2 * pad,
            stack_extent(sizes.color, len(rects), sizes.spacing) + 2 * pad,
        )
        self.opacity = Transition(1.0 if state.drawer_visible else 0.0, timings.drawer)
        state.subscribe(self._on_state_change)

    @property
    def visible(self) -> bool:
        return self.state.drawer_visible

    @property
    def drawer_state(self) -> DrawerState:
        return DrawerState.VISIBLE if self.visible else DrawerState.HIDDEN

    def swatch_fill(self, color_id: str) -> Color:
        return self.palette.style_tokens[color_id]

    def border_width(self, color_id: str, now: float) -> int:
        return int(round(self.borders[color_id].value(now)))

    def _border_target(self, color_id: str) -> float:
        return 0.0 if self.state.pen_colors.is_active(color_id) else float(self.border_max)

    def hit_test(self, pos: Point) -> Optional[str]:
        # Hidden swatches must not swallow clicks meant for the board.
        if not self.visible:
            return None
        for color_id, swatch in self.swatches.items():
            if swatch.hit(pos):
                return color_id
        return None

    def handle_click(self, pos: Point) -> bool:
        color_id = self.hit_test(pos)
        if color_id is None:
            return self.visible and bool(self.rect.collidepoint(pos))
        self.state.select_color(color_id)
        return True

    def _on_state_change(self, state: BoardState, field: str) -> None:
        now = self.clock()
        if field == "tool":
            self.opacity.retarget(1.0 if state.drawer_visible else 0.0, now)
        elif field == "pen_color":
            for color_id, transition in self.borders.items():
                transition.retarget(self._border_target(color_id), now)

    def draw(self, surface: pygame.Surface, now: float) -> None:
        opacity = self.opacity.value(now)
        if opacity <= 0.0:
            return
        _draw_backdrop(surface, self.rect, opacity)
        for color_id, swatch in self.swatches.items():
            swatch.draw(
                surface,
                self.swatch_fill(color_id),
                border_width=self.border_width(color_id, now),
                border_color=PANEL_BG,
                opacity=opacity,
            )


class InfoPanel:
    def __init__(self, settings: BoardSettings, assets_root: Path, screen_rect: pygame.Rect) -> None:
        self.entries = settings.info
        self.sizes = settings.sizes
        self.style = circular_button(self.sizes.info)
        self.assets_root = assets_root
        self.buttons: Dict[str, CircleButton] = {}
        self.icons: Dict[str, Optional[pygame.Surface]] = {}
        self.rect = pygame.Rect(0, 0, 0, 0)
        self.layout(screen_rect)

    def layout(self, screen_rect: pygame.Rect) -> None:
        sizes = self.sizes
        extent = stack_extent(sizes.info, len(self.entries), sizes.spacing)
        origin = (
            screen_rect.left + sizes.margin + sizes.spacing,
            screen_rect.bottom - sizes.margin - sizes.spacing - extent,
        )
        rects = vertical_stack(origin, sizes.info, len(self.entries), sizes.spacing)
        for entry, rect in zip(self.entries, rects):
            self.buttons[entry.id] = CircleButton(rect=rect, style=self.style, label=entry.id)
            if entry.id not in self.icons:
                self.icons[entry.id] = _load_icon_pair(self.assets_root, entry.id, rect, sizes.inset)[0]
        pad = sizes.spacing
        self.rect = pygame.Rect(origin[0] - pad, origin[1] - pad, sizes.info + 2 * pad, extent + 2 * pad)

    def hit_test(self, pos: Point) -> Optional[InfoEntry]:
        for entry in self.entries:
            if self.buttons[entry.id].hit(pos):
                return entry
        return None

    def covers(self, pos: Point) -> bool:
        return bool(self.entries) and self.rect.collidepoint(pos)

    def draw(self, surface: pygame.Surface) -> None:
        if not self.entries:
            return
        _draw_backdrop(surface, self.rect)
        for entry in self.entries:
            self.buttons[entry.id].draw(surface, BUTTON_FILL, image=self.icons.get(entry.id))


class LayoutRoot:
    def __init__(self, layer_names: Tuple[str, ...], size: Tuple[int, int]) -> None:
        self.layer_names = layer_names
        self.rect = pygame.Rect((0, 0), size)
        self.layers: Dict[str, pygame.Surface] = {
            name: pygame.Surface(size, pygame.SRCALPHA) for name in layer_names
        }

    def layer(self, name: str) -> pygame.Surface:
        return self.layers[name]

    def resize(self, size: Tuple[int, int]) -> None:
        if size == self.rect.size:
            return
        logger.debug("resizing layers to %sx%s", *size)
        self.rect = pygame.Rect((0, 0), size)
        for name in self.layer_names:
            resized = pygame.Surface(size, pygame.SRCALPHA)
            resized.blit(self.layers[name], (0, 0))
            self.layers[name] = resized

    def draw(self, surface: pygame.Surface) -> None:
        surface.fill(BOARD_BG)
        for name in self.layer_names:
            surface.blit(self.layers[name], (0, 0))
