from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import pygame

from papirs.ui.styles import ButtonStyle, image_fill


Color = Tuple[int, int, int]
Point = Tuple[int, int]

FINGERDOWN = getattr(pygame, "FINGERDOWN", None)
FINGERMOTION = getattr(pygame, "FINGERMOTION", None)
FINGERUP = getattr(pygame, "FINGERUP", None)
FINGER_EVENTS = {event for event in (FINGERDOWN, FINGERMOTION, FINGERUP) if event is not None}

_SHADOW_PAD = 4

logger = logging.getLogger(__name__)


def ease_out(t: float) -> float:
    t = min(1.0, max(0.0, t))
    return 1.0 - (1.0 - t) * (1.0 - t)


class Transition:
    def __init__(self, value: float, duration: float) -> None:
        self.duration = duration
        self._start_value = float(value)
        self._target = float(value)
        self._start_time = 0.0

    @property
    def target(self) -> float:
        return self._target

    def value(self, now: float) -> float:
        if self.duration <= 0:
            return self._target
        t = (now - self._start_time) / self.duration
        if t >= 1.0:
            return self._target
        return self._start_value + (self._target - self._start_value) * ease_out(t)

    def done(self, now: float) -> bool:
        return self.value(now) == self._target

    def retarget(self, target: float, now: float) -> None:
        target = float(target)
        if target == self._target:
            return
        self._start_value = self.value(now)
        self._target = target
        self._start_time = now


@dataclass
class CircleButton:
    rect: pygame.Rect
    style: ButtonStyle
    label: str = ""
    image: Optional[pygame.Surface] = None

    def hit(self, pos: Point) -> bool:
        dx = pos[0] - self.rect.centerx
        dy = pos[1] - self.rect.centery
        return math.hypot(dx, dy) <= self.style.border_radius

    def draw(
        self,
        surface: pygame.Surface,
        fill: Color,
        *,
        image: Optional[pygame.Surface] = None,
        border_width: int = 0,
        border_color: Color = (255, 255, 255),
        opacity: float = 1.0,
    ) -> None:
        if opacity <= 0:
            return
        size = self.style.size
        radius = self.style.border_radius
        layer = pygame.Surface((size + 2 * _SHADOW_PAD, size + 2 * _SHADOW_PAD), pygame.SRCALPHA)
        center = (_SHADOW_PAD + radius, _SHADOW_PAD + radius)

        shadow = self.style.shadow
        shadow_center = (center[0] + shadow.offset[0], center[1] + shadow.offset[1])
        pygame.draw.circle(layer, shadow.color, shadow_center, radius)
        pygame.draw.circle(layer, fill, center, radius)

        if image is not None:
            box = pygame.Rect(_SHADOW_PAD, _SHADOW_PAD, size, size)
            image_rect = image.get_rect(center=image_fill(box, self.style.padding).center)
            layer.blit(image, image_rect)
        # pygame treats width 0 as "filled", so a zero border is simply skipped.
        if border_width > 0:
            pygame.draw.circle(layer, border_color, center, radius, width=border_width)

        if opacity < 1.0:
            layer.set_alpha(int(round(255 * opacity)))
        surface.blit(layer, (self.rect.left - _SHADOW_PAD, self.rect.top - _SHADOW_PAD))


def create_window(size: Tuple[int, int], *, fullscreen: bool = False) -> Tuple[pygame.Surface, pygame.Rect]:
    pygame.init()
    if fullscreen:
        screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
    else:
        screen = pygame.display.set_mode(size, pygame.RESIZABLE)
    pygame.display.set_caption("Papirs")
    pygame.mouse.set_visible(True)
    return screen, screen.get_rect()


def load_image(path: Path, size: Tuple[int, int]) -> Optional[pygame.Surface]:
    if not path.exists():
        return None
    try:
        image = pygame.image.load(str(path))
    except (pygame.error, OSError):
        logger.warning("Could not load image %s", path, exc_info=True)
        return None
    if pygame.display.get_surface() is not None:
        image = image.convert_alpha()
    width, height = image.get_size()
    scale = min(size[0] / width, size[1] / height)
    target = (max(1, int(width * scale)), max(1, int(height * scale)))
    return pygame.transform.smoothscale(image, target)


def invert_image(image: pygame.Surface) -> pygame.Surface:
    size = image.get_size()
    inverted = pygame.Surface(size, pygame.SRCALPHA)
    inverted.fill((255, 255, 255, 255))
    inverted.blit(image, (0, 0), special_flags=pygame.BLEND_RGB_SUB)

    # Carry the source alpha over: white RGB keeps the colors, alpha masks.
    mask = image.convert_alpha() if pygame.display.get_surface() is not None else image.copy()
    mask.fill((255, 255, 255), special_flags=pygame.BLEND_RGB_MAX)
    inverted.blit(mask, (0, 0), special_flags=pygame.BLEND_RGBA_MULT)
    return inverted


def blend_images(base: pygame.Surface, overlay: pygame.Surface, amount: float) -> pygame.Surface:
    amount = min(1.0, max(0.0, amount))
    if amount <= 0.0:
        return base
    if amount >= 1.0:
        return overlay
    blended = pygame.Surface(base.get_size(), pygame.SRCALPHA)
    bottom = base.copy()
    bottom.set_alpha(int(round(255 * (1.0 - amount))))
    top = overlay.copy()
    top.set_alpha(int(round(255 * amount)))
    blended.blit(bottom, (0, 0))
    blended.blit(top, (0, 0))
    return blended


def placeholder_glyph(label: str, size: int, color: Color) -> Optional[pygame.Surface]:
    if not label or not pygame.font.get_init():
        return None
    font = pygame.font.SysFont("sans", max(10, int(size * 0.45)), bold=True)
    return font.render(label[:1].upper(), True, color)


def is_primary_pointer_event(event: pygame.event.Event, *, is_down: bool) -> bool:
    expected_type = pygame.MOUSEBUTTONDOWN if is_down else pygame.MOUSEBUTTONUP
    if event.type == expected_type:
        # Some touch stacks can emit emulated mouse events with button 0.
        button = getattr(event, "button", 1)
        if button in {0, 1}:
            return True
        return bool(getattr(event, "touch", False))
    finger_type = FINGERDOWN if is_down else FINGERUP
    return finger_type is not None and event.type == finger_type


def pointer_event_pos(event: pygame.event.Event, screen_rect: pygame.Rect) -> Optional[Point]:
    if hasattr(event, "pos"):
        return event.pos
    if event.type in FINGER_EVENTS:
        return (
            int(event.x * screen_rect.width),
            int(event.y * screen_rect.height),
        )
    return None
