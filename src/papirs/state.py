from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Generic, Iterable, List, Mapping, Tuple, TypeVar

from papirs.errors import ConfigError

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]
T = TypeVar("T")


class Tool(enum.Enum):
    SELECTOR = "selector"
    PEN = "pen"
    ERASER = "eraser"


def control_id(name: str) -> str:
    return "radio-" + name.replace("_", "-")


class ExclusiveGroup(Generic[T]):
    def __init__(self, options: Iterable[T], default: T) -> None:
        self._options: Tuple[T, ...] = tuple(options)
        if not self._options:
            raise ConfigError("exclusive group needs at least one option")
        if len(set(self._options)) != len(self._options):
            raise ConfigError(f"exclusive group has duplicate options: {list(self._options)}")
        if default not in self._options:
            raise ConfigError(f"default {default!r} is not one of {list(self._options)}")
        self._active = default

    @property
    def options(self) -> Tuple[T, ...]:
        return self._options

    @property
    def active(self) -> T:
        return self._active

    def is_active(self, option: T) -> bool:
        return option == self._active

    def select(self, option: T) -> T:
        if option not in self._options:
            raise KeyError(option)
        previous = self._active
        self._active = option
        return previous


@dataclass(frozen=True)
class ColorEntry:
    id: str
    rgb: Color

    @property
    def control_id(self) -> str:
        return control_id(self.id)


class Palette:
    def __init__(self, entries: Iterable[ColorEntry]) -> None:
        self.entries: Tuple[ColorEntry, ...] = tuple(entries)
        self.ids: Tuple[str, ...] = tuple(entry.id for entry in self.entries)
        self.style_tokens: Mapping[str, Color] = MappingProxyType(
            {entry.id: entry.rgb for entry in self.entries}
        )
        self.control_ids: Mapping[str, str] = MappingProxyType(
            {entry.id: entry.control_id for entry in self.entries}
        )

    def __getitem__(self, color_id: str) -> ColorEntry:
        for entry in self.entries:
            if entry.id == color_id:
                return entry
        raise KeyError(color_id)

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class BoardSnapshot:
    tool: Tool
    pen_color: str
    drawer_visible: bool


Listener = Callable[["BoardState", str], None]


class BoardState:
    def __init__(
        self,
        tools: Iterable[Tool],
        default_tool: Tool,
        palette: Palette,
        default_pen_color: str,
    ) -> None:
        self.palette = palette
        self.tools = ExclusiveGroup(tools, default_tool)
        self.pen_colors = ExclusiveGroup(palette.ids, default_pen_color)
        self._listeners: List[Listener] = []

    @classmethod
    def from_settings(cls, settings) -> "BoardState":
        return cls(
            settings.tools,
            settings.default_tool,
            settings.palette,
            settings.default_pen_color,
        )

    @property
    def tool(self) -> Tool:
        return self.tools.active

    @property
    def pen_color(self) -> str:
        return self.pen_colors.active

    @property
    def drawer_visible(self) -> bool:
        return self.tools.active is Tool.PEN

    def select_tool(self, tool: Tool) -> None:
        previous = self.tools.select(tool)
        logger.debug("tool %s -> %s", previous.value, tool.value)
        self._notify("tool")

    def select_color(self, color_id: str) -> None:
        previous = self.pen_colors.select(color_id)
        logger.debug("pen color %s -> %s", previous, color_id)
        self._notify("pen_color")

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> BoardSnapshot:
        return BoardSnapshot(
            tool=self.tool,
            pen_color=self.pen_color,
            drawer_visible=self.drawer_visible,
        )

    def _notify(self, field: str) -> None:
        for listener in list(self._listeners):
            listener(self, field)


def tool_control_ids(tools: Iterable[Tool]) -> Dict[Tool, str]:
    return {tool: control_id(tool.value) for tool in tools}
