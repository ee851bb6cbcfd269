"""Layout commands passed from the assembler to a renderer.

Commands are appended in order and never revisited. Anything with an
``emit(command)`` method can consume them.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional

from .images import Raster


class Alignment(enum.Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class TextBlock:
    text: str
    font_size: int
    bold: bool = False
    alignment: Alignment = Alignment.LEFT


@dataclass(frozen=True)
class Break:
    """Vertical space of ``lines`` blank lines."""
    lines: int = 1


@dataclass(frozen=True)
class PageBreak:
    pass


@dataclass(frozen=True)
class ImagePlacement:
    identifier: str
    width: int
    height: int
    digest: str
    alignment: Alignment = Alignment.CENTER
    raster: Optional[Raster] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_raster(cls, identifier, raster, alignment=Alignment.CENTER):
        return cls(
            identifier=identifier,
            width=raster.width,
            height=raster.height,
            digest=raster.digest,
            alignment=alignment,
            raster=raster,
        )


class CommandRecorder:
    """Sink that keeps every emitted command in a list."""

    def __init__(self):
        self.commands = []

    def emit(self, command):
        self.commands.append(command)

    def __iter__(self):
        return iter(self.commands)

    def __len__(self):
        return len(self.commands)
