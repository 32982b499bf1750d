"""Calibrated heatmap palettes.

One entry per reference color; several entries may share a level. Entry order
matters: on equal distance the earlier entry wins.
"""

from __future__ import annotations

from dataclasses import dataclass

NOT_A_CELL = -1
LEVELS = (0, 1, 2, 3, 4)


@dataclass(frozen=True)
class PaletteEntry:
    rgb: tuple[int, int, int]
    level: int


@dataclass(frozen=True)
class Palette:
    name: str
    entries: tuple[PaletteEntry, ...]

    def __post_init__(self) -> None:
        if not self.entries:
            raise ValueError(f"Palette {self.name!r} has no entries")
        for entry in self.entries:
            if entry.level not in LEVELS:
                raise ValueError(f"Palette {self.name!r}: level {entry.level} outside 0-4")

    @classmethod
    def from_pairs(cls, name: str, pairs: list[tuple[tuple[int, int, int], int]]) -> Palette:
        return cls(name=name, entries=tuple(PaletteEntry(tuple(rgb), level) for rgb, level in pairs))

    def to_dict(self) -> list[dict[str, object]]:
        return [{"level": e.level, "rgb": list(e.rgb)} for e in self.entries]


# Grey/blue family, sampled from light-theme screenshots.
BLUE = Palette.from_pairs("blue", [
    ((238, 238, 238), 0),
    ((164, 210, 238), 1),
    ((103, 200, 255), 2),
    ((89, 150, 184), 3),
    ((0, 56, 131), 4),
])

# GitHub's default green scale, followed by colors calibrated from real
# screenshots that fall outside it.
GREEN = Palette.from_pairs("green", [
    ((235, 237, 240), 0),
    ((155, 233, 168), 1),
    ((64, 196, 99), 2),
    ((48, 161, 78), 3),
    ((33, 110, 57), 4),
    ((64, 196, 255), 1),
    ((24, 69, 59), 4),
])

THEMES: dict[str, Palette] = {p.name: p for p in (BLUE, GREEN)}


def get_palette(theme: str) -> Palette:
    try:
        return THEMES[theme.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown theme {theme!r} (available: {', '.join(sorted(THEMES))})"
        ) from None
