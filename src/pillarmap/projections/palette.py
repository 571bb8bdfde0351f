"""Pillar display colors.

A pillar's color depends only on its position in the pillars list, so the
same pillar gets the same color in every view.
"""

from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class PillarColor:
    name: str
    hex: str
    border: str
    background: str
    dot: str
    rich_style: str


PILLAR_PALETTE: tuple[PillarColor, ...] = (
    PillarColor("blue", "#60A5FA", "border-blue-400", "bg-blue-900/50", "bg-blue-400", "bright_blue"),
    PillarColor("green", "#4ADE80", "border-green-400", "bg-green-900/50", "bg-green-400", "bright_green"),
    PillarColor("pink", "#F472B6", "border-pink-400", "bg-pink-900/50", "bg-pink-400", "hot_pink"),
    PillarColor("orange", "#FB923C", "border-orange-400", "bg-orange-900/50", "bg-orange-400", "dark_orange"),
    PillarColor("indigo", "#818CF8", "border-indigo-400", "bg-indigo-900/50", "bg-indigo-400", "slate_blue1"),
    PillarColor("teal", "#2DD4BF", "border-teal-400", "bg-teal-900/50", "bg-teal-400", "dark_cyan"),
)


@lru_cache(maxsize=None)
def pillar_color(index: int) -> PillarColor:
    """Return the palette entry for the pillar at ``index``, cycling past the end."""
    if index < 0:
        raise ValueError(f"pillar index must be non-negative, got {index}")
    return PILLAR_PALETTE[index % len(PILLAR_PALETTE)]
