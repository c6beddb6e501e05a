"""Page configuration for the pagination engine.

All lengths are device-independent pixels, the render surface's own unit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .constants import PaginationConstants


class ConfigError(ValueError):
    """Raised when page metrics are invalid."""


@dataclass(frozen=True)
class PageConfig:
    """Sheet metrics used by the break planner.

    Attributes:
        usable_page_height: Drawable content height per page.
        margin: Top and bottom margin of each sheet.
        gap: Visual space between consecutive sheets.
    """

    usable_page_height: float = PaginationConstants.USABLE_PAGE_HEIGHT
    margin: float = PaginationConstants.PAGE_MARGIN
    gap: float = PaginationConstants.PAGE_GAP

    def __post_init__(self) -> None:
        if self.usable_page_height <= 0:
            raise ConfigError(
                f"usable_page_height must be positive, got {self.usable_page_height}"
            )
        if self.margin < 0:
            raise ConfigError(f"margin must not be negative, got {self.margin}")
        if self.gap < 0:
            raise ConfigError(f"gap must not be negative, got {self.gap}")

    @property
    def sheet_pitch(self) -> float:
        """Distance from the top of one sheet's content to the next."""
        return self.usable_page_height + 2 * self.margin + self.gap

    @property
    def break_overhead(self) -> float:
        """Height every spacer carries on top of the page's leftover space."""
        return 2 * self.margin + self.gap

    def to_settings(self) -> Dict[str, Any]:
        return {
            "usable_page_height": self.usable_page_height,
            "margin": self.margin,
            "gap": self.gap,
        }

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "PageConfig":
        """Build a config from persisted settings, defaulting missing keys."""
        defaults = cls().to_settings()
        values = {
            key: default if settings.get(key) is None else settings[key]
            for key, default in defaults.items()
        }
        return cls(**values)
