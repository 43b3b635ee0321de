"""
Source registry.

Built once at startup from the "feeds", "styles", "default_style" and
"fallback_images" sections of the config, then shared read-only with every
component of the run.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Tuple

from briefly.errors import ConfigError
from briefly.models import CategoryStyle, Source

logger = logging.getLogger(__name__)

DEFAULT_STYLE = {"color": "#6B7280", "emoji": "📰"}


def format_label(key: str) -> str:
    """Turns a category key like 'us_news' into 'US NEWS'."""
    return key.replace("_", " ").strip().upper()


def _build_style(key: str, raw: Dict[str, Any]) -> CategoryStyle:
    if not isinstance(raw, dict) or not raw.get("color"):
        raise ConfigError(f"Style for '{key}' must define a color.")
    return CategoryStyle(
        color=str(raw["color"]),
        emoji=str(raw.get("emoji", DEFAULT_STYLE["emoji"])),
        label=str(raw.get("label") or format_label(key)),
    )


@dataclass(frozen=True)
class SourceRegistry:
    """Immutable category catalogue: origins, styles and fallback images."""

    sources: Tuple[Source, ...]
    styles: Mapping[str, CategoryStyle]
    default_style: CategoryStyle
    fallback_images: Mapping[str, str]

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "SourceRegistry":
        feeds = config.get("feeds") or {}
        if not isinstance(feeds, dict):
            raise ConfigError("'feeds' must be a mapping of category key to URL.")

        sources = []
        for key, url in feeds.items():
            if not isinstance(url, str) or not url.strip():
                raise ConfigError(f"Feed '{key}' has no URL.")
            sources.append(Source(key=key, url=url.strip()))

        styles = {
            key: _build_style(key, raw)
            for key, raw in (config.get("styles") or {}).items()
        }
        for key in styles:
            if key not in feeds:
                logger.warning("Style defined for unregistered category '%s'.", key)

        default_style = _build_style(
            "default", {**DEFAULT_STYLE, **(config.get("default_style") or {})}
        )

        return cls(
            sources=tuple(sources),
            styles=MappingProxyType(styles),
            default_style=default_style,
            fallback_images=MappingProxyType(dict(config.get("fallback_images") or {})),
        )

    def __contains__(self, key: object) -> bool:
        return any(s.key == key for s in self.sources)

    def __iter__(self) -> Iterator[Source]:
        return iter(self.sources)

    def __len__(self) -> int:
        return len(self.sources)

    def keys(self) -> List[str]:
        """Category keys in declaration order."""
        return [s.key for s in self.sources]

    def style_for(self, key: str) -> CategoryStyle:
        """Returns the category's style, or the default style labelled for it."""
        style = self.styles.get(key)
        if style:
            return style
        return CategoryStyle(
            color=self.default_style.color,
            emoji=self.default_style.emoji,
            label=format_label(key),
        )
