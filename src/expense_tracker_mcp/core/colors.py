"""
Deterministic category colour assignment.

Colours come from a fixed palette picked for visual separation. A category's
first-choice colour is a pure function of its normalized name (FNV-1a, so the
result is identical in every process and on every platform). When several
categories shown together land on the same colour, ``ensure_unique_colors``
repairs the assignment so each one gets its own.
"""

import logging
from typing import Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

PALETTE = (
    "#667eea",  # violet (default)
    "#f093fb",  # pink
    "#4facfe",  # light blue
    "#43e97b",  # green
    "#fa709a",  # pink-red
    "#fee140",  # yellow
    "#30cfd0",  # turquoise
    "#a8edea",  # light turquoise
    "#ff9a9e",  # coral
    "#fecfef",  # light pink
    "#fad0c4",  # peach
    "#ffd1ff",  # light violet
    "#a1c4fd",  # pale blue
    "#c2e9fb",  # sky blue
    "#ffecd2",  # light orange
    "#fcb69f",  # orange
    "#ff8a80",  # red
    "#b2fab4",  # light green
    "#81c784",  # green
    "#64b5f6",  # blue
    "#ba68c8",  # purple
    "#f06292",  # pink
    "#4db6ac",  # teal
    "#ffb74d",  # orange
    "#90caf9",  # light blue
    "#ce93d8",  # light purple
    "#a5d6a7",  # light green
    "#ffcc80",  # light orange
    "#b39ddb",  # lavender
    "#ef5350",  # red
)

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193

MIN_CHANNEL = 55
MAX_CHANNEL = 255
MAX_SYNTHESIS_RETRIES = 100


def fnv1a_32(text: str) -> int:
    """
    Compute the 32-bit FNV-1a hash of a string.

    Args:
        text: Input string, hashed as UTF-8 bytes

    Returns:
        Unsigned 32-bit hash value
    """
    value = FNV_OFFSET_BASIS
    for byte in text.encode("utf-8"):
        value ^= byte
        value = (value * FNV_PRIME) & 0xFFFFFFFF
    return value


def _normalize(name: Optional[str]) -> str:
    return (name or "").strip().lower()


def color_for(category_name: Optional[str]) -> str:
    """
    Pick the palette colour for a category name.

    The name is trimmed and lower-cased first, so "Food" and " food " share a
    colour. Blank names get the default (first) palette colour.

    Args:
        category_name: Category display name

    Returns:
        Hex colour string (#rrggbb)
    """
    normalized = _normalize(category_name)
    if not normalized:
        return PALETTE[0]
    return PALETTE[fnv1a_32(normalized) % len(PALETTE)]


def color_by_index(index: int) -> str:
    """Get a palette colour by position, wrapping around the palette."""
    return PALETTE[abs(index) % len(PALETTE)]


def color_from_hash(text: Optional[str]) -> str:
    """
    Derive an off-palette colour from a string.

    Each channel lands in [55, 254] so the colour is never too dark.
    """
    normalized = _normalize(text)
    if not normalized:
        return PALETTE[0]

    value = fnv1a_32(normalized)
    red = value % 200 + MIN_CHANNEL
    green = (value * 31) % 200 + MIN_CHANNEL
    blue = (value * 61) % 200 + MIN_CHANNEL
    return f"#{red:02x}{green:02x}{blue:02x}"


def _synthesize(seed: int) -> str:
    value = seed & 0xFFFFFF
    channels = (
        (value >> 16) & 0xFF,
        (value >> 8) & 0xFF,
        value & 0xFF,
    )
    red, green, blue = (max(MIN_CHANNEL, min(MAX_CHANNEL, c)) for c in channels)
    return f"#{red:02x}{green:02x}{blue:02x}"


def ensure_unique_colors(
    category_names: Sequence[str],
    existing_colors: Optional[Sequence[str]] = None,
) -> Dict[str, str]:
    """
    Give every category shown together a distinct colour.

    Args:
        category_names: Category names appearing in one report
        existing_colors: Optional current colours, positionally matching
                         category_names. Ignored unless the lengths match.

    Returns:
        Mapping of category name -> colour, with no colour used twice
    """
    names = list(dict.fromkeys(category_names))

    color_map: Dict[str, str] = {}
    if existing_colors is not None and len(existing_colors) == len(category_names):
        for name, color in zip(category_names, existing_colors):
            color_map.setdefault(name, color)
    else:
        for name in names:
            color_map[name] = color_for(name)

    groups: Dict[str, List[str]] = {}
    for name in names:
        groups.setdefault(color_map[name], []).append(name)

    used = {color for color, members in groups.items() if len(members) == 1}

    palette_index = 0
    for color, members in groups.items():
        if len(members) == 1:
            continue

        for position, name in enumerate(members):
            if position == 0 and color not in used:
                used.add(color)
                continue

            new_color = None
            attempts = 0
            while new_color is None and attempts < len(PALETTE) * 2:
                candidate = PALETTE[palette_index % len(PALETTE)]
                if candidate not in used:
                    new_color = candidate
                palette_index += 1
                attempts += 1

            if new_color is None:
                base = fnv1a_32(name) * 31
                new_color = _synthesize(base + palette_index + position)
                retry = 0
                while new_color in used and retry < MAX_SYNTHESIS_RETRIES:
                    palette_index += 1
                    new_color = _synthesize(base + palette_index + position + retry)
                    retry += 1
                if new_color in used:
                    logger.warning(
                        "Could not find a free colour for %r after %d retries",
                        name,
                        MAX_SYNTHESIS_RETRIES,
                    )

            used.add(new_color)
            color_map[name] = new_color

    return {name: color_map[name] for name in names}
