"""Vibrant-style named swatches and the dominant colour of a screenshot."""

import colorsys
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image
from colorthief import ColorThief

from shopstyle.services.colors import RGB, parse_hex_color, rgb_to_hex

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 256
MAX_COLORS = 64
DOMINANT_QUALITY = 10

WEIGHT_SATURATION = 3
WEIGHT_LUMA = 6.5
WEIGHT_POPULATION = 0.5


@dataclass(frozen=True)
class Swatch:
    hex: str
    population: int


@dataclass(frozen=True)
class _Target:
    name: str
    target_luma: float
    min_luma: float
    max_luma: float
    target_saturation: float
    min_saturation: float
    max_saturation: float


# Checked in this order; a colour picked by one target is not reused by a later one
TARGETS = (
    _Target("Vibrant", 0.5, 0.3, 0.7, 1.0, 0.35, 1.0),
    _Target("LightVibrant", 0.74, 0.55, 1.0, 1.0, 0.35, 1.0),
    _Target("DarkVibrant", 0.26, 0.0, 0.45, 1.0, 0.35, 1.0),
    _Target("Muted", 0.5, 0.3, 0.7, 0.3, 0.0, 0.4),
    _Target("LightMuted", 0.74, 0.55, 1.0, 0.3, 0.0, 0.4),
    _Target("DarkMuted", 0.26, 0.0, 0.45, 0.3, 0.0, 0.4),
)


def _is_near_white(rgb: RGB) -> bool:
    return all(c > 250 for c in rgb)


def quantize(image_path: str | Path) -> list[tuple[int, RGB]]:
    """Median-cut the image down to at most MAX_COLORS, returning (population, rgb)."""
    with Image.open(image_path) as img:
        img = img.convert("RGB")
        img.thumbnail((SAMPLE_SIZE, SAMPLE_SIZE))
        reduced = img.quantize(colors=MAX_COLORS, method=Image.Quantize.MEDIANCUT).convert("RGB")

    colors = reduced.getcolors(maxcolors=MAX_COLORS * 4) or []
    return [(count, RGB(*rgb)) for count, rgb in colors if not _is_near_white(rgb)]


def _invert_diff(value: float, target: float) -> float:
    return 1 - abs(value - target)


def _comparison_value(saturation: float, luma: float, population: int, max_population: int, target: _Target) -> float:
    weighted = (
        (_invert_diff(saturation, target.target_saturation), WEIGHT_SATURATION),
        (_invert_diff(luma, target.target_luma), WEIGHT_LUMA),
        (population / max_population, WEIGHT_POPULATION),
    )
    return sum(v * w for v, w in weighted) / sum(w for _, w in weighted)


def build_swatches(colors: list[tuple[int, RGB]]) -> dict[str, Optional[Swatch]]:
    """Assign quantised colours to the six named swatches."""
    swatches: dict[str, Optional[Swatch]] = {t.name: None for t in TARGETS}
    if not colors:
        return swatches

    max_population = max(count for count, _ in colors)
    hsl = []
    for count, rgb in colors:
        _, lightness, saturation = colorsys.rgb_to_hls(rgb.r / 255, rgb.g / 255, rgb.b / 255)
        hsl.append((count, rgb, saturation, lightness))

    selected: set[RGB] = set()
    for target in TARGETS:
        best = None
        best_value = None
        for count, rgb, saturation, lightness in hsl:
            if rgb in selected:
                continue
            if not (target.min_saturation <= saturation <= target.max_saturation):
                continue
            if not (target.min_luma <= lightness <= target.max_luma):
                continue
            value = _comparison_value(saturation, lightness, count, max_population, target)
            if best_value is None or value > best_value:
                best, best_value = (count, rgb), value

        if best is not None:
            count, rgb = best
            selected.add(rgb)
            swatches[target.name] = Swatch(hex=rgb_to_hex(*rgb), population=count)

    return swatches


def _derive(source: Swatch, lightness: Optional[float] = None, saturation: Optional[float] = None) -> Swatch:
    """Re-tone an existing swatch; derived swatches cover none of the image."""
    rgb = parse_hex_color(source.hex)
    h, l, s = colorsys.rgb_to_hls(rgb.r / 255, rgb.g / 255, rgb.b / 255)
    r, g, b = colorsys.hls_to_rgb(
        h,
        l if lightness is None else lightness,
        s if saturation is None else saturation,
    )
    return Swatch(hex=rgb_to_hex(round(r * 255), round(g * 255), round(b * 255)), population=0)


def fill_missing_swatches(swatches: dict[str, Optional[Swatch]]) -> dict[str, Optional[Swatch]]:
    """Derive empty swatches from their neighbours, as Vibrant's default generator does.

    Nothing is filled when no swatch was found at all.
    """
    filled = dict(swatches)
    targets = {t.name: t for t in TARGETS}

    def _fill(name: str, source: str, lightness: Optional[float] = None, saturation: Optional[float] = None):
        if filled[name] is None and filled[source] is not None:
            filled[name] = _derive(filled[source], lightness, saturation)

    if filled["Vibrant"] is None and filled["DarkVibrant"] is None and filled["LightVibrant"] is None:
        _fill("DarkVibrant", "DarkMuted", lightness=targets["DarkVibrant"].target_luma)
        _fill("LightVibrant", "LightMuted", lightness=targets["LightVibrant"].target_luma)

    _fill("Vibrant", "DarkVibrant", lightness=targets["Vibrant"].target_luma)
    _fill("Vibrant", "LightVibrant", lightness=targets["Vibrant"].target_luma)
    _fill("DarkVibrant", "Vibrant", lightness=targets["DarkVibrant"].target_luma)
    _fill("LightVibrant", "Vibrant", lightness=targets["LightVibrant"].target_luma)
    _fill("Muted", "Vibrant", saturation=targets["Muted"].target_saturation)
    _fill("DarkMuted", "DarkVibrant", saturation=targets["DarkMuted"].target_saturation)
    _fill("LightMuted", "LightVibrant", saturation=targets["LightMuted"].target_saturation)
    return filled


def get_palette(image_path: str | Path) -> dict[str, Optional[Swatch]]:
    swatches = build_swatches(quantize(image_path))
    found = sum(1 for s in swatches.values() if s is not None)
    swatches = fill_missing_swatches(swatches)
    logger.info(f"Palette: {found}/{len(swatches)} swatches found in {Path(image_path).name}, rest derived")
    return swatches


def get_dominant_color(image_path: str | Path) -> RGB:
    r, g, b = ColorThief(str(image_path)).get_color(quality=DOMINANT_QUALITY)
    return RGB(r, g, b)


def ranked_hexes(swatches: dict[str, Optional[Swatch]]) -> list[str]:
    """Swatch hexes, most populous first; derived swatches trail, empty ones are dropped."""
    present = [s for s in swatches.values() if s is not None]
    present.sort(key=lambda s: s.population, reverse=True)
    return [s.hex for s in present]
