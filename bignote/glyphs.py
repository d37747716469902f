"""Glyph handles for clefs, note heads and accidentals, loaded from SVG assets."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from bignote.errors import AssetMissing
from bignote.pitch_model import Alteration

logger = logging.getLogger(__name__)

DEFAULT_ASSET_DIR = Path(__file__).parent / "assets"
SVG_NAMESPACE = "http://www.w3.org/2000/svg"


class GlyphKind(Enum):
    """Fixed set of symbols the staff can draw; values are asset file stems."""

    TREBLE_CLEF = "treble_clef"
    BASS_CLEF = "bass_clef"
    NOTE_HEAD = "note_head"
    SHARP = "sharp"
    FLAT = "flat"

    @classmethod
    def for_alteration(cls, alteration: Alteration) -> "GlyphKind | None":
        """Accidental glyph for an alteration; naturals have none."""
        if alteration is Alteration.SHARP:
            return cls.SHARP
        if alteration is Alteration.FLAT:
            return cls.FLAT
        return None


@dataclass(frozen=True)
class Glyph:
    """
    Opaque renderable symbol.

    Attributes:
        kind:     Which symbol this is.
        svg_body: Inner SVG markup, drawn in ``view_box`` coordinates.
        view_box: (min_x, min_y, width, height) of the source drawing.
    """

    kind: GlyphKind
    svg_body: str
    view_box: tuple[float, float, float, float]

    @classmethod
    def blank(cls, kind: GlyphKind) -> "Glyph":
        return cls(kind=kind, svg_body="", view_box=(0.0, 0.0, 1.0, 1.0))

    @property
    def is_blank(self) -> bool:
        return not self.svg_body

    @property
    def aspect_ratio(self) -> float:
        """Width over height of the source drawing."""
        _, _, width, height = self.view_box
        if height <= 0:
            return 1.0
        return width / height


def _parse_view_box(root: ET.Element) -> tuple[float, float, float, float]:
    raw = root.get("viewBox")
    if raw is not None:
        parts = raw.replace(",", " ").split()
        if len(parts) == 4:
            min_x, min_y, width, height = (float(p) for p in parts)
            return min_x, min_y, width, height
    width = float(str(root.get("width", "0")).removesuffix("px"))
    height = float(str(root.get("height", "0")).removesuffix("px"))
    return 0.0, 0.0, width, height


def parse_svg_glyph(kind: GlyphKind, svg_text: str) -> Glyph:
    """
    Build a Glyph from a standalone SVG document.

    Raises:
        AssetMissing: If the text is not an SVG document with a usable size.
    """
    ET.register_namespace("", SVG_NAMESPACE)
    try:
        root = ET.fromstring(svg_text)
    except ET.ParseError as exc:
        raise AssetMissing(f"Glyph '{kind.value}' is not valid XML: {exc}") from exc

    if root.tag not in ("svg", f"{{{SVG_NAMESPACE}}}svg"):
        raise AssetMissing(f"Glyph '{kind.value}' has no <svg> root element.")

    try:
        view_box = _parse_view_box(root)
    except ValueError as exc:
        raise AssetMissing(f"Glyph '{kind.value}' has an unreadable size: {exc}") from exc
    if view_box[2] <= 0 or view_box[3] <= 0:
        raise AssetMissing(f"Glyph '{kind.value}' has an empty viewBox.")

    body = "".join(ET.tostring(child, encoding="unicode") for child in root)
    return Glyph(kind=kind, svg_body=body, view_box=view_box)


class GlyphSet:
    """
    Lookup of glyph handles keyed by GlyphKind.

    Each glyph is read from ``<asset_dir>/<kind>.svg`` on first use and
    cached. A missing or unparsable asset is logged and replaced by a blank
    glyph so that layout and paint always have something to place.
    """

    def __init__(self, asset_dir: str | Path | None = None) -> None:
        self.asset_dir = Path(asset_dir) if asset_dir is not None else DEFAULT_ASSET_DIR
        self._cache: dict[GlyphKind, Glyph] = {}

    @classmethod
    def from_glyphs(cls, glyphs: dict[GlyphKind, Glyph]) -> "GlyphSet":
        """Build a set from in-memory handles; kinds not given load from disk."""
        glyph_set = cls()
        glyph_set._cache.update(glyphs)
        return glyph_set

    def load(self, kind: GlyphKind) -> Glyph:
        """
        Read and parse one glyph asset.

        Raises:
            AssetMissing: If the file is absent, unreadable or not an SVG.
        """
        path = self.asset_dir / f"{kind.value}.svg"
        try:
            svg_text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise AssetMissing(f"Glyph '{kind.value}' could not be read from '{path}': {exc}") from exc
        return parse_svg_glyph(kind, svg_text)

    def get(self, kind: GlyphKind) -> Glyph:
        """Return the handle for ``kind``, falling back to a blank glyph."""
        cached = self._cache.get(kind)
        if cached is not None:
            return cached

        try:
            glyph = self.load(kind)
        except AssetMissing as exc:
            logger.error("%s", exc)
            logger.error("Using an empty glyph for '%s' instead.", kind.value)
            glyph = Glyph.blank(kind)

        self._cache[kind] = glyph
        return glyph
