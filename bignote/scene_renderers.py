"""Renderer implementations that turn draw commands into SVG or HTML."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from bignote.scene_models import DrawCommand, DrawGlyph, FillBackground, StrokeLine


def _escape_html(text: str) -> str:
    """Escape the three characters that are unsafe in HTML text content."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _fmt(value: float) -> str:
    """Compact number formatting for SVG attributes."""
    return f"{value:.3f}".rstrip("0").rstrip(".")


class SceneRenderer(ABC):
    """Abstract scene renderer."""

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @abstractmethod
    def render(
        self,
        frames: Sequence[Sequence[DrawCommand]],
        *,
        width: float,
        height: float,
        title: str = "",
    ) -> str:
        """Render one or more frames into a file content string."""


class SvgSceneRenderer(SceneRenderer):
    """Render a single frame as a standalone SVG document."""

    @property
    def default_extension(self) -> str:
        return ".svg"

    def render(
        self,
        frames: Sequence[Sequence[DrawCommand]],
        *,
        width: float,
        height: float,
        title: str = "",
    ) -> str:
        if len(frames) != 1:
            raise ValueError(f"SVG output holds exactly one frame, got {len(frames)}.")
        return self.render_frame(frames[0], width=width, height=height, title=title)

    def render_frame(
        self,
        commands: Sequence[DrawCommand],
        *,
        width: float,
        height: float,
        title: str = "",
    ) -> str:
        """Render draw commands, in order, into one ``<svg>`` element."""
        body = [self._command_to_svg(command) for command in commands]
        title_tag = f"  <title>{_escape_html(title)}</title>\n" if title else ""
        elements = "\n".join(f"  {element}" for element in body if element)
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" '
            f'width="{_fmt(width)}" height="{_fmt(height)}" '
            f'viewBox="0 0 {_fmt(width)} {_fmt(height)}">\n'
            f"{title_tag}{elements}\n</svg>"
        )

    def _command_to_svg(self, command: DrawCommand) -> str:
        if isinstance(command, FillBackground):
            rect = command.rect
            return (
                f'<rect x="{_fmt(rect.x0)}" y="{_fmt(rect.y0)}" '
                f'width="{_fmt(rect.width)}" height="{_fmt(rect.height)}" '
                f'fill="{command.color}"/>'
            )
        if isinstance(command, StrokeLine):
            seg = command.segment
            return (
                f'<line x1="{_fmt(seg.x0)}" y1="{_fmt(seg.y)}" '
                f'x2="{_fmt(seg.x1)}" y2="{_fmt(seg.y)}" '
                f'stroke="{command.color}" stroke-width="{_fmt(command.stroke_width)}"/>'
            )
        if isinstance(command, DrawGlyph):
            glyph = command.glyph
            if glyph.is_blank:
                return ""
            rect = command.rect
            view_box = " ".join(_fmt(v) for v in glyph.view_box)
            return (
                f'<svg class="glyph-{glyph.kind.value}" x="{_fmt(rect.x0)}" y="{_fmt(rect.y0)}" '
                f'width="{_fmt(rect.width)}" height="{_fmt(rect.height)}" '
                f'viewBox="{view_box}">{glyph.svg_body}</svg>'
            )
        raise TypeError(f"Unknown draw command: {command!r}")


class HtmlSceneRenderer(SceneRenderer):
    """Render frames as inline SVG inside a self-contained HTML document."""

    def __init__(self) -> None:
        self._svg = SvgSceneRenderer()

    @property
    def default_extension(self) -> str:
        return ".html"

    def render(
        self,
        frames: Sequence[Sequence[DrawCommand]],
        *,
        width: float,
        height: float,
        title: str = "",
        captions: Sequence[str] | None = None,
    ) -> str:
        svgs = [self._svg.render_frame(frame, width=width, height=height) for frame in frames]
        return self.build_html(title, svgs, captions)

    def build_html(self, title: str, svgs: list[str], captions: Sequence[str] | None = None) -> str:
        """
        Wrap a list of SVG strings in a self-contained HTML document.

        Each SVG is placed in its own ``.frame`` div with an optional caption
        underneath.
        """
        title_safe = _escape_html(title)
        heading = f"  <h1>{title_safe}</h1>\n" if title else ""
        labels = list(captions) if captions is not None else []

        blocks = []
        for index, svg in enumerate(svgs):
            caption = (
                f'<p class="caption">{_escape_html(labels[index])}</p>' if index < len(labels) else ""
            )
            blocks.append(f'  <div class="frame">{svg}{caption}</div>')
        frames = "\n".join(blocks)

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title_safe}</title>
  <style>
    body {{ font-family: Georgia, serif; margin: 2rem; }}
    h1, .caption {{ text-align: center; }}
    .frame {{ margin: 0 auto 2rem; max-width: 860px; }}
    .frame > svg {{ display: block; width: 100%; height: auto; }}
  </style>
</head>
<body>
{heading}{frames}
</body>
</html>"""
