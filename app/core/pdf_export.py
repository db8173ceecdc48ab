"""
Itinerary export to PDF.

The whole itinerary, every day expanded, is drawn onto one tall raster image
which is then cut into consecutive A4-proportioned pages.
"""

import io
import logging
import math
import re
import unicodedata
from dataclasses import dataclass
from urllib.parse import quote

from PIL import Image, ImageDraw, ImageFont

from app.core.itinerary_planner import format_inr
from app.core.schemas import Itinerary, Trip
from app.core.settings import get_settings

logger = logging.getLogger(__name__)

# A4 at 150 dpi
PAGE_WIDTH_PX = 1240
PAGE_HEIGHT_PX = 1754
PAGE_DPI = 150
MARGIN_PX = 70

FONT_SIZES = {"title": 44, "heading": 32, "subheading": 25, "body": 20, "muted": 18}
COLORS = {
    "title": (20, 20, 20),
    "heading": (196, 84, 30),
    "subheading": (40, 40, 40),
    "body": (50, 50, 50),
    "muted": (110, 110, 110),
}
LINE_SPACING = 1.45


@dataclass
class _Line:
    text: str
    style: str
    indent: int = 0
    space_before: int = 0


def pdf_filename(title: str) -> str:
    slug = re.sub(r"\s+", "_", title.strip()) or "trip"
    return f"{slug}_itinerary.pdf"


def content_disposition(title: str) -> str:
    """
    Attachment header for the exported PDF.

    Header values must be latin-1, so the plain ``filename`` is an ASCII
    approximation of the title and the exact name travels RFC 5987 encoded
    in ``filename*``.
    """
    filename = pdf_filename(title)
    fallback = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    fallback = re.sub(r"_+", "_", re.sub(r"[^A-Za-z0-9._-]", "_", fallback)).strip("_")
    if fallback in {"", "itinerary.pdf"}:
        fallback = "trip_itinerary.pdf"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def _money(amount: float) -> str:
    # Bundled fonts lack the rupee glyph
    return f"Rs. {format_inr(amount)}"


def _layout(trip: Trip, itinerary: Itinerary) -> list[_Line]:
    lines = [
        _Line(trip.title, "title"),
        _Line(
            f"{trip.destination}  |  {trip.start_date.isoformat()} to {trip.end_date.isoformat()}",
            "muted",
            space_before=8,
        ),
        _Line(
            f"Travel style: {trip.travel_style.value}  |  Pace: {trip.pace.value}"
            + (f"  |  Budget: {_money(trip.budget)}" if trip.budget is not None else ""),
            "muted",
        ),
        _Line(itinerary.summary, "body", space_before=24),
        _Line(
            f"Total estimated cost: {_money(itinerary.total_estimated_cost)}",
            "subheading",
            space_before=12,
        ),
    ]

    for day in itinerary.days:
        lines.append(_Line(f"Day {day.day_number}: {day.title}", "heading", space_before=36))

        if day.places:
            lines.append(_Line("Places", "subheading", space_before=12))
            for place in day.places:
                lines.append(
                    _Line(f"{place.name} ({_money(place.estimated_cost)})", "body", indent=20, space_before=6)
                )
                if place.description:
                    lines.append(_Line(place.description, "muted", indent=40))
                if place.timing_tip:
                    lines.append(_Line(f"Best time: {place.timing_tip}", "muted", indent=40))

        if day.transport:
            lines.append(_Line("Transport", "subheading", space_before=12))
            lines.append(
                _Line(
                    f"{day.transport.mode}: {day.transport.description} "
                    f"({_money(day.transport.estimated_cost)})",
                    "body",
                    indent=20,
                )
            )

        if day.food:
            lines.append(_Line("Food", "subheading", space_before=12))
            for item in day.food:
                lines.append(
                    _Line(
                        f"{item.meal}: {item.recommendation} - {item.cuisine} "
                        f"({_money(item.estimated_cost)})",
                        "body",
                        indent=20,
                    )
                )

        breakdown = day.daily_cost_breakdown
        if breakdown:
            lines.append(
                _Line(
                    f"Sightseeing {_money(breakdown.sightseeing)}  |  Transport {_money(breakdown.transport)}"
                    f"  |  Food {_money(breakdown.food)}  |  Misc {_money(breakdown.miscellaneous)}"
                    f"  |  Total {_money(breakdown.total)}",
                    "muted",
                    space_before=12,
                )
            )

        for tip in day.tips:
            lines.append(_Line(f"Tip: {tip}", "muted", indent=20, space_before=4))

    for heading, tips in (("Packing Tips", itinerary.packing_tips), ("General Tips", itinerary.general_tips)):
        if not tips:
            continue
        lines.append(_Line(heading, "heading", space_before=36))
        for tip in tips:
            lines.append(_Line(f"- {tip}", "body", indent=20, space_before=4))

    return lines


def _wrap(text: str, font: ImageFont.ImageFont, max_width: int) -> list[str]:
    words = text.split()
    wrapped: list[str] = []
    current = ""
    for word in words:
        candidate = f"{current} {word}".strip()
        if not current or font.getlength(candidate) <= max_width:
            current = candidate
        else:
            wrapped.append(current)
            current = word
    if current:
        wrapped.append(current)
    return wrapped or [""]


def load_fonts(font_path: str = "") -> dict[str, ImageFont.FreeTypeFont]:
    # Pillow's default font covers Latin only; Hindi text needs a configured font
    if font_path:
        try:
            return {style: ImageFont.truetype(font_path, size) for style, size in FONT_SIZES.items()}
        except OSError as exc:
            logger.warning(f"[Export] Could not load font {font_path}: {exc}. Using the default font")
    return {style: ImageFont.load_default(size=size) for style, size in FONT_SIZES.items()}


def render_itinerary_image(
    trip: Trip,
    itinerary: Itinerary,
    width: int = PAGE_WIDTH_PX,
    font_path: str | None = None,
) -> Image.Image:
    """Rasterize the complete itinerary onto a single white canvas."""
    if font_path is None:
        font_path = get_settings().pdf_font_path
    fonts = load_fonts(font_path)
    content_width = width - 2 * MARGIN_PX

    placed: list[tuple[str, str, int, int]] = []
    y = MARGIN_PX
    for line in _layout(trip, itinerary):
        font = fonts[line.style]
        line_height = int(FONT_SIZES[line.style] * LINE_SPACING)
        y += line.space_before
        for segment in _wrap(line.text, font, content_width - line.indent):
            placed.append((segment, line.style, MARGIN_PX + line.indent, y))
            y += line_height
    height = y + MARGIN_PX

    image = Image.new("RGB", (width, height), "white")
    draw = ImageDraw.Draw(image)
    for text, style, x, top in placed:
        draw.text((x, top), text, font=fonts[style], fill=COLORS[style])
    return image


def paginate(image: Image.Image, page_height: int = PAGE_HEIGHT_PX) -> list[Image.Image]:
    """
    Cut an image into consecutive pages of ``page_height`` pixels.

    Slices are taken top to bottom without overlap; the last page is padded
    with white so every page has the same size.
    """
    width, height = image.size
    page_count = max(1, math.ceil(height / page_height))
    pages = []
    for index in range(page_count):
        top = index * page_height
        bottom = min(top + page_height, height)
        page = Image.new("RGB", (width, page_height), "white")
        page.paste(image.crop((0, top, width, bottom)), (0, 0))
        pages.append(page)
    return pages


def export_itinerary_pdf(trip: Trip, itinerary: Itinerary, font_path: str | None = None) -> bytes:
    image = render_itinerary_image(trip, itinerary, font_path=font_path)
    pages = paginate(image)
    buffer = io.BytesIO()
    pages[0].save(
        buffer,
        format="PDF",
        save_all=True,
        append_images=pages[1:],
        resolution=PAGE_DPI,
    )
    logger.info(f"[Export] Rendered trip {trip.id} to {len(pages)} PDF pages")
    return buffer.getvalue()
