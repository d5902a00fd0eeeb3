"""Colour palette, font roles and text styles shared by every sheet."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict
from reportlab.lib.colors import Color, white


class FontRole(Enum):
    """Font faces a document can draw with."""
    REGULAR = "regular"
    BOLD = "bold"
    OBLIQUE = "oblique"


@dataclass(frozen=True)
class TextStyle:
    """Font role, size and fill colour for one run of text."""
    role: FontRole
    size: float
    color: Color


@dataclass(frozen=True)
class Palette:
    """Named colours. Each name keeps one meaning across all sheets."""
    brand: Color           # Titles, section headings, footer divider
    table_header: Color    # Table header bars
    text: Color            # Body text
    muted: Color           # Labels, placeholders, footer text
    divider: Color         # Row dividers, underline rules
    border: Color          # Box and table borders
    success: Color         # Payments, delivered status, settled balance
    warning: Color         # Outstanding balance, pickup date, urgent priority
    danger: Color          # Customer deadline, cancelled status, VIP priority
    watermark: Color
    stripe: Color          # Zebra rows
    panel: Color           # Info box fill
    total_fill: Color      # Total rows
    header_text: Color


PALETTE = Palette(
    brand=Color(0.9, 0.32, 0),
    table_header=Color(0.8, 0.15, 0.15),
    text=Color(0.1, 0.1, 0.1),
    muted=Color(0.4, 0.4, 0.4),
    divider=Color(0.7, 0.7, 0.7),
    border=Color(0.3, 0.3, 0.3),
    success=Color(0.1, 0.6, 0.2),
    warning=Color(0.9, 0.5, 0.1),
    danger=Color(0.8, 0.1, 0.1),
    watermark=Color(0.9, 0.95, 0.9),
    stripe=Color(0.97, 0.97, 0.97),
    panel=Color(0.98, 0.98, 0.98),
    total_fill=Color(0.95, 0.95, 0.95),
    header_text=white,
)


@dataclass(frozen=True)
class FontSet:
    """ReportLab font names registered for each role."""
    regular: str = "Helvetica"
    bold: str = "Helvetica-Bold"
    oblique: str = "Helvetica-Oblique"

    def name_for(self, role: FontRole) -> str:
        names: Dict[FontRole, str] = {
            FontRole.REGULAR: self.regular,
            FontRole.BOLD: self.bold,
            FontRole.OBLIQUE: self.oblique,
        }
        return names[role]


def regular(size: float, color: Color = PALETTE.text) -> TextStyle:
    return TextStyle(FontRole.REGULAR, size, color)


def bold(size: float, color: Color = PALETTE.text) -> TextStyle:
    return TextStyle(FontRole.BOLD, size, color)


def oblique(size: float, color: Color = PALETTE.text) -> TextStyle:
    return TextStyle(FontRole.OBLIQUE, size, color)
