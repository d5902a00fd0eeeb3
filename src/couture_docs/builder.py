"""Drive one sheet onto one page and serialize it to PDF bytes."""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

from .assets import AssetResolver
from .canvas import PageCanvas
from .config import RenderConfig
from .formatting import format_date
from .layout import PageLayout
from .logger import get_logger
from .measurement_sheet import MeasurementSheet
from .models import Customer, CustomOrderRecord, MeasurementRecord, ProductionSheetRecord
from .order_sheet import CustomOrderSheet
from .production_sheet import ProductionSheet
from .sections import Fallback, SectionComposer
from .styles import FontSet
from .table_renderer import CellTruncation, RenderedTable, TableRenderer

LOGGER = get_logger(__name__)

REGULAR_FONT_NAME = "CoutureDocs-Regular"
BOLD_FONT_NAME = "CoutureDocs-Bold"


class BuilderState(Enum):
    INITIALIZED = "INITIALIZED"
    COMPOSING = "COMPOSING"
    FINALIZED = "FINALIZED"


class BuilderError(Exception):
    """Base class for fatal document generation errors."""


class FontEmbeddingError(BuilderError):
    """A configured font file could not be loaded."""


class BuilderStateError(BuilderError):
    """A builder method was called in the wrong state."""


def register_font(name: str, path: Path) -> str:
    """Register a TrueType face with ReportLab; any failure is fatal."""
    path = Path(path)
    if not path.is_file():
        raise FontEmbeddingError(f"font file not found: {path}")
    try:
        pdfmetrics.registerFont(TTFont(name, str(path)))
    except (TTFError, OSError, ValueError) as exc:
        raise FontEmbeddingError(f"cannot embed font {path}: {exc}") from exc
    LOGGER.debug("Registered font %s from %s", name, path)
    return name


def register_fonts(config: RenderConfig) -> FontSet:
    """Fonts for the configured faces, standard Helvetica for the rest."""
    fonts = FontSet()
    regular = fonts.regular
    bold = fonts.bold
    if config.regular_font_path:
        regular = register_font(REGULAR_FONT_NAME, config.regular_font_path)
    if config.bold_font_path:
        bold = register_font(BOLD_FONT_NAME, config.bold_font_path)
    return FontSet(regular=regular, bold=bold, oblique=fonts.oblique)


class DocumentBuilder:
    """
    Builds exactly one single-page document.

    INITIALIZED -> COMPOSING -> FINALIZED. Fonts and the page are set up on
    construction; compose() runs a sheet's sections once and finalize()
    returns the PDF bytes. A finalized builder cannot be reused.

    A sheet is any object with a ``name`` and a
    ``compose(composer, tables, generated_on)`` method returning its
    rendered tables by name.
    """

    def __init__(
        self,
        config: Optional[RenderConfig] = None,
        resolver: Optional[AssetResolver] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.config = config or RenderConfig()
        self.layout = PageLayout.a4()
        self.fonts = register_fonts(self.config)
        self.canvas = PageCanvas(self.layout, self.fonts, invariant=self.config.invariant)
        self.resolver = resolver or AssetResolver(self.config.asset_root, self.config.fetch_timeout)
        self.composer = SectionComposer(self.canvas, self.config, self.resolver)
        self.tables = TableRenderer(self.canvas, truncation=CellTruncation(self.config.cell_truncation))
        self.clock = clock or datetime.now
        self.state = BuilderState.INITIALIZED
        self.rendered_tables: Dict[str, RenderedTable] = {}

    @property
    def fallbacks(self) -> List[Fallback]:
        return self.composer.fallbacks

    def _require(self, state: BuilderState, action: str) -> None:
        if self.state != state:
            raise BuilderStateError(f"cannot {action} a builder in state {self.state.value}")

    def compose(self, sheet) -> "DocumentBuilder":
        self._require(BuilderState.INITIALIZED, "compose")
        self.state = BuilderState.COMPOSING
        LOGGER.info("Composing %s sheet", sheet.name)
        try:
            self.rendered_tables = sheet.compose(self.composer, self.tables, format_date(self.clock()))
        except Exception:
            # No partial documents: the page is abandoned
            self.state = BuilderState.FINALIZED
            raise
        return self

    def finalize(self) -> bytes:
        self._require(BuilderState.COMPOSING, "finalize")
        data = self.canvas.save()
        self.state = BuilderState.FINALIZED
        LOGGER.info("Finalized document: %d bytes, %d asset fallback(s)", len(data), len(self.fallbacks))
        return data

    def build(self, sheet) -> bytes:
        return self.compose(sheet).finalize()


def render_measurement_sheet(
    customer: Customer,
    record: MeasurementRecord,
    config: Optional[RenderConfig] = None,
    resolver: Optional[AssetResolver] = None,
) -> bytes:
    return DocumentBuilder(config, resolver).build(MeasurementSheet(customer, record))


def render_custom_order_sheet(
    order: CustomOrderRecord,
    config: Optional[RenderConfig] = None,
    resolver: Optional[AssetResolver] = None,
) -> bytes:
    return DocumentBuilder(config, resolver).build(CustomOrderSheet(order))


def render_production_sheet(
    record: ProductionSheetRecord,
    config: Optional[RenderConfig] = None,
    resolver: Optional[AssetResolver] = None,
) -> bytes:
    return DocumentBuilder(config, resolver).build(ProductionSheet(record))
