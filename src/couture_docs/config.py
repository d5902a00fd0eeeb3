"""Configuration dataclass and YAML loading for the document engine."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
import yaml


CELL_TRUNCATION_MODES = ("characters", "measured")

# Only truncation is implemented; every document is a single page
OVERFLOW_POLICIES = ("truncate",)


@dataclass
class RenderConfig:
    """Settings shared by every document a builder renders."""

    brand_name: str = "CECHEMOI"
    currency: str = "FCFA"

    # Static assets (logo) are resolved against this root, never the cwd
    asset_root: Path = field(default_factory=lambda: Path("public"))
    logo_path: str = "apple-touch-icon.png"

    # Seconds before a remote photo fetch is abandoned
    fetch_timeout: float = 5.0

    # Optional TrueType faces; standard Helvetica faces are used when unset
    regular_font_path: Optional[Path] = None
    bold_font_path: Optional[Path] = None

    # Overflow handling (single page, truncate only)
    overflow_policy: str = "truncate"
    notes_max_lines: int = 3
    cell_truncation: str = "characters"

    # Fixed creation dates and ids in the PDF output
    invariant: bool = False

    contact_lines: List[str] = field(default_factory=lambda: [
        "01 BP 4790 Abidjan 01 - COCODY, Riviera Palmeraie - "
        "Tel: (+225) 0759545410 / 0767188230 - www.cechemoi.com",
    ])
    legal_lines: List[str] = field(default_factory=lambda: [
        "Cechemoi, Societe au capital de 1.000.000 F CFA, "
        "sise a Abidjan-Cocody Riviera Palmeraie. Rue L194",
        "Contacts : (+225) 0759545410 / 0767188230 / 2731940681 - "
        "Email : cechemoicreations@gmail.com - Web : www.cechemoi.com",
    ])

    def __post_init__(self):
        if self.cell_truncation not in CELL_TRUNCATION_MODES:
            raise ValueError(
                f"cell_truncation must be one of {CELL_TRUNCATION_MODES}, "
                f"got {self.cell_truncation!r}"
            )
        if self.overflow_policy not in OVERFLOW_POLICIES:
            raise ValueError(
                f"overflow_policy must be one of {OVERFLOW_POLICIES}, "
                f"got {self.overflow_policy!r}"
            )
        if self.notes_max_lines < 0:
            raise ValueError("notes_max_lines cannot be negative")
        if self.fetch_timeout <= 0:
            raise ValueError("fetch_timeout must be positive")

    @classmethod
    def from_yaml(cls, path: Path) -> "RenderConfig":
        """Load configuration from a YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        # Convert path strings to Path objects
        for key in ("asset_root", "regular_font_path", "bold_font_path"):
            if data.get(key) is not None:
                data[key] = Path(data[key])

        return cls(**data)

    def to_yaml(self, path: Path) -> None:
        """Save configuration to a YAML file."""
        data = {
            "brand_name": self.brand_name,
            "currency": self.currency,
            "asset_root": str(self.asset_root),
            "logo_path": self.logo_path,
            "fetch_timeout": self.fetch_timeout,
            "regular_font_path": str(self.regular_font_path) if self.regular_font_path else None,
            "bold_font_path": str(self.bold_font_path) if self.bold_font_path else None,
            "overflow_policy": self.overflow_policy,
            "notes_max_lines": self.notes_max_lines,
            "cell_truncation": self.cell_truncation,
            "invariant": self.invariant,
            "contact_lines": self.contact_lines,
            "legal_lines": self.legal_lines,
        }
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def load_config(path: Optional[Path] = None) -> RenderConfig:
    """Load config from path or return default config."""
    if path is None:
        return RenderConfig()
    return RenderConfig.from_yaml(path)
