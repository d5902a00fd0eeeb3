"""Load logo and photo images from the asset root or over HTTP."""

import io
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import requests
from PIL import Image
from reportlab.lib.utils import ImageReader

from .logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_FETCH_TIMEOUT = 5.0


@dataclass(frozen=True)
class AssetResult:
    """Either a decoded image or the reason it could not be loaded."""
    ref: str
    image: Optional[ImageReader] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.image is not None

    @classmethod
    def failure(cls, ref: str, reason: str) -> "AssetResult":
        LOGGER.warning("Could not load asset %s: %s", ref, reason)
        return cls(ref=ref, error=reason)


def is_remote(ref: str) -> bool:
    return ref.lower().startswith(("http://", "https://"))


def decode_image(data: bytes, ref: str) -> AssetResult:
    """
    Decode raw bytes with Pillow; undecodable data is a failure.

    Besides OSError, Pillow plugins report corrupt chunk data as SyntaxError,
    struct.error or IndexError.
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (OSError, ValueError, SyntaxError, struct.error, IndexError, Image.DecompressionBombError) as exc:
        return AssetResult.failure(ref, f"undecodable image ({exc})")
    return AssetResult(ref=ref, image=ImageReader(image))


class AssetResolver:
    """
    Resolve image references for a document.

    Remote references (http/https) are fetched with a bounded timeout; any
    other reference is a path under asset_root. Failures are returned as
    values, never raised, so callers can draw a fallback instead.
    """

    def __init__(
        self,
        asset_root: Path,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.asset_root = Path(asset_root)
        self.timeout = timeout
        self.session = session

    def resolve(self, ref: Optional[str]) -> AssetResult:
        if not ref:
            return AssetResult(ref="", error="no reference")
        if is_remote(ref):
            return self.resolve_remote(ref)
        return self.resolve_local(ref)

    def resolve_local(self, ref: str) -> AssetResult:
        root = self.asset_root.resolve()
        try:
            path = (root / ref.lstrip("/")).resolve()
            if root != path and root not in path.parents:
                return AssetResult.failure(ref, "path escapes the asset root")
            found = path.is_file()
        except (OSError, ValueError) as exc:
            # e.g. embedded NUL bytes or over-long names
            return AssetResult.failure(ref, f"invalid path ({exc})")
        if not found:
            return AssetResult.failure(ref, f"file not found under {root}")
        try:
            data = path.read_bytes()
        except OSError as exc:
            return AssetResult.failure(ref, f"unreadable file ({exc})")
        return decode_image(data, ref)

    def resolve_remote(self, url: str) -> AssetResult:
        getter = self.session.get if self.session is not None else requests.get
        try:
            response = getter(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.Timeout:
            return AssetResult.failure(url, f"timed out after {self.timeout}s")
        except requests.RequestException as exc:
            return AssetResult.failure(url, str(exc))
        return decode_image(response.content, url)
