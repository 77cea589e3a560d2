"""
app/services/pdf_service.py

Purpose: PDF engine (PyMuPDF)

- Reads page count and first-page dimensions
- Applies an ordered list of edit operations to an in-memory document
- Concatenates documents for merging
- Works on bytes only; storage and records live in the calling services

Coordinates in operations are PDF user-space coordinates with the origin at
the bottom-left of the page. They are converted to PyMuPDF's top-down space
through each page's transformation matrix.
"""

import base64
import binascii
import re
from typing import Any, Callable, Dict, Iterable, List, Sequence, Tuple

import fitz  # PyMuPDF

from app.core.exceptions import PdfDeskError, PdfProcessingError, ValidationError
from app.core.logging import get_logger

logger = get_logger(__name__)

# Client font names -> PyMuPDF base-14 font codes
FONTS = {
    "Helvetica": "helv",
    "Helvetica-Bold": "hebo",
    "Times-Roman": "tiro",
    "Courier": "cour",
}
DEFAULT_FONT = "helv"
DEFAULT_TEXT_SIZE = 12

WATERMARK_FONT = "hebo"
WATERMARK_SIZE = 60
WATERMARK_COLOR = (0.7, 0.7, 0.7)
WATERMARK_ANGLE = 45
WATERMARK_CHAR_OFFSET = 10
DEFAULT_WATERMARK_OPACITY = 0.3

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"

_HEX_COLOR = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)


def hex_to_rgb(value: str) -> Tuple[float, float, float]:
    """
    Converts `#rrggbb` (hash optional) to normalized RGB components.
    Anything else yields black.
    """
    match = _HEX_COLOR.match(value or "")
    if not match:
        return (0.0, 0.0, 0.0)
    return tuple(int(part, 16) / 255 for part in match.groups())


def _open_document(data: bytes) -> fitz.Document:
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        raise PdfProcessingError("PDF could not be decoded") from e

    if doc.needs_pass:
        doc.close()
        raise PdfProcessingError("PDF is password protected")
    if doc.page_count == 0:
        doc.close()
        raise PdfProcessingError("PDF has no pages")
    return doc


def _page_at(doc: fitz.Document, index: int) -> fitz.Page:
    if not 0 <= index < doc.page_count:
        raise ValidationError(
            f"Page index {index} is out of range (document has {doc.page_count} pages)"
        )
    return doc[index]


def _page_size(page: fitz.Page) -> Tuple[float, float]:
    box = page.mediabox
    return box.width, box.height


def _to_page_point(page: fitz.Page, x: float, y: float) -> fitz.Point:
    return fitz.Point(x, y) * page.transformation_matrix


def _to_page_rect(page: fitz.Page, x: float, y: float, width: float, height: float) -> fitz.Rect:
    return fitz.Rect(x, y, x + width, y + height) * page.transformation_matrix


def _metadata(doc: fitz.Document) -> Dict[str, Any]:
    if doc.page_count == 0:
        raise PdfProcessingError("PDF has no pages left")

    width, height = _page_size(doc[0])
    fmt = (doc.metadata or {}).get("format") or ""
    return {
        "page_count": doc.page_count,
        "width": width,
        "height": height,
        "version": fmt.replace("PDF", "").strip() or None,
    }


def _serialize(doc: fitz.Document) -> bytes:
    try:
        return doc.tobytes(garbage=3, deflate=True)
    except Exception as e:
        raise PdfProcessingError("PDF could not be written") from e


def read_pdf_metadata(data: bytes) -> Dict[str, Any]:
    """
    Returns page_count, width, height and version of a PDF.

    Raises:
        PdfProcessingError: If the bytes are not a readable PDF
    """
    with _open_document(data) as doc:
        return _metadata(doc)


# ==============================================
# EDIT OPERATIONS
# ==============================================

def _add_text(doc: fitz.Document, op) -> None:
    page = _page_at(doc, op.page_index)
    page.insert_text(
        _to_page_point(page, op.x, op.y),
        op.text,
        fontsize=op.size or DEFAULT_TEXT_SIZE,
        fontname=FONTS.get(op.font_name, DEFAULT_FONT),
        color=hex_to_rgb(op.color or "#000000"),
    )


def _add_watermark(doc: fitz.Document, op) -> None:
    opacity = op.opacity or DEFAULT_WATERMARK_OPACITY
    for page in doc:
        width, height = _page_size(page)
        origin = _to_page_point(
            page,
            width / 2 - len(op.text) * WATERMARK_CHAR_OFFSET,
            height / 2,
        )
        page.insert_text(
            origin,
            op.text,
            fontsize=WATERMARK_SIZE,
            fontname=WATERMARK_FONT,
            color=WATERMARK_COLOR,
            fill_opacity=opacity,
            stroke_opacity=opacity,
            morph=(origin, fitz.Matrix(WATERMARK_ANGLE)),
        )


def _rotate_page(doc: fitz.Document, op) -> None:
    # Absolute, so the last rotation issued for a page wins
    _page_at(doc, op.page_index).set_rotation(op.rotation % 360)


def _decode_image(op) -> bytes:
    payload = op.image_base64
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]
    payload = "".join(payload.split())

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise PdfProcessingError("Image data is not valid base64") from e

    is_png = (op.image_type or "").lower() in ("png", "image/png")
    signature = PNG_SIGNATURE if is_png else JPEG_SIGNATURE
    if not data.startswith(signature):
        raise PdfProcessingError(f"Image data is not a valid {'PNG' if is_png else 'JPEG'}")
    return data


def _add_image(doc: fitz.Document, op) -> None:
    page = _page_at(doc, op.page_index)
    image = _decode_image(op)
    page.insert_image(
        _to_page_rect(page, op.x, op.y, op.width, op.height),
        stream=image,
        keep_proportion=False,
    )


OPERATION_HANDLERS: Dict[str, Callable[[fitz.Document, Any], None]] = {
    "addText": _add_text,
    "addWatermark": _add_watermark,
    "rotatePage": _rotate_page,
    "addImage": _add_image,
}

# Operations that shift page indices; applied after everything else
INDEX_INVALIDATING = {"deletePage"}


def deletion_order(page_indices: Iterable[int], page_count: int) -> List[int]:
    """
    Distinct page indices in strictly descending order, so removing one page
    never shifts an index still waiting to be removed.

    Raises:
        ValidationError: If an index is outside the document
    """
    ordered = sorted(set(page_indices), reverse=True)
    for index in ordered:
        if not 0 <= index < page_count:
            raise ValidationError(
                f"Page index {index} is out of range (document has {page_count} pages)"
            )
    return ordered


def apply_operations(data: bytes, operations: Sequence[Any]) -> Tuple[bytes, Dict[str, Any]]:
    """
    Applies edit operations to a PDF and returns the new bytes with the
    metadata of the resulting document.

    Non-deleting operations run in the given order. Page deletions are
    collected and run last in descending index order. Unknown operation
    types are skipped.

    Args:
        data: Source PDF bytes (left untouched)
        operations: Parsed operation models exposing `type`

    Raises:
        ValidationError: Page index outside the document
        PdfProcessingError: Decode, drawing or write failure
    """
    with _open_document(data) as doc:
        deletions = []

        for position, op in enumerate(operations):
            if op.type in INDEX_INVALIDATING:
                deletions.append(op.page_index)
                continue

            handler = OPERATION_HANDLERS.get(op.type)
            if handler is None:
                logger.debug(f"Skipping unknown operation type {op.type!r}")
                continue

            # MuPDF errors are not all RuntimeError subclasses
            try:
                handler(doc, op)
            except PdfDeskError:
                raise
            except Exception as e:
                raise PdfProcessingError(f"Operation {position} ({op.type}) failed") from e

        for index in deletion_order(deletions, doc.page_count):
            try:
                doc.delete_page(index)
            except Exception as e:
                raise PdfProcessingError(f"Page {index} could not be deleted") from e

        metadata = _metadata(doc)
        return _serialize(doc), metadata


def merge_documents(sources: Iterable[bytes]) -> Tuple[bytes, Dict[str, Any]]:
    """
    Concatenates PDFs in the given order, keeping each source's page order.

    Returns:
        (merged bytes, metadata with page_count equal to the sum of sources)
    """
    with fitz.open() as merged:
        for data in sources:
            with _open_document(data) as source:
                try:
                    merged.insert_pdf(source)
                except Exception as e:
                    raise PdfProcessingError("Pages could not be copied") from e

        metadata = _metadata(merged)
        return _serialize(merged), metadata
