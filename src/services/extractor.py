"""
Service Report Extraction

Entry points that turn a service report (an Excel EFSR workbook or a PDF page
in one of the two text templates) into an ExtractedReport. The format variant
is always chosen by the caller.
"""

from pathlib import Path

from core.config import (
    HOME_BASE_KEYWORDS,
    PDF_EXTENSIONS,
    SPREADSHEET_EXTENSIONS,
    STRICT_PARSING,
    VARIANT_SPREADSHEET,
    VARIANTS,
)
from models.entries import ExtractedReport
from services.sources import load_cell_grid, read_pdf_page
from services.spreadsheet import CellGrid, extract_spreadsheet
from services.text_report import TextSource, extract_text_report


def extract_report(
    source: CellGrid | TextSource,
    variant: str,
    *,
    home_base_keywords: tuple[str, ...] = HOME_BASE_KEYWORDS,
    strict: bool = STRICT_PARSING,
    silent: bool = True,
) -> ExtractedReport:
    """
    Extract a report from an in-memory source.

    Args:
        source: Cell grid for 'spreadsheet', TextSource for the text variants
        variant: One of core.config.VARIANTS
        home_base_keywords: Departure locations treated as home base
        strict: Raise on malformed times/dates instead of recording warnings
        silent: If True, suppress print statements (for API usage)

    Raises:
        FormatError: Required sheet/section missing
        ValueError: Unknown variant or source type mismatch
    """
    if variant not in VARIANTS:
        raise ValueError(f"Unknown format variant '{variant}' (valid: {', '.join(VARIANTS)})")

    options = {"home_base_keywords": home_base_keywords, "strict": strict, "silent": silent}

    if variant == VARIANT_SPREADSHEET:
        if isinstance(source, TextSource):
            raise ValueError("Spreadsheet variant needs a cell grid, got page text")
        return extract_spreadsheet(source, **options)

    if not isinstance(source, TextSource):
        raise ValueError(f"Variant '{variant}' needs page text, got a cell grid")
    return extract_text_report(source, variant, **options)


def read_source(data: bytes, filename: str, variant: str) -> CellGrid | TextSource:
    """
    Read uploaded bytes into the source shape the variant expects.

    Raises:
        ValueError: File type does not fit the variant
    """
    suffix = Path(filename).suffix.lower()
    if variant == VARIANT_SPREADSHEET:
        if suffix not in SPREADSHEET_EXTENSIONS:
            raise ValueError(f"Spreadsheet variant expects an Excel file, got '{filename}'")
        return load_cell_grid(data)
    if suffix not in PDF_EXTENSIONS:
        raise ValueError(f"Variant '{variant}' expects a PDF file, got '{filename}'")
    return read_pdf_page(data)


def extract_file(
    input_file: Path,
    variant: str,
    *,
    strict: bool = STRICT_PARSING,
    silent: bool = False,
) -> ExtractedReport:
    """
    Main entry point for file extraction (CLI usage).

    Raises:
        FileNotFoundError: Input file doesn't exist
        FormatError: Required sheet/section missing
    """
    if not silent:
        print(f"Reading input file: {input_file}")

    if not input_file.exists():
        raise FileNotFoundError(f"Input file not found: {input_file}")

    source = read_source(input_file.read_bytes(), input_file.name, variant)
    return extract_report(source, variant, strict=strict, silent=silent)
