"""
Readers that turn uploaded file bytes into extractor input.

Kept apart from the extractor so extraction itself never touches files.
"""

from io import BytesIO
from zipfile import BadZipFile

import fitz  # PyMuPDF
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from core.errors import FormatError
from services.spreadsheet import CellGrid
from services.text_report import TextSource


def load_cell_grid(data: bytes) -> CellGrid:
    """
    Read every non-empty cell of every sheet, using cached formula values.

    Returns:
        {sheet_name: {"B6": value, ...}}

    Raises:
        FormatError: Bytes are not an Excel workbook
    """
    try:
        wb = load_workbook(BytesIO(data), data_only=True)
    except (InvalidFileException, BadZipFile) as e:
        raise FormatError(f"Not a readable Excel workbook: {e}") from e

    try:
        grid = {}
        for ws in wb.worksheets:
            cells = {}
            for row in ws.iter_rows():
                for cell in row:
                    if cell.value is not None:
                        cells[cell.coordinate] = cell.value
            grid[ws.title] = cells
        return grid
    finally:
        wb.close()


def read_pdf_page(data: bytes, page: int = 0) -> TextSource:
    """
    Extract the words of one PDF page.

    Words are joined with single spaces in reading order; each word is kept as
    a fragment with its position for diagnostics.

    Raises:
        FormatError: Not a PDF, or the page does not exist
    """
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except fitz.FileDataError as e:
        raise FormatError(f"Not a readable PDF file: {e}") from e

    try:
        if page >= doc.page_count:
            raise FormatError(f"Page {page + 1} not found in PDF file ({doc.page_count} pages)")
        words = doc[page].get_text("words")
    finally:
        doc.close()

    words.sort(key=lambda w: (w[5], w[6], w[7]))  # block, line, word number
    fragments = [{"text": w[4], "x": round(w[0], 1), "y": round(w[1], 1)} for w in words]
    text = " ".join(f["text"] for f in fragments)
    return TextSource(text=text, fragments=fragments)
