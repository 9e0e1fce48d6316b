"""
文件解析: 把上传的 CSV / Excel / 文本文件转换为行列表

每行的非空单元格用 ", " 连接，空单元格丢弃，整行为空的行丢弃。
"""
import csv
import io
import logging
import os
from typing import Any, Iterable, List

import openpyxl
import xlrd

from randomness_wtf.errors import FileParseError

logger = logging.getLogger(__name__)

EXCEL_OPENXML_EXTENSIONS = {"xlsx", "xlsm"}
EXCEL_LEGACY_EXTENSIONS = {"xls"}

CSV_DELIMITERS = ",;\t|"
CSV_SNIFF_CHARS = 4096


def _cell_text(cell: Any) -> str:
    if cell is None:
        return ""
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell).strip()


def rows_from_cells(rows: Iterable[Iterable[Any]]) -> List[str]:
    """单元格矩阵 -> 行字符串列表"""
    result = []
    for row in rows:
        cells = [_cell_text(cell) for cell in row]
        cells = [cell for cell in cells if cell]
        if cells:
            result.append(", ".join(cells))
    return result


def _decode(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise FileParseError("File is not valid UTF-8 text") from e


def guess_delimiter(text: str) -> str:
    """在 , ; \\t | 中猜测分隔符，无法判断时使用逗号"""
    sample = "\n".join(line for line in text.splitlines() if line.strip())[:CSV_SNIFF_CHARS]
    try:
        return csv.Sniffer().sniff(sample, delimiters=CSV_DELIMITERS).delimiter
    except csv.Error:
        return ","


def parse_csv(content: bytes) -> List[str]:
    text = _decode(content)
    delimiter = guess_delimiter(text)
    if delimiter != ",":
        logger.info(f"[Parser] CSV 分隔符: {delimiter!r}")
    try:
        return rows_from_cells(csv.reader(io.StringIO(text), delimiter=delimiter))
    except csv.Error as e:
        raise FileParseError(f"Malformed CSV file: {e}") from e


def parse_xlsx(content: bytes) -> List[str]:
    """读取第一个工作表"""
    try:
        workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except Exception as e:
        raise FileParseError(f"Malformed Excel file: {e}") from e
    try:
        sheet = workbook.worksheets[0]
        return rows_from_cells(sheet.iter_rows(values_only=True))
    finally:
        workbook.close()


def parse_xls(content: bytes) -> List[str]:
    try:
        book = xlrd.open_workbook(file_contents=content)
    except Exception as e:
        raise FileParseError(f"Malformed Excel file: {e}") from e
    sheet = book.sheet_by_index(0)
    return rows_from_cells(sheet.row_values(i) for i in range(sheet.nrows))


def parse_text(content: bytes) -> List[str]:
    """逐行解析，丢弃空白行"""
    return [line for line in _decode(content).splitlines() if line.strip()]


def parse_file_to_rows(filename: str, content: bytes) -> List[str]:
    """
    按扩展名解析文件

    Args:
        filename: 上传的文件名，用于判断格式
        content: 文件内容

    Returns:
        行字符串列表
    """
    ext = os.path.splitext(filename or "")[1].lstrip(".").lower()

    if ext == "csv":
        rows = parse_csv(content)
    elif ext in EXCEL_OPENXML_EXTENSIONS:
        rows = parse_xlsx(content)
    elif ext in EXCEL_LEGACY_EXTENSIONS:
        rows = parse_xls(content)
    else:
        rows = parse_text(content)

    logger.info(f"[Parser] {filename}: {len(rows)} 行")
    return rows


def split_list_input(text: str) -> List[str]:
    """
    解析手动输入的列表: 按行拆分，含逗号的行再按逗号拆分，去掉空项
    """
    items = []
    for line in (text or "").split("\n"):
        line = line.strip()
        if "," in line:
            items.extend(part.strip() for part in line.split(","))
        else:
            items.append(line)
    return [item for item in items if item]
