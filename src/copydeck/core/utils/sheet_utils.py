# src/copydeck/core/utils/sheet_utils.py
FORMULA_PREFIX = "="


def keep_text_literal(sheet) -> int:
    """
    openpyxl turns any string starting with '=' into a formula, which reads
    back empty. Marks those cells as plain strings again; returns how many.
    """
    fixed = 0
    for row in sheet.iter_rows():
        for cell in row:
            if cell.data_type == "f" and isinstance(cell.value, str) and cell.value.startswith(FORMULA_PREFIX):
                cell.data_type = "s"
                fixed += 1
    return fixed


def autosize_columns(sheet, max_width: int = 100) -> None:
    for col in sheet.columns:
        max_len = max((len(str(cell.value)) for cell in col if cell.value is not None), default=0)
        sheet.column_dimensions[col[0].column_letter].width = min(max_len + 2, max_width)
