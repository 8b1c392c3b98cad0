"""
Excel export of list rows (openpyxl)
"""
import openpyxl
from django.http import HttpResponse
from django.utils import timezone
from openpyxl.styles import Font, PatternFill

from apps.querying.sorting import row_value

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
HEADER_COLOR = "667eea"
MAX_COLUMN_WIDTH = 50


def cell_value(value):
    """Flatten a serialized row value into something a cell can hold."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'Yes' if value else 'No'
    if isinstance(value, (list, tuple)):
        return ', '.join(
            item.get('name', '') if isinstance(item, dict) else str(item)
            for item in value
        )
    if isinstance(value, dict):
        return value.get('name', '')
    return value


def build_workbook(title, columns, rows, custom_ids=()):
    """
    Args:
        title (str): sheet title
        columns (list[ColumnConfig]): columns to export, in display order
        rows (list[dict]): serialized rows
        custom_ids: column ids backed by custom fields, read from customFields
    """
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = title

    for col, column in enumerate(columns, start=1):
        cell = ws.cell(row=1, column=col, value=column.label)
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = PatternFill(start_color=HEADER_COLOR, end_color=HEADER_COLOR, fill_type="solid")

    for row_number, row in enumerate(rows, start=2):
        for col, column in enumerate(columns, start=1):
            ws.cell(row=row_number, column=col, value=cell_value(row_value(row, column.id, column.id in custom_ids)))

    # Adjust column widths
    for col in ws.columns:
        max_length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in col)
        ws.column_dimensions[col[0].column_letter].width = min(max_length + 2, MAX_COLUMN_WIDTH)

    return wb


def workbook_response(wb, filename_prefix):
    response = HttpResponse(content_type=XLSX_CONTENT_TYPE)
    response['Content-Disposition'] = f'attachment; filename="{filename_prefix}_{timezone.now().strftime("%Y%m%d_%H%M%S")}.xlsx"'
    wb.save(response)
    return response
