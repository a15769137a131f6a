from io import BytesIO

from django.http import HttpResponse
from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
MAX_COLUMN_WIDTH = 50


def build_workbook(rows, title):
    """One sheet: bold header row from the first row's keys, then the values"""
    wb = Workbook()
    ws = wb.active
    ws.title = title[:31]

    if not rows:
        return wb

    headers = list(rows[0].keys())
    ws.append(headers)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for row in rows:
        ws.append([row.get(header) for header in headers])

    for index, header in enumerate(headers, start=1):
        longest = max(len(str(row.get(header, ''))) for row in rows)
        ws.column_dimensions[get_column_letter(index)].width = min(max(longest, len(header)) + 2, MAX_COLUMN_WIDTH)
    ws.freeze_panes = 'A2'
    return wb


def xlsx_response(rows, name):
    wb = build_workbook(rows, name.capitalize())
    bio = BytesIO()
    wb.save(bio)

    filename = f'{name}_{timezone.localdate().isoformat()}.xlsx'
    response = HttpResponse(bio.getvalue(), content_type=XLSX_CONTENT_TYPE)
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response
