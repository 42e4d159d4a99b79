from __future__ import annotations

from io import BytesIO
from typing import Iterable

from fastapi.responses import StreamingResponse
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from shipadmin.models.shipping_charge import ShippingCharge

EXPORT_SHEET = "SHIPPING_CHARGES"
EXPORT_COLUMNS = [
    "id",
    "country",
    "region",
    "display_name",
    "delivery_charge",
    "return_charge",
    "estimated_days",
    "is_active",
    "updated_at",
]

_HEADER_FILL = PatternFill(start_color="FFD9E1F2", end_color="FFD9E1F2", fill_type="solid")
_HEADER_FONT = Font(bold=True)
_XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _append_header(ws, columns: list[str]) -> None:
    ws.append(columns)
    ws.freeze_panes = "A2"
    for idx, column_name in enumerate(columns, start=1):
        cell = ws.cell(row=1, column=idx)
        cell.fill = _HEADER_FILL
        cell.font = _HEADER_FONT
        ws.column_dimensions[get_column_letter(idx)].width = max(14, min(36, len(column_name) + 5))


def _row_for(charge: ShippingCharge) -> list:
    return [
        charge.id,
        charge.country,
        charge.region or "",
        charge.display_name,
        float(charge.delivery_charge),
        float(charge.return_charge),
        charge.estimated_days,
        "Y" if charge.is_active else "N",
        charge.updated_at.isoformat(sep=" ", timespec="seconds") if charge.updated_at else "",
    ]


def build_shipping_charge_workbook(charges: Iterable[ShippingCharge]) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = EXPORT_SHEET
    _append_header(ws, EXPORT_COLUMNS)
    for charge in charges:
        ws.append(_row_for(charge))
    return wb


def export_shipping_charges(charges: Iterable[ShippingCharge]) -> StreamingResponse:
    wb = build_shipping_charge_workbook(charges)
    buffer = BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return StreamingResponse(
        buffer,
        media_type=_XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="shipping_charges.xlsx"'},
    )
