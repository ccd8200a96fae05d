# toolroom/services/export_service.py
"""CSV, PDF and XLSX renderings of history, cost quotes and currency tables."""
import csv
import io
import re
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable
from xml.sax.saxutils import escape

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from toolroom.calculators.afk_price import AfkPriceInput, AfkPriceResult
from toolroom.calculators.cost import CostInput, CostResult
from toolroom.data.payroll import MONTH_NAMES_TR
from toolroom.models import SavedCalculation

CSV_BOM = "\ufeff"
CSV_HEADERS = ["ID", "Tarih", "Hesaplama Tipi", "Malzeme", "Takım", "Parametreler", "Sonuçlar"]
BRAND_NAME = "GAGE Confidence ToolSense"

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

# Helvetica has no glyphs for these
_PDF_TRANSLIT = str.maketrans("İıĞğÜüŞşÖöÇç₺", "IiGgUuSsOoCcT")


def format_key(key: str) -> str:
    """``cuttingSpeed`` / ``cutting_speed`` -> ``Cutting speed``; "per" becomes "/"."""
    words = _CAMEL_RE.sub(" ", key).replace("_", " ").split()
    words = ["/" if w.lower() == "per" else w.lower() for w in words]
    text = " ".join(words)
    return text[:1].upper() + text[1:]


def format_pairs(values: dict[str, Any], separator: str = "; ") -> str:
    return separator.join(f"{format_key(k)}: {v}" for k, v in (values or {}).items())


def format_timestamp(value: datetime) -> str:
    return value.strftime("%d.%m.%Y %H:%M:%S")


def pdf_safe_text(text: Any) -> str:
    return str(text if text is not None else "").translate(_PDF_TRANSLIT)


def _p(text: Any, style: ParagraphStyle) -> Paragraph:
    return Paragraph(escape(pdf_safe_text(text)), style)


# -- CSV ------------------------------------------------------------------


def history_csv(records: Iterable[SavedCalculation]) -> str:
    """Header plus one row per record, prefixed with a BOM for Excel."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for record in records:
        writer.writerow(
            [
                record.id,
                format_timestamp(record.created_at),
                record.type_label,
                record.material,
                record.tool,
                format_pairs(record.parameters),
                format_pairs(record.results),
            ]
        )
    return CSV_BOM + buf.getvalue()


# -- PDF ------------------------------------------------------------------


def _pdf_document(buf: io.BytesIO) -> SimpleDocTemplate:
    return SimpleDocTemplate(
        buf,
        pagesize=A4,
        rightMargin=2 * cm,
        leftMargin=2 * cm,
        topMargin=2 * cm,
        bottomMargin=2 * cm,
        title=BRAND_NAME,
    )


def _styles() -> tuple[ParagraphStyle, ParagraphStyle, ParagraphStyle]:
    styles = getSampleStyleSheet()
    title = ParagraphStyle("ToolroomTitle", parent=styles["Heading1"], fontSize=16, spaceAfter=12, alignment=TA_CENTER)
    heading = ParagraphStyle("ToolroomHeading", parent=styles["Heading3"], spaceBefore=8, spaceAfter=4)
    return title, heading, styles["Normal"]


def _kv_table(rows: list[list[str]], highlight_last: bool = False) -> Table:
    table = Table([[pdf_safe_text(a), pdf_safe_text(b)] for a, b in rows], colWidths=[7 * cm, 9 * cm])
    style = [
        ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("BACKGROUND", (0, 0), (0, -1), colors.whitesmoke),
    ]
    if highlight_last and rows:
        style += [
            ("BACKGROUND", (0, -1), (-1, -1), colors.orange),
            ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
        ]
    table.setStyle(TableStyle(style))
    return table


def calculation_pdf(record: SavedCalculation) -> bytes:
    buf = io.BytesIO()
    doc = _pdf_document(buf)
    title, heading, normal = _styles()

    story = [
        _p(f"{record.type_label} Raporu", title),
        _p(f"Tarih: {format_timestamp(record.created_at)}", normal),
        _p(f"Malzeme: {record.material}  |  Takım: {record.tool}", normal),
        Spacer(1, 12),
        Paragraph("Parametreler", heading),
        _kv_table([[format_key(k), str(v)] for k, v in (record.parameters or {}).items()]),
        _p("Sonuçlar", heading),
        _kv_table([[format_key(k), str(v)] for k, v in (record.results or {}).items()]),
    ]
    if record.notes:
        story += [Paragraph("Notlar", heading), _p(record.notes, normal)]
    story += [Spacer(1, 18), _p(BRAND_NAME, normal)]

    doc.build(story)
    return buf.getvalue()


def history_pdf(records: list[SavedCalculation]) -> bytes:
    buf = io.BytesIO()
    doc = _pdf_document(buf)
    title, heading, normal = _styles()

    story = [
        _p("Hesaplama Geçmişi", title),
        _p(f"Toplam {len(records)} kayıt", normal),
        Spacer(1, 12),
    ]
    for record in records:
        story.append(
            _p(
                f"{record.type_label} - {format_timestamp(record.created_at)}",
                heading,
            )
        )
        story.append(_p(f"{record.material} / {record.tool}", normal))
        story.append(_p(format_pairs(record.results, " | "), normal))
    doc.build(story)
    return buf.getvalue()


def _tl(value: Decimal) -> str:
    return f"{value:,.2f} TL"


def cost_quote_pdf(data: CostInput, result: CostResult) -> bytes:
    buf = io.BytesIO()
    doc = _pdf_document(buf)
    title, heading, normal = _styles()

    header = [
        ["Referans No", data.reference_no or "-"],
        ["Müşteri", data.customer or "-"],
        ["Malzeme", data.material or "-"],
        ["Tezgahlar", ", ".join(data.machines) or "-"],
        ["Tarih", format_timestamp(datetime.now())],
    ]
    inputs = [
        ["İşçilik (TL/saat)", _tl(data.labor_rate)],
        ["Hazırlık süresi (dk)", str(data.setup_time)],
        ["İşleme süresi / parça (dk)", str(data.machining_time)],
        ["Sipariş adedi", str(data.quantity)],
        ["Fire oranı (%)", str(data.scrap_rate)],
        ["Kâr marjı (%)", str(data.profit_margin)],
    ]
    totals = [
        ["Toplam işleme (saat)", str(result.total_machining_hours)],
        ["İşçilik maliyeti", _tl(result.labor_cost)],
        ["Tezgah maliyeti", _tl(result.machine_cost)],
        ["Ek maliyetler", _tl(result.additional_costs)],
        ["Fire maliyeti", _tl(result.scrap_cost)],
        ["Kâr", _tl(result.profit)],
        ["Parça başı maliyet", _tl(result.cost_per_part)],
        ["Genel toplam", _tl(result.grand_total)],
    ]

    story = [
        _p("Maliyet Hesaplama Raporu", title),
        _kv_table(header),
        Paragraph("Girdiler", heading),
        _kv_table(inputs),
        _p("Sonuçlar", heading),
        _kv_table(totals, highlight_last=True),
        Spacer(1, 18),
        _p(BRAND_NAME, normal),
    ]
    doc.build(story)
    return buf.getvalue()


def _eur(value: Decimal) -> str:
    return f"€{value:,.2f}"


def afk_price_pdf(material_name: str, data: AfkPriceInput, result: AfkPriceResult) -> bytes:
    buf = io.BytesIO()
    doc = _pdf_document(buf)
    title, heading, normal = _styles()

    header = [
        ["Malzeme", material_name],
        ["Yoğunluk", f"{data.density} g/cm³"],
        ["Sipariş adedi", str(result.quantity)],
        ["Tarih", format_timestamp(datetime.now())],
    ]
    inputs = [
        ["Brüt ağırlık", f"{data.gross_weight} kg"],
        ["Net ağırlık", f"{data.net_weight} kg"],
        ["Talaş ağırlığı", f"{result.chip_weight} kg"],
        ["Talaş hacmi", f"{result.chip_volume} cm³"],
        ["Malzeme fiyatı", f"{_eur(data.price_per_kg)}/kg (AFK: x{data.afk_multiplier})"],
    ]
    totals = [["Talaş maliyeti", _eur(result.chip_cost)]]
    if data.has_holes:
        totals += [
            [f"Küçük delik ({data.small_holes} x €1,50)", _eur(result.small_hole_cost)],
            [f"Büyük delik ({data.large_holes} x €1,00)", _eur(result.large_hole_cost)],
            ["Toplam delik maliyeti", _eur(result.total_hole_cost)],
        ]
    totals += [
        ["Ara toplam", _eur(result.subtotal)],
        [f"Kâr (%{data.profit_margin})", _eur(result.profit)],
        ["Birim fiyat", _eur(result.unit_total)],
        ["Genel toplam", _eur(result.grand_total)],
    ]

    story = [
        _p("AFK Fiyat Hesaplama", title),
        _kv_table(header),
        _p("Girdiler", heading),
        _kv_table(inputs),
        _p("Sonuçlar", heading),
        _kv_table(totals, highlight_last=True),
        Spacer(1, 18),
        _p(BRAND_NAME, normal),
    ]
    doc.build(story)
    return buf.getvalue()


# -- XLSX -----------------------------------------------------------------

BRAND_DARK = "1E2332"
BRAND_ORANGE = "F57C00"
BRAND_LIGHT = "F8F8FC"


def currency_xlsx(rows: list[dict], year: int, is_forecast: bool) -> bytes:
    """Monthly rate table with a yearly average row."""
    sheet_title = f"{year} Kur Tahminleri" if is_forecast else f"{year} Kur Ortalamaları"

    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title[:31]

    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color=BRAND_DARK, end_color=BRAND_DARK, fill_type="solid")
    light_fill = PatternFill(start_color=BRAND_LIGHT, end_color=BRAND_LIGHT, fill_type="solid")
    accent = Border(bottom=Side(style="medium", color=BRAND_ORANGE))
    thin = Border(bottom=Side(style="thin", color="DCDCE6"))
    center = Alignment(horizontal="center", vertical="center")

    ws.merge_cells("A1:D1")
    ws["A1"] = f"{sheet_title} - GAGE Confidence"
    ws["A1"].font = Font(size=14, bold=True, color="FFFFFF")
    ws["A1"].fill = header_fill
    ws["A1"].alignment = center

    ws.merge_cells("A2:D2")
    kind = "Tahmin Verisi (AI Destekli)" if is_forecast else "Gerçek Veriler (Aylık Ortalama)"
    ws["A2"] = f"Oluşturma Tarihi: {datetime.now().strftime('%d.%m.%Y')} | {kind}"
    ws["A2"].font = Font(size=9, color="888888")
    ws["A2"].alignment = center

    headers = ["Ay", "USD/TRY (₺)", "EUR/TRY (₺)", "Gram Altın (₺)"]
    for col, header in enumerate(headers, start=1):
        cell = ws.cell(row=4, column=col, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = center
        cell.border = accent

    row_no = 5
    for idx, row in enumerate(rows):
        values = [MONTH_NAMES_TR[row["month"] - 1], row["usd"], row["eur"], row["gold"]]
        for col, value in enumerate(values, start=1):
            cell = ws.cell(row=row_no, column=col, value=value)
            cell.alignment = center
            cell.border = thin
            if idx % 2 == 0:
                cell.fill = light_fill
            if col in (2, 3):
                cell.number_format = "#,##0.00"
            elif col == 4:
                cell.number_format = "#,##0"
        row_no += 1

    if rows:
        ws.cell(row=row_no, column=1, value="Yıllık Ortalama").font = Font(bold=True)
        for col, key in ((2, "usd"), (3, "eur"), (4, "gold")):
            avg = sum(r[key] for r in rows) / len(rows)
            cell = ws.cell(row=row_no, column=col, value=round(avg, 0 if key == "gold" else 2))
            cell.font = Font(bold=True)
            cell.alignment = center
            cell.border = accent

    for col in range(1, 5):
        ws.column_dimensions[get_column_letter(col)].width = 20

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
