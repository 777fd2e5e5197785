"""PDF rendering of a quote with its resolved theme.

Row amounts and totals come from ``pricing`` so the printed figures are the
same floats the editor shows.
"""
from __future__ import annotations

import base64
import io
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from reportlab.lib.colors import Color, HexColor, white
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfgen import canvas

from .exceptions import ExportError
from .i18n import lookup, strings_for
from .pricing import compute_totals, item_discount_amount, item_row_total
from .schemas import AppSettings, Quote, ThemeConfig
from .utils import format_money

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
KOREAN_FONT = "HYSMyeongJo-Medium"

FONTS: Dict[str, Tuple[str, str]] = {
    "sans": ("Helvetica", "Helvetica-Bold"),
    "montserrat": ("Helvetica", "Helvetica-Bold"),
    "noto": ("Helvetica", "Helvetica-Bold"),
    "serif": ("Times-Roman", "Times-Bold"),
    "playfair": ("Times-Roman", "Times-Bold"),
    "roboto-slab": ("Times-Roman", "Times-Bold"),
    "mono": ("Courier", "Courier-Bold"),
}
PADDING_MM = {"compact": 14, "normal": 20, "wide": 28}
TEXT_COLOR = HexColor("#1e293b")
MUTED_COLOR = HexColor("#64748b")
FOOTER_HEIGHT = 34 * mm
PX = 0.75  # CSS px to PDF points


class QuotePdfRenderer:
    def __init__(self, settings: AppSettings) -> None:
        self.settings = settings

    def render(self, quote: Quote) -> bytes:
        try:
            return self._render(quote)
        except Exception as exc:
            logger.exception("PDF export failed for %s", quote.display_id)
            raise ExportError(lookup(quote.language, "pdfError"), context={"quote_id": quote.id}) from exc

    # Internals
    def _render(self, quote: Quote) -> bytes:
        theme = quote.theme or self.settings.theme
        t = strings_for(quote.language)
        regular, bold = self._fonts(theme, quote.language)
        primary = HexColor(theme.primary_color)
        paper = HexColor(theme.paper_color)
        accent = _tint(primary, theme.accent_alpha)
        margin = PADDING_MM.get(theme.paper_padding, 20) * mm

        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4)
        title = t["invoiceTitle"] if quote.doc_type == "invoice" else t["quotationTitle"]
        pdf.setTitle(f"{title} {quote.number}")
        pdf.setAuthor(self.settings.company_name)
        self._paint_paper(pdf, paper)

        # Header
        y = self._logo(pdf, theme, PAGE_HEIGHT - margin, margin)
        if theme.header_layout == "banner":
            pdf.setFillColor(primary)
            pdf.rect(0, y - 14 * mm, PAGE_WIDTH, 24 * mm, stroke=0, fill=1)
            pdf.setFillColor(white)
        else:
            pdf.setFillColor(primary)
        pdf.setFont(bold, 24)
        if theme.header_layout == "centered":
            pdf.drawCentredString(PAGE_WIDTH / 2, y - 6 * mm, title.upper())
        else:
            pdf.drawString(margin, y - 6 * mm, title.upper())
        pdf.setFont(regular, 10)
        pdf.drawRightString(PAGE_WIDTH - margin, y - 6 * mm, quote.number)
        y -= 24 * mm

        # Parties and dates
        pdf.setFillColor(TEXT_COLOR)
        date_label = t["dueDate"] if quote.doc_type == "invoice" else t["expiryDate"]
        left = [self.settings.company_name, self.settings.company_address,
                self.settings.company_email, self.settings.company_phone]
        right = [f"{t['client']}: {quote.client_name}", quote.client_email,
                 f"{t['issueDate']}: {quote.issue_date}", f"{date_label}: {quote.expiry_date}"]
        pdf.setFont(bold, 11)
        pdf.drawString(margin, y, left[0])
        pdf.drawRightString(PAGE_WIDTH - margin, y, right[0])
        pdf.setFont(regular, 9)
        for offset, (lhs, rhs) in enumerate(zip(left[1:], right[1:]), start=1):
            pdf.drawString(margin, y - offset * 5 * mm, lhs or "")
            pdf.drawRightString(PAGE_WIDTH - margin, y - offset * 5 * mm, rhs or "")
        y -= 26 * mm

        # Items
        totals = compute_totals(quote.items)
        columns = self._columns(margin, totals.has_discount)
        y = self._table_header(pdf, columns, y, bold, primary, accent, t)
        pdf.setFont(regular, 9)
        for index, item in enumerate(quote.items):
            if y < margin + 50 * mm:
                pdf.showPage()
                self._paint_paper(pdf, paper)
                y = PAGE_HEIGHT - margin
                y = self._table_header(pdf, columns, y, bold, primary, accent, t)
                pdf.setFont(regular, 9)
            if theme.table_style == "striped" and index % 2 == 1:
                pdf.setFillColor(accent)
                pdf.rect(margin, y - 2 * mm, PAGE_WIDTH - 2 * margin, 7 * mm, stroke=0, fill=1)
            pdf.setFillColor(TEXT_COLOR)
            cells = {
                "description": item.description,
                "qty": format_money(item.quantity),
                "unitPrice": format_money(item.unit_price),
                "discount": format_money(item_discount_amount(item)),
                "totalHeader": format_money(item_row_total(item)),
            }
            for key, x, align in columns:
                self._cell(pdf, cells[key], x, y, align)
            if theme.table_style in ("bordered", "grid"):
                pdf.setStrokeColor(MUTED_COLOR)
                pdf.setLineWidth(0.3)
                pdf.line(margin, y - 2.5 * mm, PAGE_WIDTH - margin, y - 2.5 * mm)
            y -= 7 * mm

        # Totals
        y -= 4 * mm
        rows: List[Tuple[str, float]] = [(t["subtotal"], totals.subtotal)]
        if totals.total_discount > 0:
            rows.append((t["discount"], -totals.total_discount))
        rows.append((t["tax"], totals.total_tax))
        label_x = PAGE_WIDTH - margin - 60 * mm
        pdf.setFont(regular, 10)
        pdf.setFillColor(TEXT_COLOR)
        for label, amount in rows:
            pdf.drawString(label_x, y, label)
            pdf.drawRightString(PAGE_WIDTH - margin, y, format_money(amount, quote.currency))
            y -= 6 * mm
        pdf.setFillColor(primary)
        pdf.setFont(bold, 14)
        pdf.drawString(label_x, y - 2 * mm, t["grandTotal"])
        pdf.drawRightString(PAGE_WIDTH - margin, y - 2 * mm, format_money(totals.grand_total, quote.currency))
        y -= 16 * mm

        # Terms and notes
        pdf.setFillColor(TEXT_COLOR)
        for heading, body in ((t["terms"], quote.terms), (t["notes"], quote.notes)):
            if not body:
                continue
            pdf.setFont(bold, 10)
            pdf.drawString(margin, y, heading)
            y -= 5 * mm
            pdf.setFont(regular, 9)
            for line in simpleSplit(body, regular, 9, PAGE_WIDTH - 2 * margin):
                pdf.drawString(margin, y, line)
                y -= 4.5 * mm
            y -= 3 * mm

        # Identity and signature
        identity = [f"{t['regNo']}: {self.settings.company_reg_no}",
                    f"{t['bankInfo']}: {self.settings.bank_info}"]
        identity += [f"{field.label}: {field.value}" for field in self.settings.custom_fields]
        needed = max(FOOTER_HEIGHT, (len(identity) + 2) * 4.5 * mm)
        if y - needed < margin:
            pdf.showPage()
            self._paint_paper(pdf, paper)
            y = PAGE_HEIGHT - margin
        self._identity_block(pdf, identity, y, margin, regular, bold, t)
        self._signature_block(pdf, y, margin, regular, bold, t)

        if theme.show_watermark:
            pdf.setFillColor(_tint(primary, 0.08))
            pdf.setFont(bold, 72)
            pdf.drawCentredString(PAGE_WIDTH / 2, PAGE_HEIGHT / 2, self.settings.company_name[:12])

        pdf.showPage()
        pdf.save()
        return buffer.getvalue()

    def _logo(self, pdf: canvas.Canvas, theme: ThemeConfig, y: float, margin: float) -> float:
        """Draw the company logo above the title; returns the y below it."""
        logo = _image(self.settings.company_logo)
        if logo is None:
            return y
        height = theme.logo_size * PX
        width = min(height * 3, PAGE_WIDTH - 2 * margin)
        if theme.logo_alignment == "center":
            x, anchor = (PAGE_WIDTH - width) / 2, "s"
        elif theme.logo_alignment == "right":
            x, anchor = PAGE_WIDTH - margin - width, "se"
        else:
            x, anchor = margin, "sw"
        pdf.drawImage(
            logo, x + theme.logo_pos_x * PX, y - height - theme.logo_pos_y * PX,
            width=width, height=height, preserveAspectRatio=True, anchor=anchor, mask="auto",
        )
        return y - height - 4 * mm

    def _identity_block(self, pdf: canvas.Canvas, lines: List[str], y: float, margin: float,
                        regular: str, bold: str, t: Dict[str, str]) -> None:
        pdf.setFillColor(MUTED_COLOR)
        pdf.setFont(bold, 8)
        pdf.drawString(margin, y, t["companyIdentity"].upper())
        pdf.setFillColor(TEXT_COLOR)
        pdf.setFont(regular, 9)
        for offset, line in enumerate(lines, start=1):
            pdf.drawString(margin, y - offset * 4.5 * mm, line)

    def _signature_block(self, pdf: canvas.Canvas, y: float, margin: float,
                         regular: str, bold: str, t: Dict[str, str]) -> None:
        right = PAGE_WIDTH - margin
        line_y = y - FOOTER_HEIGHT + 6 * mm
        seal = _image(self.settings.company_seal)
        if seal is not None:
            pdf.drawImage(seal, right - 28 * mm, line_y - 4 * mm, width=26 * mm, height=26 * mm,
                          preserveAspectRatio=True, anchor="c", mask="auto")
        pdf.setStrokeColor(MUTED_COLOR)
        pdf.setLineWidth(1)
        pdf.line(right - 55 * mm, line_y, right, line_y)
        pdf.setFillColor(MUTED_COLOR)
        pdf.setFont(bold, 10)
        pdf.drawRightString(right - 58 * mm, line_y, t["signature"])
        pdf.setFillColor(TEXT_COLOR)
        pdf.setFont(regular, 9)
        pdf.drawRightString(right, line_y - 5 * mm, self.settings.representative_name)

    def _fonts(self, theme: ThemeConfig, language: str) -> Tuple[str, str]:
        if language == "ko":
            if KOREAN_FONT not in pdfmetrics.getRegisteredFontNames():
                pdfmetrics.registerFont(UnicodeCIDFont(KOREAN_FONT))
            return KOREAN_FONT, KOREAN_FONT
        return FONTS.get(theme.font_family, FONTS["sans"])

    def _columns(self, margin: float, with_discount: bool) -> List[Tuple[str, float, str]]:
        right = PAGE_WIDTH - margin
        columns = [("description", margin, "left"), ("qty", right - 95 * mm, "right"),
                   ("unitPrice", right - 65 * mm, "right")]
        if with_discount:
            columns.append(("discount", right - 33 * mm, "right"))
        columns.append(("totalHeader", right, "right"))
        return columns

    def _table_header(self, pdf: canvas.Canvas, columns, y: float, bold: str,
                      primary: Color, accent: Color, t: Dict[str, str]) -> float:
        pdf.setFillColor(accent)
        left = columns[0][1]
        pdf.rect(left, y - 2.5 * mm, PAGE_WIDTH - 2 * left, 8 * mm, stroke=0, fill=1)
        pdf.setFillColor(primary)
        pdf.setFont(bold, 9)
        for key, x, align in columns:
            self._cell(pdf, t[key].upper(), x, y, align)
        return y - 9 * mm

    @staticmethod
    def _cell(pdf: canvas.Canvas, text: str, x: float, y: float, align: str) -> None:
        if align == "right":
            pdf.drawRightString(x, y, text)
        else:
            pdf.drawString(x, y, text)

    @staticmethod
    def _paint_paper(pdf: canvas.Canvas, paper: Color) -> None:
        pdf.setFillColor(paper)
        pdf.rect(0, 0, PAGE_WIDTH, PAGE_HEIGHT, stroke=0, fill=1)


def _image(data_url: Optional[str]) -> Optional[ImageReader]:
    """Decode a base64 ``data:`` URL; None when empty or not an image."""
    if not data_url:
        return None
    _, _, payload = data_url.partition(",")
    try:
        return ImageReader(io.BytesIO(base64.b64decode(payload or data_url, validate=True)))
    except (ValueError, OSError) as exc:
        logger.warning("Skipping unreadable image: %s", exc)
        return None


def _tint(color: Color, alpha: float) -> Color:
    """Blend ``color`` over white; ``alpha`` 0 gives white, 1 the colour."""
    alpha = min(max(alpha, 0.0), 1.0)
    return Color(
        1 - (1 - color.red) * alpha,
        1 - (1 - color.green) * alpha,
        1 - (1 - color.blue) * alpha,
    )


def export_pdf(quote: Quote, settings: AppSettings, path: str | Path) -> Path:
    """Render ``quote`` and write it to ``path``; quote state is never changed."""
    data = QuotePdfRenderer(settings).render(quote)
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    except OSError as exc:
        logger.exception("Could not write PDF to %s", target)
        raise ExportError(lookup(quote.language, "pdfError"), context={"path": str(target)}) from exc
    logger.info("Exported %s to %s", quote.display_id, target)
    return target
