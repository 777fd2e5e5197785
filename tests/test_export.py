import io

import pdfplumber
import pytest

from quotetonic.exceptions import ExportError
from quotetonic.export import QuotePdfRenderer, export_pdf
from quotetonic.schemas import AppSettings, CustomField, LineItem, ThemeConfig
from quotetonic.themes import THEME_PRESETS
from tests.factories import QuoteFactory


def pdf_text(data: bytes) -> str:
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        return "\n".join(page.extract_text() or "" for page in pdf.pages)


@pytest.fixture
def quote():
    return QuoteFactory.create(
        "QT-001001",
        client_name="Globex",
        items=[LineItem(description="Consulting", quantity=3, unit_price=50, tax_rate=10)],
        terms="Payment within 30 days",
    )


def test_render_contains_number_and_totals(quote):
    text = pdf_text(QuotePdfRenderer(AppSettings()).render(quote))

    assert "QT-001001" in text
    assert "Globex" in text
    assert "Consulting" in text
    assert "USD 165" in text
    assert "Payment within 30 days" in text


def test_invoice_title(quote):
    invoice = quote.model_copy(update={"doc_type": "invoice"})
    text = pdf_text(QuotePdfRenderer(AppSettings()).render(invoice))
    assert "INVOICE" in text


@pytest.mark.parametrize("template_id", sorted(THEME_PRESETS))
def test_every_preset_renders(quote, template_id):
    themed = quote.model_copy(update={"template_id": template_id, "theme": THEME_PRESETS[template_id]})
    data = QuotePdfRenderer(AppSettings()).render(themed)
    assert data.startswith(b"%PDF")


def test_long_item_list_spans_pages(quote):
    many = quote.model_copy(update={"items": [LineItem(description=f"Row {n}", quantity=1, unit_price=1)
                                              for n in range(60)]})
    with pdfplumber.open(io.BytesIO(QuotePdfRenderer(AppSettings()).render(many))) as pdf:
        assert len(pdf.pages) > 1


def test_korean_quote_renders(quote):
    korean = quote.model_copy(update={"language": "ko"})
    assert QuotePdfRenderer(AppSettings(language="ko")).render(korean).startswith(b"%PDF")


def test_bad_theme_colour_raises_localized_error(quote):
    broken = quote.model_copy(update={"theme": ThemeConfig(primary_color="not-a-colour")})

    with pytest.raises(ExportError) as exc_info:
        QuotePdfRenderer(AppSettings()).render(broken)

    assert exc_info.value.message == "Failed to generate PDF. Please try again."
    assert exc_info.value.context["quote_id"] == quote.id


def test_export_leaves_quote_unchanged(quote, tmp_path):
    before = quote.model_dump()

    path = export_pdf(quote, AppSettings(), tmp_path / "nested" / "q.pdf")

    assert path.read_bytes().startswith(b"%PDF")
    assert quote.model_dump() == before


PIXEL_PNG = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


def test_identity_block_and_signature(quote):
    settings = AppSettings(
        company_reg_no="98-7654321",
        bank_info="First Bank 123",
        representative_name="Jane Roe",
        custom_fields=[CustomField(label="VAT ID", value="GB123")],
    )
    text = pdf_text(QuotePdfRenderer(settings).render(quote))

    assert "Reg No: 98-7654321" in text
    assert "Bank: First Bank 123" in text
    assert "VAT ID: GB123" in text
    assert "Signature" in text
    assert "Jane Roe" in text


def test_logo_and_seal_are_drawn(quote):
    settings = AppSettings(company_logo=PIXEL_PNG, company_seal=PIXEL_PNG)
    data = QuotePdfRenderer(settings).render(quote)

    with pdfplumber.open(io.BytesIO(data)) as pdf:
        assert sum(len(page.images) for page in pdf.pages) == 2


def test_unreadable_logo_is_skipped(quote):
    settings = AppSettings(company_logo="data:image/png;base64,not-an-image")
    data = QuotePdfRenderer(settings).render(quote)

    with pdfplumber.open(io.BytesIO(data)) as pdf:
        assert sum(len(page.images) for page in pdf.pages) == 0
    assert "QT-001001" in pdf_text(data)
