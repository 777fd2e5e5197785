"""Data models used across the stores, pricing, export, CLI, and API."""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .utils import new_id

# Persisted blobs keep the camelCase keys of the browser app; snake_case is
# accepted everywhere in Python code.
MODEL_CONFIG = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

DiscountType = Literal["amount", "percentage"]
DocType = Literal["quote", "invoice"]
Language = Literal["en", "ko"]
TutorialLevel = Literal["basic", "pro"]
ViewTab = Literal["dashboard", "quotes", "templates", "settings"]
TemplateId = Literal[
    "standard", "modern", "minimal", "bold", "elegant", "tech",
    "playful", "eco", "midnight", "brutalist", "vogue", "organic",
]
FontFamily = Literal["sans", "serif", "mono", "playfair", "montserrat", "noto", "roboto-slab"]


class QuoteStatus(str, Enum):
    DRAFT = "Draft"
    FINALIZED = "Finalized"
    WON = "Won"
    LOST = "Lost"


class ThemeConfig(BaseModel):
    model_config = MODEL_CONFIG

    primary_color: str = "#4f46e5"
    secondary_color: str = "#64748b"
    paper_color: str = "#ffffff"
    font_family: FontFamily = "sans"
    border_radius: Literal["none", "small", "medium", "large", "full"] = "medium"
    header_layout: Literal["split", "centered", "banner", "clean"] = "split"
    table_style: Literal["minimal", "bordered", "striped", "grid"] = "minimal"
    accent_alpha: float = 0.1
    show_watermark: bool = False
    paper_padding: Literal["compact", "normal", "wide"] = "normal"
    logo_size: float = 80
    logo_opacity: float = 1.0
    logo_alignment: Literal["left", "center", "right"] = "left"
    logo_blend_mode: Literal["normal", "multiply", "screen"] = "normal"
    invert_logo: bool = False
    logo_pos_x: float = 0
    logo_pos_y: float = 0


class LineItem(BaseModel):
    model_config = MODEL_CONFIG

    id: str = Field(default_factory=new_id)
    description: str = ""
    quantity: float = 1
    unit_price: float = 0
    tax_rate: float = 0
    discount: float = 0
    discount_type: DiscountType = "amount"
    unit: Optional[str] = None


class Quote(BaseModel):
    model_config = MODEL_CONFIG

    id: str = Field(default_factory=new_id)
    number: str
    doc_type: DocType = "quote"
    client_name: str = ""
    client_email: str = ""
    issue_date: str
    expiry_date: str
    currency: str = "USD"
    items: List[LineItem] = Field(default_factory=list)
    status: QuoteStatus = QuoteStatus.DRAFT
    template_id: TemplateId = "standard"
    theme: Optional[ThemeConfig] = None
    terms: str = ""
    notes: str = ""
    language: Language = "en"

    @property
    def display_id(self) -> str:
        """Fallback identifier for messages and reports."""
        return self.number or self.id


class CustomField(BaseModel):
    model_config = MODEL_CONFIG

    id: str = Field(default_factory=new_id)
    label: str = ""
    value: str = ""


class AppSettings(BaseModel):
    model_config = MODEL_CONFIG

    default_currency: str = "USD"
    default_tax_rate: float = 8.875
    default_template_id: TemplateId = "standard"
    theme: ThemeConfig = Field(default_factory=ThemeConfig)
    company_name: str = "Acme Corp"
    representative_name: str = "John Doe"
    company_address: str = "New York, NY, USA"
    company_reg_no: str = "12-3456789"
    company_email: str = "contact@acmecorp.com"
    company_phone: str = "+1 (555) 123-4567"
    bank_info: str = "Chase Bank: 000-0000-0000"
    company_logo: Optional[str] = ""
    company_seal: Optional[str] = ""
    company_website: Optional[str] = None
    company_slogan: Optional[str] = None
    business_type: Optional[str] = "Service"
    business_item: Optional[str] = "IT Consulting"
    custom_fields: List[CustomField] = Field(default_factory=list)
    language: Language = "en"
    has_seen_tutorial: bool = False
    tutorial_level: TutorialLevel = "basic"
    tutorial_step: int = 0
    monthly_goal: float = 50000
    default_terms: Optional[str] = ""
    default_footer_notes: Optional[str] = ""
    doc_number_prefix: str = "QT-"
    next_doc_number: int = 1001

    @field_validator("language", mode="before")
    @classmethod
    def _known_language(cls, value: object) -> object:
        return value if value in ("en", "ko") else "en"


class QuoteTotals(BaseModel):
    model_config = MODEL_CONFIG

    subtotal: float
    total_discount: float
    total_tax: float
    grand_total: float
    has_discount: bool = False


class StatusCounts(BaseModel):
    model_config = MODEL_CONFIG

    total: int = 0
    draft: int = 0
    finalized: int = 0
    won: int = 0
    lost: int = 0


class QuoteValidationResult(BaseModel):
    model_config = MODEL_CONFIG

    quote_id: str
    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class ValidationSummary(BaseModel):
    model_config = MODEL_CONFIG

    total_quotes: int
    valid_quotes: int
    invalid_quotes: int
    error_counts: Dict[str, int] = Field(default_factory=dict)


class ValidationResponse(BaseModel):
    model_config = MODEL_CONFIG

    summary: ValidationSummary
    results: List[QuoteValidationResult]


class CreateQuoteRequest(BaseModel):
    model_config = MODEL_CONFIG

    template_id: Optional[TemplateId] = None
    client_name: Optional[str] = None


class StatusUpdate(BaseModel):
    model_config = MODEL_CONFIG

    status: QuoteStatus
