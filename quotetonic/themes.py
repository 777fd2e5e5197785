"""Theme presets for the printable templates."""
from __future__ import annotations

from typing import Dict, Optional

from .schemas import AppSettings, ThemeConfig

DEFAULT_TEMPLATE_ID = "standard"

THEME_PRESETS: Dict[str, ThemeConfig] = {
    "standard": ThemeConfig(),
    "modern": ThemeConfig(
        primary_color="#0ea5e9", secondary_color="#334155", font_family="montserrat",
        border_radius="large", header_layout="banner", table_style="striped",
    ),
    "minimal": ThemeConfig(
        primary_color="#111827", secondary_color="#6b7280", border_radius="none",
        header_layout="clean", table_style="minimal", paper_padding="wide",
    ),
    "bold": ThemeConfig(
        primary_color="#dc2626", secondary_color="#111827", font_family="montserrat",
        border_radius="small", header_layout="banner", table_style="grid", accent_alpha=0.2,
    ),
    "elegant": ThemeConfig(
        primary_color="#92400e", secondary_color="#78716c", paper_color="#fffbf5",
        font_family="playfair", header_layout="centered", table_style="bordered",
    ),
    "tech": ThemeConfig(
        primary_color="#22c55e", secondary_color="#0f172a", font_family="mono",
        border_radius="small", table_style="grid",
    ),
    "playful": ThemeConfig(
        primary_color="#ec4899", secondary_color="#8b5cf6", border_radius="full",
        header_layout="centered", table_style="striped", accent_alpha=0.15,
    ),
    "eco": ThemeConfig(
        primary_color="#15803d", secondary_color="#4d7c0f", paper_color="#f7fdf4",
        font_family="noto", border_radius="large", table_style="striped",
    ),
    "midnight": ThemeConfig(
        primary_color="#6366f1", secondary_color="#1e1b4b", paper_color="#f8fafc",
        header_layout="banner", table_style="bordered",
    ),
    "brutalist": ThemeConfig(
        primary_color="#000000", secondary_color="#000000", font_family="mono",
        border_radius="none", header_layout="clean", table_style="grid", accent_alpha=0.0,
    ),
    "vogue": ThemeConfig(
        primary_color="#18181b", secondary_color="#a1a1aa", font_family="playfair",
        border_radius="none", header_layout="centered", paper_padding="wide",
    ),
    "organic": ThemeConfig(
        primary_color="#a16207", secondary_color="#57534e", paper_color="#fdf8f0",
        font_family="roboto-slab", border_radius="large", table_style="minimal",
    ),
}


def resolve_template_id(template_id: Optional[str], settings: AppSettings) -> str:
    """Explicit choice, then the configured default, then ``standard``."""
    return template_id or settings.default_template_id or DEFAULT_TEMPLATE_ID


def theme_for(template_id: str, settings: AppSettings) -> ThemeConfig:
    preset = THEME_PRESETS.get(template_id)
    if preset is None:
        return settings.theme.model_copy(deep=True)
    return preset.model_copy(deep=True)
