from quotetonic.i18n import UI_STRINGS, lookup, strings_for
from quotetonic.schemas import AppSettings, ThemeConfig
from quotetonic.themes import THEME_PRESETS, resolve_template_id, theme_for


def test_twelve_presets_with_standard_default():
    assert len(THEME_PRESETS) == 12
    assert THEME_PRESETS["standard"] == ThemeConfig()


def test_resolve_template_id():
    assert resolve_template_id("tech", AppSettings()) == "tech"
    assert resolve_template_id(None, AppSettings(default_template_id="eco")) == "eco"
    assert resolve_template_id(None, AppSettings()) == "standard"


def test_theme_for_unknown_template_copies_settings_theme():
    settings = AppSettings(theme=ThemeConfig(primary_color="#123456"))
    theme = theme_for("custom", settings)

    assert theme.primary_color == "#123456"
    assert theme is not settings.theme


def test_languages_define_the_same_keys():
    assert set(UI_STRINGS["en"]) == set(UI_STRINGS["ko"])


def test_lookup_falls_back():
    assert strings_for("fr") is UI_STRINGS["en"]
    assert lookup("ko", "copySuffix") == "(사본)"
    assert lookup("ko", "no-such-key") == "no-such-key"
