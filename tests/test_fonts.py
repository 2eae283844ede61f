import pytest

from banner import FontNotRegisteredError, FontProvider, FontRegistry


def test_provider_measures_with_size(font_provider):
    small = font_provider.measure("Hello world", 20)
    large = font_provider.measure("Hello world", 40)
    assert 0 < small < large


def test_measure_empty_string(font_provider):
    assert font_provider.measure("", 30) == 0.0


def test_provider_reuses_font_per_size(font_provider):
    assert font_provider.get_font(30) is font_provider.get_font(30)
    assert font_provider.get_font(30) is not font_provider.get_font(31)


def test_registry_falls_back_for_missing_file(tmp_path):
    registry = FontRegistry()
    resolved = registry.register("brand", str(tmp_path / "missing.ttf"))

    assert registry.is_registered("brand")
    assert resolved != str(tmp_path / "missing.ttf")
    assert registry.provider("brand").measure("abc", 20) > 0


def test_registry_unknown_family():
    with pytest.raises(FontNotRegisteredError):
        FontRegistry().provider("nope")


def test_providers_are_independent():
    registry = FontRegistry()
    registry.register("default")
    assert registry.provider("default") is not registry.provider("default")
    assert isinstance(registry.provider("default"), FontProvider)
