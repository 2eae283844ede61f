import pytest
from pydantic import ValidationError

from banner import MissingInputError
from banner.api_models import BannerQuery
from banner.presets import get_dimensions, get_preset_options, parse_dimension_string


def test_defaults_applied_once():
    request = BannerQuery(csvUrl="http://x").to_request({})

    assert (request.width, request.height) == (1080, 1350)
    assert request.background_color == "#ffffff"
    assert request.stroke_color == "black"
    assert request.stroke_width == 3
    assert request.scale_factor == pytest.approx(0.3)
    assert request.main_text == "Default Text"
    assert request.options == ["Option 1", "Option 2", "Option 3"]


def test_query_overrides_csv_row():
    query = BannerQuery.model_validate({"mainText": "From query", "option2": "Q2"})
    row = {"text": "From CSV", "option1": "C1", "option2": "C2", "option3": ""}

    assert query.resolve_text(row) == "From query"
    assert query.resolve_options(row) == ["C1", "Q2", "Option 3"]


def test_csv_row_used_when_query_silent():
    row = {"text": "From CSV", "option1": "C1"}
    assert BannerQuery().resolve_text(row) == "From CSV"


def test_camel_case_query_values_parsed():
    query = BannerQuery.model_validate({
        "width": "400", "height": "300", "lineWidth": "0", "scaleFactor": "0.5",
        "textColor": "#ff0000", "strokeStyle": "white",
    })
    request = query.to_request({})

    assert (request.width, request.height) == (400, 300)
    assert request.stroke_width == 0
    assert request.scale_factor == pytest.approx(0.5)
    assert request.text_color == "#ff0000"


@pytest.mark.parametrize("params", [
    {"width": "0"},
    {"lineWidth": "-1"},
    {"scaleFactor": "0"},
    {"scaleFactor": "5"},
    {"width": "5000"},
    {"height": "100000"},
    {"optionColor": "not-a-color"},
])
def test_invalid_query_values(params):
    with pytest.raises(ValidationError):
        BannerQuery.model_validate(params)


def test_csv_url_required():
    with pytest.raises(MissingInputError):
        BannerQuery().require_csv_url()


def test_get_dimensions():
    assert get_dimensions() == (1080, 1350)
    assert get_dimensions("ig_story") == (1080, 1920)
    assert get_dimensions("ig-square") == (1080, 1080)
    assert get_dimensions("640x480") == (640, 480)
    assert get_dimensions("ig_story", height=1000) == (1080, 1000)
    with pytest.raises(ValueError):
        get_dimensions("billboard")
    with pytest.raises(ValueError):
        get_dimensions("9999x9999")
    with pytest.raises(ValueError):
        BannerQuery(preset="5000x100").to_request({})


def test_parse_dimension_string():
    assert parse_dimension_string("1080 x 1350") == (1080, 1350)
    assert parse_dimension_string("wide") is None


def test_preset_options_list_every_platform():
    ids = [option["id"] for option in get_preset_options()]
    assert ids == ["ig_portrait", "ig_square", "ig_landscape", "ig_story", "wa_status"]
