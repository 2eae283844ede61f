import pytest
from PIL import Image

from banner import BannerConfig, BannerRequest, LayoutEngine, LayoutError
from banner.text_fitter import TextBlock


@pytest.fixture
def engine(config, metrics):
    return LayoutEngine(config, metrics)


@pytest.fixture
def blocks():
    return {
        "main_text": TextBlock(lines=["Short headline"], font_size=70),
        "heading": TextBlock(lines=["Options"], font_size=40),
        "options": [
            TextBlock(lines=["A"], font_size=30),
            TextBlock(lines=["Beta option"], font_size=30),
            TextBlock(lines=["C"], font_size=30),
        ],
    }


def option_keys(layout):
    return [name for name in layout if name.startswith("option_")]


def test_regions_partition_canvas(engine, blocks):
    layout = engine.layout(BannerRequest(), blocks)
    image, text = layout["image"], layout["text"]

    assert (image.x, image.y, image.width) == (0, 0, 1080)
    assert image.height == 904
    assert text.y == image.bottom
    assert text.bottom == 1350


def test_blocks_centered_on_midline(engine, blocks):
    layout = engine.layout(BannerRequest(), blocks)
    for name in ["main_text", "heading", "underline", "option_0", "option_1", "option_2"]:
        assert layout[name].center_x == pytest.approx(540)


def test_main_text_raised_in_text_region(engine, blocks, config):
    layout = engine.layout(BannerRequest(), blocks)
    text = layout["text"]
    expected = text.center_y - text.height * config.main_text_offset
    assert layout["main_text"].center_y == pytest.approx(expected)
    assert layout["main_text"].height == pytest.approx(70 * 1.2)


def test_heading_and_options_stack_below_main_text(engine, blocks, config):
    layout = engine.layout(BannerRequest(), blocks)

    assert layout["heading"].y == pytest.approx(layout["main_text"].bottom + config.heading_padding)
    assert layout["underline"].y == pytest.approx(layout["heading"].bottom + config.underline_gap)
    assert layout["underline"].width == pytest.approx(layout["heading"].width)

    first = layout[option_keys(layout)[0]]
    assert first.y == pytest.approx(layout["underline"].bottom + config.options_padding)


def test_options_ordered_widest_first(engine, blocks):
    layout = engine.layout(BannerRequest(), blocks)
    keys = option_keys(layout)

    assert keys == ["option_1", "option_0", "option_2"]
    ys = [layout[k].y for k in keys]
    assert ys == sorted(ys)
    # Each option advances by 1.5x its font size
    assert layout["option_0"].y - layout["option_1"].y == pytest.approx(30 * 1.5)


def test_option_order_ignores_input_order(engine, blocks):
    blocks["options"] = [
        TextBlock(lines=["C"], font_size=45),
        TextBlock(lines=["Beta option"], font_size=45),
        TextBlock(lines=["Medium"], font_size=45),
    ]
    assert engine.order_options(blocks["options"]) == [1, 2, 0]


def test_empty_options_skipped(engine, blocks):
    blocks["options"].append(TextBlock(lines=[], font_size=45))
    layout = engine.layout(BannerRequest(), blocks)
    assert "option_3" not in layout


def test_overlay_scaled_and_centered(engine, blocks):
    overlay = Image.new("RGB", (200, 100), "red")
    layout = engine.layout(BannerRequest(overlay_image=overlay), blocks)
    box = layout["overlay"]
    image = layout["image"]

    assert box.height == pytest.approx(1350 * 0.7 * 0.3, abs=1)
    assert box.width / box.height == pytest.approx(2.0, rel=0.01)
    assert box.x == (image.width - box.width) // 2
    assert box.y == (image.height - box.height) // 2


def test_overlay_uses_scale_factor(engine, blocks):
    overlay = Image.new("RGB", (100, 100), "red")
    small = engine.layout(BannerRequest(overlay_image=overlay, scale_factor=0.2), blocks)["overlay"]
    large = engine.layout(BannerRequest(overlay_image=overlay, scale_factor=0.4), blocks)["overlay"]
    assert large.height == pytest.approx(small.height * 2, abs=1)


def test_no_overlay_box_without_image(engine, blocks):
    assert "overlay" not in engine.layout(BannerRequest(), blocks)


def test_negative_region_raises(metrics, blocks):
    engine = LayoutEngine(BannerConfig(image_height_ratio=1.2), metrics)
    with pytest.raises(LayoutError):
        engine.layout(BannerRequest(), blocks)


def test_options_past_canvas_bottom_raise(engine, blocks):
    blocks["options"] = [TextBlock(lines=["Too big"], font_size=200)]
    with pytest.raises(LayoutError):
        engine.layout(BannerRequest(), blocks)


def test_main_text_above_canvas_raises(engine, blocks):
    blocks["main_text"] = TextBlock(lines=["Line"] * 40, font_size=70)
    with pytest.raises(LayoutError):
        engine.layout(BannerRequest(), blocks)


def test_options_top_matches_stacking(engine, blocks):
    layout = engine.layout(BannerRequest(), blocks)
    first = layout[option_keys(layout)[0]]
    assert engine.options_top(layout["main_text"], blocks["heading"]) == pytest.approx(first.y)


def test_config_kept_when_heading_fits(config):
    assert config.fitted_to(446) is config


def test_config_heading_scaled_for_short_region(config):
    fitted = config.fitted_to(187)

    assert fitted.chrome_height <= 187 * config.chrome_height_ratio
    assert fitted.heading_font_size == 20
    assert fitted.underline_width >= 1
    assert fitted.main_text_font_size == config.main_text_font_size
