"""End-to-end tests for the cap-height pipeline."""

from dataclasses import replace

import pytest

from capheight import calculate
from capheight.calculator import CapHeightCalculator
from capheight.config import CapHeightConfig, FontConfig, RenderConfig, ScanConfig
from capheight.surface import Context2D, create_surface
from capheight.validation import (
    InvalidFontSize,
    InvalidVariationDescription,
    NoGlyphDetected,
    WhitespaceTextError,
)

FULL = {"font-style": "normal", "font-weight": 400, "font-size": "100px", "font-family": "serif"}


def block_calculator(block_surface_factory, **render) -> CapHeightCalculator:
    cfg = CapHeightConfig(render=RenderConfig(**render))
    return CapHeightCalculator(cfg, surface_factory=block_surface_factory)


def test_calculate_serif_h():
    result = calculate({"font-size": "100px", "font-family": "serif"}, "H")
    assert result["font-style"] == "normal"
    assert result["font-weight"] == 400
    assert result["font-family"] == "serif"
    assert result["font-size"] == "100px"
    assert 0 < result["cap-height"] < 1


def test_calculate_defaults_match_explicit_properties():
    assert calculate({}) == calculate(dict(FULL), "H")


def test_calculate_is_idempotent():
    first = calculate({"font-size": "64px", "font-family": "sans-serif"}, "HIE")
    second = calculate({"font-size": "64px", "font-family": "sans-serif"}, "HIE")
    assert first["cap-height"] == pytest.approx(second["cap-height"], abs=1e-9)


def test_calculate_descenders_stay_below_bound():
    result = calculate({"font-size": "60px", "font-family": "sans-serif"}, "Hgjpqy")
    assert 0 < result["cap-height"] < 1.2


def test_calculate_does_not_mutate_input():
    props = {"font-size": "50px", "color": "red"}
    result = calculate(props)
    assert props == {"font-size": "50px", "color": "red"}
    assert result is not props
    assert result["color"] == "red"
    assert "cap-height" in result


@pytest.mark.parametrize("dpr", [1.0, 1.5, 2.0])
def test_block_glyph_ratio_is_exact_at_any_device_pixel_ratio(block_surface_factory, dpr):
    calc = block_calculator(block_surface_factory, device_pixel_ratio=dpr)
    assert calc.calculate({"font-size": "100px"})["cap-height"] == pytest.approx(0.7, abs=1e-9)


def test_device_pixel_ratio_invariance_real_backend():
    props = {"font-size": "50px", "font-family": "sans-serif"}
    one = CapHeightCalculator(CapHeightConfig(render=RenderConfig(device_pixel_ratio=1)))
    two = CapHeightCalculator(CapHeightConfig(render=RenderConfig(device_pixel_ratio=2)))
    assert one.calculate(props)["cap-height"] == pytest.approx(
        two.calculate(props)["cap-height"], abs=0.05
    )


def test_measure_reports_geometry(block_surface_factory):
    calc = block_calculator(block_surface_factory, device_pixel_ratio=2)
    m = calc.measure({"font-size": "100px"}, "HH")
    assert m.text == "HH"
    assert m.font_size == 100
    assert (m.dimensions.width, m.dimensions.height) == (400, 200)
    assert (m.physical_dimensions.width, m.physical_dimensions.height) == (800, 400)
    assert (m.metrics.ascent, m.metrics.descent) == (130, 269)
    assert m.height == 140
    assert m.ratio == pytest.approx(0.7)


def test_invalid_font_size_is_reported_before_whitespace():
    with pytest.raises(InvalidFontSize):
        calculate({"font-size": "0px"}, "a b")
    with pytest.raises(InvalidFontSize):
        calculate({"font-size": "abcpx"})


def test_whitespace_text_raises():
    with pytest.raises(WhitespaceTextError):
        calculate({}, " ")


class BlankContext(Context2D):
    def fill_text(self, text, x, y):
        return self


def test_no_glyph_detected():
    calc = CapHeightCalculator(
        surface_factory=lambda dims, dpr: create_surface(dims, dpr, context_factory=BlankContext)
    )
    with pytest.raises(NoGlyphDetected):
        calc.calculate({})


def test_result_key_can_be_custom_property(block_surface_factory):
    cfg = CapHeightConfig(font=FontConfig(result_key="--cap-height"))
    calc = CapHeightCalculator(cfg, surface_factory=block_surface_factory)
    result = calc.calculate({})
    assert "cap-height" not in result
    assert result["--cap-height"] == pytest.approx(0.7)


def test_exact_policy_still_finds_solid_glyphs(block_surface_factory):
    cfg = CapHeightConfig(scan=ScanConfig(policy="exact"))
    calc = CapHeightCalculator(cfg, surface_factory=block_surface_factory)
    assert calc.calculate({})["cap-height"] == pytest.approx(0.7)


def test_preserve_fractional_size(block_surface_factory):
    cfg = CapHeightConfig(font=FontConfig(preserve_fractional_size=True))
    calc = CapHeightCalculator(cfg, surface_factory=block_surface_factory)
    m = calc.measure({"font-size": "50.5px"})
    assert m.font_size == 50.5


def test_font_active_listener(block_surface_factory):
    calc = block_calculator(block_surface_factory)
    received = []

    def callback(properties):
        received.append(properties)
        return "done"

    listener = calc.font_active(callback, "H")
    assert listener("Georgia", "i7") == "done"

    (result,) = received
    assert result["font-family"] == "Georgia"
    assert result["font-style"] == "italic"
    assert result["font-weight"] == 700
    assert result["font-size"] == "100px"
    assert result["cap-height"] == pytest.approx(0.7)


def test_font_active_invalid_description(block_surface_factory):
    listener = block_calculator(block_surface_factory).font_active(lambda p: p)
    with pytest.raises(InvalidVariationDescription):
        listener("Georgia", "q9")


class Element:
    def computed_style(self):
        return {"font-size": "20px", "font-family": "monospace", "color": "blue", "font-style": ""}


@pytest.mark.parametrize(
    "element",
    [
        {"font-size": "20px", "font-family": "monospace", "color": "blue"},
        "color: blue; font-size: 20px; font-family: monospace",
        Element(),
    ],
)
def test_inspect_picks_font_properties(block_surface_factory, element):
    result = block_calculator(block_surface_factory).inspect(element)
    assert "color" not in result
    assert result["font-size"] == "20px"
    assert result["font-family"] == "monospace"
    assert result["font-style"] == "normal"
    assert result["cap-height"] == pytest.approx(0.7)


def test_inspect_rejects_unreadable_element(block_surface_factory):
    with pytest.raises(TypeError):
        block_calculator(block_surface_factory).inspect(42)


def test_set_container_displays_each_measurement(block_surface_factory):
    calc = block_calculator(block_surface_factory)
    gallery = []
    calc.set_container(gallery)
    calc.calculate({})
    calc.calculate({"font-size": "50px"})
    assert len(gallery) == 2

    calc.set_container(None)
    calc.calculate({})
    assert len(gallery) == 2


def test_calculators_do_not_share_containers(block_surface_factory):
    a = block_calculator(block_surface_factory)
    b = block_calculator(block_surface_factory)
    gallery = []
    a.set_container(gallery)
    b.calculate({})
    assert gallery == []
    a.calculate({})
    assert len(gallery) == 1


def test_calculate_accepts_config():
    cfg = replace(CapHeightConfig(), font=FontConfig(result_key="--cap-height"))
    result = calculate({"font-size": "40px"}, config=cfg)
    assert 0 < result["--cap-height"] < 1


def test_float_font_size_matches_int(block_surface_factory):
    calc = block_calculator(block_surface_factory)
    m = calc.measure({"font-size": 100.0})
    assert m.font_size == 100
    assert m.ratio == calc.measure({"font-size": 100}).ratio


def test_float_font_size_matches_int_real_backend():
    assert calculate({"font-size": 100.0})["cap-height"] == calculate({"font-size": 100})["cap-height"]


@pytest.mark.parametrize("size", ["50em", "100pt", "64rem"])
def test_font_units_draw_at_the_measured_size(block_surface_factory, size):
    calc = block_calculator(block_surface_factory)
    m = calc.measure({"font-size": size})
    assert m.metrics.height == round(m.font_size * 0.7)
    assert m.ratio == pytest.approx(0.7, abs=0.01)


def test_font_units_match_px_real_backend():
    px = calculate({"font-size": "100px"})["cap-height"]
    assert calculate({"font-size": "100pt"})["cap-height"] == px
    assert calculate({"font-size": "100em"})["cap-height"] == px
