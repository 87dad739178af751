import pytest

from services.barcode_service import UnsupportedCharacter, encode
from services.label_service import (
    LABEL_SIZES, LabelData, LabelDataError,
    generate_label_svg, render_label_pdf, render_label_png,
)


@pytest.fixture
def label(label_payload):
    return LabelData.from_dict(label_payload)


def test_from_dict_camel_case(label):
    assert label.customer_name == "Yamada Taro"
    assert label.car_model == "Prius"
    assert label.car_color == "White"
    assert label.reference_id == "1005123456789"
    assert label.vehicle == "Prius / White"


def test_from_dict_snake_case_and_strip():
    label = LabelData.from_dict({
        "customer_name": "  Sato  ",
        "reference_id": " 001000000042 ",
    })
    assert label.customer_name == "Sato"
    assert label.reference_id == "001000000042"
    assert label.car_model == ""
    assert label.vehicle == ""


@pytest.mark.parametrize("payload", [None, [], "text", {}, {"customerName": "x"}])
def test_from_dict_rejects_bad_payload(payload):
    with pytest.raises(LabelDataError):
        LabelData.from_dict(payload)


@pytest.mark.parametrize("size", list(LABEL_SIZES))
def test_label_svg_contents(label, size):
    svg = generate_label_svg(label, size)
    width_mm, height_mm, _ = LABEL_SIZES[size]

    assert svg.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert f'width="{width_mm}mm" height="{height_mm}mm"' in svg
    assert "Yamada Taro" in svg
    assert "Prius" in svg and "White" in svg
    assert ">1005123456789</text>" in svg
    assert svg.count('fill="black"') == encode("1005123456789").count("1")


def test_label_svg_preview_frame(label):
    assert "stroke-dasharray" in generate_label_svg(label, "60x24")
    assert "stroke-dasharray" not in generate_label_svg(label, "60x24", for_print=True)


def test_label_svg_escapes_and_truncates():
    label = LabelData.from_dict({
        "customerName": "Tom & <Jerry> " + "x" * 40,
        "referenceId": "001000000001",
    })
    svg = generate_label_svg(label, "60x24")
    assert "Tom &amp; &lt;Jerry&gt;" in svg
    assert "<Jerry>" not in svg
    assert "…" in svg


def test_label_svg_unknown_size(label):
    with pytest.raises(ValueError):
        generate_label_svg(label, "10x10")


def test_label_svg_unencodable_reference():
    label = LabelData.from_dict({"referenceId": "001\t42"})
    with pytest.raises(UnsupportedCharacter):
        generate_label_svg(label)


def test_render_label_pdf(cairosvg, label):
    pdf = render_label_pdf(generate_label_svg(label, for_print=True))
    assert pdf.startswith(b"%PDF")


def test_render_label_png(cairosvg, label):
    img = render_label_png(generate_label_svg(label, for_print=True), dpi=254)
    assert img.mode == "1"
    # 60 x 24 mm at 254 dpi = 10 px/mm
    assert img.size == (600, 240)
