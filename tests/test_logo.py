from PIL import Image

from piscine.logo import draw_logo, main


def test_logo_size():
    assert draw_logo().size == (300, 300)


def test_pupils_and_nose_are_black():
    image = draw_logo()
    assert image.getpixel((115, 140)) == (0, 0, 0)
    assert image.getpixel((185, 140)) == (0, 0, 0)
    assert image.getpixel((150, 160)) == (0, 0, 0)


def test_eyes_are_white():
    image = draw_logo()
    assert image.getpixel((115, 118)) == (255, 255, 255)
    assert image.getpixel((185, 118)) == (255, 255, 255)


def test_ears_share_body_colour():
    image = draw_logo()
    body = image.getpixel((150, 235))
    assert image.getpixel((80, 80)) == body
    assert image.getpixel((220, 80)) == body
    assert image.getpixel((0, 0)) != body


def test_background_is_uniform():
    image = draw_logo()
    assert image.getpixel((0, 0)) == image.getpixel((299, 299)) == image.getpixel((299, 0))


def test_smile_is_drawn():
    image = draw_logo()
    column = [image.getpixel((150, y)) for y in range(204, 214)]
    assert (255, 255, 255) in column


def test_main_saves_png(tmp_path):
    target = tmp_path / "logo.png"
    assert main(["--output", str(target)]) == 0
    with Image.open(target) as saved:
        assert saved.convert("RGB").tobytes() == draw_logo().tobytes()


def test_main_reports_unwritable_path(tmp_path):
    assert main(["--output", str(tmp_path / "missing" / "logo.png")]) == 1