import pytest

from boblight.light import Color, Light


def rgb_light(**kwargs):
    light = Light(name="left", **kwargs)
    light.add_color(Color("red", (1.0, 0.0, 0.0)))
    light.add_color(Color("green", (0.0, 1.0, 0.0)))
    light.add_color(Color("blue", (0.0, 0.0, 1.0)))
    return light


def test_color_defaults():
    color = Color()
    assert (color.gamma, color.adjust, color.blacklevel) == (1.0, 1.0, 0.0)
    assert color.rgb == (0.0, 0.0, 0.0)


def test_light_defaults():
    light = Light()
    assert light.speed == 100.0
    assert light.use is True
    assert light.interpolation is False
    assert light.hscan == (0.0, 100.0)
    assert light.vscan == (0.0, 100.0)


@pytest.mark.parametrize("value, expected", [(150.0, 100.0), (-5.0, 0.0), (42.0, 42.0)])
def test_speed_is_clamped(value, expected):
    light = Light()
    light.speed = value
    assert light.speed == expected


def test_set_rgb_clamps_components():
    light = Light()
    light.set_rgb((1.5, -0.5, 0.25), 0)
    assert light.rgb == (1.0, 0.0, 0.25)


def test_set_rgb_requires_three_components():
    with pytest.raises(ValueError):
        Light().set_rgb((0.1, 0.2), 0)


def test_full_red_on_red_channel():
    light = rgb_light()
    light.set_rgb((1.0, 0.0, 0.0), 0)
    assert light.get_color_value(0, 0) == pytest.approx(1.0)
    assert light.get_color_value(1, 0) == pytest.approx(0.0)


def test_half_red_on_red_channel():
    light = rgb_light()
    light.set_rgb((0.5, 0.0, 0.0), 0)
    assert light.get_color_value(0, 0) == pytest.approx(0.5)


def test_primary_channels_reproduce_input():
    light = rgb_light()
    rgb = (0.2, 0.4, 0.6)
    light.set_rgb(rgb, 0)
    values = tuple(light.get_color_value(i, 0) for i in range(3))
    assert values == pytest.approx(rgb)


def test_black_gives_zero():
    light = rgb_light()
    light.set_rgb((0.0, 0.0, 0.0), 0)
    assert all(light.get_color_value(i, 0) == 0.0 for i in range(3))


def test_values_stay_in_unit_range():
    light = rgb_light()
    light.add_color(Color("white", (1.0, 1.0, 1.0)))
    light.set_rgb((0.9, 0.3, 0.7), 0)
    for i in range(4):
        assert 0.0 <= light.get_color_value(i, 0) <= 1.0


def test_unknown_color_raises():
    light = rgb_light()
    light.set_rgb((1.0, 0.0, 0.0), 0)
    with pytest.raises(IndexError):
        light.get_color_value(3, 0)
    with pytest.raises(IndexError):
        light.get_color_value(-1, 0)


def test_interpolation_needs_two_writes():
    light = rgb_light(interpolation=True)
    light.set_rgb((1.0, 0.0, 0.0), 0)
    assert light.get_color_value(0, 50) == 0.0


def test_interpolation_blends_between_writes():
    light = rgb_light(interpolation=True)
    light.set_rgb((0.0, 0.0, 0.0), 0)
    light.set_rgb((1.0, 0.0, 0.0), 100)
    assert light.get_color_value(0, 100) == 0.0
    assert light.get_color_value(0, 150) == pytest.approx(0.5)
    assert light.get_color_value(0, 300) == pytest.approx(1.0)


def test_add_user_only_once():
    light = Light()
    device = object()
    light.add_user(device)
    light.add_user(device)
    assert light.users == [device]


def test_clear_user_removes_only_that_device():
    light = Light()
    first, second = object(), object()
    light.add_user(first)
    light.add_user(second)
    light.clear_user(first)
    assert light.users == [second]
    light.clear_user(first)
    assert light.users == [second]


def test_single_change_set_get_reset():
    light = Light()
    first, second = object(), object()
    light.add_user(first)
    light.add_user(second)
    light.set_single_change(0.3)
    assert light.get_single_change(first) == pytest.approx(0.3)
    assert light.get_single_change(second) == pytest.approx(0.3)
    light.reset_single_change(first)
    assert light.get_single_change(first) == 0.0
    assert light.get_single_change(second) == pytest.approx(0.3)


def test_single_change_is_clamped():
    light = Light()
    device = object()
    light.add_user(device)
    light.set_single_change(4.0)
    assert light.get_single_change(device) == 1.0
    light.set_single_change(-1.0)
    assert light.get_single_change(device) == 0.0


def test_single_change_of_unknown_device_is_zero():
    light = Light()
    light.set_single_change(0.5)
    assert light.get_single_change(object()) == 0.0


def test_new_user_starts_without_single_change():
    light = Light()
    first = object()
    light.add_user(first)
    light.set_single_change(0.8)
    second = object()
    light.add_user(second)
    assert light.get_single_change(second) == 0.0