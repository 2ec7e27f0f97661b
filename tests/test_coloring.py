import numpy as np

from mandelview.coloring import map_color, map_colors


def test_interior_point_is_black():
    for n in (1, 5, 100):
        assert map_color(n, n) == (0, 0, 0)


def test_zero_escape_is_saturated_red():
    for n in (1, 5, 100):
        assert map_color(0, n) == (255, 0, 0)


def test_zero_cap_maps_to_black():
    assert map_color(0, 0) == (0, 0, 0)


def test_half_cap_is_cyan():
    assert map_color(1, 2) == (0, 255, 255)


def test_vectorized_mapping_keeps_shape_and_agrees_with_scalar():
    iterations = np.array([[0, 1, 2], [3, 4, 4]])
    colors = map_colors(iterations, 4)
    assert colors.shape == (2, 3, 3)
    assert colors.dtype == np.uint8
    for (row, col), value in np.ndenumerate(iterations):
        assert tuple(int(v) for v in colors[row, col]) == map_color(int(value), 4)
    assert tuple(colors[1, 2]) == (0, 0, 0)
