from mandelview.interaction import InteractionController, Selection
from mandelview.state import FrameValidity, ViewerState
from mandelview.viewport import DEFAULT_RANGE_X, DEFAULT_RANGE_Y, HEIGHT, WIDTH, Bounds, ScreenPoint, ScreenRect

WINDOW = ScreenRect(0.0, 0.0, float(WIDTH), float(HEIGHT))


def _controller():
    state = ViewerState()
    state.validity = FrameValidity.VALID
    return state, InteractionController(state)


def test_press_starts_empty_selection():
    state, controller = _controller()
    controller.press_primary(ScreenPoint(100.0, 100.0))
    assert state.selection == Selection(ScreenPoint(100.0, 100.0), ScreenPoint(100.0, 100.0))
    assert state.selection.is_empty


def test_move_locks_selection_to_window_aspect():
    state, controller = _controller()
    controller.press_primary(ScreenPoint(100.0, 100.0))
    controller.move(ScreenPoint(400.0, 999.0), WINDOW)
    assert state.selection.current == ScreenPoint(400.0, 300.0)


def test_move_left_keeps_drag_direction():
    state, controller = _controller()
    controller.press_primary(ScreenPoint(600.0, 400.0))
    controller.move(ScreenPoint(300.0, 0.0), WINDOW)
    assert state.selection.current == ScreenPoint(300.0, 200.0)
    assert state.selection.corners() == (300.0, 200.0, 300.0, 200.0)


def test_move_without_press_is_ignored():
    state, controller = _controller()
    controller.move(ScreenPoint(10.0, 10.0), WINDOW)
    assert state.selection is None


def test_release_without_press_is_ignored():
    state, controller = _controller()
    assert controller.release_primary(WINDOW) is False
    assert state.viewport.range_x == DEFAULT_RANGE_X
    assert state.validity is FrameValidity.VALID


def test_click_without_drag_leaves_viewport():
    state, controller = _controller()
    controller.press_primary(ScreenPoint(50.0, 60.0))
    assert controller.release_primary(WINDOW) is False
    assert state.selection is None
    assert state.viewport.range_x == DEFAULT_RANGE_X
    assert state.viewport.range_y == DEFAULT_RANGE_Y
    assert state.validity is FrameValidity.VALID


def test_drag_inside_window_zooms_in():
    state, controller = _controller()
    controller.press_primary(ScreenPoint(300.0, 200.0))
    controller.move(ScreenPoint(900.0, 0.0), WINDOW)
    assert state.selection.current == ScreenPoint(900.0, 600.0)
    assert controller.release_primary(WINDOW) is True

    range_x, range_y = state.viewport.range_x, state.viewport.range_y
    assert DEFAULT_RANGE_X.start < range_x.start < range_x.end < DEFAULT_RANGE_X.end
    assert DEFAULT_RANGE_Y.start < range_y.start < range_y.end < DEFAULT_RANGE_Y.end
    assert state.selection is None
    assert state.validity is FrameValidity.INVALID


def test_secondary_release_resets_view_and_freezes_depth():
    state, controller = _controller()
    state.animation.advance(2300)
    controller.press_primary(ScreenPoint(300.0, 200.0))
    controller.move(ScreenPoint(900.0, 0.0), WINDOW)
    controller.release_primary(WINDOW)
    state.validity = FrameValidity.VALID

    controller.release_secondary()
    assert state.viewport.range_x == Bounds(-2.00, 0.47)
    assert state.viewport.range_y == Bounds(-1.12, 1.12)
    assert state.animation.offset == state.animation.raw_budget == 23
    assert state.animation.effective_iterations == 0
    assert state.validity is FrameValidity.INVALID


def test_secondary_release_cancels_drag_in_progress():
    state, controller = _controller()
    controller.press_primary(ScreenPoint(300.0, 200.0))
    controller.move(ScreenPoint(900.0, 0.0), WINDOW)
    controller.release_secondary()
    assert state.selection is None
    assert controller.release_primary(WINDOW) is False
    assert state.viewport.range_x == DEFAULT_RANGE_X


def test_freeze_key_leaves_viewport():
    state, controller = _controller()
    state.animation.advance(800)
    controller.key_press("r")
    assert state.animation.effective_iterations == 0
    assert state.viewport.range_x == DEFAULT_RANGE_X


def test_space_toggles_running():
    state, controller = _controller()
    controller.key_press(" ")
    assert state.animation.running is False
    controller.key_press("space")
    assert state.animation.running is True


def test_snapshot_key_sets_request_and_unknown_keys_are_ignored():
    state, controller = _controller()
    controller.key_press("q")
    assert state.snapshot_requested is False
    assert state.animation.running is True
    controller.key_press("s")
    assert state.snapshot_requested is True
