import pytest

from paxkit.framebuffer import CurvePlotter, PageBuffer, next_page


def test_draw_and_read_pixel():
    buf = PageBuffer()
    buf.draw_pixel(5, 20, True)
    assert buf.pixel(5, 20) is True
    assert buf.pixel(5, 21) is False
    buf.draw_pixel(5, 20, False)
    assert buf.pixel(5, 20) is False
    assert bytes(buf) == bytes(128 * 64 // 8)


def test_pixel_byte_layout():
    buf = PageBuffer(128, 64)
    buf.draw_pixel(3, 10, True)
    data = bytes(buf)
    assert data[128 + 3] == 1 << 2
    assert sum(data) == 1 << 2


def test_out_of_range_pixel_raises():
    buf = PageBuffer(16, 8)
    with pytest.raises(IndexError):
        buf.draw_pixel(16, 0, True)
    with pytest.raises(IndexError):
        buf.pixel(0, 8)
    with pytest.raises(IndexError):
        buf.draw_pixel(-1, 0, True)


def test_bad_dimensions_raise():
    with pytest.raises(ValueError):
        PageBuffer(16, 12)
    with pytest.raises(ValueError):
        PageBuffer(1, 8)


def test_scroll_left_moves_and_clears():
    buf = PageBuffer(16, 16)
    buf.draw_pixel(0, 0, True)
    buf.draw_pixel(1, 9, True)
    buf.draw_pixel(15, 3, True)
    buf.scroll_horizontal(left=True)
    assert buf.pixel(0, 9)
    assert buf.pixel(14, 3)
    assert not buf.pixel(15, 3)
    assert not buf.pixel(0, 0)
    assert not buf.pixel(1, 9)


def test_scroll_right_moves_and_clears():
    buf = PageBuffer(16, 16)
    buf.draw_pixel(0, 4, True)
    buf.draw_pixel(15, 12, True)
    buf.scroll_horizontal(left=False)
    assert buf.pixel(1, 4)
    assert not buf.pixel(0, 4)
    assert not buf.pixel(15, 12)
    assert sum(bin(b).count("1") for b in bytes(buf)) == 1


def test_scroll_vertical_zero_is_noop():
    buf = PageBuffer(8, 8)
    buf.draw_pixel(2, 3, True)
    before = bytes(buf)
    buf.scroll_vertical(0)
    assert bytes(buf) == before


def test_scroll_vertical_down_and_up():
    buf = PageBuffer(8, 8)
    buf.draw_pixel(2, 3, True)
    buf.scroll_vertical(1)
    assert buf.pixel(2, 4)
    assert not buf.pixel(2, 3)
    buf.scroll_vertical(-2)
    assert buf.pixel(2, 2)
    assert not buf.pixel(2, 4)


def test_scroll_vertical_past_edge_clears():
    buf = PageBuffer(8, 8)
    buf.draw_pixel(5, 7, True)
    buf.scroll_vertical(1)
    assert bytes(buf) == bytes(8)


@pytest.mark.parametrize(
    "page, pages, expected",
    [(0, 7, 1), (5, 7, 6), (6, 7, 0), (9, 7, 0), (0, 1, 0)],
)
def test_next_page(page, pages, expected):
    assert next_page(page, pages) == expected


def test_next_page_needs_pages():
    with pytest.raises(ValueError):
        next_page(0, 0)


def test_plot_sets_dot_for_count():
    plotter = CurvePlotter(128, 64)
    assert plotter.plot(5) is True
    assert plotter.row == 64 - 1 - 5
    assert plotter.buffer.pixel(0, 64 - 1 - 5)


def test_plot_same_count_changes_nothing():
    plotter = CurvePlotter(128, 64)
    plotter.plot(5)
    before = bytes(plotter.buffer)
    assert plotter.plot(5) is False
    assert bytes(plotter.buffer) == before


def test_plot_moves_dot_within_column():
    plotter = CurvePlotter(128, 64)
    plotter.plot(5)
    plotter.plot(7)
    assert plotter.buffer.pixel(0, 64 - 1 - 7)
    assert not plotter.buffer.pixel(0, 64 - 1 - 5)


def test_plot_reset_advances_column():
    plotter = CurvePlotter(128, 64)
    plotter.plot(3)
    plotter.plot(0, reset=True)
    assert plotter.col == 1
    assert plotter.buffer.pixel(0, 64 - 1 - 3)
    assert plotter.buffer.pixel(1, 64 - 1)


def test_plot_scrolls_left_when_full():
    plotter = CurvePlotter(8, 8)
    plotter.plot(2)
    for _ in range(7):
        plotter.plot(0, reset=True)
    assert plotter.col == 7
    plotter.plot(0, reset=True)
    assert plotter.col == 7
    # the first column's dot has scrolled out
    assert not plotter.buffer.pixel(0, 8 - 1 - 2)
    assert plotter.buffer.pixel(7, 8 - 1)


def test_plot_count_beyond_height_draws_no_dot():
    plotter = CurvePlotter(8, 8)
    assert plotter.plot(8) is True
    assert plotter.last_count == 8
    assert bytes(plotter.buffer) == bytes(8)