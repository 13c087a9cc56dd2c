import math

import pytest

from sales_forecast.visualization import ChartSurface, build_forecast_figure, build_month_labels


class FakeSink:
    """stand-in for a Streamlit placeholder"""

    def __init__(self, fail=False):
        self.fail = fail
        self.shown = None
        self.calls = []

    def plotly_chart(self, figure):
        self.calls.append("plotly_chart")
        if self.fail:
            raise RuntimeError("drawing failed")
        self.shown = figure

    def empty(self):
        self.calls.append("empty")
        self.shown = None


def test_month_labels_start_at_zero():
    assert build_month_labels(3, 2) == ["0", "1", "2", "3", "4", "5"]


def test_figure_aligns_actual_and_forecast():
    figure = build_forecast_figure([10.0, 20.0, 30.0], [31.0, 32.0])
    actual, forecast = figure.data

    assert list(actual.x) == ["0", "1", "2", "3", "4", "5"]
    assert list(actual.y) == [None, 10.0, 20.0, 30.0, None, None]
    assert list(forecast.y) == [None, None, None, None, 31.0, 32.0]
    assert actual.name == "Actual Sales"
    assert forecast.name == "Predicted Sales"
    assert forecast.line.dash == "dash"
    assert figure.layout.title.text == "Actual vs. Predicted Sales"
    assert figure.layout.xaxis.title.text == "Months"
    assert figure.layout.yaxis.title.text == "Sales Quantity"


def test_unparseable_actual_values_become_gaps():
    figure = build_forecast_figure([1.0, math.nan, 3.0], [4.0])
    assert list(figure.data[0].y) == [None, 1.0, None, 3.0, None]


def test_two_renders_leave_one_live_chart():
    sink = FakeSink()
    surface = ChartSurface(sink)

    first = surface.render([1.0, 2.0], [3.0] * 6)
    second = surface.render([1.0, 2.0], [4.0] * 6)

    assert first.destroyed
    assert not second.destroyed
    assert surface.chart is second
    assert sink.shown is second.figure
    # the old chart is cleared before the new one is drawn
    assert sink.calls == ["empty", "plotly_chart", "empty", "plotly_chart"]
    assert second.chart_id == first.chart_id + 1


def test_failed_render_leaves_surface_empty():
    sink = FakeSink()
    surface = ChartSurface(sink)
    first = surface.render([1.0], [2.0] * 6)

    sink.fail = True
    with pytest.raises(RuntimeError):
        surface.render([1.0], [5.0] * 6)

    assert first.destroyed
    assert surface.chart is None
    assert sink.shown is None


def test_release_without_chart_is_harmless():
    surface = ChartSurface()
    surface.release()
    assert surface.chart is None


def test_attach_redraws_current_chart():
    surface = ChartSurface()
    handle = surface.render([1.0], [2.0] * 6)

    sink = FakeSink()
    surface.attach(sink)

    assert sink.shown is handle.figure


def test_write_html(tmp_path):
    surface = ChartSurface()
    with pytest.raises(ValueError):
        surface.write_html(tmp_path / "chart.html")

    surface.render([1.0, 2.0], [3.0] * 6)
    path = surface.write_html(tmp_path / "chart.html")

    assert path.exists()
    assert "Actual vs. Predicted Sales" in path.read_text()
