#////////////////////////////////////////////////////////////////////////////////#
# File:         visualization.py                                                 #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-09-09                                                       #
# Description:  Actual vs. predicted sales chart rendering.                      #
#////////////////////////////////////////////////////////////////////////////////#
"""
Chart rendering of actual vs. predicted sales with plotly.

A ChartSurface owns at most one chart at a time: the previous chart is
destroyed before the next one is built, so repeated predictions never leave
overlapping charts behind.
"""
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

import numpy as np
import plotly.graph_objects as go

from sales_forecast import config

logger = logging.getLogger(__name__)


def build_month_labels(n_actual: int, n_forecast: int) -> List[str]:
    """x axis labels "0".."n_actual + n_forecast", month 0 is only an anchor tick"""
    return [str(month) for month in range(n_actual + n_forecast + 1)]


def build_forecast_figure(actual: Sequence[float], forecast: Sequence[float]) -> go.Figure:
    """
    Line chart with actual sales at months 1..n and the forecast right after.

    Args:
        actual: Actual quantities in filtered record order (NaN draws as a gap)
        forecast: Forecast quantities

    Returns:
        plotly Figure with an "Actual Sales" and a "Predicted Sales" trace
    """
    actual = [None if value is None or np.isnan(value) else float(value) for value in actual]
    forecast = [float(value) for value in forecast]
    labels = build_month_labels(len(actual), len(forecast))

    # nothing is plotted at month 0
    actual_y = [None] + actual + [None] * len(forecast)
    forecast_y = [None] * (len(actual) + 1) + forecast

    figure = go.Figure()
    figure.add_trace(go.Scatter(
        x=labels,
        y=actual_y,
        mode="lines+markers",
        name=config.ACTUAL_SERIES_NAME,
        line=dict(color=config.ACTUAL_COLOR, width=2, shape="spline", smoothing=0.2),
        connectgaps=False,
    ))
    figure.add_trace(go.Scatter(
        x=labels,
        y=forecast_y,
        mode="lines+markers",
        name=config.FORECAST_SERIES_NAME,
        line=dict(color=config.FORECAST_COLOR, width=2, dash="dash", shape="spline", smoothing=0.2),
        connectgaps=False,
    ))
    figure.update_layout(
        title=config.CHART_TITLE,
        xaxis=dict(title=config.CHART_X_TITLE, type="category"),
        yaxis=dict(title=config.CHART_Y_TITLE),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="center", x=0.5),
        width=config.CHART_WIDTH,
        height=config.CHART_HEIGHT,
    )
    return figure


@dataclass
class ChartHandle:
    """One chart drawn on a surface."""
    chart_id: int
    figure: go.Figure
    destroyed: bool = False

    def destroy(self) -> None:
        self.destroyed = True


class ChartSurface:
    """
    The single drawing surface charts are bound to.

    `sink` is where charts are shown, e.g. a Streamlit placeholder from
    st.empty(); it needs plotly_chart(figure) and empty(). Without a sink the
    surface only keeps the figure (command line use and tests).
    """

    def __init__(self, sink: Optional[Any] = None):
        self._sink = sink
        self._lock = threading.RLock()
        self._chart: Optional[ChartHandle] = None
        self._next_chart_id = 1

    @property
    def chart(self) -> Optional[ChartHandle]:
        return self._chart

    def attach(self, sink: Optional[Any]) -> None:
        """point the surface at a new sink (Streamlit recreates placeholders on every rerun)"""
        with self._lock:
            self._sink = sink
            if sink is not None and self._chart is not None:
                sink.plotly_chart(self._chart.figure)

    def release(self) -> None:
        """Destroy the current chart, if any, and clear the sink."""
        with self._lock:
            if self._chart is not None:
                logger.debug(f"Destroying chart {self._chart.chart_id}")
                self._chart.destroy()
                self._chart = None
            if self._sink is not None:
                self._sink.empty()

    def render(self, actual: Sequence[float], forecast: Sequence[float]) -> ChartHandle:
        """
        Replace whatever is on the surface with a new actual vs. forecast chart.

        The old chart is released first; if drawing the new one fails the
        surface is left empty and the error propagates.
        """
        with self._lock:
            self.release()

            figure = build_forecast_figure(actual, forecast)
            handle = ChartHandle(chart_id=self._next_chart_id, figure=figure)
            self._next_chart_id += 1

            if self._sink is not None:
                try:
                    self._sink.plotly_chart(figure)
                except Exception:
                    handle.destroy()
                    self._sink.empty()
                    raise

            self._chart = handle
            logger.info(f"Rendered chart {handle.chart_id} with {len(actual)} actual and {len(forecast)} forecast points")
            return handle

    def write_html(self, filepath: Union[str, Path]) -> Path:
        """save the current chart as a standalone html page"""
        if self._chart is None:
            raise ValueError("No chart has been rendered on this surface")
        filepath = Path(filepath)
        self._chart.figure.write_html(str(filepath), include_plotlyjs="cdn")
        return filepath
