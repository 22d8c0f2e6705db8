"""Envelope-preserving downsampling of series windows for plotting.

A plotted window is reduced to a bounded number of points by keeping the
minimum and maximum of each contiguous bucket, so spikes stay visible at any
zoom level. The point budget grows as the user zooms in, up to a cap.
"""
from __future__ import annotations

import math

import numpy as np
from loguru import logger

from sensor_log_editor.config.settings import ViewConfig, get_config
from sensor_log_editor.core.data_models import CHANNEL_NAMES
from sensor_log_editor.core.series import EditableSeries


def downsample_min_max(values: np.ndarray, xs: np.ndarray, max_points: int) -> np.ndarray:
    """Reduce (xs, values) to at most 2 * max(1, max_points // 2) + 2 points.

    The input is split into max(1, max_points // 2) contiguous buckets with
    floor boundaries, the last one ending at n. The first and last points are
    always kept; each bucket contributes its minimum and maximum (one point
    when they are the same sample), lower index first. The result is stably
    sorted by X.

    Args:
        values: 1D array of sample values
        xs: 1D array of X positions, parallel to values
        max_points: Target point budget

    Returns:
        Array of shape (k, 2) with columns (x, y). When len(values) <= max_points
        every input pair is returned unchanged.

    Raises:
        ValueError: If values and xs have different lengths
    """
    values = np.asarray(values, dtype=np.float64)
    xs = np.asarray(xs, dtype=np.float64)
    if len(values) != len(xs):
        raise ValueError(f"values ({len(values)}) and xs ({len(xs)}) must have same length")

    n = len(values)
    if n == 0:
        return np.empty((0, 2), dtype=np.float64)

    if n <= max_points:
        return np.column_stack((xs, values))

    num_buckets = max(1, max_points // 2)
    bucket_size = n / num_buckets

    indices = [0, n - 1]
    for b in range(num_buckets):
        start = int(math.floor(b * bucket_size))
        end = n if b == num_buckets - 1 else int(math.floor((b + 1) * bucket_size))
        if end <= start:
            continue

        bucket = values[start:end]
        i_min = start + int(np.argmin(bucket))
        i_max = start + int(np.argmax(bucket))
        if i_min == i_max:
            indices.append(i_min)
        else:
            indices.extend((min(i_min, i_max), max(i_min, i_max)))

    picked = np.asarray(indices, dtype=np.int64)
    order = np.argsort(xs[picked], kind="stable")
    picked = picked[order]
    return np.column_stack((xs[picked], values[picked]))


def compute_point_budget(
    window_length: int,
    total: int,
    visible_width: float,
    max_display_points: int = 2000,
    min_points: int = 100,
    max_points: int = 1500,
) -> int:
    """Number of points to draw for a window.

    The budget scales with the zoom factor (full range over visible width),
    is clamped to [min_points, max_points] and never exceeds the samples in
    the window.

    Args:
        window_length: Samples inside the visible window
        total: Samples in the whole series
        visible_width: Width of the visible window in X units
        max_display_points: Budget at zoom factor 1
        min_points: Lower clamp
        max_points: Upper clamp

    Returns:
        Point budget for downsample_min_max
    """
    zoom = max(1, total - 1) / max(1.0, float(visible_width))
    desired = int(max_display_points * zoom)
    desired = max(min_points, min(desired, max_points))
    return max(0, min(desired, window_length))


class LODRenderer:
    """Downsampled view windows of one EditableSeries.

    Reads the series on every call, so cuts are reflected immediately. X
    values are working-set indices.

    Attributes:
        series: Series being displayed
        config: Point budget settings
    """

    def __init__(self, series: EditableSeries, config: ViewConfig | None = None):
        """Initialize renderer for a series.

        Args:
            series: Series to render
            config: Point budgets (defaults to the global view config)
        """
        self.series = series
        self.config = config or get_config().view

    def get_render_data(self, x_min: float, x_max: float, channel: str = "z") -> np.ndarray:
        """Get the downsampled points of a channel inside [x_min, x_max].

        The window is widened to whole samples (floor/ceil) and clamped to the
        working range.

        Args:
            x_min: Left edge of the visible range (working index)
            x_max: Right edge of the visible range (working index)
            channel: "z", "x" or "y"

        Returns:
            Array of shape (k, 2) with columns (index, value)

        Raises:
            ValueError: If x_max < x_min
            KeyError: If channel is unknown
        """
        if x_max < x_min:
            raise ValueError(f"x_min ({x_min}) must be <= x_max ({x_max})")

        values = self.series.channel(channel)
        n = len(values)
        if n == 0:
            return np.empty((0, 2), dtype=np.float64)

        lo = max(0, min(int(math.floor(x_min)), n - 1))
        hi = max(0, min(int(math.ceil(x_max)), n - 1))
        window_length = hi - lo + 1

        budget = compute_point_budget(
            window_length,
            n,
            x_max - x_min,
            self.config.max_display_points,
            self.config.min_points_on_screen,
            self.config.max_points_on_screen,
        )

        window = values[lo : hi + 1]
        points = downsample_min_max(window, np.arange(window_length, dtype=np.float64), budget)
        points[:, 0] += lo

        logger.debug(
            f"get_render_data: channel={channel}, range=[{x_min:.1f}, {x_max:.1f}], "
            f"window={window_length}, budget={budget}, returned {len(points)} points"
        )
        return points

    def get_full_range(self) -> tuple[float, float, float, float]:
        """Get full data range for initial plot setup.

        Returns:
            Tuple of (x_min, x_max, y_min, y_max) over all channels. All zero
            for an empty series.
        """
        n = len(self.series)
        if n == 0:
            return 0.0, 0.0, 0.0, 0.0

        y_min = min(float(np.nanmin(self.series.channel(name))) for name in CHANNEL_NAMES)
        y_max = max(float(np.nanmax(self.series.channel(name))) for name in CHANNEL_NAMES)
        return 0.0, float(n - 1), y_min, y_max
