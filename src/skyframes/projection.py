"""
skyframes.projection — Aitoff Projection
=========================================

Whole-sphere → plane mapping used to eyeball footprint membership results.
The full sky lands inside the ellipse (x/π)² + (y/(π/2))² ≤ 1, with the
central meridian at ra = 0.  See https://en.wikipedia.org/wiki/Aitoff_projection
"""

import numpy as np
from numpy.typing import NDArray

from .utils import TWO_PI, HALF_PI, check_declination, wrap_to_two_pi, _scalar_or_array


def aitoff(ra, dec):
    """Forward Aitoff projection.

    Parameters
    ----------
    ra : float or array — longitude [rad]; values past π map to the
        equivalent negative angle, so the result is continuous about ra = 0
    dec : float or array — latitude [rad]

    Returns
    -------
    x, y : floats or arrays, |x| ≤ π and |y| ≤ π/2
    """
    dec = check_declination(dec)
    lon = np.asarray(wrap_to_two_pi(ra), dtype=np.float64)
    lon = np.where(lon > np.pi, lon - TWO_PI, lon)
    x, y = _project(lon, dec)
    return _scalar_or_array(x), _scalar_or_array(y)


def _project(lon, dec):
    # lon already in [−π, π]; ±π stay on opposite edges
    lon = np.asarray(lon, dtype=np.float64)
    dec = np.asarray(dec, dtype=np.float64)
    cos_dec = np.cos(dec)
    alpha = np.arccos(np.clip(cos_dec * np.cos(0.5 * lon), -1.0, 1.0))
    # np.sinc(x) = sin(πx)/(πx), equal to 1 at the origin
    sinc_alpha = np.sinc(alpha / np.pi)

    x = 2.0 * cos_dec * np.sin(0.5 * lon) / sinc_alpha
    y = np.sin(dec) / sinc_alpha
    return x, y


def aitoff_batch(points: NDArray) -> NDArray:
    """Project an (N,2) array of (ra, dec) rows; returns (N,2) of (x, y)."""
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"Expected (N,2) array, got {pts.shape}")
    x, y = aitoff(pts[:, 0], pts[:, 1])
    return np.column_stack([x, y])


def aitoff_range():
    """Extent of the projected sky.

    Returns
    -------
    (x_min, x_max), (y_min, y_max) — the ±π meridians and the poles
    """
    x_east, x_west = (float(_project(lon, 0.0)[0]) for lon in (np.pi, -np.pi))
    y_north, y_south = (float(_project(0.0, lat)[1]) for lat in (HALF_PI, -HALF_PI))
    return ((min(x_east, x_west), max(x_east, x_west)),
            (min(y_south, y_north), max(y_south, y_north)))


def aitoff_graticule(n_lon: int, n_lat: int,
                     n_points: int = 90) -> tuple[list, list]:
    """Projected lines of constant longitude and latitude.

    Meridians are spaced evenly over [−π, π], both edges included, and run
    pole to pole.  Parallels sit evenly inside (−π/2, π/2), poles excluded,
    and run across the full longitude range.

    Parameters
    ----------
    n_lon : int — number of meridians, at least 2
    n_lat : int — number of parallels, at least 1
    n_points : int — vertices per meridian; parallels get twice as many

    Returns
    -------
    meridians, parallels : lists of (M,2) arrays of projected (x, y)
    """
    if n_lon < 2:
        raise ValueError(f"Need at least 2 lines of constant longitude, got {n_lon}")
    if n_lat < 1:
        raise ValueError(f"Need at least 1 line of constant latitude, got {n_lat}")

    lat_pts = np.linspace(-HALF_PI, HALF_PI, n_points)
    lon_pts = np.linspace(-np.pi, np.pi, 2 * n_points)

    meridians = []
    for lon in np.linspace(-np.pi, np.pi, n_lon):
        x, y = _project(np.full_like(lat_pts, lon), lat_pts)
        meridians.append(np.column_stack([x, y]))

    parallels = []
    for lat in -HALF_PI + np.pi * np.arange(1, n_lat + 1) / (n_lat + 1):
        x, y = _project(lon_pts, np.full_like(lon_pts, lat))
        parallels.append(np.column_stack([x, y]))

    return meridians, parallels
