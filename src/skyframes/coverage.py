"""
skyframes.coverage — Footprint Membership
==========================================

Point-in-footprint queries.  Positions arrive in equatorial (ra, dec), are
rotated into the footprint's native system, matched to the stripe whose
inclination band contains them and finally tested against that stripe's
(possibly wrapped) longitude range.

All queries are pure: no caching, no mutation of the footprint.
"""

import logging

import numpy as np
from numpy.typing import NDArray

from .frames import _apply_dcm
from .footprint import Footprint, SurveyFrame
from .utils import (
    to_cartesian, to_spherical, check_declination, wrap_to_two_pi,
    random_sky_points, _scalar_or_array,
)

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════════════
#  Native Coordinates
# ════════════════════════════════════════════════════════════════════════════

def native_coordinates(frame: Footprint | SurveyFrame, ra, dec):
    """Rotate equatorial position(s) into survey-native coordinates.

    Parameters
    ----------
    frame : Footprint or SurveyFrame — native system (a footprint's own frame
        is used when a Footprint is passed)
    ra, dec : float or array — equatorial coordinates [rad]

    Returns
    -------
    lon, inc : native longitude in [0, 2π) and inclination [rad]
    """
    if isinstance(frame, Footprint):
        frame = frame.frame
    dec = check_declination(dec)
    if frame.is_identity:
        return wrap_to_two_pi(ra), _scalar_or_array(dec)

    vec = _apply_dcm(frame.matrix, to_cartesian(1.0, ra, dec))
    _, lon, inc = to_spherical(vec)
    return lon, inc


# ════════════════════════════════════════════════════════════════════════════
#  Membership
# ════════════════════════════════════════════════════════════════════════════

def is_in_footprint(footprint: Footprint, ra: float, dec: float) -> bool:
    """True if the equatorial position (ra, dec) lies inside the footprint.

    Stripe bounds are half-open: a point on a lower bound is inside, a
    point on an upper bound is outside.  Points not covered by any stripe
    return False.

    Raises
    ------
    DomainError — if dec lies outside [−π/2, π/2]
    """
    if np.ndim(ra) or np.ndim(dec):
        raise ValueError("is_in_footprint takes scalars; use footprint_mask")
    lon, inc = native_coordinates(footprint, ra, dec)
    stripe = footprint.stripe_at(inc)
    return stripe is not None and stripe.contains_longitude(lon)


def footprint_mask(footprint: Footprint, ra, dec) -> NDArray:
    """Vectorised :func:`is_in_footprint` over arrays of positions.

    Returns
    -------
    mask : bool ndarray, broadcast shape of ra and dec
    """
    lon, inc = native_coordinates(footprint, ra, dec)
    lon, inc = np.broadcast_arrays(np.asarray(lon, dtype=np.float64),
                                   np.asarray(inc, dtype=np.float64))
    if len(footprint) == 0:
        return np.zeros(lon.shape, dtype=bool)

    stripes = footprint.stripes
    lower = np.array([s.inclination_min for s in stripes])
    upper = np.array([s.inclination_max for s in stripes])
    lon_min = np.array([s.longitude_min for s in stripes])
    lon_max = np.array([s.longitude_max for s in stripes])

    idx = np.searchsorted(lower, inc, side="right") - 1
    j = np.clip(idx, 0, None)
    in_band = (idx >= 0) & (inc < upper[j])

    lo, hi = lon_min[j], lon_max[j]
    in_lon = np.where(hi < lo,
                      (lon >= lo) | (lon < hi),
                      (lon >= lo) & (lon < hi))
    return in_band & in_lon


# ════════════════════════════════════════════════════════════════════════════
#  Monte-Carlo Sky Sampling
# ════════════════════════════════════════════════════════════════════════════

def points_in_footprint(footprint: Footprint, n_samples: int = 10_000,
                        rng=None) -> tuple[NDArray, NDArray]:
    """Uniform random sky positions that fall inside the footprint.

    Returns
    -------
    ra, dec : (M,) ndarrays [rad], M ≤ n_samples
    """
    ra, dec = random_sky_points(n_samples, rng)
    mask = footprint_mask(footprint, ra, dec)
    return ra[mask], dec[mask]


def sky_fraction(footprint: Footprint, n_samples: int = 100_000,
                 rng=None) -> float:
    """Monte-Carlo estimate of the fraction of the sky inside the footprint.

    Compare with ``footprint.solid_angle() / (4π)``.
    """
    ra, dec = random_sky_points(n_samples, rng)
    fraction = float(np.mean(footprint_mask(footprint, ra, dec)))
    logger.debug("Footprint %r: %d samples, sky fraction %.4f",
                 footprint.name, n_samples, fraction)
    return fraction
