"""
skyframes.utils — Foundational Utilities
=========================================

Constants, vector helpers, spherical ⇄ Cartesian conversion and angle
utilities.  All functions are pure NumPy and accept either scalars or
arrays; scalar inputs give scalar (or ``(3,)``) outputs.

Angular conventions
-------------------
- Right ascension / longitude ``ra`` is measured anticlockwise from +X about
  +Z (looking down from +Z) and is reported in ``[0, 2π)``.
- Declination / latitude ``dec`` is measured from the XY plane and must lie
  in ``[−π/2, π/2]``.
- At the poles right ascension is undefined; ``to_spherical`` reports 0.
"""

import numpy as np
from numpy.typing import NDArray

from .exceptions import DomainError

# ── Numerical Constants ─────────────────────────────────────────────────────
TWO_PI = 2.0 * np.pi
HALF_PI = 0.5 * np.pi
POLE_TOLERANCE = 1e-12          # |ẑ × r̂| below this is treated as a pole
ZERO_RADIUS_TOLERANCE = 1e-15   # norms below this have no direction

# ── Units ───────────────────────────────────────────────────────────────────
PC_KM = 3.0856775814913673e13   # parsec                          [km]
JULIAN_YEAR_S = 31_557_600.0    # Julian year                     [s]
PC_PER_YR_TO_KM_PER_S = PC_KM / JULIAN_YEAR_S
ARCSEC = np.pi / 648_000.0       # one arcsecond                   [rad]

# ── Galactic Constants ──────────────────────────────────────────────────────
# Equatorial coordinates of the Galactic Centre and North Galactic Pole,
# Binney & Merrifield, Galactic Astronomy (pp. 30-31).
GC_RA = np.deg2rad(266.4050)
GC_DEC = np.deg2rad(-28.9362)
NGP_RA = np.deg2rad(192.85948)
NGP_DEC = np.deg2rad(27.12825)

# Solar motion w.r.t. the LSR in the Galactic frame (U, V, W)    [km/s]
# Aumer & Binney (2009) MNRAS 397, 1286.
SOLAR_MOTION_GALACTIC = np.array([9.96, 5.25, 7.07])


def _scalar_or_array(x):
    """Unwrap 0-d arrays to Python floats, leave everything else alone."""
    if np.ndim(x) == 0:
        return float(x)
    return x


# ── Vector Helpers ──────────────────────────────────────────────────────────

def normalize(v: NDArray) -> NDArray:
    """Return unit vector.  Works on single vectors or (N,3) arrays."""
    v = np.asarray(v, dtype=np.float64)
    if v.ndim == 1:
        mag = np.linalg.norm(v)
        if mag < ZERO_RADIUS_TOLERANCE:
            raise DomainError("Cannot normalize a near-zero vector.")
        return v / mag
    elif v.ndim == 2:
        mag = np.linalg.norm(v, axis=1, keepdims=True)
        if np.any(mag < ZERO_RADIUS_TOLERANCE):
            raise DomainError("Cannot normalize a near-zero vector.")
        return v / mag
    else:
        raise ValueError(f"Expected 1-D or 2-D array, got {v.ndim}-D.")


def check_declination(dec) -> NDArray:
    """Return ``dec`` as float64, raising DomainError outside [−π/2, π/2]."""
    dec = np.asarray(dec, dtype=np.float64)
    if not np.all(np.isfinite(dec)) or np.any(np.abs(dec) > HALF_PI):
        raise DomainError(
            f"Declination must lie in [-pi/2, pi/2], got {dec!r}")
    return dec


# ── Angle Utilities ─────────────────────────────────────────────────────────

def wrap_to_two_pi(angle):
    """Translate angle(s) to the equivalent value in [0, 2π)."""
    a = np.mod(np.asarray(angle, dtype=np.float64), TWO_PI)
    # np.mod can round tiny negative angles up to exactly 2π
    a = np.where(a >= TWO_PI, 0.0, a)
    return _scalar_or_array(a)


def wrap_to_pi(angle):
    """Translate angle(s) to the equivalent value in [−π, π)."""
    a = np.asarray(wrap_to_two_pi(angle), dtype=np.float64)
    a = np.where(a >= np.pi, a - TWO_PI, a)
    return _scalar_or_array(a)


def angular_separation(ra1, dec1, ra2, dec2):
    """Great-circle separation of two positions [rad].

    Uses the Vincenty form, which stays accurate for both tiny and
    near-antipodal separations where the plain cosine rule does not.
    """
    dra = np.asarray(ra2, dtype=np.float64) - np.asarray(ra1, dtype=np.float64)
    s1, c1 = np.sin(dec1), np.cos(dec1)
    s2, c2 = np.sin(dec2), np.cos(dec2)
    num = np.hypot(c2 * np.sin(dra), c1 * s2 - s1 * c2 * np.cos(dra))
    den = s1 * s2 + c1 * c2 * np.cos(dra)
    return _scalar_or_array(np.arctan2(num, den))


def hms_to_radians(hour: int, minute: int, second: float) -> float:
    """Hours / minutes / seconds of time → radians."""
    if hour < 0:
        raise DomainError(f"Hours must be non-negative, got {hour}")
    return float(np.deg2rad(hour * 15.0 + minute / 4.0 + second / 240.0))


def dms_to_radians(sign: int, deg: int, arcmin: int, arcsec: float) -> float:
    """Signed degrees / arcminutes / arcseconds → radians.

    The sign is passed separately so that angles in (−1°, 0°) survive;
    the sign of ``deg`` itself is ignored.
    """
    if sign not in (-1, 1):
        raise DomainError(f"Expected sign of +1 or -1, found {sign}")
    degrees = abs(deg) + arcmin / 60.0 + arcsec / 3600.0
    return float(np.deg2rad(sign * degrees))


def radians_to_hms(angle: float) -> tuple[int, int, float]:
    """Radians → (hours, minutes, seconds), angle first wrapped to [0, 2π)."""
    hours = np.rad2deg(wrap_to_two_pi(angle)) / 15.0
    h = int(np.floor(hours))
    rem = (hours - h) * 60.0
    m = int(np.floor(rem))
    return h, m, (rem - m) * 60.0


def radians_to_dms(angle: float) -> tuple[int, int, int, float]:
    """Radians → (sign, degrees, arcminutes, arcseconds).

    Inverse of :func:`dms_to_radians`; degrees and arcminutes are whole
    numbers and carry no sign.
    """
    sign = -1 if angle < 0 else 1
    degrees = abs(float(np.rad2deg(angle)))
    d = int(np.floor(degrees))
    rem = (degrees - d) * 60.0
    m = int(np.floor(rem))
    return sign, d, m, (rem - m) * 60.0


def random_sky_points(n: int, rng=None) -> tuple[NDArray, NDArray]:
    """Draw ``n`` positions distributed uniformly on the celestial sphere.

    Returns
    -------
    ra, dec : (n,) ndarrays [rad]
    """
    rng = np.random.default_rng(rng)
    ra = TWO_PI * rng.random(n)
    dec = np.arcsin(2.0 * rng.random(n) - 1.0)
    return ra, dec


# ── Coordinate Conversions ──────────────────────────────────────────────────

def to_cartesian(r, ra, dec) -> NDArray:
    """Spherical (r, ra, dec) → Cartesian (x, y, z).

    Parameters
    ----------
    r : float or array — radius (≥ 0); 1 gives a unit direction
    ra : float or array — right ascension / longitude [rad]
    dec : float or array — declination / latitude [rad], in [−π/2, π/2]

    Returns
    -------
    vec : (3,) or (N,3) ndarray
    """
    dec = check_declination(dec)
    r, ra, dec = np.broadcast_arrays(np.asarray(r, dtype=np.float64),
                                     np.asarray(ra, dtype=np.float64), dec)
    if np.any(r < 0.0):
        raise DomainError(f"Radius must be non-negative, got {r!r}")
    cos_dec = np.cos(dec)
    return np.stack([r * cos_dec * np.cos(ra),
                     r * cos_dec * np.sin(ra),
                     r * np.sin(dec)], axis=-1)


def to_spherical(vec: NDArray):
    """Cartesian (x, y, z) → spherical (r, ra, dec).

    ``ra`` is wrapped to [0, 2π).  Directions within ``POLE_TOLERANCE`` of
    the Z axis report ``ra = 0``.

    Parameters
    ----------
    vec : (3,) or (N,3) array

    Returns
    -------
    r, ra, dec : floats for a single vector, (N,) arrays for a batch

    Raises
    ------
    DomainError — if any vector has zero length
    """
    v = np.asarray(vec, dtype=np.float64)
    if v.shape[-1] != 3:
        raise ValueError(f"Expected (3,) or (N,3) array, got {v.shape}")
    x, y, z = v[..., 0], v[..., 1], v[..., 2]
    r = np.linalg.norm(v, axis=-1)
    if np.any(r == 0.0):
        raise DomainError("Direction is undefined for a zero-length vector.")

    dec = np.arcsin(np.clip(z / r, -1.0, 1.0))
    polar = np.hypot(x, y) <= POLE_TOLERANCE * r
    ra = np.where(polar, 0.0, np.arctan2(y, x))
    ra = wrap_to_two_pi(ra)
    return _scalar_or_array(r), ra, _scalar_or_array(dec)
