"""
skyframes.frames — Equatorial / Galactic / Normal Frame Hub
============================================================

All frames route through the Equatorial frame as the canonical base.

Frame Definitions
-----------------

**Equatorial**
  - X: Vernal equinox
  - Z: North celestial pole
  - Y: Completes right-hand system

**Galactic**
  - X: Towards the Galactic Centre
  - Z: North Galactic Pole
  - Y: Completes right-hand system (direction of Galactic rotation)

**Normal (per line of sight)**::

    R̂ = r̂(ra, dec)        (line of sight)
    Ê = (ẑ × R̂)̂           (East, parallel to the equator)
    N̂ = R̂ × Ê             (North, direction of increasing dec)

  Ê, N̂ span the tangent plane and Ê × N̂ = R̂.  At the poles ẑ × R̂
  vanishes; the builder then takes Ê as the parent X axis projected
  orthogonal to R̂, so the north pole gives Ê = x̂, N̂ = ŷ and the south
  pole Ê = x̂, N̂ = −ŷ.

Matrix Convention
-----------------
Every matrix in this module has the target-frame axes, expressed in the
source frame, as its rows::

    v_target = R @ v_source          R_inverse = R.T

Transform Graph
---------------
::

    GALACTIC ←→ EQUATORIAL ←→ NORMAL(ra, dec)
"""

import logging
import threading
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .exceptions import DomainError
from .utils import (
    normalize, to_cartesian, to_spherical, check_declination,
    POLE_TOLERANCE, PC_PER_YR_TO_KM_PER_S, ARCSEC,
    GC_RA, GC_DEC, NGP_RA, NGP_DEC, SOLAR_MOTION_GALACTIC,
)

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════════════
#  Internal Helpers
# ════════════════════════════════════════════════════════════════════════════

def _apply_dcm(R: NDArray, vec: NDArray) -> NDArray:
    """Apply 3×3 DCM to a single (3,) or batch (N,3) of vectors."""
    vec = np.asarray(vec, dtype=np.float64)
    if vec.ndim == 1:
        return R @ vec
    return (R @ vec.T).T


def _freeze(R: NDArray) -> NDArray:
    R = np.array(R, dtype=np.float64)
    R.setflags(write=False)
    return R


class _InitOnce:
    """A value computed by ``factory`` on first access and never again.

    Thread-safe: the factory runs at most once, under a lock; once the value
    is published, readers return it without locking.
    """

    def __init__(self, factory):
        self._factory = factory
        self._lock = threading.Lock()
        self._value = None

    def get(self):
        value = self._value
        if value is None:
            with self._lock:
                if self._value is None:
                    self._value = self._factory()
                value = self._value
        return value


# ════════════════════════════════════════════════════════════════════════════
#  Frame Value Type
# ════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, eq=False)
class Frame:
    """A named rotation relative to a parent frame.

    Parameters
    ----------
    name : str — frame identifier, e.g. 'galactic', 'normal'
    parent : str — frame the rotation is expressed against
    matrix : (3,3) — rotation such that v_frame = matrix @ v_parent
        (stored as a read-only copy)
    """
    name: str
    parent: str
    matrix: NDArray

    def __post_init__(self):
        object.__setattr__(self, "matrix", _freeze(self.matrix))

    def from_parent(self, vec: NDArray) -> NDArray:
        """Express parent-frame vector(s) in this frame."""
        return _apply_dcm(self.matrix, vec)

    def to_parent(self, vec: NDArray) -> NDArray:
        """Express vector(s) in this frame in the parent frame."""
        return _apply_dcm(self.matrix.T, vec)


# ════════════════════════════════════════════════════════════════════════════
#  Frame Builders
# ════════════════════════════════════════════════════════════════════════════

def normal_frame_matrix(ra: float, dec: float) -> NDArray:
    """Build the parent→Normal direction-cosine matrix for a line of sight.

    Parameters
    ----------
    ra : float — right ascension (or longitude) of the line of sight [rad]
    dec : float — declination (or latitude) of the line of sight [rad]

    Returns
    -------
    R : (3,3) ndarray — rows [East, North, LineOfSight] in the parent frame;
        R @ to_cartesian(1, ra, dec) == [0, 0, 1]
    """
    los = to_cartesian(1.0, ra, dec)

    east = np.cross([0.0, 0.0, 1.0], los)
    mag = np.linalg.norm(east)
    if mag < POLE_TOLERANCE:
        # Pole: fall back on the parent X axis, projected off the LOS
        x_axis = np.array([1.0, 0.0, 0.0])
        east = normalize(x_axis - np.dot(x_axis, los) * los)
    else:
        east = east / mag
    north = np.cross(los, east)

    return np.array([east, north, los])


def normal_frame(ra: float, dec: float, parent: str = "equatorial") -> Frame:
    """Normal frame for the line of sight (ra, dec) as a :class:`Frame`."""
    return Frame("normal", parent, normal_frame_matrix(ra, dec))


def pole_frame_matrix(pole_ra: float, pole_dec: float,
                      origin_ra: float, origin_dec: float) -> NDArray:
    """Build the parent→target DCM for a frame given by its pole and origin.

    The target Z axis points at the pole; the X axis points at the origin
    of longitude, made exactly orthogonal to Z (published pole / centre
    pairs are only orthogonal to a few arcseconds); Y completes the RHS.

    Parameters
    ----------
    pole_ra, pole_dec : float — parent coordinates of the target north pole [rad]
    origin_ra, origin_dec : float — parent coordinates of the point at
        target longitude 0, latitude ≈ 0 [rad]

    Returns
    -------
    R : (3,3) ndarray — DCM such that v_target = R @ v_parent
    """
    z = to_cartesian(1.0, pole_ra, pole_dec)
    origin = to_cartesian(1.0, origin_ra, origin_dec)
    x = origin - np.dot(origin, z) * z
    if np.linalg.norm(x) < POLE_TOLERANCE:
        raise DomainError("Frame origin coincides with its pole.")
    x = normalize(x)
    y = np.cross(z, x)
    return np.array([x, y, z])


def projection_matrix(ra: float, dec: float) -> NDArray:
    """Matrix I − r̂r̂ᵀ projecting vectors onto the tangent plane at (ra, dec)."""
    r = to_cartesian(1.0, ra, dec)
    return np.eye(3) - np.outer(r, r)


# ════════════════════════════════════════════════════════════════════════════
#  Equatorial ↔ Galactic
# ════════════════════════════════════════════════════════════════════════════

def _build_galactic_matrix() -> NDArray:
    R = _freeze(pole_frame_matrix(NGP_RA, NGP_DEC, GC_RA, GC_DEC))
    logger.debug("Initialised equatorial->galactic rotation:\n%s", R)
    return R


_GALACTIC = _InitOnce(_build_galactic_matrix)


def equatorial_to_galactic_matrix() -> NDArray:
    """Equatorial→Galactic DCM (read-only, built once on first call)."""
    return _GALACTIC.get()


def galactic_to_equatorial_matrix() -> NDArray:
    """Galactic→Equatorial DCM (transpose of Equatorial→Galactic)."""
    return equatorial_to_galactic_matrix().T


def equatorial_to_galactic(vec: NDArray) -> NDArray:
    """Transform vector(s) from Equatorial to Galactic."""
    return _apply_dcm(equatorial_to_galactic_matrix(), vec)


def galactic_to_equatorial(vec: NDArray) -> NDArray:
    """Transform vector(s) from Galactic to Equatorial."""
    return _apply_dcm(galactic_to_equatorial_matrix(), vec)


def galactic_frame() -> Frame:
    """The Galactic frame as a child of the Equatorial frame."""
    return Frame("galactic", "equatorial", equatorial_to_galactic_matrix())


def solar_motion_equatorial() -> NDArray:
    """Solar motion w.r.t. the LSR expressed in the Equatorial frame [km/s]."""
    return galactic_to_equatorial(SOLAR_MOTION_GALACTIC)


# ════════════════════════════════════════════════════════════════════════════
#  Angular Positions and Proper Motions
# ════════════════════════════════════════════════════════════════════════════

def convert_position(ra, dec, R: NDArray):
    """Rotate angular coordinates into another frame.

    Parameters
    ----------
    ra, dec : float or array — coordinates in the source frame [rad]
    R : (3,3) — DCM from the source frame to the target frame

    Returns
    -------
    lon, lat : coordinates in the target frame [rad], lon in [0, 2π)
    """
    _, lon, lat = to_spherical(_apply_dcm(R, to_cartesian(1.0, ra, dec)))
    return lon, lat


def equatorial_to_galactic_position(ra, dec):
    """(ra, dec) → Galactic (l, b) [rad]."""
    return convert_position(ra, dec, equatorial_to_galactic_matrix())


def galactic_to_equatorial_position(lon, lat):
    """Galactic (l, b) → (ra, dec) [rad]."""
    return convert_position(lon, lat, galactic_to_equatorial_matrix())


def tangential_speed(mu: float, d: float) -> float:
    """Tangential speed [km/s] from total proper motion mu [rad/yr] and distance d [pc]."""
    return mu * d * PC_PER_YR_TO_KM_PER_S


def distance_from_motion(mu: float, vt: float) -> float:
    """Distance [pc] at which speed vt [km/s] shows proper motion mu [rad/yr]."""
    if mu == 0.0:
        raise DomainError("Distance is undefined for zero proper motion.")
    return vt / (mu * PC_PER_YR_TO_KM_PER_S)


def proper_motion_from_speed(d: float, vt: float) -> float:
    """Total proper motion [rad/yr] of speed vt [km/s] at distance d [pc]."""
    if d <= 0.0:
        raise DomainError(f"Distance must be positive, got {d}")
    return vt / (d * PC_PER_YR_TO_KM_PER_S)


def parallax_from_distance(d: float) -> float:
    """Annual parallax [rad] of a star at distance d [pc]."""
    if d <= 0.0:
        raise DomainError(f"Distance must be positive, got {d}")
    return ARCSEC / d


def distance_from_parallax(parallax: float) -> float:
    """Distance [pc] by direct inversion of an annual parallax [rad].

    Only meaningful for precise parallaxes; inverting a noisy measurement
    gives a biased distance.
    """
    if parallax <= 0.0:
        raise DomainError(f"Parallax must be positive, got {parallax}")
    return ARCSEC / parallax


def tangential_velocity(d: float, ra: float, dec: float,
                        mu_acosd: float, mu_d: float) -> NDArray:
    """Tangential velocity vector implied by a proper motion.

    Parameters
    ----------
    d : float — distance [pc]
    ra, dec : float — position [rad]
    mu_acosd : float — proper motion parallel to the equator, including
        the cos(dec) factor [rad/yr]
    mu_d : float — proper motion perpendicular to the equator [rad/yr]

    Returns
    -------
    vtan : (3,) ndarray — velocity in the frame of (ra, dec) [km/s]
    """
    east, north, _ = normal_frame_matrix(ra, dec)
    return d * (mu_acosd * east + mu_d * north) * PC_PER_YR_TO_KM_PER_S


def proper_motions(d: float, ra: float, dec: float,
                   vtan: NDArray) -> tuple[float, float]:
    """Proper motion (mu_acosd, mu_d) [rad/yr] of velocity ``vtan`` [km/s] at distance d [pc].

    Only the components of ``vtan`` in the tangent plane contribute.
    """
    if d <= 0.0:
        raise DomainError(f"Distance must be positive, got {d}")
    east, north, _ = normal_frame_matrix(ra, dec)
    v = np.asarray(vtan, dtype=np.float64) / (d * PC_PER_YR_TO_KM_PER_S)
    return float(np.dot(east, v)), float(np.dot(north, v))


def convert_position_and_proper_motion(ra: float, dec: float,
                                       mu_acosd: float, mu_d: float,
                                       R: NDArray) -> tuple[float, float, float, float]:
    """Rotate a position and its proper motion into another frame.

    The proper motion is turned into a tangential velocity at unit
    distance, rotated with the position, and projected back on the sky.

    Returns
    -------
    lon, lat, mu_lcosb, mu_b : target-frame position [rad] and proper motion [rad/yr]
    """
    lon, lat = convert_position(ra, dec, R)
    vt = R @ tangential_velocity(1.0, ra, dec, mu_acosd, mu_d)
    mu_lcosb, mu_b = proper_motions(1.0, lon, lat, vt)
    return lon, lat, mu_lcosb, mu_b


def equatorial_to_galactic_proper_motion(ra, dec, mu_acosd, mu_d):
    """(ra, dec, mu_acosd, mu_d) → (l, b, mu_lcosb, mu_b)."""
    return convert_position_and_proper_motion(
        ra, dec, mu_acosd, mu_d, equatorial_to_galactic_matrix())


def galactic_to_equatorial_proper_motion(lon, lat, mu_lcosb, mu_b):
    """(l, b, mu_lcosb, mu_b) → (ra, dec, mu_acosd, mu_d)."""
    return convert_position_and_proper_motion(
        lon, lat, mu_lcosb, mu_b, galactic_to_equatorial_matrix())


# ════════════════════════════════════════════════════════════════════════════
#  Unified Transform API
# ════════════════════════════════════════════════════════════════════════════

# Valid frame names
FRAMES = {"equatorial", "galactic", "normal"}


def get_dcm(from_frame: str, to_frame: str,
            ra: float | None = None,
            dec: float | None = None) -> NDArray:
    """Get the 3×3 DCM for any supported frame pair.

    Parameters
    ----------
    from_frame : str — one of 'equatorial', 'galactic', 'normal'
    to_frame : str — one of 'equatorial', 'galactic', 'normal'
    ra, dec : float or None — equatorial line of sight [rad]
        (required if the Normal frame is involved)

    Returns
    -------
    R : (3,3) ndarray — DCM such that v_to = R @ v_from
    """
    fr = from_frame.lower()
    to = to_frame.lower()
    if fr not in FRAMES or to not in FRAMES:
        raise ValueError(f"Unknown frame. Valid: {FRAMES}")
    if fr == to:
        return np.eye(3)
    if "normal" in (fr, to):
        if ra is None or dec is None:
            raise ValueError("ra, dec required for Normal frame transforms")
        check_declination(dec)

    # Step 1: from_frame → Equatorial
    if fr == "equatorial":
        R_to_eq = np.eye(3)
    elif fr == "galactic":
        R_to_eq = galactic_to_equatorial_matrix()
    else:
        R_to_eq = normal_frame_matrix(ra, dec).T

    # Step 2: Equatorial → to_frame
    if to == "equatorial":
        R_from_eq = np.eye(3)
    elif to == "galactic":
        R_from_eq = equatorial_to_galactic_matrix()
    else:
        R_from_eq = normal_frame_matrix(ra, dec)

    return R_from_eq @ R_to_eq


def transform(vec: NDArray,
              from_frame: str, to_frame: str,
              ra: float | None = None,
              dec: float | None = None) -> NDArray:
    """Transform vector(s) between any two frames.

    Parameters
    ----------
    vec : (3,) or (N,3) — vector(s) in from_frame
    from_frame, to_frame : str — frame names ('equatorial','galactic','normal')
    ra, dec : float or None — line of sight (needed if Normal involved)

    Returns
    -------
    vec_out : same shape — vector(s) in to_frame
    """
    R = get_dcm(from_frame, to_frame, ra=ra, dec=dec)
    return _apply_dcm(R, vec)


def transform_covariance(P: NDArray,
                         from_frame: str, to_frame: str,
                         ra: float | None = None,
                         dec: float | None = None) -> NDArray:
    """Rotate a 3×3 covariance (e.g. a velocity ellipsoid): P' = R P Rᵀ."""
    P = np.asarray(P, dtype=np.float64)
    if P.shape != (3, 3):
        raise ValueError(f"Covariance must be (3,3), got {P.shape}")
    R = get_dcm(from_frame, to_frame, ra=ra, dec=dec)
    return R @ P @ R.T
