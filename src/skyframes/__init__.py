"""
skyframes — Celestial Frames and Survey Footprint Library
==========================================================

A pure-NumPy library for converting between spherical and Cartesian sky
coordinates, rotating between celestial reference frames, and testing
whether sky positions fall inside a survey footprint.

All frames route through the Equatorial frame as the canonical base::

    GALACTIC  ←→  EQUATORIAL  ←→  NORMAL (per line of sight)
                              ←→  SURVEY-NATIVE (footprints)

Coordinate Frame Definitions
-----------------------------

**Equatorial**
  - X: Vernal equinox
  - Z: North celestial pole
  - Y: Completes RHS.

**Galactic**
  - X: Galactic Centre
  - Z: North Galactic Pole
  - Y: Completes RHS (direction of Galactic rotation).

**Normal**
  - E: East, parallel to the equator
  - N: North, direction of increasing declination
  - R: Along the line of sight; E × N = R.

**Survey-native**
  - Defined per survey by the equatorial position of its pole and of its
    longitude origin.  Footprints are unions of half-open stripes in this
    system.
"""

from .exceptions import (
    SkyFramesError, DomainError, MalformedFootprintError,
)

from .frames import (
    # ── Frame builders ──
    Frame, normal_frame_matrix, normal_frame,
    pole_frame_matrix, projection_matrix,
    # ── Equatorial ↔ Galactic ──
    equatorial_to_galactic_matrix, galactic_to_equatorial_matrix,
    equatorial_to_galactic, galactic_to_equatorial,
    galactic_frame, solar_motion_equatorial,
    # ── Angular positions / proper motions ──
    convert_position,
    equatorial_to_galactic_position, galactic_to_equatorial_position,
    tangential_speed, distance_from_motion, proper_motion_from_speed,
    parallax_from_distance, distance_from_parallax,
    tangential_velocity, proper_motions,
    convert_position_and_proper_motion,
    equatorial_to_galactic_proper_motion, galactic_to_equatorial_proper_motion,
    # ── Unified API ──
    get_dcm, transform, transform_covariance,
    FRAMES,
)

from .footprint import (
    Stripe, Footprint, SurveyFrame,
    EQUATORIAL, SDSS, SURVEY_FRAMES, get_survey_frame,
)

from .coverage import (
    native_coordinates,
    is_in_footprint,
    footprint_mask,
    points_in_footprint,
    sky_fraction,
)

from .projection import aitoff, aitoff_batch, aitoff_range, aitoff_graticule

from .utils import (
    normalize,
    to_cartesian, to_spherical,
    wrap_to_two_pi, wrap_to_pi,
    angular_separation,
    hms_to_radians, dms_to_radians,
    radians_to_hms, radians_to_dms,
    random_sky_points,
    TWO_PI,
    GC_RA, GC_DEC, NGP_RA, NGP_DEC,
    SOLAR_MOTION_GALACTIC,
    PC_PER_YR_TO_KM_PER_S, ARCSEC,
)

__version__ = "1.0.0"
__all__ = [
    # ── Errors ──
    "SkyFramesError", "DomainError", "MalformedFootprintError",
    # ── Constants ──
    "TWO_PI", "GC_RA", "GC_DEC", "NGP_RA", "NGP_DEC",
    "SOLAR_MOTION_GALACTIC", "PC_PER_YR_TO_KM_PER_S", "ARCSEC",
    # ── Coordinate conversion ──
    "to_cartesian", "to_spherical", "normalize",
    "wrap_to_two_pi", "wrap_to_pi", "angular_separation",
    "hms_to_radians", "dms_to_radians", "radians_to_hms", "radians_to_dms",
    "random_sky_points",
    # ── Frame builders ──
    "Frame", "normal_frame_matrix", "normal_frame",
    "pole_frame_matrix", "projection_matrix",
    # ── Equatorial ↔ Galactic ──
    "equatorial_to_galactic_matrix", "galactic_to_equatorial_matrix",
    "equatorial_to_galactic", "galactic_to_equatorial",
    "galactic_frame", "solar_motion_equatorial",
    "convert_position",
    "equatorial_to_galactic_position", "galactic_to_equatorial_position",
    "tangential_speed", "distance_from_motion", "proper_motion_from_speed",
    "parallax_from_distance", "distance_from_parallax",
    "tangential_velocity", "proper_motions",
    "convert_position_and_proper_motion",
    "equatorial_to_galactic_proper_motion", "galactic_to_equatorial_proper_motion",
    # ── Unified API ──
    "get_dcm", "transform", "transform_covariance", "FRAMES",
    # ── Footprints ──
    "Stripe", "Footprint", "SurveyFrame",
    "EQUATORIAL", "SDSS", "SURVEY_FRAMES", "get_survey_frame",
    # ── Membership ──
    "native_coordinates", "is_in_footprint", "footprint_mask",
    "points_in_footprint", "sky_fraction",
    # ── Projection ──
    "aitoff", "aitoff_batch", "aitoff_range", "aitoff_graticule",
]
