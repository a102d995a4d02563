"""
skyframes.footprint — Survey Footprint Model
=============================================

A survey footprint is a union of angular stripes defined in the survey's
native coordinate system.  Each :class:`Stripe` covers a half-open band of
native inclination (latitude) ``[inclination_min, inclination_max)`` and a
half-open run of native longitude ``[longitude_min, longitude_max)``.

Longitude wraparound
--------------------
``longitude_min`` lies in [0, 2π) and ``longitude_max`` in [0, 2π].  A
stripe whose ``longitude_max < longitude_min`` straddles the 0/2π seam and
covers ``[longitude_min, 2π) ∪ [0, longitude_max)``.  ``[0, 2π]`` covers
the full circle.

Survey frames
-------------
The native system is described by a :class:`SurveyFrame`, i.e. the
equatorial coordinates of its north pole and of its longitude origin.
Frames are looked up by name in ``SURVEY_FRAMES``.
"""

import bisect
import logging
from dataclasses import dataclass, field
from typing import Iterable

import numpy as np
from numpy.typing import NDArray

from .exceptions import MalformedFootprintError
from .frames import pole_frame_matrix, _freeze
from .utils import TWO_PI, HALF_PI, wrap_to_two_pi

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════════════
#  Survey Frames
# ════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SurveyFrame:
    """Survey-native coordinate system.

    Parameters
    ----------
    name : str — registry key
    pole_ra, pole_dec : float — equatorial coordinates of the native pole [rad]
    origin_ra, origin_dec : float — equatorial coordinates of native
        longitude 0 on the native equator [rad]
    """
    name: str
    pole_ra: float
    pole_dec: float
    origin_ra: float = 0.0
    origin_dec: float = 0.0
    _matrix: NDArray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.is_identity:
            R = np.eye(3)
        else:
            R = pole_frame_matrix(self.pole_ra, self.pole_dec,
                                  self.origin_ra, self.origin_dec)
        object.__setattr__(self, "_matrix", _freeze(R))

    @property
    def is_identity(self) -> bool:
        """True when the native system is the equatorial system itself."""
        return (self.pole_dec == HALF_PI and self.origin_ra == 0.0
                and self.origin_dec == 0.0)

    @property
    def matrix(self) -> NDArray:
        """Equatorial→native DCM (read-only)."""
        return self._matrix


EQUATORIAL = SurveyFrame("equatorial", pole_ra=0.0, pole_dec=HALF_PI)

# SDSS survey coordinates: pole at (95°, 0°), origin at (185°, 32.5°)
SDSS = SurveyFrame("sdss",
                   pole_ra=np.deg2rad(95.0), pole_dec=np.deg2rad(0.0),
                   origin_ra=np.deg2rad(185.0), origin_dec=np.deg2rad(32.5))

SURVEY_FRAMES = {frame.name: frame for frame in (EQUATORIAL, SDSS)}


def get_survey_frame(name: str) -> SurveyFrame:
    """Look up a registered survey frame by (case-insensitive) name."""
    try:
        return SURVEY_FRAMES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown survey frame {name!r}. Valid: {set(SURVEY_FRAMES)}"
        ) from None


# ════════════════════════════════════════════════════════════════════════════
#  Stripe
# ════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Stripe:
    """One angular band of a footprint, in survey-native coordinates [rad]."""
    stripe_id: int
    inclination_min: float
    inclination_max: float
    longitude_min: float
    longitude_max: float

    def __post_init__(self):
        try:
            object.__setattr__(self, "stripe_id", int(self.stripe_id))
            for name in ("inclination_min", "inclination_max",
                         "longitude_min", "longitude_max"):
                object.__setattr__(self, name, float(getattr(self, name)))
        except (TypeError, ValueError) as exc:
            raise MalformedFootprintError(
                f"Stripe {self.stripe_id!r}: non-numeric field") from exc

        bounds = (self.inclination_min, self.inclination_max,
                  self.longitude_min, self.longitude_max)
        if not all(np.isfinite(bounds)):
            raise MalformedFootprintError(
                f"Stripe {self.stripe_id}: non-finite bound in {bounds}")
        if not (-HALF_PI <= self.inclination_min < self.inclination_max <= HALF_PI):
            raise MalformedFootprintError(
                f"Stripe {self.stripe_id}: inclination range "
                f"[{self.inclination_min}, {self.inclination_max}) is inverted "
                f"or outside [-pi/2, pi/2]")
        if not (0.0 <= self.longitude_min < TWO_PI):
            raise MalformedFootprintError(
                f"Stripe {self.stripe_id}: longitude_min {self.longitude_min} "
                f"outside [0, 2pi)")
        if not (0.0 <= self.longitude_max <= TWO_PI):
            raise MalformedFootprintError(
                f"Stripe {self.stripe_id}: longitude_max {self.longitude_max} "
                f"outside [0, 2pi]")
        if self.longitude_min == self.longitude_max:
            raise MalformedFootprintError(
                f"Stripe {self.stripe_id}: empty longitude range")

    @property
    def wraps(self) -> bool:
        """True if the longitude range crosses the 0/2π seam."""
        return self.longitude_max < self.longitude_min

    @property
    def longitude_extent(self) -> float:
        """Angular length of the longitude range [rad]."""
        if self.wraps:
            return self.longitude_max + TWO_PI - self.longitude_min
        return self.longitude_max - self.longitude_min

    def contains_longitude(self, longitude) -> bool:
        lon = wrap_to_two_pi(longitude)
        if self.wraps:
            return lon >= self.longitude_min or lon < self.longitude_max
        return self.longitude_min <= lon < self.longitude_max

    def contains(self, longitude: float, inclination: float) -> bool:
        """Half-open containment test in native coordinates."""
        if not (self.inclination_min <= inclination < self.inclination_max):
            return False
        return self.contains_longitude(longitude)

    def solid_angle(self) -> float:
        """Area of the stripe [sr]."""
        return self.longitude_extent * (np.sin(self.inclination_max)
                                        - np.sin(self.inclination_min))


def _as_stripe(record) -> Stripe:
    if isinstance(record, Stripe):
        return record
    try:
        fields = tuple(record)
    except TypeError:
        raise MalformedFootprintError(
            f"Stripe record must be a 5-tuple, got {record!r}") from None
    if len(fields) != 5:
        raise MalformedFootprintError(
            f"Stripe record must have 5 fields, got {len(fields)}: {record!r}")
    return Stripe(*fields)


# ════════════════════════════════════════════════════════════════════════════
#  Footprint
# ════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Footprint:
    """Read-only union of non-overlapping stripes for one data release.

    Stripes are stored sorted by ``inclination_min``.  Construction either
    succeeds completely or raises :class:`MalformedFootprintError`.
    """
    name: str
    stripes: tuple[Stripe, ...]
    frame: SurveyFrame = EQUATORIAL
    _lower: tuple[float, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        frame = self.frame
        if isinstance(frame, str):
            frame = get_survey_frame(frame)
        try:
            stripes = sorted((_as_stripe(s) for s in self.stripes),
                             key=lambda s: s.inclination_min)
            _check_consistency(stripes)
        except MalformedFootprintError as exc:
            logger.warning("Rejected footprint %r: %s", self.name, exc)
            raise

        object.__setattr__(self, "frame", frame)
        object.__setattr__(self, "stripes", tuple(stripes))
        object.__setattr__(self, "_lower",
                           tuple(s.inclination_min for s in stripes))
        logger.debug("Built footprint %r (%s frame): %d stripes",
                     self.name, frame.name, len(stripes))

    @classmethod
    def from_records(cls, records: Iterable, name: str = "",
                     frame: SurveyFrame | str = EQUATORIAL) -> "Footprint":
        """Build a footprint from parsed stripe records.

        Parameters
        ----------
        records : iterable of (stripe_id, inc_min, inc_max, lon_min, lon_max)
            tuples in radians, or :class:`Stripe` instances
        name : str — survey / data-release label
        frame : SurveyFrame or registered name — native coordinate system
        """
        return cls(name=name, stripes=tuple(records), frame=frame)

    def __len__(self) -> int:
        return len(self.stripes)

    def __iter__(self):
        return iter(self.stripes)

    @property
    def stripe_ids(self) -> tuple[int, ...]:
        return tuple(s.stripe_id for s in self.stripes)

    def stripe_at(self, inclination: float) -> Stripe | None:
        """The stripe whose inclination band contains ``inclination``, if any."""
        i = bisect.bisect_right(self._lower, inclination) - 1
        if i < 0:
            return None
        stripe = self.stripes[i]
        if inclination < stripe.inclination_max:
            return stripe
        return None

    def solid_angle(self) -> float:
        """Exact area of the footprint [sr]."""
        return float(sum(s.solid_angle() for s in self.stripes))


def _check_consistency(stripes: list[Stripe]) -> None:
    """Reject duplicate ids and overlapping inclination bands (sorted input)."""
    seen = set()
    for s in stripes:
        if s.stripe_id in seen:
            raise MalformedFootprintError(f"Duplicate stripe id {s.stripe_id}")
        seen.add(s.stripe_id)

    for prev, nxt in zip(stripes, stripes[1:]):
        if nxt.inclination_min < prev.inclination_max:
            raise MalformedFootprintError(
                f"Stripes {prev.stripe_id} and {nxt.stripe_id} overlap in "
                f"inclination: [{prev.inclination_min}, {prev.inclination_max}) "
                f"vs [{nxt.inclination_min}, {nxt.inclination_max})")
