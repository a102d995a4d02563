"""
example_footprint_analysis.py — Demonstration of the skyframes Library
=======================================================================

Builds a normal frame, checks the Galactic frame against its defining
constants, and samples a toy SDSS-style footprint for membership.
"""

import logging

import numpy as np

from skyframes import (
    # Frames
    normal_frame_matrix, equatorial_to_galactic_matrix,
    equatorial_to_galactic_position, solar_motion_equatorial,
    # Footprints
    Footprint, is_in_footprint, points_in_footprint, sky_fraction,
    # Projection
    aitoff, aitoff_range, aitoff_graticule,
    # Utils
    to_cartesian, GC_RA, GC_DEC, NGP_RA, NGP_DEC, SOLAR_MOTION_GALACTIC,
)


def main():
    logging.basicConfig(level=logging.DEBUG,
                        format="%(levelname)s %(name)s: %(message)s")

    print("=" * 70)
    print("  skyframes — Frames & Footprint Demo")
    print("=" * 70)

    # ── 1. Normal Frame ─────────────────────────────────────────────────
    print("\n1. NORMAL FRAME")
    print("-" * 40)

    ra, dec = np.deg2rad(238.0), np.deg2rad(13.0)
    R_n = normal_frame_matrix(ra, dec)
    for i, label in enumerate(["E (east)  ", "N (north) ", "R (LOS)   "]):
        print(f"    {label}: [{R_n[i,0]:+.6f}, {R_n[i,1]:+.6f}, {R_n[i,2]:+.6f}]")
    print(f"  LOS in normal frame: {R_n @ to_cartesian(1.0, ra, dec)}")
    err = np.max(np.abs(R_n @ R_n.T - np.eye(3)))
    print(f"  Orthogonality error: {err:.2e}")

    # ── 2. Galactic Frame ───────────────────────────────────────────────
    print("\n2. GALACTIC FRAME")
    print("-" * 40)

    R_g = equatorial_to_galactic_matrix()
    print(f"  det(R_gal) = {np.linalg.det(R_g):.12f}")
    l, b = equatorial_to_galactic_position(GC_RA, GC_DEC)
    print(f"  Galactic Centre → l = {np.rad2deg(l):.6f}°, b = {np.rad2deg(b):.6f}°")
    l, b = equatorial_to_galactic_position(NGP_RA, NGP_DEC)
    print(f"  North Galactic Pole → b = {np.rad2deg(b):.6f}°")
    v_sun = solar_motion_equatorial()
    print(f"  Solar motion (Gal): {SOLAR_MOTION_GALACTIC} km/s")
    print(f"  Solar motion (Eq):  [{v_sun[0]:+.3f}, {v_sun[1]:+.3f}, {v_sun[2]:+.3f}] km/s")

    # ── 3. Footprint Membership ─────────────────────────────────────────
    print("\n3. FOOTPRINT")
    print("-" * 40)

    # 2.5° wide stripes sharing edges; longitude range crosses the seam
    edges = np.deg2rad(np.arange(-31.25, 30.0, 2.5))
    records = []
    for k, (lo, hi) in enumerate(zip(edges[:-1], edges[1:])):
        records.append((k + 10, lo, hi, np.deg2rad(250.0), np.deg2rad(110.0)))
    fp = Footprint.from_records(records, name="toy-dr", frame="sdss")

    print(f"  Stripes: {len(fp)}")
    print(f"  Exact sky fraction:       {fp.solid_angle() / (4 * np.pi):.4f}")
    print(f"  Monte-Carlo sky fraction: {sky_fraction(fp, 200_000, rng=1):.4f}")

    test_ra, test_dec = np.deg2rad(185.0), np.deg2rad(32.5)
    print(f"  (185°, +32.5°) inside: {is_in_footprint(fp, test_ra, test_dec)}")

    # ── 4. Aitoff Projection ────────────────────────────────────────────
    print("\n4. AITOFF PROJECTION OF COVERED SAMPLES")
    print("-" * 40)

    ra_in, dec_in = points_in_footprint(fp, 5_000, rng=2)
    x, y = aitoff(ra_in, dec_in)
    if len(ra_in):
        print(f"  {len(ra_in)} points; x ∈ [{x.min():+.3f}, {x.max():+.3f}], "
              f"y ∈ [{y.min():+.3f}, {y.max():+.3f}]")
    (x_lo, x_hi), (y_lo, y_hi) = aitoff_range()
    print(f"  Plot extent: x ∈ [{x_lo:+.3f}, {x_hi:+.3f}], y ∈ [{y_lo:+.3f}, {y_hi:+.3f}]")
    meridians, parallels = aitoff_graticule(13, 5)
    print(f"  Graticule: {len(meridians)} meridians, {len(parallels)} parallels")

    print("\n" + "=" * 70)


if __name__ == "__main__":
    main()
