"""Derived records computed from upstream payloads."""

from typing import Any

import numpy as np


def _first_miss_distance_km(neo: dict[str, Any]) -> float | None:
    approaches = neo.get("close_approach_data") or []
    if not approaches:
        return None
    kilometers = (approaches[0].get("miss_distance") or {}).get("kilometers")
    if kilometers in (None, ""):
        return None
    return float(kilometers)


def summarize_neos(browse_payload: dict[str, Any]) -> dict[str, Any]:
    """Compute summary statistics over a NEO browse page.

    Average diameter uses the midpoint of each object's kilometre estimate.
    Miss distance uses the first recorded close approach and only counts
    objects that have one; objects without approaches still contribute to the
    diameter figures.

    Args:
        browse_payload: Body of ``/neo/rest/v1/neo/browse``

    Returns:
        Statistics record (diameters rounded to 3 places, distance to an int)
    """
    neos = browse_payload.get("near_earth_objects") or []
    total_count = (browse_payload.get("page") or {}).get("total_elements", len(neos))

    minimums = np.array(
        [neo["estimated_diameter"]["kilometers"]["estimated_diameter_min"] for neo in neos],
        dtype=float,
    )
    maximums = np.array(
        [neo["estimated_diameter"]["kilometers"]["estimated_diameter_max"] for neo in neos],
        dtype=float,
    )
    distances = np.array(
        [d for d in (_first_miss_distance_km(neo) for neo in neos) if d is not None],
        dtype=float,
    )

    if neos:
        average_diameter = float(np.mean((minimums + maximums) / 2))
        largest_diameter = float(np.max(maximums))
        smallest_diameter = float(np.min(minimums))
    else:
        average_diameter = largest_diameter = smallest_diameter = 0.0

    average_miss_distance = float(np.mean(distances)) if distances.size else 0.0

    return {
        "total_count": total_count,
        "sample_size": len(neos),
        "potentially_hazardous_count": sum(
            1 for neo in neos if neo.get("is_potentially_hazardous_asteroid")
        ),
        "average_diameter_km": round(average_diameter, 3),
        "largest_diameter_km": round(largest_diameter, 3),
        "smallest_diameter_km": round(smallest_diameter, 3),
        # Halves round up, not to even
        "average_miss_distance_km": int(np.floor(average_miss_distance + 0.5)),
    }


def summarize_epic_day(date: str, image_type: str, images: list[dict[str, Any]]) -> dict[str, Any]:
    """Describe the EPIC captures of one day.

    Args:
        date: Requested day (YYYY-MM-DD)
        image_type: natural or enhanced
        images: Image records for that day (must not be empty)

    Returns:
        Metadata record with count, capture window and per-image positions
    """
    capture_times = [image["date"] for image in images if image.get("date")]
    return {
        "date": date,
        "type": image_type,
        "image_count": len(images),
        "first_image_time": min(capture_times) if capture_times else None,
        "last_image_time": max(capture_times) if capture_times else None,
        "coordinates": [
            {
                "image": image.get("image"),
                "centroid_coordinates": image.get("centroid_coordinates"),
                "dscovr_j2000_position": image.get("dscovr_j2000_position"),
            }
            for image in images
        ],
    }
