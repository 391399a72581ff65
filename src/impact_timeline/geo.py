"""Geographic utilities: great-circle distance, felt radius, reverse geocoding."""

from __future__ import annotations

import math

import reverse_geocoder as rg

EARTH_RADIUS_KM = 6371.0


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the great-circle distance in km between two points on Earth."""
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Rounding can push a past 1.0 for near-antipodal points.
    a = min(1.0, max(0.0, a))
    return EARTH_RADIUS_KM * 2 * math.asin(math.sqrt(a))


def disc_area_km2(radius_km: float) -> float:
    """Area (km2) of a disc of the given radius, flat-Earth approximation."""
    return math.pi * radius_km * radius_km


def destination_point(
    latitude: float, longitude: float, bearing_deg: float, distance_km: float,
) -> tuple[float, float]:
    """Point reached travelling *distance_km* from a start along a great circle."""
    lat1 = math.radians(latitude)
    lon1 = math.radians(longitude)
    bearing = math.radians(bearing_deg)
    delta = distance_km / EARTH_RADIUS_KM

    sin_lat2 = math.sin(lat1) * math.cos(delta) + math.cos(lat1) * math.sin(delta) * math.cos(bearing)
    lat2 = math.asin(min(1.0, max(-1.0, sin_lat2)))
    lon2 = lon1 + math.atan2(
        math.sin(bearing) * math.sin(delta) * math.cos(lat1),
        math.cos(delta) - math.sin(lat1) * math.sin(lat2),
    )
    # Normalise longitude to [-180, 180).
    lon2 = (lon2 + 3 * math.pi) % (2 * math.pi) - math.pi
    return math.degrees(lat2), math.degrees(lon2)


def circle_ring(
    latitude: float, longitude: float, radius_km: float, segments: int = 64,
) -> list[list[float]]:
    """Closed GeoJSON ring ([lon, lat] pairs) approximating a circle on the sphere."""
    ring = []
    for i in range(segments):
        lat, lon = destination_point(latitude, longitude, 360.0 * i / segments, radius_km)
        ring.append([round(lon, 5), round(lat, 5)])
    ring.append(ring[0])
    return ring


_MIN_FELT_RADIUS_KM = 5.0


def _intensity(magnitude: float, distance_km: float) -> float:
    """Atkinson & Wald (2007) intensity prediction for a surface source."""
    return 3.70 + 1.17 * magnitude - 1.26 * math.log(distance_km) - 0.0012 * distance_km


def felt_radius_km(magnitude: float, intensity: float = 5.0) -> float:
    """Surface distance (km) at which shaking falls to the given MMI.

    Inverts the intensity prediction equation with Newton's method; the
    default MMI V is where unreinforced structures start to crack. Never
    returns less than 5 km.
    """
    if _intensity(magnitude, _MIN_FELT_RADIUS_KM) <= intensity:
        return _MIN_FELT_RADIUS_KM

    r = 100.0
    for _ in range(50):
        residual = _intensity(magnitude, r) - intensity
        slope = -1.26 / r - 0.0012
        step = residual / slope
        r_next = r - step if r - step > 0 else r / 2
        if abs(r_next - r) < 1e-3:
            r = r_next
            break
        r = r_next

    return max(round(r, 1), _MIN_FELT_RADIUS_KM)


def reverse_geocode(latitude: float, longitude: float) -> str:
    """Return the ISO alpha-2 code of the nearest populated place, or ""."""
    results = rg.search([(latitude, longitude)])
    if not results:
        return ""
    return str(results[0].get("cc", ""))
