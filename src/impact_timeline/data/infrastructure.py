"""Built-in sample of critical infrastructure facilities.

Capacity units depend on type: MW for power, million m3/day for water,
million passengers/year for transport, Tbps for communications.
"""

from __future__ import annotations

from impact_timeline.models import GeoPoint, InfrastructureType, InfrastructurePoint

_ROWS: tuple[tuple[str, InfrastructureType, float, float, float], ...] = (
    ("Three Gorges Dam", "power", 30.82, 111.00, 22500.0),
    ("Itaipu Dam", "power", -25.41, -54.59, 14000.0),
    ("Kashiwazaki-Kariwa Nuclear Plant", "power", 37.43, 138.60, 7965.0),
    ("Bruce Nuclear Generating Station", "power", 44.33, -81.60, 6384.0),
    ("Grand Coulee Dam", "water", 47.96, -118.98, 7.4),
    ("Thames Water Ring Main", "water", 51.50, -0.13, 1.3),
    ("Hartsfield-Jackson Atlanta International Airport", "transport", 33.64, -84.43, 104.7),
    ("Dubai International Airport", "transport", 25.25, 55.36, 86.9),
    ("Port of Shanghai", "transport", 30.63, 122.07, 0.0),
    ("Frankfurt DE-CIX Exchange", "communications", 50.11, 8.68, 17.0),
    ("Marseille Cable Landing Station", "communications", 43.30, 5.37, 0.0),
    ("Ramstein Air Base", "military", 49.44, 7.60, 0.0),
    ("Naval Station Norfolk", "military", 36.95, -76.33, 0.0),
    ("Tokyo Metropolitan Government Building", "civilian", 35.69, 139.69, 0.0),
)


BUILTIN_INFRASTRUCTURE: tuple[InfrastructurePoint, ...] = tuple(
    InfrastructurePoint(name=name, type=kind, location=GeoPoint(lat, lon), capacity=capacity)
    for name, kind, lat, lon, capacity in _ROWS
)
