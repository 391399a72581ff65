"""Built-in world dataset: country centroids, population and density.

Populations are 2023 estimates rounded to the nearest 100,000; densities are
people per km2 of land area.
"""

from __future__ import annotations

from impact_timeline.models import CountryData, GeoPoint

# (name, ISO alpha-2, centroid lat, centroid lon, population, density)
_ROWS: tuple[tuple[str, str, float, float, int, float], ...] = (
    ("United States", "US", 39.83, -98.58, 334_900_000, 36.6),
    ("Canada", "CA", 56.13, -106.35, 40_100_000, 4.4),
    ("Mexico", "MX", 23.63, -102.55, 128_500_000, 65.6),
    ("Brazil", "BR", -14.24, -51.93, 216_400_000, 25.9),
    ("Argentina", "AR", -38.42, -63.62, 46_700_000, 17.1),
    ("Colombia", "CO", 4.57, -74.30, 52_100_000, 46.9),
    ("Peru", "PE", -9.19, -75.02, 34_400_000, 26.9),
    ("Chile", "CL", -35.68, -71.54, 19_600_000, 26.3),
    ("United Kingdom", "GB", 55.38, -3.44, 68_400_000, 282.6),
    ("France", "FR", 46.23, 2.21, 64_800_000, 118.7),
    ("Germany", "DE", 51.17, 10.45, 84_500_000, 242.0),
    ("Spain", "ES", 40.46, -3.75, 48_400_000, 96.9),
    ("Italy", "IT", 41.87, 12.57, 58_900_000, 200.3),
    ("Poland", "PL", 51.92, 19.15, 36_700_000, 120.1),
    ("Ukraine", "UA", 48.38, 31.17, 37_000_000, 63.8),
    ("Russia", "RU", 61.52, 105.32, 144_400_000, 8.8),
    ("Turkey", "TR", 38.96, 35.24, 85_800_000, 111.5),
    ("Egypt", "EG", 26.82, 30.80, 112_700_000, 113.2),
    ("Nigeria", "NG", 9.08, 8.68, 223_800_000, 245.7),
    ("Ethiopia", "ET", 9.15, 40.49, 126_500_000, 126.5),
    ("Democratic Republic of the Congo", "CD", -4.04, 21.76, 102_300_000, 45.1),
    ("Kenya", "KE", -0.02, 37.91, 55_100_000, 96.8),
    ("South Africa", "ZA", -30.56, 22.94, 60_400_000, 49.8),
    ("Saudi Arabia", "SA", 23.89, 45.08, 36_900_000, 17.2),
    ("Iran", "IR", 32.43, 53.69, 89_200_000, 54.8),
    ("Pakistan", "PK", 30.38, 69.35, 240_500_000, 311.9),
    ("India", "IN", 20.59, 78.96, 1_428_600_000, 480.5),
    ("Bangladesh", "BD", 23.68, 90.36, 173_000_000, 1329.0),
    ("China", "CN", 35.86, 104.20, 1_425_700_000, 151.9),
    ("Mongolia", "MN", 46.86, 103.85, 3_400_000, 2.2),
    ("Japan", "JP", 36.20, 138.25, 123_300_000, 338.2),
    ("South Korea", "KR", 35.91, 127.77, 51_800_000, 531.1),
    ("Thailand", "TH", 15.87, 100.99, 71_800_000, 140.5),
    ("Vietnam", "VN", 14.06, 108.28, 98_900_000, 318.9),
    ("Philippines", "PH", 12.88, 121.77, 117_300_000, 393.5),
    ("Indonesia", "ID", -0.79, 113.92, 277_500_000, 153.2),
    ("Australia", "AU", -25.27, 133.78, 26_400_000, 3.4),
    ("New Zealand", "NZ", -40.90, 174.89, 5_200_000, 19.8),
)


BUILTIN_COUNTRIES: tuple[CountryData, ...] = tuple(
    CountryData(
        name=name,
        code=code,
        centroid=GeoPoint(lat, lon),
        population=population,
        population_density=density,
    )
    for name, code, lat, lon, population, density in _ROWS
)
