"""Built-in asteroid catalog: notable near-Earth objects and historical impactors."""

from __future__ import annotations

from impact_timeline.models import AsteroidSpec

BUILTIN_ASTEROIDS: tuple[AsteroidSpec, ...] = (
    AsteroidSpec(
        id="2023_dw",
        name="2023 DW",
        diameter_m=50.0,
        velocity_km_s=25.0,
        composition="stony",
        density_kg_m3=3000.0,
        threat_level="low",
        description="Small near-Earth asteroid briefly rated 1 on the Torino scale.",
    ),
    AsteroidSpec(
        id="apophis",
        name="99942 Apophis",
        diameter_m=370.0,
        velocity_km_s=30.7,
        composition="stony",
        density_kg_m3=3200.0,
        threat_level="medium",
        description="Passes within geostationary orbit distance on 13 April 2029.",
    ),
    AsteroidSpec(
        id="bennu",
        name="101955 Bennu",
        diameter_m=490.0,
        velocity_km_s=28.0,
        composition="carbonaceous",
        density_kg_m3=1190.0,
        threat_level="medium",
        description="Rubble-pile asteroid sampled by OSIRIS-REx.",
    ),
    AsteroidSpec(
        id="1950_da",
        name="29075 (1950) DA",
        diameter_m=1300.0,
        velocity_km_s=15.0,
        composition="stony",
        density_kg_m3=3000.0,
        threat_level="high",
        description="Kilometre-class asteroid with a small impact probability in 2880.",
    ),
    AsteroidSpec(
        id="tunguska",
        name="Tunguska impactor",
        diameter_m=60.0,
        velocity_km_s=27.0,
        composition="stony",
        density_kg_m3=3000.0,
        threat_level="historical",
        description="Airburst over Siberia in 1908 that flattened 2,000 km2 of forest.",
    ),
    AsteroidSpec(
        id="chelyabinsk",
        name="Chelyabinsk meteor",
        diameter_m=20.0,
        velocity_km_s=19.0,
        composition="stony",
        density_kg_m3=3300.0,
        threat_level="historical",
        description="Superbolide over the southern Urals in 2013; about 1,500 injured.",
    ),
    AsteroidSpec(
        id="chicxulub",
        name="Chicxulub impactor",
        diameter_m=10000.0,
        velocity_km_s=20.0,
        composition="carbonaceous",
        density_kg_m3=2000.0,
        threat_level="historical",
        description="End-Cretaceous impactor linked to the extinction of the dinosaurs.",
    ),
    AsteroidSpec(
        id="vredefort",
        name="Vredefort impactor",
        diameter_m=15000.0,
        velocity_km_s=25.0,
        composition="stony",
        density_kg_m3=3000.0,
        threat_level="historical",
        description="Formed the largest verified impact structure on Earth, 2 billion years ago.",
    ),
)

