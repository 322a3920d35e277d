"""
Personality profiles for computer seats.

A profile is a bundle of traits in [0, 1] that tunes the decision engine.
Each seat draws one from a named archetype and gets its own jitter, so two
seats of the same archetype still play differently.
"""
from dataclasses import asdict, dataclass
from random import Random

TRAIT_MIN = 0.05
TRAIT_MAX = 0.98

ODDS_DRIVEN = "odds_driven"
BLUFFER = "bluffer"
WELL_ROUNDED = "well_rounded"
TIGHT_AGGRESSIVE = "tight_aggressive"
LOOSE_AGGRESSIVE = "loose_aggressive"

# Baseline traits per archetype
ARCHETYPES = {
    ODDS_DRIVEN: {
        "aggression": 0.45, "discipline": 0.75, "bluff_frequency": 0.15,
        "bluff_selectivity": 0.75, "trap_frequency": 0.15,
        "thin_value_threshold": 0.55, "value_threshold": 0.66,
        "pressure_tolerance": 0.55, "simulation_scale": 0.85,
    },
    BLUFFER: {
        "aggression": 0.70, "discipline": 0.35, "bluff_frequency": 0.60,
        "bluff_selectivity": 0.35, "trap_frequency": 0.20,
        "thin_value_threshold": 0.50, "value_threshold": 0.62,
        "pressure_tolerance": 0.65, "simulation_scale": 0.45,
    },
    WELL_ROUNDED: {
        "aggression": 0.60, "discipline": 0.62, "bluff_frequency": 0.35,
        "bluff_selectivity": 0.60, "trap_frequency": 0.25,
        "thin_value_threshold": 0.53, "value_threshold": 0.64,
        "pressure_tolerance": 0.60, "simulation_scale": 0.70,
    },
    TIGHT_AGGRESSIVE: {
        "aggression": 0.68, "discipline": 0.80, "bluff_frequency": 0.22,
        "bluff_selectivity": 0.70, "trap_frequency": 0.18,
        "thin_value_threshold": 0.58, "value_threshold": 0.68,
        "pressure_tolerance": 0.50, "simulation_scale": 0.65,
    },
    LOOSE_AGGRESSIVE: {
        "aggression": 0.80, "discipline": 0.40, "bluff_frequency": 0.48,
        "bluff_selectivity": 0.40, "trap_frequency": 0.12,
        "thin_value_threshold": 0.48, "value_threshold": 0.60,
        "pressure_tolerance": 0.70, "simulation_scale": 0.50,
    },
}

# Jitter half-width per trait
JITTER = {
    "aggression": 0.12,
    "discipline": 0.12,
    "bluff_frequency": 0.10,
    "bluff_selectivity": 0.12,
    "trap_frequency": 0.08,
    "thin_value_threshold": 0.04,
    "value_threshold": 0.04,
    "pressure_tolerance": 0.12,
    "simulation_scale": 0.15,
}


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class PersonalityProfile:
    archetype: str
    aggression: float
    discipline: float
    bluff_frequency: float
    bluff_selectivity: float
    trap_frequency: float
    thin_value_threshold: float
    value_threshold: float
    pressure_tolerance: float
    simulation_scale: float

    def to_dict(self) -> dict:
        return asdict(self)


def create_profile(rng: Random = None, archetype: str = None) -> PersonalityProfile:
    """Draws a profile, picking the archetype at random when none is given."""
    rng = rng if rng is not None else Random()
    if archetype is None:
        archetype = rng.choice(sorted(ARCHETYPES))
    if archetype not in ARCHETYPES:
        raise ValueError(f"Unknown archetype {archetype!r}")

    traits = {}
    for trait, base in ARCHETYPES[archetype].items():
        width = JITTER[trait]
        traits[trait] = clamp(base + rng.uniform(-width, width), TRAIT_MIN, TRAIT_MAX)
    return PersonalityProfile(archetype=archetype, **traits)
