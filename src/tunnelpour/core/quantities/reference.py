"""
Reference data for the headrace tunnel alignment.

Design areas per rock class, the geological chainage map and the original
excavation survey. These tables are static inputs to the design index and
the profile resolver; replace them with project values by constructing
those components directly.
"""

from typing import Dict, Tuple

from tunnelpour.models.tunnel import (
    ChainageSegment,
    ExcavationPoint,
    RockClass,
    RockClassAreas,
)

# Per-meter design concrete areas (m²) by lining stage
ROCK_CLASS_DESIGN_AREAS: Dict[RockClass, RockClassAreas] = {
    RockClass.III: RockClassAreas.from_stages(invert=1.95, kicker=0.92, gantry=3.68),
    RockClass.IV: RockClassAreas.from_stages(invert=2.20, kicker=1.04, gantry=4.11),
    RockClass.VA: RockClassAreas.from_stages(invert=2.54, kicker=1.18, gantry=4.73),
    RockClass.VB: RockClassAreas.from_stages(invert=2.86, kicker=1.31, gantry=5.28),
}

CHAINAGE_MAP: Tuple[ChainageSegment, ...] = (
    ChainageSegment(0.0, 60.0, RockClass.VB),
    ChainageSegment(60.0, 180.0, RockClass.VA),
    ChainageSegment(180.0, 540.0, RockClass.IV),
    ChainageSegment(540.0, 1120.0, RockClass.III),
    ChainageSegment(1120.0, 1260.0, RockClass.IV),
    ChainageSegment(1260.0, 1340.0, RockClass.VA),
    ChainageSegment(1340.0, 1980.0, RockClass.III),
    ChainageSegment(1980.0, 2210.0, RockClass.IV),
    ChainageSegment(2210.0, 2480.0, RockClass.III),
    ChainageSegment(2480.0, 2560.0, RockClass.VA),
    ChainageSegment(2560.0, 2606.0, RockClass.VB),
)

# (chainage m, excavated area m², rock class at the section)
_EXCAVATION_TABLE = (
    (0.0, 40.6, RockClass.VB),
    (50.0, 40.1, RockClass.VB),
    (100.0, 39.2, RockClass.VA),
    (150.0, 38.9, RockClass.VA),
    (200.0, 37.8, RockClass.IV),
    (250.0, 37.5, RockClass.IV),
    (300.0, 38.1, RockClass.IV),
    (350.0, 37.6, RockClass.IV),
    (400.0, 37.9, RockClass.IV),
    (450.0, 37.3, RockClass.IV),
    (500.0, 37.7, RockClass.IV),
    (550.0, 36.9, RockClass.III),
    (600.0, 36.6, RockClass.III),
    (650.0, 37.0, RockClass.III),
    (700.0, 36.8, RockClass.III),
    (750.0, 36.4, RockClass.III),
    (800.0, 36.7, RockClass.III),
    (850.0, 37.1, RockClass.III),
    (900.0, 36.5, RockClass.III),
    (950.0, 36.9, RockClass.III),
    (1000.0, 36.3, RockClass.III),
    (1050.0, 36.8, RockClass.III),
    (1100.0, 36.6, RockClass.III),
    (1150.0, 37.9, RockClass.IV),
    (1200.0, 38.2, RockClass.IV),
    (1250.0, 37.7, RockClass.IV),
    (1300.0, 39.4, RockClass.VA),
    (1350.0, 37.0, RockClass.III),
    (1400.0, 36.7, RockClass.III),
    (1450.0, 36.4, RockClass.III),
    (1500.0, 36.9, RockClass.III),
    (1550.0, 36.5, RockClass.III),
    (1600.0, 36.8, RockClass.III),
    (1650.0, 36.2, RockClass.III),
    (1700.0, 36.6, RockClass.III),
    (1750.0, 37.0, RockClass.III),
    (1800.0, 36.7, RockClass.III),
    (1850.0, 36.4, RockClass.III),
    (1900.0, 36.9, RockClass.III),
    (1950.0, 36.6, RockClass.III),
    (2000.0, 37.8, RockClass.IV),
    (2050.0, 37.5, RockClass.IV),
    (2100.0, 38.0, RockClass.IV),
    (2150.0, 37.6, RockClass.IV),
    (2200.0, 37.9, RockClass.IV),
    (2250.0, 36.8, RockClass.III),
    (2300.0, 36.5, RockClass.III),
    (2350.0, 36.9, RockClass.III),
    (2400.0, 36.4, RockClass.III),
    (2450.0, 36.7, RockClass.III),
    (2500.0, 39.1, RockClass.VA),
    (2550.0, 39.5, RockClass.VA),
    (2600.0, 40.4, RockClass.VB),
    (2606.0, 40.8, RockClass.VB),
)

EXCAVATION_PROFILE: Tuple[ExcavationPoint, ...] = tuple(
    ExcavationPoint(chainage=ch, area=area, rock_class=rc) for ch, area, rc in _EXCAVATION_TABLE
)
