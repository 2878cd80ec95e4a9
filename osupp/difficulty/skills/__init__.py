from ._base import DIFFICULTY_MULTIPLIER, OsuStrainSkill, StrainSkill
from .aim import Aim
from .flashlight import Flashlight
from .relax import Relax
from .speed import Speed

__all__ = [
    "DIFFICULTY_MULTIPLIER",
    "Aim",
    "Flashlight",
    "OsuStrainSkill",
    "Relax",
    "Speed",
    "StrainSkill",
]
