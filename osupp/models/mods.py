import hashlib
import json
from typing import NotRequired, TypeVar

from typing_extensions import TypedDict


T = TypeVar("T", bound=bool | float | str | int)


class APIMod(TypedDict):
    acronym: str
    settings: NotRequired[dict[str, bool | float | str | int]]


# https://github.com/ppy/osu-api/wiki#mods
API_MOD_TO_LEGACY: dict[str, int] = {
    "NF": 1 << 0,  # No Fail
    "EZ": 1 << 1,  # Easy
    "TD": 1 << 2,  # Touch Device
    "HD": 1 << 3,  # Hidden
    "HR": 1 << 4,  # Hard Rock
    "SD": 1 << 5,  # Sudden Death
    "DT": 1 << 6,  # Double Time
    "RX": 1 << 7,  # Relax
    "HT": 1 << 8,  # Half Time
    "NC": 1 << 9,  # Nightcore
    "FL": 1 << 10,  # Flashlight
    "AT": 1 << 11,  # Autoplay
    "SO": 1 << 12,  # Spun Out
    "AP": 1 << 13,  # Auto Pilot
    "PF": 1 << 14,  # Perfect
    "SV2": 1 << 29,  # ScoreV2
    "MR": 1 << 30,  # Mirror
}
LEGACY_MOD_TO_API_MOD = {}
for k, v in API_MOD_TO_LEGACY.items():
    LEGACY_MOD_TO_API_MOD[v] = APIMod(acronym=k, settings={})
API_MOD_TO_LEGACY["NC"] |= API_MOD_TO_LEGACY["DT"]
API_MOD_TO_LEGACY["PF"] |= API_MOD_TO_LEGACY["SD"]

# Mods whose presence or settings change the difficulty calculation result.
# https://github.com/ppy/osu/blob/master/osu.Game.Rulesets.Osu/Difficulty/OsuDifficultyCalculator.cs
DIFFICULTY_ADJUSTMENT_MODS = frozenset({"TD", "DT", "NC", "HT", "DC", "EZ", "HR", "FL", "HD", "RX", "AP", "DA", "CL"})

DEFAULT_SPEED_CHANGE: dict[str, float] = {
    "DT": 1.5,
    "NC": 1.5,
    "HT": 0.75,
    "DC": 0.75,
}


def int_to_mods(mods: int) -> list[APIMod]:
    mod_list = []
    for mod in range(31):
        if mods & (1 << mod) and (1 << mod) in LEGACY_MOD_TO_API_MOD:
            mod_list.append(LEGACY_MOD_TO_API_MOD[(1 << mod)])
    if mods & (1 << 14) and mods & (1 << 5):
        mod_list.remove(LEGACY_MOD_TO_API_MOD[(1 << 5)])
    if mods & (1 << 9) and mods & (1 << 6):
        mod_list.remove(LEGACY_MOD_TO_API_MOD[(1 << 6)])
    return mod_list


def mods_to_int(mods: list[APIMod]) -> int:
    sum_ = 0
    for mod in mods:
        sum_ |= API_MOD_TO_LEGACY.get(mod["acronym"], 0)
    return sum_


def has_mod(mods: list[APIMod], acronym: str) -> bool:
    return any(mod["acronym"] == acronym for mod in mods)


def get_mod_setting(mods: list[APIMod], acronym: str, key: str, default: T) -> T:
    for mod in mods:
        if mod["acronym"] == acronym:
            return mod.get("settings", {}).get(key, default)  # pyright: ignore[reportReturnType]
    return default


def get_clock_rate(mods: list[APIMod]) -> float:
    """The playback rate applied by rate-changing mods (1.0 if none)."""
    for mod in mods:
        acronym = mod["acronym"]
        if acronym in DEFAULT_SPEED_CHANGE:
            return float(mod.get("settings", {}).get("speed_change", DEFAULT_SPEED_CHANGE[acronym]))
    return 1.0


def difficulty_mods(mods: list[APIMod]) -> list[APIMod]:
    """Only the mods which affect difficulty, sorted so that equal sets compare equal."""
    filtered = [mod for mod in mods if mod["acronym"] in DIFFICULTY_ADJUSTMENT_MODS]
    return sorted(filtered, key=lambda mod: mod["acronym"])


def mods_hash(mods: list[APIMod]) -> str:
    canonical = [
        {"acronym": mod["acronym"], "settings": dict(sorted(mod.get("settings", {}).items()))}
        for mod in difficulty_mods(mods)
    ]
    return hashlib.md5(json.dumps(canonical, separators=(",", ":")).encode()).hexdigest()


def parse_mods(mods: list[APIMod] | list[str] | int | None) -> list[APIMod]:
    """Accept the several shapes mods arrive in and normalise them to ``APIMod`` dicts."""
    if mods is None:
        return []
    if isinstance(mods, int):
        return int_to_mods(mods)
    result: list[APIMod] = []
    for mod in mods:
        if isinstance(mod, str):
            result.append(APIMod(acronym=mod.upper(), settings={}))
        else:
            result.append(APIMod(acronym=mod["acronym"].upper(), settings=dict(mod.get("settings", {}))))
    return result
