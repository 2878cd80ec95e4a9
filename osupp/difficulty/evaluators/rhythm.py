"""Rhythm complexity: how irregular the recent timing between objects has been."""

from __future__ import annotations

import math

from osupp.difficulty.preprocessing import MIN_DELTA_TIME, OsuDifficultyHitObject
from osupp.difficulty.utils import almost_equals, clamp

HISTORY_TIME_MAX = 5 * 1000  # 5 seconds
HISTORY_OBJECTS_MAX = 32
RHYTHM_OVERALL_MULTIPLIER = 0.95
RHYTHM_RATIO_MULTIPLIER = 12.0

_UNSET_DELTA = 2**31 - 1


class RhythmIsland:
    """A run of consecutive deltas that are equal within ``delta_difference_eps``."""

    __slots__ = ("delta", "delta_count", "delta_difference_eps")

    def __init__(self, delta_difference_eps: float, delta: int | None = None) -> None:
        self.delta_difference_eps = delta_difference_eps
        if delta is None:
            self.delta = _UNSET_DELTA
            self.delta_count = 0
        else:
            self.delta = max(MIN_DELTA_TIME, delta)
            self.delta_count = 1

    def add_delta(self, delta: int) -> None:
        if self.delta == _UNSET_DELTA:
            self.delta = max(MIN_DELTA_TIME, delta)
        self.delta_count += 1

    def is_similar_polarity(self, other: RhythmIsland) -> bool:
        return self.delta_count % 2 == other.delta_count % 2

    def is_default(self) -> bool:
        return (
            almost_equals(self.delta_difference_eps, 0.0)
            and self.delta == _UNSET_DELTA
            and self.delta_count == 0
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RhythmIsland):
            return NotImplemented
        return abs(self.delta - other.delta) < self.delta_difference_eps and self.delta_count == other.delta_count

    # tolerance based equality cannot be hashed consistently
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        delta = "unset" if self.delta == _UNSET_DELTA else self.delta
        return f"<RhythmIsland delta={delta} count={self.delta_count}>"


class _IslandCount:
    __slots__ = ("count", "island")

    def __init__(self, island: RhythmIsland) -> None:
        self.island = island
        self.count = 1


def _find_island(island_counts: list[_IslandCount], island: RhythmIsland) -> _IslandCount | None:
    for entry in island_counts:
        if entry.island == island:
            return entry
    return None


def evaluate_difficulty_of(current: OsuDifficultyHitObject, hit_window: float) -> float:
    """Rhythm multiplier for ``current``, in the range [1, ∞).

    ``hit_window`` is the half width of the great window, already divided by the clock rate.
    """
    if current.base_object.is_spinner:
        return 0.0

    rhythm_complexity_sum = 0.0

    delta_difference_eps = hit_window * 0.3

    island = RhythmIsland(delta_difference_eps)
    previous_island = RhythmIsland(delta_difference_eps)

    island_counts: list[_IslandCount] = []

    # ratio of the start of the current island, used to buff tighter rhythms
    start_ratio = 0.0

    first_delta_switch = False

    historical_note_count = min(current.index, HISTORY_OBJECTS_MAX)

    rhythm_start = 0
    while (
        (candidate := current.previous(rhythm_start)) is not None
        and rhythm_start + 2 < historical_note_count
        and current.start_time - candidate.start_time < HISTORY_TIME_MAX
    ):
        rhythm_start += 1

    prev_obj = current.previous(rhythm_start)
    last_obj = current.previous(rhythm_start + 1)

    if prev_obj is None or last_obj is None:
        return math.sqrt(4.0 + rhythm_complexity_sum * RHYTHM_OVERALL_MULTIPLIER) / 2.0

    # from the furthest object in the window up to the one right before the current
    for i in range(rhythm_start, 0, -1):
        curr_obj = current.previous(i - 1)
        if curr_obj is None:
            break

        time_decay = (HISTORY_TIME_MAX - (current.start_time - curr_obj.start_time)) / HISTORY_TIME_MAX
        note_decay = (historical_note_count - i) / historical_note_count

        # limited either by time or by object count
        curr_historical_decay = min(note_decay, time_decay)

        curr_delta = curr_obj.strain_time
        prev_delta = prev_obj.strain_time
        last_delta = last_obj.strain_time

        # deltas that are multiples of each other (100 and 200) get a smaller bonus
        delta_difference_ratio = min(prev_delta, curr_delta) / max(prev_delta, curr_delta)
        curr_ratio = 1.0 + RHYTHM_RATIO_MULTIPLIER * math.pow(math.sin(math.pi / delta_difference_ratio), 2)

        # reduce the bonus when the delta difference is too big
        fraction = max(prev_delta / curr_delta, curr_delta / prev_delta)
        fraction_multiplier = clamp(2.0 - fraction / 8.0, 0.0, 1.0)

        window_penalty = min(max(abs(prev_delta - curr_delta) - delta_difference_eps, 0.0) / delta_difference_eps, 1.0)

        effective_ratio = window_penalty * curr_ratio * fraction_multiplier

        if first_delta_switch:
            if abs(prev_delta - curr_delta) < delta_difference_eps:
                # island is still progressing
                island.add_delta(int(curr_delta))
            else:
                # bpm change into a slider, easy acc window
                if curr_obj.base_object.is_slider:
                    effective_ratio *= 0.125

                # bpm change out of a slider, easier than circle to circle
                if prev_obj.base_object.is_slider:
                    effective_ratio *= 0.3

                # repeated island polarity (2 -> 4, 3 -> 5)
                if island.is_similar_polarity(previous_island):
                    effective_ratio *= 0.5

                # previous increase happened a note ago, 1/1 -> 1/2 -> 1/4
                if last_delta > prev_delta + delta_difference_eps and prev_delta > curr_delta + delta_difference_eps:
                    effective_ratio *= 0.125

                # repeated island size (triplet -> triplet)
                if previous_island.delta_count == island.delta_count:
                    effective_ratio *= 0.5

                existing = _find_island(island_counts, island)

                if existing is not None and not island.is_default():
                    # only count islands that follow one another
                    if previous_island == island:
                        existing.count += 1

                    power = 1 / (1 + math.exp(-(island.delta - 58.33) / 0.24))
                    effective_ratio *= min(3.0 / existing.count, math.pow(1.0 / existing.count, power))
                elif not island.is_default():
                    island_counts.append(_IslandCount(island))

                # scale down the difficulty if the object is doubletappable
                doubletapness = prev_obj.get_doubletapness(curr_obj)
                effective_ratio *= 1.0 - doubletapness * 0.75

                rhythm_complexity_sum += math.sqrt(effective_ratio * start_ratio) * curr_historical_decay

                start_ratio = effective_ratio

                previous_island = island

                # slowing down, stop counting
                if prev_delta + delta_difference_eps < curr_delta:
                    first_delta_switch = False

                island = RhythmIsland(delta_difference_eps, int(curr_delta))

        elif prev_delta > curr_delta + delta_difference_eps:
            # speeding up, count the island until the speed changes again
            first_delta_switch = True

            if curr_obj.base_object.is_slider:
                effective_ratio *= 0.6

            if prev_obj.base_object.is_slider:
                effective_ratio *= 0.6

            start_ratio = effective_ratio

            island = RhythmIsland(delta_difference_eps, int(curr_delta))

        last_obj = prev_obj
        prev_obj = curr_obj

    return math.sqrt(4.0 + rhythm_complexity_sum * RHYTHM_OVERALL_MULTIPLIER) / 2.0
