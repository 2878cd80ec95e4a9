from osupp.models.beatmap import Beatmap, BeatmapDifficulty, HitObject, HitObjectType, Position

import pytest


def make_beatmap(count: int = 120, interval: float = 180, **difficulty) -> Beatmap:
    """A map alternating jumps, short streams and sliders, deterministic for a given size."""
    hit_objects: list[HitObject] = []
    time = 1000.0
    for i in range(count):
        x = 64 + (i * 137) % 384
        y = 48 + (i * 89) % 288
        if i % 7 == 3:
            hit_objects.append(
                HitObject(
                    start_time=time,
                    position=Position(x=x, y=y),
                    type=HitObjectType.SLIDER,
                    path_length=120,
                    path_duration=interval,
                    end_position=Position(x=min(x + 120, 512), y=y),
                    repeat_count=i % 2,
                    tick_count=1,
                )
            )
            time += interval * 2
        elif i % 11 == 0:
            hit_objects.append(HitObject(start_time=time, position=Position(x=x, y=y)))
            time += interval / 2
        else:
            hit_objects.append(HitObject(start_time=time, position=Position(x=x, y=y)))
            time += interval
    hit_objects.append(
        HitObject(
            start_time=time,
            position=Position(x=256, y=192),
            type=HitObjectType.SPINNER,
            end_time=time + 1500,
        )
    )
    settings = {"circle_size": 4, "approach_rate": 9, "overall_difficulty": 8, "drain_rate": 5}
    settings.update(difficulty)
    return Beatmap(hit_objects=hit_objects, difficulty=BeatmapDifficulty(**settings))


@pytest.fixture
def beatmap() -> Beatmap:
    return make_beatmap()
