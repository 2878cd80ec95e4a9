"""
难度计算测试
验证空谱面、确定性、并行计算与 Mods 的影响
"""

import math

from osupp.difficulty.calculator import OsuDifficultyCalculator
from osupp.models.beatmap import Beatmap, HitObject, Position
from osupp.models.mods import APIMod

from conftest import make_beatmap
import pytest


def calculate(beatmap: Beatmap, mods: list[APIMod] | None = None, parallel: bool = False):
    return OsuDifficultyCalculator(beatmap, parallel_skills=parallel, skill_workers=4).calculate(mods)


def test_empty_and_single_object():
    """空谱面与单物件谱面的属性全为 0"""
    for hit_objects in ([], [HitObject(start_time=0, position=Position(x=256, y=192))]):
        attributes = calculate(Beatmap(hit_objects=hit_objects))
        assert attributes.star_rating == 0.0
        assert attributes.aim_difficulty == 0.0
        assert attributes.speed_difficulty == 0.0
        assert attributes.flashlight_difficulty == 0.0
        assert attributes.max_combo == 0
        assert attributes.version == OsuDifficultyCalculator.VERSION


def test_two_objects_have_structural_rating():
    """两个物件时即使技能为 0 星数也由结构性下限给出"""
    beatmap = Beatmap(
        hit_objects=[
            HitObject(start_time=0, position=Position(x=256, y=192)),
            HitObject(start_time=500, position=Position(x=256, y=192)),
        ]
    )
    attributes = calculate(beatmap)
    assert attributes.aim_difficulty == 0.0
    assert attributes.star_rating > 0.0
    assert attributes.hit_circle_count == 2


def test_deterministic(beatmap):
    """同一输入计算两次结果完全一致"""
    calculator = OsuDifficultyCalculator(beatmap, parallel_skills=False)
    first = calculator.calculate([])
    second = calculator.calculate([])
    third = calculate(beatmap)
    assert first == second == third
    assert first.model_dump_json() == third.model_dump_json()


def test_parallel_matches_serial(beatmap):
    """并行计算与串行计算结果一致"""
    for mods in ([], [{"acronym": "HD"}, {"acronym": "FL"}], [{"acronym": "RX"}]):
        assert calculate(beatmap, mods, parallel=True) == calculate(beatmap, mods, parallel=False)


def test_attributes(beatmap):
    """基础属性"""
    attributes = calculate(beatmap)
    assert attributes.star_rating > 0
    assert attributes.aim_difficulty > 0
    assert attributes.speed_difficulty > 0
    assert attributes.flashlight_difficulty == 0
    assert 0 < attributes.slider_factor <= 1
    assert attributes.speed_note_count > 0
    assert attributes.aim_difficult_strain_count > 0
    assert attributes.speed_difficult_strain_count > 0
    assert attributes.hit_circle_count + attributes.slider_count + attributes.spinner_count == len(beatmap.hit_objects)
    assert attributes.spinner_count == 1
    assert attributes.max_combo == beatmap.max_combo
    assert attributes.approach_rate == pytest.approx(9)
    assert attributes.overall_difficulty == pytest.approx(8)
    assert attributes.circle_size == 4


def test_rate_changes(beatmap):
    """DT 提高星数，HT 降低星数"""
    nomod = calculate(beatmap)
    dt = calculate(beatmap, [{"acronym": "DT"}])
    ht = calculate(beatmap, [{"acronym": "HT"}])
    assert dt.star_rating > nomod.star_rating > ht.star_rating
    assert dt.approach_rate > nomod.approach_rate
    assert dt.overall_difficulty > nomod.overall_difficulty

    custom = calculate(beatmap, [{"acronym": "DT", "settings": {"speed_change": 1.5}}])
    assert custom.star_rating == dt.star_rating


def test_difficulty_adjustments(beatmap):
    """HR 与 EZ 改变谱面设置"""
    nomod = calculate(beatmap)
    hr = calculate(beatmap, [{"acronym": "HR"}])
    ez = calculate(beatmap, [{"acronym": "EZ"}])
    assert hr.star_rating > nomod.star_rating > ez.star_rating
    assert hr.circle_size == pytest.approx(5.2)
    assert ez.circle_size == 2


def test_irrelevant_mods_are_ignored(beatmap):
    """不影响难度的 Mods 不改变结果"""
    assert calculate(beatmap, [{"acronym": "NF"}, {"acronym": "SD"}]).star_rating == calculate(beatmap).star_rating


def test_flashlight(beatmap):
    """只有开启 FL 时计算闪光灯难度"""
    fl = calculate(beatmap, [{"acronym": "FL"}])
    hdfl = calculate(beatmap, [{"acronym": "HD"}, {"acronym": "FL"}])
    assert fl.flashlight_difficulty > 0
    assert hdfl.flashlight_difficulty > fl.flashlight_difficulty
    assert fl.star_rating > calculate(beatmap).star_rating


def test_relax(beatmap):
    """Relax 只计算瞄准"""
    rx = calculate(beatmap, [{"acronym": "RX"}])
    assert rx.speed_difficulty == 0
    assert rx.aim_difficulty > 0
    assert rx.star_rating > 0

    # classic players are judged by the stable windows
    rx_cl = calculate(beatmap, [{"acronym": "RX"}, {"acronym": "CL"}])
    assert rx_cl.aim_difficulty > 0


def test_relax_with_out_of_range_difficulty_adjust(beatmap):
    """超出范围的 DA 设置按上限计算"""
    too_high = calculate(beatmap, [{"acronym": "RX"}, {"acronym": "DA", "settings": {"overall_difficulty": 15}}])
    at_limit = calculate(beatmap, [{"acronym": "RX"}, {"acronym": "DA", "settings": {"overall_difficulty": 10}}])
    assert too_high.overall_difficulty == pytest.approx(10)
    assert too_high.aim_difficulty == at_limit.aim_difficulty
    assert too_high.star_rating == at_limit.star_rating


def test_autopilot(beatmap):
    """Autopilot 只计算速度"""
    nomod = calculate(beatmap)
    ap = calculate(beatmap, [{"acronym": "AP"}])
    assert ap.aim_difficulty == 0
    assert 0 < ap.speed_difficulty < nomod.speed_difficulty * 0.5
    assert 0 < ap.star_rating < nomod.star_rating


def test_touch_device(beatmap):
    """TD 削弱瞄准"""
    nomod = calculate(beatmap)
    td = calculate(beatmap, [{"acronym": "TD"}])
    assert td.aim_difficulty == pytest.approx(math.pow(nomod.aim_difficulty, 0.8))
    assert td.speed_difficulty == nomod.speed_difficulty


def test_longer_maps_are_not_easier():
    """更长的谱面星数不低于较短的谱面"""
    short = calculate(make_beatmap(60))
    long = calculate(make_beatmap(240))
    assert long.star_rating >= short.star_rating
