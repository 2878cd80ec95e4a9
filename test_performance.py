"""
表现分计算测试
"""

import math

from osupp.difficulty.calculator import PERFORMANCE_BASE_MULTIPLIER, OsuDifficultyCalculator
from osupp.difficulty.performance import OsuPerformanceCalculator
from osupp.models.performance import OsuDifficultyAttributes
from osupp.models.score import HitResult, ScoreInfo

import pytest


@pytest.fixture
def attributes(beatmap) -> OsuDifficultyAttributes:
    return OsuDifficultyCalculator(beatmap, parallel_skills=False).calculate([])


def score(attributes: OsuDifficultyAttributes, accuracy: float = 1.0, misses: int = 0, mods=None) -> ScoreInfo:
    total = attributes.object_count
    return ScoreInfo(
        accuracy=accuracy,
        max_combo=attributes.max_combo,
        mods=mods or [],
        statistics={HitResult.GREAT: total - misses, HitResult.MISS: misses},
    )


def pp_of(attributes: OsuDifficultyAttributes, play: ScoreInfo):
    return OsuPerformanceCalculator(attributes).calculate(play)


def test_total_is_power_mean(attributes):
    """总 pp 为各分项的幂平均乘以基础倍率"""
    result = pp_of(attributes, score(attributes))
    assert result.pp > 0
    assert result.aim > 0
    assert result.speed > 0
    assert result.flashlight == 0
    expected = math.pow(math.pow(result.aim, 1.1) + math.pow(result.speed, 1.1), 1 / 1.1) * PERFORMANCE_BASE_MULTIPLIER
    assert result.pp == pytest.approx(expected)


def test_misses_and_accuracy(attributes):
    """失误与准确率降低 pp"""
    ss = pp_of(attributes, score(attributes)).pp
    assert pp_of(attributes, score(attributes, misses=3)).pp < ss
    assert pp_of(attributes, score(attributes, accuracy=0.95)).pp < ss
    assert pp_of(attributes, score(attributes, misses=3)).effective_miss_count == 3


def test_no_fail(attributes):
    """NF 乘以 0.9"""
    ss = pp_of(attributes, score(attributes)).pp
    nf = pp_of(attributes, score(attributes, mods=["NF"])).pp
    assert nf == pytest.approx(ss * 0.9)


def test_spun_out(attributes):
    """SO 按转盘比例降低 pp"""
    ss = pp_of(attributes, score(attributes)).pp
    so = pp_of(attributes, score(attributes, mods=["SO"])).pp
    ratio = attributes.spinner_count / attributes.object_count
    assert so == pytest.approx(ss * (1 - math.pow(ratio, 0.85)))


def test_relax_and_autopilot_components(beatmap):
    """RX 不计速度，AP 不计瞄准"""
    rx_attributes = OsuDifficultyCalculator(beatmap).calculate([{"acronym": "RX"}])
    rx = pp_of(rx_attributes, score(rx_attributes, mods=["RX"]))
    assert rx.speed == 0
    assert rx.aim > 0

    ap_attributes = OsuDifficultyCalculator(beatmap).calculate([{"acronym": "AP"}])
    ap = pp_of(ap_attributes, score(ap_attributes, mods=["AP"]))
    assert ap.aim == 0
    assert ap.speed > 0


def test_flashlight_component(beatmap):
    """闪光灯分项只在开启 FL 时计入"""
    fl_attributes = OsuDifficultyCalculator(beatmap).calculate([{"acronym": "FL"}])
    with_fl = pp_of(fl_attributes, score(fl_attributes, mods=["FL"]))
    without_fl = pp_of(fl_attributes, score(fl_attributes))
    assert with_fl.flashlight > 0
    assert without_fl.flashlight == 0
    assert with_fl.pp > without_fl.pp


def test_empty_statistics_use_object_count(attributes):
    """没有判定统计时按谱面物件数计算"""
    bare = ScoreInfo(accuracy=1.0)
    full = score(attributes)
    assert pp_of(attributes, bare).pp == pytest.approx(pp_of(attributes, full).pp)


def test_zero_attributes():
    """全 0 的难度属性得到 0 pp"""
    result = pp_of(OsuDifficultyAttributes(), ScoreInfo(accuracy=1.0))
    assert result.pp == 0
    assert result.aim == result.speed == result.flashlight == 0


def test_longer_maps_give_more(attributes):
    """长度奖励随物件数增加"""
    short = pp_of(attributes.model_copy(update={"hit_circle_count": 100, "slider_count": 0}), ScoreInfo(accuracy=1.0))
    long = pp_of(attributes.model_copy(update={"hit_circle_count": 3000, "slider_count": 0}), ScoreInfo(accuracy=1.0))
    assert long.pp > short.pp


def test_database_attributes(beatmap):
    """编号属性表的转换，闪光灯只在 FL 时保存"""
    nomod = OsuDifficultyCalculator(beatmap).calculate([])
    values = nomod.to_database_attributes()
    assert values[OsuDifficultyAttributes.ATTRIB_ID_DIFFICULTY] == nomod.star_rating
    assert values[OsuDifficultyAttributes.ATTRIB_ID_AIM] == nomod.aim_difficulty
    assert OsuDifficultyAttributes.ATTRIB_ID_FLASHLIGHT not in values

    fl = OsuDifficultyCalculator(beatmap).calculate([{"acronym": "FL"}])
    assert fl.to_database_attributes()[OsuDifficultyAttributes.ATTRIB_ID_FLASHLIGHT] == fl.flashlight_difficulty

    restored = OsuDifficultyAttributes.from_database_attributes(
        values,
        hit_circle_count=nomod.hit_circle_count,
        slider_count=nomod.slider_count,
        spinner_count=nomod.spinner_count,
        drain_rate=nomod.drain_rate,
        circle_size=nomod.circle_size,
        version=nomod.version,
    )
    assert restored == nomod
