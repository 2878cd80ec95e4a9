"""
难度物件预处理测试
验证物件数量、时间下限、角度与倍速缩放
"""

import math

from osupp.difficulty.evaluators.aim import calc_wide_angle_bonus
from osupp.difficulty.preprocessing import (
    MIN_DELTA_TIME,
    OsuDifficultyHitObject,
    SliderCursor,
    create_difficulty_hit_objects,
)
from osupp.models.beatmap import HitObject, HitObjectType, Position


def circle(time: float, x: float, y: float) -> HitObject:
    return HitObject(start_time=time, position=Position(x=x, y=y))


def build(hit_objects: list[HitObject], clock_rate: float = 1.0) -> list[OsuDifficultyHitObject]:
    # radius 50 keeps the scaling factor at 1, distances stay in playfield units
    return create_difficulty_hit_objects(
        hit_objects, clock_rate, radius=50, great_window=50, preempt=1200, fade_in=400
    )


def collinear(count: int = 4) -> list[HitObject]:
    return [circle(i * 500, i * 200, 0) for i in range(count)]


def test_object_count():
    """N 个物件生成 max(0, N-1) 个难度物件"""
    for n in (0, 1, 2, 5, 20):
        objects = build([circle(i * 100, 0, 0) for i in range(n)])
        assert len(objects) == max(0, n - 1)
        assert [obj.index for obj in objects] == list(range(len(objects)))


def test_strain_time_floor():
    """任意时间间隔下 strain_time 都不低于下限"""
    hit_objects = [circle(0, 0, 0), circle(0, 10, 0), circle(3, 20, 0), circle(3, 30, 0), circle(10, 0, 0)]
    for clock_rate in (0.5, 1.0, 1.5, 2.0):
        for obj in build(hit_objects, clock_rate):
            assert obj.strain_time >= MIN_DELTA_TIME


def test_early_strain_time_ramp():
    """前几个物件的 strain_time 会被拉长"""
    objects = build([circle(i * 400, 0, 0) for i in range(6)])
    assert objects[0].strain_time > objects[1].strain_time > objects[2].strain_time > objects[3].strain_time
    assert objects[3].strain_time == 400
    assert objects[4].strain_time == 400


def test_collinear_angles():
    """共线物件：第一个转换没有角度，之后为 π"""
    objects = build(collinear())
    assert objects[0].angle is None
    for obj in objects[1:]:
        assert obj.angle is not None
        assert math.isclose(obj.angle, math.pi)
        assert math.isclose(obj.lazy_jump_distance, 200)
    assert calc_wide_angle_bonus(objects[2].angle) == 1.0


def test_clock_rate_halves_times():
    """倍速 2.0 时所有时间减半，数量与顺序不变"""
    hit_objects = collinear(8)
    normal = build(hit_objects, 1.0)
    doubled = build(hit_objects, 2.0)

    assert len(normal) == len(doubled)
    for a, b in zip(normal, doubled):
        assert a.base_object is b.base_object
        assert math.isclose(b.delta_time, a.delta_time / 2)
        assert math.isclose(b.strain_time, a.strain_time / 2)
        assert math.isclose(b.start_time, a.start_time / 2)


def test_navigation_bounds():
    """previous / next 越界返回 None"""
    objects = build(collinear(5))
    first, last = objects[0], objects[-1]

    assert first.previous(0) is None
    assert first.next(0) is objects[1]
    assert last.next(0) is None
    assert last.previous(0) is objects[-2]
    assert last.previous(len(objects) - 2) is first
    assert last.previous(len(objects) - 1) is None


def test_coincident_objects():
    """重叠物件距离为 0，不会出错"""
    objects = build([circle(0, 256, 192), circle(0, 256, 192)])
    assert len(objects) == 1
    assert objects[0].lazy_jump_distance == 0
    assert objects[0].strain_time >= MIN_DELTA_TIME


def test_spinner_skips_distances():
    """转盘不计算距离与角度"""
    spinner = HitObject(
        start_time=500, position=Position(x=256, y=192), type=HitObjectType.SPINNER, end_time=1500
    )
    objects = build([circle(0, 0, 0), spinner, circle(2000, 400, 300)])
    assert objects[0].lazy_jump_distance == 0
    assert objects[0].end_time == 1500
    assert objects[1].lazy_jump_distance == 0
    assert objects[1].angle is None


def test_slider_cursor():
    """滑条的懒惰光标路径"""
    slider = HitObject(
        start_time=0,
        position=Position(x=0, y=0),
        type=HitObjectType.SLIDER,
        path_length=200,
        path_duration=400,
        end_position=Position(x=200, y=0),
    )
    cursor = SliderCursor(slider, 1.0)
    assert cursor.lazy_travel_time == 364
    assert cursor.lazy_travel_distance == 150
    assert cursor.lazy_end_position == (150, 0)

    repeated = slider.model_copy(update={"repeat_count": 1})
    cursor = SliderCursor(repeated, 1.0)
    assert cursor.lazy_travel_distance == 150 + 100
    # the ball comes back to the head, the cursor stops short of it
    assert cursor.lazy_end_position == (50, 0)

    short = slider.model_copy(update={"path_length": 30})
    assert SliderCursor(short, 1.0).lazy_end_position == (0, 0)


def test_slider_travel():
    """滑条后的物件带有移动距离与时间"""
    slider = HitObject(
        start_time=0,
        position=Position(x=0, y=0),
        type=HitObjectType.SLIDER,
        path_length=200,
        path_duration=400,
        end_position=Position(x=200, y=0),
    )
    objects = build([circle(-500, 0, 100), slider, circle(800, 300, 0)])
    assert objects[0].travel_distance > 0
    assert objects[0].travel_time >= MIN_DELTA_TIME
    assert math.isclose(objects[1].lazy_jump_distance, 150)
    assert objects[1].minimum_jump_time < objects[1].strain_time


def test_opacity():
    """不开隐藏时物件在击打时刻完全可见"""
    obj = build(collinear(2))[0]
    hit_time = obj.base_object.start_time
    assert obj.opacity_at(hit_time, hidden=False) == 1.0
    assert obj.opacity_at(hit_time - 1200, hidden=False) == 0.0
    assert obj.opacity_at(hit_time + 1, hidden=False) == 0.0
    assert obj.opacity_at(hit_time, hidden=True) == 0.0
