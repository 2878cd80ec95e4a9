"""
计算服务 API 测试
"""

from osupp.difficulty.calculator import OsuDifficultyCalculator
from osupp.difficulty.performance import OsuPerformanceCalculator
from osupp.models.score import ScoreInfo

from fastapi.testclient import TestClient
from main import app
import pytest


@pytest.fixture
def client():
    # entering the client runs the lifespan, which initialises the calculator
    with TestClient(app) as client:
        yield client


def test_server_health(client):
    """测试服务器健康状态"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert client.get("/").status_code == 200


def test_available_rulesets(client):
    """可用规则集"""
    response = client.get("/available_rulesets")
    assert response.status_code == 200
    data = response.json()
    assert data["has_performance_calculator"] == ["osu", "osuap", "osurx"]
    assert data["has_difficulty_calculator"] == ["osu", "osuap", "osurx"]
    assert data["loaded_rulesets"] == ["osu"]


def test_difficulty(client, beatmap):
    """难度计算与直接调用结果一致"""
    response = client.post(
        "/difficulty",
        json={"beatmap": beatmap.model_dump(mode="json"), "mods": ["DT", "NF"], "ruleset": 0},
    )
    assert response.status_code == 200
    data = response.json()
    expected = OsuDifficultyCalculator(beatmap).calculate([{"acronym": "DT"}])
    assert data["star_rating"] == pytest.approx(expected.star_rating)
    assert [mod["acronym"] for mod in data["mods"]] == ["DT"]
    assert data["version"] == OsuDifficultyCalculator.VERSION


def test_difficulty_special_ruleset(client, beatmap):
    """带 RX 的 osu 请求按 osurx 计算"""
    response = client.post(
        "/difficulty",
        json={"beatmap": beatmap.model_dump(mode="json"), "mods": ["RX"], "ruleset": "osu"},
    )
    assert response.status_code == 200
    assert response.json()["speed_difficulty"] == 0


def test_difficulty_unsupported_ruleset(client, beatmap):
    """不支持的模式返回 422"""
    response = client.post(
        "/difficulty",
        json={"beatmap": beatmap.model_dump(mode="json"), "ruleset": "taiko"},
    )
    assert response.status_code == 422
    assert "taiko" in response.json()["error"]

    response = client.post(
        "/difficulty",
        json={"beatmap": beatmap.model_dump(mode="json"), "ruleset": "osurx"},
    )
    assert response.status_code == 422


def test_invalid_beatmap(client):
    """物件未按时间排序时拒绝请求"""
    response = client.post(
        "/difficulty",
        json={
            "beatmap": {
                "hit_objects": [
                    {"start_time": 1000, "position": {"x": 0, "y": 0}},
                    {"start_time": 500, "position": {"x": 0, "y": 0}},
                ]
            }
        },
    )
    assert response.status_code == 422
    assert "error" in response.json()


def test_performance_from_beatmap(client, beatmap):
    """根据谱面计算 pp"""
    score = {"accuracy": 0.98, "max_combo": 200, "mods": ["HD"], "statistics": {"great": 110, "ok": 9, "miss": 2}}
    response = client.post("/performance", json={"beatmap": beatmap.model_dump(mode="json"), "score": score})
    assert response.status_code == 200
    data = response.json()

    attributes = OsuDifficultyCalculator(beatmap).calculate([{"acronym": "HD"}])
    expected = OsuPerformanceCalculator(attributes).calculate(ScoreInfo.model_validate(score))
    assert data["pp"] == pytest.approx(expected.pp)
    assert data["effective_miss_count"] == 2


def test_performance_from_attributes(client, beatmap):
    """根据难度属性计算 pp，不需要谱面"""
    attributes = OsuDifficultyCalculator(beatmap).calculate([])
    response = client.post(
        "/performance",
        json={"attributes": attributes.model_dump(mode="json"), "score": {"accuracy": 1.0}},
    )
    assert response.status_code == 200
    expected = OsuPerformanceCalculator(attributes).calculate(ScoreInfo(accuracy=1.0))
    assert response.json()["pp"] == pytest.approx(expected.pp)


def test_performance_requires_source(client):
    """谱面与难度属性至少提供一个"""
    response = client.post("/performance", json={"score": {"accuracy": 1.0}})
    assert response.status_code == 422
