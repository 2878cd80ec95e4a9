"""Difficulty calculation for osu!standard.

https://github.com/ppy/osu/blob/master/osu.Game.Rulesets.Osu/Difficulty/OsuDifficultyCalculator.cs
"""

from concurrent.futures import ThreadPoolExecutor
import math
from typing import ClassVar

from osupp.config import settings
from osupp.log import calculator_logger
from osupp.models.beatmap import Beatmap, BeatmapDifficulty, HitObjectType
from osupp.models.mods import APIMod, difficulty_mods, get_clock_rate, has_mod
from osupp.models.performance import OsuDifficultyAttributes
from osupp.scoring.hit_windows import (
    create_hit_windows,
    fade_in_time,
    preempt_time,
    rate_adjusted_approach_rate,
    rate_adjusted_overall_difficulty,
)

from .preprocessing import OsuDifficultyHitObject, create_difficulty_hit_objects
from .skills import DIFFICULTY_MULTIPLIER, Aim, Flashlight, OsuStrainSkill, Relax, Speed, StrainSkill

PERFORMANCE_BASE_MULTIPLIER = 1.12
STAR_RATING_POWER = 1.1

logger = calculator_logger("OsuDifficultyCalculator")


class OsuDifficultyCalculator:
    # bump whenever a formula or a constant changes, cached attributes are keyed by it
    VERSION: ClassVar[int] = 20250306

    def __init__(
        self,
        beatmap: Beatmap,
        *,
        parallel_skills: bool | None = None,
        skill_workers: int | None = None,
    ) -> None:
        self.beatmap = beatmap
        self.parallel_skills = settings.parallel_skills if parallel_skills is None else parallel_skills
        self.skill_workers = skill_workers or settings.skill_workers

    def calculate(self, mods: list[APIMod] | None = None) -> OsuDifficultyAttributes:
        mods = difficulty_mods(mods or [])
        difficulty = self.beatmap.difficulty.apply_mods(mods)
        clock_rate = get_clock_rate(mods)

        if len(self.beatmap.hit_objects) < 2:
            return OsuDifficultyAttributes(mods=mods, version=self.VERSION)

        objects = self.create_difficulty_hit_objects(difficulty, mods, clock_rate)
        skills = self.create_skills(difficulty, mods, clock_rate)
        self._run_skills(skills, objects)

        attributes = self.create_difficulty_attributes(difficulty, mods, skills, clock_rate)
        logger.debug(
            f"Calculated {len(objects)} objects with {len(skills)} skills, "
            f"mods={[mod['acronym'] for mod in mods]} star_rating={attributes.star_rating:.4f}"
        )
        return attributes

    def _hit_window_great(self, difficulty: BeatmapDifficulty, mods: list[APIMod]) -> float:
        # Classic players are judged by the stable windows
        return create_hit_windows(difficulty.overall_difficulty, legacy=has_mod(mods, "CL")).great

    def create_difficulty_hit_objects(
        self, difficulty: BeatmapDifficulty, mods: list[APIMod], clock_rate: float
    ) -> list[OsuDifficultyHitObject]:
        preempt = preempt_time(difficulty.approach_rate)
        return create_difficulty_hit_objects(
            self.beatmap.hit_objects,
            clock_rate,
            radius=difficulty.circle_radius,
            great_window=self._hit_window_great(difficulty, mods),
            preempt=preempt,
            fade_in=fade_in_time(preempt),
        )

    def create_skills(self, difficulty: BeatmapDifficulty, mods: list[APIMod], clock_rate: float) -> list[StrainSkill]:
        skills: list[StrainSkill] = [
            Aim(mods, include_sliders=True),
            Aim(mods, include_sliders=False),
            Speed(mods),
        ]

        if has_mod(mods, "FL"):
            skills.append(Flashlight(mods))

        if has_mod(mods, "RX"):
            hit_window = self._hit_window_great(difficulty, mods) / clock_rate
            skills.append(Relax(mods, include_sliders=True, hit_window=hit_window))

        return skills

    def _run_skills(self, skills: list[StrainSkill], objects: list[OsuDifficultyHitObject]) -> None:
        # skills only read the shared objects, their state is private
        if self.parallel_skills and len(skills) > 1:
            with ThreadPoolExecutor(max_workers=self.skill_workers) as executor:
                for future in [executor.submit(skill.process_all, objects) for skill in skills]:
                    future.result()
            return

        for obj in objects:
            for skill in skills:
                skill.process(obj)

    def create_difficulty_attributes(
        self,
        difficulty: BeatmapDifficulty,
        mods: list[APIMod],
        skills: list[StrainSkill],
        clock_rate: float,
    ) -> OsuDifficultyAttributes:
        aim = next(s for s in skills if isinstance(s, Aim) and s.include_sliders)
        aim_rating = math.sqrt(aim.difficulty_value()) * DIFFICULTY_MULTIPLIER
        aim_difficult_strain_count = aim.count_top_weighted_strains()
        difficult_sliders = aim.get_difficult_sliders()

        aim_no_sliders = next(s for s in skills if isinstance(s, Aim) and not s.include_sliders)
        aim_rating_no_sliders = math.sqrt(aim_no_sliders.difficulty_value()) * DIFFICULTY_MULTIPLIER
        slider_factor = aim_rating_no_sliders / aim_rating if aim_rating > 0 else 1.0

        speed = next(s for s in skills if isinstance(s, Speed))
        speed_rating = math.sqrt(speed.difficulty_value()) * DIFFICULTY_MULTIPLIER
        speed_notes = speed.relevant_note_count()
        speed_difficult_strain_count = speed.count_top_weighted_strains()

        flashlight = next((s for s in skills if isinstance(s, Flashlight)), None)
        flashlight_rating = (
            math.sqrt(flashlight.difficulty_value()) * DIFFICULTY_MULTIPLIER if flashlight is not None else 0.0
        )

        relax = next((s for s in skills if isinstance(s, Relax)), None)

        if has_mod(mods, "TD"):
            aim_rating = math.pow(aim_rating, 0.8)
            flashlight_rating = math.pow(flashlight_rating, 0.8)

        base_aim_performance = 0.0
        base_speed_performance = 0.0
        base_flashlight_performance = 0.0

        if relax is not None:
            # relax players never tap, only aim counts
            aim_rating = math.sqrt(relax.difficulty_value()) * DIFFICULTY_MULTIPLIER
            difficult_sliders = relax.get_difficult_sliders()
            speed_rating = 0.0
            flashlight_rating *= 0.7
            base_aim_performance = OsuStrainSkill.difficulty_to_performance(aim_rating)
            base_performance = base_aim_performance
        else:
            if has_mod(mods, "AP"):
                # autopilot players never aim
                speed_rating *= 0.5
                aim_rating = 0.0
                flashlight_rating *= 0.4
                base_speed_performance = OsuStrainSkill.difficulty_to_performance(speed_rating)
            else:
                base_aim_performance = OsuStrainSkill.difficulty_to_performance(aim_rating)
                base_speed_performance = OsuStrainSkill.difficulty_to_performance(speed_rating)
                if flashlight is not None:
                    base_flashlight_performance = Flashlight.difficulty_to_performance(flashlight_rating)

            base_performance = math.pow(
                math.pow(base_aim_performance, STAR_RATING_POWER)
                + math.pow(base_speed_performance, STAR_RATING_POWER)
                + math.pow(base_flashlight_performance, STAR_RATING_POWER),
                1.0 / STAR_RATING_POWER,
            )

        star_rating = 0.0
        if base_performance > 0.00001:
            star_rating = (
                math.cbrt(PERFORMANCE_BASE_MULTIPLIER)
                * 0.027
                * (math.cbrt(100000 / math.pow(2, 1 / STAR_RATING_POWER) * base_performance) + 4)
            )

        return OsuDifficultyAttributes(
            star_rating=star_rating,
            mods=mods,
            version=self.VERSION,
            aim_difficulty=aim_rating,
            aim_difficult_slider_count=difficult_sliders,
            speed_difficulty=speed_rating,
            speed_note_count=speed_notes,
            flashlight_difficulty=flashlight_rating,
            slider_factor=slider_factor,
            aim_difficult_strain_count=aim_difficult_strain_count,
            speed_difficult_strain_count=speed_difficult_strain_count,
            approach_rate=rate_adjusted_approach_rate(difficulty.approach_rate, clock_rate),
            overall_difficulty=rate_adjusted_overall_difficulty(difficulty.overall_difficulty, clock_rate),
            circle_size=difficulty.circle_size,
            drain_rate=difficulty.drain_rate,
            max_combo=self.beatmap.max_combo,
            hit_circle_count=self.beatmap.count(HitObjectType.CIRCLE),
            slider_count=self.beatmap.count(HitObjectType.SLIDER),
            spinner_count=self.beatmap.count(HitObjectType.SPINNER),
        )
