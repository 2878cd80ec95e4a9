"""osu!standard difficulty and performance calculation.

The calculators are imported lazily from their modules, the models depend on
``osupp.difficulty.utils`` and must be importable without them.
"""
