from . import aim, flashlight, relax_aim, rhythm, speed

__all__ = ["aim", "flashlight", "relax_aim", "rhythm", "speed"]
