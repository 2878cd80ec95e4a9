from .performance import router as performance_router

__all__ = ["performance_router"]
