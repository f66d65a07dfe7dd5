"""
ROUTERS - FastAPI Router Modules

Usage:
    from routers import periods_router

    app.include_router(periods_router)
"""

from .periods import router as periods_router

__all__ = [
    'periods_router',
]
