"""Route handlers for Web API."""

from hobbyu.web.routes.health import router as health_router
from hobbyu.web.routes.learners import router as learners_router
from hobbyu.web.routes.progress import router as progress_router
from hobbyu.web.routes.lessons import router as lessons_router
from hobbyu.web.routes.certificate import router as certificate_router

__all__ = [
    "health_router",
    "learners_router",
    "progress_router",
    "lessons_router",
    "certificate_router",
]
