"""Route handlers for the Web API."""

from examdesk.web.routes.health import router as health_router
from examdesk.web.routes.users import router as users_router
from examdesk.web.routes.categories import router as categories_router
from examdesk.web.routes.subjects import router as subjects_router
from examdesk.web.routes.banks import router as banks_router
from examdesk.web.routes.questions import router as questions_router
from examdesk.web.routes.tests import router as tests_router
from examdesk.web.routes.results import router as results_router
from examdesk.web.routes.auth import router as auth_router
from examdesk.web.routes.reports import router as reports_router

__all__ = [
    "health_router",
    "users_router",
    "categories_router",
    "subjects_router",
    "banks_router",
    "questions_router",
    "tests_router",
    "results_router",
    "auth_router",
    "reports_router",
]
