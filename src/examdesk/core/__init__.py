"""Core business logic module.

Modules:
- errors: Domain exceptions with their HTTP status
- grading: Percentage and 1-6 grade computation, answer scoring
- generator: Randomized test generation
- auth: Login credential checks
- reports: PDF report data and in-process rendering
- report_proxy: Client for the external report service
"""

__all__ = [
    "errors",
    "grading",
    "generator",
    "auth",
    "reports",
    "report_proxy",
]
