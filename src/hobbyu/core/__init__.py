"""Core business logic module.

Modules:
- models: Learner, attendance, result and lesson records + boundary decoders
- progress_tracker: Snapshot, phase and certificate eligibility rules
- signup: Application validation and learner registration
- quiz_grader: Multiple-choice quiz scoring
- lesson_plan: Today's lesson and lesson completion
- dashboard: Dashboard view model
- certificate: Certificate payload
"""

__all__ = [
    "models",
    "progress_tracker",
    "signup",
    "quiz_grader",
    "lesson_plan",
    "dashboard",
    "certificate",
]
