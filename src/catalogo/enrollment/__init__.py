"""Enrollment - Enrollment writes and status lifecycle."""

from catalogo.enrollment.guard import EnrollmentGuard, follows_lifecycle

__all__ = [
    "EnrollmentGuard",
    "follows_lifecycle",
]
