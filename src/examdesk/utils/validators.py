"""Data validation helpers.

Functions:
- validate_email(email) -> bool: Basic email format check
- require_category / require_bank / require_subject: Referenced row must exist
- require_user / require_teacher / require_student: Referenced user must
  exist (and hold that role)

The require_* helpers raise ValidationError (HTTP 400): a dangling
reference in a request body is a client error, not a missing resource.
"""

from __future__ import annotations

import re

from examdesk.core.errors import ValidationError
from examdesk.db.banks_repository import BankRecord, get_bank_by_id
from examdesk.db.categories_repository import CategoryRecord, get_category_by_id
from examdesk.db.subjects_repository import SubjectRecord, get_subject_by_id
from examdesk.db.users_repository import UserRecord, get_user_by_id

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$")


def validate_email(email: str) -> bool:
    """Validate email format.

    Args:
        email: Email address to validate

    Returns:
        True if the address looks valid, False otherwise
    """
    return bool(EMAIL_PATTERN.match(email or ""))


def require_category(category_id: int) -> CategoryRecord:
    category = get_category_by_id(category_id)
    if category is None:
        raise ValidationError(f"Category {category_id} does not exist")
    return category


def require_bank(bank_id: int) -> BankRecord:
    bank = get_bank_by_id(bank_id)
    if bank is None:
        raise ValidationError(f"Question bank {bank_id} does not exist")
    return bank


def require_subject(subject_id: int) -> SubjectRecord:
    subject = get_subject_by_id(subject_id)
    if subject is None:
        raise ValidationError(f"Subject {subject_id} does not exist")
    return subject


def require_user(user_id: int) -> UserRecord:
    user = get_user_by_id(user_id)
    if user is None:
        raise ValidationError(f"User {user_id} does not exist")
    return user


def require_teacher(user_id: int) -> UserRecord:
    """Return the user if it exists and has account_type 'teacher'."""
    user = require_user(user_id)
    if user.account_type != "teacher":
        raise ValidationError(f"User {user_id} is not a teacher")
    return user


def require_student(user_id: int) -> UserRecord:
    """Return the user if it exists and has account_type 'student'."""
    user = require_user(user_id)
    if user.account_type != "student":
        raise ValidationError(f"User {user_id} is not a student")
    return user
