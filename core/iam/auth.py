from __future__ import annotations

import logging
import time

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import DatabaseError

logger = logging.getLogger(__name__)


def _lookup(email: str, password: str):
    User = get_user_model()
    user = User.objects.filter(email__iexact=email).order_by("id").first()
    if not user or not user.is_active:
        return None
    if not user.check_password(password):
        return None
    return user


def authenticate_with_retry(email: str, password: str, *, attempts: int | None = None, delay: float | None = None):
    """
    Credential check for the login endpoint.

    Transient database failures are retried `ESG_AUTH_RETRY_ATTEMPTS` times
    with `ESG_AUTH_RETRY_DELAY` seconds in between; the last failure is
    re-raised. Returns the user or None for bad credentials.
    """
    attempts = attempts if attempts is not None else settings.ESG_AUTH_RETRY_ATTEMPTS
    delay = delay if delay is not None else settings.ESG_AUTH_RETRY_DELAY
    attempts = max(1, int(attempts))

    for attempt in range(1, attempts + 1):
        try:
            return _lookup(email, password)
        except DatabaseError as e:
            logger.warning("Authentication attempt %s/%s failed: %s", attempt, attempts, e)
            if attempt == attempts:
                raise
            time.sleep(delay)
    return None
