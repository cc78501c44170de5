"""Inline form checks for the sign-in and new-project screens.

Each check returns ``(ok, message)`` so a page can show ``message`` as a
hint next to the field without blocking the user.  The URL checks reuse
:func:`~seo_monitor.utils.helpers.extract_hostname`, so a competitor URL
that passes here is one the project wizard can save.
"""

import re

from seo_monitor.utils.helpers import extract_hostname

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s.]+$")
MAX_EMAIL_LENGTH = 320
WEBSITE_SCHEMES = ("http", "https")


def validate_email(email: str) -> tuple[bool, str]:
    """Check a sign-up email address.

    Returns:
        Tuple of (is_valid, error_message).
    """
    email = (email or "").strip()
    if not email:
        return False, "Email is required."
    if len(email) > MAX_EMAIL_LENGTH:
        return False, f"Email must be at most {MAX_EMAIL_LENGTH} characters."
    if not EMAIL_PATTERN.match(email):
        return False, "Email format is invalid."
    return True, ""


def validate_url(url: str) -> tuple[bool, str]:
    """Check the project website URL entered on the first wizard step.

    The website must be an ``http``/``https`` address with a host.

    Returns:
        Tuple of (is_valid, error_message).  error_message is empty on success.
    """
    url = (url or "").strip()
    ok, message = validate_competitor_url(url)
    if not ok:
        return ok, message
    scheme = url.split(":", 1)[0].lower()
    if scheme not in WEBSITE_SCHEMES:
        return False, f"Invalid scheme: {scheme!r}. Must be http or https."
    return True, ""


def validate_competitor_url(url: str) -> tuple[bool, str]:
    """Check a competitor URL the way the wizard will when saving it.

    A URL without a scheme (``x.com``) is rejected with the same
    ``Invalid URL: ...`` message the wizard reports on submit.
    """
    url = (url or "").strip()
    if not url:
        return False, "URL is required."
    try:
        extract_hostname(url)
    except ValueError as exc:
        return False, str(exc)
    return True, ""
