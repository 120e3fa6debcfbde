"""Redirect helpers for user-supplied `next` targets.

Redirect targets taken from form fields or query strings are validated with
Django's `url_has_allowed_host_and_scheme` before use.
"""

from __future__ import annotations

from collections.abc import Iterable

from django.conf import settings
from django.core.exceptions import DisallowedHost
from django.http import HttpRequest, HttpResponseRedirect
from django.shortcuts import redirect
from django.utils.http import url_has_allowed_host_and_scheme


def safe_redirect(
    request: HttpRequest,
    *,
    candidates: Iterable[str | None],
    fallback: str,
) -> HttpResponseRedirect:
    """Redirect to the first candidate that points at an allowed host.

    Args:
        request: Incoming request used for host and scheme validation.
        candidates: Candidate targets, usually the `next` value from POST or GET.
        fallback: URL or URL pattern name used when no candidate is safe.

    Returns:
        An HttpResponseRedirect.
    """

    hosts = _allowed_hosts(request)
    for candidate in candidates:
        target = (candidate or "").strip()
        if target and url_has_allowed_host_and_scheme(
            url=target,
            allowed_hosts=hosts,
            require_https=request.is_secure(),
        ):
            return redirect(target)
    return redirect(fallback)


def _allowed_hosts(request: HttpRequest) -> set[str]:
    hosts = set(settings.ALLOWED_HOSTS)
    try:
        hosts.add(request.get_host())
    except DisallowedHost:
        pass
    return hosts
