"""Destination resolution - base webhook URL plus optional extra path."""

import re
from collections.abc import Mapping

from core.exceptions import MissingWebhookURL
from core.query import RESERVED_KEY, first_value
from core.request_types import QueryValue, ResolvedDestination

ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)

FORWARD_PATH_HEADER = "x-forward-path"


class DestinationResolver:
    """Decide where a request should be forwarded."""

    def __init__(self, base_url: str):
        self.base_url = base_url

    def resolve(
        self,
        query: Mapping[str, QueryValue],
        headers: Mapping[str, str],
    ) -> ResolvedDestination:
        """Return the destination for the given query and normalized headers."""
        if not self.base_url:
            raise MissingWebhookURL()
        extra_path = self.extra_path(query, headers)
        return ResolvedDestination(url=join_destination(self.base_url, extra_path), extra_path=extra_path)

    @staticmethod
    def extra_path(query: Mapping[str, QueryValue], headers: Mapping[str, str]) -> str:
        """Query ``path`` first, then the x-forward-path header."""
        return first_value(query.get(RESERVED_KEY)) or headers.get(FORWARD_PATH_HEADER, "") or ""


def join_destination(base_url: str, extra_path: str) -> str:
    """Combine base and extra path; an absolute extra path replaces the base."""
    if not extra_path:
        return base_url
    if ABSOLUTE_URL.match(extra_path):
        return extra_path
    return f"{base_url.rstrip('/')}/{extra_path.lstrip('/')}"
