"""Preview link rewriting and the preview request registry.

A preview link points at a URL whose *last* path segment is the focal point,
URL-encoded (``.../preview/30%2C70``). Whenever the value changes, the link
href and the matching request descriptor are rewritten together so the next
preview refresh fetches the new crop.

The registry is owned by whoever builds the page (the window/controller) and
is passed to the synchronizers explicitly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional
from urllib.parse import quote

log = logging.getLogger("focalpoint.preview")


def rewrite_href(href: str, value: str) -> str:
    """Replace the final ``/`` segment of ``href`` with the encoded ``value``."""
    parts = str(href or "").split("/")
    parts.pop()
    parts.append(quote(str(value), safe=""))
    return "/".join(parts)


def preview_request_id(focal_point_id: str) -> str:
    return f"{focal_point_id}-preview-link"


@dataclass
class PreviewRequest:
    """Descriptor of the request a preview refresh will issue."""

    url: str
    options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.options.setdefault("url", self.url)


class PreviewRegistry:
    """Mapping ``request id -> PreviewRequest``."""

    def __init__(self) -> None:
        self._requests: Dict[str, PreviewRequest] = {}

    def register(self, key: str, url: str, **options: Any) -> PreviewRequest:
        req = PreviewRequest(url=url, options=dict(options))
        self._requests[key] = req
        return req

    def get(self, key: str) -> Optional[PreviewRequest]:
        return self._requests.get(key)

    def update_url(self, key: str, url: str) -> bool:
        """Point request ``key`` at ``url``; False if it is not registered."""
        req = self._requests.get(key)
        if req is None:
            log.debug("No preview request registered as %r", key)
            return False
        req.url = url
        req.options["url"] = url
        return True

    def __contains__(self, key: object) -> bool:
        return key in self._requests

    def __len__(self) -> int:
        return len(self._requests)

    def __iter__(self) -> Iterator[str]:
        return iter(self._requests)
