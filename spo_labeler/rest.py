"""Thin requests wrapper shared by the Graph and SharePoint clients."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from spo_labeler.errors import ServiceError

logger = logging.getLogger(__name__)

GRAPH_HEADERS = {"Accept": "application/json"}
SHAREPOINT_HEADERS = {
    "Accept": "application/json;odata=nometadata",
    "Content-Type": "application/json;odata=nometadata",
}


def bearer_session(token: str, headers: Optional[Dict[str, str]] = None) -> requests.Session:
    session = requests.Session()
    session.headers.update({"Authorization": f"Bearer {token}"})
    session.headers.update(headers or GRAPH_HEADERS)
    return session


class RestClient:
    """Issues JSON requests on an authenticated session and raises on failure."""

    def __init__(self, session: requests.Session, timeout: int = 30):
        self.session = session
        self.timeout = timeout

    def request(self, method: str, url: str, **kwargs) -> requests.Response:
        kwargs.setdefault("timeout", self.timeout)
        logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise ServiceError(f"{method} {url} failed: {exc}") from exc
        if resp.status_code >= 400:
            reason = getattr(resp, "reason", "") or "error"
            raise ServiceError(f"{method} {url} -> {reason}", status_code=resp.status_code, body=resp.text or "")
        return resp

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        resp = self.request("GET", url, params=params)
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as exc:
            # e.g. an HTML sign-in page or proxy interstitial served with 200
            raise ServiceError(f"GET {url} returned non-JSON", status_code=resp.status_code,
                               body=resp.text or "") from exc

    def close(self) -> None:
        self.session.close()
