"""
Charisma — gist.py
Publish a single file as a GitHub gist. One request, no retries.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from charisma.errors import PublishError
from charisma.log import get_logger

log = get_logger("gist")

GIST_API_URL = "https://api.github.com/gists"
DEFAULT_DESCRIPTION = "Generated Code Gist"


@dataclass
class GistResult:
    html_url: str
    gist_id: str = ""


def build_payload(filename: str, content: str, description: str = "",
                  is_private: bool = False) -> Dict[str, Any]:
    return {
        "description": description or DEFAULT_DESCRIPTION,
        "public": not is_private,
        "files": {filename: {"content": content}},
    }


class GistPublisher:
    def __init__(self, api_url: str = GIST_API_URL, timeout: int = 30,
                 session: Optional[requests.Session] = None):
        self.api_url = api_url
        self.timeout = timeout
        self._http = session or requests

    def publish(self, filename: str, content: str, token: str,
                description: str = "", is_private: bool = False) -> GistResult:
        name = Path(filename).name or filename
        payload = build_payload(name, content, description, is_private)
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
        }
        log.info("publishing %s as %s gist", name, "private" if is_private else "public")
        try:
            r = self._http.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except requests.RequestException as exc:
            log.error("gist publish failed: %s", exc)
            raise PublishError(str(exc)) from exc
        except ValueError as exc:
            raise PublishError(f"Unreadable response from {self.api_url}: {exc}") from exc

        url = data.get("html_url") if isinstance(data, dict) else None
        if not url:
            raise PublishError("Response did not include a gist URL")
        result = GistResult(html_url=url, gist_id=str(data.get("id", "")))
        log.info("gist %s created: %s", result.gist_id or "?", url)
        return result
