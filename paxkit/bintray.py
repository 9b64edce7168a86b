"""Client for the firmware package server: latest version and binary path."""

from __future__ import annotations

import json
import logging

import requests

__all__ = ["BintrayClient"]

log = logging.getLogger(__name__)

DEFAULT_HOST = "pax.express"
MAX_RESPONSE_SIZE = 1024


class BintrayClient:
    """Looks up firmware releases of one package on the package server."""

    def __init__(self, user: str, repository: str, package: str, timeout: float = 10.0):
        self.user = user
        self.repository = repository
        self.package = package
        self.storage_host = DEFAULT_HOST
        self.api_host = DEFAULT_HOST
        self.timeout = timeout

    def _package_url(self) -> str:
        return (
            f"https://{self.api_host}/packages/"
            f"{self.user}/{self.repository}/{self.package}/versions/"
        )

    def latest_version_url(self) -> str:
        """URL that describes the latest version."""
        return self._package_url() + "_latest"

    def binary_url(self, version: str) -> str:
        """URL that lists the files of ``version``."""
        return self._package_url() + f"{version}/files"

    def request_content(self, url: str) -> str:
        """Body of a GET on ``url``; empty unless the server answers 200."""
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            log.error("GET request failed, error: %s", exc)
            return ""
        if response.status_code != 200:
            return ""
        return response.text

    def _fetch_json(self, url: str, what: str):
        text = self.request_content(url)
        if len(text) > MAX_RESPONSE_SIZE:
            log.error("Error: %s data invalid.", what)
            return None
        try:
            return json.loads(text)
        except ValueError as exc:
            log.error("Error %s: %s not found.", exc, what)
            return None

    @staticmethod
    def _as_text(value) -> str:
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        return json.dumps(value)

    def latest_version(self) -> str:
        """Name of the latest version, or an empty string if unknown."""
        doc = self._fetch_json(self.latest_version_url(), "Firmware version")
        if not isinstance(doc, dict):
            return ""
        return self._as_text(doc.get("name"))

    def binary_path(self, version: str) -> str:
        """Server path of the first file of ``version``, or an empty string."""
        doc = self._fetch_json(self.binary_url(version), "Firmware download path")
        if not isinstance(doc, list) or not doc or not isinstance(doc[0], dict):
            return ""
        path = self._as_text(doc[0].get("path"))
        if not path:
            return ""
        return f"/{self.user}/{self.repository}/{path}"