"""
pantry_client.py

A tiny API client for the Pantry Tracker backend, for scripts and bots.

What it provides:
- Inventory helpers: list, add (or increment), update photo, decrement, rename, delete
- Photo upload from a data URL or a local image file

Environment variables expected:
- PANTRY_API_URL: e.g. "https://your-domain.com/api"

Dependencies:
- requests (pip install requests)
"""

from __future__ import annotations

import base64
import mimetypes
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests


class ApiError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class PantryApiClient:
    base_url: str
    timeout: float = 30
    # anything with a requests-style .request(); defaults to the requests module
    session: Any = None

    def _request(self, method: str, path: str, *, json: Any = None, params: Dict[str, Any] | None = None) -> Any:
        http = self.session or requests
        url = f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
        resp = http.request(
            method,
            url,
            json=json,
            params=params,
            headers={"Accept": "application/json"},
            timeout=self.timeout,
        )

        if resp.status_code >= 400:
            raise ApiError(f"{method} {path} failed ({resp.status_code}): {resp.text}", resp.status_code)

        if resp.status_code == 204:
            return None
        return resp.json()

    @staticmethod
    def _item_path(name: str, suffix: str = "") -> str:
        return f"/inventory/{quote(name, safe='')}{suffix}"

    # ----------------------------
    # Inventory helpers
    # ----------------------------

    def list_items(self, *, search: Optional[str] = None, quantity_filter: str = "All") -> list[dict]:
        """Calls: GET /inventory/"""
        params: Dict[str, Any] = {"quantity_filter": quantity_filter}
        if search:
            params["search"] = search
        return self._request("GET", "/inventory/", params=params)

    def add_item(self, name: str, image_url: Optional[str] = None) -> Any:
        """
        Calls: POST /inventory/
        Creates the item with quantity 1, or adds one if it already exists.
        """
        return self._request("POST", "/inventory/", json={"name": name, "image_url": image_url})

    def update_item(self, name: str, *, image_url: Optional[str] = None) -> Any:
        return self._request("PATCH", self._item_path(name), json={"image_url": image_url})

    def decrement_item(self, name: str) -> Any:
        """Calls: POST /inventory/{name}/decrement (removes the item at quantity 1)"""
        return self._request("POST", self._item_path(name, "/decrement"))

    def rename_item(self, name: str, new_name: str) -> Any:
        """Calls: POST /inventory/{name}/rename (409 if new_name is taken)"""
        return self._request("POST", self._item_path(name, "/rename"), json={"new_name": new_name})

    def delete_item(self, name: str) -> Any:
        return self._request("DELETE", self._item_path(name))

    # ----------------------------
    # Photos
    # ----------------------------

    def upload_image(self, item_key: str, image: str) -> str:
        """
        Calls: POST /images/upload
        `image` is a data URL or bare base64. Returns the URL serving the photo.
        """
        data = self._request("POST", "/images/upload", json={"item_key": item_key, "image": image})
        return data["url"]

    def upload_image_file(self, item_key: str, path: str) -> str:
        content_type = mimetypes.guess_type(path)[0] or "image/jpeg"
        with open(path, "rb") as f:
            encoded = base64.b64encode(f.read()).decode("ascii")
        return self.upload_image(item_key, f"data:{content_type};base64,{encoded}")


def make_client_from_env() -> PantryApiClient:
    base_url = os.getenv("PANTRY_API_URL", "").strip()
    if not base_url:
        raise RuntimeError("Missing PANTRY_API_URL")
    return PantryApiClient(base_url=base_url)


if __name__ == "__main__":
    client = make_client_from_env()
    for item in client.list_items():
        print(f"{item['name']}: {item['quantity']}")
