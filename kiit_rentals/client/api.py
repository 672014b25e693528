"""
REST client for the KIIT Rentals API.

Every response is an envelope {success, data?, message?}; failures surface
as ApiError carrying the server's message. Nothing is retried.
"""

from __future__ import annotations

import os
from typing import Any, Optional

import httpx

from .session import SessionStore

DEFAULT_BASE_URL = os.getenv("KIIT_RENTALS_API_URL", "http://localhost:5001/api")
NETWORK_ERROR_MESSAGE = "Unable to reach the server. Please try again."


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RentalsClient:
    def __init__(
        self,
        session: SessionStore,
        base_url: str = DEFAULT_BASE_URL,
        http: Optional[httpx.Client] = None,
    ) -> None:
        self.session = session
        self.base_url = base_url.rstrip("/")
        # Only close what we opened; a caller-supplied client stays usable
        self._owns_http = http is None
        self.http = http or httpx.Client(headers={"Content-Type": "application/json"})

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def _request(self, method: str, path: str, **kwargs) -> dict:
        headers = dict(kwargs.pop("headers", None) or {})
        headers.update(self.session.auth_header())
        try:
            response = self.http.request(method, f"{self.base_url}{path}", headers=headers, **kwargs)
        except httpx.TransportError as e:
            raise ApiError(NETWORK_ERROR_MESSAGE) from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.is_error or not body.get("success", False):
            message = body.get("message") or f"Request failed with status {response.status_code}"
            raise ApiError(message, response.status_code)
        return body

    # --- Account ---

    def _start_session(self, body: dict) -> dict:
        data = body["data"]
        profile = {key: data[key] for key in ("id", "name", "email")}
        self.session.save(data["token"], profile)
        return profile

    def signup(self, name: str, email: str, password: str) -> dict:
        body = self._request("POST", "/user/signup", json={"name": name, "email": email, "password": password})
        return self._start_session(body)

    def login(self, email: str, password: str) -> dict:
        body = self._request("POST", "/user/login", json={"email": email, "password": password})
        return self._start_session(body)

    def logout(self) -> None:
        # Stateless tokens: dropping the local copy is the logout
        self.session.clear()

    def me(self) -> dict:
        return self._request("GET", "/user/me")["data"]

    # --- Products ---

    def list_products(self, search: Optional[str] = None, listing_type: Optional[str] = None,
                      category: Optional[str] = None) -> list:
        params = {"search": search, "type": listing_type, "category": category}
        params = {key: value for key, value in params.items() if value}
        return self._request("GET", "/products", params=params)["data"]

    def my_products(self) -> list:
        return self._request("GET", "/products/mine")["data"]

    def get_product(self, product_id: str) -> dict:
        return self._request("GET", f"/products/{product_id}")["data"]

    def create_product(self, fields: dict[str, Any]) -> dict:
        return self._request("POST", "/products", json=fields)["data"]

    def update_product(self, product_id: str, fields: dict[str, Any]) -> dict:
        return self._request("PUT", f"/products/{product_id}", json=fields)["data"]

    def delete_product(self, product_id: str) -> None:
        self._request("DELETE", f"/products/{product_id}")

    def health(self) -> dict:
        # /health lives beside /api and is not enveloped
        root = self.base_url[: -len("/api")] if self.base_url.endswith("/api") else self.base_url
        try:
            response = self.http.get(f"{root}/health")
        except httpx.TransportError as e:
            raise ApiError(NETWORK_ERROR_MESSAGE) from e
        if response.is_error:
            raise ApiError(f"Health check failed with status {response.status_code}", response.status_code)
        return response.json()
