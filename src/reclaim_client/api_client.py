from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

import requests
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from reclaim_client.config import ClientSettings
from reclaim_client.session import SessionContext
from reclaim_tracker.materials.models import (
    Activity,
    ImportSummary,
    MaterialRecord,
    MaterialStats,
    SessionUser,
    parse_material,
)

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT")

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
UNAVAILABLE_MESSAGE = "API unavailable. Check API_BASE_URL and ensure the backend is running."


class RequestError(RuntimeError):
    """A failed call. ``field_errors`` holds per-field messages from a 422."""

    def __init__(self, message: str, status: int | None = None, field_errors: Mapping[str, str] | None = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.field_errors = dict(field_errors or {})


class AuthenticationRequired(RequestError):
    pass


class MalformedResponseError(RequestError):
    pass


class Page(BaseModel, Generic[ItemT]):
    model_config = ConfigDict(populate_by_name=True)

    content: list[ItemT]
    total_elements: Optional[int] = Field(default=None, alias="totalElements")
    total_pages: Optional[int] = Field(default=None, alias="totalPages")
    number: Optional[int] = None
    size: Optional[int] = None


_COLLECTION = TypeAdapter(Union[Page[dict[str, Any]], list[dict[str, Any]]])


def unwrap_collection(payload: Any) -> list[dict[str, Any]]:
    """Normalise a paginated ``{"content": [...]}`` body or a bare list."""
    try:
        envelope = _COLLECTION.validate_python(payload)
    except ValidationError as exc:
        logger.error("Unexpected collection format: %s", type(payload).__name__)
        raise MalformedResponseError("API returned an unexpected collection format.") from exc
    if isinstance(envelope, Page):
        return envelope.content
    return envelope


@dataclass(frozen=True)
class PictureUpload:
    file_name: str
    content: bytes
    content_type: str = "application/octet-stream"

    def as_file(self, field_name: str) -> tuple[str, tuple[str, bytes, str]]:
        return (field_name, (self.file_name, self.content, self.content_type))


def _error_message(response: requests.Response, fallback: str) -> str:
    try:
        payload = response.json()
    except ValueError:
        text = (response.text or "").strip()
        return text[:200] or fallback
    if isinstance(payload, dict):
        detail = payload.get("detail") or payload.get("message") or payload.get("error")
        if isinstance(detail, dict):
            return "; ".join(str(message) for message in detail.values()) or fallback
        if isinstance(detail, list):
            parts = [str(item.get("msg", item)) if isinstance(item, dict) else str(item) for item in detail]
            return "; ".join(parts) or fallback
        if detail:
            return str(detail)
    return fallback


def _field_errors(response: requests.Response) -> dict[str, str]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    detail = payload.get("detail") if isinstance(payload, dict) else None
    if not isinstance(detail, dict):
        return {}
    return {str(name): str(message) for name, message in detail.items()}


def _material_payload(material: MaterialRecord | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(material, MaterialRecord):
        return material.to_payload()
    return {key: value for key, value in material.items() if value is not None}


class ApiClient:
    """Typed access to the materials backend.

    Every call is a single round trip: no retries, no caching. Non-2xx answers
    raise ``RequestError``; a 401 clears the session first and raises
    ``AuthenticationRequired``.
    """

    def __init__(
        self,
        settings: ClientSettings,
        session: SessionContext,
        http: requests.Session | None = None,
    ):
        self.settings = settings
        self.session = session
        self._http = http or requests.Session()

    def _request(
        self,
        method: str,
        path: str,
        *,
        authenticated: bool = True,
        **kwargs: Any,
    ) -> requests.Response:
        url = f"{self.settings.api_base_url}{path}"
        headers = self.session.auth_header() if authenticated else {}
        try:
            response = self._http.request(
                method,
                url,
                headers=headers,
                timeout=self.settings.timeout_s,
                **kwargs,
            )
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise RequestError(UNAVAILABLE_MESSAGE) from exc

        if response.status_code == 401 and authenticated:
            logger.warning("%s %s -> 401, clearing session", method, path)
            self.session.clear()
            raise AuthenticationRequired(
                _error_message(response, "Your session has expired. Please sign in again."),
                status=401,
            )
        if not response.ok:
            message = _error_message(response, f"Request failed with status {response.status_code}.")
            logger.warning("%s %s -> %s: %s", method, path, response.status_code, message)
            raise RequestError(message, status=response.status_code, field_errors=_field_errors(response))
        return response

    def _request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._request(method, path, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponseError("API returned an invalid response.", status=response.status_code) from exc

    def login(self, email: str, password: str) -> SessionUser:
        try:
            payload = self._request_json(
                "POST",
                "/auth/login",
                json={"email": email, "password": password},
                authenticated=False,
            )
        except RequestError as exc:
            if exc.status in {400, 401, 403}:
                raise RequestError("Invalid email or password.", status=exc.status) from exc
            raise
        token = payload.get("token") if isinstance(payload, dict) else None
        if not token:
            raise MalformedResponseError("Login response did not include a token.")
        try:
            user = SessionUser.model_validate(payload.get("user") or {})
        except ValidationError as exc:
            raise MalformedResponseError("Login response did not include the user.") from exc
        self.session.establish(token, user)
        logger.info("Signed in as %s", user.email)
        return user

    def logout(self) -> None:
        self.session.clear()

    def list_materials(
        self,
        *,
        category: str | None = None,
        material_type: str | None = None,
        condition: str | None = None,
        query: str | None = None,
    ) -> list[MaterialRecord]:
        params = {
            "category": category,
            "type": material_type,
            "condition": condition,
            "query": query,
        }
        payload = self._request_json(
            "GET",
            "/materials",
            params={key: value for key, value in params.items() if value},
        )
        return self._parse_materials(unwrap_collection(payload))

    def get_material(self, material_id: int) -> MaterialRecord:
        return self._parse_material(self._request_json("GET", f"/materials/{material_id}"))

    def create_material(
        self,
        material: MaterialRecord | Mapping[str, Any],
        pictures: Iterable[PictureUpload] | None = None,
    ) -> MaterialRecord:
        body = _material_payload(material)
        uploads = list(pictures or [])
        if not uploads:
            return self._parse_material(self._request_json("POST", "/materials", json=body))
        files = [("material", ("material.json", json.dumps(body).encode("utf-8"), "application/json"))]
        files.extend(upload.as_file("pictures") for upload in uploads)
        return self._parse_material(self._request_json("POST", "/materials", files=files))

    def update_material(self, material_id: int, changes: MaterialRecord | Mapping[str, Any]) -> MaterialRecord:
        if isinstance(changes, MaterialRecord):
            body = changes.to_payload()
        else:
            body = dict(changes)
        return self._parse_material(self._request_json("PUT", f"/materials/{material_id}", json=body))

    def delete_material(self, material_id: int) -> None:
        self._request("DELETE", f"/materials/{material_id}")

    def get_stats(self) -> MaterialStats:
        payload = self._request_json("GET", "/materials/stats")
        try:
            return MaterialStats.model_validate(payload)
        except ValidationError as exc:
            raise MalformedResponseError("API returned invalid statistics.") from exc

    def get_picture(self, picture_id: int) -> bytes:
        return self._request("GET", f"/materials/pictures/{picture_id}").content

    def add_pictures(self, material_id: int, pictures: Iterable[PictureUpload]) -> None:
        files = [upload.as_file("pictures") for upload in pictures]
        if files:
            self._request("POST", f"/materials/{material_id}/pictures", files=files)

    def delete_picture(self, material_id: int, picture_id: int) -> None:
        self._request("DELETE", f"/materials/{material_id}/pictures/{picture_id}")

    def set_primary_picture(self, material_id: int, picture_id: int) -> None:
        self._request("PUT", f"/materials/{material_id}/pictures/{picture_id}/primary")

    def import_excel(self, file_name: str, content: bytes) -> ImportSummary:
        payload = self._request_json(
            "POST",
            "/materials/import-excel",
            files={"file": (file_name, content, XLSX_CONTENT_TYPE)},
        )
        try:
            return ImportSummary.model_validate(payload)
        except ValidationError as exc:
            raise MalformedResponseError("API returned an invalid import summary.") from exc

    def export_excel(self) -> bytes:
        return self._request("GET", "/materials/export-excel").content

    def download_template(self) -> bytes:
        return self._request("GET", "/materials/excel-template").content

    def recent_activity(self) -> list[Activity]:
        return self._parse_activity(unwrap_collection(self._request_json("GET", "/audit-trail")))

    def material_activity(self, material_id: int) -> list[Activity]:
        payload = self._request_json("GET", f"/audit-trail/material/{material_id}")
        return self._parse_activity(unwrap_collection(payload))

    @staticmethod
    def _parse_material(payload: Any) -> MaterialRecord:
        if not isinstance(payload, Mapping):
            raise MalformedResponseError("API returned an unexpected material format.")
        try:
            return parse_material(payload)
        except ValidationError as exc:
            raise MalformedResponseError("API returned an invalid material.") from exc

    def _parse_materials(self, items: list[dict[str, Any]]) -> list[MaterialRecord]:
        return [self._parse_material(item) for item in items]

    @staticmethod
    def _parse_activity(items: list[dict[str, Any]]) -> list[Activity]:
        try:
            return [Activity.model_validate(item) for item in items]
        except ValidationError as exc:
            raise MalformedResponseError("API returned invalid activity entries.") from exc


__all__ = [
    "ApiClient",
    "AuthenticationRequired",
    "MalformedResponseError",
    "Page",
    "PictureUpload",
    "RequestError",
    "unwrap_collection",
]
