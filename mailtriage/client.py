from typing import Any, List, Optional

import requests

from mailtriage.errors import NetworkFailure
from mailtriage.lib.shared.models.email import EmailRecord
from mailtriage.services.email.classification import ImportancePatch


class EmailApiClient:
    """
    Thin requests wrapper over the MailTriage HTTP API.
    Every failure, whether the transport broke or the API answered with an error
    status, is raised as NetworkFailure.
    """
    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 10, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            response = self.session.request(method, f"{self.base_url}{path}", headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise NetworkFailure("Network error") from e

        if not response.ok:
            raise NetworkFailure(f"{method} {path} failed", status_code=response.status_code)
        return response

    def _json(self, method: str, path: str, **kwargs) -> Any:
        response = self._request(method, path, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise NetworkFailure("Invalid response", status_code=response.status_code) from e

    def login(self, email: str, password: str) -> dict:
        data = self._json("POST", "/auth/login", json={"email": email, "password": password})
        try:
            self.token = data["token"]
            return data["user"]
        except (KeyError, TypeError) as e:
            raise NetworkFailure("Invalid response", status_code=200) from e

    def verify(self) -> bool:
        try:
            data = self._json("GET", "/auth/verify")
            return isinstance(data, dict) and data.get("valid") is True
        except NetworkFailure as e:
            if e.status_code == 401:
                return False
            raise

    def fetch_emails(self) -> List[EmailRecord]:
        data = self._json("GET", "/emails")
        if not isinstance(data, list):
            raise NetworkFailure("Invalid response", status_code=200)
        return [EmailRecord.from_json(item) for item in data]

    def update_importance(self, email_id: str, patch: ImportancePatch) -> None:
        self._request("PATCH", f"/emails/{email_id}/importance", json=patch.to_json())

    def mark_read(self, email_id: str) -> None:
        self._request("PATCH", f"/emails/{email_id}/read", json={"isRead": True})

    def delete_email(self, email_id: str) -> None:
        self._request("DELETE", f"/emails/{email_id}")
