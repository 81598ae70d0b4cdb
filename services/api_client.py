"""
HTTP client for the condominium backend
"""
from typing import Any, Dict, Optional

import requests

from config import settings
from services.errors import ApiError, SessionExpiredError, extract_error_message
from storage.token_store import TokenStore
from utils.logging_config import logger


class ApiClient:
    """
    Thin wrapper over a requests session.
    Adds the bearer token to every call and turns failures into ApiError.
    """

    def __init__(
        self,
        base_url: str = None,
        token_store: TokenStore = None,
        timeout: float = None,
        session: requests.Session = None,
    ):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.token_store = token_store or TokenStore()
        self.timeout = timeout or settings.API_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def _headers(self) -> Dict[str, str]:
        token = self.token_store.get_access_token()
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    @staticmethod
    def _is_session_check(path: str) -> bool:
        return any(check in path for check in settings.SESSION_CHECK_PATHS)

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None when empty)"""
        url = f"{self.base_url}{path}"
        headers = self._headers()
        if files is not None:
            # Let requests set the multipart boundary
            headers["Content-Type"] = None

        if params:
            params = {k: v for k, v in params.items() if v is not None and v != ""}

        try:
            response = self.session.request(
                method,
                url,
                params=params or None,
                json=json,
                data=data,
                files=files,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError("Network error") from e

        if response.status_code >= 400:
            message = extract_error_message(response)
            if response.status_code == 401 and self._is_session_check(path):
                # Only the core session check forces a logout
                logger.warning("Session check rejected, clearing stored tokens")
                self.token_store.clear()
                raise SessionExpiredError(message, status_code=401)
            logger.error(f"{method} {path} -> {response.status_code}: {message}")
            raise ApiError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None, data=None, files=None) -> Any:
        return self.request("POST", path, json=json, data=data, files=files)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def patch(self, path: str, json: Any = None) -> Any:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)
