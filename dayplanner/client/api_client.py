"""
HTTP client for the Scheduling API.

Every call has a bounded timeout. Transport failures and 5xx responses raise
ApiUnavailableError (retryable); domain failures are mapped back to the same
error classes the server raised.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from ..config import API_BASE_URL, API_TIMEOUT_SECONDS
from ..errors import ERRORS_BY_CODE, ApiError, ApiUnavailableError, GridIntegrityError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class SchedulingApiClient:
    def __init__(self, base_url: str = API_BASE_URL, timeout: float = API_TIMEOUT_SECONDS, http: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()

    # ================================
    # TRANSPORT
    # ================================

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.http.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            logger.warning(f"{method} {url} timed out after {self.timeout}s")
            raise ApiUnavailableError(f"Request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise ApiUnavailableError(f"Scheduling API unreachable: {e}") from e

        if response.status_code == 204:
            return None
        if response.ok:
            return response.json()
        raise self._error_from(response)

    def _error_from(self, response: requests.Response) -> Exception:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        code = body.get("error")
        detail = body.get("detail") or response.reason or "Request failed"
        status = response.status_code

        if code == GridIntegrityError.code:
            return GridIntegrityError(str(detail))
        if status >= 500:
            return ApiUnavailableError(f"Scheduling API error {status}: {detail}", status_code=status)

        error_cls = ERRORS_BY_CODE.get(code)
        if error_cls is not None:
            extra = {k: v for k, v in body.items() if k not in ("error", "detail")}
            if not isinstance(detail, str):
                extra["errors"] = detail
                detail = "Validation failed"
            return error_cls(detail, **extra)
        if status == 404:
            return NotFoundError(str(detail))
        if status == 400:
            return ValidationError(str(detail))
        return ApiError(f"Unexpected response {status}: {detail}", status_code=status)

    # ================================
    # SESSIONS
    # ================================

    def list_sessions(self, date: Optional[str] = None, start_date: Optional[str] = None, end_date: Optional[str] = None) -> List[Dict]:
        params = {}
        if date:
            params["date"] = date
        elif start_date and end_date:
            params["startDate"] = start_date
            params["endDate"] = end_date
        return self._request("GET", "/api/sessions", params=params)

    def get_session(self, session_id: int) -> Dict:
        return self._request("GET", f"/api/sessions/{session_id}")

    def create_session(self, payload: Dict) -> Dict:
        return self._request("POST", "/api/sessions", json=payload)

    def update_session(self, session_id: int, patch: Dict) -> Dict:
        return self._request("PUT", f"/api/sessions/{session_id}", json=patch)

    def delete_session(self, session_id: int) -> None:
        self._request("DELETE", f"/api/sessions/{session_id}")

    def get_day_grid(self, date: str) -> Dict:
        return self._request("GET", "/api/planner/grid", params={"date": date})

    # ================================
    # PALETTE
    # ================================

    def list_categories(self) -> List[Dict]:
        return self._request("GET", "/api/categories")

    def list_activities(self, category_id: Optional[int] = None) -> List[Dict]:
        params = {"category_id": category_id} if category_id is not None else {}
        return self._request("GET", "/api/activities", params=params)

    def health(self) -> Dict:
        return self._request("GET", "/health")
