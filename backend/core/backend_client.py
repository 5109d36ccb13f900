"""
HTTP client for the course generation backend.
"""
import logging
from typing import Optional, List, Dict, Any

import httpx

from core.config import (
    BACKEND_API_URL,
    BACKEND_API_TOKEN,
    BACKEND_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Raised when a backend call fails; message is user-presentable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class BackendClient:
    """Client for the curriculum/content/quiz generation and save endpoints."""

    def __init__(
        self,
        base_url: str = BACKEND_API_URL,
        token: Optional[str] = BACKEND_API_TOKEN,
        timeout: float = BACKEND_TIMEOUT_SECONDS,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.client = client or httpx.Client(timeout=timeout)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _post(self, path: str, payload: Dict[str, Any], fallback_error: str) -> Dict[str, Any]:
        """POST a JSON payload and return the decoded JSON body."""
        url = f"{self.base_url}{path}"
        try:
            response = self.client.post(url, json=payload, headers=self._headers())
        except httpx.HTTPError as e:
            logger.error(f"Backend request to {path} failed: {e}")
            raise BackendError(f"{fallback_error}: {e}") from e

        if response.is_error:
            message = _extract_error_message(response) or fallback_error
            if response.status_code in (401, 403):
                message = f"Authentication error: {message}. Please check your login status."
            logger.error(f"Backend {path} returned {response.status_code}: {message}")
            raise BackendError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise BackendError(f"{fallback_error}: invalid JSON response", response.status_code) from e

        if not isinstance(data, dict):
            raise BackendError(f"{fallback_error}: unexpected response shape", response.status_code)
        return data

    def generate_curriculum(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """Generate a curriculum outline. Returns {curriculum}."""
        return self._post(
            "/academic-courses/generate-curriculum",
            request,
            "Failed to generate curriculum",
        )

    def process_curriculum(self, curriculum: str, course_data: Dict[str, Any]) -> Dict[str, Any]:
        """Split a curriculum into modules. Returns {modules}."""
        return self._post(
            "/academic-courses/process-curriculum",
            {"curriculum": curriculum, "courseData": course_data},
            "Failed to process curriculum",
        )

    def generate_detailed_content(
        self,
        course_id: str,
        module_index: int,
        academic_level: str,
        subject: str,
    ) -> Dict[str, Any]:
        """Generate detailed subsections for one module."""
        return self._post(
            "/academic-courses/generate-detailed-content",
            {
                "courseId": course_id,
                "moduleIndex": module_index,
                "academicLevel": academic_level,
                "subject": subject,
            },
            "Failed to generate detailed content",
        )

    def generate_quiz(
        self,
        module_content: str,
        difficulty: str,
        context: Dict[str, Any],
        provider: str,
    ) -> Dict[str, Any]:
        """Generate a quiz. Returns {questions, metadata: {generatedWith}}."""
        return self._post(
            "/academic-courses/generate-quiz",
            {
                "moduleContent": module_content,
                "difficulty": difficulty,
                "context": context,
                "provider": provider,
            },
            "Failed to create quiz",
        )

    def save_course(self, course: Dict[str, Any]) -> Dict[str, Any]:
        """Persist a course or module. Returns {courseId} and/or {course}."""
        return self._post(
            "/academic-courses/save-course",
            {"course": course},
            "Failed to save course",
        )

    def close(self) -> None:
        self.client.close()


def _extract_error_message(response: httpx.Response) -> Optional[str]:
    """Best-available server message from an error response."""
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return text[:200] if text else None

    if isinstance(body, dict):
        for key in ("error", "details", "message", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return None
