import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException

from canvasreport.api.models import (
    Assignment,
    AssignmentGroup,
    Course,
    Enrollment,
    GradingPeriod,
    Observee,
    Submission,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_POOL_SIZE = 32

# Raised by the model constructors on records missing fields or carrying bad values
PARSE_ERRORS = (AttributeError, KeyError, TypeError, ValueError)


class CanvasAPIError(RuntimeError):
    """Raised when Canvas answers with a non-200 status or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class CanvasClient:
    """
    Thin client for the parts of the Canvas LMS REST API the report needs.

    Every list endpoint is paginated through the ``Link: <...>; rel="next"`` header, and
    every result is returned as instances of ``canvasreport.api.models``.

    Args:
        base_url (str): The Canvas instance, e.g. "https://myschool.instructure.com".
        access_token (str): A personal access token of the observer account.
        timeout (float, optional): Per-request timeout in seconds. Defaults to 30.
        pool_maxsize (int, optional): Connections kept per host, at least the number of
            threads sharing the client. Defaults to 32.
    """

    def __init__(
        self,
        base_url: str,
        access_token: str,
        timeout: float = 30,
        pool_maxsize: int = DEFAULT_POOL_SIZE,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers["Authorization"] = f"Bearer {access_token}"
        adapter = HTTPAdapter(pool_connections=pool_maxsize, pool_maxsize=pool_maxsize)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

    def observees(self) -> List[Observee]:
        return self._get_paginated(
            "/api/v1/users/self/observees", None, Observee.from_json
        )

    def courses(self, user_id: int) -> List[Course]:
        params = {"enrollment_state": "active"}
        return self._get_paginated(
            f"/api/v1/users/{user_id}/courses", params, Course.from_json
        )

    def assignments(self, course_id: int) -> List[Assignment]:
        params = {"per_page": 100}
        return self._get_paginated(
            f"/api/v1/courses/{course_id}/assignments", params, Assignment.from_json
        )

    def submissions(self, course_id: int, student_id: int) -> List[Submission]:
        params = {"student_ids[]": str(student_id), "per_page": 100}
        return self._get_paginated(
            f"/api/v1/courses/{course_id}/students/submissions",
            params,
            Submission.from_json,
        )

    def grading_periods(self, course_id: int) -> List[GradingPeriod]:
        """
        Lists the grading periods of a course.

        Unlike the other endpoints this one returns a single object wrapping the list,
        so it is not paginated.
        """
        response = self._get(f"{self.base_url}/api/v1/courses/{course_id}/grading_periods")
        data = self._json(response)
        try:
            return [GradingPeriod.from_json(p) for p in data.get("grading_periods") or []]
        except PARSE_ERRORS as e:
            raise CanvasAPIError(f"Malformed grading period in Canvas response: {e!r}") from e

    def enrollments(
        self, course_id: int, student_id: int, grading_period_id: Optional[str] = None
    ) -> List[Enrollment]:
        params: Dict[str, Any] = {
            "user_id": str(student_id),
            "type[]": "StudentEnrollment",
            "include[]": "current_points",
        }
        if grading_period_id:
            params["grading_period_id"] = grading_period_id
        return self._get_paginated(
            f"/api/v1/courses/{course_id}/enrollments", params, Enrollment.from_json
        )

    def assignment_groups(self, course_id: int) -> List[AssignmentGroup]:
        params = {"include[]": "assignments"}
        return self._get_paginated(
            f"/api/v1/courses/{course_id}/assignment_groups",
            params,
            AssignmentGroup.from_json,
        )

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        logger.debug("GET %s %s", url, params or "")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except RequestException as e:
            raise CanvasAPIError(f"Failed to reach Canvas: {e}") from e

        if response.status_code != 200:
            raise CanvasAPIError(
                f"Canvas API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )
        return response

    @staticmethod
    def _json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise CanvasAPIError("Failed to parse Canvas JSON response") from e

    def _get_paginated(
        self,
        path: str,
        params: Optional[Dict[str, Any]],
        parse: Callable[[Dict[str, Any]], T],
    ) -> List[T]:
        results: List[T] = []
        url: Optional[str] = self.base_url + path

        while url:
            response = self._get(url, params)
            try:
                results.extend(parse(item) for item in self._json(response))
            except PARSE_ERRORS as e:
                raise CanvasAPIError(
                    f"Malformed record in Canvas response from {path}: {e!r}"
                ) from e

            # The next link already carries the query string
            params = None
            url = response.links.get("next", {}).get("url")

        return results
