"""Error hierarchy for the Intelligence proxy.

Upstream failures never reach the HTTP layer through these classes except
where an endpoint has no fallback tier left (article detail).
"""


class IntelligenceError(Exception):
    """Base exception for errors surfaced to API callers."""

    def __init__(self, message: str, code: str, http_status: int = 500):
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the REST error envelope."""
        return {"error": {"code": self.code, "message": self.message}}


class IntelligenceClientError(IntelligenceError):
    """Intelligence API call failed (non-2xx, timeout or unreachable)."""

    def __init__(self, message: str, status: int, code: str | None = None):
        super().__init__(message, code or "INTELLIGENCE_API_ERROR", 502)
        self.status = status


class IntelligenceDisabledError(IntelligenceError):
    """Integration is administratively disabled and the endpoint has no mock."""

    def __init__(self):
        super().__init__(
            "Intelligence API not enabled", "INTELLIGENCE_DISABLED", 503,
        )


class ArticleUnavailableError(IntelligenceError):
    """Article detail could not be served from upstream or cache."""

    def __init__(self, article_id: int):
        super().__init__(
            f"Failed to fetch article {article_id} details",
            "ARTICLE_UNAVAILABLE",
            502,
        )
        self.article_id = article_id
