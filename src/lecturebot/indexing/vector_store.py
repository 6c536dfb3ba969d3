"""
Vector Store Module - Similarity search over the lecture index.
===============================================================

The lecture chunks live in a Supabase (PostgreSQL + pgvector) table and are
searched through a PostgREST RPC function:

    POST {SUPABASE_URL}/rest/v1/rpc/search_lecture_chunks
    {"query_embedding": [...], "match_count": 3}

The store is read-only from this application's point of view; ingestion
happens elsewhere.
"""

import threading
from typing import Any, Optional

import requests

from lecturebot.shared.config import Settings
from lecturebot.shared.errors import UpstreamError
from lecturebot.shared.logging import get_logger
from lecturebot.shared.schemas import PassageChunk
from lecturebot.shared.utils import call_with_retry, truncate_text

logger = get_logger(__name__)

PROVIDER = "search"

# Row keys that may carry the passage label / similarity, in priority order
SOURCE_KEYS = ("source", "lecture_title", "title")
SCORE_KEYS = ("similarity", "score")


class SupabaseVectorStore:
    """
    Similarity search client for the Supabase lecture index.

    Example:
        >>> store = SupabaseVectorStore(settings)
        >>> chunks = store.query(embedding, match_count=3)
        >>> for chunk in chunks:
        ...     print(chunk.score, chunk.content[:40])
    """

    def __init__(
        self,
        settings: Settings,
        base_url: Optional[str] = None,
        service_key: Optional[str] = None,
        rpc_function: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the store client.

        Args:
            settings: Application settings
            base_url: Supabase project URL (default SUPABASE_URL)
            service_key: Service role key (default SUPABASE_SERVICE_KEY)
            rpc_function: Name of the search RPC function
            session: Pre-built requests session, mainly for tests
        """
        retrieval_config = settings.retrieval

        self.base_url = (base_url or settings.supabase_url).rstrip("/")
        self.service_key = service_key or settings.supabase_service_key
        self.rpc_function = rpc_function or retrieval_config.rpc_function
        self.timeout = retrieval_config.timeout_seconds
        self._resilience = settings.resilience
        # Injected sessions are shared; otherwise each worker thread gets its own
        self._session = session
        self._local = threading.local()

        logger.debug(
            f"Supabase store configured: rpc={self.rpc_function}, timeout={self.timeout}s"
        )

    @property
    def session(self) -> requests.Session:
        """Get or create the requests session for the calling thread."""
        if self._session is not None:
            return self._session

        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(
                {
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                }
            )
            self._local.session = session
        return session

    @property
    def rpc_url(self) -> str:
        """Full URL of the search RPC endpoint."""
        return f"{self.base_url}/rest/v1/rpc/{self.rpc_function}"

    def _auth_headers(self) -> dict[str, str]:
        return {
            "apikey": self.service_key,
            "Authorization": f"Bearer {self.service_key}",
        }

    def query(
        self,
        embedding: list[float],
        match_count: int,
        match_threshold: Optional[float] = None,
    ) -> list[PassageChunk]:
        """
        Fetch the passages most similar to an embedding.

        Args:
            embedding: Query embedding
            match_count: Maximum number of passages to return
            match_threshold: Optional minimum similarity, forwarded to the RPC

        Returns:
            Passages in the order reported by the service (most similar first).
            An empty list means nothing relevant was found.

        Raises:
            UpstreamError: On transport failure, non-success status or malformed payload
        """
        body: dict[str, Any] = {
            "query_embedding": embedding,
            "match_count": match_count,
        }
        if match_threshold is not None:
            body["match_threshold"] = match_threshold

        rows = call_with_retry(
            lambda: self._post_rpc(body),
            operation="similarity search",
            max_attempts=self._resilience.max_attempts,
            min_wait=self._resilience.retry_min_wait,
            max_wait=self._resilience.retry_max_wait,
        )
        return [self._row_to_chunk(row) for row in rows]

    def _post_rpc(self, body: dict[str, Any]) -> list[Any]:
        """Call the RPC endpoint once and return the decoded row list."""
        if not self.base_url or not self.service_key:
            raise UpstreamError(
                PROVIDER,
                "Supabase is not configured. Set SUPABASE_URL and SUPABASE_SERVICE_KEY.",
            )

        try:
            response = self.session.post(
                self.rpc_url,
                json=body,
                headers=self._auth_headers(),
                timeout=self.timeout,
            )
        except (requests.Timeout, requests.ConnectionError) as e:
            raise UpstreamError(PROVIDER, f"transport failure: {e}", retryable=True) from e
        except requests.RequestException as e:
            raise UpstreamError(PROVIDER, f"request failed: {e}") from e

        if not response.ok:
            raise UpstreamError.from_status(
                PROVIDER,
                response.status_code,
                truncate_text(response.text or "", 300),
            )

        try:
            rows = response.json()
        except ValueError as e:
            raise UpstreamError(PROVIDER, "response is not valid JSON") from e

        if not isinstance(rows, list):
            raise UpstreamError(PROVIDER, f"expected a list of rows, got {type(rows).__name__}")

        return rows

    @staticmethod
    def _row_to_chunk(row: Any) -> PassageChunk:
        """Convert one RPC row to a PassageChunk."""
        if not isinstance(row, dict) or not isinstance(row.get("content"), str):
            raise UpstreamError(PROVIDER, "row has no 'content' text")

        source = next((str(row[k]) for k in SOURCE_KEYS if row.get(k)), None)

        score = None
        for key in SCORE_KEYS:
            value = row.get(key)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                score = float(value)
                break

        return PassageChunk(content=row["content"], source=source, score=score)

    def get_info(self) -> dict[str, Any]:
        """Get store information."""
        return {
            "backend": "supabase",
            "rpc_function": self.rpc_function,
            "url_set": bool(self.base_url),
            "key_set": bool(self.service_key),
        }
