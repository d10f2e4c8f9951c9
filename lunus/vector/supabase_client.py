"""
Supabase Client

Minimal PostgREST client for the Supabase products table.
Handles authentication headers, rate limiting and retries.
"""

import logging
import os
import time
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class SupabaseClient:
    """
    REST client for a Supabase project.

    Handles:
    - apikey / bearer authentication
    - Rate limiting between requests
    - Retries on 429 and 5xx
    - Upsert, update, select and RPC calls

    Usage:
        client = SupabaseClient.from_env()
        client.upsert("products", rows, on_conflict="id")
        client.update("products", {"image_embedding": vector}, "id", product_url)
        matches = client.rpc("match_products_by_image", {...})
    """

    MAX_RETRIES = 3
    RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

    def __init__(self, url: str, key: str, timeout: int = 30):
        """
        Initialize the client.

        Args:
            url: Project URL (https://<ref>.supabase.co)
            key: Service role key (or anon key for read-only use)
            timeout: Request timeout in seconds
        """
        self.url = url.rstrip("/")
        self.rest_url = f"{self.url}/rest/v1"
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        })

        self.requests_made = 0
        self.last_request_time = 0.0
        self.min_request_interval = 0.1

    @classmethod
    def from_env(cls) -> "SupabaseClient":
        """
        Create a client from environment variables.

        Raises:
            ValueError: If the URL or key is not set
        """
        url = os.environ.get("SUPABASE_URL") or os.environ.get("NEXT_PUBLIC_SUPABASE_URL")
        key = (os.environ.get("SUPABASE_SERVICE_ROLE_KEY")
               or os.environ.get("NEXT_PUBLIC_SUPABASE_ANON_KEY"))
        if not url or not key:
            raise ValueError(
                "Supabase credentials missing: set SUPABASE_URL (or NEXT_PUBLIC_SUPABASE_URL) "
                "and SUPABASE_SERVICE_ROLE_KEY (or NEXT_PUBLIC_SUPABASE_ANON_KEY)"
            )
        return cls(url, key)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def _rate_limit(self):
        now = time.time()
        elapsed = now - self.last_request_time

        if elapsed < self.min_request_interval:
            time.sleep(self.min_request_interval - elapsed)

        self.last_request_time = time.time()
        self.requests_made += 1

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, str]] = None,
        data: Any = None,
        prefer: Optional[str] = None,
    ) -> Optional[Any]:
        """
        Make a REST request with rate limiting and error handling.

        Args:
            method: HTTP method (GET, POST, PATCH)
            path: Path below /rest/v1 (e.g. "products", "rpc/match_products_by_image")
            params: Query parameters (PostgREST filters)
            data: JSON body
            prefer: Value for the Prefer header

        Returns:
            Response JSON, [] for an empty body, or None on error
        """
        if method not in ("GET", "POST", "PATCH"):
            raise ValueError(f"Unsupported method: {method}")

        url = f"{self.rest_url}/{path.lstrip('/')}"
        headers = {"Prefer": prefer} if prefer else None

        for attempt in range(self.MAX_RETRIES):
            self._rate_limit()

            try:
                response = self.session.request(
                    method, url, params=params, json=data, headers=headers, timeout=self.timeout
                )

                if response.status_code in self.RETRYABLE_STATUS_CODES:
                    retry_after = int(response.headers.get("Retry-After", 2 ** attempt))
                    logger.warning("HTTP %d on %s, retry %d/%d in %ds...",
                                   response.status_code, path, attempt + 1,
                                   self.MAX_RETRIES, retry_after)
                    time.sleep(retry_after)
                    continue

                if response.status_code >= 400:
                    logger.error("Supabase error %d on %s: %s",
                                 response.status_code, path, response.text[:200])
                    return None

                if not response.content:
                    return []
                return response.json()

            except requests.exceptions.Timeout:
                logger.error("Request timeout: %s", path)
                return None
            except requests.exceptions.RequestException as e:
                logger.error("Request failed: %s", e)
                return None

        logger.error("Max retries (%d) exceeded for %s %s", self.MAX_RETRIES, method, path)
        return None

    def upsert(self, table: str, rows: List[Dict[str, Any]], on_conflict: str = "id") -> bool:
        """Insert rows, merging on the conflict column. Returns True on success."""
        result = self.request(
            "POST", table,
            params={"on_conflict": on_conflict},
            data=rows,
            prefer="resolution=merge-duplicates,return=minimal",
        )
        return result is not None

    def update(self, table: str, values: Dict[str, Any], column: str, value: Any) -> bool:
        """Update rows where column equals value. Returns True on success."""
        result = self.request(
            "PATCH", table,
            params={column: f"eq.{value}"},
            data=values,
            prefer="return=minimal",
        )
        return result is not None

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Dict[str, str]] = None,
        limit: Optional[int] = None,
    ) -> Optional[List[Dict[str, Any]]]:
        """
        Select rows.

        Args:
            filters: PostgREST filters, e.g. {"brand": "eq.일룸", "image_embedding": "is.null"}
        """
        params = {"select": columns}
        params.update(filters or {})
        if limit:
            params["limit"] = str(limit)
        return self.request("GET", table, params=params)

    def rpc(self, function: str, params: Dict[str, Any]) -> Optional[Any]:
        """Call a database function."""
        return self.request("POST", f"rpc/{function}", data=params)
