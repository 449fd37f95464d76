"""Agency Portal — Meta Graph API Client.

Handles authentication, retry logic, rate limiting, pagination and the
translation of Graph API error payloads into the portal error taxonomy.
"""

import asyncio
from typing import Any, Dict, List, Optional

import httpx

from app.config import settings
from app.core.errors import TransportFailure, UpstreamRejected
from app.core.logging import get_logger

logger = get_logger("meta.client")

META_BASE = f"{settings.meta_base_url}/{settings.meta_api_version}"
MAX_RETRIES = 3
RETRY_BASE_DELAY = 2  # seconds


def _error_payload(resp: httpx.Response) -> Optional[Dict[str, Any]]:
    """Return the Graph API `error` object of a response, if it carries one."""
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return body["error"]
    return None


def _rejected(error: Dict[str, Any], status_code: int) -> UpstreamRejected:
    return UpstreamRejected(
        error.get("message", "Unknown Meta API error"),
        error_code=error.get("code", 0),
        status_code=status_code,
    )


class MetaClient:
    """Async HTTP client for the Meta Graph API, bound to one access token."""

    def __init__(
        self,
        access_token: str,
        ad_account_id: str = "",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_base_delay: float = RETRY_BASE_DELAY,
    ):
        self.access_token = access_token
        self.ad_account_id = ad_account_id
        self.retry_base_delay = retry_base_delay
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=30.0, transport=self._transport)
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "MetaClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _backoff(self, attempt: int) -> float:
        return self.retry_base_delay * (2 ** (attempt - 1))

    # ── Core Request Method ──

    async def _request(
        self,
        method: str,
        url: str,
        params: Dict[str, Any] | None = None,
        authenticate: bool = True,
    ) -> Dict[str, Any]:
        """Make a request with retry + rate-limit handling.

        Raises UpstreamRejected when Meta answers with an `error` object and
        TransportFailure when no usable answer arrives after all retries.
        """
        params = dict(params or {})
        if authenticate:
            params["access_token"] = self.access_token

        client = await self._get_client()

        for attempt in range(1, MAX_RETRIES + 1):
            try:
                resp = await client.request(method, url, params=params or None)
            except httpx.RequestError as e:
                if attempt < MAX_RETRIES:
                    wait = self._backoff(attempt)
                    logger.warning(f"Request error: {e}. Retrying in {wait}s")
                    await asyncio.sleep(wait)
                    continue
                raise TransportFailure(
                    f"Connection failed after {MAX_RETRIES} retries: {e}"
                ) from e

            # Rate limited
            if resp.status_code == 429 and attempt < MAX_RETRIES:
                wait = self._backoff(attempt)
                logger.warning(
                    f"Rate limited (429). Retrying in {wait}s (attempt {attempt}/{MAX_RETRIES})",
                    extra={"status_code": 429},
                )
                await asyncio.sleep(wait)
                continue

            if resp.status_code >= 500 and attempt < MAX_RETRIES:
                wait = self._backoff(attempt)
                logger.warning(
                    f"Server error {resp.status_code}. Retrying in {wait}s",
                    extra={"status_code": resp.status_code},
                )
                await asyncio.sleep(wait)
                continue

            error = _error_payload(resp)
            if error is not None:
                raise _rejected(error, resp.status_code)

            if resp.is_error:
                raise TransportFailure(
                    f"Meta API returned HTTP {resp.status_code} without an error body"
                )

            try:
                return resp.json()
            except ValueError as e:
                raise TransportFailure(f"Meta API returned invalid JSON: {e}") from e

        raise TransportFailure("Max retries exhausted")

    # ── Pagination ──

    async def _paginated_get(
        self,
        url: str,
        params: Dict[str, Any] | None = None,
        max_pages: int | None = None,
    ) -> List[Dict[str, Any]]:
        """Fetch pages of a cursor-paginated endpoint, up to max_pages."""
        max_pages = max_pages or settings.meta_max_pages
        all_data: List[Dict[str, Any]] = []
        current_url = url

        for page in range(max_pages):
            if page == 0:
                result = await self._request("GET", current_url, params)
            else:
                # `next` links already carry the token and the query
                result = await self._request("GET", current_url, authenticate=False)
            all_data.extend(result.get("data", []))

            next_url = result.get("paging", {}).get("next")
            if not next_url:
                break
            current_url = next_url
        else:
            logger.warning(
                f"Stopped after {max_pages} pages of {url}; results may be truncated"
            )

        logger.info(f"Fetched {len(all_data)} records from {url}")
        return all_data

    # ── Token Validation ──

    async def validate_token(self) -> Dict[str, Any]:
        """Check the access token against the identity endpoint.

        Never raises: the outcome is reported as {valid, message, id, name}.
        """
        url = f"{META_BASE}/me"
        try:
            result = await self._request("GET", url, {"fields": "id,name"})
        except UpstreamRejected as e:
            return {"valid": False, "message": str(e), "id": "", "name": ""}
        except TransportFailure as e:
            logger.warning(f"Token validation network error: {e}")
            return {
                "valid": False,
                "message": "Network error while validating token.",
                "id": "",
                "name": "",
            }
        name = result.get("name", "")
        user_id = result.get("id", "")
        return {
            "valid": True,
            "message": f"Token valid. Connected as: {name} (ID: {user_id})",
            "id": user_id,
            "name": name,
        }
