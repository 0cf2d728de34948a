"""
Reachability probes for the two upstream APIs (Monday.com and Claude).

Every /health request probes both APIs, so the probes share one pooled
AsyncClient that the application lifespan opens at startup and closes at
shutdown; the keep-alive connections to the two hosts are reused across
health checks. The probes use the region-resolved endpoints from the
Configuration.
"""

import logging

import httpx

from bridge.config import Configuration
from bridge.models.health import ServiceStatus

logger = logging.getLogger(__name__)

UPSTREAM_TIMEOUT = 5.0
USER_AGENT = "monday-claude-bridge/1.0"

MONDAY_PROBE_QUERY = "{ me { id } }"

# One connection per upstream host is enough for a probe.
_UPSTREAM_LIMITS = httpx.Limits(max_connections=4, max_keepalive_connections=2)

_client: httpx.AsyncClient | None = None


def open_upstream_client() -> httpx.AsyncClient:
    """Open the pooled client used by the probes; idempotent."""
    global _client
    if _client is None:
        _client = httpx.AsyncClient(
            timeout=UPSTREAM_TIMEOUT,
            limits=_UPSTREAM_LIMITS,
            headers={"User-Agent": USER_AGENT},
        )
        logger.info("Upstream client opened (timeout %.1fs).", UPSTREAM_TIMEOUT)
    return _client


async def close_upstream_client() -> None:
    global _client
    client, _client = _client, None
    if client is not None:
        await client.aclose()
        logger.info("Upstream client closed.")


def _upstream_client() -> httpx.AsyncClient:
    if _client is None:
        raise RuntimeError("Upstream client is not initialised; the app lifespan has not started.")
    return _client


async def _probe(service: str, method: str, url: str, **kwargs) -> ServiceStatus:
    client = _upstream_client()
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.HTTPError as exc:
        logger.warning("%s API unreachable at %s: %s", service, url, exc)
        return ServiceStatus(status="unreachable", url=url, detail=str(exc))

    logger.debug("%s API answered HTTP %d at %s", service, response.status_code, url)
    return ServiceStatus(status="reachable", url=url, status_code=response.status_code)


async def check_monday_api(configuration: Configuration) -> ServiceStatus:
    """
    Probe the Monday.com GraphQL endpoint for the configured region.

    Any HTTP response (including 401 without a token) means the API is
    reachable; only transport failures mark it unreachable.
    """
    headers = {"Content-Type": "application/json"}
    if configuration.monday_api_token:
        headers["Authorization"] = configuration.monday_api_token

    return await _probe(
        "Monday.com",
        "POST",
        configuration.monday_api_url,
        headers=headers,
        json={"query": MONDAY_PROBE_QUERY},
    )


async def check_claude_api(configuration: Configuration) -> ServiceStatus:
    """Probe the Claude messages endpoint."""
    headers = {"anthropic-version": configuration.claude_api_version}
    if configuration.claude_api_key:
        headers["x-api-key"] = configuration.claude_api_key

    return await _probe("Claude", "GET", configuration.claude_api_url, headers=headers)
