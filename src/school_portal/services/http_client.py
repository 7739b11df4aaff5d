'''
Shared HTTP client for the school backend.
1- http_client: one httpx.AsyncClient (connection pool) for the whole app
2- create_http_client / dispose_http_client: called by the app's lifespan
3- get_http_client: dependency handing the shared client to services
'''
import httpx

from ..common.config import settings
from ..common.logger import log

# Created by the app's lifespan.
http_client: httpx.AsyncClient | None = None

def create_http_client() -> httpx.AsyncClient:
    """
    Creates the pooled client pointed at the student API.
    This is called by the app's lifespan event.
    """
    global http_client

    log.info(f"Creating HTTP client for {settings.student_api_url} ...")
    http_client = httpx.AsyncClient(
        base_url=settings.student_api_url,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
        headers={"Accept": "application/json"},
    )
    log.info("HTTP client created successfully.")
    return http_client

async def dispose_http_client():
    """Closes the pool. Called by the app's lifespan."""
    global http_client
    if http_client:
        await http_client.aclose()
        log.info("HTTP client closed.")
    http_client = None

def get_http_client() -> httpx.AsyncClient:
    """
    FastAPI dependency that provides the shared client.
    """
    if http_client is None:
        log.error("HTTP client is not initialized. App lifespan may not have run.")
        raise RuntimeError("HTTP client is not available.")
    return http_client
