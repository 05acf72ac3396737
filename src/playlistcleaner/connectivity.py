"""Pre-flight check that the Spotify session is usable."""

from .api import PlaylistAPI
from .logging_config import get_logger

logger = get_logger(__name__)


async def probe(api: PlaylistAPI) -> bool:
    """Check that the client can talk to Spotify as an authenticated user.

    Any failure is logged and reported as False. Task cancellation is
    not a connectivity failure and still propagates.

    Args:
        api: Remote playlist API

    Returns:
        True if the current user profile could be read
    """
    try:
        logger.debug("Testing Spotify client connection")
        user = await api.get_current_identity()
    except Exception as e:
        logger.error("Client connection check failed: %s", str(e))
        return False

    logger.info("Client is connected. User: %s", (user or {}).get("display_name"))
    return True
