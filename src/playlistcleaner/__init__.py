"""Spotify playlist duplicate cleaner."""

__version__ = "0.1.0"

# Import all public components
from .api import PlaylistAPI, SpotifyAPI
from .auth import create_client, get_spotify_service
from .batch import BatchMutationExecutor, chunked
from .cleaner import PlaylistCleaner
from .cli import main
from .commands import PlaylistCommand
from .connectivity import probe
from .deduplicate import (
    count_duplicates,
    find_duplicates,
    plan_collapse_removal,
    plan_reinsertion,
    plan_specific_removal,
)
from .errors import (
    AuthenticationRequiredError,
    ExternalServiceError,
    InvalidArgumentError,
    OperationCancelledError,
    PlaylistCleanerError,
    PlaylistNotFoundError,
    RateLimitError,
)
from .logging_config import configure_logging, get_logger
from .models import OtherMedia, PlayableTrack, PlaylistSummary, TrackRecord
from .reader import read_playlist, read_snapshot, read_tracks

# Import config variables
from .config import (  # noqa: F401
    SPOTIFY_SCOPES,
    CREDENTIALS_DIR,
    TOKEN_CACHE_FILE,
    PAGE_SIZE,
    MAX_BATCH_SIZE,
)

# Get logger for this module
logger = get_logger(__name__)
