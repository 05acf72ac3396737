"""Configuration and environment settings."""

import os
from dotenv import load_dotenv

# Force reload of environment variables
load_dotenv(override=True)

# Directory Settings
DATA_DIR = os.getenv("DATA_DIR", "data")
CREDENTIALS_DIR = os.getenv("CREDENTIALS_DIR", os.path.join(DATA_DIR, "credentials"))
TOKEN_CACHE_FILE = os.path.join(CREDENTIALS_DIR, ".spotify_token_cache")

# Spotify API Settings
SPOTIPY_CLIENT_ID = os.getenv("SPOTIPY_CLIENT_ID")
SPOTIPY_CLIENT_SECRET = os.getenv("SPOTIPY_CLIENT_SECRET")
SPOTIPY_REDIRECT_URI = os.getenv("SPOTIPY_REDIRECT_URI", "http://127.0.0.1:8888/callback")
SPOTIFY_SCOPES = [
    "playlist-read-private",
    "playlist-read-collaborative",
    "playlist-modify-private",
    "playlist-modify-public",
]

# Paging and batching
PAGE_SIZE = 50  # Playlist items per page (Spotify max is 100)
PLAYLIST_PAGE_SIZE = 50  # Playlists per page when listing the user's playlists
MAX_BATCH_SIZE = 100  # Spotify rejects add/remove requests with more than 100 items

# Retry Settings
API_MAX_RETRIES = int(os.getenv("API_MAX_RETRIES", "3"))
API_RETRY_DELAY = float(os.getenv("API_RETRY_DELAY", "2.0"))
