"""Command-line interface for Spotify playlist cleanup."""

import argparse
import sys

from . import auth, commands
from .api import SpotifyAPI
from .cleaner import PlaylistCleaner
from .errors import PlaylistCleanerError
from .logging_config import configure_logging, get_logger


logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(description="Find and remove duplicate tracks in Spotify playlists")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--progress", action="store_true", help="Show progress bars while modifying playlists"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # List command
    subparsers.add_parser("list", help="List all playlists with their duplicate tracks")

    # Duplicates command
    duplicates_parser = subparsers.add_parser(
        "duplicates", help="Show duplicate tracks of one playlist"
    )
    duplicates_parser.add_argument("playlist", help="Playlist ID, URI or URL")

    # Remove command
    remove_parser = subparsers.add_parser(
        "remove", help="Remove every copy of a track after its first occurrence"
    )
    remove_parser.add_argument("playlist", help="Playlist ID, URI or URL")
    remove_parser.add_argument("track", help="Track ID, URI or URL")
    remove_parser.add_argument(
        "--dry-run", action="store_true", help="Simulate operations without making changes"
    )

    # Collapse command
    collapse_parser = subparsers.add_parser(
        "collapse", help="Collapse duplicated tracks to one copy at their original position"
    )
    collapse_parser.add_argument("playlist", help="Playlist ID, URI or URL")
    collapse_parser.add_argument(
        "tracks", nargs="*", help="Track IDs, URIs or URLs (default: every duplicated track)"
    )
    collapse_parser.add_argument(
        "--dry-run", action="store_true", help="Simulate operations without making changes"
    )

    return parser


def build_command(args: argparse.Namespace, cleaner: PlaylistCleaner) -> commands.PlaylistCommand:
    """Create the command object for parsed arguments.

    Args:
        args: Parsed command line arguments
        cleaner: Cleaner bound to an authenticated client

    Returns:
        Command ready to validate and run

    Raises:
        ValueError: If the command is unknown
    """
    if args.command == "list":
        return commands.ListDuplicatesCommand(cleaner)
    if args.command == "duplicates":
        return commands.ListDuplicatesCommand(cleaner, playlist_id=args.playlist)
    if args.command == "remove":
        return commands.RemoveDuplicatesCommand(
            cleaner, args.playlist, args.track, dry_run=args.dry_run
        )
    if args.command == "collapse":
        return commands.CollapseDuplicatesCommand(
            cleaner, args.playlist, args.tracks, dry_run=args.dry_run
        )
    raise ValueError(f"Unknown command: {args.command}")


def main() -> int:
    """Main entry point.

    Returns:
        int: Exit code
    """
    parser = create_parser()
    try:
        args = parser.parse_args(args=None if sys.argv[1:] else ["--help"])
    except SystemExit as e:
        return 1 if e.code == 2 else e.code

    configure_logging(debug=args.debug)

    if not args.command:
        parser.print_help()
        return 1

    # Get Spotify client
    spotify = auth.get_spotify_service()
    if not spotify:
        logger.error("Command failed: %s", "Failed to get Spotify client")
        return 1

    cleaner = PlaylistCleaner(SpotifyAPI(spotify), progress=args.progress)

    # Execute command
    try:
        command = build_command(args, cleaner)
        if not command.run():
            logger.error("Command failed to run successfully")
            return 1
        return 0
    except PlaylistCleanerError as e:
        logger.error("Command failed: %s", str(e))
        return 1
    except Exception as e:
        logger.error("Command failed: %s", str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
