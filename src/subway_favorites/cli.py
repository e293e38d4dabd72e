#!/usr/bin/env python3
"""Command-line interface for managing favorite subway paths."""

from __future__ import annotations

from .config import LOG_LEVEL
from .errors import SubwayError
from .logging_config import setup_logging
from .routing import PathType
from .service import FavoriteResolutionService, create_service


def print_banner():
    """Print the welcome banner."""
    print("""
╔═══════════════════════════════════════════════════════════╗
║                 Subway Favorites 🚇                       ║
║                                                           ║
║  Commands:                                                ║
║    /path Kangnam > Dogok    - Show the shortest path      ║
║    /time Kangnam > Dogok    - Show the fastest path       ║
║    /add Kangnam > Dogok     - Save a favorite path        ║
║    /list                    - List your favorites         ║
║    /remove 3                - Delete favorite #3          ║
║    /stations                - List all stations           ║
║    /quit                    - Exit the program            ║
╚═══════════════════════════════════════════════════════════╝
""")


def _split_pair(args: str) -> tuple[str, str]:
    source, sep, target = args.partition(">")
    if not sep or not source.strip() or not target.strip():
        raise ValueError("Use: <from station> > <to station>")
    return source.strip(), target.strip()


def _describe(service: FavoriteResolutionService, path) -> str:
    names = " → ".join(s.name for s in service.stations_on(path))
    return (
        f"{names}\n"
        f"  {path.distance:g} m, ~{path.duration:g} min, {path.transfer_count} transfer(s)"
    )


def handle_command(service: FavoriteResolutionService, member_id: str, line: str) -> str:
    """Run one CLI command and return the text to show."""
    command, _, args = line.partition(" ")
    command = command.lower()

    if command in ("/path", "/time"):
        path_type = PathType.DURATION if command == "/time" else PathType.DISTANCE
        source, target = _split_pair(args)
        return _describe(service, service.find_path(source, target, path_type))

    if command == "/add":
        source, target = _split_pair(args)
        favorite = service.register_favorite(member_id, source, target)
        return f"Saved favorite #{favorite.id}: {_describe(service, favorite.path)}"

    if command == "/list":
        favorites = service.retrieve_favorites(member_id)
        if not favorites:
            return "No favorite paths yet."
        return "\n".join(
            f"#{f.id} {f.source.name} → {f.target.name} ({f.path.distance:g} m)"
            for f in favorites
        )

    if command == "/remove":
        try:
            favorite_id = int(args.strip())
        except ValueError:
            raise ValueError("Use: /remove <favorite id>") from None
        service.delete_favorite(member_id, favorite_id)
        return f"Removed favorite #{favorite_id}"

    if command == "/stations":
        return ", ".join(s.name for s in service.graph.stations)

    return f"Unknown command: {command}"


def main():
    """Run the interactive CLI."""
    setup_logging(LOG_LEVEL)
    service = create_service()
    print_banner()

    member_id = "cli_user"

    try:
        while True:
            try:
                user_input = input("\nYou: ").strip()

                if not user_input:
                    continue

                if user_input.lower() in ["/quit", "/exit", "/q"]:
                    print("\nGoodbye! Safe travels! 🚇")
                    break

                print(handle_command(service, member_id, user_input))

            except (KeyboardInterrupt, EOFError):
                print("\n\nGoodbye! Safe travels! 🚇")
                break
            except (SubwayError, ValueError) as e:
                print(f"\n[Error: {e}]")
    finally:
        service.close()


if __name__ == "__main__":
    main()
