"""
Command line for syncing local tournaments with a tournament server.

    mjscores-sync config [URL]    (no URL: show the server URL and environment config)
    mjscores-sync local
    mjscores-sync remote
    mjscores-sync upload (--all | LOCAL_ID...)
    mjscores-sync download (--all | REMOTE_ID...) [--dedup]
    mjscores-sync seed
"""
import argparse
import logging
import sys

from mjscores.client import TournamentAPIClient
from mjscores.config import AppConfig, print_config
from mjscores.errors import SyncError
from mjscores.log import init_logging
from mjscores.reconcile import AlwaysNewReconciler, BusinessKeyReconciler
from mjscores.seed import seed_sample_tournaments
from mjscores.settings import get_server_url, set_server_url
from mjscores.store import SQLiteTournamentStore
from mjscores.sync import SyncOrchestrator, select_remote

logger = logging.getLogger("mjscores.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mjscores-sync", description="Sync MahJong tournaments with a server")
    parser.add_argument("--db", default=AppConfig.DB_PATH, help="local tournament database")
    parser.add_argument("--settings", default=AppConfig.SETTINGS_PATH, help="settings file")
    parser.add_argument("--server", help="server URL for this run only")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    config = sub.add_parser("config", help="show or set the server URL; with no URL also print the environment config")
    config.add_argument("url", nargs="?")

    sub.add_parser("local", help="list local tournaments")
    sub.add_parser("remote", help="list tournaments on the server")
    sub.add_parser("seed", help="add sample tournaments locally")

    upload = sub.add_parser("upload", help="upload local tournaments")
    upload.add_argument("ids", nargs="*", metavar="LOCAL_ID")
    upload.add_argument("--all", action="store_true")

    download = sub.add_parser("download", help="download tournaments from the server")
    download.add_argument("ids", nargs="*", metavar="REMOTE_ID")
    download.add_argument("--all", action="store_true")
    download.add_argument("--dedup", action="store_true",
                          help="overwrite local tournaments with the same rule set, date and players")
    return parser


def _print_progress(message: str):
    print(message)


def cmd_config(args) -> int:
    if args.url:
        try:
            url = set_server_url(args.url, args.settings)
        except ValueError as e:
            print(f"Error: {e}")
            return 2
        print(f"Server URL saved: {url}")
    else:
        print(f"Server URL: {get_server_url(args.settings)}")
        print_config(AppConfig)
    return 0


def cmd_local(store) -> int:
    tournaments = store.query_all()
    if not tournaments:
        print("No tournaments available")
        return 0
    for t in tournaments:
        print(f"{t.local_id}  {t.label()}")
        print(f"    {t.describe()}")
    return 0


def cmd_remote(orchestrator) -> int:
    remote = orchestrator.list_remote(on_progress=_print_progress)
    if not remote:
        print("No tournaments on server")
    for t in remote:
        print(f"{t.id}  {t.summary()}")
        print(f"    {t.describe()}")
    return 0


def cmd_upload(args, store, orchestrator) -> int:
    tournaments = store.query_all()
    if not args.all:
        wanted = set(args.ids)
        tournaments = [t for t in tournaments if t.local_id in wanted]
    if not tournaments:
        print("Nothing selected to upload")
        return 2

    result = orchestrator.upload(tournaments, on_progress=_print_progress)
    for tournament, error in result.failures:
        print(f"  ✗ {tournament.label()}: {error}")
    return 0 if result.clean else 1


def cmd_download(args, orchestrator) -> int:
    remote = orchestrator.list_remote(on_progress=_print_progress)
    selected = remote if args.all else select_remote(remote, args.ids)
    if not selected:
        print("Nothing selected to download")
        return 2

    result = orchestrator.download(selected, on_progress=_print_progress)
    return 0 if result.clean else 1


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    init_logging("sync", level=logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "config":
        return cmd_config(args)

    try:
        store = SQLiteTournamentStore(args.db)
    except SyncError as e:
        print(f"Error: {e}")
        return 1

    with store:
        if args.command == "local":
            return cmd_local(store)
        if args.command == "seed":
            seed_sample_tournaments(store)
            return cmd_local(store)

        try:
            client = TournamentAPIClient(args.server or get_server_url(args.settings))
        except ValueError as e:
            print(f"Error: {e}")
            return 2

        reconciler = BusinessKeyReconciler() if getattr(args, "dedup", False) else AlwaysNewReconciler()
        orchestrator = SyncOrchestrator(client, store, reconciler)

        try:
            if args.command == "remote":
                return cmd_remote(orchestrator)
            if args.command == "upload":
                return cmd_upload(args, store, orchestrator)
            if args.command == "download":
                return cmd_download(args, orchestrator)
        except SyncError as e:
            print(f"Sync error: {e}")
            return 1
        finally:
            print(f"Status: {'Connected' if client.is_connected else 'Not Connected'}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
