import argparse
import logging
import sys

from torrentmeta.bencoding.errors import DecodeError
from torrentmeta.torrent.errors import TorrentError
from torrentmeta.torrent.metainfo import Torrent
from torrentmeta.torrent.parser import TorrentFileParser


def setup_logging(log_file: str, verbose: bool = False):
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )


def format_torrent(torrent: Torrent) -> str:
    lines = ["Trackers:"]
    for tier, tracker in torrent.trackers:
        lines.append(f"  [{tier}] {tracker}")
    if torrent.creation is not None:
        lines.append(f"Created: {torrent.creation.isoformat()}")
    if torrent.created_by is not None:
        lines.append(f"Created by: {torrent.created_by}")
    if torrent.comment is not None:
        lines.append(f"Comment: {torrent.comment}")
    lines.append(f"Private: {'yes' if torrent.private else 'no'}")
    lines.append(f"Pieces: {torrent.piece_count} x {torrent.piece_length} bytes")
    lines.append(f"Files ({torrent.total_length} bytes):")
    for file in torrent.files:
        lines.append(f"  {file.path} ({file.length} bytes)")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="torrentmeta")
    parser.add_argument(
        "--log-file", default="torrentmeta.log", help="file to write logs to"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log decoder details"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    parse = commands.add_parser("parse", help="parse information about a torrent")
    parse.add_argument(
        "-f", "--file", required=True, help="path to the file, usually a .torrent"
    )
    parse.add_argument(
        "-b",
        "--bencoding",
        action="store_true",
        help="stop after decoding, works on any bencoded file",
    )
    return parser


def run_parse(source: str, bencoding_only: bool) -> int:
    parser = TorrentFileParser(source)
    try:
        if bencoding_only:
            print(parser.decode())
        else:
            print(format_torrent(parser.parse()))
    except OSError as e:
        print(f"Error reading file:\n{e}", file=sys.stderr)
        return 1
    except DecodeError as e:
        print(f"Error decoding file:\n{e}", file=sys.stderr)
        return 1
    except TorrentError as e:
        print(f"Error reading torrent data:\n{e}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    logger = logging.getLogger(__name__)
    logger.info("Application started")

    status = run_parse(args.file, args.bencoding)
    if status != 0:
        sys.exit(status)


if __name__ == "__main__":
    main()
