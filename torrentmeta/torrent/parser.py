import logging

from torrentmeta.bencoding.decoder import decode
from torrentmeta.bencoding.errors import DecodeError
from torrentmeta.bencoding.value import Value
from torrentmeta.torrent.errors import TorrentError
from torrentmeta.torrent.metainfo import Torrent


class TorrentFileParser:
    source: str
    logger = logging.getLogger(__name__)

    def __init__(self, source: str) -> None:
        self.source = source

    def read(self) -> bytes:
        with open(self.source, "rb") as torrent_file:
            return torrent_file.read()

    def decode(self) -> Value:
        self.logger.info(f"Decoding file from '{self.source}'")
        raw_data = self.read()
        try:
            return decode(raw_data)
        except DecodeError as e:
            self.logger.error(f"Error decoding '{self.source}': {e}")
            raise

    def parse(self) -> Torrent:
        torrent_data = self.decode()
        try:
            torrent = Torrent.from_value(torrent_data)
        except TorrentError as e:
            self.logger.error(f"Error reading torrent data from '{self.source}': {e}")
            raise

        self.logger.info(
            f"Parsed '{self.source}': {len(torrent.files)} files, "
            f"{torrent.total_length} bytes, {torrent.piece_count} pieces"
        )
        return torrent
