from pathlib import Path

from loguru import logger

REFINER_LAST_BLOCK_FILE = ".REFINER_LAST_BLOCK"


class RefinerSource:
    """
    Block files written by the refiner, one JSON file per height,
    grouped into shard directories named by the height floored to the shard width
    """

    def __init__(self, folder: Path | str, shard_width: int = 10_000):
        self.folder = Path(folder)
        self.shard_width = shard_width

    def shard_folder(self, height: int) -> Path:
        return self.folder / str(height // self.shard_width * self.shard_width)

    def block_path(self, height: int) -> Path:
        return self.shard_folder(height) / f"{height}.json"

    def read_block(self, height: int) -> bytes | None:
        """Return the raw file for a height, None while it does not exist (yet)

        Raises:
            OSError: The path exists but cannot be read
        """
        try:
            return self.block_path(height).read_bytes()
        except FileNotFoundError:
            return None

    def cleanup(self, height: int) -> bool:
        """
        Remove the consumed file for a height and, when the height opens a new shard,
        the drained directory of the previous shard.

        Failures are logged, never raised.

        Returns:
            bool: True if everything that had to be removed was removed
        """
        success = True
        file_path = self.block_path(height)
        try:
            file_path.unlink()
        except OSError as e:
            logger.warning(f"Unable to remove file {file_path}: {e}")
            success = False

        if height > 0 and height % self.shard_width == 0:
            previous_shard = self.shard_folder(height - 1)
            try:
                previous_shard.rmdir()
                logger.debug(f"Removed drained folder {previous_shard}")
            except OSError as e:
                logger.warning(f"Unable to remove folder {previous_shard}: {e}")
                success = False

        return success

    def update_refiner_last_block(self, height: int) -> None:
        """
        Tell the refiner which height this consumer still needs.

        The marker is only moved forward. An unparsable marker is left untouched.

        Raises:
            OSError: The marker could not be written
        """
        marker = self.folder / REFINER_LAST_BLOCK_FILE
        try:
            content = marker.read_text()
        except OSError:
            self._write_marker(marker, height)
            return

        try:
            refiner_last_block = int(content.strip())
        except ValueError:
            logger.warning(f"Ignoring unparsable {marker}: {content!r}")
            return

        if refiner_last_block < height:
            self._write_marker(marker, height)

    @staticmethod
    def _write_marker(marker: Path, height: int) -> None:
        marker.write_text(str(height))
        logger.info(f"Updated {marker} to {height}")
