import os
import json
import logging
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

class AtomicWriter:
    """
    Utility for atomic file writes so a reader never sees a half-written graph.
    """

    @staticmethod
    def write(file_path, content):
        """
        Write text to a file atomically.

        Args:
            file_path: Path to the file to write
            content: Text to write

        Returns:
            bool: True if successful, False otherwise
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            # Temporary file in the same directory so the rename stays on one filesystem
            fd, temp_path = tempfile.mkstemp(dir=file_path.parent, suffix='.tmp')
            success = False

            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    f.write(content)
                    f.flush()
                    os.fsync(f.fileno())

                os.replace(temp_path, file_path)
                success = True
                return True

            finally:
                if not success and os.path.exists(temp_path):
                    try:
                        os.unlink(temp_path)
                    except OSError as e:
                        logger.error(f"Failed to clean up temporary file: {e}")

        except OSError as e:
            logger.error(f"Atomic write failed for {file_path}: {e}")
            return False

    @staticmethod
    def write_json(file_path, data, indent=2):
        """
        Write JSON data to a file atomically.

        Returns:
            bool: True if successful, False otherwise
        """
        json_content = json.dumps(data, indent=indent, sort_keys=True)
        return AtomicWriter.write(file_path, json_content)

    @staticmethod
    def read_json(file_path, default=None):
        """
        Read JSON data from a file.

        Returns:
            The parsed JSON data, or ``default`` if the file does not exist

        Raises:
            json.JSONDecodeError: If the file exists but is not valid JSON
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except FileNotFoundError:
            logger.debug(f"No JSON file at {file_path}")
            return default
