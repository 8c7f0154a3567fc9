import posixpath
import re

from ..models.file_node import FileType


class FileClassifier:
    """Categorizes repository paths as test, config, asset or source files."""

    # Test naming conventions, matched against the file name
    TEST_FILE_PATTERNS = [
        r'.*\.test\.[cm]?[jt]sx?$',
        r'.*\.spec\.[cm]?[jt]sx?$',
    ]

    # Extensions the patterns above accept for companion test files
    TEST_FILE_EXTENSIONS = ('.ts', '.tsx', '.js', '.jsx', '.mts', '.cts', '.mjs', '.cjs')

    # Directory names whose contents are always tests
    TEST_DIRECTORIES = {'__tests__', 'test', 'tests'}

    # Build/tooling configuration, matched against the file name
    CONFIG_FILE_PATTERNS = [
        r'^(jest|vitest|webpack|rollup|vite|next|tailwind|babel|postcss|eslint|prettier|playwright)\.config\.',
        r'^tsconfig.*\.json$',
        r'^jsconfig.*\.json$',
        r'^package\.json$',
        r'^\.env',
        r'^\.eslintrc',
        r'^\.prettierrc',
        r'^\.babelrc',
    ]

    # Non-code resources
    ASSET_EXTENSIONS = {
        '.css', '.scss', '.sass', '.less',
        '.png', '.jpg', '.jpeg', '.gif', '.svg', '.ico', '.webp', '.bmp',
        '.woff', '.woff2', '.ttf', '.otf', '.eot',
        '.mp3', '.mp4', '.webm', '.wav',
    }

    @classmethod
    def classify(cls, path: str) -> FileType:
        """
        Classify a repository-relative path. Pure string inspection, no I/O.

        Args:
            path: Path of the file, forward or back slashes

        Returns:
            The FileType; anything unrecognised is a source file
        """
        normalized = str(path).replace('\\', '/')
        filename = posixpath.basename(normalized)

        if cls.is_test_file(normalized):
            return FileType.TEST
        if any(re.match(pattern, filename, re.IGNORECASE) for pattern in cls.CONFIG_FILE_PATTERNS):
            return FileType.CONFIG
        if posixpath.splitext(filename)[1].lower() in cls.ASSET_EXTENSIONS:
            return FileType.ASSET
        return FileType.SOURCE

    @classmethod
    def is_test_file(cls, path: str) -> bool:
        normalized = str(path).replace('\\', '/')
        filename = posixpath.basename(normalized)

        for pattern in cls.TEST_FILE_PATTERNS:
            if re.match(pattern, filename, re.IGNORECASE):
                return True

        directories = normalized.split('/')[:-1]
        return any(part in cls.TEST_DIRECTORIES for part in directories)
