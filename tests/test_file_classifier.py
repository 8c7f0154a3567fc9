import unittest
import sys
import os

# Add src to path to allow imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from testimpact.models.file_node import FileType
from testimpact.parser.file_classifier import FileClassifier


class TestFileClassifier(unittest.TestCase):

    def test_test_naming_conventions(self):
        for path in ['src/foo.test.ts', 'src/foo.spec.tsx', 'lib/bar.test.js', 'bar.spec.jsx', 'a/b.test.mjs']:
            self.assertEqual(FileClassifier.classify(path), FileType.TEST, path)

    def test_test_directories(self):
        self.assertEqual(FileClassifier.classify('src/__tests__/foo.ts'), FileType.TEST)
        self.assertEqual(FileClassifier.classify('tests/helpers/setup.ts'), FileType.TEST)
        self.assertEqual(FileClassifier.classify('packages/api/test/fixtures.js'), FileType.TEST)

    def test_directory_name_must_match_exactly(self):
        self.assertEqual(FileClassifier.classify('src/testing/harness.ts'), FileType.SOURCE)
        self.assertEqual(FileClassifier.classify('src/contest.ts'), FileType.SOURCE)

    def test_config_files(self):
        for path in ['jest.config.js', 'web/vite.config.ts', 'tsconfig.json', 'tsconfig.build.json',
                     'package.json', '.env.local', '.eslintrc.cjs', '.prettierrc']:
            self.assertEqual(FileClassifier.classify(path), FileType.CONFIG, path)

    def test_test_takes_priority_over_config(self):
        self.assertEqual(FileClassifier.classify('__tests__/jest.config.js'), FileType.TEST)

    def test_asset_files(self):
        for path in ['src/styles/main.css', 'public/logo.PNG', 'src/theme.scss', 'assets/font.woff2']:
            self.assertEqual(FileClassifier.classify(path), FileType.ASSET, path)

    def test_unknown_files_default_to_source(self):
        self.assertEqual(FileClassifier.classify('src/app.ts'), FileType.SOURCE)
        self.assertEqual(FileClassifier.classify('Makefile'), FileType.SOURCE)
        self.assertEqual(FileClassifier.classify(''), FileType.SOURCE)

    def test_windows_separators(self):
        self.assertEqual(FileClassifier.classify('src\\__tests__\\foo.ts'), FileType.TEST)


if __name__ == '__main__':
    unittest.main()
