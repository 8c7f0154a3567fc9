import unittest
import sys
import os
import shutil
import tempfile

import git

# Add src to path to allow imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from testimpact.errors import ChangeDetectionError
from testimpact.fetcher.change_detector import GitChangeDetector
from testimpact.models.impact_analysis import ChangedFile, ChangeOperation


@unittest.skipUnless(shutil.which('git'), "git executable not available")
class TestGitChangeDetector(unittest.TestCase):

    def setUp(self):
        self.root = tempfile.mkdtemp()
        self.repo = git.Repo.init(self.root)
        self.actor = git.Actor("Test User", "test@example.com")

        self.write('src/a.ts', "export const a = 1;\n")
        self.write('src/b.ts', "export const b = 2;\n")
        self.write('src/old.ts', "export const old = 0;\n")
        self.write('docs/notes.md', "notes\n")
        self.commit(['src/a.ts', 'src/b.ts', 'src/old.ts', 'docs/notes.md'], "initial")
        self.repo.create_head('base')

        # Committed on the feature branch
        self.write('src/a.ts', "export const a = 10;\n")
        self.write('src/c.ts', "import { a } from './a';\n\nexport function triple(value: number) {\n"
                               "  return value * a * 3;\n}\n")
        self.write('docs/notes.md', "more notes\n")
        self.repo.index.remove(['src/b.ts'], working_tree=True)
        self.commit(['src/a.ts', 'src/c.ts', 'docs/notes.md'], "feature")

    def tearDown(self):
        self.repo.close()
        shutil.rmtree(self.root)

    def write(self, path, content):
        full_path = os.path.join(self.root, path)
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        with open(full_path, 'w', encoding='utf-8') as f:
            f.write(content)

    def commit(self, paths, message):
        self.repo.index.add(paths)
        self.repo.index.commit(message, author=self.actor, committer=self.actor)

    def test_committed_changes_against_base(self):
        changes = GitChangeDetector(self.root).detect('base', include_working_directory=False)

        self.assertEqual(changes, [
            ChangedFile('docs/notes.md', ChangeOperation.MODIFIED),
            ChangedFile('src/a.ts', ChangeOperation.MODIFIED),
            ChangedFile('src/b.ts', ChangeOperation.DELETED),
            ChangedFile('src/c.ts', ChangeOperation.ADDED),
        ])

    def test_working_directory_changes(self):
        self.write('src/d.ts', "export const d = 4;\n")
        self.repo.index.add(['src/d.ts'])
        self.write('src/old.ts', "export const old = 'changed on disk';\n")
        self.write('src/e.ts', "export const e = 5;\n")

        changes = GitChangeDetector(self.root).detect('base')
        by_path = {change.path: change.operation for change in changes}

        self.assertEqual(by_path['src/d.ts'], ChangeOperation.ADDED)
        self.assertEqual(by_path['src/old.ts'], ChangeOperation.MODIFIED)
        self.assertEqual(by_path['src/e.ts'], ChangeOperation.ADDED)
        self.assertEqual(by_path['src/c.ts'], ChangeOperation.ADDED)
        self.assertEqual([change.path for change in changes], sorted(by_path))

    def test_paths_are_relative_to_project_subdirectory(self):
        self.write('src/e.ts', "export const e = 5;\n")

        changes = GitChangeDetector(os.path.join(self.root, 'src')).detect('base')

        self.assertEqual([change.path for change in changes], ['a.ts', 'b.ts', 'c.ts', 'e.ts'])

    def test_unknown_base_ref(self):
        detector = GitChangeDetector(self.root)

        with self.assertRaises(ChangeDetectionError):
            detector.detect('no-such-branch')

    def test_not_a_repository(self):
        plain_dir = tempfile.mkdtemp()
        try:
            with self.assertRaises(ChangeDetectionError):
                GitChangeDetector(os.path.join(plain_dir, 'missing'))
        finally:
            shutil.rmtree(plain_dir)


if __name__ == '__main__':
    unittest.main()
