import unittest
import sys
import os

# Add src to path to allow imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from testimpact.errors import GraphInvariantError
from testimpact.models.dependency_graph import DependencyGraph
from testimpact.models.file_node import FileType


class TestDependencyGraph(unittest.TestCase):

    def setUp(self):
        self.graph = DependencyGraph()
        self.graph.add_node('src/a.ts')
        self.graph.add_node('src/b.ts')
        self.graph.add_node('src/a.test.ts', FileType.TEST)

    def test_adjacency_shares_node_sets(self):
        node = self.graph.get_node('src/a.ts')
        self.assertIs(self.graph.edges['src/a.ts'], node.dependencies)
        self.assertIs(self.graph.reverse_edges['src/a.ts'], node.dependents)

    def test_add_edge_updates_both_directions(self):
        self.graph.add_edge('src/b.ts', 'src/a.ts')

        self.assertEqual(self.graph.edges['src/b.ts'], {'src/a.ts'})
        self.assertEqual(self.graph.reverse_edges['src/a.ts'], {'src/b.ts'})
        self.assertEqual(self.graph.get_node('src/a.ts').dependents, {'src/b.ts'})
        self.graph.check_invariants()

    def test_duplicate_node_is_a_defect(self):
        with self.assertRaises(GraphInvariantError):
            self.graph.add_node('src/a.ts')

    def test_invariant_error_is_an_assertion(self):
        self.assertTrue(issubclass(GraphInvariantError, AssertionError))

    def test_edge_to_unknown_node_is_a_defect(self):
        with self.assertRaises(GraphInvariantError):
            self.graph.add_edge('src/a.ts', 'src/missing.ts')

    def test_set_dependencies_removes_stale_edges(self):
        self.graph.set_dependencies('src/a.test.ts', ['src/a.ts', 'src/b.ts'])
        self.graph.set_dependencies('src/a.test.ts', ['src/b.ts'])

        self.assertEqual(self.graph.edges['src/a.test.ts'], {'src/b.ts'})
        self.assertEqual(self.graph.reverse_edges['src/a.ts'], set())
        self.assertEqual(self.graph.reverse_edges['src/b.ts'], {'src/a.test.ts'})
        self.graph.check_invariants()

    def test_self_reference_is_allowed(self):
        self.graph.add_edge('src/a.ts', 'src/a.ts')

        self.assertIn('src/a.ts', self.graph.reverse_edges['src/a.ts'])
        self.graph.check_invariants()

    def test_remove_node_drops_incoming_and_outgoing_edges(self):
        self.graph.add_edge('src/b.ts', 'src/a.ts')
        self.graph.add_edge('src/a.ts', 'src/b.ts')
        self.graph.add_edge('src/a.test.ts', 'src/a.ts')

        removed = self.graph.remove_node('src/a.ts')

        self.assertEqual(removed.path, 'src/a.ts')
        self.assertNotIn('src/a.ts', self.graph.nodes)
        self.assertEqual(self.graph.edges['src/b.ts'], set())
        self.assertEqual(self.graph.reverse_edges['src/b.ts'], set())
        self.assertEqual(self.graph.edges['src/a.test.ts'], set())
        self.assertIsNone(self.graph.remove_node('src/a.ts'))
        self.graph.check_invariants()

    def test_copy_is_independent(self):
        self.graph.add_edge('src/b.ts', 'src/a.ts')
        self.graph.get_node('src/b.ts').specifiers = ['./a']

        clone = self.graph.copy()
        self.graph.remove_node('src/a.ts')

        self.assertEqual(clone.reverse_edges['src/a.ts'], {'src/b.ts'})
        self.assertEqual(clone.get_node('src/b.ts').specifiers, ['./a'])
        self.assertEqual(clone.type_of('src/a.test.ts'), FileType.TEST)
        clone.check_invariants()

    def test_check_invariants_detects_one_sided_edge(self):
        self.graph.edges['src/b.ts'].add('src/a.ts')

        with self.assertRaises(GraphInvariantError):
            self.graph.check_invariants()

    def test_check_invariants_detects_detached_sets(self):
        self.graph.edges['src/a.ts'] = set()

        with self.assertRaises(GraphInvariantError):
            self.graph.check_invariants()

    def test_files_of_type_and_type_of(self):
        self.assertEqual(self.graph.files_of_type(FileType.TEST), {'src/a.test.ts'})
        self.assertEqual(self.graph.type_of('src/a.ts'), FileType.SOURCE)
        self.assertIsNone(self.graph.type_of('nope.ts'))

    def test_stats(self):
        self.graph.add_node('jest.config.js', FileType.CONFIG)
        self.graph.add_edge('src/a.test.ts', 'src/a.ts')
        self.graph.add_edge('src/a.test.ts', 'src/b.ts')

        stats = self.graph.stats()

        self.assertEqual(stats['total_files'], 4)
        self.assertEqual(stats['source_files'], 2)
        self.assertEqual(stats['test_files'], 1)
        self.assertEqual(stats['config_files'], 1)
        self.assertEqual(stats['asset_files'], 0)
        self.assertEqual(stats['total_dependencies'], 2)
        self.assertEqual(stats['average_dependencies'], 0.5)

    def test_empty_graph_stats(self):
        self.assertEqual(DependencyGraph().stats()['average_dependencies'], 0)


if __name__ == '__main__':
    unittest.main()
