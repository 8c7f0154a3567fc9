import unittest
from unittest.mock import patch
import sys
import os

# Add src to path to allow imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from testimpact.parser.dependency_extractor import DependencyExtractor, ExtractionStrategy
from testimpact.parser.language_parsers.javascript_parser import JavaScriptParser
from testimpact.parser.language_parsers.tree_sitter_javascript_parser import TreeSitterJavaScriptParser
from testimpact.parser.tree_sitter_factory import TreeSitterFactory


TYPESCRIPT_SOURCE = """
import { a } from './a';
import type { Shape } from './types';
import * as utils from '../utils';
import './side-effect';
import React from 'react';
export * from './reexport';
export { b } from './b';
import legacy = require('./legacy');

const c = require('./c');

async function load() {
  return import('./lazy');
}
"""


class TestStructuredExtraction(unittest.TestCase):

    def setUp(self):
        self.extractor = DependencyExtractor()

    def test_typescript_shapes(self):
        result = self.extractor.extract_with_strategy(TYPESCRIPT_SOURCE, 'src/index.ts')

        self.assertEqual(result.strategy, ExtractionStrategy.STRUCTURED)
        self.assertEqual(result.specifiers, [
            './a', './types', '../utils', './side-effect', 'react',
            './reexport', './b', './legacy', './c', './lazy',
        ])

    def test_javascript_with_jsx(self):
        content = (
            "import Button from './Button';\n"
            "const api = require('./api');\n"
            "export default function App() { return <Button onClick={api.go} />; }\n"
        )
        result = self.extractor.extract_with_strategy(content, 'src/App.jsx')

        self.assertEqual(result.strategy, ExtractionStrategy.STRUCTURED)
        self.assertEqual(result.specifiers, ['./Button', './api'])

    def test_tsx(self):
        content = "import { Card } from './Card';\nexport const View = () => <Card title=\"x\" />;\n"
        result = self.extractor.extract_with_strategy(content, 'src/View.tsx')

        self.assertEqual(result.strategy, ExtractionStrategy.STRUCTURED)
        self.assertEqual(result.specifiers, ['./Card'])

    def test_ignores_comments_and_non_literal_arguments(self):
        content = (
            "// import x from './commented';\n"
            "const name = './dynamic';\n"
            "require(name);\n"
            "import(`./template`);\n"
            "import { y } from './real';\n"
        )
        self.assertEqual(self.extractor.extract(content, 'src/a.ts'), ['./real'])

    def test_does_not_evaluate_code(self):
        content = "if (false) { require('./never'); }\n"
        self.assertEqual(self.extractor.extract(content, 'src/a.js'), ['./never'])


class TestFallbackExtraction(unittest.TestCase):

    def setUp(self):
        self.extractor = DependencyExtractor()

    def test_syntax_error_downgrades_to_fallback(self):
        content = "import { a } from './a';\nconst = ;\nconst b = require('./b');\n"
        result = self.extractor.extract_with_strategy(content, 'src/broken.ts')

        self.assertEqual(result.strategy, ExtractionStrategy.FALLBACK)
        self.assertIsNotNone(result.error)
        self.assertEqual(result.specifiers, ['./a', './b'])

    def test_extension_without_grammar_uses_fallback(self):
        content = "<script>\nimport Widget from './Widget.vue';\n</script>\n"
        result = self.extractor.extract_with_strategy(content, 'src/Page.vue')

        self.assertEqual(result.strategy, ExtractionStrategy.FALLBACK)
        self.assertIsNone(result.error)
        self.assertEqual(result.specifiers, ['./Widget.vue'])

    def test_parser_unavailable_uses_fallback(self):
        with patch.object(TreeSitterFactory, 'parser_for_path', return_value=None):
            result = self.extractor.extract_with_strategy("import a from './a';", 'src/x.ts')

        self.assertEqual(result.strategy, ExtractionStrategy.FALLBACK)
        self.assertEqual(result.specifiers, ['./a'])

    def test_both_strategies_failing_yields_no_specifiers(self):
        with patch.object(TreeSitterFactory, 'parser_for_path', return_value=None), \
                patch.object(JavaScriptParser, 'extract_specifiers', side_effect=RuntimeError("boom")):
            result = self.extractor.extract_with_strategy("import a from './a';", 'src/x.ts')

        self.assertEqual(result.strategy, ExtractionStrategy.FAILED)
        self.assertEqual(result.specifiers, [])


class TestTreeSitterFactory(unittest.TestCase):

    def test_languages_by_extension(self):
        self.assertEqual(TreeSitterFactory.language_for_path('src/a.mts'), 'typescript')
        self.assertEqual(TreeSitterFactory.language_for_path('src/A.TSX'), 'tsx')
        self.assertIsNone(TreeSitterFactory.language_for_path('src/a.vue'))
        self.assertIsNone(TreeSitterFactory.get_parser('cobol'))

    def test_grammar_failure_is_cached(self):
        with patch.dict(TreeSitterFactory._parsers, clear=True), \
                patch.object(TreeSitterJavaScriptParser, '_initialize_parser', return_value=False) as init, \
                patch.object(TreeSitterFactory, '_logger') as factory_logger:
            first = TreeSitterFactory.get_parser('javascript')
            second = TreeSitterFactory.parser_for_path('src/other.js')

        self.assertIsNone(first)
        self.assertIsNone(second)
        self.assertEqual(init.call_count, 1)
        self.assertEqual(factory_logger.error.call_count, 1)


class TestJavaScriptParserPatterns(unittest.TestCase):

    def setUp(self):
        self.parser = JavaScriptParser()

    def test_four_shapes_in_source_order(self):
        content = (
            "const x = require('./x');\n"
            "import def, { named } from './def';\n"
            "export * as ns from './ns';\n"
            "const lazy = () => import('./lazy');\n"
            "import 'polyfill';\n"
        )
        self.assertEqual(
            self.parser.extract_specifiers(content, 'a.js'),
            ['./x', './def', './ns', './lazy', 'polyfill'],
        )

    def test_multiline_named_import(self):
        content = "import {\n  one,\n  two,\n} from './many';\n"
        self.assertEqual(self.parser.extract_specifiers(content, 'a.js'), ['./many'])

    def test_known_gap_matches_inside_comments(self):
        # Text scanning cannot tell code from comments
        content = "// import old from './old';\n/* require('./legacy') */\n"
        self.assertEqual(self.parser.extract_specifiers(content, 'a.js'), ['./old', './legacy'])

    def test_known_gap_matches_inside_strings(self):
        content = "const doc = \"import x from './doc-example'\";\n"
        self.assertEqual(self.parser.extract_specifiers(content, 'a.js'), ['./doc-example'])

    def test_known_gap_misses_template_literals(self):
        content = "const m = require(`./templated`);\nimport(`./also-templated`);\n"
        self.assertEqual(self.parser.extract_specifiers(content, 'a.js'), [])


if __name__ == '__main__':
    unittest.main()
