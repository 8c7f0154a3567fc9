import re
from typing import List, Tuple

from .base_parser import BaseParser


class JavaScriptParser(BaseParser):
    """
    Text-scanning specifier extraction for JavaScript/TypeScript style sources.

    Used whenever no syntax tree is available. It is deliberately simple:
    statements inside comments or string literals are matched too, and
    specifiers written as template literals are not matched at all.
    """

    # import x from 'm', import { a } from 'm', import * as ns from 'm', import 'm'
    IMPORT_PATTERN = re.compile(r'''\bimport\s+(?:[\w\s{},*$]+\s+from\s+)?['"]([^'"]+)['"]''')

    # export { a } from 'm', export * from 'm', export * as ns from 'm'
    REEXPORT_PATTERN = re.compile(r'''\bexport\s+(?:[\w\s{},*$]+\s+)?from\s+['"]([^'"]+)['"]''')

    # import('m')
    DYNAMIC_IMPORT_PATTERN = re.compile(r'''\bimport\s*\(\s*['"]([^'"]+)['"]\s*\)''')

    # require('m'), including TypeScript's import x = require('m')
    REQUIRE_PATTERN = re.compile(r'''\brequire\s*\(\s*['"]([^'"]+)['"]\s*\)''')

    PATTERNS = [IMPORT_PATTERN, REEXPORT_PATTERN, DYNAMIC_IMPORT_PATTERN, REQUIRE_PATTERN]

    def extract_specifiers(self, content: str, path: str) -> List[str]:
        matches: List[Tuple[int, str]] = []
        for pattern in self.PATTERNS:
            for match in pattern.finditer(content):
                matches.append((match.start(1), match.group(1)))

        # Report in source order regardless of which pattern found the specifier
        matches.sort()
        return [specifier for _, specifier in matches]
