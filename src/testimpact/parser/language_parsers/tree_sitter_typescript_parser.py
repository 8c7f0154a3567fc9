from .tree_sitter_parser import TreeSitterParser

class TreeSitterTypeScriptParser(TreeSitterParser):
    """TypeScript parser using Tree-sitter."""

    def __init__(self):
        super().__init__('typescript')


class TreeSitterTSXParser(TreeSitterParser):
    """TSX parser using Tree-sitter."""

    def __init__(self):
        super().__init__('tsx')
