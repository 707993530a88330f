from typing import IO, Iterator

from tree_sitter import Node, Tree

from .models import Point, SyntaxNode


class ASTWalker:
    """Utilities for traversing and printing syntax trees"""

    @staticmethod
    def get_text(node: Node, source: bytes) -> str:
        """Exact source text covered by a node"""
        return source[node.start_byte : node.end_byte].decode("utf8", errors="replace")

    @staticmethod
    def walk_named(tree: Tree) -> Iterator[SyntaxNode]:
        """Yield every named node in pre-order.

        Uses a TreeCursor (first child / next sibling / parent moves) instead of
        recursion so deeply nested inputs cannot exhaust the Python stack.
        Unnamed nodes are traversed but not yielded and do not add depth.
        """
        cursor = tree.walk()
        # One entry per tree level above the cursor: whether that level is named
        levels: list[bool] = []
        # Walk indices of the named ancestors
        named: list[int] = []
        emitted = 0
        visited_children = False

        while True:
            if not visited_children:
                node = cursor.node
                index = None
                if node.is_named:
                    index = emitted
                    emitted += 1
                    yield SyntaxNode(
                        kind=node.type,
                        start_point=Point(*node.start_point),
                        end_point=Point(*node.end_point),
                        start_byte=node.start_byte,
                        end_byte=node.end_byte,
                        depth=len(named),
                        field_name=cursor.field_name,
                        parent=named[-1] if named else None,
                    )
                if cursor.goto_first_child():
                    levels.append(index is not None)
                    if index is not None:
                        named.append(index)
                    continue
                visited_children = True

            if cursor.goto_next_sibling():
                visited_children = False
            elif cursor.goto_parent():
                if levels.pop():
                    named.pop()
                visited_children = True
            else:
                break

    @staticmethod
    def write_tree(tree: Tree, out: IO[str]) -> None:
        """Write one line per named node: indent, optional field, kind and range.

        Parentheses close once a node's subtree is complete, matching
        tree-sitter's own s-expression dump.
        """
        previous: SyntaxNode | None = None
        for node in ASTWalker.walk_named(tree):
            if previous is not None:
                if node.depth <= previous.depth:
                    out.write(")" * (previous.depth - node.depth + 1))
                out.write("\n")
            out.write("  " * node.depth)
            if node.field_name:
                out.write(f"{node.field_name}: ")
            out.write(
                f"({node.kind} [{node.start_point.row}, {node.start_point.column}]"
                f" - [{node.end_point.row}, {node.end_point.column}]"
            )
            previous = node
        if previous is not None:
            out.write(")" * (previous.depth + 1))
            out.write("\n")
