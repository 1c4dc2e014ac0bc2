"""Module tree structure of the generated output.

The generator records every endpoint it writes in a ModuleTree keyed by the
output module path; the tree is used for the summary and the verbose
directory listing.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from rich.tree import Tree


@dataclass
class ModuleTree:
    """Tree structure representing the module hierarchy.

    Attributes:
        name: The name of this module node.
        endpoints: Names of the endpoint modules directly in this package.
        children: Child packages keyed by their name.
        files: Other generated files directly in this package, such as test
            modules. They are listed but not counted as endpoints.
    """

    name: str
    endpoints: list[str] = field(default_factory=list)
    children: dict[str, ModuleTree] = field(default_factory=dict)
    files: list[str] = field(default_factory=list)

    def add_endpoint(self, module_path: Sequence[str], endpoint: str) -> None:
        """Add an endpoint at ``module_path``, creating intermediate nodes."""
        node = self._node(module_path)
        if endpoint not in node.endpoints:
            node.endpoints.append(endpoint)

    def add_file(self, module_path: Sequence[str], filename: str) -> None:
        """Record a non-endpoint file such as ``test_index.py``."""
        node = self._node(module_path)
        if filename not in node.files:
            node.files.append(filename)

    def _node(self, module_path: Sequence[str]) -> ModuleTree:
        current = self
        for part in module_path:
            if part not in current.children:
                current.children[part] = ModuleTree(name=part)
            current = current.children[part]
        return current

    def get_node(self, module_path: Sequence[str]) -> ModuleTree | None:
        current = self
        for part in module_path:
            if part not in current.children:
                return None
            current = current.children[part]

        return current

    def walk(self) -> Iterator[tuple[list[str], ModuleTree]]:
        """Iterate over all nodes in the tree depth-first.

        Yields:
            Tuples of (module_path, node) for each node in the tree.
        """
        yield from self._walk_recursive([])

    def _walk_recursive(
        self, current_path: list[str]
    ) -> Iterator[tuple[list[str], ModuleTree]]:
        yield current_path, self

        for child_name, child_node in sorted(self.children.items()):
            yield from child_node._walk_recursive(current_path + [child_name])

    def count_endpoints(self) -> int:
        """Count the endpoints in this subtree."""
        total = len(self.endpoints)
        for child in self.children.values():
            total += child.count_endpoints()
        return total

    def flatten(self) -> dict[str, list[str]]:
        """Map dotted module paths to the endpoints they contain."""
        result: dict[str, list[str]] = {}

        for path, node in self.walk():
            if node.endpoints:
                module_name = '.'.join(path) if path else '__root__'
                result[module_name] = sorted(node.endpoints)

        return result

    def to_rich(self, label: str | None = None) -> Tree:
        """Render the subtree as a ``rich`` tree of directories and files."""
        tree = Tree(label or self.name, guide_style='dim')
        self._fill(tree)
        return tree

    def _fill(self, tree: Tree) -> None:
        for child_name, child_node in sorted(self.children.items()):
            child_node._fill(tree.add(f'[bold]{child_name}/[/bold]'))
        names = [f'{endpoint}.py' for endpoint in self.endpoints] + self.files
        for filename in sorted(names):
            tree.add(filename)
