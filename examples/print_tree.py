#!/usr/bin/env python3
"""
Print the Layer Tree of a .kra File

Usage:
    python examples/print_tree.py drawing.kra

Prints every layer and mask, indented by nesting depth. Errors are printed
instead of raised.
"""

import logging
import sys

from kra_reader import KraError, Node, read_kra


def print_tree(node: Node, depth: int = 0) -> None:
    """Print a node and everything it owns."""
    print(f"{' ' * (depth * 4)}{node} {node.uuid}")
    for child in node.children:
        print_tree(child, depth + 1)


def main() -> int:
    if len(sys.argv) != 2:
        print("Expected path to file", file=sys.stderr)
        return 2

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        kra = read_kra(sys.argv[1])
    except KraError as e:
        print(e)
        return 1

    print(f"{kra.meta.name}: {kra.meta.width}x{kra.meta.height}, {kra.meta.colorspace}")
    for layer in kra.layers:
        print_tree(layer)
    return 0


if __name__ == "__main__":
    sys.exit(main())
