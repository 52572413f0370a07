"""Example pandas integration for layer tree analysis.

Usage:
    python examples/layer_table.py drawing.kra

Flattens the layer tree of a .kra file into a DataFrame and prints a few
summaries of it.
"""

import sys

from kra_reader import KraError, read_kra
from kra_reader.api import get_adapter


def analyze_layers(path: str) -> int:
    """Print summaries of the layer tree in ``path``."""
    print("Layer Tree Analysis with Pandas Integration")
    print("=" * 43)

    print("1. Reading archive...")
    try:
        kra = read_kra(path)
    except KraError as e:
        print(f"   ✗ {e}")
        return 1
    print(f"   ✓ {kra.meta.name}: {kra.node_count} nodes")

    print("\n2. Getting pandas adapter...")
    pandas_adapter = get_adapter("pandas")
    if not pandas_adapter:
        print("   ✗ Pandas adapter not available!")
        print("   Make sure pandas is installed: pip install kra-reader[pandas]")
        return 1

    print("\n3. Converting layer tree to DataFrame...")
    conversion_result = pandas_adapter.to_target(kra)
    if not conversion_result.success:
        print(f"   ✗ Conversion failed: {conversion_result.errors}")
        return 1
    df = conversion_result.converted_data
    print(f"   ✓ {df.shape[0]} rows in {conversion_result.conversion_time_ms:.2f}ms")

    print("\n4. Nodes per kind:")
    print(df.groupby("nodetype").size().to_string())

    print("\n5. Hidden nodes:")
    hidden = df[~df["visible"]]
    print(hidden[["path", "nodetype"]].to_string(index=False) if len(hidden) else "   none")

    print("\n6. Blend modes of layers:")
    layers = df[df["is_layer"]]
    print(layers["composite_op"].value_counts().to_string())

    print("\n7. Deepest nesting:", int(df["depth"].max()) if len(df) else 0)
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Expected path to file", file=sys.stderr)
        sys.exit(2)
    sys.exit(analyze_layers(sys.argv[1]))
