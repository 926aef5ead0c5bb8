"""
Architecture contract tests using grimp.

These tests enforce the layered architecture:
- errors (Layer 0) - importable from everywhere
- games (Layer 1, lowest) - only errors
- engine (Layer 2) - can import from games
- solvers (Layer 3) - can import from engine, games
- training (Layer 4, highest) - can import from solvers, engine, games

Run with: pytest tests/test_architecture.py -v
"""

import pytest

# Try to import grimp, skip tests if not installed
grimp = pytest.importorskip("grimp")

PACKAGE = "tabular_cfr"


def internal_imports_of(graph, layer):
    """Modules outside `layer` imported by any module inside it."""
    prefix = f"{PACKAGE}.{layer}"
    imported = set()
    for module in graph.modules:
        if module == prefix or module.startswith(prefix + "."):
            imported.update(graph.find_modules_directly_imported_by(module))
    return sorted(
        m for m in imported
        if m.startswith(PACKAGE + ".") and not (m == prefix or m.startswith(prefix + "."))
    )


def layer_of(module):
    return module.split(".")[1]


class TestLayerArchitecture:
    """Test that layer dependencies are respected."""

    @pytest.fixture(autouse=True)
    def setup(self):
        """Build the import graph once for all tests."""
        self.graph = grimp.build_graph(PACKAGE)

    def test_errors_has_no_internal_imports(self):
        """Layer 0 (errors) should not import anything from the package."""
        imports = [
            m for m in self.graph.find_modules_directly_imported_by(f"{PACKAGE}.errors")
            if m.startswith(PACKAGE)
        ]
        assert imports == []

    def test_games_only_imports_errors(self):
        """Layer 1 (games) should not import from any other layer."""
        imports = internal_imports_of(self.graph, "games")
        assert all(layer_of(m) == "errors" for m in imports), (
            f"games layer should not import from other layers, but imports: {imports}"
        )

    def test_engine_only_imports_from_games(self):
        """Layer 2 (engine) can only import from Layers 0-1."""
        allowed = {"errors", "games"}
        for imp in internal_imports_of(self.graph, "engine"):
            assert layer_of(imp) in allowed, f"engine layer imported from forbidden layer: {imp}"

    def test_solvers_only_imports_lower_layers(self):
        """Layer 3 (solvers) can only import from Layers 0-2."""
        allowed = {"errors", "games", "engine"}
        for imp in internal_imports_of(self.graph, "solvers"):
            assert layer_of(imp) in allowed, f"solvers layer imported from forbidden layer: {imp}"

    def test_training_not_imported_by_lower_layers(self):
        """Layer 4 (training) should not be imported by lower layers."""
        for layer in ["games", "engine", "solvers"]:
            forbidden = [m for m in internal_imports_of(self.graph, layer) if layer_of(m) == "training"]
            assert forbidden == [], f"{layer} imports from training: {forbidden}"


class TestNoCircularImports:
    """Test that there are no circular import dependencies."""

    def test_layers_import_cleanly(self):
        """Every layer can be imported on its own."""
        import tabular_cfr
        import tabular_cfr.games
        import tabular_cfr.engine
        import tabular_cfr.solvers
        import tabular_cfr.training
        import tabular_cfr.cli

        assert tabular_cfr.cli.main is not None
