import ast
from pathlib import Path


def _ui_imports(package_dir: Path, repo_root: Path):
    violations = []
    for py_file in package_dir.rglob("*.py"):
        source = py_file.read_text(encoding="utf-8")
        tree = ast.parse(source, filename=str(py_file))
        rel_path = py_file.relative_to(repo_root)

        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    name = alias.name
                    if name == "compress_vids.ui" or name.startswith("compress_vids.ui."):
                        violations.append(f"{rel_path}:{node.lineno} imports {name}")
            elif isinstance(node, ast.ImportFrom):
                module = node.module or ""
                if module == "compress_vids.ui" or module.startswith("compress_vids.ui."):
                    violations.append(f"{rel_path}:{node.lineno} imports from {module}")
    return violations


def test_pipeline_layer_does_not_import_ui_layer():
    """Pipeline layer must not import from UI layer directly."""
    repo_root = Path(__file__).resolve().parents[2]
    violations = _ui_imports(repo_root / "compress_vids" / "pipeline", repo_root)

    assert not violations, "Pipeline layer must not import UI layer:\n" + "\n".join(violations)


def test_domain_and_infrastructure_do_not_import_ui_layer():
    repo_root = Path(__file__).resolve().parents[2]
    violations = []
    for layer in ("domain", "infrastructure", "config"):
        violations.extend(_ui_imports(repo_root / "compress_vids" / layer, repo_root))

    assert not violations, "\n".join(violations)
