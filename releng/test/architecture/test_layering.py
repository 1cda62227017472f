"""Import and call policies that keep the package layered.

cli -> services -> (git, changelog) -> (output, platform, core) -> version
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ImportRef:
    module: str
    line: int


def _package_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _source_files(base: Path) -> list[Path]:
    root = _package_root()
    files: list[Path] = []
    for path in sorted(base.rglob("*.py")):
        rel = path.relative_to(root)
        if rel.parts[0] == "test" or "__pycache__" in rel.parts:
            continue
        files.append(path)
    return files


def _read_tree(path: Path) -> ast.AST:
    return ast.parse(path.read_text(encoding="utf-8"), filename=str(path))


def _imports(path: Path) -> list[ImportRef]:
    refs: list[ImportRef] = []
    for node in ast.walk(_read_tree(path)):
        if isinstance(node, ast.Import):
            refs.extend(ImportRef(module=alias.name, line=node.lineno) for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and not node.level and node.module:
            refs.append(ImportRef(module=node.module, line=node.lineno))
    return refs


def _matches(module: str, prefix: str) -> bool:
    return module == prefix or module.startswith(prefix + ".")


def _offenders(base: Path, forbidden: tuple[str, ...], allow: set[str] | None = None) -> list[str]:
    root = _package_root()
    found: list[str] = []
    for file_path in _source_files(base):
        rel = file_path.relative_to(root).as_posix()
        if allow and rel in allow:
            continue
        for ref in _imports(file_path):
            if any(_matches(ref.module, prefix) for prefix in forbidden):
                found.append(f"{rel}:{ref.line}: forbidden import '{ref.module}'")
    return found


def test_services_do_not_import_cli() -> None:
    offenders = _offenders(_package_root() / "services", ("releng.cli", "typer", "click"))

    assert not offenders, "services -> cli dependency violations:\n" + "\n".join(offenders)


def test_domain_packages_stay_below_services() -> None:
    root = _package_root()
    offenders: list[str] = []
    for package in ("git", "changelog", "version", "core", "output", "platform"):
        offenders += _offenders(root / package, ("releng.services", "releng.cli", "typer"))

    assert not offenders, "layering violations:\n" + "\n".join(offenders)


def test_version_package_is_self_contained() -> None:
    root = _package_root()
    forbidden = tuple(
        f"releng.{name}"
        for name in ("core", "output", "platform", "git", "changelog", "services", "cli")
    )

    offenders = _offenders(root / "version", forbidden)

    assert not offenders, "version package must not depend on the rest:\n" + "\n".join(offenders)


def test_rich_is_only_imported_by_the_console() -> None:
    offenders = _offenders(_package_root(), ("rich",), allow={"output/console.py"})

    assert not offenders, "direct rich usage policy violations:\n" + "\n".join(offenders)


def _subprocess_call_lines(tree: ast.AST) -> list[int]:
    lines: list[int] = []
    for node in ast.walk(tree):
        if not isinstance(node, ast.Call) or not isinstance(node.func, ast.Attribute):
            continue
        func = node.func
        if isinstance(func.value, ast.Name) and func.value.id == "subprocess":
            lines.append(node.lineno)
    return lines


def test_subprocess_is_only_called_from_platform_process() -> None:
    root = _package_root()
    offenders: list[str] = []
    for file_path in _source_files(root):
        rel = file_path.relative_to(root).as_posix()
        if rel == "platform/process.py":
            continue
        offenders += [f"{rel}:{line}: direct subprocess call" for line in _subprocess_call_lines(_read_tree(file_path))]
        offenders += [
            f"{rel}:{ref.line}: subprocess import"
            for ref in _imports(file_path)
            if ref.module == "subprocess"
        ]

    assert not offenders, "subprocess policy violations:\n" + "\n".join(offenders)
