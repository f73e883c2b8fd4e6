from __future__ import annotations

import argparse
import ast
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

SRC_ROOT = Path(__file__).resolve().parents[1] / "src" / "rrs"

DOMAIN_FORBIDDEN = frozenset(
    {
        "fastapi",
        "pydantic",
        "sqlalchemy",
        "alembic",
        "redis",
        "httpx",
        "requests",
        "opentelemetry",
        "prometheus_client",
        "rrs.api",
        "rrs.application",
        "rrs.infrastructure",
    }
)

APPLICATION_FORBIDDEN = frozenset(
    {
        "fastapi",
        "sqlalchemy",
        "alembic",
        "redis",
        "rrs.api",
        "rrs.infrastructure",
    }
)


@dataclass(frozen=True)
class LayerPolicy:
    name: str
    path: Path
    forbidden: frozenset[str]


DEFAULT_POLICIES = (
    LayerPolicy(name="domain", path=SRC_ROOT / "domain", forbidden=DOMAIN_FORBIDDEN),
    LayerPolicy(
        name="application",
        path=SRC_ROOT / "application",
        forbidden=APPLICATION_FORBIDDEN,
    ),
)


@dataclass(frozen=True)
class Violation:
    layer: str
    file_path: Path
    line: int
    module: str


def _python_files(root: Path) -> Iterable[Path]:
    if root.is_file() and root.suffix == ".py":
        yield root
        return
    if root.is_dir():
        yield from sorted(root.rglob("*.py"))


def _matches_forbidden(module: str, forbidden: frozenset[str]) -> bool:
    return any(module == item or module.startswith(f"{item}.") for item in forbidden)


def _imported_modules(tree: ast.AST) -> Iterable[tuple[int, str]]:
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield node.lineno, alias.name
        elif isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            yield node.lineno, node.module


def _scan_file(file_path: Path, policy: LayerPolicy) -> list[Violation]:
    tree = ast.parse(file_path.read_text(encoding="utf-8"), filename=str(file_path))
    return [
        Violation(layer=policy.name, file_path=file_path, line=line, module=module)
        for line, module in _imported_modules(tree)
        if _matches_forbidden(module, policy.forbidden)
    ]


def find_violations(policies: Sequence[LayerPolicy]) -> list[Violation]:
    violations: list[Violation] = []
    for policy in policies:
        for file_path in _python_files(policy.path):
            violations.extend(_scan_file(file_path, policy))
    return violations


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Layer dependency check for src/rrs/domain and src/rrs/application."
    )
    parser.add_argument(
        "--domain-path",
        action="append",
        default=[],
        help="Extra path checked with the domain policy (repeatable).",
    )
    parser.add_argument(
        "--application-path",
        action="append",
        default=[],
        help="Extra path checked with the application policy (repeatable).",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    policies = list(DEFAULT_POLICIES)
    if args.domain_path or args.application_path:
        policies = [
            *(LayerPolicy("domain", Path(item), DOMAIN_FORBIDDEN) for item in args.domain_path),
            *(
                LayerPolicy("application", Path(item), APPLICATION_FORBIDDEN)
                for item in args.application_path
            ),
        ]

    violations = find_violations(policies)
    if not violations:
        print("depcheck passed")
        return 0

    print("depcheck failed: forbidden imports detected")
    for violation in violations:
        print(f"[{violation.layer}] {violation.file_path}:{violation.line} -> {violation.module}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
