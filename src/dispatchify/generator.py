from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .content_types import DEFAULT_CONTENT_TYPE_TABLES, ContentTypeTables
from .generation import GenerationProfile, OperationFailure, generate_responses
from .ir import IRDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageSpec:
    package_name: str
    output_dir: Path


@dataclass
class GenerationResult:
    package_dir: Path
    failures: list[OperationFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def generate_package(
    spec: PackageSpec,
    ir: IRDocument,
    profile: GenerationProfile,
    tables: ContentTypeTables = DEFAULT_CONTENT_TYPE_TABLES,
) -> GenerationResult:
    """Write ``responses.py`` and ``__init__.py`` for ``ir`` into a package directory.

    Operations that fail classification are left out of the package and
    returned in ``GenerationResult.failures``; the rest are still written.
    """
    package_dir = spec.output_dir / spec.package_name
    package_dir.mkdir(parents=True, exist_ok=True)

    output = generate_responses(ir.operations, ir.schema_names, profile, tables)
    (package_dir / "responses.py").write_text(output.code, encoding="utf-8")
    (package_dir / "__init__.py").write_text(_init_content(output.exports), encoding="utf-8")

    logger.info(
        "Generated %s with %d operation(s), %d skipped",
        package_dir,
        len(ir.operations) - len(output.failures),
        len(output.failures),
    )
    return GenerationResult(package_dir=package_dir, failures=output.failures)


def _init_content(exports: list[str]) -> str:
    lines = ["from .responses import ("]
    lines.extend(f"    {name}," for name in exports)
    lines.append(")")
    lines.append("")
    lines.append("__all__ = [")
    lines.extend(f"    {name!r}," for name in exports)
    lines.append("]")
    lines.append("")
    return "\n".join(lines)
