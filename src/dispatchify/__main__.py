from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .errors import DispatchifyError
from .generation import GenerationProfile
from .generator import PackageSpec, generate_package
from .ir import build_ir
from .loader import load_openapi
from .logging import configure_logging


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="dispatchify",
        description="Generate response dispatch code from an OpenAPI spec.",
    )
    parser.add_argument("spec", help="Path or URL of the OpenAPI spec (JSON/YAML)")
    parser.add_argument("-n", "--package-name", required=True, help="Generated package name")
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("."), help="Output directory")
    parser.add_argument("--python-version", default="3.10", help="Target Python version (e.g. 3.10)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level",
    )

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        profile = GenerationProfile.from_version(args.python_version)
    except ValueError:
        print(f"error: invalid Python version {args.python_version!r}", file=sys.stderr)
        return 2

    try:
        document = load_openapi(args.spec)
        ir = build_ir(document)
        package = PackageSpec(package_name=args.package_name, output_dir=args.output_dir)
        result = generate_package(package, ir, profile)
    except DispatchifyError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except FileNotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    for failure in result.failures:
        print(f"error: {failure.operation}: {failure.reason}", file=sys.stderr)
    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
