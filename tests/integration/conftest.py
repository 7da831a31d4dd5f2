"""Pytest fixtures for integration tests.

This module provides fixtures for:
- Generating a response package from openapi.yaml
- Importing the generated package
- An httpx client wired to the in-memory Pet Store
"""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Generator

import httpx
import pytest

from dispatchify import GenerationProfile, GenerationResult, PackageSpec, build_ir, generate_package, load_openapi

from .server import handler, store

SPEC_PATH = Path(__file__).parent / "openapi.yaml"
PACKAGE_NAME = "petstore_dispatch"


@pytest.fixture(scope="session")
def generation_result(tmp_path_factory: pytest.TempPathFactory) -> GenerationResult:
    output_dir = tmp_path_factory.mktemp("generated")
    ir = build_ir(load_openapi(SPEC_PATH))
    package_spec = PackageSpec(package_name=PACKAGE_NAME, output_dir=output_dir)
    return generate_package(package_spec, ir, GenerationProfile.from_version("3.12"))


@pytest.fixture(scope="session")
def generated_package(generation_result: GenerationResult) -> Generator[ModuleType, None, None]:
    """Import the generated package."""
    package_dir = generation_result.package_dir
    spec = importlib.util.spec_from_file_location(
        PACKAGE_NAME,
        package_dir / "__init__.py",
        submodule_search_locations=[str(package_dir)],
    )
    if spec is None or spec.loader is None:
        raise ImportError(f"Could not load spec for {package_dir}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[PACKAGE_NAME] = module
    spec.loader.exec_module(module)
    yield module

    for name in [name for name in sys.modules if name == PACKAGE_NAME or name.startswith(f"{PACKAGE_NAME}.")]:
        del sys.modules[name]


@pytest.fixture(autouse=True)
def reset_store() -> Generator[None, None, None]:
    """Reset the pet store before each test."""
    store.reset()
    yield


@pytest.fixture
def client() -> Generator[httpx.Client, None, None]:
    with httpx.Client(transport=httpx.MockTransport(handler), base_url="http://petstore.test") as client:
        yield client
