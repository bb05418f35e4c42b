# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Domain modules may only import the standard library pieces they need and numpy."""
import ast
import importlib

import pytest

ALLOWED = {
    "math", "numbers", "operator", "logging", "dataclasses", "typing",
    "numpy", "eigenmat", "__future__",
}

DOMAIN_MODULES = [
    "eigenmat.domain.balance",
    "eigenmat.domain.config",
    "eigenmat.domain.eigen",
    "eigenmat.domain.errors",
    "eigenmat.domain.hessenberg",
    "eigenmat.domain.jacobi",
    "eigenmat.domain.matrix",
    "eigenmat.domain.schur",
]


def _imported_top_levels(source: str) -> list[str]:
    """Top-level package of every imported name, one entry per alias."""
    tops = []
    for node in ast.walk(ast.parse(source)):
        if isinstance(node, ast.ImportFrom) and node.module:
            tops.append(node.module.split(".")[0])
        elif isinstance(node, (ast.Import, ast.ImportFrom)):
            tops.extend(alias.name.split(".")[0] for alias in node.names)
    return tops


class TestDomainPurity:
    @pytest.mark.parametrize("module_name", DOMAIN_MODULES)
    def test_module_pure(self, module_name):
        mod = importlib.import_module(module_name)
        for top in _imported_top_levels(open(mod.__file__).read()):
            assert top in ALLOWED, f"Forbidden import: {top}"

    def test_every_alias_is_checked(self):
        tops = _imported_top_levels("import os, math\nfrom numpy import linalg\n")
        assert tops == ["os", "math", "numpy"]
        assert not all(top in ALLOWED for top in tops)

    def test_domain_does_not_import_adapters(self):
        for module_name in DOMAIN_MODULES:
            mod = importlib.import_module(module_name)
            source = open(mod.__file__).read()
            assert "eigenmat.adapters" not in source, module_name
