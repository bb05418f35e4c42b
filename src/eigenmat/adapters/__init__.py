# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Adapters implementing the eigen-decomposition port with external libraries.
"""
from eigenmat.adapters.numpy_solver import NumpyEigenSolver

__all__ = ["NumpyEigenSolver"]
