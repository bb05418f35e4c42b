# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tuning parameters of the eigen-decomposition engine.

The defaults reproduce the classic bounds: 1000 Jacobi rotations,
2·eps off-diagonal tolerance, 30 QR sweeps per deflation with exceptional
shifts on sweeps 10 and 20.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class EigenConfig:
    """Iteration caps and thresholds for the symmetric and general paths."""
    jacobi_max_iterations: int = 1000
    jacobi_tolerance_factor: float = 2.0       # multiples of machine epsilon
    qr_max_iterations: int = 30                # per deflation
    qr_exceptional_shift_iterations: tuple[int, ...] = (10, 20)
    balance_improvement_threshold: float = 0.95

    def __post_init__(self) -> None:
        _validate_config(self)


def _validate_config(config: EigenConfig) -> None:
    """Validate eigen config parameters."""
    if config.jacobi_max_iterations < 0:
        raise ValueError(
            f"jacobi_max_iterations must be >= 0, got {config.jacobi_max_iterations}"
        )
    if config.jacobi_tolerance_factor <= 0:
        raise ValueError(
            f"jacobi_tolerance_factor must be > 0, got {config.jacobi_tolerance_factor}"
        )
    if config.qr_max_iterations < 1:
        raise ValueError(f"qr_max_iterations must be >= 1, got {config.qr_max_iterations}")
    for its in config.qr_exceptional_shift_iterations:
        if not 0 < its < config.qr_max_iterations:
            raise ValueError(
                f"exceptional shift iteration must be in (0, {config.qr_max_iterations}), got {its}"
            )
    if not 0.0 < config.balance_improvement_threshold < 1.0:
        raise ValueError(
            "balance_improvement_threshold must be in (0,1), "
            f"got {config.balance_improvement_threshold}"
        )


DEFAULT_EIGEN_CONFIG = EigenConfig()
