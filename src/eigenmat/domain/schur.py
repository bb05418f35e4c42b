# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Implicit double-shift QR iteration on an upper-Hessenberg matrix.

Drives the Hessenberg matrix to real Schur form, deflating 1x1 blocks (real
eigenvalues) and 2x2 blocks (real pairs or complex-conjugate pairs) off the
bottom of the active window [l..nn]. Rotations are accumulated into the
transform seeded by the Hessenberg reduction, then eigenvectors are found
by back-substitution on the quasi-triangular result and projected through
that transform.

Complex pairs are reported with the positive imaginary part first. The
eigenvector of such an eigenvalue at index k has its real part in column k
and its imaginary part in column k+1; the conjugate eigenvalue at k+1 has
the conjugate eigenvector.
"""
import math
from dataclasses import dataclass

import numpy as np

from eigenmat.domain.config import DEFAULT_EIGEN_CONFIG, EigenConfig
from eigenmat.domain.errors import NonConvergenceError

_EPS = float(np.finfo(np.float64).eps)


@dataclass(frozen=True)
class SchurResult:
    """Unsorted eigenvalues and eigenvectors of the general path."""
    eigenvalues: tuple          # complex, one per index
    eigenvectors: np.ndarray    # (n, n), paired real/imaginary columns
    sweeps: int                 # total QR sweeps over all deflations


def _sign(a: float, b: float) -> float:
    """|a| carrying the sign of b (b == 0 counts as positive)."""
    return abs(a) if b >= 0.0 else -abs(a)


def _hessenberg_norm(h: np.ndarray) -> float:
    """Sum of |entries| on and above the sub-diagonal."""
    return float(np.abs(np.triu(h, k=-1)).sum())


def _find_small_subdiagonal(h: np.ndarray, nn: int, anorm: float) -> int:
    """Lowest l <= nn such that h[l, l-1] is negligible (0 if none)."""
    l = nn
    while l > 0:
        s = abs(h[l - 1, l - 1]) + abs(h[l, l])
        if s == 0.0:
            s = anorm
        if abs(h[l, l - 1]) <= _EPS * s:
            h[l, l - 1] = 0.0
            break
        l -= 1
    return l


def _deflate_pair(
    h: np.ndarray,
    z: np.ndarray,
    wri: list,
    nn: int,
    shift: float,
) -> None:
    """Split the trailing 2x2 block at rows nn-1, nn into two eigenvalues."""
    n = h.shape[0]
    x = h[nn, nn]
    y = h[nn - 1, nn - 1]
    w = h[nn, nn - 1] * h[nn - 1, nn]
    p = 0.5 * (y - x)
    q = p * p + w
    zz = math.sqrt(abs(q))
    x += shift
    h[nn, nn] = x
    h[nn - 1, nn - 1] = y + shift

    if q < 0.0:
        wri[nn] = complex(x + p, -zz)
        wri[nn - 1] = wri[nn].conjugate()
        return

    # Real pair: rotate the block to upper-triangular form
    zz = p + _sign(zz, p)
    wri[nn - 1] = wri[nn] = complex(x + zz, 0.0)
    if zz != 0.0:
        wri[nn] = complex(x - w / zz, 0.0)
    x = h[nn, nn - 1]
    s = abs(x) + abs(zz)
    p = x / s
    q = zz / s
    r = math.sqrt(p * p + q * q)
    p /= r
    q /= r

    upper = h[nn - 1, nn - 1:].copy()
    lower = h[nn, nn - 1:].copy()
    h[nn - 1, nn - 1:] = q * upper + p * lower
    h[nn, nn - 1:] = q * lower - p * upper

    left = h[:nn + 1, nn - 1].copy()
    right = h[:nn + 1, nn].copy()
    h[:nn + 1, nn - 1] = q * left + p * right
    h[:nn + 1, nn] = q * right - p * left

    left = z[:n, nn - 1].copy()
    right = z[:n, nn].copy()
    z[:, nn - 1] = q * left + p * right
    z[:, nn] = q * right - p * left


def _double_shift_sweep(
    h: np.ndarray,
    z: np.ndarray,
    l: int,
    nn: int,
    x: float,
    y: float,
    w: float,
) -> None:
    """One implicit double-shift QR sweep on the active block [l..nn].

    x, y and w describe the shifts: the trailing diagonal entries and the
    product of the trailing off-diagonal pair.
    """
    n = h.shape[0]

    # Look for two consecutive small sub-diagonal elements
    m = nn - 2
    while m >= l:
        d = h[m, m]
        r = x - d
        s = y - d
        p = (r * s - w) / h[m + 1, m] + h[m, m + 1]
        q = h[m + 1, m + 1] - d - r - s
        r = h[m + 2, m + 1]
        s = abs(p) + abs(q) + abs(r)
        p /= s
        q /= s
        r /= s
        if m == l:
            break
        u = abs(h[m, m - 1]) * (abs(q) + abs(r))
        v = abs(p) * (abs(h[m - 1, m - 1]) + abs(d) + abs(h[m + 1, m + 1]))
        if u <= _EPS * v:
            break
        m -= 1

    for i in range(m, nn - 1):
        h[i + 2, i] = 0.0
        if i != m:
            h[i + 2, i - 1] = 0.0

    # Chase the bulge down the active block
    for k in range(m, nn):
        if k != m:
            p = h[k, k - 1]
            q = h[k + 1, k - 1]
            r = h[k + 2, k - 1] if k + 1 != nn else 0.0
            x = abs(p) + abs(q) + abs(r)
            if x != 0.0:
                p /= x
                q /= x
                r /= x
        s = _sign(math.sqrt(p * p + q * q + r * r), p)
        if s == 0.0:
            continue
        if k == m:
            if l != m:
                h[k, k - 1] = -h[k, k - 1]
        else:
            h[k, k - 1] = -s * x
        p += s
        x = p / s
        y = q / s
        d = r / s
        q /= p
        r /= p
        third = k + 1 != nn

        # Row modification
        cols = slice(k, n)
        t = h[k, cols] + q * h[k + 1, cols]
        if third:
            t += r * h[k + 2, cols]
            h[k + 2, cols] -= t * d
        h[k + 1, cols] -= t * y
        h[k, cols] -= t * x

        # Column modification
        rows = slice(0, min(nn, k + 3) + 1)
        t = x * h[rows, k] + y * h[rows, k + 1]
        if third:
            t += d * h[rows, k + 2]
            h[rows, k + 2] -= t * r
        h[rows, k + 1] -= t * q
        h[rows, k] -= t

        # Accumulate transformations
        t = x * z[:, k] + y * z[:, k + 1]
        if third:
            t += d * z[:, k + 2]
            z[:, k + 2] -= t * r
        z[:, k + 1] -= t * q
        z[:, k] -= t


def _back_substitute(h: np.ndarray, wri: list, anorm: float) -> None:
    """Eigenvectors of the quasi-triangular h, overwriting its upper part.

    Column nn receives the vector of the real eigenvalue nn; for a complex
    pair (nn-1, nn) columns nn-1 and nn receive the real and imaginary parts.
    """
    n = h.shape[0]
    for nn in range(n - 1, -1, -1):
        p = wri[nn].real
        q = wri[nn].imag
        na = nn - 1
        if q == 0.0:
            m = nn
            h[nn, nn] = 1.0
            for i in range(nn - 1, -1, -1):
                w = h[i, i] - p
                r = float(h[i, m:nn + 1] @ h[m:nn + 1, nn])
                if wri[i].imag < 0.0:
                    zz = w
                    s = r
                    continue
                m = i
                if wri[i].imag == 0.0:
                    t = w
                    if t == 0.0:
                        t = _EPS * anorm
                    h[i, nn] = -r / t
                else:
                    # Solve the real 2x2 system of a complex block
                    x = h[i, i + 1]
                    y = h[i + 1, i]
                    denom = (wri[i].real - p) ** 2 + wri[i].imag ** 2
                    t = (x * s - zz * r) / denom
                    h[i, nn] = t
                    if abs(x) > abs(zz):
                        h[i + 1, nn] = (-r - w * t) / x
                    else:
                        h[i + 1, nn] = (-s - y * t) / zz
                t = abs(h[i, nn])
                if _EPS * t * t > 1.0:
                    h[i:nn + 1, nn] /= t
        elif q < 0.0:
            m = na
            # Last vector component chosen imaginary so the vector is triangular
            if abs(h[nn, na]) > abs(h[na, nn]):
                h[na, na] = q / h[nn, na]
                h[na, nn] = -(h[nn, nn] - p) / h[nn, na]
            else:
                temp = complex(0.0, -h[na, nn]) / complex(h[na, na] - p, q)
                h[na, na] = temp.real
                h[na, nn] = temp.imag
            h[nn, na] = 0.0
            h[nn, nn] = 1.0
            for i in range(nn - 2, -1, -1):
                w = h[i, i] - p
                ra = float(h[i, m:nn + 1] @ h[m:nn + 1, na])
                sa = float(h[i, m:nn + 1] @ h[m:nn + 1, nn])
                if wri[i].imag < 0.0:
                    zz = w
                    r = ra
                    s = sa
                else:
                    m = i
                    if wri[i].imag == 0.0:
                        temp = complex(-ra, -sa) / complex(w, q)
                        h[i, na] = temp.real
                        h[i, nn] = temp.imag
                    else:
                        # Solve the complex 2x2 system of a complex block
                        x = h[i, i + 1]
                        y = h[i + 1, i]
                        vr = (wri[i].real - p) ** 2 + wri[i].imag ** 2 - q * q
                        vi = 2.0 * q * (wri[i].real - p)
                        if vr == 0.0 and vi == 0.0:
                            vr = _EPS * anorm * (abs(w) + abs(q) + abs(x) + abs(y) + abs(zz))
                        temp = complex(x * r - zz * ra + q * sa, x * s - zz * sa - q * ra) / complex(vr, vi)
                        h[i, na] = temp.real
                        h[i, nn] = temp.imag
                        if abs(x) > abs(zz) + abs(q):
                            h[i + 1, na] = (-ra - w * h[i, na] + q * h[i, nn]) / x
                            h[i + 1, nn] = (-sa - w * h[i, nn] - q * h[i, na]) / x
                        else:
                            temp = complex(-r - y * h[i, na], -s - y * h[i, nn]) / complex(zz, q)
                            h[i + 1, na] = temp.real
                            h[i + 1, nn] = temp.imag
                t = max(abs(h[i, na]), abs(h[i, nn]))
                if _EPS * t * t > 1.0:
                    h[i:nn + 1, na] /= t
                    h[i:nn + 1, nn] /= t


def real_schur_eigen(
    hessenberg: np.ndarray,
    transform: np.ndarray,
    config: EigenConfig = DEFAULT_EIGEN_CONFIG,
) -> SchurResult:
    """Eigenvalues and eigenvectors of an upper-Hessenberg matrix.

    Args:
        hessenberg: Upper-Hessenberg matrix. Not modified.
        transform: Similarity transform from the Hessenberg reduction
            (identity if the input was already Hessenberg). Not modified.
        config: Per-deflation iteration cap and exceptional-shift sweeps.

    Returns:
        SchurResult with eigenvectors of the matrix the transform came from.

    Raises:
        NonConvergenceError: an eigenvalue did not deflate within
            config.qr_max_iterations sweeps.
    """
    h = np.array(hessenberg, dtype=np.float64)
    z = np.array(transform, dtype=np.float64)
    n = h.shape[0]
    wri: list = [0j] * n
    anorm = _hessenberg_norm(h)
    sweeps = 0

    nn = n - 1
    shift = 0.0
    while nn >= 0:
        its = 0
        while True:
            l = _find_small_subdiagonal(h, nn, anorm)
            x = h[nn, nn]
            if l == nn:
                # One root found
                h[nn, nn] = x + shift
                wri[nn] = complex(x + shift, 0.0)
                nn -= 1
            elif l == nn - 1:
                # Two roots found
                _deflate_pair(h, z, wri, nn, shift)
                nn -= 2
            else:
                if its == config.qr_max_iterations:
                    raise NonConvergenceError(
                        f"QR iteration did not converge in {its} sweeps "
                        f"for eigenvalue {nn}",
                        iterations=its,
                        active_index=nn,
                    )
                y = h[nn - 1, nn - 1]
                w = h[nn, nn - 1] * h[nn - 1, nn]
                if its in config.qr_exceptional_shift_iterations:
                    shift += x
                    h[np.arange(nn + 1), np.arange(nn + 1)] -= x
                    s = abs(h[nn, nn - 1]) + abs(h[nn - 1, nn - 2])
                    x = y = 0.75 * s
                    w = -0.4375 * s * s
                its += 1
                sweeps += 1
                _double_shift_sweep(h, z, l, nn, x, y, w)
            if l + 1 >= nn:
                break

    if anorm != 0.0:
        _back_substitute(h, wri, anorm)
        # Project onto the original basis, last column first
        for j in range(n - 1, -1, -1):
            z[:, j] = z[:, :j + 1] @ h[:j + 1, j]

    return SchurResult(eigenvalues=tuple(wri), eigenvectors=z, sweeps=sweeps)
