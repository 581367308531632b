"""
CPU backends for the external solver interface.

Both delegate the algorithm entirely to scipy.sparse.linalg; pycoo only
supplies the operator (through the matrix's apply contract) and
packages the outcome.
"""

from __future__ import annotations

import logging
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.sparse.linalg import ArpackNoConvergence, eigs, eigsh, gmres

from pycoo.core.exceptions import ConvergenceError, NumericalError
from pycoo.core.result import Result
from pycoo.core.compute.timing import Timer
from pycoo.krylov.design import KrylovDesign, SpectralDesign
from pycoo.krylov.solution import KrylovParams, SpectralParams

logger = logging.getLogger(__name__)

# ARPACK needs k + 1 < ncv <= n for eigs with k = 1; smaller
# problems are solved densely.
MIN_ARPACK_SIZE = 3

# Seed for the ARPACK start vector, so repeated estimates agree.
ARPACK_SEED = 42


class CPUGMRESBackend:
    """Restarted GMRES via scipy.sparse.linalg.gmres."""

    @property
    def name(self) -> str:
        return 'cpu_gmres'

    def solve(self, design: KrylovDesign) -> Result[KrylovParams]:
        """
        Run GMRES(restart) from design.x0 until ||b - A x|| <= tol ||b||
        or design.maxiter inner iterations have been spent.

        Raises:
            NumericalError: If scipy reports illegal input or breakdown
        """
        timer = Timer()
        timer.start()

        iterations = 0
        verbose = design.verbose

        def on_iteration(pr_norm: float) -> None:
            nonlocal iterations
            iterations += 1
            if verbose:
                logger.info("gmres iteration %d: relative residual %.6e", iterations, pr_norm)

        with timer.section('gmres'):
            x, status = gmres(
                design.operator,
                design.b,
                x0=design.x0,
                rtol=design.tol,
                atol=0.0,
                restart=design.restart,
                maxiter=design.restart_cycles,
                callback=on_iteration,
                callback_type='pr_norm',
            )

        if status < 0:
            raise NumericalError(f"GMRES failed with scipy status {status} (illegal input or breakdown)")

        x = np.asarray(x, dtype=design.b.dtype)

        with timer.section('residual'):
            residual = design.b - design.matrix.apply(x, np.empty_like(x))
            residual_norm = float(np.linalg.norm(residual))
            b_norm = float(np.linalg.norm(design.b))

        converged = status == 0
        warnings_list: list[str] = []
        if not converged:
            warnings_list.append(
                f"GMRES did not converge in {iterations} iterations "
                f"(residual {residual_norm:.3e}, tol {design.tol:.1e})"
            )

        if verbose:
            logger.info(
                "gmres %s after %d iterations: residual norm %.6e",
                'converged' if converged else 'stopped', iterations, residual_norm,
            )

        timer.stop()

        return Result(
            params=KrylovParams(
                x=x,
                residual_norm=residual_norm,
                b_norm=b_norm,
                iterations=iterations,
                converged=converged,
            ),
            info={
                'method': 'gmres',
                'restart': design.restart,
                'restart_cycles': design.restart_cycles,
                'scipy_status': int(status),
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )


class CPUSpectralBackend:
    """
    Dominant eigenvalue via ARPACK (Arnoldi, or Lanczos when symmetric).

    Problems smaller than MIN_ARPACK_SIZE are solved densely by applying
    the operator to the identity.
    """

    @property
    def name(self) -> str:
        return 'cpu_spectral'

    def solve(self, design: SpectralDesign) -> Result[SpectralParams]:
        """
        Raises:
            ConvergenceError: If ARPACK does not converge
        """
        timer = Timer()
        timer.start()

        n = design.n
        if n < MIN_ARPACK_SIZE:
            method = 'dense'
            with timer.section('eigenvalues'):
                eigenvalue = self._dense(design)
        else:
            method = 'lanczos' if design.symmetric else 'arnoldi'
            with timer.section('eigenvalues'):
                eigenvalue = self._arpack(design)

        timer.stop()

        return Result(
            params=SpectralParams(radius=float(abs(eigenvalue)), eigenvalue=complex(eigenvalue)),
            info={'method': method, 'k': design.k, 'symmetric': design.symmetric},
            timing=timer.result(),
            backend_name=self.name,
        )

    def _dense(self, design: SpectralDesign) -> complex:
        dense = design.operator.matmat(np.eye(design.n, dtype=design.dtype))
        eigenvalues = np.linalg.eigvals(dense)
        return complex(eigenvalues[np.argmax(np.abs(eigenvalues))])

    def _arpack(self, design: SpectralDesign) -> complex:
        n = design.n
        rng = np.random.default_rng(ARPACK_SEED)
        v0: NDArray[Any] = rng.standard_normal(n).astype(design.dtype)

        try:
            if design.symmetric:
                ncv = min(n, max(design.k, 2))
                values = eigsh(
                    design.operator, k=1, which='LM', ncv=ncv, v0=v0,
                    return_eigenvectors=False,
                )
            else:
                ncv = min(n, max(design.k, MIN_ARPACK_SIZE))
                values = eigs(
                    design.operator, k=1, which='LM', ncv=ncv, v0=v0,
                    return_eigenvectors=False,
                )
        except ArpackNoConvergence as e:
            raise ConvergenceError(
                f"ARPACK did not converge estimating the spectral radius (ncv={ncv})",
                iterations=n * 10,
                reason='max_iterations',
            ) from e

        return complex(values[0])
