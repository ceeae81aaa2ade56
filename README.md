# conicipm

Data types and bookkeeping for a primal-dual interior-point method for
convex conic programs in standard form:

    minimize    ½ xᵀPx + qᵀx
    subject to  Ax + s = b,  s ∈ K

where `K` is a product of cones. The package holds the problem data, Ruiz
equilibration, a presolve step that drops nonnegative-cone rows whose bound
is infinite, the iterate and residuals of the homogeneous embedding, the
convergence and termination checks, progress printing, and the final
solution mapped back to the user's problem.

## Installation

    pip install .

To run the tests:

    pip install ".[test]"
    pytest

## Modules

- `conicipm.settings`: `DefaultSettings` is a dataclass of solver options.
  These cover iteration and time limits, full and reduced accuracy
  tolerances, equilibration limits, step-size, regularization and
  iterative-refinement parameters, and the `presolve_enable` switch.
- `conicipm.infbounds`: `get_infinity`, `set_infinity` and
  `default_infinity` manage the module-wide bound above which an inequality
  bound counts as infinite. The default is `INFINITY_DEFAULT = 1e20`.
- `conicipm.presolver`:
  - `ConeKind` lists the cone families: zero, nonnegative, second-order,
    exponential, power and PSD triangle.
  - `ConeSpec(kind, dim, alpha)` describes one cone constraint. Its
    `nvars` property gives the number of rows the cone covers.
  - `reduce_cones(cone_specs, b, infbound)` removes nonnegative-cone rows
    whose bound is at least `infbound`. It returns the new cone list, a
    `RowReductionIndex` (or `None` when nothing was removed) and the
    reduced row count.
  - `Presolver(A, b, cone_specs, settings)` reads the current infinity
    bound once and applies `reduce_cones` when `presolve_enable` is set.
    Its methods `is_reduced()` and `count_reduced()` report what was
    removed.
- `conicipm.problemdata`: `ProblemData(P, q, A, b, presolver)` stores the
  upper triangle of `P`, the row-reduced `A` and `b` with `b` capped at
  the infinity bound, and the infinity norms of `q` and `b`.
  `equilibrate(cones, settings)` runs Ruiz scaling in place. `cones` may be
  `None`. Otherwise it must provide `rectify_equilibration(work, e)`.
  `limit_scaling` maps scalings below the minimum to 1 and caps them at the
  maximum.
- `conicipm.equilibration`: `EquilibrationData(n, m)` holds the diagonal
  scalings `d`, `e`, their inverses `dinv`, `einv`, and the cost scale `c`.
  All of them start at one.
- `conicipm.variables`: `Variables(n, m)` holds `x`, `s`, `z`, `tau` and
  `kappa`. Its methods are `calc_mu(residuals, degree)`,
  `add_step(step, alpha)`, `copy_from(src)` and `rescale()`.
- `conicipm.residuals`: `Residuals(n, m)`, whose `update(variables, data)`
  computes `rx`, `rz`, `rtau`, the infeasibility residuals `rx_inf` and
  `rz_inf`, `px = P x`, and the inner products `dot_qx`, `dot_bz`, `dot_sz`
  and `dot_xpx`.
- `conicipm.info`:
  - `SolverStatus` is an enum with `is_infeasible()` and `is_errored()`.
  - `Info` tracks costs, residual norms, gaps and `ktratio`.
  - `update` recomputes these from the current iterate.
  - `check_termination` sets the status for convergence, infeasibility,
    insufficient progress, the iteration limit or the time limit.
  - `finalize` checks the reduced tolerances after a failed or limited
    solve.
  - `save_prev_iterate` and `reset_to_prev_iterate` save and restore an
    earlier iterate.
  - `save_scalars` records `mu`, the step length, `sigma` and the
    iteration count.
- `conicipm.infoprint`:
  - `print_settings` writes a settings summary. `print_status_header`,
    `print_status` and `print_footer` write the progress table.
  - The three progress-table functions print nothing unless
    `settings.verbose` is set.
  - `format_exp(value, spec)` and `exp_str_reformat(text)` produce exponent
    notation with a signed exponent of at least two digits, such as
    `1.00e-08`.
  - Each printing function takes an optional `file`.
- `conicipm.solution`: `Solution(m, n)`. Its `finalize(data, variables, info)`
  undoes the homogenization and the equilibration. It also restores rows
  removed by presolve, giving them an infinite slack and a zero dual. For
  infeasible problems it normalizes by `kappa` to give a certificate and
  sets `obj_val` to NaN.
- `conicipm.timers`: `Timers` is a tree of nested wall-clock timers. Its
  `timeit(key)` and `notimeit()` context managers time a block or exclude
  it from timing. It also has `total_time()`, `reset_timer(key)` and
  `print(file)`.

## Example

```python
import numpy as np
from scipy import sparse

from conicipm.settings import DefaultSettings
from conicipm.presolver import ConeKind, ConeSpec, Presolver
from conicipm.problemdata import ProblemData
from conicipm.variables import Variables
from conicipm.residuals import Residuals

P = sparse.csc_matrix(np.array([[4.0, 1.0], [1.0, 2.0]]))
q = np.array([1.0, 1.0])
A = sparse.csc_matrix(np.array([[1.0, 1.0], [1.0, 0.0], [0.0, 1.0]]))
b = np.array([1.0, 0.7, 1e30])
cones = [ConeSpec(ConeKind.ZERO, 1), ConeSpec(ConeKind.NONNEGATIVE, 2)]

settings = DefaultSettings(verbose=False)
presolver = Presolver(A, b, cones, settings)
print(presolver.count_reduced())   # 1: the infinite bound is dropped

data = ProblemData(P, q, A, b, presolver)
print(data.m, data.n)              # 2 2
data.equilibrate(None, settings)

variables = Variables(data.n, data.m)
residuals = Residuals(data.n, data.m)
residuals.update(variables, data)
```

Timing a block of work:

```python
from conicipm.timers import Timers

timers = Timers()
with timers.timeit("setup"):
    with timers.timeit("equilibration"):
        pass
timers.print()
print(timers.total_time())
```

## What the package does not do

The package does not contain a complete solver. It has no main
interior-point loop, no KKT linear-system solver, and no cone
implementations that compute step lengths, scalings or barrier values. It
has no command-line program either. Those parts must come from the code
that uses these types. For example, `ProblemData.equilibrate` accepts any
object with `rectify_equilibration`, and `Variables.calc_mu` takes the
cone degree as a plain number.