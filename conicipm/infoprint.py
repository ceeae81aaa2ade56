"""Text output of solver settings and per-iteration progress."""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from conicipm.info import Info
    from conicipm.settings import DefaultSettings

_SPEC = re.compile(
    r"^(?P<align>[<>^])?(?P<sign>\+)?(?P<width>\d+)?\.(?P<prec>\d+)e$"
)
_RULE = "-" * 93


def exp_str_reformat(text: str) -> str:
    """Give an exponent string an explicit sign and at least two exponent digits."""
    eidx = text.find("e")
    if eidx < 0 or eidx + 1 >= len(text):
        raise ValueError(f"not an exponent-format number: {text!r}")
    has_sign = text[eidx + 1] == "-"
    has_short_exp = len(text) == eidx + (3 if has_sign else 2)

    if not has_sign:
        chars = "+0" if has_short_exp else "+"
    else:
        chars = "0" if has_short_exp else ""

    shift = 2 if has_sign else 1
    return text[: eidx + shift] + chars + text[eidx + shift :]


def _lower_exp(value: float, prec: int, plus: bool = False) -> str:
    # mantissa/exponent without exponent sign or padding, e.g. "1.0e-8"
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return ("-" if value < 0 else "+" if plus else "") + "inf"
    mant, exp = f"{value:.{prec}e}".split("e")
    if plus and not mant.startswith("-"):
        mant = "+" + mant
    return f"{mant}e{int(exp)}"


def format_exp(value: float, spec: str) -> str:
    """Format ``value`` in exponent notation per ``spec`` such as ``"+8.4e"``."""
    match = _SPEC.match(spec)
    if match is None:
        raise ValueError(f"unsupported format spec: {spec!r}")
    align = match["align"] or ">"
    width = int(match["width"] or 0)
    text = _lower_exp(value, int(match["prec"]), bool(match["sign"]))
    padded = f"{text:{align}{width}}"
    return exp_str_reformat(padded) if math.isfinite(value) else padded


def _short_float(value: float) -> str:
    text = repr(float(value))
    if "e" in text:
        mant, exp = text.split("e")
        text = f"{mant}e{int(exp)}"
    return text


def _format_duration(seconds: float) -> str:
    if not math.isfinite(seconds) or seconds < 0:
        raise ValueError("duration must be finite and non-negative")
    if seconds == 0:
        return "0ns"
    for scale, unit in ((1.0, "s"), (1e-3, "ms"), (1e-6, "µs")):
        if seconds >= scale:
            return f"{seconds / scale:.9g}{unit}"
    return f"{seconds * 1e9:.9g}ns"


def _bool_on_off(value: bool) -> str:
    return "on" if value else "false"


def print_settings(settings: DefaultSettings, file: TextIO | None = None) -> None:
    """Write a summary of the solver settings."""
    s = settings

    def out(line: str) -> None:
        print(line, file=file)

    out("settings:")
    if s.direct_kkt_solver:
        out(f"  linear algebra: direct / {s.direct_solve_method}, precision: 64 bit")

    time_lim = "Inf" if math.isinf(s.time_limit) else _short_float(s.time_limit)
    out(
        f"  max iter = {s.max_iter}, time limit = {time_lim},  "
        f"max step = {s.max_step_fraction:.3f}"
    )
    out(
        f"  tol_feas = {_lower_exp(s.tol_feas, 1)}, "
        f"tol_gap_abs = {_lower_exp(s.tol_gap_abs, 1)}, "
        f"tol_gap_rel = {_lower_exp(s.tol_gap_rel, 1)},"
    )
    out(
        f"  static reg : {_bool_on_off(s.static_regularization_enable)}, "
        f"ϵ1 = {_lower_exp(s.static_regularization_constant, 1)}, "
        f"ϵ2 = {_lower_exp(s.static_regularization_proportional, 1)}"
    )
    out(
        f"  dynamic reg: {_bool_on_off(s.dynamic_regularization_enable)}, "
        f"ϵ = {_lower_exp(s.dynamic_regularization_eps, 1)}, "
        f"δ = {_lower_exp(s.dynamic_regularization_delta, 1)}"
    )
    out(
        f"  iter refine: {_bool_on_off(s.iterative_refinement_enable)}, "
        f"reltol = {_lower_exp(s.iterative_refinement_reltol, 1)}, "
        f"abstol = {_lower_exp(s.iterative_refinement_abstol, 1)},"
    )
    out(
        f"               max iter = {s.iterative_refinement_max_iter}, "
        f"stop ratio = {s.iterative_refinement_stop_ratio:.1f}"
    )
    out(
        f"  equilibrate: {_bool_on_off(s.equilibrate_enable)}, "
        f"min_scale = {_lower_exp(s.equilibrate_min_scaling, 1)}, "
        f"max_scale = {_lower_exp(s.equilibrate_max_scaling, 1)}"
    )
    out(f"               max iter = {s.equilibrate_max_iter}")


def print_status_header(settings: DefaultSettings, file: TextIO | None = None) -> None:
    """Write the column header for per-iteration progress lines."""
    if not settings.verbose:
        return
    print(
        "iter    pcost        dcost       gap       pres      dres      "
        "k/t        μ       step      ",
        file=file,
    )
    print(_RULE, file=file)


def print_status(
    info: Info, settings: DefaultSettings, file: TextIO | None = None
) -> None:
    """Write one progress line for the current iteration."""
    if not settings.verbose:
        return
    parts = [
        f"{info.iterations:>3}",
        format_exp(info.cost_primal, "+8.4e"),
        format_exp(info.cost_dual, "+8.4e"),
        format_exp(min(info.gap_abs, info.gap_rel), "6.2e"),
        format_exp(info.res_primal, "6.2e"),
        format_exp(info.res_dual, "6.2e"),
        format_exp(info.ktratio, "6.2e"),
        format_exp(info.mu, "6.2e"),
    ]
    line = "".join(f"{part}  " for part in parts)
    if info.iterations > 0:
        line += f"{format_exp(info.step_length, '>.2e')}  "
    else:
        line += " ------   "
    print(line, file=file)


def print_footer(
    info: Info, settings: DefaultSettings, file: TextIO | None = None
) -> None:
    """Write the final status and solve time."""
    if not settings.verbose:
        return
    print(_RULE, file=file)
    print(f"Terminated with status = {info.status}", file=file)
    print(f"solve time = {_format_duration(info.solve_time)}", file=file)