import argparse
import json
import math
import sys
from typing import Any, Dict, Iterable, List, Optional, TYPE_CHECKING

from . import __version__
from .base import QuantileEstimator
from .config import EstimatorConfig
from .errors import InvalidArgument
from .parsers import parse_value
from .registry import ALGORITHMS, build_estimator
from .sinks import JsonlSink, SnapshotSink
from .validation import check_quantiles

if TYPE_CHECKING:  # pragma: no cover - typing only
    from rich.console import Console as _Console
    from rich.text import Text as _Text
else:  # runtime optional import
    try:  # noqa: SIM105
        from rich.console import Console as _Console  # type: ignore
        from rich.text import Text as _Text  # type: ignore
    except Exception:  # noqa: BLE001
        _Console = None  # type: ignore
        _Text = None  # type: ignore

ConsoleType = Optional["_Console"]

ALGORITHM_COLORS: Dict[str, str] = {
    "p2": "cyan",
    "gk": "green",
    "tdigest": "magenta",
    "kll": "yellow",
}


def _qkey(q: float) -> str:
    return f"{q:.3f}"


def _finite_or_none(v: float) -> Optional[float]:
    return None if math.isnan(v) else v


def build_config(args: argparse.Namespace) -> EstimatorConfig:
    cfg = EstimatorConfig()
    requested = tuple(args.quantiles)
    cfg.quantiles = tuple(sorted(set(requested)))
    if cfg.quantiles != requested:
        shown = " ".join(f"{q:g}" for q in cfg.quantiles)
        print(f"[seqquantile] note: --quantiles sorted and de-duplicated to {shown}", file=sys.stderr)
    for attr in ("epsilon", "delta", "capacity", "seed"):
        if getattr(args, attr, None) is not None:
            setattr(cfg, attr, getattr(args, attr))
    return cfg


def build_estimators(algorithm: str, cfg: EstimatorConfig) -> Dict[str, QuantileEstimator]:
    names = sorted(ALGORITHMS) if algorithm == "all" else [algorithm]
    return {name: build_estimator(name, cfg) for name in names}


def estimate_snapshot(estimators: Dict[str, QuantileEstimator], quantiles: Iterable[float]) -> Dict[str, Dict[str, Optional[float]]]:
    return {
        name: {_qkey(q): _finite_or_none(est.query(q)) for q in quantiles}
        for name, est in estimators.items()
    }


def run_stream(
    lines: Iterable[str],
    estimators: Dict[str, QuantileEstimator],
    quantiles: List[float],
    emit_every: int = 0,
    sink: Optional[SnapshotSink] = None,
) -> Dict[str, Any]:
    """Feed every parseable line to all estimators; returns the final report."""
    count = 0
    skipped = 0
    for line_no, line in enumerate(lines, start=1):
        try:
            value = parse_value(line)
        except ValueError as exc:
            skipped += 1
            print(f"[seqquantile] skipped line {line_no}: {exc}", file=sys.stderr)
            continue
        if value is None:
            continue
        try:
            for est in estimators.values():
                est.update(value)
        except InvalidArgument as exc:  # pragma: no cover - parse_value rejects first
            skipped += 1
            print(f"[seqquantile] skipped line {line_no}: {exc}", file=sys.stderr)
            continue
        count += 1
        if sink is not None and emit_every > 0 and count % emit_every == 0:
            sink.emit({"count": count, "quantile_estimates": estimate_snapshot(estimators, quantiles)})
    return {
        "count": count,
        "skipped": skipped,
        "quantiles": quantiles,
        "estimates": estimate_snapshot(estimators, quantiles),
    }


def _maybe_console(args: argparse.Namespace) -> ConsoleType:
    if getattr(args, "no_color", False):
        return None
    if _Console is None:
        return None
    # force_terminal ensures ANSI codes even when output is being captured (for tests)
    return _Console(color_system="truecolor", stderr=False, force_terminal=True)


def _print_report(report: Dict[str, Any], console: ConsoleType) -> None:
    print(f"Observations: {report['count']} (skipped {report['skipped']})")
    for name, qmap in report["estimates"].items():
        parts = [f"q{k}={'n/a' if v is None else format(v, '.6g')}" for k, v in qmap.items()]
        if console is not None:
            text = _Text()
            text.append(f"{name:<8}", style=ALGORITHM_COLORS.get(name, "white"))
            text.append("  ".join(parts))
            console.print(text)
        else:
            print(f"{name:<8}{'  '.join(parts)}")


def cmd_estimate(args: argparse.Namespace) -> int:
    try:
        cfg = build_config(args)
        check_quantiles(cfg.quantiles)
        estimators = build_estimators(args.algorithm, cfg)
    except InvalidArgument as exc:
        print(f"[seqquantile] {exc}", file=sys.stderr)
        return 2
    quantiles = list(cfg.quantiles)
    sink: Optional[SnapshotSink] = None
    if args.jsonl:
        try:
            sink = JsonlSink(args.jsonl)
        except OSError as exc:
            print(f"[seqquantile] could not open JSONL file {args.jsonl}: {exc}", file=sys.stderr)
            return 2
    try:
        if args.file == "-":
            report = run_stream(sys.stdin, estimators, quantiles, args.emit_every, sink)
        else:
            try:
                handle = open(args.file, "r", encoding="utf-8", errors="replace")
            except OSError as exc:
                print(f"[seqquantile] cannot read {args.file}: {exc}", file=sys.stderr)
                return 2
            with handle:
                report = run_stream(handle, estimators, quantiles, args.emit_every, sink)
    finally:
        if sink is not None:
            sink.close()
    report["algorithm"] = args.algorithm
    if args.json:
        with open(args.json, "w", encoding="utf-8") as jf:
            json.dump(report, jf, indent=2)
        print(f"Wrote JSON {args.json}")
    _print_report(report, _maybe_console(args))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:  # pragma: no cover - integration feature
    try:
        import uvicorn
        from .service import build_app
    except Exception:  # noqa: BLE001
        print("'serve' requires fastapi and uvicorn. Install with `pip install seqquantile[server]`.", file=sys.stderr)
        return 2
    uvicorn.run(build_app(), host=args.host, port=args.port, log_level="info")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="seqquantile", description="Estimate quantiles of a numeric stream in bounded memory.")
    # Global --version (argparse will exit 0 before validating subcommands)
    parser.add_argument(
        "--version",
        action="version",
        version=f"seqquantile {__version__}",
    )
    sub = parser.add_subparsers(dest="cmd")

    est_parser = sub.add_parser("estimate", help="Stream values from a file (or - for stdin) through an estimator")
    est_parser.add_argument("file", help="One value per line: a number or a JSON object with a 'value' key")
    est_parser.add_argument(
        "--algorithm",
        choices=sorted(ALGORITHMS) + ["all"],
        default="p2",
        help="Estimator to run, or 'all' to compare every algorithm (default: p2)",
    )
    est_parser.add_argument("--quantiles", nargs="+", type=float, default=[0.5], help="Target quantiles in (0,1)")
    est_parser.add_argument("--epsilon", type=float, help="GK rank accuracy (default 0.01)")
    est_parser.add_argument("--delta", type=float, help="t-Digest packing parameter (default 100)")
    est_parser.add_argument("--capacity", type=int, help="KLL per-level capacity (default 200)")
    est_parser.add_argument("--seed", type=int, help="Seed for KLL compaction coin flips")
    est_parser.add_argument("--emit-every", type=int, default=0, help="Write a snapshot to --jsonl every N values")
    est_parser.add_argument("--jsonl", help="Append intermediate snapshots as JSON lines to this file")
    est_parser.add_argument("--json", help="Write the final report as JSON to this path")
    est_parser.add_argument("--no-color", action="store_true", help="Disable colorized output even if rich present")
    est_parser.set_defaults(func=cmd_estimate)

    serve_parser = sub.add_parser("serve", help="Run HTTP service (requires seqquantile[server])")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=8080)
    serve_parser.set_defaults(func=cmd_serve)

    # Simple 'version' subcommand for shells/users preferring explicit command
    version_parser = sub.add_parser("version", help="Show version and exit")
    version_parser.set_defaults(func=lambda _: (print(f"seqquantile {__version__}"), 0)[1])

    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    if not getattr(args, "cmd", None):  # No subcommand provided
        parser.print_help()
        return 0
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
