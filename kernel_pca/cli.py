"""Command-line entry point: run kernel PCA on a feature CSV and persist artifacts."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .errors import KernelPCAError
from .kernels import available_kernels
from .preprocessing import KernelPCAPreprocessor
from .sampling import available_sampling_schemes
from .utils.config import load_config
from .utils.logging import setup_logging

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _coerce_param_value(raw: str):
    """Parse a sampling parameter value from the CLI."""

    lowered = raw.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        pass
    return raw


def _parse_params(pairs: Iterable[str]) -> Dict[str, object]:
    params: Dict[str, object] = {}
    for pair in pairs:
        if "=" not in pair:
            raise argparse.ArgumentTypeError(
                f"Invalid --sampling-param '{pair}'. Expected format KEY=VALUE."
            )
        key, raw_value = pair.split("=", 1)
        key = key.strip()
        if not key:
            raise argparse.ArgumentTypeError(
                "Sampling parameter keys must be non-empty (format KEY=VALUE)."
            )
        params[key] = _coerce_param_value(raw_value.strip())
    return params


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kernel-pca",
        description="Run kernel PCA (optionally Nystroem-accelerated) on a feature CSV.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML or JSON run configuration. Command-line flags take precedence.",
    )
    parser.add_argument(
        "--input-features",
        type=Path,
        default=None,
        help="Path to the feature CSV (one row per sample).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Directory where the run folder will be created.",
    )
    parser.add_argument("--run-id", type=str, default=None, help="Run identifier.")
    parser.add_argument(
        "--kernel",
        type=str,
        default=None,
        help=f"Kernel to use; one of: {', '.join(available_kernels())}.",
    )
    parser.add_argument(
        "--new-dimensionality",
        "-d",
        type=int,
        default=None,
        help="Number of output dimensions (at most the number of samples).",
    )
    parser.add_argument(
        "--bandwidth",
        type=float,
        default=None,
        help="Bandwidth for 'gaussian', 'laplacian' and 'epanechnikov' kernels.",
    )
    parser.add_argument(
        "--degree", type=float, default=None, help="Degree of the 'polynomial' kernel."
    )
    parser.add_argument(
        "--offset",
        type=float,
        default=None,
        help="Offset for the 'polynomial' and 'hyptan' kernels.",
    )
    parser.add_argument(
        "--kernel-scale",
        type=float,
        default=None,
        help="Scale for the 'hyptan' kernel.",
    )
    parser.add_argument(
        "--center",
        action="store_true",
        default=None,
        help="Center the kernel matrix in feature space before the decomposition.",
    )
    parser.add_argument(
        "--nystroem-method",
        action="store_true",
        default=None,
        help="Approximate the kernel matrix with the Nystroem method.",
    )
    parser.add_argument(
        "--rank",
        type=int,
        default=None,
        help="Nystroem rank (defaults to the new dimensionality).",
    )
    parser.add_argument(
        "--sampling",
        type=str,
        default=None,
        help=(
            "Nystroem point selection scheme; one of: "
            f"{', '.join(available_sampling_schemes())}."
        ),
    )
    parser.add_argument(
        "--sampling-param",
        type=str,
        action="append",
        default=None,
        help=(
            "Additional sampling parameters in KEY=VALUE format (repeatable), "
            "e.g. --sampling-param representative=nearest."
        ),
    )
    parser.add_argument(
        "--random-state",
        type=int,
        default=None,
        help="Random state for the sampling scheme.",
    )
    parser.add_argument(
        "--metadata-columns",
        type=str,
        nargs="*",
        default=None,
        help="Columns from the feature matrix to preserve in the projection output.",
    )
    parser.add_argument(
        "--no-standardise",
        action="store_true",
        help="Disable z-score standardisation before projection.",
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed used for reproducibility."
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        default=None,
        help="Overwrite the run directory if it already exists.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=LOG_LEVELS,
        help="Logging verbosity for the run.",
    )
    parser.add_argument(
        "--log-file", type=Path, default=None, help="Optional log file path."
    )
    return parser


def _set(overrides: Dict[str, Dict[str, Any]], section: str, key: str, value: Any) -> None:
    if value is not None:
        overrides.setdefault(section, {})[key] = value


def build_overrides(args: argparse.Namespace) -> Dict[str, Dict[str, Any]]:
    """Turn the flags given on the command line into nested config overrides."""
    overrides: Dict[str, Dict[str, Any]] = {}
    _set(overrides, "kernel", "name", args.kernel)
    _set(overrides, "kernel", "bandwidth", args.bandwidth)
    _set(overrides, "kernel", "degree", args.degree)
    _set(overrides, "kernel", "offset", args.offset)
    _set(overrides, "kernel", "kernel_scale", args.kernel_scale)
    _set(overrides, "reduction", "new_dimensionality", args.new_dimensionality)
    _set(overrides, "reduction", "center", args.center)
    _set(overrides, "nystroem", "enabled", args.nystroem_method)
    _set(overrides, "nystroem", "rank", args.rank)
    _set(overrides, "nystroem", "sampling", args.sampling)
    _set(overrides, "nystroem", "random_state", args.random_state)
    if args.sampling_param:
        _set(overrides, "nystroem", "params", _parse_params(args.sampling_param))
    if args.input_features is not None:
        _set(overrides, "io", "input_features", str(args.input_features.resolve()))
    if args.output is not None:
        _set(overrides, "io", "output_root", str(args.output.resolve()))
    if args.no_standardise:
        _set(overrides, "io", "standardise", False)
    if args.metadata_columns is not None:
        _set(overrides, "io", "metadata_columns", [str(col) for col in args.metadata_columns])
    _set(overrides, "run", "run_id", args.run_id)
    _set(overrides, "run", "seed", args.seed)
    _set(overrides, "run", "overwrite", args.overwrite)
    _set(overrides, "run", "log_level", args.log_level)
    return overrides


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        overrides = build_overrides(args)
    except argparse.ArgumentTypeError as exc:
        print(exc, file=sys.stderr)
        return 2

    try:
        config = load_config(args.config, overrides=overrides)
        setup_logging(level=config.log_level, log_file=args.log_file)
        result = KernelPCAPreprocessor(config).execute()
    except (KernelPCAError, FileNotFoundError, FileExistsError, ValueError) as exc:
        logging.getLogger("kernel_pca").debug("Run failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(f"Run directory: {result.run_dir}")
    for name, path in result.artifacts.items():
        print(f"{name}: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
