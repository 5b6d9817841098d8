# ABOUTME: Command-line entrypoints for cargo-rr (`cargo rr run|test|replay|ls|config`).
# ABOUTME: Everything after the first `--` is passed through verbatim to the command's child tool.
"""Command-line interface for cargo-rr."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from .build import (
    ArtifactResolver,
    BuildOptions,
    Cargo,
    FeatureSpec,
    NameSpec,
    RunRequest,
    TestEnumerator,
    TestRequest,
    TypeSpec,
)
from .build.filters import TargetType
from .config import Config, load_config
from .contracts import WorkspaceMetadata
from .errors import CargoRrError, NoCandidatesError, NothingSelectedError
from .ops import Recorder, Replayer, fixup_trace_name
from .ops.splice import partition
from .selection import FuzzySelector, Picker, TerminalFuzzySelector, TerminalPicker
from .traces import TraceRegistry

logger = logging.getLogger("cargo_rr")


def _setup_logging(config: Config) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )


def _exit_status(returncode: int | None) -> int:
    if returncode is None or returncode == 0:
        return 0
    return returncode if returncode > 0 else 1


def _open_registry(config: Config, metadata: WorkspaceMetadata | None = None) -> TraceRegistry:
    if config.trace_dir:
        return TraceRegistry.at(Path(config.trace_dir))
    if metadata is None:
        metadata = Cargo(config.cargo).metadata()
    return TraceRegistry.at(metadata.target_directory / "rr")


def cmd_config(config: Config) -> int:
    print(config.as_lines())
    return 0


def cmd_ls(config: Config) -> int:
    for name in _open_registry(config).list():
        print(name)
    return 0


def cmd_run(
    config: Config,
    *,
    request: RunRequest,
    rr_opts: str | None,
    program_args: Sequence[str],
    picker: Picker | None = None,
) -> int:
    build_args = request.cargo_args()

    cargo = Cargo(config.cargo)
    metadata = cargo.metadata()
    registry = _open_registry(config, metadata)
    messages = cargo.build(build_args)

    resolver = ArtifactResolver(metadata, picker or TerminalPicker())
    artifact = resolver.resolve(messages, request.categories())
    if artifact is None:
        raise NothingSelectedError("No artifact selected")

    print()
    recorder = Recorder(registry, rr=config.rr)
    trace = recorder.record(artifact.executable, rr_opts, program_args)
    print(f"trace={trace.name}")
    return _exit_status(recorder.last_returncode)


def cmd_test(
    config: Config,
    *,
    request: TestRequest,
    rr_opts: str | None,
    program_args: Sequence[str],
    selector: FuzzySelector | None = None,
) -> int:
    if request.target_type.kind is TargetType.DOC:
        raise NoCandidatesError("Doc tests cannot be recorded: cargo builds no executable for them")
    build_args = request.cargo_args()

    cargo = Cargo(config.cargo)
    metadata = cargo.metadata()
    registry = _open_registry(config, metadata)
    messages = cargo.build(build_args)

    resolver = ArtifactResolver(metadata, TerminalPicker())
    artifacts = resolver.candidates(messages, request.categories())
    if not artifacts:
        raise NoCandidatesError("No test artifacts built matching the request")

    enumerator = TestEnumerator(selector or TerminalFuzzySelector())
    spec = enumerator.select(enumerator.enumerate(artifacts, request.name, request.target_type))
    logger.info("Selected %s", spec.label())

    print()
    recorder = Recorder(registry, rr=config.rr)
    trace = recorder.record(
        spec.artifact.executable,
        rr_opts,
        [spec.test.name, "--exact", *program_args],
    )
    print(f"trace={trace.name}")
    return _exit_status(recorder.last_returncode)


def cmd_replay(
    config: Config,
    *,
    trace_name: str | None,
    rr_opts: str | None,
    passthrough: Sequence[str],
) -> int:
    trace_name, passthrough = fixup_trace_name(trace_name, passthrough)
    registry = _open_registry(config)
    trace = registry.open(trace_name) if trace_name else registry.latest()
    logger.info("Replaying %s", trace.path)
    Replayer(rr=config.rr, debugger=config.debugger).replay(trace, rr_opts, passthrough)
    return 0


def _add_build_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-p",
        "--package",
        dest="packages",
        action="append",
        default=[],
        help="Package to build (may be repeated)",
    )
    parser.add_argument(
        "-F",
        "--features",
        action="append",
        default=[],
        help="Space or comma separated list of features to activate",
    )
    parser.add_argument("--all-features", action="store_true", help="Activate all features")
    parser.add_argument(
        "--no-default-features", action="store_true", help="Do not activate the default feature"
    )
    parser.add_argument("--release", action="store_true", help="Build with the release profile")
    parser.add_argument("--profile", default=None, help="Build with the given profile")
    parser.add_argument(
        "--rr-opts",
        default=None,
        help="Options for `rr record`, as one string (e.g. --rr-opts='--chaos')",
    )


def _build_options(args: argparse.Namespace) -> BuildOptions:
    return BuildOptions(
        packages=list(args.packages),
        features=FeatureSpec.from_flags(
            features=args.features,
            all_features=args.all_features,
            no_default_features=args.no_default_features,
        ),
        release=args.release,
        profile=args.profile,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cargo rr",
        description="Record cargo binaries and tests with rr and replay them in a debugger.",
        epilog="Arguments after `--` are passed through to the recorded program or to `rr replay`.",
    )
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Build and record a binary or example")
    run_parser.add_argument("--bin", default=None, help="Name of the binary to record")
    run_parser.add_argument("--example", default=None, help="Name of the example to record")
    _add_build_arguments(run_parser)

    test_parser = subparsers.add_parser("test", help="Build and record a single test")
    test_parser.add_argument("name", nargs="?", default=None, help="Test name filter")
    test_parser.add_argument("--exact", action="store_true", help="Match the test name exactly")
    test_parser.add_argument("--lib", action="store_true", help="Only the library's unit tests")
    test_parser.add_argument("--bin", default=None, help="Only the given binary's unit tests")
    test_parser.add_argument("--bins", action="store_true", help="Only binaries' unit tests")
    test_parser.add_argument(
        "--test", dest="test_target", default=None, help="Only the given integration test"
    )
    test_parser.add_argument("--tests", action="store_true", help="Only integration tests")
    test_parser.add_argument("--example", default=None, help="Only the given example's tests")
    test_parser.add_argument("--examples", action="store_true", help="Only examples' tests")
    test_parser.add_argument("--doc", action="store_true", help="Only doc tests")
    _add_build_arguments(test_parser)

    replay_parser = subparsers.add_parser("replay", help="Replay a trace")
    replay_parser.add_argument(
        "trace", nargs="?", default=None, help="Leave blank to replay the last trace recorded"
    )
    replay_parser.add_argument(
        "--rr-opts",
        default=None,
        help="Options for `rr replay`, as one string (see `rr replay -h`)",
    )

    subparsers.add_parser("ls", help="List traces, oldest first")
    subparsers.add_parser("config", help="Print configuration summary")
    return parser


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    # cargo runs external subcommands as `cargo-rr rr ...`.
    if argv[:1] == ["rr"]:
        argv = argv[1:]
    head, passthrough = partition(argv)

    parser = build_parser()
    args, extras = parser.parse_known_args(head)
    # `replay` forwards unknown flags to rr through the trace-name fixup.
    if extras and (args.command != "replay" or not all(t.startswith("-") for t in extras)):
        parser.error(f"unrecognized arguments: {' '.join(extras)}")
    if args.command in {"ls", "config"} and passthrough:
        parser.error(f"`{args.command}` takes no arguments after --")

    config = load_config()
    _setup_logging(config)

    try:
        if args.command == "config":
            return cmd_config(config)
        if args.command == "ls":
            return cmd_ls(config)
        if args.command == "run":
            request = RunRequest(build=_build_options(args), bin=args.bin, example=args.example)
            return cmd_run(config, request=request, rr_opts=args.rr_opts, program_args=passthrough)
        if args.command == "test":
            request = TestRequest(
                build=_build_options(args),
                name=NameSpec.from_flags(args.name, exact=args.exact),
                target_type=TypeSpec.from_flags(
                    lib=args.lib,
                    bin=args.bin,
                    bins=args.bins,
                    test=args.test_target,
                    tests=args.tests,
                    example=args.example,
                    examples=args.examples,
                    doc=args.doc,
                ),
            )
            return cmd_test(config, request=request, rr_opts=args.rr_opts, program_args=passthrough)
        if args.command == "replay":
            trace_name = args.trace
            if extras and trace_name is None:
                trace_name, extras = extras[0], extras[1:]
            return cmd_replay(
                config,
                trace_name=trace_name,
                rr_opts=args.rr_opts,
                passthrough=[*extras, *passthrough],
            )
    except CargoRrError as exc:
        # Keep our error apart from whatever cargo or rr printed.
        print()
        print(f"error={exc}", file=sys.stderr)
        return exc.exit_code

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
