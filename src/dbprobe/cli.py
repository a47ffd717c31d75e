from __future__ import annotations

import argparse
import os
import sys
from typing import Any, Dict, List, Mapping, Optional

from dbprobe.config import ambient_source, load_config, parse_overrides, settings_from_mapping
from dbprobe.drivers import available_drivers
from dbprobe.errors import ConfigLoadError
from dbprobe.report import write_report
from dbprobe.runner import ProbeRunner


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Connect to a database, run one query and report metadata, a sample row and timings"
    )
    parser.add_argument(
        "config",
        nargs="?",
        default=None,
        help="Path to a YAML or .properties file; DBPROBE_* environment variables are used when omitted",
    )
    parser.add_argument(
        "-D",
        dest="define",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Set a configuration key (repeatable, applied last)",
    )
    parser.add_argument("--report", default=None, help="Write a JSON run report to this path")
    parser.add_argument("--list-drivers", action="store_true", help="List registered drivers and exit")
    return parser


def main(argv: Optional[List[str]] = None, environ: Optional[Mapping[str, str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_drivers:
        for kind in available_drivers():
            print(kind)
        return 0

    try:
        if args.config:
            mapping: Dict[str, Any] = load_config(args.config)
            mapping.update(parse_overrides(args.define))
        else:
            mapping = ambient_source(os.environ if environ is None else environ, args.define)
    except ConfigLoadError as exc:
        print(exc.message, file=sys.stderr)
        return exc.exit_code

    runner = ProbeRunner(settings_from_mapping(mapping))
    report = runner.run()
    if args.report:
        path = write_report(report, args.report)
        print(f"Report JSON: {os.path.relpath(path)}")
    return report.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
