"""
BBXX report command line tool.

    python main.py decode "BBXX WXH9553 15144 99281 71127 43/// /2715 ..."
    python main.py encode --samples samples.json --station WXH9553
    python main.py --metrics encode --samples samples.json --max-samples 5

The samples file holds a JSON list of sample objects, either RawSample
fields (degrees, knots, Celsius) or SignalK vessel snapshots (with
--signalk).
"""

import sys
import json
import logging
import argparse
from datetime import datetime
from typing import List, Optional

import config
from bbxx_core.errors import MissingDataError
from bbxx_core.proto import RawSample, DecodeResult
from bbxx_core.fusion import ObservationAggregator, AggregatorConfig, sample_from_signalk
from bbxx_core.codec import (
    BbxxEncoder,
    BbxxDecoder,
    build_submission_form,
    human_readable_report,
)
from bbxx_core.metrics import get_metrics

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.LOGGING_CONFIG["level"]),
    format=config.LOGGING_CONFIG["format"]
)
logger = logging.getLogger(__name__)


def load_samples(path: str, signalk: bool = False) -> List[RawSample]:
    """
    Load raw samples from a JSON file.

    Samples that fail validation are skipped with a warning, the way a
    failed sensor read is skipped.
    """
    with open(path, encoding="utf-8") as f:
        records = json.load(f)

    if isinstance(records, dict):
        records = [records]

    samples = []
    for i, record in enumerate(records, start=1):
        try:
            sample = sample_from_signalk(record) if signalk else RawSample.from_dict(record)
        except (TypeError, ValueError) as e:
            get_metrics().increment('samples_rejected')
            logger.warning(f"Sample {i} failed to load - skipping: {e}")
            continue
        samples.append(sample)

    logger.info(f"Loaded {len(samples)}/{len(records)} samples from {path}")
    return samples


def format_decode_result(result: DecodeResult) -> str:
    """Plain-text analysis of a decoded message."""
    lines = ["BBXX Message Analysis", "=" * 50, f"Input: {result.message}", ""]

    for name, field in result.fields.items():
        value = "" if field.value is None else f" = {field.value}"
        lines.append(f"  {name:20s} {field.status.value:8s}{value}")

    if result.issues:
        lines.append("")
        for issue in result.issues:
            lines.append(f"  {issue.severity.value.upper():8s} {issue.message}")

    lines.append("")
    lines.append(f"Overall Validity: {'VALID' if result.is_valid else 'INVALID'}")
    return "\n".join(lines)


def run_decode(args: argparse.Namespace) -> int:
    """Decode and validate a message; exit status reflects validity."""
    result = BbxxDecoder().decode(" ".join(args.message))

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_decode_result(result))

    return 0 if result.is_valid else 1


def run_encode(args: argparse.Namespace) -> int:
    """Aggregate samples from a file and print the encoded report."""
    samples = load_samples(args.samples, signalk=args.signalk)
    if not samples:
        logger.error("No valid samples collected!")
        return 1

    if len(samples) > args.max_samples:
        logger.info(f"Using the latest {args.max_samples} of {len(samples)} samples")
        samples = samples[-args.max_samples:]

    observation_time = None
    if args.time:
        try:
            observation_time = datetime.fromisoformat(args.time)
        except ValueError as e:
            logger.error(f"Invalid --time {args.time!r}: {e}")
            return 1

    aggregator = ObservationAggregator(AggregatorConfig(**config.AGGREGATION_CONFIG))
    try:
        obs = aggregator.aggregate(samples, observation_time)
    except MissingDataError as e:
        logger.error(f"Cannot generate report: {e}")
        return 1

    report = BbxxEncoder().encode(obs, args.station)

    if args.json:
        print(json.dumps({
            'observation': obs.to_dict(),
            'bbxx': report,
            'form': build_submission_form(obs, report, args.station),
        }, indent=2))
    else:
        print(human_readable_report(obs))
        print()
        print("BBXX Report:")
        print(report)

    return 0


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='BBXX marine weather report tool')
    parser.add_argument('--debug', '-d', action='store_true',
                        help='Enable debug logging')
    parser.add_argument('--metrics', action='store_true',
                        help='Print pipeline metrics after the command')
    sub = parser.add_subparsers(dest='command', required=True)

    p_decode = sub.add_parser('decode', help='Validate and decode a BBXX message')
    p_decode.add_argument('message', nargs='+', help='BBXX message (quoted or as groups)')
    p_decode.add_argument('--json', action='store_true', help='Print JSON')
    p_decode.set_defaults(func=run_decode)

    p_encode = sub.add_parser('encode', help='Aggregate samples and encode a report')
    p_encode.add_argument('--samples', '-s', required=True,
                          help='JSON file with a list of samples')
    p_encode.add_argument('--station', default=config.STATION_CONFIG["station_id"],
                          help='Ship station callsign')
    p_encode.add_argument('--signalk', action='store_true',
                          help='Samples are SignalK vessel snapshots (SI units)')
    p_encode.add_argument('--time', default=None,
                          help='Observation time, ISO 8601 (default: now, UTC)')
    p_encode.add_argument('--max-samples', type=_positive_int,
                          default=config.SAMPLING_CONFIG["max_samples"],
                          help='Average only the latest N samples')
    p_encode.add_argument('--json', action='store_true', help='Print JSON')
    p_encode.set_defaults(func=run_encode)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point."""
    args = build_parser().parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    status = args.func(args)

    if args.metrics:
        print()
        print("\n".join(get_metrics().summary_lines()))

    return status


if __name__ == "__main__":
    sys.exit(main())
