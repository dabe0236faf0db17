#!/usr/bin/env python3
"""
NumberKit CLI
=============
Command-line interface for number scoring and generation.

Usage:
    numberkit categorize 8888 --profile china
    numberkit score 1234 -v
    numberkit generate -l 6 -t Gold -n 10
    numberkit suggest 1294
    numberkit profiles
    numberkit distribution -l 4
"""

import argparse
import json
import logging
import sys

from numberkit import __version__
from numberkit.scoring import TIER_NAMES, Tier
from numberkit.settings import get_setting

TIERS = list(TIER_NAMES)

# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def print(self, *args, **kwargs):
        if not self.quiet:
            print(*args, **kwargs)

    def error(self, msg: str):
        print(f"Error: {msg}", file=sys.stderr)

    def json(self, data):
        # JSON is the requested payload, so it ignores --quiet
        print(json.dumps(data, indent=2))

    def table(self, headers: list, rows: list, col_widths: list = None):
        """Print a formatted table."""
        if self.quiet:
            return

        if not col_widths:
            col_widths = [max(len(str(h)), max((len(str(r[i])) for r in rows), default=0)) + 2
                         for i, h in enumerate(headers)]

        header_line = ''.join(str(h).ljust(w) for h, w in zip(headers, col_widths))
        print(header_line)
        print('-' * len(header_line))

        for row in rows:
            print(''.join(str(c).ljust(w) for c, w in zip(row, col_widths)))


def setup_logging(verbose: bool = False):
    level_name = 'DEBUG' if verbose else str(get_setting('logging.level', 'WARNING')).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format=get_setting('logging.format', '%(levelname)s %(name)s: %(message)s'),
    )


def build_config(args):
    """Scoring config from app.yaml plus any command-line overrides."""
    from numberkit.config import WEIGHT_NAMES, config_for_profile, get_config, parse_tokens

    cfg = get_config(length_aware=getattr(args, 'length_aware', False))
    if getattr(args, 'profile', None):
        cfg = config_for_profile(cfg, args.profile)
    changes = {}
    if getattr(args, 'lucky', None) is not None:
        changes['lucky_tokens'] = parse_tokens(args.lucky)
    if getattr(args, 'unlucky', None) is not None:
        changes['unlucky_tokens'] = parse_tokens(args.unlucky)
    for override in getattr(args, 'weight', None) or []:
        name, _, value = override.partition('=')
        if not value:
            raise ValueError(f"--weight expects NAME=VALUE, got '{override}'")
        if name.strip() not in WEIGHT_NAMES:
            raise ValueError(f"Unknown weight '{name.strip()}'. Available weights: {', '.join(WEIGHT_NAMES)}")
        changes[name.strip()] = float(value)
    if changes:
        cfg = cfg.with_updates(**changes)
    return cfg


def format_notes(notes, limit: int = 3) -> str:
    return ', '.join(f"{n.token} ({n.type}, {n.region})" for n in notes[:limit])


def print_assessments(items, out: Output):
    rows = [
        (item.number, item.subcategory, item.score, format_notes(item.notes))
        for item in items
    ]
    out.table(['Number', 'Tier', 'Score', 'Notes'], rows)


# =============================================================================
# Commands
# =============================================================================

def cmd_categorize(args, out: Output):
    """Categorize a number."""
    from numberkit.categorizer import ValidationError, categorize

    result = categorize(args.number, build_config(args))
    if args.json:
        out.json(result.to_dict())
        return 1 if isinstance(result, ValidationError) else 0

    if isinstance(result, ValidationError):
        out.error(result.error)
        return 1

    out.print(f"Number:      {result.number}")
    out.print(f"Category:    {result.digit_category}")
    out.print(f"Subcategory: {result.subcategory}")
    out.print(f"Score:       {result.score}")
    if result.notes:
        out.print("Notes:")
        for note in result.notes:
            out.print(f"  [{note.type}] {note.token}: {note.reason} ({note.region})")
    return 0


def cmd_score(args, out: Output):
    """Show the score, optionally with the feature breakdown."""
    from numberkit.categorizer import is_valid_number, validation_message
    from numberkit.scoring import breakdown

    if not is_valid_number(args.number):
        out.error(validation_message())
        return 1

    result = breakdown(args.number, build_config(args))
    if args.json:
        out.json(result.to_dict())
        return 0

    out.print(f"{result.number}: {result.rounded} ({result.tier.label})")
    if args.verbose:
        out.print()
        rows = [
            (name, f"{value:.2f}", f"{result.weights[name]:.2f}", f"{value * result.weights[name]:.2f}")
            for name, value in result.features.items()
        ]
        rows.append(('cultural', f"{result.cultural:.2f}", '-', f"{result.cultural:.2f}"))
        out.table(['Feature', 'Raw', 'Weight', 'Weighted'], rows)
        out.print()
        out.print(f"Raw total: {result.raw_total:.2f}  Clamped: {result.total:.2f}")
    return 0


def cmd_generate(args, out: Output):
    """Generate numbers in a tier."""
    from numberkit.parallel import BackgroundGenerator
    from numberkit.ui import get_ui

    count = args.count if args.count is not None else int(get_setting('generator.default_count', 10))
    if count < 1:
        raise ValueError(f"--count must be at least 1, got {count}")
    tier = Tier.from_name(args.tier).label

    if not args.json:
        out.print(f"Generating {count} {args.length}-digit {tier} numbers...")

    ui = get_ui(target=count, length=args.length, tier=tier, quiet=args.quiet or args.json)
    with BackgroundGenerator(build_config(args), workers=1, max_attempts=args.max_attempts) as runner, ui:
        job = runner.submit(args.length, tier, count, on_match=ui.add_match, on_progress=ui.update)
        try:
            results = job.result()
        except KeyboardInterrupt:
            job.cancel()
            raise

    if args.json:
        out.json([r.to_dict() for r in results])
        return 0

    if not results:
        out.print("No numbers found.")
        return 0

    out.print()
    print_assessments(results, out)
    if len(results) < count:
        out.print(f"\nOnly {len(results)} of {count} found within the attempt budget.")
    return 0


def cmd_suggest(args, out: Output):
    """Suggest higher-scoring variants of a number."""
    from numberkit.categorizer import ValidationError
    from numberkit.generator import Generator

    if args.count is not None and args.count < 1:
        raise ValueError(f"--count must be at least 1, got {args.count}")
    result = Generator(build_config(args)).suggest_nearby(args.number, args.count)
    if isinstance(result, ValidationError):
        if args.json:
            out.json(result.to_dict())
        else:
            out.error(result.error)
        return 1

    if args.json:
        out.json([r.to_dict() for r in result])
        return 0

    if not result:
        out.print("No better variants found.")
        return 0
    print_assessments(result, out)
    return 0


def cmd_profiles(args, out: Output):
    """List culture profiles."""
    from numberkit.config import list_profiles

    profiles = list_profiles()
    if args.json:
        out.json(profiles)
        return 0

    rows = [
        (name, ', '.join(p['lucky']) or '-', ', '.join(p['unlucky']) or '-')
        for name, p in profiles.items()
    ]
    out.table(['Profile', 'Lucky', 'Unlucky'], rows)
    return 0


def cmd_distribution(args, out: Output):
    """Show how numbers of one length spread over the tiers."""
    from numberkit.calibration import tier_distribution

    dist = tier_distribution(
        args.length,
        build_config(args),
        sample_size=args.samples,
        exhaustive=True if args.exhaustive else None,
    )
    if args.json:
        out.json(dist.to_dict())
        return 0

    mode = 'all numbers' if dist.exhaustive else f'{dist.examined} samples'
    out.print(f"{dist.length}-digit tier distribution ({mode})")
    out.print()
    rows = [
        (tier, dist.counts.get(tier, 0), f"{dist.share(tier) * 100:.2f}%")
        for tier in TIERS
    ]
    out.table(['Tier', 'Count', 'Share'], rows)
    out.print()
    out.print(f"Score mean {dist.mean:.1f}, median {dist.median:.1f}, stdev {dist.stdev:.1f}, "
              f"range {dist.minimum}-{dist.maximum}")
    return 0


# =============================================================================
# Main
# =============================================================================

def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='numberkit',
        description='NumberKit - Memorable Number Scoring & Generation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s categorize 8888 --profile china
  %(prog)s score 1234 -v
  %(prog)s generate -l 6 -t Gold -n 10
  %(prog)s suggest 1294 -n 3
  %(prog)s distribution -l 4
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')

    scoring_opts = argparse.ArgumentParser(add_help=False)
    scoring_opts.add_argument('--profile', '-p', help='Culture profile (sets notes and token sets)')
    scoring_opts.add_argument('--lucky', help='Comma-separated lucky tokens (e.g. "7,8")')
    scoring_opts.add_argument('--unlucky', help='Comma-separated unlucky tokens (e.g. "4,13")')
    scoring_opts.add_argument('--weight', '-w', action='append', metavar='NAME=VALUE',
                              help='Override a feature weight (repeatable)')
    scoring_opts.add_argument('--length-aware', action='store_true',
                              help='Apply per-length weight multipliers from app.yaml')
    scoring_opts.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- categorize ---
    p = subparsers.add_parser('categorize', aliases=['cat', 'c'], parents=[scoring_opts],
                              help='Categorize a number')
    p.add_argument('number', help='4-8 digit number')

    # --- score ---
    p = subparsers.add_parser('score', aliases=['s'], parents=[scoring_opts], help='Score a number')
    p.add_argument('number', help='4-8 digit number')
    p.add_argument('--verbose', '-v', action='store_true', help='Show feature breakdown')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], parents=[scoring_opts],
                              help='Generate numbers in a tier')
    p.add_argument('-l', '--length', type=int, choices=range(4, 9), default=4, metavar='{4..8}',
                   help='Digit length (default: 4)')
    p.add_argument('-t', '--tier', choices=TIERS, default='Premium', help='Target tier (default: Premium)')
    p.add_argument('-n', '--count', type=int, help='Number of results (default: from app.yaml)')
    p.add_argument('--max-attempts', type=int, help='Random sampling budget')

    # --- suggest ---
    p = subparsers.add_parser('suggest', parents=[scoring_opts], help='Suggest better nearby numbers')
    p.add_argument('number', help='4-8 digit number')
    p.add_argument('-n', '--count', type=int, help='Number of suggestions')

    # --- profiles ---
    p = subparsers.add_parser('profiles', help='List culture profiles')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    # --- distribution ---
    p = subparsers.add_parser('distribution', aliases=['dist'], parents=[scoring_opts],
                              help='Tier distribution for a digit length')
    p.add_argument('-l', '--length', type=int, choices=range(4, 9), default=4, metavar='{4..8}',
                   help='Digit length (default: 4)')
    p.add_argument('--samples', type=int, help='Sample size for long lengths')
    p.add_argument('--exhaustive', action='store_true', help='Score every number of that length')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    cmd_map = {
        'cat': 'categorize', 'c': 'categorize',
        's': 'score',
        'gen': 'generate', 'g': 'generate',
        'dist': 'distribution',
    }
    command = cmd_map.get(args.command, args.command)

    setup_logging(verbose=args.debug)
    out = Output(quiet=args.quiet)

    commands = {
        'categorize': cmd_categorize,
        'score': cmd_score,
        'generate': cmd_generate,
        'suggest': cmd_suggest,
        'profiles': cmd_profiles,
        'distribution': cmd_distribution,
    }

    handler = commands.get(command)
    if handler:
        try:
            return handler(args, out)
        except KeyboardInterrupt:
            out.print("\nCancelled.")
            return 130
        except Exception as e:
            out.error(str(e))
            if args.debug:
                import traceback
                traceback.print_exc()
            return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
