#!/usr/bin/env python3
"""
Donor Registry - Command Line Runner

This script provides a command-line interface to unify unit files into a donor
registry and to search that registry for potential donors.
"""

import sys
import argparse
import logging

from donor_registry import DonorRegistry


def get_args(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description="Donor Registry - Unify donor records and find potential donors"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    unify = subparsers.add_parser("unify", help="Merge unit files into a registry")
    unify.add_argument(
        "--root", "-r",
        required=True,
        help="Root name of the unit files (<root>1.txt, <root>2.txt, ...)"
    )
    unify.add_argument(
        "--units", "-n",
        type=int,
        required=True,
        help="Number of units"
    )
    unify.add_argument(
        "--database", "-d",
        required=True,
        help="Path of the registry file to create"
    )
    unify.add_argument(
        "--separator-policy",
        choices=["unit_boundary", "per_record"],
        default="unit_boundary",
        help="Where newlines go in the registry (default: unit_boundary)"
    )

    match = subparsers.add_parser("match", help="Find potential donors for a patient")
    match.add_argument(
        "--database", "-d",
        required=True,
        help="Path of the registry file to scan"
    )
    match.add_argument(
        "--genes", "-g",
        nargs=5,
        required=True,
        metavar="GENE",
        help="The patient's five gene values, in slot order"
    )
    match.add_argument(
        "--min-match", "-m",
        type=int,
        default=3,
        help="Minimal number of matching genes (default: 3)"
    )
    match.add_argument(
        "--output", "-o",
        default="output",
        help="Directory to save output files (default: output)"
    )
    match.add_argument(
        "--no-visualization",
        action="store_true",
        help="Disable visualization generation"
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main execution function"""
    args = get_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger = logging.getLogger('donor_registry')
    logger.setLevel(log_level)

    try:
        if args.command == "unify":
            logger.info("Donor Registry - Unifying with configuration:")
            logger.info(f"- Unit files: {args.root}1.txt .. {args.root}{args.units}.txt")
            logger.info(f"- Database: {args.database}")
            logger.info(f"- Separator policy: {args.separator_policy}")

            registry = DonorRegistry(database=args.database)
            registry.set_configuration(separator_policy=args.separator_policy)
            summary = registry.unify_units(args.root, args.units)

            logger.info(f"Registry {summary['database']} holds {summary['records_written']} donors")
            return 0

        logger.info("Donor Registry - Matching with configuration:")
        logger.info(f"- Database: {args.database}")
        logger.info(f"- Patient genes: {' '.join(args.genes)}")
        logger.info(f"- Minimum match: {args.min_match}")
        logger.info(f"- Visualization: {'Disabled' if args.no_visualization else 'Enabled'}")

        registry = DonorRegistry(database=args.database, output_dir=args.output)
        results = registry.run_pipeline(
            args.genes,
            min_match=args.min_match,
            visualize=not args.no_visualization
        )

        print(registry.report())

        if results['csv_output']:
            logger.info(f"Results saved to {results['csv_output']}")
        if results['visualizations']:
            for viz_type, path in results['visualizations'].items():
                logger.info(f"{viz_type.replace('_', ' ').capitalize()} visualization saved to {path}")

        return 0

    except Exception as e:
        logger.error(f"Error during execution: {str(e)}", exc_info=args.verbose)
        return 1


if __name__ == "__main__":
    sys.exit(main())
