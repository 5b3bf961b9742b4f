"""Command line entry point for batch processing documents with MonkeyLearn.

Reads a JSON list of documents, sends them in batches to a classifier or an
extractor without exceeding the configured request rate, and reports every
result as it arrives together with the remaining API quota.
"""

import argparse
import asyncio
import logging
import sys

from tqdm import tqdm

from monkeylearn_client.api import OPERATION_TEMPLATES
from monkeylearn_client.config import ConfigError, ConfigValidator, Settings
from monkeylearn_client.io import DocumentReader, IOError, ResultWriter
from monkeylearn_client.pipeline import ApplicationError, BatchFailure, DispatchStats, Pipeline
from monkeylearn_client.processing import InvalidArgumentError, Result

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_BATCH_FAILURES = 2


# ============================================================================
# Utility functions
# ============================================================================
def setup_logging(level: str = 'INFO') -> None:
    """Set up application logging.

    Args:
        level: Logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR')
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    log_format = '%(asctime)s %(name)s [%(levelname)s]: %(message)s'
    logging.basicConfig(
        level=numeric_level,
        format=log_format,
        datefmt='%Y-%m-%d %H:%M:%S',
        force=True,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )

    logging.info('Logging configured (level=%s)', level)

    # Set specific loggers to appropriate levels
    for logger_name in ['aiohttp', 'urllib3', 'requests']:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def _config_overrides(args: argparse.Namespace) -> dict:
    """Map command line arguments onto Settings names."""
    return {
        'MONKEYLEARN_TOKEN': args.token,
        'MONKEYLEARN_BASE_URL': args.base_url,
        'MONKEYLEARN_MODEL': args.model,
        'MONKEYLEARN_OPERATION': args.operation,
        'MONKEYLEARN_RPM': args.rpm,
        'BATCH_SIZE': args.batch_size,
        'MAX_IN_FLIGHT': args.max_in_flight,
        'REQUEST_TIMEOUT': args.timeout,
    }


def validate_configuration(args: argparse.Namespace) -> None:
    """Validate application configuration.

    Raises:
        ApplicationError: If configuration is invalid.
    """
    try:
        ConfigValidator.validate_all(**_config_overrides(args))
    except ConfigError as e:
        raise ApplicationError(f'Configuration validation failed: {e}') from e


def _get_example_text() -> str:
    """Get example text for argument parser epilog."""
    return """
Examples:
    # Classify documents, 2 per request, at most 60 requests per minute
    monkeylearn-client --token $TOKEN --model cl_pi3C7JiL \\
        --file data.json --batch-size 2 --rpm 60

    # Run an extractor against a local fake server and keep the results
    monkeylearn-client --token test --model ex_YCya9nrn --operation extract \\
        --base-url http://localhost:8080 --output output/results.jsonl -l DEBUG
"""


def _add_api_arguments(parser: argparse.ArgumentParser) -> None:
    """Add API and model arguments to the parser.

    Args:
        parser: ArgumentParser instance.
    """
    parser.add_argument(
        '--token', '-t',
        type=str,
        default=Settings.MONKEYLEARN_TOKEN,
        help='MonkeyLearn token (default: MONKEYLEARN_TOKEN)'
    )

    parser.add_argument(
        '--base-url',
        type=str,
        default=Settings.MONKEYLEARN_BASE_URL,
        help='Base URL of the API server'
    )

    parser.add_argument(
        '--model', '-m',
        type=str,
        default=Settings.MONKEYLEARN_MODEL,
        help='Classifier or extractor identifier'
    )

    parser.add_argument(
        '--operation', '-o',
        type=str,
        choices=sorted(OPERATION_TEMPLATES),
        default=Settings.MONKEYLEARN_OPERATION,
        help='Whether the model is a classifier or an extractor'
    )


def _add_throughput_arguments(parser: argparse.ArgumentParser) -> None:
    """Add batching and rate limiting arguments to the parser.

    Args:
        parser: ArgumentParser instance.
    """
    parser.add_argument(
        '--rpm',
        type=int,
        default=Settings.MONKEYLEARN_RPM,
        help='Requests per minute (should be lower than the API rate limit)'
    )

    parser.add_argument(
        '--batch-size', '-b',
        type=int,
        default=Settings.BATCH_SIZE,
        help='Documents per batch'
    )

    parser.add_argument(
        '--max-in-flight',
        type=int,
        default=Settings.MAX_IN_FLIGHT,
        help='Maximum number of concurrent requests (default: unbounded)'
    )

    parser.add_argument(
        '--timeout',
        type=float,
        default=Settings.REQUEST_TIMEOUT,
        help='Per-request timeout in seconds'
    )


def _add_io_arguments(parser: argparse.ArgumentParser) -> None:
    """Add input/output file arguments to the parser.

    Args:
        parser: ArgumentParser instance.
    """
    parser.add_argument(
        '--file', '-f',
        type=str,
        default=Settings.INPUT_FILE,
        help='File containing the documents to process'
    )

    parser.add_argument(
        '--output',
        type=str,
        default=Settings.OUTPUT_FILE,
        help='Optional JSON lines file to write the results to'
    )

    parser.add_argument(
        '--stats-output',
        type=str,
        default=None,
        help='Optional JSON file to write run statistics to'
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        description='Send documents to a MonkeyLearn classifier or extractor in rate-limited batches',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        epilog=_get_example_text()
    )

    _add_api_arguments(parser)
    _add_throughput_arguments(parser)
    _add_io_arguments(parser)

    parser.add_argument(
        '--log-level', '-l',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default='INFO',
        help='Set logging level'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Validate configuration and inputs without sending requests'
    )

    return parser


# ============================================================================
# Processing
# ============================================================================
async def process_documents(
    args: argparse.Namespace,
    pipeline: Pipeline,
) -> tuple[list[Result], list[BatchFailure], DispatchStats]:
    """Run the pipeline and report results and failures as they arrive.

    Args:
        args: Parsed command line arguments.
        pipeline: Pipeline loaded with the documents to process.

    Returns:
        Tuple of (results, failures, stats).
    """
    results: list[Result] = []
    failures: list[BatchFailure] = []

    try:
        stream = await pipeline.start(args.batch_size)
    except InvalidArgumentError as e:
        raise ApplicationError(f'Invalid batch size: {e}') from e

    async def consume_results(progress: tqdm) -> None:
        async for result in stream.iter_results():
            results.append(result)
            logging.info('Result: %r', result)
            if result.error() is not None:
                logging.warning('Document %s was not processed: %s',
                                result.external_id, result.error_detail)
            progress.update(1)

    async def consume_errors() -> None:
        async for failure in stream.iter_errors():
            failures.append(failure)
            logging.error('%s', failure)

    with tqdm(total=len(pipeline.documents), desc=f'{args.operation} {args.model}') as progress:
        await asyncio.gather(consume_results(progress), consume_errors())

    stats = await pipeline.wait()
    return results, failures, stats


async def run_async(args: argparse.Namespace) -> int:
    """Read the documents, process them and write the outcome.

    Returns:
        Exit code.
    """
    try:
        documents = DocumentReader(args.file).read()
    except IOError as e:
        raise ApplicationError(f'Cannot read documents: {e}') from e

    print(f'Reading from {args.file}')
    print(f'Documents to process: {len(documents)}')
    print(f'Batch size: {args.batch_size}')

    async with Pipeline.from_settings(
        model=args.model,
        operation=args.operation,
        token=args.token,
        base_url=args.base_url,
        max_requests_per_minute=args.rpm,
        max_in_flight=args.max_in_flight,
        request_timeout=args.timeout,
    ) as pipeline:
        pipeline.add_documents(documents)
        results, failures, stats = await process_documents(args, pipeline)
        quota = pipeline.quota

    writer = ResultWriter()
    try:
        if args.output:
            writer.write_results(args.output, results)
        if args.stats_output:
            writer.write_stats_output(args.stats_output, stats.to_dict())
    except IOError as e:
        raise ApplicationError(f'Cannot write output: {e}') from e

    print(f'Results received: {len(results)}, failed batches: {len(failures)}')
    if quota is not None:
        print(f'Remaining credits: {quota.remaining} / {quota.limit}')
    logging.info('Processed %d batches in %.2fs (%.1f%% succeeded)',
                 stats.released, stats.processing_time, stats.success_rate)

    return EXIT_BATCH_FAILURES if failures else EXIT_OK


# ------------------------------------------------------------------------------
# Main function
# ------------------------------------------------------------------------------
def main() -> int:
    """Main application entry point.

    Returns:
        Exit code (0 for success, 1 for errors, 2 when some batches failed).
    """
    try:
        parser = create_argument_parser()
        args = parser.parse_args()

        setup_logging(args.log_level)
        validate_configuration(args)

        if args.dry_run:
            DocumentReader(args.file).read()
            print('Dry run completed successfully - no requests sent')
            return EXIT_OK

        return asyncio.run(run_async(args))

    except KeyboardInterrupt:
        logging.error('Processing interrupted by user')
        return EXIT_ERROR
    except ApplicationError as e:
        logging.error('Application error: %s', e)
        return EXIT_ERROR
    except IOError as e:
        logging.error('I/O error: %s', e)
        return EXIT_ERROR
    except Exception as e:
        logging.error('Unexpected error: %s', e, exc_info=True)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
