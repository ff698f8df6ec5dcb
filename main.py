"""
=========================================================
Command-line entry point for the Snowflake type generator.
=========================================================

Connects to Snowflake, introspects the configured schemas and writes a
TypeScript file with one interface per table.

Operations:
    - --generate: introspect and write the generated types
    - --init: write a starter typegen.config.json
    - --test-connection: check that Snowflake is reachable

Key Design Principles:
    - core.config loads and validates configuration once
    - core.logger for console/file logging
    - The executor is created here and injected into the introspector
    - main.py is a thin CLI wrapper

Usage:
    # Create a config file
    python main.py --init

    # Generate types
    python main.py --generate --config typegen.config.json --verbose

Example:
    >>> from main import TypeGenerationOrchestrator
    >>>
    >>> orchestrator = TypeGenerationOrchestrator(config)
    >>> summary = orchestrator.run_generate()
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from codegen.type_generator import TypeGenerator
from core.config import (
    DEFAULT_CONFIG_FILE,
    ConfigError,
    ConnectionConfig,
    GeneratorConfig,
    default_config_dict,
    load_config,
    load_connection_from_env,
    merge_config,
)
from core.logger import get_logger, set_verbose, setup_logging
from introspection.introspector import SchemaIntrospector
from utils.database_utils import QueryExecutionError, SnowflakeConnectionError, SnowflakeExecutor

logger = get_logger(__name__)


class OrchestratorError(Exception):
    """Exception raised when a CLI operation cannot complete."""
    pass


class TypeGenerationOrchestrator:
    """
    Runs the introspect -> generate -> write pipeline.

    Attributes:
        config: Validated generator configuration
        executor_factory: Builds an executor from ConnectionConfig
            (SnowflakeExecutor by default; replaced in tests)

    Example:
        >>> orchestrator = TypeGenerationOrchestrator(config)
        >>> if orchestrator.test_connection():
        ...     orchestrator.run_generate()
    """

    def __init__(
        self,
        config: GeneratorConfig,
        executor_factory: Callable[[ConnectionConfig], Any] = SnowflakeExecutor
    ):
        self.config = config
        self.executor_factory = executor_factory

    def _open_executor(self):
        executor = self.executor_factory(self.config.connection)
        executor.connect()
        return executor

    def test_connection(self) -> bool:
        """Connect and run a no-op query; return whether it succeeded."""
        try:
            executor = self._open_executor()
        except SnowflakeConnectionError as e:
            logger.error(f"❌ {e}")
            return False
        try:
            return SchemaIntrospector(executor).test_connection()
        finally:
            executor.close()

    def run_generate(self, output: Optional[str] = None) -> Dict[str, Any]:
        """
        Introspect the configured schemas and write the TypeScript file.

        Args:
            output: Output path overriding config.output

        Returns:
            Summary dict with tables, columns, interfaces and output path

        Raises:
            OrchestratorError: On connection, query or configuration failure
        """
        introspection_config = self.config.to_introspection_config()
        output_path = Path(output or self.config.output)

        logger.info(f"Account: {self.config.connection.account}")
        logger.info(f"Database: {introspection_config.database}")
        logger.info(f"Schemas: {', '.join(introspection_config.schemas)}")

        try:
            executor = self._open_executor()
        except SnowflakeConnectionError as e:
            raise OrchestratorError(str(e))

        try:
            introspector = SchemaIntrospector(executor)
            if not introspector.test_connection():
                raise OrchestratorError("Failed to connect to Snowflake")
            logger.info("✅ Connected successfully")

            logger.info("Introspecting schema...")
            tables, columns = introspector.introspect(introspection_config)
            logger.info(f"Found {len(tables)} tables")
            logger.info(f"Found {len(columns)} columns")
        except QueryExecutionError as e:
            raise OrchestratorError(f"Introspection failed: {e}")
        finally:
            executor.close()

        generator = TypeGenerator(self.config.type_overrides)
        interfaces = generator.generate_types(tables, columns)
        code = generator.generate_file(interfaces)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(code, encoding='utf-8')
        logger.info(f"✅ Written to {output_path}")

        return {
            'tables': len(tables),
            'columns': len(columns),
            'interfaces': len(interfaces),
            'output': str(output_path),
        }


def init_config(config_path: str = DEFAULT_CONFIG_FILE, force: bool = False) -> Path:
    """
    Write a starter configuration file.

    Raises:
        OrchestratorError: If the file exists and force is False
    """
    path = Path(config_path)
    if path.exists() and not force:
        raise OrchestratorError(f"{config_path} already exists (use --force to overwrite)")
    path.write_text(json.dumps(default_config_dict(), indent=2) + '\n', encoding='utf-8')
    return path


def load_merged_config(config_path: str) -> GeneratorConfig:
    """Load the config file and overlay SNOWFLAKE_* environment variables."""
    return merge_config(load_config(config_path), load_connection_from_env())


def main(argv=None):
    """
    Command-line interface for the type generator.

    Exit Codes:
        0: Success
        1: Error
        130: User interrupt (Ctrl+C)
    """
    parser = argparse.ArgumentParser(
        description="Snowflake TypeScript type generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create typegen.config.json
  python main.py --init

  # Generate types
  python main.py --generate

  # Generate to a different file with debug logging
  python main.py --generate --output src/db.ts --verbose

Environment:
  SNOWFLAKE_ACCOUNT, SNOWFLAKE_USERNAME, SNOWFLAKE_PASSWORD, SNOWFLAKE_WAREHOUSE,
  SNOWFLAKE_DATABASE, SNOWFLAKE_SCHEMA and SNOWFLAKE_ROLE override the
  connection settings of the config file (.env supported).
        """
    )

    parser.add_argument(
        '--generate',
        action='store_true',
        help='Introspect Snowflake and write TypeScript types'
    )
    parser.add_argument(
        '--init',
        action='store_true',
        help=f'Create a {DEFAULT_CONFIG_FILE} file'
    )
    parser.add_argument(
        '--test-connection',
        action='store_true',
        help='Check that Snowflake is reachable with the configured credentials'
    )
    parser.add_argument(
        '-c', '--config',
        default=DEFAULT_CONFIG_FILE,
        help='Path to config file'
    )
    parser.add_argument(
        '-o', '--output',
        help='Output file (overrides the config file)'
    )
    parser.add_argument(
        '--force',
        action='store_true',
        help='Overwrite an existing config file with --init'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging (DEBUG level)'
    )

    args = parser.parse_args(argv)

    setup_logging()
    if args.verbose:
        set_verbose(True)

    try:
        if args.init:
            path = init_config(args.config, force=args.force)
            logger.info(f"✅ Created {path}")
            logger.info("Next steps:")
            logger.info(f"1. Edit {path} with your Snowflake settings")
            logger.info("2. Or set environment variables (SNOWFLAKE_*)")
            logger.info("3. Run: python main.py --generate")
            return 0

        elif args.test_connection:
            orchestrator = TypeGenerationOrchestrator(load_merged_config(args.config))
            if orchestrator.test_connection():
                logger.info("✅ Connection successful")
                return 0
            logger.error("❌ Connection failed")
            return 1

        elif args.generate:
            logger.info("🔍 Snowflake Type Generator")
            orchestrator = TypeGenerationOrchestrator(load_merged_config(args.config))
            summary = orchestrator.run_generate(output=args.output)
            logger.info(
                f"✅ Generated types: {summary['output']} "
                f"({summary['tables']} tables, {summary['columns']} columns, "
                f"{summary['interfaces']} interfaces)"
            )
            return 0

        else:
            parser.print_help()
            logger.warning("⚠️  No operation specified. Use --generate, --init or --test-connection.")
            return 1

    except (ConfigError, OrchestratorError) as e:
        logger.error(f"❌ Error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("⚠️  Operation interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"❌ Unexpected error: {e}", exc_info=True)
        return 1


if __name__ == '__main__':
    sys.exit(main())
