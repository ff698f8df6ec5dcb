"""
==========================================
Configuration management for the typegen.
==========================================

Loads the generator configuration from a JSON file, validates it once at the
boundary and merges Snowflake connection settings from environment variables
(.env file supported through python-dotenv).

The configuration system ensures:
- A single typed record (GeneratorConfig) flows into the core
- Validation happens in one place (validate_config)
- Environment variables override file-based connection settings
- Credentials can stay out of the config file

Example:
    >>> from core.config import load_config, load_connection_from_env, merge_config
    >>>
    >>> config = load_config('typegen.config.json')
    >>> config = merge_config(config, load_connection_from_env())
    >>> introspection = config.to_introspection_config()
    >>> print(introspection.database, introspection.schemas)
"""

import json
import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

# Load environment variables from a .env file in the working directory
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = 'typegen.config.json'

# Environment variable -> ConnectionConfig field
ENV_VARIABLES = {
    'SNOWFLAKE_ACCOUNT': 'account',
    'SNOWFLAKE_USERNAME': 'username',
    'SNOWFLAKE_PASSWORD': 'password',
    'SNOWFLAKE_WAREHOUSE': 'warehouse',
    'SNOWFLAKE_DATABASE': 'database',
    'SNOWFLAKE_SCHEMA': 'schema',
    'SNOWFLAKE_ROLE': 'role',
}

# camelCase keys accepted in config files
_KEY_ALIASES = {
    'typeOverrides': 'type_overrides',
    'includeTables': 'include_tables',
    'excludeTables': 'exclude_tables',
    'quotedIdentifiers': 'quoted_identifiers',
    'privateKeyPath': 'private_key_path',
    'privateKeyPass': 'private_key_pass',
}


class ConfigError(Exception):
    """Exception raised when configuration is missing or invalid."""
    pass


@dataclass(frozen=True)
class ConnectionConfig:
    """Snowflake connection settings.

    Attributes:
        account: Snowflake account identifier
        username: Login name
        password: Password (omit when using key-pair or SSO authentication)
        warehouse: Virtual warehouse used for metadata queries
        database: Database whose INFORMATION_SCHEMA is introspected
        schema: Default schema for the session
        role: Role for the session
        authenticator: Authenticator name (e.g. 'externalbrowser')
        private_key_path: Path to a PEM private key for key-pair auth
        private_key_pass: Passphrase of the private key
    """

    account: str
    username: Optional[str] = None
    password: Optional[str] = None
    warehouse: Optional[str] = None
    database: Optional[str] = None
    schema: Optional[str] = None
    role: Optional[str] = None
    authenticator: Optional[str] = None
    private_key_path: Optional[str] = None
    private_key_pass: Optional[str] = None


@dataclass(frozen=True)
class IntrospectionConfig:
    """Scope of one introspection run.

    Attributes:
        database: Database name (embedded unquoted in the metadata query)
        schemas: Schema names to introspect
        include_tables: Wildcard patterns; keep a table if any matches
        exclude_tables: Wildcard patterns; drop a table if any matches
        quoted_identifiers: Explicit quoting flags per identifier, overriding
            the lowercase-detection heuristic (True = case-sensitive)
    """

    database: str
    schemas: List[str]
    include_tables: List[str] = field(default_factory=list)
    exclude_tables: List[str] = field(default_factory=list)
    quoted_identifiers: Dict[str, bool] = field(default_factory=dict)


@dataclass(frozen=True)
class GeneratorConfig:
    """Validated generator configuration.

    Attributes:
        connection: Snowflake connection settings
        output: Path of the generated TypeScript file
        schemas: Schema names to introspect
        type_overrides: Vendor type -> TypeScript type overrides
        include_tables: Include wildcard patterns
        exclude_tables: Exclude wildcard patterns
        quoted_identifiers: Explicit quoting flags per identifier
    """

    connection: ConnectionConfig
    output: str
    schemas: List[str]
    type_overrides: Dict[str, str] = field(default_factory=dict)
    include_tables: List[str] = field(default_factory=list)
    exclude_tables: List[str] = field(default_factory=list)
    quoted_identifiers: Dict[str, bool] = field(default_factory=dict)

    def to_introspection_config(self) -> IntrospectionConfig:
        """Build the introspection scope for this configuration.

        Raises:
            ConfigError: If no database is configured
        """
        if not self.connection.database:
            raise ConfigError(
                "Missing 'connection.database' in config "
                "(or set SNOWFLAKE_DATABASE)"
            )
        return IntrospectionConfig(
            database=self.connection.database,
            schemas=list(self.schemas),
            include_tables=list(self.include_tables),
            exclude_tables=list(self.exclude_tables),
            quoted_identifiers=dict(self.quoted_identifiers),
        )


def _normalize_keys(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {_KEY_ALIASES.get(key, key): value for key, value in raw.items()}


def _check_string_list(raw: Dict[str, Any], key: str) -> None:
    value = raw.get(key)
    if value is None:
        return
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be a list if provided")
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ConfigError(f"Each entry of '{key}' must be a non-empty string")


def validate_config(raw: Dict[str, Any]) -> GeneratorConfig:
    """Validate a raw configuration mapping and build a GeneratorConfig.

    Args:
        raw: Parsed JSON configuration (snake_case or camelCase keys)

    Returns:
        Validated GeneratorConfig

    Raises:
        ConfigError: On the first invalid or missing field
    """
    if not isinstance(raw, dict):
        raise ConfigError("Config must be a JSON object")

    raw = _normalize_keys(raw)

    connection = raw.get('connection')
    if not connection:
        raise ConfigError("Missing 'connection' in config")
    if not isinstance(connection, dict):
        raise ConfigError("'connection' must be an object")
    connection = _normalize_keys(connection)
    if not connection.get('account'):
        raise ConfigError("Missing 'connection.account' in config")

    known = {f.name for f in fields(ConnectionConfig)}
    unknown = sorted(set(connection) - known)
    if unknown:
        raise ConfigError(f"Unknown connection settings: {', '.join(unknown)}")

    output = raw.get('output')
    if not output:
        raise ConfigError("Missing 'output' in config")
    if not isinstance(output, str) or not output.strip():
        raise ConfigError("'output' must be a non-empty string")
    if not output.endswith('.ts'):
        logger.warning(
            f"Output file '{output}' does not have a .ts extension. "
            "Generated types are typically saved as TypeScript files."
        )

    schemas = raw.get('schemas')
    if not schemas:
        raise ConfigError("Missing or empty 'schemas' in config")
    if not isinstance(schemas, list):
        raise ConfigError("'schemas' must be a list")
    for schema in schemas:
        if not isinstance(schema, str) or not schema.strip():
            raise ConfigError("Each schema name must be a non-empty string")

    _check_string_list(raw, 'include_tables')
    _check_string_list(raw, 'exclude_tables')

    type_overrides = raw.get('type_overrides') or {}
    if not isinstance(type_overrides, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in type_overrides.items()
    ):
        raise ConfigError("'type_overrides' must map type names to type strings")

    quoted_identifiers = raw.get('quoted_identifiers') or {}
    if not isinstance(quoted_identifiers, dict) or not all(
        isinstance(k, str) and isinstance(v, bool) for k, v in quoted_identifiers.items()
    ):
        raise ConfigError("'quoted_identifiers' must map identifiers to booleans")

    return GeneratorConfig(
        connection=ConnectionConfig(**connection),
        output=output,
        schemas=list(schemas),
        type_overrides=dict(type_overrides),
        include_tables=list(raw.get('include_tables') or []),
        exclude_tables=list(raw.get('exclude_tables') or []),
        quoted_identifiers=dict(quoted_identifiers),
    )


def load_config(config_path: str = DEFAULT_CONFIG_FILE) -> GeneratorConfig:
    """Load and validate the configuration file.

    Args:
        config_path: Path to the JSON config file

    Returns:
        Validated GeneratorConfig

    Raises:
        ConfigError: If the file is missing, not valid JSON or invalid
    """
    path = Path(config_path)
    try:
        content = path.read_text(encoding='utf-8')
    except FileNotFoundError:
        raise ConfigError(
            f"Config file not found: {config_path}\n"
            f"Create a {DEFAULT_CONFIG_FILE} file in your project root "
            "(python main.py --init)."
        )

    try:
        raw = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {config_path}\n{e}")

    logger.debug(f"Loaded config from {path.resolve()}")
    return validate_config(raw)


def load_connection_from_env() -> Dict[str, str]:
    """Read Snowflake connection settings from environment variables.

    Returns:
        Mapping of ConnectionConfig field name to value, unset variables omitted
    """
    env = {}
    for variable, field_name in ENV_VARIABLES.items():
        value = os.getenv(variable)
        if value is not None:
            env[field_name] = value
    return env


def merge_config(config: GeneratorConfig, env: Dict[str, str]) -> GeneratorConfig:
    """Overlay environment connection settings onto a config.

    Args:
        config: Config loaded from file
        env: Output of load_connection_from_env()

    Returns:
        New GeneratorConfig; the input is not modified
    """
    overrides = {k: v for k, v in env.items() if v is not None}
    if not overrides:
        return config
    return replace(config, connection=replace(config.connection, **overrides))


def default_config_dict() -> Dict[str, Any]:
    """Starter configuration written by ``python main.py --init``."""
    return {
        'connection': {
            'account': os.getenv('SNOWFLAKE_ACCOUNT', 'your_account'),
            'warehouse': os.getenv('SNOWFLAKE_WAREHOUSE', 'COMPUTE_WH'),
            'database': os.getenv('SNOWFLAKE_DATABASE', 'ANALYTICS'),
            'schema': os.getenv('SNOWFLAKE_SCHEMA', 'CORE'),
            'role': os.getenv('SNOWFLAKE_ROLE', 'DEVELOPER'),
        },
        'output': './src/generated/db-types.ts',
        'schemas': ['CORE'],
        'type_overrides': {},
        'include_tables': [],
        'exclude_tables': [],
    }
