"""Connection descriptor builder.

The host hands over one of three credential shapes, selected by the
``connectionType`` discriminant. Each shape is modelled as its own frozen
dataclass and :func:`build_connection_string` turns any of them into the ODBC
connection string used to open the connection.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Union

from typing_extensions import TypeAlias

from odbcbridge.utils.logging import get_logger

__all__ = (
    "DEFAULT_DATABASE",
    "DEFAULT_DRIVER",
    "ConnectionOptions",
    "ConnectionStringCredentials",
    "Credentials",
    "DsnCredentials",
    "ManualCredentials",
    "build_connection_string",
    "parse_credentials",
)

logger = get_logger("credentials")

DEFAULT_DRIVER = "IBM i Access ODBC Driver 64-bit"
DEFAULT_DATABASE = "*LOCAL"


@dataclass(frozen=True)
class ConnectionOptions:
    """Optional connection string segments for manual credentials."""

    connection_timeout: Optional[Union[int, float]] = None
    use_ssl: bool = False

    @classmethod
    def from_mapping(cls, options: "Optional[Mapping[str, Any]]") -> "ConnectionOptions":
        if not options:
            return cls()
        timeout = options.get("connectionTimeout", options.get("connectionTimeoutSeconds"))
        return cls(connection_timeout=timeout, use_ssl=bool(options.get("useSSL", False)))


@dataclass(frozen=True)
class ConnectionStringCredentials:
    connection_type: ClassVar[str] = "connectionString"

    connection_string: str = ""


@dataclass(frozen=True)
class DsnCredentials:
    connection_type: ClassVar[str] = "dsn"

    dsn: str = ""
    username: str = ""
    password: str = field(default="", repr=False)


@dataclass(frozen=True)
class ManualCredentials:
    connection_type: ClassVar[str] = "manual"

    driver: str = DEFAULT_DRIVER
    host: str = ""
    database: str = ""
    username: str = ""
    password: str = field(default="", repr=False)
    options: ConnectionOptions = field(default_factory=ConnectionOptions)


Credentials: TypeAlias = Union[ConnectionStringCredentials, DsnCredentials, ManualCredentials]

_CREDENTIAL_TYPES: "dict[str, type[Credentials]]" = {
    ConnectionStringCredentials.connection_type: ConnectionStringCredentials,
    DsnCredentials.connection_type: DsnCredentials,
    ManualCredentials.connection_type: ManualCredentials,
}


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def parse_credentials(bundle: "Mapping[str, Any]") -> "Optional[Credentials]":
    """Select the credential variant named by the bundle's ``connectionType``.

    Only the fields of the selected variant are read; fields belonging to other
    variants are ignored even when present.

    Args:
        bundle: Resolved credential bundle supplied by the host.

    Returns:
        The matching credential variant, or ``None`` when the discriminant is not recognized.
    """
    connection_type = bundle.get("connectionType")
    credential_type = _CREDENTIAL_TYPES.get(connection_type) if isinstance(connection_type, str) else None
    if credential_type is ConnectionStringCredentials:
        return ConnectionStringCredentials(connection_string=_text(bundle.get("connectionString")))
    if credential_type is DsnCredentials:
        return DsnCredentials(
            dsn=_text(bundle.get("dsn")),
            username=_text(bundle.get("username")),
            password=_text(bundle.get("password")),
        )
    if credential_type is ManualCredentials:
        return ManualCredentials(
            driver=_text(bundle.get("driver", DEFAULT_DRIVER)),
            host=_text(bundle.get("host")),
            database=_text(bundle.get("database")),
            username=_text(bundle.get("username")),
            password=_text(bundle.get("password")),
            options=ConnectionOptions.from_mapping(bundle.get("additionalOptions") or bundle.get("options")),
        )
    logger.warning("Unrecognized credential connectionType %r", connection_type)
    return None


def _format_timeout(timeout: "Union[int, float]") -> str:
    if isinstance(timeout, float) and timeout.is_integer():
        return str(int(timeout))
    return str(timeout)


def build_connection_string(credentials: "Union[Credentials, Mapping[str, Any], None]") -> str:
    """Build the ODBC connection string for a credential variant.

    Never raises. Blank manual fields propagate as empty segments and an
    unrecognized variant yields an empty string.

    Args:
        credentials: A credential variant, or a raw host bundle to parse first.

    Returns:
        The driver connection string.
    """
    if isinstance(credentials, Mapping):
        credentials = parse_credentials(credentials)

    if isinstance(credentials, ConnectionStringCredentials):
        return credentials.connection_string
    if isinstance(credentials, DsnCredentials):
        return f"DSN={credentials.dsn};UID={credentials.username};PWD={credentials.password}"
    if isinstance(credentials, ManualCredentials):
        database = credentials.database or DEFAULT_DATABASE
        connection_string = (
            f"DRIVER={{{credentials.driver}}};SYSTEM={credentials.host};DATABASE={database};"
            f"UID={credentials.username};PWD={credentials.password}"
        )
        if credentials.options.use_ssl:
            connection_string += ";SECURITY=SSL"
        if credentials.options.connection_timeout:
            connection_string += f";CONNECTTIMEOUT={_format_timeout(credentials.options.connection_timeout)}"
        return connection_string
    return ""
