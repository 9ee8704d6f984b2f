"""pyodbc database configuration."""

from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, ClassVar, Optional, TypedDict, Union

from typing_extensions import NotRequired

from odbcbridge.adapters.odbc._types import OdbcConnection
from odbcbridge.adapters.odbc.driver import OdbcDriver
from odbcbridge.exceptions import MissingDependencyError
from odbcbridge.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = ("OdbcConfig", "OdbcConnectionParams", "OdbcDriverFeatures")

logger = get_logger("adapters.odbc")


class OdbcConnectionParams(TypedDict, total=False):
    """pyodbc connection parameters."""

    connection_string: NotRequired[str]
    autocommit: NotRequired[bool]
    timeout: NotRequired[int]
    readonly: NotRequired[bool]
    attrs_before: NotRequired[dict[int, Any]]
    ansi: NotRequired[bool]
    encoding: NotRequired[str]
    extra: NotRequired[dict[str, Any]]


class OdbcDriverFeatures(TypedDict, total=False):
    """Row post-processing applied by :class:`OdbcDriver`."""

    lowercase_columns: NotRequired[bool]
    strip_char_padding: NotRequired[bool]


class OdbcConfig:
    """Configuration for a single, unpooled pyodbc connection.

    Every call to :meth:`provide_connection` opens one physical connection and
    closes it on the way out, whatever the exit path. Failures while closing
    are logged and never replace the outcome of the block.
    """

    driver_type: "ClassVar[type[OdbcDriver]]" = OdbcDriver

    def __init__(
        self,
        *,
        connection_config: "Optional[Union[OdbcConnectionParams, dict[str, Any]]]" = None,
        driver_features: "Optional[Union[OdbcDriverFeatures, dict[str, Any]]]" = None,
        on_connection_create: "Optional[Callable[[OdbcConnection], None]]" = None,
    ) -> None:
        """Initialize pyodbc configuration.

        Args:
            connection_config: Connection parameters; ``connection_string`` is passed to the driver verbatim.
            driver_features: Optional row post-processing features.
            on_connection_create: Callback executed once a connection is opened.

        Example:
            >>> config = OdbcConfig(
            ...     connection_config={
            ...         "connection_string": "DSN=PROD;UID=user;PWD=secret",
            ...         "autocommit": True,
            ...     }
            ... )
        """
        self.connection_config: dict[str, Any] = dict(connection_config or {})
        if "extra" in self.connection_config:
            extras = self.connection_config.pop("extra") or {}
            self.connection_config.update(extras)
        self.connection_config.setdefault("autocommit", True)
        self.driver_features: dict[str, Any] = dict(driver_features or {})
        self.on_connection_create = on_connection_create

    @classmethod
    def from_connection_string(cls, connection_string: str, **kwargs: Any) -> "OdbcConfig":
        connection_config = dict(kwargs.pop("connection_config", None) or {})
        connection_config["connection_string"] = connection_string
        return cls(connection_config=connection_config, **kwargs)

    @property
    def connection_string(self) -> str:
        return str(self.connection_config.get("connection_string") or "")

    def _get_connect_kwargs(self) -> "dict[str, Any]":
        return {
            key: value
            for key, value in self.connection_config.items()
            if value is not None and key != "connection_string"
        }

    def create_connection(self) -> OdbcConnection:
        """Open a new pyodbc connection.

        Raises:
            MissingDependencyError: If pyodbc is not installed.

        Returns:
            The open connection.
        """
        try:
            import pyodbc
        except ImportError as e:
            raise MissingDependencyError(package="pyodbc") from e

        connection = pyodbc.connect(self.connection_string, **self._get_connect_kwargs())
        if self.on_connection_create is not None:
            try:
                self.on_connection_create(connection)
            except BaseException:
                self.close_connection(connection)
                raise
        return connection

    def close_connection(self, connection: OdbcConnection) -> None:
        """Close a connection, swallowing any failure."""
        try:
            connection.close()
        except Exception:
            logger.debug("Ignoring error while closing ODBC connection", exc_info=True)

    @contextmanager
    def provide_connection(self, *args: Any, **kwargs: Any) -> "Generator[OdbcConnection, None, None]":
        """Provide a pyodbc connection context manager.

        Yields:
            OdbcConnection: A freshly opened connection.
        """
        connection = self.create_connection()
        logger.debug("Opened ODBC connection")
        try:
            yield connection
        finally:
            self.close_connection(connection)

    @contextmanager
    def provide_session(self, *args: Any, **kwargs: Any) -> "Generator[OdbcDriver, None, None]":
        """Provide a driver session bound to a fresh connection.

        Yields:
            OdbcDriver: A driver instance using the connection.
        """
        with self.provide_connection(*args, **kwargs) as connection:
            yield self.driver_type(connection=connection, driver_features=self.driver_features)
