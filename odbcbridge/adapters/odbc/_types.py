from typing import TYPE_CHECKING

from odbcbridge.protocols import OdbcConnectionProtocol

if TYPE_CHECKING:
    from pyodbc import Connection
    from typing_extensions import TypeAlias

    OdbcConnection: TypeAlias = Connection
else:
    OdbcConnection = OdbcConnectionProtocol

__all__ = ("OdbcConnection",)
