"""Operation executor.

One invocation opens exactly one connection, runs the selected operation for
every input item in order and closes the connection before returning. Item
processing is a fold: each item either appends its records, appends an error
record when the host allows continuing, or ends the batch with its error.
"""

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from odbcbridge.adapters.odbc.config import OdbcConfig
from odbcbridge.adapters.odbc.core import create_mapped_exception
from odbcbridge.credentials import build_connection_string
from odbcbridge.exceptions import OdbcBridgeError
from odbcbridge.host import InputItem
from odbcbridge.operations import OperationKind
from odbcbridge.parameters import coerce_procedure_parameters, normalize_schema
from odbcbridge.results import command_record, error_message, error_record, normalize_result
from odbcbridge.utils.logging import correlation_scope, get_logger

if TYPE_CHECKING:
    from odbcbridge.adapters.odbc.driver import OdbcDriver
    from odbcbridge.protocols import ExecutionHost
    from odbcbridge.typing import OutputRecord

__all__ = ("OperationExecutor", "ParameterResolver", "execute_operation", "fold_items")

logger = get_logger("executor")

ParameterResolver = Callable[[str, int, Any], Any]
"""Resolves ``(name, item_index, default)`` to a parameter value."""
ItemStep = Callable[[InputItem], "list[OutputRecord]"]


def fold_items(
    items: "Sequence[InputItem]", step: ItemStep, continue_on_fail: "Callable[[], bool]"
) -> "list[OutputRecord]":
    """Run ``step`` for every item, accumulating output records in item order.

    The failure policy is asked once per failing item. When it allows
    continuing, the item contributes a single ``{"error": message}`` record;
    otherwise the failure propagates and no later item is attempted.

    Args:
        items: Input items in processing order.
        step: Produces the output records for one item.
        continue_on_fail: Failure policy of the host.

    Returns:
        The accumulated output records.
    """
    records: list[OutputRecord] = []
    for item in items:
        try:
            produced = step(item)
        except Exception as exc:
            if not continue_on_fail():
                logger.debug("Item %d failed; aborting remaining items", item.index)
                raise
            logger.warning("Item %d failed: %s", item.index, error_message(exc))
            records.append(error_record(exc, item.index))
            continue
        records.extend(produced)
    return records


def _as_items(items: "Sequence[Union[InputItem, Mapping[str, Any]]]") -> "list[InputItem]":
    return [
        item if isinstance(item, InputItem) else InputItem(index=index, json=dict(item))
        for index, item in enumerate(items)
    ]


def _item_json_parameter(item_lookup: "dict[int, InputItem]") -> ParameterResolver:
    def resolve(name: str, item_index: int, default: Any = None) -> Any:
        item = item_lookup.get(item_index)
        return default if item is None else item.json.get(name, default)

    return resolve


class OperationExecutor:
    """Runs one operation over a batch of items against one ODBC connection."""

    def __init__(
        self,
        *,
        config_type: "type[OdbcConfig]" = OdbcConfig,
        connection_config: "Optional[dict[str, Any]]" = None,
        driver_features: "Optional[dict[str, Any]]" = None,
    ) -> None:
        self.config_type = config_type
        self.connection_config = dict(connection_config or {})
        self.driver_features = dict(driver_features or {})

    def create_config(self, descriptor: str) -> OdbcConfig:
        connection_config = {**self.connection_config, "connection_string": descriptor}
        return self.config_type(connection_config=connection_config, driver_features=self.driver_features)

    def run(
        self,
        descriptor: str,
        operation: "Union[OperationKind, str]",
        items: "Sequence[Union[InputItem, Mapping[str, Any]]]",
        *,
        get_parameter: "Optional[ParameterResolver]" = None,
        continue_on_fail: "Optional[Callable[[], bool]]" = None,
    ) -> "list[OutputRecord]":
        """Execute ``operation`` for every item over a single connection.

        Connect failures always abort the invocation. On the query and procedure
        paths driver failures are translated before they propagate; the command
        path propagates the raw driver error.

        Args:
            descriptor: ODBC connection string.
            operation: The operation to run for every item.
            items: Input items in ascending index order.
            get_parameter: Per-item parameter lookup; defaults to the item's own JSON.
            continue_on_fail: Failure policy; defaults to aborting on the first failure.

        Raises:
            OperationError: Translated failure on the query and procedure paths.

        Returns:
            Output records in item order.
        """
        kind = OperationKind.parse(operation)
        batch = _as_items(items)
        resolve = get_parameter or _item_json_parameter({item.index: item for item in batch})
        policy = continue_on_fail or (lambda: False)
        with correlation_scope():
            logger.info("Running %s for %d item(s)", kind, len(batch))
            driver: Optional[OdbcDriver] = None
            try:
                with self.create_config(descriptor).provide_session() as driver:
                    return fold_items(batch, self._step(kind, driver, resolve), policy)
            except OdbcBridgeError:
                raise
            except Exception as exc:
                if not kind.translates_errors:
                    raise
                raise create_mapped_exception(exc, kind, connecting=driver is None) from exc

    def _step(self, kind: OperationKind, driver: "OdbcDriver", resolve: ParameterResolver) -> ItemStep:
        if kind is OperationKind.QUERY:
            return lambda item: self.run_query(driver, resolve, item)
        if kind is OperationKind.COMMAND:
            return lambda item: self.run_command(driver, resolve, item)
        return lambda item: self.run_procedure(driver, resolve, item)

    @staticmethod
    def run_query(driver: "OdbcDriver", resolve: ParameterResolver, item: InputItem) -> "list[OutputRecord]":
        sql = str(resolve("query", item.index, ""))
        return normalize_result(driver.execute_query(sql), OperationKind.QUERY, item.index)

    @staticmethod
    def run_command(driver: "OdbcDriver", resolve: ParameterResolver, item: InputItem) -> "list[OutputRecord]":
        command = str(resolve("command", item.index, ""))
        driver.execute_command(command)
        return [command_record(command, item.index)]

    @staticmethod
    def run_procedure(driver: "OdbcDriver", resolve: ParameterResolver, item: InputItem) -> "list[OutputRecord]":
        schema = normalize_schema(resolve("schema", item.index, None))
        name = str(resolve("procedure", item.index, "")).strip()
        parameters = coerce_procedure_parameters(resolve("arguments", item.index, None))
        result = driver.call_procedure(schema, name, parameters)
        return normalize_result(result, OperationKind.PROCEDURE, item.index)


def execute_operation(
    host: "ExecutionHost",
    operation: "Union[OperationKind, str]",
    *,
    executor: "Optional[OperationExecutor]" = None,
) -> "list[OutputRecord]":
    """Run a full host round trip: credentials, items, parameters and failure policy.

    Args:
        host: The workflow host.
        operation: The operation to run for every item.
        executor: Executor to use; a default one is created when omitted.

    Returns:
        Output records in item order.
    """
    descriptor = build_connection_string(host.get_credentials())
    return (executor or OperationExecutor()).run(
        descriptor,
        operation,
        host.get_input_data(),
        get_parameter=host.get_parameter,
        continue_on_fail=host.continue_on_fail,
    )
