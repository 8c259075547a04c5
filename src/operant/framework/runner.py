"""Operation invocation protocols.

Manifesto:
    One engine, two facades. ``run`` and ``call`` build a fresh Operation
    instance and drive the same lifecycle; they differ only in how an
    invalid Contract is reported. The flow protocol returns it, the call
    protocol raises.

Lifecycle per invocation::

    Start -> Validating -> Valid   -> Executing -> Done
                        -> Invalid ------------> Done

Domain exceptions raised inside ``execute`` propagate unchanged through
both protocols.

Tags:
    operant, framework, runner, invocation, lifecycle

Doc-Types:
    api-reference
"""

from collections.abc import Callable
from typing import Any

from operant.core.errors import ContractNotValidatedError, OperationNotFoundError, ValidationError
from operant.core.protocols import ModelProvider
from operant.framework.contracts import Contract
from operant.framework.logging import get_context, get_logger, log_step, new_invocation_id, push_context
from operant.framework.operations import Operation
from operant.framework.registry import get_operation

log = get_logger(__name__)


def _invoke(operation_cls: type[Operation], payload: Any, models: ModelProvider | None) -> Contract:
    """Instantiate, execute and resolve the invocation's Contract."""
    name = operation_cls.operation_name()
    outer = get_context()
    token = push_context(
        invocation_id=new_invocation_id(),
        operation=name,
        parent_operation=outer.operation,
        depth=outer.depth + 1 if outer.operation else 0,
        contract=operation_cls.contract.__name__,
    )
    try:
        contracts = operation_cls.contract_factory(models=models)
        operation = operation_cls(contracts)

        with log_step("operation.execute", operation=name) as timer:
            result = operation.execute(payload, contracts)
            contract = result if isinstance(result, Contract) else contracts.last
            if contract is None:
                raise ContractNotValidatedError(name).with_context(operation=name)
            timer.add_metric("valid", contract.valid)

        if not contract.valid:
            log.info("operation.invalid", operation=name, errors=contract.errors.to_dict())
        return contract
    finally:
        token.restore()


def run(
    operation_cls: type[Operation],
    payload: Any,
    on_success: Callable[[Contract], Any] | None = None,
    *,
    models: ModelProvider | None = None,
) -> Contract:
    """
    Flow protocol.

    Executes the operation and, when the resulting Contract is valid,
    calls ``on_success(contract)``. Always returns the Contract; the
    continuation's return value is discarded.

    Never raises for invalid input.
    """
    contract = _invoke(operation_cls, payload, models)
    if contract.valid and on_success is not None:
        on_success(contract)
    return contract


def call(
    operation_cls: type[Operation],
    payload: Any,
    *,
    models: ModelProvider | None = None,
) -> Contract:
    """
    Call protocol.

    Returns the valid Contract.

    Raises:
        ValidationError: if the Contract ends the invocation invalid. The
            error carries ``errors`` and the invalid ``contract``.
    """
    contract = _invoke(operation_cls, payload, models)
    if not contract.valid:
        errors = contract.errors
        raise ValidationError(
            "; ".join(errors.full_messages()) or "Contract was not validated",
            errors=errors.to_dict(),
            contract=contract,
        ).with_context(operation=operation_cls.operation_name(), contract=type(contract).__name__)
    return contract


class OperationRunner:
    """
    Runs registered operations by identifier.

    This is what a background worker or CLI holds: it receives only an
    identifier and a payload, never a live Operation instance.
    """

    def resolve(self, operation_name: str) -> type[Operation]:
        try:
            return get_operation(operation_name)
        except KeyError:
            raise OperationNotFoundError(operation_name) from None

    def run(
        self,
        operation_name: str,
        payload: Any,
        on_success: Callable[[Contract], Any] | None = None,
        *,
        models: ModelProvider | None = None,
    ) -> Contract:
        """
        Run an operation by name via the flow protocol.

        Raises:
            OperationNotFoundError: If operation is not registered
        """
        log.debug("runner.start", operation=operation_name, protocol="run")
        return run(self.resolve(operation_name), payload, on_success, models=models)

    def call(self, operation_name: str, payload: Any, *, models: ModelProvider | None = None) -> Contract:
        """
        Run an operation by name via the call protocol.

        Raises:
            OperationNotFoundError: If operation is not registered
            ValidationError: If the payload is invalid
        """
        log.debug("runner.start", operation=operation_name, protocol="call")
        return call(self.resolve(operation_name), payload, models=models)


_runner: OperationRunner | None = None


def get_runner() -> OperationRunner:
    """Get or create runner instance."""
    global _runner
    if _runner is None:
        _runner = OperationRunner()
    return _runner
