"""
Base operation interface.

An Operation binds one Contract type to one domain procedure. The class is
a declaration and is never mutated after definition; an instance lives for
exactly one invocation and is discarded afterwards.

The single extension point is :meth:`Operation.execute`. Its body is
yours, its contract is fixed: build Contracts through the factory it
receives and validate before touching persisted state.

Usage:
    class CreatePost(Operation):
        name = "posts.create"
        contract = PostContract
        models = post_store

        def execute(self, payload, contracts):
            return self.validate(payload, contracts.find_or_new(), lambda c: c.save())

    CreatePost.run({"body": "hello"}, on_success=lambda c: redirect(c.model))
    CreatePost.call({"body": "hello"})      # raises ValidationError when invalid
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, ClassVar

from operant.core.errors import MissingConfigError
from operant.framework.contracts import Contract
from operant.framework.contracts.schema import CoercionError

if TYPE_CHECKING:
    from operant.core.protocols import ModelProvider


class ContractFactory:
    """
    Builds the Contracts of one invocation.

    Created fresh per invocation. Holds the Operation's Contract type, the
    configured format and the Model Provider handle, and remembers every
    Contract it built so the invocation can resolve its result.

    An invocation normally wraps a single model. Building more than one
    Contract is allowed (validating several models, or retrying with a
    different one); when ``execute`` returns no Contract the result is the
    last one built.
    """

    def __init__(
        self,
        contract_cls: type[Contract],
        *,
        format: str | None = None,  # noqa: A002
        models: ModelProvider | None = None,
    ) -> None:
        self.contract_cls = contract_cls
        self.format = format
        self.models = models
        self._built: list[Contract] = []

    def __call__(self, model: Any) -> Contract:
        """Wrap *model* in a new Contract of the declared type."""
        contract = self.contract_cls(model, format=self.format)
        self._built.append(contract)
        return contract

    def find_or_new(self, identifier: Any = None) -> Any:
        """Construct or locate a Backing Model through the Model Provider."""
        if self.models is None:
            raise MissingConfigError("models", f"No model provider configured for {self.contract_cls.__name__}")
        return self.models.find_or_new(identifier)

    def decode(self, payload: Any) -> dict[str, Any]:
        """
        Decode *payload* the way this invocation's Contracts will.

        For reading a lookup key before a model exists. An undecodable
        payload gives ``{}``; the Contract reports it once validated.
        """
        return self.contract_cls(None, format=self.format).decode(payload) or {}

    def lookup(self, payload: Any, name: str) -> Any:
        """Coerced value of schema property *name*, or ``None`` if absent or uncastable."""
        prop = self.contract_cls.schema.get(name)
        if prop is None:
            raise KeyError(f"{self.contract_cls.__name__} has no property {name!r}")
        data = self.decode(payload)
        if prop.payload_key not in data:
            return None
        try:
            return prop.coerce(data[prop.payload_key])
        except CoercionError:
            return None

    @property
    def built(self) -> list[Contract]:
        return list(self._built)

    @property
    def last(self) -> Contract | None:
        return self._built[-1] if self._built else None


class Operation(ABC):
    """Base class for all operations."""

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    contract: ClassVar[type[Contract]]
    # Deserialization strategy for bare serialized payloads; None uses the Contract's.
    format: ClassVar[str | None] = None
    # Default Model Provider; run()/call() may pass another one.
    models: ClassVar[ModelProvider | None] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if inspect.isabstract(cls):
            return
        contract_cls = getattr(cls, "contract", None)
        if not (isinstance(contract_cls, type) and issubclass(contract_cls, Contract)):
            raise TypeError(f"{cls.__name__}.contract must be a Contract subclass, got {contract_cls!r}")

    def __init__(self, contracts: ContractFactory) -> None:
        self._contracts = contracts

    @classmethod
    def operation_name(cls) -> str:
        return cls.name or cls.__qualname__

    @classmethod
    def contract_factory(cls, *, models: ModelProvider | None = None) -> ContractFactory:
        """Fresh factory for one invocation."""
        return ContractFactory(cls.contract, format=cls.format, models=models or cls.models)

    @abstractmethod
    def execute(self, payload: Any, contracts: ContractFactory) -> Any:
        """
        The domain procedure. Must be implemented by subclasses.

        Build or locate the Backing Model, wrap it with ``contracts(model)``,
        validate, and only then mutate persisted state. Return the Contract
        by convention.
        """
        ...

    def validate(
        self,
        payload: Any,
        model: Any,
        block: Callable[[Contract], Any] | None = None,
    ) -> Any:
        """
        Build a Contract around *model*, validate *payload*, and branch.

        Returns ``block(contract)`` when valid (the Contract itself when no
        block is given) and ``None`` when invalid, without calling the block.
        """
        contract = self._contracts(model)
        if not contract.validate(payload):
            return None
        if block is None:
            return contract
        return block(contract)

    # ------------------------------------------------------------------ #
    # Invocation protocols
    # ------------------------------------------------------------------ #

    @classmethod
    def run(
        cls,
        payload: Any,
        on_success: Callable[[Contract], Any] | None = None,
        *,
        models: ModelProvider | None = None,
    ) -> Contract:
        """Flow protocol. See :func:`operant.framework.runner.run`."""
        from operant.framework.runner import run

        return run(cls, payload, on_success, models=models)

    @classmethod
    def call(cls, payload: Any, *, models: ModelProvider | None = None) -> Contract:
        """Call protocol. See :func:`operant.framework.runner.call`."""
        from operant.framework.runner import call

        return call(cls, payload, models=models)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(contract={self.contract.__name__})"
