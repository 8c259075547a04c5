"""
operant framework - the Operation execution core.

This module provides:
- Contracts (schema, rules, format adapters)
- Operation base class and the run / call invocation protocols
- Operation registry and runner
- Background dispatcher
- Structured logging with invocation context

Dispatcher is imported lazily:
    from operant.framework.dispatcher import OperationDispatcher
"""

from operant.framework.contracts import Contract, Document, Errors, Property, Schema
from operant.framework.operations import ContractFactory, Operation
from operant.framework.registry import clear_registry, get_operation, list_operations, register_operation
from operant.framework.runner import OperationRunner, call, get_runner, run

__all__ = [
    # Contracts
    "Contract",
    "Document",
    "Errors",
    "Property",
    "Schema",
    # Operations
    "Operation",
    "ContractFactory",
    "run",
    "call",
    # Registry
    "register_operation",
    "get_operation",
    "list_operations",
    "clear_registry",
    # Runner
    "OperationRunner",
    "get_runner",
]
