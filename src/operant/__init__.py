"""
operant - stateless Operations gated by validating Contracts.

    from operant import Operation, Contract, Schema, Property, presence

    class PostContract(Contract):
        schema = Schema([Property("body", str, rules=[presence()])])

    class CreatePost(Operation):
        contract = PostContract

        def execute(self, payload, contracts):
            return self.validate(payload, contracts.find_or_new(), lambda c: c.save())
"""

__version__ = "0.1.0"

from operant.core.errors import ValidationError, ValidationFailure
from operant.core.models import MemoryStore, Record
from operant.framework.contracts import (
    Contract,
    Document,
    Errors,
    Property,
    Schema,
    exclusion,
    format,
    inclusion,
    length,
    numericality,
    presence,
    satisfies,
)
from operant.framework.operations import ContractFactory, Operation
from operant.framework.registry import register_operation
from operant.framework.runner import call, run

__all__ = [
    "__version__",
    "Contract",
    "Document",
    "Errors",
    "Property",
    "Schema",
    "presence",
    "length",
    "format",
    "inclusion",
    "exclusion",
    "numericality",
    "satisfies",
    "Operation",
    "ContractFactory",
    "register_operation",
    "run",
    "call",
    "ValidationError",
    "ValidationFailure",
    "Record",
    "MemoryStore",
]
