"""Operation base classes."""

from operant.framework.operations.base import ContractFactory, Operation

__all__ = ["Operation", "ContractFactory"]
