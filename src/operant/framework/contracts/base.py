"""
Contract - validating deserializer bound to a schema and a Backing Model.

A Contract is created fresh for each invocation around exactly one Backing
Model. ``validate(payload)`` decodes the payload through a format adapter,
writes the declared properties onto the model, runs the declared rules and
reports a boolean verdict; failures (including undecodable payloads) land
in one field-keyed :class:`Errors` set.

Usage:
    class PostContract(Contract):
        schema = Schema([
            Property("title", str, rules=[presence(), length(maximum=80)]),
            Property("body", str, rules=[presence()]),
        ])

    contract = PostContract(store.find_or_new())
    if contract.validate({"title": "Hi", "body": "hello"}):
        contract.save()

    # same schema, JSON deserialization selected by configuration
    PostContract(post, format="json").validate('{"title": "Hi", "body": "hello"}')
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any, ClassVar

from operant.core.errors import MalformedPayloadError, ValidationError
from operant.core.settings import get_settings
from operant.framework.contracts.errors import BASE, Errors
from operant.framework.contracts.formats import Document, FormatAdapter, PayloadFormat, get_format, list_formats
from operant.framework.contracts.schema import CoercionError, Schema
from operant.framework.logging import get_logger, log_step

log = get_logger(__name__)


class Contract:
    """Base class for all Contracts."""

    schema: ClassVar[Schema] = Schema()
    # Format used for bare str/bytes payloads; falls back to settings.default_format.
    format: ClassVar[str | None] = None
    # Accepted format names; None accepts every registered format.
    accepts: ClassVar[tuple[str, ...] | None] = None

    def __init__(self, model: Any, *, format: str | FormatAdapter | None = None) -> None:  # noqa: A002
        self._model = model
        self._adapter = get_format(format or type(self).format or get_settings().default_format)
        self._errors = Errors()
        self._validated = False

    # ------------------------------------------------------------------ #
    # State
    # ------------------------------------------------------------------ #

    @property
    def model(self) -> Any:
        return self._model

    @property
    def errors(self) -> Errors:
        return self._errors

    @property
    def format_name(self) -> str:
        """Format applied to bare serialized payloads."""
        return self._adapter.name

    @property
    def validated(self) -> bool:
        return self._validated

    @property
    def valid(self) -> bool:
        """``True`` only after a validation that produced no errors."""
        return self._validated and not self._errors

    # ------------------------------------------------------------------ #
    # Validation
    # ------------------------------------------------------------------ #

    def validate(self, payload: Any) -> bool:
        """
        Deserialize *payload* into the model and run the declared rules.

        Model attributes are written in place. Errors from the previous
        call are discarded.

        Returns:
            Overall validity.
        """
        contract_name = type(self).__name__
        self._errors.clear()
        self._validated = True

        with log_step("contract.validate", level="debug", contract=contract_name) as timer:
            data = self.decode(payload)
            if data is not None:
                skipped = self._populate(data)
                self._apply_rules(skipped)
                self.check()
            timer.add_metric("valid", self.valid)

        if not self.valid:
            log.info("contract.invalid", contract=contract_name, errors=self._errors.to_dict())
        return self.valid

    def check(self) -> None:  # noqa: B027
        """Cross-property validation hook. Override and call ``add_error``."""
        pass

    def add_error(self, field_name: str, message: str) -> None:
        """Record an error; the Contract becomes invalid."""
        self._errors.add(field_name, message)

    def decode(self, payload: Any) -> dict[str, Any] | None:
        """
        Decode *payload* with the adapter ``validate`` would select.

        Returns the decoded mapping, or ``None`` after recording the reason
        under ``errors["base"]``. The model is not touched.
        """
        if isinstance(payload, Document):
            name, raw = payload.format.lower(), payload.text
            if name not in list_formats():
                self.add_error(BASE, f"format '{name}' is not accepted")
                return None
            adapter = get_format(name)
        elif isinstance(payload, Mapping):
            name, raw = PayloadFormat.MAPPING.value, payload
            adapter = get_format(name)
        elif isinstance(payload, (str, bytes)):
            adapter, raw = self._adapter, payload
            name = adapter.name
        else:
            self.add_error(BASE, f"payload is malformed (unsupported payload type {type(payload).__name__})")
            return None

        if self.accepts is not None and name not in self.accepts:
            self.add_error(BASE, f"format '{name}' is not accepted")
            return None

        try:
            return adapter.decode(raw)
        except MalformedPayloadError as e:
            log.debug("contract.malformed", contract=type(self).__name__, format=name, reason=e.reason)
            self.add_error(BASE, f"payload is malformed ({e.reason})")
            return None

    def _populate(self, data: dict[str, Any]) -> set[str]:
        """Write declared properties onto the model; return names that failed coercion."""
        skipped: set[str] = set()
        for prop in self.schema:
            if prop.payload_key in data:
                try:
                    value = prop.coerce(data[prop.payload_key])
                except CoercionError as e:
                    self.add_error(prop.name, str(e))
                    skipped.add(prop.name)
                    continue
                setattr(self._model, prop.name, value)
            elif prop.default is not None and getattr(self._model, prop.name, None) is None:
                setattr(self._model, prop.name, copy.deepcopy(prop.default))
        return skipped

    def _apply_rules(self, skipped: set[str]) -> None:
        for prop in self.schema:
            if prop.name in skipped:
                continue
            for message in prop.validate(getattr(self._model, prop.name, None)):
                self.add_error(prop.name, message)

    # ------------------------------------------------------------------ #
    # Persistence
    # ------------------------------------------------------------------ #

    def save(self) -> bool:
        """
        Commit the model through its own persistence mechanism.

        Models without ``save()`` are treated as pure-domain objects and
        nothing happens.

        Raises:
            ValidationError: if the Contract is not valid.
        """
        if not self.valid:
            raise ValidationError(
                f"Cannot save invalid {type(self).__name__}",
                errors=self._errors.to_dict(),
                contract=self,
            )
        save = getattr(self._model, "save", None)
        if callable(save):
            save()
            log.debug("contract.saved", contract=type(self).__name__, model=type(self._model).__name__)
        return True

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Current model values for every schema property."""
        return {name: getattr(self._model, name, None) for name in self.schema.names}

    @classmethod
    def help_text(cls) -> str:
        return cls.schema.get_help_text()

    def __getattr__(self, name: str) -> Any:
        if not name.startswith("_") and name in type(self).schema:
            return getattr(self._model, name, None)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __repr__(self) -> str:
        state = "valid" if self.valid else ("invalid" if self._validated else "unvalidated")
        return f"{type(self).__name__}({state}, model={self._model!r})"
