"""
Transformer Registry - Type-driven conversion between wire and typed models.

Transformers are registered per (input type, output type) pair, either
globally or for a named context. A context view looks up its own
transformers first and falls back to the global ones, so the
management API can override a mapping without touching other callers.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import ValidationError as ModelValidationError

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class TransformError(Exception):
    """Raised by a transformer when its input cannot be mapped."""


@dataclass
class TransformResult(Generic[OutputT]):
    """Result of a transformation attempt."""

    success: bool
    data: OutputT | None = None
    error: str | None = None


class TypeTransformer(ABC, Generic[InputT, OutputT]):
    """
    Abstract base class for transformers.

    Subclasses declare the types they map between and raise
    TransformError for input they cannot convert.
    """

    input_type: type
    output_type: type

    @abstractmethod
    def transform(self, obj: InputT) -> OutputT:
        """Convert obj to output_type."""
        ...


class TransformerRegistry:
    """
    Central registry for all transformers.

    Built once at startup; read-only while serving requests.
    """

    def __init__(self) -> None:
        self._global: dict[tuple[type, type], TypeTransformer] = {}
        self._contexts: dict[str, dict[tuple[type, type], TypeTransformer]] = {}

    def register(self, transformer: TypeTransformer, context: str | None = None) -> None:
        """
        Register a transformer.

        Args:
            transformer: The transformer to register
            context: Optional context name; None registers globally
        """
        key = (transformer.input_type, transformer.output_type)
        if context is None:
            self._global[key] = transformer
        else:
            self._contexts.setdefault(context, {})[key] = transformer

    def for_context(self, context: str) -> "ContextTransformerRegistry":
        """Get a view that resolves transformers for a named context."""
        return ContextTransformerRegistry(self, context)

    def lookup(
        self, input_type: type, output_type: type, context: str | None = None
    ) -> TypeTransformer | None:
        """Find a transformer, preferring the context over global entries."""
        candidates = []
        if context is not None:
            candidates.append(self._contexts.get(context, {}))
        candidates.append(self._global)

        for table in candidates:
            for klass in input_type.__mro__:
                transformer = table.get((klass, output_type))
                if transformer is not None:
                    return transformer
        return None

    def transform(
        self, obj: Any, output_type: type[OutputT], context: str | None = None
    ) -> TransformResult[OutputT]:
        """
        Transform obj into output_type.

        Returns:
            TransformResult with the converted object or a failure detail
        """
        transformer = self.lookup(type(obj), output_type, context)
        if transformer is None:
            return TransformResult(
                success=False,
                error=(
                    f"No transformer registered for {type(obj).__name__} -> "
                    f"{output_type.__name__} (context: {context or 'global'})"
                ),
            )

        try:
            return TransformResult(success=True, data=transformer.transform(obj))
        except TransformError as e:
            logger.debug(f"Transformation to {output_type.__name__} failed: {e}")
            return TransformResult(success=False, error=str(e))
        except ModelValidationError as e:
            detail = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'root'}: {err['msg']}"
                for err in e.errors()
            )
            return TransformResult(success=False, error=detail)


class ContextTransformerRegistry:
    """Registry view bound to one transformation context."""

    def __init__(self, registry: TransformerRegistry, context: str):
        self._registry = registry
        self.context = context

    def transform(self, obj: Any, output_type: type[OutputT]) -> TransformResult[OutputT]:
        return self._registry.transform(obj, output_type, self.context)
