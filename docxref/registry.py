"""Per-kind lookup tables that answer whether a cross-reference target exists."""

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from docxref.ref_kind import RefKind
from docxref.result_cache import ResultCache


@runtime_checkable
class Registry(Protocol):
    """Anything that can tell whether a target exists.

    Registries may also provide ``describe(target)`` for metadata and
    ``known_targets()`` for the suggestion pool; both are optional.
    """

    def exists(self, target: str) -> bool:
        """Return True if the target is known."""
        ...


# A plain set of targets or an exists(target) function is accepted too.
RegistryLike = Registry | Callable[[str], bool] | Iterable[str]
Registries = Mapping[RefKind, RegistryLike]


class StaticRegistry:
    """Registry backed by an in-memory set of targets and optional metadata."""

    def __init__(
        self,
        targets: Iterable[str] | Mapping[str, Mapping[str, Any] | None],
    ) -> None:
        """Initialize from a list of targets or a target -> metadata mapping."""
        if isinstance(targets, Mapping):
            self._metadata = {t: dict(m or {}) for t, m in targets.items()}
        else:
            self._metadata = {t: {} for t in targets}

    def exists(self, target: str) -> bool:
        """Return True if the target is registered."""
        return target in self._metadata

    def describe(self, target: str) -> dict[str, Any] | None:
        """Return a copy of the metadata registered for target."""
        meta = self._metadata.get(target)
        return dict(meta) if meta else None

    def known_targets(self) -> list[str]:
        """Return every registered target, sorted."""
        return sorted(self._metadata)

    def __len__(self) -> int:
        """Return the number of registered targets."""
        return len(self._metadata)


class CallableRegistry:
    """Registry that delegates to functions supplied by the host application."""

    def __init__(
        self,
        exists: Callable[[str], bool],
        describe: Callable[[str], Mapping[str, Any] | None] | None = None,
        known_targets: Callable[[], Iterable[str]] | None = None,
    ) -> None:
        """Wrap the given lookup functions."""
        self._exists = exists
        self._describe = describe
        self._known = known_targets

    def exists(self, target: str) -> bool:
        """Return True if the host says the target exists."""
        return bool(self._exists(target))

    def describe(self, target: str) -> dict[str, Any] | None:
        """Return host metadata for target, if the host provides any."""
        if self._describe is None:
            return None
        meta = self._describe(target)
        return dict(meta) if meta else None

    def known_targets(self) -> list[str]:
        """Return the host's target list, or nothing."""
        if self._known is None:
            return []
        return list(self._known())


class CachedRegistry:
    """Memoizes another registry's lookups in a ResultCache."""

    def __init__(
        self, inner: Registry, cache: ResultCache, namespace: str = ""
    ) -> None:
        """Wrap inner; namespace keeps keys apart when registries share a cache."""
        self.inner = inner
        self.cache = cache
        self.namespace = namespace

    def exists(self, target: str) -> bool:
        """Return the (possibly cached) existence check."""
        key = f"{self.namespace}:exists:{target}"
        return self.cache.get_or_compute(key, lambda: self.inner.exists(target)).value

    def describe(self, target: str) -> dict[str, Any] | None:
        """Return the (possibly cached) metadata for target."""
        key = f"{self.namespace}:describe:{target}"
        return self.cache.get_or_compute(
            key, lambda: describe_target(self.inner, target)
        ).value

    def known_targets(self) -> list[str]:
        """Return the (possibly cached) suggestion pool."""
        key = f"{self.namespace}:known_targets"
        return self.cache.get_or_compute(
            key, lambda: known_targets_of(self.inner)
        ).value

    def invalidate(self, target: str | None = None) -> None:
        """Forget cached answers for one target, or the target list when None."""
        if target is None:
            self.cache.invalidate(f"{self.namespace}:known_targets")
            return
        self.cache.invalidate(f"{self.namespace}:exists:{target}")
        self.cache.invalidate(f"{self.namespace}:describe:{target}")


def as_registry(value: RegistryLike) -> Registry:
    """Return value as a Registry, wrapping bare target sets and functions."""
    if isinstance(value, Registry):
        return value
    if callable(value):
        return CallableRegistry(value)
    if isinstance(value, Iterable) and not isinstance(value, str):
        return StaticRegistry(value)
    msg = f"Cannot use {type(value).__name__} as a registry"
    raise TypeError(msg)


def describe_target(registry: Registry, target: str) -> dict[str, Any] | None:
    """Return registry metadata for target, or None if it offers none."""
    describe = getattr(registry, "describe", None)
    if describe is None:
        return None
    meta = describe(target)
    return dict(meta) if meta else None


def known_targets_of(registry: Registry) -> list[str]:
    """Return the registry's suggestion pool, or an empty list."""
    known = getattr(registry, "known_targets", None)
    if known is None:
        return []
    return list(known())


def cached_registries(
    registries: Registries, cache: ResultCache
) -> dict[RefKind, Registry]:
    """Wrap every registry in a CachedRegistry sharing one cache."""
    return {
        kind: CachedRegistry(
            as_registry(reg),
            cache,
            namespace=f"registry:{getattr(kind, 'value', kind)}",
        )
        for kind, reg in registries.items()
    }
