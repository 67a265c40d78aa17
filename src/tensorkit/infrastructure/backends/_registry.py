"""
Backend provider registry.

Providers register themselves under their `name`. Exactly one provider is
active at a time; tensors allocate through it and the codec re-materializes
foreign buffers into it.

The capability tier of each provider is validated here, at registration
time, so the rest of the core can branch on `BackendCapability` values
instead of probing buffer objects for methods.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional, Union

from ...domain._backend import BackendCapability, IBackend
from .._config import get_config
from .._logging import get_logger

logger = get_logger("backends")

BACKEND_REGISTRY: dict[str, IBackend] = {}

_active: Optional[IBackend] = None


def register_backend(backend: IBackend) -> IBackend:
    """
    Register a backend provider instance under its name.

    Parameters
    ----------
    backend : IBackend
        Provider to register. Re-registering a name replaces the previous
        provider.

    Returns
    -------
    IBackend
        The registered provider.

    Raises
    ------
    TypeError
        If the provider has no name, or declares a capability that is not a
        `BackendCapability`.
    """
    name = getattr(backend, "name", None)
    if not isinstance(name, str) or not name:
        raise TypeError(f"Backend {backend!r} must declare a non-empty name")
    capability = getattr(backend, "capability", None)
    if not isinstance(capability, BackendCapability):
        raise TypeError(
            f"Backend '{name}' must declare a BackendCapability, got {capability!r}"
        )
    BACKEND_REGISTRY[name] = backend
    logger.debug("registered backend '%s' (capability=%s)", name, capability.name)
    return backend


def available_backends() -> list[str]:
    """Return the names of all registered providers."""
    return sorted(BACKEND_REGISTRY)


def _lookup(name: str) -> IBackend:
    try:
        return BACKEND_REGISTRY[name]
    except KeyError:
        raise ValueError(
            f"Unknown backend '{name}'. Available: {available_backends()}"
        ) from None


def get_backend(name: Optional[str] = None) -> IBackend:
    """
    Return a registered provider, or the active one when `name` is None.

    The active provider defaults to ``TENSORKIT_BACKEND`` (``"numpy"``).
    """
    global _active
    if name is not None:
        return _lookup(name)
    if _active is None:
        _active = _lookup(get_config().backend)
    return _active


def set_backend(backend: Union[IBackend, str]) -> IBackend:
    """
    Make a provider the active one.

    Parameters
    ----------
    backend : Union[IBackend, str]
        A provider instance (registered on the fly if needed) or the name of
        a registered provider.

    Returns
    -------
    IBackend
        The provider that was active before the call.
    """
    global _active
    previous = get_backend()
    if isinstance(backend, str):
        backend = _lookup(backend)
    elif BACKEND_REGISTRY.get(backend.name) is not backend:
        register_backend(backend)
    _active = backend
    if previous is not backend:
        logger.debug("active backend: '%s' -> '%s'", previous.name, backend.name)
    return previous


def backend_for_buffer(buffer: object) -> IBackend:
    """
    Return the provider whose buffers have the type of `buffer`.

    The active provider wins when several match; when none declares the
    buffer's type, the active provider is assumed to own it.
    """
    active = get_backend()
    if isinstance(buffer, getattr(active, "buffer_type", ())):
        return active
    for backend in BACKEND_REGISTRY.values():
        if isinstance(buffer, getattr(backend, "buffer_type", ())):
            return backend
    return active


@contextmanager
def use_backend(backend: Union[IBackend, str]) -> Iterator[IBackend]:
    """
    Temporarily switch the active provider.

    Examples
    --------
    >>> with use_backend("python"):
    ...     t = Tensor.zeros((2, 2))   # stored in a ListBuffer
    """
    previous = set_backend(backend)
    try:
        yield get_backend()
    finally:
        set_backend(previous)
