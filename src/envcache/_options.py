"""Per-call resolution options."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from pydantic import BaseModel, ConfigDict

from ._casters import identity_transform


class ResolveOptions(BaseModel):
    """Options accepted by every reading operation of ``Env``.

    Unknown keys are ignored so callers can pass a shared options mapping.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True, extra="ignore")

    transform: Callable[[tuple, str], Any] = identity_transform


DEFAULT_OPTIONS = ResolveOptions()


def coerce_options(
    opts: ResolveOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> ResolveOptions:
    """Normalise ``opts`` (model, mapping, or ``None``) plus keyword overrides."""
    if opts is None and not overrides:
        return DEFAULT_OPTIONS

    if isinstance(opts, ResolveOptions):
        base = dict(opts)
    else:
        base = dict(opts or {})

    base.update(overrides)
    return ResolveOptions.model_validate(base)
