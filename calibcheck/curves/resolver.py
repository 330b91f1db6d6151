"""Select a curve group definition by name."""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Union

from calibcheck.errors import ConfigNotFoundError

from .definitions import CurveGroupDefinition, CurveGroupName

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found:
    definition: CurveGroupDefinition


@dataclass(frozen=True)
class NotFound:
    name: CurveGroupName
    available: tuple


Resolution = Union[Found, NotFound]


def index_by_name(
    definitions: Iterable[CurveGroupDefinition],
) -> Dict[CurveGroupName, CurveGroupDefinition]:
    """Map definitions by group name; a later definition replaces an earlier one."""
    by_name: Dict[CurveGroupName, CurveGroupDefinition] = {}
    for defn in definitions:
        if defn.name in by_name:
            logger.debug("Curve group %s defined more than once, keeping the last", defn.name)
        by_name[defn.name] = defn
    return by_name


def resolve_curve_group(
    definitions: Iterable[CurveGroupDefinition], name: CurveGroupName
) -> Resolution:
    """Look up ``name`` and return Found(definition) or NotFound."""
    by_name = index_by_name(definitions)
    if name in by_name:
        return Found(by_name[name])
    return NotFound(name=name, available=tuple(sorted(by_name)))


def require_curve_group(
    definitions: Iterable[CurveGroupDefinition], name: CurveGroupName
) -> CurveGroupDefinition:
    """Look up ``name`` or raise ConfigNotFoundError straight away."""
    resolution = resolve_curve_group(definitions, name)
    if isinstance(resolution, NotFound):
        raise ConfigNotFoundError(resolution.name, resolution.available)
    return resolution.definition
