"""Group intermediate operations into gateway paths and per-method rules."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from gwimport.exceptions import DuplicateOperationError
from gwimport.models import HTTPMethod, IntermediateOperation, Path, Policy, Rule

logger = logging.getLogger(__name__)

PolicyAttacher = Callable[[IntermediateOperation], Optional[Policy]]


def build_paths(
    operations: list[IntermediateOperation],
    attach_policy: Optional[PolicyAttacher] = None,
    strict: bool = False,
) -> dict[str, Path]:
    """Build one :class:`~gwimport.models.Path` per normalized path template.

    Each operation yields one :class:`~gwimport.models.Rule` holding its
    single method. Paths appear in first-seen order and so do the rules of a
    path. Raw paths that normalize to the same template (``/pets/{id}`` and
    ``/pets/{id}/``) share one :class:`Path`.

    A (path, method) pair seen twice raises
    :class:`~gwimport.exceptions.DuplicateOperationError` when *strict* is
    set. Otherwise the later operation replaces the earlier one in place.

    Args:
        operations: Adapter output, in document order.
        attach_policy: Called once per kept operation; a returned policy is
            added to the operation's rule.
        strict: Fail on duplicate operations instead of last-wins.
    """
    grouped: dict[str, dict[HTTPMethod, IntermediateOperation]] = {}

    for operation in operations:
        methods = grouped.setdefault(operation.path, {})
        previous = methods.get(operation.method)
        if previous is not None:
            message = (
                f"Duplicate operation {operation.method.value.upper()} {operation.path} "
                f"(declared as '{previous.raw_path}' and '{operation.raw_path}')"
            )
            if strict:
                raise DuplicateOperationError(message, location=operation.raw_path)
            logger.warning("%s, keeping the last declaration", message)
        methods[operation.method] = operation

    paths: dict[str, Path] = {}
    for path, methods in grouped.items():
        rules = [_build_rule(operation, attach_policy) for operation in methods.values()]
        paths[path] = Path(path=path, rules=rules)
    return paths


def _build_rule(
    operation: IntermediateOperation,
    attach_policy: Optional[PolicyAttacher],
) -> Rule:
    rule = Rule(
        methods={operation.method},
        description=operation.summary or operation.description or "",
    )
    if attach_policy is not None:
        policy = attach_policy(operation)
        if policy is not None:
            rule.policies.append(policy)
    return rule
