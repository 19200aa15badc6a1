"""
Matcher argument normalization.

The matcher accepts several shapes:

    action
    (action,)
    (action, reset_action)
    (action, reset_action, options)
    (action, options)

where ``options`` is a dict or a MatcherOptions. Every shape is turned into
one MatcherParams here; nothing downstream inspects the argument again.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from libs.core.exceptions import InvalidParameters

logger = logging.getLogger(__name__)

# Actions take no arguments; they may be plain functions or coroutines
MatcherAction = Callable[[], Union[None, Awaitable[None]]]


class MatcherOptions(BaseModel):
    """Options accepted by the matcher."""

    # Unknown keys are kept so newer options merge the same way as repeats
    model_config = ConfigDict(extra="allow", frozen=True)

    # Strict so True or "3" are rejected rather than coerced
    repeats: StrictInt = Field(default=1, ge=0)


DEFAULT_OPTIONS = MatcherOptions()


@dataclass(frozen=True)
class MatcherParams:
    """Canonical matcher parameters."""

    action: MatcherAction
    reset_action: Optional[MatcherAction]
    options: MatcherOptions


def merge_options(
    options: Union[MatcherOptions, Mapping[str, Any], None],
    defaults: MatcherOptions = DEFAULT_OPTIONS,
) -> MatcherOptions:
    """
    Shallow-merge caller options over defaults.

    Keys the caller sets replace the default value; everything else keeps
    the default.

    Raises:
        ValidationError: if the merged options are invalid
    """
    if options is None:
        return defaults
    if isinstance(options, MatcherOptions):
        overrides = options.model_dump(exclude_unset=True)
    else:
        overrides = dict(options)
    return MatcherOptions.model_validate({**defaults.model_dump(), **overrides})


def _is_options(value: Any) -> bool:
    return isinstance(value, (MatcherOptions, Mapping))


def _invalid(arg: Any, reason: str = "") -> InvalidParameters:
    message = f"Invalid parameters: expect([fn, fn, opts]) got expect({arg!r})"
    if reason:
        message = f"{message}: {reason}"
    return InvalidParameters(message, argument=arg)


def normalize_matcher_argument(
    arg: Any,
    defaults: MatcherOptions = DEFAULT_OPTIONS,
) -> MatcherParams:
    """
    Turn any accepted matcher argument shape into MatcherParams.

    Args:
        arg: A bare action, or a tuple/list as described in the module docstring
        defaults: Options used for keys the caller does not set

    Returns:
        MatcherParams with defaults filled in

    Raises:
        InvalidParameters: for any other shape
    """
    if callable(arg):
        return MatcherParams(action=arg, reset_action=None, options=defaults)

    if not isinstance(arg, (tuple, list)) or not 1 <= len(arg) <= 3:
        raise _invalid(arg)

    action, second, third = (list(arg) + [None, None])[:3]
    if not callable(action):
        raise _invalid(arg, "action is not callable")

    reset_action = None
    options = None
    if callable(second):
        reset_action = second
        if third is not None and not _is_options(third):
            raise _invalid(arg, "options must be a mapping")
        options = third
    elif _is_options(second):
        # Shorthand (action, options) form
        if len(arg) == 3:
            raise _invalid(arg, "unexpected third element after options")
        options = second
    elif second is None:
        if third is not None and not _is_options(third):
            raise _invalid(arg, "options must be a mapping")
        options = third
    else:
        raise _invalid(arg, "second element must be a reset action or options")

    try:
        merged = merge_options(options, defaults)
    except ValidationError as e:
        raise _invalid(arg, str(e))

    logger.debug(
        f"[params] Normalized matcher argument: repeats={merged.repeats}, "
        f"reset={'yes' if reset_action else 'no'}"
    )
    return MatcherParams(action=action, reset_action=reset_action, options=merged)
