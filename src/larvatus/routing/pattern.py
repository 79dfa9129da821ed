"""Route template compilation and path matching.

A template such as ``/users/:id/posts/:post_id`` is split on ``/`` once,
at registration time, into an ordered tuple of segment matchers. Matching
a concrete path is a segment-by-segment comparison — no regexes.

Trailing slashes are significant: ``/users/`` has one more (empty)
segment than ``/users``, so the two never match each other.
"""

import re
from dataclasses import dataclass

from larvatus.errors import ConfigurationError

_PARAM_NAME = re.compile(r"^\w+$")


@dataclass(frozen=True, slots=True)
class Segment:
    """A single compiled segment of a route template.

    Literal:   ``users``  (param_name=None) — matches byte-for-byte
    Capturing: ``:id``    (param_name="id") — matches one non-empty segment
    """

    value: str
    param_name: str | None = None

    @property
    def is_param(self) -> bool:
        return self.param_name is not None


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """An ordered sequence of segment matchers built from a template.

    Hashable and comparable, so two registrations of the same template
    compile to equal patterns.
    """

    template: str
    segments: tuple[Segment, ...]

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(s.param_name for s in self.segments if s.param_name is not None)

    def match(self, path: str) -> dict[str, str] | None:
        """Match *path* against this pattern.

        Returns the captured ``name -> value`` mapping in pattern order,
        or ``None`` if the path does not match. When a parameter name is
        repeated, the last captured value wins.
        """
        parts = path.split("/")
        if len(parts) != len(self.segments):
            return None

        params: dict[str, str] = {}
        for segment, part in zip(self.segments, parts, strict=True):
            if segment.param_name is None:
                if part != segment.value:
                    return None
            elif not part:
                return None
            else:
                params[segment.param_name] = part
        return params


def compile_template(template: str) -> CompiledPattern:
    """Compile a route template into a ``CompiledPattern``.

    Examples::

        "/"               -> [Segment(""), Segment("")]
        "/users"          -> [Segment(""), Segment("users")]
        "/users/:id"      -> [Segment(""), Segment("users"), Segment(":id", "id")]

    Raises ``ConfigurationError`` for templates that cannot match anything
    or use a placeholder syntax other than ``:name``.
    """
    if not template.startswith("/"):
        msg = f"Route template {template!r} must start with '/'."
        raise ConfigurationError(msg)

    segments: list[Segment] = []
    for part in template.split("/"):
        if part.startswith(":"):
            name = part[1:]
            if not _PARAM_NAME.match(name):
                msg = (
                    f"Invalid parameter segment {part!r} in route {template!r}: "
                    "names must be non-empty and contain only letters, digits, "
                    "and underscores."
                )
                raise ConfigurationError(msg)
            segments.append(Segment(value=part, param_name=name))
        elif _looks_like_foreign_param(part):
            msg = (
                f"Route {template!r} uses {part!r}; larvatus expects ':param' "
                "placeholders, not '{param}' or '<param>'."
            )
            raise ConfigurationError(msg)
        else:
            segments.append(Segment(value=part))

    return CompiledPattern(template=template, segments=tuple(segments))


def _looks_like_foreign_param(part: str) -> bool:
    """Brace or angle-bracket placeholders, balanced or not."""
    return any(ch in part for ch in "{}<>")
