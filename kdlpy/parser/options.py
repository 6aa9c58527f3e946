"""Parser configuration options."""

from dataclasses import dataclass

from kdlpy.version import KdlVersion

DEFAULT_MAX_DEPTH = 256


@dataclass(frozen=True, slots=True)
class ParserOptions:
    """Grammar version and resource limits for a parse.

    `max_depth` bounds children-block nesting; `None` removes the bound
    (the grammar keeps its own stack, so deep input costs memory, not
    Python recursion).
    """

    version: KdlVersion = KdlVersion.V2
    max_depth: int | None = DEFAULT_MAX_DEPTH

    def __post_init__(self):
        if self.max_depth is not None and self.max_depth < 1:
            raise ValueError("max_depth must be positive or None")

    @staticmethod
    def for_version(version: KdlVersion) -> "ParserOptions":
        return ParserOptions(version=version)

    def with_version(self, version: KdlVersion) -> "ParserOptions":
        return ParserOptions(version=version, max_depth=self.max_depth)
