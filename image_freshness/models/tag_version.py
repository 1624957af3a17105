from dataclasses import dataclass, field

import semver

from image_freshness.errors import TagCoercionError


@dataclass(frozen=True, order=True)
class TagVersion:
    version: semver.Version
    tag: str = field(compare=False)

    def __str__(self) -> str:
        return str(self.version)


def coerce_tag(tag: str) -> TagVersion:
    """
    Coerce a loosely formatted tag into a semantic version.

    A single leading ``v`` is dropped and missing minor/patch components are
    padded with ``.0``, so ``v1.2`` compares equal to ``1.2.0``. Pre-release
    and build suffixes are kept as they are.
    """
    value = tag.removeprefix("v")
    while value.count(".") < 2:
        value += ".0"
    try:
        version = semver.Version.parse(value)
    except (ValueError, TypeError) as e:
        raise TagCoercionError(tag, e) from e
    return TagVersion(version=version, tag=tag)
