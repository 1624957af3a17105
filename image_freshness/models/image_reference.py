from pydantic.dataclasses import dataclass

from image_freshness.errors import ImageReferenceError

DEFAULT_REGISTRY_URL = "https://registry-1.docker.io/"
DEFAULT_NAMESPACE = "library"
DEFAULT_TAG = "latest"


@dataclass(frozen=True)
class ImageReference:
    repository: str
    registry_host: str = ""
    namespace: str = DEFAULT_NAMESPACE
    tag: str = ""
    digest: str = ""

    @property
    def is_pinned(self) -> bool:
        return bool(self.digest)

    @property
    def repository_path(self) -> str:
        if not self.namespace:
            return self.repository
        return f"{self.namespace}/{self.repository}"

    @property
    def registry_url(self) -> str:
        return registry_url(self.registry_host)

    @classmethod
    def parse(cls, raw: str) -> "ImageReference":
        return parse_image_reference(raw)

    def __str__(self) -> str:
        name = "/".join(s for s in (self.registry_host, self.namespace, self.repository) if s)
        if self.digest:
            return f"{name}@{self.digest}"
        if self.tag:
            return f"{name}:{self.tag}"
        return name


def registry_url(host: str) -> str:
    if not host:
        return DEFAULT_REGISTRY_URL
    return f"https://{host}"


def parse_image_reference(raw: str) -> ImageReference:
    """
    Parse an image string of the form
    ``[registry_host/][namespace/]repository[(@digest|:tag)]``.

    With two path segments the first one is taken as a registry host when
    it contains ``:`` or ``.``, otherwise as a namespace. A namespace that
    contains a dot is therefore read as a host.
    """
    if not raw:
        raise ImageReferenceError(raw, "empty image name")

    segments = raw.split("/")
    if any(not s for s in segments):
        raise ImageReferenceError(raw, "empty path segment")

    registry_host = ""
    namespace = DEFAULT_NAMESPACE
    match len(segments):
        case 1:
            name = segments[0]
        case 2:
            if ":" in segments[0] or "." in segments[0]:
                registry_host = segments[0]
            else:
                namespace = segments[0]
            name = segments[1]
        case 3:
            registry_host, namespace, name = segments
        case _:
            raise ImageReferenceError(raw, f"unexpected number of path segments ({len(segments)})")

    tag = ""
    digest = ""
    if "@" in name:
        name, digest = name.split("@", 1)
        if not digest:
            raise ImageReferenceError(raw, "empty digest")
    elif ":" in name:
        name, tag = name.split(":", 1)
        if not tag:
            raise ImageReferenceError(raw, "empty tag")
    else:
        tag = DEFAULT_TAG

    if not name:
        raise ImageReferenceError(raw, "empty repository")

    return ImageReference(
        repository=name,
        registry_host=registry_host,
        namespace=namespace,
        tag=tag,
        digest=digest,
    )
