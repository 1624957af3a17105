class FreshnessError(Exception):
    pass


class ImageReferenceError(FreshnessError, ValueError):
    def __init__(self, image: str, reason: str):
        super().__init__(f"Unable to parse image {image!r}: {reason}")
        self.image: str = image
        self.reason: str = reason


class TagCoercionError(FreshnessError, ValueError):
    def __init__(self, tag: str, cause: Exception | None = None):
        message = f"Unable to parse {tag!r} as semver"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.tag: str = tag


class RegistryConnectionError(FreshnessError):
    def __init__(self, registry: str, message: str):
        super().__init__(f"Unable to connect to registry {registry}: {message}")
        self.registry: str = registry


class TagListingError(FreshnessError):
    def __init__(self, repository: str, message: str):
        super().__init__(f"Unable to fetch tags for {repository}: {message}")
        self.repository: str = repository


class InventoryError(FreshnessError):
    pass
