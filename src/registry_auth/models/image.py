"""Image reference parsing."""

from pydantic import BaseModel, Field

# Must match the keys `docker login` writes for Docker Hub
DEFAULT_REGISTRY = "docker.io"
DEFAULT_REGISTRY_URL = "https://index.docker.io/v1/"

_DOCKER_HUB_ALIASES = frozenset({"docker.io", "index.docker.io"})


def parse_registry_name(image: str) -> str:
    """Return the registry host[:port] of an image, or the default registry.

    The first path segment names a registry only when it looks like a
    host: it contains a dot or a port, or is ``localhost``.
    """
    parts = image.split("/", 1)
    if len(parts) > 1:
        first = parts[0]
        if "." in first or ":" in first or first == "localhost":
            return first
    return DEFAULT_REGISTRY


def parse_registry_url(registry: str) -> str:
    """Map a registry host to the address docker stores credentials under.

    Older docker versions wrote full URLs into config.json; Docker Hub and
    GCR entries are keyed with a scheme while quay.io is not.
    """
    if registry in _DOCKER_HUB_ALIASES:
        return DEFAULT_REGISTRY_URL
    if registry == "gcr.io" or registry.endswith(".gcr.io") or registry == "gcr.kubernetes.io":
        return f"https://{registry}"
    if registry == "quay.io":
        return registry
    if "://" in registry:
        return registry
    return f"https://{registry}"


class ImageRef(BaseModel):
    """A parsed image reference: ``[registry[:port]/]repository[:tag|@digest]``.

    Parsing never fails; anything without a registry segment belongs to
    Docker Hub.
    """

    model_config = {"frozen": True}

    raw: str = Field(description="The reference as given")
    image: str = Field(description="Reference without its tag (digests are kept)")
    tag: str | None = Field(default=None, description="Image tag")
    digest: str | None = Field(default=None, description="Image digest")
    registry_name: str = Field(description="Registry host[:port]")
    registry_url: str = Field(description="Registry address including scheme where docker uses one")

    @classmethod
    def parse(cls, raw: str) -> "ImageRef":
        """Parse an image reference."""
        image = raw
        tag = None
        digest = None

        last_at = raw.rfind("@")
        last_colon = raw.rfind(":")
        if last_at >= 0:
            digest = raw[last_at + 1:]
        elif last_colon >= 0:
            candidate = raw[last_colon + 1:]
            # a colon followed by a path is a registry port, not a tag
            if "/" not in candidate:
                image = raw[:last_colon]
                tag = candidate

        registry_name = parse_registry_name(raw)
        return cls(
            raw=raw,
            image=image,
            tag=tag,
            digest=digest,
            registry_name=registry_name,
            registry_url=parse_registry_url(registry_name),
        )

    @property
    def repository(self) -> str:
        """Repository path without registry, tag or digest."""
        name = self.image.split("@", 1)[0]
        parts = name.split("/", 1)
        if len(parts) > 1 and parts[0] == self.registry_name:
            return parts[1]
        return name

    def __str__(self) -> str:
        return self.image if self.tag is None else f"{self.image}:{self.tag}"
