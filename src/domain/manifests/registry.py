"""Manifest registry: one manifest per notification type.

The registry is assembled and checked at import time, so a notification
type added to the catalog without a manifest stops the process from
starting instead of failing on the first dispatch.
"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from core.exceptions import ManifestNotFoundError, ManifestRegistryError
from domain.entities.manifest import NotificationManifest
from domain.entities.notification import NotificationType
from domain.manifests import access, auth, branches, centers, roles, users

_MANIFEST_GROUPS: tuple[tuple[NotificationManifest, ...], ...] = (
    centers.MANIFESTS,
    branches.MANIFESTS,
    access.MANIFESTS,
    users.MANIFESTS,
    auth.MANIFESTS,
    roles.MANIFESTS,
)


def build_registry(
    groups: Iterable[Iterable[NotificationManifest]],
    catalog: Iterable[NotificationType] = NotificationType,
) -> Mapping[NotificationType, NotificationManifest]:
    """Merge manifest groups into a read-only, exhaustive registry.

    Raises:
        ManifestRegistryError: If a type is declared twice or a catalog
            type has no manifest.
    """
    registry: dict[NotificationType, NotificationManifest] = {}
    for group in groups:
        for entry in group:
            if entry.type in registry:
                raise ManifestRegistryError(
                    f"Duplicate manifest for type: {entry.type}",
                    details={"notification_type": entry.type.value},
                )
            registry[entry.type] = entry

    missing = [t.value for t in catalog if t not in registry]
    if missing:
        raise ManifestRegistryError(
            f"Missing manifests for types: {', '.join(missing)}",
            details={"missing": missing},
        )
    return MappingProxyType(registry)


NOTIFICATION_REGISTRY = build_registry(_MANIFEST_GROUPS)


def get_manifest(
    notification_type: NotificationType | str,
    registry: Mapping[NotificationType, NotificationManifest] = NOTIFICATION_REGISTRY,
) -> NotificationManifest:
    """Look up the manifest for a notification type."""
    try:
        return registry[NotificationType(notification_type)]
    except (KeyError, ValueError):
        raise ManifestNotFoundError(str(notification_type)) from None
