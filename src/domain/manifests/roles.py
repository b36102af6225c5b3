"""Role assignment manifests."""

from domain.entities.manifest import ChannelManifest, audience, manifest
from domain.entities.notification import (
    Audiences,
    NotificationChannel,
    NotificationGroup,
    NotificationType,
)

EMAIL = NotificationChannel.EMAIL
IN_APP = NotificationChannel.IN_APP
PUSH = NotificationChannel.PUSH

MANIFESTS = (
    manifest(
        type=NotificationType.ROLE_ASSIGNED,
        group=NotificationGroup.MANAGEMENT,
        priority=4,
        requires_audit=True,
        required_variables=("roleName", "centerName"),
        template_base="roles/role-assigned",
        audiences={
            Audiences.TARGET: audience(
                {
                    IN_APP: ChannelManifest(),
                    PUSH: ChannelManifest(),
                }
            ),
            Audiences.ACTOR: audience(
                {IN_APP: ChannelManifest(template="in-app/roles/role-assigned-actor")}
            ),
        },
    ),
    manifest(
        type=NotificationType.ROLE_REVOKED,
        group=NotificationGroup.MANAGEMENT,
        priority=5,
        requires_audit=True,
        required_variables=("roleName", "centerName"),
        template_base="roles/role-revoked",
        audiences={
            Audiences.TARGET: audience(
                {
                    EMAIL: ChannelManifest(
                        subject="Your {{ roleName }} role at {{ centerName }} was revoked"
                    ),
                    IN_APP: ChannelManifest(),
                }
            ),
        },
    ),
)
