"""User account notification manifests."""

from domain.entities.manifest import ChannelManifest, audience, manifest
from domain.entities.notification import (
    Audiences,
    NotificationChannel,
    NotificationGroup,
    NotificationType,
)

EMAIL = NotificationChannel.EMAIL
WHATSAPP = NotificationChannel.WHATSAPP
IN_APP = NotificationChannel.IN_APP

MANIFESTS = (
    manifest(
        type=NotificationType.USER_REGISTERED,
        group=NotificationGroup.SYSTEM,
        priority=1,
        required_variables=("name",),
        template_base="user-registered",
        audiences={
            Audiences.TARGET: audience(
                {
                    EMAIL: ChannelManifest(subject="Welcome to EduCenter, {{ name }}"),
                    WHATSAPP: ChannelManifest(template="user_registered"),
                    IN_APP: ChannelManifest(),
                }
            ),
        },
    ),
    manifest(
        type=NotificationType.USER_UPDATED,
        group=NotificationGroup.SYSTEM,
        priority=1,
        required_variables=("name",),
        template_base="user-updated",
        audiences={
            Audiences.TARGET: audience({IN_APP: ChannelManifest()}),
        },
    ),
    manifest(
        type=NotificationType.USER_DELETED,
        group=NotificationGroup.SYSTEM,
        priority=5,
        requires_audit=True,
        required_variables=("name",),
        template_base="user-deleted",
        audiences={
            Audiences.TARGET: audience(
                {EMAIL: ChannelManifest(subject="Your EduCenter account has been deleted")}
            ),
        },
    ),
    manifest(
        type=NotificationType.USER_ACTIVATED,
        group=NotificationGroup.SYSTEM,
        priority=2,
        required_variables=("name",),
        template_base="user-activated",
        audiences={
            Audiences.TARGET: audience(
                {
                    IN_APP: ChannelManifest(),
                    WHATSAPP: ChannelManifest(template="user_activated"),
                }
            ),
        },
    ),
)
