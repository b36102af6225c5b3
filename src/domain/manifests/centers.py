"""Center lifecycle notification manifests."""

from domain.entities.manifest import ChannelManifest, ProfileChannels, audience, manifest
from domain.entities.notification import (
    Audiences,
    NotificationChannel,
    NotificationGroup,
    NotificationType,
    ProfileType,
)

EMAIL = NotificationChannel.EMAIL
WHATSAPP = NotificationChannel.WHATSAPP
IN_APP = NotificationChannel.IN_APP

# Admins only see center changes in-app; staff also get WhatsApp.
_STAFF_SELECTION = ProfileChannels(
    {
        ProfileType.ADMIN: (IN_APP,),
        ProfileType.STAFF: (IN_APP, WHATSAPP),
    }
)

MANIFESTS = (
    manifest(
        type=NotificationType.CENTER_CREATED,
        group=NotificationGroup.MANAGEMENT,
        priority=3,
        requires_audit=True,
        required_variables=("centerName", "ownerName"),
        template_base="center-created",
        audiences={
            Audiences.OWNERS: audience(
                {
                    EMAIL: ChannelManifest(
                        subject="{{ centerName }} is ready on EduCenter",
                    ),
                    WHATSAPP: ChannelManifest(template="center_created"),
                    IN_APP: ChannelManifest(required_variables=("centerName",)),
                }
            ),
            Audiences.ADMIN: audience(
                {IN_APP: ChannelManifest(required_variables=("centerName",))}
            ),
        },
    ),
    manifest(
        type=NotificationType.CENTER_UPDATED,
        group=NotificationGroup.MANAGEMENT,
        priority=2,
        required_variables=("centerName",),
        template_base="center-updated",
        audiences={
            Audiences.STAFF: audience(
                {
                    IN_APP: ChannelManifest(),
                    WHATSAPP: ChannelManifest(template="center_updated"),
                },
                selection=_STAFF_SELECTION,
            ),
        },
    ),
    manifest(
        type=NotificationType.CENTER_DELETED,
        group=NotificationGroup.MANAGEMENT,
        priority=7,
        requires_audit=True,
        required_variables=("centerName",),
        template_base="center-deleted",
        audiences={
            Audiences.OWNERS: audience(
                {
                    EMAIL: ChannelManifest(subject="{{ centerName }} has been deleted"),
                    IN_APP: ChannelManifest(),
                }
            ),
            Audiences.STAFF: audience(
                {
                    IN_APP: ChannelManifest(),
                    WHATSAPP: ChannelManifest(template="center_deleted"),
                },
                selection=ProfileChannels(
                    {
                        ProfileType.ADMIN: (IN_APP, WHATSAPP),
                        ProfileType.STAFF: (IN_APP, WHATSAPP),
                    }
                ),
            ),
        },
    ),
    manifest(
        type=NotificationType.CENTER_RESTORED,
        group=NotificationGroup.MANAGEMENT,
        priority=4,
        required_variables=("centerName",),
        template_base="center-restored",
        audiences={
            Audiences.STAFF: audience(
                {
                    IN_APP: ChannelManifest(),
                    WHATSAPP: ChannelManifest(template="center_restored"),
                },
                selection=_STAFF_SELECTION,
            ),
        },
    ),
)
