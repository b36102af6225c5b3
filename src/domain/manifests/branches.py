"""Branch lifecycle notification manifests."""

from domain.entities.manifest import (
    ChannelManifest,
    NotificationManifest,
    ProfileChannels,
    audience,
    manifest,
)
from domain.entities.notification import (
    Audiences,
    NotificationChannel,
    NotificationGroup,
    NotificationType,
    ProfileType,
)

WHATSAPP = NotificationChannel.WHATSAPP
IN_APP = NotificationChannel.IN_APP

# Only staff profiles get WhatsApp; every other profile falls back to in-app.
_STAFF_SELECTION = ProfileChannels({ProfileType.STAFF: (IN_APP, WHATSAPP)})


def _branch_manifest(
    type: NotificationType,
    priority: int,
    template_base: str,
    whatsapp_template: str,
    requires_audit: bool = False,
) -> NotificationManifest:
    return manifest(
        type=type,
        group=NotificationGroup.MANAGEMENT,
        priority=priority,
        requires_audit=requires_audit,
        required_variables=("branchName", "centerName"),
        template_base=template_base,
        audiences={
            Audiences.STAFF: audience(
                {
                    IN_APP: ChannelManifest(),
                    WHATSAPP: ChannelManifest(template=whatsapp_template),
                },
                selection=_STAFF_SELECTION,
            ),
        },
    )


MANIFESTS = (
    _branch_manifest(
        NotificationType.BRANCH_CREATED, 2, "branch-created", "branch_created"
    ),
    _branch_manifest(
        NotificationType.BRANCH_UPDATED, 2, "branch-updated", "branch_updated"
    ),
    _branch_manifest(
        NotificationType.BRANCH_DELETED,
        6,
        "branch-deleted",
        "branch_deleted",
        requires_audit=True,
    ),
    _branch_manifest(
        NotificationType.BRANCH_RESTORED, 3, "branch-restored", "branch_restored"
    ),
)
