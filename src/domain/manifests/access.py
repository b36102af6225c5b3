"""Center and branch access grant manifests."""

from domain.entities.manifest import ChannelManifest, audience, manifest
from domain.entities.notification import (
    Audiences,
    NotificationChannel,
    NotificationGroup,
    NotificationType,
)

EMAIL = NotificationChannel.EMAIL
IN_APP = NotificationChannel.IN_APP

MANIFESTS = (
    manifest(
        type=NotificationType.CENTER_ACCESS_GRANTED,
        group=NotificationGroup.MANAGEMENT,
        priority=3,
        requires_audit=True,
        required_variables=("centerName", "grantedBy"),
        template_base="access/center-access-granted",
        audiences={
            Audiences.TARGET: audience(
                {
                    EMAIL: ChannelManifest(subject="You now have access to {{ centerName }}"),
                    IN_APP: ChannelManifest(),
                }
            ),
        },
    ),
    manifest(
        type=NotificationType.CENTER_ACCESS_REVOKED,
        group=NotificationGroup.MANAGEMENT,
        priority=4,
        requires_audit=True,
        required_variables=("centerName",),
        template_base="access/center-access-revoked",
        audiences={
            Audiences.TARGET: audience(
                {
                    EMAIL: ChannelManifest(
                        subject="Your access to {{ centerName }} was removed"
                    ),
                    IN_APP: ChannelManifest(),
                }
            ),
        },
    ),
    manifest(
        type=NotificationType.BRANCH_ACCESS_GRANTED,
        group=NotificationGroup.MANAGEMENT,
        priority=2,
        requires_audit=True,
        required_variables=("branchName", "centerName"),
        template_base="access/branch-access-granted",
        audiences={
            Audiences.TARGET: audience({IN_APP: ChannelManifest()}),
        },
    ),
    manifest(
        type=NotificationType.BRANCH_ACCESS_REVOKED,
        group=NotificationGroup.MANAGEMENT,
        priority=3,
        requires_audit=True,
        required_variables=("branchName", "centerName"),
        template_base="access/branch-access-revoked",
        audiences={
            Audiences.TARGET: audience({IN_APP: ChannelManifest()}),
        },
    ),
)
