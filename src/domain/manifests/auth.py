"""Authentication and account security manifests.

WhatsApp parameters are filled positionally from ``required_variables``,
so their order must match the placeholders of the approved template.
"""

from domain.entities.manifest import ChannelManifest, audience, manifest
from domain.entities.notification import (
    Audiences,
    NotificationChannel,
    NotificationGroup,
    NotificationType,
)

EMAIL = NotificationChannel.EMAIL
SMS = NotificationChannel.SMS
WHATSAPP = NotificationChannel.WHATSAPP
IN_APP = NotificationChannel.IN_APP
PUSH = NotificationChannel.PUSH

MANIFESTS = (
    manifest(
        type=NotificationType.OTP,
        group=NotificationGroup.SECURITY,
        priority=8,
        required_variables=("otpCode", "expiresIn"),
        template_base="auth/otp",
        audiences={
            Audiences.DEFAULT: audience(
                {
                    EMAIL: ChannelManifest(subject="Your EduCenter verification code"),
                    SMS: ChannelManifest(),
                    WHATSAPP: ChannelManifest(template="otp_verification"),
                }
            ),
        },
    ),
    manifest(
        type=NotificationType.PASSWORD_RESET,
        group=NotificationGroup.SECURITY,
        priority=7,
        required_variables=("resetLink", "expiresIn"),
        template_base="auth/password-reset",
        audiences={
            Audiences.DEFAULT: audience(
                {
                    EMAIL: ChannelManifest(subject="Reset your EduCenter password"),
                    SMS: ChannelManifest(required_variables=("resetLink",)),
                }
            ),
        },
    ),
    manifest(
        type=NotificationType.EMAIL_VERIFICATION,
        group=NotificationGroup.SECURITY,
        priority=6,
        required_variables=("verificationLink", "name"),
        template_base="auth/email-verification",
        audiences={
            Audiences.DEFAULT: audience(
                {EMAIL: ChannelManifest(subject="Verify your email address")}
            ),
        },
    ),
    manifest(
        type=NotificationType.PASSWORD_CHANGED,
        group=NotificationGroup.SECURITY,
        priority=6,
        requires_audit=True,
        required_variables=("name", "changedAt"),
        template_base="auth/password-changed",
        audiences={
            Audiences.TARGET: audience(
                {
                    EMAIL: ChannelManifest(subject="Your password was changed"),
                    IN_APP: ChannelManifest(required_variables=("changedAt",)),
                    PUSH: ChannelManifest(required_variables=("changedAt",)),
                }
            ),
        },
    ),
    manifest(
        type=NotificationType.NEW_DEVICE_LOGIN,
        group=NotificationGroup.SECURITY,
        priority=7,
        requires_audit=True,
        required_variables=("deviceName", "ipAddress", "loginTime"),
        template_base="auth/new-device-login",
        audiences={
            Audiences.TARGET: audience(
                {
                    EMAIL: ChannelManifest(subject="New sign-in from {{ deviceName }}"),
                    PUSH: ChannelManifest(required_variables=("deviceName",)),
                    IN_APP: ChannelManifest(),
                }
            ),
        },
    ),
)
