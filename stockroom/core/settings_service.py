"""
Settings screen operations, scoped to the acting user of a SessionContext
"""
import logging

from django.db import transaction

from . import toasts
from .models import UserPreference, default_notification_preferences
from .utils import create_activity_log

logger = logging.getLogger(__name__)

NOTIFICATION_KEYS = tuple(default_notification_preferences().keys())


class SettingsError(Exception):
    pass


class UserSettingsService:
    """Load and save the settings of context.user"""

    def __init__(self, context):
        if context is None or context.user_id is None:
            raise SettingsError("Settings require an authenticated user")
        self.context = context
        self.user = context.user

    def _preference(self):
        preference, _ = UserPreference.objects.get_or_create(user=self.user)
        return preference

    def load(self):
        preference = self._preference()
        return {
            'account': {
                'name': self.user.get_full_name() or self.user.username,
                'email': self.user.email,
                'company': preference.company.get('companyName', ''),
                'role': preference.role,
            },
            'company': {
                'companyName': preference.company.get('companyName', ''),
                'website': preference.company.get('website', ''),
                'address': preference.company.get('address', ''),
                'phone': preference.company.get('phone', ''),
            },
            'notifications': {**default_notification_preferences(), **preference.notifications},
            'appearance': {
                'theme': preference.theme,
                'density': preference.density,
            },
        }

    def _log(self, action_type, details):
        create_activity_log(
            context=self.context,
            action_type=action_type,
            table_name='user_preferences',
            record_id=self.user.pk,
            details=details,
        )

    def save_account_settings(self, name, email, company, role):
        try:
            with transaction.atomic():
                first_name, _, last_name = (name or '').strip().partition(' ')
                self.user.first_name = first_name
                self.user.last_name = last_name
                self.user.email = email or ''
                self.user.save(update_fields=['first_name', 'last_name', 'email', 'updated_at'])
                preference = self._preference()
                preference.company = {**preference.company, 'companyName': company or ''}
                preference.role = role or ''
                preference.save()
            self._log('settings_update', {'section': 'account', 'email': email, 'role': role})
        except Exception as e:
            logger.error(f"Error saving account settings for user {self.user.pk}: {e}")
            return toasts.error("There was a problem saving your settings.")
        return toasts.success("Settings saved", "Your account settings have been updated successfully.")

    def save_company_settings(self, company_name, website, address, phone):
        try:
            preference = self._preference()
            preference.company = {
                'companyName': company_name or '',
                'website': website or '',
                'address': address or '',
                'phone': phone or '',
            }
            preference.save()
            self._log('settings_update', {'section': 'company', **preference.company})
        except Exception as e:
            logger.error(f"Error saving company settings for user {self.user.pk}: {e}")
            return toasts.error("There was a problem saving your company settings.")
        return toasts.success("Company settings saved", "Your company information has been updated successfully.")

    def change_password(self, current_password, new_password):
        if not new_password:
            return toasts.error("A new password is required.")
        if not self.user.check_password(current_password or ''):
            logger.info(f"Password change rejected for user {self.user.pk}: wrong current password")
            return toasts.error("There was a problem changing your password.")
        try:
            self.user.set_password(new_password)
            self.user.save(update_fields=['password', 'updated_at'])
            # Only the fact of the change is recorded, never the value
            self._log('password_change', {})
        except Exception as e:
            logger.error(f"Error changing password for user {self.user.pk}: {e}")
            return toasts.error("There was a problem changing your password.")
        return toasts.success("Password updated", "Your password has been changed successfully.")

    def save_notification_settings(self, settings):
        unknown = set(settings or {}) - set(NOTIFICATION_KEYS)
        if unknown:
            return toasts.error(f"Unknown notification settings: {', '.join(sorted(unknown))}")
        try:
            preference = self._preference()
            preference.notifications = {
                **default_notification_preferences(),
                **preference.notifications,
                **{key: bool(value) for key, value in (settings or {}).items()},
            }
            preference.save()
            self._log('settings_update', {'section': 'notifications', **preference.notifications})
        except Exception as e:
            logger.error(f"Error saving notification settings for user {self.user.pk}: {e}")
            return toasts.error("There was a problem saving your notification preferences.")
        return toasts.success("Notification preferences saved", "Your notification preferences have been updated.")

    def save_appearance_settings(self, theme, density):
        valid_themes = dict(UserPreference.THEME_CHOICES)
        valid_densities = dict(UserPreference.DENSITY_CHOICES)
        if theme not in valid_themes or density not in valid_densities:
            return toasts.error("There was a problem saving your appearance preferences.")
        try:
            preference = self._preference()
            preference.theme = theme
            preference.density = density
            preference.save()
            self._log('settings_update', {'section': 'appearance', 'theme': theme, 'density': density})
        except Exception as e:
            logger.error(f"Error saving appearance settings for user {self.user.pk}: {e}")
            return toasts.error("There was a problem saving your appearance preferences.")
        return toasts.success("Appearance settings saved", "Your appearance preferences have been updated.")
