"""Django admin configuration for accounts app."""

from django.contrib import admin

from server.apps.accounts.models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    """Admin interface for User model.

    Password hashes are shown read-only; accounts are created and
    re-keyed through the authentication service.
    """

    ordering = ['email']

    list_display = [
        'email',
        'name',
        'is_active',
        'lock_password_display',
        'last_login',
        'created_at',
    ]

    list_filter = [
        'is_active',
        'is_staff',
    ]

    search_fields = [
        'email',
        'name',
    ]

    readonly_fields = [
        'password',
        'lock_password',
        'last_login',
        'created_at',
        'updated_at',
    ]

    fieldsets = (
        ('Account', {
            'fields': ('email', 'name', 'password', 'lock_password'),
        }),
        ('Status', {
            'fields': ('is_active', 'is_staff', 'is_superuser'),
        }),
        ('Timestamps', {
            'fields': ('last_login', 'created_at', 'updated_at'),
        }),
    )

    def lock_password_display(self, obj: User) -> bool:
        """Show whether a lock password is configured.

        Args:
            obj: User instance.

        Returns:
            True if the user has a lock password.
        """
        return obj.has_lock_password
    lock_password_display.short_description = 'Lock password'  # type: ignore[attr-defined]
    lock_password_display.boolean = True  # type: ignore[attr-defined]
