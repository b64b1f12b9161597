"""Database models for accounts app."""

from typing import ClassVar, Final, final, override

from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.contrib.auth.hashers import check_password, make_password
from django.contrib.auth.models import PermissionsMixin
from django.db import models
from django.db.models.functions import Lower

# Constants for field max lengths
_NAME_MAX_LENGTH: Final = 150
_PASSWORD_HASH_MAX_LENGTH: Final = 128


class UserManager(BaseUserManager['User']):
    """Manager creating users identified by e-mail."""

    use_in_migrations = True

    def create_user(
        self,
        email: str,
        name: str,
        password: str | None = None,
        **extra_fields: object,
    ) -> 'User':
        """Create a regular user.

        Args:
            email: Login e-mail, stored lower-cased.
            name: Display name.
            password: Raw password, hashed before saving.
            **extra_fields: Additional model fields.

        Returns:
            Created User instance.

        Raises:
            ValueError: If e-mail is empty.
        """
        if not email:
            raise ValueError('Users must have an email address')

        user = self.model(
            email=self.normalize_email(email).lower(),
            name=name,
            **extra_fields,
        )
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(
        self,
        email: str,
        name: str,
        password: str | None = None,
        **extra_fields: object,
    ) -> 'User':
        """Create a user with admin site access."""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        return self.create_user(email, name, password, **extra_fields)


@final
class User(AbstractBaseUser, PermissionsMixin):
    """Drive account.

    Owns folders, files and private categories. Besides the login
    password every account may set a separate lock password which
    protects locked folders.
    """

    name = models.CharField(max_length=_NAME_MAX_LENGTH)

    email = models.EmailField(unique=True)

    lock_password = models.CharField(
        max_length=_PASSWORD_HASH_MAX_LENGTH,
        null=True,
        blank=True,
        help_text='Hash of the password guarding locked folders',
    )

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS: ClassVar[list[str]] = ['name']

    class Meta:
        """Model metadata."""

        verbose_name = 'User'  # type: ignore[mutable-override]
        verbose_name_plural = 'Users'  # type: ignore[mutable-override]

        constraints: ClassVar[list[models.BaseConstraint]] = [
            # E-mail addresses differing only by case are the same account
            models.UniqueConstraint(
                Lower('email'),
                name='accounts_user_email_ci_unique',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.email

    @property
    def has_lock_password(self) -> bool:
        """Whether the account lock password was set."""
        return bool(self.lock_password)

    def set_lock_password(self, raw_password: str) -> None:
        """Hash and assign the lock password (not saved)."""
        self.lock_password = make_password(raw_password)

    def check_lock_password(self, raw_password: str) -> bool:
        """Check a raw password against the stored lock password hash.

        Args:
            raw_password: Password supplied by the caller.

        Returns:
            True on match, False otherwise or when no lock password is set.
        """
        if not self.lock_password:
            return False
        return check_password(raw_password, self.lock_password)
