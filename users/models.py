from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models

from .permissions_matrix import ROLE_CHOICES, OWNER, FRONT_OFFICE


class UserManager(BaseUserManager):
    """
    Staff accounts log in with ``user_id``.
    Includes create_user/create_superuser to keep Django's createsuperuser flow working.
    """

    def create_user(self, user_id, password=None, **extra_fields):
        if not user_id:
            raise ValueError("Users must have a user_id")
        email = extra_fields.get("email")
        if email:
            extra_fields["email"] = self.normalize_email(email).strip().lower()
        user = self.model(user_id=user_id, **extra_fields)
        if password:
            user.set_password(password)
        else:
            # allow external provisioning; still enforce a hashed pw
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, user_id, password=None, **extra_fields):
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("role", OWNER)
        return self.create_user(user_id, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    ROLE_CHOICES = ROLE_CHOICES

    # Auth + identity
    user_id = models.CharField(max_length=50, unique=True, db_index=True)
    full_name = models.CharField(max_length=255)
    email = models.EmailField(null=True, blank=True, unique=True)

    # Fixed at creation; the permission table keys off this value
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=FRONT_OFFICE)

    # Django flags
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    USERNAME_FIELD = "user_id"
    REQUIRED_FIELDS: list[str] = []  # keep empty since we authenticate via user_id

    objects = UserManager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["role"], name="idx_user_role"),
        ]

    def __str__(self):
        return f"{self.full_name} ({self.user_id})"

    # Normalize email for consistency
    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        else:
            self.email = None
        super().save(*args, **kwargs)
