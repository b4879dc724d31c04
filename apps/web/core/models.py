"""
Core models - users and shared model bases.

Every marketplace account is a User with a role. Restaurant ownership,
customer identity and admin-on-behalf ordering all hang off the role.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom user model with a marketplace role.

    Roles outside the Role choices (e.g. legacy "courier" accounts) are
    never granted access to orders.
    """

    class Role(models.TextChoices):
        ADMIN = "admin", "Admin"
        CUSTOMER = "customer", "Customer"
        RESTAURANT = "restaurant", "Restaurant"

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.CUSTOMER,
    )
    phone = models.CharField(max_length=20, blank=True)

    class Meta:
        ordering = ["username"]

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"

    @property
    def is_marketplace_admin(self) -> bool:
        """Check if the user acts with admin rights on orders."""
        return self.role == self.Role.ADMIN


class TimestampedModel(models.Model):
    """
    Abstract base for marketplace models.

    Provides:
    - Created/updated timestamps
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
