"""
Account Models - Shop customers.

Shop users are independent of django.contrib.auth users, which remain for
admin staff only.
"""
from django.db import models


class User(models.Model):
    """
    Registered shop user.

    password holds a Django password-hasher string, never plaintext.
    """
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    username = models.CharField(
        max_length=150,
        unique=True,
        help_text="Unique login name"
    )
    password = models.CharField(max_length=255)
    user_permissions = models.IntegerField(
        default=0,
        help_text="Permission level, 0 for regular customers"
    )

    class Meta:
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        ordering = ['username']

    def __str__(self):
        return self.username

    # Lets DRF permission classes treat a resolved token owner as authenticated
    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def is_anonymous(self) -> bool:
        return False
