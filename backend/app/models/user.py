# app/models/user.py
"""
Database model for users.
Represents a business account: login credentials plus free-form profile fields.
"""
import uuid
from tortoise import fields, models

# Profile attributes that the profile-update operation may change
PROFILE_FIELDS = (
    "business_name",
    "full_name",
    "phone_number",
    "address",
    "city",
    "state",
    "zip_code",
    "country",
    "logo_url",
    "business_type",
    "theme",
)

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many Assistants (one-to-many, via related_name="assistants")

    Security:
    - Password is stored as an argon2 hash (never plain text) and is not
      changed after registration
    - Email is the login key and must be unique (exact match)
    - token_version is bumped to revoke every token issued so far
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)  # Primary key: unique user identifier
    email = fields.CharField(max_length=255, unique=True, index=True)  # Login key, stored as given
    password_hash = fields.CharField(max_length=255)  # Argon2 hash
    token_version = fields.IntField(default=0)  # Token generation counter

    # Business profile (all optional)
    business_name = fields.CharField(max_length=255, null=True)
    full_name = fields.CharField(max_length=255, null=True)
    phone_number = fields.CharField(max_length=64, null=True)
    address = fields.CharField(max_length=255, null=True)
    city = fields.CharField(max_length=128, null=True)
    state = fields.CharField(max_length=128, null=True)
    zip_code = fields.CharField(max_length=32, null=True)
    country = fields.CharField(max_length=128, null=True)
    logo_url = fields.CharField(max_length=1024, null=True)
    business_type = fields.CharField(max_length=64, null=True)
    theme = fields.CharField(max_length=32, null=True)

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"
