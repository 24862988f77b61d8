from django.contrib.auth.models import AbstractUser
from django.db.models import CharField
from django.db.models import DateTimeField
from django.db.models import EmailField
from django.utils.translation import gettext_lazy as _


class User(AbstractUser):
    """
    Default custom user model for SynergySphere.
    Signup only collects a display name, an email and a password; the
    username is derived from the email.
    """

    # First and last name do not cover name patterns around the globe
    name = CharField(_("Full Name"), blank=True, max_length=255)
    email = EmailField(_("email address"), unique=True)
    # Audit timestamps
    created_at = DateTimeField(auto_now_add=True)
    updated_at = DateTimeField(auto_now=True)

    @property
    def initials(self) -> str:
        source = self.name or self.username
        return "".join(part[0] for part in source.split() if part).upper()
