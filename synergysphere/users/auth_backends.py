from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend
from django.db.models import Q


class UsernameOrEmailBackend(ModelBackend):
    """Accept the email address (any case) wherever Django expects a username.

    The SPA logs in with ``email``; simplejwt's token view and the admin still
    pass ``username``, which for registered users is the email as well.
    """

    def authenticate(self, request, username=None, password=None, **kwargs):
        user_model = get_user_model()
        login = username if username is not None else kwargs.get(user_model.EMAIL_FIELD)
        if not login or password is None:
            return None

        user = (
            user_model.objects.filter(Q(email__iexact=login) | Q(username__iexact=login))
            .order_by("pk")
            .first()
        )
        if user is None:
            # Hash anyway so unknown accounts take as long as wrong passwords.
            user_model().set_password(password)
            return None
        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
