from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class ProjectsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "synergysphere.projects"
    verbose_name = _("Projects")

    def ready(self):
        import synergysphere.projects.signals  # noqa: F401, PLC0415
