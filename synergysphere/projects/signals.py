from django.db.models.signals import post_save
from django.db.transaction import on_commit
from django.dispatch import receiver

from synergysphere.realtime.events.projects import publish_project_created
from synergysphere.realtime.events.projects import publish_project_updated
from synergysphere.realtime.events.tasks import publish_task_created
from synergysphere.realtime.events.tasks import publish_task_updated

from .models import Project
from .models import Task


@receiver(post_save, sender=Project)
def send_project_ws(sender, instance, created, **kwargs):
    if created:
        on_commit(lambda: publish_project_created(instance), robust=True)
    else:
        on_commit(lambda: publish_project_updated(instance), robust=True)


@receiver(post_save, sender=Task)
def send_task_ws(sender, instance, created, **kwargs):
    if created:
        on_commit(lambda: publish_task_created(instance), robust=True)
    else:
        on_commit(lambda: publish_task_updated(instance), robust=True)
