# staff/signals.py
#
# Purpose:
# - Give every newly created staff member the salon's default weekly
#   schedule, so they are bookable without manual setup.
#
import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from booking.models import Staff

from .working_hours import WorkingHoursStore

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Staff)
def create_default_schedule(sender, instance: Staff, created: bool, raw=False, **kwargs):
    if not created or raw:
        return
    WorkingHoursStore().create_default_schedule(instance.pk)
    logger.info("Default weekly schedule created for staff %s", instance.pk)
