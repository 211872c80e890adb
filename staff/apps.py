# staff/apps.py
from django.apps import AppConfig


class StaffConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "staff"
    verbose_name = "Staff schedules"

    def ready(self):
        # Import signal handlers so Django registers them at startup
        import staff.signals  # noqa: F401
