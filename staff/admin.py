# staff/admin.py
from django.contrib import admin
from .models import WorkingDay, WorkingHoursException


@admin.register(WorkingDay)
class WorkingDayAdmin(admin.ModelAdmin):
    list_display = ("staff", "weekday", "enabled", "start_time", "end_time", "break_start", "break_end")
    list_filter = ("staff", "enabled")
    search_fields = ("staff__name",)


@admin.register(WorkingHoursException)
class WorkingHoursExceptionAdmin(admin.ModelAdmin):
    list_display = ("staff", "date", "closed", "start_time", "end_time", "reason")
    list_filter = ("staff", "closed")
    search_fields = ("staff__name", "reason")
