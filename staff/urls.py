from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import WorkingDayViewSet, WorkingHoursExceptionViewSet

router = DefaultRouter()
router.register(r"working-days", WorkingDayViewSet, basename="working-day")
router.register(r"exceptions", WorkingHoursExceptionViewSet, basename="working-hours-exception")

urlpatterns = [path("", include(router.urls))]
