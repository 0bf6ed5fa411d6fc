# parties/api/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from parties.api.viewsets import AgentViewSet, CustomerViewSet, VendorViewSet

router = DefaultRouter()
router.register(r"customers", CustomerViewSet, basename="customers")
router.register(r"agents", AgentViewSet, basename="agents")
router.register(r"vendors", VendorViewSet, basename="vendors")

urlpatterns = [
    path("", include(router.urls)),
]
