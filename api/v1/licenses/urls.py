"""
URL configuration for license API endpoints.
"""

from django.urls import path

from api.v1.licenses import views

app_name = "licenses"

urlpatterns = [
    path("", views.LicenseListView.as_view(), name="list"),
    path("claim", views.ClaimLicenseView.as_view(), name="claim"),
    path("claim-by-email", views.ClaimByEmailView.as_view(), name="claim-by-email"),
    path("expiring-total", views.ExpiringTotalView.as_view(), name="expiring-total"),
    path("developer", views.DeveloperLicenseListView.as_view(), name="developer"),
    path("<str:key>", views.LicenseDetailView.as_view(), name="detail"),
]
