"""
URL configuration for inventory API endpoints.
"""

from django.urls import path

from api.v1.inventory import views

app_name = "inventory"

urlpatterns = [
    path(
        "licenses",
        views.LicenseCollectionView.as_view(),
        name="licenses",
    ),
    path(
        "licenses/<int:license_id>",
        views.LicenseDetailView.as_view(),
        name="license-detail",
    ),
    path(
        "products",
        views.ProductCollectionView.as_view(),
        name="products",
    ),
    path(
        "products/totals",
        views.LicenseTotalsView.as_view(),
        name="license-totals",
    ),
    path(
        "products/<path:name>/rename",
        views.RenameProductView.as_view(),
        name="rename-product",
    ),
    path(
        "products/<path:name>",
        views.ProductDetailView.as_view(),
        name="product-detail",
    ),
]
