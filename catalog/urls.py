"""
URL routing for catalog API endpoints.
"""
from django.urls import path
from . import views

app_name = 'catalog'

urlpatterns = [
    path('categories', views.CategoryListCreateView.as_view(), name='category-list'),
    path('products', views.ProductListCreateView.as_view(), name='product-list'),
    path('products/<int:pk>', views.ProductDetailView.as_view(), name='product-detail'),
    path('units_stored', views.UnitsStoredView.as_view(), name='units-stored'),
]
