"""
URL routing for order API endpoints.
"""
from django.urls import path
from . import views

app_name = 'orders'

urlpatterns = [
    path('order', views.OrderCreateView.as_view(), name='order-create'),
    path('myorders', views.MyOrdersView.as_view(), name='my-orders'),
]
