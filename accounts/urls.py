"""
URL routing for account API endpoints.
"""
from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    path('login', views.LoginView.as_view(), name='login'),
    path('personal', views.PersonalView.as_view(), name='personal'),
]
