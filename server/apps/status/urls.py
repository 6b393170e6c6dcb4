"""URL routes for status app."""

from django.urls import path

from server.apps.status import views

app_name = 'status'

urlpatterns = [
    path('status', views.status, name='status'),
    path('stats', views.stats, name='stats'),
]
