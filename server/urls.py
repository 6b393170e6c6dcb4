"""Main URL mapping configuration file.

Every app keeps its routes in its own ``urls.py``.
"""

from django.urls import include, path

urlpatterns = [
    path('', include('server.apps.status.urls')),
    path('', include('server.apps.accounts.urls')),
    path('', include('server.apps.files.urls')),
]
