"""URL configuration for the space booking service.

Django admin plus the JSON API of each app, all under /api/.
"""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('django-admin/', admin.site.urls),
    path('api/', include('Accounts.urls')),
    path('api/', include('Spaces.urls')),
    path('api/', include('slots.urls')),
    path('api/', include('Dashboard.urls')),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
