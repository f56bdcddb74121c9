from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView

urlpatterns = [
    # Django's built-in admin lives at /django-admin/ so /admin/ stays with the app
    path('django-admin/', admin.site.urls),

    # Old login entry points
    path('login/', RedirectView.as_view(pattern_name='login', permanent=True)),

    path('accounts/', include('accounts.urls')),
    path('', include('core.urls')),
]

handler403 = 'core.views.permission_denied'
