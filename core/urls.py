# core/urls.py
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from . import views
from .api.views import ActivityLogViewSet, LoginSessionViewSet

router = DefaultRouter()
router.register(r'admin/login-sessions', LoginSessionViewSet, basename='login-session')
router.register(r'admin/activity-logs', ActivityLogViewSet, basename='activity-log')

urlpatterns = [
    path('', views.home, name='home'),
    path('dashboard/', views.dashboard, name='dashboard'),
    path('admin/dashboard/', views.admin_dashboard, name='admin_dashboard'),
    path('api/', include(router.urls)),
]
