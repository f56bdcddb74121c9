from django.urls import path

from .views import AdminLoginView, PhoneLoginView, SignOutView

urlpatterns = [
    path('login/', AdminLoginView.as_view(), name='login'),
    path('leaders/login/', PhoneLoginView.as_view(), name='phone_login'),
    path('logout/', SignOutView.as_view(), name='logout'),
]
