# backend/users/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter(trailing_slash=False)
router.register(r'users', views.UserViewSet, basename='user')

urlpatterns = [
    path('', include(router.urls)),
    path('auth/login', views.LoginView.as_view(), name='auth-login'),
    path('auth/logout', views.LogoutView.as_view(), name='auth-logout'),
    path('auth/me', views.CurrentUserView.as_view(), name='auth-me'),
    path('auth/change-password', views.ChangePasswordView.as_view(), name='change-password'),
    path('auth/update-profile', views.UpdateProfileView.as_view(), name='update-profile'),
]
