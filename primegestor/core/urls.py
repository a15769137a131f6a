from django.urls import path
from .views import (
    LoginView, RefreshView, user_me, forgot_password, reset_password,
    user_list_create, user_detail, change_password, admin_reset_password,
    activity_log_list, support_request, documentation
)

urlpatterns = [
    # Auth endpoints
    path('auth/login/', LoginView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', RefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),
    path('auth/forgot-password/', forgot_password, name='forgot-password'),
    path('auth/reset-password/', reset_password, name='reset-password'),

    # User endpoints
    path('users/', user_list_create, name='user-list-create'),
    path('users/change-password/', change_password, name='user-change-password'),
    path('users/reset-password/', admin_reset_password, name='user-reset-password'),
    path('users/<int:pk>/', user_detail, name='user-detail'),

    # ActivityLog endpoints
    path('logs/', activity_log_list, name='activity-log-list'),

    path('support/', support_request, name='support-request'),
    path('documentation/', documentation, name='documentation'),
]
