from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    # Authentication
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),
    path('logout/', views.logout, name='logout'),

    # User profile
    path('user/', views.get_current_user, name='current-user'),

    # Business configuration
    path('settings/', views.business_settings, name='business-settings'),
    path('public-page/', views.public_page, name='public-page'),
]
