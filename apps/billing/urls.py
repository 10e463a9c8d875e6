from django.urls import path
from . import views

app_name = 'billing'

urlpatterns = [
    path('payments/initialize/', views.initialize_payment, name='payment-initialize'),
    path('webhook/', views.stripe_webhook, name='webhook'),
    path('portal/', views.billing_portal, name='portal'),
    path('subscription/', views.current_subscription, name='subscription'),
]
