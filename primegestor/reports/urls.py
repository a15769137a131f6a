from django.urls import path
from .views import dashboard, profit_loss, tabular_report

urlpatterns = [
    path('dashboard/', dashboard, name='dashboard'),
    path('reports/profit-loss/', profit_loss, name='report-profit-loss'),
    path('reports/<str:name>/', tabular_report, name='report'),
]
