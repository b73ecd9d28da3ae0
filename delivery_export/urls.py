# delivery_export/urls.py
"""URL маршруты экрана выгрузки (внутри админки)."""

from django.urls import path
from . import views

app_name = 'delivery_export'

urlpatterns = [
    path('', views.export_page, name='export-page'),
]
