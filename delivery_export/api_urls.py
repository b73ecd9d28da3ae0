# delivery_export/api_urls.py
"""URL маршруты API выгрузки."""

from django.urls import path
from . import views

app_name = 'delivery_export_api'

urlpatterns = [
    # Строки выгрузки
    path('orders/', views.orders_list, name='orders'),
    path('orders/export/', views.orders_export, name='orders-export'),

    # Варианты для фильтра
    path('categories/', views.categories_list, name='categories'),
    path('statuses/', views.statuses_list, name='statuses'),
]
