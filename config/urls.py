"""
URL configuration for the delivery export project.
"""
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from django.views.generic import RedirectView
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods
from django.db import connection
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView


@require_http_methods(["GET"])
def health_check(request):
    """Health check endpoint для мониторинга и load balancer"""
    health_status = {
        'status': 'healthy',
        'service': 'Delivery Export',
        'version': '1.0.0',
        'checks': {}
    }

    # Проверка базы данных
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        health_status['checks']['database'] = 'ok'
    except Exception as e:
        health_status['checks']['database'] = f'error: {str(e)}'
        health_status['status'] = 'unhealthy'

    status_code = 200 if health_status['status'] == 'healthy' else 503
    return JsonResponse(health_status, status=status_code)


urlpatterns = [
    # Health check (для мониторинга)
    path('health/', health_check, name='health-check'),

    # Экран выгрузки живёт внутри админки, поэтому регистрируется до admin.site.urls
    path('admin/delivery-export/', include('delivery_export.urls', namespace='delivery_export')),

    # Административная панель
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),

    # JWT
    path('api/auth/token/', TokenObtainPairView.as_view(), name='token-obtain'),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),

    # API выгрузки
    path('api/delivery-export/', include('delivery_export.api_urls', namespace='delivery_export_api')),

    # Редирект с корня на экран выгрузки
    path('', RedirectView.as_view(pattern_name='delivery_export:export-page', permanent=False), name='root-redirect'),
]

# Статика только в DEBUG режиме
if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)

# Настройка Admin панели
admin.site.site_header = 'Выгрузка заказов - Администрирование'
admin.site.site_title = 'Выгрузка заказов'
admin.site.index_title = 'Панель управления'
