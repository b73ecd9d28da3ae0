# delivery_export/views.py
"""
Views для delivery_export.

ЭКРАН АДМИНКИ:
- GET  /admin/delivery-export/ - Форма фильтра
- POST /admin/delivery-export/ (search) - Таблица найденных заказов
- POST /admin/delivery-export/ (export) - Скачать CSV

API ENDPOINTS:
- GET /api/delivery-export/orders/ - Строки выгрузки в JSON
- GET /api/delivery-export/orders/export/ - Строки выгрузки в CSV
- GET /api/delivery-export/categories/ - Родительские категории для фильтра
- GET /api/delivery-export/statuses/ - Статусы заказов для фильтра
"""

import logging
from functools import wraps
from typing import Iterable

from django.conf import settings
from django.contrib import admin
from django.contrib.auth.views import redirect_to_login
from django.core.exceptions import BadRequest, PermissionDenied
from django.http import StreamingHttpResponse
from django.shortcuts import render, resolve_url
from django.utils import timezone
from django.utils.cache import add_never_cache_headers
from django.views.decorators.http import require_http_methods
from rest_framework.decorators import api_view, permission_classes
from rest_framework.request import Request
from rest_framework.response import Response

from catalog.services import CategoryTreeService
from orders.models import OrderStatus, normalize_status_code
from users.permissions import CanManageCommerce
from .serializers import (
    CategoryChoiceSerializer,
    ExportCriteriaSerializer,
    ExportRowSerializer,
    StatusChoiceSerializer,
)
from .services import (
    CsvExportService,
    ExportRow,
    OrderFilterService,
    default_order_statuses,
    prepare_row,
)

logger = logging.getLogger(__name__)


# =============================================================================
# ОБЩЕЕ
# =============================================================================

def csv_download_response(rows: Iterable[ExportRow], today) -> StreamingHttpResponse:
    """
    Ответ-вложение с CSV.

    Заголовки запрещают кеширование: выгрузка всегда строится заново.
    """
    response = StreamingHttpResponse(
        CsvExportService.iter_csv(rows),
        content_type='text/csv; charset=utf-8'
    )
    filename = CsvExportService.build_filename(today)
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    add_never_cache_headers(response)
    response['Pragma'] = 'no-cache'
    return response


def export_rows(validated_data) -> list:
    """Отфильтровать заказы по проверенным параметрам и подготовить строки."""
    orders = OrderFilterService.filter_orders(
        validated_data['start_date'],
        validated_data['end_date'],
        validated_data['order_status'],
        validated_data['parent_categories'],
    )
    return [prepare_row(order) for order in orders]


def commerce_manager_required(view_func):
    """
    Доступ только для тех, кто управляет заказами магазина.

    Анонимный GET уводит на вход в админку, всё остальное без прав -> 403.
    """
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        user = request.user

        if not user.is_authenticated:
            if request.method == 'GET':
                return redirect_to_login(request.get_full_path(), resolve_url(settings.LOGIN_URL))
            logger.warning('Анонимный %s к экрану выгрузки отклонён', request.method)
            raise PermissionDenied

        if not user.can_manage_commerce:
            logger.warning('Пользователь %s без прав на выгрузку заказов', user.pk)
            raise PermissionDenied

        return view_func(request, *args, **kwargs)

    return _wrapped


# =============================================================================
# ЭКРАН АДМИНКИ
# =============================================================================

@require_http_methods(['GET', 'POST'])
@commerce_manager_required
def export_page(request):
    """
    Экран выгрузки заказов на самовывоз.

    Кнопка export отдаёт CSV (некорректные даты -> 400), любой другой POST
    считается поиском (некорректные даты -> пустая таблица).
    """
    today = timezone.localdate()

    form = {
        'start_date': '',
        'end_date': '',
        'order_status': default_order_statuses(),
        'parent_categories': [],
    }
    rows = None

    if request.method == 'POST':
        serializer = ExportCriteriaSerializer(data=request.POST)
        is_valid = serializer.is_valid()

        if 'export' in request.POST:
            if not is_valid:
                logger.info('Выгрузка отклонена: %s', serializer.errors)
                raise BadRequest('Некорректный формат даты.')

            rows = export_rows(serializer.validated_data)
            logger.info('Пользователь %s выгрузил %d заказов', request.user.pk, len(rows))
            return csv_download_response(rows, today)

        form.update({
            'start_date': request.POST.get('start_date', ''),
            'end_date': request.POST.get('end_date', ''),
        })
        if is_valid:
            form['order_status'] = [str(code) for code in serializer.validated_data['order_status']]
            form['parent_categories'] = [str(pk) for pk in serializer.validated_data['parent_categories']]
            rows = export_rows(serializer.validated_data)
        else:
            form['order_status'] = request.POST.getlist('order_status') or form['order_status']
            form['parent_categories'] = request.POST.getlist('parent_categories')
            rows = []

    context = {
        **admin.site.each_context(request),
        'title': 'Выгрузка заказов на самовывоз',
        'today': today,
        'form': form,
        'selected_statuses': [normalize_status_code(code) for code in form['order_status']],
        'selected_categories': [str(pk) for pk in form['parent_categories']],
        'status_choices': OrderStatus.choices,
        'parent_categories': CategoryTreeService.parent_categories(hide_empty=True),
        'rows': rows,
        'searched': rows is not None,
    }

    return render(request, 'delivery_export/export_page.html', context)


# =============================================================================
# API
# =============================================================================

@api_view(['GET'])
@permission_classes([CanManageCommerce])
def orders_list(request: Request) -> Response:
    """
    Строки выгрузки в JSON.

    GET /api/delivery-export/orders/

    Query параметры:
    - start_date: YYYY-MM-DD (обязательно)
    - end_date: YYYY-MM-DD (обязательно)
    - order_status: код статуса, можно несколько раз (default: processing, completed)
    - parent_categories: ID категории, можно несколько раз

    Ответ:
    {
        "filters": {"start_date": "...", "end_date": "...", "order_status": [...], "parent_categories": [...]},
        "count": 2,
        "results": [{"id": 42, "date": "05/03/2024 14:30:00", ...}]
    }
    """
    serializer = ExportCriteriaSerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    criteria = OrderFilterService.build_criteria(
        data['start_date'],
        data['end_date'],
        data['order_status'],
        data['parent_categories'],
    )
    orders = OrderFilterService.apply(criteria)
    rows = [prepare_row(order) for order in orders]

    return Response({
        'filters': criteria.to_dict(),
        'count': len(rows),
        'results': ExportRowSerializer(rows, many=True).data,
    })


@api_view(['GET'])
@permission_classes([CanManageCommerce])
def orders_export(request: Request):
    """
    Строки выгрузки в CSV.

    GET /api/delivery-export/orders/export/

    Параметры как у orders/. Ответ - вложение <prefix>-YYYY-MM-DD.csv.
    """
    serializer = ExportCriteriaSerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)

    rows = export_rows(serializer.validated_data)
    logger.info('API: пользователь %s выгрузил %d заказов', request.user.pk, len(rows))

    return csv_download_response(rows, timezone.localdate())


@api_view(['GET'])
@permission_classes([CanManageCommerce])
def categories_list(request: Request) -> Response:
    """
    Родительские категории для фильтра.

    GET /api/delivery-export/categories/?hide_empty=false
    """
    hide_empty = request.query_params.get('hide_empty', 'true').lower() not in ('0', 'false', 'no')
    categories = CategoryTreeService.parent_categories(hide_empty=hide_empty)
    return Response(CategoryChoiceSerializer(categories, many=True).data)


@api_view(['GET'])
@permission_classes([CanManageCommerce])
def statuses_list(request: Request) -> Response:
    """
    Статусы заказов для фильтра.

    GET /api/delivery-export/statuses/
    """
    defaults = set(default_order_statuses())
    statuses = [
        {'code': code, 'label': str(label), 'is_default': code in defaults}
        for code, label in OrderStatus.choices
    ]
    return Response(StatusChoiceSerializer(statuses, many=True).data)
