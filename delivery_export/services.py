# delivery_export/services.py
"""
Сервисы выгрузки заказов на самовывоз.

ОСНОВНЫЕ СЕРВИСЫ:
- OrderFilterService: Фильтрация заказов по датам, статусам и родительским категориям
- ExportRowService: Подготовка строки выгрузки из заказа
- CsvExportService: Сериализация строк в CSV (UTF-8 с BOM)

ПРАВИЛА:
- Некорректный ввод никогда не приводит к исключению: пустой результат
- Неизвестные статусы и категории молча отбрасываются
- Сервисы не читают request: всё передаётся аргументами
- Результат зависит только от критериев и текущих данных заказов/категорий
"""

from __future__ import annotations

import codecs
import csv
import logging
from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from catalog.services import CategoryTreeService
from orders.filters import OrderFilter
from orders.models import Order, OrderStatus, normalize_status_code

logger = logging.getLogger(__name__)


# =============================================================================
# ФОРМАТЫ
# =============================================================================

INPUT_DATE_FORMAT = '%Y-%m-%d'
ORDER_DATE_FORMAT = '%d/%m/%Y %H:%M:%S'
PICKUP_DATE_FORMAT = '%d/%m/%Y'

# Верхняя граница BigAutoField: большие значения БД не примет
MAX_CATEGORY_ID = 2 ** 63 - 1

CSV_HEADERS = (
    'Order ID',
    'Order Date',
    'First Name',
    'Last Name',
    'Email Address',
    'Pickup Date',
    'Pickup Time',
)


def parse_iso_date(value: Any) -> Optional[date]:
    """
    Строгий разбор даты YYYY-MM-DD.

    Строка должна совпадать с форматом целиком: '2024-1-5' и '2024-13-40'
    отклоняются. Объекты date принимаются как есть.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    try:
        parsed = datetime.strptime(value, INPUT_DATE_FORMAT).date()
    except ValueError:
        return None

    if parsed.strftime(INPUT_DATE_FORMAT) != value:
        return None

    return parsed


def default_order_statuses() -> List[str]:
    """Статусы по умолчанию (processing, completed)."""
    return list(getattr(settings, 'DELIVERY_EXPORT_DEFAULT_STATUSES', [
        OrderStatus.PROCESSING.value,
        OrderStatus.COMPLETED.value,
    ]))


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class FilterCriteria:
    """Проверенные критерии фильтрации (живут в пределах одного запроса)."""
    start_date: date
    end_date: date
    statuses: Tuple[str, ...]
    parent_category_ids: Tuple[int, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'order_status': list(self.statuses),
            'parent_categories': list(self.parent_category_ids),
        }


@dataclass(frozen=True)
class ExportRow:
    """Строка выгрузки: плоская отформатированная запись одного заказа."""
    id: int
    date: str
    first_name: str
    last_name: str
    email: str
    pickup_date: str
    pickup_time: str

    def as_csv_row(self) -> List[Any]:
        """Значения в порядке колонок CSV_HEADERS."""
        return [
            self.id,
            self.date,
            self.first_name,
            self.last_name,
            self.email,
            self.pickup_date,
            self.pickup_time,
        ]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =============================================================================
# ORDER FILTER
# =============================================================================

class OrderFilterService:
    """
    Фильтрация заказов для выгрузки.

    Алгоритм:
    1. Проверить даты, статусы и категории (мусор отбрасывается)
    2. Выбрать заказы по диапазону дат (включительно) и статусам
    3. Если категории не выбраны - вернуть все заказы из п.2
    4. Иначе построить замыкание категорий (выбранные + все потомки)
    5. Оставить заказы, где хотя бы один товар попадает в замыкание
       (вариации проверяются по категориям родительского товара)
    """

    @classmethod
    def validate_statuses(cls, statuses: Optional[Iterable[Any]]) -> List[str]:
        """Оставить только известные коды статусов (префикс wc- снимается)."""
        known = set(OrderStatus.values)
        valid: List[str] = []
        dropped: List[Any] = []

        for raw in statuses or []:
            code = normalize_status_code(raw)
            if code not in known:
                dropped.append(raw)
            elif code not in valid:
                valid.append(code)

        if dropped:
            logger.debug('Отброшены неизвестные статусы: %s', dropped)

        return valid

    @classmethod
    def validate_category_ids(cls, category_ids: Optional[Iterable[Any]]) -> List[int]:
        """
        Оставить только ID существующих категорий.

        Знак отбрасывается (-5 -> 5), ноль и значения вне диапазона ID
        считаются мусором.
        """
        coerced: List[int] = []
        dropped: List[Any] = []

        for raw in category_ids or []:
            try:
                value = abs(int(raw))
            except (TypeError, ValueError):
                dropped.append(raw)
                continue
            if value == 0 or value > MAX_CATEGORY_ID:
                dropped.append(raw)
                continue
            coerced.append(value)

        existing = CategoryTreeService.existing_ids(coerced)
        dropped.extend(value for value in coerced if value not in existing)

        if dropped:
            logger.debug('Отброшены несуществующие категории: %s', dropped)

        return existing

    @classmethod
    def build_criteria(
            cls,
            start_date: Any,
            end_date: Any,
            statuses: Optional[Iterable[Any]],
            parent_category_ids: Optional[Iterable[Any]] = None,
    ) -> Optional[FilterCriteria]:
        """
        Собрать проверенные критерии.

        Returns:
            FilterCriteria или None, если хотя бы одна дата некорректна
        """
        start = parse_iso_date(start_date)
        end = parse_iso_date(end_date)

        if start is None or end is None:
            logger.info(
                'Некорректный диапазон дат: start_date=%r, end_date=%r',
                start_date, end_date
            )
            return None

        return FilterCriteria(
            start_date=start,
            end_date=end,
            statuses=tuple(cls.validate_statuses(statuses)),
            parent_category_ids=tuple(cls.validate_category_ids(parent_category_ids)),
        )

    @classmethod
    def get_base_queryset(cls):
        """Заказы со всем, что нужно для проверки категорий и строки выгрузки."""
        return Order.objects.prefetch_related(
            'meta',
            'items__product__categories',
            'items__product__parent__categories',
        )

    @classmethod
    def query_orders(cls, criteria: FilterCriteria) -> List[Order]:
        """Заказы по диапазону дат и статусам, в порядке хранилища (новые сверху)."""
        if not criteria.statuses:
            return []

        if criteria.start_date > criteria.end_date:
            return []

        filterset = OrderFilter(
            data={
                'created_from': criteria.start_date,
                'created_to': criteria.end_date,
                'status': list(criteria.statuses),
            },
            queryset=cls.get_base_queryset(),
        )

        if not filterset.is_valid():
            logger.warning('Фильтр заказов отклонил критерии: %s', filterset.errors)
            return []

        return list(filterset.qs)

    @classmethod
    def order_matches(cls, order: Order, category_closure: Iterable[int]) -> bool:
        """
        Есть ли в заказе товар из замыкания категорий.

        Позиции с удалённым товаром пропускаются, но заказ не исключают.
        """
        category_closure = set(category_closure)

        for item in order.items.all():
            product = item.product
            if product is None:
                continue
            if product.category_ids_for_matching() & category_closure:
                return True

        return False

    @classmethod
    def apply(cls, criteria: FilterCriteria) -> List[Order]:
        """Применить проверенные критерии."""
        orders = cls.query_orders(criteria)

        # Категории не выбраны - подходят все заказы
        if not criteria.parent_category_ids:
            return orders

        category_closure = CategoryTreeService.closure(criteria.parent_category_ids)

        return [
            order for order in orders
            if cls.order_matches(order, category_closure)
        ]

    @classmethod
    def filter_orders(
            cls,
            start_date: Any,
            end_date: Any,
            statuses: Optional[Iterable[Any]],
            parent_category_ids: Optional[Iterable[Any]] = None,
    ) -> List[Order]:
        """
        Заказы, удовлетворяющие всем трём фильтрам.

        Args:
            start_date: Начало диапазона (YYYY-MM-DD или date), включительно
            end_date: Конец диапазона (YYYY-MM-DD или date), включительно
            statuses: Коды статусов
            parent_category_ids: ID родительских категорий (пусто = без фильтра)

        Returns:
            Список заказов; пустой список при некорректных датах
        """
        criteria = cls.build_criteria(start_date, end_date, statuses, parent_category_ids)
        if criteria is None:
            return []

        orders = cls.apply(criteria)

        logger.info(
            'Фильтр заказов: %s..%s, статусы=%s, категории=%s, найдено=%d',
            criteria.start_date, criteria.end_date,
            list(criteria.statuses), list(criteria.parent_category_ids),
            len(orders)
        )

        return orders


# =============================================================================
# EXPORT ROW
# =============================================================================

class ExportRowService:
    """Подготовка строки выгрузки из заказа."""

    @classmethod
    def format_order_date(cls, created_at: datetime) -> str:
        """Дата заказа в локальном времени: DD/MM/YYYY HH:MM:SS."""
        if timezone.is_aware(created_at):
            created_at = timezone.localtime(created_at)
        return created_at.strftime(ORDER_DATE_FORMAT)

    @classmethod
    def parse_pickup_date(cls, raw: Optional[str]) -> Optional[date]:
        """
        Разобрать дату самовывоза из метаданных.

        Порядок: ISO дата, ISO дата-время, затем PICKUP_DATE_INPUT_FORMATS.
        Нераспознанное значение -> None.
        """
        value = (raw or '').strip()
        if not value:
            return None

        try:
            parsed_date = parse_date(value)
        except ValueError:
            parsed_date = None
        if parsed_date is not None:
            return parsed_date

        try:
            parsed_datetime = parse_datetime(value)
        except ValueError:
            parsed_datetime = None
        if parsed_datetime is not None:
            return parsed_datetime.date()

        for input_format in getattr(settings, 'PICKUP_DATE_INPUT_FORMATS', []):
            try:
                return datetime.strptime(value, input_format).date()
            except ValueError:
                continue

        logger.debug('Не удалось разобрать дату самовывоза: %r', raw)
        return None

    @classmethod
    def format_pickup_date(cls, raw: Optional[str]) -> str:
        parsed = cls.parse_pickup_date(raw)
        return parsed.strftime(PICKUP_DATE_FORMAT) if parsed else ''

    @classmethod
    def prepare_row(cls, order: Order) -> ExportRow:
        """Строка выгрузки для заказа."""
        pickup_date_key = getattr(settings, 'DELIVERY_EXPORT_PICKUP_DATE_KEY', 'pickup_date')
        pickup_time_key = getattr(settings, 'DELIVERY_EXPORT_PICKUP_TIME_KEY', 'pickup_time')

        return ExportRow(
            id=order.id,
            date=cls.format_order_date(order.created_at),
            first_name=order.billing_first_name,
            last_name=order.billing_last_name,
            email=order.billing_email,
            pickup_date=cls.format_pickup_date(order.get_meta(pickup_date_key)),
            pickup_time=order.get_meta(pickup_time_key),
        )


# =============================================================================
# CSV EXPORT
# =============================================================================

class _EchoBuffer:
    """Псевдо-файл для csv.writer: write() возвращает строку, а не пишет её."""

    def write(self, value: str) -> str:
        return value


class CsvExportService:
    """
    CSV выгрузка.

    Формат:
    - UTF-8 с BOM (EF BB BF), чтобы Excel не гадал кодировку
    - Заголовок CSV_HEADERS, затем по строке на заказ
    - Стандартное экранирование (кавычки удваиваются), строки через \\n
    """

    BOM = codecs.BOM_UTF8

    @classmethod
    def iter_csv(cls, rows: Iterable[ExportRow]) -> Iterator[bytes]:
        """Построчная генерация CSV в байтах (для потокового ответа)."""
        writer = csv.writer(_EchoBuffer(), lineterminator='\n')

        yield cls.BOM
        yield writer.writerow(CSV_HEADERS).encode('utf-8')

        for row in rows:
            yield writer.writerow(row.as_csv_row()).encode('utf-8')

    @classmethod
    def export_csv(cls, orders: Sequence[Order]) -> bytes:
        """Полный CSV для списка заказов."""
        rows = [ExportRowService.prepare_row(order) for order in orders]
        return b''.join(cls.iter_csv(rows))

    @classmethod
    def build_filename(cls, today: date) -> str:
        """<prefix>-YYYY-MM-DD.csv"""
        prefix = getattr(settings, 'DELIVERY_EXPORT_FILENAME_PREFIX', 'orders-export')
        return f"{prefix}-{today.strftime(INPUT_DATE_FORMAT)}.csv"


# =============================================================================
# ФУНКЦИИ-ОБЁРТКИ
# =============================================================================

def filter_orders(
        start_date: Any,
        end_date: Any,
        statuses: Optional[Iterable[Any]],
        parent_category_ids: Optional[Iterable[Any]] = None,
) -> List[Order]:
    return OrderFilterService.filter_orders(start_date, end_date, statuses, parent_category_ids)


def prepare_row(order: Order) -> ExportRow:
    return ExportRowService.prepare_row(order)


def export_csv(orders: Sequence[Order]) -> bytes:
    return CsvExportService.export_csv(orders)
