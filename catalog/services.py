# catalog/services.py
"""Сервисы для catalog: обход дерева категорий."""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set

from .models import Category, Product


class CategoryTreeService:
    """
    Работа с деревом категорий.

    Дерево читается одним запросом (id, parent_id) и обходится в памяти,
    без рекурсивных запросов к БД.
    """

    @classmethod
    def get_children_map(cls) -> Dict[Optional[int], List[int]]:
        """Карта parent_id -> [id дочерних категорий]."""
        children: Dict[Optional[int], List[int]] = defaultdict(list)
        for category_id, parent_id in Category.objects.values_list('id', 'parent_id'):
            children[parent_id].append(category_id)
        return children

    @classmethod
    def descendant_ids(
            cls,
            category_id: int,
            children_map: Optional[Dict[Optional[int], List[int]]] = None,
    ) -> Set[int]:
        """
        Все потомки категории на любой глубине (без самой категории).

        Args:
            category_id: ID категории
            children_map: Готовая карта дерева (чтобы не читать БД повторно)

        Returns:
            Множество ID потомков
        """
        if children_map is None:
            children_map = cls.get_children_map()

        found: Set[int] = set()
        stack = list(children_map.get(category_id, []))

        while stack:
            current = stack.pop()
            if current in found or current == category_id:
                continue
            found.add(current)
            stack.extend(children_map.get(current, []))

        return found

    @classmethod
    def closure(cls, category_ids: Iterable[int]) -> Set[int]:
        """
        Замыкание категорий: выбранные категории вместе со всеми потомками.

        Args:
            category_ids: ID выбранных (родительских) категорий

        Returns:
            Плоское множество ID без повторов
        """
        category_ids = list(category_ids)
        if not category_ids:
            return set()

        children_map = cls.get_children_map()

        result: Set[int] = set()
        for category_id in category_ids:
            result.add(category_id)
            result |= cls.descendant_ids(category_id, children_map)

        return result

    @classmethod
    def existing_ids(cls, category_ids: Iterable[int]) -> List[int]:
        """
        Оставить только ID существующих категорий.

        Порядок входа сохраняется, повторы убираются.
        """
        requested = list(dict.fromkeys(category_ids))
        if not requested:
            return []

        existing = set(
            Category.objects.filter(pk__in=requested).values_list('id', flat=True)
        )
        return [category_id for category_id in requested if category_id in existing]

    @classmethod
    def parent_categories(cls, hide_empty: bool = True) -> List[Category]:
        """
        Категории верхнего уровня для выбора в фильтре.

        Args:
            hide_empty: Скрыть категории, в замыкании которых нет ни одного товара

        Returns:
            Список категорий, отсортированный по названию
        """
        top_level = list(Category.objects.filter(parent__isnull=True).order_by('name', 'id'))

        if not hide_empty:
            return top_level

        used_ids = set(
            Product.categories.through.objects.values_list('category_id', flat=True).distinct()
        )
        children_map = cls.get_children_map()

        result = []
        for category in top_level:
            tree = {category.pk} | cls.descendant_ids(category.pk, children_map)
            if tree & used_ids:
                result.append(category)

        return result
