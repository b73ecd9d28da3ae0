# config/__init__.py
"""Django-проект выгрузки заказов на самовывоз."""
