from django.apps import AppConfig


class DeliveryExportConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'delivery_export'
    verbose_name = 'Выгрузка заказов на самовывоз'
