import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('pending', 'Ожидает оплаты'), ('processing', 'В обработке'), ('on-hold', 'На удержании'), ('completed', 'Выполнен'), ('cancelled', 'Отменён'), ('refunded', 'Возвращён'), ('failed', 'Не удался'), ('checkout-draft', 'Черновик')], default='pending', max_length=20, verbose_name='Статус')),
                ('billing_first_name', models.CharField(blank=True, max_length=100, verbose_name='Имя (плательщик)')),
                ('billing_last_name', models.CharField(blank=True, max_length=100, verbose_name='Фамилия (плательщик)')),
                ('billing_email', models.CharField(blank=True, max_length=254, verbose_name='Email (плательщик)')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Дата создания')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Дата обновления')),
            ],
            options={
                'verbose_name': 'Заказ',
                'verbose_name_plural': 'Заказы',
                'db_table': 'orders',
                'ordering': ['-created_at', '-id'],
                'permissions': [('manage_commerce', 'Может управлять заказами магазина')],
                'indexes': [
                    models.Index(fields=['status', '-created_at'], name='orders_status_created_idx'),
                    models.Index(fields=['-created_at'], name='orders_created_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OrderItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(blank=True, max_length=200, verbose_name='Название позиции')),
                ('quantity', models.PositiveIntegerField(default=1, verbose_name='Количество')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='orders.order', verbose_name='Заказ')),
                ('product', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='order_items', to='catalog.product', verbose_name='Товар')),
            ],
            options={
                'verbose_name': 'Позиция заказа',
                'verbose_name_plural': 'Позиции заказов',
                'db_table': 'order_items',
            },
        ),
        migrations.CreateModel(
            name='OrderMeta',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('key', models.CharField(max_length=255, verbose_name='Ключ')),
                ('value', models.TextField(blank=True, verbose_name='Значение')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='meta', to='orders.order', verbose_name='Заказ')),
            ],
            options={
                'verbose_name': 'Метаданные заказа',
                'verbose_name_plural': 'Метаданные заказов',
                'db_table': 'order_meta',
                'unique_together': {('order', 'key')},
            },
        ),
    ]
