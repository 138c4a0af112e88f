import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('orders', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='OrderSequence',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('day', models.DateField(unique=True, verbose_name='Day')),
                ('last_value', models.PositiveIntegerField(default=0, verbose_name='Last Value')),
            ],
            options={
                'verbose_name': 'Order Sequence',
                'verbose_name_plural': 'Order Sequences',
                'db_table': 'orders_sequence',
            },
        ),
    ]
