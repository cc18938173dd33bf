from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='HistoricalPrice',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('symbol', models.CharField(db_index=True, help_text='The stock symbol (ticker).', max_length=20)),
                ('date', models.DateField(db_index=True, help_text='The trading day.')),
                ('open', models.DecimalField(blank=True, decimal_places=4, help_text='Opening price.', max_digits=14, null=True)),
                ('low', models.DecimalField(blank=True, decimal_places=4, help_text='Lowest price.', max_digits=14, null=True)),
                ('high', models.DecimalField(blank=True, decimal_places=4, help_text='Highest price.', max_digits=14, null=True)),
                ('close', models.DecimalField(blank=True, decimal_places=4, help_text='Closing price.', max_digits=14, null=True)),
                ('volume', models.BigIntegerField(blank=True, help_text='Shares traded.', null=True)),
            ],
            options={
                'verbose_name': 'Historical price',
                'verbose_name_plural': 'Historical prices',
                'ordering': ['symbol', 'date'],
                'unique_together': {('symbol', 'date')},
            },
        ),
    ]
