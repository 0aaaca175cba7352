import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('gudang', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='JenisBarang',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nama', models.CharField(max_length=100, verbose_name='nama jenis')),
                ('deskripsi', models.TextField(blank=True, verbose_name='deskripsi')),
                ('is_active', models.BooleanField(default=True, verbose_name='aktif')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='dibuat tanggal')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='diubah tanggal')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='jenis_barang_dibuat', to=settings.AUTH_USER_MODEL, verbose_name='dibuat oleh')),
            ],
            options={
                'verbose_name': 'Jenis Barang',
                'verbose_name_plural': 'Jenis Barang',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.AddField(
            model_name='barang',
            name='jenis',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='barang_set', to='gudang.jenisbarang', verbose_name='jenis barang'),
        ),
    ]
