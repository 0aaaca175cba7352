import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Barang',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('kode', models.CharField(max_length=50, unique=True, verbose_name='kode barang')),
                ('nama', models.CharField(max_length=200, verbose_name='nama barang')),
                ('satuan', models.CharField(default='unit', max_length=20, verbose_name='satuan')),
                ('stok', models.PositiveIntegerField(default=0, editable=False, verbose_name='stok')),
                ('is_active', models.BooleanField(default=True, verbose_name='aktif')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='dibuat tanggal')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='diubah tanggal')),
            ],
            options={
                'verbose_name': 'Barang',
                'verbose_name_plural': 'Barang',
                'ordering': ['nama'],
            },
        ),
        migrations.CreateModel(
            name='BarangMasuk',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tanggal', models.DateField(verbose_name='tanggal')),
                ('kode_kedatangan', models.CharField(max_length=50, verbose_name='kode kedatangan')),
                ('nama_supplier', models.CharField(max_length=200, verbose_name='nama supplier')),
                ('no_form', models.CharField(max_length=50, verbose_name='nomor form')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('diterima', 'Diterima'), ('ditolak', 'Ditolak')], default='diterima', max_length=20, verbose_name='status')),
                ('is_active', models.BooleanField(default=True, verbose_name='aktif')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='dibuat tanggal')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='diubah tanggal')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='barang_masuk_dibuat', to=settings.AUTH_USER_MODEL, verbose_name='dibuat oleh')),
            ],
            options={
                'verbose_name': 'Barang Masuk',
                'verbose_name_plural': 'Barang Masuk',
                'ordering': ['-tanggal', '-id'],
            },
        ),
        migrations.AddConstraint(
            model_name='barangmasuk',
            constraint=models.UniqueConstraint(condition=models.Q(('is_active', True)), fields=('kode_kedatangan',), name='uniq_kode_kedatangan_aktif'),
        ),
        migrations.AddConstraint(
            model_name='barangmasuk',
            constraint=models.UniqueConstraint(condition=models.Q(('is_active', True)), fields=('no_form',), name='uniq_no_form_barang_masuk_aktif'),
        ),
        migrations.CreateModel(
            name='DetailBarangMasuk',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('jumlah', models.PositiveIntegerField(verbose_name='jumlah')),
                ('barang', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='detail_masuk_set', to='gudang.barang', verbose_name='barang')),
                ('barang_masuk', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='details', to='gudang.barangmasuk', verbose_name='barang masuk')),
            ],
            options={
                'verbose_name': 'Detail Barang Masuk',
                'verbose_name_plural': 'Detail Barang Masuk',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='DetailBarangMasukNoSeri',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('no_seri', models.CharField(max_length=7, unique=True, verbose_name='nomor seri')),
                ('jumlah', models.PositiveIntegerField(default=1, verbose_name='jumlah')),
                ('lokasi', models.CharField(blank=True, max_length=100, verbose_name='lokasi')),
                ('keterangan', models.TextField(blank=True, verbose_name='keterangan')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='dibuat tanggal')),
                ('detail', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='units', to='gudang.detailbarangmasuk', verbose_name='detail barang masuk')),
            ],
            options={
                'verbose_name': 'Nomor Seri Barang Masuk',
                'verbose_name_plural': 'Nomor Seri Barang Masuk',
                'ordering': ['no_seri'],
            },
        ),
        migrations.CreateModel(
            name='SerialNumberLock',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Kunci Nomor Seri',
                'verbose_name_plural': 'Kunci Nomor Seri',
            },
        ),
        migrations.CreateModel(
            name='BarangKeluar',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('no_transaksi', models.CharField(editable=False, max_length=30, unique=True, verbose_name='nomor transaksi')),
                ('tanggal', models.DateField(verbose_name='tanggal')),
                ('tujuan', models.CharField(max_length=200, verbose_name='tujuan')),
                ('delivery_no', models.CharField(blank=True, max_length=100, verbose_name='nomor delivery')),
                ('ship_via', models.CharField(blank=True, max_length=100, verbose_name='dikirim via')),
                ('keterangan', models.TextField(blank=True, verbose_name='keterangan')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Disetujui'), ('rejected', 'Ditolak')], default='pending', max_length=20, verbose_name='status')),
                ('approved_at', models.DateTimeField(blank=True, null=True, verbose_name='diproses tanggal')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='dibuat tanggal')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='diubah tanggal')),
                ('approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='barang_keluar_disetujui', to=settings.AUTH_USER_MODEL, verbose_name='diproses oleh')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='barang_keluar_dibuat', to=settings.AUTH_USER_MODEL, verbose_name='dibuat oleh')),
            ],
            options={
                'verbose_name': 'Barang Keluar',
                'verbose_name_plural': 'Barang Keluar',
                'ordering': ['-tanggal', '-id'],
            },
        ),
        migrations.CreateModel(
            name='DetailBarangKeluar',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('jumlah', models.PositiveIntegerField(verbose_name='jumlah')),
                ('barang', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='detail_keluar_set', to='gudang.barang', verbose_name='barang')),
                ('barang_keluar', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='details', to='gudang.barangkeluar', verbose_name='barang keluar')),
                ('unit', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='keluar_set', to='gudang.detailbarangmasuknoseri', verbose_name='nomor seri')),
            ],
            options={
                'verbose_name': 'Detail Barang Keluar',
                'verbose_name_plural': 'Detail Barang Keluar',
                'ordering': ['id'],
            },
        ),
    ]
