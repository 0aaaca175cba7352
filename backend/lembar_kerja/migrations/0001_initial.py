import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('gudang', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Transaksi',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('jenis_pekerjaan', models.CharField(choices=[('inspeksi_mesin', 'Inspeksi Mesin'), ('assembly_staff', 'Assembly'), ('qc_staff', 'QC'), ('pdi_staff', 'PDI'), ('painting_staff', 'Painting'), ('pindah_lokasi', 'Pindah Lokasi')], max_length=30, verbose_name='jenis pekerjaan')),
                ('no_form', models.CharField(max_length=100, verbose_name='nomor form')),
                ('tanggal', models.DateTimeField(default=django.utils.timezone.now, verbose_name='tanggal')),
                ('status', models.CharField(default='Proses', max_length=50, verbose_name='status')),
                ('keterangan', models.TextField(blank=True, verbose_name='keterangan')),
                ('lokasi', models.CharField(blank=True, max_length=100, verbose_name='lokasi')),
                ('qty', models.PositiveIntegerField(default=1, verbose_name='jumlah')),
                ('is_approved', models.BooleanField(default=False, verbose_name='disetujui')),
                ('approved_at', models.DateTimeField(blank=True, null=True, verbose_name='disetujui tanggal')),
                ('version', models.PositiveIntegerField(default=1, verbose_name='versi')),
                ('is_active', models.BooleanField(default=True, verbose_name='aktif')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='dibuat tanggal')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='diubah tanggal')),
                ('approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='transaksi_disetujui', to=settings.AUTH_USER_MODEL, verbose_name='disetujui oleh')),
                ('pic', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='transaksi_dibuat', to=settings.AUTH_USER_MODEL, verbose_name='PIC')),
                ('staff', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='transaksi_dikerjakan', to=settings.AUTH_USER_MODEL, verbose_name='staf')),
                ('unit', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transaksi_set', to='gudang.detailbarangmasuknoseri', verbose_name='nomor seri')),
            ],
            options={
                'verbose_name': 'Lembar Kerja',
                'verbose_name_plural': 'Lembar Kerja',
                'ordering': ['-tanggal', '-id'],
            },
        ),
        migrations.AddConstraint(
            model_name='transaksi',
            constraint=models.UniqueConstraint(condition=models.Q(('is_active', True)), fields=('unit', 'jenis_pekerjaan'), name='uniq_lembar_kerja_aktif'),
        ),
        migrations.CreateModel(
            name='ChecklistItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('urutan', models.PositiveIntegerField(verbose_name='urutan')),
                ('parameter', models.CharField(max_length=500, verbose_name='parameter')),
                ('hasil', models.BooleanField(blank=True, null=True, verbose_name='hasil')),
                ('aktual', models.CharField(blank=True, max_length=255, verbose_name='aktual')),
                ('standar', models.CharField(blank=True, max_length=255, verbose_name='standar')),
                ('keterangan', models.TextField(blank=True, verbose_name='keterangan')),
                ('transaksi', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='lembar_kerja.transaksi', verbose_name='lembar kerja')),
            ],
            options={
                'verbose_name': 'Item Checklist',
                'verbose_name_plural': 'Item Checklist',
                'ordering': ['urutan', 'id'],
            },
        ),
        migrations.CreateModel(
            name='PindahLokasi',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('dari_lokasi', models.CharField(max_length=100, verbose_name='dari lokasi')),
                ('ke_lokasi', models.CharField(max_length=100, verbose_name='ke lokasi')),
                ('keterangan', models.TextField(blank=True, verbose_name='keterangan')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='waktu')),
                ('dipindah_oleh', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL, verbose_name='dipindah oleh')),
                ('transaksi', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='riwayat_lokasi', to='lembar_kerja.transaksi', verbose_name='lembar kerja')),
                ('unit', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='riwayat_lokasi', to='gudang.detailbarangmasuknoseri', verbose_name='nomor seri')),
            ],
            options={
                'verbose_name': 'Riwayat Pindah Lokasi',
                'verbose_name_plural': 'Riwayat Pindah Lokasi',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
