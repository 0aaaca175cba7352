# backend/lembar_kerja/checklists.py
"""
Checklist bawaan tiap jenis lembar kerja dan cara item checklist
dibaca/ditulis sesuai model hasilnya.

Model hasil:
- HASIL  : centang ya/tidak pada kolom `hasil`
- PDI    : centang ya/tidak, dikirim sebagai kolom `pdi`
- UKUR   : pasangan teks `aktual` / `standar`
"""
from gudang.exceptions import ValidationError
from gudang.utils import teks

from .models import JenisPekerjaan

HASIL = 'hasil'
PDI = 'pdi'
UKUR = 'ukur'

MODEL_HASIL = {
    JenisPekerjaan.INSPEKSI_MESIN: HASIL,
    JenisPekerjaan.ASSEMBLY: HASIL,
    JenisPekerjaan.QC: UKUR,
    JenisPekerjaan.PDI: PDI,
    JenisPekerjaan.PAINTING: HASIL,
    JenisPekerjaan.PINDAH_LOKASI: UKUR,
}

INISIAL_FORM = {
    JenisPekerjaan.INSPEKSI_MESIN: 'IM',
    JenisPekerjaan.ASSEMBLY: 'AS',
    JenisPekerjaan.QC: 'QC',
    JenisPekerjaan.PDI: 'PD',
    JenisPekerjaan.PAINTING: 'PI',
    JenisPekerjaan.PINDAH_LOKASI: 'PL',
}

PARAMETER_PINDAH_LOKASI = 'Pindah Lokasi'

CHECKLIST_INSPEKSI = [
    'Peti Rusak',
    'Penutupan Unit Mesin Dengan Plastik bawaan',
    'Bentuk Pedal Sama atau berbeda',
    'Dimensi Kabinet (720 X 330 X 500)',
    'Cover kabinet 640X415',
    'Dimensi Piringan (580 X 580 X 15)',
    'Ukur Velg Posisi Dalam/Tutup 11.7"',
    'Cek Fisik Kuku, Penutup/penahan per mounting head, Plat Sliding Kuku',
    'Tiang (120 X 120 X 950), lengan 525x100x50',
    'Jarak Tiang -As Mounting (595)',
]

CHECKLIST_ASSEMBLY = [
    'Buka Packing Mesin',
    'Pemasangan kabel power (ke input listrik 220 V / 1 ph)',
    'Pemasangan Air Gun',
    'Pemasangan (input selang / sambung ke input angin kompressor)',
    'Seting tekanan angin ke 8 bar',
    'Pengecekan Selang Piston Piringan',
    'Buka Cover Kabinet untuk cek bagian dalam mesin',
    'Spec Dynamo (230V, 0.75KW, 8A, 50 Hz, 1400r/min)',
    'Cek Fisik Ring Matahari',
    'Pemasangan Ring Matahari dan pemberian cairan Loctite',
    'Cek Vanbelt Rusak, melintir atau tidak lurus antara pully besar dan pully kecil',
    'Cek Fisik Tiang (Diturunkan dari palet)',
    'Pemasangan Sticker 22" warna putih pada Tiang (5 cm dari atas)',
    'Pemasangan Sticker Powered pada Tiang (10 mm dari atas)',
    'Pemasangan Plat Nomor Seri (15Cm x 5cm) dan (ukuran sesuai mal)',
    'Pemasangan Per Tiang',
    'Ukuran Panjang Baut Tiang (M10X35=4pcs, Baut m10x30=1 Terpasang)',
    'Menyiapkan Kelengkapan Untuk Di Cek Qc',
    'Pelumasan As Bead Breaker',
    'Pelumasan Baut Tiang',
    'Pelumasan Grease Ke As Lock Tiang',
    'Pelumasan Grease Ke Mounting Head',
    'Pelumasan Pengait Piston Bead Breaker',
    'Pelumasan Permukaan Piringan',
    'Mengikat Tiang dengan Kabel Ties + Plastik Wrapping',
    'Pengikatan (gulung) Kabel Power',
    'Penutupan Unit Mesin Dengan Plastik bawaan /raping ringan',
    'Penutupan Peti',
    'Pemasangan Lembaran Label Type Mesin, Nomor Seri Dan Tanggal',
    'Pemasangan Lembaran Prosedur Buka Peti',
]

# (parameter, standar)
CHECKLIST_QC = [
    ('Pengecekan fungsi Regulator', ''),
    ('Cek tekanan angin dengan max 7-8 bar', 'Max 7-8 bar'),
    ('Pengecekan fungsi Air Gun', ''),
    ('2.1 Fungsi pengisian angin ( menggunakan ban mobil )', ''),
    ('Dengan cara tuas ditekan full, isi durasi waktu aktual hingga tekanan 40 Psi', '35 - 60 detik'),
    ('2.2 Fungsi pengurangan tekanan angin', ''),
    ('Dengan cara tuas ditekan setengah, isi durasi waktu aktual hingga tekanan 40-0 Psi', '105-120 detik'),
    ('Pengecekan fungsi pedal putaran piringan / cek dynamo, center kuku velg', ''),
    ('3.1 FUNGSI PEDAL', ''),
    ('Tekan Pedal 1/2 (Tidak full ditekan ke bawah) selama 30 detik, cek apakah kuku bergerak', 'tidak bergerak'),
    ('Jika tidak bergerak maka tidak ada kebocoran pada piston dan sebaliknya', ''),
    ('Ukur Max Velg 24.5" = 22"', '24.5"'),
    ('3.2 TES DYNAMO / tes putaran piringan (Tes dengan Alat Master Velg Tes, Alat Center Gauge dan Stop watch)', ''),
    ('Tekan pedal dan hitung waktu yg dibutuhkan untuk mencapai 6 putaran piringan', '40-70 Detik'),
    ('Cek Putaran Kekiri (Dengan Cara Pedal Tekan Ke Atas atau kebalikanya)', ''),
    ('3.3 Tes dan cek adapter penjepit velg, Center Kuku Velg dan Plastik Pelindung Kuku (menggunakan alat center gauge)', ''),
    ('ukur dan cek nilai sudut yang ditampilkan', '0.0-1.50 mm'),
    ('Jika ada nilai sudut melebihi dari standar maksimal center (> 1.50 mm), maka setting kuku penjepitnya', ''),
    ('ukur ulang dan cek nilai sudut yang ditampilkan', '0.0-1.50 mm'),
]

CHECKLIST_PDI = [
    'Cek Kelengekapan (Terlampir di partlist)',
    'Gompalan/Baret',
    'Berjamur',
    'Cek Fisik Plastik Cover lock as mounting head',
    'Pecah/Kusam (Indikator, pelindung kuku)',
    'Pelumasan As Bead Breaker',
    'Pelumasan Permukaan Piringan',
    'Pelumasan Baut Tiang',
    'Pelumasan Grease Ke As Lock Tiang',
    'Pelumasan Grease Ke Mounting Head',
    'Pelumasan Pengait Piston Bead Breaker',
    'Bungkus Mounting Head (Bubble Wrap + Plastik Wrapping)',
    'Pengikatan Tiang Ke Kuku Untuk Menjaga Posisi Dudukan Tiang',
    'Pembungkusan Unit Mesin Dengan Plastik Wrapping',
    'Penutupan Peti kardus',
    'Memastikan posisi peti kardus rapat',
    'Pemasangan Label alamat sesuai DO',
    'Pemasangan lembaran prosedur UNBOXING',
    'Pemasangan lembaran FRAGILE',
    'Pengikatan peti (menggunakan tali klam)',
    'Pasang lakban segel',
]

CHECKLIST_PAINTING = [
    'Persiapan Permukaan',
    'Masking',
    'Primer Coating',
    'Sanding Primer',
    'Pengecatan Utama',
    'Clear Coating',
    'Pemeriksaan Kualitas',
    'Pengeringan',
    'Touch-Up',
    'Pembersihan Akhir',
]


def _baris_centang(parameters, kolom):
    return [{'parameter': parameter, kolom: None, 'keterangan': ''} for parameter in parameters]


def _baris_ukur(pasangan):
    return [
        {'parameter': parameter, 'aktual': '', 'standar': standar, 'keterangan': ''}
        for parameter, standar in pasangan
    ]


# Pembuat checklist bawaan per jenis; menerima lokasi unit saat ini
CHECKLIST_BAWAAN = {
    JenisPekerjaan.INSPEKSI_MESIN: lambda lokasi_asal: _baris_centang(CHECKLIST_INSPEKSI, HASIL),
    JenisPekerjaan.ASSEMBLY: lambda lokasi_asal: _baris_centang(CHECKLIST_ASSEMBLY, HASIL),
    JenisPekerjaan.QC: lambda lokasi_asal: _baris_ukur(CHECKLIST_QC),
    JenisPekerjaan.PDI: lambda lokasi_asal: _baris_centang(CHECKLIST_PDI, PDI),
    JenisPekerjaan.PAINTING: lambda lokasi_asal: _baris_centang(CHECKLIST_PAINTING, HASIL),
    JenisPekerjaan.PINDAH_LOKASI: lambda lokasi_asal: _baris_ukur([(PARAMETER_PINDAH_LOKASI, lokasi_asal)]),
}


def default_items(jenis, lokasi_asal=''):
    """Checklist bawaan untuk lembar kerja yang belum pernah disimpan."""
    return CHECKLIST_BAWAAN[jenis](lokasi_asal)


def parse_jenis(value):
    try:
        return JenisPekerjaan(teks(value))
    except ValueError:
        raise ValidationError(f"Jenis pekerjaan tidak valid: {value}", title='Data Tidak Valid')


def nomor_form(jenis, no_seri, tahun):
    return f"{INISIAL_FORM[jenis]}/V1/{no_seri}/{tahun}"


def _as_bool(value):
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ('true', '1', 'ya', 'ok'):
        return True
    if text in ('false', '0', 'tidak'):
        return False
    raise ValidationError(f"Nilai hasil checklist tidak valid: {value}", title='Data Tidak Valid')


def parse_items(jenis, rows):
    """
    Ubah baris checklist kiriman caller menjadi field ChecklistItem.
    Baris dengan parameter kosong dibuang; minimal satu harus tersisa.
    """
    model = MODEL_HASIL[jenis]
    hasil = []
    for row in rows or []:
        if not isinstance(row, dict):
            continue
        parameter = teks(row.get('parameter'))
        if not parameter:
            continue
        item = {'parameter': parameter, 'keterangan': teks(row.get('keterangan'))}
        if model == UKUR:
            item['aktual'] = teks(row.get('aktual'))
            item['standar'] = teks(row.get('standar'))
        else:
            item['hasil'] = _as_bool(row.get(model))
        hasil.append(item)
    if not hasil:
        raise ValidationError('Minimal satu parameter checklist harus diisi', title='Data Tidak Lengkap')
    return hasil


def serialize_item(jenis, item):
    model = MODEL_HASIL[jenis]
    data = {'id': item.pk, 'parameter': item.parameter}
    if model == UKUR:
        data['aktual'] = item.aktual
        data['standar'] = item.standar
    else:
        data[model] = item.hasil
    data['keterangan'] = item.keterangan
    return data
