from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Peran pengguna untuk otorisasi."""

    ADMIN = "ADMIN"
    WALI_KELAS = "WALI_KELAS"
    ORANG_TUA = "ORANG_TUA"


class AttendanceStatus(str, Enum):
    """Status kehadiran harian; value is the short code stored in rows."""

    HADIR = "H"
    SAKIT = "S"
    IZIN = "I"
    ALPA = "A"
    NONE = "-"

    @classmethod
    def parse(cls, value: str) -> "AttendanceStatus":
        """Accept either the code (``H``) or the name (``HADIR``)."""

        v = str(value).strip()
        for member in cls:
            if v.upper() in (member.value, member.name):
                return member
        raise ValueError(f"Unknown attendance status: {value!r}")


class AlumniReason(str, Enum):
    """Alasan siswa keluar dari daftar aktif."""

    PINDAH = "Pindah"
    TAMAT = "Tamat"
    MENINGGAL = "Meninggal"
    DROPOUT = "Drop Out"

    @classmethod
    def parse(cls, value: str) -> "AlumniReason":
        v = str(value).strip()
        for member in cls:
            if v.lower() == member.value.lower() or v.upper() == member.name:
                return member
        raise ValueError(f"Unknown alumni reason: {value!r}")


class Gender(str, Enum):
    LAKI_LAKI = "L"
    PEREMPUAN = "P"
