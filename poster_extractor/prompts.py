# Prompts and output schema for competition poster extraction.
# The model is asked to answer in Indonesian, matching the poster audience.

from typing import Any, Dict

from .data_models import LABELS, CompetitionStatus, TeamType


EXTRACTION_TOOL_NAME = "record_poster_metadata"

EXTRACTION_PROMPT = """
Analisis gambar poster kompetisi ini secara detail. Ekstrak informasi berikut dalam format JSON.
Jika informasi tidak tersedia secara eksplisit, gunakan "Tidak Diketahui" atau inferensi yang masuk akal dari konteks (tapi tandai jika ragu).

Untuk 'registrationDeadlineIso' dan 'eventDateIso', cobalah konversi tanggal ke format YYYYMMDD (contoh: 20241231). Jika rentang tanggal, ambil tanggal mulai. Jika tidak ada tanggal, kosongkan string.

Untuk 'broadcastMessage', buatlah narasi broadcast/caption yang SANGAT MENARIK, LENGKAP, dan PENUH EMOJI untuk disebar di WhatsApp/Line/Instagram.
Struktur pesan broadcast:
- Judul yang heboh (pakai emoji 🔥🏆)
- Poin-poin benefit (pakai emoji ✅)
- Tanggal penting (pakai emoji 📅)
- Call to Action yang kuat (pakai emoji 🚀)
Pastikan pesannya rapi dan enak dibaca.

Untuk 'location', jika Status Lomba adalah 'Luring' atau 'Hybrid', sebutkan Kotanya. Jika 'Daring', tulis 'Daring'.

Simpan hasilnya dengan memanggil tool '{tool_name}'.
""".format(tool_name=EXTRACTION_TOOL_NAME)

BROADCAST_INSTRUCTIONS = """
Buat pesan broadcast yang LEBIH MENARIK, LEBIH PANJANG, dan gunakan BANYAK EMOJI (🔥, 📅, 📍, 🏆, ✨, 🚀).
Gunakan gaya bahasa copywriting yang mengajak orang untuk segera mendaftar.
"""

REQUIRED_FIELDS = ["competitionName", "category", "status", "broadcastMessage"]


def _string(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


def build_response_schema() -> Dict[str, Any]:
    """JSON schema for the full-poster extraction result."""
    return {
        "type": "object",
        "properties": {
            "competitionName": _string("Nama lengkap kompetisi"),
            "category": _string("Bidang atau kategori lomba (Misal: IT, Desain, Bisnis)"),
            "registrationDeadline": _string("Tanggal batas akhir pendaftaran (teks asli)"),
            "registrationDeadlineIso": _string("Tanggal batas akhir format YYYYMMDD untuk kalender"),
            "eventDate": _string("Tanggal pelaksanaan lomba (teks asli)"),
            "eventDateIso": _string("Tanggal pelaksanaan format YYYYMMDD untuk kalender"),
            "cost": _string("Biaya pendaftaran (GRATIS atau nominal)"),
            "teamType": {
                "type": "string",
                "enum": [t.value for t in TeamType],
                "description": "Jenis peserta lomba",
            },
            "status": {
                "type": "string",
                "enum": [s.value for s in CompetitionStatus],
                "description": "Daring, luring, atau hybrid",
            },
            "location": _string("Kota pelaksanaan atau 'Daring'"),
            "broadcastMessage": _string("Pesan broadcast yang menarik, panjang, dan penuh emoji"),
            "link": _string("Link pendaftaran, guidebook, atau social media"),
        },
        "required": list(REQUIRED_FIELDS),
    }


def build_reanalysis_prompt(field_key: str, current_value: str) -> str:
    """
    Create the prompt asking the model to re-derive a single field.

    Args:
        field_key: camelCase key of the field
        current_value: Value currently shown to the user

    Returns:
        Formatted prompt string
    """
    label = LABELS[field_key]
    special = ""
    if field_key == "broadcastMessage":
        special = f"\nKarena bagian ini adalah '{label}':{BROADCAST_INSTRUCTIONS}"

    return f"""
Fokus HANYA pada bagian '{label}' dari poster kompetisi ini.
Nilai saat ini yang terdeteksi adalah: "{current_value}".

Tolong analisis ulang gambar dengan sangat teliti untuk menemukan '{label}' yang benar.
{special}
Kembalikan HANYA teks hasil perbaikan tanpa format JSON atau markdown tambahan.
Jika nilai sudah benar atau tidak ditemukan info lain, kembalikan nilai yang sama.
"""
