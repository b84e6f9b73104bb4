"""
Default lookup tables for the conversational search engine.

Every table is read-only. Engine components never mutate these; they
build their own working copy through ``merge_table`` with the caller's
overrides at construction time.
"""

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

# Canonical word → misspellings / slang variants. Order matters: the first
# canonical whose variant list contains a token wins.
PHONETIC_MAP = MappingProxyType({
    "bagaimana": ("bgmn", "gimana", "pripun", "how"),
    "dimana": ("dimn", "dmn", "where"),
    "kapan": ("kpn", "when"),
    "siapa": ("sp", "sopo", "who"),
    "apa": ("opo", "what"),
    "kenapa": ("knp", "mengapa", "napa", "why"),
    "harga": ("hargany", "hargax", "price"),
    "diskon": ("disk", "potongan", "discount"),
    "promo": ("promosi", "pro"),
    "gratis": ("free", "cuma-cuma"),
    "beli": ("order", "pesen"),
})

STOP_WORDS = (
    "dan", "atau", "tapi", "namun", "dengan", "untuk", "dari", "yang", "itu",
    "ini", "ke", "di", "ada", "adalah", "bagi", "pada", "saya", "anda", "kamu",
    "kami", "kita", "mereka", "sebuah", "sudah", "telah", "akan", "ingin",
    "mau", "bisa", "dapat", "boleh", "harus", "perlu", "juga", "saja", "pun",
    "lah", "kah", "nya",
)

ENGLISH_STOP_WORDS = (
    "a", "an", "the", "and", "or", "but", "is", "are", "was", "were",
    "be", "been", "being", "have", "has", "had", "do", "does", "did",
    "will", "shall", "should", "would", "can", "could", "of", "at",
    "by", "for", "with", "about", "against", "between", "into", "through",
    "during", "before", "after", "above", "below", "to", "from", "up",
    "down", "in", "out", "on", "off", "over", "under", "again", "further",
    "then", "once", "here", "there", "when", "where", "why", "how",
    "all", "any", "both", "each", "few", "more", "most", "other",
    "some", "such", "no", "nor", "not", "only", "own", "same", "so",
    "than", "too", "very", "just", "don", "now",
)

# Query token → synonyms appended during expansion
SEMANTIC_MAP = MappingProxyType({
    "beli": ("order", "pesan", "checkout", "booking", "ambil", "dapatkan"),
    "harga": ("biaya", "cost", "budget", "tarif", "nilai", "price"),
    "promo": ("diskon", "discount", "sale", "hemat", "off", "potongan"),
    "fitur": ("keunggulan", "kelebihan", "fasilitas", "spesifikasi", "detail"),
    "kontak": ("hubungi", "whatsapp", "wa", "email", "alamat", "telepon"),
    "murah": ("terjangkau", "ekonomis", "budget", "grosir"),
    "premium": ("eksklusif", "mewah", "lux", "vip"),
    "syarat": ("ketentuan", "kondisi", "requirement"),
})

SALES_TRIGGERS = MappingProxyType({
    "beli": (
        "beli", "pesan", "ambil", "order", "checkout", "booking", "buy",
        "purchase", "get", "mau",
    ),
    "harga": (
        "harga", "biaya", "price", "budget", "bayar", "cicilan", "dp", "murah",
        "cost", "payment", "cheap", "tarif", "berapa", "nominal",
    ),
    "promo": ("promo", "diskon", "discount", "sale", "hemat", "bonus", "voucher", "off"),
    "fitur": (
        "fitur", "fiturnya", "spesifikasi", "spek", "kelebihan", "keunggulan",
        "fasilitas", "detail", "benefit",
    ),
})

CHAT_TRIGGERS = MappingProxyType({
    "greeting": (
        "halo", "hi", "helo", "hey", "pagi", "siang", "sore", "malam",
        "assalamualaikum", "permisi", "hello",
    ),
    "thanks": ("terima kasih", "thanks", "tq", "syukron", "makasih", "oke", "sip", "mantap"),
})

CONTACT_TRIGGERS = (
    "kontak", "contact", "whatsapp", "wa", "email", "telepon", "phone", "call", "hubungi",
)

# Substrings that mark a short follow-up as referring to the previous subject
REFERENCE_TRIGGERS = (
    "harganya", "berapa", "fiturnya", "stoknya", "spesifikasinya", "warnanya",
    "garansinya", "diskonnya", "promonya", "tersebut", "yang tadi", "itu",
)

# Keyword entities; an entity is present when any of its keywords is a token
ENTITY_DEFINITIONS = MappingProxyType({})

CONJUNCTIONS = (r"trus", r"lalu", r"kemudian", r"dan", r"and", r"then")

FEATURE_PATTERNS = (
    r"(?:fitur|feature|keunggulan|kelebihan)[:\s]*([^.]+)",
    r"(?:•|▪|★|✓|✔|-)([^•▪★✓✔\-\n]+)",
)

ATTRIBUTE_EXTRACTORS = MappingProxyType({
    "harga": r"(?:harga|price|biaya)[:\s]*(?:rp\.?|idr)?\s*([\d.,]+)",
    "kapasitas": r"(?:kapasitas|capacity)[:\s]*([\d.,]+\s*(?:gb|mb|tb|liter|kg|gram|ml|l|g))",
    "kecepatan": r"(?:kecepatan|speed)[:\s]*([\d.,]+\s*(?:mbps|gbps|rpm|mhz|ghz))",
    "garansi": r"(?:garansi|warranty)[:\s]*([\d]+\s*(?:tahun|bulan|year|month|hari|day)s?)",
    "rating": r"(?:rating|bintang|star)[:\s]*([\d.,]+)",
    "material": r"(?:bahan|material)[:\s]*([a-zA-Z\s]+?)(?:\.|,|$)",
    "warna": r"(?:warna|color|colour)[:\s]*([a-zA-Z\s]+?)(?:\.|,|$)",
    "ukuran": r"(?:ukuran|size|dimensi|dimension)[:\s]*([\d.,x\s]+(?:cm|mm|m|inch)?)",
})

# Attribute keys used for schema pass-through
SCHEMA = MappingProxyType({
    "PRICE": "harga",
    "PRICE_PROMO": "harga_promo",
    "BADGE": "badge",
    "RECOMMENDED": "direkomendasikan",
    "FEATURES": "fitur",
    "RATING": "rating",
    "WARRANTY": "garansi",
})

LABEL_MAP = MappingProxyType({
    "harga": "Harga",
    "harga_promo": "Harga Promo",
    "kapasitas": "Kapasitas",
    "kecepatan": "Kecepatan",
    "garansi": "Garansi",
    "rating": "Rating",
    "material": "Material",
    "warna": "Warna",
    "ukuran": "Ukuran",
    "fitur": "Fitur",
    "badge": "Badge",
    "direkomendasikan": "Rekomendasi",
})

ANSWER_TEMPLATES = MappingProxyType({
    "price": "Harga {title} adalah {price}",
    "features": "Fitur {title} meliputi: {features}",
    "no_results": "Maaf, saya tidak menemukan informasi tersebut.",
    "recommended": "Produk ini sangat direkomendasikan!",
    "blocked": "Maaf, input Anda terdeteksi tidak aman.",
})

FALLBACK_RESPONSES = MappingProxyType({
    "chat_greeting": (
        "Halo! Ada yang bisa saya bantu hari ini? "
        "Anda bisa tanya tentang produk, harga, atau promo kami."
    ),
    "chat_thanks": "Sama-sama! Senang bisa membantu. Ada lagi yang ingin ditanyakan?",
    "chat_contact": (
        "Anda bisa menghubungi kami melalui WhatsApp atau Email. "
        "Ingin saya hubungkan sekarang?"
    ),
})

COMPARISON_TRIGGERS = ("bandingkan", "vs", "lawan", "bedanya", "lebih bagus mana")

COMPARISON_LABELS = MappingProxyType({
    "title": "Product",
    "price": "Price",
    "recommendation": "Recommendation",
    "best_choice": "Best Choice",
    "reasons": "Reasons",
    "no_products": "No products found to compare.",
    "discount": "Diskon {discount}% dari harga normal",
    "cheapest": "Harga paling terjangkau",
})

# Training phrases for the statistical classifier, keyed by intent label
INTENT_TRAINING = MappingProxyType({
    "sales_harga": ("berapa harganya", "price list", "murah gak", "harganya berapa", "cek harga"),
    "sales_beli": ("cara beli", "mau order", "pesan sekarang", "checkout", "beli dong"),
    "sales_promo": ("ada diskon", "kode promo", "voucher", "potongan harga"),
    "support_complaint": ("barang rusak", "kecewa", "komplain", "belum sampai", "lama banget"),
    "support_help": ("bantuan", "customer service", "admin", "tanya dong"),
    "chat_greeting": ("halo", "hi", "selamat pagi", "siang", "malam"),
})

# Weighted lexicons for the sentiment analyzer
POSITIVE_WORDS = MappingProxyType({
    "luar biasa": 3, "sangat bagus": 3, "mantap": 3, "keren": 3, "wow": 3,
    "sempurna": 3, "hebat": 3, "amazing": 3, "excellent": 3, "love": 3,
    "puas banget": 3, "super": 3, "top": 3, "best": 3, "terbaik": 3,
    "bagus": 2, "baik": 2, "senang": 2, "suka": 2, "oke": 2, "ok": 2,
    "puas": 2, "recommended": 2, "rekomen": 2, "worth": 2, "nice": 2,
    "good": 2, "great": 2, "happy": 2, "terima kasih": 2, "makasih": 2,
    "thanks": 2, "bersyukur": 2, "alhamdulillah": 2, "syukur": 2,
    "membantu": 2, "helpful": 2, "ramah": 2, "cepat": 2, "murah": 2,
    "boleh": 1, "lumayan": 1, "cukup": 1, "standar": 1, "fair": 1,
    "sip": 1, "siap": 1, "yes": 1, "setuju": 1, "menarik": 1,
    "enak": 1, "nyaman": 1, "aman": 1, "lancar": 1,
})

NEGATIVE_WORDS = MappingProxyType({
    "kecewa berat": 3, "sangat kecewa": 3, "parah": 3, "sampah": 3,
    "terrible": 3, "awful": 3, "worst": 3, "terburuk": 3, "bohong": 3,
    "nipu": 3, "penipu": 3, "scam": 3, "fraud": 3, "bangkrut": 3,
    "rugi besar": 3, "no response": 3, "tidak merespon": 3,
    "kecewa": 2, "marah": 2, "kesal": 2, "buruk": 2, "jelek": 2,
    "lambat": 2, "lama": 2, "gagal": 2, "rusak": 2, "error": 2,
    "tidak bisa": 2, "gabisa": 2, "gak bisa": 2, "susah": 2, "sulit": 2,
    "ribet": 2, "repot": 2, "mahal": 2, "overpriced": 2, "kemahalan": 2,
    "komplain": 2, "complaint": 2, "bad": 2, "poor": 2, "masalah": 2,
    "problem": 2, "issue": 2, "keluhan": 2, "protes": 2, "benci": 2,
    "kurang": 1, "tidak puas": 1, "biasa": 1, "so-so": 1, "meh": 1,
    "belum": 1, "tunggu": 1, "waiting": 1, "pending": 1, "delay": 1,
    "bingung": 1, "confused": 1, "tidak jelas": 1, "unclear": 1,
})

INTENSIFIERS = MappingProxyType({
    "sangat": 1.5, "banget": 1.5, "sekali": 1.5, "bgt": 1.5, "bngt": 1.5,
    "amat": 1.5, "super": 1.5, "really": 1.5, "very": 1.5, "totally": 1.5,
    "parah": 1.3, "gila": 1.3, "pol": 1.3, "ekstrim": 1.3,
    "agak": 0.7, "sedikit": 0.7, "dikit": 0.7, "lumayan": 0.8,
})

NEGATORS = (
    "tidak", "bukan", "tak", "gak", "ga", "nggak", "kagak", "belum",
    "jangan", "tanpa", "no", "not", "never", "none",
)

URGENCY_WORDS = (
    "urgent", "darurat", "segera", "asap", "sekarang", "cepat", "buru-buru",
    "deadline", "penting", "emergency", "tolong", "help", "bantuan", "sos",
)


def merge_table(
    defaults: Mapping[str, Any],
    overrides: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Shallow-merge a default table with caller overrides.

    Keys present in ``overrides`` replace the default entry entirely;
    sequence values come back as lists so callers own their copy.
    """
    merged: Dict[str, Any] = {}
    for source in (defaults, overrides or {}):
        for key, value in source.items():
            merged[key] = list(value) if isinstance(value, (list, tuple)) else value
    return merged
