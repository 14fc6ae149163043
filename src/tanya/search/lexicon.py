"""Static lookup tables for Indonesian customer-service text.

Every table is immutable and built once at import time. Keyword lists are
matched against normalized text (see ``components.normalizer``).
"""

from __future__ import annotations

from types import MappingProxyType


def _frozen(mapping: dict) -> MappingProxyType:
    return MappingProxyType({key: tuple(value) for key, value in mapping.items()})


ABBREVIATIONS = MappingProxyType({
    "yg": "yang", "dgn": "dengan", "utk": "untuk", "tdk": "tidak",
    "tsb": "tersebut", "krn": "karena", "spy": "supaya", "skrg": "sekarang",
    "blm": "belum", "sdh": "sudah", "bs": "bisa", "sy": "saya",
    "gk": "tidak", "ga": "tidak", "gak": "tidak", "ngga": "tidak", "nggak": "tidak",
    "klo": "kalau", "kalo": "kalau", "kl": "kalau", "tp": "tapi", "trs": "terus",
    "bgt": "banget", "bngt": "banget", "byk": "banyak", "jg": "juga",
    "sm": "sama", "dr": "dari", "pd": "pada", "spt": "seperti", "sprt": "seperti",
    "hrs": "harus", "hr": "hari", "bln": "bulan", "thn": "tahun",
    "sblm": "sebelum", "stlh": "setelah", "sll": "selalu", "slm": "salam",
    "trm": "terima", "ksh": "kasih", "trmksh": "terimakasih", "mksh": "makasih",
    "thx": "thanks", "tq": "thank you",
})


# Pattern name -> keywords. Order is the order tags are emitted in.
PATTERNS = _frozen({
    "what_question": ["apa", "apakah", "apa itu", "apa sih", "apa ya"],
    "how_question": ["bagaimana", "gimana", "cara", "caranya", "gmn", "bgmn", "bgaimana", "bagaimn"],
    "why_question": ["kenapa", "mengapa", "knp", "knapa", "ngapain", "alasan"],
    "when_question": ["kapan", "jam", "waktu", "tanggal", "hari", "kpn", "jadwal"],
    "where_question": ["dimana", "mana", "lokasi", "tempat", "dmn", "dmana"],
    "who_question": ["siapa", "sp", "nama"],
    "price_question": ["berapa", "harga", "biaya", "tarif", "brp", "brapa", "harganya", "biayanya"],
    "greeting": [
        "hai", "halo", "hallo", "hello", "hi", "hey", "selamat", "pagi", "siang",
        "sore", "malam", "assalamualaikum", "salam",
    ],
    "availability": [
        "ada", "tersedia", "ready", "stock", "stok", "masih", "bisa", "available",
        "sedia", "redi", "msh",
    ],
    "payment": [
        "bayar", "pembayaran", "transfer", "dana", "ovo", "gopay", "shopeepay", "bca",
        "mandiri", "bni", "bri", "qris", "virtual account", "va", "kartu kredit",
        "debit", "ewallet", "e-wallet", "payment",
    ],
    "help": ["bantuan", "bantu", "tolong", "help", "tlg", "tlng", "bantuin", "assistance", "support"],
    "goodbye": [
        "terima kasih", "makasih", "thanks", "thx", "tq", "bye", "selamat tinggal",
        "sampai jumpa", "dadah", "good bye", "terimakasih", "mksh",
    ],
    "service_inquiry": [
        "netflix", "spotify", "youtube", "disney", "canva", "vidio", "amazon", "hbo",
        "game pass", "chatgpt", "prime video", "viu", "wetv", "iqiyi", "mola tv",
        "catchplay", "apple music", "joox", "deezer", "tidal",
    ],
    "emerging_services": [
        "layanan baru", "fitur baru", "update", "terbaru", "coming soon", "segera hadir",
        "baru rilis", "baru keluar", "akan datang", "rilis", "launch",
    ],
    "refund_policy": [
        "refund", "pengembalian", "uang kembali", "batal", "cancel", "garansi",
        "kembalikan", "batalkan", "dibatalkan", "money back", "jaminan", "warranty",
    ],
    "technical_details": [
        "teknis", "spesifikasi", "requirement", "sistem", "device", "kompatibel",
        "spec", "spek", "compatible", "perangkat", "hp", "laptop", "pc", "android",
        "ios", "windows", "mac", "technical",
    ],
    "referral_loyalty": [
        "referral", "ajak teman", "bonus", "loyalty", "poin", "reward", "cashback",
        "diskon", "discount", "promo", "kode", "voucher", "kupon", "invite", "undang",
    ],
    "account": [
        "akun", "account", "daftar", "register", "login", "masuk", "password",
        "kata sandi", "email", "profil", "profile", "sign up", "sign in", "logout",
        "username",
    ],
    "problem": [
        "error", "masalah", "problem", "tidak bisa", "gagal", "bug", "crash", "loading",
        "lambat", "berat", "eror", "trouble", "issue", "kendala", "gangguan",
        "tidak jalan",
    ],
    "subscription": [
        "langganan", "subscription", "subscribe", "berlangganan", "paket", "plan",
        "premium", "basic", "standard", "family", "individual", "bulanan", "tahunan",
        "monthly", "yearly", "annual",
    ],
})

# Pattern tag -> extra tag added alongside it by the tag aggregator.
PATTERN_ALIASES = MappingProxyType({"price_question": "price_inquiry"})

QUESTION_FEATURES = _frozen({
    "is_apa": ["apa", "apakah"],
    "is_bagaimana": ["bagaimana", "gimana", "cara", "caranya", "bagaimanakah"],
    "is_kenapa": ["kenapa", "mengapa", "alasan", "alasannya", "penyebab"],
    "is_kapan": ["kapan", "jam", "waktu", "jadwal", "tanggal", "hari"],
    "is_dimana": ["dimana", "mana", "lokasi", "tempat", "alamat"],
    "is_siapa": ["siapa", "nama", "kontak", "pengguna", "user"],
    "is_berapa": ["berapa", "harga", "biaya", "tarif", "ongkos", "bayar", "total"],
})

INTENT_FEATURES = _frozen({
    "is_help": ["bantuan", "bantu", "tolong", "help", "assist", "panduan", "tutorial", "petunjuk"],
    "is_price": ["harga", "berapa", "biaya", "tarif", "price", "cost", "bayar", "rupiah", "idr", "rp"],
    "is_available": ["ada", "tersedia", "ready", "stock", "stok", "available", "ketersediaan", "sedia"],
    "is_payment": [
        "bayar", "pembayaran", "transfer", "dana", "ovo", "gopay", "pay", "payment",
        "transaksi", "kartu", "kredit", "debit", "virtual", "va", "qris",
    ],
    "is_greeting": [
        "hai", "halo", "hi", "hello", "selamat", "pagi", "siang", "sore", "malam",
        "assalamualaikum", "shalom",
    ],
    "is_goodbye": [
        "terima kasih", "makasih", "thanks", "bye", "goodbye", "sampai jumpa",
        "selamat tinggal", "thx",
    ],
})

SERVICE_FEATURES = _frozen({
    "is_refund": [
        "refund", "pengembalian", "uang kembali", "batal", "cancel", "garansi",
        "kembalikan", "retur", "return",
    ],
    "is_technical": [
        "teknis", "spesifikasi", "requirement", "sistem", "device", "kompatibel",
        "support", "error", "bug", "crash", "tidak bisa", "gagal", "masalah",
    ],
    "is_account": [
        "akun", "account", "profil", "profile", "login", "masuk", "daftar", "register",
        "password", "kata sandi", "username", "email", "verifikasi",
    ],
    "is_subscription": [
        "langganan", "subscription", "paket", "package", "plan", "premium", "basic",
        "upgrade", "downgrade", "perpanjang", "extend", "renew",
    ],
    "is_referral": [
        "referral", "ajak teman", "bonus", "loyalty", "poin", "reward", "cashback",
        "komisi", "affiliate", "afiliasi", "kode promo", "promo code", "diskon", "discount",
    ],
    "is_emerging": [
        "layanan baru", "fitur baru", "update", "terbaru", "coming soon", "segera hadir",
        "rilis", "release", "versi baru", "new version",
    ],
})

ENTITIES = (
    "netflix", "spotify", "youtube", "disney", "canva", "vidio", "amazon", "hbo",
    "game pass", "chatgpt", "loklok", "prime", "viu", "wetv",
)

TOPICS = _frozen({
    "streaming": ["netflix", "spotify", "youtube", "disney", "vidio", "film", "musik", "lagu", "nonton", "dengar"],
    "payment": ["bayar", "pembayaran", "harga", "biaya", "tarif", "dana", "ovo", "gopay", "transfer", "bank"],
    "account": ["akun", "daftar", "register", "login", "masuk", "password", "kata sandi", "email", "profil"],
    "technical": ["error", "masalah", "problem", "tidak bisa", "gagal", "bug", "crash", "loading", "lambat", "berat"],
    "support": ["bantuan", "help", "tolong", "customer service", "cs", "kontak", "hubungi", "tanya"],
    "product": ["produk", "paket", "langganan", "premium", "basic", "standard", "fitur", "layanan"],
})

# Subset compared for contextual similarity on large corpora.
FAST_TOPICS = ("streaming", "payment", "technical")
FAST_TOPIC_KEYWORDS = 5

IMPORTANT_KEYWORDS = frozenset({
    "harga", "berapa", "biaya", "tarif", "price", "ada", "tersedia", "ready",
    "stock", "available", "netflix", "spotify", "youtube", "disney", "canva",
    "vidio", "bayar", "pembayaran", "transfer", "dana", "ovo", "gopay", "bantuan",
    "bantu", "help", "tolong",
})

FAST_IMPORTANT_KEYWORDS = frozenset({
    "harga", "tersedia", "netflix", "spotify", "bayar", "bantuan", "akun",
    "password", "error", "masalah", "langganan", "premium",
})

# Intent name -> regex alternation; checked in order, first hit wins.
INTENT_RULES = (
    ("price_inquiry", r"\b(harga|berapa|biaya|tarif)\b"),
    ("available", r"\b(ada|tersedia|ready|stock|stok|masih)\b"),
    ("payment", r"\b(bayar|pembayaran|transfer|dana|ovo|gopay)\b"),
    ("refund_policy", r"\b(refund|pengembalian|garansi|batal|cancel)\b"),
    ("technical_details", r"\b(error|masalah|gagal|bug|crash|teknis)\b"),
    ("help", r"\b(bantuan|bantu|help|tolong)\b"),
    ("greeting", r"\b(hai|halo|selamat|pagi|siang|sore|malam)\b"),
    ("goodbye", r"(terima kasih|makasih|thanks|\bbye\b)"),
)

GENERAL_INTENT = "general"

RELATED_INTENTS = _frozen({
    "price_inquiry": ["payment", "available"],
    "payment": ["price_inquiry", "refund_policy"],
    "help": ["technical_details", "refund_policy"],
    "available": ["price_inquiry", "technical_details"],
    "refund_policy": ["payment", "help"],
    "technical_details": ["help", "available"],
    "referral_loyalty": ["price_inquiry", "emerging_services"],
    "emerging_services": ["referral_loyalty", "technical_details"],
})

# First token -> question-type tag.
QUESTION_TYPE_TAGS = MappingProxyType({
    "what": "question", "apa": "question", "apakah": "question",
    "how": "instruction", "bagaimana": "instruction", "gimana": "instruction",
    "why": "explanation", "kenapa": "explanation", "mengapa": "explanation",
    "when": "time", "kapan": "time",
    "where": "location", "dimana": "location",
    "who": "person", "siapa": "person",
})

INDONESIAN_MARKERS = frozenset({
    "yang", "dan", "dengan", "untuk", "tidak", "ini", "itu", "dari", "dalam",
    "akan", "pada", "juga", "saya", "ke", "bisa", "ada", "oleh", "sudah", "atau",
    "seperti", "saat", "harus", "mereka", "jika", "tersebut", "karena", "kita",
    "kami", "adalah", "tahun", "apa", "bagaimana", "kenapa", "kapan", "dimana",
    "siapa", "berapa", "nya", "lah", "kah", "pun", "kan", "sih", "deh", "kok",
    "dong", "ya",
})

ENGLISH_MARKERS = frozenset({
    "the", "is", "are", "am", "was", "were", "be", "been", "being", "have", "has",
    "had", "do", "does", "did", "will", "would", "shall", "should", "can", "could",
    "may", "might", "must", "i", "you", "he", "she", "it", "we", "they", "me",
    "him", "her", "us", "them", "my", "your", "his", "its", "our", "their",
    "this", "that", "these", "those", "what", "which", "who", "whom", "whose",
    "when", "where", "why", "how", "and", "but", "or", "if", "because", "with",
    "for", "to", "of", "in", "on", "at", "by", "from", "about",
})

POSITIVE_WORDS = frozenset({
    "bagus", "baik", "hebat", "keren", "mantap", "mantab", "mantul", "oke", "ok",
    "sip", "top", "senang", "gembira", "bahagia", "puas", "sukses", "berhasil",
    "wow", "kece", "cakep", "cantik", "ganteng", "indah", "menarik",
    "menyenangkan", "ramah", "sopan", "cepat", "mudah", "praktis", "efisien",
    "efektif", "berguna", "bermanfaat", "membantu", "suka", "cinta", "sayang",
    "setuju", "benar", "tepat", "akurat", "lengkap", "sempurna", "makasih",
    "thanks", "recommended", "rekomen", "rekomendasi", "lancar", "responsif",
    "informatif", "jelas", "murah", "terjangkau", "worth", "kepuasan",
    "satisfied", "memuaskan", "terpercaya", "amanah", "jujur", "profesional",
    "handal", "reliable", "berkualitas", "quality", "original", "asli",
    "success", "beruntung", "lucky", "hemat", "good", "great", "nice",
})

NEGATIVE_WORDS = frozenset({
    "buruk", "jelek", "rusak", "busuk", "hancur", "parah", "payah", "lemah",
    "lambat", "lelet", "mahal", "kemahalan", "boros", "rugi", "kecewa", "sedih",
    "marah", "kesal", "jengkel", "benci", "bete", "sebel", "sebal", "bosan",
    "bodoh", "gagal", "salah", "error", "eror", "cacat", "susah", "sulit",
    "rumit", "ribet", "repot", "komplain", "complaint", "keluhan", "protes",
    "palsu", "fake", "tipu", "penipuan", "scam", "penipu", "delay", "telat",
    "terlambat", "pending", "tertunda", "hilang", "percuma", "disappointed",
    "mengecewakan", "unsatisfied", "kasar", "jutek", "galak", "membingungkan",
    "ambigu", "unhelpful", "bad", "slow",
})

INTENSIFIERS = frozenset({
    "sangat", "amat", "sekali", "banget", "sungguh", "terlalu", "teramat",
    "super", "extra", "ekstra", "paling", "lebih",
})

NEGATORS = frozenset({"tidak", "tak", "bukan", "jangan", "belum", "kurang"})

POSITIVE_EXPRESSIONS = (
    "terima kasih", "thank you", "makasih banyak", "sangat bagus", "sangat baik",
    "sangat membantu", "sangat puas", "sangat senang", "worth it",
    "harga terjangkau", "pelayanan bagus", "pelayanan baik", "respon cepat",
    "fast response",
)

NEGATIVE_EXPRESSIONS = (
    "tidak bagus", "tidak baik", "tidak puas", "tidak senang", "tidak suka",
    "kurang bagus", "kurang baik", "kurang puas", "terlalu mahal", "terlalu lama",
    "terlalu lambat", "sangat kecewa", "sangat marah", "pelayanan buruk",
    "respon lambat", "slow response", "not worth it",
)

CONJUNCTIONS = r"\b(dan|atau|tetapi|namun|karena|sebab|jika|kalau|maka|sehingga|agar|supaya)\b"
SUBORDINATE_MARKERS = r"\b(yang|dimana|ketika|saat|selama|setelah|sebelum|sejak)\b"

# Keyboard neighbours used to synthesize substitution typos.
KEYBOARD_NEIGHBOURS = _frozen({
    "a": "sqz", "b": "vghn", "c": "xvd", "d": "sfer", "e": "wrd", "f": "dgrt",
    "g": "fhty", "h": "gjyu", "i": "uokj", "j": "hkui", "k": "jlio", "l": "kpo",
    "m": "njk", "n": "mbhj", "o": "iplk", "p": "ol", "q": "wa",
    "r": "etdf", "s": "adwe", "t": "ryfg", "u": "yihj", "v": "cbfg", "w": "qeas",
    "x": "zcsd", "y": "tugh", "z": "axs",
})

FALLBACK_TAGS = (
    "greeting", "price_inquiry", "available", "help", "payment", "goodbye", "unknown",
)
UNKNOWN_TAG = "unknown"
