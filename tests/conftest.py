"""Shared test fixtures."""
from pathlib import Path

import pytest

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@pytest.fixture
def sample_records():
    return [
        {"question": "Selamat pagi, saya ingin bertanya", "answer": "Selamat pagi! Ada yang bisa saya bantu?", "tags": ["greeting"]},
        {"question": "Berapa harga produk premium ini?", "answer": "Harganya tergantung fitur yang Anda pilih.", "tags": ["price_inquiry"]},
        {"question": "Apakah stok masih tersedia?", "answer": "Saya periksa stoknya dulu.", "tags": ["available"]},
        {"question": "Saya butuh bantuan dengan pesanan", "answer": "Tentu, saya siap membantu.", "tags": "help"},
        {"question": "Bagaimana cara melakukan pembayaran?", "answer": "Kami menerima transfer bank dan e-wallet.", "tags": ["payment"]},
        {"question": "Terima kasih, sampai jumpa!", "answer": "Terima kasih kembali!", "tags": ["goodbye"]},
    ]


@pytest.fixture
def dataset_path():
    return DATA_DIR / "dataset.json"


@pytest.fixture
def fast_training():
    from tanya.config import TrainingConfig

    return TrainingConfig(
        hidden_layers=(12, 8),
        max_iterations=60,
        early_stop_min_iterations=20,
        log_period=0,
        seed=7,
    )


@pytest.fixture
def engine_config(tmp_path, fast_training):
    from tanya.config import EngineConfig

    return EngineConfig(
        dataset_path=tmp_path / "dataset.json",
        model_path=tmp_path / "models" / "brain-model.json",
        training=fast_training,
    )


@pytest.fixture
def extractor():
    from tanya.config import EngineConfig
    from tanya.search.components.features import FeatureExtractor
    from tanya.search.strategy import COMPACT

    return FeatureExtractor(EngineConfig(), COMPACT)
