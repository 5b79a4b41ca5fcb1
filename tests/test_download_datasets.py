import json

from fraud_detection.scripts import download_datasets


def test_download_datasets_skips_existing_files(tmp_path, monkeypatch):
    downloaded = []

    def fake_download(url, save_path):
        downloaded.append(url)
        with open(save_path, "w") as f:
            f.write("Time,V1,Class\n")

    monkeypatch.setattr(download_datasets, "download_file", fake_download)
    (tmp_path / "existing.csv").write_text("", encoding="utf-8")
    config_path = tmp_path / "datasets_config.json"
    config_path.write_text(json.dumps([
        {"url": "https://example.org/creditcard.csv", "target_name": "creditcard.csv"},
        {"url": "https://example.org/existing.csv", "target_name": "existing.csv"},
    ]), encoding="utf-8")

    download_datasets.download_datasets(download_datasets.load_config(str(config_path)), str(tmp_path))

    assert downloaded == ["https://example.org/creditcard.csv"]
    assert (tmp_path / "creditcard.csv").exists()


def test_main_downloads_configured_datasets_into_resources(monkeypatch):
    calls = []
    monkeypatch.setattr(download_datasets, "download_datasets",
                        lambda datasets, dataset_dir: calls.append((datasets, dataset_dir)))

    download_datasets.main()

    datasets, dataset_dir = calls[0]
    assert dataset_dir == download_datasets.get_path("resources")
    assert datasets[0]["target_name"] == "creditcard.csv"
