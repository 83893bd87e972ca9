import logging
import os

import pytest

import main
import swf_builder
from bobba.extraction.extract_furniture import extract_furniture, find_bundles


def write_bundle(folder, base_name, *tags):
    path = folder / f"{base_name}.swf"
    path.write_bytes(swf_builder.swf(*tags))
    return path


@pytest.fixture
def bundle_folder(tmp_path):
    folder = tmp_path / "furniture"
    folder.mkdir()
    write_bundle(folder, "chair",
                 swf_builder.symbol_class((1, "chair_data")),
                 swf_builder.binary_data(1, b"<chair/>"))
    write_bundle(folder, "lamp",
                 swf_builder.symbol_class((1, "lamp_icon")),
                 swf_builder.lossless_bitmap(1, 1, 1, bytes([0xFF, 0x01, 0x02, 0x03])))
    (folder / "table.swf").write_bytes(b"FWS not a movie")
    return folder


def test_finds_bundles_sorted(tmp_path):
    for name in ["b.swf", "a.SWF", "##scratch.swf", "notes.txt"]:
        (tmp_path / name).write_bytes(b"")

    assert [os.path.basename(file) for file in find_bundles(str(tmp_path))] == ["a.SWF", "b.swf"]


@pytest.mark.parametrize("workers", [1, 2])
def test_extracts_every_bundle(bundle_folder, tmp_path, workers):
    output_folder = tmp_path / "extracted"

    outcomes = extract_furniture(str(bundle_folder), str(output_folder), workers)

    assert [outcome.base_name for outcome in outcomes] == ["chair", "lamp", "table"]
    assert [outcome.ok for outcome in outcomes] == [True, True, False]
    assert (output_folder / "chair" / "data.xml").read_bytes() == b"<chair/>"
    assert (output_folder / "lamp" / "icon.png").exists()
    assert not (output_folder / "table").exists()


def test_reports_outcomes(bundle_folder, tmp_path, caplog):
    with caplog.at_level(logging.INFO):
        extract_furniture(str(bundle_folder), str(tmp_path / "extracted"), 1)

    assert "OK; Bundle `chair`: 1 written, 0 skipped, 0 failed" in caplog.text
    assert "FAIL; Bundle `table` (read): MalformedContainer" in caplog.text
    assert "Extracted 3 bundles: 2 written, 0 skipped, 1 failed" in caplog.text


def test_empty_folder_extracts_nothing(tmp_path):
    assert extract_furniture(str(tmp_path), str(tmp_path / "out"), 1) == []


def test_cli_uses_data_path_layout(bundle_folder, tmp_path):
    exit_code = main.run(["--data-path", str(tmp_path), "--workers", "1"])

    assert exit_code == 1  # table.swf is broken
    assert (tmp_path / "extracted" / "chair" / "data.xml").exists()


def test_cli_with_clean_bundles(tmp_path):
    folder = tmp_path / "in"
    folder.mkdir()
    write_bundle(folder, "chair", swf_builder.symbol_class((1, "chair_data")), swf_builder.binary_data(1, b"x"))

    exit_code = main.run(["-bf", str(folder), "-of", str(tmp_path / "out"), "-w", "1"])

    assert exit_code == 0
    assert (tmp_path / "out" / "chair" / "data.xml").read_bytes() == b"x"


def test_cli_without_bundle_folder(tmp_path):
    assert main.run(["--data-path", str(tmp_path / "nothing"), "-w", "1"]) == 0


def test_cli_rejects_zero_workers():
    with pytest.raises(SystemExit):
        main.parse_args(["--workers", "0"])


def test_bundles_sharing_a_stem_are_extracted_once(tmp_path, caplog):
    write_bundle(tmp_path, "chair", swf_builder.symbol_class((1, "chair_a")), swf_builder.binary_data(1, b"<lower/>"))
    (tmp_path / "chair.SWF").write_bytes(
        swf_builder.swf(swf_builder.symbol_class((1, "chair_a")), swf_builder.binary_data(1, b"<upper/>")))

    with caplog.at_level(logging.WARNING):
        bundles = find_bundles(str(tmp_path))

    # On a case insensitive filesystem there is only one file to begin with
    assert len(bundles) == 1
    assert os.path.splitext(os.path.basename(bundles[0]))[0] == "chair"
    if len(os.listdir(tmp_path)) == 2:
        assert "Ignoring" in caplog.text

    outcomes = extract_furniture(str(tmp_path), str(tmp_path / "out"), 1)
    assert [outcome.counts() for outcome in outcomes] == [{"written": 1, "skipped": 0, "failed": 0}]
