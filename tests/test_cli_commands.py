import json
import os

import yaml
from conftest import make_panoptic_dataset, make_synthetic_coco_dataset
from typer.testing import CliRunner

from cocomerge import __version__
from cocomerge.cli import app

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"cocomerge version: {__version__}" in result.output


def test_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "merge" in result.output
    assert "validate" in result.output


def test_merge_success(coco_writer, tmp_path):
    p1 = coco_writer("a/coco.json", make_synthetic_coco_dataset(1, 2, ["lion"]))
    p2 = coco_writer(
        "b/coco.json",
        make_synthetic_coco_dataset(2, 2, ["zebra"], image_offset=2, annotation_offset=2),
    )
    out = tmp_path / "out" / "merged.json"
    result = runner.invoke(
        app, ["merge", str(p1), str(p2), "-o", str(out), "-v", "4.0.0"]
    )
    assert result.exit_code == 0, result.output
    assert "Merge Results" in result.output

    merged = json.loads(out.read_text())
    assert [img["id"] for img in merged["images"]] == [1, 2, 3, 4]
    assert merged["info"]["version"] == "4.0.0"
    assert [c["name"] for c in merged["categories"]] == ["lion", "zebra"]
    assert merged["images"][2]["file_name"] == str(
        p2.parent / "images" / "image_2_0.jpg"
    )


def test_merge_drops_clashing_images_by_default(coco_writer, tmp_path):
    p1 = coco_writer("a.json", make_synthetic_coco_dataset(1, 2, ["lion"]))
    p2 = coco_writer("b.json", make_synthetic_coco_dataset(2, 2, ["lion"]))
    out = tmp_path / "merged.json"
    result = runner.invoke(app, ["merge", str(p1), str(p2), "-o", str(out)])
    assert result.exit_code == 0, result.output

    merged = json.loads(out.read_text())
    assert len(merged["images"]) == 2
    assert len(merged["annotations"]) == 2
    assert all("image_1_" in img["file_name"] for img in merged["images"])


def test_merge_reassign_clashing_ids(coco_writer, tmp_path):
    p1 = coco_writer("a.json", make_synthetic_coco_dataset(1, 2, ["lion"]))
    p2 = coco_writer("b.json", make_synthetic_coco_dataset(2, 2, ["lion"]))
    out = tmp_path / "merged.json"
    result = runner.invoke(app, ["merge", str(p1), str(p2), "-o", str(out), "-r"])
    assert result.exit_code == 0, result.output

    merged = json.loads(out.read_text())
    assert [img["id"] for img in merged["images"]] == [1, 2, 3, 4]
    assert [ann["image_id"] for ann in merged["annotations"]] == [1, 2, 3, 4]
    assert len(merged["categories"]) == 1


def test_merge_absolute_paths(coco_writer, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    coco_writer("data/coco.json", make_synthetic_coco_dataset(1, 1, ["lion"]))
    result = runner.invoke(
        app, ["merge", "data/coco.json", "-o", "merged.json", "--absolute-paths"]
    )
    assert result.exit_code == 0, result.output

    merged = json.loads((tmp_path / "merged.json").read_text())
    assert merged["images"][0]["file_name"] == os.path.join(
        os.getcwd(), "data", "images", "image_1_0.jpg"
    )


def test_merge_missing_category_fails_without_output(coco_writer, tmp_path):
    data = make_synthetic_coco_dataset(1, 1, ["lion"])
    data["annotations"][0]["category_id"] = 99
    path = coco_writer("bad.json", data)
    out = tmp_path / "merged.json"
    result = runner.invoke(app, ["merge", str(path), "-o", str(out)])
    assert result.exit_code == 1
    assert "Merge failed" in result.output
    assert "Category id 99" in result.output
    assert not out.exists()


def test_merge_load_error_fails_without_output(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{")
    out = tmp_path / "merged.json"
    result = runner.invoke(app, ["merge", str(path), "-o", str(out)])
    assert result.exit_code == 1
    assert "Merge failed" in result.output
    assert not out.exists()


def test_merge_with_config_file(coco_writer, tmp_path):
    p1 = coco_writer("a.json", make_synthetic_coco_dataset(1, 1, ["lion"]))
    p2 = coco_writer("b.json", make_panoptic_dataset(image_id=7, segment_ids=[1]))
    out = tmp_path / "from_config.json"
    config_path = tmp_path / "merge.yaml"
    config_path.write_text(
        yaml.dump(
            {
                "coco_files": [str(p1), str(p2)],
                "output_path": str(out),
                "version_string": "7.7",
            }
        )
    )
    result = runner.invoke(app, ["merge", "--config", str(config_path)])
    assert result.exit_code == 0, result.output

    merged = json.loads(out.read_text())
    assert merged["info"]["version"] == "7.7"
    segment = merged["annotations"][1]["segments_info"][0]
    assert segment["id"] == 2
    assert merged["categories"][1]["isthing"] == 1


def test_merge_config_and_files_are_exclusive(coco_writer, tmp_path):
    p1 = coco_writer("a.json", make_synthetic_coco_dataset(1, 1, ["lion"]))
    result = runner.invoke(
        app, ["merge", str(p1), "--config", str(tmp_path / "merge.yaml")]
    )
    assert result.exit_code == 1
    assert "[ERROR]" in result.output


def test_merge_requires_inputs():
    result = runner.invoke(app, ["merge"])
    assert result.exit_code == 1
    assert "Missing required arguments" in result.output


def test_merge_invalid_input_path(tmp_path):
    result = runner.invoke(app, ["merge", str(tmp_path / "missing.json")])
    assert result.exit_code == 1
    assert "Configuration validation error" in result.output


def test_merge_writes_log_file(coco_writer, tmp_path):
    p1 = coco_writer("a.json", make_synthetic_coco_dataset(1, 2, ["lion"]))
    p2 = coco_writer("b.json", make_synthetic_coco_dataset(2, 2, ["lion"]))
    log_file = tmp_path / "logs" / "merge.log"
    result = runner.invoke(
        app,
        [
            "merge",
            str(p1),
            str(p2),
            "-o",
            str(tmp_path / "merged.json"),
            "--log-file",
            str(log_file),
        ],
    )
    assert result.exit_code == 0, result.output
    text = log_file.read_text()
    assert "WARNING" in text
    assert "Ignoring this image" in text


def test_count(coco_writer):
    path = coco_writer("coco.json", make_synthetic_coco_dataset(1, 3, ["lion", "zebra"]))
    result = runner.invoke(app, ["count", str(path)])
    assert result.exit_code == 0, result.output
    assert "Images" in result.output
    assert "Object Detection Annotations" in result.output
    assert "6" in result.output


def test_count_missing_file(tmp_path):
    result = runner.invoke(app, ["count", str(tmp_path / "missing.json")])
    assert result.exit_code == 1
    assert "Could not load" in result.output


def test_validate_valid_file(coco_writer):
    path = coco_writer("coco.json", make_synthetic_coco_dataset(1, 2, ["lion"]))
    result = runner.invoke(app, ["validate", str(path)])
    assert result.exit_code == 0, result.output
    assert "valid" in result.output


def test_validate_invalid_file(coco_writer):
    data = make_synthetic_coco_dataset(1, 2, ["lion"])
    data["images"][1]["id"] = 1
    path = coco_writer("dup.json", data)
    result = runner.invoke(app, ["validate", str(path)])
    assert result.exit_code == 1
    assert "invalid" in result.output
    assert "Duplicate image ID" in result.output


def test_validate_merged_output(coco_writer, tmp_path):
    p1 = coco_writer("a.json", make_synthetic_coco_dataset(1, 2, ["lion"]))
    p2 = coco_writer("b.json", make_panoptic_dataset(image_id=2, segment_ids=[1, 2]))
    out = tmp_path / "merged.json"
    result = runner.invoke(app, ["merge", str(p1), str(p2), "-o", str(out), "-r"])
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, ["validate", str(out)])
    assert result.exit_code == 0, result.output
