import json
from io import BytesIO

from PIL import Image

from main import main
from settings import default_settings

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def test_render_for_a_fixed_date(tmp_path, capsys):
    settings_file = tmp_path / "settings.json"
    out = tmp_path / "o.png"

    code = main(["--settings", str(settings_file), "--write-settings",
                 "render", "var-3", "--date", "2024-02-09",
                 "--width", "300", "--height", "650", "--out", str(out)])

    assert code == 0
    data = out.read_bytes()
    assert data[:8] == PNG_MAGIC
    assert Image.open(BytesIO(data)).size == (300, 650)
    assert capsys.readouterr().out.strip() == f"{out}: day 40/366 (11%)"
    assert json.loads(settings_file.read_text(encoding="utf-8")) == default_settings()


def test_render_uses_settings_for_missing_size(tmp_path, capsys):
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps({"default_width": 200, "default_height": 420}),
                             encoding="utf-8")
    out = tmp_path / "days.png"

    assert main(["--settings", str(settings_file), "render", "days",
                 "--date", "2023-12-31", "--out", str(out)]) == 0
    assert Image.open(out).size == (200, 420)
    assert "day 365/365 (100%)" in capsys.readouterr().out


def test_variants_lists_every_path(tmp_path, capsys):
    assert main(["--settings", str(tmp_path / "missing.json"), "variants"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert [line.split()[0] for line in lines] == [
        "/api/days", "/api/days-canvas", "/api/var-3", "/api/var-4",
    ]
    assert lines[2].split()[1:] == ["months", "Australia/Sydney"]
    assert lines[0].split()[1:] == ["flat", "local"]
