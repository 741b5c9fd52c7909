"""Tests for CLI entry point."""

import json
from pathlib import Path

import pytest

from slicemeta.cli import main

GCODE = """\
; estimated printing time (normal mode) = 1h 33m 15s
G28
; filament used [mm] = 14395.62
; filament used [g] = 42.94
; filament_type = PLA
; filament_colour = #FF8000
; layer_height = 0.2
; nozzle_diameter = 0.4
; printer_model = Original Prusa MK4
; fill_density = 15%
"""


def _write(tmp_path: Path, name: str, content: str | bytes) -> Path:
    path = tmp_path / name
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content)
    return path


def test_no_command(capsys):
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 1
    assert "usage" in capsys.readouterr().out.lower()


def test_show_summary(tmp_path, capsys):
    path = _write(tmp_path, "benchy.gcode", GCODE)
    main(["show", str(path)])
    out = capsys.readouterr().out
    assert "benchy.gcode:" in out
    assert "Print time: 1h 33m 15s" in out
    assert "PLA" in out
    assert "14395.62mm" in out
    assert "42.94g" in out
    assert "Total filament: 42.94g" in out
    assert "Printer: Original Prusa MK4" in out
    assert "Nozzle: 0.4mm" in out
    assert "Layer height: 0.2mm" in out
    assert "Infill: 15%" in out


def test_show_unknown_time(tmp_path, capsys):
    path = _write(tmp_path, "empty.gcode", "G28\n")
    main(["show", str(path)])
    assert "Print time: unknown" in capsys.readouterr().out


def test_show_estimated_weight_marked(tmp_path, capsys):
    path = _write(tmp_path, "cura.gcode", ";Filament used: 1m\n")
    main(["show", str(path)])
    assert "(estimated)" in capsys.readouterr().out


def test_show_json(tmp_path, capsys):
    path = _write(tmp_path, "benchy.gcode", GCODE)
    main(["show", "--json", str(path)])
    data = json.loads(capsys.readouterr().out)
    assert data["print_duration"] == "1h 33m 15s"
    assert data["filaments"][0]["color"] == "#FF8000"
    assert data["print_settings"]["infill"] == "15%"


def test_show_json_multiple_files(tmp_path, capsys):
    a = _write(tmp_path, "a.gcode", GCODE)
    b = _write(tmp_path, "b_45m.gcode", "G28\n")
    main(["show", "--json", str(a), str(b)])
    data = json.loads(capsys.readouterr().out)
    assert len(data) == 2
    assert data[1]["print_duration"] == "45m"


def test_show_name_overrides_fallback(tmp_path, capsys):
    path = _write(tmp_path, "upload.tmp", "G28\n")
    main(["show", "--json", "--name", "vase_2h30m.gcode", str(path)])
    data = json.loads(capsys.readouterr().out)
    assert data["print_duration"] == "2h30m"
    assert data["source_file_path"] == "vase_2h30m.gcode"


def test_show_3mf(tmp_path, capsys, make_3mf):
    path = _write(tmp_path, "job.gcode.3mf", make_3mf({"Metadata/plate_1.gcode": GCODE}))
    main(["show", str(path)])
    assert "Print time: 1h 33m 15s" in capsys.readouterr().out


def test_show_3mf_without_gcode(tmp_path, capsys, make_3mf):
    path = _write(tmp_path, "model.3mf", make_3mf({"3D/3dmodel.model": "<model/>"}))
    with pytest.raises(SystemExit) as exc:
        main(["show", str(path)])
    assert exc.value.code == 1
    assert "No .gcode file" in capsys.readouterr().err


def test_show_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["show", str(tmp_path / "nope.gcode")])
    assert exc.value.code == 1
    assert "file not found" in capsys.readouterr().err


def test_show_with_config(tmp_path, capsys):
    cfg = _write(tmp_path, "slicemeta.toml", '[filament]\ndefault_color = "gray"\n')
    path = _write(tmp_path, "a.gcode", "; filament used [g] = 3\n")
    main(["show", "--json", "--config", str(cfg), str(path)])
    data = json.loads(capsys.readouterr().out)
    assert data["filaments"][0]["color"] == "gray"


def test_name_with_multiple_files(tmp_path, capsys):
    a = _write(tmp_path, "a.gcode", "G28\n")
    b = _write(tmp_path, "b.gcode", "G28\n")
    with pytest.raises(SystemExit):
        main(["show", "--name", "x.gcode", str(a), str(b)])
    assert "--name" in capsys.readouterr().err


def test_invalid_config(tmp_path, capsys):
    cfg = _write(tmp_path, "slicemeta.toml", "[filament]\ndensity_g_cm3 = 0\n")
    path = _write(tmp_path, "a.gcode", "G28\n")
    with pytest.raises(SystemExit) as exc:
        main(["show", "--config", str(cfg), str(path)])
    assert exc.value.code == 1
    assert "density_g_cm3 must be > 0" in capsys.readouterr().err


def test_malformed_config(tmp_path, capsys):
    cfg = _write(tmp_path, "slicemeta.toml", "[filament\n")
    path = _write(tmp_path, "a.gcode", "G28\n")
    with pytest.raises(SystemExit) as exc:
        main(["show", "--config", str(cfg), str(path)])
    assert exc.value.code == 1
    assert "slicemeta.toml" in capsys.readouterr().err


def test_missing_config(tmp_path, capsys):
    path = _write(tmp_path, "a.gcode", "G28\n")
    with pytest.raises(SystemExit) as exc:
        main(["show", "--config", str(tmp_path / "nope.toml"), str(path)])
    assert exc.value.code == 1
    assert "Config file not found" in capsys.readouterr().err
