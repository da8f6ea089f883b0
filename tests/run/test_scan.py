"""Tests for the scan direction."""

from migro.io.mappings import MappingRow, read_mappings
from migro.run.scan import ScanConfig, iter_source_files, run_scan, scan_lines


def test_scan_lines(controller_lines, make_ctx):
    """Test template rows for the endpoints of a controller."""
    rows = scan_lines(controller_lines, "Orders/OrdersController.cs", make_ctx(), placeholder="TBD")
    assert rows == [
        MappingRow(filename="Orders/OrdersController.cs", controller="OrdersController", method="List", attribute="TBD"),
        MappingRow(filename="Orders/OrdersController.cs", controller="OrdersController", method="Get", attribute="[Authorize]"),
        MappingRow(
            filename="Orders/OrdersController.cs",
            controller="OrdersController",
            method="Bulk",
            attribute='[Authorize(Policy = "Legacy")]',
        ),
    ]


def test_scan_lines_falls_back_to_file_stem(make_ctx):
    """Test that the file stem names the controller when no class is found."""
    lines = ["[HttpGet]", "public IActionResult Ping()"]
    rows = scan_lines(lines, "Health.cs", make_ctx())
    assert [(r.controller, r.method, r.attribute) for r in rows] == [("Health", "Ping", "")]


def test_iter_source_files(tmp_path):
    """Test file discovery with include patterns and excluded directories."""
    (tmp_path / "A.cs").write_text("")
    (tmp_path / "notes.txt").write_text("")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "B.cs").write_text("")
    (tmp_path / "bin").mkdir()
    (tmp_path / "bin" / "C.cs").write_text("")
    found = [p.relative_to(tmp_path).as_posix() for p in iter_source_files(tmp_path, ["*.cs"], ["bin"])]
    assert found == ["A.cs", "sub/B.cs"]


def test_run_scan_writes_template_that_apply_can_read(tmp_path, controller_text, make_ctx):
    """Test that a scan template feeds back into read_mappings."""
    root = tmp_path / "Controllers"
    (root / "Orders").mkdir(parents=True)
    (root / "Orders" / "OrdersController.cs").write_text(controller_text, encoding="utf-8")
    output = tmp_path / "template.csv"

    ctx = make_ctx()
    assert run_scan(root, output, ctx, ScanConfig()) == 0
    assert ctx.stats.total_files == 1

    lines = output.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Filename,Controller,Method,Attribute"
    assert lines[1] == "Orders/OrdersController.cs,OrdersController,List,"
    assert len(lines) == 4
    # the row without an attribute is dropped on the way back in
    assert [row.method for row in read_mappings(output)] == ["Get", "Bulk"]


def test_run_scan_missing_root(tmp_path, make_ctx, caplog):
    """Test that a missing root aborts the scan."""
    assert run_scan(tmp_path / "nope", tmp_path / "t.csv", make_ctx(), ScanConfig()) == 1
    assert "does not exist" in caplog.text
    assert not (tmp_path / "t.csv").exists()
