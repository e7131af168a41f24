import pytest

import render_ads
from adrender.core import AdPipeline


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in ("ADRENDER_OUTPUT_ROOT", "ADRENDER_WIDTH", "ADRENDER_HEIGHT"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr("adrender.config.load_dotenv", lambda *args, **kwargs: False)


def test_parser_defaults():
    args = render_ads.build_parser().parse_args([])
    assert args.output_root is None
    assert args.only is None
    assert args.verbose is False


def test_parser_only_is_repeatable():
    args = render_ads.build_parser().parse_args(["--only", "ad-1", "--only", "ad-2"])
    assert args.only == ["ad-1", "ad-2"]


def test_parser_rejects_unknown_layout():
    with pytest.raises(SystemExit):
        render_ads.build_parser().parse_args(["--only", "ad-3"])


def test_default_run_writes_both_ads(monkeypatch, tmp_path, capsys):
    calls = []

    def fake_run(self, names=None):
        calls.append((self.output_root, self.size, list(names or [])))
        return [tmp_path / "a.png", tmp_path / "b.png"]

    monkeypatch.setattr(AdPipeline, "run", fake_run)
    assert render_ads.main([]) == 0

    output_root, size, names = calls[0]
    assert str(output_root) == "marketing/ads"
    assert (size.width, size.height) == (1600, 1200)
    assert names == []
    out = capsys.readouterr().out.splitlines()
    assert out == ["Wrote:", f"- {tmp_path / 'a.png'}", f"- {tmp_path / 'b.png'}"]


def test_render_single_layout(tmp_path, capsys):
    out_dir = tmp_path / "out"
    assert render_ads.main(["--output-root", str(out_dir), "--only", "ad-1"]) == 0
    target = (out_dir / "envguard-pro-ad-1.png").resolve()
    assert target.exists()
    assert f"- {target}" in capsys.readouterr().out


def test_write_failure_exits_non_zero(tmp_path, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    code = render_ads.main(["--output-root", str(blocker / "ads"), "--only", "ad-1"])
    assert code == 1
    assert "error:" in capsys.readouterr().err
