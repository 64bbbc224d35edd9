import io
import json

from etf_pricer import main as main_module
from etf_pricer.catalog import DEFAULT_CATALOG


def test_run_once_json(make_provider):
    out = io.StringIO()
    assert main_module.run_once(as_json=True, out=out, provider=make_provider()) == 0

    records = json.loads(out.getvalue())
    assert len(records) == len(DEFAULT_CATALOG)
    by_etf = {r["etf"]: r for r in records}
    assert by_etf["XLK"]["topHoldings"] == ["AAPL", "MSFT", "NVDA"]
    # Holdings the fake provider does not know about fail and count as zero
    assert by_etf["XLV"]["optionPrice"] == 0.0
    assert by_etf["SPY"]["topHoldings"] == ["AAPL", "MSFT"]


def test_run_once_table(make_provider):
    out = io.StringIO()
    main_module.run_once(out=out, provider=make_provider())
    text = out.getvalue()
    assert "Technology" in text
    assert "XLRE" in text


def test_main_dispatches_to_serve(monkeypatch):
    calls = []
    monkeypatch.setattr(main_module, "serve", lambda: calls.append("serve") or 0)
    assert main_module.main([]) == 0
    assert calls == ["serve"]
