from pathlib import Path

from streamlit.testing.v1 import AppTest

UI_PATH = Path(__file__).resolve().parents[1] / "harmonic_composer" / "app" / "ui.py"


def _run(**query):
    at = AppTest.from_file(str(UI_PATH), default_timeout=60)
    for key, value in query.items():
        at.query_params[key] = value
    return at.run()


def _shows_metrics(at) -> bool:
    return any("RMS" in m.value for m in at.markdown)


def _button(at, label):
    return next(b for b in at.button if b.label == label)


def test_negative_cycles_in_link_reset_with_warning():
    at = _run(nc="-3", a1="1")
    assert not at.exception
    assert len(at.error) == 0
    assert len(at.warning) == 1
    assert "Number of cycles" in at.warning[0].value
    assert at.session_state["cycles"] == 5.0
    assert _shows_metrics(at)
    assert at.query_params["nc"] == "5"


def test_negative_frequency_in_link_reset_with_warning():
    at = _run(f="-20", a1="1")
    assert not at.exception
    assert len(at.error) == 0
    assert len(at.warning) == 1
    assert "Fundamental frequency" in at.warning[0].value
    assert at.session_state["frequency"] == 50.0
    assert _shows_metrics(at)
    assert at.query_params["f"] == "50"


def test_unbounded_sample_count_is_an_error():
    at = _run(f="0.001", nc="1000", a1="1")
    assert not at.exception
    assert len(at.warning) == 0
    assert len(at.error) == 1
    assert not _shows_metrics(at)


def test_remove_disabled_until_second_harmonic():
    at = _run(a1="1")
    assert _button(at, "Remove harmonic").disabled
    _button(at, "Add harmonic").click()
    at.run()
    assert len(at.session_state["harmonics"]) == 2
    assert not _button(at, "Remove harmonic").disabled


def test_model_written_back_to_query():
    at = _run(a1="1", p2="45")
    assert not at.exception
    assert dict(at.query_params) == {"f": "50", "nc": "5", "a1": "1", "p2": "45"}
