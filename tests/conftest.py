import pytest

from shopstyle.models import Candidate


def _button_record(**overrides) -> dict:
    record = {
        "backgroundColor": "rgb(0, 0, 0)",
        "textColor": "rgb(255, 255, 255)",
        "borderStyle": "none",
        "borderWidth": "0px",
        "borderColor": "rgb(0, 0, 0)",
        "borderRadius": "4px",
        "textTransform": "uppercase",
        "fontFamily": "Assistant, sans-serif",
        "fontWeight": "600",
        "padding": "12px 24px",
        "boundingRect": {"width": 200, "height": 50},
        "textContent": "add to cart",
    }
    record.update(overrides)
    return record


@pytest.fixture
def button_record():
    """Factory for a button record shaped like the page-side scripts return it."""
    return _button_record


@pytest.fixture
def make_candidate():
    def _make(**overrides) -> Candidate:
        return Candidate.model_validate(_button_record(**overrides))

    return _make
