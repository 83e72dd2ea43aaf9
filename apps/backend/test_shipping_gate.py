"""
Tests for the no-placeholder shipping gate.
"""

import pytest

from slide_repair.services.shipping_gate import check_shipping_gate, find_placeholder


def make_slide(*components):
    return {'layoutPlan': {'components': list(components)}}


def blocked(result):
    return [(b.component_index, b.field, b.placeholder_found) for b in result.blocked_content]


def test_clean_slide_ships():
    slide = make_slide(
        {'type': 'text-bullets', 'title': 'Highlights', 'content': ['Revenue grew 20%']},
        {'type': 'chart-frame', 'data': [{'label': 'Q1', 'value': 10}]},
    )

    result = check_shipping_gate(slide)

    assert result.can_ship is True
    assert result.blocked_content == []


def test_placeholder_bullet_blocks():
    result = check_shipping_gate(make_slide({'type': 'text-bullets', 'content': ['Real line', 'TBD']}))

    assert result.can_ship is False
    assert blocked(result) == [(0, 'content[1]', 'TBD')]
    assert result.blocked_content[0].component_type == 'text-bullets'


def test_placeholder_metric_value_blocks():
    slide = make_slide({'type': 'metric-cards', 'metrics': [
        {'value': 'N/A', 'label': 'Revenue'},
        {'value': '40%', 'label': 'Margin'},
    ]})

    assert blocked(check_shipping_gate(slide)) == [(0, 'metrics[0].value', 'N/A')]


def test_component_title_is_checked():
    slide = make_slide({'type': 'icon-grid', 'title': 'Features Coming Soon', 'items': [{'label': 'Fast'}]})

    assert blocked(check_shipping_gate(slide)) == [(0, 'title', 'Coming Soon')]


def test_empty_chart_blocks():
    slide = make_slide(
        {'type': 'text-bullets', 'content': ['Fine']},
        {'type': 'chart-frame', 'data': []},
    )

    assert blocked(check_shipping_gate(slide)) == [(1, 'data', 'empty chart data')]


def test_chart_label_placeholder_blocks():
    slide = make_slide({'type': 'chart-frame', 'data': [{'label': 'No data available', 'value': 0}]})

    assert blocked(check_shipping_gate(slide)) == [(0, 'data[0].label', 'No data available')]


def test_slide_without_plan_ships():
    assert check_shipping_gate({}).can_ship is True


@pytest.mark.parametrize('text,found', [
    ('TBD', 'TBD'),
    ('  n/a ', 'n/a'),
    ('Numbers are tbd for now', 'tbd'),
    ('Lorem ipsum dolor', 'Lorem ipsum'),
    ('Insert chart here', 'Insert chart here'),
    ('Data Visualization', 'Data Visualization'),
    ('Placeholder', 'Placeholder'),
])
def test_find_placeholder_matches(text, found):
    assert find_placeholder(text) == found


@pytest.mark.parametrize('text', ['Nationwide growth', 'Placeholders were removed', 'Revenue up 12%', None, 42])
def test_find_placeholder_ignores_real_content(text):
    assert find_placeholder(text) == ''
